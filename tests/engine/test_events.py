"""Tests for the event emitter and round phases."""

from blackjack_engine.game import EventType, GameEvent, RoundEngine, RoundPhase
from blackjack_engine.game.events import EventEmitter
from blackjack_engine.game.state import LIVE_PHASES, VALID_TRANSITIONS, is_valid_transition


class TestEventEmitter:
    """Tests for EventEmitter."""

    def test_subscribe_to_type(self):
        emitter = EventEmitter()
        received = []
        emitter.subscribe(received.append, EventType.CARD_DEALT)

        emitter.emit_new(EventType.CARD_DEALT, card="AS")
        emitter.emit_new(EventType.PLAYER_HIT)

        assert [e.event_type for e in received] == [EventType.CARD_DEALT]
        assert received[0].data == {"card": "AS"}

    def test_catch_all_handler(self):
        emitter = EventEmitter()
        received = []
        emitter.subscribe(received.append)
        emitter.emit(GameEvent(EventType.ROUND_STARTED))
        emitter.emit(GameEvent(EventType.ROUND_ENDED))
        assert len(received) == 2

    def test_unsubscribe(self):
        emitter = EventEmitter()
        received = []
        emitter.subscribe(received.append)
        emitter.unsubscribe(received.append)
        emitter.unsubscribe(print, EventType.CARD_DEALT)
        emitter.emit_new(EventType.ROUND_STARTED)
        assert received == []

    def test_commit_publishes_in_order(self):
        emitter = EventEmitter()
        received = []
        emitter.subscribe(received.append)

        emitter.begin()
        assert emitter.in_transaction
        emitter.emit_new(EventType.BET_PLACED)
        emitter.emit_new(EventType.CARD_DEALT)
        assert received == []

        emitter.commit()
        assert not emitter.in_transaction
        assert [e.event_type for e in received] == [EventType.BET_PLACED, EventType.CARD_DEALT]

    def test_rollback_discards(self):
        emitter = EventEmitter()
        received = []
        emitter.subscribe(received.append)

        emitter.begin()
        emitter.emit_new(EventType.BET_PLACED)
        emitter.rollback()

        assert received == []
        assert emitter.history == []

    def test_history(self):
        emitter = EventEmitter()
        emitter.emit_new(EventType.ROUND_STARTED)
        assert len(emitter.history) == 1
        emitter.clear_history()
        assert emitter.history == []

    def test_event_str(self):
        event = GameEvent(EventType.PLAYER_HIT, {"hand_value": 15})
        assert "PLAYER_HIT" in str(event)


class TestRoundPhase:
    def test_happy_path_transitions(self):
        flow = list(RoundPhase)
        for current, following in zip(flow, flow[1:]):
            assert is_valid_transition(current, following)
        assert is_valid_transition(RoundPhase.COMPLETED, RoundPhase.BETTING)

    def test_void_goes_to_cleanup(self):
        for phase in LIVE_PHASES:
            assert is_valid_transition(phase, RoundPhase.CLEANUP)
        assert not is_valid_transition(RoundPhase.BETTING, RoundPhase.CLEANUP)

    def test_no_skipping_phases(self):
        assert not is_valid_transition(RoundPhase.BETTING, RoundPhase.PLAYER_TURN)
        assert not is_valid_transition(RoundPhase.PLAYER_TURN, RoundPhase.SETTLEMENT)

    def test_machine_matches_phase_table(self):
        """Every engine transition is allowed by the phase table, and vice versa."""
        machine_edges = set()
        for transition in RoundEngine.TRANSITIONS:
            sources = transition["source"]
            if isinstance(sources, str):
                sources = [sources]
            for source in sources:
                machine_edges.add((source, transition["dest"]))

        table_edges = {
            (source.machine_state, dest.machine_state)
            for source, dests in VALID_TRANSITIONS.items()
            for dest in dests
        }
        assert machine_edges == table_edges

    def test_str(self):
        assert str(RoundPhase.PLAYER_TURN) == "Player Turn"
