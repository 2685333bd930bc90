"""Tests for the in-match state machine."""

import logging

import pytest

from hearthbot.action_queue import ActionQueue
from hearthbot.match_flow import MatchFlowController, current_phase, match_result
from hearthbot.modes import MatchPhase, MatchResult, MulliganState, Side
from hearthbot.scheduler import DelayScheduler


@pytest.fixture
def scheduler(clock):
    return DelayScheduler(clock)


@pytest.fixture
def notes():
    return []


@pytest.fixture
def flow(host, scheduler, engine, notes):
    return MatchFlowController(
        host,
        scheduler,
        ActionQueue(),
        engine,
        mulligan_ms=2000,
        turn_settle_ms=5000,
        match_over_ms=10000,
        end_turn_ms=10000,
        notify=lambda label, text: notes.append((label, text)),
    )


class TestPhaseDerivation:

    def test_precedence(self, host):
        assert current_phase(host) is MatchPhase.OPPONENT_TURN
        host.local_turn = True
        assert current_phase(host) is MatchPhase.ACTIVE_TURN
        host.game_over = True
        assert current_phase(host) is MatchPhase.MATCH_OVER
        host.mulligan_phase = True
        assert current_phase(host) is MatchPhase.MULLIGAN

    @pytest.mark.parametrize("opponent,local,expected", [
        (0, 15, MatchResult.VICTORY),
        (-3, 0, MatchResult.VICTORY),
        (12, 0, MatchResult.DEFEAT),
        (5, 5, MatchResult.DRAW),
    ])
    def test_match_result(self, host, opponent, local, expected):
        host.life = {Side.OPPONENT: opponent, Side.LOCAL: local}
        assert match_result(host) is expected


class TestMulligan:

    def test_waits_until_manager_ready(self, host, flow, engine):
        host.mulligan_phase = True
        flow.update()
        assert engine.mulligan_calls == []
        assert flow.mulligan_state is MulliganState.BEGIN

    def test_logs_while_manager_not_ready(self, host, flow, caplog):
        host.mulligan_phase = True
        with caplog.at_level(logging.DEBUG, logger="hearthbot.match_flow"):
            flow.update()
        assert "Mulligan manager not ready" in caplog.text

    def test_begin_toggles_cards_and_advances(self, host, scheduler, flow, engine):
        host.mulligan_phase = True
        host.mulligan_ready = True
        engine.mulligan = ["Fireball"]

        flow.update()

        assert engine.mulligan_calls == [host.cards]
        assert host.called("toggle_mulligan_card") == [("toggle_mulligan_card", "Fireball")]
        assert flow.mulligan_state is MulliganState.DO_END
        assert scheduler.duration_ms == 2000

    def test_full_progression_never_revisits(self, host, flow, engine):
        """begin -> do_end -> done, and done stays done during the mulligan."""
        host.mulligan_phase = True
        host.mulligan_ready = True

        states = []
        for _ in range(5):
            flow.update()
            states.append(flow.mulligan_state)

        assert states == [
            MulliganState.DO_END,
            MulliganState.DONE,
            MulliganState.DONE,
            MulliganState.DONE,
            MulliganState.DONE,
        ]
        assert len(host.called("confirm_mulligan")) == 1
        assert len(engine.mulligan_calls) == 1

    def test_reset_on_leaving_mulligan(self, host, flow):
        host.mulligan_phase = True
        host.mulligan_ready = True
        flow.update()
        flow.update()
        assert flow.mulligan_state is MulliganState.DONE

        host.mulligan_phase = False
        flow.update()
        assert flow.mulligan_state is MulliganState.BEGIN


class TestMatchOver:

    def test_victory_reported(self, host, scheduler, flow, notes):
        host.game_over = True
        host.life = {Side.OPPONENT: 0, Side.LOCAL: 15}
        host.end_screen = True

        flow.update()

        assert notes == [("RESULT", "Victory!")]
        assert flow.results[MatchResult.VICTORY] == 1
        assert host.called("dismiss_end_of_match_screen")
        assert host.called("find_match") == []
        assert scheduler.duration_ms >= 9000

    def test_draw_is_distinct(self, host, flow, notes):
        host.game_over = True
        flow.update()
        assert notes == [("RESULT", "Draw..?")]
        assert flow.results[MatchResult.DRAW] == 1
        assert flow.results[MatchResult.VICTORY] == 0
        assert flow.results[MatchResult.DEFEAT] == 0

    def test_result_counted_once_per_match(self, host, flow, notes):
        host.game_over = True
        host.life = {Side.OPPONENT: 20, Side.LOCAL: 0}
        host.end_screen = True
        flow.update()
        flow.update()

        assert notes == [("RESULT", "Defeat...")]
        assert flow.results[MatchResult.DEFEAT] == 1
        # The end screen is still clicked through every time
        assert len(host.called("dismiss_end_of_match_screen")) == 2

    def test_no_end_screen_no_dismiss(self, host, flow):
        host.game_over = True
        flow.update()
        assert host.called("dismiss_end_of_match_screen") == []


class TestTurns:

    def test_first_active_tick_only_settles(self, host, scheduler, flow, engine):
        """Turn-start edge after the opponent's turn: settle, no decision."""
        flow.update()  # opponent turn
        host.local_turn = True

        flow.update()

        assert engine.turn_calls == []
        assert flow.was_my_turn is True
        assert scheduler.duration_ms == 5000

    def test_second_active_tick_runs_executor(self, host, flow, engine):
        host.local_turn = True
        engine.turns = [["play Wisp"]]
        flow.update()
        flow.update()
        assert len(engine.turn_calls) == 1
        flow.update()
        assert engine.applied == ["play Wisp"]

    def test_empty_decision_ends_turn_once(self, host, scheduler, flow):
        host.local_turn = True
        host.cards = []
        flow.update()
        flow.update()

        assert len(host.called("end_turn")) == 1
        assert scheduler.duration_ms == 10000

    def test_opponent_turn_clears_edge(self, host, flow, engine):
        host.local_turn = True
        flow.update()
        host.local_turn = False
        flow.update()
        assert flow.was_my_turn is False

        host.local_turn = True
        flow.update()
        assert engine.turn_calls == []

    def test_engine_swap_reaches_executor(self, host, flow, make_engine):
        replacement = make_engine(turns=[["new action"]])
        flow.engine = replacement
        host.local_turn = True
        flow.update()
        flow.update()
        assert len(replacement.turn_calls) == 1

    def test_turn_start_drops_stale_actions(self, host, flow, engine):
        flow.executor._queue.push_all(["stale"])
        host.local_turn = True
        flow.update()
        assert len(flow.executor._queue) == 0
        flow.update()
        assert engine.applied == []
        assert len(engine.turn_calls) == 1

    def test_match_over_drops_unfinished_turn(self, host, flow, engine):
        engine.turns = [["attack", "ping"]]
        host.local_turn = True
        flow.update()
        flow.update()
        flow.update()
        assert engine.applied == ["attack"]

        host.game_over = True
        flow.update()

        assert flow.was_my_turn is False
        assert len(flow.executor._queue) == 0

    def test_next_match_first_turn_settles_without_leftovers(self, host, scheduler, clock, flow, engine):
        """Match ends mid-turn, a new match mulligans, then our first turn starts."""
        engine.turns = [["attack", "ping", "buff"]]
        host.local_turn = True
        flow.update()  # settle
        flow.update()  # decide
        flow.update()  # attack
        assert engine.applied == ["attack"]

        host.game_over = True
        flow.update()
        host.game_over = False
        host.mulligan_phase = True
        flow.update()
        host.mulligan_phase = False
        clock.advance_ms(60_000)

        flow.update()

        assert engine.applied == ["attack"]
        assert len(engine.turn_calls) == 1
        assert len(flow.executor._queue) == 0
        assert flow.was_my_turn is True
        assert scheduler.duration_ms == 5000
        assert not scheduler.ready()
