"""Shared test doubles: a recording host, a scripted engine, a manual clock."""

import random
from contextlib import contextmanager

import pytest

from hearthbot.host import ScenarioRecord
from hearthbot.modes import AdventureId, AdventureModeId, ScreenMode, Side


class FakeClock:
    """Manually advanced time source in milliseconds."""

    def __init__(self, start: int = 1_000_000):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms


PRACTICE_RECORDS = [
    ScenarioRecord(id=3, adventure_id=AdventureId.PRACTICE, mode_id=AdventureModeId.NORMAL),
    ScenarioRecord(id=4, adventure_id=AdventureId.PRACTICE, mode_id=AdventureModeId.NORMAL),
    ScenarioRecord(id=33, adventure_id=AdventureId.PRACTICE, mode_id=AdventureModeId.EXPERT),
    ScenarioRecord(id=34, adventure_id=AdventureId.PRACTICE, mode_id=AdventureModeId.EXPERT),
    # Not practice: must never be picked
    ScenarioRecord(id=90, adventure_id=5, mode_id=AdventureModeId.NORMAL),
]


class FakeHost:
    """HostBridge double that records every action call.

    Query results are plain attributes so tests can script host state.
    """

    def __init__(self):
        self.screen = ScreenMode.STARTUP
        self.welcome_quests = False
        self.in_match = False
        self.matchmaking = False
        self.deck_id = 12345
        self.ranked_option = True
        self.records = list(PRACTICE_RECORDS)
        self.mulligan_phase = False
        self.game_over = False
        self.local_turn = False
        self.mulligan_ready = False
        self.cards = ["Wisp", "Boar", "Fireball"]
        self.life = {Side.LOCAL: 30, Side.OPPONENT: 30}
        self.end_screen = False
        self.targeting_suspended = False
        self.calls = []

    def _record(self, name, *args):
        self.calls.append((name,) + args)

    def called(self, name):
        return [c for c in self.calls if c[0] == name]

    # Queries

    def current_screen(self):
        return self.screen

    def has_welcome_quests(self):
        return self.welcome_quests

    def is_in_match(self):
        return self.in_match

    def is_matchmaking(self):
        return self.matchmaking

    def selected_deck_id(self):
        return self.deck_id

    def get_ranked_option(self):
        return self.ranked_option

    def scenario_records(self):
        return iter(self.records)

    def is_mulligan_phase(self):
        return self.mulligan_phase

    def is_game_over(self):
        return self.game_over

    def is_local_player_turn(self):
        return self.local_turn

    def is_mulligan_ready(self):
        return self.mulligan_ready

    def hand(self):
        return list(self.cards)

    def remaining_life(self, side):
        return self.life[side]

    def has_end_of_match_screen(self):
        return self.end_screen

    # Actions

    def request_screen(self, screen):
        self._record("request_screen", screen)

    def notify_tournament_transition(self):
        self._record("notify_tournament_transition")

    def dismiss_welcome_quests(self):
        self._record("dismiss_welcome_quests")

    def mark_activity(self):
        self._record("mark_activity")

    def terminate(self):
        self._record("terminate")

    def find_match(self, game_type, mission_id, deck_id):
        self._record("find_match", game_type, mission_id, deck_id)

    def set_ranked_option(self, ranked):
        self._record("set_ranked_option", ranked)
        self.ranked_option = ranked

    def configure_practice(self, expert):
        self._record("configure_practice", expert)

    def show_loading_popup(self):
        self._record("show_loading_popup")

    def show_matchmaking_popup(self):
        self._record("show_matchmaking_popup")

    def toggle_mulligan_card(self, card):
        self._record("toggle_mulligan_card", card)

    def confirm_mulligan(self):
        self._record("confirm_mulligan")

    def end_turn(self):
        self._record("end_turn")

    def dismiss_end_of_match_screen(self):
        self._record("dismiss_end_of_match_screen")

    @contextmanager
    def suspend_targeting(self):
        self.targeting_suspended = True
        try:
            yield
        finally:
            self.targeting_suspended = False


class FakeEngine:
    """DecisionEngine double with scripted answers."""

    def __init__(self, turns=None, mulligan=None, action_delay=1500):
        # Each decide_turn call pops the next scripted list (empty when exhausted)
        self.turns = list(turns or [])
        self.mulligan = list(mulligan or [])
        self.action_delay = action_delay
        self.turn_calls = []
        self.mulligan_calls = []
        self.applied = []
        self.fail_on = None

    def decide_mulligan(self, hand):
        self.mulligan_calls.append(list(hand))
        return list(self.mulligan)

    def decide_turn(self, hand):
        self.turn_calls.append(list(hand))
        return self.turns.pop(0) if self.turns else []

    def apply_action(self, action):
        if action == self.fail_on:
            raise RuntimeError(f"cannot apply {action}")
        self.applied.append(action)
        return self.action_delay


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def make_engine():
    return FakeEngine
