"""Match-search handlers for the practice and tournament sub-menus.

A single JoinState replaces separate "joined" and "deck initialized" flags.
Once a search is submitted the state stays JOINED until the dispatcher sees
the gameplay screen and calls reset(), so no second search can be sent while
the first is still resolving.
"""

import logging
import random
from typing import Iterable, Optional

from hearthbot.errors import NoMissionsError
from hearthbot.host import HostBridge, ScenarioRecord
from hearthbot.modes import AdventureId, AdventureModeId, GameType, JoinState, MissionId
from hearthbot.scheduler import DelayScheduler

logger = logging.getLogger(__name__)


def pick_practice_mission(
    records: Iterable[ScenarioRecord],
    expert: bool,
    rng: Optional[random.Random] = None,
) -> int:
    """Pick a random practice mission of the requested difficulty.

    Args:
        records: Scenario records from the host.
        expert: True for expert missions, False for normal ones.
        rng: Random source. Defaults to the module-level generator.

    Returns:
        The chosen scenario id.

    Raises:
        NoMissionsError: If no practice scenario matches the difficulty.
    """
    mode = AdventureModeId.EXPERT if expert else AdventureModeId.NORMAL
    candidates = [
        r.id for r in records
        if r.adventure_id == AdventureId.PRACTICE and r.mode_id == mode
    ]
    if not candidates:
        raise NoMissionsError(f"No practice missions for difficulty {mode.name}")
    return (rng or random).choice(candidates)


class MatchJoiner:
    """Submits match searches, at most once per match."""

    def __init__(
        self,
        host: HostBridge,
        scheduler: DelayScheduler,
        settle_ms: int = 5000,
        option_flip_ms: int = 3000,
        rng: Optional[random.Random] = None,
    ):
        self._host = host
        self._scheduler = scheduler
        self._settle_ms = settle_ms
        self._option_flip_ms = option_flip_ms
        self._rng = rng or random.Random()
        self.state = JoinState.IDLE

    @property
    def joined(self) -> bool:
        return self.state is JoinState.JOINED

    def reset(self) -> None:
        """Forget any previous search; called once the match has started."""
        if self.state is not JoinState.IDLE:
            logger.debug(f"Join state {self.state.value} -> idle")
        self.state = JoinState.IDLE

    def join_practice(self, expert: bool) -> None:
        """Advance the practice (vs AI) search by one step."""
        if self.joined or self._host.is_in_match():
            return

        if self.state is JoinState.IDLE:
            logger.info(f"Selecting practice adventure (expert={expert})")
            self._host.configure_practice(expert)
            self.state = JoinState.DECK_CONFIGURED
            self._scheduler.schedule(self._settle_ms)
            return

        deck_id = self._host.selected_deck_id()
        if deck_id == 0:
            logger.error("Invalid deck id 0, no deck selected")
            return

        try:
            mission = pick_practice_mission(self._host.scenario_records(), expert, self._rng)
        except NoMissionsError as e:
            logger.error(f"Cannot start practice game: {e}")
            return

        logger.info(f"Starting practice game: expert={expert}, mission={mission}, deck={deck_id}")
        self._host.show_loading_popup()
        self._host.find_match(GameType.GT_VS_AI, mission, deck_id)
        self.state = JoinState.JOINED
        self._scheduler.schedule(self._settle_ms)

    def join_tournament(self, ranked: bool) -> None:
        """Advance the ranked/unranked search by one step."""
        if self.joined:
            return
        if self._host.is_in_match() or self._host.is_matchmaking():
            return

        # The option flip lands asynchronously on the host, so join next tick
        if self._host.get_ranked_option() != ranked:
            logger.info(f"Switching ranked option to {ranked}")
            self._host.set_ranked_option(ranked)
            self._scheduler.schedule(self._option_flip_ms)
            return

        deck_id = self._host.selected_deck_id()
        if deck_id == 0:
            logger.error("Invalid deck id 0, no deck selected")
            return

        game_type = GameType.GT_RANKED if ranked else GameType.GT_UNRANKED
        logger.info(f"Joining tournament game: ranked={ranked}, deck={deck_id}")
        self._host.show_matchmaking_popup()
        self._host.find_match(game_type, MissionId.MULTIPLAYER_1V1, deck_id)
        self.state = JoinState.JOINED
