"""Top-level screen dispatcher.

Routes each tick to a handler based on the host's current screen and the
user's operating mode. A screen change is treated as an event: the tick that
observes it only schedules a settle delay, since screens are unstable right
after a transition.
"""

import logging

from hearthbot.errors import FatalHostError, UnknownModeError
from hearthbot.host import HostBridge
from hearthbot.join import MatchJoiner
from hearthbot.match_flow import MatchFlowController
from hearthbot.modes import FATAL_SCREENS, UNSUPPORTED_SCREENS, OperatingMode, ScreenMode
from hearthbot.scheduler import DelayScheduler

logger = logging.getLogger(__name__)


class ModeDispatcher:
    """Screen-keyed state machine for one bot."""

    def __init__(
        self,
        host: HostBridge,
        scheduler: DelayScheduler,
        joiner: MatchJoiner,
        match_flow: MatchFlowController,
        screen_settle_ms: int = 5000,
        login_settle_ms: int = 5000,
    ):
        self._host = host
        self._scheduler = scheduler
        self._joiner = joiner
        self._match_flow = match_flow
        self._screen_settle_ms = screen_settle_ms
        self._login_settle_ms = login_settle_ms
        self.last_screen = ScreenMode.STARTUP

    def dispatch(self, mode: OperatingMode) -> None:
        """Run the handler for the current screen.

        Args:
            mode: Operating mode snapshot for this tick.

        Raises:
            FatalHostError: If the host is on an unrecoverable screen.
            UnknownModeError: If mode is not a known OperatingMode.
        """
        screen = self._host.current_screen()

        if screen != self.last_screen:
            logger.info(f"Screen changed: {_name(self.last_screen)} -> {_name(screen)}")
            if self.last_screen is ScreenMode.GAMEPLAY:
                self._match_flow.end_turn_tracking()
            self.last_screen = screen
            self._scheduler.schedule(self._screen_settle_ms)
            return

        if screen in UNSUPPORTED_SCREENS:
            logger.info(f"Unsupported screen {screen.name}, returning to hub")
            self._host.request_screen(ScreenMode.HUB)
        elif screen in FATAL_SCREENS:
            raise FatalHostError(screen)
        elif screen is ScreenMode.LOGIN:
            self._login()
        elif screen is ScreenMode.HUB:
            self._hub(mode)
        elif screen is ScreenMode.GAMEPLAY:
            self._match_flow.update()
            self._joiner.reset()
        elif screen is ScreenMode.ADVENTURE:
            self._adventure(mode)
        elif screen is ScreenMode.TOURNAMENT:
            self._tournament(mode)
        else:
            logger.warning(f"Unknown screen: {_name(screen)}")

    def _login(self) -> None:
        if self._host.has_welcome_quests():
            logger.info("Entering main menu")
            self._host.dismiss_welcome_quests()
        self._scheduler.schedule(self._login_settle_ms)

    def _hub(self, mode: OperatingMode) -> None:
        _check_mode(mode)
        if mode.is_practice:
            self._host.request_screen(ScreenMode.ADVENTURE)
        else:
            self._host.request_screen(ScreenMode.TOURNAMENT)
            self._host.notify_tournament_transition()

    def _adventure(self, mode: OperatingMode) -> None:
        _check_mode(mode)
        if mode.is_tournament:
            logger.warning("Inside wrong sub-menu (adventure), returning to hub")
            self._host.request_screen(ScreenMode.HUB)
            return
        self._joiner.join_practice(expert=mode is OperatingMode.PRACTICE_EXPERT)

    def _tournament(self, mode: OperatingMode) -> None:
        _check_mode(mode)
        if mode.is_practice:
            logger.warning("Inside wrong sub-menu (tournament), returning to hub")
            self._host.request_screen(ScreenMode.HUB)
            return
        self._joiner.join_tournament(ranked=mode is OperatingMode.TOURNAMENT_RANKED)


def _check_mode(mode: OperatingMode) -> None:
    if not isinstance(mode, OperatingMode):
        raise UnknownModeError(f"Unknown operating mode: {mode!r}")


def _name(screen) -> str:
    return screen.name if isinstance(screen, ScreenMode) else repr(screen)
