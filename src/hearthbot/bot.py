"""Bot orchestrator: the single tick() entry point.

The bot is driven by an external loop that calls tick() repeatedly. Pacing
is done entirely by the delay gate: while a delay is pending, tick() returns
without touching anything. Each tick that gets through runs to completion
synchronously; nothing blocks or sleeps.

    tick() -> delay gate -> dispatcher -> join / match flow -> schedule delay
"""

import logging
from dataclasses import dataclass, fields
from typing import Any, Callable, Optional, Union

from hearthbot.action_queue import ActionQueue
from hearthbot.decision import DecisionEngine
from hearthbot.dispatcher import ModeDispatcher
from hearthbot.errors import FatalHostError, UnknownModeError
from hearthbot.host import HostBridge
from hearthbot.join import MatchJoiner
from hearthbot.match_flow import MatchFlowController
from hearthbot.modes import JoinState, MatchResult, OperatingMode
from hearthbot.scheduler import DelayScheduler, monotonic_ms

logger = logging.getLogger(__name__)


@dataclass
class BotConfig:
    """Delay values, all in milliseconds."""
    screen_settle_ms: int = 5000  # After any screen change, and around match search
    login_settle_ms: int = 5000
    option_flip_ms: int = 3000  # After flipping the ranked option
    mulligan_ms: int = 2000  # Between toggling cards and confirming the mulligan
    turn_settle_ms: int = 5000  # When our turn starts
    match_over_ms: int = 10000
    end_turn_ms: int = 10000
    error_backoff_ms: int = 10000  # After an exception inside a tick

    @classmethod
    def from_settings(cls, settings: Any) -> "BotConfig":
        """Build a config from the "delays" section of a Settings object.

        Unknown keys are ignored with a warning.
        """
        overrides = settings.get("delays") or {}
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in overrides.items():
            if key not in known:
                logger.warning(f"Ignoring unknown delay setting: {key}")
                continue
            values[key] = int(value)
        return cls(**values)


def parse_mode(value: Union[OperatingMode, str]) -> OperatingMode:
    """Convert a mode or its string value to an OperatingMode.

    Raises:
        UnknownModeError: If value names no known mode.
    """
    if isinstance(value, OperatingMode):
        return value
    if isinstance(value, str):
        key = value.strip().lower().replace("-", "_")
        for mode in OperatingMode:
            if mode.value == key:
                return mode
    raise UnknownModeError(f"Unknown operating mode: {value!r}")


class Bot:
    """Automation core for one game client.

    Owns the delay gate, the dispatcher, the join handler, the match flow
    and the action queue. All of that state is mutated only from tick().
    """

    def __init__(
        self,
        host: HostBridge,
        engine: DecisionEngine,
        config: Optional[BotConfig] = None,
        mode: Union[OperatingMode, str] = OperatingMode.TOURNAMENT_RANKED,
        notify: Optional[Callable[[str, str], None]] = None,
        clock: Callable[[], float] = monotonic_ms,
        joiner: Optional[MatchJoiner] = None,
    ):
        """Initialize the bot.

        Args:
            host: Bridge to the game client.
            engine: Move-selection policy.
            config: Delay configuration. Defaults to BotConfig().
            mode: Initial operating mode.
            notify: Optional callback (label, text) for progress lines
                such as match results.
            clock: Time source in milliseconds for the delay gate.
            joiner: Optional pre-built join handler (tests pass one with a
                seeded random source).
        """
        self._host = host
        self._config = config or BotConfig()
        self._mode = parse_mode(mode)
        self._running = True
        self._pending_engine: Optional[DecisionEngine] = None

        cfg = self._config
        self.scheduler = DelayScheduler(clock)
        self.queue = ActionQueue()
        self.joiner = joiner or MatchJoiner(
            host,
            self.scheduler,
            settle_ms=cfg.screen_settle_ms,
            option_flip_ms=cfg.option_flip_ms,
        )
        self.match_flow = MatchFlowController(
            host,
            self.scheduler,
            self.queue,
            engine,
            mulligan_ms=cfg.mulligan_ms,
            turn_settle_ms=cfg.turn_settle_ms,
            match_over_ms=cfg.match_over_ms,
            end_turn_ms=cfg.end_turn_ms,
            notify=notify,
        )
        self.dispatcher = ModeDispatcher(
            host,
            self.scheduler,
            self.joiner,
            self.match_flow,
            screen_settle_ms=cfg.screen_settle_ms,
            login_settle_ms=cfg.login_settle_ms,
        )

        # Statistics
        self._ticks_run = 0
        self._errors = 0

    @property
    def mode(self) -> OperatingMode:
        return self._mode

    def set_mode(self, mode: Union[OperatingMode, str]) -> None:
        """Change the operating mode; takes effect on the next tick."""
        new_mode = parse_mode(mode)
        logger.info(f"Operating mode changed to: {new_mode.value}")
        self._mode = new_mode

    @property
    def engine(self) -> DecisionEngine:
        return self.match_flow.engine

    def reload_engine(self, engine: DecisionEngine) -> None:
        """Swap the decision engine.

        Delays, join state, mulligan state and any queued actions are kept.
        """
        logger.info(f"Reloading decision engine: {type(engine).__name__}")
        self.match_flow.engine = engine

    def request_engine_reload(self, engine: DecisionEngine) -> None:
        """Queue an engine swap from another thread; applied on the next tick."""
        self._pending_engine = engine

    @property
    def config(self) -> BotConfig:
        return self._config

    @property
    def join_state(self) -> JoinState:
        return self.joiner.state

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if not self._running:
            logger.info("Bot started")
        self._running = True

    def stop(self) -> None:
        if self._running:
            logger.info("Bot stopped")
        self._running = False

    def toggle(self) -> bool:
        """Toggle running on/off. Returns new state."""
        if self._running:
            self.stop()
        else:
            self.start()
        return self._running

    @property
    def stats(self) -> dict[str, int]:
        """Execution statistics."""
        results = self.match_flow.results
        return {
            "ticks": self._ticks_run,
            "errors": self._errors,
            "victories": results[MatchResult.VICTORY],
            "defeats": results[MatchResult.DEFEAT],
            "draws": results[MatchResult.DRAW],
            "actions": self.match_flow.executor.actions_executed,
            "turns_ended": self.match_flow.executor.turns_ended,
        }

    def tick(self) -> None:
        """Run a single automation step if no delay is pending.

        Raises:
            UnknownModeError: An unknown operating mode reached dispatch.
            Exception: Whatever host.terminate() raised while closing the
                game after a fatal screen.
        """
        if not self.scheduler.ready():
            return
        if self._pending_engine is not None:
            engine, self._pending_engine = self._pending_engine, None
            self.reload_engine(engine)
        if not self._running:
            return

        self._ticks_run += 1
        try:
            self._update()
        except FatalHostError as e:
            logger.critical(f"Fatal error in tick: {e}")
            logger.critical("Force closing game!")
            self._running = False
            try:
                self._host.terminate()
            except Exception as term_err:
                logger.critical(f"Failed to terminate host: {term_err}", exc_info=True)
                raise
        except UnknownModeError as e:
            logger.critical(f"Programming error in tick: {e}")
            raise
        except Exception as e:
            self._errors += 1
            logger.error(f"Exception in tick: {e}", exc_info=True)
            self.scheduler.schedule(self._config.error_backoff_ms)

    def _update(self) -> None:
        # Keep the client's inactivity kicker from disconnecting us
        self._host.mark_activity()
        mode = self._mode
        self.dispatcher.dispatch(mode)
