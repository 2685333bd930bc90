"""hearthbot: tick-driven automation core for a collectible card game client."""

from hearthbot.action_queue import ActionQueue, TurnExecutor
from hearthbot.bot import Bot, BotConfig, parse_mode
from hearthbot.decision import DecisionEngine, PassiveEngine
from hearthbot.dispatcher import ModeDispatcher
from hearthbot.errors import (
    BotError,
    FatalHostError,
    NoMissionsError,
    RecoverableHostError,
    UnknownModeError,
)
from hearthbot.host import HostBridge, ScenarioRecord
from hearthbot.join import MatchJoiner, pick_practice_mission
from hearthbot.match_flow import MatchFlowController, current_phase, match_result
from hearthbot.modes import (
    GameType,
    JoinState,
    MatchPhase,
    MatchResult,
    MulliganState,
    OperatingMode,
    ScreenMode,
    Side,
)
from hearthbot.scheduler import DelayScheduler

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ActionQueue",
    "TurnExecutor",
    "Bot",
    "BotConfig",
    "parse_mode",
    "DecisionEngine",
    "PassiveEngine",
    "ModeDispatcher",
    "BotError",
    "FatalHostError",
    "NoMissionsError",
    "RecoverableHostError",
    "UnknownModeError",
    "HostBridge",
    "ScenarioRecord",
    "MatchJoiner",
    "pick_practice_mission",
    "MatchFlowController",
    "current_phase",
    "match_result",
    "GameType",
    "JoinState",
    "MatchPhase",
    "MatchResult",
    "MulliganState",
    "OperatingMode",
    "ScreenMode",
    "Side",
    "DelayScheduler",
]
