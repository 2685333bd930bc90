"""Enumerations shared by the dispatcher, join handlers and match flow.

Host-side identifiers (game types, adventure ids, mission ids) mirror the
values the game client uses internally so a HostBridge can pass them through
without translation.
"""

from enum import Enum, IntEnum


class OperatingMode(Enum):
    """What the user wants the bot to play."""
    TOURNAMENT_RANKED = "tournament_ranked"
    TOURNAMENT_UNRANKED = "tournament_unranked"
    PRACTICE_NORMAL = "practice_normal"
    PRACTICE_EXPERT = "practice_expert"

    @property
    def is_practice(self) -> bool:
        return self in (OperatingMode.PRACTICE_NORMAL, OperatingMode.PRACTICE_EXPERT)

    @property
    def is_tournament(self) -> bool:
        return self in (OperatingMode.TOURNAMENT_RANKED, OperatingMode.TOURNAMENT_UNRANKED)


class ScreenMode(Enum):
    """Coarse screen category reported by the host client."""
    STARTUP = "startup"
    LOGIN = "login"
    HUB = "hub"
    GAMEPLAY = "gameplay"
    COLLECTIONMANAGER = "collectionmanager"
    PACKOPENING = "packopening"
    TOURNAMENT = "tournament"
    FRIENDLY = "friendly"
    FATAL_ERROR = "fatal_error"
    DRAFT = "draft"
    CREDITS = "credits"
    RESET = "reset"
    ADVENTURE = "adventure"
    INVALID = "invalid"
    TAVERN_BRAWL = "tavern_brawl"


# Screens we never automate; the dispatcher walks back to the hub from these
UNSUPPORTED_SCREENS = frozenset({
    ScreenMode.STARTUP,
    ScreenMode.COLLECTIONMANAGER,
    ScreenMode.PACKOPENING,
    ScreenMode.FRIENDLY,
    ScreenMode.DRAFT,
    ScreenMode.CREDITS,
})

FATAL_SCREENS = frozenset({
    ScreenMode.INVALID,
    ScreenMode.FATAL_ERROR,
    ScreenMode.RESET,
})


class MatchPhase(Enum):
    """Phase of the current match, recomputed from the host every tick."""
    MULLIGAN = "mulligan"
    ACTIVE_TURN = "active_turn"
    OPPONENT_TURN = "opponent_turn"
    MATCH_OVER = "match_over"


class MulliganState(Enum):
    BEGIN = "begin"
    DO_END = "do_end"
    DONE = "done"


class JoinState(Enum):
    """Progress of a match-search attempt.

    DECK_CONFIGURED only occurs on the practice path, between selecting the
    practice adventure and submitting the search.
    """
    IDLE = "idle"
    DECK_CONFIGURED = "deck_configured"
    JOINED = "joined"


class MatchResult(Enum):
    VICTORY = "victory"
    DEFEAT = "defeat"
    DRAW = "draw"


class Side(Enum):
    LOCAL = "local"
    OPPONENT = "opponent"


class GameType(IntEnum):
    """Queue type passed to the host's find-match call."""
    GT_VS_AI = 1
    GT_RANKED = 7
    GT_UNRANKED = 8


class AdventureId(IntEnum):
    PRACTICE = 2


class AdventureModeId(IntEnum):
    NORMAL = 1
    EXPERT = 2


class MissionId(IntEnum):
    MULTIPLAYER_1V1 = 2
