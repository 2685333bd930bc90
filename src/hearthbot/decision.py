"""Decision engine protocol and the built-in passive engine.

The engine is the move-selection policy. The core treats it as a black box:
it asks for a mulligan decision once per match, for a list of actions once
per empty queue, and hands each action back to be applied.
"""

import logging
from typing import Any, Protocol, Sequence

logger = logging.getLogger(__name__)


class DecisionEngine(Protocol):
    """Protocol for move-selection policies."""

    def decide_mulligan(self, hand: Sequence[Any]) -> Sequence[Any]:
        """Return the cards from hand that should be replaced."""
        ...

    def decide_turn(self, hand: Sequence[Any]) -> Sequence[Any]:
        """Return the actions to perform this turn, in order."""
        ...

    def apply_action(self, action: Any) -> int:
        """Perform one action and return the delay (ms) before the next."""
        ...


class PassiveEngine:
    """Keeps every opening hand and never proposes an action.

    With this engine every turn ends as soon as it settles, which is enough
    to cycle matches for quest progress.
    """

    def decide_mulligan(self, hand: Sequence[Any]) -> list[Any]:
        return []

    def decide_turn(self, hand: Sequence[Any]) -> list[Any]:
        logger.debug(f"PassiveEngine: passing with {len(hand)} cards in hand")
        return []

    def apply_action(self, action: Any) -> int:
        raise ValueError(f"PassiveEngine cannot apply actions: {action!r}")
