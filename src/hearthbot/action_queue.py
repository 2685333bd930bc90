"""Per-turn action queue and the one-action-per-tick executor."""

import logging
from collections import deque
from typing import Any, Iterable

from hearthbot.decision import DecisionEngine
from hearthbot.host import HostBridge
from hearthbot.scheduler import DelayScheduler

logger = logging.getLogger(__name__)


class ActionQueue:
    """FIFO of actions decided for the current turn."""

    def __init__(self) -> None:
        self._items: deque[Any] = deque()

    def push_all(self, actions: Iterable[Any]) -> int:
        """Append actions in order. Returns how many were added."""
        before = len(self._items)
        self._items.extend(actions)
        return len(self._items) - before

    def pop(self) -> Any:
        """Remove and return the oldest action.

        Raises:
            IndexError: If the queue is empty.
        """
        return self._items.popleft()

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self):
        return iter(list(self._items))


class TurnExecutor:
    """Drains the action queue one action per call.

    When the queue is empty the engine is asked for the turn's actions; if
    it proposes none, the turn is ended.
    """

    def __init__(
        self,
        host: HostBridge,
        scheduler: DelayScheduler,
        queue: ActionQueue,
        engine: DecisionEngine,
        end_turn_ms: int = 10000,
    ):
        self._host = host
        self._scheduler = scheduler
        self._queue = queue
        self.engine = engine
        self._end_turn_ms = end_turn_ms
        self.actions_executed = 0
        self.turns_ended = 0

    def step(self) -> None:
        """Run one executor step with the targeting reticle detached.

        Engine and host exceptions propagate; whatever is left in the queue
        stays there for the next tick.
        """
        with self._host.suspend_targeting():
            self._step()

    def _step(self) -> None:
        if self._queue:
            action = self._queue.pop()
            logger.debug(f"Applying action: {action}")
            delay = self.engine.apply_action(action)
            self.actions_executed += 1
            self._scheduler.schedule(delay)
            return

        hand = list(self._host.hand())
        added = self._queue.push_all(self.engine.decide_turn(hand))
        if added:
            logger.info(f"Queued {added} actions ({len(hand)} cards in hand)")
            return

        logger.info("Ending turn")
        self._host.end_turn()
        self.turns_ended += 1
        self._scheduler.schedule(self._end_turn_ms)
