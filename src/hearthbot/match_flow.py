"""In-match sub-state machine: mulligan, turns, and end-of-match reporting.

Nothing about the match phase is cached; it is re-derived from the host on
every update. Edges ("turn started", "left the mulligan") are synthesized by
comparing against what the previous update saw.
"""

import logging
from typing import Callable, Optional

from hearthbot.action_queue import ActionQueue, TurnExecutor
from hearthbot.decision import DecisionEngine
from hearthbot.host import HostBridge
from hearthbot.modes import MatchPhase, MatchResult, MulliganState, Side
from hearthbot.scheduler import DelayScheduler

logger = logging.getLogger(__name__)

_RESULT_LINES = {
    MatchResult.VICTORY: "Victory!",
    MatchResult.DEFEAT: "Defeat...",
    MatchResult.DRAW: "Draw..?",
}


def current_phase(host: HostBridge) -> MatchPhase:
    """Derive the match phase from host queries."""
    if host.is_mulligan_phase():
        return MatchPhase.MULLIGAN
    if host.is_game_over():
        return MatchPhase.MATCH_OVER
    if host.is_local_player_turn():
        return MatchPhase.ACTIVE_TURN
    return MatchPhase.OPPONENT_TURN


def match_result(host: HostBridge) -> MatchResult:
    """Decide the outcome of a finished match from both life totals.

    Neither side at zero shows up when end-of-match detection races the
    host's life updates; it is reported as a draw rather than guessed.
    """
    if host.remaining_life(Side.OPPONENT) <= 0:
        return MatchResult.VICTORY
    if host.remaining_life(Side.LOCAL) <= 0:
        return MatchResult.DEFEAT
    return MatchResult.DRAW


class MatchFlowController:
    """Drives one match from mulligan to the end screen."""

    def __init__(
        self,
        host: HostBridge,
        scheduler: DelayScheduler,
        queue: ActionQueue,
        engine: DecisionEngine,
        mulligan_ms: int = 2000,
        turn_settle_ms: int = 5000,
        match_over_ms: int = 10000,
        end_turn_ms: int = 10000,
        notify: Optional[Callable[[str, str], None]] = None,
    ):
        """Initialize the controller.

        Args:
            host: Game client bridge.
            scheduler: Shared delay gate.
            queue: The bot's action queue for the current turn.
            engine: Move-selection policy.
            mulligan_ms: Pause after toggling mulligan cards.
            turn_settle_ms: Pause when our turn starts, for turn-start animations.
            match_over_ms: Cooldown after the end-of-match screen.
            end_turn_ms: Cooldown after ending a turn.
            notify: Optional callback (label, text) for progress lines.
        """
        self._host = host
        self._scheduler = scheduler
        self._mulligan_ms = mulligan_ms
        self._turn_settle_ms = turn_settle_ms
        self._match_over_ms = match_over_ms
        self._notify = notify
        self._engine = engine
        self._queue = queue
        self.executor = TurnExecutor(host, scheduler, queue, engine, end_turn_ms=end_turn_ms)

        self.mulligan_state = MulliganState.BEGIN
        self.was_my_turn = False
        self.results: dict[MatchResult, int] = {r: 0 for r in MatchResult}
        self._result_reported = False

    @property
    def engine(self) -> DecisionEngine:
        return self._engine

    @engine.setter
    def engine(self, engine: DecisionEngine) -> None:
        self._engine = engine
        self.executor.engine = engine

    def update(self) -> None:
        """Run one step of the match state machine."""
        phase = current_phase(self._host)

        if phase is not MatchPhase.MATCH_OVER:
            self._result_reported = False
        if phase is not MatchPhase.ACTIVE_TURN:
            self.end_turn_tracking()

        if phase is MatchPhase.MULLIGAN:
            self._mulligan_step()
            return

        if phase is MatchPhase.MATCH_OVER:
            self._match_over()
        elif phase is MatchPhase.ACTIVE_TURN:
            if not self.was_my_turn:
                # Let the turn-start animations finish before acting
                self.end_turn_tracking()
                self.was_my_turn = True
                self._scheduler.schedule(self._turn_settle_ms)
            else:
                self.executor.step()

        self.mulligan_state = MulliganState.BEGIN

    def end_turn_tracking(self) -> None:
        """Forget the local turn: clear the turn-start edge and any queued actions.

        Called whenever our turn is not in progress, including when the
        gameplay screen is left, so nothing decided in one turn or match
        runs in the next.
        """
        self.was_my_turn = False
        if self._queue:
            logger.warning(f"Dropping {len(self._queue)} queued actions, local turn is over")
            self._queue.clear()

    def _mulligan_step(self) -> None:
        if self.mulligan_state is MulliganState.BEGIN:
            if not self._host.is_mulligan_ready():
                logger.debug("Mulligan manager not ready")
                return
            hand = list(self._host.hand())
            replace = list(self._engine.decide_mulligan(hand))
            for card in replace:
                logger.debug(f"Replacing {card}")
                self._host.toggle_mulligan_card(card)
            logger.info(f"Mulligan ended: {len(replace)} cards changed")
            self.mulligan_state = MulliganState.DO_END
            self._scheduler.schedule(self._mulligan_ms)
        elif self.mulligan_state is MulliganState.DO_END:
            self._host.confirm_mulligan()
            self.mulligan_state = MulliganState.DONE

    def _match_over(self) -> None:
        # The end screen can outlive one cooldown; report the result once
        if not self._result_reported:
            result = match_result(self._host)
            self.results[result] += 1
            self._result_reported = True
            line = _RESULT_LINES[result]
            logger.info(line)
            if self._notify:
                self._notify("RESULT", line)

        # Click through rewards and other end screen info
        if self._host.has_end_of_match_screen():
            self._host.dismiss_end_of_match_screen()

        self._scheduler.schedule(self._match_over_ms)
