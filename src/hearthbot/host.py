"""Boundary interface to the game client.

The automation core never reaches into the client directly. Everything it
observes or clicks goes through a HostBridge, so the same state machines run
against an injected client shim, a replay, or a test double.
"""

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Any, Iterable, Protocol, Sequence

from hearthbot.modes import GameType, ScreenMode, Side


@dataclass(frozen=True)
class ScenarioRecord:
    """One row of the client's scenario table."""
    id: int
    adventure_id: int
    mode_id: int


class HostBridge(Protocol):
    """Capabilities the core needs from the game client.

    Query methods return snapshots; the core compares and acts on them but
    never mutates them. Action methods are fire-and-forget from the core's
    point of view: their effects show up in later queries, typically after
    a settle delay.
    """

    # Screens

    def current_screen(self) -> ScreenMode:
        ...

    def request_screen(self, screen: ScreenMode) -> None:
        ...

    def notify_tournament_transition(self) -> None:
        """Tell the matchmaking screen a transition into it has started."""
        ...

    def has_welcome_quests(self) -> bool:
        ...

    def dismiss_welcome_quests(self) -> None:
        ...

    def mark_activity(self) -> None:
        """Reset the client's inactivity kicker."""
        ...

    def terminate(self) -> None:
        """Kill the client process without a graceful shutdown."""
        ...

    # Matchmaking

    def is_in_match(self) -> bool:
        ...

    def is_matchmaking(self) -> bool:
        ...

    def selected_deck_id(self) -> int:
        """Id of the deck selected in the deck picker, 0 if none."""
        ...

    def find_match(self, game_type: GameType, mission_id: int, deck_id: int) -> None:
        ...

    def get_ranked_option(self) -> bool:
        ...

    def set_ranked_option(self, ranked: bool) -> None:
        ...

    def configure_practice(self, expert: bool) -> None:
        """Select the practice adventure at the given difficulty and open its deck picker."""
        ...

    def scenario_records(self) -> Iterable[ScenarioRecord]:
        ...

    def show_loading_popup(self) -> None:
        ...

    def show_matchmaking_popup(self) -> None:
        ...

    # Match

    def is_mulligan_phase(self) -> bool:
        ...

    def is_game_over(self) -> bool:
        ...

    def is_local_player_turn(self) -> bool:
        ...

    def is_mulligan_ready(self) -> bool:
        """Mulligan manager is active and its buttons accept input."""
        ...

    def toggle_mulligan_card(self, card: Any) -> None:
        ...

    def confirm_mulligan(self) -> None:
        ...

    def hand(self) -> Sequence[Any]:
        """Cards in the local player's hand."""
        ...

    def remaining_life(self, side: Side) -> int:
        ...

    def end_turn(self) -> None:
        ...

    def has_end_of_match_screen(self) -> bool:
        ...

    def dismiss_end_of_match_screen(self) -> None:
        ...

    def suspend_targeting(self) -> AbstractContextManager:
        """Detach the targeting reticle until the returned context exits.

        While detached, simulated clicks do not depend on the real mouse
        staying inside the client window.
        """
        ...
