"""Global hotkeys for pausing the bot and reloading its decision engine.

NOTE: The keyboard library requires admin/root privileges on Linux but
works normally on Windows without elevation.
"""

import logging
from typing import Callable, Optional

import keyboard

from hearthbot.bot import Bot
from hearthbot.decision import DecisionEngine

logger = logging.getLogger(__name__)


class BotHotkeys:
    """Pause/resume and engine-reload hotkeys for a running bot.

    Hotkey callbacks run on the keyboard library's listener thread. They only
    flip the running flag or swap the engine reference, which the tick loop
    reads on its next pass.

    Example:
        hotkeys = BotHotkeys(bot, engine_factory=lambda: MyEngine())
        hotkeys.start()
        # F9 now pauses/resumes, F8 reloads the engine
        hotkeys.stop()
    """

    def __init__(
        self,
        bot: Bot,
        engine_factory: Optional[Callable[[], DecisionEngine]] = None,
        pause_key: str = "f9",
        reload_key: str = "f8",
    ) -> None:
        """Initialize the hotkey handler.

        Args:
            bot: Bot to control.
            engine_factory: Builds a fresh engine on reload. Reload is
                disabled when None.
            pause_key: Key toggling bot.running. Default 'f9'.
            reload_key: Key rebuilding the engine. Default 'f8'.
        """
        self.bot = bot
        self.engine_factory = engine_factory
        self.pause_key = pause_key
        self.reload_key = reload_key
        self._hooks: list = []

    @property
    def active(self) -> bool:
        return bool(self._hooks)

    def start(self) -> None:
        """Register global hotkey listeners. Does nothing if already started."""
        if self._hooks:
            return

        self._hooks.append(keyboard.on_press_key(self.pause_key, lambda _: self.on_pause(), suppress=False))
        if self.engine_factory is not None:
            self._hooks.append(keyboard.on_press_key(self.reload_key, lambda _: self.on_reload(), suppress=False))
        logger.info(f"Hotkeys: {self.pause_key.upper()}=pause/resume"
                    + (f", {self.reload_key.upper()}=reload engine" if self.engine_factory else ""))

    def stop(self) -> None:
        """Unregister hotkey listeners. Safe to call multiple times."""
        for hook in self._hooks:
            keyboard.unhook(hook)
        self._hooks = []

    def on_pause(self) -> None:
        running = self.bot.toggle()
        logger.info(f"Bot {'resumed' if running else 'paused'} (hotkey)")

    def on_reload(self) -> None:
        if self.engine_factory is None:
            return
        try:
            engine = self.engine_factory()
        except Exception as e:
            logger.error(f"Engine reload failed: {e}", exc_info=True)
            return
        self.bot.request_engine_reload(engine)
