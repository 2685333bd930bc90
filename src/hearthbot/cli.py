"""Headless hearthbot driver.

Builds a HostBridge and a DecisionEngine from "package.module:attr"
references, then calls Bot.tick() in a loop until interrupted.

Usage:
    hearthbot --host mybridge:connect --mode practice_expert
    hearthbot --host mybridge:connect --engine mypolicy:Engine --tick-interval 0.05

Options fall back to HEARTHBOT_* environment variables (a .env file in the
working directory is loaded first), then to ~/.hearthbot/settings.json.
Logs are written to ~/.hearthbot/debug.log for bug reports.
"""

import argparse
import logging
import os
import sys
import time
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from hearthbot import __version__
from hearthbot.bot import Bot, BotConfig, parse_mode
from hearthbot.errors import UnknownModeError
from hearthbot.loader import build_object
from hearthbot.settings import SETTINGS_DIR, get_settings

logger = logging.getLogger("hearthbot.cli")

LOG_FILE = SETTINGS_DIR / "debug.log"


def configure_logging(debug: bool = False, log_file: Optional[Path] = LOG_FILE) -> None:
    """Send DEBUG and up to the log file and INFO (or DEBUG) to the console."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    # Remove any existing handlers to avoid duplicates
    for h in root_logger.handlers[:]:
        root_logger.removeHandler(h)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%H:%M:%S"
    ))
    root_logger.addHandler(console_handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hearthbot", description=__doc__.splitlines()[0])
    parser.add_argument("--host", help="HostBridge factory, e.g. 'mybridge:connect'")
    parser.add_argument("--engine", help="DecisionEngine factory (default: passive engine)")
    parser.add_argument("--mode", help="tournament_ranked, tournament_unranked, practice_normal or practice_expert")
    parser.add_argument("--tick-interval", type=float, help="Seconds between ticks")
    parser.add_argument("--no-hotkeys", action="store_true", help="Disable global pause/reload hotkeys")
    parser.add_argument("--debug", action="store_true", help="Verbose console logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _pick(cli_value, env_name: str, settings_key: str):
    if cli_value not in (None, ""):
        return cli_value
    env_value = os.environ.get(env_name)
    if env_value:
        return env_value
    return get_settings().get(settings_key)


def _print_result(label: str, text: str) -> None:
    print(f"[{label}] {text}")


class Driver:
    """Calls bot.tick() until stopped.

    Sleeps tick_interval between ticks, or until the bot's pending delay
    runs out when that is longer.
    """

    def __init__(self, bot: Bot, tick_interval: float = 0.1):
        self.bot = bot
        self.tick_interval = tick_interval
        self.running = True

    def next_sleep(self) -> float:
        """Seconds to sleep before the next tick."""
        wait_ms = self.bot.scheduler.remaining_ms()
        if wait_ms / 1000 > self.tick_interval:
            logger.debug(f"Waiting {wait_ms:.0f}ms for pending delay")
            return wait_ms / 1000
        return self.tick_interval

    def run(self) -> None:
        while self.running:
            try:
                self.bot.tick()
                time.sleep(self.next_sleep())
            except KeyboardInterrupt:
                logger.info("Stopping hearthbot...")
                self.running = False


def main(argv: Optional[list[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    configure_logging(debug=args.debug)
    settings = get_settings()

    host_spec = _pick(args.host, "HEARTHBOT_HOST", "host")
    engine_spec = _pick(args.engine, "HEARTHBOT_ENGINE", "engine")
    mode_value = _pick(args.mode, "HEARTHBOT_MODE", "mode")
    tick_interval = args.tick_interval if args.tick_interval is not None else float(settings.get("tick_interval"))

    if not host_spec:
        logger.error("No host bridge configured (use --host or HEARTHBOT_HOST)")
        return 2

    try:
        mode = parse_mode(mode_value)
    except UnknownModeError as e:
        logger.error(str(e))
        return 2

    logger.info(f"Loading host bridge: {host_spec}")
    host = build_object(host_spec)
    logger.info(f"Loading decision engine: {engine_spec}")
    engine = build_object(engine_spec)

    bot = Bot(host, engine, config=BotConfig.from_settings(settings), mode=mode, notify=_print_result)

    hotkeys = None
    if settings.get("hotkeys") and not args.no_hotkeys:
        try:
            from hearthbot.hotkeys import BotHotkeys
            hotkeys = BotHotkeys(
                bot,
                engine_factory=lambda: build_object(engine_spec),
                pause_key=settings.get("pause_hotkey"),
                reload_key=settings.get("reload_hotkey"),
            )
            hotkeys.start()
        except Exception as e:
            logger.warning(f"Hotkeys unavailable: {e}")
            hotkeys = None

    print("\n" + "=" * 50)
    print(" HEARTHBOT STARTING")
    print(f" Mode: {mode.value} | Engine: {engine_spec}")
    print("=" * 50 + "\n")

    try:
        Driver(bot, tick_interval).run()
    finally:
        if hotkeys is not None:
            hotkeys.stop()
        logger.info(f"Session stats: {bot.stats}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
