"""CLI entry point for the Onyx chat client."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

from onyx.ai.backend import create_backend
from onyx.ai.errors import ConfigError, MissingApiKeyError
from onyx.chat.app import ChatApp
from onyx.chat.config import default_config_dir, default_config_path, load_config
from onyx.chat.messages import Message
from onyx.chat.session import SessionEngine
from onyx.tui.terminal import ProcessTerminal

logger = logging.getLogger(__name__)

NO_API_KEY_WELCOME = (
    "Welcome to Onyx!\n\n"
    "No API key found for the active provider.\n"
    "Edit {path} (or set the provider's API key environment variable) and restart.\n\n"
    "You can still use commands like /help and /config."
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="onyx",
        description="Onyx - AI Chat Terminal Application",
        epilog="Examples:\n  onyx                               # Use default config (~/.onyx/config.json)\n"
        "  onyx --config /path/to/config.json",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-c", "--config", default=None, help="Path to the config file (default: ~/.onyx/config.json)")
    parser.add_argument("--log-level", default="info", choices=["debug", "info", "warning", "error"])
    parser.add_argument(
        "--log-file",
        default=os.path.join(default_config_dir(), "onyx.log"),
        help="Log file; the terminal is in raw mode so logs never go to stderr",
    )
    return parser.parse_args(argv)


def setup_logging(level: str, log_file: str) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        filename=log_file,
    )


def build_engine(config_path: str) -> SessionEngine:
    """Load config and backend; a missing API key degrades to a notice."""
    config = load_config(config_path)
    engine = SessionEngine(config, config_path=config_path)
    try:
        config.validate_credentials(config_path)
        engine.backend = create_backend(config)
    except MissingApiKeyError as e:
        logger.warning("%s", e)
        engine.add_message(Message.assistant(NO_API_KEY_WELCOME.format(path=config_path)))
    return engine


async def _run(config_path: str) -> None:
    engine = build_engine(config_path)
    terminal = ProcessTerminal()
    terminal.set_title("Onyx Chat")
    app = ChatApp(engine, terminal)
    await app.run()


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    config_path = args.config or default_config_path()

    try:
        asyncio.run(_run(config_path))
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
