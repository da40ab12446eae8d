"""
Trivia Quiz - entry point.

Runs the quiz on the local terminal, or as a TCP server with one session
per connection. Settings come from config.json, then the QUIZ_HOST,
QUIZ_PORT and QUIZ_DATABASE environment variables, then the command line.

Usage:
    trivia-quiz                      # play on this terminal
    trivia-quiz --serve --port 8080  # accept remote players
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config_manager import ConfigManager
from .quiz_store import QuizStore
from .server import QuizServer, run_local_session


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trivia-quiz",
        description="Interactive trivia quiz for the terminal or over TCP.",
    )
    parser.add_argument("--serve", action="store_true", help="Accept remote sessions instead of using this terminal.")
    parser.add_argument("--host", help="Address to listen on in server mode.")
    parser.add_argument("--port", type=int, help="Port to listen on in server mode.")
    parser.add_argument("--db", help="Path of the JSON quiz database.")
    parser.add_argument("--config", default="config.json", help="Path of the JSON config file.")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output.")
    return parser


def load_config(args: argparse.Namespace) -> ConfigManager:
    """Build the configuration from file, environment and command line."""
    config_manager = ConfigManager()
    problems = config_manager.load_file(Path(args.config))
    problems += config_manager.apply_environment()

    results = []
    if args.host is not None:
        results.append(config_manager.set_host(args.host))
    if args.port is not None:
        results.append(config_manager.set_port(args.port))
    if args.db is not None:
        results.append(config_manager.set_database(args.db))
    if args.no_color:
        results.append(config_manager.set_color(False))
    problems += [result['user_message'] for result in results if not result['success']]

    for problem in problems:
        print(problem, file=sys.stderr)
    return config_manager


def setup_logging_from_config(config_manager: ConfigManager, serve: bool) -> None:
    """Set up logging based on configuration."""
    log_level = getattr(logging, config_manager.get_log_level())
    log_directory = Path(config_manager.get_log_directory())

    # Create logs directory
    log_directory.mkdir(parents=True, exist_ok=True)

    handlers: List[logging.Handler] = [
        logging.FileHandler(log_directory / "trivia_quiz.log", encoding='utf-8')
    ]
    # The local console keeps stderr quiet so log lines do not break the prompt
    if serve:
        handlers.append(logging.StreamHandler())

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


async def run_with_config(config_manager: ConfigManager, serve: bool) -> None:
    """Open the store and run either the server or the local session."""
    logging.getLogger(__name__).info(config_manager.get_settings_summary())
    store = QuizStore(config_manager.get_database())
    if config_manager.get_seed_samples():
        await store.seed_if_empty()

    if serve:
        server = QuizServer(store, config_manager)
        await server.start()
        print(f"🎯 Trivia quiz server listening on {', '.join(server.addresses)}")
        try:
            await server.serve_forever()
        finally:
            await server.close()
    else:
        await run_local_session(store, config_manager)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config_manager = load_config(args)
    setup_logging_from_config(config_manager, args.serve)
    logger = logging.getLogger(__name__)

    try:
        asyncio.run(run_with_config(config_manager, args.serve))
    except KeyboardInterrupt:
        print("\n👋 Trivia quiz stopped by user")
    except Exception as e:
        logger.exception("Trivia quiz failed")
        print(f"❌ Failed to run trivia quiz: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
