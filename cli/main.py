"""CLI entry point."""

import asyncio
import os
import sys
from pathlib import Path
from typing import List, Optional

from common.logging_config import setup_logging
from cli.commands import TransferSession
from cli.config import Config
from cli.repl import repl_loop


def _pop_option(argv: List[str], name: str) -> Optional[str]:
    """Remove '--name value' from argv and return value, or None if absent."""
    if name not in argv:
        return None
    index = argv.index(name)
    if index + 1 >= len(argv):
        raise SystemExit(f"{name} requires a value")
    value = argv[index + 1]
    del argv[index:index + 2]
    return value


def main() -> None:
    """Entry point for CLI: kekupload [--debug] [--config PATH]."""
    debug = '--debug' in sys.argv
    log_level = 'DEBUG' if debug else os.getenv('LOG_LEVEL', 'WARNING')

    logger = setup_logging('cli', log_level=log_level)
    setup_logging('transfer', log_level=log_level)

    if debug:
        logger.info("Debug logging enabled")
        sys.argv.remove('--debug')

    config_path = _pop_option(sys.argv, '--config')
    session = TransferSession(Config(Path(config_path).expanduser())) if config_path else None

    logger.info(f"CLI starting [config={config_path or 'default'}]")
    try:
        asyncio.run(repl_loop(session))
    except Exception as e:
        logger.error(f"CLI error: {e}", exc_info=True)
        raise
    finally:
        logger.info("CLI exiting")


if __name__ == "__main__":
    main()
