"""REPL with prompt_toolkit for user interaction."""

import os
import sys
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout

from common.logging_config import get_logger
from cli.commands import (
    TransferSession,
    get_session,
    handle_cancel,
    handle_download,
    handle_jobs,
    handle_upload,
)
from cli.completer import KekUploadCompleter
from cli.constants import (
    HELP_TEXT,
    LOGO,
    PROMPT_TEXT,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
from cli.models import (
    CancelCommand,
    DownloadCommand,
    JobsCommand,
    UploadCommand,
)
from cli.parser import ParseError, parse_command

logger = get_logger(__name__)


def clear_screen() -> None:
    """Clear the terminal screen (cross-platform)."""
    if sys.platform == "win32":
        os.system("cls")
    else:
        os.system("clear")


def show_welcome() -> None:
    """Display logo and welcome text."""
    print(LOGO)
    print(WELCOME_TITLE)
    print(WELCOME_HELP)


async def dispatch_command(cmd_obj, session=None) -> str:
    """Dispatch parsed command to appropriate handler."""
    if isinstance(cmd_obj, UploadCommand):
        return handle_upload(cmd_obj, session)
    elif isinstance(cmd_obj, DownloadCommand):
        return await handle_download(cmd_obj, session)
    elif isinstance(cmd_obj, CancelCommand):
        return await handle_cancel(cmd_obj, session)
    elif isinstance(cmd_obj, JobsCommand):
        return handle_jobs(cmd_obj, session)
    else:
        return f"Unknown command type: {type(cmd_obj)}"


async def repl_loop(transfer_session: Optional[TransferSession] = None) -> None:
    """Start interactive REPL; uploads keep running while the prompt waits for input."""
    session: PromptSession = PromptSession(
        completer=KekUploadCompleter(), history=InMemoryHistory(), style=STYLE
    )

    clear_screen()
    show_welcome()

    if transfer_session is None:
        transfer_session = get_session()
    try:
        with patch_stdout():
            while True:
                try:
                    user_input = await session.prompt_async([("class:prompt", PROMPT_TEXT)])
                    command = user_input.strip()

                    if not command:
                        continue

                    if command == "exit":
                        print("Goodbye!")
                        break

                    if command == "help":
                        print(HELP_TEXT)
                        continue

                    if command == "clear":
                        clear_screen()
                        show_welcome()
                        continue

                    cmd_obj = parse_command(user_input)
                    result = await dispatch_command(cmd_obj, transfer_session)
                    print(result)

                except ParseError as e:
                    print(f"Error: {e}")
                except KeyboardInterrupt:
                    continue
                except EOFError:
                    print("\nGoodbye!")
                    break
    finally:
        await transfer_session.close()
