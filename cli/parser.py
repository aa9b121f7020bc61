"""Command parser for CLI input."""

import shlex

from cli.models import (
    CancelCommand,
    CommandRequest,
    DownloadCommand,
    JobsCommand,
    UploadCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object (one of Upload/Download/Cancel/Jobs)

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]

    if command_name == "upload":
        return _parse_upload(tokens[1:])
    elif command_name == "download":
        return _parse_download(tokens[1:])
    elif command_name == "cancel":
        return _parse_cancel(tokens[1:])
    elif command_name == "jobs":
        return _parse_jobs(tokens[1:])
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload <path> [<path> ...]' command."""
    if not args:
        raise ParseError("upload requires at least one file")

    return UploadCommand(file_list=tuple(args))


def _parse_download(args: list[str]) -> DownloadCommand:
    """Parse 'download <id> [output_path]' command."""
    if not 1 <= len(args) <= 2:
        raise ParseError("download requires 1 or 2 arguments: <id> [output_path]")

    file_id = args[0]
    output_path = args[1] if len(args) > 1 else None

    return DownloadCommand(file_id=file_id, output_path=output_path)


def _parse_cancel(args: list[str]) -> CancelCommand:
    """Parse 'cancel <job_id>' command."""
    if len(args) != 1:
        raise ParseError("cancel requires exactly 1 argument: <job_id>")

    try:
        job_id = int(args[0])
    except ValueError:
        raise ParseError(f"Invalid job id: {args[0]}")

    if job_id < 0:
        raise ParseError(f"Invalid job id: {args[0]}")

    return CancelCommand(job_id=job_id)


def _parse_jobs(args: list[str]) -> JobsCommand:
    """Parse 'jobs' command."""
    if args:
        raise ParseError("jobs takes no arguments")

    return JobsCommand()
