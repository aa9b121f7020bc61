"""Custom completer for KekUpload CLI with local file autocompletion."""

from pathlib import Path
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS


class KekUploadCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Local file path completion for the 'upload' command
    """

    def __init__(self, base_dir: Path | None = None):
        """
        Args:
            base_dir: Directory relative paths are resolved against (default: cwd)
        """
        self.base_dir = base_dir

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        """
        Generate completions based on cursor position and context.

        For the first token, completes command names.
        For 'upload' arguments, completes files and directories.
        """
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        command = tokens[0].lower()
        if command != "upload":
            return

        current_word = "" if is_typing_new_token else tokens[-1]
        already_typed = set(tokens[1:] if is_typing_new_token else tokens[1:-1])

        yield from self._complete_paths(current_word, already_typed)

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_paths(self, partial: str, exclude: set) -> Iterable[Completion]:
        """
        Complete paths inside the directory part of the partial input.

        Directories are offered with a trailing '/', hidden entries only when
        the partial name starts with '.'.
        """
        base_dir = self.base_dir or Path.cwd()
        directory_part, _, name_part = partial.rpartition("/")
        if directory_part or partial.startswith("/"):
            directory = Path(directory_part or "/").expanduser()
            prefix = f"{directory_part}/"
        else:
            directory = Path(".")
            prefix = ""

        if not directory.is_absolute():
            directory = base_dir / directory

        try:
            entries = sorted(directory.iterdir())
        except OSError:
            return

        for entry in entries:
            if entry.name.startswith(".") and not name_part.startswith("."):
                continue
            if not entry.name.startswith(name_part):
                continue
            candidate = f"{prefix}{entry.name}"
            if entry.is_dir():
                yield Completion(f"{candidate}/", start_position=-len(partial), display=f"{entry.name}/")
            elif candidate not in exclude:
                yield Completion(candidate, start_position=-len(partial), display=entry.name)
