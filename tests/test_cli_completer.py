"""Tests for KekUploadCompleter."""

import pytest
from pathlib import Path
from unittest.mock import patch

from prompt_toolkit.document import Document

from cli.completer import KekUploadCompleter
from cli.constants import COMMANDS


@pytest.fixture
def workdir(tmp_path):
    """
    Create a working directory with files, a subdirectory and a hidden file.

    Returns:
        Path to the temporary working directory
    """
    (tmp_path / "document.txt").write_text("content")
    (tmp_path / "data.csv").write_text("content")
    (tmp_path / ".secret").write_text("content")
    videos = tmp_path / "videos"
    videos.mkdir()
    (videos / "holiday.mp4").write_text("content")
    (videos / "recital.mp4").write_text("content")
    return tmp_path


@pytest.fixture
def completer(workdir):
    """Create a KekUploadCompleter rooted at the working directory."""
    return KekUploadCompleter(base_dir=workdir)


def get_completions_list(completer, text):
    """Helper to get list of completion texts from completer."""
    doc = Document(text, len(text))
    return [c.text for c in completer.get_completions(doc, None)]


class TestCommandCompletion:
    """Tests for command name completion."""

    def test_empty_input_shows_all_commands(self, completer):
        """Empty input should suggest all commands."""
        completions = get_completions_list(completer, "")
        for cmd in COMMANDS:
            assert cmd in completions

    def test_partial_command_filters(self, completer):
        """Partial command should filter to matching commands."""
        completions = get_completions_list(completer, "c")
        assert completions == ["cancel", "clear"]

    def test_command_completion_case_insensitive(self, completer):
        """Command completion should be case insensitive."""
        assert get_completions_list(completer, "UP") == ["upload"]


class TestFileCompletion:
    """Tests for local path completion in upload command."""

    def test_upload_lists_working_directory(self, completer):
        """After 'upload ', should show visible entries of the working directory."""
        completions = get_completions_list(completer, "upload ")
        assert completions == ["data.csv", "document.txt", "videos/"]

    def test_hidden_entries_need_dot_prefix(self, completer):
        """Hidden files are offered only when the partial starts with '.'."""
        assert ".secret" not in get_completions_list(completer, "upload ")
        assert get_completions_list(completer, "upload .s") == [".secret"]

    def test_partial_name_filters(self, completer):
        """Partial name should filter matching entries."""
        assert get_completions_list(completer, "upload d") == ["data.csv", "document.txt"]

    def test_descends_into_subdirectory(self, completer):
        """Partial path with a directory part completes inside that directory."""
        completions = get_completions_list(completer, "upload videos/h")
        assert completions == ["videos/holiday.mp4"]

    def test_start_position_replaces_partial(self, completer):
        """Completion should replace the whole partial path."""
        doc = Document("upload videos/r", len("upload videos/r"))
        completion = next(iter(completer.get_completions(doc, None)))
        assert completion.start_position == -len("videos/r")

    def test_excludes_already_typed_files(self, completer):
        """Files already in command should not be suggested again."""
        completions = get_completions_list(completer, "upload document.txt ")
        assert "document.txt" not in completions
        assert "data.csv" in completions

    def test_missing_directory_yields_nothing(self, completer):
        """Unknown directory part should produce no completions."""
        assert get_completions_list(completer, "upload nowhere/x") == []

    def test_other_commands_get_no_path_completion(self, completer):
        """Non-upload commands should not trigger path completion."""
        assert get_completions_list(completer, "download ") == []
        assert get_completions_list(completer, "cancel ") == []

    def test_defaults_to_current_directory(self, workdir):
        """Without base_dir, relative paths resolve against cwd."""
        with patch.object(Path, "cwd", return_value=workdir):
            completions = get_completions_list(KekUploadCompleter(), "upload doc")
        assert completions == ["document.txt"]
