"""Tests for the install and community CLI commands."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from promptbank.cli import cli
from promptbank.errors import PromptBankError
from promptbank.integrations.community import CommunityIndex, CommunityPrompt
from promptbank.models import Category, Prompt, PromptBank
from promptbank.storage import Storage


@pytest.fixture
def claude_dir(tmp_path):
    path = tmp_path / ".claude"
    path.mkdir()
    return path


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "prompts.json"
    bank = PromptBank()
    bank.add(
        Prompt.create(
            name="review",
            category=Category.parse("skill"),
            description="Review code",
            content="Review {{file}}",
        )
    )
    Storage(path).save(bank)
    return path


@pytest.fixture
def run(data_file, claude_dir):
    runner = CliRunner()

    def invoke(*args):
        return runner.invoke(
            cli, ["--data-file", str(data_file), "--claude-dir", str(claude_dir), *args]
        )

    return invoke


class TestInstall:
    """Tests for install / installed / uninstall."""

    def test_install_skill(self, run, claude_dir):
        result = run("install", "review")

        assert result.exit_code == 0
        assert "as skill" in result.output
        assert (claude_dir / "skills" / "review" / "SKILL.md").exists()

    def test_install_command(self, run, claude_dir):
        result = run("install", "review", "--as", "command", "--name", "rev")

        assert result.exit_code == 0
        assert (claude_dir / "commands" / "rev.md").exists()

    def test_install_unknown_prompt(self, run):
        result = run("install", "nope")
        assert result.exit_code == 1
        assert "Prompt not found" in result.output

    def test_install_without_claude_dir(self, data_file, tmp_path):
        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "--data-file", str(data_file),
                "--claude-dir", str(tmp_path / "missing"),
                "install", "review",
            ],
        )
        assert result.exit_code == 1
        assert "Claude directory not found" in result.output

    def test_installed_lists(self, run):
        run("install", "review")
        run("install", "review", "--as", "command")

        result = run("installed")

        assert result.exit_code == 0
        assert "review" in result.output
        assert "/review" in result.output

    def test_installed_without_home(self, run):
        with patch("pathlib.Path.home", side_effect=RuntimeError("no home")):
            run("install", "review")
            result = run("installed")

        assert result.exit_code == 0
        assert "review" in result.output

    def test_installed_empty(self, run):
        result = run("installed")
        assert result.exit_code == 0
        assert "Nothing installed" in result.output

    def test_uninstall(self, run, claude_dir):
        run("install", "review")

        result = run("uninstall", "review")

        assert result.exit_code == 0
        assert not (claude_dir / "skills" / "review").exists()

    def test_uninstall_not_installed(self, run):
        result = run("uninstall", "review")
        assert result.exit_code == 1
        assert "not found" in result.output


INDEX = CommunityIndex.from_dict(
    {
        "version": "1.0",
        "prompts": [
            {
                "name": "commit-writer",
                "category": "task",
                "description": "Writes commits",
                "author": "bob",
                "path": "prompts/commit-writer.json",
                "tags": ["git"],
                "downloads": 7,
            }
        ],
    }
)


class TestCommunity:
    """Tests for the community group."""

    def test_search(self, run):
        with patch("promptbank.cli.fetch_index", return_value=INDEX):
            result = run("community", "search", "git")
        assert result.exit_code == 0
        assert "commit-writer" in result.output

    def test_search_lists_all_without_query(self, run):
        with patch("promptbank.cli.fetch_index", return_value=INDEX):
            result = run("community", "search")
        assert result.exit_code == 0
        assert "commit-writer" in result.output

    def test_search_no_match(self, run):
        with patch("promptbank.cli.fetch_index", return_value=INDEX):
            result = run("community", "search", "python")
        assert result.exit_code == 0
        assert "No community prompts found" in result.output

    def test_pull(self, run, data_file):
        downloaded = CommunityPrompt(
            name="commit-writer",
            category="task",
            description="Writes commits",
            content="Summarize {{diff}}",
        )
        with (
            patch("promptbank.cli.fetch_index", return_value=INDEX),
            patch("promptbank.cli.fetch_prompt", return_value=downloaded) as mock_fetch,
        ):
            result = run("community", "pull", "commit-writer")

        assert result.exit_code == 0
        assert mock_fetch.call_args.args[0] == "prompts/commit-writer.json"
        prompt = Storage(data_file).load().get("commit-writer")
        assert prompt.variables == ["diff"]

    def test_network_error(self, run):
        with patch(
            "promptbank.cli.fetch_index",
            side_effect=PromptBankError.network("Failed to fetch index: down"),
        ):
            result = run("community", "search")
        assert result.exit_code == 1
        assert "Network error" in result.output

    def test_repo(self, run):
        result = run("community", "repo")
        assert result.exit_code == 0
        assert "github.com" in result.output
