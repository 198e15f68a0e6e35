"""Runtime configuration: where the prompt bank and Claude Code live."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .errors import PromptBankError

APP_NAME = "promptbank"
DATA_FILE = "prompts.json"
COMMUNITY_REPO = "ff-vivek/promptbank-community"
COMMUNITY_URL = f"https://raw.githubusercontent.com/{COMMUNITY_REPO}/main"

DATA_FILE_ENV = "PROMPTBANK_DATA_FILE"
CLAUDE_DIR_ENV = "CLAUDE_CONFIG_DIR"
COMMUNITY_URL_ENV = "PROMPTBANK_COMMUNITY_URL"


def _home() -> Path:
    try:
        return Path.home()
    except RuntimeError as e:
        raise PromptBankError.storage("Could not determine home directory") from e


@dataclass(frozen=True)
class Config:
    data_file: Path
    claude_dir: Path
    community_url: str = COMMUNITY_URL

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        data_file: Path | None = None,
        claude_dir: Path | None = None,
    ) -> Config:
        """Resolve configuration from explicit values, then environment, then defaults.

        Args:
            environ: Environment mapping (defaults to os.environ).
            data_file: Explicit prompt bank path, e.g. from --data-file.
            claude_dir: Explicit Claude Code directory, e.g. from --claude-dir.
        """
        env = os.environ if environ is None else environ

        if data_file is None and env.get(DATA_FILE_ENV):
            data_file = Path(env[DATA_FILE_ENV])
        if claude_dir is None and env.get(CLAUDE_DIR_ENV):
            claude_dir = Path(env[CLAUDE_DIR_ENV])

        if data_file is None or claude_dir is None:
            home = _home()
            data_file = data_file or home / ".config" / APP_NAME / DATA_FILE
            claude_dir = claude_dir or home / ".claude"

        return cls(
            data_file=Path(data_file).expanduser(),
            claude_dir=Path(claude_dir).expanduser(),
            community_url=env.get(COMMUNITY_URL_ENV) or COMMUNITY_URL,
        )
