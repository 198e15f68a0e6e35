"""Install prompts into Claude Code as skills or slash commands."""

from __future__ import annotations

import logging
import re
import shutil
from enum import Enum
from pathlib import Path

from ..errors import PromptBankError
from ..models import Prompt

logger = logging.getLogger(__name__)

SKILL_FILE = "SKILL.md"
COMMAND_SUFFIX = ".md"
ALLOWED_TOOLS = "Read, Write, Edit, Bash, Glob, Grep, Task"

NAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


class InstallMode(Enum):
    SKILL = "skill"
    COMMAND = "command"


def _validate_name(name: str) -> None:
    if not NAME_PATTERN.match(name):
        raise PromptBankError.invalid_name(name)


def _require_claude_dir(claude_dir: Path) -> Path:
    path = Path(claude_dir)
    if not path.is_dir():
        raise PromptBankError.storage(
            "Claude directory not found. Is Claude Code installed?"
        )
    return path


def argument_hint(prompt: Prompt) -> str:
    """Build "<a> <b>" from the prompt's variables, or "" if it has none."""
    if not prompt.variables:
        return ""
    return "<" + "> <".join(prompt.variables) + ">"


def render_skill(prompt: Prompt, name: str | None = None) -> str:
    """SKILL.md body: YAML front matter followed by the prompt content."""
    lines = [
        "---",
        f"name: {name or prompt.name}",
        f"description: {prompt.description}",
    ]
    hint = argument_hint(prompt)
    if hint:
        lines.append(f'argument-hint: "{hint}"')
    lines.append(f"allowed-tools: {ALLOWED_TOOLS}")
    lines.append("---")
    return "\n".join(lines) + "\n\n" + prompt.content


def render_command(prompt: Prompt) -> str:
    """Slash command body: description front matter followed by the prompt content."""
    lines = ["---", f"description: {prompt.description}"]
    hint = argument_hint(prompt)
    if hint:
        lines.append(f'argument-hint: "{hint}"')
    lines.append("---")
    return "\n".join(lines) + "\n\n" + prompt.content


def install_prompt(
    prompt: Prompt,
    mode: InstallMode,
    claude_dir: Path,
    name: str | None = None,
) -> Path:
    """Write a prompt into the Claude Code directory.

    Args:
        prompt: Prompt to install.
        mode: Install as a skill directory or a single command file.
        claude_dir: Claude Code configuration directory.
        name: Install name, defaults to the prompt name.

    Returns:
        Path of the written file.
    """
    root = _require_claude_dir(claude_dir)
    install_name = name or prompt.name
    _validate_name(install_name)

    try:
        if mode is InstallMode.SKILL:
            skill_dir = root / "skills" / install_name
            skill_dir.mkdir(parents=True, exist_ok=True)
            path = skill_dir / SKILL_FILE
            path.write_text(render_skill(prompt, install_name), encoding="utf-8")
        else:
            commands_dir = root / "commands"
            commands_dir.mkdir(parents=True, exist_ok=True)
            path = commands_dir / f"{install_name}{COMMAND_SUFFIX}"
            path.write_text(render_command(prompt), encoding="utf-8")
    except OSError as e:
        raise PromptBankError.io_error(str(e)) from e

    logger.debug(f"Installed {prompt.id} as {mode.value} at {path}")
    return path


def list_installed(
    claude_dir: Path,
) -> tuple[list[str], list[str]]:
    """List installed skills and commands.

    Args:
        claude_dir: Claude Code configuration directory.

    Returns:
        (skill names, command names), each sorted.
    """
    root = _require_claude_dir(claude_dir)
    skills: list[str] = []
    commands: list[str] = []

    try:
        skills_dir = root / "skills"
        if skills_dir.is_dir():
            skills = [p.name for p in skills_dir.iterdir() if p.is_dir()]

        commands_dir = root / "commands"
        if commands_dir.is_dir():
            commands = [
                p.stem
                for p in commands_dir.iterdir()
                if p.is_file() and p.suffix == COMMAND_SUFFIX
            ]
    except OSError as e:
        raise PromptBankError.io_error(str(e)) from e

    return sorted(skills), sorted(commands)


def remove_installed(
    name: str,
    claude_dir: Path,
) -> bool:
    """Remove an installed skill and/or command by name.

    Args:
        name: Installed name.
        claude_dir: Claude Code configuration directory.

    Returns:
        True if a skill directory or command file was removed.
    """
    root = _require_claude_dir(claude_dir)
    _validate_name(name)
    removed = False

    try:
        skill_dir = root / "skills" / name
        if skill_dir.is_dir():
            shutil.rmtree(skill_dir)
            removed = True

        command_file = root / "commands" / f"{name}{COMMAND_SUFFIX}"
        if command_file.is_file():
            command_file.unlink()
            removed = True
    except OSError as e:
        raise PromptBankError.io_error(str(e)) from e

    if removed:
        logger.debug(f"Removed installed prompt {name} from {root}")
    return removed
