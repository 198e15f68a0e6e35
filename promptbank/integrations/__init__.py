"""Integrations with Claude Code and the community prompt index."""

from .claude import InstallMode, install_prompt, list_installed, remove_installed
from .community import (
    fetch_index,
    fetch_prompt,
    find_entry,
    repo_url,
    search_index,
    to_local_prompt,
)

__all__ = [
    "InstallMode",
    "install_prompt",
    "list_installed",
    "remove_installed",
    "fetch_index",
    "fetch_prompt",
    "find_entry",
    "search_index",
    "to_local_prompt",
    "repo_url",
]
