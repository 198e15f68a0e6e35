"""Shared prompts published in the community repository."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import requests

from ..config import COMMUNITY_REPO, COMMUNITY_URL
from ..errors import PromptBankError
from ..models import Category, Prompt

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10


@dataclass
class CommunityEntry:
    name: str
    category: str
    description: str
    author: str
    path: str
    tags: list[str] = field(default_factory=list)
    downloads: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> CommunityEntry:
        return cls(
            name=data["name"],
            category=data["category"],
            description=data.get("description", ""),
            author=data.get("author", ""),
            path=data["path"],
            tags=list(data.get("tags", [])),
            downloads=int(data.get("downloads", 0)),
        )


@dataclass
class CommunityIndex:
    version: str
    prompts: list[CommunityEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> CommunityIndex:
        return cls(
            version=str(data.get("version", "")),
            prompts=[CommunityEntry.from_dict(p) for p in data.get("prompts", [])],
        )


@dataclass
class CommunityPrompt:
    name: str
    category: str
    description: str
    content: str
    tags: list[str] = field(default_factory=list)
    variables: list[str] = field(default_factory=list)
    author: str = ""
    version: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> CommunityPrompt:
        return cls(
            name=data["name"],
            category=data["category"],
            description=data.get("description", ""),
            content=data["content"],
            tags=list(data.get("tags", [])),
            variables=list(data.get("variables", [])),
            author=data.get("author", ""),
            version=str(data.get("version", "")),
        )


def _get_json(url: str, what: str) -> dict:
    logger.debug(f"GET {url}")
    try:
        response = requests.get(url, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as e:
        raise PromptBankError.network(f"Failed to fetch {what}: {e}") from e
    try:
        data = response.json()
    except ValueError as e:
        raise PromptBankError.parse_error(f"Failed to parse {what}: {e}") from e
    if not isinstance(data, dict):
        raise PromptBankError.parse_error(f"Failed to parse {what}: expected an object")
    return data


def fetch_index(base_url: str = COMMUNITY_URL) -> CommunityIndex:
    data = _get_json(f"{base_url.rstrip('/')}/index.json", "index")
    try:
        return CommunityIndex.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise PromptBankError.parse_error(f"Failed to parse index: {e}") from e


def fetch_prompt(path: str, base_url: str = COMMUNITY_URL) -> CommunityPrompt:
    data = _get_json(f"{base_url.rstrip('/')}/{path.lstrip('/')}", "prompt")
    try:
        return CommunityPrompt.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise PromptBankError.parse_error(f"Failed to parse prompt: {e}") from e


def search_index(index: CommunityIndex, query: str) -> list[CommunityEntry]:
    """Case-insensitive substring search over name, description, tags and category."""
    q = query.lower()
    return [
        entry
        for entry in index.prompts
        if q in entry.name.lower()
        or q in entry.description.lower()
        or any(q in tag.lower() for tag in entry.tags)
        or q in entry.category.lower()
    ]


def find_entry(index: CommunityIndex, name: str) -> CommunityEntry:
    for entry in index.prompts:
        if entry.name == name:
            return entry
    raise PromptBankError.prompt_not_found(name)


def to_local_prompt(community_prompt: CommunityPrompt) -> Prompt:
    """Convert a downloaded prompt into a new local prompt with a fresh id."""
    return Prompt.create(
        name=community_prompt.name,
        category=Category.parse(community_prompt.category),
        description=community_prompt.description,
        content=community_prompt.content,
        tags=community_prompt.tags,
    )


def repo_url() -> str:
    return f"https://github.com/{COMMUNITY_REPO}"
