from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4

from .errors import ErrorCode, PromptBankError
from .template import Substitutions, extract_variables, fill_template

BANK_VERSION = "1.0"

STANDARD_CATEGORIES = ("system", "skill", "agent", "role", "task", "template")
CUSTOM_PREFIX = "custom:"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return str(uuid4())[:8]


_MISSING = object()
_EXTRA_FRACTION = re.compile(r"(\.\d{6})\d+")


def _field(data: dict, key: str, default=_MISSING) -> str:
    value = data[key] if default is _MISSING else data.get(key, default)
    if not isinstance(value, str):
        raise PromptBankError.parse_error(f"'{key}' must be a string")
    return value


def _timestamp(data: dict, key: str, default=_MISSING) -> str:
    """Return the ISO 8601 string at key unchanged, after checking it parses."""
    value = _field(data, key, default)
    # fromisoformat on 3.10 rejects "Z" and sub-microsecond digits
    normalized = _EXTRA_FRACTION.sub(r"\1", value)
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    try:
        datetime.fromisoformat(normalized)
    except ValueError as e:
        raise PromptBankError.parse_error(f"'{key}' is not an ISO 8601 timestamp: {value}") from e
    return value


@dataclass(frozen=True)
class Category:
    """One of the standard tags, or a custom tag carrying its own name."""

    name: str
    custom: bool = False

    @classmethod
    def parse(cls, value: str) -> Category:
        lowered = value.lower()
        if lowered in STANDARD_CATEGORIES:
            return cls(lowered)
        if lowered.startswith(CUSTOM_PREFIX):
            return cls(lowered[len(CUSTOM_PREFIX):], custom=True)
        raise PromptBankError.invalid_category(lowered)

    def __str__(self) -> str:
        if self.custom:
            return f"{CUSTOM_PREFIX}{self.name}"
        return self.name


@dataclass
class Prompt:
    id: str
    name: str
    category: Category
    description: str
    content: str
    tags: list[str] = field(default_factory=list)
    variables: list[str] = field(default_factory=list)
    created_at: str = field(default_factory=_now)
    updated_at: str = field(default_factory=_now)

    @classmethod
    def create(
        cls,
        name: str,
        category: Category,
        description: str,
        content: str,
        tags: list[str] | None = None,
    ) -> Prompt:
        now = _now()
        return cls(
            id=_new_id(),
            name=name,
            category=category,
            description=description,
            content=content,
            tags=list(tags or []),
            variables=extract_variables(content),
            created_at=now,
            updated_at=now,
        )

    def update_content(self, content: str) -> None:
        self.content = content
        self.variables = extract_variables(content)
        self.updated_at = _now()

    def render(self, substitutions: Substitutions) -> str:
        return fill_template(self.content, substitutions)

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on name, description, tags or content."""
        q = query.lower()
        return (
            q in self.name.lower()
            or q in self.description.lower()
            or any(q in tag.lower() for tag in self.tags)
            or q in self.content.lower()
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": str(self.category),
            "description": self.description,
            "content": self.content,
            "tags": self.tags,
            "variables": self.variables,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Prompt:
        if not isinstance(data, dict):
            raise PromptBankError.parse_error("malformed prompt record: expected an object")
        try:
            content = _field(data, "content")
            created_at = _timestamp(data, "created_at")
            tags = data.get("tags", [])
            if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
                raise PromptBankError.parse_error("'tags' must be a list of strings")
            return cls(
                id=_field(data, "id"),
                name=_field(data, "name"),
                category=Category.parse(_field(data, "category")),
                description=_field(data, "description", ""),
                content=content,
                tags=list(tags),
                # derived from content, never trusted from the file
                variables=extract_variables(content),
                created_at=created_at,
                updated_at=_timestamp(data, "updated_at", created_at),
            )
        except PromptBankError as e:
            if e.code is ErrorCode.PARSE_ERROR:
                raise
            raise PromptBankError.parse_error(e.message) from e
        except KeyError as e:
            raise PromptBankError.parse_error(f"malformed prompt record: missing {e}") from e


@dataclass
class PromptBank:
    prompts: list[Prompt] = field(default_factory=list)
    version: str = BANK_VERSION

    def lookup(self, key: str) -> Prompt | None:
        """Return the first prompt with id == key, else the first with name == key."""
        for prompt in self.prompts:
            if prompt.id == key:
                return prompt
        for prompt in self.prompts:
            if prompt.name == key:
                return prompt
        return None

    def get(self, key: str) -> Prompt:
        prompt = self.lookup(key)
        if prompt is None:
            raise PromptBankError.prompt_not_found(key)
        return prompt

    def add(self, prompt: Prompt) -> None:
        self.prompts.append(prompt)

    def delete(self, key: str) -> bool:
        """Remove every prompt whose id or name equals key."""
        before = len(self.prompts)
        self.prompts = [p for p in self.prompts if p.id != key and p.name != key]
        return len(self.prompts) != before

    def filter_by_category(self, category: Category) -> list[Prompt]:
        return [p for p in self.prompts if p.category == category]

    def search(self, query: str) -> list[Prompt]:
        return [p for p in self.prompts if p.matches(query)]

    def merge(self, other: PromptBank) -> int:
        """Append prompts from other whose id is not already present."""
        known = {p.id for p in self.prompts}
        added = 0
        for prompt in other.prompts:
            if prompt.id in known:
                continue
            self.add(prompt)
            known.add(prompt.id)
            added += 1
        return added

    def category_counts(self) -> dict[str, int]:
        return dict(Counter(str(p.category) for p in self.prompts))

    def to_dict(self) -> dict:
        return {
            "prompts": [p.to_dict() for p in self.prompts],
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict) -> PromptBank:
        if not isinstance(data, dict) or not isinstance(data.get("prompts"), list):
            raise PromptBankError.parse_error("expected an object with a 'prompts' list")
        return cls(
            prompts=[Prompt.from_dict(item) for item in data["prompts"]],
            version=str(data.get("version", BANK_VERSION)),
        )
