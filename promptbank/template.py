import re
from typing import Iterable, Mapping, Union

# Anything between "{{" and the next "}}"; no trimming, no escaping.
VARIABLE_PATTERN = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)

Substitutions = Union[Mapping[str, str], Iterable[tuple[str, str]]]


def extract_variables(template: str) -> list[str]:
    """Extract unique variable names from a template string, in order of first appearance."""
    seen: set[str] = set()
    result: list[str] = []
    for match in VARIABLE_PATTERN.finditer(template):
        name = match.group(1)
        if name and name not in seen:
            seen.add(name)
            result.append(name)
    return result


def _as_values(substitutions: Substitutions) -> dict[str, str]:
    pairs = substitutions.items() if isinstance(substitutions, Mapping) else substitutions
    values: dict[str, str] = {}
    for key, value in pairs:
        # first value supplied for a key wins
        values.setdefault(key, value)
    return values


def fill_template(template: str, substitutions: Substitutions) -> str:
    """Replace every literal {{key}} with its supplied value in a single pass.

    Replacement values are not scanned again, so a value containing
    ``{{other}}`` is emitted as-is. Placeholders without a value are left
    untouched.
    """
    values = _as_values(substitutions)
    if not values:
        return template

    # Longest keys first so overlapping literals prefer the most specific one.
    keys = sorted(values, key=len, reverse=True)
    pattern = re.compile("|".join(re.escape("{{" + key + "}}") for key in keys))

    def replacer(match: re.Match) -> str:
        return values[match.group(0)[2:-2]]

    return pattern.sub(replacer, template)


def missing_variables(template: str, substitutions: Substitutions) -> list[str]:
    """Return variable names required by the template but missing from substitutions."""
    provided = _as_values(substitutions)
    return [v for v in extract_variables(template) if v not in provided]
