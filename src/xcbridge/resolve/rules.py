"""
Declarative requirement rules attached to a tool.

A tool declares an ordered tuple of rules at registration time:
- AllOf: every key must be present in the resolved parameters
- OneOf: at least one key must be present (exclusivity is not checked here)
- ExclusivePair: two keys that must not both come from the caller; also
  decides which session defaults get pruned during the merge

"Present" means the key exists with a value other than None.

Rules are frozen dataclasses and never change after declaration.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Union


def is_present(params: Mapping[str, Any], key: str) -> bool:
    """Whether key exists in params with a non-None value."""
    return params.get(key) is not None


@dataclass(frozen=True)
class AllOf:
    """
    Every key must be present.

    Attributes:
        keys: Keys that must all be present
        message: Text surfaced to the caller when the rule fails
    """

    keys: tuple[str, ...]
    message: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", tuple(self.keys))
        if not self.keys:
            msg = "AllOf needs at least one key"
            raise ValueError(msg)
        if not self.message:
            verb = "is" if len(self.keys) == 1 else "are"
            object.__setattr__(self, "message", f"{', '.join(self.keys)} {verb} required")

    def unmet(self, params: Mapping[str, Any]) -> list[str]:
        """Keys that are missing; empty when the rule holds."""
        return [key for key in self.keys if not is_present(params, key)]


@dataclass(frozen=True)
class OneOf:
    """
    At least one key must be present.

    Attributes:
        keys: Candidate keys, in order of preference
        message: Text surfaced to the caller when the rule fails
    """

    keys: tuple[str, ...]
    message: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", tuple(self.keys))
        if not self.keys:
            msg = "OneOf needs at least one key"
            raise ValueError(msg)
        if not self.message:
            object.__setattr__(self, "message", f"Provide one of: {', '.join(self.keys)}")

    def unmet(self, params: Mapping[str, Any]) -> list[str]:
        """The preferred key to suggest when none is present; else empty."""
        if any(is_present(params, key) for key in self.keys):
            return []
        return [self.keys[0]]


@dataclass(frozen=True)
class ExclusivePair:
    """Two keys that may not both be supplied by the caller."""

    first: str
    second: str

    def __post_init__(self) -> None:
        if self.first == self.second:
            msg = f"ExclusivePair needs two different keys, got {self.first!r} twice"
            raise ValueError(msg)

    @property
    def keys(self) -> tuple[str, str]:
        return (self.first, self.second)


RequirementRule = Union[AllOf, OneOf, ExclusivePair]


def pairs_from(
    rules: tuple[RequirementRule, ...],
    exclusive_pairs: tuple[tuple[str, str], ...] = (),
) -> tuple[tuple[str, str], ...]:
    """
    Every exclusive pair a tool declares, from its rules and its factory list.

    Duplicates are dropped; declaration order is kept.
    """
    seen: list[tuple[str, str]] = []
    declared = [rule.keys for rule in rules if isinstance(rule, ExclusivePair)]
    for first, second in [*declared, *exclusive_pairs]:
        if (first, second) not in seen and (second, first) not in seen:
            seen.append((first, second))
    return tuple(seen)
