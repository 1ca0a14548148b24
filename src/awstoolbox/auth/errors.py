"""Violation taxonomy and exceptions raised by the auth package."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .config import KEYS


class ViolationKind(str, Enum):
    """Kinds of configuration problem detected by the resolver."""

    CONFLICTING_STRATEGY = "conflicting_strategy"
    INCOMPLETE_PAIR = "incomplete_pair"
    MALFORMED_VALUE = "malformed_value"
    OUT_OF_RANGE = "out_of_range"
    DANGLING_DEPENDENCY = "dangling_dependency"


@dataclass(frozen=True)
class Violation:
    """A single validation failure tied to the offending field(s).

    Attributes:
        kind: What went wrong.
        fields: Field names involved, in declaration order.
        message: Human-readable explanation.
    """

    kind: ViolationKind
    fields: tuple[str, ...]
    message: str

    @property
    def keys(self) -> tuple[str, ...]:
        """The configuration keys (``assume-role-arn``) for :attr:`fields`."""
        return tuple(KEYS.get(f, f) for f in self.fields)

    def __str__(self) -> str:
        return f"[{self.kind.value}] {', '.join(self.keys)}: {self.message}"


class ConfigurationError(ValueError):
    """Raised when a parameter set does not resolve to exactly one strategy."""

    def __init__(self, violations: Iterable[Violation]) -> None:
        self.violations: tuple[Violation, ...] = tuple(violations)
        lines = "\n".join(f"  - {v}" for v in self.violations)
        super().__init__(
            f"Invalid AWS credential configuration "
            f"({len(self.violations)} problem(s)):\n{lines}"
        )


class CredentialProviderError(RuntimeError):
    """Raised when a backend fails to build credentials for a valid strategy.

    Examples are a missing credentials file or an STS call being rejected.
    These are never reported as :class:`ConfigurationError`.
    """
