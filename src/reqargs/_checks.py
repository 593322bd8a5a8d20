"""Built-in checks implementing the Validator protocol.

A check answers None for an acceptable value and a short message
otherwise. Probed with None it answers with its own description, which
the usage document shows under ``check``.

Patterns for RegexCheck often come from configuration, so they are
compiled with ``google-re2`` and match in linear time. Backreferences and
lookaround are not RE2 syntax and fail when the check is built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import re2

from reqargs._errors import InvalidCheckError


@dataclass(frozen=True, slots=True)
class RegexCheck:
    """The value's text must contain a match of ``pattern``.

    Uses search (not fullmatch); anchor the pattern to match the whole value.

    Raises:
        InvalidCheckError: If the pattern is not valid RE2 syntax.
    """

    pattern: str
    _compiled: re2.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            compiled = re2.compile(self.pattern)
        except re2.error as e:
            msg = f'invalid regex pattern "{self.pattern}": {e}'
            raise InvalidCheckError(msg) from e
        object.__setattr__(self, "_compiled", compiled)

    def __call__(self, value: Any, /) -> str | None:
        if value is None:
            return f"must match /{self.pattern}/"
        if self._compiled.search(str(value)) is None:
            return f"does not match /{self.pattern}/"
        return None


@dataclass(frozen=True, slots=True)
class OneOfCheck:
    """The value must equal one of ``choices``."""

    choices: tuple[Any, ...]

    def __post_init__(self) -> None:
        if not self.choices:
            raise InvalidCheckError("OneOfCheck requires at least one choice")
        object.__setattr__(self, "choices", tuple(self.choices))

    def __call__(self, value: Any, /) -> str | None:
        listed = ", ".join(str(c) for c in self.choices)
        if value is None:
            return f"must be one of: {listed}"
        if value not in self.choices:
            return f"not one of: {listed}"
        return None


@dataclass(frozen=True, slots=True)
class RangeCheck:
    """A number must lie in [minimum, maximum]; either bound may be open."""

    minimum: float | None = None
    maximum: float | None = None

    def __post_init__(self) -> None:
        if self.minimum is None and self.maximum is None:
            raise InvalidCheckError("RangeCheck requires minimum or maximum")
        if (
            self.minimum is not None
            and self.maximum is not None
            and self.minimum > self.maximum
        ):
            msg = f"RangeCheck minimum {self.minimum} exceeds maximum {self.maximum}"
            raise InvalidCheckError(msg)

    def _describe(self) -> str:
        if self.minimum is None:
            return f"<= {self.maximum}"
        if self.maximum is None:
            return f">= {self.minimum}"
        return f"between {self.minimum} and {self.maximum}"

    def __call__(self, value: Any, /) -> str | None:
        if value is None:
            return f"must be {self._describe()}"
        if self.minimum is not None and value < self.minimum:
            return f"must be {self._describe()}"
        if self.maximum is not None and value > self.maximum:
            return f"must be {self._describe()}"
        return None


@dataclass(frozen=True, slots=True)
class LengthCheck:
    """A string's length must lie in [minimum, maximum]."""

    minimum: int = 0
    maximum: int | None = None

    def __post_init__(self) -> None:
        if self.minimum < 0:
            msg = f"LengthCheck minimum must not be negative, got {self.minimum}"
            raise InvalidCheckError(msg)
        if self.maximum is not None and self.maximum < self.minimum:
            msg = f"LengthCheck minimum {self.minimum} exceeds maximum {self.maximum}"
            raise InvalidCheckError(msg)

    def _describe(self) -> str:
        if self.maximum is None:
            return f"at least {self.minimum} characters"
        return f"{self.minimum} to {self.maximum} characters"

    def __call__(self, value: Any, /) -> str | None:
        if value is None:
            return f"length {self._describe()}"
        n = len(str(value))
        if n < self.minimum or (self.maximum is not None and n > self.maximum):
            return f"length must be {self._describe()}, got {n}"
        return None
