"""Origin Admission Policy - decides whether a cross-origin request may proceed.

Invariants:
    - Requests without an Origin header are always admitted
    - An origin is admitted if it is in the allow-list verbatim, or after one
      trailing "/" is stripped from the request origin
    - Allow-list entries are never normalized; only the request origin is
    - The allow-list is a tuple fixed at construction (no mutation path)
"""

from dataclasses import dataclass
from typing import Iterable

from survey_gateway.core.errors import ErrorContext, OriginNotAllowedError


@dataclass(frozen=True)
class OriginAdmissionPolicy:
    """Allow-list predicate over request origins."""

    allowed_origins: tuple[str, ...]

    @classmethod
    def from_origins(cls, origins: Iterable[str]) -> "OriginAdmissionPolicy":
        return cls(tuple(origins))

    def is_allowed(self, origin: str | None) -> bool:
        if not origin:
            return True
        if origin in self.allowed_origins:
            return True
        return _strip_trailing_slash(origin) in self.allowed_origins

    def admit(self, origin: str | None, path: str | None = None) -> None:
        """Raise OriginNotAllowedError unless the origin is admitted."""
        if not self.is_allowed(origin):
            raise OriginNotAllowedError(origin, ErrorContext(path=path))


def _strip_trailing_slash(origin: str) -> str:
    return origin[:-1] if origin.endswith("/") else origin
