"""Group-based resource naming."""

from __future__ import annotations

import re
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field

_INVALID = re.compile(r"[^a-z0-9-]+")


def _random_suffix() -> str:
    return uuid.uuid4().hex[:3]


@dataclass(frozen=True, slots=True)
class GroupNamingConvention:
    """Derives resource names from a group name.

    ``unique_name_for_group`` returns a fresh candidate on every call, so
    callers that need a name unused by the provider can keep sampling until
    one does not collide.
    """

    prefix: str = ""
    delimiter: str = "-"
    suffix: Callable[[], str] = field(default=_random_suffix, compare=False)

    def _sanitize(self, group: str) -> str:
        base = f"{self.prefix}{self.delimiter}{group}" if self.prefix else group
        return _INVALID.sub(self.delimiter, base.lower()).strip(self.delimiter)

    def shared_name_for_group(self, group: str) -> str:
        return self._sanitize(group)

    def unique_name_for_group(self, group: str) -> str:
        return f"{self._sanitize(group)}{self.delimiter}{self.suffix()}"

    def group_in_unique_name(self, name: str) -> str | None:
        head, sep, _ = name.rpartition(self.delimiter)
        return head if sep and head else None
