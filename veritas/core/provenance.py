from __future__ import annotations

from enum import Enum


class Provenance(str, Enum):
    """Which tier of a resolver produced a result."""

    REMOTE = "remote"
    LOCAL = "local"
