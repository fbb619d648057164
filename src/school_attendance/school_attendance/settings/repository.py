from __future__ import annotations

from typing import Optional, Protocol

from .model import SchoolConfig


class SchoolConfigRepository(Protocol):
    """Storage for the single active SchoolConfig."""

    def read(self) -> Optional[SchoolConfig]:
        raise NotImplementedError

    def write(self, config: SchoolConfig) -> None:
        raise NotImplementedError
