"""Resource budgeting helpers for decoding untrusted archives."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import ResourceBudgetExceeded

if TYPE_CHECKING:  # pragma: no cover
    from .config import PakSettings


@dataclass(frozen=True)
class ResourceBudget:
    """Declarative limits applied while reading the index and payloads."""

    max_resources: int = 0xFFFF
    max_resource_bytes: int = 0xFFFFFFFF
    max_total_bytes: int = 0xFFFFFFFF

    @classmethod
    def from_settings(cls, settings: "PakSettings") -> "ResourceBudget":
        return cls(
            max_resources=settings.max_resources,
            max_resource_bytes=settings.max_resource_bytes,
            max_total_bytes=settings.max_total_bytes,
        )

    def ensure_resources(self, count: int) -> None:
        if count > self.max_resources:
            raise ResourceBudgetExceeded(
                f"resource count {count} exceeds budgeted maximum {self.max_resources}",
                {"resource_count": count},
            )

    def ensure_resource_bytes(self, resource_id: int, size: int) -> None:
        if size > self.max_resource_bytes:
            raise ResourceBudgetExceeded(
                f"resource {resource_id} declares {size} bytes, exceeding budgeted maximum "
                f"{self.max_resource_bytes}",
                {"resource_id": resource_id, "size": size},
            )

    def ensure_total_bytes(self, size: int) -> None:
        if size > self.max_total_bytes:
            raise ResourceBudgetExceeded(
                f"payload total {size} bytes exceeds budgeted maximum {self.max_total_bytes}",
                {"size": size},
            )


__all__ = ["ResourceBudget", "ResourceBudgetExceeded"]
