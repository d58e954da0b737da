"""Engine configuration."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class LayoutConfig:
    """Immutable configuration fixed for the lifetime of a ``GraphIndex``.

    Attributes:
        num_layer: Number of layers (rows) every rendered graph must fit into.
        compacted: Pack each layer into contiguous columns instead of letting
            nodes sit under their parents with gaps in between.
    """

    num_layer: int
    compacted: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.num_layer, bool) or not isinstance(self.num_layer, int) or self.num_layer <= 0:
            raise ValueError(f"num_layer must be a positive integer, got {self.num_layer!r}")
        if not isinstance(self.compacted, bool):
            raise ValueError(f"compacted must be a bool, got {self.compacted!r}")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> LayoutConfig:
        """Build a config from ``{"numLayer": ..., "compacted": ...}`` (snake_case keys work too)."""
        num_layer = mapping.get("num_layer", mapping.get("numLayer"))
        if num_layer is None:
            raise ValueError("configuration needs a num_layer")
        return cls(num_layer=num_layer, compacted=mapping.get("compacted", False))
