from dataclasses import dataclass, field
from typing import List

import numpy as np


@dataclass(frozen=True)
class SupportPoint:
    """
    One support hint.

    Attributes:
        position: (3,) position in mm.
        force: Estimated force the support has to take; 0 for local (bridge) supports.
        direction: (3,) unit direction of the destabilizing action.
    """
    position: np.ndarray
    force: float
    direction: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "position", np.asarray(self.position, dtype=np.float64).reshape(3))
        object.__setattr__(self, "direction", np.asarray(self.direction, dtype=np.float64).reshape(3))
        object.__setattr__(self, "force", float(self.force))


@dataclass
class Issues:
    """Append-only collection of support points."""
    support_points: List[SupportPoint] = field(default_factory=list)

    def add_support_point(self, position, force: float, direction) -> SupportPoint:
        support_point = SupportPoint(position, force, direction)
        self.support_points.append(support_point)
        return support_point

    def extend(self, other: "Issues"):
        self.support_points.extend(other.support_points)

    def __len__(self) -> int:
        return len(self.support_points)
