# -*- coding: utf-8 -*-
"""
Layer islands
=============

Splits the lines of one layer into islands (independent solid regions) and
measures how each island overlaps the islands of the previous layer.

All statistics are stored as weighted sums (accumulators), never as averages,
so merging two islands or connections is plain component-wise addition.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

import numpy as np

from .bvh import segments_aabb
from .extrusion_line import ExtrusionLine
from .pixel_grid import NULL_ISLAND, PixelGrid
from .segment_index import SegmentIndex

logger = logging.getLogger("SupportSpots.islands")


@dataclass
class IslandConnection:
    """
    Overlap between an island and one island of the previous layer.

    Attributes:
        area: Overlapping area (mm^2).
        centroid_accumulator: (3,) sum of area-weighted cell centres.
        second_moment_of_area_accumulator: (2,) sum of area-weighted squared x and y.
    """
    area: float = 0.0
    centroid_accumulator: np.ndarray = field(default_factory=lambda: np.zeros(3))
    second_moment_of_area_accumulator: np.ndarray = field(default_factory=lambda: np.zeros(2))

    @classmethod
    def unbounded(cls) -> "IslandConnection":
        """Connection of a part standing on the bed: never the weakest one."""
        return cls(1.0, np.zeros(3), np.array([np.inf, np.inf]))

    def add(self, other: "IslandConnection") -> "IslandConnection":
        self.area += other.area
        self.centroid_accumulator = self.centroid_accumulator + other.centroid_accumulator
        self.second_moment_of_area_accumulator = (self.second_moment_of_area_accumulator
                                                  + other.second_moment_of_area_accumulator)
        return self

    def add_area(self, area: float, position: np.ndarray):
        """Add `area` centred at 3D `position`."""
        position = np.asarray(position, dtype=np.float64)
        self.area += area
        self.centroid_accumulator = self.centroid_accumulator + area * position
        self.second_moment_of_area_accumulator = (self.second_moment_of_area_accumulator
                                                  + area * position[:2] * position[:2])

    def copy(self) -> "IslandConnection":
        return IslandConnection(self.area, self.centroid_accumulator.copy(),
                                self.second_moment_of_area_accumulator.copy())

    def centroid(self) -> np.ndarray:
        return self.centroid_accumulator / self.area

    def variance(self) -> np.ndarray:
        """Per-axis variance of the area around its centroid (parallel axis theorem)."""
        c = self.centroid()
        return self.second_moment_of_area_accumulator / self.area - c[:2] * c[:2]

    def __repr__(self):
        if self.area <= 0:
            return "IslandConnection(area=0)"
        return (f"IslandConnection(area={self.area:.4f}, centroid={np.round(self.centroid(), 4).tolist()}, "
                f"variance={np.round(self.variance(), 4).tolist()})")


@dataclass
class Island:
    """One connected printed region of a single layer."""
    connected_islands: Dict[int, IslandConnection] = field(default_factory=dict)
    volume: float = 0.0
    volume_centroid_accumulator: np.ndarray = field(default_factory=lambda: np.zeros(3))
    # contact with the bed or with support points generated on this layer
    sticking_area: float = 0.0
    sticking_centroid_accumulator: np.ndarray = field(default_factory=lambda: np.zeros(3))
    sticking_second_moment_of_area_accumulator: np.ndarray = field(default_factory=lambda: np.zeros(2))
    external_lines: List[ExtrusionLine] = field(default_factory=list)

    def add_volume(self, volume: float, centroid: np.ndarray):
        self.volume += volume
        self.volume_centroid_accumulator = self.volume_centroid_accumulator + volume * centroid

    def add_sticking_area(self, area: float, position: np.ndarray):
        self.sticking_area += area
        self.sticking_centroid_accumulator = self.sticking_centroid_accumulator + area * position
        self.sticking_second_moment_of_area_accumulator = (self.sticking_second_moment_of_area_accumulator
                                                           + area * position[:2] * position[:2])

    def add(self, other: "Island") -> "Island":
        """Fold `other` into this island, connections to the same island are summed."""
        self.volume += other.volume
        self.volume_centroid_accumulator = self.volume_centroid_accumulator + other.volume_centroid_accumulator
        self.sticking_area += other.sticking_area
        self.sticking_centroid_accumulator = self.sticking_centroid_accumulator + other.sticking_centroid_accumulator
        self.sticking_second_moment_of_area_accumulator = (self.sticking_second_moment_of_area_accumulator
                                                           + other.sticking_second_moment_of_area_accumulator)
        for prev_idx, conn in other.connected_islands.items():
            self.connected_islands.setdefault(prev_idx, IslandConnection()).add(conn)
        self.external_lines.extend(other.external_lines)
        return self


@dataclass
class LayerIslands:
    islands: List[Island] = field(default_factory=list)
    layer_z: float = 0.0

    def __len__(self) -> int:
        return len(self.islands)


def split_into_runs(layer_lines: Sequence[ExtrusionLine]) -> List[Tuple[int, int]]:
    """[start, end) index ranges of contiguous lines sharing one path_id."""
    runs: List[Tuple[int, int]] = []
    current = object()
    for idx, line in enumerate(layer_lines):
        if runs and line.path_id == current:
            runs[-1] = (runs[-1][0], idx + 1)
        else:
            runs.append((idx, idx + 1))
            current = line.path_id
    return runs


def _merge_nested_candidates(boundaries: List[SegmentIndex]) -> List[List[int]]:
    """
    Group candidates nested inside one another.

    Containment is read as an undirected edge; every connected component of
    the resulting graph is one island. Components come back ordered by their
    lowest candidate index.
    """
    n = len(boundaries)
    graph: Dict[int, List[int]] = {i: [] for i in range(n)}
    for i in range(n):
        for j in range(n):
            if i == j:
                continue
            distance, _, _ = boundaries[i].signed_distance(boundaries[j].get_line(0).a)
            if distance < 0:
                graph[i].append(j)
                graph[j].append(i)

    visited = set()
    components: List[List[int]] = []
    for start in range(n):
        if start in visited:
            continue
        component: List[int] = []
        q = deque([start])
        while q:
            current = q.popleft()
            if current in visited:
                continue
            visited.add(current)
            component.append(current)
            for nb in graph[current]:
                if nb not in visited:
                    q.append(nb)
        components.append(sorted(component))
    return components


def reckon_islands(layer_z: float, first_layer: bool, prev_layer_grid: PixelGrid,
                   layer_lines: Sequence[ExtrusionLine], flow_width: float) -> Tuple[LayerIslands, PixelGrid]:
    """
    Build the islands of one layer and their connections to the previous layer.

    Args:
        layer_z: Height of the layer.
        first_layer: Lines of the first layer stick to the bed.
        prev_layer_grid: Label grid of the previous layer (all empty for the first layer).
        layer_lines: Lines of the layer in path order.
        flow_width: Extrusion width used for sticking areas.

    Returns:
        (LayerIslands, label grid of this layer)
    """
    layer_lines = list(layer_lines)
    runs = split_into_runs(layer_lines)

    # 1) one candidate per external perimeter run
    candidate_runs: List[List[int]] = []
    boundaries: List[SegmentIndex] = []
    for r, (start, end) in enumerate(runs):
        if layer_lines[start].is_external_perimeter():
            candidate_runs.append([r])
            boundaries.append(SegmentIndex(layer_lines[start:end]))
    if not boundaries and runs:
        logger.debug(f"No external perimeter at z={layer_z:.3f}, first path becomes the only island")
        start, end = runs[0]
        candidate_runs.append([0])
        boundaries.append(SegmentIndex(layer_lines[start:end]))

    # 2) other runs go to the first candidate containing their start
    seeding_runs = {c[0] for c in candidate_runs}
    for r, (start, end) in enumerate(runs):
        if r in seeding_runs:
            continue
        point = layer_lines[start].a
        for c, boundary in enumerate(boundaries):
            distance, _, _ = boundary.signed_distance(point)
            if distance < 0:
                candidate_runs[c].append(r)
                break
        else:
            candidate_runs[0].append(r)

    # 3) holes and other nested candidates
    result = LayerIslands(layer_z=float(layer_z))
    line_to_island = np.full(len(layer_lines), NULL_ISLAND, dtype=np.int64)
    bbox_areas = []
    for boundary in boundaries:
        lines = boundary.get_lines()
        bbox_areas.append(segments_aabb(np.array([line.a for line in lines]),
                                        np.array([line.b for line in lines])).area())
    for component in _merge_nested_candidates(boundaries):
        # outermost boundary keeps the island, ties to the lowest index
        representative = max(component, key=lambda c: (bbox_areas[c], -c))
        island_runs = list(candidate_runs[representative])
        for c in component:
            if c != representative:
                island_runs.extend(candidate_runs[c])

        island = Island()
        start, end = runs[candidate_runs[representative][0]]
        island.external_lines = layer_lines[start:end]
        island_idx = len(result.islands)
        for r in island_runs:
            start, end = runs[r]
            line_to_island[start:end] = island_idx
            for line in layer_lines[start:end]:
                middle = (line.a + line.b) / 2.0
                island.add_volume(line.mm3_per_mm * line.len, np.array([middle[0], middle[1], layer_z]))
                if first_layer:
                    island.add_sticking_area(line.len * flow_width, np.array([middle[0], middle[1], layer_z]))
                elif line.support_point_generated:
                    island.add_sticking_area(line.len * flow_width, np.array([line.b[0], line.b[1], layer_z]))
        result.islands.append(island)

    # 4) rasterize, then overlap with the previous layer
    current_grid = prev_layer_grid.empty_like()
    if layer_lines:
        current_grid.distribute_edges(np.array([line.a for line in layer_lines]),
                                      np.array([line.b for line in layer_lines]),
                                      line_to_island)

    both = (current_grid.pixels != NULL_ISLAND) & (prev_layer_grid.pixels != NULL_ISLAND)
    ix, iy = np.nonzero(both)
    if len(ix):
        current_labels = current_grid.pixels[ix, iy]
        prev_labels = prev_layer_grid.pixels[ix, iy]
        centers = current_grid.get_pixel_center(np.stack([ix, iy], axis=1))
        pairs, inverse = np.unique(np.stack([current_labels, prev_labels], axis=1), axis=0, return_inverse=True)
        inverse = np.asarray(inverse).reshape(-1)
        pixel_area = current_grid.pixel_area
        cells = np.bincount(inverse, minlength=len(pairs)).astype(np.float64)
        sum_x = np.bincount(inverse, weights=centers[:, 0], minlength=len(pairs))
        sum_y = np.bincount(inverse, weights=centers[:, 1], minlength=len(pairs))
        sum_xx = np.bincount(inverse, weights=centers[:, 0] ** 2, minlength=len(pairs))
        sum_yy = np.bincount(inverse, weights=centers[:, 1] ** 2, minlength=len(pairs))
        for k, (cur, prev) in enumerate(pairs):
            conn = result.islands[int(cur)].connected_islands.setdefault(int(prev), IslandConnection())
            conn.add(IslandConnection(
                cells[k] * pixel_area,
                np.array([sum_x[k], sum_y[k], cells[k] * layer_z]) * pixel_area,
                np.array([sum_xx[k], sum_yy[k]]) * pixel_area,
            ))

    return result, current_grid
