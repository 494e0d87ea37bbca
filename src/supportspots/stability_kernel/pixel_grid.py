# -*- coding: utf-8 -*-
"""
Rasterization grids
===================

``PixelGrid`` is a 2D label image of one layer: every extrusion line stamps
the index of its island into the cells it crosses. Comparing the images of two
consecutive layers gives the overlap (connection) between their islands.

``SupportGridFilter`` is a 3D voxel occupancy set that keeps global support
points from piling up in the same place.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Tuple

import numpy as np

from .config import RASTER_CHUNK_SIZE, RASTER_MIN_EDGE, RASTER_WORKERS

NULL_ISLAND = -1


class PixelGrid:
    """
    Uniform 2D grid of island labels.

    Attributes:
        pixel_size: Cell edge length in mm (same on both axes).
        origin: XY of the lower-left grid corner.
        pixel_count: (nx, ny) number of cells.
        pixels: (nx, ny) int64 label array, NULL_ISLAND where empty.
    """

    def __init__(self, min_xy, max_xy, resolution: float):
        if resolution <= 0:
            raise ValueError(f"Grid resolution must be positive, got {resolution}")
        self.pixel_size = float(resolution)
        min_xy = np.asarray(min_xy, dtype=np.float64)
        max_xy = np.asarray(max_xy, dtype=np.float64)
        # one spare cell on every side
        self.origin = min_xy - self.pixel_size
        size = (max_xy - min_xy) + 2.0 * self.pixel_size
        self.pixel_count = (size / self.pixel_size).astype(np.int64) + 1
        self.pixels = np.full(tuple(self.pixel_count), NULL_ISLAND, dtype=np.int64)

    def empty_like(self) -> "PixelGrid":
        """Same geometry, all cells cleared."""
        grid = PixelGrid.__new__(PixelGrid)
        grid.pixel_size = self.pixel_size
        grid.origin = self.origin.copy()
        grid.pixel_count = self.pixel_count.copy()
        grid.pixels = np.full(tuple(self.pixel_count), NULL_ISLAND, dtype=np.int64)
        return grid

    @property
    def pixel_area(self) -> float:
        return self.pixel_size * self.pixel_size

    def get_pixel(self, coords) -> int:
        return int(self.pixels[coords[0], coords[1]])

    def get_pixel_center(self, coords) -> np.ndarray:
        coords = np.asarray(coords, dtype=np.float64)
        return self.origin + coords * self.pixel_size + self.pixel_size / 2.0

    def to_pixel_coords(self, positions: np.ndarray) -> np.ndarray:
        """Cell coordinates of (N, 2) or (2,) positions, clipped to the grid."""
        coords = np.floor((np.asarray(positions, dtype=np.float64) - self.origin) / self.pixel_size).astype(np.int64)
        return np.clip(coords, 0, self.pixel_count - 1)

    def access_pixel(self, position) -> int:
        ix, iy = self.to_pixel_coords(position)
        return int(self.pixels[ix, iy])

    # -------------------------------------------------

    def _edge_samples(self, a: np.ndarray, b: np.ndarray, labels: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Sample points every half cell along each edge, ending exactly on b."""
        d = b - a
        length = np.linalg.norm(d, axis=1)
        keep = length >= RASTER_MIN_EDGE
        if not np.any(keep):
            return np.zeros((0, 2)), np.zeros(0, dtype=np.int64)
        a, d, length, labels = a[keep], d[keep], length[keep], labels[keep]

        step = self.pixel_size / 2.0
        counts = np.maximum(np.ceil(length / step).astype(np.int64), 1)
        owner = np.repeat(np.arange(len(length)), counts)
        group_start = np.repeat(np.cumsum(counts) - counts, counts)
        k = np.arange(counts.sum()) - group_start + 1
        next_len = np.minimum(k * step, length[owner])
        samples = a[owner] + (next_len / length[owner])[:, None] * d[owner]
        return samples, labels[owner]

    def distribute_edge(self, p1, p2, value: int):
        """Stamp `value` along the edge p1 -> p2, last write wins."""
        self._stamp(np.asarray(p1, dtype=np.float64).reshape(1, 2),
                    np.asarray(p2, dtype=np.float64).reshape(1, 2),
                    np.asarray([value], dtype=np.int64))

    def _stamp(self, a: np.ndarray, b: np.ndarray, labels: np.ndarray):
        samples, sample_labels = self._edge_samples(a, b, labels)
        if len(samples) == 0:
            return
        coords = self.to_pixel_coords(samples)
        self.pixels[coords[:, 0], coords[:, 1]] = sample_labels

    def distribute_edges(self, a: np.ndarray, b: np.ndarray, labels: np.ndarray,
                         workers: int = RASTER_WORKERS, chunk_size: int = RASTER_CHUNK_SIZE):
        """
        Stamp many edges, chunks of edges run concurrently.

        Chunks write into the shared pixel array without locking. Two edges
        crossing the same cell race; whichever label lands last stays, and
        either is an acceptable approximation of the overlap.
        """
        a = np.asarray(a, dtype=np.float64).reshape(-1, 2)
        b = np.asarray(b, dtype=np.float64).reshape(-1, 2)
        labels = np.asarray(labels, dtype=np.int64)
        n = len(labels)
        if n == 0:
            return
        chunk_size = max(1, int(chunk_size))
        ranges = [(start, min(n, start + chunk_size)) for start in range(0, n, chunk_size)]
        if workers <= 1 or len(ranges) == 1:
            for start, end in ranges:
                self._stamp(a[start:end], b[start:end], labels[start:end])
            return
        with ThreadPoolExecutor(max_workers=workers) as pool:
            list(pool.map(lambda r: self._stamp(a[r[0]:r[1]], b[r[0]:r[1]], labels[r[0]:r[1]]), ranges))

    def labelled_cells(self) -> Tuple[np.ndarray, np.ndarray]:
        """(coords (N, 2), labels (N,)) of every non-empty cell."""
        ix, iy = np.nonzero(self.pixels != NULL_ISLAND)
        return np.stack([ix, iy], axis=1), self.pixels[ix, iy]


class SupportGridFilter:
    """
    3D voxel occupancy used to deduplicate support points.
    """

    def __init__(self, min_xy, max_xy, height: float, voxel_size: float):
        if voxel_size <= 0:
            raise ValueError(f"Voxel size must be positive, got {voxel_size}")
        self.cell_size = np.full(3, float(voxel_size))
        min_point = np.array([min_xy[0], min_xy[1], 0.0], dtype=np.float64) - self.cell_size
        max_point = np.array([max_xy[0], max_xy[1], height], dtype=np.float64) + self.cell_size
        self.origin = min_point
        size = max_point - min_point
        self.cell_count = (size / self.cell_size).astype(np.int64) + 1
        self.taken_cells = set()

    def to_cell_coords(self, position) -> np.ndarray:
        coords = np.floor((np.asarray(position, dtype=np.float64) - self.origin) / self.cell_size).astype(np.int64)
        return np.clip(coords, 0, self.cell_count - 1)

    def to_cell_index(self, cell_coords) -> int:
        x, y, z = (int(c) for c in cell_coords)
        return z * int(self.cell_count[0]) * int(self.cell_count[1]) + y * int(self.cell_count[0]) + x

    def take_position(self, position):
        self.taken_cells.add(self.to_cell_index(self.to_cell_coords(position)))

    def position_taken(self, position) -> bool:
        return self.to_cell_index(self.to_cell_coords(position)) in self.taken_cells
