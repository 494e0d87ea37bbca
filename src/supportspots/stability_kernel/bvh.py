# -*- coding: utf-8 -*-
"""
Bounding volume hierarchy over 2D segments
==========================================

A median-split BVH over the lines of one layer. ``query_nearest`` walks it
with an explicit stack and prunes boxes farther than the best hit so far.
Used by ``SegmentIndex`` for signed distance lookups.
"""

import numpy as np
from typing import List, Optional, Tuple


class AABB:
    """Axis-aligned bounding box with float64 precision.

    Stores per-axis minima and maxima as vectors of any dimension (2D for
    layer lines). All operations are pure and return new AABB instances
    unless otherwise stated.

    Args:
        min_point: Minimum corner.
        max_point: Maximum corner.
    """
    def __init__(self, min_point, max_point):
        self.min = np.array(min_point, dtype=np.float64)
        self.max = np.array(max_point, dtype=np.float64)

    def merge(self, other: 'AABB') -> 'AABB':
        """合并两个 AABB"""
        return AABB(np.minimum(self.min, other.min), np.maximum(self.max, other.max))

    def extent(self) -> np.ndarray:
        """Return per-axis extent vector e = max - min."""
        return (self.max - self.min).astype(np.float64, copy=False)

    def area(self) -> float:
        """Return the product of the extents (area in 2D)."""
        return float(np.prod(self.extent()))

    def squared_distance(self, point: np.ndarray) -> float:
        """Squared distance from `point` to the box, 0 inside."""
        delta = np.maximum(np.maximum(self.min - point, 0.0), point - self.max)
        return float(np.dot(delta, delta))


class BVHNode:
    def __init__(self):
        self.aabb: Optional[AABB] = None
        self.line_indices: Optional[np.ndarray] = None
        self.left: Optional['BVHNode'] = None
        self.right: Optional['BVHNode'] = None
        self.is_leaf = False


def segments_aabb(a: np.ndarray, b: np.ndarray) -> AABB:
    """Create an AABB enclosing every segment a[i] -> b[i].

    Args:
        a: Array of shape (N, D) with segment start points.
        b: Array of shape (N, D) with segment end points.
    """
    return AABB(np.minimum(a.min(axis=0), b.min(axis=0)), np.maximum(a.max(axis=0), b.max(axis=0)))


def build_bvh(a: np.ndarray, b: np.ndarray, leaf_size: int = 8) -> BVHNode:
    """Build a bounding volume hierarchy over segments.

    Nodes split at the median centroid along the longest axis of their box;
    leaves hold up to `leaf_size` segment indices.

    Raises:
        ValueError: On mismatched shapes or empty input.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape or a.ndim != 2:
        raise ValueError("segment endpoints must be two (N, D) arrays of the same shape")
    if len(a) == 0:
        raise ValueError("Empty segment list")
    leaf_size = max(1, int(leaf_size))
    centroids = (a + b) * 0.5

    def _build(indices: np.ndarray) -> BVHNode:
        node = BVHNode()
        node.aabb = segments_aabb(a[indices], b[indices])

        if len(indices) <= leaf_size:
            node.line_indices = indices
            node.is_leaf = True
            return node

        axis = int(np.argmax(node.aabb.extent()))
        order = np.argsort(centroids[indices, axis], kind="stable")
        sorted_indices = indices[order]

        mid = len(sorted_indices) // 2
        node.left = _build(sorted_indices[:mid])
        node.right = _build(sorted_indices[mid:])
        return node

    return _build(np.arange(len(a)))


def squared_distance_to_segments(point: np.ndarray, a: np.ndarray, b: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Squared distances from `point` to segments a[i] -> b[i] and the nearest points.

    Degenerate segments (a == b) measure the distance to `a`.
    """
    v = b - a
    w = point - a
    l2 = np.einsum("ij,ij->i", v, v)
    t = np.divide(np.einsum("ij,ij->i", w, v), l2, out=np.zeros_like(l2), where=l2 > 0.0)
    t = np.clip(t, 0.0, 1.0)
    nearest = a + t[:, None] * v
    diff = point - nearest
    return np.einsum("ij,ij->i", diff, diff), nearest


def query_nearest(root: Optional[BVHNode], a: np.ndarray, b: np.ndarray,
                  point: np.ndarray) -> Tuple[float, int, Optional[np.ndarray]]:
    """Nearest segment to `point`.

    Returns:
        (squared distance, segment index, nearest point); (-1.0, -1, None) for an
        empty tree.
    """
    if root is None:
        return -1.0, -1, None
    best_d2 = np.inf
    best_idx = -1
    best_point = None
    # Explicit stack, nearer child popped first.
    stack: List[BVHNode] = [root]
    while stack:
        node = stack.pop()
        if node.aabb.squared_distance(point) >= best_d2:
            continue
        if node.is_leaf:
            idx = node.line_indices
            d2, nearest = squared_distance_to_segments(point, a[idx], b[idx])
            k = int(np.argmin(d2))
            if d2[k] < best_d2:
                best_d2 = float(d2[k])
                best_idx = int(idx[k])
                best_point = nearest[k]
            continue
        d_left = node.left.aabb.squared_distance(point)
        d_right = node.right.aabb.squared_distance(point)
        if d_left <= d_right:
            stack.append(node.right)
            stack.append(node.left)
        else:
            stack.append(node.left)
            stack.append(node.right)
    return best_d2, best_idx, best_point
