"""Tests for bridge detection and malformation tracking."""
import math

import numpy as np
import pytest

from supportspots.stability_kernel import (
    ExtrusionLine,
    ExtrusionPropertiesAccumulator,
    Issues,
    SegmentIndex,
    check_extrusion_entity_stability,
    subdivide_path,
)
from supportspots.toolpath import ExtrusionPath, ExtrusionRole

LAYER_Z = 0.4
WIDTH = 0.45


def open_path(points, role=ExtrusionRole.PERIMETER):
    return ExtrusionPath(points=points, role=role, mm3_per_mm=0.1, width=WIDTH)


def prev_layer(*segments, malformation=0.0):
    lines = []
    for a, b in segments:
        line = ExtrusionLine(a, b)
        line.malformation = malformation
        lines.append(line)
    return SegmentIndex(lines)


class TestAccumulator:

    def test_max_curvature_tracks_absolute_running_sum(self):
        acc = ExtrusionPropertiesAccumulator()
        acc.add_angle(1.0)
        acc.add_angle(-3.0)
        acc.add_angle(1.5)
        assert acc.curvature == pytest.approx(-0.5)
        assert acc.max_curvature == pytest.approx(2.0)

    def test_reset(self):
        acc = ExtrusionPropertiesAccumulator()
        acc.add_distance(4.0)
        acc.add_angle(1.0)
        acc.reset()
        assert (acc.distance, acc.curvature, acc.max_curvature) == (0.0, 0.0, 0.0)


class TestSubdividePath:

    def test_pieces_are_equal_and_short_enough(self):
        lines = subdivide_path(open_path([[0.0, 0.0], [30.0, 0.0]]), 12.0)
        assert len(lines) == 4
        assert lines[0].len == 0.0
        assert [line.len for line in lines[1:]] == pytest.approx([10.0, 10.0, 10.0])
        assert lines[-1].b == pytest.approx([30.0, 0.0])

    def test_loop_is_closed(self):
        path = ExtrusionPath(points=[[0, 0], [4, 0], [4, 4], [0, 4]], role=ExtrusionRole.PERIMETER,
                             mm3_per_mm=0.1, is_loop=True)
        lines = subdivide_path(path, 12.0)
        assert len(lines) == 5
        assert lines[-1].b == pytest.approx([0.0, 0.0])

    def test_duplicate_points_are_skipped(self):
        lines = subdivide_path(open_path([[0, 0], [0, 0], [5, 0]]), 12.0)
        assert len(lines) == 2


class TestBridging:

    def test_straight_span_gets_one_support_at_bridge_distance(self, params):
        issues = Issues()
        lines = check_extrusion_entity_stability(
            open_path([[0.0, 0.0], [30.0, 0.0]]), LAYER_Z, WIDTH,
            prev_layer(((0.0, 0.0), (10.0, 0.0))), issues, params)

        assert len(issues) == 1
        support = issues.support_points[0]
        assert support.position == pytest.approx([10.0 + params.bridge_distance, 0.0, LAYER_Z])
        assert support.force == 0.0
        assert support.direction == pytest.approx([0.0, 0.0, -1.0])

        flagged = [line for line in lines if line.support_point_generated]
        assert len(flagged) == 1
        assert flagged[0].b == pytest.approx([22.0, 0.0])
        # splitting keeps the extruded length
        assert sum(line.len for line in lines) == pytest.approx(30.0)

    def test_path_starting_in_the_air_is_supported_at_once(self, params):
        issues = Issues()
        check_extrusion_entity_stability(open_path([[0.0, 0.0], [5.0, 0.0]]), LAYER_Z, WIDTH,
                                         SegmentIndex([]), issues, params)
        assert len(issues) == 1
        assert issues.support_points[0].position == pytest.approx([0.0, 0.0, LAYER_Z])

    def test_supported_path_needs_nothing(self, params):
        issues = Issues()
        lines = check_extrusion_entity_stability(
            open_path([[0.0, 0.0], [30.0, 0.0]]), LAYER_Z, WIDTH,
            prev_layer(((0.0, 0.0), (30.0, 0.0))), issues, params)
        assert len(issues) == 0
        assert all(line.malformation == 0.0 for line in lines)
        assert not any(line.support_point_generated for line in lines)

    def test_curved_span_triggers_earlier(self, params):
        issues = Issues()
        check_extrusion_entity_stability(
            open_path([[0.0, 0.0], [10.0, 0.0], [10.0, 10.0], [0.0, 10.0]]), LAYER_Z, WIDTH,
            prev_layer(((0.0, 0.0), (10.0, 0.0))), issues, params)

        # quarter turn ahead: threshold = bridge / (1 + factor * (pi / 2) / pi)
        expected = params.bridge_distance / (1.0 + params.bridge_distance_decrease_by_curvature_factor * 0.5)
        first = issues.support_points[0]
        assert first.position == pytest.approx([10.0, expected, LAYER_Z])
        assert expected < params.bridge_distance

    def test_curvature_factor_zero_matches_straight(self, params):
        issues = Issues()
        flat = params.updated(bridge_distance_decrease_by_curvature_factor=0.0)
        check_extrusion_entity_stability(
            open_path([[0.0, 0.0], [10.0, 0.0], [10.0, 20.0]]), LAYER_Z, WIDTH,
            prev_layer(((0.0, 0.0), (10.0, 0.0))), issues, flat)
        assert issues.support_points[0].position == pytest.approx([10.0, 12.0, LAYER_Z])


class TestMalformation:

    def test_inherited_from_the_layer_below(self, params):
        issues = Issues()
        lines = check_extrusion_entity_stability(
            open_path([[0.0, 0.0], [10.0, 0.0]]), LAYER_Z, WIDTH,
            prev_layer(((0.0, 0.0), (10.0, 0.0)), malformation=0.5), issues, params)
        assert all(line.malformation == pytest.approx(0.45) for line in lines)

    def test_grows_when_printed_beside_the_layer_below(self, params):
        issues = Issues()
        lines = check_extrusion_entity_stability(
            open_path([[0.0, -0.3], [10.0, -0.3]]), LAYER_Z, WIDTH,
            prev_layer(((0.0, 0.0), (10.0, 0.0))), issues, params)
        assert len(issues) == 0
        assert all(line.malformation > 0.0 for line in lines)
        assert lines[-1].malformation == pytest.approx(0.15 * 0.8)

    def test_inner_side_does_not_grow(self, params):
        issues = Issues()
        lines = check_extrusion_entity_stability(
            open_path([[0.0, 0.3], [10.0, 0.3]]), LAYER_Z, WIDTH,
            prev_layer(((0.0, 0.0), (10.0, 0.0))), issues, params)
        assert all(line.malformation == 0.0 for line in lines)

    def test_angle_helper_sign(self):
        from supportspots.stability_kernel import angle
        assert angle(np.array([1.0, 0.0]), np.array([0.0, 1.0])) == pytest.approx(math.pi / 2)
        assert angle(np.array([1.0, 0.0]), np.array([0.0, -1.0])) == pytest.approx(-math.pi / 2)
        assert angle(np.zeros(2), np.array([1.0, 0.0])) == 0.0
