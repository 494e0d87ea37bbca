"""End-to-end tests of the support spot search."""
import numpy as np
import pytest

from supportspots import Params, PrintObject, SupportSpotsGenerator, ToolpathLayer, full_search, quick_search
from supportspots.stability_kernel import (
    ActiveObjectParts,
    ExtrusionLine,
    Island,
    IslandConnection,
    LayerIslands,
    SupportGridFilter,
    check_global_stability,
    estimate_strength,
)
from supportspots.toolpath import ExtrusionPath, ExtrusionRole


def single_square(make_square_path, width):
    return PrintObject(layers=[ToolpathLayer(z=0.2, paths=[make_square_path(side=10.0, width=width)])])


class TestBedAdhesion:
    """A single square sticking to the bed with weak adhesion."""

    @pytest.fixture
    def weak_bed(self):
        return Params(bed_adhesion_yield_strength=10000.0)

    def test_small_contact_is_flagged(self, make_square_path, weak_bed):
        issues = SupportSpotsGenerator(single_square(make_square_path, 0.4), weak_bed, progress=False).full_search()
        assert len(issues) >= 1
        for sp in issues.support_points:
            assert sp.force > 0.0
            assert sp.position[2] == pytest.approx(0.2)
            # supports land on the island boundary
            assert max(abs(sp.position[0]), abs(sp.position[1])) == pytest.approx(5.0)
            assert np.linalg.norm(sp.direction) == pytest.approx(1.0)

    def test_ten_times_the_contact_is_stable(self, make_square_path, weak_bed):
        issues = SupportSpotsGenerator(single_square(make_square_path, 4.0), weak_bed, progress=False).full_search()
        assert len(issues) == 0

    def test_supports_keep_their_distance(self, make_square_path, weak_bed):
        issues = full_search(single_square(make_square_path, 0.4), weak_bed, progress=False)
        positions = [tuple(np.round(sp.position, 6)) for sp in issues.support_points]
        assert len(positions) == len(set(positions))


class TestVerticalWall:

    def test_wall_needs_no_support(self, make_wall, params):
        issues = full_search(make_wall(side=20.0, layers=10), params, progress=False)
        assert len(issues) == 0

    def test_wall_without_flow_stays_neutral(self, make_square_path, params):
        obj = PrintObject(layers=[ToolpathLayer(z=0.2 * (i + 1), paths=[make_square_path(side=20.0, mm3_per_mm=0.0)])
                                  for i in range(3)])
        issues = full_search(obj, params, progress=False)
        assert all(np.isfinite(sp.force) for sp in issues.support_points)
        assert len(issues) == 0

    def test_wall_forms_one_part_per_layer(self, make_wall, params):
        generator = SupportSpotsGenerator(make_wall(layers=5), params, progress=False)
        generator.full_search()
        assert len(generator.islands_graph) == 5
        assert all(len(layer.islands) == 1 for layer in generator.islands_graph)
        for layer in generator.islands_graph[1:]:
            assert list(layer.islands[0].connected_islands) == [0]


class TestSearchResult:

    def test_global_issues_come_before_local_ones(self, params):
        base = ExtrusionPath(points=[[0.0, 0.0], [10.0, 0.0]], role=ExtrusionRole.EXTERNAL_PERIMETER,
                             mm3_per_mm=0.1, width=0.4)
        bridge = ExtrusionPath(points=[[0.0, 0.0], [30.0, 0.0]], role=ExtrusionRole.EXTERNAL_PERIMETER,
                               mm3_per_mm=0.1, width=0.4)
        obj = PrintObject(layers=[ToolpathLayer(z=0.2, paths=[base]), ToolpathLayer(z=0.4, paths=[bridge])])

        issues = full_search(obj, params, progress=False)
        local = [sp for sp in issues.support_points if sp.force == 0.0]
        assert len(local) == 1
        assert local[0].position == pytest.approx([22.0, 0.0, 0.4])
        assert issues.support_points[-1] is local[0]
        # a single line has no bending resistance on the bed
        assert issues.support_points[0].force > 0.0

    def test_empty_object(self, params):
        generator = SupportSpotsGenerator(PrintObject(), params, progress=False)
        assert len(generator.full_search()) == 0
        assert generator.islands_graph == []

    def test_quick_search_is_empty(self, make_wall, params):
        assert quick_search(make_wall(layers=2), params) == []

    def test_islands_graph_frame(self, make_wall, params):
        generator = SupportSpotsGenerator(make_wall(layers=3), params, progress=False)
        generator.full_search()
        frame = generator.islands_graph_frame()
        assert len(frame) == 3
        assert list(frame["layer"]) == [0, 1, 2]
        assert frame["connected_islands"].tolist() == [0, 1, 1]
        assert frame.loc[0, "sticking_area"] == pytest.approx(80.0 * 0.45)
        assert (frame["connection_area"].iloc[1:] > 0).all()

    def test_debug_export_writes_point_clouds(self, make_wall, params, tmp_path, monkeypatch):
        monkeypatch.setenv("SUPPORTSPOTS_WORKSPACE", str(tmp_path))
        SupportSpotsGenerator(make_wall(layers=2), params, debug_export=True, progress=False).full_search()
        for name in ("segmentation.obj", "malformations.obj", "local_issues_supports.obj",
                     "global_issues_supports.obj"):
            assert (tmp_path / name).exists()
        first_line = (tmp_path / "segmentation.obj").read_text(encoding="utf-8").splitlines()[0]
        assert first_line.startswith("v ")
        assert len(first_line.split()) == 7


class TestWeakestConnection:

    def test_estimate_strength_prefers_wide_connections(self):
        narrow = IslandConnection()
        wide = IslandConnection()
        for x in (-1.0, 1.0):
            narrow.add_area(1.0, np.array([x, x, 0.2]))
        for x in (-5.0, 5.0):
            wide.add_area(1.0, np.array([x, x, 0.2]))
        assert estimate_strength(narrow, 1.0) < estimate_strength(wide, 1.0)

    def test_unbounded_connection_is_strongest(self):
        conn = IslandConnection()
        conn.add_area(1.0, np.array([3.0, 3.0, 0.2]))
        assert estimate_strength(IslandConnection.unbounded(), 0.2) > estimate_strength(conn, 0.2)

    def test_empty_graph(self, params):
        grid = SupportGridFilter((0.0, 0.0), (1.0, 1.0), 1.0, params.min_distance_between_support_points)
        assert len(check_global_stability(grid, [LayerIslands(layer_z=0.2)], params)) == 0


def tower_graph(neck_variance, external_lines, neck_area=0.04, tower_z=10.0):
    """A heavy, wide base (layer 0) with a tower island standing on a neck above it."""
    base = Island()
    base.add_volume(1000.0, np.array([0.0, 0.0, 0.2]))
    for x in (-50.0, 50.0):
        for y in (-50.0, 50.0):
            base.add_sticking_area(100.0, np.array([x, y, 0.2]))

    neck = IslandConnection(neck_area, neck_area * np.array([0.0, 0.0, tower_z]),
                            neck_area * np.array([neck_variance, neck_variance]))
    tower = Island(connected_islands={0: neck})
    tower.add_volume(1.0, np.array([0.0, 0.0, tower_z]))
    tower.external_lines = list(external_lines)
    return [LayerIslands(islands=[base], layer_z=0.2), LayerIslands(islands=[tower], layer_z=tower_z)]


def presence_grid(params):
    return SupportGridFilter((-60.0, -60.0), (60.0, 60.0), 20.0, params.min_distance_between_support_points)


class TestWeakestConnectionSupports:
    """A tower on a wide, well stuck base: the bed holds, the neck may not."""

    def test_narrow_neck_gets_a_support(self, params):
        line = ExtrusionLine((0.0, 5.0), (1.0, 5.0))
        issues = check_global_stability(presence_grid(params), tower_graph(0.01, [line]), params)
        assert len(issues) == 1
        support = issues.support_points[0]
        assert support.position == pytest.approx([1.0, 5.0, 10.0])
        assert support.force > 0.0
        assert support.direction == pytest.approx([1.0, 0.0, 0.0])

    def test_wide_neck_holds(self, params):
        line = ExtrusionLine((0.0, 5.0), (1.0, 5.0))
        graph = tower_graph(100.0, [line], neck_area=100.0)
        assert len(check_global_stability(presence_grid(params), graph, params)) == 0

    def test_support_stiffens_the_neck_for_later_lines(self, params):
        first = ExtrusionLine((0.0, 5.0), (1.0, 5.0))
        second = ExtrusionLine((1.0, 5.0), (5.0, 5.0))

        # on its own the second line tears the neck
        alone = check_global_stability(presence_grid(params), tower_graph(0.01, [second]), params)
        assert [sp.position.tolist() for sp in alone.support_points] == [[5.0, 5.0, 10.0]]

        # after the first line's support the neck carries it
        issues = check_global_stability(presence_grid(params), tower_graph(0.01, [first, second]), params)
        assert [sp.position.tolist() for sp in issues.support_points] == [[1.0, 5.0, 10.0]]


class TestObjectPartMerging:

    @pytest.fixture
    def recorded_parts(self, monkeypatch):
        from supportspots.stability_kernel import global_stability

        created = []

        class RecordingParts(ActiveObjectParts):
            def __init__(self):
                super().__init__()
                created.append(self)

        monkeypatch.setattr(global_stability, "ActiveObjectParts", RecordingParts)
        return created

    @pytest.fixture
    def two_pillars_and_a_bridge(self, make_square_path):
        pillars = [ToolpathLayer(z=0.2 * (i + 1), paths=[make_square_path(side=10.0, center=(-10.0, 0.0)),
                                                         make_square_path(side=10.0, center=(10.0, 0.0))])
                   for i in range(3)]
        deck = ExtrusionPath(points=[[-15.0, -5.0], [15.0, -5.0], [15.0, 5.0], [-15.0, 5.0]],
                             role=ExtrusionRole.EXTERNAL_PERIMETER, mm3_per_mm=0.1, width=0.45, is_loop=True)
        return PrintObject(layers=pillars + [ToolpathLayer(z=0.8, paths=[deck])])

    def test_bridge_joins_the_pillars_into_one_part(self, two_pillars_and_a_bridge, params, recorded_parts):
        generator = SupportSpotsGenerator(two_pillars_and_a_bridge, params, progress=False)
        generator.full_search()

        assert [len(layer) for layer in generator.islands_graph] == [2, 2, 2, 1]
        assert sorted(generator.islands_graph[-1].islands[0].connected_islands) == [0, 1]

        parts = recorded_parts[0]
        assert len(parts) == 1
        total_volume = sum(island.volume for layer in generator.islands_graph for island in layer.islands)
        assert parts.access(0).volume == pytest.approx(total_volume)
        assert parts.find(0) == parts.find(1)

    def test_pillars_stay_apart_without_the_bridge(self, two_pillars_and_a_bridge, params, recorded_parts):
        two_pillars_and_a_bridge.layers.pop()
        SupportSpotsGenerator(two_pillars_and_a_bridge, params, progress=False).full_search()
        parts = recorded_parts[0]
        assert len(parts) == 2
        assert parts.find(0) != parts.find(1)
