# -*- coding: utf-8 -*-
"""
Support Spots Generator
=======================
Main entry point of the support spot analysis.
Coordinating LocalStability -> LayerIslands -> GlobalStability.
"""

import logging
from typing import List, Optional, Tuple

from tqdm import tqdm

from ..stability_kernel.config import DEBUG_EXPORT
from ..stability_kernel.extrusion_line import ExtrusionLine, lines_from_polyline
from ..stability_kernel.global_stability import check_global_stability
from ..stability_kernel.islands import LayerIslands, reckon_islands
from ..stability_kernel.issues import Issues
from ..stability_kernel.local_stability import check_extrusion_entity_stability
from ..stability_kernel.params import Params
from ..stability_kernel.pixel_grid import PixelGrid, SupportGridFilter
from ..stability_kernel.segment_index import SegmentIndex
from ..toolpath.model import PrintObject, ToolpathLayer
from .debug_export import ObjExporter, export_support_points, value_to_rgb


class SupportSpotsGenerator:
    """
    Support spot search over one printed object.

    Attributes:
        print_object (PrintObject): Toolpaths, bottom layer first.
        params (Params): Physical and geometric parameters.
        islands_graph (List[LayerIslands]): Islands of every layer after a search.
    """

    def __init__(self, print_object: PrintObject, params: Optional[Params] = None,
                 debug_export: bool = DEBUG_EXPORT, progress: bool = True):
        self.print_object = print_object
        self.params = params if params is not None else Params()
        self.debug_export = debug_export
        self.progress = progress
        self.islands_graph: List[LayerIslands] = []
        self.logger = logging.getLogger("SupportSpots")

    # -------------------------------------------------

    def quick_search(self) -> List[int]:
        """Indices of layers worth a closer look; no fast heuristic exists yet."""
        return []

    def full_search(self) -> Issues:
        """
        Execute the full analysis.

        Returns:
            Issues with the global support points first, then the local ones.
        """
        self.logger.info(f"Starting support spot search over {self.print_object.layer_count} layers")
        local_issues, self.islands_graph = self.check_extrusions_and_build_graph()

        min_xy, max_xy = self.print_object.bounds_2d()
        supports_presence_grid = SupportGridFilter(min_xy, max_xy, self.print_object.height,
                                                   self.params.min_distance_between_support_points)
        global_issues = check_global_stability(supports_presence_grid, self.islands_graph, self.params)

        if self.debug_export:
            export_support_points(local_issues.support_points, "local_issues")
            export_support_points(global_issues.support_points, "global_issues")

        self.logger.info(f"Search complete. {len(global_issues)} global and "
                         f"{len(local_issues)} local support points.")
        global_issues.extend(local_issues)
        return global_issues

    # -------------------------------------------------

    def check_extrusions_and_build_graph(self) -> Tuple[Issues, List[LayerIslands]]:
        """
        Local stability pass and islands graph construction.

        Returns:
            (local issues, islands graph)
        """
        issues = Issues()
        islands_graph: List[LayerIslands] = []
        layers = self.print_object.layers
        if not layers:
            return issues, islands_graph

        # one grid geometry for the whole object
        min_xy, max_xy = self.print_object.bounds_2d()
        prev_layer_grid = PixelGrid(min_xy, max_xy, layers[-1].flow_width)

        segmentation = ObjExporter("segmentation.obj") if self.debug_export else None
        malformations = ObjExporter("malformations.obj") if self.debug_export else None

        prev_layer_lines: Optional[SegmentIndex] = None
        for layer_idx, layer in enumerate(tqdm(layers, desc="Support spots", unit="layer",
                                               leave=False, disable=not self.progress)):
            first_layer = layer_idx == 0
            if first_layer:
                layer_lines = self._base_layer_lines(layer)
            else:
                layer_lines = self._check_layer(layer, prev_layer_lines, issues)

            layer_islands, layer_grid = reckon_islands(layer.z, first_layer, prev_layer_grid,
                                                       layer_lines, layer.flow_width)
            islands_graph.append(layer_islands)
            self.logger.debug(f"Layer {layer_idx} z={layer.z:.3f}: {len(layer_lines)} lines, "
                              f"{len(layer_islands)} islands")

            if self.debug_export:
                self._export_layer(segmentation, malformations, layer_grid, layer_lines, layer.z)

            prev_layer_lines = SegmentIndex(layer_lines)
            prev_layer_grid = layer_grid

        if self.debug_export:
            segmentation.save()
            malformations.save()

        return issues, islands_graph

    def _base_layer_lines(self, layer: ToolpathLayer) -> List[ExtrusionLine]:
        """Raw lines of the first layer, perimeters first; no local check on the bed."""
        layer_lines: List[ExtrusionLine] = []
        for path in self._ordered_paths(layer):
            layer_lines.extend(lines_from_polyline(path.polyline(), path))
        return layer_lines

    def _check_layer(self, layer: ToolpathLayer, prev_layer_lines: SegmentIndex,
                     issues: Issues) -> List[ExtrusionLine]:
        layer_lines: List[ExtrusionLine] = []
        for path in self._ordered_paths(layer):
            if path.role.needs_stability_check:
                layer_lines.extend(check_extrusion_entity_stability(
                    path, layer.z, path.width, prev_layer_lines, issues, self.params))
            else:
                layer_lines.extend(lines_from_polyline(path.polyline(), path))
        return layer_lines

    @staticmethod
    def _ordered_paths(layer: ToolpathLayer):
        """Perimeters before fills, printing order kept within each group."""
        perimeters = [p for p in layer.paths if p.role.is_perimeter]
        fills = [p for p in layer.paths if not p.role.is_perimeter]
        return perimeters + fills

    @staticmethod
    def _export_layer(segmentation: ObjExporter, malformations: ObjExporter, layer_grid: PixelGrid,
                      layer_lines: List[ExtrusionLine], layer_z: float):
        coords, labels = layer_grid.labelled_cells()
        if len(coords):
            centers = layer_grid.get_pixel_center(coords)
            for center, island_idx in zip(centers, labels):
                # scatter neighbouring labels over the color ramp
                pseudornd = ((int(island_idx) + 127) * 33331 + 6907) % 23
                segmentation.add_point((center[0], center[1], layer_z), value_to_rgb(pseudornd, 0.0, 23.0))
        for line in layer_lines:
            if line.malformation > 0.0:
                malformations.add_point((line.b[0], line.b[1], layer_z), value_to_rgb(line.malformation, 0.0, 1.0))

    # -------------------------------------------------

    def islands_graph_frame(self):
        """Islands graph as a ``pandas.DataFrame``, one row per island."""
        import pandas as pd

        rows = []
        for layer_idx, layer in enumerate(self.islands_graph):
            for island_idx, island in enumerate(layer.islands):
                rows.append({
                    "layer": layer_idx,
                    "layer_z": layer.layer_z,
                    "island": island_idx,
                    "volume": island.volume,
                    "sticking_area": island.sticking_area,
                    "connected_islands": len(island.connected_islands),
                    "connection_area": float(sum(c.area for c in island.connected_islands.values())),
                    "lines": len(island.external_lines),
                })
        return pd.DataFrame(rows, columns=["layer", "layer_z", "island", "volume", "sticking_area",
                                           "connected_islands", "connection_area", "lines"])


def full_search(print_object: PrintObject, params: Optional[Params] = None, **kwargs) -> Issues:
    return SupportSpotsGenerator(print_object, params, **kwargs).full_search()


def quick_search(print_object: PrintObject, params: Optional[Params] = None) -> List[int]:
    return SupportSpotsGenerator(print_object, params, progress=False).quick_search()
