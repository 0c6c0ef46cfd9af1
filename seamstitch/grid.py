"""
Max-flow / min-cut over a 4-connected grid, backed by PyMaxflow.

The grid has one node per cell. Every cell gets one directed arc towards
each in-grid neighbour, with the capacity returned by the bound edge cost
function for (row, col, direction). One cell is tied to the source and
one to the sink; after solve() every cell is labelled by the side of the
minimum cut it falls on.
"""

import maxflow
import numpy as np
import torch
from enum import Enum
from typing import Callable, Optional, Tuple

from .cost import Direction
from .errors import SolverError


class Label(Enum):
    SOURCE = 0
    SINK = 1


class CutGrid:
    """A (height, width) cut grid with a pluggable edge cost function."""

    def __init__(self, height: int, width: int):
        if height <= 0 or width <= 0:
            raise SolverError(f"Cannot build a {height}x{width} cut grid")
        self.height = height
        self.width = width
        self._cost: Optional[Callable] = None
        self._source: Optional[Tuple[int, int]] = None
        self._sink: Optional[Tuple[int, int]] = None
        self._sink_mask: Optional[torch.Tensor] = None

    def set_edge_cost_function(self, cost: Callable):
        """Bind cost(rows, cols, direction) -> capacities for a batch of cells."""
        self._cost = cost
        self._sink_mask = None

    def set_source(self, row: int, col: int):
        self._source = self._check_cell(row, col)
        self._sink_mask = None

    def set_sink(self, row: int, col: int):
        self._sink = self._check_cell(row, col)
        self._sink_mask = None

    def _check_cell(self, row: int, col: int) -> Tuple[int, int]:
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise SolverError(f"Cell ({row}, {col}) is outside the {self.height}x{self.width} grid")
        return row, col

    def _arc_capacities(self, direction: Direction) -> np.ndarray:
        """Capacity of the arc leaving each cell in `direction` (0 where there is no neighbour)."""
        H, W = self.height, self.width
        dy, dx = direction.offset

        rows, cols = torch.meshgrid(torch.arange(H), torch.arange(W), indexing='ij')
        has_neighbour = ((rows + dy >= 0) & (rows + dy < H)
                         & (cols + dx >= 0) & (cols + dx < W))

        capacities = torch.zeros(H, W, dtype=torch.float64)
        if has_neighbour.any():
            weights = self._cost(rows[has_neighbour], cols[has_neighbour], direction)
            capacities[has_neighbour] = torch.as_tensor(weights, dtype=torch.float64).cpu()

        if not torch.isfinite(capacities).all() or (capacities < 0).any():
            raise SolverError(f"Edge costs for {direction.name.lower()} arcs must be finite and non-negative")
        return capacities.numpy()

    def solve(self) -> float:
        """
        Run max-flow and store the labels of every cell.

        Returns:
            Value of the maximum flow, i.e. the total capacity of the cut

        Raises:
            SolverError: if no cost function or terminals are bound, or if
                source and sink are the same cell
        """
        if self._cost is None:
            raise SolverError("No edge cost function bound to the grid")
        if self._source is None or self._sink is None:
            raise SolverError("Source and sink must be set before solving")
        if self._source == self._sink:
            raise SolverError(f"Source and sink coincide at cell {self._source}")

        graph = maxflow.Graph[float]()
        nodeids = graph.add_grid_nodes((self.height, self.width))

        total = 0.0
        for direction in Direction:
            capacities = self._arc_capacities(direction)
            total += float(capacities.sum())

            dy, dx = direction.offset
            structure = np.zeros((3, 3))
            structure[1 + dy, 1 + dx] = 1
            graph.add_grid_edges(nodeids, weights=capacities, structure=structure,
                                 symmetric=False)

        # Terminal arcs must never be cut: exceed every possible cut
        terminal = total + 1.0
        graph.add_tedge(int(nodeids[self._source]), terminal, 0.0)
        graph.add_tedge(int(nodeids[self._sink]), 0.0, terminal)

        flow = graph.maxflow()
        self._sink_mask = torch.from_numpy(np.asarray(graph.get_grid_segments(nodeids), dtype=bool))
        return flow

    def labels(self) -> torch.Tensor:
        """Boolean (height, width) mask, True where a cell fell on the sink side."""
        if self._sink_mask is None:
            raise SolverError("Labels requested before solve()")
        return self._sink_mask

    def label(self, row: int, col: int) -> Label:
        row, col = self._check_cell(row, col)
        return Label.SINK if self.labels()[row, col] else Label.SOURCE
