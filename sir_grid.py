"""
sir_grid.py
Grilla SIR de tamano n x n: poblacion, vecindarios Moore y actualizacion
sincronica en dos fases (compute / commit).
"""
from typing import NamedTuple

import numpy as np

from sir_cell import Cell, HealthState

# Moore offsets, raster order
OFFSETS = [(dr, dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1) if (dr, dc) != (0, 0)]

TEXT_CODE = {
    HealthState.SUSCEPTIBLE: "O",
    HealthState.INFECTIOUS: "I",
    HealthState.RECOVERED: " ",
}


class SIRCounts(NamedTuple):
    susceptible: float
    infectious: float
    recovered: float


class Grid:
    """Square population of cells driven one day at a time.

    The grid owns every cell; readers get copies through ``snapshot()``,
    ``counts`` and ``percentages()``.
    """

    def __init__(self, size, rng=None):
        self.size = size
        self.rng = rng if rng is not None else np.random.default_rng()
        self.population = [[None] * size for _ in range(size)]
        self.counts = SIRCounts(0, 0, 0)
        self.changed_count = 0

    @property
    def population_size(self):
        return self.size * self.size

    def populate(self, density, infection_rate, recovery_rate, masked_fraction=0.0):
        """Random initial population: each position is infectious with
        probability ``density``, otherwise susceptible.

        With ``masked_fraction`` > 0, a second draw per position decides which
        cells wear masks.
        """
        n = self.size
        # one draw per position, raster order
        occupancy = self.rng.random((n, n))
        states = np.where(occupancy < density, HealthState.INFECTIOUS, HealthState.SUSCEPTIBLE)
        masked = None
        if masked_fraction > 0:
            masked = self.rng.random((n, n)) < masked_fraction
        self.populate_from(states, infection_rate, recovery_rate, masked=masked)

    def populate_from(self, states, infection_rate, recovery_rate, masked=None):
        """Place an explicit n x n layout of states (and optional mask flags)."""
        states = np.asarray(states)
        if states.shape != (self.size, self.size):
            raise ValueError("expected a %dx%d state layout, got %s"
                             % (self.size, self.size, states.shape))
        for row in range(self.size):
            for col in range(self.size):
                state = HealthState(int(states[row, col]))
                if masked is not None and masked[row][col]:
                    cell = Cell.masked(state, recovery_rate, infection_rate)
                else:
                    cell = Cell(state, recovery_rate, infection_rate)
                self.population[row][col] = cell
        self._form_neighborhoods()
        self.changed_count = 0
        self.counts = self._tally()

    def _form_neighborhoods(self):
        n = self.size
        for row in range(n):
            for col in range(n):
                cell = self.population[row][col]
                for dr, dc in OFFSETS:
                    r, c = row + dr, col + dc
                    # no wraparound
                    if 0 <= r < n and 0 <= c < n:
                        cell.add_neighbor((r, c))

    def cells(self):
        """Iterate (row, col, cell) in raster order."""
        for row in range(self.size):
            for col in range(self.size):
                yield row, col, self.population[row][col]

    def update(self, order=None):
        """Advance the simulation by one day.

        order: optional sequence of (row, col) for the compute phase;
        raster order by default. The result does not depend on it, only the
        consumption of the random stream does.
        """
        if order is None:
            order = [(row, col) for row, col, _ in self.cells()]
        # every decision reads yesterday's current_state only
        for row, col in order:
            self.population[row][col].compute_next_state(self.population, self.rng)

        changed = 0
        tally = [0, 0, 0]
        for _, _, cell in self.cells():
            if cell.next_state != cell.current_state:
                changed += 1
            cell.commit_state()
            tally[cell.current_state] += 1

        self.changed_count = changed
        self.counts = SIRCounts(*tally)
        return self.counts

    def _tally(self):
        tally = [0, 0, 0]
        for _, _, cell in self.cells():
            tally[cell.current_state] += 1
        return SIRCounts(*tally)

    def snapshot(self):
        """Copy of every cell's current state as an n x n uint8 array."""
        snap = np.zeros((self.size, self.size), dtype=np.uint8)
        for row, col, cell in self.cells():
            snap[row, col] = cell.current_state
        return snap

    def percentages(self):
        pop = self.population_size
        return SIRCounts(*(100.0 * c / pop for c in self.counts))

    def __str__(self):
        lines = ["Flux: %d" % self.changed_count]
        for row in range(self.size):
            line = ""
            for col in range(self.size):
                cell = self.population[row][col]
                line += "N" if cell is None else TEXT_CODE[cell.current_state]
            lines.append(line)
        return "\n".join(lines)
