"""Tests for sir_grid — topology, two-phase update and aggregates."""

import numpy as np
import pytest

from sir_cell import HealthState
from sir_grid import Grid, SIRCounts

S, I, R = HealthState.SUSCEPTIBLE, HealthState.INFECTIOUS, HealthState.RECOVERED


def seeded_grid(size, density=0.2, infection_rate=0.3, recovery_rate=0.1, seed=42, **kw):
    grid = Grid(size, rng=np.random.default_rng(seed))
    grid.populate(density, infection_rate, recovery_rate, **kw)
    return grid


class TestConstruction:
    def test_empty_grid(self):
        grid = Grid(4)
        assert grid.counts == SIRCounts(0, 0, 0)
        assert grid.changed_count == 0
        assert all(cell is None for _, _, cell in grid.cells())
        assert str(grid).splitlines()[1] == "NNNN"


class TestPopulate:
    def test_density_zero_all_susceptible(self):
        grid = seeded_grid(5, density=0.0)
        assert grid.counts == SIRCounts(25, 0, 0)

    def test_density_one_all_infectious(self):
        grid = seeded_grid(5, density=1.0)
        assert grid.counts == SIRCounts(0, 25, 0)

    def test_never_starts_recovered(self):
        grid = seeded_grid(20, density=0.5)
        assert grid.counts.recovered == 0
        assert grid.counts.susceptible + grid.counts.infectious == 400

    def test_same_seed_same_population(self):
        a = seeded_grid(10, seed=7)
        b = seeded_grid(10, seed=7)
        np.testing.assert_array_equal(a.snapshot(), b.snapshot())

    def test_repopulate_rebuilds_cells_and_neighborhoods(self):
        grid = seeded_grid(4)
        old = grid.population[1][1]
        grid.populate(0.0, 0.3, 0.1)
        assert grid.population[1][1] is not old
        assert len(grid.population[1][1].neighbors) == 8
        assert grid.counts == SIRCounts(16, 0, 0)

    def test_masked_fraction(self):
        grid = seeded_grid(10, masked_fraction=1.0)
        assert all(cell.contraction_coefficient < 1.0 for _, _, cell in grid.cells())
        grid = seeded_grid(10, masked_fraction=0.0)
        assert all(cell.contraction_coefficient == 1.0 for _, _, cell in grid.cells())

    def test_populate_from_rejects_wrong_shape(self):
        with pytest.raises(ValueError):
            Grid(3).populate_from(np.zeros((2, 2)), 0.1, 0.1)


class TestNeighborhoods:
    @pytest.mark.parametrize("n", [3, 4, 7])
    def test_boundary_neighbor_counts(self, n):
        grid = seeded_grid(n)
        for row, col, cell in grid.cells():
            on_row_edge = row in (0, n - 1)
            on_col_edge = col in (0, n - 1)
            if on_row_edge and on_col_edge:
                expected = 3
            elif on_row_edge or on_col_edge:
                expected = 5
            else:
                expected = 8
            assert len(cell.neighbors) == expected, (row, col)

    def test_adjacency_is_symmetric_and_excludes_self(self):
        grid = seeded_grid(5)
        for row, col, cell in grid.cells():
            assert (row, col) not in cell.neighbors
            for r, c in cell.neighbors:
                assert (row, col) in grid.population[r][c].neighbors

    def test_single_cell_has_no_neighbors(self):
        grid = seeded_grid(1)
        assert grid.population[0][0].neighbors == []


class TestUpdate:
    def test_single_cell_recovers(self):
        grid = Grid(1, rng=np.random.default_rng(0))
        grid.populate_from([[I]], infection_rate=0.5, recovery_rate=1.0)
        grid.update()
        assert grid.snapshot()[0, 0] == R
        assert grid.counts == SIRCounts(0, 0, 1)
        assert grid.changed_count == 1

    def test_center_infects_all_neighbors(self):
        states = np.full((3, 3), S)
        states[1, 1] = I
        grid = Grid(3, rng=np.random.default_rng(0))
        grid.populate_from(states, infection_rate=1.0, recovery_rate=0.0)
        grid.update()
        np.testing.assert_array_equal(grid.snapshot(), np.full((3, 3), I))
        assert grid.counts == SIRCounts(0, 9, 0)
        assert grid.changed_count == 8

    def test_spread_is_one_ring_per_day(self):
        states = np.full((5, 5), S)
        states[2, 2] = I
        grid = Grid(5, rng=np.random.default_rng(0))
        grid.populate_from(states, infection_rate=1.0, recovery_rate=0.0)
        grid.update()
        # cells two steps away only see yesterday's susceptible ring
        assert grid.snapshot()[0, 0] == S
        assert grid.counts == SIRCounts(16, 9, 0)
        grid.update()
        assert grid.counts == SIRCounts(0, 25, 0)

    def test_no_seed_nothing_spreads(self):
        grid = seeded_grid(5, density=0.0, infection_rate=1.0, recovery_rate=1.0)
        for _ in range(10):
            grid.update()
            assert grid.counts == SIRCounts(25, 0, 0)
            assert grid.changed_count == 0

    def test_zero_rates_freeze_the_grid(self):
        grid = seeded_grid(8, density=0.4, infection_rate=0.0, recovery_rate=0.0)
        before = grid.snapshot()
        for _ in range(5):
            grid.update()
            assert grid.changed_count == 0
            np.testing.assert_array_equal(grid.snapshot(), before)

    def test_conservation_and_absorption(self):
        grid = seeded_grid(15, density=0.05, infection_rate=0.4, recovery_rate=0.2, seed=3)
        recovered = grid.snapshot() == R
        for _ in range(40):
            counts = grid.update()
            assert sum(counts) == 15 * 15
            snap = grid.snapshot()
            assert np.all(snap[recovered] == R)
            recovered = snap == R

    def test_no_spontaneous_infection(self):
        grid = seeded_grid(12, density=0.1, infection_rate=0.9, recovery_rate=0.3, seed=11)
        for _ in range(10):
            before = grid.snapshot()
            grid.update()
            after = grid.snapshot()
            newly = np.argwhere((before == S) & (after == I))
            for row, col in newly:
                neighbors = grid.population[row][col].neighbors
                assert any(before[r, c] == I for r, c in neighbors)

    def test_visit_order_does_not_change_outcome(self):
        rng = np.random.default_rng(5)
        states = rng.choice([S, I, R], size=(6, 6), p=[0.6, 0.3, 0.1])
        raster = Grid(6, rng=np.random.default_rng(0))
        raster.populate_from(states, infection_rate=1.0, recovery_rate=1.0)
        shuffled = Grid(6, rng=np.random.default_rng(0))
        shuffled.populate_from(states, infection_rate=1.0, recovery_rate=1.0)

        order = [(r, c) for r in range(6) for c in range(6)]
        order.reverse()
        raster.update()
        shuffled.update(order=order)
        np.testing.assert_array_equal(raster.snapshot(), shuffled.snapshot())
        assert raster.counts == shuffled.counts

    def test_next_state_settles_after_commit(self):
        grid = seeded_grid(6, density=0.3, infection_rate=0.5, recovery_rate=0.5)
        grid.update()
        for _, _, cell in grid.cells():
            assert cell.next_state == cell.current_state


class TestReadOnlyViews:
    def test_snapshot_is_a_copy(self):
        grid = seeded_grid(4, density=0.0)
        snap = grid.snapshot()
        snap[:] = R
        assert np.all(grid.snapshot() == S)
        assert grid.population[0][0].current_state == S

    def test_snapshot_shape_and_dtype(self):
        snap = seeded_grid(7).snapshot()
        assert snap.shape == (7, 7)
        assert snap.dtype == np.uint8

    def test_percentages(self):
        states = np.array([[S, S], [I, R]])
        grid = Grid(2)
        grid.populate_from(states, 0.0, 0.0)
        assert grid.percentages() == pytest.approx((50.0, 25.0, 25.0))
        assert sum(grid.percentages()) == pytest.approx(100.0)

    def test_text_rendering(self):
        grid = Grid(2)
        grid.populate_from([[S, I], [R, S]], 0.0, 0.0)
        assert str(grid) == "Flux: 0\nOI\n O"
