"""
sir_cell.py
Individuo de la grilla SIR: estado de salud, vecindario Moore y regla de
transicion.

A cell keeps its neighbors as (row, col) index pairs into the grid's
population, so the grid stays the only owner of cell objects.
"""
import enum
import warnings

NEIGHBORHOOD_SIZE = 8

# mask coefficients: scale what an infectious masked cell emits and what a
# susceptible masked cell accepts
MASK_TRANSMISSION = 0.30
MASK_CONTRACTION = 0.80


class HealthState(enum.IntEnum):
    SUSCEPTIBLE = 0
    INFECTIOUS = 1
    RECOVERED = 2


class NeighborhoodFullWarning(UserWarning):
    """A ninth neighbor was offered to a cell."""


class Cell:
    """One individual.

    Rates must lie in [0, 1]; they are not checked here.
    """

    def __init__(self, state, recovery_rate, infection_rate,
                 transmission_coefficient=1.0, contraction_coefficient=1.0):
        self.current_state = HealthState(state)
        self.next_state = self.current_state
        self.recovery_rate = recovery_rate
        self.infection_rate = infection_rate
        self.transmission_coefficient = transmission_coefficient
        self.contraction_coefficient = contraction_coefficient
        self.neighbors = []

    @classmethod
    def masked(cls, state, recovery_rate, infection_rate):
        return cls(state, recovery_rate, infection_rate,
                   transmission_coefficient=MASK_TRANSMISSION,
                   contraction_coefficient=MASK_CONTRACTION)

    @property
    def effective_infection_rate(self):
        return self.infection_rate * self.transmission_coefficient

    def add_neighbor(self, index):
        """Register the cell at ``index`` (row, col) as a neighbor.

        Returns False, with a warning, when the neighborhood is already full.
        """
        if len(self.neighbors) >= NEIGHBORHOOD_SIZE:
            warnings.warn("new neighbor %r not added; neighborhood full" % (index,),
                          NeighborhoodFullWarning, stacklevel=2)
            return False
        self.neighbors.append(tuple(index))
        return True

    def compute_next_state(self, population, rng):
        """Stage tomorrow's state from today's neighbor states.

        population: the grid's 2D cell storage the neighbor indices point into
        rng: numpy Generator, one ``random()`` draw per trial
        """
        if self.current_state == HealthState.SUSCEPTIBLE:
            for row, col in self.neighbors:
                neighbor = population[row][col]
                if neighbor.current_state != HealthState.INFECTIOUS:
                    continue
                threshold = neighbor.effective_infection_rate * self.contraction_coefficient
                if rng.random() < threshold:
                    self.next_state = HealthState.INFECTIOUS
                    break
        elif self.current_state == HealthState.INFECTIOUS:
            if rng.random() < self.recovery_rate:
                self.next_state = HealthState.RECOVERED
        # RECOVERED is absorbing
        return self.next_state

    def commit_state(self):
        self.current_state = self.next_state

    def __repr__(self):
        return "Cell(%s, neighbors=%d)" % (self.current_state.name, len(self.neighbors))
