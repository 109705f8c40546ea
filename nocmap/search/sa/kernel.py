"""The inner loop of the annealer: make moves and accept or reject them."""

import math

import logging

from nocmap.utils.comparisons import \
    approximately_equal, definitely_less_than

logger = logging.getLogger(__name__)


class AnnealingKernel(object):
    """Makes moves at a fixed temperature, keeping those the Metropolis
    criterion accepts and undoing the rest.

    Attributes
    ----------
    cost_model : :py:class:`~nocmap.cost.CostModel`
    assignment : :py:class:`~nocmap.assignment.Assignment`
        The current solution, modified in place.
    current_cost : float
        The cost of the current solution.
    move : callable
        ``move(assignment, random) -> (node, node)``, see
        :py:mod:`nocmap.search.sa.moves`.
    random : :py:class:`random.Random`
    """

    def __init__(self, cost_model, assignment, move, random):
        self.cost_model = cost_model
        self.assignment = assignment
        self.move = move
        self.random = random
        self.current_cost = cost_model.total_cost(assignment)

    def accept(self, deltac, temperature):
        """Decide whether to accept a change in cost.

        Parameters
        ----------
        deltac : float
            The change in cost as a percentage of the current cost.
        temperature : float

        Returns
        -------
        bool
        """
        if definitely_less_than(deltac, 0.0) or \
                approximately_equal(deltac, 0.0):
            return True
        probability = math.exp(-deltac / temperature)
        r = self.random.random()
        return bool(definitely_less_than(r, probability) or
                    approximately_equal(r, probability))

    def step(self, temperature):
        """Make a single move, keeping it only if it is accepted.

        A rejected move is undone, leaving the assignment and
        :py:attr:`.current_cost` exactly as they were.

        Returns
        -------
        accepted : bool
        zero_cost : bool
            True if the move did not change the cost.
        delta : float
            The change in cost (0.0 if the move was rejected).
        """
        node_a, node_b = self.move(self.assignment, self.random)
        if node_a == node_b:
            # The move could find nothing to do: treat it as an accepted move
            # which costs nothing.
            return True, True, 0.0

        new_cost = self.cost_model.total_cost(self.assignment)
        delta = new_cost - self.current_cost

        if self.current_cost != 0.0:
            deltac = delta / self.current_cost
        else:
            deltac = delta
        if approximately_equal(deltac, 0.0):
            deltac = 0.0
        else:
            deltac *= 100.0

        if self.accept(deltac, temperature):
            self.current_cost = new_cost
            return True, deltac == 0.0, delta
        else:
            self.assignment.swap(node_a, node_b)
            return False, False, 0.0

    def run_steps(self, num_steps, temperature):
        """Attempt num_steps moves.

        Returns
        -------
        num_accepted : int
            The number of moves accepted.
        num_zero_cost : int
            The number of accepted moves which did not change the cost.
        total_delta : float
            The sum of the cost changes of all accepted moves.
        """
        num_accepted = 0
        num_zero_cost = 0
        total_delta = 0.0
        for _ in range(num_steps):
            accepted, zero_cost, delta = self.step(temperature)
            if accepted:
                num_accepted += 1
                total_delta += delta
            if zero_cost:
                num_zero_cost += 1
        return num_accepted, num_zero_cost, total_delta
