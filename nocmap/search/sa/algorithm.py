"""The main annealing algorithm loop."""

import logging

from nocmap.assignment import Assignment

from nocmap.exceptions import TooFewNodesError

from nocmap.search import SearchResult

from nocmap.search.sa.kernel import AnnealingKernel

from nocmap.search.sa.lcg import LCGRandom

from nocmap.search.sa.moves import Moves, make_move

from nocmap.utils.comparisons import definitely_less_than


"""
This logger is used by the annealing algorithm to indicate progress.
"""
logger = logging.getLogger(__name__.split(".")[-1])


INITIAL_TEMPERATURE = 100.0
"""The temperature annealing starts at."""

COOLING_FACTOR = 0.9
"""The temperature is multiplied by this after each round of moves."""

TOLERANCE = 1.0
"""The relative cost change across the last two temperatures below which the
cost is considered stable."""

MIN_TEMPERATURES = 5
"""The anneal continues for more than this many temperatures."""

MIN_ACCEPT = 0.001
"""The acceptance ratio below which the anneal is considered frozen."""

FROZEN_TEMPERATURES = 10
"""The number of consecutive temperatures which accepted only moves which
did not change the cost after which the anneal is considered frozen."""


def _relative_change(old, new):
    if old == 0.0:
        return 0.0 if new == 0.0 else float("inf")
    return abs((old - new) / old)


def anneal(cost_model, random=None, seed=None, move=Moves.swap,
           attempts=None, initial_temperature=INITIAL_TEMPERATURE,
           on_temperature_change=None, initial_assignment=None):
    """Map cores onto a mesh using simulated annealing.

    Starting from a random assignment, moves (by default swapping the
    contents of two nodes) are made and accepted according to the Metropolis
    criterion: a move which reduces the cost is always kept while one which
    increases it by d percent is kept with probability ``exp(-d /
    temperature)``. After a fixed number of attempted moves the temperature
    is reduced by :py:data:`.COOLING_FACTOR`.

    Annealing stops once all of the following hold:

    * The cost has changed by less than :py:data:`.TOLERANCE` (relatively)
      over each of the last two temperatures.
    * More than :py:data:`.MIN_TEMPERATURES` temperatures have passed.
    * Fewer than :py:data:`.MIN_ACCEPT` of the moves at the last temperature
      were accepted or, for the last :py:data:`.FROZEN_TEMPERATURES`
      temperatures, every accepted move left the cost unchanged.

    This algorithm produces INFO level logging information describing the
    progress made by the algorithm.

    Parameters
    ----------
    cost_model : :py:class:`~nocmap.cost.CostModel`
    random : :py:class:`random.Random` or None
        The random number generator to use. Defaults to a
        :py:class:`~nocmap.search.sa.lcg.LCGRandom` seeded with ``seed``.
    seed : int or None
        Seed for the default random number generator. If None, the anneal
        will not be reproducible.
    move : :py:class:`~nocmap.search.sa.moves.Moves`
        The kind of move to make.
    attempts : int or None
        The number of moves to attempt at each temperature. Defaults to 100
        times the square of the number of nodes.
    initial_temperature : float
    on_temperature_change : callback_function or None
        An (optional) callback function which is called every time the
        temperature is about to change. This callback can be used to provide
        status updates.

        The callback function is passed the following arguments:

        * ``iteration_count``: the number of moves attempted so far (integer)
        * ``assignment``: a copy of the current solution.
        * ``cost``: the cost of the current solution. (float)
        * ``acceptance_rate``: the proportion of moves accepted at this
          temperature. (float between 0.0 and 1.0)
        * ``temperature``: the temperature the moves were made at. (float)

        If the callback returns False, the anneal is terminated immediately
        and the current solution is returned.
    initial_assignment : :py:class:`~nocmap.assignment.Assignment` or None
        The solution to start from. Defaults to a random assignment. It is
        not modified.

    Returns
    -------
    :py:class:`~nocmap.search.SearchResult`

    Raises
    ------
    TooFewNodesError
        If the mesh has fewer nodes than there are cores.
    """
    mesh = cost_model.mesh
    traffic = cost_model.traffic
    num_nodes = len(mesh)
    num_cores = len(traffic)
    if num_cores > num_nodes:
        raise TooFewNodesError(num_cores, num_nodes)

    if random is None:
        random = LCGRandom(seed)

    if initial_assignment is not None:
        assignment = initial_assignment.copy()
    else:
        assignment = Assignment(num_nodes, num_cores)
        assignment.randomise(random)

    # Special cases where no annealing is required:
    # * There is at most one node
    # * There are no cores
    # * No core communicates (and moving things has no effect)
    trivial = (num_nodes < 2 or
               num_cores == 0 or
               traffic.total_volume == 0.0)
    if trivial:
        logger.info("Mapping has trivial solution. SA not used.")
        cost = cost_model.total_cost(assignment)
        return SearchResult(assignment, cost,
                            cost_model.routing_tables(assignment))

    k = AnnealingKernel(cost_model, assignment, make_move(move, mesh, traffic),
                        random)

    if attempts is None:
        attempts = num_nodes * num_nodes * 100

    logger.info("Annealing %d cores onto %d nodes with %s moves, %d "
                "attempts per temperature.", num_cores, num_nodes,
                move.name, attempts)
    logger.info("Initial cost: %s", k.current_cost)

    temperature = initial_temperature
    # The costs after the last two temperatures
    cost3 = cost2 = k.current_cost
    temperature_count = 0
    zero_temperature_count = 0
    iteration_count = 0

    while True:
        num_accepted, num_zero_cost, total_delta = k.run_steps(attempts,
                                                               temperature)
        iteration_count += attempts
        r_accept = num_accepted / float(attempts)

        # Count the consecutive temperatures at which nothing but
        # cost-neutral moves were accepted
        if num_zero_cost == num_accepted:
            zero_temperature_count += 1
        else:
            zero_temperature_count = 0
        frozen = zero_temperature_count >= FROZEN_TEMPERATURES

        logger.debug("Round: %d, "
                     "Temp: %0.3f, "
                     "Cost: %s, "
                     "Delta: %s, "
                     "Kept: %0.1f%%.",
                     temperature_count, temperature, k.current_cost,
                     total_delta, r_accept * 100)

        # Call the user callback before the next temperature, terminating if
        # requested.
        if on_temperature_change is not None:
            ret_val = on_temperature_change(iteration_count,
                                            k.assignment.copy(),
                                            k.current_cost,
                                            r_accept,
                                            temperature)
            if ret_val is False:
                break

        # Stop once the cost has settled over the last two temperatures,
        # enough temperatures have passed and few moves are being accepted.
        tol3 = _relative_change(cost3, cost2)
        tol2 = _relative_change(cost2, k.current_cost)
        if (definitely_less_than(tol3, TOLERANCE) and
                definitely_less_than(tol2, TOLERANCE) and
                temperature_count > MIN_TEMPERATURES and
                (definitely_less_than(r_accept, MIN_ACCEPT) or frozen)):
            break

        cost3 = cost2
        cost2 = k.current_cost
        temperature *= COOLING_FACTOR
        temperature_count += 1

    logger.info("Anneal terminated after %d iterations at temperature %0.3f "
                "with cost %s.", iteration_count, temperature,
                k.current_cost)

    return SearchResult(k.assignment, k.current_cost,
                        cost_model.routing_tables(k.assignment))
