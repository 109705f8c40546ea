"""Exhaustive search of every possible mapping.

Every injective assignment of k cores onto n nodes corresponds to an
arrangement (k-permutation) of the node IDs: core i is placed on node
``arrangement[i]``. There are n! / (n - k)! of them and so this search is
only practical for very small meshes, but it finds the optimum and is useful
for checking the other searches.
"""

import logging

from nocmap.assignment import Assignment

from nocmap.exceptions import TooFewNodesError

from nocmap.search import SearchResult

from nocmap.utils.comparisons import definitely_less_than

logger = logging.getLogger(__name__)


def count_arrangements(n, k):
    """Count the k-permutations of n items, n! / (n - k)!."""
    if not 0 <= k <= n:
        raise ValueError("Cannot arrange {} of {} items".format(k, n))
    count = 1
    for i in range(n - k + 1, n + 1):
        count *= i
    return count


def arrangements(n, k):
    """Generate every k-permutation of range(n) in lexicographic order.

    Successors are produced iteratively from the previous arrangement: the
    rightmost position whose value can be increased to a value not used to
    its left is increased to the smallest such value and every position to
    its right is refilled with the smallest unused values, in increasing
    order.

    Parameters
    ----------
    n : int
    k : int

    Yields
    ------
    (int, ...)
        Each arrangement, as a tuple of length k.
    """
    if not 0 <= k <= n:
        raise ValueError("Cannot arrange {} of {} items".format(k, n))

    a = list(range(k))
    available = [False] * k + [True] * (n - k)
    yield tuple(a)

    while True:
        found = False
        i = k - 1
        while i >= 0 and not found:
            available[a[i]] = True
            for j in range(a[i] + 1, n):
                if available[j]:
                    a[i] = j
                    available[j] = False
                    # Refill the positions to the right with the smallest
                    # unused values
                    value = 0
                    for position in range(i + 1, k):
                        while not available[value]:
                            value += 1
                        a[position] = value
                        available[value] = False
                    found = True
                    break
            i -= 1
        if not found:
            return
        yield tuple(a)


def search(cost_model, progress_step=10, on_progress=None):
    """Find the lowest-cost mapping by evaluating every possible mapping.

    Where several mappings share the lowest cost, the first (in lexicographic
    order of the nodes assigned to each core) is chosen.

    This algorithm produces INFO level logging information every
    ``progress_step`` percent of the search space explored.

    Parameters
    ----------
    cost_model : :py:class:`~nocmap.cost.CostModel`
    progress_step : float
        The percentage of the search space between progress reports.
    on_progress : callback_function or None
        An (optional) callback called at each progress report with the number
        of mappings evaluated, the total number of mappings and the lowest
        cost found so far. If the callback returns False, the search stops
        and the best mapping found so far is returned.

    Returns
    -------
    :py:class:`~nocmap.search.SearchResult`

    Raises
    ------
    TooFewNodesError
        If the mesh has fewer nodes than there are cores.
    """
    num_nodes = len(cost_model.mesh)
    num_cores = len(cost_model.traffic)
    if num_cores > num_nodes:
        raise TooFewNodesError(num_cores, num_nodes)
    if progress_step <= 0:
        raise ValueError("progress_step must be positive")

    total = count_arrangements(num_nodes, num_cores)
    logger.info("Exhaustively searching %d possible mappings of %d cores "
                "onto %d nodes.", total, num_cores, num_nodes)

    best_arrangement = None
    best_cost = float("inf")
    next_report = 0.0
    count = 0
    for arrangement in arrangements(num_nodes, num_cores):
        count += 1
        logger.debug("Evaluating mapping %d: %s", count, arrangement)

        cost = cost_model.total_cost(
            Assignment.from_arrangement(arrangement, num_nodes))
        if best_arrangement is None or definitely_less_than(cost, best_cost):
            best_arrangement = arrangement
            best_cost = cost

        progress = count * 100.0 / total
        if progress >= next_report:
            logger.info("Evaluated %d of %d mappings (%0.1f%%), best cost %s.",
                        count, total, progress, best_cost)
            next_report += progress_step
            if on_progress is not None:
                if on_progress(count, total, best_cost) is False:
                    logger.info("Search stopped early.")
                    break

    assignment = Assignment.from_arrangement(best_arrangement, num_nodes)
    return SearchResult(assignment, best_cost,
                        cost_model.routing_tables(assignment))
