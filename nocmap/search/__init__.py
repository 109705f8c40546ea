"""Search strategies which look for a low-cost assignment of cores to nodes.

Every strategy takes a :py:class:`~nocmap.cost.CostModel` and returns a
:py:class:`.SearchResult`:

* :py:func:`nocmap.search.sa.anneal` Simulated annealing.
* :py:func:`nocmap.search.ga.evolve` A genetic algorithm.
* :py:func:`nocmap.search.exhaustive.search` Exhaustive enumeration (only
  practical for tiny meshes).
"""

import collections


SearchResult = collections.namedtuple("SearchResult",
                                      "assignment cost routing_tables")
"""The outcome of a search.

Parameters
----------
assignment : :py:class:`~nocmap.assignment.Assignment`
    The best assignment found.
cost : float
    Its cost.
routing_tables : :py:class:`~nocmap.routing.tables.RoutingTables`
    The routing tables to program for the assignment. With adaptive routing
    these are compiled from the routes chosen when evaluating the assignment.
"""
