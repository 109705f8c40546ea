"""High-level wrapper around the mapping functions.
"""

import collections

import logging

from nocmap.cost import CostModel, EnergyParameters

from nocmap.exceptions import TooFewNodesError

from nocmap.routing.turn_models import TurnModel

from nocmap.search.sa import anneal as default_search

logger = logging.getLogger(__name__)


class MappingResult(collections.namedtuple(
        "MappingResult", "assignment cost routing_tables analysis")):
    """The outcome of :py:func:`.map_cores`.

    Parameters
    ----------
    assignment : :py:class:`~nocmap.assignment.Assignment`
        The best assignment of cores to nodes found.
    cost : float
        The cost of the assignment.
    routing_tables : :py:class:`~nocmap.routing.tables.RoutingTables`
        The routing tables to program: compiled from the adaptive routing
        decisions when adaptive routing is used, the XY tables otherwise.
    analysis : :py:class:`~nocmap.cost.Analysis`
        Bandwidth verification and energy breakdown for the assignment,
        following routing_tables.
    """


def map_cores(mesh, traffic, search=default_search, search_kwargs={},
              energy_parameters=EnergyParameters(), adaptive=False,
              turn_model=TurnModel.west_first, seed=None):
    """Wrapper for mapping cores onto a mesh in the common case.

    Parameters
    ----------
    mesh : :py:class:`~nocmap.topology.Mesh`
    traffic : :py:class:`~nocmap.traffic.Traffic`
    search : function (Default: :py:func:`nocmap.search.sa.anneal`)
        **Optional.** Search algorithm to use, e.g.
        :py:func:`nocmap.search.ga.evolve` or
        :py:func:`nocmap.search.exhaustive.search`.
    search_kwargs : dict (Default: {})
        **Optional.** Algorithm-specific arguments for the search.
    energy_parameters : :py:class:`~nocmap.cost.EnergyParameters`
        **Optional.** Per-bit energy constants. Switch and link energies left
        as None are those of the mesh.
    adaptive : bool
        **Optional.** If True, route adaptively under ``turn_model``,
        otherwise use XY routing.
    turn_model : :py:class:`~nocmap.routing.turn_models.TurnModel`
        **Optional.**
    seed : int or None
        **Optional.** If given, passed to the search as its ``seed`` argument
        to make the result reproducible. (The exhaustive search is
        deterministic and takes no seed.)

    Returns
    -------
    :py:class:`.MappingResult`

    Raises
    ------
    TooFewNodesError
        If the mesh has fewer nodes than there are cores. No search is
        attempted.
    """
    if len(traffic) > len(mesh):
        raise TooFewNodesError(len(traffic), len(mesh))

    if seed is not None:
        search_kwargs = dict(search_kwargs, seed=seed)

    cost_model = CostModel(mesh, traffic, energy_parameters,
                           adaptive=adaptive, turn_model=turn_model)
    assignment, cost, routing_tables = search(cost_model, **search_kwargs)
    assignment.check()

    logger.info("Mapped %d cores onto a %dx%d mesh with cost %s.",
                len(traffic), mesh.width, mesh.height, cost)
    for line in assignment.describe(traffic):
        logger.debug(line)

    analysis = cost_model.analyse(assignment, routing_tables)
    return MappingResult(assignment, cost, routing_tables, analysis)
