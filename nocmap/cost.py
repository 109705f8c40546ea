"""Estimate the cost of a mapping of cores onto a mesh.

The cost of a mapping is the energy its communications consume plus a
penalty for every link asked to carry more bandwidth than it has::

    cost = switch energy + link energy + buffer energy
           + OVERLOAD_UNIT_COST * sum(usage / bandwidth - 1 for overloaded links)

For every pair of communicating cores, each bit sent consumes the switching
energy of every router on the path (the source's and destination's included),
the transmission energy of every link traversed, a buffer read and write per
hop and a final buffer write at the source.

With static routing the path between two nodes never changes and so the
per-bit energy and link usage of every node pair are computed once and
evaluation is a handful of array operations. With adaptive routing the path
depends on the traffic already routed and so every evaluation routes every
communication afresh.
"""

import collections

import logging

import numpy as np

from nocmap.routing.turn_models import AdaptiveRouter, TurnModel

from nocmap.routing.xy import build_xy_tables

from nocmap.utils.comparisons import definitely_greater_than

logger = logging.getLogger(__name__)


OVERLOAD_UNIT_COST = 1e9
"""The cost added per unit of link overload (usage / bandwidth - 1)."""


class EnergyParameters(collections.namedtuple(
        "EnergyParameters",
        "switch_ebit link_ebit buffer_read_ebit buffer_write_ebit")):
    """The per-bit energy constants of a network-on-chip.

    Parameters
    ----------
    switch_ebit : float or None
        Energy consumed by every router to switch one bit. If None, the
        per-node values carried by the mesh are used.
    link_ebit : float or None
        Energy consumed to transmit one bit over any link. If None, the
        per-link values carried by the mesh are used.
    buffer_read_ebit : float
        Energy consumed reading one bit from a router buffer.
    buffer_write_ebit : float
        Energy consumed writing one bit into a router buffer.
    """

    def __new__(cls, switch_ebit=None, link_ebit=None,
                buffer_read_ebit=1.056, buffer_write_ebit=2.831):
        return super(EnergyParameters, cls).__new__(
            cls, switch_ebit, link_ebit, buffer_read_ebit, buffer_write_ebit)


class EnergyBreakdown(collections.namedtuple(
        "EnergyBreakdown", "switch link buffer")):
    """The communication energy of a mapping, split by where it is consumed.
    """

    @property
    def total(self):
        return self.switch + self.link + self.buffer


OverloadedLink = collections.namedtuple("OverloadedLink",
                                        "link_id usage bandwidth")
"""A link required to carry more than its bandwidth."""


class Analysis(collections.namedtuple(
        "Analysis", "bandwidth_ok overloaded_links link_usage energy")):
    """The result of :py:meth:`.CostModel.analyse`.

    Parameters
    ----------
    bandwidth_ok : bool
        True iff no link is overloaded.
    overloaded_links : [:py:class:`.OverloadedLink`, ...]
        In link ID order.
    link_usage : :py:class:`numpy.ndarray`
        The bandwidth required of each link, indexed by link ID.
    energy : :py:class:`.EnergyBreakdown`
    """


class CostModel(object):
    """Evaluates the cost of assignments of a given traffic onto a given mesh.

    A cost model is shared mutable state: the adaptive router and static link
    usage counters it holds are overwritten by every evaluation.

    Attributes
    ----------
    mesh : :py:class:`~nocmap.topology.Mesh`
    traffic : :py:class:`~nocmap.traffic.Traffic`
    energy_parameters : :py:class:`.EnergyParameters`
    adaptive : bool
        If True, routes are chosen adaptively under ``turn_model``, otherwise
        XY routing is used.
    turn_model : :py:class:`~nocmap.routing.turn_models.TurnModel`
    xy_tables : :py:class:`~nocmap.routing.tables.RoutingTables`
        The static XY routing tables of the mesh.
    router : :py:class:`~nocmap.routing.turn_models.AdaptiveRouter` or None
        The adaptive router (adaptive mode only).
    link_usage : :py:class:`numpy.ndarray` or None
        The bandwidth required of each link by the most recently evaluated
        assignment (static mode only).
    """

    def __init__(self, mesh, traffic, energy_parameters=EnergyParameters(),
                 adaptive=False, turn_model=TurnModel.west_first):
        self.mesh = mesh
        self.traffic = traffic
        self.energy_parameters = energy_parameters
        self.adaptive = adaptive
        self.turn_model = turn_model

        if energy_parameters.switch_ebit is None:
            self._switch_ebit = np.array([node.switch_ebit for node in mesh],
                                         dtype=float)
        else:
            self._switch_ebit = np.full(len(mesh),
                                        float(energy_parameters.switch_ebit))
        if energy_parameters.link_ebit is None:
            self._link_ebit = np.array([link.link_ebit for link in mesh.links],
                                       dtype=float)
        else:
            self._link_ebit = np.full(len(mesh.links),
                                      float(energy_parameters.link_ebit))
        self._bandwidth = np.array([link.bandwidth for link in mesh.links],
                                   dtype=float)

        self.xy_tables = build_xy_tables(mesh)

        if adaptive:
            self.router = AdaptiveRouter(mesh, turn_model)
            self.link_usage = None
        else:
            self.router = None
            self.link_usage = np.zeros(len(mesh.links))
            self._precompute_static_routes()

    def _precompute_static_routes(self):
        """Tabulate the per-bit energy and links used between every pair of
        nodes under XY routing.
        """
        num_nodes = len(self.mesh)
        self.link_usage_lists = self.xy_tables.link_usage_lists()

        # [source, destination] -> per-bit energy components and hop count
        self._pair_switch_ebit = np.zeros((num_nodes, num_nodes))
        self._pair_link_ebit = np.zeros((num_nodes, num_nodes))
        self._pair_hops = np.zeros((num_nodes, num_nodes))

        for source in range(num_nodes):
            for destination in range(num_nodes):
                links = self.link_usage_lists[source][destination]
                nodes = self.xy_tables.path(source, destination)
                self._pair_switch_ebit[source, destination] = \
                    self._switch_ebit[nodes].sum()
                self._pair_link_ebit[source, destination] = \
                    self._link_ebit[links].sum()
                self._pair_hops[source, destination] = len(links)

    def _placed(self, assignment):
        """Get the IDs of the placed cores and the nodes they're on."""
        nodes = np.array(assignment.core_to_node, dtype=int)
        cores = np.flatnonzero(nodes >= 0)
        return cores, nodes[cores]

    def _pairs(self, assignment, matrix):
        """Generate (source node, destination node, value) for every ordered
        pair of placed cores with a positive entry in a traffic matrix.
        """
        core_to_node = assignment.core_to_node
        for source, destination in zip(*np.nonzero(matrix > 0)):
            source_node = core_to_node[source]
            destination_node = core_to_node[destination]
            if source_node >= 0 and destination_node >= 0:
                yield (source_node, destination_node,
                       matrix[source, destination])

    def _breakdown(self, volume, switch_ebit, link_ebit, hops):
        """Combine the volume of a set of communications with the per-bit
        energy of their routes.
        """
        read = self.energy_parameters.buffer_read_ebit
        write = self.energy_parameters.buffer_write_ebit
        return EnergyBreakdown(
            switch=float((volume * switch_ebit).sum()),
            link=float((volume * link_ebit).sum()),
            buffer=float((read + write) * (volume * hops).sum() +
                         write * volume.sum()))

    def _route_energy(self, assignment, route):
        """Compute the energy of every communication of an assignment, each
        following the route given by ``route(source, destination, volume) ->
        (nodes, links)``.
        """
        volumes = []
        switch_ebit = []
        link_ebit = []
        hops = []
        for source, destination, volume in self._pairs(
                assignment, self.traffic.to_volume):
            nodes, links = route(source, destination, volume)
            volumes.append(volume)
            switch_ebit.append(self._switch_ebit[nodes].sum())
            link_ebit.append(self._link_ebit[links].sum())
            hops.append(len(links))
        return self._breakdown(np.array(volumes), np.array(switch_ebit),
                               np.array(link_ebit), np.array(hops))

    def _route_adaptively(self, assignment):
        """Route every communication of an assignment under the turn model.

        Bandwidth requirements are routed first and the usage they leave
        determines the overload. The usage counters are then cleared and the
        communication energy is computed along the routes just recorded.
        Pairs which exchange data but require no bandwidth have no recorded
        route and are routed afresh, weighted by their volume.

        Returns
        -------
        energy : :py:class:`.EnergyBreakdown`
        overload : float
        """
        router = self.router
        router.clear_directions()
        router.clear_usage()
        for source, destination, bandwidth in self._pairs(
                assignment, self.traffic.to_bandwidth):
            router.route(source, destination, bandwidth)
        overload = router.overload()

        router.clear_usage()

        def route(source, destination, volume):
            recorded = router.recorded_route(source, destination)
            if recorded is None:
                recorded = router.route(source, destination, volume)
            return recorded

        return self._route_energy(assignment, route), overload

    def energy(self, assignment):
        """Compute the communication energy of an assignment.

        In adaptive mode, every communication is routed afresh (see
        :py:meth:`.overload`) and the routing decisions recorded by the
        router are replaced.

        Returns
        -------
        :py:class:`.EnergyBreakdown`
        """
        if self.adaptive:
            return self._route_adaptively(assignment)[0]

        cores, nodes = self._placed(assignment)
        pairs = np.ix_(nodes, nodes)
        return self._breakdown(
            self.traffic.to_volume[np.ix_(cores, cores)],
            self._pair_switch_ebit[pairs],
            self._pair_link_ebit[pairs],
            self._pair_hops[pairs])

    def overload(self, assignment):
        """Compute how overloaded the links are under an assignment.

        The result is the sum, over every overloaded link, of the ratio of
        the bandwidth required of the link to its capacity, less one. It is
        not scaled by :py:data:`.OVERLOAD_UNIT_COST`.

        In adaptive mode, every communication is routed afresh weighted by
        its bandwidth requirement, replacing the routing decisions recorded
        by the router. Each direction out of a node is then treated as a
        link of its own.
        """
        if self.adaptive:
            return self._route_adaptively(assignment)[1]

        self.link_usage.fill(0.0)
        for source, destination, bandwidth in self._pairs(
                assignment, self.traffic.to_bandwidth):
            np.add.at(self.link_usage,
                      self.link_usage_lists[source][destination], bandwidth)

        overloaded = definitely_greater_than(self.link_usage, self._bandwidth)
        return float((self.link_usage[overloaded] /
                      self._bandwidth[overloaded] - 1.0).sum())

    def total_cost(self, assignment):
        """Compute the cost of an assignment.

        Parameters
        ----------
        assignment : :py:class:`~nocmap.assignment.Assignment`

        Returns
        -------
        float
            Communication energy plus :py:data:`.OVERLOAD_UNIT_COST` times the
            link overload.

        Raises
        ------
        UnresolvableRouteError
            In adaptive mode, if the turn model cannot route a communication.
        """
        if self.adaptive:
            energy, overload = self._route_adaptively(assignment)
        else:
            energy = self.energy(assignment)
            overload = self.overload(assignment)
        return energy.total + OVERLOAD_UNIT_COST * overload

    def routing_tables(self, assignment):
        """Get the routing tables to program for an assignment.

        In static mode these are the XY tables. In adaptive mode the
        assignment is routed once more and the routing decisions made are
        compiled into tables. These are the routes whose energy and overload
        :py:meth:`.total_cost` reports.

        Returns
        -------
        :py:class:`~nocmap.routing.tables.RoutingTables`

        Raises
        ------
        LinkLookupError
            If a routing decision does not correspond to a link.
        """
        if not self.adaptive:
            return self.xy_tables
        self._route_adaptively(assignment)
        return self.router.program_routers()

    def analyse(self, assignment, tables=None):
        """Verify the bandwidth requirements of an assignment and estimate
        the energy it consumes.

        The routes followed are read from routing tables rather than
        recomputed, making this an independent check of the tables.

        Parameters
        ----------
        assignment : :py:class:`~nocmap.assignment.Assignment`
        tables : :py:class:`~nocmap.routing.tables.RoutingTables` or None
            The tables to follow. Defaults to those given by
            :py:meth:`.routing_tables`.

        Returns
        -------
        :py:class:`.Analysis`

        Raises
        ------
        RoutingTableError
            If the tables do not route a communication to its destination.
        """
        if tables is None:
            tables = self.routing_tables(assignment)

        link_usage = np.zeros(len(self.mesh.links))
        for source, destination, bandwidth in self._pairs(
                assignment, self.traffic.to_bandwidth):
            for link_id in tables.links(source, destination):
                link_usage[link_id] += bandwidth

        overloaded_links = [
            OverloadedLink(int(link_id), float(link_usage[link_id]),
                           float(self._bandwidth[link_id]))
            for link_id in np.flatnonzero(
                definitely_greater_than(link_usage, self._bandwidth))]
        for link in overloaded_links:
            logger.info("Link %d is overloaded: %s > %s", link.link_id,
                        link.usage, link.bandwidth)

        energy = self._route_energy(
            assignment, lambda source, destination, volume: (
                tables.path(source, destination),
                tables.links(source, destination)))

        bandwidth_ok = len(overloaded_links) == 0
        logger.info("Bandwidth verification %s. Communication energy %s "
                    "(switch %s, link %s, buffer %s).",
                    "succeeded" if bandwidth_ok else "failed",
                    energy.total, energy.switch, energy.link, energy.buffer)

        return Analysis(bandwidth_ok, overloaded_links, link_usage, energy)
