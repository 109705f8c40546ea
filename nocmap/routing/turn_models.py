"""Adaptive, deadlock-free routing using turn models.

A turn model forbids enough of the turns a packet could make in a mesh that
no cycle of channel dependencies (and hence no deadlock) can form. Within the
remaining freedom, the routers here choose the output direction which has so
far carried the least traffic.

Two turn models are implemented:

* West-First: packets bound westward travel west before anything else.
  Afterwards they may not turn west again.
* Odd-Even (Chiu, 2000): east-north and east-south turns are forbidden in
  even columns and north-west and south-west turns in odd columns.

Routes are not precomputed: an :py:class:`.AdaptiveRouter` routes each packet
hop-by-hop, accumulating the traffic carried in each direction of each node
and recording the direction chosen into a table-in-progress. Once a search
has settled on a mapping, :py:meth:`.AdaptiveRouter.program_routers` compiles
the recorded directions into conventional
:py:class:`~nocmap.routing.tables.RoutingTables`.
"""

from enum import Enum

import numpy as np

from nocmap.directions import Directions

from nocmap.exceptions import UnresolvableRouteError

from nocmap.routing.tables import RoutingTables

from nocmap.utils.comparisons import definitely_greater_than


class TurnModel(Enum):
    """The turn models available for adaptive routing."""

    west_first = 0
    """Packets must complete all westward travel first."""

    odd_even = 1
    """Turns are restricted according to the parity of the column."""


def west_first_direction(row, column, source_column,
                         destination_row, destination_column, usage):
    """Choose the next direction of a packet under the West-First model.

    Parameters
    ----------
    row, column : int
        The position of the packet.
    source_column : int
        The column of the packet's source. Unused by this model.
    destination_row, destination_column : int
        The position of the packet's destination.
    usage : :py:class:`numpy.ndarray`
        The traffic carried so far in each of the node's output directions,
        indexed by :py:class:`~nocmap.directions.Directions`.

    Returns
    -------
    :py:class:`~nocmap.directions.Directions`
    """
    if column > destination_column:
        return Directions.west
    elif column == destination_column:
        return Directions.vertical_towards(row, destination_row)
    elif row == destination_row:
        return Directions.east

    # Either the vertical direction or east will do
    vertical = Directions.vertical_towards(row, destination_row)
    if usage[vertical] < usage[Directions.east]:
        return vertical
    elif usage[vertical] > usage[Directions.east]:
        return Directions.east
    elif ((destination_column - column) ** 2 <=
          (destination_row - row) ** 2):
        # Tied: head along the dimension with furthest left to go
        return vertical
    else:
        return Directions.east


def odd_even_direction(row, column, source_column,
                       destination_row, destination_column, usage):
    """Choose the next direction of a packet under the Odd-Even model.

    Parameters are as for :py:func:`.west_first_direction`.

    Returns
    -------
    :py:class:`~nocmap.directions.Directions` or None
        None if the model permits no direction.
    """
    d_column = destination_column - column
    d_row = destination_row - row

    if d_column == 0:
        return Directions.north if d_row > 0 else Directions.south
    elif d_column > 0:
        if d_row == 0:
            return Directions.east

        # Leaving the row (an east-north or east-south turn) is only allowed
        # in odd columns, or at the source where no turn is made.
        vertical = None
        if column % 2 == 1 or column == source_column:
            vertical = Directions.north if d_row > 0 else Directions.south
        # Arriving in an even destination column eastward would require a
        # forbidden turn there.
        east = None
        if destination_column % 2 == 1 or d_column != 1:
            east = Directions.east

        if vertical is None:
            return east
        elif east is None:
            return vertical
        elif usage[vertical] < usage[east]:
            return vertical
        else:
            return east
    else:
        if column % 2 == 1 or d_row == 0:
            return Directions.west

        vertical = Directions.north if d_row > 0 else Directions.south
        if usage[Directions.west] < usage[vertical]:
            return Directions.west
        else:
            return vertical


_DIRECTION_FUNCTIONS = {
    TurnModel.west_first: west_first_direction,
    TurnModel.odd_even: odd_even_direction,
}


class AdaptiveRouter(object):
    """Routes packets through a mesh hop-by-hop under a turn model.

    Attributes
    ----------
    mesh : :py:class:`~nocmap.topology.Mesh`
    turn_model : :py:class:`.TurnModel`
    usage : :py:class:`numpy.ndarray`
        The traffic routed in each direction out of each node, indexed as
        ``usage[row, column, direction]``.
    directions : :py:class:`numpy.ndarray`
        The routing table in progress, indexed as ``directions[row, column,
        source, destination]``, holding the
        :py:class:`~nocmap.directions.Directions` value chosen for the pair at
        that node or -1 if none has been recorded.
    """

    def __init__(self, mesh, turn_model=TurnModel.west_first):
        self.mesh = mesh
        self.turn_model = turn_model
        self._choose_direction = _DIRECTION_FUNCTIONS[turn_model]

        num_nodes = len(mesh)
        self.usage = np.zeros((mesh.height, mesh.width, len(Directions)))
        self.directions = np.full(
            (mesh.height, mesh.width, num_nodes, num_nodes), -1,
            dtype=np.int8)

        # The link leaving each node in each direction (-1 where the mesh
        # ends) and its capacity (infinite where the mesh ends).
        self._links = np.full((mesh.height, mesh.width, len(Directions)), -1,
                              dtype=int)
        self._capacity = np.full(self._links.shape, np.inf)
        for node in mesh:
            for direction in Directions:
                if direction.step(node.row, node.column) in mesh:
                    link_id = mesh.link_towards(node.node_id, direction)
                    self._links[node.row, node.column, direction] = link_id
                    self._capacity[node.row, node.column, direction] = \
                        mesh.links[link_id].bandwidth

    def clear_usage(self):
        """Forget the traffic routed so far."""
        self.usage.fill(0)

    def clear_directions(self):
        """Forget every recorded routing decision."""
        self.directions.fill(-1)

    def route(self, source, destination, weight):
        """Route a packet from one node to another.

        Every hop adds weight to the usage of the direction taken and records
        that direction in :py:attr:`.directions`.

        Parameters
        ----------
        source : int
        destination : int
            Node IDs.
        weight : float
            The traffic the route carries.

        Returns
        -------
        nodes : [int, ...]
            The IDs of the nodes visited, including source and destination.
        links : [int, ...]
            The IDs of the links traversed, in order.

        Raises
        ------
        UnresolvableRouteError
            If the turn model permits no direction.
        """
        source_node = self.mesh.nodes[source]
        destination_node = self.mesh.nodes[destination]
        row, column = source_node.position
        destination_row, destination_column = destination_node.position

        nodes = [source]
        links = []
        while row != destination_row or column != destination_column:
            direction = self._choose_direction(
                row, column, source_node.column,
                destination_row, destination_column, self.usage[row, column])
            if direction is None:
                raise UnresolvableRouteError(row, column, source, destination)

            self.usage[row, column, direction] += weight
            self.directions[row, column, source, destination] = direction
            links.append(int(self._links[row, column, direction]))

            row, column = direction.step(row, column)
            nodes.append(self.mesh.node_id(row, column))

        return nodes, links

    def recorded_route(self, source, destination):
        """Follow the directions recorded for a packet from one node to
        another without routing it again.

        Usage counters are left unchanged.

        Returns
        -------
        (nodes, links) or None
            As for :py:meth:`.route`, or None if no direction has been
            recorded for the pair at the source.
        """
        row, column = self.mesh.nodes[source].position
        destination_row, destination_column = \
            self.mesh.nodes[destination].position

        nodes = [source]
        links = []
        if source != destination and \
                self.directions[row, column, source, destination] < 0:
            return None
        while row != destination_row or column != destination_column:
            direction = Directions(
                int(self.directions[row, column, source, destination]))
            links.append(int(self._links[row, column, direction]))
            row, column = direction.step(row, column)
            nodes.append(self.mesh.node_id(row, column))

        return nodes, links

    def overload(self):
        """Sum, over every overloaded direction, the ratio of the traffic
        routed to the capacity of the link, less one.
        """
        overloaded = definitely_greater_than(self.usage, self._capacity)
        return float(
            (self.usage[overloaded] / self._capacity[overloaded] - 1.0).sum())

    def program_routers(self):
        """Compile the recorded routing decisions into routing tables.

        Returns
        -------
        :py:class:`~nocmap.routing.tables.RoutingTables`
            Entries for (source, destination) pairs never routed are left
            :py:data:`~nocmap.routing.tables.Unset`.

        Raises
        ------
        LinkLookupError
            If a recorded direction does not correspond to a link.
        """
        tables = RoutingTables(self.mesh)
        for row, column, source, destination in \
                np.argwhere(self.directions >= 0):
            node_id = self.mesh.node_id(int(row), int(column))
            direction = Directions(
                int(self.directions[row, column, source, destination]))
            tables[node_id, int(source), int(destination)] = \
                self.mesh.link_towards(node_id, direction)
        return tables
