"""Defines the geometry and physical parameters of a 2D mesh Network-on-Chip.

The datastructures in this module describe the static topology only: which
nodes exist, where they are and which (bidirectional) links connect them.
Which core is placed on which node is described separately by an
:py:class:`~nocmap.assignment.Assignment`.
"""

import math

from nocmap.directions import Directions

from nocmap.exceptions import LinkLookupError


class Node(object):
    """A router (and the processing element attached to it) in a mesh.

    Attributes
    ----------
    node_id : int
    row : int
    column : int
    in_links : [int, ...]
        IDs of the links over which traffic may arrive at this node.
    out_links : [int, ...]
        IDs of the links over which traffic may leave this node. Since mesh
        links are bidirectional, this usually lists the same links as
        in_links.
    switch_ebit : float
        The energy consumed by this node's router to switch one bit.
    """
    __slots__ = ["node_id", "row", "column", "in_links", "out_links",
                 "switch_ebit"]

    def __init__(self, node_id, row, column, switch_ebit=0.0,
                 in_links=None, out_links=None):
        self.node_id = node_id
        self.row = row
        self.column = column
        self.switch_ebit = switch_ebit
        self.in_links = list(in_links) if in_links is not None else []
        self.out_links = list(out_links) if out_links is not None else []

    @property
    def position(self):
        """The (row, column) of the node."""
        return (self.row, self.column)

    def __repr__(self):
        return "<Node {} at ({}, {})>".format(self.node_id, self.row,
                                              self.column)


class Link(object):
    """A bidirectional channel between two adjacent nodes.

    The two endpoints are named "first" and "second" but traffic may travel
    in either direction.

    Attributes
    ----------
    link_id : int
    first : int
    second : int
        The IDs of the nodes at either end of the link.
    bandwidth : float
        The capacity of the link.
    link_ebit : float
        The energy consumed to transmit one bit over the link.
    """
    __slots__ = ["link_id", "first", "second", "bandwidth", "link_ebit"]

    def __init__(self, link_id, first, second, bandwidth, link_ebit=0.0):
        self.link_id = link_id
        self.first = first
        self.second = second
        self.bandwidth = bandwidth
        self.link_ebit = link_ebit

    def other_end(self, node_id):
        """Get the ID of the node at the far end of the link from node_id.

        Raises
        ------
        ValueError
            If node_id is not an endpoint of this link.
        """
        if node_id == self.first:
            return self.second
        elif node_id == self.second:
            return self.first
        else:
            raise ValueError("Node {} is not connected to link {}".format(
                node_id, self.link_id))

    def __repr__(self):
        return "<Link {} between nodes {} and {}>".format(
            self.link_id, self.first, self.second)


class Mesh(object):
    """A rectangular 2D mesh of nodes joined by bidirectional links.

    Node IDs are allocated row-major: the node at (row, column) has ID ``row *
    width + column``.

    Attributes
    ----------
    width : int
        The number of columns in the mesh.
    height : int
        The number of rows in the mesh.
    nodes : [:py:class:`.Node`, ...]
        Indexed by node ID.
    links : [:py:class:`.Link`, ...]
        Indexed by link ID.
    """

    def __init__(self, width, height, nodes, links):
        """Define a mesh from externally supplied nodes and links.

        Any node whose in_links/out_links are empty has them filled in from
        the supplied links.

        Raises
        ------
        ValueError
            If the nodes do not form a width x height mesh or a link does not
            join two adjacent nodes.
        """
        self.width = width
        self.height = height
        self.nodes = sorted(nodes, key=(lambda n: n.node_id))
        self.links = sorted(links, key=(lambda link: link.link_id))

        if len(self.nodes) != width * height:
            raise ValueError(
                "A {}x{} mesh needs {} nodes, {} were given".format(
                    width, height, width * height, len(self.nodes)))
        for node_id, node in enumerate(self.nodes):
            if node.node_id != node_id or \
                    node.row * width + node.column != node_id:
                raise ValueError("{} is out of place in a {}x{} mesh".format(
                    node, width, height))
        for link_id, link in enumerate(self.links):
            if link.link_id != link_id:
                raise ValueError("Link IDs must be numbered from 0")

        # {(node_id, node_id): link_id, ...} for both orderings of each link
        self._links_between = {}
        for link in self.links:
            first = self.nodes[link.first]
            second = self.nodes[link.second]
            try:
                Directions.between(first.position, second.position)
            except ValueError:
                raise ValueError("{} does not join adjacent nodes".format(
                    link))
            self._links_between[(link.first, link.second)] = link.link_id
            self._links_between[(link.second, link.first)] = link.link_id

        for node in self.nodes:
            incident = [link.link_id for link in self.links
                        if node.node_id in (link.first, link.second)]
            if not node.in_links:
                node.in_links = list(incident)
            if not node.out_links:
                node.out_links = list(incident)

    def __len__(self):
        """The number of nodes in the mesh."""
        return len(self.nodes)

    def __iter__(self):
        """Iterate over the nodes in ID order."""
        return iter(self.nodes)

    def __contains__(self, position):
        """Test whether a (row, column) position lies within the mesh."""
        row, column = position
        return 0 <= row < self.height and 0 <= column < self.width

    def node_id(self, row, column):
        """Get the ID of the node at (row, column)."""
        return row * self.width + column

    def node_at(self, row, column):
        """Get the :py:class:`.Node` at (row, column)."""
        return self.nodes[self.node_id(row, column)]

    def neighbours(self, node_id):
        """Get the IDs of the nodes linked to the given node, in link order."""
        return [self.links[link_id].other_end(node_id)
                for link_id in self.nodes[node_id].out_links]

    def link_between(self, node_a, node_b):
        """Get the ID of the link joining two nodes.

        Raises
        ------
        LinkLookupError
            If the nodes are not linked.
        """
        try:
            return self._links_between[(node_a, node_b)]
        except KeyError:
            raise LinkLookupError(node_a, self.nodes[node_b].position)

    def link_towards(self, node_id, direction):
        """Get the ID of the link leaving a node in the given direction.

        Raises
        ------
        LinkLookupError
            If no link leaves the node in that direction.
        """
        node = self.nodes[node_id]
        neighbour = direction.step(node.row, node.column)
        if neighbour not in self:
            raise LinkLookupError(node_id, neighbour)
        return self.link_between(node_id, self.node_id(*neighbour))


def build_mesh(width, height, bandwidth, switch_ebit=0.284, link_ebit=0.449):
    """Build a regular width x height mesh with uniform link parameters.

    All horizontal links are numbered first (row by row, west to east),
    followed by all vertical links (column by column, south to north).

    Parameters
    ----------
    width : int
        Number of columns.
    height : int
        Number of rows.
    bandwidth : float
        The capacity of every link.
    switch_ebit : float
        Energy per bit switched by every router.
    link_ebit : float
        Energy per bit transmitted over every link.

    Returns
    -------
    :py:class:`.Mesh`
    """
    nodes = [Node(row * width + column, row, column, switch_ebit)
             for row in range(height)
             for column in range(width)]

    links = []
    for row in range(height):
        for column in range(width - 1):
            links.append(Link(len(links),
                              row * width + column,
                              row * width + column + 1,
                              bandwidth, link_ebit))
    for column in range(width):
        for row in range(height - 1):
            links.append(Link(len(links),
                              row * width + column,
                              (row + 1) * width + column,
                              bandwidth, link_ebit))

    return Mesh(width, height, nodes, links)


def mesh_size_for(num_cores):
    """Choose the dimensions of a mesh large enough for a number of cores.

    A square mesh of side ``max(2, ceil(sqrt(num_cores)))`` is used unless a
    mesh one row shorter can still accommodate every core.

    Returns
    -------
    (width, height)
    """
    side = max(2, int(math.ceil(math.sqrt(num_cores))))
    if side * (side - 1) >= num_cores:
        return (side, side - 1)
    else:
        return (side, side)
