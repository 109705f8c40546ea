"""Exceptions which mappers and routers can throw to indicate standard types
of problem.
"""


class MappingError(Exception):
    """Base class of all errors raised while mapping cores onto a mesh."""
    pass


class TooFewNodesError(MappingError):
    """Raised when a mesh has fewer nodes than there are cores to map.

    Attributes
    ----------
    num_cores : int
        The number of cores which were to be mapped.
    num_nodes : int
        The number of nodes available in the mesh (num_nodes < num_cores).
    """

    def __init__(self, num_cores, num_nodes):
        super(TooFewNodesError, self).__init__(num_cores, num_nodes)
        self.num_cores = num_cores
        self.num_nodes = num_nodes

    def __str__(self):
        return ("Cannot map {0.num_cores} cores onto a mesh with only "
                "{0.num_nodes} nodes".format(self))


class UnresolvableRouteError(MappingError):
    """Raised when a turn model leaves no legal direction in which to route a
    packet.

    Attributes
    ----------
    row : int
    column : int
        The position of the router where no direction could be chosen.
    source : int
    destination : int
        The IDs of the source and destination nodes of the packet.
    """

    def __init__(self, row, column, source, destination):
        super(UnresolvableRouteError, self).__init__(
            row, column, source, destination)
        self.row = row
        self.column = column
        self.source = source
        self.destination = destination

    def __str__(self):
        return ("No legal direction at ({0.row}, {0.column}) for traffic "
                "from node {0.source} to node {0.destination}".format(self))


class LinkLookupError(MappingError):
    """Raised when no link joins two nodes which should be adjacent.

    This indicates an inconsistency between the geometry of a mesh and the
    links it was given.

    Attributes
    ----------
    node : int
        The ID of the node the link should leave.
    neighbour : (row, column)
        The position the link should lead to.
    """

    def __init__(self, node, neighbour):
        super(LinkLookupError, self).__init__(node, neighbour)
        self.node = node
        self.neighbour = neighbour

    def __str__(self):
        row, column = self.neighbour
        return ("No link connects node {} to the node at ({}, {})".format(
            self.node, row, column))


class RoutingTableError(MappingError):
    """Raised when following a routing table does not lead to the
    destination.

    Attributes
    ----------
    node : int
        The node whose routing table could not be followed.
    source : int
    destination : int
    """

    def __init__(self, node, source, destination):
        super(RoutingTableError, self).__init__(node, source, destination)
        self.node = node
        self.source = source
        self.destination = destination

    def __str__(self):
        return ("The routing table of node {0.node} has no usable entry for "
                "traffic from node {0.source} to node "
                "{0.destination}".format(self))


class InvalidTrafficError(MappingError):
    """Raised when a traffic description cannot be ingested.

    Attributes
    ----------
    line_number : int
        The (1-based) line number of the offending line.
    line : str
    reason : str
    """

    def __init__(self, line_number, line, reason):
        super(InvalidTrafficError, self).__init__(line_number, line, reason)
        self.line_number = line_number
        self.line = line
        self.reason = reason

    def __str__(self):
        return "Line {0.line_number} ({0.line!r}): {0.reason}".format(self)
