"""Dimension-order (XY) routing.

Packets first travel along their row until they reach the destination's
column and then along that column until they reach the destination. Since
the route depends only on the current node and the destination, every node's
table holds the same entries for every source.
"""

import logging

from nocmap.directions import Directions

from nocmap.routing.tables import RoutingTables

logger = logging.getLogger(__name__)


def xy_direction(position, destination):
    """Get the direction an XY-routed packet leaves a node in.

    Parameters
    ----------
    position : (row, column)
        The node the packet is at.
    destination : (row, column)
        The node the packet is bound for.

    Returns
    -------
    :py:class:`~nocmap.directions.Directions` or None
        None if the packet has arrived.
    """
    row, column = position
    destination_row, destination_column = destination
    if column < destination_column:
        return Directions.east
    elif column > destination_column:
        return Directions.west
    elif row != destination_row:
        return Directions.vertical_towards(row, destination_row)
    else:
        return None


def build_xy_tables(mesh):
    """Generate the XY routing tables of every node in a mesh.

    Parameters
    ----------
    mesh : :py:class:`~nocmap.topology.Mesh`

    Returns
    -------
    :py:class:`~nocmap.routing.tables.RoutingTables`

    Raises
    ------
    LinkLookupError
        If the mesh lacks a link the route requires.
    """
    tables = RoutingTables(mesh)
    sources = range(len(mesh))
    for node in mesh:
        for destination in mesh:
            direction = xy_direction(node.position, destination.position)
            if direction is None:
                continue
            link_id = mesh.link_towards(node.node_id, direction)
            # The route is independent of the source so the same entry is
            # used for all of them.
            for source in sources:
                tables[node.node_id, source, destination.node_id] = link_id

    logger.debug("Generated XY routing tables for a %dx%d mesh.",
                 mesh.width, mesh.height)
    return tables
