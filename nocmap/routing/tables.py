"""Per-node routing tables for a mesh.

Every node holds one entry for every (source node, destination node) pair
naming the link a packet travelling between them must leave on. Since a
table entry depends on the source as well as the destination, tables built
by adaptive routing may send two packets bound for the same destination along
different paths.
"""

import sentinel

from nocmap.exceptions import RoutingTableError


DeliverLocally = sentinel.create("DeliverLocally")
"""Table entry for packets which have arrived at their destination."""

Unset = sentinel.create("Unset")
"""Table entry for (source, destination) pairs whose route through a node has
not been defined."""


class RoutingTables(object):
    """The routing tables of every node in a mesh.

    Entries are looked up as ``tables[node, source, destination]`` and are
    either a link ID, :py:data:`.DeliverLocally` or :py:data:`.Unset`.

    Attributes
    ----------
    mesh : :py:class:`~nocmap.topology.Mesh`
    entries : [[[entry, ...], ...], ...]
        Indexed as ``entries[node][source][destination]``.
    """

    def __init__(self, mesh):
        """Create a set of tables where every node delivers packets
        addressed to itself locally and all other entries are
        :py:data:`.Unset`.
        """
        self.mesh = mesh
        num_nodes = len(mesh)
        self.entries = []
        for node in range(num_nodes):
            table = []
            for source in range(num_nodes):
                row = [Unset] * num_nodes
                row[node] = DeliverLocally
                table.append(row)
            self.entries.append(table)

    def __getitem__(self, key):
        node, source, destination = key
        return self.entries[node][source][destination]

    def __setitem__(self, key, link_id):
        node, source, destination = key
        self.entries[node][source][destination] = link_id

    def __eq__(self, other):
        return (isinstance(other, RoutingTables) and
                self.entries == other.entries)

    def __ne__(self, other):
        return not self == other

    def _walk(self, source, destination):
        """Generate the (node, link) hops of a packet's journey.

        The final hop is (destination, None).
        """
        node = source
        # A loop-free route never revisits a node
        for _ in range(len(self.mesh) + 1):
            entry = self.entries[node][source][destination]
            if entry is DeliverLocally:
                if node != destination:
                    raise RoutingTableError(node, source, destination)
                yield (node, None)
                return
            elif entry is Unset:
                raise RoutingTableError(node, source, destination)
            yield (node, entry)
            node = self.mesh.links[entry].other_end(node)
        raise RoutingTableError(node, source, destination)

    def path(self, source, destination):
        """Get the IDs of the nodes visited by a packet, source and
        destination included.

        Raises
        ------
        RoutingTableError
            If the route meets an :py:data:`.Unset` entry, is delivered away
            from its destination or loops.
        """
        return [node for node, _ in self._walk(source, destination)]

    def links(self, source, destination):
        """Get the IDs of the links traversed by a packet, in order.

        Raises
        ------
        RoutingTableError
            If the route meets an :py:data:`.Unset` entry, is delivered away
            from its destination or loops.
        """
        return [link for _, link in self._walk(source, destination)
                if link is not None]

    def link_usage_lists(self):
        """Precompute the links traversed between every pair of nodes.

        Returns
        -------
        [[[link_id, ...], ...], ...]
            Indexed as ``usage[source][destination]``. The lists for
            ``source == destination`` are empty.
        """
        num_nodes = len(self.mesh)
        return [[self.links(source, destination) if source != destination
                 else []
                 for destination in range(num_nodes)]
                for source in range(num_nodes)]
