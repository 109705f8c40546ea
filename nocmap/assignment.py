"""The placement of cores onto the nodes of a mesh.

An :py:class:`.Assignment` is an injective partial mapping from core IDs to
node IDs. It is kept as a pair of plain index lists (node-to-core and
core-to-node) which are only ever modified through :py:meth:`.Assignment.assign`
and :py:meth:`.Assignment.swap` so that the two views always agree.
"""

from nocmap.exceptions import TooFewNodesError


UNASSIGNED = -1
"""Marks a node hosting no core or a core not yet placed on any node."""


class Assignment(object):
    """A one-to-one placement of cores onto mesh nodes.

    Attributes
    ----------
    node_to_core : [int, ...]
        For each node ID, the ID of the core it hosts or
        :py:data:`.UNASSIGNED`.
    core_to_node : [int, ...]
        For each core ID, the ID of the node hosting it or
        :py:data:`.UNASSIGNED`.
    """
    __slots__ = ["node_to_core", "core_to_node"]

    def __init__(self, num_nodes, num_cores):
        if num_cores > num_nodes:
            raise TooFewNodesError(num_cores, num_nodes)
        self.node_to_core = [UNASSIGNED] * num_nodes
        self.core_to_node = [UNASSIGNED] * num_cores

    @classmethod
    def from_genes(cls, genes, num_cores):
        """Build an assignment from a node-indexed list of core IDs.

        Parameters
        ----------
        genes : [int, ...]
            ``genes[node]`` is the core placed on that node or
            :py:data:`.UNASSIGNED`.
        num_cores : int

        Raises
        ------
        ValueError
            If a core appears more than once or is out of range.
        """
        assignment = cls(len(genes), num_cores)
        for node, core in enumerate(genes):
            if core == UNASSIGNED:
                continue
            if not 0 <= core < num_cores:
                raise ValueError("Core {} does not exist".format(core))
            if assignment.core_to_node[core] != UNASSIGNED:
                raise ValueError("Core {} is placed twice".format(core))
            assignment.assign(core, node)
        return assignment

    @classmethod
    def from_arrangement(cls, arrangement, num_nodes):
        """Build an assignment placing core ``i`` on node ``arrangement[i]``.
        """
        assignment = cls(num_nodes, len(arrangement))
        for core, node in enumerate(arrangement):
            assignment.assign(core, node)
        return assignment

    @property
    def num_nodes(self):
        return len(self.node_to_core)

    @property
    def num_cores(self):
        return len(self.core_to_node)

    @property
    def genes(self):
        """A copy of the node-to-core list."""
        return list(self.node_to_core)

    def copy(self):
        """Produce an independent copy of this assignment."""
        other = Assignment.__new__(Assignment)
        other.node_to_core = list(self.node_to_core)
        other.core_to_node = list(self.core_to_node)
        return other

    def assign(self, core, node):
        """Place a core on a node, displacing whatever occupied either.

        Any core previously on the node becomes unassigned, as does the node
        the core previously occupied.
        """
        old_node = self.core_to_node[core]
        if old_node != UNASSIGNED:
            self.node_to_core[old_node] = UNASSIGNED
        old_core = self.node_to_core[node]
        if old_core != UNASSIGNED:
            self.core_to_node[old_core] = UNASSIGNED
        self.node_to_core[node] = core
        self.core_to_node[core] = node

    def swap(self, node_a, node_b):
        """Exchange the cores (or absence of cores) on two nodes.

        Swapping the same pair twice restores the original state exactly.
        """
        core_a = self.node_to_core[node_a]
        core_b = self.node_to_core[node_b]
        self.node_to_core[node_a] = core_b
        self.node_to_core[node_b] = core_a
        if core_a != UNASSIGNED:
            self.core_to_node[core_a] = node_b
        if core_b != UNASSIGNED:
            self.core_to_node[core_b] = node_a

    def clear(self):
        """Unassign every core."""
        for node in range(len(self.node_to_core)):
            self.node_to_core[node] = UNASSIGNED
        for core in range(len(self.core_to_node)):
            self.core_to_node[core] = UNASSIGNED

    def randomise(self, random):
        """Place every core on a uniformly random distinct node.

        Parameters
        ----------
        random : :py:class:`random.Random`
        """
        self.clear()
        nodes = list(range(self.num_nodes))
        random.shuffle(nodes)
        for core in range(self.num_cores):
            self.assign(core, nodes[core])

    def is_complete(self):
        """True iff every core has been placed on a node."""
        return UNASSIGNED not in self.core_to_node

    def check(self):
        """Verify the two views of the assignment agree.

        Raises
        ------
        ValueError
            If a core is on more than one node or the views disagree.
        """
        seen = set()
        for node, core in enumerate(self.node_to_core):
            if core == UNASSIGNED:
                continue
            if core in seen:
                raise ValueError("Core {} is on more than one node".format(
                    core))
            seen.add(core)
            if self.core_to_node[core] != node:
                raise ValueError(
                    "Core {} is on node {} but believes it is on node "
                    "{}".format(core, node, self.core_to_node[core]))
        for core, node in enumerate(self.core_to_node):
            if node != UNASSIGNED and self.node_to_core[node] != core:
                raise ValueError("Node {} does not host core {}".format(
                    node, core))

    def describe(self, traffic=None):
        """Produce human-readable lines describing the placement.

        Parameters
        ----------
        traffic : :py:class:`~nocmap.traffic.Traffic` or None
            If given, the application of each core is included.

        Returns
        -------
        [str, ...]
            One line per node.
        """
        lines = []
        for node, core in enumerate(self.node_to_core):
            if core == UNASSIGNED:
                lines.append("node {} is empty".format(node))
            elif traffic is not None:
                lines.append("node {} has core {} (application {})".format(
                    node, core, traffic.cores[core].application))
            else:
                lines.append("node {} has core {}".format(node, core))
        return lines

    def __eq__(self, other):
        return (isinstance(other, Assignment) and
                self.node_to_core == other.node_to_core and
                self.core_to_node == other.core_to_node)

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(tuple(self.node_to_core))

    def __repr__(self):
        return "<Assignment {}>".format(self.node_to_core)
