"""Moves which perturb an assignment during annealing.

A move is a callable ``move(assignment, random)`` which swaps the contents of
two nodes of the assignment (using :py:meth:`~nocmap.assignment.Assignment.swap`)
and returns the pair of nodes swapped. Swapping the same pair again undoes the
move. A move which finds nothing to do returns the same node twice.
"""

from enum import Enum

import logging

import numpy as np

logger = logging.getLogger(__name__)


class Moves(Enum):
    """The moves available to the annealer."""

    swap = 0
    """Swap the contents of two uniformly chosen nodes."""

    attraction = 1
    """Move a core next to one of the cores it communicates with."""


class SwapMove(object):
    """Swaps the contents of two distinct, uniformly chosen nodes.

    Either or both nodes may be empty.
    """

    def __init__(self, mesh, traffic):
        if len(mesh) < 2:
            raise ValueError("Swap moves need at least two nodes")
        self.num_nodes = len(mesh)

    def __call__(self, assignment, random):
        node_a = random.randint(0, self.num_nodes - 1)
        while True:
            node_b = random.randint(0, self.num_nodes - 1)
            if node_b != node_a:
                break
        assignment.swap(node_a, node_b)
        return (node_a, node_b)


def _select(weights, candidates, p):
    """Select from candidates using a uniform number p in [0, 1), each with
    probability proportional to its (positive) weight.
    """
    cumulative = np.cumsum(weights[candidates]) / weights[candidates].sum()
    index = int(np.searchsorted(cumulative, p))
    return int(candidates[min(index, len(candidates) - 1)])


class AttractionMove(object):
    """Moves a core onto a node neighbouring one of its communication
    partners, so that communicating cores gather together.

    The core to move is chosen with probability proportional to the volume it
    sends. Its partner is chosen with probability proportional to the volume
    exchanged (in either direction) with the core. The core is then swapped
    with a uniformly chosen neighbour of the partner's node.

    If no core sends anything or the partner's node has no neighbour other
    than the moving core's node, no move is made.
    """

    def __init__(self, mesh, traffic):
        self.mesh = mesh
        self._sent = traffic.to_volume.sum(axis=1)
        self._senders = np.flatnonzero(self._sent > 0)
        self._exchanged = traffic.to_volume + traffic.from_volume
        self._partners = [np.array(traffic.partners(core_id), dtype=int)
                          for core_id in range(len(traffic))]
        self._neighbours = [mesh.neighbours(node.node_id) for node in mesh]

    def __call__(self, assignment, random):
        if len(self._senders) == 0:
            logger.warning("No core communicates; no move made.")
            return (0, 0)

        core = _select(self._sent, self._senders, random.random())
        node = assignment.core_to_node[core]

        partner = _select(self._exchanged[core], self._partners[core],
                          random.random())
        partner_node = assignment.core_to_node[partner]

        allowed = [n for n in self._neighbours[partner_node] if n != node]
        if not allowed:
            logger.warning("No node near core %d's partner %d is available "
                           "to core %d; no move made.", core, partner, core)
            return (node, node)

        other_node = allowed[random.randint(0, len(allowed) - 1)]
        logger.debug("Moving core %d from node %d towards core %d on node %d.",
                     core, node, partner, other_node)
        assignment.swap(node, other_node)
        return (node, other_node)


_MOVES = {
    Moves.swap: SwapMove,
    Moves.attraction: AttractionMove,
}


def make_move(move, mesh, traffic):
    """Construct the move callable for a :py:class:`.Moves` value."""
    return _MOVES[move](mesh, traffic)
