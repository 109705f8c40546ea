import pytest

import random

from mock import Mock

from nocmap.topology import build_mesh

from nocmap.traffic import Traffic

from nocmap.assignment import Assignment

from nocmap.search.sa.moves import Moves, SwapMove, AttractionMove, \
    make_move


def test_make_move():
    mesh = build_mesh(2, 2, 1.0)
    traffic = Traffic(2)
    assert isinstance(make_move(Moves.swap, mesh, traffic), SwapMove)
    assert isinstance(make_move(Moves.attraction, mesh, traffic),
                      AttractionMove)


def test_swap_needs_two_nodes():
    with pytest.raises(ValueError):
        SwapMove(build_mesh(1, 1, 1.0), Traffic(1))


@pytest.mark.parametrize("seed", range(10))
def test_swap_move(seed):
    mesh = build_mesh(3, 2, 1.0)
    move = SwapMove(mesh, Traffic(4))
    assignment = Assignment(6, 4)
    r = random.Random(seed)
    assignment.randomise(r)
    original = assignment.copy()

    node_a, node_b = move(assignment, r)
    assert node_a != node_b
    assert 0 <= node_a < 6
    assert 0 <= node_b < 6
    assert assignment.node_to_core[node_a] == original.node_to_core[node_b]
    assert assignment.node_to_core[node_b] == original.node_to_core[node_a]
    assignment.check()

    # Undo
    assignment.swap(node_a, node_b)
    assert assignment == original


@pytest.mark.parametrize("seed", range(10))
def test_attraction_move(seed):
    mesh = build_mesh(3, 3, 1.0)
    traffic = Traffic(2)
    traffic.add_communication(0, 1, 10)
    move = AttractionMove(mesh, traffic)

    assignment = Assignment.from_arrangement((0, 8), 9)
    node_a, node_b = move(assignment, random.Random(seed))

    # Core 0 is moved next to core 1
    assert node_a == 0
    assert node_b in (5, 7)
    assert assignment.core_to_node == [node_b, 8]
    assignment.check()


def test_attraction_move_weights_senders_by_volume():
    mesh = build_mesh(4, 4, 1.0)
    traffic = Traffic(3)
    traffic.add_communication(0, 1, 1)
    traffic.add_communication(2, 1, 999999)
    move = AttractionMove(mesh, traffic)

    # Core 0 sends a millionth of the total
    for p, core, expected in [(0.0, 0, (0, 4)),
                              (0.5e-6, 0, (0, 4)),
                              (2e-6, 2, (15, 4)),
                              (0.999, 2, (15, 4))]:
        r = Mock()
        r.random.return_value = p
        r.randint.return_value = 0
        assignment = Assignment.from_arrangement((0, 5, 15), 16)
        assert move(assignment, r) == expected
        assert assignment.core_to_node[core] == 4
        assert assignment.core_to_node[1] == 5


def test_attraction_move_nowhere_to_go():
    mesh = build_mesh(2, 1, 1.0)
    traffic = Traffic(2)
    traffic.add_communication(0, 1, 10)
    move = AttractionMove(mesh, traffic)

    assignment = Assignment.from_arrangement((0, 1), 2)
    assert move(assignment, random.Random(0)) == (0, 0)
    assert assignment.core_to_node == [0, 1]


def test_attraction_move_no_communication():
    mesh = build_mesh(2, 2, 1.0)
    move = AttractionMove(mesh, Traffic(2))
    assignment = Assignment.from_arrangement((0, 3), 4)
    node_a, node_b = move(assignment, random.Random(0))
    assert node_a == node_b
    assert assignment.core_to_node == [0, 3]
