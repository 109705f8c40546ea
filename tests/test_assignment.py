import pytest

import random

from nocmap.assignment import Assignment, UNASSIGNED

from nocmap.traffic import Traffic

from nocmap.exceptions import TooFewNodesError


def test_new():
    assignment = Assignment(4, 2)
    assert assignment.num_nodes == 4
    assert assignment.num_cores == 2
    assert assignment.node_to_core == [UNASSIGNED] * 4
    assert assignment.core_to_node == [UNASSIGNED] * 2
    assert not assignment.is_complete()
    assignment.check()


def test_too_few_nodes():
    with pytest.raises(TooFewNodesError):
        Assignment(2, 3)


def test_assign():
    assignment = Assignment(3, 2)
    assignment.assign(0, 1)
    assignment.assign(1, 2)
    assert assignment.node_to_core == [UNASSIGNED, 0, 1]
    assert assignment.core_to_node == [1, 2]
    assert assignment.is_complete()
    assignment.check()

    # Moving a core vacates its old node
    assignment.assign(0, 0)
    assert assignment.node_to_core == [0, UNASSIGNED, 1]
    assignment.check()

    # Displacing a core leaves it unassigned
    assignment.assign(0, 2)
    assert assignment.node_to_core == [UNASSIGNED, UNASSIGNED, 0]
    assert assignment.core_to_node == [2, UNASSIGNED]
    assignment.check()


def test_swap():
    assignment = Assignment.from_genes([1, UNASSIGNED, 0, 2], 3)
    original = assignment.copy()

    assignment.swap(0, 1)
    assert assignment.node_to_core == [UNASSIGNED, 1, 0, 2]
    assert assignment.core_to_node == [2, 1, 3]
    assignment.check()

    # Swapping back restores the original exactly
    assignment.swap(0, 1)
    assert assignment == original

    # Swapping two empty nodes does nothing
    assignment = Assignment(3, 1)
    assignment.assign(0, 0)
    assignment.swap(1, 2)
    assert assignment.node_to_core == [0, UNASSIGNED, UNASSIGNED]


def test_swap_sequence_keeps_views_consistent():
    r = random.Random(1)
    assignment = Assignment(9, 5)
    assignment.randomise(r)
    for _ in range(100):
        assignment.swap(r.randrange(9), r.randrange(9))
        assignment.check()
        assert sorted(c for c in assignment.node_to_core
                      if c != UNASSIGNED) == list(range(5))


def test_from_genes():
    assignment = Assignment.from_genes([UNASSIGNED, 1, 0], 2)
    assert assignment.core_to_node == [2, 1]
    assert assignment.genes == [UNASSIGNED, 1, 0]

    # The genes are a copy
    assignment.genes[0] = 1
    assert assignment.node_to_core[0] == UNASSIGNED

    with pytest.raises(ValueError):
        Assignment.from_genes([0, 0, 1], 2)
    with pytest.raises(ValueError):
        Assignment.from_genes([0, 2, 1], 2)


def test_from_arrangement():
    assignment = Assignment.from_arrangement((3, 0), 4)
    assert assignment.core_to_node == [3, 0]
    assert assignment.node_to_core == [1, UNASSIGNED, UNASSIGNED, 0]


def test_copy_is_independent():
    assignment = Assignment.from_arrangement((0, 1), 2)
    copy = assignment.copy()
    assert copy == assignment
    assert hash(copy) == hash(assignment)
    copy.swap(0, 1)
    assert copy != assignment
    assert assignment.core_to_node == [0, 1]


@pytest.mark.parametrize("seed", range(5))
def test_randomise(seed):
    assignment = Assignment(6, 4)
    assignment.randomise(random.Random(seed))
    assert assignment.is_complete()
    assert len(set(assignment.core_to_node)) == 4
    assignment.check()

    # Repeatable
    other = Assignment(6, 4)
    other.randomise(random.Random(seed))
    assert other == assignment


def test_clear():
    assignment = Assignment.from_arrangement((0, 1), 3)
    assignment.clear()
    assert assignment == Assignment(3, 2)


def test_check_detects_inconsistency():
    assignment = Assignment.from_arrangement((0, 1), 3)
    assignment.core_to_node[0] = 2
    with pytest.raises(ValueError):
        assignment.check()

    assignment = Assignment.from_arrangement((0, 1), 3)
    assignment.node_to_core[2] = 0
    with pytest.raises(ValueError):
        assignment.check()


def test_describe():
    traffic = Traffic()
    traffic.add_application("app", 2, [])
    assignment = Assignment.from_arrangement((2, 0), 3)
    assert assignment.describe(traffic) == [
        "node 0 has core 1 (application app)",
        "node 1 is empty",
        "node 2 has core 0 (application app)",
    ]
    assert assignment.describe()[0] == "node 0 has core 1"
