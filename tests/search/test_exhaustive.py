import pytest

import itertools

from mock import Mock

from nocmap.topology import build_mesh

from nocmap.traffic import Traffic

from nocmap.cost import CostModel

from nocmap.search.exhaustive import count_arrangements, arrangements, \
    search

from nocmap.exceptions import TooFewNodesError


@pytest.mark.parametrize("n,k", [(0, 0), (1, 0), (1, 1), (3, 2), (4, 4),
                                 (5, 2), (6, 3)])
def test_arrangements(n, k):
    expected = list(itertools.permutations(range(n), k))
    # Lexicographic order without repetition
    assert list(arrangements(n, k)) == expected
    assert count_arrangements(n, k) == len(expected)


@pytest.mark.parametrize("n,k", [(2, 3), (3, -1)])
def test_arrangements_invalid(n, k):
    with pytest.raises(ValueError):
        count_arrangements(n, k)
    with pytest.raises(ValueError):
        list(arrangements(n, k))


def test_count_arrangements():
    assert count_arrangements(16, 3) == 16 * 15 * 14
    assert count_arrangements(4, 2) == 12


def test_search():
    traffic = Traffic(2)
    traffic.add_communication(0, 1, 100)
    cost_model = CostModel(build_mesh(2, 2, 1000.0), traffic)

    assignment, cost, tables = search(cost_model)
    # The first optimal arrangement found
    assert assignment.core_to_node == [0, 1]
    assert cost == pytest.approx(773.5)
    assert tables is cost_model.xy_tables


def test_search_is_optimal():
    traffic = Traffic(3)
    traffic.add_communication(0, 1, 100)
    traffic.add_communication(1, 2, 300)
    traffic.add_communication(2, 0, 10)
    cost_model = CostModel(build_mesh(3, 2, 1e9), traffic)

    assignment, cost, _ = search(cost_model)
    assert cost == cost_model.total_cost(assignment)
    for arrangement in itertools.permutations(range(6), 3):
        assert cost <= cost_model.total_cost(
            assignment.from_arrangement(arrangement, 6)) + 1e-9


def test_search_progress():
    traffic = Traffic(2)
    traffic.add_communication(0, 1, 100)
    cost_model = CostModel(build_mesh(2, 2, 1000.0), traffic)

    cb = Mock(return_value=None)
    search(cost_model, progress_step=50, on_progress=cb)
    # Reported at the first mapping, half way and at the end
    counts = [call[1][0] for call in cb.mock_calls]
    assert counts == [1, 6, 12]
    assert all(call[1][1] == 12 for call in cb.mock_calls)


def test_search_stop():
    traffic = Traffic(2)
    traffic.add_communication(0, 1, 100)
    cost_model = CostModel(build_mesh(2, 2, 1000.0), traffic)

    cb = Mock(return_value=False)
    assignment, cost, _ = search(cost_model, on_progress=cb)
    assert len(cb.mock_calls) == 1
    assert assignment.core_to_node == [0, 1]


def test_search_no_cores():
    cost_model = CostModel(build_mesh(2, 2, 1.0), Traffic(0))
    assignment, cost, _ = search(cost_model)
    assert assignment.core_to_node == []
    assert cost == 0.0


def test_search_too_few_nodes():
    cost_model = CostModel(build_mesh(2, 2, 1.0), Traffic(5))
    with pytest.raises(TooFewNodesError):
        search(cost_model)
