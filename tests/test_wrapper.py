import pytest

from mock import Mock

from nocmap.topology import build_mesh

from nocmap.traffic import Traffic

from nocmap.assignment import Assignment

from nocmap.routing.turn_models import TurnModel

from nocmap.routing.xy import build_xy_tables

from nocmap.cost import CostModel, EnergyParameters

from nocmap.search import SearchResult

from nocmap.search.ga import evolve, GeneticAlgorithmConfig

from nocmap.search.exhaustive import search as exhaustive_search

from nocmap.search.sa import anneal

from nocmap.wrapper import map_cores

from nocmap.exceptions import TooFewNodesError


searches = [(anneal, {"attempts": 200}),
            (evolve, {"config": GeneticAlgorithmConfig(population_size=10,
                                                       generations=5)}),
            (exhaustive_search, {})]


@pytest.fixture
def traffic():
    traffic = Traffic(2)
    traffic.add_communication(0, 1, 100)
    return traffic


@pytest.mark.parametrize("search,search_kwargs", searches)
@pytest.mark.parametrize("adaptive,turn_model",
                         [(False, TurnModel.west_first),
                          (True, TurnModel.west_first),
                          (True, TurnModel.odd_even)])
def test_map_cores(traffic, search, search_kwargs, adaptive, turn_model):
    mesh = build_mesh(2, 2, 1000.0)
    seed = None if search is exhaustive_search else 1
    result = map_cores(mesh, traffic, search, search_kwargs,
                       adaptive=adaptive, turn_model=turn_model, seed=seed)

    # Every search finds an adjacent placement
    assert result.cost == pytest.approx(773.5)
    node_a, node_b = result.assignment.core_to_node
    assert len(result.routing_tables.links(node_a, node_b)) == 1

    assert result.analysis.bandwidth_ok
    assert result.analysis.energy.total == pytest.approx(773.5)


def test_map_cores_default_search(traffic):
    result = map_cores(build_mesh(2, 2, 1000.0), traffic,
                       search_kwargs={"attempts": 200}, seed=1)
    assert result.cost == pytest.approx(773.5)


def test_map_cores_energy_parameters(traffic):
    result = map_cores(build_mesh(2, 2, 1000.0), traffic, exhaustive_search,
                       energy_parameters=EnergyParameters(switch_ebit=1.0,
                                                          link_ebit=1.0))
    # Two switches and one link at one unit per bit, plus buffering
    assert result.cost == pytest.approx(300.0 + 671.8)
    assert result.analysis.energy.total == pytest.approx(result.cost)


def test_map_cores_overloaded():
    # No placement can meet the bandwidth requirement
    traffic = Traffic(2)
    traffic.add_communication(0, 1, 100, bandwidth=2000)
    mesh = build_mesh(2, 2, 1000.0)

    cost_model = CostModel(mesh, traffic)
    for arrangement in [(0, 1), (0, 3), (2, 1), (3, 2)]:
        assert cost_model.overload(
            Assignment.from_arrangement(arrangement, 4)) > 0.0

    result = map_cores(mesh, traffic, exhaustive_search)
    assert result.cost == pytest.approx(773.5 + 1e9)
    assert not result.analysis.bandwidth_ok
    assert len(result.analysis.overloaded_links) == 1


def test_map_cores_passes_seed(traffic):
    mesh = build_mesh(2, 2, 1000.0)
    tables = build_xy_tables(mesh)
    search = Mock(return_value=SearchResult(
        Assignment.from_arrangement((0, 1), 4), 773.5, tables))
    search_kwargs = {"attempts": 3}

    map_cores(mesh, traffic, search, search_kwargs, seed=5)
    cost_model = search.call_args[0][0]
    assert isinstance(cost_model, CostModel)
    assert search.call_args[1] == {"attempts": 3, "seed": 5}

    # The caller's arguments are not modified
    assert search_kwargs == {"attempts": 3}

    map_cores(mesh, traffic, search, search_kwargs)
    assert search.call_args[1] == {"attempts": 3}


def test_map_cores_too_few_nodes():
    search = Mock()
    with pytest.raises(TooFewNodesError):
        map_cores(build_mesh(2, 2, 1.0), Traffic(5), search)
    assert len(search.mock_calls) == 0
