"""An energy-aware genetic algorithm mapper.

Each individual of the population is a genome listing, for every node, the
core placed on it (or :py:data:`~nocmap.assignment.UNASSIGNED`). Each
generation, pairs of parents are chosen by tournament, recombined by
crossover and mutated to produce as many children as there are parents. The
best half of parents and children together survive into the next
generation.

Since empty nodes all carry the same value, genomes are not permutations and
the permutation crossover operators below would duplicate or lose cores if
applied directly. Before crossover, empty nodes are therefore numbered
``num_cores``, ``num_cores + 1``, ... in the order they appear, making each
genome a permutation of ``range(num_nodes)``, and renumbered as empty
afterwards.
"""

import collections

from enum import Enum

import logging

import random as default_random

from nocmap.assignment import Assignment, UNASSIGNED

from nocmap.exceptions import TooFewNodesError

from nocmap.search import SearchResult

logger = logging.getLogger(__name__)


Individual = collections.namedtuple("Individual", "genes cost")
"""A member of the population.

Parameters
----------
genes : [int, ...]
    For each node, the core placed on it or
    :py:data:`~nocmap.assignment.UNASSIGNED`.
cost : float
    The cost of the assignment the genes describe (lower is fitter).
"""


def position_based_crossover(parent1, parent2, random):
    """Recombine two permutations, keeping a random quarter of the positions
    of one parent and the relative order of the other.

    For the first child, a random set of positions (a quarter of the genome,
    rounded down) is copied from parent1. The remaining positions are filled,
    left to right, with the values not yet used in the order they appear in
    parent2. The second child is produced likewise with the parents' roles
    exchanged and freshly chosen positions.

    Parameters
    ----------
    parent1, parent2 : [int, ...]
        Permutations of the same values.
    random : :py:class:`random.Random`

    Returns
    -------
    child1, child2 : [int, ...]
    """
    def child(keep, fill):
        positions = random.sample(range(len(keep)), int(len(keep) * 0.25))
        genes = [None] * len(keep)
        for position in positions:
            genes[position] = keep[position]
        kept = set(genes[position] for position in positions)
        remaining = iter(value for value in fill if value not in kept)
        return [value if value is not None else next(remaining)
                for value in genes]

    return child(parent1, parent2), child(parent2, parent1)


def _cut_and_crossfill(parent1, parent2, random, wrap):
    if len(parent1) < 2:
        return list(parent1), list(parent2)
    cut = random.randint(1, len(parent1) - 1)

    def child(head, tail):
        prefix = head[:cut]
        used = set(prefix)
        scan = tail[cut:] + tail[:cut] if wrap else tail
        return prefix + [value for value in scan if value not in used]

    return child(parent1, parent2), child(parent2, parent1)


def cut_and_crossfill_crossover(parent1, parent2, random):
    """Recombine two permutations by taking the head of one and the
    remaining values in the order of the other.

    A cut point is chosen in [1, len - 1]. The first child takes parent1's
    values before the cut followed by the values not yet used in the order
    they appear in parent2 (scanned from its start). The second child is
    produced likewise with the parents' roles exchanged.

    Returns
    -------
    child1, child2 : [int, ...]
    """
    return _cut_and_crossfill(parent1, parent2, random, wrap=False)


def cut_and_crossfill_wrap_crossover(parent1, parent2, random):
    """As :py:func:`.cut_and_crossfill_crossover` but the other parent is
    scanned starting from the cut point, wrapping around to its start.
    """
    return _cut_and_crossfill(parent1, parent2, random, wrap=True)


class Crossovers(Enum):
    """The available crossover operators."""

    position_based = 0
    cut_and_crossfill = 1
    cut_and_crossfill_wrap = 2


_CROSSOVER_FUNCTIONS = {
    Crossovers.position_based: position_based_crossover,
    Crossovers.cut_and_crossfill: cut_and_crossfill_crossover,
    Crossovers.cut_and_crossfill_wrap: cut_and_crossfill_wrap_crossover,
}


class GeneticAlgorithmConfig(collections.namedtuple(
        "GeneticAlgorithmConfig",
        "population_size generations crossover_probability "
        "mutation_probability tournament_size crossover")):
    """The parameters of the genetic algorithm.

    Parameters
    ----------
    population_size : int
        The number of individuals in every generation.
    generations : int
        The number of generations to run for.
    crossover_probability : int
        Percentage chance that a pair of parents is recombined (rather than
        copied) to produce children.
    mutation_probability : int
        Percentage chance that each child is mutated.
    tournament_size : int or None
        The number of individuals competing in each tournament. Defaults to
        20% of the population (at least one).
    crossover : :py:class:`.Crossovers`
    """

    def __new__(cls, population_size=100, generations=50,
                crossover_probability=85, mutation_probability=5,
                tournament_size=None, crossover=Crossovers.position_based):
        return super(GeneticAlgorithmConfig, cls).__new__(
            cls, population_size, generations, crossover_probability,
            mutation_probability, tournament_size, crossover)

    @property
    def effective_tournament_size(self):
        if self.tournament_size is not None:
            return self.tournament_size
        return max(1, self.population_size // 5)

    def check(self):
        """Raise a ValueError if any parameter is out of range."""
        if self.population_size < 1:
            raise ValueError("The population must have at least one member")
        if self.generations < 0:
            raise ValueError("The number of generations must not be negative")
        for name in ("crossover_probability", "mutation_probability"):
            if not 0 <= getattr(self, name) <= 100:
                raise ValueError("{} must be a percentage".format(name))
        if not 1 <= self.effective_tournament_size <= self.population_size:
            raise ValueError(
                "The tournament size must be between 1 and the population "
                "size ({})".format(self.population_size))


def to_permutation(genes, num_cores):
    """Number the empty nodes of a genome to make it a permutation."""
    spare = iter(range(num_cores, len(genes)))
    return [next(spare) if core == UNASSIGNED else core for core in genes]


def from_permutation(permutation, num_cores):
    """Undo :py:func:`.to_permutation`."""
    return [UNASSIGNED if value >= num_cores else value
            for value in permutation]


def mutate(genes, probability, random):
    """With the given percentage probability, swap two random positions of
    a genome in place.

    Returns
    -------
    bool
        True if the genome was mutated.
    """
    if random.randrange(100) < probability:
        a = random.randrange(len(genes))
        b = random.randrange(len(genes))
        genes[a], genes[b] = genes[b], genes[a]
        return True
    return False


def tournament_selection(population, tournament_size, random):
    """Choose a parent by deterministic tournament.

    ``tournament_size`` distinct members of the population are drawn and the
    one with the lowest cost wins (the first drawn in the event of a tie).

    .. note::
        Costs are minimised: the lowest cost is the fittest.

    Returns
    -------
    int
        The index of the winner in the population.
    """
    contenders = random.sample(range(len(population)), tournament_size)
    return min(contenders, key=lambda i: population[i].cost)


def elitism(parents, children):
    """Keep the best of a generation's parents and children.

    Returns
    -------
    [:py:class:`.Individual`, ...]
        The ``len(parents)`` lowest cost individuals, cheapest first.
        Parents precede children of equal cost.
    """
    return sorted(parents + children,
                  key=lambda individual: individual.cost)[:len(parents)]


def evolve(cost_model, config=GeneticAlgorithmConfig(), random=None,
           seed=None, on_generation=None):
    """Map cores onto a mesh using a genetic algorithm.

    This algorithm produces INFO level logging information describing the
    progress made by the algorithm.

    Parameters
    ----------
    cost_model : :py:class:`~nocmap.cost.CostModel`
    config : :py:class:`.GeneticAlgorithmConfig`
    random : :py:class:`random.Random` or None
        The random number generator used for every random choice. Defaults
        to a new :py:class:`random.Random` seeded with ``seed``.
    seed : int or None
    on_generation : callback_function or None
        An (optional) callback called after each generation with the
        generation number (from 0) and the new population (a list of
        :py:class:`.Individual`, cheapest first). If the callback returns
        False, evolution stops and the best individual so far is returned.

    Returns
    -------
    :py:class:`~nocmap.search.SearchResult`

    Raises
    ------
    TooFewNodesError
        If the mesh has fewer nodes than there are cores.
    ValueError
        If the configuration is invalid.
    """
    num_nodes = len(cost_model.mesh)
    num_cores = len(cost_model.traffic)
    if num_cores > num_nodes:
        raise TooFewNodesError(num_cores, num_nodes)
    config.check()

    if random is None:
        random = default_random.Random(seed)
    crossover = _CROSSOVER_FUNCTIONS[config.crossover]
    tournament_size = config.effective_tournament_size

    def evaluate(genes):
        assignment = Assignment.from_genes(genes, num_cores)
        return Individual(genes, cost_model.total_cost(assignment))

    logger.info("Randomly creating initial population of %d.",
                config.population_size)
    population = []
    for _ in range(config.population_size):
        assignment = Assignment(num_nodes, num_cores)
        assignment.randomise(random)
        population.append(evaluate(assignment.genes))
    population.sort(key=lambda individual: individual.cost)

    for generation in range(config.generations):
        children = []
        while len(children) < config.population_size:
            parent1 = population[tournament_selection(
                population, tournament_size, random)]
            parent2 = population[tournament_selection(
                population, tournament_size, random)]

            if random.randrange(100) < config.crossover_probability:
                child1, child2 = crossover(
                    to_permutation(parent1.genes, num_cores),
                    to_permutation(parent2.genes, num_cores),
                    random)
                child1 = from_permutation(child1, num_cores)
                child2 = from_permutation(child2, num_cores)
                logger.debug("Crossover of %s and %s produced %s and %s.",
                             parent1.genes, parent2.genes, child1, child2)
            else:
                child1 = list(parent1.genes)
                child2 = list(parent2.genes)

            for child in (child1, child2):
                if mutate(child, config.mutation_probability, random):
                    logger.debug("Mutated child to %s.", child)
                if len(children) < config.population_size:
                    children.append(evaluate(child))

        population = elitism(population, children)

        if generation > 0 and generation % 10 == 0:
            logger.info("Finished %d generations, best cost %s.",
                        generation, population[0].cost)

        if on_generation is not None:
            if on_generation(generation, list(population)) is False:
                break

    best = population[0]
    logger.info("Evolution finished with cost %s.", best.cost)
    assignment = Assignment.from_genes(best.genes, num_cores)
    return SearchResult(assignment, best.cost,
                        cost_model.routing_tables(assignment))
