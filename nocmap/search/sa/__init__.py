"""A simulated annealing based mapper.

See :py:func:`nocmap.search.sa.anneal`.
"""

from nocmap.search.sa.algorithm import anneal

from nocmap.search.sa.lcg import LCGRandom

from nocmap.search.sa.moves import Moves
