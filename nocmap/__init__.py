"""Map communicating cores onto a 2D mesh network-on-chip.
"""

# The topology and traffic models
from nocmap.topology import Node, Link, Mesh, build_mesh, mesh_size_for
from nocmap.traffic import Core, Traffic
from nocmap.assignment import Assignment, UNASSIGNED

from nocmap.directions import Directions

# Routing and cost estimation
from nocmap.routing import TurnModel, RoutingTables
from nocmap.cost import CostModel, EnergyParameters

# Common exceptions
from nocmap.exceptions import (MappingError, TooFewNodesError,
                               UnresolvableRouteError, LinkLookupError,
                               RoutingTableError, InvalidTrafficError)

# High-level wrapper
from nocmap.wrapper import map_cores, MappingResult

from nocmap.version import __version__
