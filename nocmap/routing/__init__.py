"""Routing table generation for 2D meshes.

* :py:func:`~nocmap.routing.xy.build_xy_tables` Static dimension-order
  routing.
* :py:class:`~nocmap.routing.turn_models.AdaptiveRouter` Adaptive,
  deadlock-free routing under a :py:class:`.TurnModel`.
"""

from nocmap.routing.tables import RoutingTables, DeliverLocally, Unset

from nocmap.routing.turn_models import TurnModel, AdaptiveRouter

from nocmap.routing.xy import build_xy_tables
