import pytest

from nocmap.exceptions import MappingError, TooFewNodesError, \
    UnresolvableRouteError, LinkLookupError, RoutingTableError, \
    InvalidTrafficError


@pytest.mark.parametrize("exception,args,message",
                         [(TooFewNodesError, (5, 4),
                           "Cannot map 5 cores onto a mesh with only 4 "
                           "nodes"),
                          (UnresolvableRouteError, (1, 2, 3, 4),
                           "No legal direction at (1, 2) for traffic from "
                           "node 3 to node 4"),
                          (LinkLookupError, (3, (1, 2)),
                           "No link connects node 3 to the node at (1, 2)"),
                          (RoutingTableError, (1, 2, 3),
                           "The routing table of node 1 has no usable entry "
                           "for traffic from node 2 to node 3"),
                          (InvalidTrafficError, (7, "@NODE x", "bad"),
                           "Line 7 ('@NODE x'): bad")])
def test_exceptions(exception, args, message):
    e = exception(*args)
    assert isinstance(e, MappingError)
    assert str(e) == message


def test_too_few_nodes_attributes():
    e = TooFewNodesError(5, 4)
    assert e.num_cores == 5
    assert e.num_nodes == 4
