import pytest

from nocmap.topology import build_mesh

from nocmap.routing.tables import RoutingTables, DeliverLocally, Unset

from nocmap.routing.xy import build_xy_tables

from nocmap.exceptions import RoutingTableError


def test_new_tables():
    mesh = build_mesh(2, 2, 1.0)
    tables = RoutingTables(mesh)
    for node in range(4):
        for source in range(4):
            for destination in range(4):
                if destination == node:
                    assert tables[node, source, destination] is \
                        DeliverLocally
                else:
                    assert tables[node, source, destination] is Unset


def test_set_and_compare():
    mesh = build_mesh(2, 1, 1.0)
    a = RoutingTables(mesh)
    b = RoutingTables(mesh)
    assert a == b

    a[0, 0, 1] = 0
    assert a[0, 0, 1] == 0
    assert a.entries[0][0][1] == 0
    assert a != b

    b[0, 0, 1] = 0
    assert a == b


def test_path_and_links():
    mesh = build_mesh(2, 2, 1.0)
    tables = build_xy_tables(mesh)

    assert tables.path(0, 0) == [0]
    assert tables.links(0, 0) == []

    assert tables.path(0, 3) == [0, 1, 3]
    assert tables.links(0, 3) == [0, 3]
    assert tables.path(3, 0) == [3, 2, 0]
    assert tables.links(3, 0) == [1, 2]


def test_link_usage_lists():
    mesh = build_mesh(2, 2, 1.0)
    usage = build_xy_tables(mesh).link_usage_lists()
    assert usage[0][0] == []
    assert usage[0][1] == [0]
    assert usage[0][3] == [0, 3]
    assert usage[3][0] == [1, 2]
    assert usage[2][1] == [1, 3]


def test_unset_entry():
    mesh = build_mesh(3, 1, 1.0)
    tables = RoutingTables(mesh)
    tables[0, 0, 2] = 0
    with pytest.raises(RoutingTableError) as excinfo:
        tables.path(0, 2)
    assert excinfo.value.node == 1
    assert excinfo.value.source == 0
    assert excinfo.value.destination == 2


def test_delivered_to_wrong_node():
    mesh = build_mesh(3, 1, 1.0)
    tables = RoutingTables(mesh)
    tables[0, 0, 2] = 0
    tables[1, 0, 2] = DeliverLocally
    with pytest.raises(RoutingTableError):
        tables.links(0, 2)


def test_loop():
    mesh = build_mesh(3, 1, 1.0)
    tables = RoutingTables(mesh)
    tables[0, 0, 2] = 0
    tables[1, 0, 2] = 0
    with pytest.raises(RoutingTableError):
        tables.path(0, 2)
