import pytest

from nocmap.directions import Directions

from nocmap.topology import build_mesh

from nocmap.routing.xy import xy_direction, build_xy_tables


@pytest.mark.parametrize("position,destination,direction",
                         [((0, 0), (0, 0), None),
                          ((0, 0), (3, 2), Directions.east),
                          ((3, 3), (0, 2), Directions.west),
                          ((0, 2), (3, 2), Directions.north),
                          ((3, 2), (0, 2), Directions.south)])
def test_xy_direction(position, destination, direction):
    assert xy_direction(position, destination) is direction


@pytest.mark.parametrize("width,height", [(1, 1), (2, 2), (4, 3), (1, 4)])
def test_build_xy_tables(width, height):
    mesh = build_mesh(width, height, 1.0)
    tables = build_xy_tables(mesh)

    for source in mesh:
        for destination in mesh:
            path = tables.path(source.node_id, destination.node_id)
            positions = [mesh.nodes[n].position for n in path]

            # Minimal and loop free
            distance = (abs(source.row - destination.row) +
                        abs(source.column - destination.column))
            assert len(path) == distance + 1
            assert len(set(path)) == len(path)
            assert path[0] == source.node_id
            assert path[-1] == destination.node_id

            # All horizontal travel precedes vertical travel
            directions = [Directions.between(a, b)
                          for a, b in zip(positions, positions[1:])]
            vertical = [d.is_vertical for d in directions]
            assert vertical == sorted(vertical)

            # The links match the path
            links = tables.links(source.node_id, destination.node_id)
            assert [mesh.links[l].other_end(n)
                    for n, l in zip(path, links)] == path[1:]


def test_entries_independent_of_source():
    mesh = build_mesh(3, 3, 1.0)
    tables = build_xy_tables(mesh)
    for node in range(9):
        for destination in range(9):
            entries = set(tables[node, source, destination]
                          for source in range(9))
            assert len(entries) == 1
