"""Unique identifiers for the directions a packet may leave a mesh router.
"""

from enum import IntEnum


class Directions(IntEnum):
    """Enumeration of the output directions of a 2D mesh router.

    Rows are numbered from south to north and columns from west to east, so
    travelling north increments a packet's row and travelling east increments
    its column.

    The integer values are used to index the per-direction bandwidth usage
    counters kept during adaptive routing.

    Attributes
    ----------
    north = 0
    south = 1
    east = 2
    west = 3
    """

    north = 0
    south = 1
    east = 2
    west = 3

    @property
    def is_vertical(self):
        """True iff this direction changes a packet's row."""
        return self in (Directions.north, Directions.south)

    def step(self, row, column):
        """Get the (row, column) one hop away in this direction.

        The result may lie outside the mesh.
        """
        d_row, d_column = _DELTAS[self]
        return (row + d_row, column + d_column)

    @classmethod
    def vertical_towards(cls, row, destination_row):
        """The vertical direction which approaches destination_row.

        Rows at or below the current one are reached by heading south.
        """
        return cls.north if row < destination_row else cls.south

    @classmethod
    def between(cls, source, destination):
        """Get the direction of an adjacent (row, column) position.

        Raises
        ------
        ValueError
            If the positions are not adjacent.
        """
        delta = (destination[0] - source[0], destination[1] - source[1])
        for direction, direction_delta in _DELTAS.items():
            if direction_delta == delta:
                return direction
        raise ValueError("{} and {} are not adjacent".format(
            source, destination))


_DELTAS = {
    Directions.north: (1, 0),
    Directions.south: (-1, 0),
    Directions.east: (0, 1),
    Directions.west: (0, -1),
}
