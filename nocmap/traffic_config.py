"""Ingest the plain-text traffic configuration format.

The format consists of one section per sending core, introduced by a line
``@NODE <core id>``, followed by one line per destination of the form::

    packet_to_destination_rate <destination core id>\t<rate>

where ``<rate>`` is the fraction (at most 1.0) of the sender's injection
capacity directed at the destination. Lines starting with ``#`` are comments;
all other lines are ignored.

For example::

    # A two-core pipeline
    @NODE 0
    packet_to_destination_rate 1\t0.25
    @NODE 1
"""

import logging

from nocmap.exceptions import InvalidTrafficError

logger = logging.getLogger(__name__)


VOLUME_PER_RATE = 1000000
"""Communication volume corresponding to a rate of 1.0."""

BANDWIDTH_PER_RATE = 3
"""Link bandwidths of requirement corresponding to a rate of 1.0."""


def parse_traffic_config(lines, traffic, link_bandwidth):
    """Populate a traffic model from a traffic configuration.

    For a rate r, the communication volume recorded is ``int(r * 1e6)`` and
    the bandwidth requirement is ``int(r * 3 * link_bandwidth)``.

    Parameters
    ----------
    lines : iterable of str
        The lines of the configuration, e.g. an open file.
    traffic : :py:class:`~nocmap.traffic.Traffic`
        The traffic model to populate. Every core named by the configuration
        must already exist.
    link_bandwidth : float
        The bandwidth of the mesh's links.

    Returns
    -------
    int
        The number of communications recorded.

    Raises
    ------
    InvalidTrafficError
        If a rate exceeds 1.0, a number cannot be parsed, a core does not
        exist or a rate appears before any ``@NODE`` line.
    """
    source = None
    num_communications = 0

    for line_number, line in enumerate(lines, 1):
        line = line.rstrip("\r\n")
        if line.startswith("#"):
            continue

        if "@NODE" in line:
            field = line[line.index("@NODE") + len("@NODE"):].strip()
            source = _parse_core(field, traffic, line_number, line)

        if "packet_to_destination_rate" in line:
            if source is None:
                raise InvalidTrafficError(
                    line_number, line, "rate given before any @NODE line")

            fields = line[line.index("packet_to_destination_rate") +
                          len("packet_to_destination_rate"):].split()
            if len(fields) != 2:
                raise InvalidTrafficError(
                    line_number, line, "expected a destination and a rate")
            destination = _parse_core(fields[0], traffic, line_number, line)
            try:
                rate = float(fields[1])
            except ValueError:
                raise InvalidTrafficError(
                    line_number, line, "invalid rate {!r}".format(fields[1]))

            if destination == source:
                raise InvalidTrafficError(
                    line_number, line, "core {} sends to itself".format(
                        source))
            if rate > 1.0:
                raise InvalidTrafficError(
                    line_number, line, "rate {} exceeds 1.0".format(rate))
            if rate < 0.0:
                raise InvalidTrafficError(
                    line_number, line, "rate {} is negative".format(rate))

            traffic.add_communication(
                source, destination,
                int(rate * VOLUME_PER_RATE),
                int(rate * BANDWIDTH_PER_RATE * link_bandwidth))
            num_communications += 1

    logger.info("Read %d communications from traffic configuration.",
                num_communications)
    return num_communications


def _parse_core(field, traffic, line_number, line):
    """Parse a core ID, checking the core exists."""
    try:
        core = int(field)
    except ValueError:
        raise InvalidTrafficError(
            line_number, line, "invalid core ID {!r}".format(field))
    if not 0 <= core < len(traffic):
        raise InvalidTrafficError(
            line_number, line, "core {} does not exist".format(core))
    return core
