"""Describes the communication between the cores of an application.

For every ordered pair of cores, the traffic model records the volume of data
exchanged and the bandwidth that exchange requires. Both are recorded from
the point of view of the sender ("to") and of the receiver ("from") so that
``to_volume[a][b] == from_volume[b][a]``.
"""

import logging

import numpy as np

logger = logging.getLogger(__name__)


class Core(object):
    """A single task of an application, to be mapped to exactly one node.

    The communication vectors are views onto the rows of the owning
    :py:class:`.Traffic` matrices and so always reflect their current
    contents.

    Attributes
    ----------
    core_id : int
    application : object or None
        Identifies the application (or core group) this core belongs to.
    to_volume : :py:class:`numpy.ndarray`
        Volume sent by this core to every core.
    from_volume : :py:class:`numpy.ndarray`
        Volume received by this core from every core.
    to_bandwidth : :py:class:`numpy.ndarray`
        Bandwidth required to send to every core.
    from_bandwidth : :py:class:`numpy.ndarray`
        Bandwidth required to receive from every core.
    """
    __slots__ = ["core_id", "application", "_traffic"]

    def __init__(self, core_id, traffic, application=None):
        self.core_id = core_id
        self.application = application
        self._traffic = traffic

    @property
    def to_volume(self):
        return self._traffic.to_volume[self.core_id]

    @property
    def from_volume(self):
        return self._traffic.from_volume[self.core_id]

    @property
    def to_bandwidth(self):
        return self._traffic.to_bandwidth[self.core_id]

    @property
    def from_bandwidth(self):
        return self._traffic.from_bandwidth[self.core_id]

    def __repr__(self):
        return "<Core {} of application {!r}>".format(self.core_id,
                                                      self.application)


class Traffic(object):
    """The communication volumes and bandwidth requirements between cores.

    Attributes
    ----------
    cores : [:py:class:`.Core`, ...]
        Indexed by core ID.
    bandwidth_multiplier : float
        Default ratio of bandwidth requirement to communication volume used
        by :py:meth:`.add_communication`.
    to_volume, from_volume, to_bandwidth, from_bandwidth : \
            :py:class:`numpy.ndarray`
        Square (num_cores x num_cores) matrices. ``to_volume[a][b]`` is the
        volume core a sends to core b; ``from_volume[b][a]`` holds the same
        value seen from core b. Likewise for bandwidth.
    """

    def __init__(self, num_cores=0, bandwidth_multiplier=1.0):
        self.bandwidth_multiplier = bandwidth_multiplier
        self.cores = []
        self.to_volume = np.zeros((0, 0))
        self.from_volume = np.zeros((0, 0))
        self.to_bandwidth = np.zeros((0, 0))
        self.from_bandwidth = np.zeros((0, 0))
        self._grow(num_cores, None)

    def __len__(self):
        """The number of cores."""
        return len(self.cores)

    def _grow(self, num_new_cores, application):
        """Append num_new_cores cores, returning the ID of the first."""
        first = len(self.cores)
        size = first + num_new_cores
        for name in ("to_volume", "from_volume",
                     "to_bandwidth", "from_bandwidth"):
            old = getattr(self, name)
            new = np.zeros((size, size))
            new[:first, :first] = old
            setattr(self, name, new)
        self.cores.extend(Core(core_id, self, application)
                          for core_id in range(first, size))
        return first

    def add_communication(self, source, destination, volume, bandwidth=None):
        """Record that one core sends data to another.

        Any previously recorded communication between the pair (in this
        direction) is replaced.

        Parameters
        ----------
        source : int
        destination : int
            Core IDs.
        volume : float
            The volume of data sent.
        bandwidth : float or None
            The bandwidth this communication requires. If None, ``volume *
            bandwidth_multiplier`` is used.

        Raises
        ------
        ValueError
            If a core is asked to communicate with itself or a volume is
            negative.
        """
        if source == destination:
            raise ValueError(
                "Core {} cannot communicate with itself".format(source))
        if bandwidth is None:
            bandwidth = volume * self.bandwidth_multiplier
        if volume < 0 or bandwidth < 0:
            raise ValueError("Volumes and bandwidths must be non-negative")

        self.to_volume[source, destination] = volume
        self.from_volume[destination, source] = volume
        self.to_bandwidth[source, destination] = bandwidth
        self.from_bandwidth[destination, source] = bandwidth

    def add_application(self, application, num_cores, communications,
                        bandwidth_multiplier=None):
        """Append the cores of an application to the traffic model.

        The cores of each application are numbered consecutively following
        those already present: core ``i`` of the application becomes core
        ``offset + i`` where ``offset`` is the number of cores which were
        present before the call.

        Parameters
        ----------
        application : object
            Identifier recorded as the application of each new core.
        num_cores : int
        communications : [(source, destination, volume), ...]
            Communications between the application's cores, numbered from 0.
            Communications from a core to itself are ignored.
        bandwidth_multiplier : float or None
            Bandwidth required per unit of volume. Defaults to
            :py:attr:`.bandwidth_multiplier`.

        Returns
        -------
        int
            The ID given to the application's core 0.
        """
        if bandwidth_multiplier is None:
            bandwidth_multiplier = self.bandwidth_multiplier

        offset = self._grow(num_cores, application)
        for source, destination, volume in communications:
            if source == destination:
                logger.warning(
                    "Ignoring communication of application %r from core %d "
                    "to itself.", application, source)
                continue
            self.add_communication(offset + source, offset + destination,
                                   volume, volume * bandwidth_multiplier)

        logger.debug("Added %d cores of application %r as cores %d-%d.",
                     num_cores, application, offset, offset + num_cores - 1)
        return offset

    @property
    def total_volume(self):
        """The total volume of data sent between all cores."""
        return float(self.to_volume.sum())

    def partners(self, core_id):
        """Get the IDs of the cores a core sends data to or receives data
        from.
        """
        volumes = self.to_volume[core_id] + self.from_volume[core_id]
        return [int(c) for c in np.flatnonzero(volumes > 0)]
