"""EventQueue implementation using NumPy and Numba."""

from typing import Any

import numba as nb
import numpy as np


class EventQueue:
    """
    A time ordered event queue implemented using NumPy arrays and sped-up with Numba.

    Using the algorithm from the Python heapq module.

    Each pending event occupies a slot holding its time, a sequence number, and an arbitrary payload.
    The heap itself only moves slot indices around. Events with equal times come out in the order they
    were pushed (first in, first out), which keeps simulations deterministic.

    The queue grows (doubles) when all slots are in use.
    """

    # https://github.com/python/cpython/blob/5592399313c963c110280a7c98de974889e1d353/Modules/_heapqmodule.c
    # https://github.com/python/cpython/blob/5592399313c963c110280a7c98de974889e1d353/Lib/heapq.py

    def __init__(self, capacity: int = 1024):
        """
        Initializes a new, empty, event queue.

        Parameters:

            capacity (int): The initial number of slots for pending events.
        """

        if not isinstance(capacity, (int, np.integer)) or capacity <= 0:
            raise ValueError(f"Capacity must be a positive integer, got {capacity}.")

        self.indices = np.zeros(capacity, dtype=np.uint32)
        self.times = np.zeros(capacity, dtype=np.float64)
        self.sequence = np.zeros(capacity, dtype=np.uint64)
        self.payloads = [None] * capacity
        self.size = np.uint32(0)

        self._free = list(range(capacity - 1, -1, -1))
        self._pushed = 0

        return

    def push(self, time: float, payload: Any) -> None:
        """
        Insert an event into the queue.

        This method adds the event at the back of the heap and then ensures the heap property
        is maintained by sifting the event forward to its correct position.

        Parameters:

            time (float): The time at which the event fires.
            payload (Any): The object returned with the time when the event is popped.

        Raises:

            ValueError: If the time is NaN.
        """

        if np.isnan(time):
            raise ValueError("Event time cannot be NaN")
        if not self._free:
            self._grow()

        slot = self._free.pop()
        self.times[slot] = time
        self.sequence[slot] = self._pushed
        self.payloads[slot] = payload
        self._pushed += 1

        self.indices[self.size] = slot
        _siftforward(self.indices, self.times, self.sequence, np.uint32(0), self.size)
        self.size += np.uint32(1)

        return

    def peekt(self) -> float:
        """
        Returns the time of the earliest event in the queue without removing it.

        Raises:

            IndexError: If the queue is empty.
        """

        if self.size == 0:
            raise IndexError("Event queue is empty")
        return float(self.times[self.indices[0]])

    def peektp(self) -> tuple[float, Any]:
        """
        Returns the time and payload of the earliest event in the queue without removing it.

        Raises:

            IndexError: If the queue is empty.
        """

        if self.size == 0:
            raise IndexError("Event queue is empty")
        slot = self.indices[0]
        return (float(self.times[slot]), self.payloads[slot])

    def poptp(self) -> tuple[float, Any]:
        """
        Removes and returns the time and payload of the earliest event in the queue.

        Raises:

            IndexError: If the queue is empty.
        """

        ttuple = self.peektp()
        self.__pop()

        return ttuple

    def __pop(self) -> None:
        if self.size == 0:
            raise IndexError("Event queue is empty")
        slot = self.indices[0]
        self.payloads[slot] = None
        self._free.append(int(slot))
        self.size -= np.uint32(1)
        self.indices[0] = self.indices[self.size]
        _siftbackward(self.indices, self.times, self.sequence, np.uint32(0), self.size)
        return

    def _grow(self) -> None:
        capacity = len(self.indices)
        self.indices = np.concatenate([self.indices, np.zeros(capacity, dtype=np.uint32)])
        self.times = np.concatenate([self.times, np.zeros(capacity, dtype=np.float64)])
        self.sequence = np.concatenate([self.sequence, np.zeros(capacity, dtype=np.uint64)])
        self.payloads.extend([None] * capacity)
        self._free.extend(range(2 * capacity - 1, capacity - 1, -1))

        return

    @property
    def capacity(self) -> int:
        return len(self.indices)

    def __len__(self) -> int:
        """
        Return the number of pending events.

        Returns:

            int: The number of events in the queue.
        """

        return int(self.size)


@nb.njit((nb.uint32[:], nb.float64[:], nb.uint64[:], nb.uint32, nb.uint32), nogil=True)
def _siftforward(indices, times, sequence, startpos, pos):  # pragma: no cover
    inewitem = indices[pos]
    tnewitem = times[inewitem]
    snewitem = sequence[inewitem]
    # Follow the path to the root, moving parents backward until finding a place newitem fits.
    while pos > startpos:
        parentpos = (pos - 1) >> 1
        iparent = indices[parentpos]
        tparent = times[iparent]
        if tnewitem < tparent or (tnewitem == tparent and snewitem < sequence[iparent]):
            indices[pos] = iparent
            pos = parentpos
            continue
        break
    indices[pos] = inewitem

    return


@nb.njit((nb.uint32[:], nb.float64[:], nb.uint64[:], nb.uint32, nb.uint32), nogil=True)
def _siftbackward(indices, times, sequence, pos, size):  # pragma: no cover
    endpos = size
    startpos = pos
    inewitem = indices[pos]
    # Bubble up the earlier child until hitting a leaf.
    childpos = 2 * pos + 1  # leftmost child position
    while childpos < endpos:
        # Set childpos to index of earlier child.
        rightpos = childpos + 1
        if rightpos < endpos:
            ileft = indices[childpos]
            iright = indices[rightpos]
            if times[iright] < times[ileft] or (times[iright] == times[ileft] and sequence[iright] < sequence[ileft]):
                childpos = rightpos
        # Move the earlier child up.
        indices[pos] = indices[childpos]
        pos = childpos
        childpos = 2 * pos + 1
    # The leaf at pos is empty now.  Put newitem there, and bubble it up
    # to its final resting place (by sifting its parents forward).
    indices[pos] = inewitem
    _siftforward(indices, times, sequence, startpos, pos)
    return
