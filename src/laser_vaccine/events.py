"""Events exchanged between the environment and its components.

Every scheduled callback carries an `Event` whose `kind` says what it is. Components match on the
kind explicitly (and reject kinds they do not handle) rather than inspecting Python types.
"""

from enum import Enum
from enum import auto
from enum import unique
from typing import NamedTuple

__all__ = ["Event", "EventKind"]


@unique
class EventKind(Enum):
    ADMINISTER_FIRST_DOSE = auto()  # pick a target and give the first (or only) dose
    ADMINISTER_SECOND_DOSE = auto()
    TOGGLE_PROTECTION = auto()  # onset or expiry, decided by the person's current status
    ARRIVALS = auto()
    RECORD_CENSUS = auto()


class Event(NamedTuple):
    kind: EventKind
    person: int = -1  # -1 for events not tied to an individual
