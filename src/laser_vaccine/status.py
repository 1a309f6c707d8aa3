"""Per-individual vaccine protection states.

Statuses are stored in int8 population properties, so both enums are IntEnums and compare
directly against NumPy arrays, e.g., ``np.count_nonzero(statuses == OneDoseStatus.VACCINE_PROTECTED)``.
"""

from enum import IntEnum
from enum import unique

__all__ = ["OneDoseStatus", "TwoDoseStatus"]


class _Status(IntEnum):
    def __str__(self):
        return self.name.lower()


@unique
class OneDoseStatus(_Status):
    NOT_VACCINATED = 0
    VACCINATED_NOT_YET_PROTECTED = 1
    VACCINE_PROTECTED = 2
    VACCINATED_NO_LONGER_PROTECTED = 3


@unique
class TwoDoseStatus(_Status):
    NOT_VACCINATED = 0
    VACCINATED_ONE_DOSE_NOT_YET_PROTECTED = 1
    VACCINATED_ONE_DOSE_PROTECTED = 2
    VACCINATED_TWO_DOSES_NOT_YET_PROTECTED = 3
    VACCINATED_TWO_DOSES_PARTIALLY_PROTECTED = 4
    VACCINATED_TWO_DOSES_PROTECTED = 5
    VACCINATED_NO_LONGER_PROTECTED = 6
