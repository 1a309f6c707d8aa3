"""
Vaccine efficacy specifications and the efficacy queries that read them.

An efficacy specification is immutable data describing what protection a vaccine confers and when:

- `OneDoseEfficacy` - VES, VEI, and VEP plus the delay until protection and how long it lasts.
- `TwoDoseEfficacy` - separate VES, VEI, and VEP values for each dose, the same delay and duration,
  and the delay between the first and second dose.

All delays and durations are in days relative to the administration time of the relevant dose.
Durations may be ``math.inf`` for protection which never wanes.

The query functions map (status, specification) to an `Efficacy` triple. They have no side effects and
accept either a single status or a NumPy array of statuses (e.g., a population property), so the
transmission model can ask about one agent or about everyone at once::

    spec = OneDoseEfficacy(ves=0.6, vei=0.3, vep=0.8)
    one_dose_efficacy(OneDoseStatus.VACCINE_PROTECTED, spec).ves       # 0.6
    one_dose_efficacy(model.population.vaccine_status, spec).ves       # array, one value per agent
"""

import math
from dataclasses import dataclass
from dataclasses import fields
from typing import NamedTuple

import numpy as np

from laser_vaccine.status import OneDoseStatus
from laser_vaccine.status import TwoDoseStatus

__all__ = ["Efficacy", "OneDoseEfficacy", "TwoDoseEfficacy", "one_dose_efficacy", "two_dose_efficacy"]


class Efficacy(NamedTuple):
    """Reductions in susceptibility (VES), infectiousness (VEI), and progression to severe outcome (VEP)."""

    ves: float
    vei: float
    vep: float


def _check_probability(name, value):
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be within [0.0, 1.0], got {value}")


def _check_timing(delay, duration):
    if not delay >= 0.0:
        raise ValueError(f"efficacy_delay_days must be >= 0, got {delay}")
    if not duration > 0.0:
        raise ValueError(f"efficacy_duration_days must be > 0, got {duration}")


class _FromParams:
    @classmethod
    def from_params(cls, params):
        """
        Build a specification from a parameter bag (PropertySet or dict).

        Parameters:

            params (PropertySet | dict): Must provide a value for every field of the specification, e.g., the
                result of `laser_vaccine.params.one_dose_defaults()` with any overrides applied.

        Returns:

            The specification.
        """

        return cls(**{field.name: float(params[field.name]) for field in fields(cls)})


@dataclass(frozen=True)
class OneDoseEfficacy(_FromParams):
    ves: float = 0.0
    vei: float = 0.0
    vep: float = 0.0
    efficacy_delay_days: float = 0.0
    efficacy_duration_days: float = math.inf

    def __post_init__(self):
        for name in ("ves", "vei", "vep"):
            _check_probability(name, getattr(self, name))
        _check_timing(self.efficacy_delay_days, self.efficacy_duration_days)


@dataclass(frozen=True)
class TwoDoseEfficacy(_FromParams):
    dose_one_ves: float = 0.0
    dose_one_vei: float = 0.0
    dose_one_vep: float = 0.0
    dose_two_ves: float = 0.0
    dose_two_vei: float = 0.0
    dose_two_vep: float = 0.0
    efficacy_delay_days: float = 0.0
    efficacy_duration_days: float = math.inf
    interdose_delay_days: float = 0.0

    def __post_init__(self):
        for name in ("dose_one_ves", "dose_one_vei", "dose_one_vep", "dose_two_ves", "dose_two_vei", "dose_two_vep"):
            _check_probability(name, getattr(self, name))
        _check_timing(self.efficacy_delay_days, self.efficacy_duration_days)
        if not self.interdose_delay_days >= 0.0:
            raise ValueError(f"interdose_delay_days must be >= 0, got {self.interdose_delay_days}")

    @property
    def dose_one(self) -> Efficacy:
        return Efficacy(self.dose_one_ves, self.dose_one_vei, self.dose_one_vep)

    @property
    def dose_two(self) -> Efficacy:
        return Efficacy(self.dose_two_ves, self.dose_two_vei, self.dose_two_vep)


def one_dose_efficacy(status, spec: OneDoseEfficacy) -> Efficacy:
    """
    Efficacy of a one-dose vaccine for the given status (or array of statuses).

    Only VACCINE_PROTECTED individuals are protected; every other status, including waned
    protection, yields 0 for all three measures.
    """

    if np.ndim(status) == 0:
        if status == OneDoseStatus.VACCINE_PROTECTED:
            return Efficacy(spec.ves, spec.vei, spec.vep)
        return Efficacy(0.0, 0.0, 0.0)

    protected = np.asarray(status) == OneDoseStatus.VACCINE_PROTECTED

    return Efficacy(*(np.where(protected, value, 0.0) for value in (spec.ves, spec.vei, spec.vep)))


_DOSE_ONE_PROTECTED = (TwoDoseStatus.VACCINATED_ONE_DOSE_PROTECTED, TwoDoseStatus.VACCINATED_TWO_DOSES_PARTIALLY_PROTECTED)


def two_dose_efficacy(status, spec: TwoDoseEfficacy) -> Efficacy:
    """
    Efficacy of a two-dose vaccine for the given status (or array of statuses).

    Full (dose two) efficacy applies only to VACCINATED_TWO_DOSES_PROTECTED. Dose one efficacy applies
    while only the first dose is effective, i.e., VACCINATED_ONE_DOSE_PROTECTED and
    VACCINATED_TWO_DOSES_PARTIALLY_PROTECTED (second dose given, not yet effective).
    """

    if np.ndim(status) == 0:
        if status == TwoDoseStatus.VACCINATED_TWO_DOSES_PROTECTED:
            return spec.dose_two
        if status in _DOSE_ONE_PROTECTED:
            return spec.dose_one
        return Efficacy(0.0, 0.0, 0.0)

    status = np.asarray(status)
    full = status == TwoDoseStatus.VACCINATED_TWO_DOSES_PROTECTED
    partial = np.isin(status, np.array(_DOSE_ONE_PROTECTED, dtype=status.dtype))

    return Efficacy(
        *(np.where(full, two, np.where(partial, one, 0.0)) for one, two in zip(spec.dose_one, spec.dose_two))
    )
