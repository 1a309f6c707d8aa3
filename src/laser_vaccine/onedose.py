"""Single dose vaccine: optional delay to protection, then protection for a (possibly infinite) duration."""

import math

from laser_vaccine.efficacy import one_dose_efficacy
from laser_vaccine.events import EventKind
from laser_vaccine.rollout import VaccineManager
from laser_vaccine.status import OneDoseStatus

__all__ = ["OneDoseVaccineManager"]


class OneDoseVaccineManager(VaccineManager):
    """
    Statuses move NOT_VACCINATED -> [VACCINATED_NOT_YET_PROTECTED ->] VACCINE_PROTECTED -> VACCINATED_NO_LONGER_PROTECTED.

    The optional step is skipped when the efficacy delay is 0. The last step only happens if the efficacy
    duration is finite.
    """

    status_type = OneDoseStatus
    query = staticmethod(one_dose_efficacy)
    doses_per_person = 1

    def administer(self, env, person: int) -> None:
        if self.spec.efficacy_delay_days > 0:
            self._set_status(env, person, OneDoseStatus.VACCINATED_NOT_YET_PROTECTED)
            self._schedule(env, self.spec.efficacy_delay_days, EventKind.TOGGLE_PROTECTION, person)
        else:
            self._protect(env, person)

        return

    def toggle_protection(self, env, person: int) -> None:
        status = self.status(env, person)
        if status == OneDoseStatus.VACCINATED_NOT_YET_PROTECTED:
            self._protect(env, person)
        elif status == OneDoseStatus.VACCINE_PROTECTED:
            self._set_status(env, person, OneDoseStatus.VACCINATED_NO_LONGER_PROTECTED)
        else:
            raise self._illegal(person, status, "toggle protection")

        return

    def _protect(self, env, person: int) -> None:
        self._set_status(env, person, OneDoseStatus.VACCINE_PROTECTED)
        if not math.isinf(self.spec.efficacy_duration_days):
            self._schedule(env, self.spec.efficacy_duration_days, EventKind.TOGGLE_PROTECTION, person)
