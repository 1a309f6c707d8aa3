"""
Two dose vaccine.

The first dose is given by the rollout, the second dose `interdose_delay_days` later (or at the same time if the
inter-dose delay is 0). Each dose becomes effective `efficacy_delay_days` after it is given. Protection from the
first dose lasts until the second dose is effective; protection from the second dose lasts `efficacy_duration_days`.

After the first dose, by efficacy delay and inter-dose delay:

===========  ==========  ======================================  ===========================================
delay        gap         status                                  scheduled
===========  ==========  ======================================  ===========================================
> 0          > 0         VACCINATED_ONE_DOSE_NOT_YET_PROTECTED   second dose at +gap, onset at +delay
> 0          0           VACCINATED_TWO_DOSES_NOT_YET_PROTECTED  onset at +delay
0            > 0         VACCINATED_ONE_DOSE_PROTECTED           second dose at +gap
0            0           VACCINATED_TWO_DOSES_PROTECTED          expiry at +duration (if finite)
===========  ==========  ======================================  ===========================================

Onset and expiry share the TOGGLE_PROTECTION event. What it does depends on the status when it fires.
"""

import math

from laser_vaccine.efficacy import two_dose_efficacy
from laser_vaccine.events import EventKind
from laser_vaccine.rollout import VaccineManager
from laser_vaccine.status import TwoDoseStatus

__all__ = ["TwoDoseVaccineManager"]


class TwoDoseVaccineManager(VaccineManager):
    status_type = TwoDoseStatus
    query = staticmethod(two_dose_efficacy)
    doses_per_person = 2  # the rate counts second doses too

    def administer(self, env, person: int) -> None:
        delay = self.spec.efficacy_delay_days
        gap = self.spec.interdose_delay_days

        if gap > 0:
            if delay > 0:
                self._set_status(env, person, TwoDoseStatus.VACCINATED_ONE_DOSE_NOT_YET_PROTECTED)
                self._schedule(env, gap, EventKind.ADMINISTER_SECOND_DOSE, person)
                self._schedule(env, delay, EventKind.TOGGLE_PROTECTION, person)
            else:
                self._set_status(env, person, TwoDoseStatus.VACCINATED_ONE_DOSE_PROTECTED)
                self._schedule(env, gap, EventKind.ADMINISTER_SECOND_DOSE, person)
        elif delay > 0:
            self._set_status(env, person, TwoDoseStatus.VACCINATED_TWO_DOSES_NOT_YET_PROTECTED)
            self._schedule(env, delay, EventKind.TOGGLE_PROTECTION, person)
        else:
            self._protect(env, person)

        return

    def second_dose(self, env, person: int) -> None:
        delay = self.spec.efficacy_delay_days
        status = self.status(env, person)

        if status == TwoDoseStatus.VACCINATED_ONE_DOSE_NOT_YET_PROTECTED:
            if not delay > 0:
                raise self._illegal(person, status, "second dose without an efficacy delay")
            self._set_status(env, person, TwoDoseStatus.VACCINATED_TWO_DOSES_NOT_YET_PROTECTED)
            self._schedule(env, delay, EventKind.TOGGLE_PROTECTION, person)
        elif status == TwoDoseStatus.VACCINATED_ONE_DOSE_PROTECTED:
            if delay > 0:
                self._set_status(env, person, TwoDoseStatus.VACCINATED_TWO_DOSES_PARTIALLY_PROTECTED)
                self._schedule(env, delay, EventKind.TOGGLE_PROTECTION, person)
            else:
                self._protect(env, person)
        else:
            raise self._illegal(person, status, "second dose")

        return

    def toggle_protection(self, env, person: int) -> None:
        status = self.status(env, person)

        if status == TwoDoseStatus.VACCINATED_ONE_DOSE_NOT_YET_PROTECTED:
            # second dose is still to come, protection lasts until it is effective
            self._set_status(env, person, TwoDoseStatus.VACCINATED_ONE_DOSE_PROTECTED)
        elif status == TwoDoseStatus.VACCINATED_TWO_DOSES_NOT_YET_PROTECTED:
            if self.spec.interdose_delay_days > 0:
                self._set_status(env, person, TwoDoseStatus.VACCINATED_TWO_DOSES_PARTIALLY_PROTECTED)
            else:
                self._protect(env, person)
        elif status == TwoDoseStatus.VACCINATED_TWO_DOSES_PARTIALLY_PROTECTED:
            self._protect(env, person)
        elif status == TwoDoseStatus.VACCINATED_TWO_DOSES_PROTECTED:
            self._set_status(env, person, TwoDoseStatus.VACCINATED_NO_LONGER_PROTECTED)
        else:
            raise self._illegal(person, status, "toggle protection")

        return

    def _protect(self, env, person: int) -> None:
        self._set_status(env, person, TwoDoseStatus.VACCINATED_TWO_DOSES_PROTECTED)
        if not math.isinf(self.spec.efficacy_duration_days):
            self._schedule(env, self.spec.efficacy_duration_days, EventKind.TOGGLE_PROTECTION, person)
