"""
Several vaccines rolled out independently whose protective effects combine.

Each constituent keeps its own rollout and status (in "vaccine_{i}_status" for the i-th constituent). An individual
escapes the protection of the combination only if they escape the protection of every constituent, so for each of
VES, VEI, and VEP::

    combined = 1 - (1 - constituent_0) * (1 - constituent_1) * ...
"""

import numpy as np

from laser_vaccine.efficacy import Efficacy
from laser_vaccine.environment import Component
from laser_vaccine.vaccine import Vaccine

__all__ = ["CombinationVaccine"]


class CombinationVaccine(Component, Vaccine):
    def __init__(self, vaccines):
        """
        Parameters:

            vaccines (list[VaccineManager]): The constituent vaccines, in order. Each is assigned its index
                in this list as its namespace.

        Raises:

            ValueError: If the list is empty or contains the same vaccine twice.
        """

        vaccines = list(vaccines)
        if not vaccines:
            raise ValueError("A combination vaccine needs at least one constituent vaccine.")
        if len({id(vaccine) for vaccine in vaccines}) != len(vaccines):
            raise ValueError("A vaccine cannot appear twice in a combination vaccine.")

        for index, vaccine in enumerate(vaccines):
            vaccine.set_index(index)
        self.vaccines = vaccines

        return

    def init(self, env) -> None:
        for vaccine in self.vaccines:
            env.add_component(vaccine)

        return

    def on_event(self, env, event) -> None:
        # constituents schedule their own events
        raise RuntimeError(f"CombinationVaccine cannot handle {event.kind.name} events.")

    def efficacy(self, env, person: int) -> Efficacy:
        failure = np.ones(3, dtype=np.float64)
        for index, vaccine in enumerate(self.vaccines):
            failure *= 1.0 - _validate(index, vaccine, vaccine.efficacy(env, person))

        return Efficacy(*(float(value) for value in 1.0 - failure))

    def efficacy_all(self, env) -> Efficacy:
        failure = np.ones((3, env.population.count), dtype=np.float64)
        for index, vaccine in enumerate(self.vaccines):
            failure *= 1.0 - _validate(index, vaccine, vaccine.efficacy_all(env))

        return Efficacy(*(1.0 - failure))

    def managers(self) -> list:
        return [manager for vaccine in self.vaccines for manager in vaccine.managers()]


def _validate(index, vaccine, values) -> np.ndarray:
    if values is None or any(value is None for value in values):
        raise ValueError(f"Vaccine {index} ({type(vaccine).__name__}) did not report an efficacy: {values}")
    values = np.asarray(values, dtype=np.float64)
    if not np.all((values >= 0.0) & (values <= 1.0)):
        raise ValueError(f"Vaccine {index} ({type(vaccine).__name__}) reported an efficacy outside [0, 1]: {values}")

    return values
