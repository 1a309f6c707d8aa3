"""
The interface the rest of the simulation (e.g., transmission) uses to ask about vaccine protection, and a factory
building any supported vaccine from parameters.
"""

from abc import ABC
from abc import abstractmethod
from enum import Enum

from laser_vaccine.efficacy import Efficacy

__all__ = ["Vaccine", "VaccineType", "build_vaccine"]


class Vaccine(ABC):
    """Efficacy queries for individuals in an environment."""

    @abstractmethod
    def efficacy(self, env, person: int) -> Efficacy:
        """VES, VEI, and VEP for one individual at the current time."""

    @abstractmethod
    def efficacy_all(self, env) -> Efficacy:
        """VES, VEI, and VEP arrays with one entry per individual."""

    @abstractmethod
    def managers(self) -> list:
        """The vaccine managers whose statuses determine this vaccine's efficacy."""

    def ves(self, env, person: int) -> float:
        """Reduction in the probability that a vaccinated susceptible person is infected by an exposure."""
        return self.efficacy(env, person).ves

    def vei(self, env, person: int) -> float:
        """Reduction in the probability that a vaccinated infected person transmits infection."""
        return self.efficacy(env, person).vei

    def vep(self, env, person: int) -> float:
        """Reduction in the probability that a vaccinated infected person has a severe outcome."""
        return self.efficacy(env, person).vep

    def ved(self, env, person: int) -> float:
        """Reduction in the probability of death for a vaccinated infected person. Not modeled, always 0."""
        return 0.0

    def probability_vaccine_fails_to_prevent_transmission(self, env, source: int, target: int) -> float:
        """
        Probability that vaccination fails to prevent transmission from `source` to `target`, taking into account
        the VEI of the source and the VES of the target.
        """
        return (1.0 - self.vei(env, source)) * (1.0 - self.ves(env, target))


class VaccineType(Enum):
    ONE_DOSE = "one_dose"
    TWO_DOSE = "two_dose"
    COMBINATION = "combination"


def build_vaccine(params, verbose: bool = False) -> Vaccine:
    """
    Build a vaccine from a parameter bag.

    The bag's ``type`` selects the vaccine: "one_dose" and "two_dose" bags hold efficacy and rollout parameters
    (see `laser_vaccine.params`), a "combination" bag holds a list of such bags under ``vaccines``.

    Parameters:

        params (PropertySet | dict): The vaccine parameters.
        verbose (bool, optional): Passed on to the vaccine managers. Default False.

    Returns:

        Vaccine: The vaccine, ready to be added to an environment with `Environment.add_component()`.

    Raises:

        ValueError: If the type is unknown, a parameter is invalid, or an unknown parameter is given.
    """

    # imported here to avoid circular imports
    from laser_vaccine.combination import CombinationVaccine
    from laser_vaccine.efficacy import OneDoseEfficacy
    from laser_vaccine.efficacy import TwoDoseEfficacy
    from laser_vaccine.onedose import OneDoseVaccineManager
    from laser_vaccine.params import PropertySet
    from laser_vaccine.params import one_dose_defaults
    from laser_vaccine.params import two_dose_defaults
    from laser_vaccine.rollout import RolloutConfig
    from laser_vaccine.twodose import TwoDoseVaccineManager

    params = PropertySet(params)
    if "type" not in params:
        raise ValueError("Vaccine parameters must include a 'type'.")
    vtype = VaccineType(params.type)
    settings = params.to_dict()
    del settings["type"]

    if vtype == VaccineType.ONE_DOSE:
        params = one_dose_defaults() << settings
        return OneDoseVaccineManager(OneDoseEfficacy.from_params(params), RolloutConfig.from_params(params), verbose=verbose)

    if vtype == VaccineType.TWO_DOSE:
        params = two_dose_defaults() << settings
        return TwoDoseVaccineManager(TwoDoseEfficacy.from_params(params), RolloutConfig.from_params(params), verbose=verbose)

    constituents = settings.pop("vaccines", [])
    if settings:
        raise ValueError(f"Unknown combination vaccine parameters: {sorted(settings)}.")
    vaccines = [build_vaccine(constituent, verbose=verbose) for constituent in constituents]
    for vaccine in vaccines:
        if isinstance(vaccine, CombinationVaccine):
            raise ValueError("Combination vaccines cannot be nested.")

    return CombinationVaccine(vaccines)
