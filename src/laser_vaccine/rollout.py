"""
Vaccine rollout: who gets the next dose, and when.

A `VaccineManager` administers first doses one at a time at a constant average rate, starting on a given day.
Each administration picks an age group with probability proportional to

    (number of unvaccinated individuals in the group) x (uptake weight of the group)

and then an unvaccinated individual uniformly at random from that group. The time to the next administration is
exponentially distributed. When nobody with a positive weight is left to vaccinate, the manager stops and waits
for the next arrival before resuming.

Subclasses (`OneDoseVaccineManager`, `TwoDoseVaccineManager`) implement what a dose does to an individual's
protection status and which follow-up events it schedules.
"""

from dataclasses import dataclass
from dataclasses import field

import click
import numpy as np

from laser_vaccine.environment import Component
from laser_vaccine.events import Event
from laser_vaccine.events import EventKind
from laser_vaccine.vaccine import Vaccine

__all__ = ["AgeWeights", "RolloutConfig", "VaccineManager"]


class AgeWeights:
    """Relative uptake weight per age group name, with a default for groups not listed."""

    def __init__(self, weights=None, default: float = 1.0):
        weights = {} if weights is None else {name: float(value) for name, value in dict(weights).items()}
        for name, value in weights.items():
            if not value >= 0.0:
                raise ValueError(f"Uptake weight for age group '{name}' must be >= 0, got {value}")
        if not default >= 0.0:
            raise ValueError(f"Default uptake weight must be >= 0, got {default}")

        self._weights = weights
        self.default = float(default)

        return

    def weight(self, name: str) -> float:
        return self._weights.get(name, self.default)

    def for_groups(self, age_groups) -> np.ndarray:
        """
        The weights in `age_groups` order.

        Raises:

            KeyError: If a weight is given for a name which is not one of `age_groups`.
        """

        unknown = sorted(set(self._weights) - set(age_groups.names))
        if unknown:
            raise KeyError(f"Uptake weights given for unknown age group(s) {unknown}, expected names from {age_groups.names}.")

        return np.array([self.weight(name) for name in age_groups.names], dtype=np.float64)

    def to_dict(self) -> dict:
        return dict(self._weights)

    def __eq__(self, other):
        return isinstance(other, AgeWeights) and self._weights == other._weights and self.default == other.default

    def __repr__(self) -> str:
        return f"AgeWeights({self._weights!r}, default={self.default!r})"


@dataclass(frozen=True)
class RolloutConfig:
    """When vaccination starts, how fast first doses are given, and how targets are weighted by age group."""

    start_day: float = 0.0
    rate_per_day: float = 0.0
    uptake_weights: AgeWeights = field(default_factory=AgeWeights)

    def __post_init__(self):
        if not self.start_day >= 0.0:
            raise ValueError(f"vaccination_start_day must be >= 0, got {self.start_day}")
        if not self.rate_per_day >= 0.0:
            raise ValueError(f"vaccination_rate_per_day must be >= 0, got {self.rate_per_day}")

    @classmethod
    def from_params(cls, params):
        """Build from a parameter bag with the keys of `laser_vaccine.params.rollout_defaults()`."""

        return cls(
            start_day=float(params["vaccination_start_day"]),
            rate_per_day=float(params["vaccination_rate_per_day"]),
            uptake_weights=AgeWeights(params["uptake_weights"], default=float(params["default_uptake_weight"])),
        )


class VaccineManager(Component, Vaccine):
    """
    Rolls out one vaccine and tracks the protection status it confers on every individual.

    The status lives in the int8 population property `status_property` ("vaccine_status", or "vaccine_{index}_status"
    for a constituent of a combination vaccine). Efficacy queries read that property, so a manager is both the
    component driving the rollout and the `Vaccine` answering for it.
    """

    status_type = None  # IntEnum of protection statuses, set by subclasses
    query = None  # (status, spec) -> Efficacy, set by subclasses
    doses_per_person = 1

    def __init__(self, spec, rollout: RolloutConfig, verbose: bool = False):
        """
        Parameters:

            spec: The efficacy specification, e.g., `OneDoseEfficacy`.
            rollout (RolloutConfig): Start day, rate, and uptake weights.
            verbose (bool, optional): Report rollout progress with click.echo(). Default False.
        """

        self.spec = spec
        self.rollout = rollout
        self.verbose = verbose
        self.set_index(None)

        self.waiting_for_arrivals = False
        self.administered = 0

        self._env = None
        self._prng = None
        self._partition = None
        self._weights = None
        self._mean_delay = np.inf

        return

    def set_index(self, index) -> None:
        """Namespace this manager's property, random stream, and partition, e.g., "vaccine_1_status" for index 1."""

        if self._initialized:
            raise RuntimeError(f"Cannot change the index of {self.name} after it has been added to an environment.")

        self.index = index
        self.name = "vaccine" if index is None else f"vaccine_{index}"
        self.status_property = f"{self.name}_status"
        self.partition_key = f"{self.name}_targets"

        return

    @property
    def _initialized(self) -> bool:
        return getattr(self, "_env", None) is not None

    @property
    def active(self) -> bool:
        """False if the rate is 0, in which case nobody is ever vaccinated."""

        return self.rollout.rate_per_day > 0.0

    def init(self, env) -> None:
        if self._initialized:
            raise RuntimeError(f"{self.name} has already been added to an environment.")
        weights = self.rollout.uptake_weights.for_groups(env.age_groups)
        self._env = env

        env.add_property(self.status_property, dtype=np.int8, default=self.status_type.NOT_VACCINATED)
        if not self.active:
            if self.verbose:
                click.echo(f"{self.name}: vaccination rate is 0, no doses will be given.")
            return

        self._prng = env.random_stream(self.name)
        self._mean_delay = self.doses_per_person / self.rollout.rate_per_day
        self._partition = env.add_partition(
            self.partition_key, "age_group", {self.status_property: self.status_type.NOT_VACCINATED}
        )
        self._weights = weights
        env.schedule(self.rollout.start_day, self, Event(EventKind.ADMINISTER_FIRST_DOSE))

        if self.verbose:
            click.echo(
                f"{self.name}: vaccinating from day {self.rollout.start_day:g} at {self.rollout.rate_per_day:g} doses/day."
            )

        return

    def on_event(self, env, event) -> None:
        if event.kind == EventKind.ADMINISTER_FIRST_DOSE:
            self._vaccinate_and_schedule_next(env)
        elif event.kind == EventKind.ADMINISTER_SECOND_DOSE:
            self.second_dose(env, event.person)
        elif event.kind == EventKind.TOGGLE_PROTECTION:
            self.toggle_protection(env, event.person)
        else:
            raise RuntimeError(f"{self.name} cannot handle {event.kind.name} events.")

        return

    def on_arrival(self, env, person: int) -> None:
        env.observe_arrivals(self, False)
        self.waiting_for_arrivals = False
        if self.verbose:
            click.echo(f"{self.name}: day {env.now:g}, individual {person} arrived, resuming vaccination.")
        self._vaccinate_and_schedule_next(env)

        return

    def select_target(self, env):
        """
        Draw the next individual to vaccinate.

        Returns:

            int | None: The individual, or None if no unvaccinated individual has a positive uptake weight.
        """

        weights = self._partition.sizes() * self._weights
        cumulative = np.cumsum(weights)
        total = cumulative[-1]
        if not total > 0.0:
            return None

        cell = int(np.searchsorted(cumulative, self._prng.random() * total, side="right"))
        cell = min(cell, int(np.flatnonzero(weights)[-1]))  # rounding at the upper end

        return self._partition.sample(cell, self._prng)

    def _vaccinate_and_schedule_next(self, env) -> None:
        person = self.select_target(env)
        if person is None:
            self.waiting_for_arrivals = True
            env.observe_arrivals(self, True)
            if self.verbose:
                click.echo(f"{self.name}: day {env.now:g}, no eligible individuals left, waiting for arrivals.")
            return

        self.administer(env, person)
        self.administered += 1
        env.schedule(env.now + self._prng.exponential(self._mean_delay), self, Event(EventKind.ADMINISTER_FIRST_DOSE))

        return

    # Status transitions, implemented by subclasses

    def administer(self, env, person: int) -> None:
        raise NotImplementedError

    def second_dose(self, env, person: int) -> None:
        raise RuntimeError(f"{self.name} ({type(self).__name__}) does not give second doses.")

    def toggle_protection(self, env, person: int) -> None:
        raise NotImplementedError

    def status(self, env, person: int):
        return self.status_type(env.get_property(self.status_property, person))

    def _set_status(self, env, person: int, status) -> None:
        env.set_property(self.status_property, person, status)

    def _schedule(self, env, delay: float, kind: EventKind, person: int) -> None:
        env.schedule(env.now + delay, self, Event(kind, person))

    def _illegal(self, person: int, status, event: str):
        return RuntimeError(f"{self.name}: individual {person} has status {status!s}, cannot process {event}.")

    # Vaccine

    def efficacy(self, env, person: int):
        return self.query(env.get_property(self.status_property, person), self.spec)

    def efficacy_all(self, env):
        return self.query(getattr(env.population, self.status_property), self.spec)

    def managers(self) -> list:
        return [self]

    def census(self, env) -> np.ndarray:
        """Number of individuals in each status, indexed by status value."""

        return np.bincount(getattr(env.population, self.status_property), minlength=len(self.status_type))
