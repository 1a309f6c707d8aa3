"""Arrival of new individuals (births, immigration) over the course of a simulation."""

import click
import numpy as np

from laser_vaccine.environment import Component
from laser_vaccine.events import Event
from laser_vaccine.events import EventKind

__all__ = ["Arrivals"]


class Arrivals(Component):
    """
    Adds Poisson(rate_per_day) new individuals at the start of every day from day 1 on, with age groups drawn
    according to `shares`. New individuals are unvaccinated for every vaccine.
    """

    def __init__(self, rate_per_day: float, shares=None, verbose: bool = False):
        """
        Parameters:

            rate_per_day (float): Expected number of arrivals per day.
            shares (dict, optional): Age group name -> relative share of arrivals. Default is all in the first group.
            verbose (bool, optional): Report arrivals with click.echo(). Default False.
        """

        if not rate_per_day >= 0.0:
            raise ValueError(f"Arrival rate must be >= 0, got {rate_per_day}")
        shares = dict(shares or {})
        for name, share in shares.items():
            if not share >= 0.0:
                raise ValueError(f"Arrival share for age group '{name}' must be >= 0, got {share}")
        if shares and not sum(shares.values()) > 0.0:
            raise ValueError("Arrival shares must not all be 0.")

        self.rate_per_day = float(rate_per_day)
        self.shares = shares
        self.verbose = verbose
        self.arrived = 0

        self._prng = None
        self._probabilities = None

        return

    def init(self, env) -> None:
        self._prng = env.random_stream("arrivals")
        if self.shares:
            for name in self.shares:
                env.age_groups.index(name)  # KeyError for unknown groups
            probabilities = np.array([self.shares.get(name, 0.0) for name in env.age_groups.names], dtype=np.float64)
        else:
            probabilities = np.zeros(len(env.age_groups), dtype=np.float64)
            probabilities[0] = 1.0
        self._probabilities = probabilities / probabilities.sum()

        if self.rate_per_day > 0.0:
            env.schedule(env.now + 1.0, self, Event(EventKind.ARRIVALS))

        return

    def on_event(self, env, event) -> None:
        if event.kind != EventKind.ARRIVALS:
            raise RuntimeError(f"Arrivals cannot handle {event.kind.name} events.")

        count = int(self._prng.poisson(self.rate_per_day))
        count = min(count, env.population.capacity - env.population.count)
        if count > 0:
            groups = self._prng.choice(len(self._probabilities), size=count, p=self._probabilities).astype(np.uint8)
            env.add_people(count, groups)
            self.arrived += count
            if self.verbose:
                click.echo(f"Day {env.now:g}: {count:,} arrivals.")
        env.schedule(env.now + 1.0, self, Event(EventKind.ARRIVALS))

        return
