"""
The simulation environment: clock, scheduler, per-individual properties, partitions, and random streams.

Components (vaccine managers, arrivals, reports) implement the `Component` interface and interact with the rest of
the simulation only through the environment:

- `schedule(time, component, event)` - ask for `component.on_event(env, event)` to be called at `time`.
- `get_property()` / `set_property()` - read and write per-individual properties. Writes go through the environment
  so that partitions depending on the property stay consistent.
- `add_partition()` - declare a dynamic index of individuals, see `laser_vaccine.partition`.
- `random_stream(name)` - a deterministic random stream private to one mechanism.
- `observe_arrivals(component, True)` - receive `component.on_arrival(env, person)` when individuals are added.

Execution is single-threaded. Callbacks run strictly in non-decreasing time order, with callbacks scheduled for the
same time running in the order they were scheduled.
"""

from abc import ABC
from abc import abstractmethod

import click
import numpy as np

from laser_vaccine import random
from laser_vaccine.eventqueue import EventQueue
from laser_vaccine.partition import Partition
from laser_vaccine.population import AgeGroups
from laser_vaccine.population import Population

__all__ = ["Component", "Environment"]


class Component(ABC):
    """Interface for anything driven by the environment's scheduler."""

    @abstractmethod
    def init(self, env) -> None:
        """Declare properties and partitions and schedule the first events. Called once by `Environment.add_component()`."""

    @abstractmethod
    def on_event(self, env, event) -> None:
        """Handle an event previously scheduled for this component."""

    def on_arrival(self, env, person: int) -> None:  # noqa: B027
        """Called for each new individual while this component observes arrivals."""


class Environment:
    """A discrete event simulation of a population partitioned into age groups."""

    def __init__(self, age_groups, capacity: int, seed=None, verbose: bool = False):
        """
        Initialize an environment with an empty population.

        Parameters:

            age_groups (AgeGroups | list): The age groups, in the order used for the `age_group` property.
            capacity (int): The maximum number of individuals, including all future arrivals.
            seed (int, optional): Base seed for the random streams. Defaults to the global seed.
            verbose (bool, optional): Report progress with click.echo(). Default False.
        """

        self.age_groups = age_groups if isinstance(age_groups, AgeGroups) else AgeGroups(age_groups)
        self.population = Population(capacity)
        self.population.add_scalar_property("age_group", dtype=np.uint8, default=0)
        if seed is None:
            random.prng()  # seeds from the clock unless random.seed() was called
            seed = random.get_seed()
        self.seed = np.uint32(seed)
        self.verbose = verbose

        self.components = []
        self.queue = EventQueue()
        self._time = 0.0
        self._partitions = {}
        self._dependents = {}  # property name -> partitions using it
        self._streams = {}
        self._observers = []

        return

    @property
    def now(self) -> float:
        """The current simulation time in days."""

        return self._time

    # Components and scheduling

    def add_component(self, component) -> None:
        """Register `component` and call its `init()`."""

        self.components.append(component)
        component.init(self)

        return

    def schedule(self, time: float, component, event) -> None:
        """
        Schedule `component.on_event(env, event)` at `time`.

        Raises:

            ValueError: If `time` is before the current simulation time.
        """

        if time < self._time:
            raise ValueError(f"Cannot schedule {event.kind.name} at {time} before the current time {self._time}.")
        self.queue.push(float(time), (component, event))

        return

    def run(self, until: float) -> None:
        """Process every event scheduled at or before `until` and advance the clock to `until`."""

        if until < self._time:
            raise ValueError(f"Cannot run until {until}, the current time is already {self._time}.")

        processed = 0
        while len(self.queue) and self.queue.peekt() <= until:
            self._time, (component, event) = self.queue.poptp()
            component.on_event(self, event)
            processed += 1
        self._time = float(until)

        if self.verbose:
            click.echo(f"Day {self._time:g}: processed {processed:,} events, {len(self.queue):,} pending.")

        return

    # Per-individual properties

    def add_property(self, name: str, dtype=np.int8, default=0) -> None:
        self.population.add_scalar_property(name, dtype=dtype, default=default)
        return

    def get_property(self, name: str, person: int):
        if not self.population.has_property(name):
            raise KeyError(f"Population has no property '{name}'.")
        return getattr(self.population, name)[person]

    def set_property(self, name: str, person: int, value) -> None:
        """Set a property of one individual and update the partitions depending on it."""

        if not self.population.has_property(name):
            raise KeyError(f"Population has no property '{name}'.")
        getattr(self.population, name)[person] = value
        for partition in self._dependents.get(name, ()):
            partition.update(person)

        return

    # Partitions

    def add_partition(self, key, key_property: str, filters: dict) -> Partition:
        """
        Declare a partition of the individuals matching `filters`, with cells keyed by `key_property`.

        The partition is kept up to date with property changes made through `set_property()` and with arrivals.

        Raises:

            ValueError: If a partition with this key already exists.
        """

        if key in self._partitions:
            raise ValueError(f"Partition '{key}' already exists.")

        ncells = len(self.age_groups) if key_property == "age_group" else int(getattr(self.population, key_property).max(initial=0)) + 1
        partition = Partition(self.population, key_property, ncells, filters)
        self._partitions[key] = partition
        for name in partition.properties:
            self._dependents.setdefault(name, []).append(partition)

        return partition

    def remove_partition(self, key) -> None:
        partition = self._partitions.pop(key)
        for name in partition.properties:
            self._dependents[name].remove(partition)

        return

    def partition(self, key) -> Partition:
        return self._partitions[key]

    # Random streams

    def random_stream(self, name: str) -> np.random.Generator:
        """The environment's generator for the named stream, see `laser_vaccine.random.stream()`."""

        if name not in self._streams:
            self._streams[name] = random.stream(name, self.seed)

        return self._streams[name]

    # Arrivals

    def observe_arrivals(self, component, observe: bool) -> None:
        """Start (observe=True) or stop (observe=False) notifying `component` of new individuals."""

        if observe:
            if component not in self._observers:
                self._observers.append(component)
        elif component in self._observers:
            self._observers.remove(component)

        return

    def add_people(self, count: int, age_group) -> tuple[int, int]:
        """
        Add `count` individuals.

        Parameters:

            count (int): The number of new individuals.
            age_group (str | int | np.ndarray): Age group name or index for everyone, or one index per individual.

        Returns:

            tuple[int, int]: The [start index, end index) of the new individuals.
        """

        if isinstance(age_group, str):
            age_group = self.age_groups.index(age_group)

        start, end = self.population.add(count)
        self.population.age_group[start:end] = age_group
        for partition in self._partitions.values():
            partition.extend(start, end)

        for person in range(start, end):
            for component in list(self._observers):
                # a component may unsubscribe while handling an earlier arrival
                if component in self._observers:
                    component.on_arrival(self, person)

        return start, end
