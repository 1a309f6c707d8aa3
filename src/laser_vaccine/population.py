"""
population.py

This module defines the Population class, which holds per-individual properties for the agents in a simulation,
and the AgeGroups class which partitions ages into the named groups used for vaccine targeting.

The Population class is similar to a database table or a Pandas DataFrame: each property is a 1-D NumPy array
with one entry per individual. Individuals are only ever appended (arrivals) and never removed, so an individual's
index is a stable identifier for the whole simulation.

Usage Example:
    ```python
    people = Population(capacity=1_000)
    people.add_scalar_property("age_group", dtype=np.uint8, default=0)
    people.add_scalar_property("vaccine_status", dtype=np.int8, default=0)
    start, end = people.add(100)
    people.age_group[start:end] = 2
    ```

Note:
    Since count can be less than capacity, properties return slices of the underlying arrays up to count by default.
    I.e., if `people` is a Population, then `people.age_group` returns `people._age_group[0:people.count]`.
    The slice returned is valid for all NumPy operations, including assignment, and for use with Numba compiled functions.
"""

from dataclasses import dataclass

import numpy as np

__all__ = ["AgeGroup", "AgeGroups", "Population"]


class Population:
    """Per-individual properties, stored as NumPy arrays with room for `capacity` individuals."""

    def __init__(self, capacity: int, initial_count: int = 0):
        """
        Initialize a Population object.

        Parameters:
            capacity (int): The maximum number of individuals, including all future arrivals.
                            Must be a positive integer.
            initial_count (int): The initial number of individuals. Must be a non-negative integer <= capacity.

        Raises:
            ValueError: If capacity or initial_count is invalid or initial_count is greater than capacity.
        """

        if not isinstance(capacity, (int, np.integer)) or capacity <= 0:
            raise ValueError(f"Capacity must be a positive integer, got {capacity}.")

        if not isinstance(initial_count, (int, np.integer)) or initial_count < 0:
            raise ValueError(f"Initial count must be a non-negative integer, got {initial_count}.")

        if initial_count > capacity:
            raise ValueError(f"Initial count ({initial_count}) cannot exceed capacity ({capacity}).")

        self._count = int(initial_count)
        self._capacity = int(capacity)
        self._properties = {}

        return

    def add_scalar_property(self, name: str, dtype=np.uint32, default=0) -> None:
        """
        Add a scalar (one value per individual) property.

        Parameters:
            name (str): The name of the property.
            dtype (data-type, optional): The NumPy data type for the property. Default is np.uint32.
            default (scalar, optional): The value for all current and future individuals. Default is 0.

        Raises:
            ValueError: If a property (or attribute) with this name already exists.
        """

        if hasattr(self, name):
            raise ValueError(f"Property '{name}' already exists in Population.")

        setattr(self, f"_{name}", np.full(self._capacity, default, dtype=dtype))
        self._properties[name] = getattr(self, f"_{name}")

        return

    def has_property(self, name: str) -> bool:
        return name in self._properties

    def __getattr__(self, name: str):
        if name != "_properties" and name in self._properties:
            return self._properties[name][0 : self._count]
        raise AttributeError(f"'Population' object has no attribute '{name}'")

    def __setattr__(self, name, value):
        if ("_properties" in self.__dict__) and (name in self._properties):
            raise RuntimeError(f"Cannot reassign property '{name}'. Modify the array in place instead, e.g., people.{name}[:] = new_values")
        super().__setattr__(name, value)

    @property
    def count(self) -> int:
        """The current number of individuals (equivalent to len())."""

        return self._count

    @property
    def capacity(self) -> int:
        """The maximum number of individuals."""

        return self._capacity

    @property
    def properties(self) -> list[str]:
        return list(self._properties)

    def add(self, count: int) -> tuple[int, int]:
        """
        Adds `count` individuals to the population. New individuals have the default value for every property.

        Parameters:
            count (int): The number of individuals to add.

        Returns:
            tuple[int, int]: The [start index, end index) of the new individuals.

        Raises:
            ValueError: If the resulting count exceeds the population's capacity.
        """

        if count < 0:
            raise ValueError(f"Cannot add a negative number of individuals ({count=}).")
        if not self._count + count <= self._capacity:
            raise ValueError(f"population.add() exceeds capacity ({self._count=} + {count=} > {self._capacity=})")

        i = self._count
        self._count += int(count)
        j = self._count
        return i, j

    def __len__(self) -> int:
        return self._count

    def describe(self, target=None) -> str:
        """
        Return a formatted table of the properties of this population with their data types and memory use.

        Args:
            target: Optional string for the report header, e.g., "People".
        """

        lines = [""]
        if target:
            lines.append(f"Population Report for `{target}`:")
        lines.append(f"Capacity: {self.capacity:>13,}")
        lines.append(f"Count:    {self.count:>13,}")
        lines.append("")

        if self._properties:
            nwidth = max(max(len(name) for name in self._properties), len("Name"))
            lines.append(f"{'Name':<{nwidth}} | {'Datatype':^9} | {'Allocated Size (bytes)':>22} | {'In Use Size (bytes)':>20}")
            lines.append("-" * (nwidth + 3 + 9 + 3 + 22 + 3 + 20))
            for name, data in self._properties.items():
                in_use = data.dtype.itemsize * self.count
                lines.append(f"{name:<{nwidth}} | {data.dtype.name:^9} | {data.nbytes:>22,} | {in_use:>20,}")

        return "\n".join(lines)


@dataclass(frozen=True)
class AgeGroup:
    """A named age group. Individuals are assigned to groups by index, never by age."""

    name: str


class AgeGroups:
    """
    An ordered list of age groups. Individuals store the index of their age group, so the order here
    fixes the meaning of the `age_group` population property.
    """

    def __init__(self, groups):
        groups = [self._group(group) for group in groups]
        if not groups:
            raise ValueError("At least one age group is required.")
        if len(groups) > np.iinfo(np.uint8).max:
            raise ValueError(f"Too many age groups ({len(groups)}) for a uint8 age_group property.")
        self._groups = groups
        self._index = {group.name: i for i, group in enumerate(groups)}
        if len(self._index) != len(groups):
            raise ValueError("Age group names must be unique.")

        return

    @staticmethod
    def _group(group) -> AgeGroup:
        if isinstance(group, AgeGroup):
            return group
        if isinstance(group, str):
            return AgeGroup(group)
        unknown = set(group) - {"name"}
        if unknown:
            raise ValueError(f"Unknown age group field(s) {sorted(unknown)}, an age group has only a 'name'.")
        return AgeGroup(group["name"])

    @property
    def names(self) -> list[str]:
        return [group.name for group in self._groups]

    def index(self, name: str) -> int:
        """Index of the age group with the given name (KeyError if unknown)."""

        return self._index[name]

    def __getitem__(self, index: int) -> AgeGroup:
        return self._groups[index]

    def __len__(self) -> int:
        return len(self._groups)

    def __iter__(self):
        return iter(self._groups)
