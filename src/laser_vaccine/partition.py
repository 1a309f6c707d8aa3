"""
Dynamic partitions of the population.

A partition groups the individuals who satisfy a set of property filters (e.g., ``vaccine_status == NOT_VACCINATED``)
into cells keyed by the value of one property (e.g., ``age_group``). It answers "how many are in cell k?" and
"pick one from cell k uniformly at random" in constant time, and is kept consistent by the environment which
calls `update()` whenever a property it depends on changes and `extend()` when individuals arrive.

Each cell is a list of member indices; a per-individual position array allows removal by swapping the last
member into the vacated position.
"""

import numpy as np

__all__ = ["Partition"]


class Partition:
    """Individuals matching `filters`, grouped into `ncells` cells by the value of `key_property`."""

    def __init__(self, population, key_property: str, ncells: int, filters: dict):
        """
        Build the partition from the current state of the population.

        Parameters:

            population (Population): The individuals to partition.
            key_property (str): The property whose value (0 <= value < ncells) selects an individual's cell.
            ncells (int): The number of cells.
            filters (dict): Property name -> required value. Individuals must match all filters to be members.

        Raises:

            KeyError: If the key property or a filter property does not exist.
        """

        for name in [key_property, *filters]:
            if not population.has_property(name):
                raise KeyError(f"Population has no property '{name}'.")

        self.population = population
        self.key_property = key_property
        self.filters = dict(filters)
        self.ncells = int(ncells)

        self._members = [[] for _ in range(self.ncells)]
        self._cell = np.full(population.capacity, -1, dtype=np.int32)
        self._position = np.full(population.capacity, -1, dtype=np.int64)

        self.extend(0, population.count)

        return

    @property
    def properties(self) -> set:
        """Names of the properties this partition depends on."""

        return {self.key_property, *self.filters}

    def _target_cell(self, person: int) -> int:
        population = self.population
        for name, value in self.filters.items():
            if getattr(population, name)[person] != value:
                return -1
        return int(getattr(population, self.key_property)[person])

    def extend(self, start: int, end: int) -> None:
        """Add the matching individuals in [start, end), e.g., new arrivals."""

        if end <= start:
            return

        population = self.population
        mask = np.ones(end - start, dtype=bool)
        for name, value in self.filters.items():
            mask &= getattr(population, name)[start:end] == value
        keys = getattr(population, self.key_property)[start:end]

        for cell in range(self.ncells):
            people = np.flatnonzero(mask & (keys == cell)) + start
            if len(people) == 0:
                continue
            members = self._members[cell]
            self._cell[people] = cell
            self._position[people] = np.arange(len(members), len(members) + len(people))
            members.extend(people.tolist())

        return

    def update(self, person: int) -> None:
        """Move `person` to the cell matching their current property values (or out of the partition)."""

        current = int(self._cell[person])
        target = self._target_cell(person)
        if current == target:
            return

        if current >= 0:
            members = self._members[current]
            position = self._position[person]
            last = members.pop()
            if last != person:
                members[position] = last
                self._position[last] = position
            self._cell[person] = -1
            self._position[person] = -1

        if target >= 0:
            members = self._members[target]
            self._cell[person] = target
            self._position[person] = len(members)
            members.append(person)

        return

    def size(self, cell: int) -> int:
        """Number of members in `cell`."""

        return len(self._members[cell])

    def sizes(self) -> np.ndarray:
        """Number of members in every cell."""

        return np.array([len(members) for members in self._members], dtype=np.int64)

    def sample(self, cell: int, prng: np.random.Generator) -> int:
        """
        Draw one member of `cell` uniformly at random.

        Raises:

            IndexError: If the cell is empty.
        """

        members = self._members[cell]
        if not members:
            raise IndexError(f"Partition cell {cell} is empty")

        return members[prng.integers(len(members))]

    def __contains__(self, person) -> bool:
        return bool(self._cell[person] >= 0)

    def __len__(self) -> int:
        return sum(len(members) for members in self._members)
