"""
Parameters for vaccines and scenarios.

`PropertySet` is a dictionary-like parameter bag with `.name` access. Defaults for each vaccine type come from the
functions below and are overridden with the ``<<`` operator, which rejects unknown keys so that a misspelled
parameter is an error rather than silently ignored:

    >>> params = two_dose_defaults() << {"dose_one_ves": 0.5, "dose_two_ves": 0.9, "interdose_delay_days": 21}
    >>> params.efficacy_duration_days
    inf

Scenarios (see `load_scenario()`) are JSON files. Infinite durations are written as ``Infinity``.
"""

import json
import math
from pathlib import Path

__all__ = [
    "PropertySet",
    "load_scenario",
    "one_dose_defaults",
    "rollout_defaults",
    "scenario_defaults",
    "two_dose_defaults",
]


class PropertySet:
    """A parameter bag with both ``ps["name"]`` and ``ps.name`` access.

    Examples
    --------
    Initialization and access:
        >>> ps = PropertySet({"ves": 0.6, "vaccination_rate_per_day": 100.0})
        >>> ps.ves
        0.6
        >>> ps["vaccination_rate_per_day"]
        100.0

    Combining (keys of the right-hand bag must *not* exist in the left-hand bag):
        >>> combined = PropertySet({"ves": 0.6}) + PropertySet({"vei": 0.3})
        >>> combined.to_dict()
        {'ves': 0.6, 'vei': 0.3}

    Overriding (keys *must* already exist):
        >>> (combined << {"ves": 0.7}).ves
        0.7

    Adding or overriding (no restriction on keys):
        >>> (combined | {"vep": 0.9}).to_dict()
        {'ves': 0.6, 'vei': 0.3, 'vep': 0.9}

    Save and load:
        >>> combined.save("vaccine.json")
        >>> PropertySet.load("vaccine.json") == combined
        True
    """

    def __init__(self, *bags):
        """
        Parameters
        ----------
        *bags : PropertySet or dict, optional
            Bags whose key-value pairs initialize this PropertySet. Later bags take precedence.
        """

        for bag in bags:
            for key, value in _items(self, bag):
                setattr(self, key, value)

    def to_dict(self):
        """Convert the PropertySet, including nested PropertySets, to a dictionary."""

        return {key: value.to_dict() if isinstance(value, PropertySet) else value for key, value in self.__dict__.items()}

    def save(self, filename):
        """Save the PropertySet as JSON to `filename`."""

        with Path(filename).open("w") as file:
            file.write(str(self))

        return

    @staticmethod
    def load(filename):
        """Load a PropertySet from the JSON file `filename`."""

        with Path(filename).open("r") as file:
            data = json.load(file)

        return PropertySet(data)

    def __getitem__(self, key):
        return getattr(self, key)

    def __setitem__(self, key, value):
        setattr(self, key, value)

    def __add__(self, other):
        """``ps + other`` returns a new PropertySet. Raises ValueError if a key exists in both."""

        result = PropertySet(self)
        result += other

        return result

    def __iadd__(self, other):
        for key, value in _items(self, other):
            if hasattr(self, key):
                raise ValueError(f"Cannot override existing value for '{key}'.")
            setattr(self, key, value)
        return self

    def __lshift__(self, other):
        """``ps << other`` returns a new PropertySet with values overridden by `other`. Raises ValueError on unknown keys."""

        result = PropertySet(self)
        result <<= other

        return result

    def __ilshift__(self, other):
        for key, value in _items(self, other):
            if not hasattr(self, key):
                raise ValueError(f"Cannot override missing key '{key}'.")
            setattr(self, key, value)
        return self

    def __or__(self, other):
        """``ps | other`` returns a new PropertySet with keys added or overridden by `other`."""

        result = PropertySet(self)
        result |= other

        return result

    def __ior__(self, other):
        for key, value in _items(self, other):
            setattr(self, key, value)
        return self

    def __len__(self):
        return len(self.__dict__)

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), indent=4)

    def __repr__(self) -> str:
        return f"PropertySet({self.to_dict()!s})"

    def __contains__(self, key):
        return key in self.__dict__

    def __eq__(self, other):
        return isinstance(other, PropertySet) and self.to_dict() == other.to_dict()


def _items(ps, bag):
    assert isinstance(bag, (type(ps), dict))
    return (bag.__dict__ if isinstance(bag, type(ps)) else bag).items()


def rollout_defaults() -> PropertySet:
    """Rollout parameters: nobody is vaccinated unless a positive rate is given."""

    return PropertySet(
        {
            "vaccination_start_day": 0.0,
            "vaccination_rate_per_day": 0.0,
            "uptake_weights": {},  # age group name -> relative weight
            "default_uptake_weight": 1.0,
        }
    )


def one_dose_defaults() -> PropertySet:
    return rollout_defaults() + {
        "ves": 0.0,
        "vei": 0.0,
        "vep": 0.0,
        "efficacy_delay_days": 0.0,
        "efficacy_duration_days": math.inf,
    }


def two_dose_defaults() -> PropertySet:
    return rollout_defaults() + {
        "dose_one_ves": 0.0,
        "dose_one_vei": 0.0,
        "dose_one_vep": 0.0,
        "dose_two_ves": 0.0,
        "dose_two_vei": 0.0,
        "dose_two_vep": 0.0,
        "efficacy_delay_days": 0.0,
        "efficacy_duration_days": math.inf,
        "interdose_delay_days": 0.0,
    }


def scenario_defaults() -> PropertySet:
    """
    A scenario describes the population and the vaccine for a command line run:

    - ``age_groups``: list of age group names (or {"name": ...}).
    - ``population``: age group name -> initial number of individuals.
    - ``capacity``: room for arrivals, None for exactly enough for the expected arrivals.
    - ``arrivals``: None, or {"rate_per_day", "shares": {age group name: share}}.
    - ``vaccine``: a vaccine parameter bag, see `laser_vaccine.vaccine.build_vaccine()`.
    - ``days`` and ``seed``: run length and random seed.
    """

    return PropertySet(
        {
            "age_groups": [{"name": "all"}],
            "population": {"all": 1_000},
            "capacity": None,
            "arrivals": None,
            "vaccine": {"type": "one_dose"},
            "days": 365,
            "seed": 20241019,
        }
    )


def load_scenario(filename) -> PropertySet:
    """
    Load a scenario from the JSON file `filename` on top of `scenario_defaults()`.

    Raises:

        ValueError: If the file contains a key `scenario_defaults()` does not have.
    """

    return scenario_defaults() << PropertySet.load(filename)
