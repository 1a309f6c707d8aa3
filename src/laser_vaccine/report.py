"""Daily census of vaccine statuses and population mean efficacy."""

import click
import h5py
import numpy as np

from laser_vaccine.environment import Component
from laser_vaccine.events import Event
from laser_vaccine.events import EventKind

__all__ = ["StatusReport"]


class StatusReport(Component):
    """
    Records, at the start of each day 0 through `days`:

    - `counts[name]`: number of individuals in each status of the manager `name`, shape (days + 1, number of statuses).
    - `population`: number of individuals, shape (days + 1,).
    - `mean_efficacy`: population mean VES, VEI, and VEP of the vaccine, shape (days + 1, 3).

    Add the report to the environment after the vaccine so that the status properties exist.
    """

    def __init__(self, vaccine, days: int, verbose: bool = False):
        if days < 0:
            raise ValueError(f"Report length must be >= 0 days, got {days}")

        self.vaccine = vaccine
        self.days = int(days)
        self.verbose = verbose
        self.counts = {}
        self.population = np.zeros(self.days + 1, dtype=np.int64)
        self.mean_efficacy = np.zeros((self.days + 1, 3), dtype=np.float64)

        return

    def init(self, env) -> None:
        for manager in self.vaccine.managers():
            self.counts[manager.name] = np.zeros((self.days + 1, len(manager.status_type)), dtype=np.int64)
        env.schedule(env.now, self, Event(EventKind.RECORD_CENSUS))

        return

    def on_event(self, env, event) -> None:
        if event.kind != EventKind.RECORD_CENSUS:
            raise RuntimeError(f"StatusReport cannot handle {event.kind.name} events.")

        day = int(env.now)
        for manager in self.vaccine.managers():
            self.counts[manager.name][day] = manager.census(env)
        self.population[day] = env.population.count
        if env.population.count > 0:
            self.mean_efficacy[day] = [np.mean(values) for values in self.vaccine.efficacy_all(env)]

        if day < self.days:
            env.schedule(day + 1.0, self, Event(EventKind.RECORD_CENSUS))

        return

    def table(self, day: int = -1) -> str:
        """The census on `day` (default the last day) as a text table."""

        lines = []
        for manager in self.vaccine.managers():
            counts = self.counts[manager.name][day]
            width = max(len(str(status)) for status in manager.status_type)
            lines.append(f"{manager.name} ({type(manager).__name__}):")
            for status in manager.status_type:
                lines.append(f"    {status!s:<{width}} {counts[status]:>12,}")
        ves, vei, vep = self.mean_efficacy[day]
        lines.append(f"mean VES {ves:.4f}, VEI {vei:.4f}, VEP {vep:.4f}")

        return "\n".join(lines)

    def save(self, path, pars=None) -> None:
        """
        Save the report to an HDF5 file.

        Parameters:
            path: Destination file path
            pars: Optional PropertySet or dict of parameters, stored as attributes of the "pars" group
        """

        with h5py.File(path, "w") as f:
            f.attrs["days"] = self.days
            f.create_dataset("population", data=self.population)
            f.create_dataset("mean_efficacy", data=self.mean_efficacy)
            group = f.create_group("counts")
            for manager in self.vaccine.managers():
                dataset = group.create_dataset(manager.name, data=self.counts[manager.name])
                dataset.attrs["statuses"] = [str(status) for status in manager.status_type]

            if pars is not None:
                data = pars if isinstance(pars, dict) else pars.to_dict()
                group = f.create_group("pars")
                for key, value in data.items():
                    group.attrs[key] = value if isinstance(value, (int, float, str)) else str(value)

        if self.verbose:
            click.echo(f"Saved census report to {path}.")

        return
