"""
Module that contains the command line app.

Why does this file exist, and why not put this in __main__?

  You might be tempted to import things from __main__ later, but that will cause
  problems: the code will get executed twice:

  - When you run `python -mlaser_vaccine` python will execute
    ``__main__.py`` as a script. That means there will not be any
    ``laser_vaccine.__main__`` in ``sys.modules``.
  - When you import __main__ it will get executed again (as a module) because
    there"s no ``laser_vaccine.__main__`` in ``sys.modules``.

  Also see (1) from https://click.palletsprojects.com/en/stable/setuptools/
"""

import click
import numpy as np

from laser_vaccine.arrivals import Arrivals
from laser_vaccine.environment import Environment
from laser_vaccine.params import load_scenario
from laser_vaccine.report import StatusReport
from laser_vaccine.vaccine import build_vaccine


def calc_capacity(population: int, days: int, arrivals_per_day: float, verbose: bool = False) -> int:
    """
    Room for the initial population plus all arrivals over `days` days.

    Arrivals are Poisson, so the expected number of arrivals is padded by four standard deviations to make
    running out of room very unlikely.
    """

    expected = arrivals_per_day * days
    capacity = int(population + np.ceil(expected + 4 * np.sqrt(expected)))

    if verbose:
        click.echo(f"Population: {population:,} … capacity {capacity:,}")

    return max(capacity, 1)


def run_scenario(scenario, days=None, seed=None, verbose: bool = False):
    """
    Build and run the simulation described by `scenario` (see `laser_vaccine.params.scenario_defaults()`).

    Returns:

        tuple: (Environment, Vaccine, StatusReport) at the end of the run.
    """

    days = int(scenario.days if days is None else days)
    seed = scenario.seed if seed is None else seed

    initial = {name: int(count) for name, count in scenario.population.items()}
    arrivals = None
    if scenario.arrivals:
        arrivals = Arrivals(scenario.arrivals["rate_per_day"], scenario.arrivals.get("shares"), verbose=verbose)
    capacity = scenario.capacity
    if capacity is None:
        capacity = calc_capacity(sum(initial.values()), days, arrivals.rate_per_day if arrivals else 0.0, verbose=verbose)

    env = Environment(scenario.age_groups, capacity, seed=seed, verbose=verbose)
    for name, count in initial.items():
        env.add_people(count, name)

    vaccine = build_vaccine(scenario.vaccine, verbose=verbose)
    env.add_component(vaccine)
    if arrivals is not None:
        env.add_component(arrivals)
    report = StatusReport(vaccine, days, verbose=verbose)
    env.add_component(report)

    env.run(days)

    return env, vaccine, report


@click.command()
@click.argument("scenario", type=click.Path(exists=True, dir_okay=False))
@click.option("-d", "--days", type=int, default=None, help="Number of days to simulate (overrides the scenario)")
@click.option("-s", "--seed", type=int, default=None, help="Random seed (overrides the scenario)")
@click.option("-o", "--output", type=click.Path(dir_okay=False), default=None, help="Save the census report to this HDF5 file")
@click.option("-v", "--verbose", is_flag=True, help="Report progress")
def main(scenario, days, seed, output, verbose):
    """Run the vaccine rollout described by the SCENARIO JSON file and print the final census."""

    try:
        params = load_scenario(scenario)
        env, _, report = run_scenario(params, days=days, seed=seed, verbose=verbose)
    except (KeyError, ValueError) as ex:
        raise click.ClickException(str(ex)) from ex

    click.echo(f"Day {env.now:g}: {env.population.count:,} individuals")
    click.echo(report.table())

    if output is not None:
        report.save(output, pars=params)

    return
