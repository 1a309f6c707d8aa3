"""Tests for the OneDoseVaccineManager class."""

import unittest

import numpy as np
import pytest

from laser_vaccine.efficacy import OneDoseEfficacy
from laser_vaccine.environment import Environment
from laser_vaccine.events import Event
from laser_vaccine.events import EventKind
from laser_vaccine.onedose import OneDoseVaccineManager
from laser_vaccine.rollout import RolloutConfig
from laser_vaccine.status import OneDoseStatus


def make_env(count, capacity=None, seed=20241019):
    env = Environment([{"name": "all"}], capacity=capacity or max(count, 1), seed=seed)
    env.add_people(count, "all")
    return env


class TestOneDoseVaccineManager(unittest.TestCase):
    def status(self, env, person=0):
        return OneDoseStatus(env.get_property("vaccine_status", person))

    def test_no_delay_protects_immediately(self):
        env = make_env(1)
        manager = OneDoseVaccineManager(OneDoseEfficacy(ves=0.6, vei=0.3, vep=0.8), RolloutConfig(start_day=5.0, rate_per_day=1.0))
        env.add_component(manager)

        env.run(4.99)
        assert self.status(env) == OneDoseStatus.NOT_VACCINATED
        assert manager.ves(env, 0) == 0.0

        env.run(5.0)
        assert self.status(env) == OneDoseStatus.VACCINE_PROTECTED
        assert manager.ves(env, 0) == 0.6
        assert manager.vei(env, 0) == 0.3
        assert manager.vep(env, 0) == 0.8
        assert manager.ved(env, 0) == 0.0
        assert manager.administered == 1

    def test_onset_and_expiry(self):
        env = make_env(1)
        spec = OneDoseEfficacy(ves=0.6, efficacy_delay_days=3.0, efficacy_duration_days=10.0)
        manager = OneDoseVaccineManager(spec, RolloutConfig(rate_per_day=1.0))
        env.add_component(manager)

        env.run(0.0)
        assert self.status(env) == OneDoseStatus.VACCINATED_NOT_YET_PROTECTED
        assert manager.ves(env, 0) == 0.0
        env.run(2.99)
        assert self.status(env) == OneDoseStatus.VACCINATED_NOT_YET_PROTECTED
        env.run(3.0)
        assert self.status(env) == OneDoseStatus.VACCINE_PROTECTED
        assert manager.ves(env, 0) == 0.6
        env.run(12.99)
        assert self.status(env) == OneDoseStatus.VACCINE_PROTECTED
        env.run(13.0)
        assert self.status(env) == OneDoseStatus.VACCINATED_NO_LONGER_PROTECTED
        assert manager.ves(env, 0) == 0.0

        env.run(1000.0)
        assert self.status(env) == OneDoseStatus.VACCINATED_NO_LONGER_PROTECTED  # absorbing
        assert manager.administered == 1

    def test_expiry_without_delay(self):
        env = make_env(1)
        manager = OneDoseVaccineManager(OneDoseEfficacy(ves=0.6, efficacy_duration_days=7.0), RolloutConfig(rate_per_day=1.0))
        env.add_component(manager)
        env.run(6.99)
        assert self.status(env) == OneDoseStatus.VACCINE_PROTECTED
        env.run(7.0)
        assert self.status(env) == OneDoseStatus.VACCINATED_NO_LONGER_PROTECTED

    def test_infinite_duration_never_expires(self):
        env = make_env(1)
        manager = OneDoseVaccineManager(OneDoseEfficacy(ves=0.6), RolloutConfig(rate_per_day=1.0))
        env.add_component(manager)
        env.run(10_000.0)
        assert self.status(env) == OneDoseStatus.VACCINE_PROTECTED

    def test_zero_rate_is_inert(self):
        env = make_env(10)
        manager = OneDoseVaccineManager(OneDoseEfficacy(ves=0.6), RolloutConfig(rate_per_day=0.0))
        env.add_component(manager)
        assert not manager.active
        assert env.population.has_property("vaccine_status")
        assert len(env.queue) == 0
        with pytest.raises(KeyError):
            env.partition("vaccine_targets")

        env.run(100.0)
        assert np.all(env.population.vaccine_status == OneDoseStatus.NOT_VACCINATED)
        assert manager.administered == 0

    def test_exhaustion_and_resumption(self):
        env = make_env(10, capacity=20)
        manager = OneDoseVaccineManager(OneDoseEfficacy(ves=0.6), RolloutConfig(rate_per_day=100.0))
        env.add_component(manager)

        env.run(10.0)
        assert manager.administered == 10
        assert manager.waiting_for_arrivals
        assert np.all(env.population.vaccine_status == OneDoseStatus.VACCINE_PROTECTED)
        assert len(env.queue) == 0

        start, _ = env.add_people(1, "all")
        assert not manager.waiting_for_arrivals
        assert manager.administered == 11
        assert self.status(env, start) == OneDoseStatus.VACCINE_PROTECTED

        env.run(20.0)
        assert manager.waiting_for_arrivals

    def test_arrivals_before_exhaustion_are_eligible(self):
        env = make_env(5, capacity=10)
        manager = OneDoseVaccineManager(OneDoseEfficacy(ves=0.6), RolloutConfig(start_day=1.0, rate_per_day=100.0))
        env.add_component(manager)
        env.add_people(5, "all")
        env.run(10.0)
        assert manager.administered == 10
        assert np.all(env.population.vaccine_status == OneDoseStatus.VACCINE_PROTECTED)

    def test_efficacy_all(self):
        env = make_env(4)
        manager = OneDoseVaccineManager(OneDoseEfficacy(ves=0.6, vei=0.3, vep=0.8), RolloutConfig(rate_per_day=1.0))
        env.add_component(manager)
        env.set_property("vaccine_status", 2, OneDoseStatus.VACCINE_PROTECTED)
        efficacy = manager.efficacy_all(env)
        assert np.array_equal(efficacy.ves, [0.0, 0.0, 0.6, 0.0])
        assert np.array_equal(efficacy.vep, [0.0, 0.0, 0.8, 0.0])
        assert manager.managers() == [manager]
        assert np.array_equal(manager.census(env), [3, 0, 1, 0])

    def test_transmission(self):
        env = make_env(2)
        manager = OneDoseVaccineManager(OneDoseEfficacy(ves=0.6, vei=0.3), RolloutConfig(rate_per_day=1.0))
        env.add_component(manager)
        env.set_property("vaccine_status", 0, OneDoseStatus.VACCINE_PROTECTED)
        assert manager.probability_vaccine_fails_to_prevent_transmission(env, 0, 1) == pytest.approx(0.7)
        assert manager.probability_vaccine_fails_to_prevent_transmission(env, 1, 0) == pytest.approx(0.4)
        env.set_property("vaccine_status", 1, OneDoseStatus.VACCINE_PROTECTED)
        assert manager.probability_vaccine_fails_to_prevent_transmission(env, 0, 1) == pytest.approx(0.7 * 0.4)

    def test_illegal_toggle_fails_fast(self):
        env = make_env(2)
        manager = OneDoseVaccineManager(OneDoseEfficacy(ves=0.6), RolloutConfig(start_day=100.0, rate_per_day=1.0))
        env.add_component(manager)
        env.schedule(1.0, manager, Event(EventKind.TOGGLE_PROTECTION, 1))
        with pytest.raises(RuntimeError, match="not_vaccinated"):
            env.run(2.0)

    def test_toggle_after_expiry_fails_fast(self):
        env = make_env(1)
        manager = OneDoseVaccineManager(OneDoseEfficacy(ves=0.6), RolloutConfig(start_day=100.0, rate_per_day=1.0))
        env.add_component(manager)
        env.set_property("vaccine_status", 0, OneDoseStatus.VACCINATED_NO_LONGER_PROTECTED)
        env.schedule(1.0, manager, Event(EventKind.TOGGLE_PROTECTION, 0))
        with pytest.raises(RuntimeError):
            env.run(2.0)

    def test_unexpected_events(self):
        env = make_env(1)
        manager = OneDoseVaccineManager(OneDoseEfficacy(ves=0.6), RolloutConfig(start_day=100.0, rate_per_day=1.0))
        env.add_component(manager)
        with pytest.raises(RuntimeError, match="second doses"):
            manager.on_event(env, Event(EventKind.ADMINISTER_SECOND_DOSE, 0))
        with pytest.raises(RuntimeError, match="ARRIVALS"):
            manager.on_event(env, Event(EventKind.ARRIVALS))

    def test_added_twice(self):
        env = make_env(1)
        manager = OneDoseVaccineManager(OneDoseEfficacy(ves=0.6), RolloutConfig(rate_per_day=1.0))
        env.add_component(manager)
        with pytest.raises(RuntimeError):
            env.add_component(manager)

    def test_reproducible(self):
        def run(seed):
            env = make_env(1000, seed=seed)
            env.add_component(OneDoseVaccineManager(OneDoseEfficacy(ves=0.6), RolloutConfig(rate_per_day=10.0)))
            env.run(20.0)
            return env.population.vaccine_status.copy()

        assert np.array_equal(run(1), run(1))
        assert not np.array_equal(run(1), run(2))


class TestRolloutConfig(unittest.TestCase):
    def test_validation(self):
        with pytest.raises(ValueError, match="vaccination_start_day"):
            RolloutConfig(start_day=-1.0)
        with pytest.raises(ValueError, match="vaccination_rate_per_day"):
            RolloutConfig(rate_per_day=-0.5)


if __name__ == "__main__":
    unittest.main()
