import unittest

import numpy as np

from laser_vaccine import random
from laser_vaccine.efficacy import OneDoseEfficacy
from laser_vaccine.environment import Environment
from laser_vaccine.onedose import OneDoseVaccineManager
from laser_vaccine.random import get_seed
from laser_vaccine.random import seed
from laser_vaccine.random import stream
from laser_vaccine.rollout import RolloutConfig


def rollout_statuses(base_seed):
    env = Environment(["A", "B"], capacity=200, seed=base_seed)
    env.add_people(100, "A")
    env.add_people(100, "B")
    env.add_component(OneDoseVaccineManager(OneDoseEfficacy(ves=0.5), RolloutConfig(rate_per_day=10.0)))
    env.run(5.0)
    return env.population.vaccine_status.copy()


class TestRandomSeed(unittest.TestCase):
    def test_prng_seed(self):
        """Test that setting the random seed applies to the laser-vaccine "global" prng."""
        prng = seed(20241019)
        first = prng.random(10)
        prng = seed(20241019)
        second = prng.random(10)

        assert np.array_equal(first, second)
        assert random.prng() is prng
        assert get_seed() == 20241019

        return

    def test_legacy_generator_untouched(self):
        """Test that seed() leaves NumPy's legacy global generator alone."""
        np.random.seed(5)
        expected = np.random.random(4)
        np.random.seed(5)
        seed(20241019)
        assert np.array_equal(np.random.random(4), expected)

    def test_explicit_seed_ignores_global_seed(self):
        """Test that an environment with its own seed gives the same rollout whatever the global seed."""
        seed(1)
        first = rollout_statuses(7)
        seed(999)
        second = rollout_statuses(7)
        assert np.any(first != 0)
        assert np.array_equal(first, second)


class TestStreams(unittest.TestCase):
    def test_reproducible(self):
        """Test that a (seed, name) pair always produces the same sequence."""
        assert np.array_equal(stream("vaccine", 42).random(16), stream("vaccine", 42).random(16))

    def test_names_are_independent(self):
        """Test that different names (and different seeds) produce different sequences."""
        base = stream("vaccine_0", 42).random(16)
        assert not np.array_equal(base, stream("vaccine_1", 42).random(16))
        assert not np.array_equal(base, stream("vaccine_0", 43).random(16))

    def test_other_streams_do_not_interfere(self):
        """Test that drawing from one stream does not change another."""
        expected = stream("vaccine_0", 42).random(16)
        other = stream("vaccine_1", 42)
        first = stream("vaccine_0", 42)
        other.random(1000)
        assert np.array_equal(first.random(16), expected)

    def test_default_base_seed(self):
        """Test that the global seed is the default base seed."""
        seed(20241019)
        assert np.array_equal(stream("arrivals").random(8), stream("arrivals", 20241019).random(8))


if __name__ == "__main__":
    unittest.main()
