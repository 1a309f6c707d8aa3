"""Tests for the efficacy specifications and queries."""

import math
import unittest

import numpy as np
import pytest

from laser_vaccine.efficacy import Efficacy
from laser_vaccine.efficacy import OneDoseEfficacy
from laser_vaccine.efficacy import TwoDoseEfficacy
from laser_vaccine.efficacy import one_dose_efficacy
from laser_vaccine.efficacy import two_dose_efficacy
from laser_vaccine.params import one_dose_defaults
from laser_vaccine.params import two_dose_defaults
from laser_vaccine.status import OneDoseStatus
from laser_vaccine.status import TwoDoseStatus


class TestOneDoseEfficacy(unittest.TestCase):
    def setUp(self):
        self.spec = OneDoseEfficacy(ves=0.6, vei=0.3, vep=0.8, efficacy_delay_days=14.0, efficacy_duration_days=180.0)

    def test_protected(self):
        assert one_dose_efficacy(OneDoseStatus.VACCINE_PROTECTED, self.spec) == Efficacy(0.6, 0.3, 0.8)

    def test_not_protected(self):
        for status in OneDoseStatus:
            if status != OneDoseStatus.VACCINE_PROTECTED:
                assert one_dose_efficacy(status, self.spec) == Efficacy(0.0, 0.0, 0.0), str(status)

    def test_pure(self):
        """Test that the same inputs always give the same outputs."""
        first = one_dose_efficacy(OneDoseStatus.VACCINE_PROTECTED, self.spec)
        one_dose_efficacy(OneDoseStatus.NOT_VACCINATED, self.spec)
        assert one_dose_efficacy(OneDoseStatus.VACCINE_PROTECTED, self.spec) == first

    def test_vectorized(self):
        statuses = np.array([0, 1, 2, 3, 2], dtype=np.int8)
        result = one_dose_efficacy(statuses, self.spec)
        assert np.array_equal(result.ves, [0.0, 0.0, 0.6, 0.0, 0.6])
        assert np.array_equal(result.vei, [0.0, 0.0, 0.3, 0.0, 0.3])
        assert np.array_equal(result.vep, [0.0, 0.0, 0.8, 0.0, 0.8])

    def test_defaults(self):
        spec = OneDoseEfficacy()
        assert spec.efficacy_delay_days == 0.0
        assert math.isinf(spec.efficacy_duration_days)
        assert OneDoseEfficacy.from_params(one_dose_defaults()) == spec

    def test_from_params(self):
        params = one_dose_defaults() << {"ves": 0.6, "vei": 0.3, "vep": 0.8, "efficacy_delay_days": 14, "efficacy_duration_days": 180}
        assert OneDoseEfficacy.from_params(params) == self.spec

    def test_validation(self):
        with pytest.raises(ValueError, match="ves"):
            OneDoseEfficacy(ves=1.5)
        with pytest.raises(ValueError, match="vei"):
            OneDoseEfficacy(vei=-0.1)
        with pytest.raises(ValueError, match="vep"):
            OneDoseEfficacy(vep=np.nan)
        with pytest.raises(ValueError, match="efficacy_delay_days"):
            OneDoseEfficacy(efficacy_delay_days=-1.0)
        with pytest.raises(ValueError, match="efficacy_duration_days"):
            OneDoseEfficacy(efficacy_duration_days=0.0)

    def test_immutable(self):
        with pytest.raises(AttributeError):
            self.spec.ves = 0.9


class TestTwoDoseEfficacy(unittest.TestCase):
    def setUp(self):
        self.spec = TwoDoseEfficacy(
            dose_one_ves=0.5,
            dose_one_vei=0.2,
            dose_one_vep=0.6,
            dose_two_ves=0.9,
            dose_two_vei=0.4,
            dose_two_vep=0.95,
            efficacy_delay_days=7.0,
            interdose_delay_days=21.0,
        )

    def test_by_status(self):
        expected = {
            TwoDoseStatus.NOT_VACCINATED: Efficacy(0.0, 0.0, 0.0),
            TwoDoseStatus.VACCINATED_ONE_DOSE_NOT_YET_PROTECTED: Efficacy(0.0, 0.0, 0.0),
            TwoDoseStatus.VACCINATED_ONE_DOSE_PROTECTED: Efficacy(0.5, 0.2, 0.6),
            TwoDoseStatus.VACCINATED_TWO_DOSES_NOT_YET_PROTECTED: Efficacy(0.0, 0.0, 0.0),
            TwoDoseStatus.VACCINATED_TWO_DOSES_PARTIALLY_PROTECTED: Efficacy(0.5, 0.2, 0.6),
            TwoDoseStatus.VACCINATED_TWO_DOSES_PROTECTED: Efficacy(0.9, 0.4, 0.95),
            TwoDoseStatus.VACCINATED_NO_LONGER_PROTECTED: Efficacy(0.0, 0.0, 0.0),
        }
        for status, efficacy in expected.items():
            assert two_dose_efficacy(status, self.spec) == efficacy, str(status)

    def test_vectorized(self):
        statuses = np.arange(len(TwoDoseStatus), dtype=np.int8)
        result = two_dose_efficacy(statuses, self.spec)
        for status in TwoDoseStatus:
            assert result.ves[status] == two_dose_efficacy(status, self.spec).ves
            assert result.vei[status] == two_dose_efficacy(status, self.spec).vei
            assert result.vep[status] == two_dose_efficacy(status, self.spec).vep

    def test_from_params(self):
        params = two_dose_defaults() << {"dose_two_ves": 0.9, "interdose_delay_days": 21}
        spec = TwoDoseEfficacy.from_params(params)
        assert spec.dose_two == Efficacy(0.9, 0.0, 0.0)
        assert spec.dose_one == Efficacy(0.0, 0.0, 0.0)
        assert spec.interdose_delay_days == 21.0
        assert math.isinf(spec.efficacy_duration_days)

    def test_validation(self):
        with pytest.raises(ValueError, match="dose_two_ves"):
            TwoDoseEfficacy(dose_two_ves=1.01)
        with pytest.raises(ValueError, match="interdose_delay_days"):
            TwoDoseEfficacy(interdose_delay_days=-7.0)
        with pytest.raises(ValueError, match="efficacy_duration_days"):
            TwoDoseEfficacy(efficacy_duration_days=-math.inf)


if __name__ == "__main__":
    unittest.main()
