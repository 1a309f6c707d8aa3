__version__ = "0.1.0"

from .combination import CombinationVaccine
from .efficacy import Efficacy
from .efficacy import OneDoseEfficacy
from .efficacy import TwoDoseEfficacy
from .environment import Component
from .environment import Environment
from .onedose import OneDoseVaccineManager
from .params import PropertySet
from .rollout import AgeWeights
from .rollout import RolloutConfig
from .status import OneDoseStatus
from .status import TwoDoseStatus
from .twodose import TwoDoseVaccineManager
from .vaccine import Vaccine
from .vaccine import VaccineType
from .vaccine import build_vaccine

__all__ = [
    "AgeWeights",
    "CombinationVaccine",
    "Component",
    "Efficacy",
    "Environment",
    "OneDoseEfficacy",
    "OneDoseStatus",
    "OneDoseVaccineManager",
    "PropertySet",
    "RolloutConfig",
    "TwoDoseEfficacy",
    "TwoDoseStatus",
    "TwoDoseVaccineManager",
    "Vaccine",
    "VaccineType",
    "__version__",
    "build_vaccine",
]
