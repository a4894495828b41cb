"""Domain types for the signal engine."""

from garp.domain.types import AlertDecision
from garp.domain.types import ClassificationResult
from garp.domain.types import DrawdownAction
from garp.domain.types import FundamentalSnapshot
from garp.domain.types import GrowthEstimate
from garp.domain.types import InstrumentClass
from garp.domain.types import LabelKind
from garp.domain.types import PolicyOutput
from garp.domain.types import RiskTier
from garp.domain.types import ScenarioInputs
from garp.domain.types import SymbolEvaluation
from garp.domain.types import TimingKind
from garp.domain.types import TimingResult
from garp.domain.types import ValuationScenario

__all__ = [
    'AlertDecision',
    'ClassificationResult',
    'DrawdownAction',
    'FundamentalSnapshot',
    'GrowthEstimate',
    'InstrumentClass',
    'LabelKind',
    'PolicyOutput',
    'RiskTier',
    'ScenarioInputs',
    'SymbolEvaluation',
    'TimingKind',
    'TimingResult',
    'ValuationScenario',
]
