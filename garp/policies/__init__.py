"""
Signal policies: growth estimation, risk scoring, label classification and
timing.

Growth and risk are class-based policies returning PolicyOutput so they can
be swapped; classification and timing are fixed rule tables exposed as
functions.

To add a new growth or risk policy:
1. Create a new class inheriting from GrowthPolicy or RiskPolicy
2. Implement compute() returning PolicyOutput
3. Pass an instance to garp.run.evaluate_symbol()
"""

from garp.policies.classify import classify
from garp.policies.classify import classify_label
from garp.policies.growth import GrowthPolicy
from garp.policies.growth import SmartGrowth
from garp.policies.risk import ComponentRisk
from garp.policies.risk import RiskPolicy
from garp.policies.risk import risk_tier
from garp.policies.timing import drawdown_classification
from garp.policies.timing import drawdown_timing
from garp.policies.timing import equity_timing

__all__ = [
  'GrowthPolicy', 'SmartGrowth',
  'RiskPolicy', 'ComponentRisk', 'risk_tier',
  'classify', 'classify_label',
  'equity_timing', 'drawdown_timing', 'drawdown_classification',
]
