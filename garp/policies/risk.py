"""
Risk scoring policies.

The score is 100 minus three safety components (valuation, quality,
growth quality), so lower means safer. Components are not rescaled and the
total is not clamped: custom component weights can move it outside 0..100.
"""

from abc import ABC
from abc import abstractmethod
from typing import Optional

from garp.domain.types import LabelKind
from garp.domain.types import PolicyOutput
from garp.domain.types import RiskTier
from garp.domain.types import ValuationScenario

# Fixed scores for names without multiple-based pricing.
DEGENERATE_RISK_SCORES = {
    LabelKind.DISTRESS_REVERSAL: 40.0,
    LabelKind.JUNK: 99.0,
}

RISK_TIER_BOUNDS = (
    (20.0, RiskTier.VERY_SAFE),
    (40.0, RiskTier.AMPLE),
    (60.0, RiskTier.MODERATE),
    (80.0, RiskTier.FRAGILE),
)


class RiskPolicy(ABC):
  """
  Base class for risk scoring policies.

  Subclasses implement compute() to return a risk score.
  """

  @abstractmethod
  def compute(self, scenario: ValuationScenario, price: float,
              roe: float) -> PolicyOutput[float]:
    """
    Compute risk score.

    Args:
      scenario: Priced scenario
      price: Current price
      roe: Return on equity in percent

    Returns:
      PolicyOutput with risk score and component diagnostics
    """


class ComponentRisk(RiskPolicy):
  """
  Three-component risk score.

  - Valuation (0..valuation_weight): full below bear, zero above bull,
    linear in between
  - Quality (0..quality_cap): ROE clamped to [0, quality_cap]
  - Growth quality (0..growth_weight): full for PEG < peg_cheap, zero for
    PEG > peg_rich, linear in between
  """

  def __init__(
      self,
      valuation_weight: float = 50.0,
      quality_cap: float = 30.0,
      growth_weight: float = 20.0,
      peg_cheap: float = 1.0,
      peg_rich: float = 3.0,
  ):
    self.valuation_weight = valuation_weight
    self.quality_cap = quality_cap
    self.growth_weight = growth_weight
    self.peg_cheap = peg_cheap
    self.peg_rich = peg_rich

  def compute(self, scenario: ValuationScenario, price: float,
              roe: float) -> PolicyOutput[float]:
    valuation = self._valuation_component(scenario, price)
    quality = min(max(roe, 0.0), self.quality_cap)
    growth_quality = self._growth_component(scenario.peg_ratio)
    score = 100.0 - (valuation + quality + growth_quality)
    return PolicyOutput(value=score,
                        diag={
                            'risk_valuation': valuation,
                            'risk_quality': quality,
                            'risk_growth_quality': growth_quality,
                            'risk_score': score,
                        })

  def _valuation_component(self, scenario: ValuationScenario,
                           price: float) -> float:
    bear = scenario.bear_price
    bull = scenario.bull_price
    if price < bear:
      return self.valuation_weight
    if price > bull:
      return 0.0
    span = bull - bear
    if span <= 0:
      # Collapsed band: price sits exactly on it.
      return 0.0
    return self.valuation_weight * (1 - (price - bear) / span)

  def _growth_component(self, peg: float) -> float:
    if peg < self.peg_cheap:
      return self.growth_weight
    if peg > self.peg_rich:
      return 0.0
    return self.growth_weight * ((self.peg_rich - peg) /
                                 (self.peg_rich - self.peg_cheap))


def risk_tier(score: Optional[float]) -> Optional[RiskTier]:
  """
  Map a risk score to its tier. Upper bounds are inclusive.

  Returns None when there is no score.
  """
  if score is None:
    return None
  for bound, tier in RISK_TIER_BOUNDS:
    if score <= bound:
      return tier
  return RiskTier.HIGH_VOLATILITY
