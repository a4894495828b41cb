import pytest

from garp.domain.types import RiskTier
from garp.domain.types import ValuationScenario
from garp.policies.risk import ComponentRisk
from garp.policies.risk import risk_tier


def _scenario(bear=80.0, bull=120.0, peg=2.0) -> ValuationScenario:
  return ValuationScenario(bear_price=bear,
                           base_price=(bear + bull) / 2,
                           bull_price=bull,
                           peg_ratio=peg,
                           applied_pe=20.0,
                           applied_growth=10.0)


class TestComponentRisk:

  def test_steady_compounder(self):
    """bear 81.92, bull 132.48, price 90, roe 10, peg 2.5.

    valuation = 50 * (1 - 8.08 / 50.56) = 42.01
    quality   = 10
    growth    = 20 * (3 - 2.5) / 2     = 5
    score     = 100 - 57.01            = 42.99
    """
    scenario = _scenario(bear=81.92, bull=132.48, peg=2.5)

    result = ComponentRisk().compute(scenario, 90.0, 10.0)

    assert result.diag['risk_valuation'] == pytest.approx(42.0095, abs=1e-3)
    assert result.diag['risk_quality'] == 10.0
    assert result.diag['risk_growth_quality'] == pytest.approx(5.0)
    assert result.value == pytest.approx(42.99, abs=0.01)

  def test_below_bear_gets_full_valuation_credit(self):
    result = ComponentRisk().compute(_scenario(), 70.0, 0.0)
    assert result.diag['risk_valuation'] == 50.0

  def test_above_bull_gets_no_valuation_credit(self):
    result = ComponentRisk().compute(_scenario(), 130.0, 0.0)
    assert result.diag['risk_valuation'] == 0.0

  def test_collapsed_band(self):
    result = ComponentRisk().compute(_scenario(bear=10.0, bull=10.0), 10.0,
                                     0.0)
    assert result.diag['risk_valuation'] == 0.0

  @pytest.mark.parametrize('roe, expected', [
      (-15.0, 0.0),
      (0.0, 0.0),
      (12.5, 12.5),
      (45.0, 30.0),
  ])
  def test_quality_clamped(self, roe, expected):
    result = ComponentRisk().compute(_scenario(), 100.0, roe)
    assert result.diag['risk_quality'] == expected

  @pytest.mark.parametrize('peg, expected', [
      (0.5, 20.0),
      (1.0, 20.0),
      (2.0, 10.0),
      (3.0, 0.0),
      (3.5, 0.0),
  ])
  def test_growth_quality(self, peg, expected):
    result = ComponentRisk().compute(_scenario(peg=peg), 100.0, 0.0)
    assert result.diag['risk_growth_quality'] == pytest.approx(expected)

  def test_safest_case(self):
    result = ComponentRisk().compute(_scenario(peg=0.5), 70.0, 40.0)
    assert result.value == 0.0

  def test_riskiest_case(self):
    result = ComponentRisk().compute(_scenario(peg=5.0), 130.0, -5.0)
    assert result.value == 100.0


class TestRiskTier:

  @pytest.mark.parametrize('score, tier', [
      (-3.0, RiskTier.VERY_SAFE),
      (0.0, RiskTier.VERY_SAFE),
      (20.0, RiskTier.VERY_SAFE),
      (20.01, RiskTier.AMPLE),
      (40.0, RiskTier.AMPLE),
      (42.99, RiskTier.MODERATE),
      (60.0, RiskTier.MODERATE),
      (80.0, RiskTier.FRAGILE),
      (80.5, RiskTier.HIGH_VOLATILITY),
      (99.0, RiskTier.HIGH_VOLATILITY),
  ])
  def test_bounds_inclusive(self, score, tier):
    assert risk_tier(score) is tier

  def test_none(self):
    assert risk_tier(None) is None

  def test_tier_text(self):
    assert risk_tier(10.0).text == 'Very safe margin'
