import math

import pytest

from garp.domain.types import FundamentalSnapshot
from garp.domain.types import InstrumentClass
from garp.domain.types import LabelKind
from garp.domain.types import TimingKind
from garp.policies.growth import SmartGrowth
from garp.run import evaluate_symbol
from garp.scenarios.config import StrategyConfig


class TestEvaluateEquity:

  def test_steady_compounder(self, steady_snapshot):
    """Normal: accumulate. Stressed (g 5.6, PE 16): fair range.

    Timing: price 90 is 17% into the 80..140 range and 12.5% off the low,
    confirmed by the accumulate label.
    """
    result = evaluate_symbol(steady_snapshot)

    assert result.instrument_class is InstrumentClass.EQUITY
    assert result.growth.rate == 8.0
    assert result.growth.method == 'eps_5y'
    assert result.normal.label is LabelKind.ACCUMULATE
    assert result.stressed.label is LabelKind.FAIR_RANGE
    assert result.stressed.scenario.applied_pe == pytest.approx(16.0)
    assert result.timing.label is TimingKind.RIGHT_SIDE_BREAKOUT

  def test_first_evaluation_alerts_on_timing(self, steady_snapshot):
    result = evaluate_symbol(steady_snapshot)

    assert result.alert.should_fire
    assert result.alert.reason_label is TimingKind.RIGHT_SIDE_BREAKOUT

  def test_no_realert_with_same_history(self, steady_snapshot):
    result = evaluate_symbol(
        steady_snapshot,
        previous_label=LabelKind.ACCUMULATE,
        previous_timing=TimingKind.RIGHT_SIDE_BREAKOUT,
    )
    assert not result.alert.should_fire

  def test_golden_strike_alert(self):
    cheap = FundamentalSnapshot(symbol='ACME',
                                current_price=70.0,
                                eps_ttm=5.0,
                                pe_ttm=20.0,
                                eps_growth_ttm_yoy=6.0,
                                eps_growth_5y=8.0,
                                roe_ttm=10.0)

    result = evaluate_symbol(cheap, previous_label=LabelKind.ACCUMULATE)

    assert result.normal.label is LabelKind.GOLDEN_STRIKE
    assert result.alert.should_fire
    assert result.alert.reason_label is LabelKind.GOLDEN_STRIKE
    assert result.timing.label is TimingKind.RANGE_BOUND

  def test_loss_maker_fails_stress(self, loss_making_snapshot):
    """Growth 30% reads as distress reversal; stressed 21% is junk."""
    result = evaluate_symbol(loss_making_snapshot)

    assert result.growth.is_loss_making
    assert result.normal.label is LabelKind.DISTRESS_REVERSAL
    assert result.normal.risk_score == 40.0
    assert result.stressed.label is LabelKind.JUNK
    assert result.stressed.risk_score == 99.0

  def test_idempotent(self, steady_snapshot):
    assert evaluate_symbol(steady_snapshot) == evaluate_symbol(steady_snapshot)

  def test_custom_policy_and_strategy(self, steady_snapshot):
    result = evaluate_symbol(steady_snapshot,
                             strategy=StrategyConfig.aggressive(),
                             growth_policy=SmartGrowth(baseline=6.0))

    assert result.normal.scenario.bull_mult == 1.4

  def test_non_finite_inputs(self):
    snap = FundamentalSnapshot(symbol='NAN',
                               current_price=40.0,
                               eps_ttm=2.0,
                               pe_ttm=float('nan'),
                               eps_growth_ttm_yoy=float('inf'),
                               roe_ttm=float('nan'))

    result = evaluate_symbol(snap)

    assert result.normal.scenario.applied_pe == 20.0
    assert math.isfinite(result.normal.risk_score)


class TestEvaluateIndex:

  def test_drawdown_path(self, index_snapshot):
    result = evaluate_symbol(index_snapshot,
                             instrument_class=InstrumentClass.INDEX_TRACKER)

    assert result.growth is None
    assert result.normal.label is LabelKind.ACCUMULATE
    assert result.normal.risk_score == 40.0
    assert result.stressed == result.normal
    assert result.timing.label is TimingKind.ACCUMULATION_ZONE
    assert result.timing.drawdown == pytest.approx(-0.10)
    assert not result.alert.should_fire

  def test_to_dict(self, index_snapshot):
    row = evaluate_symbol(
        index_snapshot,
        instrument_class=InstrumentClass.INDEX_TRACKER).to_dict()

    assert row['instrument_class'] == 'index_tracker'
    assert row['growth_rate'] is None
    assert row['timing'] == 'accumulation_zone'
