"""
Pure scenario pricing engine.

This module contains pure functions that turn prepared inputs into
bear/base/bull fair values. No I/O, no pandas, no global strategy: the
StrategyConfig is passed in on every call.

Key functions:
  compute_scenarios: Main entry point, builds a ValuationScenario
  compute_rate_drag: Multiple compression from the rate environment
  compute_peg: Multiple / growth with a floored denominator
"""

from math import isfinite, sqrt
from typing import Optional

from garp.domain.types import ScenarioInputs
from garp.domain.types import ValuationScenario
from garp.scenarios.config import StrategyConfig


def compute_rate_drag(pe_multiple: float, risk_free_rate: float,
                      strategy: StrategyConfig) -> float:
  """
  Compute the multiple drag from the risk-free rate.

  Drag applies once pe x rate exceeds the strategy threshold and is floored
  so rates alone never remove more than (1 - drag_floor) of fair value.

  Returns:
    Drag factor in [drag_floor, 1.0]
  """
  if not strategy.apply_rate_drag:
    return 1.0
  pressure = pe_multiple * risk_free_rate
  if pressure <= strategy.drag_threshold:
    return 1.0
  return max(strategy.drag_floor, sqrt(strategy.drag_threshold / pressure))


def compute_peg(pe_multiple: float, growth: float) -> float:
  """PEG-like ratio; growth below 1 is treated as 1."""
  return pe_multiple / max(growth, 1.0)


def degenerate_scenario(pe_multiple: float,
                        growth: float) -> ValuationScenario:
  """Sentinel scenario for EPS-less names: all prices and PEG are zero."""
  return ValuationScenario(
      bear_price=0.0,
      base_price=0.0,
      bull_price=0.0,
      peg_ratio=0.0,
      applied_pe=pe_multiple,
      applied_growth=growth,
      is_degenerate=True,
  )


def _finite(value: Optional[float], default: float) -> float:
  if value is None or not isfinite(value):
    return default
  return value


def compute_scenarios(inputs: ScenarioInputs,
                      strategy: StrategyConfig) -> ValuationScenario:
  """
  Price bear/base/bull scenarios for one symbol.

  Steps, in order:
    1. Clip growth to strategy.growth_cap
    2. EPS missing or <= 0: return the degenerate scenario
    3. Low-growth circuit breaker caps a rich multiple
    4. Quarterly acceleration widens the bull multiple and lifts growth
       (still bounded by growth_cap)
    5. Rate-environment drag
    6. High-ROE names get a shallower bear discount

  Args:
    inputs: Prepared scenario inputs (percent units)
    strategy: Strategy multipliers and thresholds

  Returns:
    ValuationScenario; bear <= base <= bull is not guaranteed
  """
  growth = min(_finite(inputs.growth_rate, 0.0), strategy.growth_cap)
  pe = _finite(inputs.pe_multiple, 0.0)

  eps = inputs.eps
  if eps is None or not isfinite(eps) or eps <= 0:
    return degenerate_scenario(pe, growth)

  rate = _finite(inputs.risk_free_rate, 0.0)
  qtr_growth = _finite(inputs.qtr_eps_growth, 0.0)
  past_growth = _finite(inputs.past_growth, 0.0)
  roe = _finite(inputs.roe, 0.0)

  bull_mult = strategy.bull_mult
  bear_disc = strategy.bear_disc

  if growth < strategy.low_growth and pe > strategy.low_growth_pe_trigger:
    pe = strategy.low_growth_pe_cap

  if qtr_growth > past_growth + strategy.acceleration_gap:
    bull_mult += strategy.acceleration_bull_bonus
    growth = min(
        max(growth, qtr_growth * strategy.acceleration_growth_factor),
        strategy.growth_cap)

  drag = compute_rate_drag(pe, rate, strategy)

  if roe > strategy.quality_roe:
    bear_disc += strategy.quality_bear_uplift

  bear = eps * (pe * bear_disc * drag) * (1 + (growth * 0.3) / 100)
  base = eps * (pe * drag) * (1 + growth / 100)
  bull = eps * (pe * bull_mult * drag) * (1 + (growth * 1.3) / 100)

  return ValuationScenario(
      bear_price=bear,
      base_price=base,
      bull_price=bull,
      peg_ratio=compute_peg(pe, growth),
      applied_pe=pe,
      applied_growth=growth,
      bull_mult=bull_mult,
      bear_disc=bear_disc,
      drag=drag,
  )
