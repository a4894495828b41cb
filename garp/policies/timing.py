'''
Timing signal policies.

Two variants, selected by instrument class:
- Equity: position of the price inside its 52-week range, with the
  valuation label confirming a rebound.
- Drawdown: decline from the 52-week high, for broad-market trackers that
  have no meaningful earnings-based price.
'''

from dataclasses import dataclass
from typing import Optional

from garp.domain.types import ClassificationResult
from garp.domain.types import DrawdownAction
from garp.domain.types import LabelKind
from garp.domain.types import TimingKind
from garp.domain.types import TimingResult
from garp.domain.types import ValuationScenario

LEFT_SIDE_MAX_POSITION = 0.05
REBOUND_BAND = (0.05, 0.20)
ELEVATED_MIN_POSITION = 0.8
MID_RANGE_BAND = (0.4, 0.6)

# Labels that confirm a rebound off the low as a real entry.
CONFIRMING_LABELS = frozenset({LabelKind.GOLDEN_STRIKE, LabelKind.ACCUMULATE})


@dataclass(frozen=True)
class DrawdownBucket:
  '''
  One drawdown band.

  Attributes:
    floor: Drawdown must be strictly above this (None for the last bucket)
    timing: Timing label for the band
    action: Suggested position action
    risk_score: Risk score for the band
    label: Valuation label stored for the band
  '''
  floor: Optional[float]
  timing: TimingKind
  action: DrawdownAction
  risk_score: float
  label: LabelKind


DRAWDOWN_BUCKETS = (
    DrawdownBucket(-0.03, TimingKind.NEAR_HIGHS, DrawdownAction.HOLD, 80.0,
                   LabelKind.FAIR_RANGE),
    DrawdownBucket(-0.08, TimingKind.HEALTHY_PULLBACK, DrawdownAction.ADD,
                   60.0, LabelKind.FAIR_RANGE),
    DrawdownBucket(-0.15, TimingKind.ACCUMULATION_ZONE,
                   DrawdownAction.HEAVY_ADD, 40.0, LabelKind.ACCUMULATE),
    DrawdownBucket(-0.25, TimingKind.BEAR_MARKET, DrawdownAction.HEAVY_ADD,
                   25.0, LabelKind.ACCUMULATE),
    DrawdownBucket(None, TimingKind.PANIC, DrawdownAction.ALL_IN, 10.0,
                   LabelKind.GOLDEN_STRIKE),
)

SYNTHETIC_PRICE_RATIOS = (0.8, 0.9, 1.0)


def equity_timing(price: float, week52_low: Optional[float],
                  week52_high: Optional[float],
                  label: LabelKind) -> TimingResult:
  '''
  Timing signal from the 52-week range.

  Args:
    price: Current price
    week52_low: 52-week low (None if unknown)
    week52_high: 52-week high (None if unknown)
    label: Valuation label from the normal classification

  Returns:
    TimingResult; a missing or collapsed range is range-bound
  '''
  if week52_low is None or week52_high is None:
    return TimingResult(TimingKind.RANGE_BOUND, 'no usable 52-week range')
  low, high = week52_low, week52_high
  if not 0 < low < high:
    return TimingResult(TimingKind.RANGE_BOUND, 'no usable 52-week range')

  position = (price - low) / (high - low)
  rebound = (price - low) / low
  where = f'position {position:.0%} of range, {rebound:+.0%} off low'

  if position < LEFT_SIDE_MAX_POSITION:
    return TimingResult(TimingKind.LEFT_SIDE, where)
  if REBOUND_BAND[0] < rebound < REBOUND_BAND[1]:
    if label in CONFIRMING_LABELS:
      return TimingResult(TimingKind.RIGHT_SIDE_BREAKOUT,
                          f'{where}, confirmed by {label.value}')
    return TimingResult(TimingKind.BOTTOM_REBOUND,
                        f'{where}, no valuation confirmation')
  if position > ELEVATED_MIN_POSITION:
    return TimingResult(TimingKind.ELEVATED, where)
  if MID_RANGE_BAND[0] < position < MID_RANGE_BAND[1]:
    return TimingResult(TimingKind.MID_RANGE, where)
  return TimingResult(TimingKind.RANGE_BOUND, where)


def compute_drawdown(price: float, week52_high: Optional[float]) -> float:
  '''Fractional decline from the 52-week high (0.0 without a usable high).'''
  if week52_high is None or week52_high <= 0:
    return 0.0
  return (price - week52_high) / week52_high


def drawdown_bucket(drawdown: float) -> DrawdownBucket:
  '''Find the first bucket whose floor the drawdown is strictly above.'''
  for bucket in DRAWDOWN_BUCKETS:
    if bucket.floor is None or drawdown > bucket.floor:
      return bucket
  return DRAWDOWN_BUCKETS[-1]


def drawdown_timing(price: float,
                    week52_high: Optional[float]) -> TimingResult:
  '''Timing signal from the decline off the 52-week high.'''
  drawdown = compute_drawdown(price, week52_high)
  bucket = drawdown_bucket(drawdown)
  return TimingResult(
      label=bucket.timing,
      rationale=f'{drawdown:+.1%} from 52-week high, {bucket.action.text}',
      drawdown=drawdown,
      risk_score=bucket.risk_score,
      action=bucket.action,
  )


def drawdown_classification(price: float,
                            week52_high: Optional[float]
                           ) -> ClassificationResult:
  '''
  Classification for index trackers.

  No PEG or earnings pricing: bear/base/bull are fixed fractions of the
  52-week high so stored rows keep a uniform three-price shape.
  '''
  drawdown = compute_drawdown(price, week52_high)
  bucket = drawdown_bucket(drawdown)
  high = week52_high if week52_high is not None and week52_high > 0 else 0.0
  bear, base, bull = (high * r for r in SYNTHETIC_PRICE_RATIOS)
  scenario = ValuationScenario(
      bear_price=bear,
      base_price=base,
      bull_price=bull,
      peg_ratio=0.0,
      applied_pe=0.0,
      applied_growth=0.0,
  )
  return ClassificationResult(label=bucket.label,
                              risk_score=bucket.risk_score,
                              scenario=scenario)
