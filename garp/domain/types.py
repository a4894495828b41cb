'''
Domain types for the signal engine.

These dataclasses provide typed interfaces between components, so policies
never read raw provider payloads directly. Every numeric field of a snapshot
is optional: provider data is sparse and consumers normalize missing values
to documented defaults before use.
'''

from dataclasses import dataclass, field, replace
import enum
import math
from typing import Any, Dict, Generic, Mapping, Optional, TypeVar, Union

T = TypeVar('T')

DEFAULT_RISK_FREE_RATE = 4.5
DEFAULT_PE = 20.0


def to_finite(value: Any) -> Optional[float]:
  '''Coerce a raw value to a finite float, or None if missing/invalid.'''
  if value is None or isinstance(value, bool):
    return None
  try:
    num = float(value)
  except (TypeError, ValueError):
    return None
  if not math.isfinite(num):
    return None
  return num


def finite_or(value: Any, default: float) -> float:
  '''Like to_finite() but falls back to a default.'''
  num = to_finite(value)
  return default if num is None else num


@dataclass(frozen=True)
class PolicyOutput(Generic[T]):
  '''
  Standard output from any policy.

  Attributes:
    value: The computed value (type depends on policy)
    diag: Dictionary of diagnostic information
  '''
  value: T
  diag: Dict[str, Any] = field(default_factory=dict)


class _DisplayEnum(enum.Enum):
  '''Enum whose value is a stable storage code, with a separate display text.'''

  @property
  def text(self) -> str:
    return _DISPLAY_TEXT[self]

  @classmethod
  def parse(cls, raw: Any):
    '''
    Resolve a stored code or display text back to a member.

    Returns None for empty or unrecognized input. Matching is exact; display
    text is only accepted for rows written before codes were stored.
    '''
    if isinstance(raw, cls):
      return raw
    if not isinstance(raw, str):
      return None
    raw = raw.strip()
    if not raw:
      return None
    for member in cls:
      if raw in (member.value, member.text):
        return member
    return None


class LabelKind(_DisplayEnum):
  '''Valuation conclusion.'''
  VALUE_TRAP = 'value_trap'
  OVERDRAFT = 'overdraft'
  GOLDEN_STRIKE = 'golden_strike'
  ACCUMULATE = 'accumulate'
  FAIR_RANGE = 'fair_range'
  EXUBERANCE = 'exuberance'
  DISTRESS_REVERSAL = 'distress_reversal'
  JUNK = 'junk'


class TimingKind(_DisplayEnum):
  '''Timing signal. The last five members belong to the drawdown variant.'''
  LEFT_SIDE = 'left_side'
  RIGHT_SIDE_BREAKOUT = 'right_side_breakout'
  BOTTOM_REBOUND = 'bottom_rebound'
  ELEVATED = 'elevated'
  MID_RANGE = 'mid_range'
  RANGE_BOUND = 'range_bound'
  NEAR_HIGHS = 'near_highs'
  HEALTHY_PULLBACK = 'healthy_pullback'
  ACCUMULATION_ZONE = 'accumulation_zone'
  BEAR_MARKET = 'bear_market'
  PANIC = 'panic'


class DrawdownAction(_DisplayEnum):
  HOLD = 'hold'
  ADD = 'add'
  HEAVY_ADD = 'heavy_add'
  ALL_IN = 'all_in'


class RiskTier(_DisplayEnum):
  VERY_SAFE = 'very_safe'
  AMPLE = 'ample'
  MODERATE = 'moderate'
  FRAGILE = 'fragile'
  HIGH_VOLATILITY = 'high_volatility'


class InstrumentClass(enum.Enum):
  '''How a symbol is priced: from earnings, or from drawdown off its high.'''
  EQUITY = 'equity'
  INDEX_TRACKER = 'index_tracker'


_DISPLAY_TEXT: Dict[_DisplayEnum, str] = {
    LabelKind.VALUE_TRAP: 'Value trap (wait)',
    LabelKind.OVERDRAFT: 'Valuation overdraft',
    LabelKind.GOLDEN_STRIKE: '🟢 Golden strike zone',
    LabelKind.ACCUMULATE: 'Long runway (accumulate)',
    LabelKind.FAIR_RANGE: 'Fair range (hold)',
    LabelKind.EXUBERANCE: 'Irrational exuberance (reduce)',
    LabelKind.DISTRESS_REVERSAL: '🔥 Distress reversal',
    LabelKind.JUNK: '☠️ Loss-making / junk',
    TimingKind.LEFT_SIDE: '🔪 Left-side contrarian entry',
    TimingKind.RIGHT_SIDE_BREAKOUT: '🚀 Right-side breakout (best entry)',
    TimingKind.BOTTOM_REBOUND: '📈 Bottom rebound',
    TimingKind.ELEVATED: '⚠️ Elevated (trim zone)',
    TimingKind.MID_RANGE: '😴 Mid-range consolidation',
    TimingKind.RANGE_BOUND: '⏳ Range-bound',
    TimingKind.NEAR_HIGHS: 'Near highs (trend-follow only)',
    TimingKind.HEALTHY_PULLBACK: 'Healthy pullback',
    TimingKind.ACCUMULATION_ZONE: 'Accumulation zone',
    TimingKind.BEAR_MARKET: 'Bear-market territory',
    TimingKind.PANIC: 'Panic (maximum opportunity)',
    DrawdownAction.HOLD: 'Hold',
    DrawdownAction.ADD: 'Add',
    DrawdownAction.HEAVY_ADD: 'Heavy add',
    DrawdownAction.ALL_IN: 'All in',
    RiskTier.VERY_SAFE: 'Very safe margin',
    RiskTier.AMPLE: 'Ample margin',
    RiskTier.MODERATE: 'Moderate risk',
    RiskTier.FRAGILE: 'Fragile valuation',
    RiskTier.HIGH_VOLATILITY: 'High volatility',
}


@dataclass(frozen=True)
class FundamentalSnapshot:
  '''
  Point-in-time fundamentals and quote for a single symbol.

  Growth and ratio fields are in percent units (12.5 means 12.5%).

  Attributes:
    symbol: Ticker symbol
    current_price: Latest traded price
    eps_ttm: Trailing twelve month earnings per share
    pe_ttm: Trailing twelve month price/earnings multiple
    eps_growth_ttm_yoy: TTM EPS growth, year over year
    eps_growth_5y: Five year EPS growth
    eps_growth_quarterly_yoy: Latest quarter EPS growth, year over year
    revenue_growth_ttm_yoy: TTM revenue growth, year over year
    revenue_growth_5y: Five year revenue growth
    revenue_growth_quarterly_yoy: Latest quarter revenue growth
    roe_ttm: TTM return on equity
    week52_low: 52-week low price
    week52_high: 52-week high price
    net_profit_margin_ttm: TTM net margin
    dividend_yield: Indicated annual dividend yield (TTM as fallback)
    risk_free_rate: Macro risk-free rate used for multiple drag
  '''
  symbol: str
  current_price: float
  eps_ttm: Optional[float] = None
  pe_ttm: Optional[float] = None
  eps_growth_ttm_yoy: Optional[float] = None
  eps_growth_5y: Optional[float] = None
  eps_growth_quarterly_yoy: Optional[float] = None
  revenue_growth_ttm_yoy: Optional[float] = None
  revenue_growth_5y: Optional[float] = None
  revenue_growth_quarterly_yoy: Optional[float] = None
  roe_ttm: Optional[float] = None
  week52_low: Optional[float] = None
  week52_high: Optional[float] = None
  net_profit_margin_ttm: Optional[float] = None
  dividend_yield: Optional[float] = None
  risk_free_rate: float = DEFAULT_RISK_FREE_RATE

  def __post_init__(self):
    for name in _OPTIONAL_SNAPSHOT_FIELDS:
      object.__setattr__(self, name, to_finite(getattr(self, name)))
    object.__setattr__(self, 'current_price',
                       finite_or(self.current_price, 0.0))
    object.__setattr__(self, 'risk_free_rate',
                       finite_or(self.risk_free_rate, DEFAULT_RISK_FREE_RATE))

  @classmethod
  def from_metrics(
      cls,
      symbol: str,
      metric: Mapping[str, Any],
      price: float,
      risk_free_rate: float = DEFAULT_RISK_FREE_RATE,
  ) -> 'FundamentalSnapshot':
    '''
    Build a snapshot from a provider metric payload.

    Args:
      symbol: Ticker symbol
      metric: Provider "metric" mapping (keys such as 'epsTTM', 'peTTM')
      price: Current quote price
      risk_free_rate: Risk-free rate in percent

    Returns:
      FundamentalSnapshot with invalid values replaced by None
    '''
    dividend = to_finite(metric.get('dividendYieldIndicatedAnnual'))
    if dividend is None:
      dividend = metric.get('currentDividendYieldTTM')

    return cls(
        symbol=symbol,
        current_price=price,
        eps_ttm=metric.get('epsTTM'),
        pe_ttm=metric.get('peTTM'),
        eps_growth_ttm_yoy=metric.get('epsGrowthTTMYoy'),
        eps_growth_5y=metric.get('epsGrowth5Y'),
        eps_growth_quarterly_yoy=metric.get('epsGrowthQuarterlyYoy'),
        revenue_growth_ttm_yoy=metric.get('revenueGrowthTTMYoy'),
        revenue_growth_5y=metric.get('revenueGrowth5Y'),
        revenue_growth_quarterly_yoy=metric.get('revenueGrowthQuarterlyYoy'),
        roe_ttm=metric.get('roeTTM'),
        week52_low=metric.get('52WeekLow'),
        week52_high=metric.get('52WeekHigh'),
        net_profit_margin_ttm=metric.get('netProfitMarginTTM'),
        dividend_yield=dividend,
        risk_free_rate=risk_free_rate,
    )


_OPTIONAL_SNAPSHOT_FIELDS = (
    'eps_ttm',
    'pe_ttm',
    'eps_growth_ttm_yoy',
    'eps_growth_5y',
    'eps_growth_quarterly_yoy',
    'revenue_growth_ttm_yoy',
    'revenue_growth_5y',
    'revenue_growth_quarterly_yoy',
    'roe_ttm',
    'week52_low',
    'week52_high',
    'net_profit_margin_ttm',
    'dividend_yield',
)


@dataclass(frozen=True)
class GrowthEstimate:
  '''
  Expected annual growth rate in percent.

  Attributes:
    rate: Growth estimate (percent units)
    is_loss_making: True if TTM EPS is missing or not positive
    method: Which branch produced the rate
  '''
  rate: float
  is_loss_making: bool
  method: str = ''


@dataclass(frozen=True)
class ScenarioInputs:
  '''
  Fully prepared inputs for the scenario engine.

  Attributes:
    eps: TTM earnings per share (None or <= 0 means EPS-less)
    growth_rate: Expected growth in percent
    pe_multiple: Multiple to price earnings at
    risk_free_rate: Risk-free rate in percent
    qtr_eps_growth: Latest quarter EPS growth in percent
    past_growth: Long-run EPS growth in percent
    roe: Return on equity in percent
  '''
  eps: Optional[float]
  growth_rate: float
  pe_multiple: float = DEFAULT_PE
  risk_free_rate: float = DEFAULT_RISK_FREE_RATE
  qtr_eps_growth: float = 0.0
  past_growth: float = 0.0
  roe: float = 0.0

  @classmethod
  def from_snapshot(cls, snapshot: FundamentalSnapshot,
                    growth: GrowthEstimate) -> 'ScenarioInputs':
    '''Prepare engine inputs, defaulting a missing or zero PE to 20.'''
    return cls(
        eps=snapshot.eps_ttm,
        growth_rate=growth.rate,
        pe_multiple=snapshot.pe_ttm or DEFAULT_PE,
        risk_free_rate=snapshot.risk_free_rate,
        qtr_eps_growth=snapshot.eps_growth_quarterly_yoy or 0.0,
        past_growth=snapshot.eps_growth_5y or 0.0,
        roe=snapshot.roe_ttm or 0.0,
    )

  def stressed(self, growth_factor: float = 0.7,
               pe_factor: float = 0.8) -> 'ScenarioInputs':
    '''Inputs for the stress test: haircut growth and multiple.'''
    return replace(
        self,
        growth_rate=self.growth_rate * growth_factor,
        pe_multiple=self.pe_multiple * pe_factor,
    )


@dataclass(frozen=True)
class ValuationScenario:
  '''
  Bear/base/bull fair values from the scenario engine.

  bear <= base <= bull is the intent but is not enforced.

  Attributes:
    bear_price: Pessimistic fair value
    base_price: Expected fair value
    bull_price: Optimistic fair value
    peg_ratio: Applied multiple / applied growth (0 for degenerate)
    applied_pe: Multiple after adjustments
    applied_growth: Growth after clamping and acceleration
    bull_mult: Bull multiplier after adjustments
    bear_disc: Bear discount after adjustments
    drag: Rate-environment drag applied to all prices
    is_degenerate: True for EPS-less names (no multiple-based pricing)
  '''
  bear_price: float
  base_price: float
  bull_price: float
  peg_ratio: float
  applied_pe: float
  applied_growth: float
  bull_mult: float = 0.0
  bear_disc: float = 0.0
  drag: float = 1.0
  is_degenerate: bool = False

  @property
  def is_ordered(self) -> bool:
    '''Whether bear <= base <= bull holds for this scenario.'''
    return self.bear_price <= self.base_price <= self.bull_price


@dataclass(frozen=True)
class ClassificationResult:
  '''
  Attributes:
    label: Valuation conclusion
    risk_score: Nominally 0..100, lower is safer; not clamped
    scenario: Scenario the label was derived from
  '''
  label: LabelKind
  risk_score: float
  scenario: ValuationScenario


@dataclass(frozen=True)
class TimingResult:
  '''
  Timing signal with a short rationale.

  The drawdown variant also fills drawdown, risk_score and action.
  '''
  label: TimingKind
  rationale: str
  drawdown: Optional[float] = None
  risk_score: Optional[float] = None
  action: Optional[DrawdownAction] = None


@dataclass(frozen=True)
class AlertDecision:
  '''
  Attributes:
    should_fire: True on a rising edge of either signal
    reason_label: The signal that fired (valuation wins ties), or the new
      valuation label when nothing fired
  '''
  should_fire: bool
  reason_label: Union[LabelKind, TimingKind]


@dataclass(frozen=True)
class SymbolEvaluation:
  '''
  Complete evaluation of one symbol.

  Attributes:
    symbol: Ticker symbol
    instrument_class: Pricing path that was used
    price: Current price
    growth: Growth estimate (None on the drawdown path)
    normal: Classification with unmodified inputs
    stressed: Classification with growth x0.7 and multiple x0.8
    timing: Timing signal
    alert: Alert decision against the previous stored labels
  '''
  symbol: str
  instrument_class: InstrumentClass
  price: float
  growth: Optional[GrowthEstimate]
  normal: ClassificationResult
  stressed: ClassificationResult
  timing: TimingResult
  alert: AlertDecision

  def to_dict(self) -> Dict[str, Any]:
    '''Flatten to a dictionary for DataFrame creation.'''
    scenario = self.normal.scenario
    return {
        'symbol': self.symbol,
        'instrument_class': self.instrument_class.value,
        'price': self.price,
        'growth_rate': self.growth.rate if self.growth else None,
        'growth_method': self.growth.method if self.growth else None,
        'label': self.normal.label.value,
        'stress_label': self.stressed.label.value,
        'timing': self.timing.label.value,
        'risk_score': self.normal.risk_score,
        'peg': scenario.peg_ratio,
        'bear_price': scenario.bear_price,
        'base_price': scenario.base_price,
        'bull_price': scenario.bull_price,
        'alert': self.alert.should_fire,
        'alert_reason': self.alert.reason_label.value,
    }
