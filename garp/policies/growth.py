'''
Growth rate estimation policies.

These policies derive a single expected annual growth rate (percent units)
from sparse, noisy fundamentals. Loss-making or early-stage names are valued
on top-line momentum; profitable names on bottom-line momentum.
'''

from abc import ABC, abstractmethod
import logging
from typing import Optional, Tuple

from garp.domain.types import FundamentalSnapshot
from garp.domain.types import GrowthEstimate
from garp.domain.types import PolicyOutput

logger = logging.getLogger(__name__)


class GrowthPolicy(ABC):
  '''
  Base class for growth rate estimation policies.

  Subclasses implement compute() to return a GrowthEstimate.
  '''

  @abstractmethod
  def compute(self,
              data: FundamentalSnapshot) -> PolicyOutput[GrowthEstimate]:
    '''
    Estimate expected growth for one symbol.

    Args:
      data: Fundamental snapshot

    Returns:
      PolicyOutput with a GrowthEstimate and diagnostics
    '''


class SmartGrowth(GrowthPolicy):
  '''
  Revenue- or earnings-driven growth estimate.

  Revenue branch (loss-making, or TTM EPS growth absent):
    max(TTM, quarterly revenue growth) clipped to `cap` when positive,
    else 5Y revenue growth, else `floor`.

  Earnings branch:
    The long-run rate is 5Y EPS growth, or TTM EPS growth when the 5Y
    figure is missing or zero. TTM growth (clipped to `cap`) wins when it
    beats the long-run rate by more than `acceleration_gap`; else the
    long-run rate when inside `past_range`; else `floor` for an implausible
    5Y figure, or `baseline` when there is no usable figure at all.
  '''

  def __init__(
      self,
      cap: float = 50.0,
      acceleration_gap: float = 10.0,
      floor: float = 5.0,
      baseline: float = 8.0,
      past_range: Tuple[float, float] = (-50.0, 500.0),
  ):
    '''
    Initialize smart growth policy.

    Args:
      cap: Maximum growth taken from recent momentum (default: 50%)
      acceleration_gap: Required excess of TTM over 5Y growth (default: 10pp)
      floor: Fallback when data is present but unusable (default: 5%)
      baseline: Fallback when no long-run figure exists (default: 8%)
      past_range: Open interval of plausible 5Y growth (default: -50..500)
    '''
    self.cap = cap
    self.acceleration_gap = acceleration_gap
    self.floor = floor
    self.baseline = baseline
    self.past_range = past_range

  def compute(self,
              data: FundamentalSnapshot) -> PolicyOutput[GrowthEstimate]:
    is_loss = data.eps_ttm is None or data.eps_ttm <= 0
    use_revenue = is_loss or data.eps_growth_ttm_yoy is None

    if use_revenue:
      rate, method = self._from_revenue(data)
    else:
      rate, method = self._from_earnings(data)

    logger.debug('%s: growth %.2f%% via %s', data.symbol, rate, method)
    return PolicyOutput(value=GrowthEstimate(rate=rate,
                                             is_loss_making=is_loss,
                                             method=method),
                        diag={
                            'growth_method': method,
                            'growth_rate': rate,
                            'is_loss_making': is_loss,
                            'revenue_branch': use_revenue,
                        })

  def _from_revenue(self, data: FundamentalSnapshot) -> Tuple[float, str]:
    recent = max(data.revenue_growth_ttm_yoy or 0.0,
                 data.revenue_growth_quarterly_yoy or 0.0)
    if recent > 0:
      return min(recent, self.cap), 'revenue_recent'
    if data.revenue_growth_5y is not None:
      return data.revenue_growth_5y, 'revenue_5y'
    return self.floor, 'revenue_floor'

  def _from_earnings(self, data: FundamentalSnapshot) -> Tuple[float, str]:
    ttm = data.eps_growth_ttm_yoy
    has_5y = bool(data.eps_growth_5y)
    # A missing or zero 5Y figure falls back to TTM growth as the long-run rate
    past: Optional[float] = data.eps_growth_5y if has_5y else ttm

    accelerating = (ttm is not None and ttm > 0 and past is not None and
                    ttm > past + self.acceleration_gap)
    if accelerating:
      return min(ttm, self.cap), 'eps_acceleration'

    low, high = self.past_range
    if past is not None and low < past < high:
      return past, 'eps_5y' if has_5y else 'eps_ttm'
    if has_5y:
      return self.floor, 'eps_floor'
    return self.baseline, 'eps_baseline'
