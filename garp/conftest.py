import pytest

from garp.domain.types import FundamentalSnapshot
from garp.domain.types import ScenarioInputs
from garp.scenarios.config import StrategyConfig


@pytest.fixture
def moderate() -> StrategyConfig:
  return StrategyConfig.moderate()


@pytest.fixture
def steady_inputs() -> ScenarioInputs:
  """EPS 5, growth 8%, PE 20 at a 4.5% rate: pe x rate = 90, no drag."""
  return ScenarioInputs(eps=5.0,
                        growth_rate=8.0,
                        pe_multiple=20.0,
                        risk_free_rate=4.5,
                        roe=10.0)


@pytest.fixture
def steady_snapshot() -> FundamentalSnapshot:
  """Profitable compounder trading at 90 inside an 80..140 range.

  Growth resolves to the 5Y figure (8%): TTM growth of 6% does not beat it
  by more than 10pp.
  """
  return FundamentalSnapshot(
      symbol='ACME',
      current_price=90.0,
      eps_ttm=5.0,
      pe_ttm=20.0,
      eps_growth_ttm_yoy=6.0,
      eps_growth_5y=8.0,
      roe_ttm=10.0,
      week52_low=80.0,
      week52_high=140.0,
      risk_free_rate=4.5,
  )


@pytest.fixture
def loss_making_snapshot() -> FundamentalSnapshot:
  """Negative EPS with 30% recent revenue growth."""
  return FundamentalSnapshot(
      symbol='BURN',
      current_price=12.0,
      eps_ttm=-2.0,
      pe_ttm=None,
      revenue_growth_ttm_yoy=22.0,
      revenue_growth_quarterly_yoy=30.0,
      week52_low=8.0,
      week52_high=30.0,
  )


@pytest.fixture
def index_snapshot() -> FundamentalSnapshot:
  """Broad-market tracker 10% below its 52-week high."""
  return FundamentalSnapshot(
      symbol='SPY',
      current_price=450.0,
      week52_low=380.0,
      week52_high=500.0,
  )
