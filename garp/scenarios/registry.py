"""
Strategy registry and instrument-class resolution.

Strategies are looked up by string name so that run configuration stays
JSON/CLI friendly while the engine receives a concrete StrategyConfig.

To add a new strategy:
1. Add a classmethod preset to StrategyConfig (scenarios/config.py)
2. Register it in STRATEGIES below
"""

from collections.abc import Callable, Iterable
from typing import Optional

from garp.domain.types import InstrumentClass
from garp.scenarios.config import StrategyConfig

STRATEGIES: dict[str, Callable[[], StrategyConfig]] = {
    'conservative': StrategyConfig.conservative,
    'moderate': StrategyConfig.moderate,
    'aggressive': StrategyConfig.aggressive,
}

# Broad-market trackers priced by drawdown instead of earnings.
DEFAULT_INDEX_SYMBOLS: frozenset[str] = frozenset({
    'SPY', 'VOO', 'IVV', 'VTI', 'QQQ', 'QQQM', 'DIA', 'IWM', 'VT', 'VXUS',
})


def get_strategy(name: str) -> StrategyConfig:
  """
  Create a strategy configuration by name.

  Raises:
    KeyError: If the name is not registered
  """
  try:
    factory = STRATEGIES[name]
  except KeyError as e:
    raise KeyError(f"Unknown strategy: '{name}'. "
                   f'Available: {list(STRATEGIES.keys())}') from e
  return factory()


def list_strategies() -> list[str]:
  """List registered strategy names."""
  return list(STRATEGIES.keys())


def normalize_symbol(symbol: str) -> str:
  """Upper-case a symbol and drop a '.US' suffix."""
  sym = symbol.strip().upper()
  if sym.endswith('.US'):
    sym = sym[:-3]
  return sym


def resolve_instrument_class(
    symbol: str,
    index_symbols: Optional[Iterable[str]] = None,
) -> InstrumentClass:
  """
  Decide once per symbol whether it is priced as an equity or an index
  tracker.

  Args:
    symbol: Ticker symbol (a '.US' suffix is ignored)
    index_symbols: Symbols treated as index trackers
      (default: DEFAULT_INDEX_SYMBOLS)
  """
  if index_symbols is None:
    index_symbols = DEFAULT_INDEX_SYMBOLS
  members = {normalize_symbol(s) for s in index_symbols}
  if normalize_symbol(symbol) in members:
    return InstrumentClass.INDEX_TRACKER
  return InstrumentClass.EQUITY
