"""Strategy configuration and registry."""

from garp.scenarios.config import StrategyConfig
from garp.scenarios.registry import DEFAULT_INDEX_SYMBOLS
from garp.scenarios.registry import get_strategy
from garp.scenarios.registry import list_strategies
from garp.scenarios.registry import resolve_instrument_class
from garp.scenarios.registry import STRATEGIES

__all__ = [
  'StrategyConfig',
  'STRATEGIES',
  'DEFAULT_INDEX_SYMBOLS',
  'get_strategy',
  'list_strategies',
  'resolve_instrument_class',
]
