import pytest

from garp.domain.types import InstrumentClass
from garp.scenarios.config import StrategyConfig
from garp.scenarios.registry import get_strategy
from garp.scenarios.registry import list_strategies
from garp.scenarios.registry import normalize_symbol
from garp.scenarios.registry import resolve_instrument_class


class TestStrategyRegistry:

  def test_list(self):
    assert set(list_strategies()) == {'conservative', 'moderate', 'aggressive'}

  def test_get(self):
    assert get_strategy('aggressive') == StrategyConfig.aggressive()

  def test_unknown(self):
    with pytest.raises(KeyError, match='Unknown strategy'):
      get_strategy('yolo')


class TestInstrumentClass:

  @pytest.mark.parametrize('symbol', ['SPY', 'spy', 'QQQ.US', ' voo '])
  def test_index_trackers(self, symbol):
    assert resolve_instrument_class(symbol) is InstrumentClass.INDEX_TRACKER

  @pytest.mark.parametrize('symbol', ['AAPL', 'MSFT.US', 'SPYG'])
  def test_equities(self, symbol):
    assert resolve_instrument_class(symbol) is InstrumentClass.EQUITY

  def test_custom_set(self):
    assert (resolve_instrument_class('AAPL', ['aapl.us']) is
            InstrumentClass.INDEX_TRACKER)
    assert resolve_instrument_class('SPY', []) is InstrumentClass.EQUITY

  def test_normalize(self):
    assert normalize_symbol(' brk.b ') == 'BRK.B'
    assert normalize_symbol('aapl.us') == 'AAPL'
