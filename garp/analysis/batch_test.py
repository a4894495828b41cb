from unittest import mock

import pytest
import requests

from garp.analysis.batch import RunConfig
from garp.analysis.batch import run_batch
from garp.store import SignalStore

WEBHOOK = 'https://open.feishu.cn/open-apis/bot/v2/hook/test'


class FakeClient:
  """Snapshot source backed by a dict; exceptions are raised on fetch."""

  def __init__(self, snapshots):
    self.snapshots = snapshots
    self.calls = []

  def fetch_snapshot(self, symbol):
    self.calls.append(symbol)
    value = self.snapshots.get(symbol)
    if isinstance(value, Exception):
      raise value
    return value


def _session(code=0):
  session = mock.Mock()
  session.post.return_value.json.return_value = {'code': code}
  return session


@pytest.fixture
def client(steady_snapshot, index_snapshot):
  return FakeClient({
      'ACME': steady_snapshot,
      'SPY': index_snapshot,
      'GONE': None,
      'BOOM': RuntimeError('provider exploded'),
  })


@pytest.fixture
def store(tmp_path):
  return SignalStore(tmp_path / 'signals.csv')


class TestRunBatch:

  def test_mixed_batch(self, client, store):
    df, summary = run_batch(['ACME', 'SPY', '0700.HK', 'GONE', 'BOOM'], client,
                            store, RunConfig(interval_sec=0.0))

    assert summary.processed == 2
    assert summary.skipped == 2
    assert summary.failed == 1
    assert summary.failed_symbols == ['BOOM']
    assert summary.alerts_sent == 0
    assert summary.alert_failures == 0
    assert '0700.HK' not in client.calls

    assert list(df['symbol']) == ['ACME', 'SPY']
    assert list(df['instrument_class']) == ['equity', 'index_tracker']
    assert list(df['label']) == ['accumulate', 'accumulate']
    assert SignalStore(store.path).symbols() == ['ACME', 'SPY']

  def test_alert_sent_once(self, client, store):
    config = RunConfig(interval_sec=0.0, webhook_url=WEBHOOK)
    session = _session()

    _, first = run_batch(['ACME'], client, store, config, session=session)
    _, second = run_batch(['ACME'], client, store, config, session=session)

    assert first.alerts_sent == 1
    assert second.alerts_sent == 0
    session.post.assert_called_once()
    card = session.post.call_args.kwargs['json']
    assert 'ACME' in card['card']['header']['title']['content']

  def test_history_survives_reload(self, client, tmp_path):
    path = tmp_path / 'signals.csv'
    run_batch(['ACME'], client, SignalStore(path), RunConfig(interval_sec=0.0))

    df, _ = run_batch(['ACME'], client, SignalStore(path),
                      RunConfig(interval_sec=0.0))

    assert not df['alert'].iloc[0]

  def test_webhook_failure_is_counted(self, client, store):
    session = mock.Mock()
    session.post.side_effect = requests.ConnectionError('down')
    config = RunConfig(interval_sec=0.0, webhook_url=WEBHOOK)

    _, summary = run_batch(['ACME'], client, store, config, session=session)

    assert summary.processed == 1
    assert summary.alert_failures == 1
    assert store.symbols() == ['ACME']

  def test_persist_failure_is_counted(self, client, store):
    with mock.patch.object(SignalStore, 'save',
                           side_effect=OSError('disk full')):
      df, summary = run_batch(['ACME', 'SPY'], client, store,
                              RunConfig(interval_sec=0.0))

    assert summary.processed == 2
    assert summary.persist_failures == 2
    assert len(df) == 2

  def test_strategy_is_applied(self, client, store):
    df, _ = run_batch(['ACME'], client, store,
                      RunConfig(strategy='aggressive', interval_sec=0.0))

    # Aggressive bull multiple (1.4): 5 * 20 * 1.4 * 1.104
    assert df['bull_price'].iloc[0] == pytest.approx(154.56)

  def test_custom_index_symbols(self, client, store):
    df, _ = run_batch(['ACME'], client, store,
                      RunConfig(index_symbols=frozenset({'ACME'}),
                                interval_sec=0.0))

    assert df['instrument_class'].iloc[0] == 'index_tracker'

  def test_unknown_strategy(self, client, store):
    with pytest.raises(KeyError):
      run_batch(['ACME'], client, store, RunConfig(strategy='nope'))

  def test_empty(self, client, store):
    df, summary = run_batch([], client, store, RunConfig(interval_sec=0.0))

    assert df.empty
    assert summary.processed == 0
