'''
Batch evaluation over all tracked symbols.

This module:
1. Reads previous labels from the signal store
2. Fetches a snapshot per symbol (sequentially, rate limited)
3. Evaluates, persists the row, and sends an alert on a rising edge

A failure for one symbol is logged and counted; it never aborts the batch.

Usage (CLI):
  # Symbols already tracked in the store
  python -m garp.analysis.batch --store data/signals.csv

  # Explicit symbols with a different strategy
  python -m garp.analysis.batch \
    --symbols AAPL MSFT SPY \
    --store data/signals.csv \
    --strategy conservative \
    --output results/run.csv \
    -v

Usage (Python API):
  from garp.analysis.batch import RunConfig, run_batch

  df, summary = run_batch(['AAPL', 'MSFT'], client, store, RunConfig())
'''

import argparse
from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
import traceback
from typing import Iterable, List, Optional, Tuple

import pandas as pd
import requests

from garp.alerts.notify import build_alert_card
from garp.alerts.notify import send_alert
from garp.alerts.notify import symbol_link
from garp.data_loader import FinnhubClient
from garp.data_loader import is_supported_symbol
from garp.data_loader import RateLimiter
from garp.domain.types import DEFAULT_RISK_FREE_RATE
from garp.run import evaluate_symbol
from garp.run import STRESS_GROWTH_FACTOR
from garp.run import STRESS_PE_FACTOR
from garp.scenarios.registry import DEFAULT_INDEX_SYMBOLS
from garp.scenarios.registry import get_strategy
from garp.scenarios.registry import list_strategies
from garp.scenarios.registry import resolve_instrument_class
from garp.store import build_row
from garp.store import SignalStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunConfig:
  '''
  Batch run settings.

  Attributes:
    strategy: Strategy registry name
    index_symbols: Symbols priced by drawdown
    interval_sec: Minimum seconds between symbols
    stress_growth_factor: Growth haircut for the stress test
    stress_pe_factor: Multiple haircut for the stress test
    webhook_url: Alert webhook (alerts are skipped when empty)
  '''
  strategy: str = 'moderate'
  index_symbols: frozenset = field(default=DEFAULT_INDEX_SYMBOLS)
  interval_sec: float = 0.8
  stress_growth_factor: float = STRESS_GROWTH_FACTOR
  stress_pe_factor: float = STRESS_PE_FACTOR
  webhook_url: str = ''


@dataclass
class BatchSummary:
  '''Counters for one batch run.'''
  processed: int = 0
  skipped: int = 0
  failed: int = 0
  alerts_sent: int = 0
  alert_failures: int = 0
  persist_failures: int = 0
  failed_symbols: List[str] = field(default_factory=list)


def run_batch(
    symbols: Iterable[str],
    client: FinnhubClient,
    store: SignalStore,
    config: Optional[RunConfig] = None,
    session: Optional[requests.Session] = None,
    verbose: bool = False,
) -> Tuple[pd.DataFrame, BatchSummary]:
  '''
  Evaluate symbols one at a time.

  Args:
    symbols: Symbols to evaluate
    client: Snapshot source
    store: Signal store (read for previous labels, written per symbol)
    config: RunConfig (default: RunConfig())
    session: HTTP session used for alert delivery
    verbose: Log per-symbol results

  Returns:
    Tuple of (DataFrame of evaluations, BatchSummary)

  Raises:
    KeyError: If config.strategy is not registered
  '''
  if config is None:
    config = RunConfig()
  strategy = get_strategy(config.strategy)
  limiter = RateLimiter(min_interval_sec=config.interval_sec)
  summary = BatchSummary()
  results = []

  symbol_list = list(symbols)
  for i, symbol in enumerate(symbol_list, 1):
    if not is_supported_symbol(symbol):
      logger.debug('Skipping unsupported symbol %s', symbol)
      summary.skipped += 1
      continue

    if verbose:
      logger.info('[%d/%d] Processing %s...', i, len(symbol_list), symbol)

    limiter.wait()
    try:
      snapshot = client.fetch_snapshot(symbol)
      if snapshot is None:
        summary.skipped += 1
        continue

      previous_label, previous_timing = store.previous_labels(symbol)
      evaluation = evaluate_symbol(
          snapshot,
          instrument_class=resolve_instrument_class(symbol,
                                                    config.index_symbols),
          strategy=strategy,
          previous_label=previous_label,
          previous_timing=previous_timing,
          stress_growth_factor=config.stress_growth_factor,
          stress_pe_factor=config.stress_pe_factor,
      )
    except Exception as e:  # pylint: disable=broad-except
      logger.warning('Failed to process %s: %s', symbol, str(e))
      if verbose:
        logger.debug('%s', traceback.format_exc())
      summary.failed += 1
      summary.failed_symbols.append(symbol)
      continue

    summary.processed += 1
    results.append(evaluation.to_dict())

    if verbose:
      logger.info('  %s | %s | risk %.1f', evaluation.normal.label.text,
                  evaluation.timing.label.text, evaluation.normal.risk_score)

    if evaluation.alert.should_fire:
      logger.info('Alert: %s -> %s', symbol,
                  evaluation.alert.reason_label.text)
      detail = (f'{evaluation.normal.label.text} | '
                f'{evaluation.timing.label.text}')
      card = build_alert_card(symbol, evaluation.price,
                              evaluation.alert.reason_label, detail,
                              symbol_link(symbol))
      if send_alert(config.webhook_url, card, session=session):
        summary.alerts_sent += 1
      elif config.webhook_url:
        summary.alert_failures += 1

    try:
      store.upsert(build_row(evaluation, snapshot))
      store.save()
    except OSError as e:
      logger.warning('Failed to persist %s: %s', symbol, e)
      summary.persist_failures += 1

  logger.info('Done: %d processed, %d skipped, %d failed, %d alerts',
              summary.processed, summary.skipped, summary.failed,
              summary.alerts_sent)
  return pd.DataFrame(results), summary


def main() -> None:
  '''CLI entrypoint.'''
  parser = argparse.ArgumentParser(description='Evaluate tracked symbols')
  parser.add_argument('--symbols',
                      type=str,
                      nargs='+',
                      default=None,
                      help='Symbols (default: symbols already in the store)')
  parser.add_argument('--store',
                      type=Path,
                      default=Path('data/signals.csv'),
                      help='Signal store CSV')
  parser.add_argument('--strategy',
                      type=str,
                      default='moderate',
                      choices=list_strategies(),
                      help='Strategy preset')
  parser.add_argument('--index-symbols',
                      type=str,
                      nargs='+',
                      default=None,
                      help='Symbols priced by drawdown (default: built-in set)')
  parser.add_argument('--interval',
                      type=float,
                      default=0.8,
                      help='Minimum seconds between symbols')
  parser.add_argument('--risk-free-rate',
                      type=float,
                      default=DEFAULT_RISK_FREE_RATE,
                      help='Risk-free rate in percent')
  parser.add_argument('--finnhub-key',
                      type=str,
                      default=os.environ.get('FINNHUB_KEY', ''),
                      help='Finnhub API key (default: $FINNHUB_KEY)')
  parser.add_argument('--webhook',
                      type=str,
                      default=os.environ.get('FEISHU_WEBHOOK', ''),
                      help='Alert webhook URL (default: $FEISHU_WEBHOOK)')
  parser.add_argument('--output',
                      type=Path,
                      default=None,
                      help='Optional CSV of this run\'s evaluations')
  parser.add_argument('-v',
                      '--verbose',
                      action='store_true',
                      help='Verbose logging')
  args = parser.parse_args()

  if args.verbose:
    logging.getLogger().setLevel(logging.DEBUG)

  if not args.finnhub_key:
    parser.error('--finnhub-key or $FINNHUB_KEY is required')

  store = SignalStore(args.store)
  symbols = args.symbols or store.symbols()
  if not symbols:
    logger.warning('No symbols to evaluate')
    return

  index_symbols = (frozenset(args.index_symbols)
                   if args.index_symbols else DEFAULT_INDEX_SYMBOLS)
  config = RunConfig(
      strategy=args.strategy,
      index_symbols=index_symbols,
      interval_sec=args.interval,
      webhook_url=args.webhook,
  )
  client = FinnhubClient(api_key=args.finnhub_key,
                         risk_free_rate=args.risk_free_rate)

  logger.info('Scanning %d symbols with strategy %s', len(symbols),
              args.strategy)
  df, summary = run_batch(symbols, client, store, config,
                          verbose=args.verbose)

  if args.output is not None:
    args.output.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(args.output, index=False)
    logger.info('Saved %d rows to %s', len(df), args.output)

  if summary.failed_symbols:
    logger.warning('Failed symbols: %s', ', '.join(summary.failed_symbols))


if __name__ == '__main__':
  logging.basicConfig(
      level=logging.INFO,
      format='%(message)s',
  )
  main()
