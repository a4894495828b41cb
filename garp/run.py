'''
Single-symbol evaluation entrypoint.

This module provides the main entry point for evaluating one symbol. It:
1. Estimates growth from the snapshot (equity path)
2. Prices and classifies normal and stressed scenarios
3. Derives the timing signal for the instrument class
4. Decides whether an alert fires against the previous stored labels

evaluate_symbol() is a pure function of its arguments: no I/O and no state
kept between calls.

Usage:
  from garp.domain.types import FundamentalSnapshot
  from garp.run import evaluate_symbol

  snapshot = FundamentalSnapshot(symbol='ACME', current_price=90.0,
                                 eps_ttm=5.0, pe_ttm=20.0)
  result = evaluate_symbol(snapshot)
  print(result.normal.label.text)
'''

import argparse
import json
import logging
import os
from pathlib import Path
from typing import Optional

from garp.alerts.tracker import decide_alert
from garp.data_loader import FinnhubClient
from garp.domain.types import ClassificationResult
from garp.domain.types import DEFAULT_RISK_FREE_RATE
from garp.domain.types import FundamentalSnapshot
from garp.domain.types import InstrumentClass
from garp.domain.types import LabelKind
from garp.domain.types import ScenarioInputs
from garp.domain.types import SymbolEvaluation
from garp.domain.types import TimingKind
from garp.policies.classify import classify
from garp.policies.growth import GrowthPolicy
from garp.policies.growth import SmartGrowth
from garp.policies.risk import RiskPolicy
from garp.policies.risk import risk_tier
from garp.policies.timing import drawdown_classification
from garp.policies.timing import drawdown_timing
from garp.policies.timing import equity_timing
from garp.scenarios.config import StrategyConfig
from garp.scenarios.registry import get_strategy
from garp.scenarios.registry import list_strategies
from garp.scenarios.registry import resolve_instrument_class

logger = logging.getLogger(__name__)

STRESS_GROWTH_FACTOR = 0.7
STRESS_PE_FACTOR = 0.8


def evaluate_symbol(
    snapshot: FundamentalSnapshot,
    instrument_class: InstrumentClass = InstrumentClass.EQUITY,
    strategy: Optional[StrategyConfig] = None,
    previous_label: Optional[LabelKind] = None,
    previous_timing: Optional[TimingKind] = None,
    growth_policy: Optional[GrowthPolicy] = None,
    risk_policy: Optional[RiskPolicy] = None,
    stress_growth_factor: float = STRESS_GROWTH_FACTOR,
    stress_pe_factor: float = STRESS_PE_FACTOR,
) -> SymbolEvaluation:
  '''
  Evaluate one symbol.

  Args:
    snapshot: Fully resolved fundamentals and quote
    instrument_class: Equity (earnings pricing) or index tracker (drawdown)
    strategy: StrategyConfig (default: StrategyConfig.moderate())
    previous_label: Valuation label from the last stored row
    previous_timing: Timing label from the last stored row
    growth_policy: Growth policy (default: SmartGrowth())
    risk_policy: Risk policy (default: ComponentRisk())
    stress_growth_factor: Growth haircut for the stress test
    stress_pe_factor: Multiple haircut for the stress test

  Returns:
    SymbolEvaluation with normal/stressed classifications, timing and the
    alert decision
  '''
  if strategy is None:
    strategy = StrategyConfig.moderate()
  price = snapshot.current_price

  if instrument_class is InstrumentClass.INDEX_TRACKER:
    growth = None
    normal = drawdown_classification(price, snapshot.week52_high)
    stressed = normal
    timing = drawdown_timing(price, snapshot.week52_high)
  else:
    if growth_policy is None:
      growth_policy = SmartGrowth()
    growth = growth_policy.compute(snapshot).value
    inputs = ScenarioInputs.from_snapshot(snapshot, growth)
    normal = classify(inputs, price, strategy, risk_policy)
    stressed = classify(
        inputs.stressed(stress_growth_factor, stress_pe_factor), price,
        strategy, risk_policy)
    timing = equity_timing(price, snapshot.week52_low, snapshot.week52_high,
                           normal.label)

  alert = decide_alert(previous_label, normal.label, previous_timing,
                       timing.label)
  if alert.should_fire:
    logger.debug('%s: alert on %s', snapshot.symbol, alert.reason_label.value)

  return SymbolEvaluation(
      symbol=snapshot.symbol,
      instrument_class=instrument_class,
      price=price,
      growth=growth,
      normal=normal,
      stressed=stressed,
      timing=timing,
      alert=alert,
  )


def _log_classification(title: str, result: ClassificationResult) -> None:
  scenario = result.scenario
  tier = risk_tier(result.risk_score)
  logger.info('\n%s:', title)
  logger.info('  Label: %s', result.label.text)
  logger.info('  Risk: %.1f (%s)', result.risk_score, tier.text if tier else '-')
  logger.info('  Bear / Base / Bull: $%.2f / $%.2f / $%.2f',
              scenario.bear_price, scenario.base_price, scenario.bull_price)
  logger.info('  PEG: %.2f  Applied PE: %.1f  Applied growth: %.2f%%',
              scenario.peg_ratio, scenario.applied_pe, scenario.applied_growth)


def main() -> None:
  '''CLI entrypoint.'''
  parser = argparse.ArgumentParser(description='Evaluate one symbol')
  parser.add_argument('--symbol',
                      type=str,
                      required=True,
                      help='Ticker symbol')
  parser.add_argument(
      '--strategy',
      type=str,
      default='moderate',
      choices=list_strategies(),
      help='Strategy preset',
  )
  parser.add_argument(
      '--metrics-json',
      type=Path,
      default=None,
      help='Read the metric payload from a file instead of the API',
  )
  parser.add_argument('--price',
                      type=float,
                      default=None,
                      help='Current price (required with --metrics-json)')
  parser.add_argument('--risk-free-rate',
                      type=float,
                      default=DEFAULT_RISK_FREE_RATE,
                      help='Risk-free rate in percent')
  parser.add_argument(
      '--finnhub-key',
      type=str,
      default=os.environ.get('FINNHUB_KEY', ''),
      help='Finnhub API key (default: $FINNHUB_KEY)',
  )
  args = parser.parse_args()

  if args.metrics_json is not None:
    if args.price is None:
      parser.error('--price is required with --metrics-json')
    payload = json.loads(args.metrics_json.read_text(encoding='utf-8'))
    metric = payload.get('metric', payload)
    snapshot: Optional[FundamentalSnapshot] = FundamentalSnapshot.from_metrics(
        args.symbol, metric, args.price, args.risk_free_rate)
  else:
    client = FinnhubClient(api_key=args.finnhub_key,
                           risk_free_rate=args.risk_free_rate)
    snapshot = client.fetch_snapshot(args.symbol)

  if snapshot is None:
    logger.error('No quote available for %s', args.symbol)
    return

  instrument_class = resolve_instrument_class(args.symbol)
  result = evaluate_symbol(snapshot,
                           instrument_class=instrument_class,
                           strategy=get_strategy(args.strategy))

  separator = '=' * 70
  logger.info('\n%s', separator)
  logger.info('Evaluation - %s at $%.2f', result.symbol, result.price)
  logger.info('Strategy: %s  Class: %s', args.strategy,
              result.instrument_class.value)
  logger.info(separator)

  if result.growth is not None:
    logger.info('  Growth: %.2f%% (%s)', result.growth.rate,
                result.growth.method)
  _log_classification('Normal', result.normal)
  _log_classification('Stress test', result.stressed)
  logger.info('\nTiming: %s (%s)', result.timing.label.text,
              result.timing.rationale)
  logger.info('%s\n', separator)


if __name__ == '__main__':
  logging.basicConfig(
      level=logging.INFO,
      format='%(message)s',
  )
  main()
