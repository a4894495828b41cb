'''
Valuation label classification.

Rules run in a fixed order and the first match wins. Growth-profile checks
(trap, overdraft) run before the price-band checks, so a price that looks
cheap against the bands never overrides a broken growth profile.
'''

import logging
from typing import Optional

from garp.domain.types import ClassificationResult
from garp.domain.types import LabelKind
from garp.domain.types import ScenarioInputs
from garp.domain.types import ValuationScenario
from garp.domain.types import finite_or
from garp.engine.scenarios import compute_scenarios
from garp.policies.risk import ComponentRisk
from garp.policies.risk import DEGENERATE_RISK_SCORES
from garp.policies.risk import RiskPolicy
from garp.scenarios.config import StrategyConfig

logger = logging.getLogger(__name__)

TRAP_MAX_PE = 10.0
TRAP_MAX_GROWTH = 2.0
OVERDRAFT_MIN_PEG = 3.0
OVERDRAFT_MAX_GROWTH = 15.0
ACCUMULATE_BASE_RATIO = 0.95
DISTRESS_MIN_GROWTH = 25.0


def degenerate_label(growth: float) -> LabelKind:
  '''Label for EPS-less names: strong growth reads as a turnaround.'''
  if growth > DISTRESS_MIN_GROWTH:
    return LabelKind.DISTRESS_REVERSAL
  return LabelKind.JUNK


def classify_label(scenario: ValuationScenario, price: float) -> LabelKind:
  '''
  Map a priced scenario and the current price to a conclusion label.

  Args:
    scenario: Output of compute_scenarios()
    price: Current price

  Returns:
    LabelKind, first matching rule wins
  '''
  if scenario.is_degenerate:
    return degenerate_label(scenario.applied_growth)

  pe = scenario.applied_pe
  growth = scenario.applied_growth

  if pe < TRAP_MAX_PE and growth < TRAP_MAX_GROWTH:
    return LabelKind.VALUE_TRAP
  if scenario.peg_ratio > OVERDRAFT_MIN_PEG and growth < OVERDRAFT_MAX_GROWTH:
    return LabelKind.OVERDRAFT
  if price < scenario.bear_price:
    return LabelKind.GOLDEN_STRIKE
  if price < scenario.base_price * ACCUMULATE_BASE_RATIO:
    return LabelKind.ACCUMULATE
  if price > scenario.bull_price:
    return LabelKind.EXUBERANCE
  return LabelKind.FAIR_RANGE


def classify(
    inputs: ScenarioInputs,
    price: float,
    strategy: StrategyConfig,
    risk_policy: Optional[RiskPolicy] = None,
) -> ClassificationResult:
  '''
  Price, score and label one set of inputs.

  Args:
    inputs: Prepared scenario inputs
    price: Current price
    strategy: Strategy passed through to the scenario engine
    risk_policy: Risk policy (default: ComponentRisk())

  Returns:
    ClassificationResult; never raises for finite or missing inputs
  '''
  if risk_policy is None:
    risk_policy = ComponentRisk()

  scenario = compute_scenarios(inputs, strategy)
  label = classify_label(scenario, price)

  if scenario.is_degenerate:
    score = DEGENERATE_RISK_SCORES[label]
  else:
    score = risk_policy.compute(scenario, price,
                               finite_or(inputs.roe, 0.0)).value

  logger.debug('label=%s risk=%.1f bear=%.2f base=%.2f bull=%.2f', label.value,
               score, scenario.bear_price, scenario.base_price,
               scenario.bull_price)
  return ClassificationResult(label=label, risk_score=score, scenario=scenario)
