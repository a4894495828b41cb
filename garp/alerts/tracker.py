'''
Change-triggered alert decisions.

Two independent one-bit latches, one for the valuation label and one for
the timing label. An alert fires only on a rising edge: the new label
qualifies and the previously stored label did not. There is no cooldown or
hysteresis; leaving and re-entering a qualifying label re-arms the latch.

Transitions are explicit enum x enum tables, so alerting never depends on
display text.
'''

from collections.abc import Iterable
import logging
from typing import Optional, TypeVar

from garp.domain.types import AlertDecision
from garp.domain.types import LabelKind
from garp.domain.types import TimingKind

logger = logging.getLogger(__name__)

K = TypeVar('K', LabelKind, TimingKind)

VALUATION_TRIGGERS = frozenset({LabelKind.GOLDEN_STRIKE})
TIMING_TRIGGERS = frozenset({TimingKind.RIGHT_SIDE_BREAKOUT})


def _rising_edge_table(
    kinds: Iterable[K],
    triggers: frozenset,
) -> dict[tuple[Optional[K], K], bool]:
  '''Build (previous, new) -> fires for every pair; None is "no history".'''
  members = list(kinds)
  previous: list[Optional[K]] = [None, *members]
  return {(prev, new): new in triggers and prev not in triggers
          for prev in previous
          for new in members}


VALUATION_TRANSITIONS = _rising_edge_table(LabelKind, VALUATION_TRIGGERS)
TIMING_TRANSITIONS = _rising_edge_table(TimingKind, TIMING_TRIGGERS)


def decide_alert(
    previous_label: Optional[LabelKind],
    new_label: LabelKind,
    previous_timing: Optional[TimingKind] = None,
    new_timing: Optional[TimingKind] = None,
) -> AlertDecision:
  '''
  Decide whether a fresh opportunity alert fires.

  The caller owns the previous labels (the last stored row); they are only
  read here.

  Args:
    previous_label: Last stored valuation label (None if never evaluated)
    new_label: Newly computed valuation label
    previous_timing: Last stored timing label
    new_timing: Newly computed timing label (None if not computed)

  Returns:
    AlertDecision; a valuation edge wins over a timing edge for
    reason_label
  '''
  if VALUATION_TRANSITIONS[(previous_label, new_label)]:
    return AlertDecision(should_fire=True, reason_label=new_label)
  if (new_timing is not None and
      TIMING_TRANSITIONS[(previous_timing, new_timing)]):
    return AlertDecision(should_fire=True, reason_label=new_timing)
  return AlertDecision(should_fire=False, reason_label=new_label)
