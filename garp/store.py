'''
Signal store: one row per symbol, overwritten on each evaluation.

The stored row is also the only memory the system keeps: its label codes are
read back as the "previous" labels for change detection. Codes are stored
next to display text so alerting does not depend on presentation strings;
rows that only carry display text are still understood.

Percent-unit inputs (growth rates) are written as fractions.
'''

from datetime import datetime, timezone
import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from garp.alerts.notify import symbol_link
from garp.domain.types import DEFAULT_PE
from garp.domain.types import FundamentalSnapshot
from garp.domain.types import LabelKind
from garp.domain.types import SymbolEvaluation
from garp.domain.types import TimingKind
from garp.policies.risk import risk_tier

logger = logging.getLogger(__name__)

# Marks the stress-test conclusion apart from the normal one.
STRESS_LABEL_PREFIX = '🛡️ '

ROW_COLUMNS = [
    'symbol',
    'price',
    'peg',
    'label',
    'label_code',
    'stress_label',
    'stress_label_code',
    'timing',
    'timing_code',
    'risk',
    'bear_price',
    'base_price',
    'bull_price',
    'pe_ttm',
    'eps_growth_5y',
    'revenue_growth_qtr',
    'link',
    'updated_at',
]


def safe_round(value: Any, digits: int = 2) -> float:
  '''Round a number; anything missing or non-finite becomes 0.'''
  if value is None or isinstance(value, bool):
    return 0.0
  try:
    num = float(value)
  except (TypeError, ValueError):
    return 0.0
  if not math.isfinite(num):
    return 0.0
  return round(num, digits)


def build_row(
    evaluation: SymbolEvaluation,
    snapshot: FundamentalSnapshot,
    link: Optional[str] = None,
    updated_at: Optional[str] = None,
) -> Dict[str, Any]:
  '''
  Build the persisted row for one evaluation.

  Args:
    evaluation: Result of evaluate_symbol()
    snapshot: Snapshot the evaluation was computed from
    link: Deep link (default: symbol_link(symbol))
    updated_at: ISO timestamp (default: now, UTC)

  Returns:
    Dictionary keyed by ROW_COLUMNS
  '''
  normal = evaluation.normal
  scenario = normal.scenario
  tier = risk_tier(normal.risk_score)
  if updated_at is None:
    updated_at = datetime.now(timezone.utc).replace(microsecond=0).isoformat()

  return {
      'symbol': evaluation.symbol,
      'price': evaluation.price,
      'peg': safe_round(scenario.peg_ratio),
      'label': normal.label.text,
      'label_code': normal.label.value,
      'stress_label': STRESS_LABEL_PREFIX + evaluation.stressed.label.text,
      'stress_label_code': evaluation.stressed.label.value,
      'timing': evaluation.timing.label.text,
      'timing_code': evaluation.timing.label.value,
      'risk': tier.text if tier else '-',
      'bear_price': safe_round(scenario.bear_price),
      'base_price': safe_round(scenario.base_price),
      'bull_price': safe_round(scenario.bull_price),
      'pe_ttm': safe_round(snapshot.pe_ttm or DEFAULT_PE, 1),
      'eps_growth_5y': safe_round(snapshot.eps_growth_5y) / 100,
      'revenue_growth_qtr':
          safe_round(snapshot.revenue_growth_quarterly_yoy) / 100,
      'link': link or symbol_link(evaluation.symbol),
      'updated_at': updated_at,
  }


class SignalStore:
  '''
  CSV-backed store keyed by symbol.

  Usage:
    store = SignalStore(Path('signals.csv'))
    prev_label, prev_timing = store.previous_labels('AAPL')
    store.upsert(build_row(evaluation, snapshot))
    store.save()
  '''

  def __init__(self, path: Path):
    self.path = path
    self._frame: Optional[pd.DataFrame] = None

  def load(self) -> pd.DataFrame:
    '''Load and cache the stored rows (empty frame if no file yet).'''
    if self._frame is not None:
      return self._frame

    if self.path.exists():
      frame = pd.read_csv(self.path, dtype=str, keep_default_na=False)
      for col in ROW_COLUMNS:
        if col not in frame.columns:
          frame[col] = ''
    else:
      frame = pd.DataFrame(columns=ROW_COLUMNS)

    self._frame = frame
    return frame

  def symbols(self) -> List[str]:
    '''Tracked symbols, in stored order.'''
    frame = self.load()
    return [s for s in frame['symbol'].tolist() if isinstance(s, str) and s]

  def get(self, symbol: str) -> Optional[Dict[str, Any]]:
    frame = self.load()
    matches = frame[frame['symbol'] == symbol]
    if matches.empty:
      return None
    return matches.iloc[-1].to_dict()

  def previous_labels(
      self, symbol: str) -> Tuple[Optional[LabelKind], Optional[TimingKind]]:
    '''
    Last stored valuation and timing labels.

    Codes take precedence; display text is the fallback for legacy rows.
    Unknown or empty values read as None (no history).
    '''
    row = self.get(symbol)
    if row is None:
      return None, None
    label = (LabelKind.parse(row.get('label_code')) or
             LabelKind.parse(row.get('label')))
    timing = (TimingKind.parse(row.get('timing_code')) or
              TimingKind.parse(row.get('timing')))
    return label, timing

  def upsert(self, row: Dict[str, Any]) -> None:
    '''Replace the row for row['symbol'], keeping the symbol's position.'''
    frame = self.load()
    symbol = row['symbol']
    new_row = pd.DataFrame([row], columns=ROW_COLUMNS)

    mask = frame['symbol'] == symbol
    if mask.any():
      position = int(mask.to_numpy().nonzero()[0][0])
      rest = frame[~mask]
      frame = pd.concat(
          [rest.iloc[:position], new_row, rest.iloc[position:]],
          ignore_index=True)
    elif frame.empty:
      frame = new_row
    else:
      frame = pd.concat([frame, new_row], ignore_index=True)

    self._frame = frame

  def save(self) -> None:
    '''Write atomically (temp file, then replace).'''
    frame = self.load()
    self.path.parent.mkdir(parents=True, exist_ok=True)
    tmp = self.path.with_suffix(self.path.suffix + '.tmp')
    frame.to_csv(tmp, index=False)
    tmp.replace(self.path)
    logger.debug('Saved %d rows to %s', len(frame), self.path)
