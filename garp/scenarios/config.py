"""
Strategy configuration for the scenario engine.

StrategyConfig is an immutable, JSON-friendly value that carries every
multiplier and threshold the scenario engine uses. It is passed in at call
time; nothing in the engine reads a module-level strategy.
"""

from dataclasses import asdict
from dataclasses import dataclass
import json
from typing import Any


@dataclass(frozen=True)
class StrategyConfig:
  """
  Multipliers and thresholds for bear/base/bull pricing.

  Growth-like fields are in percent units.

  Attributes:
    name: Registry key (e.g., 'moderate')
    display_name: Human-readable name
    bull_mult: Multiple expansion for the bull case
    bear_disc: Multiple discount for the bear case
    base_peg_limit: PEG regarded as fair for the base case (informational)
    apply_rate_drag: Whether high rates compress the multiple
    growth_cap: Upper bound on growth used for pricing
    low_growth: Growth below which a rich multiple is capped
    low_growth_pe_trigger: Multiple above which the cap applies
    low_growth_pe_cap: Multiple used once the cap applies
    acceleration_gap: Quarterly EPS growth excess over long-run growth
      that counts as acceleration
    acceleration_bull_bonus: Added to bull_mult on acceleration
    acceleration_growth_factor: Share of quarterly growth credited on
      acceleration
    drag_threshold: PE x risk-free rate above which drag applies
    drag_floor: Lowest allowed drag factor
    quality_roe: ROE above which the bear discount is relaxed
    quality_bear_uplift: Added to bear_disc for quality names
  """
  name: str = 'moderate'
  display_name: str = 'Moderate (GARP)'
  bull_mult: float = 1.2
  bear_disc: float = 0.8
  base_peg_limit: float = 1.8
  apply_rate_drag: bool = True
  growth_cap: float = 50.0
  low_growth: float = 5.0
  low_growth_pe_trigger: float = 15.0
  low_growth_pe_cap: float = 12.0
  acceleration_gap: float = 15.0
  acceleration_bull_bonus: float = 0.3
  acceleration_growth_factor: float = 0.8
  drag_threshold: float = 100.0
  drag_floor: float = 0.75
  quality_roe: float = 25.0
  quality_bear_uplift: float = 0.15

  @classmethod
  def moderate(cls) -> 'StrategyConfig':
    """Growth at a reasonable price; the default strategy."""
    return cls()

  @classmethod
  def conservative(cls) -> 'StrategyConfig':
    """Narrower upside, deeper bear discount, stricter PEG."""
    return cls(
        name='conservative',
        display_name='Conservative (value)',
        bull_mult=1.1,
        bear_disc=0.7,
        base_peg_limit=1.2,
        drag_floor=0.7,
    )

  @classmethod
  def aggressive(cls) -> 'StrategyConfig':
    """Wider upside and shallower bear discount; no rate drag."""
    return cls(
        name='aggressive',
        display_name='Aggressive (growth)',
        bull_mult=1.4,
        bear_disc=0.85,
        base_peg_limit=2.5,
        apply_rate_drag=False,
    )

  def to_dict(self) -> dict[str, Any]:
    """Convert to dictionary."""
    return asdict(self)

  def to_json(self) -> str:
    """Serialize to JSON string."""
    return json.dumps(self.to_dict(), indent=2)

  @classmethod
  def from_dict(cls, data: dict[str, Any]) -> 'StrategyConfig':
    """Create from dictionary."""
    return cls(**data)

  @classmethod
  def from_json(cls, json_str: str) -> 'StrategyConfig':
    """Create from JSON string."""
    return cls.from_dict(json.loads(json_str))
