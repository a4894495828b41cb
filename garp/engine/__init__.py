'''Scenario pricing engine with pure math functions.'''

from garp.engine.scenarios import (
    compute_peg,
    compute_rate_drag,
    compute_scenarios,
    degenerate_scenario,
)

__all__ = [
    'compute_peg',
    'compute_rate_drag',
    'compute_scenarios',
    'degenerate_scenario',
]
