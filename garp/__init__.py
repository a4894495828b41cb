'''
GARP signal engine with a policy-based architecture.

This package classifies a security from a fundamentals/quote snapshot:
growth estimation, bear/base/bull scenario pricing, a composite risk score,
a valuation label, a timing signal, and a change-triggered alert decision.
Each piece is an independent policy or pure function that can be swapped or
compared.

Usage:
  from garp.domain.types import FundamentalSnapshot
  from garp.run import evaluate_symbol
  from garp.scenarios.registry import get_strategy

  snapshot = FundamentalSnapshot(symbol='ACME', current_price=90.0,
                                 eps_ttm=5.0, pe_ttm=20.0, eps_growth_5y=8.0,
                                 eps_growth_ttm_yoy=6.0)
  result = evaluate_symbol(snapshot, strategy=get_strategy('moderate'))
'''
