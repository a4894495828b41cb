"""
Quote and fundamentals loader.

Fetches the quote and the metric payload for one symbol from Finnhub and
turns them into a FundamentalSnapshot. The engine is never called with
partial data: a symbol without a price or metric payload yields None and the
caller skips it.

Usage:
  client = FinnhubClient(api_key=os.environ['FINNHUB_KEY'])
  limiter = RateLimiter(min_interval_sec=0.8)
  for symbol in symbols:
    limiter.wait()
    snapshot = client.fetch_snapshot(symbol)
"""

import logging
import time
from typing import Any, Dict, Optional

import requests

from garp.domain.types import DEFAULT_RISK_FREE_RATE
from garp.domain.types import FundamentalSnapshot
from garp.domain.types import to_finite

logger = logging.getLogger(__name__)

FINNHUB_BASE_URL = 'https://finnhub.io/api/v1'


class RateLimiter:
  '''Simple min-interval rate limiter.'''

  def __init__(self, min_interval_sec: float) -> None:
    self._min_interval = float(min_interval_sec)
    self._last = 0.0

  def wait(self) -> None:
    now = time.time()
    sleep_for = self._min_interval - (now - self._last)
    if sleep_for > 0:
      time.sleep(sleep_for)
    self._last = time.time()


def is_supported_symbol(symbol: str) -> bool:
  """US listings only: no exchange suffix other than '.US'."""
  sym = symbol.strip().upper()
  if not sym:
    return False
  return '.' not in sym or sym.endswith('.US')


def fetch_json(
    session: requests.Session,
    url: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    timeout_sec: int = 30,
    retries: int = 3,
    backoff_sec: float = 1.0,
) -> Any:
  """
  GET a JSON document with retries and exponential backoff.

  Raises:
    requests.HTTPError: For HTTP status >= 400 on the last attempt
    requests.RequestException: For transport errors on the last attempt
    RuntimeError: If retries < 1
  """
  last_err: Optional[Exception] = None
  for attempt in range(retries):
    try:
      resp = session.get(url, params=params, timeout=timeout_sec)
      status = int(resp.status_code)
      if status >= 400:
        raise requests.HTTPError(f'HTTP {status} for {url}: {resp.text[:200]}')
      return resp.json()
    except (requests.RequestException, ValueError) as e:
      last_err = e
      if attempt < retries - 1:
        logger.debug('Retrying %s after error: %s', url, e)
        time.sleep(backoff_sec * (2**attempt))
  if last_err is None:
    raise RuntimeError(f'No attempts made for {url} (retries={retries})')
  raise last_err


class FinnhubClient:
  """
  Finnhub quote and metric client.

  Attributes:
    api_key: Finnhub token
    risk_free_rate: Risk-free rate written into every snapshot
  """

  def __init__(
      self,
      api_key: str,
      session: Optional[requests.Session] = None,
      base_url: str = FINNHUB_BASE_URL,
      risk_free_rate: float = DEFAULT_RISK_FREE_RATE,
      timeout_sec: int = 30,
      retries: int = 3,
      backoff_sec: float = 1.0,
  ):
    self.api_key = api_key
    self.session = session or requests.Session()
    self.base_url = base_url.rstrip('/')
    self.risk_free_rate = risk_free_rate
    self.timeout_sec = timeout_sec
    self.retries = retries
    self.backoff_sec = backoff_sec

  def _get(self, path: str, **params: Any) -> Any:
    params['token'] = self.api_key
    return fetch_json(self.session,
                      f'{self.base_url}/{path}',
                      params=params,
                      timeout_sec=self.timeout_sec,
                      retries=self.retries,
                      backoff_sec=self.backoff_sec)

  def fetch_quote(self, symbol: str) -> Dict[str, Any]:
    """Raw quote document ('c' is the current price)."""
    data = self._get('quote', symbol=symbol)
    return data if isinstance(data, dict) else {}

  def fetch_metrics(self, symbol: str) -> Dict[str, Any]:
    """Raw 'metric' mapping of the basic-financials document."""
    data = self._get('stock/metric', symbol=symbol, metric='all')
    if not isinstance(data, dict):
      return {}
    metric = data.get('metric')
    return metric if isinstance(metric, dict) else {}

  def fetch_snapshot(self, symbol: str) -> Optional[FundamentalSnapshot]:
    """
    Fetch a complete snapshot.

    Returns:
      FundamentalSnapshot, or None if the quote has no price or the metric
      payload is empty
    """
    quote = self.fetch_quote(symbol)
    metric = self.fetch_metrics(symbol)

    price = to_finite(quote.get('c'))
    if not price or not metric:
      logger.info('%s: no price or metrics, skipping', symbol)
      return None

    return FundamentalSnapshot.from_metrics(symbol, metric, price,
                                            self.risk_free_rate)
