"""
Webhook alert delivery.

Builds an interactive card for a group-chat bot webhook and posts it.
Delivery is best-effort: failures are logged and reported as False, never
raised, so a broken webhook cannot fail an evaluation.
"""

import logging
from typing import Any, Dict, Optional, Union
from urllib.parse import quote_plus

import requests

from garp.domain.types import LabelKind
from garp.domain.types import TimingKind

logger = logging.getLogger(__name__)

DEEP_LINK_TEMPLATE = 'https://www.google.com/search?q={symbol}+stock'
DEFAULT_TIMEOUT_SEC = 10


def symbol_link(symbol: str, template: str = DEEP_LINK_TEMPLATE) -> str:
  """Deep link for a symbol."""
  return template.format(symbol=quote_plus(symbol))


def build_alert_card(
    symbol: str,
    price: float,
    signal: Union[LabelKind, TimingKind],
    detail: str,
    link: Optional[str] = None,
) -> Dict[str, Any]:
  """
  Build the interactive card payload.

  Args:
    symbol: Ticker symbol
    price: Current price
    signal: Label that fired
    detail: Full conclusion and timing text
    link: Button URL (default: symbol_link(symbol))

  Returns:
    JSON-serializable card message
  """
  color = 'green' if signal is LabelKind.GOLDEN_STRIKE else 'blue'
  body = (f'**Price:** ${price:.2f}\n'
          f'**Signal:** {signal.text}\n'
          f'**Detail:** {detail}')
  return {
      'msg_type': 'interactive',
      'card': {
          'config': {'wide_screen_mode': True},
          'header': {
              'title': {
                  'tag': 'plain_text',
                  'content': f'🚨 Opportunity alert: {symbol}',
              },
              'template': color,
          },
          'elements': [
              {
                  'tag': 'div',
                  'text': {'tag': 'lark_md', 'content': body},
              },
              {
                  'tag': 'action',
                  'actions': [{
                      'tag': 'button',
                      'text': {'tag': 'plain_text', 'content': 'Details'},
                      'url': link or symbol_link(symbol),
                      'type': 'primary',
                  }],
              },
          ],
      },
  }


def send_alert(
    webhook_url: Optional[str],
    payload: Dict[str, Any],
    session: Optional[requests.Session] = None,
    timeout_sec: int = DEFAULT_TIMEOUT_SEC,
) -> bool:
  """
  Post a card to the webhook.

  Returns:
    True if the webhook accepted the message, False otherwise (including
    when no webhook is configured)
  """
  if not webhook_url:
    logger.debug('No webhook configured, skipping alert')
    return False

  poster = session or requests
  try:
    resp = poster.post(webhook_url, json=payload, timeout=timeout_sec)
    resp.raise_for_status()
  except requests.RequestException as e:
    logger.warning('Failed to send alert: %s', e)
    return False

  try:
    result = resp.json()
  except ValueError:
    result = {}
  code = result.get('code', 0) if isinstance(result, dict) else 0
  if code != 0:
    logger.warning('Webhook rejected alert: %s', result)
    return False
  return True
