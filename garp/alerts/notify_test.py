from unittest import mock

import requests

from garp.alerts.notify import build_alert_card
from garp.alerts.notify import send_alert
from garp.alerts.notify import symbol_link
from garp.domain.types import LabelKind
from garp.domain.types import TimingKind

WEBHOOK = 'https://open.feishu.cn/open-apis/bot/v2/hook/test'


def _session(json_body=None, status_error=None, post_error=None):
  session = mock.Mock()
  resp = mock.Mock()
  resp.json.return_value = {'code': 0} if json_body is None else json_body
  if status_error is not None:
    resp.raise_for_status.side_effect = status_error
  session.post.return_value = resp
  if post_error is not None:
    session.post.side_effect = post_error
  return session


class TestBuildAlertCard:

  def test_valuation_card(self):
    card = build_alert_card('ACME', 81.5, LabelKind.GOLDEN_STRIKE,
                            'detail text', 'https://example.com/acme')

    assert card['msg_type'] == 'interactive'
    header = card['card']['header']
    assert header['title']['content'] == '🚨 Opportunity alert: ACME'
    assert header['template'] == 'green'
    body = card['card']['elements'][0]['text']['content']
    assert '**Price:** $81.50' in body
    assert LabelKind.GOLDEN_STRIKE.text in body
    assert 'detail text' in body
    button = card['card']['elements'][1]['actions'][0]
    assert button['url'] == 'https://example.com/acme'

  def test_timing_card(self):
    card = build_alert_card('ACME', 10.0, TimingKind.RIGHT_SIDE_BREAKOUT, '')

    assert card['card']['header']['template'] == 'blue'
    button = card['card']['elements'][1]['actions'][0]
    assert button['url'] == symbol_link('ACME')

  def test_symbol_link_quotes(self):
    assert symbol_link('BRK B') == 'https://www.google.com/search?q=BRK+B+stock'


class TestSendAlert:

  def test_no_webhook(self):
    session = _session()

    assert send_alert('', {'msg_type': 'text'}, session=session) is False
    session.post.assert_not_called()

  def test_success(self):
    session = _session()
    payload = {'msg_type': 'text'}

    assert send_alert(WEBHOOK, payload, session=session) is True
    session.post.assert_called_once_with(WEBHOOK, json=payload, timeout=10)

  def test_rejected_by_webhook(self):
    session = _session(json_body={'code': 19001, 'msg': 'param invalid'})
    assert send_alert(WEBHOOK, {}, session=session) is False

  def test_http_error(self):
    session = _session(status_error=requests.HTTPError('500'))
    assert send_alert(WEBHOOK, {}, session=session) is False

  def test_transport_error(self):
    session = _session(post_error=requests.ConnectionError('down'))
    assert send_alert(WEBHOOK, {}, session=session) is False

  def test_non_json_body_counts_as_accepted(self):
    session = _session()
    session.post.return_value.json.side_effect = ValueError('no json')
    assert send_alert(WEBHOOK, {}, session=session) is True
