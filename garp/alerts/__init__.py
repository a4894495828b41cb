"""Alert decisions and webhook delivery."""

from garp.alerts.notify import build_alert_card
from garp.alerts.notify import send_alert
from garp.alerts.notify import symbol_link
from garp.alerts.tracker import decide_alert

__all__ = [
    'build_alert_card',
    'decide_alert',
    'send_alert',
    'symbol_link',
]
