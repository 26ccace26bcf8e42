from __future__ import annotations
import json, logging
from typing import Any, Protocol
import requests

from .errors import NotificationError

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def send(self, data: Any) -> None: ...


def _json(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False, default=str)


class SlackNotifier:
    """Posts outcome messages to a Slack incoming webhook as inline code."""

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.s = requests.Session()

    def build_payload(self, data: Any) -> dict:
        return {"type": "mrkdwn", "text": "`" + _json(data) + "`"}

    def send(self, data: Any) -> None:
        if not self.webhook_url:
            raise NotificationError("Slack webhook URL is not configured")
        try:
            resp = self.s.post(
                self.webhook_url,
                json=self.build_payload(data),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise NotificationError(f"Slack webhook unreachable: {e}") from e
        if resp.status_code >= 300:
            raise NotificationError(f"Slack webhook HTTP {resp.status_code}: {resp.text[:200]}")


def notify_safely(notifier: Notifier, data: Any) -> bool:
    """Send and forget: a failed delivery is logged and reported as False."""
    try:
        notifier.send(data)
    except Exception as e:
        logger.warning("Notification not delivered: %s", e)
        return False
    return True
