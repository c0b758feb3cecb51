"""User-facing notifications for booking events.

Sinks are fire-and-forget from the caller's point of view: the lifecycle
manager awaits ``notify`` but never inspects a return value.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Protocol

import httpx

from labhub.config import Settings
from labhub.core.exceptions import NotificationError

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Notification:
    kind: NotificationKind
    title: str
    message: str
    context: dict[str, Any] = field(default_factory=dict)
    sent_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class NotificationSink(Protocol):
    async def notify(
        self,
        kind: NotificationKind,
        title: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None: ...


class LoggingNotificationSink:
    """Writes notifications to the ``labhub.notifications`` logger."""

    def __init__(self, logger_name: str = "labhub.notifications") -> None:
        self.logger = logging.getLogger(logger_name)

    async def notify(
        self,
        kind: NotificationKind,
        title: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        level = logging.INFO if kind == NotificationKind.SUCCESS else logging.WARNING
        self.logger.log(level, f"{title}: {message}", extra={"notification": context or {}})


class RecordingNotificationSink:
    """Keeps every notification in memory."""

    def __init__(self) -> None:
        self.sent: list[Notification] = []

    async def notify(
        self,
        kind: NotificationKind,
        title: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.sent.append(Notification(kind, title, message, dict(context or {})))

    def of_kind(self, kind: NotificationKind) -> list[Notification]:
        return [n for n in self.sent if n.kind == kind]


class WebhookNotificationSink:
    """POSTs notifications as JSON to an external endpoint."""

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._http_client = client

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Lazy-load HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()

    async def notify(
        self,
        kind: NotificationKind,
        title: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        payload = {
            "kind": kind.value,
            "title": title,
            "message": message,
            "context": context or {},
            "sent_at": datetime.now(UTC).isoformat(),
        }
        try:
            response = await self.http_client.post(self.url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Notification webhook failed: {e}")
            raise NotificationError(f"Notification webhook failed: {e}") from e


def build_notification_sink(settings: Settings) -> NotificationSink:
    """Pick the webhook sink when configured, logging otherwise."""
    if settings.notification_webhook_url:
        return WebhookNotificationSink(
            settings.notification_webhook_url,
            timeout=settings.notification_timeout_seconds,
        )
    return LoggingNotificationSink()
