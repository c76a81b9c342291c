"""
Notification side-channel for newly created documents.

Delivery (email, chat, ...) lives outside this service. `LoggingNotifier`
is the default implementation and only records what would be sent.
"""
import logging
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    async def notify_created(self, collection: str, document: dict[str, Any]) -> None:
        ...


class LoggingNotifier:
    """Notifier that writes a one-line summary to the log."""

    async def notify_created(self, collection: str, document: dict[str, Any]) -> None:
        fields = sorted(k for k in document if k not in ("_id", "createdAt", "updatedAt"))
        logger.info(
            "New %s document %s (fields: %s)",
            collection, document.get("_id"), ", ".join(fields) or "-",
            extra={"collection": collection, "document_id": document.get("_id")},
        )


async def dispatch_created(
    notifier: Notifier, collection: str, document: dict[str, Any]
) -> None:
    """
    Run a notifier as a background task.

    Failures are logged and do not propagate, the response has already been
    sent by the time this runs.
    """
    try:
        await notifier.notify_created(collection, document)
    except Exception:
        logger.exception(
            "Notification for %s document %s failed", collection, document.get("_id"),
            extra={"collection": collection},
        )
