"""
Transfer update notification dispatcher.

Tells both parties of a transfer about its final status through the
push gateway. Delivery is best-effort: nothing raised here ever reaches
the verification call.

Architecture:
    VerifyTransferUseCase  ──▶  TransferNotifier.dispatch()   (returns at once)
                                        │
                                  background task
                                        │
                            UserDirectory ─▶ PushGateway.send_all()

Usage:
    notifier = TransferNotifier(users=directory, gateway=gateway)
    notifier.dispatch(transfer, TransferStatus.VERIFIED)
    ...
    await notifier.drain()   # on shutdown or in tests
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Optional

from fowlregistry.domain.ownership.entities import (
    PushMessage,
    Transfer,
    TransferStatus,
    UserProfile,
)
from fowlregistry.domain.ownership.ports import PushGateway, UserDirectory

logger = logging.getLogger(__name__)

NOTIFICATION_TITLE = "Transfer Update"
NOTIFICATION_TYPE = "transfer_update"
MAX_SUMMARY_RESULTS = 200


@dataclass
class NotificationResult:
    """Result of one notification dispatch."""

    transfer_id: str
    status: str
    success: bool
    recipients: int = 0
    error: str | None = None
    latency_ms: float = 0.0


@dataclass
class NotificationSummary:
    """The most recent dispatch results, oldest first."""

    results: list[NotificationResult] = field(default_factory=list)

    @property
    def total_sent(self) -> int:
        return sum(r.recipients for r in self.results if r.success)

    @property
    def all_success(self) -> bool:
        return all(r.success for r in self.results)


def build_messages(
    transfer_id: str,
    status: TransferStatus,
    sender: Optional[UserProfile],
    recipient: Optional[UserProfile],
) -> list[PushMessage]:
    """Build one push message per party that has a device token."""
    data = {
        "transferId": transfer_id,
        "status": status.value,
        "type": NOTIFICATION_TYPE,
    }
    label = status.value.lower()
    messages = []
    if sender is not None and sender.fcm_token:
        messages.append(
            PushMessage(
                token=sender.fcm_token,
                title=NOTIFICATION_TITLE,
                body=f"Your transfer has been {label}",
                data=data,
            )
        )
    if recipient is not None and recipient.fcm_token:
        messages.append(
            PushMessage(
                token=recipient.fcm_token,
                title=NOTIFICATION_TITLE,
                body=f"Transfer received has been {label}",
                data=data,
            )
        )
    return messages


class TransferNotifier:
    """Fire-and-forget push notifications for transfer status changes.

    Args:
        users: Directory used to look up each party's device token.
        gateway: Push gateway that delivers the messages.
        max_results: How many results the summary keeps.
    """

    def __init__(
        self,
        users: UserDirectory,
        gateway: PushGateway,
        max_results: int = MAX_SUMMARY_RESULTS,
    ) -> None:
        self._users = users
        self._gateway = gateway
        self._max_results = max_results
        self._background_tasks: set[asyncio.Task] = set()  # prevent GC
        self._summary = NotificationSummary()
        self._stats = {
            "dispatched": 0,
            "messages_sent": 0,
            "errors": 0,
        }

    @property
    def stats(self) -> dict:
        return dict(self._stats)

    @property
    def summary(self) -> NotificationSummary:
        return self._summary

    def dispatch(self, transfer: Transfer, status: TransferStatus) -> None:
        """Schedule notify() on the running loop without waiting for it.

        Must be called from inside a running event loop.
        """
        self._stats["dispatched"] += 1
        task = asyncio.get_running_loop().create_task(self.notify(transfer, status))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def drain(self) -> None:
        """Wait for every dispatched notification to finish."""
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)

    async def notify(
        self, transfer: Transfer, status: TransferStatus
    ) -> NotificationResult:
        """Send the status update to both parties. Never raises."""
        start = time.monotonic()
        try:
            sender = await asyncio.to_thread(self._users.get, transfer.from_uid)
            recipient = await asyncio.to_thread(
                self._users.resolve, transfer.to_uid, transfer.contact_method
            )
            messages = build_messages(transfer.id, status, sender, recipient)

            sent = 0
            if messages:
                sent = await self._gateway.send_all(messages)

            self._stats["messages_sent"] += sent
            result = NotificationResult(
                transfer_id=transfer.id,
                status=status.value,
                success=True,
                recipients=sent,
                latency_ms=round((time.monotonic() - start) * 1000, 2),
            )
        except Exception as exc:
            self._stats["errors"] += 1
            logger.error(
                "Error sending notifications for transfer=%s: %s", transfer.id, exc
            )
            result = NotificationResult(
                transfer_id=transfer.id,
                status=status.value,
                success=False,
                error=str(exc),
                latency_ms=round((time.monotonic() - start) * 1000, 2),
            )

        self._record(result)
        return result

    def _record(self, result: NotificationResult) -> None:
        results = self._summary.results
        results.append(result)
        if len(results) > self._max_results:
            del results[: len(results) - self._max_results]
