"""
Tests for TransferNotifier: message building, fire-and-forget dispatch
and best-effort failure handling.
"""

import asyncio
import time
from dataclasses import replace
from unittest.mock import AsyncMock, MagicMock

import pytest

from fowlregistry.domain.ownership.entities import (
    ContactMethod,
    Transfer,
    TransferStatus,
    UserProfile,
)
from fowlregistry.domain.ownership.ports import PushGateway, UserDirectory
from fowlregistry.domain.ownership.transfer_notifier import (
    MAX_SUMMARY_RESULTS,
    TransferNotifier,
    build_messages,
)

TRANSFER = Transfer(
    id="T1",
    fowl_id="F1",
    from_uid="alice",
    to_uid="bob@example.com",
    contact_method=ContactMethod.EMAIL,
    timestamp=1_700_000_000_000,
)

ALICE = UserProfile(uid="alice", fcm_token="alice-device")
BOB = UserProfile(uid="bob", email="bob@example.com", fcm_token="bob-device")


def _users(sender=ALICE, recipient=BOB) -> MagicMock:
    users = MagicMock(spec=UserDirectory)
    users.get.return_value = sender
    users.resolve.return_value = recipient
    return users


def _gateway(**kwargs) -> MagicMock:
    gateway = MagicMock(spec=PushGateway)
    gateway.send_all = AsyncMock(**kwargs)
    return gateway


class TestBuildMessages:
    def test_one_message_per_party(self) -> None:
        messages = build_messages("T1", TransferStatus.VERIFIED, ALICE, BOB)
        assert [m.token for m in messages] == ["alice-device", "bob-device"]
        assert messages[0].body == "Your transfer has been verified"
        assert messages[1].body == "Transfer received has been verified"
        assert all(m.title == "Transfer Update" for m in messages)

    def test_payload_data(self) -> None:
        message = build_messages("T1", TransferStatus.REJECTED, ALICE, None)[0]
        assert message.to_payload()["data"] == {
            "transferId": "T1",
            "status": "REJECTED",
            "type": "transfer_update",
        }

    def test_parties_without_token_are_skipped(self) -> None:
        no_token = UserProfile(uid="bob")
        assert build_messages("T1", TransferStatus.VERIFIED, None, no_token) == []


class TestNotify:
    @pytest.mark.asyncio
    async def test_sends_to_both_parties(self) -> None:
        gateway = _gateway(return_value=2)
        notifier = TransferNotifier(users=_users(), gateway=gateway)

        result = await notifier.notify(TRANSFER, TransferStatus.VERIFIED)

        assert result.success
        assert result.recipients == 2
        sent = gateway.send_all.await_args.args[0]
        assert len(sent) == 2

    @pytest.mark.asyncio
    async def test_gateway_failure_is_swallowed(self) -> None:
        gateway = _gateway(side_effect=RuntimeError("gateway down"))
        notifier = TransferNotifier(users=_users(), gateway=gateway)

        result = await notifier.notify(TRANSFER, TransferStatus.VERIFIED)

        assert not result.success
        assert "gateway down" in result.error
        assert notifier.stats["errors"] == 1

    @pytest.mark.asyncio
    async def test_directory_failure_is_swallowed(self) -> None:
        users = _users()
        users.get.side_effect = RuntimeError("db down")
        notifier = TransferNotifier(users=users, gateway=_gateway(return_value=0))

        result = await notifier.notify(TRANSFER, TransferStatus.REJECTED)
        assert not result.success

    @pytest.mark.asyncio
    async def test_no_tokens_skips_gateway(self) -> None:
        gateway = _gateway(return_value=0)
        notifier = TransferNotifier(users=_users(None, None), gateway=gateway)

        result = await notifier.notify(TRANSFER, TransferStatus.VERIFIED)

        assert result.success
        gateway.send_all.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_directory_lookups_leave_loop_free(self) -> None:
        users = _users()
        users.get.side_effect = lambda uid: time.sleep(0.3) or ALICE
        notifier = TransferNotifier(users=users, gateway=_gateway(return_value=2))
        ticks = 0

        async def ticker() -> None:
            nonlocal ticks
            while True:
                await asyncio.sleep(0.02)
                ticks += 1

        ticking = asyncio.create_task(ticker())
        try:
            result = await notifier.notify(TRANSFER, TransferStatus.VERIFIED)
        finally:
            ticking.cancel()

        assert result.success
        assert ticks >= 5


class TestDispatch:
    @pytest.mark.asyncio
    async def test_dispatch_runs_in_background(self) -> None:
        gateway = _gateway(return_value=2)
        notifier = TransferNotifier(users=_users(), gateway=gateway)

        notifier.dispatch(TRANSFER, TransferStatus.VERIFIED)
        assert notifier.stats["dispatched"] == 1

        await notifier.drain()
        gateway.send_all.assert_awaited_once()
        assert notifier.summary.total_sent == 2
        assert notifier.summary.all_success

    def test_dispatch_requires_running_loop(self) -> None:
        notifier = TransferNotifier(users=_users(), gateway=_gateway())
        with pytest.raises(RuntimeError):
            notifier.dispatch(TRANSFER, TransferStatus.VERIFIED)


class TestSummary:
    @pytest.mark.asyncio
    async def test_default_cap(self) -> None:
        notifier = TransferNotifier(users=_users(), gateway=_gateway(return_value=2))
        for _ in range(MAX_SUMMARY_RESULTS + 10):
            await notifier.notify(TRANSFER, TransferStatus.VERIFIED)
        assert len(notifier.summary.results) == MAX_SUMMARY_RESULTS

    @pytest.mark.asyncio
    async def test_keeps_only_latest_results(self) -> None:
        notifier = TransferNotifier(
            users=_users(), gateway=_gateway(return_value=2), max_results=5
        )
        for n in range(8):
            await notifier.notify(replace(TRANSFER, id=f"T{n}"), TransferStatus.VERIFIED)

        ids = [r.transfer_id for r in notifier.summary.results]
        assert ids == ["T3", "T4", "T5", "T6", "T7"]
        assert notifier.summary.total_sent == 10
