"""
View-model for the transfer initiation screen.

States: Idle → Submitting → Created(transfer_id) | Failed(message)
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Union

from fowlregistry.application.ownership.create_transfer import CreateTransferUseCase
from fowlregistry.application.ownership.dtos import CreateTransferCommand
from fowlregistry.interfaces.viewmodels.state import StateHolder

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Could not start transfer"


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Submitting:
    pass


@dataclass(frozen=True)
class Created:
    transfer_id: str


@dataclass(frozen=True)
class Failed:
    message: str


TransferState = Union[Idle, Submitting, Created, Failed]


class TransferInitiationViewModel:
    def __init__(self, create_transfer: CreateTransferUseCase, caller_uid: Optional[str]) -> None:
        self._create_transfer = create_transfer
        self._caller_uid = caller_uid
        self.state: StateHolder[TransferState] = StateHolder(Idle())

    async def initiate_transfer(
        self, fowl_id: str, recipient_identifier: str, contact_method: str
    ) -> None:
        """Start a transfer; the outcome lands in self.state."""
        if isinstance(self.state.value, Submitting):
            return
        self.state.set(Submitting())
        command = CreateTransferCommand(
            caller_uid=self._caller_uid,
            fowl_id=fowl_id,
            recipient_identifier=recipient_identifier,
            contact_method=contact_method,
        )
        try:
            result = await asyncio.to_thread(self._create_transfer.execute, command)
        except Exception as exc:
            logger.warning("Transfer initiation failed: %s", exc)
            self.state.set(Failed(GENERIC_FAILURE))
            return
        self.state.set(Created(result.transfer_id))

    def reset(self) -> None:
        self.state.set(Idle())
