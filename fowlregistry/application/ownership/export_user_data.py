"""
Use case: Export everything stored about the caller.

Input: caller uid
Output: UserDataExport (profile, owned fowls, sent and received
    transfers, vaccination events of the owned fowls)
Side effects: Buffers a user_data_exported analytics event.
Failure cases: UnauthenticatedError; any storage failure surfaces as
    UserDataExportError.

Transfers are listed, never removed: the registry keeps no delete
counterpart to this export.
"""

import logging
from typing import Optional

from fowlregistry.application.analytics import AnalyticsRecorder
from fowlregistry.application.ownership.dtos import UserDataExport
from fowlregistry.application.ownership.get_transfer import to_result
from fowlregistry.domain.breeding.ports import VaccinationRepository
from fowlregistry.domain.errors import DomainError, UnauthenticatedError
from fowlregistry.domain.ownership.entities import UserProfile, now_millis
from fowlregistry.domain.ownership.errors import UserDataExportError
from fowlregistry.domain.ownership.ownership_service import compact_phone
from fowlregistry.domain.ownership.ports import (
    OwnershipStore,
    TransferRepository,
    UserDirectory,
)

logger = logging.getLogger(__name__)


def recipient_keys(uid: str, profile: Optional[UserProfile]) -> list[str]:
    """Every form a transfer may have used to address this account."""
    keys = [uid]
    if profile is not None:
        if profile.email:
            keys.append(profile.email.strip().lower())
        if profile.phone:
            keys.append(compact_phone(profile.phone))
    return list(dict.fromkeys(keys))


class ExportUserDataUseCase:
    def __init__(
        self,
        users: UserDirectory,
        ownership_store: OwnershipStore,
        transfer_repo: TransferRepository,
        vaccinations: VaccinationRepository,
        analytics: AnalyticsRecorder,
    ) -> None:
        self._users = users
        self._ownership_store = ownership_store
        self._transfer_repo = transfer_repo
        self._vaccinations = vaccinations
        self._analytics = analytics

    def execute(self, caller_uid: Optional[str]) -> UserDataExport:
        if not caller_uid:
            raise UnauthenticatedError()

        try:
            export = self._collect(caller_uid)
        except DomainError:
            raise
        except Exception as exc:
            logger.exception("User data export failed for uid=%s", caller_uid)
            raise UserDataExportError(caller_uid) from exc

        logger.info(
            "Exported user data for uid=%s records=%d",
            caller_uid,
            export.record_count,
        )
        self._analytics.record(
            "user_data_exported",
            {"userId": caller_uid, "recordCount": export.record_count},
        )
        return export

    def _collect(self, uid: str) -> UserDataExport:
        profile = self._users.get(uid)
        fowls = self._ownership_store.list_owned(uid)
        sent = self._transfer_repo.list_sent(uid)
        received = self._transfer_repo.list_received(recipient_keys(uid, profile))
        events = self._vaccinations.list_for_fowls([fowl.id for fowl in fowls])
        return UserDataExport(
            uid=uid,
            exported_at=now_millis(),
            profile=profile,
            fowls=fowls,
            transfers_sent=[to_result(t) for t in sent],
            transfers_received=[to_result(t) for t in received],
            vaccination_events=events,
        )
