"""One synchronization cycle: login, fetch, map, reconcile.

:meth:`SyncEngine.run_once` runs the stages strictly in sequence.  A
failing stage aborts the rest of the cycle; the failure is logged with
the account email and stage, reported to the status sink, and returned
as a :class:`CycleResult`.  The next scheduled cycle is the retry.
"""

from __future__ import annotations

import json
import logging
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from pyoilfox._constants import InstanceStatus
from pyoilfox._redact import redact_for_log
from pyoilfox.client import OilFoxClient
from pyoilfox.exceptions import (
    OilFoxAuthenticationError,
    OilFoxError,
    OilFoxFormatError,
    OilFoxSinkError,
    OilFoxTransportError,
)
from pyoilfox.ingestion.summary import normalize_summary
from pyoilfox.session import SessionManager
from pyoilfox.state.reconcile import Reconciler
from pyoilfox.state.sink import NamedValueSink, StatusSink, TokenStore

_logger = logging.getLogger(__name__)


class CycleStage(StrEnum):
    CONFIG = "config"
    LOGIN = "login"
    FETCH = "fetch"
    MAP = "map"
    RECONCILE = "reconcile"
    DONE = "done"


class CycleOutcome(StrEnum):
    OK = "ok"
    SKIPPED = "skipped"
    AUTH_FAILED = "auth_failed"
    CONNECTION_FAILED = "connection_failed"
    INVALID_RESPONSE = "invalid_response"
    STORAGE_FAILED = "storage_failed"


# Ordered most specific first.
_FAILURES: tuple[tuple[type[OilFoxError], CycleOutcome, InstanceStatus], ...] = (
    (OilFoxAuthenticationError, CycleOutcome.AUTH_FAILED, InstanceStatus.INVALID_CREDENTIALS),
    (OilFoxTransportError, CycleOutcome.CONNECTION_FAILED, InstanceStatus.CONNECTION_FAILED),
    (OilFoxFormatError, CycleOutcome.INVALID_RESPONSE, InstanceStatus.INVALID_RESPONSE),
    (OilFoxSinkError, CycleOutcome.STORAGE_FAILED, InstanceStatus.STORAGE_FAILED),
)


class CycleResult(BaseModel):
    """Typed outcome of :meth:`SyncEngine.run_once`."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    outcome: CycleOutcome
    stage: CycleStage
    """Last stage entered; the failing stage when ``ok`` is false."""
    device_ids: list[str] = Field(default_factory=list)
    """Devices reconciled, in record order."""
    values_written: int = 0
    status: InstanceStatus | None = None
    error: OilFoxError | None = Field(default=None, exclude=True)

    @property
    def ok(self) -> bool:
        return self.outcome in (CycleOutcome.OK, CycleOutcome.SKIPPED)


class SyncEngine:
    """Run poll cycles for one account.

    The engine does not guard against concurrent calls; the owner (see
    :mod:`pyoilfox.driver`) must not overlap cycles.
    """

    def __init__(
        self,
        client: OilFoxClient,
        *,
        token_store: TokenStore,
        sink: NamedValueSink,
        status: StatusSink,
    ) -> None:
        self._client = client
        self._config = client.config
        self._token_store = token_store
        self._status = status
        self._reconciler = Reconciler(
            sink,
            parent_scope=self._config.parent_scope,
            schema_version=self._config.schema_version,
        )

    async def run_once(self) -> CycleResult:
        credentials = self._config.credentials
        if not credentials.is_complete:
            _logger.debug("Email or password not configured; skipping poll cycle")
            return CycleResult(outcome=CycleOutcome.SKIPPED, stage=CycleStage.CONFIG)

        stage = CycleStage.LOGIN
        try:
            session = SessionManager(self._client.transport, credentials, self._token_store)
            token = await session.ensure_token(force=True)
            self._status.set_status(InstanceStatus.ACTIVE)

            stage = CycleStage.FETCH
            raw = await self._client.get_summary(token)

            stage = CycleStage.MAP
            records = normalize_summary(raw, self._config.schema_version)
            if _logger.isEnabledFor(logging.DEBUG):
                payload = {record.device_id: record.model_dump(by_alias=True, exclude_unset=True) for record in records}
                _logger.debug("OilFox data: %s", json.dumps(redact_for_log(payload)))

            stage = CycleStage.RECONCILE
            result = self._reconciler.apply(records)
        except OilFoxError as exc:
            return self._fail(stage, exc)

        _logger.info(
            "Synchronized %d device(s) for %s (%d values)",
            len(result.groups),
            credentials.email,
            result.values_written,
        )
        return CycleResult(
            outcome=CycleOutcome.OK,
            stage=CycleStage.DONE,
            device_ids=list(result.groups),
            values_written=result.values_written,
            status=InstanceStatus.ACTIVE,
        )

    def _fail(self, stage: CycleStage, exc: OilFoxError) -> CycleResult:
        outcome, code = CycleOutcome.INVALID_RESPONSE, InstanceStatus.INVALID_RESPONSE
        for exc_type, failure_outcome, failure_code in _FAILURES:
            if isinstance(exc, exc_type):
                outcome, code = failure_outcome, failure_code
                break

        email = self._config.email
        if outcome == CycleOutcome.AUTH_FAILED:
            _logger.error("The email address or password of the OilFox account %s is invalid: %s", email, exc)
        else:
            _logger.error("OilFox poll cycle for %s aborted during %s: %s", email, stage.value, exc)

        self._status.set_status(code)
        return CycleResult(outcome=outcome, stage=stage, status=code, error=exc)
