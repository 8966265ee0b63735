"""
Multi-locale creation workflow

Strapi v5 keeps every locale of an entry under one documentId, but its REST API
can only create one locale at a time. A multi-locale entry is therefore built
as a sequence of committing steps:

  FETCH_LOCALES      GET /api/i18n/locales (fresh on every run, never cached)
  RECONCILE_DEFAULT  default locale -> available code, no match is fatal
  RECONCILE_EXTRAS   extra locales  -> available codes, unmatched/duplicates skipped
  CREATE_BASE        POST /api/{type}?locale=<default>
  UPDATE_EACH_LOCALE PUT  /api/{type}/{documentId}?locale=<extra>, one by one
  DONE

Any failure moves to FAILED and raises LocaleWorkflowError. There is no
rollback: the base entry and every locale applied before the failing step stay
in Strapi, and the error's `partial` result lists exactly those.

Updates run strictly in request order, never concurrently: parallel writes to
the same document race on the backend.

With `budget_s` set, every backend call is bounded by what is left of the
run's budget. Running out fails the current step like any other error, so
the caller still gets the committed partial state.
"""

import asyncio
from collections.abc import Awaitable
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Protocol, TypeVar

import structlog

from strapi_tools.i18n.reconciler import (
    EmptyLocalizationDataError,
    LocaleError,
    LocaleVariant,
    parse_locale_codes,
    reconcile_locale,
    reconcile_localizations,
)
from strapi_tools.observability.metrics import LOCALE_WORKFLOW_TOTAL
from strapi_tools.strapi.client import StrapiError

log = structlog.get_logger()

T = TypeVar("T")


class WorkflowState(str, Enum):
    FETCH_LOCALES = "fetch_locales"
    RECONCILE_DEFAULT = "reconcile_default"
    RECONCILE_EXTRAS = "reconcile_extras"
    CREATE_BASE = "create_base"
    UPDATE_EACH_LOCALE = "update_each_locale"
    DONE = "done"
    FAILED = "failed"


class LocaleBackend(Protocol):
    """The subset of StrapiClient the workflow needs"""

    async def get_i18n_locales(self) -> Any: ...

    async def create(
        self,
        content_type: str,
        data: dict[str, Any],
        populate: list[str] | None = None,
        locale: str | None = None,
    ) -> dict[str, Any]: ...

    async def update(
        self,
        content_type: str,
        document_id: str,
        data: dict[str, Any],
        populate: list[str] | None = None,
        locale: str | None = None,
    ) -> dict[str, Any]: ...


@dataclass
class LocalizationOutcome:
    locale: str
    document_id: str
    data: dict[str, Any]


@dataclass
class MultiLocaleResult:
    """Progress of one run; on failure it describes what is committed in Strapi"""

    content_type: str
    requested_default_locale: str
    state: WorkflowState = WorkflowState.FETCH_LOCALES
    failed_state: WorkflowState | None = None
    default_locale: str | None = None
    document_id: str | None = None
    main_entry: dict[str, Any] | None = None
    available_locales: list[str] = field(default_factory=list)
    used_locales: list[str] = field(default_factory=list)
    localizations: list[LocalizationOutcome] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    notices: list[str] = field(default_factory=list)

    @property
    def locales_created(self) -> int:
        return len(self.used_locales)

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["state"] = self.state.value
        payload["failed_state"] = self.failed_state.value if self.failed_state else None
        payload["locales_created"] = self.locales_created
        return payload


class WorkflowBudgetExceeded(Exception):
    """The run's time budget ran out before a backend call answered"""


class LocaleWorkflowError(Exception):
    """Fatal workflow failure; `partial` holds the committed state"""

    def __init__(
        self,
        message: str,
        failed_state: WorkflowState,
        partial: MultiLocaleResult,
        timed_out: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.failed_state = failed_state
        self.partial = partial
        self.timed_out = timed_out


class _Deadline:
    """Remaining share of a run's time budget; unbounded when budget_s is None"""

    def __init__(self, budget_s: float | None):
        self.budget_s = budget_s
        self._ends_at = None if budget_s is None else asyncio.get_running_loop().time() + budget_s

    async def bound(self, call: Awaitable[T], doing: str) -> T:
        if self._ends_at is None:
            return await call
        remaining = max(self._ends_at - asyncio.get_running_loop().time(), 0)
        try:
            return await asyncio.wait_for(call, timeout=remaining)
        except asyncio.TimeoutError as e:
            raise WorkflowBudgetExceeded(
                f"Time budget of {self.budget_s:.1f}s exceeded while {doing}"
            ) from e


class MultiLocaleCreation:
    """Create one entry with several locale variants"""

    def __init__(self, client: LocaleBackend):
        self._client = client

    async def run(
        self,
        content_type: str,
        default_locale: str,
        data: dict[str, Any],
        localizations: list[LocaleVariant] | None = None,
        populate: list[str] | None = None,
        budget_s: float | None = None,
    ) -> MultiLocaleResult:
        progress = MultiLocaleResult(content_type=content_type, requested_default_locale=default_locale)
        deadline = _Deadline(budget_s)
        log.info(
            "multi-locale create started",
            content_type=content_type,
            default_locale=default_locale,
            extra_locales=[v.locale for v in localizations or []],
            budget_s=budget_s,
        )

        try:
            if not data:
                # the default-locale payload is the first thing reconciled
                progress.state = WorkflowState.RECONCILE_DEFAULT
                raise EmptyLocalizationDataError(default_locale)

            # ── FETCH_LOCALES ──
            progress.available_locales = await self._fetch_locales(deadline)

            # ── RECONCILE_DEFAULT ──
            progress.state = WorkflowState.RECONCILE_DEFAULT
            reconciled = reconcile_locale(default_locale, progress.available_locales)
            progress.default_locale = reconciled.locale
            if reconciled.notice:
                progress.notices.append(reconciled.notice)
                log.info("default locale substituted", requested=default_locale, used=reconciled.locale)

            # ── RECONCILE_EXTRAS ──
            progress.state = WorkflowState.RECONCILE_EXTRAS
            batch = reconcile_localizations(
                localizations or [], progress.available_locales, progress.default_locale
            )
            progress.skipped.extend(batch.skipped)
            progress.notices.extend(batch.notices)

            # ── CREATE_BASE ──
            progress.state = WorkflowState.CREATE_BASE
            await self._create_base(progress, data, populate, deadline)

            # ── UPDATE_EACH_LOCALE ──
            progress.state = WorkflowState.UPDATE_EACH_LOCALE
            for step, localization in enumerate(batch.resolved, start=1):
                log.info(
                    "applying locale",
                    step=step,
                    total=len(batch.resolved),
                    locale=localization.locale,
                    document_id=progress.document_id,
                )
                try:
                    response = await deadline.bound(
                        self._client.update(
                            content_type,
                            progress.document_id,
                            localization.data,
                            populate=populate,
                            locale=localization.locale,
                        ),
                        f"applying locale {localization.locale} (Strapi may still apply that write)",
                    )
                except StrapiError as e:
                    raise StrapiError(
                        f"Error creating localization {localization.locale}: {e.message}",
                        status_code=e.status_code,
                        details=e.details,
                    ) from e

                progress.localizations.append(
                    LocalizationOutcome(
                        locale=localization.locale,
                        document_id=progress.document_id,
                        data=response.get("data") or {},
                    )
                )
                progress.used_locales.append(localization.locale)

        except (LocaleError, StrapiError, WorkflowBudgetExceeded) as e:
            failed_state = progress.state
            timed_out = isinstance(e, WorkflowBudgetExceeded)
            progress.failed_state = failed_state
            progress.state = WorkflowState.FAILED
            LOCALE_WORKFLOW_TOTAL.labels(outcome="failed", failed_state=failed_state.value).inc()
            log.error(
                "multi-locale create failed",
                content_type=content_type,
                failed_state=failed_state.value,
                committed_locales=progress.used_locales,
                document_id=progress.document_id,
                timed_out=timed_out,
                error=str(e),
            )
            raise LocaleWorkflowError(str(e), failed_state, progress, timed_out=timed_out) from e

        progress.state = WorkflowState.DONE
        LOCALE_WORKFLOW_TOTAL.labels(outcome="done", failed_state="").inc()
        log.info(
            "multi-locale create finished",
            content_type=content_type,
            document_id=progress.document_id,
            used_locales=progress.used_locales,
            skipped=len(progress.skipped),
        )
        return progress

    async def _fetch_locales(self, deadline: _Deadline) -> list[str]:
        try:
            response = await deadline.bound(self._client.get_i18n_locales(), "fetching available locales")
            codes = parse_locale_codes(response)
        except (StrapiError, LocaleError) as e:
            raise StrapiError(
                f"Error fetching available locales: {e}. "
                "Make sure the i18n plugin is enabled in Strapi."
            ) from e
        log.info("available locales", locales=codes)
        return codes

    async def _create_base(
        self,
        progress: MultiLocaleResult,
        data: dict[str, Any],
        populate: list[str] | None,
        deadline: _Deadline,
    ) -> None:
        try:
            response = await deadline.bound(
                self._client.create(
                    progress.content_type,
                    data,
                    populate=populate,
                    locale=progress.default_locale,
                ),
                f"creating the {progress.default_locale} entry (Strapi may still create it)",
            )
        except StrapiError as e:
            raise StrapiError(
                f"Error creating entry in {progress.default_locale}: {e.message}",
                status_code=e.status_code,
                details=e.details,
            ) from e

        entry = response.get("data") or {}
        document_id = entry.get("documentId") or entry.get("id")
        if not document_id:
            raise StrapiError("Strapi did not return a documentId for the created entry")

        progress.document_id = str(document_id)
        progress.main_entry = entry
        progress.used_locales.append(progress.default_locale)
        log.info("base entry created", document_id=progress.document_id, locale=progress.default_locale)
