"""
Locale reconciliation: adapt requested locale codes to the locales Strapi has

Single locale (reconcile_locale):
1. exact match          -> requested code unchanged
2. same base language   -> first available code whose base equals requested base
                           ("es-ES" -> "es", "en" -> "en-GB")
3. otherwise            -> LocaleNotAvailableError listing what is available

Batch (reconcile_localizations), for the extra locales of a multi-locale create:
- no match                      -> skipped with a warning, batch continues
- resolves to the default       -> skipped
- resolves to an earlier extra  -> skipped
- empty data payload            -> EmptyLocalizationDataError (caller mistake)

Never returns a code that is not in the available set.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog

log = structlog.get_logger()


# ── Errors ──

class LocaleError(Exception):
    """Base class for locale resolution failures"""


class LocalesUnavailableError(LocaleError):
    """The available locales could not be determined"""


class LocaleNotAvailableError(LocaleError):
    """No available locale matches the requested one"""

    def __init__(self, requested: str, available: Sequence[str]):
        self.requested = requested
        self.available = list(available)
        super().__init__(
            f"Locale {requested} is not available. "
            f"Available locales: {', '.join(self.available) or '(none)'}"
        )


class EmptyLocalizationDataError(LocaleError):
    """An extra locale was requested without any data"""

    def __init__(self, locale: str):
        self.locale = locale
        super().__init__(f"Data for locale {locale} cannot be empty")


# ── Results ──

@dataclass
class ReconciledLocale:
    requested: str
    locale: str
    notice: str | None = None  # set when a substitute was chosen

    @property
    def substituted(self) -> bool:
        return self.requested != self.locale


@dataclass
class LocaleVariant:
    """One requested locale and its payload"""

    locale: str
    data: dict[str, Any]


@dataclass
class ResolvedLocalization:
    requested_locale: str
    locale: str
    data: dict[str, Any]


@dataclass
class BatchReconciliation:
    resolved: list[ResolvedLocalization] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)   # one message per skipped entry
    notices: list[str] = field(default_factory=list)   # substitutions


# ── Reconciliation ──

def locale_base(code: str) -> str:
    """Base language of a locale code: "es-ES" -> "es" """
    return code.split("-", 1)[0]


def reconcile_locale(requested: str, available: Sequence[str]) -> ReconciledLocale:
    if requested in available:
        return ReconciledLocale(requested=requested, locale=requested)

    base = locale_base(requested)
    for code in available:
        if locale_base(code) == base:
            return ReconciledLocale(
                requested=requested,
                locale=code,
                notice=f"Locale {requested} not found, using {code} instead",
            )

    raise LocaleNotAvailableError(requested, available)


def reconcile_localizations(
    variants: Iterable[LocaleVariant],
    available: Sequence[str],
    default_locale: str,
) -> BatchReconciliation:
    """Resolve each extra locale independently, keeping request order"""
    batch = BatchReconciliation()
    taken = {default_locale}

    for variant in variants:
        try:
            reconciled = reconcile_locale(variant.locale, available)
        except LocaleNotAvailableError:
            message = f"Skipping locale {variant.locale}: not available in Strapi"
            log.warning("locale skipped", requested=variant.locale, reason="not_available")
            batch.skipped.append(message)
            continue

        if reconciled.locale == default_locale:
            message = f"Skipping locale {variant.locale}: {reconciled.locale} is already the default locale"
            log.warning("locale skipped", requested=variant.locale, reason="default_locale")
            batch.skipped.append(message)
            continue

        if reconciled.locale in taken:
            message = f"Skipping locale {variant.locale}: {reconciled.locale} was already requested"
            log.warning("locale skipped", requested=variant.locale, reason="duplicate")
            batch.skipped.append(message)
            continue

        if not variant.data:
            raise EmptyLocalizationDataError(reconciled.locale)

        if reconciled.notice:
            log.info("locale substituted", requested=variant.locale, used=reconciled.locale)
            batch.notices.append(reconciled.notice)

        taken.add(reconciled.locale)
        batch.resolved.append(
            ResolvedLocalization(
                requested_locale=variant.locale,
                locale=reconciled.locale,
                data=variant.data,
            )
        )

    return batch


# ── Locale listing response shapes ──

def _bare_list(response: Any) -> list | None:
    return response if isinstance(response, list) else None


def _data_list(response: Any) -> list | None:
    if isinstance(response, dict) and isinstance(response.get("data"), list):
        return response["data"]
    return None


def _locales_list(response: Any) -> list | None:
    if isinstance(response, dict) and isinstance(response.get("locales"), list):
        return response["locales"]
    return None


# tried in order; first non-None wins
LOCALE_RESPONSE_SHAPES: tuple[Callable[[Any], list | None], ...] = (
    _bare_list,
    _data_list,
    _locales_list,
)


def parse_locale_entries(response: Any) -> list[dict[str, Any]]:
    """Locale entries from any known /api/i18n/locales response shape"""
    for matcher in LOCALE_RESPONSE_SHAPES:
        entries = matcher(response)
        if entries is not None:
            return [entry for entry in entries if isinstance(entry, dict)]
    raise LocalesUnavailableError(
        f"Invalid response structure from i18n locales API: {str(response)[:300]}"
    )


def parse_locale_codes(response: Any) -> list[str]:
    return [entry["code"] for entry in parse_locale_entries(response) if entry.get("code")]
