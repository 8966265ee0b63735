"""
Localization status of a fetched Strapi document

Strapi silently serves the default-locale version when the requested locale has
no translation of its own. The only reliable signal is the `locale` attribute
on the returned document: if it differs from what was asked for, the content
is a fallback.
"""

from typing import Any

from strapi_tools.i18n.schemas import LocalizationStatus

UNKNOWN_LOCALE = "unknown"


def analyze_localization_status(
    document: dict[str, Any],
    requested_locale: str | None = None,
) -> LocalizationStatus:
    """Current locale, linked variants and fallback detection for one document"""
    document_id = document.get("documentId") or document.get("id")
    current_locale = document.get("locale") or UNKNOWN_LOCALE
    localizations = document.get("localizations") or []

    available_locales = [current_locale] + [
        loc["locale"] for loc in localizations if isinstance(loc, dict) and loc.get("locale")
    ]

    # NOTE: presence of an identifier, not real ownership; every fetched
    # document has one, so this is effectively always True.
    is_own_translation = bool(document_id)

    inherited_from = None
    warning = None
    if requested_locale and current_locale != requested_locale:
        inherited_from = current_locale
        warning = (
            f'⚠️ Requested locale "{requested_locale}" not found. '
            f'Showing fallback content from "{current_locale}". '
            f'This entry may have no translation of its own in "{requested_locale}".'
        )

    return LocalizationStatus(
        document_id=document_id,
        current_locale=current_locale,
        is_own_translation=is_own_translation,
        available_locales=available_locales,
        inherited_from=inherited_from,
        warning=warning,
    )
