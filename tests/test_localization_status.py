"""
Locale status analyzer: fallback detection on fetched documents
"""

from strapi_tools.i18n.localization import UNKNOWN_LOCALE, analyze_localization_status


class TestAnalyzeLocalizationStatus:
    """Current locale, linked variants, fallback warning"""

    def test_matching_locale(self, english_document):
        status = analyze_localization_status(english_document, "en")

        assert status.document_id == "doc-en"
        assert status.current_locale == "en"
        assert status.available_locales == ["en", "es", "ca"]
        assert status.is_own_translation is True
        assert status.inherited_from is None
        assert status.warning is None

    def test_fallback_detected(self, spanish_fallback_document):
        status = analyze_localization_status(spanish_fallback_document, "ca")

        assert status.current_locale == "es"
        assert status.inherited_from == "es"
        assert status.warning.startswith('⚠️ Requested locale "ca" not found.')
        assert '"es"' in status.warning

    def test_no_requested_locale_never_warns(self, spanish_fallback_document):
        status = analyze_localization_status(spanish_fallback_document)

        assert status.inherited_from is None
        assert status.warning is None

    def test_missing_locale_is_unknown(self):
        status = analyze_localization_status({"id": 3, "title": "x"}, "en")

        assert status.current_locale == UNKNOWN_LOCALE
        assert status.document_id == 3
        assert status.available_locales == [UNKNOWN_LOCALE]
        assert status.inherited_from == UNKNOWN_LOCALE

    def test_localizations_without_locale_are_ignored(self):
        document = {
            "documentId": "d1",
            "locale": "es",
            "localizations": [{"locale": "en"}, {"id": 4}, "junk", {"locale": None}],
        }

        status = analyze_localization_status(document)

        assert status.available_locales == ["es", "en"]

    def test_document_without_any_id(self):
        status = analyze_localization_status({"locale": "en"}, "en")

        assert status.document_id is None
        assert status.is_own_translation is False
