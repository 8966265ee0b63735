"""
Pytest fixtures shared by the whole suite
"""

import os
from unittest.mock import AsyncMock

import pytest

# before any strapi_tools import reads settings
os.environ.update({
    "ENV": "development",
    "STRAPI_URL": "http://strapi.test",
    "STRAPI_API_TOKEN": "test-token",
})

from strapi_tools.config import get_settings  # noqa: E402
from strapi_tools.strapi.client import StrapiClient  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are re-read for every test"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_client() -> AsyncMock:
    """StrapiClient double: every API method is an AsyncMock"""
    client = AsyncMock(spec=StrapiClient)
    client.get_i18n_locales.return_value = {
        "data": [
            {"id": 1, "code": "es", "name": "Spanish (es)", "isDefault": True},
            {"id": 2, "code": "en", "name": "English (en)", "isDefault": False},
            {"id": 3, "code": "ca", "name": "Catalan (ca)", "isDefault": False},
        ]
    }
    client.get_content_type.return_value = {"data": {"schema": {"attributes": {}}}}
    return client


@pytest.fixture
def english_document() -> dict:
    return {
        "id": 7,
        "documentId": "doc-en",
        "locale": "en",
        "title": "The history of the city and the river",
        "slug": "history",
        "localizations": [{"locale": "es"}, {"locale": "ca"}],
    }


@pytest.fixture
def spanish_fallback_document() -> dict:
    """What Strapi returns for locale=ca when only es exists"""
    return {
        "id": 8,
        "documentId": "doc-es",
        "locale": "es",
        "title": "La historia de la ciudad y el río es muy antigua",
        "localizations": [],
    }
