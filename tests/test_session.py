import pytest

from currency_converter.core.config import Settings
from currency_converter.services.history import DEFAULT_HISTORY_KEY, DEFAULT_HISTORY_LIMIT
from currency_converter.services.session import ConverterSession

from conftest import RATES_BASE


@pytest.mark.asyncio
async def test_history_cap_and_key_ignore_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("HISTORY_LIMIT", "100")
    monkeypatch.setenv("HISTORY_STORAGE_KEY", "other_slot")
    settings = Settings(data_dir=tmp_path, rates_api_base_url=RATES_BASE)
    settings.init_post_load()

    session = ConverterSession(settings)
    try:
        assert session.history.limit == DEFAULT_HISTORY_LIMIT == 50
        assert session.history.key == DEFAULT_HISTORY_KEY == "cc_history_v1"
    finally:
        await session.client.aclose()
