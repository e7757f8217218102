import pytest


@pytest.fixture(autouse=True)
def _clean_metar_environment(monkeypatch):
    for name in (
        "METAR_REQUEST_TIMEOUT_SECONDS",
        "METAR_DEFAULT_STATION_PREFIX",
        "METAR_LOG_LEVEL",
        "METAR_USER_AGENT",
    ):
        monkeypatch.delenv(name, raising=False)
