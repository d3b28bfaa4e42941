from __future__ import annotations

import pytest

from tokenview.config import ViewConfig, load_config
from tokenview.models import TabState
from tokenview.tabs import TabStateMachine

_ENV_VARS = (
    "MEVX_BASE_URL",
    "MEVX_API_KEY",
    "MEVX_CHAIN",
    "TOKENVIEW_GRANULARITY",
    "TOKENVIEW_CANDLE_LIMIT",
    "TOKENVIEW_FETCH_TIMEOUT_SEC",
    "TOKENVIEW_FETCH_POLICY",
    "TOKENVIEW_REFRESH_SEC",
    "TOKENVIEW_LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_load_config_defaults(clean_env) -> None:
    cfg = load_config()
    assert cfg == ViewConfig()
    assert cfg.granularity == "1s"
    assert cfg.fetch_timeout_sec == 10.0
    assert cfg.fetch_policy == "lazy"
    assert not cfg.eager


def test_load_config_reads_env(clean_env) -> None:
    clean_env.setenv("MEVX_BASE_URL", "https://example.test/api/")
    clean_env.setenv("MEVX_API_KEY", "k")
    clean_env.setenv("TOKENVIEW_GRANULARITY", " 5M ")
    clean_env.setenv("TOKENVIEW_FETCH_POLICY", "Eager")
    clean_env.setenv("TOKENVIEW_FETCH_TIMEOUT_SEC", "2.5")
    clean_env.setenv("TOKENVIEW_LOG_LEVEL", "debug")
    cfg = load_config()
    assert cfg.provider_base_url == "https://example.test/api"
    assert cfg.provider_api_key == "k"
    assert cfg.granularity == "5m"
    assert cfg.eager
    assert cfg.fetch_timeout_sec == 2.5
    assert cfg.log_level == "DEBUG"


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("TOKENVIEW_GRANULARITY", "second"),
        ("TOKENVIEW_FETCH_POLICY", "sometimes"),
        ("TOKENVIEW_CANDLE_LIMIT", "0"),
        ("TOKENVIEW_FETCH_TIMEOUT_SEC", "0"),
        ("TOKENVIEW_FETCH_TIMEOUT_SEC", "soon"),
    ],
)
def test_load_config_rejects_bad_values(clean_env, name: str, value: str) -> None:
    clean_env.setenv(name, value)
    with pytest.raises(ValueError):
        load_config()


def test_tab_machine_starts_on_overview_and_allows_any_transition() -> None:
    tabs = TabStateMachine()
    assert tabs.tab == TabState.OVERVIEW
    assert tabs.select("chart") is True
    assert tabs.select(TabState.TRADE) is True
    assert tabs.select("overview") is True
    assert tabs.tab == TabState.OVERVIEW
    assert tabs.select("overview") is False
    assert tabs.is_active("OVERVIEW")


def test_tab_machine_rejects_unknown_tab() -> None:
    tabs = TabStateMachine()
    with pytest.raises(ValueError, match="Unknown tab"):
        tabs.select("orders")
    assert tabs.tab == TabState.OVERVIEW
