from __future__ import annotations

import json

import pytest

import tokenview.main as main_module
import tokenview.ui as ui_module


class _FakeApp:
    launched: list["_FakeApp"] = []

    def __init__(self, identity, *, price=None, config=None) -> None:
        self.identity = identity
        self.price = price
        self.config = config

    def run(self) -> None:
        _FakeApp.launched.append(self)


@pytest.fixture
def fake_app(monkeypatch):
    _FakeApp.launched = []
    monkeypatch.setattr(ui_module, "TokenViewApp", _FakeApp, raising=False)
    monkeypatch.delenv("TOKENVIEW_FETCH_POLICY", raising=False)
    return _FakeApp


def test_main_loads_record_and_launches_app(tmp_path, fake_app) -> None:
    path = tmp_path / "token.json"
    path.write_text(
        json.dumps(
            {
                "mint": "mint1",
                "creator": "creator1",
                "symbol": "DWH",
                "name": "Dog Wif Hat",
                "bondingCurveKey": "curve1",
                "created_timestamp": 1_700_000_000_000,
                "priceData": {"price": 0.5, "marketCap": 100},
            }
        ),
        encoding="utf-8",
    )

    main_module.main([str(path), "--eager"])

    app = fake_app.launched[-1]
    assert app.identity.bonding_curve_key == "curve1"
    assert app.price.market_cap == 100.0
    assert app.config.fetch_policy == "eager"


def test_main_exits_on_invalid_record(tmp_path, fake_app) -> None:
    path = tmp_path / "token.json"
    path.write_text(json.dumps({"mint": "mint1"}), encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main_module.main([str(path)])

    assert excinfo.value.code == 2
    assert fake_app.launched == []


def test_main_exits_on_missing_file(tmp_path, fake_app) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main([str(tmp_path / "missing.json")])
    assert excinfo.value.code == 2
