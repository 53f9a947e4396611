from shopgenie.config import load_settings


def test_zero_decimals_is_respected(monkeypatch) -> None:
    monkeypatch.setenv("DECIMALS", "0")
    assert load_settings().decimals == 0


def test_defaults(monkeypatch) -> None:
    for key in ("DECIMALS", "CURRENCY", "FREE_SHIPPING_THRESHOLD", "SHIPPING_FEE"):
        monkeypatch.delenv(key, raising=False)
    s = load_settings()
    assert s.decimals == 2
    assert s.currency == "USD"
    assert s.free_shipping_threshold == 100.0
    assert s.shipping_fee == 15.0
