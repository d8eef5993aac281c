from growthmap import config


def test_from_env_reads_every_setting(monkeypatch):
    monkeypatch.setenv("GROWTHMAP_ADDRESS_ZOOM", "15")
    monkeypatch.setenv("GROWTHMAP_HOVER_COOLDOWN", "1.5")
    monkeypatch.setenv("GROWTHMAP_DUPLICATE_POLICY", "first")
    s = config.Settings.from_env()
    assert s.address_zoom == 15
    assert s.hover_cooldown == 1.5
    assert s.duplicate_policy == "first"


def test_from_env_defaults(monkeypatch):
    monkeypatch.delenv("GROWTHMAP_ADDRESS_ZOOM", raising=False)
    assert config.Settings.from_env().address_zoom == config.ADDRESS_ZOOM
