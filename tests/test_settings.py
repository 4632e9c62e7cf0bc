import pytest

from stayscore.config.settings import Settings, _read_package_yaml, _read_yaml_file, get_settings


@pytest.fixture
def fresh_settings(monkeypatch):
    monkeypatch.delenv("STAYSCORE_CONFIG_PATH", raising=False)
    monkeypatch.delenv("STAYSCORE_LOG_LEVEL", raising=False)
    monkeypatch.delenv("STAYSCORE_STORE_DIR", raising=False)
    monkeypatch.delenv("STAYSCORE_STORE_BACKEND", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_packaged_defaults_match_model_defaults():
    packaged = Settings.model_validate(_read_package_yaml("defaults.yaml"))
    assert packaged.model_dump() == Settings().model_dump()


def test_default_weights_sum_to_one():
    weights = Settings().quality.weights
    assert weights == {"rating": 0.35, "price": 0.25, "demand": 0.25, "availability": 0.15}
    assert sum(weights.values()) == pytest.approx(1.0)


def test_external_config_and_env_overrides(fresh_settings, monkeypatch, tmp_path):
    config = tmp_path / "custom.yaml"
    config.write_text(
        "quality:\n  default_reference_price: 20000\nrecommendation:\n  default_limit: 3\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("STAYSCORE_CONFIG_PATH", str(config))
    monkeypatch.setenv("STAYSCORE_LOG_LEVEL", "debug")
    monkeypatch.setenv("STAYSCORE_STORE_BACKEND", " Memory ")
    monkeypatch.setenv("STAYSCORE_STORE_DIR", str(tmp_path / "kv"))

    settings = get_settings()

    assert settings.quality.default_reference_price == 20000
    assert settings.recommendation.default_limit == 3
    assert settings.recommendation.match_floor == 55
    assert settings.app.log_level == "debug"
    assert settings.search_intent.backend == "memory"
    assert settings.search_intent.store_dir == str(tmp_path / "kv")


def test_yaml_root_must_be_a_mapping(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        _read_yaml_file(bad)


def test_invalid_values_are_rejected():
    with pytest.raises(ValueError):
        Settings.model_validate({"search_intent": {"backend": "redis"}})
