import pytest

from swms.config import MIN_ACTIVITIES, get_config

ENV_VARS = ("SWMS_USE_LLM", "SWMS_LLM_MODEL", "SWMS_LLM_TIMEOUT_S", "SWMS_LLM_MAX_TOKENS",
            "SWMS_LLM_TEMPERATURE", "SWMS_DEFAULT_STATE", "SWMS_CATALOG_PATH")


@pytest.fixture
def clean_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return tmp_path


def test_defaults(clean_env):
    cfg = get_config()
    assert cfg["use_llm"] is False
    assert cfg["llm_timeout_s"] == 30.0
    assert cfg["default_state"] == "NSW"
    assert cfg["catalog_path"] is None
    assert cfg["min_activities"] == MIN_ACTIVITIES == 4


def test_yaml_overrides_defaults(clean_env):
    (clean_env / "config.yaml").write_text("llm_timeout_s: 12\ndefault_state: QLD\n", encoding="utf-8")
    cfg = get_config()
    assert cfg["llm_timeout_s"] == 12
    assert cfg["default_state"] == "QLD"


def test_env_overrides_yaml(clean_env, monkeypatch):
    (clean_env / "config.yaml").write_text("llm_timeout_s: 12\n", encoding="utf-8")
    monkeypatch.setenv("SWMS_LLM_TIMEOUT_S", "5.5")
    monkeypatch.setenv("SWMS_USE_LLM", "yes")
    monkeypatch.setenv("SWMS_LLM_MODEL", "gpt-4o-mini")
    cfg = get_config()
    assert cfg["llm_timeout_s"] == 5.5
    assert cfg["use_llm"] is True
    assert cfg["llm_model"] == "gpt-4o-mini"


def test_non_numeric_env_is_ignored(clean_env, monkeypatch):
    monkeypatch.setenv("SWMS_LLM_MAX_TOKENS", "lots")
    monkeypatch.setenv("SWMS_USE_LLM", "maybe")
    cfg = get_config()
    assert cfg["llm_max_tokens"] == 3000
    assert cfg["use_llm"] is False


def test_unreadable_yaml_is_skipped(clean_env):
    (clean_env / "config.yaml").write_text("llm_timeout_s: [unclosed\n", encoding="utf-8")
    assert get_config()["llm_timeout_s"] == 30.0
