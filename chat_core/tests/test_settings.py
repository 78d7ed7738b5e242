from chat_core.config.settings import Settings


def test_settings_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("OPENAI_API_KEY", "OPEN_API_KEY", "ANTHROPIC_API_KEY", "CHAT_CONFIG_FILE", "HTTP_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    s = Settings()
    assert s.openai_api_key is None
    assert s.anthropic_api_key is None
    assert s.http_timeout == 60.0
    assert s.anthropic_max_tokens_to_sample == 1000


def test_settings_legacy_openai_env_name(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setenv("OPEN_API_KEY", "sk-legacy")
    assert Settings().openai_api_key == "sk-legacy"


def test_settings_from_yaml(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("ANTHROPIC_API_KEY", "HTTP_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    cfg = tmp_path / "chat.yaml"
    cfg.write_text("anthropic_api_key: ak-yaml\nhttp_timeout: 12\n", encoding="utf-8")
    monkeypatch.setenv("CHAT_CONFIG_FILE", str(cfg))
    s = Settings()
    assert s.anthropic_api_key == "ak-yaml"
    assert s.http_timeout == 12.0


def test_settings_init_by_field_name():
    s = Settings(openai_api_key="sk-init", anthropic_api_key="")
    assert s.openai_api_key == "sk-init"
    assert s.anthropic_api_key == ""
