from notelens_api.config import load_settings


def test_defaults(monkeypatch) -> None:
    monkeypatch.delenv("VAULT_DIR", raising=False)
    monkeypatch.delenv("VERBOSE", raising=False)
    monkeypatch.delenv("API_DEBUG_LOG", raising=False)

    settings = load_settings()
    assert settings.vault_dir.is_absolute()
    assert settings.vault_dir.name == "vault"
    assert settings.verbose is False
    assert settings.api_debug_log is False


def test_env_overrides(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("VAULT_DIR", str(tmp_path))
    monkeypatch.setenv("VERBOSE", "TRUE")
    monkeypatch.setenv("API_DEBUG_LOG", "true")

    settings = load_settings()
    assert settings.vault_dir == tmp_path.resolve()
    assert settings.verbose is True
    assert settings.api_debug_log is True
