from pathlib import Path

from sshproxygen.adapters.config.loader import ConfigLoader, Settings
from sshproxygen.core.constants import DEFAULT_REGISTRY_PATH, DEFAULT_SSHD_SERVICE


def _clear_env(monkeypatch):
    for suffix in ConfigLoader.ENV_MAPPINGS:
        monkeypatch.delenv(f"SSHPROXYGEN_{suffix}", raising=False)


def test_defaults(monkeypatch):
    _clear_env(monkeypatch)

    settings = ConfigLoader().load()

    assert settings == Settings()
    assert settings.registry_path == Path(DEFAULT_REGISTRY_PATH)
    assert settings.identity is None
    assert settings.sshd_service == DEFAULT_SSHD_SERVICE


def test_environment_overrides_defaults(monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("SSHPROXYGEN_SSHD_SERVICE", "ssh")
    monkeypatch.setenv("SSHPROXYGEN_IDENTITY", "/etc/jump/id")

    settings = ConfigLoader().load()

    assert settings.sshd_service == "ssh"
    assert settings.identity == Path("/etc/jump/id")


def test_cli_overrides_environment(monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("SSHPROXYGEN_CONFIG", "/env/config.toml")

    settings = ConfigLoader().load(cli_overrides={
        "registry_path": Path("/cli/config.toml"),
        "identity": None,
    })

    assert settings.registry_path == Path("/cli/config.toml")
    assert settings.identity is None


def test_unset_cli_options_fall_back_to_environment(monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("SSHPROXYGEN_CONFIG", "/env/config.toml")

    settings = ConfigLoader().load(cli_overrides={"registry_path": None})

    assert settings.registry_path == Path("/env/config.toml")


def test_use_env_false_ignores_environment(monkeypatch):
    monkeypatch.setenv("SSHPROXYGEN_SHELL", "/bin/false")

    assert ConfigLoader().load(use_env=False).shell == Settings().shell
