from pathlib import Path

import pytest

from sshproxygen.core.exceptions import ConfigWriteFailed, ReloadFailed
from sshproxygen.domain.routing import find_blocks
from sshproxygen.infrastructure.system.commands import CommandResult
from sshproxygen.infrastructure.system.sshd import SshdConfigurator

from conftest import FakeRunner

KEY = Path("/etc/sshproxygen/id_rsa")
BASE = "Port 22\nPermitRootLogin no\n"


@pytest.fixture
def sshd_config(tmp_path) -> Path:
    path = tmp_path / "sshd_config"
    path.write_text(BASE)
    path.chmod(0o640)
    return path


def test_apply_writes_block_and_restarts_sshd(sshd_config):
    runner = FakeRunner()
    configurator = SshdConfigurator(sshd_config, "ssh", runner=runner)

    configurator.apply("bkk10", "proxyssh", "172.16.10.1", KEY)

    text = sshd_config.read_text()
    assert text.startswith(BASE)
    assert "ForceCommand ssh -i /etc/sshproxygen/id_rsa -W 172.16.10.1:22 proxyssh@172.16.10.1" in text
    assert runner.commands == [["systemctl", "restart", "ssh"]]


def test_upsert_keeps_file_mode(sshd_config):
    SshdConfigurator(sshd_config, runner=FakeRunner()).upsert("bkk10", "proxyssh", "172.16.10.1", KEY)

    assert sshd_config.stat().st_mode & 0o777 == 0o640


def test_repeated_apply_keeps_single_block(sshd_config):
    configurator = SshdConfigurator(sshd_config, runner=FakeRunner())

    configurator.apply("bkk10", "proxyssh", "172.16.10.1", KEY)
    first = sshd_config.read_text()
    changed = configurator.upsert("bkk10", "proxyssh", "172.16.10.1", KEY)

    assert changed is False
    assert sshd_config.read_text() == first
    assert first.count("Match User bkk10") == 1


def test_reload_failure_keeps_written_block(sshd_config):
    runner = FakeRunner(CommandResult(1, "", "Job for ssh.service failed\n"))
    configurator = SshdConfigurator(sshd_config, "ssh", runner=runner)

    with pytest.raises(ReloadFailed) as excinfo:
        configurator.apply("bkk10", "proxyssh", "172.16.10.1", KEY)

    assert excinfo.value.service == "ssh"
    assert "bkk10" in find_blocks(sshd_config.read_text())


def test_missing_config_raises_config_write_failed(tmp_path):
    runner = FakeRunner()
    configurator = SshdConfigurator(tmp_path / "absent", runner=runner)

    with pytest.raises(ConfigWriteFailed):
        configurator.apply("bkk10", "proxyssh", "172.16.10.1", KEY)

    assert runner.commands == []


def test_retract_removes_block_and_restarts(sshd_config):
    runner = FakeRunner()
    configurator = SshdConfigurator(sshd_config, runner=runner)
    configurator.upsert("bkk10", "proxyssh", "172.16.10.1", KEY)
    configurator.upsert("bkk11", "proxyssh", "172.16.11.1", KEY)

    assert configurator.retract("bkk10") is True

    assert list(find_blocks(sshd_config.read_text())) == ["bkk11"]
    assert runner.commands == [["systemctl", "restart", "sshd"]]


def test_retract_unknown_user_does_not_touch_file(sshd_config):
    runner = FakeRunner()
    configurator = SshdConfigurator(sshd_config, runner=runner)
    before = sshd_config.stat().st_mtime_ns

    assert configurator.retract("bkk10") is False

    assert sshd_config.read_text() == BASE
    assert sshd_config.stat().st_mtime_ns == before
    assert runner.commands == []


def test_upsert_and_retract_keep_undecodable_bytes(tmp_path):
    original = b"# Konfiguration f\xfcr sshd\nPort 22\n"
    path = tmp_path / "sshd_config"
    path.write_bytes(original)
    configurator = SshdConfigurator(path, runner=FakeRunner())

    assert configurator.upsert("bkk10", "proxyssh", "172.16.10.1", KEY) is True
    assert path.read_bytes().startswith(original)

    assert configurator.retract("bkk10") is True
    assert path.read_bytes() == original


def test_upsert_and_retract_keep_crlf_line_endings(tmp_path):
    original = b"Port 22\r\nPermitRootLogin no\r\n"
    path = tmp_path / "sshd_config"
    path.write_bytes(original)
    configurator = SshdConfigurator(path, runner=FakeRunner())

    configurator.upsert("bkk10", "proxyssh", "172.16.10.1", KEY)
    assert path.read_bytes().startswith(original)

    configurator.retract("bkk10")
    assert path.read_bytes() == original
