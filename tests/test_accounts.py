import logging
import pwd

import pytest

from sshproxygen.core.exceptions import ProvisioningFailed
from sshproxygen.infrastructure.system import commands as commands_module
from sshproxygen.infrastructure.system.accounts import SystemAccountManager
from sshproxygen.infrastructure.system.commands import CommandResult, run_command

from conftest import FakeRunner


def _entry(username, uid=998, shell="/usr/sbin/nologin"):
    return pwd.struct_passwd((username, "x", uid, uid, "", "/nonexistent", shell))


def _manager(runner, existing=()):
    manager = SystemAccountManager(shell="/usr/sbin/nologin", runner=runner)
    existing = existing if isinstance(existing, dict) else {name: _entry(name) for name in existing}
    manager._lookup = lambda username: existing.get(username)
    return manager


def test_create_runs_useradd_for_restricted_system_account():
    runner = FakeRunner()

    _manager(runner).create("bkk10")

    assert runner.commands == [[
        "useradd", "--system", "--shell", "/usr/sbin/nologin", "--no-create-home", "bkk10",
    ]]


def test_create_existing_account_is_noop():
    runner = FakeRunner()

    _manager(runner, existing={"bkk10"}).create("bkk10")

    assert runner.commands == []


def test_create_treats_useradd_user_exists_as_success():
    runner = FakeRunner(CommandResult(9, "", "useradd: user 'bkk10' already exists\n"))

    _manager(runner).create("bkk10")

    assert len(runner.commands) == 1


def test_create_failure_raises_provisioning_failed():
    runner = FakeRunner(CommandResult(1, "", "useradd: cannot lock /etc/passwd\n"))

    with pytest.raises(ProvisioningFailed) as excinfo:
        _manager(runner).create("bkk10")

    assert excinfo.value.username == "bkk10"
    assert excinfo.value.reason == "useradd: cannot lock /etc/passwd"


def test_remove_runs_userdel():
    runner = FakeRunner()

    _manager(runner).remove("bkk10")

    assert runner.commands == [["userdel", "bkk10"]]


def test_remove_missing_account_is_noop():
    runner = FakeRunner(CommandResult(6, "", "userdel: user 'bkk10' does not exist\n"))

    _manager(runner).remove("bkk10")


def test_remove_failure_reports_exit_status_without_stderr():
    runner = FakeRunner(CommandResult(8, "", ""))

    with pytest.raises(ProvisioningFailed) as excinfo:
        _manager(runner).remove("bkk10")

    assert excinfo.value.reason == "exit status 8"


def test_exists_uses_user_database():
    manager = SystemAccountManager()

    assert manager.exists("root") is True
    assert manager.exists("sshproxygen-no-such-user") is False


def test_run_command_missing_binary(monkeypatch):
    def missing(*args, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", "useradd")

    monkeypatch.setattr(commands_module.subprocess, "run", missing)

    result = run_command(["useradd", "bkk10"])

    assert result.success is False
    assert result.exit_code == 127
    assert "useradd" in result.reason()


def test_create_adopting_restricted_account_does_not_warn(caplog):
    runner = FakeRunner()

    with caplog.at_level(logging.INFO):
        _manager(runner, existing={"bkk10": _entry("bkk10", shell="/bin/false")}).create("bkk10")

    assert runner.commands == []
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


def test_create_adopting_root_logs_warning(caplog):
    runner = FakeRunner()

    with caplog.at_level(logging.INFO):
        _manager(runner, existing={"root": _entry("root", uid=0, shell="/bin/bash")}).create("root")

    assert runner.commands == []
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "root" in warnings[0].getMessage()
    assert "/bin/bash" in warnings[0].getMessage()


def test_create_adopting_account_with_login_shell_logs_warning(caplog):
    runner = FakeRunner()

    with caplog.at_level(logging.INFO):
        _manager(runner, existing={"alice": _entry("alice", uid=1000, shell="/bin/zsh")}).create("alice")

    assert runner.commands == []
    assert any(r.levelno == logging.WARNING for r in caplog.records)
