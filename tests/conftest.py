from pathlib import Path
from typing import List

import pytest

from sshproxygen.core.interfaces import AccountManager, DaemonConfigurator
from sshproxygen.core.exceptions import ProvisioningFailed, ConfigWriteFailed, ReloadFailed
from sshproxygen.core.telemetry import get_telemetry
from sshproxygen.domain.proxy import Reconciler
from sshproxygen.domain.routing import render_block, upsert_block, retract_block, find_blocks
from sshproxygen.infrastructure.state.registry_store import TomlRegistryStore
from sshproxygen.infrastructure.system.commands import CommandResult


class FakeAccountManager(AccountManager):
    def __init__(self) -> None:
        self.accounts = set()
        self.calls: List[str] = []
        self.fail_create = set()
        self.fail_remove = set()

    def exists(self, username: str) -> bool:
        return username in self.accounts

    def create(self, username: str) -> None:
        self.calls.append(f"create:{username}")
        if username in self.fail_create:
            raise ProvisioningFailed(username, "useradd: cannot lock /etc/passwd")
        self.accounts.add(username)

    def remove(self, username: str) -> None:
        self.calls.append(f"remove:{username}")
        if username in self.fail_remove:
            raise ProvisioningFailed(username, "userdel: user is logged in")
        self.accounts.discard(username)


class FakeDaemonConfigurator(DaemonConfigurator):
    def __init__(self, text: str = "") -> None:
        self.text = text
        self.reloads = 0
        self.fail_write = False
        self.fail_reload = False

    def upsert(self, proxy_user, target_user, target_host, identity_key_path, port=22) -> bool:
        if self.fail_write:
            raise ConfigWriteFailed("/etc/ssh/sshd_config", "read-only file system")
        block = render_block(proxy_user, target_user, target_host, identity_key_path, port)
        updated = upsert_block(self.text, proxy_user, block)
        changed = updated != self.text
        self.text = updated
        return changed

    def retract(self, proxy_user: str) -> bool:
        if self.fail_write:
            raise ConfigWriteFailed("/etc/ssh/sshd_config", "read-only file system")
        self.text, removed = retract_block(self.text, proxy_user)
        if removed:
            self.reload()
        return removed

    def reload(self) -> None:
        if self.fail_reload:
            raise ReloadFailed("sshd", "Job for ssh.service failed")
        self.reloads += 1

    def blocks(self):
        return find_blocks(self.text)


class FakeRunner:
    """Records commands and replays queued results"""

    def __init__(self, *results: CommandResult) -> None:
        self.commands: List[List[str]] = []
        self.results = list(results)

    def __call__(self, cmd: List[str]) -> CommandResult:
        self.commands.append(cmd)
        if self.results:
            return self.results.pop(0)
        return CommandResult(exit_code=0, stdout="", stderr="")


@pytest.fixture(autouse=True)
def _clear_telemetry():
    get_telemetry().clear()
    yield
    get_telemetry().clear()


@pytest.fixture
def registry_path(tmp_path) -> Path:
    return tmp_path / "etc" / "sshproxygen" / "config.toml"


@pytest.fixture
def accounts() -> FakeAccountManager:
    return FakeAccountManager()


@pytest.fixture
def daemon() -> FakeDaemonConfigurator:
    return FakeDaemonConfigurator("Port 22\nPermitRootLogin no\n")


@pytest.fixture
def store() -> TomlRegistryStore:
    return TomlRegistryStore()


@pytest.fixture
def reconciler(store, accounts, daemon, registry_path) -> Reconciler:
    return Reconciler(store, accounts, daemon, registry_path)
