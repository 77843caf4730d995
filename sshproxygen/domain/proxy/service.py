"""
Proxy reconciliation service - business logic
"""
from pathlib import Path
from typing import List, Optional, Tuple

from ...core.interfaces import RegistryStore, AccountManager, DaemonConfigurator
from ...core.exceptions import SshProxyGenError
from ...core.logging import get_logger
from ...core.telemetry import get_telemetry
from ...core.constants import DEFAULT_TARGET_PORT
from .models import ProxyRecord, ProxyListing, Registry
from .parser import parse_descriptor

logger = get_logger(__name__)
telemetry = get_telemetry()


class Reconciler:
    """
    Keeps system accounts and sshd routing blocks in line with the registry.

    Handles the add, remove, list and install commands. No direct
    dependency on CLI, Typer, or the real OS; everything external goes
    through the injected store, account manager and daemon configurator.
    """

    def __init__(
        self,
        store: RegistryStore,
        accounts: AccountManager,
        daemon: DaemonConfigurator,
        registry_path: Path,
        identity_override: Optional[Path] = None,
    ):
        """
        Initialize reconciler.

        Args:
            store: Registry storage implementation
            accounts: System account manager
            daemon: SSH daemon configurator
            registry_path: Registry file location
            identity_override: Identity key path replacing the registry's
                value for this invocation
        """
        self.store = store
        self.accounts = accounts
        self.daemon = daemon
        self.registry_path = Path(registry_path)
        self.identity_override = Path(identity_override) if identity_override else None

    def _load(self) -> Tuple[Registry, bool]:
        """Load the registry and apply the identity override, reporting whether it changed"""
        registry = self.store.load(self.registry_path)
        if self.identity_override is None or registry.identity_key_path == self.identity_override:
            return registry, False
        registry.identity_key_path = self.identity_override
        return registry, True

    def _provision(self, record: ProxyRecord, identity_key_path: Path) -> None:
        """Create the account, then write its routing block (no reload)"""
        self.accounts.create(record.proxy_user)
        self.daemon.upsert(
            record.proxy_user,
            record.target_user,
            record.target_host,
            identity_key_path,
            record.port,
        )

    def _reload(self, command: str, proxy_user: Optional[str] = None) -> None:
        """Reload sshd, recording a failure before it propagates"""
        try:
            self.daemon.reload()
        except SshProxyGenError as e:
            telemetry.record_event("proxy.error", {
                "command": command,
                "proxy_user": proxy_user,
                "error": str(e),
            })
            raise

    def add(self, descriptor: str) -> ProxyRecord:
        """
        Add a proxy user from `proxy_user:target_user@target_host`.

        The account is created before the routing block is written, so a
        failed account creation leaves no block behind. Partial progress
        is not rolled back; running add again completes it.

        Returns:
            The stored ProxyRecord

        Raises:
            MalformedDescriptor: If the descriptor cannot be parsed
            ProvisioningFailed: If the account cannot be created
            ConfigWriteFailed: If the routing block cannot be written
            ReloadFailed: If sshd could not be restarted (record is saved)
        """
        proxy_user, target_user, target_host = parse_descriptor(descriptor)
        record = ProxyRecord(
            proxy_user=proxy_user,
            target_user=target_user,
            target_host=target_host,
            port=DEFAULT_TARGET_PORT,
        )

        with self.store.lock(self.registry_path):
            registry, _ = self._load()
            try:
                self._provision(record, registry.identity_key_path)
            except SshProxyGenError as e:
                telemetry.record_event("proxy.error", {
                    "command": "add",
                    "proxy_user": proxy_user,
                    "error": str(e),
                })
                raise

            registry.put(record)
            self.store.save(registry, self.registry_path)

        telemetry.record_event("proxy.added", {
            "proxy_user": proxy_user,
            "target_host": target_host,
        })
        logger.info(f"Added proxy '{proxy_user}' -> {target_user}@{target_host}")

        self._reload("add", proxy_user)
        return record

    def remove(self, proxy_user: str) -> bool:
        """
        Remove a proxy user from the registry, the system and sshd_config.

        The registry is saved even if account or routing cleanup fails;
        the first cleanup error is raised afterwards for follow-up.

        Returns:
            False if proxy_user was not registered (nothing is written)

        Raises:
            ProvisioningFailed: If the account could not be removed
            ConfigWriteFailed: If the routing block could not be removed
            ReloadFailed: If sshd could not be restarted
        """
        errors: List[SshProxyGenError] = []

        with self.store.lock(self.registry_path):
            registry, _ = self._load()
            if registry.pop(proxy_user) is None:
                logger.info(f"Proxy '{proxy_user}' is not registered")
                return False

            try:
                self.accounts.remove(proxy_user)
            except SshProxyGenError as e:
                logger.error(f"Account cleanup for '{proxy_user}' failed: {e}")
                errors.append(e)

            try:
                self.daemon.retract(proxy_user)
            except SshProxyGenError as e:
                logger.error(f"Routing cleanup for '{proxy_user}' failed: {e}")
                errors.append(e)

            self.store.save(registry, self.registry_path)

        telemetry.record_event("proxy.removed", {
            "proxy_user": proxy_user,
            "errors": len(errors),
        })

        if errors:
            raise errors[0]

        logger.info(f"Removed proxy '{proxy_user}'")
        return True

    def list(self) -> ProxyListing:
        """Read-only snapshot of the registry, sorted by proxy user"""
        registry, _ = self._load()
        return ProxyListing(
            identity_key_path=registry.identity_key_path,
            entries=[registry.entries[name] for name in sorted(registry.entries)],
        )

    def install(self) -> List[ProxyRecord]:
        """
        Create every registered account and routing block.

        Existing accounts and blocks are accepted as they are (blocks are
        rewritten if their content differs), so install can be re-run on a
        fresh host or after a partial failure. sshd is restarted once at
        the end.

        Returns:
            Installed records, in registry order

        Raises:
            ProvisioningFailed: On the first account that cannot be created
            ConfigWriteFailed: On the first block that cannot be written
            ReloadFailed: If sshd could not be restarted
        """
        with self.store.lock(self.registry_path):
            registry, overridden = self._load()

            installed: List[ProxyRecord] = []
            for record in registry.entries.values():
                try:
                    self._provision(record, registry.identity_key_path)
                except SshProxyGenError as e:
                    telemetry.record_event("proxy.error", {
                        "command": "install",
                        "proxy_user": record.proxy_user,
                        "error": str(e),
                    })
                    raise
                installed.append(record)
                logger.info(f"Installed proxy '{record.proxy_user}'")

            if overridden:
                self.store.save(registry, self.registry_path)

        telemetry.record_event("proxy.installed", {"count": len(installed)})

        if installed:
            self._reload("install")
        return installed
