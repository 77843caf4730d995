"""
sshd_config routing block synchronization and daemon reload
"""
from pathlib import Path
from typing import Callable, List

from ...core.interfaces import DaemonConfigurator
from ...core.exceptions import ConfigWriteFailed, ReloadFailed
from ...core.logging import get_logger
from ...core.constants import (
    DEFAULT_SSHD_CONFIG_PATH,
    DEFAULT_SSHD_SERVICE,
    DEFAULT_TARGET_PORT,
    SYSTEMCTL_BIN,
)
from ...domain.routing.blocks import render_block, upsert_block, retract_block
from ..state.atomic import write_atomic
from .commands import CommandResult, run_command

logger = get_logger(__name__)


class SshdConfigurator(DaemonConfigurator):
    """
    Manages one tagged routing block per proxy user in sshd_config.

    Content outside the tagged blocks is never modified. Writes replace
    the file atomically and keep its permission bits.
    """

    def __init__(
        self,
        config_path: Path = Path(DEFAULT_SSHD_CONFIG_PATH),
        service: str = DEFAULT_SSHD_SERVICE,
        runner: Callable[[List[str]], CommandResult] = run_command,
    ):
        """
        Initialize configurator.

        Args:
            config_path: sshd configuration file
            service: systemd unit restarted on reload
            runner: Command runner (injectable for tests)
        """
        self.config_path = Path(config_path)
        self.service = service
        self._run = runner

    def _read(self) -> str:
        """Read sshd_config keeping line endings and undecodable bytes as they are"""
        try:
            with open(self.config_path, encoding="utf-8", errors="surrogateescape", newline="") as f:
                return f.read()
        except OSError as e:
            raise ConfigWriteFailed(self.config_path, str(e)) from e

    def _write(self, text: str) -> None:
        try:
            write_atomic(self.config_path, text, errors="surrogateescape")
        except OSError as e:
            raise ConfigWriteFailed(self.config_path, str(e)) from e

    def upsert(
        self,
        proxy_user: str,
        target_user: str,
        target_host: str,
        identity_key_path: Path,
        port: int = DEFAULT_TARGET_PORT,
    ) -> bool:
        """
        Write or replace the routing block for proxy_user.

        Returns:
            True if the configuration file changed

        Raises:
            ConfigWriteFailed: If the file cannot be read or written
        """
        current = self._read()
        block = render_block(proxy_user, target_user, target_host, identity_key_path, port)
        updated = upsert_block(current, proxy_user, block)

        if updated == current:
            logger.debug(f"Routing block for '{proxy_user}' is up to date")
            return False

        self._write(updated)
        logger.info(f"Wrote routing block for '{proxy_user}' to {self.config_path}")
        return True

    def retract(self, proxy_user: str) -> bool:
        """
        Delete the routing block for proxy_user and reload if it existed.

        Returns:
            True if a block was removed

        Raises:
            ConfigWriteFailed: If the file cannot be read or written
            ReloadFailed: If the block was removed but the reload failed
        """
        current = self._read()
        updated, removed = retract_block(current, proxy_user)

        if not removed:
            logger.debug(f"No routing block for '{proxy_user}'")
            return False

        self._write(updated)
        logger.info(f"Removed routing block for '{proxy_user}' from {self.config_path}")
        self.reload()
        return True

    def reload(self) -> None:
        """
        Restart sshd.

        Raises:
            ReloadFailed: If systemctl fails
        """
        result = self._run([SYSTEMCTL_BIN, "restart", self.service])
        if not result.success:
            raise ReloadFailed(self.service, result.reason())
        logger.info(f"Restarted {self.service}")
