"""
System account provisioning through useradd/userdel
"""
import pwd
from typing import Callable, List, Optional

from ...core.interfaces import AccountManager
from ...core.exceptions import ProvisioningFailed
from ...core.logging import get_logger
from ...core.constants import (
    USERADD_BIN,
    USERDEL_BIN,
    DEFAULT_ACCOUNT_SHELL,
    USERADD_EXIT_USER_EXISTS,
    USERDEL_EXIT_NO_USER,
)
from .commands import CommandResult, run_command

logger = get_logger(__name__)

# Shells that refuse interactive logins
NOLOGIN_SHELLS = frozenset({
    "/usr/sbin/nologin",
    "/sbin/nologin",
    "/bin/false",
    "/usr/bin/false",
})


class SystemAccountManager(AccountManager):
    """
    Restricted proxy accounts in the local user database.

    Accounts are system-class, have no home directory and a shell that
    refuses interactive logins; sshd's ForceCommand is the only way in.
    """

    def __init__(
        self,
        shell: str = DEFAULT_ACCOUNT_SHELL,
        runner: Callable[[List[str]], CommandResult] = run_command,
    ):
        """
        Initialize account manager.

        Args:
            shell: Login shell assigned to new accounts
            runner: Command runner (injectable for tests)
        """
        self.shell = shell
        self._run = runner

    def _lookup(self, username: str) -> Optional[pwd.struct_passwd]:
        try:
            return pwd.getpwnam(username)
        except KeyError:
            return None

    def exists(self, username: str) -> bool:
        """Check if account exists"""
        return self._lookup(username) is not None

    def create(self, username: str) -> None:
        """
        Create restricted system account.

        An existing account is adopted as it is. A warning is logged when
        it is root or has a login shell, since the routing block then
        applies to an account that was not created for proxying.

        Raises:
            ProvisioningFailed: If useradd fails for any reason other
                than the account already existing
        """
        entry = self._lookup(username)
        if entry is not None:
            if entry.pw_uid == 0 or entry.pw_shell not in NOLOGIN_SHELLS | {self.shell}:
                logger.warning(
                    f"Adopting existing account '{username}' "
                    f"(uid {entry.pw_uid}, shell {entry.pw_shell}); "
                    f"it is not a restricted proxy account"
                )
            else:
                logger.info(f"Account '{username}' already exists")
            return

        result = self._run([
            USERADD_BIN,
            "--system",
            "--shell", self.shell,
            "--no-create-home",
            username,
        ])

        if result.exit_code == USERADD_EXIT_USER_EXISTS:
            logger.info(f"Account '{username}' already exists")
            return
        if not result.success:
            raise ProvisioningFailed(username, result.reason())

        logger.info(f"Created account '{username}'")

    def remove(self, username: str) -> None:
        """
        Delete account.

        Raises:
            ProvisioningFailed: If userdel fails for any reason other
                than the account being absent
        """
        result = self._run([USERDEL_BIN, username])

        if result.exit_code == USERDEL_EXIT_NO_USER:
            logger.info(f"Account '{username}' does not exist")
            return
        if not result.success:
            raise ProvisioningFailed(username, result.reason())

        logger.info(f"Removed account '{username}'")
