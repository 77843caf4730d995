"""
Core interfaces for dependency injection
"""
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..domain.proxy.models import Registry


class RegistryStore(ABC):
    """Registry storage interface"""

    @abstractmethod
    def load(self, path: Path) -> "Registry":
        """Load registry, returning an empty one if the file is missing"""
        pass

    @abstractmethod
    def save(self, registry: "Registry", path: Path) -> None:
        """Persist registry atomically"""
        pass

    @abstractmethod
    def lock(self, path: Path) -> AbstractContextManager:
        """Exclusive advisory lock on the registry for a read-modify-write cycle"""
        pass


class AccountManager(ABC):
    """System account management interface"""

    @abstractmethod
    def exists(self, username: str) -> bool:
        """Check if account exists"""
        pass

    @abstractmethod
    def create(self, username: str) -> None:
        """Create restricted account; no-op if it already exists"""
        pass

    @abstractmethod
    def remove(self, username: str) -> None:
        """Remove account; no-op if it does not exist"""
        pass


class DaemonConfigurator(ABC):
    """SSH daemon routing configuration interface"""

    @abstractmethod
    def upsert(
        self,
        proxy_user: str,
        target_user: str,
        target_host: str,
        identity_key_path: Path,
        port: int = 22,
    ) -> bool:
        """Write or replace the routing block for proxy_user, return True if the file changed"""
        pass

    @abstractmethod
    def retract(self, proxy_user: str) -> bool:
        """Delete the routing block for proxy_user, return True if one was removed"""
        pass

    @abstractmethod
    def reload(self) -> None:
        """Reload the daemon so configuration changes take effect"""
        pass

    def apply(
        self,
        proxy_user: str,
        target_user: str,
        target_host: str,
        identity_key_path: Path,
        port: int = 22,
    ) -> None:
        """Upsert the routing block and reload the daemon"""
        self.upsert(proxy_user, target_user, target_host, identity_key_path, port)
        self.reload()


class PromptProvider(ABC):
    """User prompt interface"""

    @abstractmethod
    def confirm(self, message: str, default: bool = False) -> bool:
        """Prompt user for confirmation"""
        pass
