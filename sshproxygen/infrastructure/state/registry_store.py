"""
TOML-backed registry storage implementation
"""
import tomllib
from pathlib import Path
from typing import Dict, Any

import tomli_w

from ...core.interfaces import RegistryStore
from ...core.exceptions import StoreCorrupt, IoFailure
from ...core.constants import DEFAULT_IDENTITY_KEY_PATH, REGISTRY_FILE_MODE
from ...core.logging import get_logger
from ...domain.proxy.models import ProxyRecord, Registry
from .atomic import write_atomic
from .lock import registry_lock

logger = get_logger(__name__)


def _validate_document(data: Dict[str, Any]) -> None:
    """
    Check a parsed registry document against the schema.

    Raises:
        ValueError: Describing the first violation found
    """
    key_path = data.get("identity_key_path", data.get("ssh_key", DEFAULT_IDENTITY_KEY_PATH))
    if not isinstance(key_path, str) or not key_path:
        raise ValueError("identity_key_path must be a non-empty string")

    proxies = data.get("proxies", {})
    if not isinstance(proxies, dict):
        raise ValueError("proxies must be a table")

    for name, entry in proxies.items():
        if not isinstance(entry, dict):
            raise ValueError(f"proxies.{name} must be a table")

        host = entry.get("target_host", entry.get("target"))
        if not isinstance(host, str) or not host:
            raise ValueError(f"proxies.{name}.target_host must be a non-empty string")

        target_user = entry.get("target_user")
        if target_user is not None and (not isinstance(target_user, str) or not target_user):
            raise ValueError(f"proxies.{name}.target_user must be a non-empty string")

        port = entry.get("port", 22)
        if isinstance(port, bool) or not isinstance(port, int) or not (1 <= port <= 65535):
            raise ValueError(f"proxies.{name}.port must be an integer in 1..65535")


class TomlRegistryStore(RegistryStore):
    """
    Registry persisted as a TOML document.

    Layout:
        identity_key_path = "/etc/sshproxygen/id_rsa"

        [proxies.<proxy_user>]
        target_user = "proxyssh"
        target_host = "172.16.10.1"
        port = 22
    """

    def load(self, path: Path) -> Registry:
        """
        Load registry, reading the file once.

        Returns:
            Registry (empty with default identity key if path is missing)

        Raises:
            StoreCorrupt: If the document is not valid TOML or violates the schema
            IoFailure: If the file cannot be read
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug(f"Registry {path} not found, starting empty")
            return Registry()
        except UnicodeDecodeError as e:
            raise StoreCorrupt(path, f"not valid UTF-8: {e}") from e
        except OSError as e:
            raise IoFailure(path, str(e)) from e

        try:
            data = tomllib.loads(text)
            _validate_document(data)
        except (tomllib.TOMLDecodeError, ValueError) as e:
            raise StoreCorrupt(path, str(e)) from e

        key_path = data.get("identity_key_path", data.get("ssh_key", DEFAULT_IDENTITY_KEY_PATH))
        registry = Registry(identity_key_path=Path(key_path))
        for name, entry in data.get("proxies", {}).items():
            registry.put(ProxyRecord.from_dict(name, entry))

        return registry

    def save(self, registry: Registry, path: Path) -> None:
        """
        Write registry atomically, creating parent directories.

        Raises:
            IoFailure: If the file cannot be written
        """
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            write_atomic(path, tomli_w.dumps(registry.to_dict()), mode=REGISTRY_FILE_MODE)
        except OSError as e:
            raise IoFailure(path, str(e)) from e

        logger.debug(f"Saved registry {path} ({len(registry.entries)} proxies)")

    def lock(self, path: Path):
        """Exclusive advisory lock on the registry"""
        return registry_lock(path)
