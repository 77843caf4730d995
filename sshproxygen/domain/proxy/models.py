"""
Proxy domain models
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, List, Tuple

from ...core.constants import (
    DEFAULT_IDENTITY_KEY_PATH,
    DEFAULT_TARGET_PORT,
    DEFAULT_TARGET_USER,
)


@dataclass
class ProxyRecord:
    """One forwarding rule: proxy_user -> target_user@target_host:port"""
    proxy_user: str
    target_user: str
    target_host: str
    port: int = DEFAULT_TARGET_PORT

    def to_dict(self) -> Dict[str, Any]:
        """Convert to registry table (proxy_user is the table key)"""
        return {
            "target_user": self.target_user,
            "target_host": self.target_host,
            "port": self.port,
        }

    @classmethod
    def from_dict(cls, proxy_user: str, data: Dict[str, Any]) -> "ProxyRecord":
        """
        Create from registry table.

        Accepts the legacy `target` key for target_host; a missing
        target_user falls back to DEFAULT_TARGET_USER.
        """
        return cls(
            proxy_user=proxy_user,
            target_user=data.get("target_user", DEFAULT_TARGET_USER),
            target_host=data["target_host"] if "target_host" in data else data["target"],
            port=data.get("port", DEFAULT_TARGET_PORT),
        )


@dataclass
class Registry:
    """Declarative mapping of proxy users to their forwarding targets"""
    identity_key_path: Path = field(default_factory=lambda: Path(DEFAULT_IDENTITY_KEY_PATH))
    entries: Dict[str, ProxyRecord] = field(default_factory=dict)

    def get(self, proxy_user: str):
        return self.entries.get(proxy_user)

    def put(self, record: ProxyRecord) -> None:
        self.entries[record.proxy_user] = record

    def pop(self, proxy_user: str):
        return self.entries.pop(proxy_user, None)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to registry document"""
        return {
            "identity_key_path": str(self.identity_key_path),
            "proxies": {name: record.to_dict() for name, record in self.entries.items()},
        }


@dataclass
class ProxyListing:
    """Read-only view produced by the list command"""
    identity_key_path: Path
    entries: List[ProxyRecord]

    def targets(self) -> List[Tuple[str, str]]:
        """(proxy_user, target_host) pairs"""
        return [(record.proxy_user, record.target_host) for record in self.entries]
