"""
sshproxygen - SSH proxy user management tool

Provisions restricted SSH jump accounts and keeps three stores in line:
- The proxy registry (TOML)
- System accounts (useradd/userdel)
- Per-user routing blocks in sshd_config, forcing a tunnel to the target host
"""

__version__ = "0.1.0"

# Export core components
from .core import (
    SshProxyGenError,
    PrivilegeRequired,
    MalformedDescriptor,
    StoreCorrupt,
    IoFailure,
    ProvisioningFailed,
    DaemonSyncError,
    ConfigWriteFailed,
    ReloadFailed,
)

# Export domain models
from .domain.proxy import (
    ProxyRecord,
    Registry,
    ProxyListing,
    Reconciler,
    parse_descriptor,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "SshProxyGenError",
    "PrivilegeRequired",
    "MalformedDescriptor",
    "StoreCorrupt",
    "IoFailure",
    "ProvisioningFailed",
    "DaemonSyncError",
    "ConfigWriteFailed",
    "ReloadFailed",
    # Proxy models
    "ProxyRecord",
    "Registry",
    "ProxyListing",
    # Reconciliation
    "Reconciler",
    "parse_descriptor",
]
