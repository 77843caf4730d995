"""
Core infrastructure layer
"""
from .constants import *
from .exceptions import *
from .logging import setup_logging, get_logger, get_stdout_console, get_stderr_console
from .interfaces import RegistryStore, AccountManager, DaemonConfigurator, PromptProvider
from .telemetry import Telemetry, get_telemetry
from .utils import ensure_root, generate_identity_key, key_fingerprint

__all__ = [
    "SshProxyGenError",
    "PrivilegeRequired",
    "MalformedDescriptor",
    "StoreCorrupt",
    "IoFailure",
    "ProvisioningFailed",
    "DaemonSyncError",
    "ConfigWriteFailed",
    "ReloadFailed",
    "setup_logging",
    "get_logger",
    "get_stdout_console",
    "get_stderr_console",
    "RegistryStore",
    "AccountManager",
    "DaemonConfigurator",
    "PromptProvider",
    "Telemetry",
    "get_telemetry",
    "ensure_root",
    "generate_identity_key",
    "key_fingerprint",
]
