"""
Project constants definitions
"""

# ============================================================
# Registry
# ============================================================

DEFAULT_REGISTRY_PATH = "/etc/sshproxygen/config.toml"
DEFAULT_IDENTITY_KEY_PATH = "/etc/sshproxygen/id_rsa"
REGISTRY_LOCK_SUFFIX = ".lock"
REGISTRY_FILE_MODE = 0o600

# ============================================================
# Proxy Default Values
# ============================================================

DEFAULT_TARGET_PORT = 22
DEFAULT_TARGET_USER = "proxyssh"

# ============================================================
# SSH Daemon
# ============================================================

DEFAULT_SSHD_CONFIG_PATH = "/etc/ssh/sshd_config"
DEFAULT_SSHD_SERVICE = "sshd"
SYSTEMCTL_BIN = "systemctl"

# Routing block markers, formatted with the proxy user name
BLOCK_START_MARKER = "# >>> sshproxygen:{name} >>>"
BLOCK_END_MARKER = "# <<< sshproxygen:{name} <<<"

# ============================================================
# System Accounts
# ============================================================

USERADD_BIN = "useradd"
USERDEL_BIN = "userdel"
DEFAULT_ACCOUNT_SHELL = "/usr/sbin/nologin"

# useradd(8) / userdel(8) exit statuses
USERADD_EXIT_USER_EXISTS = 9
USERDEL_EXIT_NO_USER = 6

# ============================================================
# Identity Key
# ============================================================

IDENTITY_KEY_BITS = 3072
IDENTITY_KEY_MODE = 0o600
PUBLIC_KEY_MODE = 0o644

# ============================================================
# Environment
# ============================================================

ENV_PREFIX = "SSHPROXYGEN_"
