"""
Core utility functions
"""
import os
import paramiko
from paramiko.pkey import UnknownKeyType
from paramiko.ssh_exception import SSHException
from pathlib import Path
from typing import Optional, Tuple

from .constants import IDENTITY_KEY_BITS, IDENTITY_KEY_MODE, PUBLIC_KEY_MODE
from .exceptions import PrivilegeRequired, IoFailure


# ============================================================
# Privileges
# ============================================================

def ensure_root() -> None:
    """
    Make sure the process runs with root privileges.

    Raises:
        PrivilegeRequired: If effective UID is not 0
    """
    if os.geteuid() != 0:
        raise PrivilegeRequired()


# ============================================================
# Identity Key Management
# ============================================================

def generate_identity_key(key_path: Path, bits: int = IDENTITY_KEY_BITS) -> Tuple[str, str]:
    """
    Generate the RSA key pair used by forced tunnel commands.

    Args:
        key_path: Path to private key file (public key will be key_path + '.pub')
        bits: RSA key size

    Returns:
        (private_key_path, public_key_path) as strings

    Raises:
        IoFailure: If the key files cannot be written
    """
    pub_key_path = Path(str(key_path) + '.pub')

    try:
        key_path.parent.mkdir(parents=True, exist_ok=True)

        key = paramiko.RSAKey.generate(bits)
        key.write_private_key_file(str(key_path))
        key_path.chmod(IDENTITY_KEY_MODE)

        pub_key_path.write_text(f"{key.get_name()} {key.get_base64()} sshproxygen\n")
        pub_key_path.chmod(PUBLIC_KEY_MODE)
    except OSError as e:
        raise IoFailure(key_path, str(e)) from e

    return str(key_path), str(pub_key_path)


def key_fingerprint(key_path: Path) -> Optional[str]:
    """
    SHA256 fingerprint of a private key, or None if it cannot be read.

    Encrypted or missing keys are reported as None rather than raising,
    listing must work before a key has been provisioned.
    """
    try:
        key = paramiko.PKey.from_path(key_path)
    except (OSError, SSHException, UnknownKeyType, ValueError):
        return None
    return key.fingerprint
