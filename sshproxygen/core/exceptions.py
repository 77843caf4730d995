"""
Unified exception definitions
"""


class SshProxyGenError(Exception):
    """Base exception class"""
    pass


class PrivilegeRequired(SshProxyGenError):
    """Operation requires root privileges"""

    def __init__(self, message: str = "Operation requires root privileges"):
        super().__init__(message)


class MalformedDescriptor(SshProxyGenError):
    """Proxy descriptor is not of the form proxy_user:target_user@target_host"""

    def __init__(self, descriptor: str):
        self.descriptor = descriptor
        super().__init__(
            f"Invalid proxy descriptor '{descriptor}', "
            f"expected proxy_user:target_user@target_host"
        )


class StoreCorrupt(SshProxyGenError):
    """Registry file does not conform to the registry schema"""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Registry {path} is corrupt: {reason}")


class IoFailure(SshProxyGenError):
    """Filesystem error"""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"I/O error on {path}: {reason}")


class ProvisioningFailed(SshProxyGenError):
    """System account command failed"""

    def __init__(self, username: str, reason: str):
        self.username = username
        self.reason = reason
        super().__init__(f"Account provisioning failed for '{username}': {reason}")


class DaemonSyncError(SshProxyGenError):
    """SSH daemon configuration sync error"""
    pass


class ConfigWriteFailed(DaemonSyncError):
    """Routing block could not be written to the daemon configuration"""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write daemon configuration {path}: {reason}")


class ReloadFailed(DaemonSyncError):
    """Daemon reload failed (configuration was already written)"""

    def __init__(self, service: str, reason: str):
        self.service = service
        self.reason = reason
        super().__init__(f"Failed to reload '{service}': {reason}")
