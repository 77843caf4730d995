"""
Proxy descriptor parser
"""
import re
from typing import Tuple

from ...core.exceptions import MalformedDescriptor

DESCRIPTOR_DELIMITERS = re.compile(r"[:@]")


def parse_descriptor(descriptor: str) -> Tuple[str, str, str]:
    """
    Parse `proxy_user:target_user@target_host`.

    Only the token count and emptiness are checked, user and host names
    are passed through as given.

    Returns:
        (proxy_user, target_user, target_host)

    Raises:
        MalformedDescriptor: If the descriptor does not split into
            exactly three non-empty tokens on ':' and '@'
    """
    parts = DESCRIPTOR_DELIMITERS.split(descriptor)
    if len(parts) != 3 or not all(parts):
        raise MalformedDescriptor(descriptor)

    proxy_user, target_user, target_host = parts
    return proxy_user, target_user, target_host
