"""
Routing block rendering and tagged-region editing for sshd_config text
"""
import re
import shlex
from pathlib import Path
from typing import Dict, Tuple

from ...core.constants import BLOCK_START_MARKER, BLOCK_END_MARKER, DEFAULT_TARGET_PORT

# Regular expression pattern for tagged routing blocks
BLOCK_PATTERN = re.compile(
    r"(?ms)^# >>> sshproxygen:(?P<name>\S+) >>>[ \t]*\n"
    r"(?P<body>.*?)"
    r"^# <<< sshproxygen:(?P=name) <<<[ \t]*(?:\n|\Z)"
)


def render_block(
    proxy_user: str,
    target_user: str,
    target_host: str,
    identity_key_path: Path,
    port: int = DEFAULT_TARGET_PORT,
) -> str:
    """
    Build the tagged routing block for a proxy user.

    The forced command tunnels stdio to target_host:port through an SSH
    session authenticated with identity_key_path as target_user.
    """
    force_command = (
        f"ssh -i {shlex.quote(str(identity_key_path))} "
        f"-W {target_host}:{port} {target_user}@{target_host}"
    )
    lines = [
        BLOCK_START_MARKER.format(name=proxy_user),
        f"Match User {proxy_user}",
        f"  ForceCommand {force_command}",
        BLOCK_END_MARKER.format(name=proxy_user),
    ]
    return "\n".join(lines) + "\n"


def find_blocks(text: str) -> Dict[str, re.Match]:
    """
    Parse existing routing blocks.

    Returns:
        Dictionary: {proxy_user: match_object}
    """
    return {m.group("name"): m for m in BLOCK_PATTERN.finditer(text)}


def upsert_block(text: str, proxy_user: str, block: str) -> str:
    """
    Replace the block tagged proxy_user, or append it at the end.

    Any duplicate blocks for the same user left behind by hand edits are
    collapsed into the single new one.
    """
    matches = [m for m in BLOCK_PATTERN.finditer(text) if m.group("name") == proxy_user]

    if matches:
        first = matches[0]
        result = text[:first.start()] + block
        cursor = first.end()
        for m in matches[1:]:
            result += text[cursor:m.start()]
            cursor = m.end()
        return result + text[cursor:]

    if text and not text.endswith("\n"):
        text += "\n"
    if text and not text.endswith("\n\n"):
        text += "\n"
    return text + block


def retract_block(text: str, proxy_user: str) -> Tuple[str, bool]:
    """
    Remove every block tagged proxy_user, leaving the rest of the text as is.

    Returns:
        (new_text, removed)
    """
    matches = [m for m in BLOCK_PATTERN.finditer(text) if m.group("name") == proxy_user]
    if not matches:
        return text, False

    result = ""
    cursor = 0
    for m in matches:
        result += text[cursor:m.start()]
        # Drop the separator line that upsert_block added before the block
        if result.endswith("\n\n"):
            result = result[:-1]
        cursor = m.end()
    result += text[cursor:]

    return result, True
