"""
Local command execution
"""
import subprocess
from dataclasses import dataclass
from typing import List

from ...core.logging import get_logger

logger = get_logger(__name__)

# Exit code reported when the executable cannot be started
COMMAND_NOT_FOUND = 127


@dataclass
class CommandResult:
    """Command execution result"""
    exit_code: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    def reason(self) -> str:
        """Human-readable failure reason"""
        message = self.stderr.strip() or self.stdout.strip()
        if message:
            return message
        return f"exit status {self.exit_code}"


def run_command(cmd: List[str]) -> CommandResult:
    """
    Execute a local command without a shell and capture its output.

    There is no timeout, a hung command blocks the caller.

    Args:
        cmd: Command as list of arguments

    Returns:
        CommandResult (exit code 127 if the executable is missing)
    """
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as e:
        return CommandResult(
            exit_code=COMMAND_NOT_FOUND,
            stdout="",
            stderr=f"Command not found: {e.filename or cmd[0]}",
        )
    except OSError as e:
        return CommandResult(
            exit_code=1,
            stdout="",
            stderr=f"Error executing command: {e}",
        )

    return CommandResult(
        exit_code=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
    )
