"""
Main CLI application
"""
import typer
from pathlib import Path
from typing import Optional

from ...core.logging import setup_logging, get_logger
from ..config.loader import ConfigLoader
from .proxy import register_proxy_commands

logger = get_logger(__name__)

# Create main app
app = typer.Typer(
    name="sshproxygen",
    add_completion=False,
    help="SSH proxy user management tool",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

register_proxy_commands(app)


@app.callback()
def main(
    ctx: typer.Context,
    identity: Optional[Path] = typer.Option(
        None,
        "--identity", "-i",
        help="SSH identity file (overrides the registry's identity_key_path)",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Registry file path (default: /etc/sshproxygen/config.toml)",
    ),
    sshd_config: Optional[Path] = typer.Option(
        None,
        "--sshd-config",
        help="sshd configuration file (default: /etc/ssh/sshd_config)",
    ),
    sshd_service: Optional[str] = typer.Option(
        None,
        "--sshd-service",
        help="systemd unit restarted after changes (default: sshd)",
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Log file path",
    ),
):
    """
    sshproxygen - SSH proxy user management tool

    Manages restricted jump accounts whose SSH sessions are forced into a
    tunnel towards an internal target host.
    """
    setup_logging(level=log_level, log_file=log_file)

    ctx.obj = ConfigLoader().load(cli_overrides={
        "registry_path": config,
        "identity": identity,
        "sshd_config": sshd_config,
        "sshd_service": sshd_service,
    })
    logger.debug(f"Settings: {ctx.obj}")


def run():
    """CLI entry point"""
    app()


if __name__ == "__main__":
    run()
