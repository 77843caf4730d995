"""
Proxy CLI commands
"""
import typer
from pathlib import Path

from rich.markup import escape
from rich.table import Table

from ...core.logging import get_logger, get_stdout_console, get_stderr_console
from ...core.exceptions import SshProxyGenError
from ...core.utils import ensure_root, generate_identity_key, key_fingerprint
from ...domain.proxy import Reconciler
from ...infrastructure.state.registry_store import TomlRegistryStore
from ...infrastructure.system.accounts import SystemAccountManager
from ...infrastructure.system.sshd import SshdConfigurator
from ..config.loader import Settings
from .prompts import RichPromptProvider

logger = get_logger(__name__)
stdout_console = get_stdout_console()
stderr_console = get_stderr_console()
prompt_provider = RichPromptProvider()


def register_proxy_commands(app: typer.Typer) -> None:
    """Register proxy commands on the main app"""
    app.command(name="add")(proxy_add)
    app.command(name="remove")(proxy_remove)
    app.command(name="list")(proxy_list)
    app.command(name="install")(proxy_install)
    app.command(name="keygen")(proxy_keygen)


def build_reconciler(settings: Settings) -> Reconciler:
    """Wire the reconciler to the real registry, user database and sshd"""
    return Reconciler(
        store=TomlRegistryStore(),
        accounts=SystemAccountManager(shell=settings.shell),
        daemon=SshdConfigurator(settings.sshd_config, settings.sshd_service),
        registry_path=settings.registry_path,
        identity_override=settings.identity,
    )


def _reconciler(ctx: typer.Context) -> Reconciler:
    """Check privileges and build the reconciler for this invocation"""
    ensure_root()
    return build_reconciler(ctx.obj)


def _report_error(e: Exception, action: str) -> None:
    """Print an error for the operator"""
    if isinstance(e, SshProxyGenError):
        stderr_console.print(f"[red]{type(e).__name__}:[/red] {escape(str(e))}")
    else:
        logger.exception(f"Failed to {action}")
        stderr_console.print(f"[red]Error:[/red] Failed to {action}: {escape(str(e))}")


def proxy_add(
    ctx: typer.Context,
    descriptor: str = typer.Argument(
        ...,
        help="Proxy descriptor, format: proxy_user:target_user@target_host",
    ),
):
    """
    Add new proxy user

    Creates the system account, writes its sshd routing block and
    records it in the registry.

    Examples:
        sshproxygen add bkk10:proxyssh@172.16.10.1
    """
    try:
        record = _reconciler(ctx).add(descriptor)
    except Exception as e:
        _report_error(e, "add proxy")
        raise typer.Exit(1)

    stdout_console.print(
        f"[green]✓[/green] Added proxy '[cyan]{escape(record.proxy_user)}[/cyan]' -> "
        f"{escape(record.target_user)}@{escape(record.target_host)}:{record.port}"
    )


def proxy_remove(
    ctx: typer.Context,
    proxy_user: str = typer.Argument(..., help="Proxy user to remove"),
):
    """
    Remove proxy user

    Deletes the registry entry, the system account and its sshd routing
    block. Unknown users are ignored.
    """
    try:
        removed = _reconciler(ctx).remove(proxy_user)
    except Exception as e:
        _report_error(e, "remove proxy")
        raise typer.Exit(1)

    if removed:
        stdout_console.print(f"[green]✓[/green] Removed proxy '[cyan]{escape(proxy_user)}[/cyan]'")
    else:
        stdout_console.print(f"[yellow]Proxy '{escape(proxy_user)}' is not registered[/yellow]")


def proxy_list(ctx: typer.Context):
    """List all proxies"""
    try:
        listing = _reconciler(ctx).list()
    except Exception as e:
        _report_error(e, "list proxies")
        raise typer.Exit(1)

    fingerprint = key_fingerprint(listing.identity_key_path)
    stdout_console.print(f"SSH key: [cyan]{escape(str(listing.identity_key_path))}[/cyan]")
    if fingerprint:
        stdout_console.print(f"  Fingerprint: [dim]{fingerprint}[/dim]")

    if not listing.entries:
        stdout_console.print("[yellow]No proxies configured[/yellow]")
        return

    table = Table(title="Configured Proxies", show_header=True, header_style="bold cyan")
    table.add_column("Proxy User", style="cyan")
    table.add_column("Target User", style="green")
    table.add_column("Target Host", style="blue")
    table.add_column("Port", style="yellow")

    for record in listing.entries:
        table.add_row(
            record.proxy_user,
            record.target_user,
            record.target_host,
            str(record.port),
        )

    stdout_console.print(table)


def proxy_install(ctx: typer.Context):
    """
    Install proxies from the registry

    Creates missing accounts and routing blocks for every registered
    proxy. Safe to run repeatedly.
    """
    try:
        installed = _reconciler(ctx).install()
    except Exception as e:
        _report_error(e, "install proxies")
        raise typer.Exit(1)

    if not installed:
        stdout_console.print("[yellow]No proxies configured[/yellow]")
        return

    for record in installed:
        stdout_console.print(f"[green]✓[/green] Installed proxy '[cyan]{escape(record.proxy_user)}[/cyan]'")


def proxy_keygen(
    ctx: typer.Context,
    force: bool = typer.Option(
        False, "--force", "-f",
        help="Overwrite an existing key without asking",
    ),
):
    """
    Generate the SSH identity key used by forced tunnel commands

    The key is written to the registry's identity key path (or --identity).
    Its public half must be authorized on every target host.
    """
    try:
        key_path = Path(_reconciler(ctx).list().identity_key_path)

        if key_path.exists() and not force:
            if not prompt_provider.confirm(f"Key {key_path} exists. Overwrite?", default=False):
                stdout_console.print("[yellow]Kept existing key[/yellow]")
                return

        _, pub_path = generate_identity_key(key_path)
    except Exception as e:
        _report_error(e, "generate key")
        raise typer.Exit(1)

    stdout_console.print(f"[green]✓[/green] Generated key [cyan]{escape(str(key_path))}[/cyan]")
    stdout_console.print(f"  Public key: [cyan]{escape(pub_path)}[/cyan]")
