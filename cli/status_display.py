"""Status display functionality for CLI"""

from rich.table import Table

from nocaptcha import FileSessionStore, get_session_id


def show_session_status(store: FileSessionStore, api_url: str, console):
    """
    Display verification session status

    Args:
        store: FileSessionStore instance
        api_url: Verification service base URL
        console: Rich console for output
    """
    session_id = get_session_id(store)

    table = Table(title="NoCaptcha Session")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    if session_id:
        table.add_row("Status", "[green]✓ Verified[/green]")
        table.add_row("Session ID", f"[dim]{session_id[:20]}...[/dim]" if len(session_id) > 20 else session_id)
    else:
        table.add_row("Status", "[yellow]Not verified[/yellow]")

    table.add_row("Session File", str(store.session_file))
    table.add_row("Service", api_url)

    console.print(table)
