"""Status display functionality for CLI"""

from rich.table import Table
from utils.storage import TokenStore


def show_session_status(store: TokenStore, console):
    """
    Display session status without revealing token values

    Args:
        store: TokenStore instance
        console: Rich console for output
    """
    status = store.get_status()

    table = Table(title="Session Status")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Access Token", "Present" if status["has_access_token"] else "None")
    table.add_row("Refresh Token", "Present" if status["has_refresh_token"] else "None")
    table.add_row("User ID", status["user_id"] or "-")
    table.add_row("User Name", status["user_name"] or "-")
    table.add_row("Session File", str(store.token_file))

    console.print(table)


def get_auth_status(store: TokenStore) -> tuple[str, str]:
    """
    Get a one-line authentication summary

    Args:
        store: TokenStore instance

    Returns:
        Tuple of (status, detail_message)
    """
    status = store.get_status()

    if not status["has_access_token"] and not status["has_refresh_token"]:
        return "NO AUTH", "Not logged in"

    name = status["user_name"] or status["user_id"] or "unknown user"
    if not status["has_access_token"]:
        return "REFRESH ONLY", f"{name} (access token will be renewed on next request)"
    return "LOGGED IN", name
