"""Command handlers for CLI"""

import json
from typing import Any, Optional

from rich.console import Console
from rich.prompt import Prompt

from api_client import ApiClientError, AuthExpiredError, HttpClient
from cli.status_display import get_auth_status, show_session_status


def make_navigator(console: Console):
    """Navigator that tells the user to log in again instead of redirecting a browser"""
    def navigate(login_path: str) -> None:
        console.print(f"[yellow]Session ended.[/yellow] Log in again with: [bold]sublite login EMAIL[/bold] ({login_path})")
    return navigate


async def login(client: HttpClient, console: Console, email: str, password: Optional[str]) -> int:
    if not password:
        password = Prompt.ask("Password", password=True, console=console)

    try:
        login_data = await client.login(email, password)
    except ApiClientError as e:
        console.print(f"[red]Login failed:[/red] {e}")
        return 1

    name = login_data.user.name if login_data.user and login_data.user.name else email
    console.print(f"[green]✓ Logged in as {name}[/green]")
    return 0


async def logout(client: HttpClient, console: Console) -> int:
    await client.logout()
    console.print("[green]✓ Logged out[/green]")
    return 0


def status(client: HttpClient, console: Console) -> int:
    state, detail = get_auth_status(client.store)
    console.print(f"[bold]{state}[/bold]: {detail}")
    show_session_status(client.store, console)
    return 0


def _parse_data(data: Optional[str]) -> Any:
    if data is None:
        return None
    return json.loads(data)


async def request(
    client: HttpClient,
    console: Console,
    method: str,
    path: str,
    data: Optional[str] = None,
) -> int:
    try:
        body = _parse_data(data)
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid JSON for --data:[/red] {e}")
        return 2

    try:
        response = await client.request(method, path, json=body)
    except AuthExpiredError as e:
        console.print(f"[red]Authentication expired:[/red] {e}")
        return 1
    except ApiClientError as e:
        console.print(f"[red]Request failed:[/red] {e}")
        return 1

    if not response.content:
        console.print(f"[green]{response.status_code}[/green] (no content)")
        return 0

    try:
        console.print_json(data=response.json())
    except ValueError:
        console.print(response.text)
    return 0
