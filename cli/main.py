"""CLI entry point and argument parsing"""

import argparse
import asyncio
import sys
from rich.console import Console

import settings
from api_client import HttpClient
from cli import commands
from utils.logging_utils import setup_logging


console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sublite API client CLI")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", default=None, help="Also append logs to this file")
    parser.add_argument("--base-url", default=None, help="Override API base URL (default: from config)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    login_parser = subparsers.add_parser("login", help="Log in and store the session")
    login_parser.add_argument("email", help="Email address or username")
    login_parser.add_argument("--password", "-p", default=None, help="Password (prompted if omitted)")

    subparsers.add_parser("logout", help="Revoke the refresh token and clear the session")
    subparsers.add_parser("status", help="Show the stored session")

    request_parser = subparsers.add_parser("request", help="Send an authenticated API request")
    request_parser.add_argument("method", choices=["GET", "POST", "PUT", "PATCH", "DELETE"], type=str.upper)
    request_parser.add_argument("path", help=f"Path under {settings.API_PREFIX}, e.g. /services")
    request_parser.add_argument("--data", default=None, help="JSON request body")

    return parser


async def run(args: argparse.Namespace) -> int:
    async with HttpClient(base_url=args.base_url, navigate=commands.make_navigator(console)) as client:
        if args.command == "login":
            return await commands.login(client, console, args.email, args.password)
        if args.command == "logout":
            return await commands.logout(client, console)
        if args.command == "status":
            return commands.status(client, console)
        return await commands.request(client, console, args.method, args.path, args.data)


def main():
    """Entry point for the CLI"""
    args = build_parser().parse_args()
    setup_logging("debug" if args.debug else settings.LOG_LEVEL, args.log_file)

    try:
        exit_code = asyncio.run(run(args))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        exit_code = 130
    except Exception as e:
        console.print(f"\n[red]Fatal error:[/red] {e}")
        if args.debug:
            import traceback
            traceback.print_exc()
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
