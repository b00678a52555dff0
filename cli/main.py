"""CLI entry point and argument parsing"""

import argparse
import asyncio
import logging
import sys

import settings
from nocaptcha import (
    FileSessionStore,
    Fido2Authenticator,
    NoCaptchaApi,
    Verifier,
    VerifierConfig,
    clear_session_id,
)
from cli.shell import ConsoleShell, TouchPrompt
from cli.status_display import show_session_status
from utils.debug_console import configure_logging, create_debug_console


logger = logging.getLogger(__name__)


async def run_verification(verifier: Verifier, console) -> bool:
    """Attach the verifier and run one attempt unless already verified

    Returns:
        True if the subject ends up verified
    """
    if await verifier.attach():
        return True

    result = await verifier.start_verification()
    if result is None:
        console.print("[yellow]Verification was cancelled or the authenticator is unavailable[/yellow]")
        return False
    return result.is_success()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="NoCaptcha verification client")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument("--api-url", default=None, help="Override verification service URL (default: from config)")
    parser.add_argument("--session-file", default=None, help="Override session file (default: from config)")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("verify", help="Confirm you are a human with your authenticator")
    subparsers.add_parser("status", help="Show the stored verification session")
    subparsers.add_parser("reset", help="Forget the stored verification session")
    return parser


def main(argv=None) -> int:
    """Entry point for the CLI"""
    parser = build_parser()
    args = parser.parse_args(argv)
    command = args.command or "verify"

    debug_logger = configure_logging(settings.LOG_LEVEL, args.debug, settings.DEBUG_LOG_FILE)
    console = create_debug_console(debug_enabled=args.debug, debug_logger=debug_logger)

    api_url = args.api_url or settings.NOCAPTCHA_API_URL
    store = FileSessionStore(args.session_file)

    if command == "status":
        show_session_status(store, api_url, console)
        return 0

    if command == "reset":
        if clear_session_id(store):
            console.print("[green]✓ Verification session cleared[/green]")
            return 0
        console.print("[red]ERROR:[/red] Failed to clear verification session")
        return 1

    config = VerifierConfig(
        on_init=lambda: logger.debug("Verifier attached"),
        on_verify=lambda *_: console.print("[green]✓ Verified - you are a human[/green]"),
    )
    verifier = Verifier(
        api=NoCaptchaApi(base_url=api_url),
        authenticator=Fido2Authenticator(user_interaction=TouchPrompt(console)),
        store=store,
        shell=ConsoleShell(console),
        config=config,
    )

    try:
        verified = asyncio.run(run_verification(verifier, console))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return 1

    return 0 if verified else 1


if __name__ == "__main__":
    sys.exit(main())
