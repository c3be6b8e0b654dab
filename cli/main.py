"""CLI entry point and argument parsing"""

import sys
import argparse
from typing import List, Optional

import settings
from errors import WizardError
from utils.debug_console import configure_logging
from cli.cli_app import DeployerCLI


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Deploy the BPB panel worker to Cloudflare")
    parser.add_argument("--version", "-v", action="store_true", help="Show version and exit")
    parser.add_argument("--debug", "-d", action="store_true", help=f"Enable debug logging to {settings.DEBUG_LOG_FILE}")
    parser.add_argument(
        "--bundle",
        type=str,
        default=None,
        help="Upload a local worker bundle instead of downloading the latest release"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI"""
    args = build_parser().parse_args(argv)

    if args.version:
        print(settings.VERSION)
        sys.exit(0)

    console = configure_logging(
        debug=args.debug,
        log_level=settings.LOG_LEVEL,
        log_file=settings.DEBUG_LOG_FILE,
    )

    if settings.CLOUDFLARE_API_TOKEN:
        console.print("[dim]CLOUDFLARE_API_TOKEN is set, skipping browser login[/dim]")

    try:
        cli = DeployerCLI(
            console=console,
            bundle_path=args.bundle,
            api_token=settings.CLOUDFLARE_API_TOKEN,
            account_id=settings.CLOUDFLARE_ACCOUNT_ID,
        )
        cli.run()

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except WizardError as e:
        console.print(f"\n[red]✗ Deployment failed:[/red] {e}")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n[red]Fatal error:[/red] {e}")
        if args.debug:
            import traceback
            traceback.print_exc()
        sys.exit(1)

    return 0


if __name__ == "__main__":
    main()
