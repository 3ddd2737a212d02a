"""Entry point: python -m wordpresser

First run prints an authorization URL and waits for the pasted code;
later runs go straight to the dashboard using the cached token.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import httpx
from rich.console import Console
from rich.markup import escape

from wordpresser.auth import obtain_token
from wordpresser.client import ApiError, AuthError
from wordpresser.config import Settings, load_settings
from wordpresser.dashboard.app import NoSitesError, run_dashboard

logger = logging.getLogger("wordpresser")


def setup_logging(log_dir: Path) -> None:
    """Log to a file; the terminal belongs to the dashboard."""
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "wordpresser.log"

    formatter = logging.Formatter(
        "[%(asctime)s] %(message)s", datefmt="%H:%M:%S",
    )

    file_handler = logging.FileHandler(log_file, mode="a")
    file_handler.setFormatter(formatter)

    root = logging.getLogger("wordpresser")
    root.setLevel(logging.INFO)
    root.handlers.clear()
    root.addHandler(file_handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger.info("Logging to %s", log_file)


async def _run(settings: Settings, console: Console) -> None:
    token = await obtain_token(settings, console=console)
    await run_dashboard(settings, token, console=console)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Live terminal dashboard for WordPress.com site stats",
    )
    parser.parse_args()

    settings = load_settings()
    setup_logging(settings.data_dir / "logs")
    console = Console()

    try:
        asyncio.run(_run(settings, console))
    except KeyboardInterrupt:
        pass
    except AuthError as exc:
        logger.error("Authorization failed: %s", exc)
        console.print(f"[red]Authorization failed:[/red] {escape(str(exc))}")
        console.print("Check the WORDPRESSER_* settings and run again to re-authorize.")
        sys.exit(1)
    except (ApiError, NoSitesError, httpx.HTTPError) as exc:
        logger.error("Could not load sites: %s", exc)
        console.print(f"[red]Could not load sites:[/red] {escape(str(exc))}")
        sys.exit(1)


if __name__ == "__main__":
    main()
