"""Protean Engine runner for the backoffice domain.

Starts the Engine that processes events asynchronously when the domain runs
with `event_processing = "async"` (the production overlay), so that
notification dispatch happens outside the admin's request.

Usage:
    python src/server.py
    python src/server.py --test-mode   # process pending messages and exit
"""

import argparse
import asyncio

from protean.server.engine import Engine


def _get_domain():
    """Import and initialize the backoffice domain."""
    from backoffice.domain import backoffice

    backoffice.init()
    return backoffice


async def run(test_mode: bool = False):
    engine = Engine(_get_domain(), test_mode=test_mode)
    await engine.run()


def main():
    parser = argparse.ArgumentParser(description="Backoffice Engine runner")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Process pending messages once and exit",
    )
    args = parser.parse_args()

    asyncio.run(run(test_mode=args.test_mode))


if __name__ == "__main__":
    main()
