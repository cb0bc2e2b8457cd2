"""Scheduler entry point: one acquisition run per invocation."""

import asyncio
import sys

from replay_acquisition.app_logging import configure_logging
from replay_acquisition.containers import AppContainer, build_container
from replay_acquisition.domain.runs import RunStatus, RunSummary


async def run_once(container: AppContainer) -> RunSummary:
    """Run the driver once and release resources."""
    try:
        return await container.driver.run()
    finally:
        await container.close_resources()


def main() -> None:
    """Run a single acquisition pass; exit 1 if the booking source is down."""
    container = build_container()
    configure_logging(container.settings.log_level)
    summary = asyncio.run(run_once(container))
    if summary.status is RunStatus.FAILED_FATAL:
        sys.exit(1)


if __name__ == "__main__":
    main()
