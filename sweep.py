"""Run the expiry sweep once, for schedulers that invoke a command.

Usage: python sweep.py
"""

import asyncio
import logging
import sys

import config
import logging_config
from db import AsyncSessionLocal, close_db
from errors import RepositoryError
from services.expiry_sweeper import run_sweep

logger = logging.getLogger("sweep")


async def main() -> int:
    try:
        async with AsyncSessionLocal() as session:
            result = await run_sweep(session)
    except RepositoryError:
        logger.exception("Expiry sweep failed; it will run again on the next schedule")
        return 1
    finally:
        await close_db()

    print(
        f"expired={result.expired_signups} "
        f"accounts_deactivated={len(result.deactivated_accounts)} "
        f"accounts_failed={len(result.failed_accounts)}"
    )
    return 0 if not result.failed_accounts else 2


if __name__ == "__main__":
    logging_config.setup_logging(config.settings.LOG_LEVEL)
    # On Windows, use SelectorEventLoop for psycopg compatibility
    if sys.platform == "win32":
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    sys.exit(asyncio.run(main()))
