#!/usr/bin/env python3
"""
Bookstore Query Runner
Main Entry Point
"""

import sys
import asyncio

from config import LOG_LEVEL, LOG_TO_FILE, LOG_DIR
from database.mongodb import MongoDB
from queries.core.utils import setup_logging, get_logger
from queries.services.query_runner import QueryRunner

logger = get_logger(__name__)


async def run_queries(database: MongoDB = None) -> int:
    """Run the bookstore script once; returns the process exit code"""
    runner = QueryRunner(database or MongoDB())
    report = await runner.run()
    if report.success:
        logger.info("🎉 All bookstore operations completed")
        return 0
    return 1


def main():
    """Main entry point"""
    setup_logging(LOG_LEVEL, LOG_TO_FILE, LOG_DIR)

    exit_code = 1
    try:
        exit_code = asyncio.run(run_queries())
    except KeyboardInterrupt:
        logger.info("👋 Received keyboard interrupt")
    except Exception as e:
        logger.critical(f"💥 Fatal error: {e}", exc_info=True)
    finally:
        logger.info("🏁 Query run ended")

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
