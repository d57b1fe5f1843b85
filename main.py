#!/usr/bin/env python3
import logging
from dotenv import load_dotenv

from config.settings import get_app_config
from specialist_scheduler.consumer import start_consumer

logger = logging.getLogger(__name__)


def setup_logging():
    app_config = get_app_config()
    level = "DEBUG" if app_config["debug"] else app_config["log_level"].upper()
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


if __name__ == "__main__":
    # Load environment variables
    load_dotenv()
    setup_logging()

    try:
        logger.info("Starting specialist timetable consumer")
        start_consumer()
    except KeyboardInterrupt:
        logger.info("Consumer stopped by user")
    except Exception as e:
        logger.error(f"An error occurred: {e}", exc_info=True)
