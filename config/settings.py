import os
from typing import Dict, Any


def get_rabbitmq_config() -> Dict[str, Any]:
    """Get RabbitMQ configuration from environment variables"""
    return {
        "host": os.getenv("RABBITMQ_HOST", "localhost"),
        "port": int(os.getenv("RABBITMQ_PORT", 5672)),
        "vhost": os.getenv("RABBITMQ_VHOST", "/"),
        "username": os.getenv("RABBITMQ_USERNAME", "guest"),
        "password": os.getenv("RABBITMQ_PASSWORD", "guest"),
        "queue_name": os.getenv("RABBITMQ_QUEUE", "timetable"),
        "heartbeat": int(os.getenv("RABBITMQ_HEARTBEAT", 600)),
        "connection_attempts": int(os.getenv("RABBITMQ_CONNECTION_ATTEMPTS", 3)),
        "retry_delay": int(os.getenv("RABBITMQ_RETRY_DELAY", 5)),
    }


def get_app_config() -> Dict[str, Any]:
    """Get application configuration from environment variables"""
    return {
        "debug": os.getenv("DEBUG", "False").lower() == "true",
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
    }


def get_scheduler_config() -> Dict[str, Any]:
    """Get default scheduling constraints from environment variables"""
    return {
        "max_consecutive": int(os.getenv("SCHEDULER_MAX_CONSECUTIVE", 4)),
        "max_per_day": int(os.getenv("SCHEDULER_MAX_PER_DAY", 6)),
        "periods_per_day": int(os.getenv("SCHEDULER_PERIODS_PER_DAY", 6)),
    }
