"""Configuration - typed loading of environment variables"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from siteprogress.services.timestamps import resolve_timezone


@dataclass(frozen=True)
class AppConfig:
    """Application settings"""

    project_id: str
    firestore_database: str = "(default)"
    tasks_collection: str = "tasks"
    boq_collection: str = "boq_files"
    display_timezone: str = "UTC"
    read_timeout_seconds: float = 10.0

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load settings from the environment (and .env)"""
        load_dotenv()

        project_id = os.getenv("PROJECT_ID")
        if not project_id:
            raise ValueError("PROJECT_ID is not set in environment")

        display_timezone = os.getenv("DISPLAY_TIMEZONE", "UTC")
        try:
            resolve_timezone(display_timezone)
        except Exception as e:
            raise ValueError(f"DISPLAY_TIMEZONE is invalid: {display_timezone}") from e

        raw_timeout = os.getenv("READ_TIMEOUT_SECONDS", "10")
        try:
            read_timeout = float(raw_timeout)
        except ValueError:
            raise ValueError(
                f"READ_TIMEOUT_SECONDS must be a number: {raw_timeout}"
            ) from None
        if read_timeout <= 0:
            raise ValueError(f"READ_TIMEOUT_SECONDS must be positive: {raw_timeout}")

        return cls(
            project_id=project_id,
            firestore_database=os.getenv("FIRESTORE_DATABASE", "(default)"),
            tasks_collection=os.getenv("TASKS_COLLECTION", "tasks"),
            boq_collection=os.getenv("BOQ_COLLECTION", "boq_files"),
            display_timezone=display_timezone,
            read_timeout_seconds=read_timeout,
        )
