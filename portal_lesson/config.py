"""
Runtime settings for the lesson, read from the environment.

A .env file in the working directory is loaded first, so values there act
like exported environment variables. Command-line flags override both.
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()  # load environment variables from .env file

DEFAULT_DB_PATH = os.path.join("data", "portal_mammals.sqlite")
DEFAULT_DATA_DIR = os.path.join("data", "sample")
DEFAULT_EXPORT_DIR = os.path.join("data", "exports")
DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass
class Settings:
    db_path: str = DEFAULT_DB_PATH
    data_dir: str = DEFAULT_DATA_DIR
    export_dir: str = DEFAULT_EXPORT_DIR
    log_dir: Optional[str] = DEFAULT_LOG_DIR
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings() -> Settings:
    """
    Build settings from PORTAL_* environment variables.

    An empty PORTAL_LOG_DIR turns off file logging.
    """
    log_dir = os.environ.get("PORTAL_LOG_DIR", DEFAULT_LOG_DIR)
    return Settings(
        db_path=os.environ.get("PORTAL_DB_PATH", DEFAULT_DB_PATH),
        data_dir=os.environ.get("PORTAL_DATA_DIR", DEFAULT_DATA_DIR),
        export_dir=os.environ.get("PORTAL_EXPORT_DIR", DEFAULT_EXPORT_DIR),
        log_dir=log_dir or None,
        log_level=os.environ.get("PORTAL_LOG_LEVEL", DEFAULT_LOG_LEVEL),
    )


settings = load_settings()
