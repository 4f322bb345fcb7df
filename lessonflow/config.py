"""
Settings for lessonflow.

Settings are read from an optional YAML file and then overridden by
environment variables (a .env file in the working directory is loaded
first):

    LESSONFLOW_CONFIG     path to the YAML settings file
    LESSONFLOW_STORAGE    "memory" or "sqlite"
    LESSONFLOW_DB_PATH    SQLite progress database path
    LESSONFLOW_CATALOG    course catalog file (YAML or JSON)
    LESSONFLOW_USER_ID    learner id when no auth layer supplies one
    LESSONFLOW_LOG_LEVEL  logging level name
"""

import logging
import os
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError

from lessonflow.errors import ConfigError
from lessonflow.schemas import DEFAULT_QUIZ_PASS_THRESHOLD


ENV_PREFIX = "LESSONFLOW_"
ENV_OVERRIDES = {
    "STORAGE": "storage",
    "DB_PATH": "db_path",
    "CATALOG": "catalog_path",
    "USER_ID": "user_id",
    "LOG_LEVEL": "log_level",
}

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


class CourseControls(BaseModel):
    """Course-wide quiz behaviour chosen by admins."""
    default_quiz_pass_threshold: float = Field(DEFAULT_QUIZ_PASS_THRESHOLD, ge=0, le=100)
    allow_retakes: bool = True
    show_correct_answers_after_quiz: bool = True


class Settings(BaseModel):
    storage: Literal["memory", "sqlite"] = "sqlite"
    db_path: Optional[Path] = None  # None = ~/.lessonflow/progress.db
    catalog_path: Optional[Path] = None
    user_id: str = "guest"
    log_level: str = "INFO"
    course_controls: CourseControls = CourseControls()


def load_settings(path: Optional[Path] = None) -> Settings:
    """
    Load settings from YAML and environment.

    Args:
        path: Optional YAML file; falls back to $LESSONFLOW_CONFIG

    Returns:
        Validated Settings

    Raises:
        ConfigError: If the file is missing, is not a mapping, or fails validation
    """
    load_dotenv(find_dotenv(usecwd=True))

    data: dict[str, Any] = {}
    file_path = path or os.environ.get(f"{ENV_PREFIX}CONFIG")
    if file_path:
        file_path = Path(file_path)
        if not file_path.exists():
            raise ConfigError(f"Settings file not found: {file_path}")
        with open(file_path, "r", encoding="utf-8") as f:
            try:
                loaded = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {file_path}: {e}") from e
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"Settings file must contain a mapping: {file_path}")
        data.update(loaded)

    for env_name, field in ENV_OVERRIDES.items():
        value = os.environ.get(f"{ENV_PREFIX}{env_name}")
        if value:
            data[field] = value

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e


def setup_logging(level: str = "INFO"):
    """Configure root logging for an entry point."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ConfigError(f"Unknown log level: {level}")
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
