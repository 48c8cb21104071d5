"""Application configuration."""
import os
from dataclasses import dataclass
from pathlib import Path

from .errors import ValidationFailure

DEFAULT_DATABASE_URL = "sqlite:///./exam_roster.db"
DEFAULT_DATASET_PREFIX = "allocation_"
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10MB


def _int_env(name, default):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationFailure(f"{name} must be an integer", setting=name, value=raw)
    if value <= 0:
        raise ValidationFailure(f"{name} must be positive", setting=name, value=raw)
    return value


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    dataset_prefix: str = DEFAULT_DATASET_PREFIX
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    export_dir: Path = Path("exports")
    log_level: str = "INFO"

    @classmethod
    def from_env(cls):
        return cls(
            database_url=os.environ.get("EXAM_ROSTER_DATABASE_URL", DEFAULT_DATABASE_URL),
            dataset_prefix=os.environ.get("EXAM_ROSTER_DATASET_PREFIX", DEFAULT_DATASET_PREFIX),
            max_upload_bytes=_int_env("EXAM_ROSTER_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
            export_dir=Path(os.environ.get("EXAM_ROSTER_EXPORT_DIR", "exports")),
            log_level=os.environ.get("EXAM_ROSTER_LOG_LEVEL", "INFO").upper(),
        )
