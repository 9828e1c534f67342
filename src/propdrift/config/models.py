"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (PROPDRIFT__SECTION__KEY)
3. Repo YAML (.propdrift/config.yaml)
4. Global YAML (~/.config/propdrift/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    PROPDRIFT__<SECTION>__<KEY>=<VALUE>

Examples:
    PROPDRIFT__LOGGING__LEVEL=DEBUG
    PROPDRIFT__HISTORY__MAX_VERSIONS=8
    PROPDRIFT__TRENDS__HIGH_CHANGE_THRESHOLD=15
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from propdrift.config.constants import CACHE_DIR_NAME, MAX_HISTORICAL_VERSIONS

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        PROPDRIFT__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every diffed version pair.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class HistoryConfig(BaseModel):
    """Snapshot storage and history window.

    Env vars:
        PROPDRIFT__HISTORY__CACHE_DIR: Where snapshot blobs are stored
        PROPDRIFT__HISTORY__MAX_VERSIONS: Snapshots kept in the history window
    """

    cache_dir: str = Field(
        default=CACHE_DIR_NAME,
        description="Cache directory. Relative paths resolve against the project root.",
    )
    max_versions: int = Field(
        default=MAX_HISTORICAL_VERSIONS,
        description="Snapshots retained in history. The compatibility matrix is O(n^2) in this.",
    )

    @field_validator("max_versions")
    @classmethod
    def validate_max_versions(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_versions must be >= 1, got {v}")
        return v


class TrendsConfig(BaseModel):
    """Thresholds for historical trend analysis.

    Env vars:
        PROPDRIFT__TRENDS__HIGH_FREQUENCY_DAYS: Cadence below this is "high frequency"
        PROPDRIFT__TRENDS__LOW_FREQUENCY_DAYS: Cadence above this is "low frequency"
        PROPDRIFT__TRENDS__HIGH_CHANGE_THRESHOLD: Per-component changes that imply high risk
    """

    high_frequency_days: float = Field(
        default=7.0,
        description="Average days between versions below which risk is at least medium.",
    )
    low_frequency_days: float = Field(
        default=30.0,
        description="Average days between versions above which updates count as infrequent.",
    )
    high_change_threshold: int = Field(
        default=10,
        description="A component with more recorded changes than this makes risk high.",
    )
    top_components: int = Field(
        default=3,
        description="How many of the most changed components to report.",
    )


class PathsConfig(BaseModel):
    """Effort thresholds for multi-version migration paths.

    Env vars:
        PROPDRIFT__PATHS__HIGH_BREAKING_THRESHOLD
        PROPDRIFT__PATHS__MEDIUM_BREAKING_THRESHOLD
    """

    high_breaking_threshold: int = Field(
        default=10,
        description="More breaking changes than this makes a path high effort.",
    )
    medium_breaking_threshold: int = Field(
        default=3,
        description="More breaking changes than this makes a path medium effort.",
    )
    high_path_length: int = Field(
        default=3,
        description="Paths visiting more versions than this are high effort.",
    )
    medium_path_length: int = Field(
        default=2,
        description="Paths visiting more versions than this are medium effort.",
    )
    frequent_component_steps: int = Field(
        default=2,
        description="A component touched in more steps than this gets called out.",
    )

    @model_validator(mode="after")
    def validate_ordering(self) -> "PathsConfig":
        if self.medium_breaking_threshold > self.high_breaking_threshold:
            raise ValueError("medium_breaking_threshold must not exceed high_breaking_threshold")
        if self.medium_path_length > self.high_path_length:
            raise ValueError("medium_path_length must not exceed high_path_length")
        return self


class PropDriftConfig(BaseModel):
    """Root configuration for propdrift.

    All settings can be configured via:
    1. Environment variables: PROPDRIFT__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    trends: TrendsConfig = Field(default_factory=TrendsConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
