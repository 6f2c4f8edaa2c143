import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from design_drift.core.drift_config import (
    DEFAULT_AGGREGATION_STRATEGIES,
    DEFAULT_CONFIG_PATH,
    DEFAULT_DRIFT_DIR,
    DEFAULT_IGNORE_FILE,
    DEFAULT_MIN_GROUP_SIZE,
    DEFAULT_PATH_PATTERNS,
)
from design_drift.core.drift_models import Severity

logger = logging.getLogger(__name__)

BUILT_IN_STRATEGIES = ("value", "suggestion", "path", "entity")
RULE_DIMENSIONS = ("type", "severity", "file", "component", "token", "value")


class DriftRuleFilter(BaseModel):
    """
    Match criteria shared by ignore, promote and enforce rules.

    ``file`` is a glob tested against the signal location (line suffix
    removed); ``component``/``token`` are regexes tested against the entity
    name of component/token signals only; ``value`` is a regex tested against
    ``details["actual"]``. Every populated dimension must match. A filter
    with no dimension populated matches nothing.
    """
    model_config = ConfigDict(frozen=True)

    type: Optional[str] = None
    severity: Optional[Severity] = None
    file: Optional[str] = None
    component: Optional[str] = None
    token: Optional[str] = None
    value: Optional[str] = None

    def has_dimensions(self) -> bool:
        return any(getattr(self, name) is not None for name in RULE_DIMENSIONS)


class IgnoreRule(DriftRuleFilter):
    reason: Optional[str] = None


class PromoteRule(DriftRuleFilter):
    to: Severity
    reason: str = ""


class EnforceRule(DriftRuleFilter):
    reason: str = ""


class AggregationConfig(BaseModel):
    strategies: List[str] = Field(default_factory=lambda: list(DEFAULT_AGGREGATION_STRATEGIES))
    min_group_size: int = DEFAULT_MIN_GROUP_SIZE
    path_patterns: List[str] = Field(default_factory=lambda: list(DEFAULT_PATH_PATTERNS))

    @field_validator('strategies')
    @classmethod
    def check_strategies(cls, v):
        unknown = [name for name in v if name not in BUILT_IN_STRATEGIES]
        if unknown:
            raise ValueError(f"Unknown aggregation strategies: {unknown}")
        return v

    @field_validator('min_group_size')
    @classmethod
    def check_min_group_size(cls, v):
        if v < 1:
            raise ValueError("min_group_size must be at least 1")
        return v


class DriftConfig(BaseModel):
    """Rule configuration for one analysis run."""
    ignore: List[IgnoreRule] = Field(default_factory=list)
    promote: List[PromoteRule] = Field(default_factory=list)
    enforce: List[EnforceRule] = Field(default_factory=list)
    # Per-type severity overrides, applied before any rule.
    severity: Dict[str, Severity] = Field(default_factory=dict)
    # Drift types dropped entirely.
    exclude: List[str] = Field(default_factory=list)
    aggregation: AggregationConfig = Field(default_factory=AggregationConfig)

    min_severity: Optional[Severity] = None
    filter_type: Optional[str] = None
    include_ignored: bool = False


class DesignDriftConfig(BaseModel):
    """
    Central configuration model for design drift processing.
    """
    model_config = ConfigDict(extra="allow")

    project_root: Optional[str] = None
    drift: DriftConfig = Field(default_factory=DriftConfig)

    def require_project_root(self) -> Path:
        if not self.project_root:
            raise ValueError("project_root must be set in config to resolve .drift paths")
        return Path(self.project_root).resolve()

    def drift_dir(self) -> Path:
        return self.require_project_root() / DEFAULT_DRIFT_DIR

    def ignore_path(self) -> Path:
        return self.drift_dir() / DEFAULT_IGNORE_FILE


def load_config(
    config_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> DesignDriftConfig:
    """
    Load configuration from file and overrides.

    Priority:
    1. Overrides (if provided and not None)
    2. Config File (if provided or found at default path)
    3. Default Values

    Args:
        config_path: Path to the YAML config file. If None, tries 'drift.config.yaml'.
        overrides: Top-level config values that win over the file.

    Returns:
        DesignDriftConfig: The resolved configuration object.

    Raises:
        pydantic.ValidationError: If the merged values do not form a valid config.
    """
    config_data: Dict[str, Any] = {}

    target_path = config_path if config_path else DEFAULT_CONFIG_PATH
    path_obj = Path(target_path)

    if path_obj.exists() and path_obj.is_file():
        try:
            with open(path_obj, 'r', encoding='utf-8') as f:
                file_data = yaml.safe_load(f)
            if file_data:
                config_data.update(file_data)
            logger.info("Loaded configuration from %s", target_path)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Failed to load config file %s: %s", target_path, e)
    elif config_path:
        logger.warning("Config file not found at explicit path: %s", config_path)
    else:
        logger.info("No config file found at %s, using defaults.", DEFAULT_CONFIG_PATH)

    if overrides:
        for key, value in overrides.items():
            if value is not None:
                config_data[key] = value

    return DesignDriftConfig(**config_data)
