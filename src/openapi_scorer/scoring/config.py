"""Scoring configuration: per-criterion weights with hard-coded defaults."""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

CRITERIA = (
    "schema_types",
    "documentation",
    "paths_operations",
    "response_codes",
    "examples",
    "security",
    "best_practices",
)


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or validated."""


class ScoringWeights(BaseModel):
    """Point budget of each criterion. Not renormalized: a total other than 100 is kept as is."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    schema_types: float = 20
    documentation: float = 20
    paths_operations: float = 15
    response_codes: float = 15
    examples: float = 10
    security: float = 10
    best_practices: float = 10

    @property
    def total(self) -> float:
        return sum(getattr(self, key) for key in CRITERIA)


class ScoringConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    weights: ScoringWeights = ScoringWeights()

    def criteria(self) -> list[tuple[str, float]]:
        """Return ``(key, weight)`` for each criterion in evaluation order."""
        return [(key, getattr(self.weights, key)) for key in CRITERIA]


def load_config(file_path: Path) -> ScoringConfig:
    """Load a ScoringConfig from a YAML (or JSON) file.

    Example file::

        weights:
          schemaTypes: 30
          examples: 0
    """
    logger.info("Loading scoring config from %s", file_path)
    try:
        data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read config {file_path}: {e}") from e

    if data is None:
        return ScoringConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config {file_path} must be a mapping, got {type(data).__name__}")

    try:
        return ScoringConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {file_path}: {e}") from e
