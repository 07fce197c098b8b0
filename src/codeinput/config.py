"""Configuration for a code input field.

Settings can be built in code or loaded from a JSON file, either flat or
nested under a ``"codeInput"`` key.
"""

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from codeinput.logger import get_logger

logger = get_logger("config")


class CodeInputConfig(BaseModel):
    """Settings for one code input instance."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    binding: str = Field(
        default="",
        description="Binding context (e.g. value set URL) passed unchanged to the lookup",
    )
    debounce_ms: int = Field(default=1000, ge=0, alias="debounceMs", description="Quiet interval before a lookup")
    min_query_length: int = Field(
        default=1, ge=1, alias="minQueryLength", description="Shorter input clears instead of searching"
    )
    max_results: Optional[int] = Field(
        default=None, ge=1, alias="maxResults", description="Truncate accepted candidate lists"
    )
    lookup_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        alias="lookupTimeout",
        description="Seconds before an in-flight lookup is reported as failed (None waits forever)",
    )
    cache_ttl: float = Field(
        default=0.0, ge=0, alias="cacheTtl", description="Seconds to reuse lookup results (0 disables)"
    )
    blur_grace_ms: int = Field(
        default=150, ge=0, alias="blurGraceMs", description="Delay before blur closes the dropdown"
    )

    @property
    def debounce_delay(self) -> float:
        """Debounce interval in seconds."""
        return self.debounce_ms / 1000

    @property
    def blur_grace(self) -> float:
        """Blur grace period in seconds."""
        return self.blur_grace_ms / 1000


def load_config(config_path: str | Path) -> CodeInputConfig:
    """
    Load code input settings from a JSON file.

    Args:
        config_path: Path to the JSON configuration file

    Returns:
        CodeInputConfig: Parsed configuration object

    Raises:
        FileNotFoundError: If the configuration file doesn't exist
        json.JSONDecodeError: If the JSON file is invalid
        ValidationError: If the configuration structure is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        logger.error(f"Config file not found: {config_path}")
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in config file {config_path}: {e}")
        raise

    if isinstance(data, dict) and "codeInput" in data:
        data = data["codeInput"]

    try:
        config = CodeInputConfig.model_validate(data)
    except ValidationError as e:
        logger.error(f"Invalid configuration structure in {config_path}: {e}")
        raise

    logger.info(f"Loaded code input config from {config_path} (binding='{config.binding}')")
    return config
