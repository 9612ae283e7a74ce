"""
Editor configuration.

Settings can be given directly, loaded from a YAML or JSON file, or left at
their defaults. The API key itself is never stored in configuration; only the
name of the environment variable that holds it.

Example YAML file:
    ```yaml
    model: gpt-4.1
    track_changes: true
    api_key_env: OPENAI_API_KEY
    temperature: 0.2
    ```
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .constants import AVAILABLE_MODELS, DEFAULT_API_KEY_ENV, DEFAULT_MODEL, DEFAULT_SYSTEM_PROMPT
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class EditorConfig:
    """Settings for requesting and applying model edits.

    Attributes:
        model: Chat model id
        track_changes: Apply replies as suggestions (True) or directly (False)
        api_key_env: Environment variable holding the API key
        base_url: Alternative API endpoint, or None for the default
        system_prompt: System message sent with every request
        temperature: Sampling temperature, or None for the model default
    """

    model: str = DEFAULT_MODEL
    track_changes: bool = True
    api_key_env: str = DEFAULT_API_KEY_ENV
    base_url: str | None = None
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    temperature: float | None = None

    def validate(self) -> None:
        """Check field values.

        Raises:
            ConfigurationError: If any value is invalid
        """
        errors = []
        if not self.model:
            errors.append("model must not be empty")
        elif self.model not in AVAILABLE_MODELS:
            logger.warning("Model %s is not in the list of known models", self.model)
        if not self.api_key_env:
            errors.append("api_key_env must not be empty")
        if self.temperature is not None and not 0 <= self.temperature <= 2:
            errors.append(f"temperature must be between 0 and 2, got {self.temperature}")
        if errors:
            raise ConfigurationError("Invalid editor configuration", errors)

    def resolve_api_key(self) -> str:
        """Read the API key from the configured environment variable.

        Raises:
            ConfigurationError: If the variable is unset or empty
        """
        key = os.environ.get(self.api_key_env, "").strip()
        if not key:
            raise ConfigurationError(
                f"No API key found; set the {self.api_key_env} environment variable"
            )
        return key

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EditorConfig:
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                "Unknown configuration keys", [f"unknown key: {key}" for key in unknown]
            )
        config = cls(**data)
        config.validate()
        return config


def load_config(path: str | Path) -> EditorConfig:
    """Load editor configuration from a YAML or JSON file.

    The format is chosen by file extension (.json for JSON, anything else
    is read as YAML).

    Args:
        path: Path to the configuration file

    Returns:
        The validated configuration

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigurationError: If the file cannot be parsed or is invalid
    """
    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with open(file_path, encoding="utf-8") as f:
            if file_path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError("Config file must contain a dictionary/object")

    logger.debug("Loaded configuration from %s", file_path)
    return EditorConfig.from_dict(data)
