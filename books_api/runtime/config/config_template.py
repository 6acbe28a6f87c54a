"""Loading of the templated ``config.yaml``.

Placeholders are expanded from the process environment before the YAML is
parsed:

- ``${VAR}``: required, loading fails when ``VAR`` is unset
- ``${VAR:-default}``: ``default`` when ``VAR`` is unset
- ``${VAR:?message}``: required, ``message`` explains what to set

Comments are copied through untouched, so they may mention placeholders.
"""

import os
import re
from pathlib import Path

import yaml
from loguru import logger
from pydantic import ValidationError

from books_api.runtime.config.config_data import ConfigData
from books_api.runtime.config.settings import EnvironmentVariables

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")
# YAML comments start with '#' at the beginning of a line or after whitespace
_COMMENT = re.compile(r"(?:^|\s)#")


def _resolve(expression: str) -> str:
    if ":-" in expression:
        name, default = expression.split(":-", 1)
        return os.getenv(name, default)

    name, _, message = expression.partition(":?")
    value = os.getenv(name)
    if value is None:
        if message:
            raise ValueError(f"Required environment variable {name}: {message}")
        raise ValueError(f"Required environment variable {name} not set")
    return value


def substitute_env_vars(text: str) -> str:
    """Expand every placeholder outside of YAML comments in ``text``."""
    rendered = []
    for line in text.splitlines(keepends=True):
        comment = _COMMENT.search(line)
        split_at = comment.start() if comment else len(line)
        body, tail = line[:split_at], line[split_at:]
        rendered.append(_PLACEHOLDER.sub(lambda m: _resolve(m.group(1)), body) + tail)
    return "".join(rendered)


def apply_environment_overrides(env_mode: str) -> None:
    """Promote ``<ENV>_``-prefixed variables to their unprefixed names.

    With ``APP_ENVIRONMENT=test``, ``TEST_DATABASE_URL`` becomes ``DATABASE_URL``
    before the YAML template is rendered.
    """
    prefix = f"{env_mode.upper()}_"
    promoted = [var for var in os.environ if var.startswith(prefix)]
    logger.info("Applying environment-specific overrides: {}", promoted)

    for var_name in promoted:
        os.environ[var_name[len(prefix):]] = os.environ[var_name]
        logger.debug("Set environment variable {} from {}", var_name[len(prefix):], var_name)


def load_templated_yaml(file_path: Path) -> ConfigData:
    """Render and validate the configuration file at ``file_path``.

    Raises:
        ValueError: a required variable is missing, or the YAML or the
            resulting configuration is invalid
        FileNotFoundError: ``file_path`` does not exist
    """
    with open(file_path) as f:
        content = f.read()

    try:
        env_mode = EnvironmentVariables().environment
    except ValidationError as e:
        raise ValueError(f"Invalid environment settings: {e}") from e
    logger.info("Loading configuration for environment: {}", env_mode)
    apply_environment_overrides(env_mode)

    try:
        loaded = yaml.safe_load(substitute_env_vars(content))
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e
    if not loaded:
        raise ValueError(f"Configuration file {file_path} is empty")

    try:
        config = ConfigData(**loaded.get("config", {}))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    # The database password policy follows the application environment
    config.database.environment_mode = config.app.environment

    return config
