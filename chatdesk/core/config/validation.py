"""Read chatdesk settings from the environment.

Each variable declared in `ConfigSchema` is read, coerced to its declared
type and checked. Blank values fall back to the declared default.
"""

import os
from collections.abc import Callable
from typing import Any

from chatdesk.core.config.schema import ConfigSchema, EnvVarSpec

_TRUTHY = frozenset({"true", "1", "yes", "on"})

_BUILTIN_COERCIONS: dict[type, Callable[[str], Any]] = {
    bool: lambda raw: raw.strip().lower() in _TRUTHY,
    int: int,
    float: float,
}


class SettingsError(Exception):
    """An environment variable chatdesk cannot use."""

    def __init__(self, env_var: str, value: str, message: str) -> None:
        self.env_var = env_var
        self.value = value
        self.message = message
        super().__init__(f"{env_var}={value}: {message}")


def _coerce(spec: EnvVarSpec, raw_value: str) -> Any:
    if spec.coerce is not None:
        return spec.coerce(raw_value)
    convert = _BUILTIN_COERCIONS.get(spec.type_hint)
    return convert(raw_value) if convert else raw_value


def load_env_var(spec: EnvVarSpec) -> Any:
    """Return the typed value of one schema variable.

    Raises:
        SettingsError: The value does not convert or fails the spec's validator
    """
    raw_value = os.environ.get(spec.name)
    if raw_value is None or not raw_value.strip():
        return spec.default

    type_name = spec.type_hint.__name__
    try:
        value = _coerce(spec, raw_value)
    except (ValueError, TypeError) as e:
        raise SettingsError(spec.name, raw_value, f"Cannot convert to {type_name}: {e}") from e

    if spec.validator is None:
        return value
    try:
        accepted = spec.validator(value)
    except TypeError as e:
        raise SettingsError(spec.name, raw_value, f"Validation error: {e}") from e
    if not accepted:
        raise SettingsError(spec.name, raw_value, f"Validation failed for type {type_name}")
    return value


def validate_all() -> list[SettingsError]:
    """Load every schema variable, collecting failures instead of stopping at the first."""
    errors: list[SettingsError] = []
    for spec in ConfigSchema.all_specs().values():
        try:
            load_env_var(spec)
        except SettingsError as e:
            errors.append(e)
    return errors
