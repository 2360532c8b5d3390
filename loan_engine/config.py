"""
Configuration Store

Holds the process-wide RateTable and ValidationRules. Admin saves replace a
whole object in one assignment; readers take a snapshot of both at once so a
single calculation never sees a mix of old and new values.
"""

import logging
import threading
from decimal import InvalidOperation

from .models import RateTable, ValidationRules
from .validators import ConfigValidator

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Admin configuration rejected. `errors` lists every failed bound."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


def parse_rate_table(data: dict) -> RateTable:
    """Build a RateTable from a request body, raising ConfigurationError on bad values."""
    return _parse(RateTable, data)


def parse_validation_rules(data: dict) -> ValidationRules:
    """Build ValidationRules from a request body, raising ConfigurationError on bad values."""
    return _parse(ValidationRules, data)


def _parse(model, data):
    if not isinstance(data, dict):
        raise ConfigurationError(["Configuration must be a JSON object"])

    unknown = sorted(set(data) - set(model.__dataclass_fields__))
    if unknown:
        raise ConfigurationError([f"Unknown field: {name}" for name in unknown])

    # Replacements are whole objects; a missing field is never filled from defaults
    missing = [name for name in model.__dataclass_fields__ if name not in data]
    if missing:
        raise ConfigurationError([f"Missing field: {name}" for name in missing])

    errors = []
    for name, value in data.items():
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            errors.append(f"{name} must be a number, got: {value!r}")
    if errors:
        raise ConfigurationError(errors)

    try:
        config = model.from_dict(data)
    except (InvalidOperation, OverflowError, ValueError, TypeError) as e:
        raise ConfigurationError([f"Invalid configuration value: {e}"]) from e

    non_finite = [
        f"{name} must be a finite number"
        for name in model.__dataclass_fields__
        if not _is_finite(getattr(config, name))
    ]
    if non_finite:
        raise ConfigurationError(non_finite)
    return config


def _is_finite(value) -> bool:
    if isinstance(value, int):
        return True
    return value.is_finite()


class ConfigStore:
    """Process-wide configuration with last-write-wins, whole-object replacement."""

    def __init__(self, rates: RateTable | None = None, rules: ValidationRules | None = None):
        self._validator = ConfigValidator()
        self._lock = threading.Lock()
        self._current = (rates or RateTable(), rules or ValidationRules())

    @property
    def rate_table(self) -> RateTable:
        return self._current[0]

    @property
    def validation_rules(self) -> ValidationRules:
        return self._current[1]

    def snapshot(self) -> tuple[RateTable, ValidationRules]:
        """Both objects as one consistent pair."""
        return self._current

    def replace_rate_table(self, table: RateTable) -> RateTable:
        errors = self._validator.validate_rate_table(table)
        if errors:
            logger.warning(f"Rejected rate table update: {errors}")
            raise ConfigurationError(errors)

        with self._lock:
            self._current = (table, self._current[1])
        logger.info("Rate table replaced")
        return table

    def replace_validation_rules(self, rules: ValidationRules) -> ValidationRules:
        errors = self._validator.validate_rules(rules)
        if errors:
            logger.warning(f"Rejected validation rules update: {errors}")
            raise ConfigurationError(errors)

        with self._lock:
            self._current = (self._current[0], rules)
        logger.info("Validation rules replaced")
        return rules

    def reset(self) -> None:
        """Restore the default rate table and rules."""
        with self._lock:
            self._current = (RateTable(), ValidationRules())
        logger.info("Configuration reset to defaults")


# Shared by the HTTP and Lambda entry points
default_store = ConfigStore()
