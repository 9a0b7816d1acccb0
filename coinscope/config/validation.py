"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

SORT_FIELDS = ("price", "change_24h", "market_cap", "volume_24h")
SORT_DIRECTIONS = ("asc", "desc")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_api_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate provider parameters."""
        errors = []

        if "base_url" in params:
            value = params["base_url"]
            if not isinstance(value, str) or not value.startswith(("http://", "https://")):
                errors.append(ValidationError(
                    field="api.base_url",
                    message="Must be an http(s) URL",
                    value=value
                ))

        if "vs_currency" in params:
            value = params["vs_currency"]
            if not isinstance(value, str) or not value.strip():
                errors.append(ValidationError(
                    field="api.vs_currency",
                    message="Must be a non-empty currency code",
                    value=value
                ))

        for name in ("timeout_seconds", "default_retry_after_seconds"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value <= 0:
                    errors.append(ValidationError(
                        field=f"api.{name}",
                        message="Must be a positive number",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_segment_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate segment parameters."""
        errors = []

        for name in ("size", "count", "default_page"):
            if name in params:
                value = params[name]
                if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                    errors.append(ValidationError(
                        field=f"segments.{name}",
                        message="Must be a positive integer",
                        value=value
                    ))

        page = params.get("default_page")
        count = params.get("count")
        if isinstance(page, int) and isinstance(count, int) and page > count:
            errors.append(ValidationError(
                field="segments.default_page",
                message="Must not exceed segments.count",
                value=page
            ))

        return errors

    @staticmethod
    def validate_view_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate coin table parameters."""
        errors = []

        if "default_sort_field" in params and params["default_sort_field"] not in SORT_FIELDS:
            errors.append(ValidationError(
                field="view.default_sort_field",
                message=f"Must be one of {', '.join(SORT_FIELDS)}",
                value=params["default_sort_field"]
            ))

        if "default_sort_direction" in params and params["default_sort_direction"] not in SORT_DIRECTIONS:
            errors.append(ValidationError(
                field="view.default_sort_direction",
                message="Must be 'asc' or 'desc'",
                value=params["default_sort_direction"]
            ))

        return errors

    @staticmethod
    def validate_compare_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate comparison parameters."""
        errors = []

        allowed = params.get("allowed_days")
        if allowed is not None:
            if (not isinstance(allowed, (list, tuple)) or not allowed
                    or not all(isinstance(d, int) and d > 0 for d in allowed)):
                errors.append(ValidationError(
                    field="compare.allowed_days",
                    message="Must be a non-empty list of positive integers",
                    value=allowed
                ))
                allowed = None

        if "default_days" in params:
            value = params["default_days"]
            if allowed is not None and value not in allowed:
                errors.append(ValidationError(
                    field="compare.default_days",
                    message="Must be one of compare.allowed_days",
                    value=value
                ))

        a = params.get("default_a")
        b = params.get("default_b")
        if a is not None and a == b:
            errors.append(ValidationError(
                field="compare.default_b",
                message="Must differ from compare.default_a",
                value=b
            ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
                errors.append(ValidationError(
                    field="logging.level",
                    message=f"Must be one of {', '.join(LOG_LEVELS)}",
                    value=value
                ))

        quiet = params.get("quiet_loggers")
        if quiet is not None and (not isinstance(quiet, (list, tuple))
                                  or not all(isinstance(name, str) for name in quiet)):
            errors.append(ValidationError(
                field="logging.quiet_loggers",
                message="Must be a list of logger names",
                value=quiet
            ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "api" in config:
            errors.extend(ConfigValidator.validate_api_params(config["api"]))

        if "segments" in config:
            errors.extend(ConfigValidator.validate_segment_params(config["segments"]))

        if "view" in config:
            errors.extend(ConfigValidator.validate_view_params(config["view"]))

        if "compare" in config:
            errors.extend(ConfigValidator.validate_compare_params(config["compare"]))

        if "logging" in config:
            errors.extend(ConfigValidator.validate_logging_params(config["logging"]))

        return errors
