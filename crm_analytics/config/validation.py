"""Configuration validation utilities."""

from dataclasses import dataclass, fields
from typing import Any

from .defaults import PERIOD_CODES, UNDATED_POLICIES, get_default_config


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_string_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_window_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate time-window parameters."""
        errors = []

        # Validate default_period
        if "default_period" in params:
            value = params["default_period"]
            if value not in PERIOD_CODES and value != "all":
                errors.append(ValidationError(
                    field="window.default_period",
                    message=f"Must be one of {', '.join(PERIOD_CODES)} or 'all'",
                    value=value
                ))

        # Validate undated_policy
        if "undated_policy" in params:
            value = params["undated_policy"]
            if value not in UNDATED_POLICIES:
                errors.append(ValidationError(
                    field="window.undated_policy",
                    message=f"Must be one of {', '.join(UNDATED_POLICIES)}",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_aggregation_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate grouping parameters."""
        errors = []

        if "unspecified_label" in params:
            value = params["unspecified_label"]
            if not isinstance(value, str) or not value.strip():
                errors.append(ValidationError(
                    field="aggregation.unspecified_label",
                    message="Must be a non-empty string",
                    value=value
                ))

        if "top_n" in params:
            value = params["top_n"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                errors.append(ValidationError(
                    field="aggregation.top_n",
                    message="Must be a non-negative integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_commission_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate commission valuation parameters."""
        errors = []

        if "recurring_multiplier" in params:
            value = params["recurring_multiplier"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="commission.recurring_multiplier",
                    message="Must be a non-negative number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_projection_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate projection and trend parameters."""
        errors = []

        # Validate bucket counts
        for name in ("trailing_months", "months_per_year"):
            if name in params:
                value = params[name]
                if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                    errors.append(ValidationError(
                        field=f"projection.{name}",
                        message="Must be a positive integer",
                        value=value
                    ))

        # Validate growth_floor
        if "growth_floor" in params:
            value = params["growth_floor"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="projection.growth_floor",
                    message="Must be a positive number",
                    value=value
                ))

        # Validate monthly_revenue_target
        if "monthly_revenue_target" in params:
            value = params["monthly_revenue_target"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="projection.monthly_revenue_target",
                    message="Must be a non-negative number",
                    value=value
                ))

        # Validate trend thresholds
        positive = params.get("positive_trend_pct", 5.0)
        negative = params.get("negative_trend_pct", -5.0)
        if not _is_number(positive) or not _is_number(negative):
            errors.append(ValidationError(
                field="projection.trend_thresholds",
                message="Trend thresholds must be numbers",
                value=(positive, negative)
            ))
        elif negative >= positive:
            errors.append(ValidationError(
                field="projection.trend_thresholds",
                message="negative_trend_pct must be below positive_trend_pct",
                value=(positive, negative)
            ))

        return errors

    @staticmethod
    def validate_tiers(name: str, tiers: Any, lower_is_better: bool = False) -> list[ValidationError]:
        """Validate one health-score tier table."""
        errors = []

        if not isinstance(tiers, (list, tuple)) or not tiers:
            return [ValidationError(
                field=f"health.{name}",
                message="Must be a non-empty list of (threshold, points) pairs",
                value=tiers
            )]

        for tier in tiers:
            if (not isinstance(tier, (list, tuple)) or len(tier) != 2
                    or not _is_number(tier[0]) or not _is_number(tier[1]) or tier[1] < 0):
                errors.append(ValidationError(
                    field=f"health.{name}",
                    message="Each tier must be a (threshold, non-negative points) pair",
                    value=tier
                ))
                return errors

        thresholds = [tier[0] for tier in tiers]
        expected = sorted(thresholds) if lower_is_better else sorted(thresholds, reverse=True)
        if thresholds != expected:
            errors.append(ValidationError(
                field=f"health.{name}",
                message="Tiers must be ordered from best to worst threshold",
                value=tiers
            ))

        return errors

    @staticmethod
    def validate_health_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate email health-score parameters."""
        errors = []
        defaults = get_default_config().health

        for name in ("delivery_tiers", "open_tiers", "click_tiers", "bounce_tiers"):
            if name in params:
                errors.extend(ConfigValidator.validate_tiers(
                    name, params[name], lower_is_better=name == "bounce_tiers"
                ))

        if not errors:
            # Best tiers together must not exceed a score of 100
            best_total = sum(
                max(points for _, points in params.get(name, getattr(defaults, name)))
                for name in ("delivery_tiers", "open_tiers", "click_tiers", "bounce_tiers")
            )
            if best_total > 100:
                errors.append(ValidationError(
                    field="health.tiers",
                    message="Best tiers must add up to at most 100 points",
                    value=best_total
                ))

        # Validate status bands
        good = params.get("good_score", defaults.good_score)
        warning = params.get("warning_score", defaults.warning_score)
        for name, value in (("good_score", good), ("warning_score", warning)):
            if not _is_number(value) or not 0 <= value <= 100:
                errors.append(ValidationError(
                    field=f"health.{name}",
                    message="Must be a number between 0 and 100",
                    value=value
                ))
        if _is_number(good) and _is_number(warning) and warning > good:
            errors.append(ValidationError(
                field="health.status_bands",
                message="warning_score must not exceed good_score",
                value=(good, warning)
            ))

        return errors

    @staticmethod
    def validate_benchmark_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate email benchmark parameters."""
        errors = []
        defaults = get_default_config().benchmarks

        for name in ("open_rate", "click_rate", "delivery_rate", "bounce_rate",
                     "unsubscribe_rate", "excellent_ratio", "good_ratio"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value < 0:
                    errors.append(ValidationError(
                        field=f"benchmarks.{name}",
                        message="Must be a non-negative number",
                        value=value
                    ))

        excellent = params.get("excellent_ratio", defaults.excellent_ratio)
        good = params.get("good_ratio", defaults.good_ratio)
        if _is_number(excellent) and _is_number(good) and excellent < good:
            errors.append(ValidationError(
                field="benchmarks.ratios",
                message="excellent_ratio must not be below good_ratio",
                value=(excellent, good)
            ))

        return errors

    @staticmethod
    def validate_funnel_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate funnel, stage and campaign-type parameters."""
        errors = []

        for name in ("prospect_status", "client_status", "inactive_status"):
            if name in params and not isinstance(params[name], str):
                errors.append(ValidationError(
                    field=f"funnel.{name}",
                    message="Must be a string",
                    value=params[name]
                ))

        # Stages are (name, keywords) pairs
        if "stages" in params:
            stages = params["stages"]
            if not isinstance(stages, (list, tuple)):
                errors.append(ValidationError(
                    field="funnel.stages",
                    message="Must be a list of (stage, keywords) pairs",
                    value=stages
                ))
            else:
                for stage in stages:
                    if (not isinstance(stage, (list, tuple)) or len(stage) != 2
                            or not isinstance(stage[0], str) or not _is_string_list(stage[1])):
                        errors.append(ValidationError(
                            field="funnel.stages",
                            message="Each stage must be a (name, list of keywords) pair",
                            value=stage
                        ))
                        break

        for name in ("lost_stages", "campaign_types"):
            if name in params and not _is_string_list(params[name]):
                errors.append(ValidationError(
                    field=f"funnel.{name}",
                    message="Must be a list of strings",
                    value=params[name]
                ))

        if "origin_aliases" in params:
            aliases = params["origin_aliases"]
            if not isinstance(aliases, (list, tuple)) or not all(
                isinstance(alias, (list, tuple)) and len(alias) == 2 and _is_string_list(alias)
                for alias in aliases
            ):
                errors.append(ValidationError(
                    field="funnel.origin_aliases",
                    message="Must be a list of (keyword, alias) string pairs",
                    value=aliases
                ))

        if "evolution_months" in params:
            value = params["evolution_months"]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                errors.append(ValidationError(
                    field="funnel.evolution_months",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_unknown_keys(config: dict[str, Any]) -> list[ValidationError]:
        """Report sections and keys the configuration does not define."""
        errors = []
        defaults = get_default_config()
        sections = {f.name: getattr(defaults, f.name) for f in fields(defaults)}

        for section, values in config.items():
            if section not in sections:
                errors.append(ValidationError(
                    field=section,
                    message="Unknown configuration section",
                    value=values
                ))
                continue
            if not isinstance(values, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Section must be a mapping",
                    value=values
                ))
                continue
            known = {f.name for f in fields(sections[section])}
            for key in values:
                if key not in known:
                    errors.append(ValidationError(
                        field=f"{section}.{key}",
                        message="Unknown configuration key",
                        value=values[key]
                    ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = ConfigValidator.validate_unknown_keys(config)
        if errors:
            return errors

        if "window" in config:
            errors.extend(ConfigValidator.validate_window_params(config["window"]))

        if "aggregation" in config:
            errors.extend(ConfigValidator.validate_aggregation_params(config["aggregation"]))

        if "commission" in config:
            errors.extend(ConfigValidator.validate_commission_params(config["commission"]))

        if "projection" in config:
            errors.extend(ConfigValidator.validate_projection_params(config["projection"]))

        if "health" in config:
            errors.extend(ConfigValidator.validate_health_params(config["health"]))

        if "benchmarks" in config:
            errors.extend(ConfigValidator.validate_benchmark_params(config["benchmarks"]))

        if "funnel" in config:
            errors.extend(ConfigValidator.validate_funnel_params(config["funnel"]))

        return errors
