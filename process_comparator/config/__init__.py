"""Comparator configuration: rule bags, resolver and runtime settings."""

from .configuration import (
    CHANGE_RESULT,
    COMPARE_AS,
    COMPARE_STEPS_COUNT,
    ER_SUBSTITUTION,
    EXCLUDE_DIFF_WITH_STATUS,
    ComparatorConfiguration,
    ConfigurationResolver,
    ConfigurationSet,
    ParameterBag,
    StepRule,
)

__all__ = [
    "CHANGE_RESULT",
    "COMPARE_AS",
    "COMPARE_STEPS_COUNT",
    "ER_SUBSTITUTION",
    "EXCLUDE_DIFF_WITH_STATUS",
    "ComparatorConfiguration",
    "ConfigurationResolver",
    "ConfigurationSet",
    "ParameterBag",
    "StepRule",
]
