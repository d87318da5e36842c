"""
Comparator configuration model and resolver.

A ComparatorConfiguration holds a global ConfigurationSet and optional
per-test-case sets. Each set carries parameters and step rules; a step rule
can skip its step or override parameters for named step parameters.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

COMPARE_AS = "compareAs"
CHANGE_RESULT = "changeResult"
EXCLUDE_DIFF_WITH_STATUS = "excludeDiffWithStatus"
ER_SUBSTITUTION = "erSubstitution"
COMPARE_STEPS_COUNT = "compareStepsCount"


class ParameterBag:
    """
    Ordered multi-valued parameter collection.

    The same name may appear several times; get() returns the first value
    and get_all() every value in insertion order.
    """

    def __init__(self, items: Optional[Iterable[Tuple[str, str]]] = None):
        self._items: List[Tuple[str, str]] = []
        for name, value in items or []:
            self.put(name, value)

    def put(self, name: str, value: Any) -> None:
        self._items.append((name, "" if value is None else str(value)))

    def has(self, name: str) -> bool:
        return any(item_name == name for item_name, _ in self._items)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        for item_name, value in self._items:
            if item_name == name:
                return value
        return default

    def get_all(self, name: str) -> List[str]:
        return [value for item_name, value in self._items if item_name == name]

    def get_bool(self, name: str, default: bool = False) -> bool:
        value = self.get(name)
        if value is None:
            return default
        return value.strip().lower() == "true"

    def merged(self, *others: "ParameterBag") -> "ParameterBag":
        """Return a new bag with this bag's entries followed by the others'."""
        result = ParameterBag(self._items)
        for other in others:
            result._items.extend(other._items)
        return result

    def items(self) -> List[Tuple[str, str]]:
        return list(self._items)

    def to_dict(self) -> Dict[str, List[str]]:
        result: Dict[str, List[str]] = {}
        for name, value in self._items:
            result.setdefault(name, []).append(value)
        return result

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ParameterBag":
        """
        Build a bag from {name: value} or {name: [value, ...]}.

        Example:
            >>> bag = ParameterBag.from_dict({"changeResult": ["SIMILAR=IDENTICAL"]})
            >>> bag.get_all("changeResult")
            ['SIMILAR=IDENTICAL']
        """
        bag = cls()
        for name, value in (data or {}).items():
            if isinstance(value, (list, tuple)):
                for entry in value:
                    bag.put(name, entry)
            else:
                bag.put(name, value)
        return bag

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParameterBag):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"ParameterBag({self._items!r})"


@dataclass
class StepRule:
    """Rule for one step, keyed by its 1-based ER step number."""

    step: str
    skip: bool = False
    messages: Dict[str, ParameterBag] = field(default_factory=dict)

    def parameters(self, parameter_name: str) -> ParameterBag:
        """Parameters overriding the named step parameter (empty when none)."""
        return self.messages.get(parameter_name, ParameterBag())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StepRule":
        if "step" not in data:
            raise ValueError("Step rule missing required field: 'step'")
        messages = {
            str(name): ParameterBag.from_dict(params)
            for name, params in (data.get("messages") or {}).items()
        }
        return cls(step=str(data["step"]), skip=bool(data.get("skip", False)), messages=messages)


@dataclass
class ConfigurationSet:
    """Parameters and step rules, optionally bound to one test case id."""

    apply_to: str = ""
    parameters: ParameterBag = field(default_factory=ParameterBag)
    rules: List[StepRule] = field(default_factory=list)

    def step_rule(self, step_number: str) -> Optional[StepRule]:
        for rule in self.rules:
            if rule.step == step_number:
                return rule
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfigurationSet":
        return cls(
            apply_to=str(data.get("apply_to", "")),
            parameters=ParameterBag.from_dict(data.get("parameters")),
            rules=[StepRule.from_dict(rule) for rule in data.get("rules", [])],
        )


@dataclass
class ComparatorConfiguration:
    """Global configuration set plus test-case scoped sets."""

    global_set: ConfigurationSet = field(default_factory=ConfigurationSet)
    sets: List[ConfigurationSet] = field(default_factory=list)

    def configuration_set(self, apply_to: Optional[str]) -> ConfigurationSet:
        """Return the set bound to `apply_to`, falling back to the global set."""
        if apply_to:
            for config_set in self.sets:
                if config_set.apply_to == apply_to:
                    return config_set
        return self.global_set

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComparatorConfiguration":
        return cls(
            global_set=ConfigurationSet.from_dict(data.get("global") or {}),
            sets=[ConfigurationSet.from_dict(item) for item in data.get("sets", [])],
        )


class ConfigurationResolver:
    """
    Hierarchical lookup over a ComparatorConfiguration.

    Parameters resolve as global, then the test-case set, then the step rule
    entry for the parameter; later entries come last in the merged bag, so
    get_all() sees every level in that order.
    """

    def __init__(self, configuration: ComparatorConfiguration):
        self.configuration = configuration

    def global_parameters(self) -> ParameterBag:
        return self.configuration.global_set.parameters

    def step_rule(self, test_case_id: Optional[str], step_number: str) -> StepRule:
        """Return the rule for a step, or an empty rule when none is configured."""
        test_case_set = self.configuration.configuration_set(test_case_id)
        rule = test_case_set.step_rule(step_number)
        if rule is None and test_case_set is not self.configuration.global_set:
            rule = self.configuration.global_set.step_rule(step_number)
        return rule if rule is not None else StepRule(step=step_number)

    def parameters_for(
        self,
        test_case_id: Optional[str] = None,
        step_number: Optional[str] = None,
        parameter_name: Optional[str] = None,
    ) -> ParameterBag:
        bags = []
        test_case_set = self.configuration.configuration_set(test_case_id)
        if test_case_set is not self.configuration.global_set:
            bags.append(test_case_set.parameters)
        if step_number is not None and parameter_name is not None:
            bags.append(self.step_rule(test_case_id, step_number).parameters(parameter_name))
        return self.global_parameters().merged(*bags)
