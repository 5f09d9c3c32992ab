from __future__ import annotations
from typing import Any, Dict, List, Optional

from ..core.units import PeriodUnit
from .rule import CalendricalRule, DateTimeRule

_RULES: Dict[str, CalendricalRule] = {}
_TYPE_RULES: Dict[type, CalendricalRule] = {}


def register_rule(rule: CalendricalRule, *, overwrite: bool = False) -> CalendricalRule:
    if (not overwrite) and (rule.name in _RULES) and _RULES[rule.name] is not rule:
        raise KeyError(f"Rule '{rule.name}' already exists. Use overwrite=True to replace.")
    _RULES[rule.name] = rule
    return rule


def rule_for_name(name: str) -> CalendricalRule:
    if name not in _RULES:
        raise KeyError(f"Unknown rule '{name}'. Available: {sorted(_RULES)}")
    return _RULES[name]


def list_rules() -> List[str]:
    return sorted(_RULES.keys())


def date_time_rules() -> List[DateTimeRule]:
    return sorted(r for r in _RULES.values() if isinstance(r, DateTimeRule))


def register_type_rule(tp: type, rule: CalendricalRule) -> None:
    _TYPE_RULES[tp] = rule


def rule_for_type(tp: type) -> CalendricalRule:
    if tp not in _TYPE_RULES:
        raise KeyError(f"No rule for type {tp.__name__}. Available: {sorted(t.__name__ for t in _TYPE_RULES)}")
    return _TYPE_RULES[tp]


def related_rule(base: DateTimeRule, unit: PeriodUnit, period_range: Optional[PeriodUnit]) -> Optional[DateTimeRule]:
    """The registered canonical rule of `base`'s group measuring `unit` within `period_range`."""
    for rule in _RULES.values():
        if (
            isinstance(rule, DateTimeRule)
            and rule.base_rule is base
            and rule.normalization_rule is rule
            and rule.period_unit is unit
            and rule.period_range is period_range
        ):
            return rule
    return None


def resolve_rule(rule: Any) -> CalendricalRule:
    """Accept a rule, a registered rule name, or a value type."""
    if isinstance(rule, CalendricalRule):
        return rule
    if isinstance(rule, str):
        return rule_for_name(rule)
    if isinstance(rule, type):
        # value types register their rules on import
        from .. import values  # noqa: F401
        return rule_for_type(rule)
    raise TypeError(f"Unknown rule type: {type(rule)}")
