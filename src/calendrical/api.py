from __future__ import annotations
from datetime import date, time
from typing import Any, List, Optional

from .engines.engine import CalendricalEngine
from .engines.strategies import ResolverSpec
from .rules import iso
from .rules.field import Field
from .rules.registry import list_rules as _list_rules, rule_for_name
from .rules.rule import CalendricalRule
from .values import LOCAL_DATE, LOCAL_TIME


def _spec(spec: Any) -> Optional[ResolverSpec]:
    if spec is None or isinstance(spec, ResolverSpec):
        return spec
    return ResolverSpec.like(spec)


def merge(*calendricals: Any, spec: Any = None) -> CalendricalEngine:
    """Merge calendricals into a resolved engine. `spec` is a ResolverSpec or a preset name."""
    return CalendricalEngine.merge(*calendricals, spec=_spec(spec))


def derive(rule: Any, *calendricals: Any, spec: Any = None) -> Optional[Any]:
    return merge(*calendricals, spec=spec).derive(rule)


def derive_checked(rule: Any, *calendricals: Any, spec: Any = None) -> Any:
    return merge(*calendricals, spec=spec).derive_checked(rule)


def resolve_date(*calendricals: Any, spec: Any = None) -> date:
    return derive_checked(LOCAL_DATE, *calendricals, spec=spec)


def resolve_time(*calendricals: Any, spec: Any = None) -> time:
    return derive_checked(LOCAL_TIME, *calendricals, spec=spec)


def field(name: str, value: int) -> Field:
    return iso.field_of(name, value)


def rule(name: str) -> CalendricalRule:
    return rule_for_name(name)


def list_rules() -> List[str]:
    return _list_rules()


def resolver_spec(name: str) -> ResolverSpec:
    return ResolverSpec.like(name)
