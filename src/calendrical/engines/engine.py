"""
calendrical.engines.engine
--------------------------
The resolver. An engine is built for one resolution: inputs contribute a
date, a time, an offset, a zone, a chronology and loose fields; these are
merged with conflict detection, validated, normalized into as few fields as
possible, assembled into a date and time, and finally queried with `derive`.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timezone, tzinfo
from functools import cmp_to_key
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..core.chrono import ISO, ISOChronology
from ..core.errors import (
    CalendricalConflictError,
    CalendricalError,
    CalendricalOverflowError,
    InvalidFieldValueError,
    UnsupportedCalendricalError,
    UnsupportedRuleError,
)
from ..core.arith import safe_add, safe_multiply
from ..core.interfaces import Calendrical, Contributor
from ..core.units import compare_units
from ..rules.field import Field
from ..rules.registry import date_time_rules, related_rule, resolve_rule, rule_for_name
from ..rules.rule import CalendricalRule, DateTimeRule
from .strategies import ResolverSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Contribution:
    """What one input hands to the engine."""
    date: Optional[date] = None
    time: Optional[time] = None
    offset: Optional[timezone] = None
    zone: Optional[tzinfo] = None
    chronology: Optional[ISOChronology] = None
    fields: Tuple[Field, ...] = ()


def _offset_of(tz: tzinfo, dt: Optional[datetime] = None) -> Optional[timezone]:
    delta = tz.utcoffset(dt)
    return timezone(delta) if delta is not None else None


def contribute(obj: Any) -> Contribution:
    """Turn any supported calendrical into a Contribution."""
    if isinstance(obj, Contribution):
        return obj
    if isinstance(obj, Field):
        return Contribution(fields=(obj,))
    if isinstance(obj, CalendricalEngine):
        return obj.contribution()
    if isinstance(obj, Contributor):
        return obj.contribution()
    if isinstance(obj, tuple) and len(obj) == 2 and isinstance(obj[0], DateTimeRule):
        return Contribution(fields=(Field.of(obj[0], obj[1]),))
    if isinstance(obj, datetime):
        if obj.tzinfo is None:
            return Contribution(date=obj.date(), time=obj.time(), chronology=ISO)
        zone = None if isinstance(obj.tzinfo, timezone) else obj.tzinfo
        return Contribution(
            date=obj.date(), time=obj.time(), offset=_offset_of(obj.tzinfo, obj), zone=zone, chronology=ISO,
        )
    if isinstance(obj, date):
        return Contribution(date=obj, chronology=ISO)
    if isinstance(obj, time):
        offset = _offset_of(obj.tzinfo) if isinstance(obj.tzinfo, timezone) else None
        return Contribution(time=obj.replace(tzinfo=None), offset=offset, chronology=ISO)
    if isinstance(obj, timezone):
        return Contribution(offset=obj)
    if isinstance(obj, tzinfo):
        return Contribution(zone=obj)
    if isinstance(obj, ISOChronology):
        return Contribution(chronology=obj)
    if isinstance(obj, Calendrical):
        c = _query(obj)
        if c != Contribution():
            return c
    raise UnsupportedCalendricalError(f"Unknown calendrical type: {type(obj)}")


def _query(cal: Calendrical) -> Contribution:
    """Ask an object that only answers `get(rule)` for everything the engine stores."""
    state = {
        name: cal.get(rule_for_name(rule))
        for name, rule in (
            ("date", "LocalDate"),
            ("time", "LocalTime"),
            ("offset", "ZoneOffset"),
            ("zone", "ZoneId"),
            ("chronology", "Chronology"),
        )
    }
    fields = []
    for rule in date_time_rules():
        value = cal.get(rule)
        if value is None:
            continue
        fields.append(value if isinstance(value, Field) else Field.of(rule, value))
    logger.debug("Queried %r: %s, fields %s", cal, state, [str(f) for f in fields])
    return Contribution(fields=tuple(fields), **state)


def _compare_for_merge(a: Field, b: Field) -> int:
    # widest range first, then finest unit
    c = compare_units(b.rule.period_range, a.rule.period_range)
    if c == 0:
        c = compare_units(a.rule.period_unit, b.rule.period_unit)
    return c


class CalendricalEngine:
    def __init__(self, spec: Optional[ResolverSpec] = None):
        self.spec = spec if spec is not None else ResolverSpec.like("iso")
        self._date: Optional[date] = None
        self._time: Optional[time] = None
        self._offset: Optional[timezone] = None
        self._zone: Optional[tzinfo] = None
        self._chronology: Optional[ISOChronology] = None
        self._fields: Dict[DateTimeRule, Field] = {}

    # ------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------

    @classmethod
    def merge(cls, *calendricals: Any, spec: Optional[ResolverSpec] = None) -> "CalendricalEngine":
        """
        Merge calendricals into one validated, normalized engine.

        Raises CalendricalConflictError when inputs disagree and
        InvalidFieldValueError when a field is outside its rule's range.
        """
        engine = cls(spec)
        for cal in calendricals:
            engine._absorb(contribute(cal))
        logger.debug("Merged %d calendricals: %r", len(calendricals), engine)
        engine._validate()
        engine.normalize()
        return engine

    @classmethod
    def derive_with(
        cls,
        rule: Any,
        *,
        date: Optional[date] = None,
        time: Optional[time] = None,
        offset: Optional[timezone] = None,
        zone: Optional[tzinfo] = None,
        chronology: Optional[ISOChronology] = None,
        fields: Iterable[Field] = (),
        spec: Optional[ResolverSpec] = None,
    ) -> Optional[Any]:
        """Derive `rule` from raw state without validating field values first."""
        engine = cls(spec)
        engine._absorb(Contribution(date, time, offset, zone, chronology, tuple(fields)))
        engine.normalize()
        return engine.derive(rule)

    def contribution(self) -> Contribution:
        return Contribution(
            self._date, self._time, self._offset, self._zone, self._chronology, tuple(self._fields.values()),
        )

    # ------------------------------------------------------------
    # State
    # ------------------------------------------------------------

    @property
    def date(self) -> Optional[date]:
        return self._date

    @property
    def time(self) -> Optional[time]:
        return self._time

    @property
    def offset(self) -> Optional[timezone]:
        return self._offset

    @property
    def zone(self) -> Optional[tzinfo]:
        return self._zone

    @property
    def chronology(self) -> Optional[ISOChronology]:
        return self._chronology

    @property
    def fields(self) -> Tuple[Field, ...]:
        return tuple(self._fields.values())

    def get_field(self, rule: DateTimeRule) -> Optional[Field]:
        """The stored field of exactly this rule, without any derivation."""
        return self._fields.get(rule)

    def _absorb(self, c: Contribution) -> None:
        if c.date is not None:
            self._date = self._reconcile("date", self._date, c.date)
        if c.time is not None:
            self._time = self._reconcile("time", self._time, c.time)
        if c.offset is not None:
            self._offset = self._reconcile("offset", self._offset, c.offset)
        if c.zone is not None:
            self._zone = self._reconcile("zone", self._zone, c.zone)
        if c.chronology is not None:
            self._chronology = self._reconcile("chronology", self._chronology, c.chronology)
        for f in c.fields:
            self._put_field(f)

    @staticmethod
    def _reconcile(what: str, current: Any, new: Any) -> Any:
        if current is not None and current != new:
            logger.debug("Conflicting %s: %s and %s", what, current, new)
            raise CalendricalConflictError(current, new, message=f"Conflicting {what}: {current} differs from {new}")
        return new

    def _put_field(self, f: Field) -> None:
        current = self._fields.get(f.rule)
        if current is not None and current.value != f.value:
            logger.debug("Conflicting fields: %s and %s", current, f)
            raise CalendricalConflictError(current.value, f.value, rule=f.rule)
        self._fields[f.rule] = f

    def assemble_date(self, d: date, source: str) -> None:
        logger.debug("Strategy %s assembled date %s", source, d)
        self._date = self._reconcile("date", self._date, d)

    def assemble_time(self, t: time, source: str) -> None:
        logger.debug("Strategy %s assembled time %s", source, t)
        self._time = self._reconcile("time", self._time, t)

    def assemble_offset(self, offset: timezone, source: str) -> None:
        logger.debug("Strategy %s assembled offset %s", source, offset)
        self._offset = self._reconcile("offset", self._offset, offset)

    # ------------------------------------------------------------
    # Validation and normalization
    # ------------------------------------------------------------

    def _validate(self) -> None:
        for f in self._fields.values():
            f.get_valid_value()

    def normalize(self) -> None:
        if self._fields:
            self._normalize_separately()
            if len(self._fields) > 1:
                self._merge_groups()
            self._assemble()
        if self.spec.cross_check:
            self._cross_check()

    def _normalize_separately(self) -> None:
        """Move fields of interchangeable rules onto their normalization rule."""
        for f in list(self._fields.values()):
            norm = f.rule.normalization_rule
            if norm is f.rule:
                continue
            moved = norm.field(norm.convert_from_period(f.rule.convert_to_period(f.value)))
            logger.debug("Normalized %s to %s", f, moved)
            del self._fields[f.rule]
            self._put_field(moved)

    def _merge_groups(self) -> None:
        groups: Dict[DateTimeRule, List[Field]] = {}
        for f in self._fields.values():
            groups.setdefault(f.rule.base_rule, []).append(f)
        merged: Dict[DateTimeRule, Field] = {}
        for base, group in groups.items():
            if len(group) > 1:
                group = self._merge_group(base, group)
            for f in group:
                merged[f.rule] = f
        self._fields = merged

    @staticmethod
    def _merge_group(base: DateTimeRule, group: List[Field]) -> List[Field]:
        """
        Fold the fields of one base rule together.

        A field that the larger field can derive must agree with it and is
        dropped. A field that subdivides the larger field's unit is combined
        with it into the group's rule for the combined unit and range, e.g.
        HourOfDay 11 with MinuteOfHour 30 becomes MinuteOfDay 690.
        """
        group = sorted(group, key=cmp_to_key(_compare_for_merge))
        i = 0
        while i < len(group) - 1:
            restart = False
            lge = group[i]
            j = i + 1
            while j < len(group):
                sml = group[j]
                derived = lge.derive(sml.rule)
                if derived is not None:
                    if derived != sml:
                        logger.debug("Conflict in group %s: %s implies %s", base, lge, derived)
                        raise CalendricalConflictError(
                            sml.value, derived.value, rule=sml.rule,
                            message=f"Conflicting rule {sml.rule}: {sml} differs from {derived} implied by {lge}",
                        )
                    del group[j]
                    continue
                combined = CalendricalEngine._combine(base, lge, sml)
                if combined is not None:
                    logger.debug("Combined %s and %s into %s", lge, sml, combined)
                    group[i] = combined
                    del group[j]
                    restart = True
                    break
                j += 1
            i = 0 if restart else i + 1
        return group

    @staticmethod
    def _combine(base: DateTimeRule, lge: Field, sml: Field) -> Optional[Field]:
        lrule, srule = lge.rule, sml.rule
        if srule.period_range is None:
            return None
        if compare_units(srule.period_range, lrule.period_unit) < 0 or srule.compare_period_unit(lrule) >= 0:
            return None
        conv1 = srule.period_range.to_equivalent(lrule.period_unit)
        conv2 = srule.period_range.to_equivalent(srule.period_unit)
        if conv1 is None or conv2 is None:
            return None
        p_lge = lrule.convert_to_period(lge.value)
        p_sml = srule.convert_to_period(sml.value)
        if compare_units(srule.period_range, lrule.period_unit) > 0:
            # the ranges overlap, the shared part must agree
            conv3 = lrule.period_unit.to_equivalent(srule.period_unit)
            if conv3 is not None and p_lge % conv1 != (p_sml % conv2) // conv3:
                raise CalendricalConflictError(
                    lge, sml, message=f"Conflicting fields: {lge} does not agree with {sml}",
                )
        rule = related_rule(base, srule.period_unit, lrule.period_range)
        if rule is None:
            return None
        period = safe_add(safe_multiply(p_lge // conv1, conv2), p_sml)
        return rule.field(rule.convert_from_period(period))

    def _assemble(self) -> None:
        for name, strategy in self.spec.strategies():
            try:
                strategy(self)
            except CalendricalError:
                raise
            except (OverflowError, ValueError) as ex:
                raise CalendricalOverflowError(f"Strategy {name} left the supported date range: {ex}") from ex

    def _cross_check(self) -> None:
        """Drop fields confirmed by the assembled date and time; disagreement is a conflict."""
        if self._date is None and self._time is None:
            return
        for f in list(self._fields.values()):
            derived = f.rule.derive_from(self)
            if derived is None:
                continue
            if derived != f:
                logger.debug("Cross-check conflict: %s but date/time gives %s", f, derived)
                raise CalendricalConflictError(
                    f.value, derived.value, rule=f.rule,
                    message=f"Conflicting rule {f.rule}: {f} differs from {derived} derived from {self._date} {self._time}",
                )
            del self._fields[f.rule]

    # ------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------

    def derive(self, rule: Any) -> Optional[Any]:
        """
        The value of `rule` (a rule, a rule name or a value type), or None
        when it is not determined. Conflicts still raise.
        """
        rule = resolve_rule(rule)
        try:
            return self._derive(rule)
        except InvalidFieldValueError as ex:
            logger.debug("No valid %s: %s", rule, ex)
            return None

    def derive_checked(self, rule: Any) -> Any:
        rule = resolve_rule(rule)
        result = self._derive(rule)
        if result is None:
            raise UnsupportedRuleError(rule, self)
        return result

    def _derive(self, rule: CalendricalRule) -> Optional[Any]:
        if isinstance(rule, DateTimeRule):
            stored = self._fields.get(rule)
            if stored is not None:
                return stored
            result = self._derive_from_fields(rule)
            if result is not None:
                return result
        return rule.derive_from(self)

    def _derive_from_fields(self, rule: DateTimeRule) -> Optional[Field]:
        result: Optional[Field] = None
        for f in self._fields.values():
            if f.rule.base_rule is not rule.base_rule:
                continue
            derived = f.derive(rule)
            if derived is None:
                continue
            if result is not None and derived != result:
                raise CalendricalConflictError(result.value, derived.value, rule=rule)
            result = derived
        return result

    def __repr__(self) -> str:
        fields = ", ".join(str(f) for f in sorted(self._fields.values()))
        return (
            f"CalendricalEngine(date={self._date}, time={self._time}, offset={self._offset}, "
            f"zone={self._zone}, chronology={self._chronology}, fields=[{fields}])"
        )


def value_of(calendrical: Any, rule: Any) -> Optional[Any]:
    """Ask any calendrical for `rule`; None when it is not determined."""
    if isinstance(calendrical, CalendricalEngine):
        return calendrical.derive(rule)
    if isinstance(calendrical, Field):
        return calendrical.get(rule)
    if isinstance(calendrical, Calendrical) and not isinstance(calendrical, Contributor):
        return calendrical.get(rule)
    return CalendricalEngine.merge(calendrical).derive(rule)
