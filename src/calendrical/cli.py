from __future__ import annotations

import argparse
import logging
import sys
from datetime import date, time
from typing import List

from .core.errors import CalendricalError
from .rules.field import Field
from .rules.registry import date_time_rules, list_rules, rule_for_name


def _parse_field(s: str) -> Field:
    from .rules.iso import field_of

    if "=" not in s:
        raise argparse.ArgumentTypeError(f"Expected NAME=VALUE, got '{s}'")
    name, value = s.split("=", 1)
    try:
        return field_of(name.strip(), int(value))
    except (KeyError, TypeError, ValueError) as ex:
        raise argparse.ArgumentTypeError(str(ex)) from ex


def _parse_ymd(s: str) -> date:
    y, m, d = map(int, s.split("-"))
    return date(y, m, d)


def _parse_hms(s: str) -> time:
    return time(*map(int, s.split(":")))


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


def cmd_resolve(argv: List[str]) -> int:
    from .engines.engine import CalendricalEngine
    from .engines.strategies import ResolverSpec

    p = argparse.ArgumentParser(prog="calendrical resolve", description="Merge fields and values, then derive.")
    p.add_argument("fields", nargs="*", type=_parse_field, help="NAME=VALUE, e.g. Year=2011")
    p.add_argument("--date", type=_parse_ymd, help="YYYY-MM-DD")
    p.add_argument("--time", type=_parse_hms, help="HH:MM[:SS]")
    p.add_argument("--derive", action="append", default=[], help="rule name to derive (repeatable)")
    p.add_argument("--spec", default="iso", help="resolver preset")
    p.add_argument("-v", "--verbose", action="store_true")
    args = p.parse_args(argv)
    _setup_logging(args.verbose)

    inputs = list(args.fields)
    if args.date is not None:
        inputs.append(args.date)
    if args.time is not None:
        inputs.append(args.time)

    try:
        engine = CalendricalEngine.merge(*inputs, spec=ResolverSpec.like(args.spec))
        print(f"date: {engine.date}")
        print(f"time: {engine.time}")
        for f in sorted(engine.fields):
            print(f"field: {f}")
        for name in args.derive:
            print(f"{name}: {engine.derive(rule_for_name(name))}")
    except (CalendricalError, KeyError) as ex:
        print(f"error: {ex}", file=sys.stderr)
        return 2
    return 0


def cmd_derive(argv: List[str]) -> int:
    p = argparse.ArgumentParser(prog="calendrical derive", description="Derive one field from another.")
    p.add_argument("field", type=_parse_field, help="NAME=VALUE")
    p.add_argument("target", help="rule name")
    args = p.parse_args(argv)

    try:
        result = args.field.get(rule_for_name(args.target))
    except (CalendricalError, KeyError) as ex:
        print(f"error: {ex}", file=sys.stderr)
        return 2
    if result is None:
        print(f"{args.target}: no value")
        return 1
    print(result)
    return 0


def cmd_rules(argv: List[str]) -> int:
    p = argparse.ArgumentParser(prog="calendrical rules", description="List the registered rules.")
    p.add_argument("--all", action="store_true", help="include object rules such as LocalDate")
    args = p.parse_args(argv)

    for rule in date_time_rules():
        rng = rule.period_range.name if rule.period_range is not None else "-"
        print(f"{rule.name:<22} {rule.period_unit.name:<15} {rng:<15} {rule.value_range}")
    if args.all:
        names = {r.name for r in date_time_rules()}
        for name in list_rules():
            if name not in names:
                print(name)
    return 0


def main(argv: List[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    # subcommands parse their own arguments
    if argv and argv[0] in _COMMANDS:
        return _COMMANDS[argv[0]](argv[1:])

    p = argparse.ArgumentParser(prog="calendrical", description="Calendrical field resolution CLI.")
    sub = p.add_subparsers(dest="cmd", required=True)
    sub.add_parser("resolve", help="Merge fields and values, then derive")
    sub.add_parser("derive", help="Derive one field from another")
    sub.add_parser("rules", help="List the registered rules")
    p.parse_args(argv)
    return 2


_COMMANDS = {
    "resolve": cmd_resolve,
    "derive": cmd_derive,
    "rules": cmd_rules,
}


if __name__ == "__main__":
    raise SystemExit(main())
