"""CLI entry point: ``python -m ncview program.nc``"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config.machine_profiles import MachineModel, get_profile, list_profiles
from .config.settings import AppSettings
from .core.program import load_program
from .gcode.interpreter import GCodeParser
from .gcode.report import format_report


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ncview",
        description="Summarise a G-code program: toolpath size, tools, cycle time.",
    )
    p.add_argument("input", type=Path, nargs="?", default=None,
                   help="G-code file (.nc, .ngc, .anc, .tap, ...)")
    p.add_argument(
        "--machine", choices=[m.value for m in MachineModel], default=None,
        help="Machine profile for the cycle-time estimate "
             "(default: from settings, else router)",
    )
    p.add_argument("--rapid-rate", type=float, default=None,
                   help="Rapid traverse rate in units/min (overrides profile)")
    p.add_argument("--tool-change-time", type=float, default=None,
                   help="Seconds per tool change (overrides profile)")
    p.add_argument("--keep-park-moves", action="store_true",
                   help="Do not trim trailing park rapids")
    p.add_argument("--json", action="store_true",
                   help="Print the full parse result as JSON")
    p.add_argument("--list-machines", action="store_true",
                   help="List machine profiles and exit")
    p.add_argument("--save-defaults", action="store_true",
                   help="Store --machine, --rapid-rate and --tool-change-time "
                        "as defaults for later runs")
    return p


def _save_defaults(settings: AppSettings, args: argparse.Namespace) -> None:
    if args.machine:
        settings.default_machine = args.machine
    if args.rapid_rate is not None:
        settings.rapid_rate = args.rapid_rate
    if args.tool_change_time is not None:
        settings.tool_change_seconds = args.tool_change_time
    settings.save()
    print(f"Saved defaults to {settings._path()}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.list_machines:
        for profile in list_profiles():
            print(profile)
        return 0

    settings = AppSettings.load()
    if args.save_defaults:
        _save_defaults(settings, args)
        if args.input is None:
            return 0

    if args.input is None:
        print("Error: no input file given", file=sys.stderr)
        return 2

    machine = MachineModel(args.machine) if args.machine else settings.machine
    config = get_profile(machine).parser_config(
        rapid_rate=args.rapid_rate or settings.rapid_rate,
        tool_change_seconds=(
            args.tool_change_time
            if args.tool_change_time is not None
            else settings.tool_change_seconds
        ),
        trim_park_moves=not args.keep_park_moves,
    )

    try:
        text = load_program(args.input)
    except (FileNotFoundError, IsADirectoryError, PermissionError) as exc:
        print(f"Error reading file: {exc}", file=sys.stderr)
        return 1

    if not text.strip():
        print("File is empty", file=sys.stderr)
        return 1

    result = GCodeParser(config).parse(text)

    if result.is_empty:
        print("No toolpath moves found in file", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        for line in format_report(result, args.input.name):
            print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
