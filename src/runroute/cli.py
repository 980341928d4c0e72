from __future__ import annotations

import argparse
import logging
import random
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from runroute.config import settings
from runroute.core.engine import NoRoutesAvailable, RouteSuggestionEngine
from runroute.core.models import Coordinate, GenerationRequest, PaceTimeState, RouteSource
from runroute.core.pace import parse_pace, parse_time
from runroute.core.routing import RoutingServiceClient
from runroute.providers.google_routes import GoogleRoutesBackend
from runroute.providers.mock import FailingBackend


def _suggest(args: argparse.Namespace, console: Console) -> int:
    if not 0 < args.distance <= settings.max_distance_km:
        raise ValueError(f"--distance must be in (0, {settings.max_distance_km:g}] km, got {args.distance:g}")
    if not 0 <= args.tolerance <= settings.max_tolerance_km:
        raise ValueError(f"--tolerance must be in [0, {settings.max_tolerance_km:g}] km, got {args.tolerance:g}")

    backend = FailingBackend("offline mode") if args.offline else GoogleRoutesBackend()
    rng = random.Random(args.seed) if args.seed is not None else None
    engine = RouteSuggestionEngine(RoutingServiceClient(backend), rng=rng)

    req = GenerationRequest(
        origin=Coordinate(latitude=args.lat, longitude=args.lon),
        desired_distance_km=args.distance,
        tolerance_km=args.tolerance,
    )
    try:
        candidates = engine.suggest(req)
    except NoRoutesAvailable as e:
        console.print(f"[red]No routes available:[/red] {e}")
        return 1

    table = Table(title=f"Route suggestions: {args.distance:g} km ± {args.tolerance:g} km")
    table.add_column("#")
    table.add_column("Route")
    table.add_column("Target km")
    table.add_column("Distance km")
    table.add_column("Source")
    table.add_column("Points")

    for i, c in enumerate(candidates, start=1):
        target = f"{c.target_distance_km:.2f}" if c.target_distance_km is not None else ""
        source = c.source.value if c.source == RouteSource.ROUTED else f"[yellow]{c.source.value}[/yellow]"
        table.add_row(str(i), c.description, target, f"{c.distance_km:.2f}", source, str(len(c.path)))

    console.print(table)
    return 0


def _pace(args: argparse.Namespace, console: Console) -> int:
    if args.time is not None:
        state = PaceTimeState.from_time(args.distance, parse_time(args.time))
    else:
        state = PaceTimeState.from_pace(args.distance, parse_pace(args.pace))

    table = Table(title="Pace calculator")
    table.add_column("Distance km")
    table.add_column("Time")
    table.add_column("Pace")
    table.add_row(f"{state.distance_km:g}", state.formatted_time, state.formatted_pace)
    console.print(table)
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="runroute")
    ap.add_argument("--debug", action="store_true")
    sub = ap.add_subparsers(dest="command", required=True)

    sp = sub.add_parser("suggest", help="Suggest round-trip routes from a start point")
    sp.add_argument("--lat", type=float, required=True)
    sp.add_argument("--lon", type=float, required=True)
    sp.add_argument("--distance", type=float, default=5.0, help="Desired distance in km")
    sp.add_argument("--tolerance", type=float, default=0.5, help="Tolerance band in km")
    sp.add_argument("--seed", type=int, default=None, help="Seed for repeatable waypoints")
    sp.add_argument("--offline", action="store_true", help="Skip the routing service")

    pp = sub.add_parser("pace", help="Convert between pace and time for a distance")
    pp.add_argument("--distance", type=float, required=True, help="Distance in km")
    g = pp.add_mutually_exclusive_group(required=True)
    g.add_argument("--time", help="Elapsed time, e.g. 00:28:30")
    g.add_argument("--pace", help="Pace, e.g. 5:30/km")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s [runroute] %(levelname)s %(message)s",
    )

    console = Console()
    try:
        if args.command == "suggest":
            return _suggest(args, console)
        return _pace(args, console)
    except ValueError as e:
        # pydantic ValidationError is a ValueError too; its text holds [..] spans
        console.print(f"[red]Invalid input:[/red] {escape(str(e))}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
