from __future__ import annotations

import argparse
import json
import logging
import time
from typing import Optional

from rich.console import Console
from rich.table import Table

from raincheck.config import settings
from raincheck.core.engine import CycleResult
from raincheck.monitor import build_monitor
from raincheck.render import describe, short_label, status_icon


def _route_table(result: CycleResult, title: str) -> Table:
    table = Table(title=title)
    table.add_column("Point")
    table.add_column("Lat")
    table.add_column("Lon")
    for slot in result.route:
        table.add_column(slot.timestamp.strftime("%H:%M"))

    for i, pt in enumerate(result.snapshot.point_timelines):
        table.add_row(
            str(i),
            f"{pt.coordinate.latitude:.5f}",
            f"{pt.coordinate.longitude:.5f}",
            *[f"{mp.combined_value:.2f}" for mp in pt.series],
        )
    table.add_row(
        "route",
        "",
        "",
        *[f"{s.precipitation_mm_per_hour:.2f}" for s in result.route],
        style="bold",
    )
    return table


def main(argv: Optional[list[str]] = None) -> None:
    ap = argparse.ArgumentParser(prog="raincheck", description="Will it rain on my commute?")
    ap.add_argument("--start", default=settings.start_location, help="Start location, e.g. 'Nørrebro, Copenhagen'")
    ap.add_argument("--end", default=settings.end_location, help="Destination")
    ap.add_argument("--mock", action="store_true", help="Use deterministic fake forecasts")
    ap.add_argument("--watch", action="store_true", help="Refresh every --interval seconds")
    ap.add_argument("--interval", type=int, default=settings.refresh_interval_s)
    ap.add_argument("--json", action="store_true", help="Print the advisory as JSON")
    ap.add_argument("--debug", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else settings.log_level.upper(),
        format="%(asctime)s [raincheck] %(levelname)s %(message)s",
    )

    cfg = settings.model_copy(update={"start_location": args.start, "end_location": args.end})
    provider = None
    if args.mock:
        from raincheck.providers.combined import CombinedProvider
        from raincheck.providers.mock import MockProvider

        provider = CombinedProvider(primary=MockProvider())

    monitor = build_monitor(cfg, provider=provider)

    console = Console()
    try:
        while True:
            state = monitor.refresh()

            if args.json:
                payload = {
                    "phase": state.phase,
                    "advisory": state.advisory.model_dump() if state.advisory is not None else None,
                    "error": state.error,
                }
                console.print_json(json.dumps(payload))
            else:
                result = state.result
                if args.debug and result is not None:
                    console.print(_route_table(result, f"RainCheck: {cfg.start_location} -> {cfg.end_location}"))
                label = short_label(state.advisory)
                console.print(f"[bold]{status_icon(state.advisory)}[/bold]" + (f" {label}" if label else ""))
                console.print(describe(state.advisory))
                if state.phase == "stale":
                    console.print(f"[yellow]Could not refresh: {state.error}[/yellow]")

            if not args.watch:
                break
            time.sleep(args.interval)
    finally:
        monitor.close()


if __name__ == "__main__":
    main()
