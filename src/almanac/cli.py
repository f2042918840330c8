"""Almanac CLI - timeline layout inspector."""

import json
import logging
import sys
from datetime import date, datetime, timezone

import click

from .adapters.json_snapshot import SnapshotError
from .config import load_config
from .core.density import GridLayout, month_labels, year_span_around
from .core.events import Occurrence, parse_timestamp
from .core.window import SCALE_ORDER, resolve_window
from .workflows import compute_grid, compute_packing, compute_timeline, get_store, simulate_pan

SCALE_CHOICES = [s.value for s in SCALE_ORDER]
GRID_CHOICES = [m.value for m in GridLayout]


def _reference(value: str | None) -> datetime:
    return parse_timestamp(value) if value else datetime.now(timezone.utc)


def _load(ctx: click.Context):
    """Load the snapshot, exiting with an error message on failure."""
    try:
        return get_store(ctx.obj["config"], ctx.obj["snapshot"]).load()
    except SnapshotError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _occurrence_dict(occ: Occurrence) -> dict:
    return {
        "event_id": occ.event_id,
        "project_id": occ.project_id,
        "name": occ.what.name,
        "type": occ.what.type.value,
        "start": occ.start.isoformat(),
        "end": occ.end_when.timestamp.isoformat() if occ.end_when else None,
        "recurring": occ.recurring,
    }


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--snapshot", "snapshot_path", default=None, help="Snapshot JSON file (overrides config)")
@click.pass_context
def main(ctx, debug: bool, snapshot_path: str | None):
    """Almanac - timeline and calendar layout engine."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config()
    ctx.obj["snapshot"] = snapshot_path


@main.command()
@click.option("--scale", "-s", type=click.Choice(SCALE_CHOICES), default=None, help="Timeline scale")
@click.option("--date", "-d", "ref", default=None, help="Reference date (ISO-8601), defaults to now")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def window(ctx, scale: str | None, ref: str | None, as_json: bool):
    """Show the time window for a scale and reference date."""
    scale = scale or ctx.obj["config"].default_scale
    try:
        w = resolve_window(scale, _reference(ref))
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(
            json.dumps(
                {"scale": scale, "start": w.start.isoformat(), "end": w.end.isoformat(), "duration_ms": w.duration_ms},
                indent=2,
            )
        )
    else:
        click.echo(f"{scale}: {w.start.isoformat()} -> {w.end.isoformat()} ({w.duration.total_seconds() / 86400:g} days)")


@main.command()
@click.option("--scale", "-s", type=click.Choice(SCALE_CHOICES), default=None, help="Timeline scale")
@click.option("--date", "-d", "ref", default=None, help="Reference date (ISO-8601), defaults to now")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def occurrences(ctx, scale: str | None, ref: str | None, as_json: bool):
    """List event occurrences inside the window."""
    config = ctx.obj["config"]
    snapshot = _load(ctx)
    reference = _reference(ref)
    try:
        timeline = compute_timeline(snapshot, config, scale or config.default_scale, reference, reference)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([_occurrence_dict(o) for o in timeline.occurrences], indent=2))
        return

    if not timeline.occurrences:
        click.echo("No events in this window.")
        return

    for occ in sorted(timeline.occurrences, key=lambda o: (o.start, o.event_id)):
        marker = "↻" if occ.recurring else " "
        click.echo(f"{marker} {occ.when.display:18} {occ.what.name} [{occ.what.type.value}]")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def lanes(ctx, as_json: bool):
    """Show the tier and lane packing of visible projects."""
    config = ctx.obj["config"]
    snapshot = _load(ctx)
    packing = compute_packing(snapshot, config)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "total_height": packing.total_height,
                    "tiers": [
                        {"id": t.id, "name": t.name, "categories": list(t.categories), "lanes": t.lane_count, "height": t.height}
                        for t in packing.tier_layouts
                    ],
                    "lanes": {
                        str(pid): {"tier": info.tier_index, "lane": info.lane_index, "top": info.top_offset}
                        for pid, info in packing.lane_info.items()
                    },
                },
                indent=2,
            )
        )
        return

    for tier in packing.tier_layouts:
        click.echo(f"### {tier.name} ({tier.lane_count} lanes, {tier.height:g}px)")
        for pid, info in packing.lane_info.items():
            if info.tier_index != tier.index:
                continue
            project = snapshot.project(pid)
            label = f"{project.name} [{project.category}]" if project else str(pid)
            click.echo(f"  lane {info.lane_index:2}  +{info.top_offset:<6g} {label}")


@main.command()
@click.option("--scale", "-s", type=click.Choice(SCALE_CHOICES), default=None, help="Timeline scale")
@click.option("--date", "-d", "ref", default=None, help="Reference date (ISO-8601), defaults to now")
@click.option("--today", "today_str", default=None, help="Override today (ISO-8601)")
@click.pass_context
def frame(ctx, scale: str | None, ref: str | None, today_str: str | None):
    """Dump the computed frame geometry as JSON."""
    config = ctx.obj["config"]
    snapshot = _load(ctx)
    reference = _reference(ref)
    today = parse_timestamp(today_str) if today_str else datetime.now(timezone.utc)
    try:
        f = compute_timeline(snapshot, config, scale or config.default_scale, reference, today).frame
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(
        json.dumps(
            {
                "window": {"start": f.window.start.isoformat(), "end": f.window.end.isoformat()},
                "height": f.height,
                "tiers": [{"id": t.id, "top": t.top, "height": t.height, "axis": t.axis_index} for t in f.tiers],
                "axis_bars": [{"top": b.top, "height": b.height} for b in f.axis_bars],
                "markers": [
                    {
                        **_occurrence_dict(m.occurrence),
                        "left": m.left,
                        "right": m.right,
                        "top": m.top,
                        "dropline": [m.dropline.y1, m.dropline.y2] if m.dropline else None,
                    }
                    for m in f.markers
                ],
                "today": [{"axis": t.axis_index, "left": t.left} for t in f.today],
                "holidays": [
                    {"name": h.holiday.name, "date": h.holiday.day.isoformat(), "left": h.left, "lane": h.lane}
                    for h in f.holidays
                ],
            },
            indent=2,
        )
    )


@main.command()
@click.option("--mode", "-m", type=click.Choice(GRID_CHOICES), default=None, help="Grid layout")
@click.option("--years", default=None, help="Year span FIRST-LAST, defaults to two years either side")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def grid(ctx, mode: str | None, years: str | None, as_json: bool):
    """Show busy days of the density grid."""
    config = ctx.obj["config"]
    snapshot = _load(ctx)
    today = date.today()
    try:
        if years:
            first, _, last = years.partition("-")
            span = (int(first), int(last or first))
        else:
            span = year_span_around(today)
        buckets = compute_grid(snapshot, span, mode or config.grid_mode, today)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    busy = [b for b in buckets if b.count]
    if as_json:
        click.echo(
            json.dumps(
                {
                    "span": list(span),
                    "months": [
                        {"name": m.name, "panel": m.panel, "start_row": m.start_row, "end_row": m.end_row}
                        for m in month_labels(buckets)
                    ],
                    "days": [
                        {"date": b.key, "count": b.count, "density": b.density.name.lower(), "panel": b.panel, "row": b.row, "column": b.column}
                        for b in busy
                    ],
                },
                indent=2,
            )
        )
        return

    if not busy:
        click.echo(f"No events in {span[0]}-{span[1]}.")
        return
    for b in busy:
        names = ", ".join(o.what.name for o in b.occurrences)
        click.echo(f"{b.key} {b.density.name.lower():6} {names}")


@main.command(context_settings={"ignore_unknown_options": True})
@click.argument("samples", nargs=-1, type=float, required=True)
@click.option("--scale", "-s", type=click.Choice(SCALE_CHOICES), default=None, help="Timeline scale")
@click.option("--date", "-d", "ref", default=None, help="Reference date (ISO-8601), defaults to now")
@click.pass_context
def pan(ctx, samples: tuple[float, ...], scale: str | None, ref: str | None):
    """Replay pointer x positions (one per frame) as a drag from x=0."""
    config = ctx.obj["config"]
    reference = _reference(ref)
    try:
        committed = simulate_pan(config, scale or config.default_scale, reference, list(samples))
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    for x, new_reference in zip(samples, committed):
        click.echo(f"x={x:<8g} {new_reference.isoformat()}")


if __name__ == "__main__":
    main()
