import typer
from pathlib import Path
from typing import List, Optional

from vscroll import (
    Config,
    ConfigError,
    GridConfig,
    GridCore,
    VirtualColumn,
    VirtualItem,
    WindowConfig,
    WindowCore,
)


# Create the main Typer application object
app = typer.Typer(
    name="vscroll",
    help="Replay scroll positions through the virtual scroll cores and print the windows they produce.",
    add_completion=False,
)


def _load_config(path: Optional[Path]) -> Optional[Config]:
    if path is None:
        return None
    if not path.exists():
        print(f"❌ Error: config file not found at '{path}'")
        raise typer.Exit(code=1)
    # Only the file counts here; an importable embedded module must not shadow it.
    return Config(str(path), prefer_embedded=False)


def _parse_measure(entry: str):
    """Parses an `ID=SIZE` measurement. Purely numeric ids are treated as ints."""
    item_id, sep, size = entry.partition("=")
    if not sep or not item_id:
        print(f"❌ Error: measurement {entry!r} must look like ID=SIZE")
        raise typer.Exit(code=1)
    try:
        value = float(size)
    except ValueError:
        print(f"❌ Error: size in {entry!r} is not a number")
        raise typer.Exit(code=1)
    try:
        return int(item_id), value
    except ValueError:
        return item_id, value


def _parse_cell_scroll(entry: str):
    """Parses `TOP` or `TOP:LEFT`."""
    top, _, left = entry.partition(":")
    try:
        return float(top), float(left or 0)
    except ValueError:
        print(f"❌ Error: scroll position {entry!r} must look like TOP or TOP:LEFT")
        raise typer.Exit(code=1)


def _fmt(value) -> str:
    return f"{value:g}" if isinstance(value, float) else str(value)


# --- CLI Commands ---

@app.command()
def window(
    scroll: Optional[List[float]] = typer.Argument(None, help="Scroll positions to replay, in order."),
    count: int = typer.Option(1000, "--count", "-n", min=0, help="Number of items in the list."),
    item_size: Optional[float] = typer.Option(None, "--item-size", help="Default item height (px)."),
    container_height: Optional[float] = typer.Option(None, "--container-height", help="Visible height (px)."),
    buffer: Optional[int] = typer.Option(None, "--buffer", help="Buffer size, in items."),
    overscan: Optional[int] = typer.Option(None, "--overscan", help="Overscan, in items."),
    measure: Optional[List[str]] = typer.Option(None, "--measure", "-m", help="Measured size as ID=SIZE (repeatable)."),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML file with a 'window:' section."),
):
    """
    Replays scroll positions through a list window and prints one line per position.
    """
    overrides = {
        "item_size": item_size,
        "container_height": container_height,
        "buffer_size": buffer,
        "overscan": overscan,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    try:
        cfg = WindowConfig.from_config(_load_config(config), **overrides) if config else WindowConfig(**overrides)
    except ConfigError as e:
        print(f"❌ Invalid configuration: {e}")
        raise typer.Exit(code=1)

    core = WindowCore(cfg, [VirtualItem(i) for i in range(count)])
    for entry in measure or []:
        core.set_item_size(*_parse_measure(entry))

    for position in scroll or [0.0]:
        update = core.update_scroll_position(position)
        rng = update.range
        print(
            f"scroll={_fmt(update.scroll_top)} range=[{rng.start_index}, {rng.end_index}) "
            f"offset={_fmt(rng.offset_top)} total={_fmt(rng.total_height)} "
            f"visible={rng.visible_count} update={'yes' if update.needs_update else 'no'}"
        )


@app.command()
def grid(
    scroll: Optional[List[str]] = typer.Argument(None, help="Scroll positions as TOP or TOP:LEFT."),
    rows: int = typer.Option(100, "--rows", min=0, help="Number of rows."),
    columns: int = typer.Option(20, "--columns", min=0, help="Number of columns."),
    row_height: Optional[float] = typer.Option(None, "--row-height"),
    column_width: Optional[float] = typer.Option(None, "--column-width"),
    container_height: Optional[float] = typer.Option(None, "--container-height"),
    container_width: Optional[float] = typer.Option(None, "--container-width"),
    buffer: Optional[int] = typer.Option(None, "--buffer"),
    overscan: Optional[int] = typer.Option(None, "--overscan"),
    fixed_top: Optional[int] = typer.Option(None, "--fixed-top", help="Rows pinned at the top."),
    fixed_bottom: Optional[int] = typer.Option(None, "--fixed-bottom", help="Rows pinned at the bottom."),
    fixed_left: Optional[int] = typer.Option(None, "--fixed-left", help="Columns pinned on the left."),
    fixed_right: Optional[int] = typer.Option(None, "--fixed-right", help="Columns pinned on the right."),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML file with a 'grid:' section."),
):
    """
    Replays scroll positions through a grid window and prints one line per position.
    """
    overrides = {
        "row_height": row_height,
        "column_width": column_width,
        "container_height": container_height,
        "container_width": container_width,
        "buffer_size": buffer,
        "overscan": overscan,
        "fixed_rows_top": fixed_top,
        "fixed_rows_bottom": fixed_bottom,
        "fixed_columns_left": fixed_left,
        "fixed_columns_right": fixed_right,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    try:
        cfg = GridConfig.from_config(_load_config(config), **overrides) if config else GridConfig(**overrides)
    except ConfigError as e:
        print(f"❌ Invalid configuration: {e}")
        raise typer.Exit(code=1)

    core = GridCore(
        cfg,
        [VirtualItem(i) for i in range(rows)],
        [VirtualColumn(f"c{i}") for i in range(columns)],
    )
    for entry in scroll or ["0"]:
        update = core.update_scroll_position(*_parse_cell_scroll(entry))
        rng = update.range
        print(
            f"scroll={_fmt(update.scroll_top)}:{_fmt(update.scroll_left)} "
            f"rows=[{rng.start_row_index}, {rng.end_row_index}) "
            f"columns=[{rng.start_column_index}, {rng.end_column_index}) "
            f"offset={_fmt(rng.row_offset_top)}:{_fmt(rng.column_offset_left)} "
            f"fixed={len(rng.fixed_rows_top)}/{len(rng.fixed_rows_bottom)}/"
            f"{len(rng.fixed_columns_left)}/{len(rng.fixed_columns_right)} "
            f"update={'yes' if update.needs_update else 'no'}"
        )


if __name__ == "__main__":
    app()
