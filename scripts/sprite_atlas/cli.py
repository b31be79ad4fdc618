"""
Command-line interface for the sprite atlas.
Packs image files into sheets and inspects configuration.
"""

import sys
import os
import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import AtlasConfig, ENV_VARS
from .errors import AtlasError
from .processing.atlas import Atlas
from .processing.validator import AtlasValidator

app = typer.Typer(
    name="sprite-atlas",
    help="Sprite atlas builder - pack images into texture sheets",
    add_completion=False,
    rich_markup_mode="rich",
    epilog="""
[bold]Examples:[/bold]
  [cyan]sprite-atlas pack a.png b.png -o out[/cyan]             Pack two images into out/0.png
  [cyan]sprite-atlas pack walk.png --slice 16x16[/cyan]         Slice a sprite sheet into 16x16 frames
  [cyan]sprite-atlas pack *.png --frame-map frames.json[/cyan]  Also write the frame rectangles

[bold]Environment Variables:[/bold]
  Use [cyan]sprite-atlas config --env-vars[/cyan] to see all available variables.
    """
)
console = Console()


def _setup_logging(level: str) -> logging.Logger:
    """Set up logging for the atlas package."""
    logger = logging.getLogger("sprite_atlas")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not logger.handlers:
        # Console looks up sys.stderr on each write
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter('%(name)s - %(message)s'))
        logger.addHandler(handler)

    return logger


def _parse_size(value: str) -> Tuple[int, int]:
    """Parse 'WxH' (or a single number for square cells)."""
    parts = value.lower().split("x")
    try:
        if len(parts) == 1:
            size = int(parts[0])
            return (size, size)
        if len(parts) == 2:
            return (int(parts[0]), int(parts[1]))
    except ValueError:
        pass
    raise typer.BadParameter(f"expected WIDTHxHEIGHT, got '{value}'")


@app.command()
def pack(
    inputs: List[Path] = typer.Argument(..., help="Image files to pack"),
    output_dir: Optional[Path] = typer.Option(None, "--output", "-o", help="Directory for the packed sheets"),
    slice_size: Optional[str] = typer.Option(None, "--slice", help="Slice every input into WxH cells"),
    frame_map: Optional[Path] = typer.Option(None, "--frame-map", help="Write frame rectangles to this JSON file"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file path"),
    max_size: Optional[int] = typer.Option(None, "--max-size", help="Maximum sheet edge in pixels"),
    validate: bool = typer.Option(False, "--validate", help="Check the packed layout for overlaps"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Pack image files into texture sheets."""
    try:
        config = _load_config(config_file)
    except (ValueError, OSError) as e:
        console.print(f"[red]Error loading configuration:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if max_size is not None:
        config.max_texture_size = max_size
    _setup_logging("DEBUG" if verbose else config.log_level)

    errors = config.validate()
    if errors:
        for error in errors:
            console.print(f"[red]✗[/red] {error}")
        raise typer.Exit(1)

    cell_size = _parse_size(slice_size) if slice_size else None
    destination = output_dir or Path(config.dump_dir)

    console.print(f"[bold blue]Packing {len(inputs)} image(s)...[/bold blue]")

    atlas = Atlas(config)
    registered = []

    try:
        for path in inputs:
            if cell_size:
                handle = atlas.slice_file(path, cell_size)
                registered.append((path, list(handle.ids)))
            else:
                handle = atlas.add_file(path)
                registered.append((path, [handle.id]))

        atlas.pack()
        written = atlas.dump(destination)

    except AtlasError as e:
        console.print(f"[red]Error packing atlas:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    _display_sheets(atlas, written)

    if frame_map:
        _write_frame_map(atlas, registered, frame_map)
        console.print(f"[green]✓[/green] Wrote frame map: {frame_map}")

    if validate:
        problems = AtlasValidator(config).validate(atlas)
        if problems:
            console.print("[red]Layout validation errors:[/red]")
            for problem in problems:
                console.print(f"  • {problem}")
            raise typer.Exit(1)
        console.print("[green]✓ Layout is valid[/green]")

    console.print(f"[green]✓[/green] Packed {len(inputs)} image(s) into {len(written)} sheet(s) in {destination}")


@app.command()
def config(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file path"),
    validate_config: bool = typer.Option(False, "--validate", help="Validate configuration file"),
    env_vars: bool = typer.Option(False, "--env-vars", help="Show available environment variables")
):
    """Show the effective configuration."""
    if env_vars:
        _display_env_vars()
        return

    try:
        config = _load_config(config_file)
    except (ValueError, OSError) as e:
        console.print(f"[red]Error loading configuration:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    _display_config(config)

    if validate_config:
        errors = config.validate()
        if errors:
            console.print("[red]Configuration validation errors:[/red]")
            for error in errors:
                console.print(f"  • {error}")
            raise typer.Exit(1)
        console.print("[green]✓ Configuration is valid[/green]")


@app.command()
def version():
    """Show version information."""
    console.print("[bold]Sprite Atlas[/bold]")
    console.print(f"Version: {__version__}")
    console.print("Python: " + sys.version.split()[0])

    import PIL
    import numpy

    table = Table(show_header=False)
    table.add_column("Package", style="cyan")
    table.add_column("Version", style="green")
    table.add_row("Pillow", PIL.__version__)
    table.add_row("NumPy", numpy.__version__)
    console.print("\n[bold]Dependencies:[/bold]")
    console.print(table)


def _load_config(config_file: Optional[Path]) -> AtlasConfig:
    """Load configuration from file or use defaults with environment variable support."""
    config = None

    if config_file:
        if not config_file.exists():
            console.print(f"[red]Configuration file not found:[/red] {config_file}")
            raise typer.Exit(1)
        config = AtlasConfig.from_file(config_file)
        console.print(f"[dim]Using configuration: {config_file}[/dim]")
    else:
        for config_path in (Path("sprite_atlas.toml"), Path("sprite_atlas.json")):
            if config_path.exists():
                console.print(f"[dim]Using configuration: {config_path}[/dim]")
                config = AtlasConfig.from_file(config_path)
                break

        if config is None:
            config = AtlasConfig()

    config = AtlasConfig._apply_env_overrides(config)

    env_vars_used = [key for key in os.environ if key.startswith('SPRITE_ATLAS_')]
    if env_vars_used:
        console.print(f"[dim]Environment overrides applied: {len(env_vars_used)} variables[/dim]")

    return config


def _unique_name(name: str, taken) -> str:
    """Append _1, _2, ... until the name is not taken (same stem in different directories)."""
    candidate = name
    suffix = 1
    while candidate in taken:
        candidate = f"{name}_{suffix}"
        suffix += 1
    return candidate


def _write_frame_map(atlas: Atlas, registered: List[Tuple[Path, List[int]]], path: Path) -> None:
    """Write frame rectangles as JSON, keyed by source file name and frame index."""
    frames = atlas.frame_map()
    data = {"frames": {}, "meta": {
        "sheets": [{"w": w, "h": h} for w, h in (atlas.sheet_size(i) for i in range(atlas.sheet_count))],
        "format": "RGBA",
        "version": __version__,
    }}

    for source, ids in registered:
        for index, texture_id in enumerate(ids):
            name = source.stem if len(ids) == 1 else f"{source.stem}_{index}"
            name = _unique_name(name, data["frames"])
            data["frames"][name] = {"id": texture_id, **frames[texture_id]}

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(data, f, indent=2)


def _display_sheets(atlas: Atlas, written: List[Path]) -> None:
    """Display packed sheets in a formatted table."""
    table = Table(title="Packed Sheets")
    table.add_column("Sheet", style="cyan")
    table.add_column("Size", style="green")
    table.add_column("Frames", style="white")
    table.add_column("File", style="dim")

    counts = [0] * atlas.sheet_count
    for frame in atlas.frame_map().values():
        counts[frame["sheet"]] += 1

    for index, path in enumerate(written):
        width, height = atlas.sheet_size(index)
        table.add_row(str(index), f"{width}×{height}", str(counts[index]), str(path))

    console.print(table)


def _display_config(config: AtlasConfig) -> None:
    """Display configuration in a formatted table."""
    table = Table(title="Sprite Atlas Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Max Texture Size", str(config.max_texture_size))
    table.add_row("Compression Level", str(config.compression_level))
    table.add_row("Dump Directory", config.dump_dir)
    table.add_row("Log Level", config.log_level)

    console.print(table)


def _display_env_vars() -> None:
    """Display available environment variables for configuration."""
    table = Table(title="Sprite Atlas Environment Variables")
    table.add_column("Environment Variable", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Example", style="green")

    for var_name, description, example in ENV_VARS:
        table.add_row(var_name, description, example)

    console.print(table)
    console.print("\n[dim]Set these environment variables to override configuration file settings.[/dim]")


def main():
    app()


if __name__ == "__main__":
    main()
