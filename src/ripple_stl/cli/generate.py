"""Command-line tool for generating rippling water STL files.

The ripple-stl CLI builds a parameter snapshot from options or a JSON preset,
runs the generation pipeline and writes the binary STL to disk.
"""

import json
import logging
import sys
import time
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from ripple_stl.core.params import (
    DEFAULT_FILENAME,
    DEFAULT_SOURCES,
    Parameters,
    WaveSource,
    validate_sources,
)
from ripple_stl.generate import generate_mesh
from ripple_stl.manufacturing.constraints import check_mesh
from ripple_stl.manufacturing.export import DEFAULT_HEADER, serialize_stl, write_stl

from .progress import format_time, print_generation_info, print_summary, print_violations

console = Console()


def load_preset(path: Path) -> tuple[dict, list[WaveSource] | None]:
    """Read a JSON preset.

    The preset is an object with any of the Parameters fields plus an
    optional ``sources`` list. Each source is either ``{"x", "y",
    "amplitude"}`` or an ``[x, y, amplitude]`` triple.

    Returns:
        (parameter mapping, sources or None)

    Raises:
        ValueError: If the preset is not a JSON object or a source is malformed
    """
    data = json.loads(path.read_text())
    if not isinstance(data, dict):
        raise ValueError(f"preset {path} must contain a JSON object")

    raw_sources = data.pop("sources", None)
    if raw_sources is None:
        return data, None

    sources = []
    for entry in raw_sources:
        if isinstance(entry, dict):
            sources.append(WaveSource(**entry))
        elif isinstance(entry, (list, tuple)) and len(entry) == 3:
            sources.append(WaveSource(*entry))
        else:
            raise ValueError(f"invalid source in preset: {entry!r}")
    return data, sources


@click.command()
@click.option("--size", type=float, help="Footprint diameter in mm (default: 200)")
@click.option("--thickness", type=float, help="Base thickness in mm (default: 2)")
@click.option("--resolution", "-r", type=int, help="Grid subdivisions per axis (default: 100)")
@click.option("--amplitude", type=float, help="Wave amplitude in mm (default: 1)")
@click.option("--frequency", type=float, help="Spatial frequency in 1/mm (default: 0.3)")
@click.option("--rings", type=int, help="Wave rings per source (default: 3)")
@click.option(
    "--source",
    "-s",
    "source_specs",
    type=(float, float, float),
    multiple=True,
    metavar="X Y POWER",
    help="Wave source position in mm and relative power (repeatable)",
)
@click.option(
    "--preset",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file with parameters and sources; options override it",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=DEFAULT_FILENAME,
    show_default=True,
    help="Output STL file path",
)
@click.option("--header", default=DEFAULT_HEADER, show_default=True, help="STL header text")
@click.option("--check", is_flag=True, help="Check the mesh is closed and within the footprint")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output with debug info")
@click.option("--dry-run", is_flag=True, help="Validate parameters without generating")
@click.version_option(version="0.1.0", prog_name="ripple-stl")
def main(
    size: float | None,
    thickness: float | None,
    resolution: int | None,
    amplitude: float | None,
    frequency: float | None,
    rings: int | None,
    source_specs: tuple[tuple[float, float, float], ...],
    preset: Path | None,
    output: Path,
    header: str,
    check: bool,
    verbose: bool,
    dry_run: bool,
):
    """Generate a rippling water surface as a binary STL.

    The surface is a disc whose height is the sum of concentric sine rings
    around each wave source, closed into a printable solid with a flat base.

    Example:

    \b
        ripple-stl --resolution 60 -s 0 0 1 -s 50 -40 0.5 -o pond.stl
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )

    try:
        settings: dict = {}
        sources = None
        if preset is not None:
            settings, sources = load_preset(preset)
            if verbose:
                console.print(f"Loaded preset: {preset}")

        overrides = {
            "size": size,
            "thickness": thickness,
            "resolution": resolution,
            "amplitude": amplitude,
            "frequency": frequency,
            "ring_count": rings,
        }
        settings.update({k: v for k, v in overrides.items() if v is not None})
        params = Parameters.from_dict(settings)

        if source_specs:
            sources = [WaveSource(x, y, power) for x, y, power in source_specs]
        if sources is None:
            sources = list(DEFAULT_SOURCES)
        sources = validate_sources(sources)

        console.print("\n[bold]Rippling Water STL[/bold]", style="blue")
        console.print("─" * 60)
        print_generation_info(console, params, sources, output)

        if dry_run:
            console.print("[yellow]Dry run - STL not generated[/yellow]")
            sys.exit(0)

        start_time = time.time()
        with console.status("Generating mesh..."):
            mesh = generate_mesh(params, sources)
            buffer = serialize_stl(mesh.triangles, header=header)
        runtime = time.time() - start_time

        write_stl(buffer, output)
        print_summary(console, mesh, output, len(buffer), runtime)

        if check:
            check_start = time.time()
            violations = check_mesh(mesh, params)
            print_violations(console, violations)
            if verbose:
                console.print(f"  Checks took {format_time(time.time() - check_start)}")
            if violations:
                sys.exit(1)

    except (ValueError, TypeError, OSError) as e:
        # JSONDecodeError and UnicodeEncodeError are ValueErrors
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            console.print_exception()
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    sys.exit(main())
