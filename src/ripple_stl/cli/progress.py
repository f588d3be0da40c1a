"""Terminal reporting for ripple STL generation.

Provides rich terminal output for the ripple-stl command:
- Parameter table before generation
- Summary with triangle counts, file size, runtime and memory usage
- Mesh check results
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING

import psutil
from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from pathlib import Path

    from ripple_stl.core.params import Parameters, WaveSource
    from ripple_stl.geometry.solid import RippleMesh
    from ripple_stl.manufacturing.constraints import Violation

# Violations listed individually before the rest is summarized
MAX_LISTED_VIOLATIONS = 10


def format_time(seconds: float) -> str:
    """Format time duration for display.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string like "350 ms", "12.4s" or "1m 23s"
    """
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        minutes = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{minutes}m {secs:02d}s"


def format_bytes(num_bytes: float) -> str:
    """Format byte count for display.

    Args:
        num_bytes: Number of bytes

    Returns:
        Formatted string like "1.5 MB" or "256.0 KB"
    """
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if abs(num_bytes) < 1024.0:
            return f"{num_bytes:.1f} {unit}"
        num_bytes /= 1024.0
    return f"{num_bytes:.1f} PB"


def memory_usage() -> int:
    """Resident memory of this process in bytes."""
    return psutil.Process().memory_info().rss


def print_generation_info(
    console: Console,
    params: "Parameters",
    sources: Sequence["WaveSource"],
    output_path: "Path",
):
    """Print generation parameters before running.

    Args:
        console: Rich console instance
        params: Generation parameters
        sources: Wave sources
        output_path: Path to output file
    """
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Size", f"{params.size:g} mm (radius {params.radius:g} mm)")
    table.add_row("Thickness", f"{params.thickness:g} mm")

    cells = params.resolution * params.resolution
    table.add_row(
        "Grid",
        f"{params.resolution} × {params.resolution} ({cells} cells, "
        f"{params.spacing:.2f} mm spacing)",
    )
    table.add_row(
        "Waves",
        f"amplitude {params.amplitude:g} mm, frequency {params.frequency:g}/mm, "
        f"{params.ring_count} rings",
    )
    for index, source in enumerate(sources):
        table.add_row(
            f"Source {index + 1}",
            f"({source.x:g}, {source.y:g}) power {source.amplitude:g}",
        )

    table.add_row("Output", str(output_path))

    console.print(table)
    console.print()


def print_summary(
    console: Console,
    mesh: "RippleMesh",
    output_path: "Path",
    num_bytes: int,
    runtime: float,
):
    """Print the result of a successful generation.

    Args:
        console: Rich console instance
        mesh: Generated mesh
        output_path: Path the STL was written to
        num_bytes: Size of the STL buffer
        runtime: Generation time in seconds
    """
    console.print("─" * 60)
    console.print("✓ [bold green]STL generated![/bold green]")
    console.print(f"  Output: {output_path} ({format_bytes(num_bytes)})")
    console.print(
        f"  Triangles: {mesh.num_triangles} "
        f"(top {len(mesh.top)}, bottom {len(mesh.bottom)}, wall {len(mesh.wall)})"
    )
    console.print(f"  Runtime: {format_time(runtime)}")
    console.print(f"  Memory: {format_bytes(memory_usage())}")

    if mesh.skipped_cells:
        console.print(
            f"  [yellow]Warning:[/yellow] {mesh.skipped_cells} grid cells skipped"
        )


def print_violations(console: Console, violations: Sequence["Violation"]):
    """Print mesh check results.

    Args:
        console: Rich console instance
        violations: Violations found by the mesh checks
    """
    if not violations:
        console.print("✓ [green]Mesh checks passed (closed, within footprint)[/green]")
        return

    console.print(f"[bold red]{len(violations)} mesh violations:[/bold red]")
    for violation in violations[:MAX_LISTED_VIOLATIONS]:
        console.print(f"  {violation}")
    if len(violations) > MAX_LISTED_VIOLATIONS:
        console.print(f"  ... and {len(violations) - MAX_LISTED_VIOLATIONS} more")
