"""gradecube CLI entry point.

Every command resolves a GradingParameters value (from a preset, a JSON file,
a reference image, or free text), samples it into a .cube LUT and writes the
file atomically. Typed gradecube errors are shown as Rich panels; expected
failures never print a traceback.
"""

import logging
import re
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from gradecube.analysis.analyzer import analyze_pixels, load_image_pixels
from gradecube.analysis.mapping import analysis_to_parameters, describe_analysis
from gradecube.config import DEFAULT_GRID_SIZE, MAX_GRID_SIZE, MIN_GRID_SIZE, get_output_dir
from gradecube.errors import GradeCubeError
from gradecube.extraction.free_text import extract_parameters
from gradecube.lut.cube import CUBE_SUFFIX, OutputProfile, sanitize_title, serialize_cube, write_cube_file
from gradecube.params.loader import load_parameters
from gradecube.params.presets import PRESETS, get_preset, match_preset, preset_title
from gradecube.params.schema import GradingParameters, NEUTRAL_PARAMETERS, merge_parameters

app = typer.Typer(
    name="gradecube",
    help="gradecube: Generate .cube 3D LUTs from presets, parameter files, reference images or text.",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger("gradecube")

# Reused option declarations
OutputOpt = Annotated[
    Optional[Path],
    typer.Option(
        "--output", "-o",
        dir_okay=False,
        resolve_path=True,
        help="Destination .cube file (default: GRADECUBE_OUTPUT_DIR/<title>.cube).",
    ),
]
SizeOpt = Annotated[
    int,
    typer.Option("--size", help=f"Grid points per axis ({MIN_GRID_SIZE}-{MAX_GRID_SIZE})."),
]
ProfileOpt = Annotated[
    OutputProfile,
    typer.Option("--profile", "-p", help="Target footage: 'standard' or 'hevc' (Apple limited-range HEVC)."),
]
TitleOpt = Annotated[
    Optional[str],
    typer.Option("--title", "-t", help="TITLE written into the LUT header."),
]


def _input_error(message: str) -> None:
    err_console.print(Panel(message, title="[red]Input Error[/red]", border_style="red"))
    raise typer.Exit(1)


def _slugify(title: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")
    return slug or "lut"


def _prompt_title(text: str) -> str:
    """First 50 characters of the source text, letters/digits/spaces only."""
    return re.sub(r"[^a-zA-Z0-9\s]", "", text[:50]).strip()


def _emit_lut(
    params: GradingParameters,
    title: str,
    output: Optional[Path],
    size: int,
    profile: OutputProfile,
    description: str,
) -> Path:
    if not MIN_GRID_SIZE <= size <= MAX_GRID_SIZE:
        _input_error(
            f"Invalid grid size: [bold]{size}[/bold]\n"
            f"Supported range: {MIN_GRID_SIZE}-{MAX_GRID_SIZE} (33 is the common default)"
        )
    if output is None:
        output = get_output_dir() / f"{_slugify(title)}{CUBE_SUFFIX}"
    elif output.suffix.lower() != CUBE_SUFFIX:
        _input_error(
            f"Unsupported output extension: [bold]{output.suffix or '(none)'}[/bold]\n"
            f"LUT files must end in {CUBE_SUFFIX}"
        )

    text = serialize_cube(params, title, size, compensate=profile.compensate)
    path = write_cube_file(text, output)

    console.print(Panel(
        f"[bold green]LUT written[/bold green]\n\n"
        f"  File:     [dim]{path}[/dim]\n"
        f"  Title:    {sanitize_title(title)}\n"
        f"  Grid:     {size}x{size}x{size}\n"
        f"  Profile:  {profile.value}\n"
        f"  Source:   {description}",
        title="[green]LUT Ready[/green]",
        border_style="green",
    ))
    return path


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log pipeline details at DEBUG level."),
    ] = False,
) -> None:
    """Generate deterministic .cube LUTs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.command("presets")
def list_presets() -> None:
    """List the built-in preset names."""
    table = Table(title="Presets")
    table.add_column("Name")
    table.add_column("Title")
    for name in sorted(PRESETS):
        table.add_row(name, preset_title(name))
    console.print(table)


@app.command()
def preset(
    name: Annotated[str, typer.Argument(help="Preset name (see `gradecube presets`).")],
    output: OutputOpt = None,
    size: SizeOpt = DEFAULT_GRID_SIZE,
    profile: ProfileOpt = OutputProfile.STANDARD,
    title: TitleOpt = None,
) -> None:
    """Generate a LUT from a built-in preset."""
    try:
        params = get_preset(name)
        normalized = name.strip().lower().replace(" ", "-")
        _emit_lut(params, title or preset_title(normalized), output, size, profile, f"Preset: {normalized}")
    except GradeCubeError as e:
        err_console.print(Panel(str(e), title="[red]Preset Error[/red]", border_style="red"))
        raise typer.Exit(1)


@app.command()
def manual(
    params_file: Annotated[
        Path,
        typer.Argument(dir_okay=False, resolve_path=True, help="JSON file with grading parameters."),
    ],
    output: OutputOpt = None,
    size: SizeOpt = DEFAULT_GRID_SIZE,
    profile: ProfileOpt = OutputProfile.STANDARD,
    title: TitleOpt = None,
) -> None:
    """Generate a LUT from a JSON parameter file (missing fields are neutral)."""
    if params_file.suffix.lower() != ".json":
        _input_error(
            f"Unsupported parameter file format: [bold]{params_file.suffix}[/bold]\n"
            f"Parameter files must be JSON (.json)"
        )
    if not params_file.exists():
        _input_error(
            f"File not found: [bold]{params_file}[/bold]\n"
            f"Check that the path is correct and the file is accessible."
        )
    try:
        params = load_parameters(params_file)
        _emit_lut(params, title or "Custom LUT", output, size, profile, "Custom manual parameters")
    except GradeCubeError as e:
        err_console.print(Panel(str(e), title="[red]Parameter Error[/red]", border_style="red"))
        raise typer.Exit(1)


@app.command()
def image(
    reference: Annotated[
        Path,
        typer.Argument(dir_okay=False, resolve_path=True, help="Reference image whose look to match."),
    ],
    output: OutputOpt = None,
    size: SizeOpt = DEFAULT_GRID_SIZE,
    profile: ProfileOpt = OutputProfile.STANDARD,
    title: TitleOpt = None,
) -> None:
    """Generate a LUT that pushes neutral footage toward a reference image."""
    if not reference.exists():
        _input_error(
            f"File not found: [bold]{reference}[/bold]\n"
            f"Check that the path is correct and the file is accessible."
        )
    try:
        pixels, width, height = load_image_pixels(reference)
        analysis = analyze_pixels(pixels, width, height)
        description = describe_analysis(analysis)
        console.print(f"Reference look: [bold]{description}[/bold]")
        params = analysis_to_parameters(analysis)
        _emit_lut(
            params,
            title or f"Image Reference LUT - {description}",
            output,
            size,
            profile,
            f"Generated from image: {description}",
        )
    except GradeCubeError as e:
        err_console.print(Panel(str(e), title="[red]Image Error[/red]", border_style="red"))
        raise typer.Exit(1)


@app.command()
def text(
    source: Annotated[
        Optional[Path],
        typer.Argument(dir_okay=False, resolve_path=True, help="Text file to read (default: stdin)."),
    ] = None,
    fallback_preset: Annotated[
        bool,
        typer.Option("--fallback-preset", help="Match a preset by keyword when no parameters are found."),
    ] = False,
    output: OutputOpt = None,
    size: SizeOpt = DEFAULT_GRID_SIZE,
    profile: ProfileOpt = OutputProfile.STANDARD,
    title: TitleOpt = None,
) -> None:
    """Generate a LUT from free text such as a language-model reply."""
    if source is None:
        raw = sys.stdin.read()
    else:
        if not source.exists():
            _input_error(
                f"File not found: [bold]{source}[/bold]\n"
                f"Check that the path is correct and the file is accessible."
            )
        try:
            raw = source.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            _input_error(f"Cannot read text file: [bold]{source}[/bold]\n{e}")

    found = extract_parameters(raw)
    params = merge_parameters(NEUTRAL_PARAMETERS, found)
    description = f"Extracted {len(found)} field(s) from text"

    if not found:
        matched = match_preset(raw) if fallback_preset else None
        if matched is not None:
            params = PRESETS[matched]
            description = f"Matched to preset: {matched}"
        else:
            logger.warning("no grading parameters found in text; writing a neutral LUT")
            description = "Default neutral LUT (no parameters found)"

    try:
        _emit_lut(params, title or _prompt_title(raw) or "Text LUT", output, size, profile, description)
    except GradeCubeError as e:
        err_console.print(Panel(str(e), title="[red]Pipeline Error[/red]", border_style="red"))
        raise typer.Exit(1)
