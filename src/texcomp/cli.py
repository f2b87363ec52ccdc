"""Command-line interface for texture complexity analysis."""

import json
from enum import Enum
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

try:
    __version__ = version("texcomp")
except PackageNotFoundError:
    __version__ = "unknown"

from texcomp.utils.constants import DEFAULT_PRESET, PRESETS

app = typer.Typer(
    name="texcomp",
    help="Analyze texture complexity and plan adaptive compression",
    add_completion=False,
    rich_markup_mode="rich",
    suggest_commands=True,
    no_args_is_help=True,
)
console = Console()

DEFAULT_NORMAL_SUFFIXES = ["_n", "_normal"]
DEFAULT_EMISSION_SUFFIXES = ["_emission", "_emit"]


class Preset(str, Enum):
    high_quality = "high_quality"
    quality = "quality"
    balanced = "balanced"
    aggressive = "aggressive"
    maximum = "maximum"


class Strategy(str, Enum):
    fast = "fast"
    high_accuracy = "high_accuracy"
    perceptual = "perceptual"
    combined = "combined"


class Platform(str, Enum):
    auto = "auto"
    desktop = "desktop"
    mobile = "mobile"


def version_callback(value: bool) -> None:
    if value:
        print(f"texcomp {__version__}")
        raise typer.Exit()


def _matches_suffix(stem: str, suffixes: list[str]) -> bool:
    lowered = stem.lower()
    return any(lowered.endswith(s.lower()) for s in suffixes)


@app.callback()
def root(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = None,
) -> None:
    """
    Decide per-texture downscale divisors and block formats from measured complexity.
    """


@app.command()
def analyze(
    files: Annotated[
        list[Path],
        typer.Argument(
            help="Texture images ([bold green].png[/], [bold green].tga[/], [bold green].jpg[/], ...)",
            metavar="FILES...",
        ),
    ],
    preset: Annotated[
        Preset,
        typer.Option(
            "--preset",
            "-p",
            help="Compression preset",
            rich_help_panel="Analysis",
        ),
    ] = Preset[DEFAULT_PRESET],
    strategy: Annotated[
        Strategy | None,
        typer.Option(
            "--strategy",
            "-s",
            help="Override the preset's analysis strategy",
            rich_help_panel="Analysis",
        ),
    ] = None,
    platform: Annotated[
        Platform,
        typer.Option(
            "--platform",
            help="Target platform for format selection",
            rich_help_panel="Formats",
        ),
    ] = Platform.auto,
    build_target: Annotated[
        str,
        typer.Option(
            help="Build target used to resolve [italic]auto[/] (android = mobile)",
            rich_help_panel="Formats",
        ),
    ] = "desktop",
    normal_suffix: Annotated[
        list[str] | None,
        typer.Option(
            "--normal-suffix",
            help="File name suffix marking a normal map (repeatable)",
            rich_help_panel="Classification",
        ),
    ] = None,
    emission_suffix: Annotated[
        list[str] | None,
        typer.Option(
            "--emission-suffix",
            help="File name suffix marking an emission map (repeatable)",
            rich_help_panel="Classification",
        ),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Print the plan as JSON",
            rich_help_panel="Output",
        ),
    ] = False,
) -> None:
    """
    Analyze textures and print the recommended resolution and format for each.
    """
    missing = [f for f in files if not f.is_file()]
    if missing:
        for f in missing:
            console.print(f"[bold red][ERROR][/] File not found: {f.resolve()}")
        raise typer.Exit(code=1)

    # Lazy import to keep --help snappy
    from PIL import UnidentifiedImageError

    from texcomp.compressor import TextureCompressorService
    from texcomp.models import Diagnostics, TextureInput
    from texcomp.utils.constants import apply_preset
    from texcomp.utils.images import load_image
    from texcomp.utils.logging import print_header, timed

    overrides: dict[str, object] = {
        "target_platform": platform.value,
        "build_target": build_target,
        "enable_logging": not as_json,
    }
    if strategy is not None:
        overrides["strategy"] = strategy.value
    config = apply_preset(preset.value, **overrides)

    normal_suffixes = normal_suffix or DEFAULT_NORMAL_SUFFIXES
    emission_suffixes = emission_suffix or DEFAULT_EMISSION_SUFFIXES

    textures: dict[str, TextureInput] = {}
    for path in files:
        try:
            image = load_image(path)
        except (UnidentifiedImageError, OSError) as e:
            console.print(f"[bold red][ERROR][/] Cannot read {path}: {e}")
            raise typer.Exit(code=1) from None
        textures[path.stem] = TextureInput(
            pixels=image.pixels,
            width=image.width,
            height=image.height,
            name=path.stem,
            path=str(path),
            is_normal_map=_matches_suffix(path.stem, normal_suffixes),
            is_emission=_matches_suffix(path.stem, emission_suffixes),
        )

    service = TextureCompressorService(config)
    diagnostics = Diagnostics()

    if as_json:
        plan = service.plan(textures, diagnostics)
    else:
        print_header(f"texcomp {__version__}: {preset.value} preset")
        with timed("Analysis"):
            plan = service.plan(textures, diagnostics)

    if as_json:
        report = {
            "platform": service.platform.value,
            "preset": preset.value,
            "textures": {
                name: {
                    "complexity": round(d.complexity, 4),
                    "summary": d.summary,
                    "divisor": d.divisor,
                    "source_resolution": list(d.source_resolution),
                    "resolution": list(d.resolution),
                    "format": d.target_format.value,
                    "normal_map": d.is_normal_map,
                    "normal_layout": d.normal_layout.value if d.normal_layout else None,
                    "has_alpha": d.has_alpha,
                    "memory_before": d.memory_before,
                    "memory_after": d.memory_after,
                }
                for name, d in plan.decisions.items()
            },
            "errors": diagnostics.errors,
            "warnings": diagnostics.warnings,
        }
        typer.echo(json.dumps(report, indent=2))
    else:
        for d in plan.decisions.values():
            console.print(f"  [dim]{escape(d.name)}[/]  {escape(d.summary)}")

    if diagnostics.errors:
        raise typer.Exit(code=1)


@app.command()
def presets() -> None:
    """
    List the built-in compression presets.
    """
    for name, config in PRESETS.items():
        marker = " (default)" if name == DEFAULT_PRESET else ""
        console.print(
            f"[bold]{name}[/]{marker}: strategy={config['strategy']}, "
            f"thresholds={config['low_complexity_threshold']}-{config['high_complexity_threshold']}, "
            f"divisors={config['min_divisor']}-{config['max_divisor']}, "
            f"min_resolution={config['min_resolution']}"
        )


def main() -> None:
    """Entry point for the texcomp console script."""
    app()


if __name__ == "__main__":
    main()
