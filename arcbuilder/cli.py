# -----------------------------------------------------------------------------
# ARCBUILD - COMMAND LINE INTERFACE
# -----------------------------------------------------------------------------
# Responsibility: Turn command line flags (and an optional YAML options file)
# into build options and run one build.
#
#   arcbuild -c paper-fab -c paper-input --bundle -d dist
#   arcbuild --config arc.yaml --verbose
#
# Flags override values from the options file. Environment variables for
# the external tools are read from ./.env when present.
#
# Exit status: 0 on success, 1 on invalid options or a failed build.
# -----------------------------------------------------------------------------

import argparse
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from arcbuilder import __version__
from arcbuilder.core.project import ComponentsProject
from arcbuilder.errors import ConfigurationError, StageFailure

console = Console(stderr=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="arcbuild",
        description="Build a deployable bundle of ARC web components.",
    )
    parser.add_argument(
        "-c", "--component", dest="component_refs", action="append",
        help="Component from the advanced-rest-client scope (repeatable)",
    )
    parser.add_argument(
        "-e", "--extra", dest="extra_refs", action="append",
        help="Component from any scope, e.g. PolymerElements/paper-input#^1.0.0 (repeatable)",
    )
    parser.add_argument("--theme", dest="theme_file", help="Theme file copied into the build")
    parser.add_argument(
        "--bundle", action="store_true", default=None,
        help="Bundle the components (default: development output)",
    )
    parser.add_argument(
        "--wrapper", dest="generate_wrapper", action="store_true", default=None,
        help="Generate React wrappers for the components",
    )
    parser.add_argument(
        "--wrapper-component", dest="wrapper_components", action="append",
        help="Component exposed by the wrappers (repeatable, default: all)",
    )
    parser.add_argument(
        "--bundle-wrapper", dest="bundle_wrapper", action="store_true", default=None,
        help="Write the wrappers as one ArcComponents.js bundle",
    )
    parser.add_argument("-d", "--dest", dest="destination", help="Output directory (default: ./build)")
    parser.add_argument("-v", "--verbose", action="store_true", default=None, help="Print every message")
    parser.add_argument("--config", type=Path, help="YAML file with build options")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_config_file(path: Path) -> dict[str, Any]:
    """
    Read build options from a YAML file.

    Raises:
        ConfigurationError: If the file cannot be read or is not a mapping.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read options file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Options file {path} is not valid YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Options file {path} must contain a mapping")
    return data


def collect_options(args: argparse.Namespace) -> dict[str, Any]:
    """Merge the options file with the flags that were actually given."""
    options = load_config_file(args.config) if args.config else {}
    for key, value in vars(args).items():
        if key == "config" or value is None:
            continue
        options[key] = value
    return options


def main(argv: list[str] | None = None) -> int:
    load_dotenv(Path.cwd() / ".env")
    args = build_parser().parse_args(argv)

    try:
        options = collect_options(args)
        result = ComponentsProject(options).build()
    except ConfigurationError as e:
        # Validation problems are already printed by the project.
        if not e.errors:
            console.print(f"[red][ARCBUILD] {escape(str(e))}[/red]")
        return 1
    except StageFailure as e:
        console.print(Panel(
            f"[bold red]{escape(str(e))}[/bold red]\n\nStage: {e.stage}",
            title="BUILD FAILED",
            border_style="red",
        ))
        return 1

    console.print(Panel(
        f"[bold green]BUILD COMPLETE[/bold green]\n\n"
        f"Destination: {result.destination}\n"
        f"Bundled: {result.bundled}  Wrappers: {result.wrapper_generated}\n"
        f"Duration: {result.duration_seconds:.1f}s",
        border_style="green",
    ))
    return 0
