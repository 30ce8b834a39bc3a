"""Vista CLI interface.

Commands:
- render: Render a template (optionally inside a layout) with locals from a file
- lookup: Show which file a template name resolves to
- init: Write a default configuration file

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log output
- --version: Show version and exit
"""

import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
import yaml
from jinja2 import TemplateError

from vista import __version__
from vista.config import ViewConfig, create_default_config, load_config
from vista.controller import Controller
from vista.errors import ViewError
from vista.templates import Renderer, ViewPath, name_for_partial
from vista.utils.logging import configure_from_cli, get_logger

app = typer.Typer(
    name="vista",
    help="Render Jinja2 views with decorated locals and layouts",
    add_completion=False,
    no_args_is_help=True,
)

# Global state
_config: ViewConfig | None = None
_logger = get_logger(__name__)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"vista {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output with timestamps"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress info messages (warnings and errors only)"),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option("--ci", help="Enable CI mode with JSON output"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Vista - view rendering with parts, scopes and layouts."""
    global _config

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    try:
        _config = load_config(config_path=config)
        if _config.config_path:
            _logger.debug(f"Loaded config from: {_config.config_path}")
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except (ViewError, yaml.YAMLError) as e:
        _logger.error(f"Failed to load config: {e}")
        raise typer.Exit(1)


def _current_config() -> ViewConfig:
    return _config if _config is not None else ViewConfig()


def _load_locals(path: Path) -> dict[str, Any]:
    """Read locals from a YAML or JSON file (JSON is valid YAML)."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ViewError(f"Locals file must contain a mapping: {path}")
    return data


def build_controller(
    config: ViewConfig,
    template: str | None,
    layout: str | None = None,
    no_layout: bool = False,
    paths: list[Path] | None = None,
) -> Controller:
    """Build a controller class from config plus CLI overrides.

    Args:
        config: Loaded view configuration
        template: Template name (overrides config)
        layout: Layout name (overrides config)
        no_layout: Disable the layout
        paths: View paths searched before configured ones

    Returns:
        Controller instance ready to call
    """
    controller_class = type("CLIView", (Controller,), {})
    controller_class.configure(config)

    overrides: dict[str, Any] = {}
    if template:
        overrides["template"] = template
    if paths:
        overrides["paths"] = [str(p) for p in paths] + list(config.paths)
    if no_layout:
        overrides["layout"] = None
    elif layout:
        overrides["layout"] = layout
    controller_class.configure(**overrides)

    return controller_class()


# =============================================================================
# render command
# =============================================================================


@app.command()
def render(
    template: Annotated[
        str | None,
        typer.Argument(help="Template name (defaults to the configured template)"),
    ] = None,
    locals_file: Annotated[
        Path | None,
        typer.Option(
            "--locals",
            "-l",
            help="YAML or JSON file with template locals",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    layout: Annotated[
        str | None,
        typer.Option("--layout", help="Layout name (overrides config)"),
    ] = None,
    no_layout: Annotated[
        bool,
        typer.Option("--no-layout", help="Render without a layout"),
    ] = False,
    format: Annotated[
        str | None,
        typer.Option("--format", "-f", help="Output format, e.g. html or txt"),
    ] = None,
    path: Annotated[
        list[Path] | None,
        typer.Option("--path", "-p", help="View path (repeatable, searched first)"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write output to a file instead of stdout"),
    ] = None,
) -> None:
    """Render a template with locals from a file.

    Exit codes:
        0: Rendered successfully
        1: Configuration, lookup, or rendering error
    """
    config = _current_config()

    controller: Controller | None = None
    try:
        controller = build_controller(config, template, layout, no_layout, path)
        locals = _load_locals(locals_file) if locals_file else {}
        content = controller(format=format, locals=locals)
    except (ViewError, TemplateError, yaml.YAMLError) as e:
        _logger.error(f"Rendering failed: {e}")
        raise typer.Exit(1)
    finally:
        # The controller class is per invocation; drop its cached renderers
        if controller is not None:
            type(controller).reset_renderers()

    _logger.structured(
        logging.DEBUG,
        "Rendered view",
        template=controller.template_path,
        layout=controller.layout,
        characters=len(content),
    )

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(str(content), encoding="utf-8")
        _logger.info(f"Wrote {output}")
    else:
        typer.echo(str(content))


# =============================================================================
# lookup command
# =============================================================================


@app.command()
def lookup(
    name: Annotated[str, typer.Argument(help="Template name, e.g. users or layouts/app")],
    format: Annotated[
        str | None,
        typer.Option("--format", "-f", help="Output format"),
    ] = None,
    partial: Annotated[
        bool,
        typer.Option("--partial", help="Resolve as a partial (_name)"),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output result as JSON"),
    ] = False,
) -> None:
    """Show the template file a name resolves to.

    Exit codes:
        0: Template found
        1: Template not found
    """
    config = _current_config()
    format = format or config.default_format
    renderer = Renderer(
        [ViewPath(path) for path in config.paths], format=format, **config.engine_options
    )
    lookup_name = name_for_partial(name) if partial else name
    found = renderer.lookup(lookup_name)

    if json_output:
        typer.echo(json.dumps({"name": lookup_name, "format": format, "path": found}, indent=2))
    elif found:
        typer.echo(found)

    if found is None:
        if not json_output:
            _logger.error(f"Template {lookup_name!r} ({format}) not found")
        raise typer.Exit(1)


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing vista.yaml"),
    ] = False,
) -> None:
    """Write a default vista.yaml in the current directory."""
    target = Path.cwd() / "vista.yaml"

    if target.exists() and not force:
        _logger.error(f"{target} already exists (use --force to overwrite)")
        raise typer.Exit(1)

    target.write_text(create_default_config(), encoding="utf-8")
    typer.echo(f"Created {target}")
