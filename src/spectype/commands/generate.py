"""Generate command -- synthesize and render one or more targets.

``spectype generate`` resolves the targets to run (see
:func:`~spectype.config.resolve_targets`), renders every one of them, and
only then writes the output files. A fatal error in any target (unsupported
or dangling reference, renderer failure) therefore leaves every output file
untouched.
"""

from __future__ import annotations

from typing import Optional

import typer

from spectype.config import resolve_targets, write_output
from spectype.exceptions import SpectypeError
from spectype.models import TargetConfig
from spectype.output import debug, error, get_output, success, warning
from spectype.parser import load_document, validate_openapi_version
from spectype.render import RenderedUnit, RendererManager, render_document


def generate_command(
    target: Optional[str] = typer.Argument(
        None, help="Target name from spectype.json (default: all targets)."
    ),
    file: Optional[str] = typer.Option(
        None, "--file", "-f", help="OpenAPI document: URL, file path, or '-' for stdin."
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Output file path."
    ),
    renderer: Optional[str] = typer.Option(
        None, "--renderer", "-r", help="Renderer name or module:attribute path."
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", min=1, help="Threads used for operation synthesis."
    ),
    stdout: bool = typer.Option(
        False, "--stdout", help="Print the generated code instead of writing files."
    ),
) -> None:
    """Generate typed client code from an OpenAPI document.

    Example::

        spectype generate --file petstore.yaml --renderer axios -o src/api.ts
        spectype generate petstore-swr
        spectype generate            # every target in spectype.json
    """
    try:
        targets = resolve_targets(
            target,
            cli_file=file,
            cli_output=output,
            cli_renderer=renderer,
            cli_workers=workers,
        )
        manager = RendererManager()
        discovered = manager.discover()
        if discovered:
            debug(f"Discovered renderers: {', '.join(discovered)}")

        rendered = [(name, cfg, _render_target(name, cfg, manager)) for name, cfg in targets]
    except SpectypeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    for name, cfg, unit in rendered:
        for collision in unit.result.collisions:
            warning(f"[{name}] {collision.message}")

        if stdout or cfg.output is None:
            get_output().print_code(unit.text)
            continue
        try:
            path = write_output(cfg.output, unit.text)
        except SpectypeError as exc:
            error(str(exc))
            raise typer.Exit(code=exc.exit_code) from None
        success(
            f"[{name}] Wrote {len(unit.result.definitions)} types and "
            f"{len(unit.result.components)} components to {path}"
        )


def _render_target(name: str, cfg: TargetConfig, manager: RendererManager) -> RenderedUnit:
    debug(f"[{name}] Loading {cfg.file}")
    document = load_document(cfg.file)
    version = validate_openapi_version(document)
    debug(f"[{name}] OpenAPI {version}, renderer '{cfg.renderer}', {cfg.workers} worker(s)")
    return render_document(
        document,
        manager.get(cfg.renderer),
        route_placeholder=cfg.route_placeholder,
        workers=cfg.workers,
    )
