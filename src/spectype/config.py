"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles everything spectype reads or writes outside the
synthesizer itself:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.spectype/`` on macOS and Windows. Only the data directory is used
  (crash logs under its ``logs`` sub-directory), see :func:`get_data_dir`.
* **Project config** -- ``./spectype.json`` (or the file named by
  ``SPECTYPE_CONFIG``) declaring named generation targets, deserialised into
  a :class:`~spectype.models.ProjectConfig`.
* **Precedence resolution** -- :func:`resolve_targets` merges CLI flags,
  environment variables, the project config, and model defaults into the
  targets to run.
* **Output** -- :func:`write_output` writes a generated unit with an atomic
  temp-file-then-rename strategy (:func:`_atomic_write`) so a failed run
  never leaves a half-written file behind.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from spectype.exceptions import ConfigError, InvalidUsageError
from spectype.models import ProjectConfig, TargetConfig

_APP_NAME = "spectype"
_PROJECT_CONFIG_FILENAME = "spectype.json"

CONFIG_ENV_VAR = "SPECTYPE_CONFIG"
"""Environment variable overriding the project config path."""

RENDERER_ENV_VAR = "SPECTYPE_RENDERER"
"""Environment variable overriding the renderer of every target."""


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/spectype/`` (default ``~/.local/share/spectype/``).
    On macOS/Windows: ``~/.spectype/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed and the original *path* is left untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


def write_output(path: str | Path, text: str) -> Path:
    """Atomically write a generated unit to *path*.

    Returns:
        The resolved output path.

    Raises:
        ConfigError: If the file cannot be written.
    """
    target = Path(path).expanduser()
    try:
        _atomic_write(target, text)
    except OSError as exc:
        raise ConfigError(f"Cannot write output file {target}: {exc}") from exc
    return target


# --- Project-local config ---


def project_config_path() -> Path:
    """Return the project config path (``$SPECTYPE_CONFIG`` or ``./spectype.json``)."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.cwd() / _PROJECT_CONFIG_FILENAME


def load_project_config(path: Optional[Path] = None) -> Optional[ProjectConfig]:
    """Load the project configuration.

    Args:
        path: Explicit config path. Defaults to :func:`project_config_path`.

    Returns:
        The validated :class:`~spectype.models.ProjectConfig`, or ``None``
        if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation, or if ``SPECTYPE_CONFIG`` names a missing file.
    """
    config_path = path or project_config_path()
    if not config_path.is_file():
        if path is None and os.environ.get(CONFIG_ENV_VAR):
            raise ConfigError(f"Project config not found at {config_path} (from {CONFIG_ENV_VAR})")
        return None
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
        return ProjectConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {config_path}: {exc}") from exc


# --- Precedence resolution ---


def resolve_targets(
    target: Optional[str] = None,
    cli_file: Optional[str] = None,
    cli_output: Optional[str] = None,
    cli_renderer: Optional[str] = None,
    cli_workers: Optional[int] = None,
    project: Optional[ProjectConfig] = None,
) -> list[tuple[str, TargetConfig]]:
    """Resolve the targets a ``generate`` run should process.

    Precedence (high to low):
        1. CLI flags (``cli_file``, ``cli_output``, ``cli_renderer``, ``cli_workers``)
        2. Environment variables (``SPECTYPE_RENDERER``)
        3. Project config target (``./spectype.json``)
        4. Model defaults

    Selection:
        * *target* given -- that project target, with overrides applied.
        * only ``--file`` given -- a single ad-hoc target named ``"default"``.
        * neither -- every project target, in declaration order.

    Args:
        project: Pre-loaded project config; loaded from disk when ``None``.

    Returns:
        ``(name, config)`` pairs in the order they should run.

    Raises:
        ConfigError: If *target* is not declared in the project config, or
            the merged values fail validation.
        InvalidUsageError: If there is nothing to generate.
    """
    if project is None:
        project = load_project_config() or ProjectConfig()

    if target is not None:
        if target not in project.targets:
            known = ", ".join(project.targets) or "none"
            raise ConfigError(f"Unknown target '{target}'. Declared targets: {known}")
        selected = [(target, project.targets[target].model_dump())]
    elif cli_file is not None:
        selected = [("default", {})]
    elif project.targets:
        selected = [(name, cfg.model_dump()) for name, cfg in project.targets.items()]
    else:
        raise InvalidUsageError(
            "Nothing to generate: pass --file or declare targets in "
            f"{_PROJECT_CONFIG_FILENAME}"
        )

    if cli_output is not None and len(selected) > 1:
        raise InvalidUsageError("--output needs a single target; name one or pass --file")

    overrides: dict[str, Any] = {}
    env_renderer = os.environ.get(RENDERER_ENV_VAR)
    if env_renderer:
        overrides["renderer"] = env_renderer
    if cli_file is not None:
        overrides["file"] = cli_file
    if cli_output is not None:
        overrides["output"] = cli_output
    if cli_renderer is not None:
        overrides["renderer"] = cli_renderer
    if cli_workers is not None:
        overrides["workers"] = cli_workers

    resolved: list[tuple[str, TargetConfig]] = []
    for name, values in selected:
        try:
            resolved.append((name, TargetConfig.model_validate({**values, **overrides})))
        except ValidationError as exc:
            raise ConfigError(f"Invalid configuration for target '{name}': {exc}") from exc
    return resolved
