"""Built-in CLI sub-commands for spectype.

This package groups the Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~spectype.commands.generate` -- synthesize and render targets.
* :mod:`~spectype.commands.inspect` -- examine the synthesized types,
  components, and the available renderers.

``generate`` is a plain callback registered directly on the root app;
``inspect`` is a :class:`typer.Typer` sub-application.
"""
