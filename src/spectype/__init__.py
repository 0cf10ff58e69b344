"""spectype -- Generate typed API client code from OpenAPI 3.0/3.1 specs.

This package reads an OpenAPI document and synthesizes a typed intermediate
representation (IR): named structural types plus one *component descriptor*
per REST operation. Pluggable renderers then turn the IR into client code in
any flavour (plain typed ``fetch`` calls, axios wrappers, SWR data hooks).

Typical workflow::

    spectype generate --file petstore.yaml --output api.ts --renderer axios

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package (IR + config).
    config: Project configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
