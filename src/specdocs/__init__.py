"""specdocs -- endpoint models and change reports for OpenAPI/Swagger documents.

specdocs reads an OpenAPI 3.x or Swagger 2.0 description (JSON or YAML) and
produces two things for documentation tooling:

* an **endpoint model**: every operation with its parameters, request body,
  responses and synthesized examples, grouped into tag categories;
* a **change report** between two versions of a description, with removals
  classified as breaking changes.

Typical usage::

    from specdocs.parser import load
    from specdocs.parser.extractor import extract
    from specdocs.diff import diff

    model = extract(load(text, source="openapi.yaml"))
    report = diff(load(old_text), load(new_text))

Modules:
    app: Typer application and console-script entry point.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes.
    output: stdout/stderr formatting with Rich support.
"""

__version__ = "0.1.0"
