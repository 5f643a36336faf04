"""Render templates, format Go source and write generated output.

Takes RenderParameters from context_builder and produces Go source text.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Iterable

import jinja2

from .context_builder import RenderParameters
from .descriptor import GoPackage, InputFile, Message
from .errors import FormatError, RenderError
from .naming import annotate_string, go_identifier

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
DESC_TEMPLATE = "desc.go.j2"
IMPL_TEMPLATE = "impl.go.j2"
GOFMT = "gofmt"


def _goimport(pkg: GoPackage) -> str:
    if pkg.alias:
        return f'{pkg.alias} "{pkg.path}"'
    return f'"{pkg.path}"'


def _gotype(message: Message, file: InputFile, prefix: str = "") -> str:
    return message.go_type(file.go_pkg.path, prefix)


def _goraw(data: bytes | str) -> str:
    """Quote data as a Go raw string literal."""
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    return "`" + data.replace("`", '` + "`" + `') + "`"


def make_environment(template_dir: Path = TEMPLATE_DIR) -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(template_dir)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["goimport"] = _goimport
    env.filters["gotype"] = _gotype
    env.filters["goraw"] = _goraw
    env.filters["govar"] = go_identifier
    return env


class TemplateRenderer:
    """Renders the wiring and stub templates from RenderParameters."""

    def __init__(self, env: jinja2.Environment | None = None) -> None:
        self.env = env or make_environment()

    def render_desc(self, params: RenderParameters) -> str:
        return self.render(DESC_TEMPLATE, params)

    def render_impl(self, params: RenderParameters) -> str:
        return self.render(IMPL_TEMPLATE, params)

    def render(self, name: str, params: RenderParameters) -> str:
        try:
            return self.env.get_template(name).render(**params.as_context())
        except jinja2.TemplateError as exc:
            logger.error("%s: %s: %s", name, exc, annotate_string(self._source(name)))
            raise RenderError(name, str(exc)) from exc

    def _source(self, name: str) -> str:
        try:
            return self.env.loader.get_source(self.env, name)[0]
        except jinja2.TemplateNotFound:
            return ""


def gofmt(source: str, command: str = GOFMT) -> str:
    """Format Go source by piping it through gofmt."""
    try:
        result = subprocess.run(
            [command],
            input=source,
            check=True,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as exc:
        raise FormatError(f"{command}: not found") from exc
    except subprocess.CalledProcessError as exc:
        raise FormatError(exc.stderr.strip() or str(exc)) from exc
    return result.stdout


def passthrough(source: str) -> str:
    """Formatter that leaves source untouched."""
    return source


def write_files(files: Iterable, output_dir: Path) -> list[Path]:
    """Write generated files below output_dir, creating directories as needed."""
    written = []
    for f in files:
        output_path = output_dir / f.name
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(f.content)
        logger.info("Generated %s", output_path)
        written.append(output_path)
    return written
