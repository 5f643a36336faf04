"""Drive generation over a set of input files."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

from . import rootpath
from .codegen import TemplateRenderer, gofmt
from .context_builder import bind_common_imports, build_desc_params, build_impl_params
from .descriptor import InputFile
from .errors import FormatError
from .imports import ImportRegistry
from .naming import annotate_string
from .planner import plan_artifacts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Options:
    """Run configuration, fixed at startup."""

    impl: bool = False
    force: bool = False
    impl_path: str = ""
    desc_path: str = ""
    swagger_defs: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class OutputFile:
    name: str
    content: bytes


class Generator:
    """Generates clay transport wiring and implementation stubs.

    The registry is shared with whatever loaded the input files so that
    descriptor packages and generator imports never collide on a name.
    tool_dir and roots locate the running tool; they default to the real
    binary location and GOPATH.
    """

    def __init__(
        self,
        registry: ImportRegistry,
        options: Options | None = None,
        *,
        renderer: TemplateRenderer | None = None,
        formatter: Callable[[str], str] = gofmt,
        tool_dir: str | None = None,
        roots: list[str] | None = None,
    ) -> None:
        self.registry = registry
        self.options = options or Options()
        self.renderer = renderer or TemplateRenderer()
        self.formatter = formatter
        self.tool_dir = tool_dir if tool_dir is not None else rootpath.tool_dir()
        self.roots = roots if roots is not None else rootpath.gopath_roots()
        self.imports = bind_common_imports(registry)

    def generate(self, targets: Iterable[InputFile]) -> list[OutputFile]:
        """Generate output files for targets, in order.

        Any render, format or serialization error aborts the whole batch.
        """
        files: list[OutputFile] = []
        for file in targets:
            logger.debug("Processing %s", file.name)

            plan = plan_artifacts(file, self.options.impl, self.options.force, self._exists)
            if plan.skipped:
                continue

            params = build_desc_params(
                file, self.registry, self.imports, self.options.swagger_defs.get(file.name),
            )
            files.append(self._emit(plan.wiring, self.renderer.render_desc(params)))

            if plan.impl is None:
                continue
            params = build_impl_params(
                file,
                self.registry,
                self.imports,
                impl_path=self.options.impl_path,
                desc_path=self.options.desc_path,
                tool_dir=self.tool_dir,
                roots=self.roots,
            )
            files.append(self._emit(plan.impl, self.renderer.render_impl(params)))

        return files

    def _exists(self, path: str) -> bool:
        return rootpath.file_exists(path, self.tool_dir)

    def _emit(self, name: str, code: str) -> OutputFile:
        try:
            formatted = self.formatter(code)
        except FormatError as exc:
            logger.error("%s: %s", exc, annotate_string(code))
            raise
        logger.debug("Will emit %s", name)
        return OutputFile(name=name, content=formatted.encode("utf-8"))
