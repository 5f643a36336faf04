"""Tests for the generation orchestrator."""

import os

import pytest

from claygen.codegen import TemplateRenderer, passthrough
from claygen.errors import FormatError, RenderError, SerializationError
from claygen.generator import Generator, Options, OutputFile

from conftest import http_method


def _names(files):
    return [f.name for f in files]


@pytest.fixture
def make_generator(registry, renderer, tool_dir):
    def _make_generator(formatter=passthrough, **options):
        return Generator(
            registry,
            Options(**options),
            renderer=renderer,
            formatter=formatter,
            tool_dir=tool_dir,
            roots=[],
        )

    return _make_generator


class TestGenerate:
    """Test per-file artifact emission."""

    def test_wiring_only(self, make_generator, make_file):
        files = make_generator().generate([make_file()])
        assert files == [OutputFile(name="svc.pb.goclay.go", content=b"// desc svc.proto\n")]

    def test_wiring_and_impl(self, make_generator, make_file):
        files = make_generator(impl=True).generate([make_file()])
        assert _names(files) == ["svc.pb.goclay.go", "svc.pb.impl.go"]
        assert files[1].content == b"// impl svc.proto\n"

    def test_existing_impl_kept(self, make_generator, make_file, tool_dir, renderer):
        with open(os.path.join(tool_dir, "svc.pb.impl.go"), "w") as f:
            f.write("package svc\n")
        files = make_generator(impl=True).generate([make_file()])
        assert _names(files) == ["svc.pb.goclay.go"]
        assert [kind for kind, _ in renderer.calls] == ["desc"]

    def test_existing_impl_forced(self, make_generator, make_file, tool_dir):
        open(os.path.join(tool_dir, "svc.pb.impl.go"), "w").close()
        files = make_generator(impl=True, force=True).generate([make_file()])
        assert _names(files) == ["svc.pb.goclay.go", "svc.pb.impl.go"]

    def test_impl_in_working_directory_ignored(self, make_generator, make_file, tmp_path, monkeypatch):
        cwd = tmp_path / "cwd"
        cwd.mkdir()
        (cwd / "svc.pb.impl.go").write_text("package svc\n")
        monkeypatch.chdir(cwd)
        files = make_generator(impl=True).generate([make_file()])
        assert _names(files) == ["svc.pb.goclay.go", "svc.pb.impl.go"]

    def test_files_without_services_skipped(self, make_generator, make_file):
        targets = [
            make_file(name="empty.proto", services=[]),
            make_file(name="a.proto"),
            make_file(name="b/c.proto"),
        ]
        files = make_generator(impl=True).generate(targets)
        assert _names(files) == [
            "a.pb.goclay.go", "a.pb.impl.go",
            "b/c.pb.goclay.go", "b/c.pb.impl.go",
        ]

    def test_only_empty_files(self, make_generator, make_file):
        assert make_generator().generate([make_file(services=[])]) == []

    def test_swagger_passed_for_matching_file(self, make_generator, make_file, renderer):
        defs = {"a.proto": {"swagger": "2.0"}}
        make_generator(swagger_defs=defs).generate([make_file(name="a.proto"), make_file(name="b.proto")])
        buffers = [params.swagger_buffer for _, params in renderer.calls]
        assert buffers == [b'{\n    "swagger": "2.0"\n}', None]

    def test_impl_params_use_options(self, make_generator, make_file, renderer):
        make_generator(impl=True, impl_path="impl", desc_path="pb").generate([make_file()])
        _, params = renderer.calls[1]
        assert params.impl_package == "impl"
        # roots=[] leaves the wiring package unresolvable
        assert params.desc_prefix == ""

    def test_common_imports_bound_at_construction(self, make_generator, registry):
        make_generator()
        assert registry.alias_for("github.com/pkg/errors") == "errors"
        assert registry.alias_for("github.com/utrack/clay/transport") == "transport"


class TestGenerateErrors:
    """Hard errors abort the batch."""

    def test_format_error_aborts(self, make_generator, make_file, caplog):
        def formatter(code):
            if "b.proto" in code:
                raise FormatError("expected declaration")
            return code

        generator = make_generator(formatter=formatter)
        with pytest.raises(FormatError):
            generator.generate([make_file(name="a.proto"), make_file(name="b.proto")])
        assert "0: // desc b.proto" in caplog.text

    def test_render_error_aborts(self, registry, make_file, tool_dir):
        class BrokenRenderer:
            def render_desc(self, params):
                raise RenderError("desc.go.j2", "boom")

        generator = Generator(registry, renderer=BrokenRenderer(), formatter=passthrough, tool_dir=tool_dir, roots=[])
        with pytest.raises(RenderError):
            generator.generate([make_file()])

    def test_serialization_error_aborts(self, make_generator, make_file):
        generator = make_generator(swagger_defs={"svc.proto": {"bad": {1, 2}}})
        with pytest.raises(SerializationError):
            generator.generate([make_file()])


class TestEndToEnd:
    """Generate with the packaged templates."""

    def test_scenario(self, registry, make_file, tool_dir):
        file = make_file(methods=[
            http_method("Hello", request_pkg="github.com/acme/svc"),
            http_method("Bye", request_pkg="github.com/acme/types"),
        ])
        generator = Generator(
            registry,
            Options(impl=True),
            renderer=TemplateRenderer(),
            formatter=passthrough,
            tool_dir=tool_dir,
            roots=[],
        )
        desc, impl = generator.generate([file])

        assert desc.name == "svc.pb.goclay.go"
        assert b'\t"github.com/acme/types"\n' in desc.content
        assert b'"github.com/acme/svc"' not in desc.content
        assert impl.name == "svc.pb.impl.go"
        assert b"func (i *GreeterImplementation) Bye(ctx context.Context, req *types.Req)" in impl.content
