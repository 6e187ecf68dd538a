import sys

import pytest

from cdnrelease.build import CommandBuilder
from cdnrelease.exceptions import BuildError, BuildOutputNotFoundError

WRITE_BUNDLE = (
    "import os, pathlib; "
    "out = pathlib.Path(os.environ['VITE_BUILD_OUTDIR']); "
    "(out / 'app.js').write_text('console.log(1);'); "
    "(out / 'app.css').write_text('body{}')"
)


def make_builder(tmp_path, code):
    return CommandBuilder(
        command=[sys.executable, "-c", code],
        cwd=tmp_path,
        outdir_env="VITE_BUILD_OUTDIR",
        script_file="app.js",
        style_file="app.css",
        environment="staging",
    )


@pytest.mark.short
class TestCommandBuilder:
    def test_build_populates_output_dir(self, tmp_path):
        out = tmp_path / "dist" / "staging" / "latest"

        result = make_builder(tmp_path, WRITE_BUNDLE).build(out)

        assert result.output_dir == out
        assert result.duration_ms >= 0
        assert (out / "app.js").read_text() == "console.log(1);"
        assert (out / "app.css").exists()

    def test_non_zero_exit(self, tmp_path):
        with pytest.raises(BuildError) as excinfo:
            make_builder(tmp_path, "import sys; sys.exit(3)").build(tmp_path / "out")
        assert excinfo.value.returncode == 3

    def test_missing_command(self, tmp_path):
        builder = CommandBuilder(
            command=["cdnrelease-no-such-bundler"],
            cwd=tmp_path,
            outdir_env="VITE_BUILD_OUTDIR",
            script_file="app.js",
        )
        with pytest.raises(BuildError) as excinfo:
            builder.build(tmp_path / "out")
        assert excinfo.value.returncode is None

    def test_build_without_script(self, tmp_path):
        with pytest.raises(BuildOutputNotFoundError):
            make_builder(tmp_path, "pass").build(tmp_path / "out")

    def test_from_config(self, config):
        builder = CommandBuilder.from_config(config)
        assert builder.command == ["npx", "vite", "build"]
        assert builder.cwd == config.root
        assert builder.outdir_env == "VITE_BUILD_OUTDIR"
        assert builder.style_file == "app.css"

    def test_previous_build_does_not_count_as_output(self, tmp_path):
        out = tmp_path / "dist" / "staging" / "latest"
        out.mkdir(parents=True)
        (out / "app.js").write_text("OLD();")
        (out / "app.css").write_text("old{}")

        with pytest.raises(BuildOutputNotFoundError):
            make_builder(tmp_path, "pass").build(out)
        assert not (out / "app.js").exists()

    def test_stale_stylesheet_is_removed(self, tmp_path):
        out = tmp_path / "out"
        out.mkdir()
        (out / "app.css").write_text("old{}")
        (out / "assets").mkdir()
        (out / "assets" / "logo.svg").write_text("<svg/>")
        code = (
            "import os, pathlib; "
            "out = pathlib.Path(os.environ['VITE_BUILD_OUTDIR']); "
            "(out / 'app.js').write_text('new();')"
        )

        make_builder(tmp_path, code).build(out)

        assert (out / "app.js").read_text() == "new();"
        assert not (out / "app.css").exists()
        assert (out / "assets" / "logo.svg").exists()
