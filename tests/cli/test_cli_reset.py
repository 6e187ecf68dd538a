import json

import pytest
from click.testing import CliRunner

from cdnrelease.cli.main import cli


def invoke(project, *args):
    return CliRunner().invoke(cli, ["--project", str(project), *args])


@pytest.mark.short
class TestResetCommand:
    def test_reset_requires_confirmation(self, project, cli_builders, caplog):
        invoke(project, "build", "staging", "--no-deploy")

        result = invoke(project, "reset")

        assert result.exit_code == 1
        assert "--yes" in caplog.text
        assert json.loads((project / "package.json").read_text())["version"] == "1.0.1"
        assert (project / "dist/staging/versions/v1.0.1").is_dir()

    def test_reset(self, project, store, cli_builders):
        invoke(project, "build", "staging", "--no-deploy")
        invoke(project, "build", "production", "--no-deploy")

        result = invoke(project, "reset", "--yes")

        assert result.exit_code == 0, result.output
        data = json.loads((project / "package.json").read_text())
        assert data["version"] == "0.0.1"
        assert data["name"] == "site"
        for env in ("staging", "production"):
            state = store.load(env)
            assert state.latest is None
            assert state.versions == {}
            assert (project / "dist" / env / "latest").is_dir()
            assert list((project / "dist" / env / "latest").iterdir()) == []

    def test_build_after_reset(self, project, store, cli_builders):
        invoke(project, "reset", "-y")

        result = invoke(project, "build", "staging", "--no-deploy")

        assert result.exit_code == 0, result.output
        assert store.latest("staging") == "0.0.2"
