import logging

import pytest
from click.testing import CliRunner

from cdnrelease.cli.main import cli


def invoke(project, *args, obj=None):
    return CliRunner().invoke(cli, ["--project", str(project), *args], obj=obj)


@pytest.fixture(autouse=True)
def restore_level():
    logger = logging.getLogger("cdnrelease")
    level = logger.level
    yield
    logger.setLevel(level)


@pytest.mark.short
class TestDebugOption:
    def test_default_is_info(self, project):
        obj = {}
        result = invoke(project, "status", obj=obj)

        assert result.exit_code == 0, result.output
        assert obj["DEBUG"] is False
        assert logging.getLogger("cdnrelease").level == logging.INFO

    def test_group_flag_survives_command_default(self, project):
        obj = {}
        result = CliRunner().invoke(
            cli, ["--debug", "--project", str(project), "status"], obj=obj
        )

        assert result.exit_code == 0, result.output
        assert obj["DEBUG"] is True
        assert logging.getLogger("cdnrelease").level == logging.DEBUG

    def test_command_flag(self, project):
        obj = {}
        result = invoke(project, "status", "--debug", obj=obj)

        assert result.exit_code == 0, result.output
        assert obj["DEBUG"] is True
        assert logging.getLogger("cdnrelease").level == logging.DEBUG
