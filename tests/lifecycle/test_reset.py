"""Tests for ResetManager."""

import json

import pytest

from cdnrelease.exceptions import ResetNotConfirmedError
from cdnrelease.lifecycle import ResetManager


@pytest.fixture
def built_project(archive_manager, write_latest):
    write_latest("staging")
    archive_manager.archive("staging", "1.0.1")
    write_latest("production")
    archive_manager.archive("production", "1.0.1")


def snapshot(root):
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


@pytest.mark.short
class TestReset:
    def test_unconfirmed_reset_changes_nothing(
        self, config, manifest, store, project, built_project
    ):
        before = snapshot(project)

        with pytest.raises(ResetNotConfirmedError):
            ResetManager(config, manifest, store=store).reset(confirmed=False)

        assert snapshot(project) == before
        assert manifest.version == "1.0.0"

    def test_confirmed_reset(self, config, manifest, store, built_project):
        ResetManager(config, manifest, store=store).reset(confirmed=True)

        assert manifest.version == "0.0.1"
        data = json.loads(config.manifest_path.read_text())
        assert data["version"] == "0.0.1"
        assert data["name"] == "site"

        for environment in ("staging", "production"):
            registry = json.loads(config.registry_file(environment).read_text())
            assert registry == {"latest": None, "versions": {}}
            assert config.latest_dir(environment).is_dir()
            assert list(config.latest_dir(environment).iterdir()) == []
            assert not config.version_dir(environment, "1.0.1").exists()

    def test_reset_without_previous_output(self, config, manifest, store):
        ResetManager(config, manifest, store=store).reset(confirmed=True)

        assert store.load("production").latest is None
        assert config.registry_file("staging").exists()
