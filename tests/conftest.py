import io
import json
import logging
from pathlib import Path

import pytest

from cdnrelease.archive import ArchiveManager
from cdnrelease.build.builder import BuildResult
from cdnrelease.config import ReleaseConfig
from cdnrelease.exceptions import BuildError
from cdnrelease.versioning.manifest import PackageManifest
from cdnrelease.versioning.store import VersionStore


@pytest.fixture
def capture_logs():
    """Fixture to capture log output during tests."""
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    logger = logging.getLogger("cdnrelease")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    yield log_stream

    logger.removeHandler(handler)
    log_stream.close()


class FakeGitInfo:
    """Deterministic stand-in for GitInfoProvider."""

    def __init__(self, commit: str = "abc1234", branch: str = "main"):
        self._commit = commit
        self._branch = branch

    def commit(self) -> str:
        return self._commit

    def branch(self) -> str:
        return self._branch


class FakeBuilder:
    """Builder writing a small deterministic bundle into the output dir."""

    def __init__(self, config: ReleaseConfig, fail: bool = False, style: bool = True):
        self.config = config
        self.fail = fail
        self.style = style
        self.calls = []

    def build(self, output_dir: Path) -> BuildResult:
        self.calls.append(Path(output_dir))
        if self.fail:
            raise BuildError(["vite", "build"], 1)
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        n = len(self.calls)
        (output_dir / self.config.script_file).write_text(f"console.log({n});")
        if self.style:
            (output_dir / self.config.style_file).write_text(f"body{{order:{n}}}")
        assets = output_dir / self.config.assets_dir / "images"
        assets.mkdir(parents=True, exist_ok=True)
        (assets / "logo.svg").write_text("<svg/>")
        return BuildResult(output_dir=output_dir, duration_ms=42)


@pytest.fixture
def project(tmp_path) -> Path:
    """A project root with a package.json at version 1.0.0."""
    root = tmp_path / "site"
    root.mkdir()
    (root / "package.json").write_text(
        json.dumps({"name": "site", "version": "1.0.0", "private": True}, indent=2)
    )
    return root


@pytest.fixture
def config(project) -> ReleaseConfig:
    return ReleaseConfig.from_yaml(project)


@pytest.fixture
def manifest(config) -> PackageManifest:
    return PackageManifest.load(config.manifest_path)


@pytest.fixture
def git_info() -> FakeGitInfo:
    return FakeGitInfo()


@pytest.fixture
def store(config) -> VersionStore:
    return VersionStore(config)


@pytest.fixture
def archive_manager(config, store, git_info) -> ArchiveManager:
    return ArchiveManager(config, store=store, git_info=git_info)


@pytest.fixture
def fake_builder(config) -> FakeBuilder:
    return FakeBuilder(config)


@pytest.fixture
def write_latest(config):
    """Write versioned files (and optionally assets) into a latest slot."""

    def _write(environment, script="console.log(1);", style="body{}", asset=None):
        latest = config.latest_dir(environment)
        latest.mkdir(parents=True, exist_ok=True)
        if script is not None:
            (latest / config.script_file).write_text(script)
        if style is not None:
            (latest / config.style_file).write_text(style)
        if asset is not None:
            asset_file = latest / config.assets_dir / "fonts" / "font.woff2"
            asset_file.parent.mkdir(parents=True, exist_ok=True)
            asset_file.write_bytes(asset)
        return latest

    return _write


@pytest.fixture
def failing_builder(config) -> FakeBuilder:
    return FakeBuilder(config, fail=True)


class FakeBuilderFactory:
    """Replaces CommandBuilder in the CLI with FakeBuilder instances."""

    def __init__(self):
        self.fail = False
        self.builders = []

    def from_config(self, config: ReleaseConfig) -> FakeBuilder:
        builder = FakeBuilder(config, fail=self.fail)
        self.builders.append(builder)
        return builder


@pytest.fixture
def cli_builders(monkeypatch) -> FakeBuilderFactory:
    factory = FakeBuilderFactory()
    monkeypatch.setattr("cdnrelease.cli.build.CommandBuilder", factory)
    return factory
