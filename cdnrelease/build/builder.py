"""External bundler invocation"""

import logging
import os
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol

from cdnrelease.config import ReleaseConfig
from cdnrelease.exceptions import BuildError, BuildOutputNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildResult:
    output_dir: Path
    duration_ms: int


class Builder(Protocol):
    """Anything that can populate an output directory with a fresh build."""

    def build(self, output_dir: Path) -> BuildResult: ...


class CommandBuilder:
    """
    Runs the project's build command.

    The output directory is handed over through an environment variable
    (``VITE_BUILD_OUTDIR`` by default). The bundler's own output goes
    straight to the terminal and the call blocks until it exits. The
    versioned files left in the output directory by an earlier build are
    removed first.
    """

    def __init__(
        self,
        command: List[str],
        cwd: Path,
        outdir_env: str,
        script_file: str,
        style_file: Optional[str] = None,
        environment: Optional[str] = None,
    ):
        self.command = list(command)
        self.cwd = Path(cwd)
        self.outdir_env = outdir_env
        self.script_file = script_file
        self.style_file = style_file
        self.environment = environment

    @classmethod
    def from_config(cls, config: ReleaseConfig) -> "CommandBuilder":
        return cls(
            command=config.build_command,
            cwd=config.root,
            outdir_env=config.outdir_env,
            script_file=config.script_file,
            style_file=config.style_file,
        )

    def build(self, output_dir: Path) -> BuildResult:
        """
        Build into ``output_dir``.

        Raises:
            BuildError: If the command cannot start or exits non-zero
            BuildOutputNotFoundError: If no script bundle was produced
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        # Drop the previous build's versioned files
        for name in (self.script_file, self.style_file):
            if name:
                (output_dir / name).unlink(missing_ok=True)

        env = {}
        env.update(os.environ)
        env[self.outdir_env] = str(output_dir)

        logger.info(f"Building project with: {' '.join(self.command)}")
        start = time.monotonic()
        try:
            result = subprocess.run(self.command, cwd=self.cwd, env=env)
        except OSError as e:
            raise BuildError(self.command, None, str(e)) from e
        duration_ms = int((time.monotonic() - start) * 1000)

        if result.returncode != 0:
            raise BuildError(self.command, result.returncode)

        if not (output_dir / self.script_file).is_file():
            raise BuildOutputNotFoundError(
                self.environment or output_dir.parent.name, output_dir
            )

        logger.debug(f"Build finished in {duration_ms}ms")
        return BuildResult(output_dir=output_dir, duration_ms=duration_ms)
