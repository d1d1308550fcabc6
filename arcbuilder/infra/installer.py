# Copyright 2026 Pramod Kumar Voola
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

# -----------------------------------------------------------------------------
# THE DEPENDENCY INSTALLER - BOWER
# -----------------------------------------------------------------------------
# Responsibility: Install everything listed in the workspace's bower.json
# into <workspace>/bower_components.
#
# Bower lookup order:
# 1. ARCBUILD_BOWER / "bower" on PATH
# 2. <workspace>/node_modules/.bin/bower
# 3. Install it locally with "npm install bower" (creates package.json,
#    package-lock.json and node_modules, removed after the build)
# -----------------------------------------------------------------------------

import os
import shutil
from pathlib import Path

from rich.console import Console

from arcbuilder.errors import StageFailure
from arcbuilder.infra.process import run_command, split_command

console = Console(stderr=True)

DEFAULT_BOWER = "bower"
DEFAULT_NPM = "npm"
INSTALL_TIMEOUT_SECONDS = 600

STAGE = "install"


class DependencyInstaller:
    """
    Installs the workspace's bower dependencies.

    Args:
        working_dir: Workspace containing bower.json.
        logger: Logging collaborator.
        opts: Options bag; only "verbose" is read.
    """

    def __init__(self, working_dir: Path | str, logger, opts: dict | None = None) -> None:
        self.working_dir = Path(working_dir)
        self.logger = logger
        self.opts = dict(opts or {})
        self._bower = os.getenv("ARCBUILD_BOWER", DEFAULT_BOWER)
        self._npm = os.getenv("ARCBUILD_NPM", DEFAULT_NPM)
        self._timeout = int(os.getenv("ARCBUILD_INSTALL_TIMEOUT", INSTALL_TIMEOUT_SECONDS))

    @property
    def verbose(self) -> bool:
        return bool(self.opts.get("verbose"))

    def _local_bower(self) -> Path:
        return self.working_dir / "node_modules" / ".bin" / "bower"

    def _find_bower(self) -> list[str] | None:
        cmd = split_command(self._bower)
        if cmd and shutil.which(cmd[0]):
            return cmd
        local = self._local_bower()
        if local.exists():
            return [str(local)]
        return None

    def _install_bower(self) -> list[str]:
        """Install bower into the workspace with npm."""
        console.print("[yellow][INSTALLER] bower not found, installing it locally...[/yellow]")
        self.logger.info("Installing bower locally...")
        run_command(
            [*split_command(self._npm), "install", "bower"],
            cwd=self.working_dir,
            stage=STAGE,
            timeout=self._timeout,
            logger=self.logger if self.verbose else None,
        )
        local = self._local_bower()
        if not local.exists():
            raise StageFailure(f"bower was not installed into {local.parent}", stage=STAGE)
        return [str(local)]

    def install_dependencies(self) -> bool:
        """
        Run "bower install" in the workspace.

        Returns:
            True when the dependencies are installed.

        Raises:
            StageFailure: If bower.json is missing or any command fails.
        """
        if not (self.working_dir / "bower.json").exists():
            raise StageFailure(f"bower.json not found in {self.working_dir}", stage=STAGE)

        console.print(f"[cyan][INSTALLER] Installing dependencies in {self.working_dir}[/cyan]")
        self.logger.info("Installing dependencies...")

        bower = self._find_bower() or self._install_bower()
        cmd = [*bower, "install", "--allow-root"]
        if not self.verbose:
            cmd.append("--quiet")

        run_command(
            cmd,
            cwd=self.working_dir,
            stage=STAGE,
            timeout=self._timeout,
            logger=self.logger if self.verbose else None,
        )

        console.print("[green][INSTALLER] Dependencies installed[/green]")
        self.logger.info("Dependencies installed.")
        return True
