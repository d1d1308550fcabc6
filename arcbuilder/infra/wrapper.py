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
# THE WRAPPER GENERATOR - WC-REACTOR
# -----------------------------------------------------------------------------
# Responsibility: Generate React component wrappers for the built web
# components. The generator reads the import file and writes its sources
# into the destination (the workspace); with bundle set it also writes one
# combined file named by bundle_name.
# -----------------------------------------------------------------------------

import os
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from arcbuilder.infra.process import run_command, split_command

console = Console(stderr=True)

DEFAULT_WRAPPER = "wc-reactor"
WRAPPER_TIMEOUT_SECONDS = 300
WRAPPER_BUNDLE_NAME = "ArcComponents.js"

STAGE = "wrapper"


@dataclass
class WrapperOptions:
    """Data handed to the wrapper generator."""

    entrypoint: str
    destination: str
    logger: object = field(default=None, repr=False)
    components: list[str] | None = None
    bundle: bool = False
    bundle_name: str | None = None


class WrapperGenerator:
    """Runs the wrapper generator command for one build."""

    def __init__(self, command: str | None = None) -> None:
        self.command = split_command(command or os.getenv("ARCBUILD_WRAPPER", DEFAULT_WRAPPER))
        self.timeout = int(os.getenv("ARCBUILD_WRAPPER_TIMEOUT", WRAPPER_TIMEOUT_SECONDS))

    def command_line(self, opts: WrapperOptions) -> list[str]:
        cmd = [*self.command, "--web-component", opts.entrypoint, "--dest", opts.destination]
        if opts.components:
            cmd += ["--react-components", ",".join(opts.components)]
        if opts.bundle:
            cmd += ["--bundle", "--bundle-name", opts.bundle_name or WRAPPER_BUNDLE_NAME]
        return cmd

    def generate(self, opts: WrapperOptions) -> Path:
        """
        Generate the wrappers.

        Returns:
            The destination the sources were written to.

        Raises:
            StageFailure: If the generator fails.
        """
        if opts.logger is not None:
            opts.logger.info("Generating React components")
        console.print(f"[cyan][WRAPPER] Generating wrappers from {opts.entrypoint}[/cyan]")

        run_command(
            self.command_line(opts),
            cwd=opts.destination,
            stage=STAGE,
            timeout=self.timeout,
            logger=opts.logger,
        )

        console.print(f"[green][WRAPPER] Wrappers written to {opts.destination}[/green]")
        return Path(opts.destination)
