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
# PROCESS RUNNER
# -----------------------------------------------------------------------------
# Responsibility: Run the external tools (npm, bower, polymer-bundler,
# wc-reactor) with a timeout and turn every failure into a StageFailure.
# -----------------------------------------------------------------------------

import shlex
import subprocess
from pathlib import Path

from rich.console import Console

from arcbuilder.errors import StageFailure

console = Console(stderr=True)


def split_command(command: str) -> list[str]:
    """Split a command configured through the environment ("npx bower")."""
    return shlex.split(command)


def run_command(
    cmd: list[str],
    cwd: Path | str,
    stage: str,
    timeout: int,
    logger=None,
) -> str:
    """
    Run an external command and return its stdout.

    Args:
        cmd: Command and arguments.
        cwd: Working directory; the tool must not write outside it.
        stage: Pipeline stage name used in errors.
        timeout: Maximum seconds to wait.
        logger: Optional logging collaborator for the command line and output.

    Raises:
        StageFailure: Missing executable, timeout or non-zero exit status.
    """
    printable = " ".join(shlex.quote(part) for part in cmd)
    console.print(f"[dim][EXEC] {printable}[/dim]")
    if logger is not None:
        logger.info(f"Running: {printable}")

    try:
        result = subprocess.run(
            cmd,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as e:
        raise StageFailure(f"Command not found: {cmd[0]}", stage=stage) from e
    except subprocess.TimeoutExpired as e:
        raise StageFailure(f"{cmd[0]} timed out after {timeout}s", stage=stage) from e

    if logger is not None and result.stdout:
        logger.info(result.stdout.strip())

    if result.returncode != 0:
        output = (result.stderr or result.stdout or "").strip()
        raise StageFailure(
            f"{cmd[0]} failed with exit code {result.returncode}: {output[:500]}",
            stage=stage,
        )
    return result.stdout
