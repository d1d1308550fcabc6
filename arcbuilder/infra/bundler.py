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
# THE BUNDLER - POLYMER-BUNDLER CLI
# -----------------------------------------------------------------------------
# Responsibility: Turn the merged document stream into one bundled
# entrypoint. The stream is materialized in a private staging directory so
# the bundler never reads the workspace directly.
# -----------------------------------------------------------------------------

import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

from rich.console import Console

from arcbuilder.domain.models import SourceDocument
from arcbuilder.infra.process import run_command, split_command

console = Console(stderr=True)

DEFAULT_BUNDLER = "polymer-bundler"
BUNDLE_TIMEOUT_SECONDS = 300
BUNDLE_FLAGS = ["--inline-scripts", "--inline-css", "--strip-comments"]

STAGE = "bundle"


class PolymerBundler:
    """Bundles a document stream with the polymer-bundler command line tool."""

    def __init__(self, logger=None, command: str | None = None) -> None:
        self.logger = logger
        self.command = split_command(command or os.getenv("ARCBUILD_BUNDLER", DEFAULT_BUNDLER))
        self.timeout = int(os.getenv("ARCBUILD_BUNDLE_TIMEOUT", BUNDLE_TIMEOUT_SECONDS))

    def _stage(self, root: Path, documents: Iterable[SourceDocument]) -> int:
        count = 0
        for doc in documents:
            target = root / doc.path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(doc.content, encoding="utf-8", errors="surrogateescape")
            count += 1
        return count

    def bundle(self, entrypoint: str, documents: Iterable[SourceDocument]) -> list[SourceDocument]:
        """
        Bundle the stream starting from the entrypoint.

        Args:
            entrypoint: Entrypoint path relative to the stream root.
            documents: The merged stream.

        Returns:
            The bundled entrypoint as a single document.

        Raises:
            StageFailure: If the bundler fails.
        """
        with tempfile.TemporaryDirectory(prefix="arcbuild-") as tmp:
            root = Path(tmp)
            count = self._stage(root / "src", documents)
            console.print(f"[cyan][BUNDLER] Staged {count} documents[/cyan]")

            out_file = root / "out" / entrypoint
            out_file.parent.mkdir(parents=True, exist_ok=True)
            run_command(
                [*self.command, *BUNDLE_FLAGS, "--out-file", str(out_file), entrypoint],
                cwd=root / "src",
                stage=STAGE,
                timeout=self.timeout,
                logger=self.logger,
            )
            content = out_file.read_text(encoding="utf-8", errors="surrogateescape")

        console.print(f"[green][BUNDLER] Bundled {entrypoint}[/green]")
        return [SourceDocument.from_text(entrypoint, content)]
