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
# THE COMPONENTS PROJECT - BUILD ORCHESTRATOR
# -----------------------------------------------------------------------------
# Responsibility: Runs the build stages strictly in sequence:
#
#   PREPARE_BUILD  fresh workspace -> bower.json -> bower install
#                  -> theme file -> import.html
#   PERFORM_BUILD  bundle stage (unless development output)
#                  -> wrapper generation (when requested)
#   POST_BUILD     move workspace to destination -> drop build-only files
#   CLEANUP        delete the debug log (successful builds only)
#
# Fail-fast: the first error of any stage is wrapped in a StageFailure,
# logged with its trace, and the build stops in the FAILED state. The debug
# log and the workspace are left behind for the postmortem.
# -----------------------------------------------------------------------------

import os
import time
import traceback
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from rich.console import Console

from arcbuilder.core.dependencies import BOWER_FILE, BowerBuilder
from arcbuilder.core.imports import IMPORT_FILE, ImportBuilder
from arcbuilder.core.logger import DEBUG_FILE_NAME, BuildLogger
from arcbuilder.core.options import ProjectOptions
from arcbuilder.core.transformer import SourceStreamTransformer
from arcbuilder.core.workspace import WORKSPACE_DIR, BuildWorkspace, remove_path
from arcbuilder.errors import ConfigurationError, StageFailure
from arcbuilder.infra.bundler import PolymerBundler
from arcbuilder.infra.installer import DependencyInstaller
from arcbuilder.infra.wrapper import WRAPPER_BUNDLE_NAME, WrapperGenerator, WrapperOptions

console = Console(stderr=True)

DEFAULT_DESTINATION = "./build"

# Removed from the destination after the move; bower_components stays.
BUILD_ONLY_FILES = (BOWER_FILE, "package.json", "package-lock.json", "node_modules")


class BuildState(str, Enum):
    """Where a build is; FAILED is reachable from every stage."""

    INIT = "init"
    PREPARE_BUILD = "prepare_build"
    PERFORM_BUILD = "perform_build"
    POST_BUILD = "post_build"
    CLEANUP = "cleanup"
    DONE = "done"
    FAILED = "failed"


@dataclass
class BuildResult:
    """Result of a successful build."""

    destination: str
    state: BuildState
    bundled: bool
    wrapper_generated: bool
    duration_seconds: float


class ComponentsProject:
    """
    Builds the ARC components described by the options.

    Args:
        options: Raw options mapping or an already validated ProjectOptions.
        start_dir: Directory the build runs from (default: current directory).
            Holds the workspace and the debug log; relative paths resolve
            against it.
        installer_factory: Called with (working_dir, logger, opts); the result
            must provide install_dependencies().
        bundler: Object with bundle(entrypoint, documents); defaults to
            PolymerBundler.
        wrapper_generator: Object with generate(WrapperOptions); defaults to
            WrapperGenerator.

    Raises:
        ConfigurationError: If the options did not pass validation.
    """

    def __init__(
        self,
        options: ProjectOptions | Mapping[str, Any] | None,
        start_dir: Path | str | None = None,
        installer_factory: Callable[..., Any] = DependencyInstaller,
        bundler: Any = None,
        wrapper_generator: Any = None,
    ) -> None:
        if not isinstance(options, ProjectOptions):
            options = ProjectOptions(options)
        self.opts = options
        self.start_dir = Path(start_dir or os.getcwd()).absolute()
        self.debug_file_name = DEBUG_FILE_NAME
        self.logger = self._setup_logger()

        if not self.opts.is_valid:
            self.print_validation_errors()
            self.print_validation_warnings()
            raise ConfigurationError(
                "Options did not pass validation.",
                errors=self.opts.validation_errors,
                warnings=self.opts.validation_warnings,
            )
        self.print_validation_warnings()

        self.config = self.opts.config
        self.working_build_output = WORKSPACE_DIR
        self.workspace = BuildWorkspace(self.start_dir / self.working_build_output)
        self.dest = self._resolve(self.config.destination or DEFAULT_DESTINATION)
        if self.workspace.overlaps(self.dest):
            message = (
                f"Destination {self.dest} cannot contain or sit inside the "
                f"{self.working_build_output} workspace."
            )
            self.logger.error(message)
            raise ConfigurationError(message, errors=[message])
        self.state = BuildState.INIT

        self._installer_factory = installer_factory
        self._bundler = bundler
        self._wrapper_generator = wrapper_generator

    # =========================================================================
    # SETUP
    # =========================================================================

    def _resolve(self, path: str | Path) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.start_dir / path

    @property
    def debug_file(self) -> Path:
        return self.start_dir / self.debug_file_name

    def _setup_logger(self):
        """Use the logger from the options, or build the default one."""
        options = self.opts.options
        if options.get("logger") is not None:
            return options["logger"]
        return BuildLogger(debug_file=self.debug_file, verbose=bool(options.get("verbose")))

    def print_validation_errors(self) -> None:
        for error in self.opts.validation_errors:
            self.logger.error(error)

    def print_validation_warnings(self) -> None:
        for warning in self.opts.validation_warnings:
            self.logger.warn(warning)

    # =========================================================================
    # PIPELINE
    # =========================================================================

    def build(self) -> BuildResult:
        """
        Build the components.

        Returns:
            BuildResult describing the finished build.

        Raises:
            StageFailure: The first error of any stage; remaining stages are
                not run.
        """
        start_time = time.time()
        console.print(f"[cyan][PROJECT] Building into {self.dest}[/cyan]")

        try:
            self._run_stage(BuildState.PREPARE_BUILD, self._prepare_build)
            self._run_stage(BuildState.PERFORM_BUILD, self._perform_build)
            self._run_stage(BuildState.POST_BUILD, self._post_build)
            self.logger.info("Build complete.")
            self._run_stage(BuildState.CLEANUP, self.clear_debug_file)
        except StageFailure as e:
            self.state = BuildState.FAILED
            self.logger.error("")
            self.logger.error(str(e))
            if e.trace:
                self.logger.error(e.trace)
            self.logger.error("")
            console.print(f"[red][PROJECT] Build FAILED in {e.stage}: {e}[/red]")
            raise

        self.state = BuildState.DONE
        duration = time.time() - start_time
        console.print(f"[green][PROJECT] Build complete ({duration:.1f}s)[/green]")
        return BuildResult(
            destination=str(self.dest),
            state=self.state,
            bundled=self.config.bundle,
            wrapper_generated=self.config.generate_wrapper,
            duration_seconds=duration,
        )

    def _run_stage(self, state: BuildState, stage: Callable[[], Any]) -> None:
        """Run one stage; any error becomes a StageFailure carrying its trace."""
        self.state = state
        try:
            stage()
        except StageFailure as e:
            if not e.trace:
                e.trace = traceback.format_exc()
            raise
        except Exception as e:
            raise StageFailure(
                str(e) or type(e).__name__, stage=state.value, trace=traceback.format_exc()
            ) from e

    def _prepare_build(self) -> None:
        """Everything that has to exist before the build runs."""
        self.logger.info("Preparing build...")
        self._create_working_dir()
        self._create_bower()
        self._install_dependencies()
        self._setup_theme()
        self._create_import()

    def _perform_build(self) -> None:
        if self.config.bundle:
            self._build_polymer()
        else:
            self.logger.info("Development build, bundling skipped.")
        if self.config.generate_wrapper:
            self._generate_wrapper()

    def _post_build(self) -> None:
        self._copy_to_destination()
        self._clear_unused_files()

    # =========================================================================
    # STAGE STEPS
    # =========================================================================

    def _create_working_dir(self) -> Path:
        return self.workspace.create()

    def _create_bower(self) -> Path:
        builder = BowerBuilder(
            self.workspace.root,
            self.config.component_refs,
            self.config.extra_refs,
            self.logger,
        )
        return builder.build()

    def _install_dependencies(self) -> None:
        opts = {}
        if self.config.verbose:
            opts["verbose"] = True
        installer = self._installer_factory(self.workspace.root, self.logger, opts)
        installer.install_dependencies()

    def _setup_theme(self) -> Path | None:
        """Copy the theme file into the workspace, if one is configured."""
        if not self.config.theme_file:
            return None
        return self.workspace.copy_in(self._resolve(self.config.theme_file))

    def _create_import(self) -> Path:
        builder = ImportBuilder(
            self.workspace.root,
            self.config.component_refs,
            self.config.extra_refs,
            self.logger,
        )
        return builder.build()

    def _build_polymer(self) -> list[Path]:
        bundler = self._bundler or PolymerBundler(self.logger)
        transformer = SourceStreamTransformer(self.workspace.root, self.logger, bundler)
        return transformer.run()

    def _create_wrapper_options(self) -> WrapperOptions:
        opts = WrapperOptions(
            entrypoint=str(self.workspace.path(IMPORT_FILE)),
            destination=str(self.workspace.root),
            logger=self.logger,
        )
        if self.config.wrapper_components:
            opts.components = list(self.config.wrapper_components)
        if self.config.bundle_wrapper:
            opts.bundle = True
            opts.bundle_name = WRAPPER_BUNDLE_NAME
        return opts

    def _generate_wrapper(self) -> Path:
        generator = self._wrapper_generator or WrapperGenerator()
        return generator.generate(self._create_wrapper_options())

    def _copy_to_destination(self) -> Path:
        return self.workspace.move_to(self.dest)

    def _clear_unused_files(self) -> None:
        for name in BUILD_ONLY_FILES:
            remove_path(self.dest / name)
        if self.config.theme_file:
            remove_path(self.dest / Path(self.config.theme_file).name)

    def clear_debug_file(self) -> None:
        """
        Remove the debug log.

        Last step of a successful build; a failure anywhere before it keeps
        the log in place.
        """
        remove_path(self.debug_file)
