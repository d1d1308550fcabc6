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
# BUILD ERRORS
# -----------------------------------------------------------------------------
# Shared by every layer of the builder:
# - ConfigurationError: options did not pass validation
# - MissingNameError: a declared dependency has no name
# - StageFailure: a pipeline stage (or an external tool it runs) failed
# - FilesystemError: the workspace could not be created, moved or removed
# -----------------------------------------------------------------------------


class ConfigurationError(Exception):
    """Raised when a project is created from options that did not validate."""

    def __init__(
        self,
        message: str,
        errors: list[str] | None = None,
        warnings: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.errors = list(errors or [])
        self.warnings = list(warnings or [])


class MissingNameError(ValueError):
    """Raised when a dependency reference is empty."""

    pass


class StageFailure(Exception):
    """
    The first error raised inside a pipeline stage.

    Keeps the stage name and the formatted trace of the underlying error so the
    orchestrator can log both before giving up.
    """

    def __init__(self, message: str, stage: str, trace: str = "") -> None:
        super().__init__(message)
        self.stage = stage
        self.trace = trace


class FilesystemError(OSError):
    """Raised when the workspace or destination cannot be changed."""

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path
