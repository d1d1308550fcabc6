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
# DOMAIN MODELS - BUILD CONFIGURATION & ARTIFACTS
# -----------------------------------------------------------------------------
# These models describe what a build is asked to produce and the records that
# flow between the stages:
# - BuildConfiguration: validated options, immutable for the whole build
# - DependencyReference: one declared component and how bower resolves it
# - BowerManifest: the dependency manifest written into the workspace
# - SourceDocument: one in-memory file travelling through the bundle stage
# -----------------------------------------------------------------------------

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import Any

from pydantic import BaseModel, Field, model_validator

from arcbuilder.errors import MissingNameError

# Organization prepended to bare component names.
DEFAULT_SCOPE = "advanced-rest-client"
SCOPE_SEPARATOR = "/"
VERSION_MARKER = "#"


def short_name(reference: str | None) -> str:
    """
    Derive the display name of a dependency reference.

    Strips everything up to the last path separator (scope, owner or URL) and
    everything from the first version marker on.

    Examples:
        "paper-fab" -> "paper-fab"
        "PolymerElements/paper-input#^1.0.0" -> "paper-input"
        "https://github.com/x/paper-fab#1.0.0" -> "paper-fab"

    Raises:
        MissingNameError: If the reference is empty.
    """
    if not reference:
        raise MissingNameError("Dependency name is not defined.")
    name = reference
    pos = name.rfind(SCOPE_SEPARATOR)
    if pos != -1:
        name = name[pos + 1 :]
    pos = name.find(VERSION_MARKER)
    if pos != -1:
        name = name[:pos]
    return name


class DependencyReference(BaseModel):
    """A single declared dependency, parsed once when a manifest is built."""

    raw_name: str = Field(..., description="Reference exactly as declared")
    short_name: str = Field(..., description="Display name, also the manifest key")
    resolved_name: str = Field(..., description="Reference handed to the installer")

    class Config:
        frozen = True

    @classmethod
    def parse(cls, raw_name: str, scope: str | None = None) -> "DependencyReference":
        """
        Parse a declared reference.

        Args:
            raw_name: The declared reference.
            scope: Organization to prefix when the reference has no separator.
                Extra (third-party) references are parsed without a scope.
        """
        name = short_name(raw_name)
        resolved = raw_name
        if scope and SCOPE_SEPARATOR not in raw_name:
            resolved = f"{scope}{SCOPE_SEPARATOR}{raw_name}"
        return cls(raw_name=raw_name, short_name=name, resolved_name=resolved)


class BuildConfiguration(BaseModel):
    """
    Validated build options.

    Produced by the options validator; never mutated while a build runs.
    At least one of component_refs / extra_refs must be non-empty.
    """

    component_refs: list[str] = Field(
        default_factory=list, description="Components from the default scope"
    )
    extra_refs: list[str] = Field(
        default_factory=list, description="Components from any scope"
    )
    theme_file: str | None = Field(None, description="Local path of a custom-style file")
    bundle: bool = Field(False, description="Run the bundle stage (false = development output)")
    generate_wrapper: bool = Field(False, description="Generate wrapper components")
    wrapper_components: list[str] | None = Field(
        None, description="Short names exposed to the wrapper generator"
    )
    bundle_wrapper: bool = Field(False, description="Request one combined wrapper bundle")
    destination: str = Field("./build", description="Output directory")
    verbose: bool = False
    logger: Any = Field(None, exclude=True)

    class Config:
        frozen = True
        arbitrary_types_allowed = True

    @model_validator(mode="after")
    def _require_dependencies(self) -> "BuildConfiguration":
        if not self.component_refs and not self.extra_refs:
            raise ValueError("Either component_refs or extra_refs must be specified.")
        return self


class BowerManifest(BaseModel):
    """The dependency manifest (bower.json) written into the workspace."""

    name: str = "arc-components"
    version: str = "1.0.0"
    # Setting main prevents a bower warning about the missing entrypoint.
    main: str = "import.html"
    dependencies: dict[str, str] = Field(default_factory=dict)


class DocumentKind(str, Enum):
    """How the bundle stage treats a document."""

    HTML = "html"
    SCRIPT = "script"
    STYLE = "style"
    OTHER = "other"

    @classmethod
    def from_path(cls, path: str) -> "DocumentKind":
        suffix = PurePosixPath(path).suffix.lower()
        if suffix in (".html", ".htm"):
            return cls.HTML
        if suffix in (".js", ".mjs"):
            return cls.SCRIPT
        if suffix == ".css":
            return cls.STYLE
        return cls.OTHER


@dataclass(frozen=True)
class SourceDocument:
    """
    One file record in a document stream.

    Paths are POSIX style and relative to the workspace root. Script pieces
    split out of an HTML document carry the HTML path in `origin` and their
    position in `index`; the remaining markup carries the number of pieces
    in `scripts`.
    """

    path: str
    content: str
    kind: DocumentKind
    origin: str | None = None
    index: int | None = None
    scripts: int = 0

    @classmethod
    def from_text(cls, path: str, content: str) -> "SourceDocument":
        return cls(path=path, content=content, kind=DocumentKind.from_path(path))
