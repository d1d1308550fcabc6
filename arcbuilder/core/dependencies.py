# -----------------------------------------------------------------------------
# THE DEPENDENCY MANIFEST BUILDER
# -----------------------------------------------------------------------------
# Responsibility: Turn the declared component lists into bower.json.
#
# Rules:
# - Keys are short names (scope and version marker stripped)
# - Default scope references without a separator get the default scope
# - Extra references are used as declared
# - Extra references are merged last: on a short name collision the extra
#   reference wins
# -----------------------------------------------------------------------------

import json
from collections.abc import Sequence
from pathlib import Path

from arcbuilder.domain.models import DEFAULT_SCOPE, BowerManifest, DependencyReference

BOWER_FILE = "bower.json"


class BowerBuilder:
    """
    Creates the bower file with the declared dependencies.

    Args:
        working_dir: Workspace the file is written to.
        component_refs: References from the default scope.
        extra_refs: References from any scope.
        logger: Logging collaborator.
    """

    def __init__(
        self,
        working_dir: Path | str,
        component_refs: Sequence[str] | None,
        extra_refs: Sequence[str] | None,
        logger,
    ) -> None:
        self.working_dir = Path(working_dir)
        self.component_refs = list(component_refs or [])
        self.extra_refs = list(extra_refs or [])
        self.logger = logger
        self.bower_file = BOWER_FILE

    def build(self) -> Path:
        """Generate the manifest and save it in the workspace."""
        return self.save_content(self.bower_content())

    def build_manifest(self) -> dict[str, str]:
        """Map every short name to the reference bower installs."""
        dependencies = self._prepare_dependencies(self.component_refs, DEFAULT_SCOPE)
        # Extra references overwrite default scope ones with the same short name.
        dependencies.update(self._prepare_dependencies(self.extra_refs))
        return dependencies

    def bower_content(self) -> BowerManifest:
        self.logger.info("Preparing bower.json file content...")
        manifest = BowerManifest(dependencies=self.build_manifest())
        self.logger.info("bower.json file content ready.")
        return manifest

    def save_content(self, content: BowerManifest | dict) -> Path:
        """Write the manifest as JSON into the workspace."""
        self.logger.info("Creating bower.json file...")
        if isinstance(content, BowerManifest):
            content = content.model_dump()
        self.working_dir.mkdir(parents=True, exist_ok=True)
        location = self.working_dir / self.bower_file
        with open(location, "w", encoding="utf-8") as f:
            json.dump(content, f, indent=2)
        self.logger.info("bower.json file created.")
        return location

    def _prepare_dependencies(
        self, refs: Sequence[str], scope: str | None = None
    ) -> dict[str, str]:
        result: dict[str, str] = {}
        for raw_name in refs:
            reference = DependencyReference.parse(raw_name, scope)
            result[reference.short_name] = reference.resolved_name
        return result
