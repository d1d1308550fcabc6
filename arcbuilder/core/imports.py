# -----------------------------------------------------------------------------
# THE IMPORT MANIFEST BUILDER
# -----------------------------------------------------------------------------
# Responsibility: Write import.html, the entrypoint of the build.
#
# One HTML import per declared reference, in declaration order, after the
# Polymer runtime import. Unlike bower.json nothing is de-duplicated and no
# scope is applied: the path only needs the short name of the installed
# component.
# -----------------------------------------------------------------------------

from collections.abc import Sequence
from pathlib import Path

from arcbuilder.domain.models import short_name

IMPORT_FILE = "import.html"
COMPONENTS_DIR = "bower_components"
RUNTIME_IMPORT = f"{COMPONENTS_DIR}/polymer/polymer.html"


def import_path(reference: str) -> str:
    """Path of the main HTML file of an installed component."""
    name = short_name(reference)
    return f"{COMPONENTS_DIR}/{name}/{name}.html"


def import_statement(href: str) -> str:
    return f'<link rel="import" href="{href}">'


class ImportBuilder:
    """
    Creates the import file with the requested dependencies.

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
        self.import_file = IMPORT_FILE

    def build(self) -> Path:
        """Generate the import file and save it in the workspace."""
        return self.save_content(self.import_content())

    def build_imports(self) -> list[str]:
        """Import statements, runtime first, then every reference in order."""
        refs = [*self.component_refs, *self.extra_refs]
        return [import_statement(RUNTIME_IMPORT)] + [
            import_statement(import_path(ref)) for ref in refs
        ]

    def import_content(self) -> str:
        self.logger.info("Preparing import.html file content...")
        content = "".join(f"{line}\n" for line in self.build_imports())
        self.logger.info("import.html file content ready.")
        return content

    def save_content(self, content: str) -> Path:
        self.logger.info("Creating import.html file...")
        self.working_dir.mkdir(parents=True, exist_ok=True)
        location = self.working_dir / self.import_file
        location.write_text(content, encoding="utf-8")
        self.logger.info("import.html file created.")
        return location
