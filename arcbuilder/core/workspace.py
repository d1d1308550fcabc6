# -----------------------------------------------------------------------------
# BUILD WORKSPACE
# -----------------------------------------------------------------------------
# Responsibility: The staging directory (_arctmp) that accumulates the
# manifests, the installed components and the bundle until the final move
# to the destination. Owned by one project at a time.
# -----------------------------------------------------------------------------

import shutil
from pathlib import Path

from arcbuilder.errors import FilesystemError

WORKSPACE_DIR = "_arctmp"


def remove_path(path: Path) -> None:
    """Remove a file or a directory tree; a missing path is not an error."""
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            path.unlink()
    except OSError as e:
        raise FilesystemError(f"Cannot remove {path}: {e}", path=str(path)) from e


class BuildWorkspace:
    """The staging directory of a build."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).absolute()

    def __repr__(self) -> str:
        return f"BuildWorkspace({str(self.root)!r})"

    def exists(self) -> bool:
        return self.root.is_dir()

    def path(self, *parts: str) -> Path:
        return self.root.joinpath(*parts)

    def create(self) -> Path:
        """Create a fresh, empty workspace, dropping leftovers of a failed run."""
        remove_path(self.root)
        try:
            self.root.mkdir(parents=True)
        except OSError as e:
            raise FilesystemError(f"Cannot create workspace {self.root}: {e}", path=str(self.root)) from e
        return self.root

    def destroy(self) -> None:
        remove_path(self.root)

    def copy_in(self, source: Path | str) -> Path:
        """Copy a file into the workspace root, keeping its name."""
        source = Path(source)
        target = self.path(source.name)
        try:
            shutil.copyfile(source, target)
        except OSError as e:
            raise FilesystemError(f"Cannot copy {source} into workspace: {e}", path=str(source)) from e
        return target

    def overlaps(self, path: Path | str) -> bool:
        """True if the path is the workspace, inside it, or one of its parents."""
        path = Path(path).resolve()
        root = self.root.resolve()
        return path == root or path in root.parents or root in path.parents

    def move_to(self, destination: Path | str) -> Path:
        """
        Move the workspace contents to the destination.

        The destination is replaced, not merged: anything already there is
        removed first.

        Raises:
            FilesystemError: If the destination overlaps the workspace; nothing
                is removed in that case.
        """
        destination = Path(destination).absolute()
        if self.overlaps(destination):
            raise FilesystemError(
                f"Destination {destination} overlaps the workspace {self.root}",
                path=str(destination),
            )
        remove_path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        try:
            shutil.move(str(self.root), str(destination))
        except OSError as e:
            raise FilesystemError(
                f"Cannot move workspace to {destination}: {e}", path=str(destination)
            ) from e
        return destination
