# -----------------------------------------------------------------------------
# ARC COMPONENTS BUILDER
# -----------------------------------------------------------------------------
# Builds a deployable bundle of ARC web components:
#
#   import arcbuilder
#   arcbuilder.build({"component_refs": ["paper-fab"], "bundle": True})
# -----------------------------------------------------------------------------

from .core.options import ProjectOptions
from .core.project import BuildResult, BuildState, ComponentsProject
from .errors import ConfigurationError, FilesystemError, MissingNameError, StageFailure

__version__ = "1.0.0"


def build(options, **kwargs) -> BuildResult:
    """
    Validate the options and run a build.

    Raises:
        ConfigurationError: If the options are invalid.
        StageFailure: If any build stage fails.
    """
    if not isinstance(options, ProjectOptions):
        options = ProjectOptions(options)
    project = ComponentsProject(options, **kwargs)
    return project.build()


__all__ = [
    "build",
    "ProjectOptions",
    "ComponentsProject", "BuildResult", "BuildState",
    "ConfigurationError", "FilesystemError", "MissingNameError", "StageFailure",
]
