# -----------------------------------------------------------------------------
# CORE LAYER
# -----------------------------------------------------------------------------
# The build logic:
# - ProjectOptions: options validation
# - BowerBuilder / ImportBuilder: dependency and import manifests
# - SourceStreamTransformer: the bundle stage
# - BuildWorkspace: the staging directory
# - ComponentsProject: the stage orchestrator
# -----------------------------------------------------------------------------

from .dependencies import BowerBuilder
from .imports import ImportBuilder
from .logger import BuildLogger
from .options import ProjectOptions, validate_options
from .project import BuildResult, BuildState, ComponentsProject
from .transformer import SourceStreamTransformer, TransformError
from .workspace import BuildWorkspace

__all__ = [
    "BowerBuilder",
    "ImportBuilder",
    "BuildLogger",
    "ProjectOptions", "validate_options",
    "BuildResult", "BuildState", "ComponentsProject",
    "SourceStreamTransformer", "TransformError",
    "BuildWorkspace",
]
