# -----------------------------------------------------------------------------
# DOMAIN LAYER
# -----------------------------------------------------------------------------
# Contains the build configuration and the records exchanged between the
# pipeline stages (dependency references, manifests, source documents).
# -----------------------------------------------------------------------------

from .models import (
    DEFAULT_SCOPE,
    BowerManifest,
    BuildConfiguration,
    DependencyReference,
    DocumentKind,
    SourceDocument,
    short_name,
)

__all__ = [
    "DEFAULT_SCOPE",
    "BowerManifest",
    "BuildConfiguration",
    "DependencyReference",
    "DocumentKind",
    "SourceDocument",
    "short_name",
]
