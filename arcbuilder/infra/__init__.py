# -----------------------------------------------------------------------------
# INFRASTRUCTURE LAYER
# -----------------------------------------------------------------------------
# Wrappers around the external tools the build delegates to:
# - DependencyInstaller: bower (installed through npm when missing)
# - PolymerBundler: polymer-bundler
# - WrapperGenerator: wc-reactor
# -----------------------------------------------------------------------------

from .bundler import PolymerBundler
from .installer import DependencyInstaller
from .wrapper import WrapperGenerator, WrapperOptions

__all__ = ["PolymerBundler", "DependencyInstaller", "WrapperGenerator", "WrapperOptions"]
