"""Build pipeline that drives plugins through the lifecycle phases."""

from .spec import PluginDeclaration, Spec
from .runner import BuildResult, build, release

__all__ = ["BuildResult", "PluginDeclaration", "Spec", "build", "release"]
