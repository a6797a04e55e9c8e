"""README generation from POD for the build pipeline."""

from .errors import (
    InvalidConfiguration,
    ReadmeError,
    SourceNotFound,
    TargetFileMissing,
    UnknownEncoding,
    UnknownFormat,
)
from .models import FormatSpec, PluginConfig, SourceSnapshot
from .plugin import LifecycleState, ReadmeAnyFromPod
from .registry import FORMATS, all_format_ids, lookup

__all__ = [
    "FORMATS",
    "FormatSpec",
    "InvalidConfiguration",
    "LifecycleState",
    "PluginConfig",
    "ReadmeAnyFromPod",
    "ReadmeError",
    "SourceNotFound",
    "SourceSnapshot",
    "TargetFileMissing",
    "UnknownEncoding",
    "UnknownFormat",
    "all_format_ids",
    "lookup",
]
