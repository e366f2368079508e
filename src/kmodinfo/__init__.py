"""kmodinfo - Read metadata tags from Linux kernel module images."""

from __future__ import annotations

# Core
from kmodinfo.scanner import TagMatch, scan, scan_request, scan_tag
from kmodinfo.resolver import ModuleResolver, ModuleResult, candidate_paths, resolve_and_scan

# Types
from kmodinfo.tags import OutputMode, Shortcut, TagRequest
from kmodinfo.depindex import DependencyRecord, filename_to_modname, open_dependency_index
from kmodinfo.output import TagWriter

# Services
from kmodinfo.reader import read_module_file

# Config
from kmodinfo.config import Config, ModinfoSettings, load_settings

# Errors
from kmodinfo.errors import (
    ConfigError,
    ConfigNotFoundError,
    ErrorCodes,
    IndexUnavailableError,
    InvalidInputError,
    ModinfoError,
    ModuleUnreadableError,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "scan",
    "scan_tag",
    "scan_request",
    "TagMatch",
    "ModuleResolver",
    "ModuleResult",
    "candidate_paths",
    "resolve_and_scan",
    # Types
    "Shortcut",
    "TagRequest",
    "OutputMode",
    "DependencyRecord",
    "filename_to_modname",
    "open_dependency_index",
    "TagWriter",
    # Services
    "read_module_file",
    # Config
    "Config",
    "ModinfoSettings",
    "load_settings",
    # Errors
    "ErrorCodes",
    "ModinfoError",
    "ConfigError",
    "ConfigNotFoundError",
    "InvalidInputError",
    "IndexUnavailableError",
    "ModuleUnreadableError",
]
