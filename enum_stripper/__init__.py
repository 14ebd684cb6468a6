"""
enum-stripper: removes compiled enum definitions from script bundles.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    enum-stripper build/assets/app.js

Library Usage:
    from pathlib import Path
    from enum_stripper import strip_enums

    content = Path("build/assets/app.js").read_text()
    result = strip_enums(content)
    print(result.text)
    print(result.removal_log)
"""

from .config import ConfigError, StripperConfig
from .exceptions import ParseError, RunawayScanError, StripError
from .members import extract_members, validate_guts
from .models import EnumDefinition, MemberEntry, ScanResult, StripResult
from .scanner import scan_definitions
from .stripper import StripFileError, strip_enums, strip_file
from .substitution import substitute_references

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "strip_enums",
    "strip_file",
    "scan_definitions",
    "validate_guts",
    "extract_members",
    "substitute_references",
    # Data models
    "EnumDefinition",
    "MemberEntry",
    "ScanResult",
    "StripResult",
    "StripperConfig",
    # Exceptions
    "ConfigError",
    "ParseError",
    "RunawayScanError",
    "StripError",
    "StripFileError",
    # Version
    "__version__",
]
