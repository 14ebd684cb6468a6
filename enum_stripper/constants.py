"""Constants used across the enum-stripper package."""

from __future__ import annotations

import string

from .config import StripperConfig

DEFAULT_CONFIG = StripperConfig()

# Tokens that can open an enum definition
DECLARATION_TOKEN = "var "
SEPARATOR_TOKEN = ","
STATEMENT_TERMINATOR = ";"

# Compiled enum shape:
#   var n=(t=>(t[t.A=1]="A",t.B="b",t))(n||{})
ROOT_ASSIGN = "=("
ARROW_OPEN = "=>("
CLOSING_TEMPLATE = ",{inner_root}))({public_root}||{{}})"

# Member entries
ASSIGNMENT = "="
MEMBER_ACCESS = "."
REVERSE_LOOKUP_OPEN = "["
REVERSE_LOOKUP_CLOSE = "]="
QUOTE_CHARS = ('"', "'")

IDENTIFIER_CHARS = frozenset(string.ascii_letters + string.digits + "_$")

SCRIPT_EXTENSIONS = (".js", ".mjs", ".cjs")

# Configuration defaults
DEFAULT_MAX_ITERATIONS = DEFAULT_CONFIG.max_iterations
DEFAULT_MAX_FILE_SIZE = DEFAULT_CONFIG.max_file_size
