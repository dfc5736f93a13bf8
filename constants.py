"""
Application-wide constants for batch file selection and line parsing.

This module defines the file naming conventions used to recognize completed
batch files, the characters of the `account|ip|...` line grammar, and the
defaults applied when the corresponding CLI flags are omitted.
"""

from typing import Final


# Only files with exactly this extension (after the last ".") are loaded.
DATA_FILE_EXTENSION: Final[str] = "txt"

# Suffix appended to a data file's path (extension removed) to form the path
# of its completion marker, e.g. "batch+20240101001.txt" -> "batch+20240101001OK".
DEFAULT_FINISH_SUFFIX: Final[str] = "OK"

# The ordering key of a batch file is the integer found in its base name,
# ORDER_KEY_SKIP characters after the last ORDER_KEY_SEPARATOR.
ORDER_KEY_SEPARATOR: Final[str] = "+"
ORDER_KEY_SKIP: Final[int] = 4

# Line grammar: <account>|<ip-shaped-field>|<ignored>
FIELD_SEPARATOR: Final[str] = "|"
OCTET_SEPARATOR: Final[str] = "."
REQUIRED_OCTET_SEPARATORS: Final[int] = 3
REQUIRED_OCTETS: Final[int] = 4

# Leading and trailing characters removed from parsed fields: ASCII control
# characters and space.
TRIM_CHARACTERS: Final[str] = "".join(chr(c) for c in range(0x21))

FILE_ENCODING: Final[str] = "utf-8"

# A TTL at or below this value means "no expiry".
NO_EXPIRY_TTL: Final[int] = -1

HELP_WIDTH: Final[int] = 110
