"""CLI helpers for ASSETLOOKUPS.

Utilities used by the command-line interface: URL sanitization for safe
display, stderr notices with emoji fallbacks, logger-level option parsing and
JSON output.
"""

from .db_url import sanitize_url
from .messages import error, success, warn
from .output import echo_json, report

__all__ = ["echo_json", "error", "report", "sanitize_url", "success", "warn"]
