"""
Profile markers: reading (resolution), writing and batch tagging.
"""

from covergate.profiles.markers import (
    MARKER_PATTERN,
    ProfileResolver,
    extract_profile,
    format_marker,
    read_profile,
    resolve_profiles,
)
from covergate.profiles.tagging import (
    TaggingResult,
    TaggingService,
    read_file_list,
    suggest_profile,
    suggest_profiles,
)
from covergate.profiles.writer import remove_marker, write_marker

__all__ = [
    # Reading
    "MARKER_PATTERN",
    "ProfileResolver",
    "extract_profile",
    "format_marker",
    "read_profile",
    "resolve_profiles",
    # Writing
    "write_marker",
    "remove_marker",
    # Tagging
    "TaggingResult",
    "TaggingService",
    "read_file_list",
    "suggest_profile",
    "suggest_profiles",
]
