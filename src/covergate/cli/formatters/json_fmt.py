"""
JSON output formatter.

Produces structured JSON output for machine consumption and downstream automation.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from covergate.policy.models import ValidationResult


def format_json(result: ValidationResult) -> str:
    """
    Format a validation result as JSON.

    Output structure:
    {
        "version": "1.0",
        "success": false,
        "validated_at": "2026-01-17T14:30:00+00:00",
        "filtered_run": false,
        "summary": {"files_checked": 12, "files_failed": 1, ...},
        "profiles": {"Critical": {"checked": 2, "failed": 1}, ...},
        "violations": [{"file": "...", "profile": "...", "kind": "...", ...}]
    }
    """
    output: dict[str, Any] = {"version": "1.0", **result.to_dict()}
    return json.dumps(output, indent=2, sort_keys=True, default=str)
