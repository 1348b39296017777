"""JSON export of install outcomes.

Lets CI pipelines pick up the installed driver path and version without
parsing the rich table.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence

from core.domain.models import InstallOutcome


def export_outcomes_json(*, outcomes: Sequence[InstallOutcome], output_path: Path) -> Path:
    """Write outcomes as UTF-8 JSON with a stable layout."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = [outcome.model_dump(mode="json") for outcome in outcomes]
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
