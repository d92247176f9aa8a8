"""Result emission: JSON files and GitHub Actions outputs."""

from __future__ import annotations

import json
import os
import uuid
from pathlib import Path

from firstever.models import FirstEverythingResult


def result_json(result: FirstEverythingResult) -> str:
    return json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False)


def write_result(result: FirstEverythingResult, path: str) -> Path:
    """Write the JSON result to *path*, creating parent directories."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(result_json(result) + "\n", encoding="utf-8")
    return out


def set_outputs(outputs: dict[str, str], output_file: str | None = None) -> Path | None:
    """Append multi-line ``name<<DELIM`` entries to the ``$GITHUB_OUTPUT`` file.

    Returns the file written, or ``None`` when not running under Actions.
    """
    target = output_file or os.environ.get("GITHUB_OUTPUT")
    if not target:
        return None
    path = Path(target)
    with path.open("a", encoding="utf-8") as fh:
        for name, value in outputs.items():
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            fh.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
    return path


def append_step_summary(summary: str, summary_file: str | None = None) -> Path | None:
    """Append *summary* to the ``$GITHUB_STEP_SUMMARY`` file, if configured."""
    target = summary_file or os.environ.get("GITHUB_STEP_SUMMARY")
    if not target:
        return None
    path = Path(target)
    with path.open("a", encoding="utf-8") as fh:
        fh.write("\n" + summary + "\n")
    return path
