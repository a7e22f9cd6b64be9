# sentence_logic/run_manifest.py
"""Params manifest and in-progress marker written next to the output file.

For ``out/logical_forms.tsv`` the step writes:
- ``out/logical_forms_params.json``: run metadata and effective parameters
- ``out/logical_forms_in_progress``: present only while the run executes
"""

from __future__ import annotations

import json
import platform
import subprocess
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


def params_path(output_file: Path) -> Path:
    return output_file.with_name(f"{output_file.stem}_params.json")


def in_progress_path(output_file: Path) -> Path:
    return output_file.with_name(f"{output_file.stem}_in_progress")


def _safe_git_commit(repo_root: Path) -> str | None:
    """Best-effort git commit retrieval without depending on GitPython."""
    try:
        r = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            cwd=str(repo_root),
            check=False,
            capture_output=True,
            text=True,
        )
    except OSError:
        return None
    if r.returncode == 0:
        return r.stdout.strip() or None
    return None


def mark_in_progress(output_file: Path) -> Path:
    marker = in_progress_path(output_file)
    marker.parent.mkdir(parents=True, exist_ok=True)
    marker.write_text(datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ") + "\n", encoding="utf-8")
    return marker


def clear_in_progress(output_file: Path) -> None:
    in_progress_path(output_file).unlink(missing_ok=True)


def write_params_manifest(
    *,
    output_file: Path,
    params: dict[str, Any],
    summary: dict[str, Any],
    command: str | None = None,
    repo_root: Path | str | None = None,
) -> Path:
    """Record the parameters and outcome of a completed run for reproducibility."""
    repo_root_path = Path(repo_root) if repo_root is not None else None
    manifest = {
        "created_utc": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        "python": sys.version.replace("\n", " "),
        "platform": f"{platform.system()} {platform.release()} ({platform.machine()})",
        "git_commit": _safe_git_commit(repo_root_path) if repo_root_path else None,
        "command": command,
        "params": params,
        "summary": summary,
    }
    path = params_path(output_file)
    path.write_text(json.dumps(manifest, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    return path
