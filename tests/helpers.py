from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def run_aclaudit(*args: str, cwd: Path, env: dict[str, str] | None = None) -> subprocess.CompletedProcess[str]:
    base = {key: value for key, value in os.environ.items() if not key.startswith("ACLAUDIT_") and key not in {"CI", "RUN_ID"}}
    existing = base.get("PYTHONPATH", "")
    src_path = str(ROOT / "src")
    base["PYTHONPATH"] = f"{src_path}{os.pathsep}{existing}" if existing else src_path
    base.update(env or {})
    return subprocess.run(
        [sys.executable, "-m", "aclaudit", *args],
        cwd=cwd,
        env=base,
        text=True,
        capture_output=True,
        check=False,
    )
