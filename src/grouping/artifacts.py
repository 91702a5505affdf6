from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from contracts.reading import AnalysisResult


def serialize_analysis_result(result: AnalysisResult) -> str:
    payload: dict[str, Any] = result.to_dict()
    return (
        json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"), indent=2)
        + "\n"
    )


def write_analysis_artifact(*, result: AnalysisResult, out_file: Path) -> None:
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(serialize_analysis_result(result), encoding="utf-8")


def load_analysis_artifact(path: Path) -> AnalysisResult:
    return AnalysisResult.from_dict(json.loads(path.read_text(encoding="utf-8")))
