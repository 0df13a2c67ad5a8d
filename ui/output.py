"""
Output formatting -- JSON export and plain text.
"""
from __future__ import annotations

import json
import os
from typing import Any, Dict


def report_to_json(report: Dict[str, Any]) -> str:
    return json.dumps(report, indent=2, ensure_ascii=False)


def save_json(result: Dict[str, Any], filepath: str) -> None:
    """Write *result* to *filepath* atomically (write-tmp then rename)."""
    dir_path = os.path.dirname(filepath) or "."
    tmp = os.path.join(dir_path, f".tmp_{os.path.basename(filepath)}")

    try:
        with open(tmp, "w", encoding="utf-8") as fh:
            json.dump(result, fh, indent=2, ensure_ascii=False)
        os.replace(tmp, filepath)
    except (IOError, OSError) as exc:
        # Clean up partial temp file
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise IOError(f"Failed to save JSON to {filepath}: {exc}") from exc


# ---------------------------------------------------------------------------
# Plain-text helpers
# ---------------------------------------------------------------------------

def format_text_result(report: Dict[str, Any]) -> str:
    """Render a full-test report as a plain-text block."""
    sep = "=" * 50
    mid = "-" * 50
    tests = report.get("tests", {})
    lines = [sep, "Network Speed Test Results", sep, f"Server: {report.get('serverUrl', '?')}"]

    info = tests.get("networkInfo")
    if info:
        lines.append(f"Client IP: {info.get('clientIP')}")
    lines.append(mid)

    latency = tests.get("latency")
    if latency:
        lines.append(
            f"Latency: {latency['average']} ms "
            f"(min: {latency['min']} ms, max: {latency['max']} ms, samples: {latency['n_samples']})"
        )
    for key, label in (("download", "Download"), ("upload", "Upload")):
        transfer = tests.get(key)
        if transfer:
            lines.append(
                f"{label}: {transfer['speedMbps']:.2f} Mbps "
                f"({transfer['speedKbps']} Kbps, {transfer['sizeKB']} KB in {transfer['transferTime']} ms)"
            )

    if report.get("error"):
        lines.append(mid)
        lines.append(f"Error: {report['error']}")
    lines.append(sep)
    return "\n".join(lines)
