import csv
from pathlib import Path
from typing import Iterable, Tuple

from .domain.models import RiskVerdict

RESULT_FIELDS = [
    "phone_number",
    "canonical",
    "is_valid",
    "line_type",
    "carrier",
    "is_suspicious",
    "is_virtual_line",
    "risk_level",
]


def read_phone_list(path: Path) -> list[str]:
    """Read phone numbers from a text file, one per line."""
    return [line.strip() for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]


def write_results(path: Path, results: Iterable[Tuple[str, str, RiskVerdict]]) -> None:
    """Write ``(raw, canonical, verdict)`` triples to CSV."""
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=RESULT_FIELDS)
        writer.writeheader()
        for raw, canonical, verdict in results:
            writer.writerow(
                {
                    "phone_number": raw,
                    "canonical": canonical,
                    "is_valid": verdict.is_valid,
                    "line_type": verdict.line_type,
                    "carrier": verdict.carrier,
                    "is_suspicious": verdict.is_suspicious,
                    "is_virtual_line": verdict.is_virtual_line,
                    "risk_level": verdict.risk_level.value,
                }
            )
