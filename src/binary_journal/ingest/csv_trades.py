from __future__ import annotations

import csv
import io
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Sequence

from binary_journal.errors import CsvParseError

DEFAULT_ENCODINGS = ("utf-8-sig", "cp932")
DEFAULT_MAX_FILES = 5

_INT = re.compile(r"^\s*-?\d+\s*$")
_FLOAT = re.compile(r"^\s*-?(\d+\.?|\.\d+|\d+\.\d+)([eE][-+]?\d+)?\s*$")


@dataclass(frozen=True)
class IngestResult:
    rows: list[dict[str, Any]]
    files: int = 0


def load_trade_files(
    paths: Sequence[str | Path],
    *,
    max_files: int = DEFAULT_MAX_FILES,
    encodings: Sequence[str] = DEFAULT_ENCODINGS,
) -> IngestResult:
    if len(paths) > max_files:
        raise CsvParseError(f"At most {max_files} files can be analyzed at once.")
    rows: list[dict[str, Any]] = []
    for path in paths:
        rows.extend(load_trade_file(path, encodings=encodings))
    return IngestResult(rows=rows, files=len(paths))


def load_trade_file(path: str | Path, *, encodings: Sequence[str] = DEFAULT_ENCODINGS) -> list[dict[str, Any]]:
    source_path = Path(path)
    if source_path.suffix.lower() not in {".csv", ".tsv"}:
        raise CsvParseError(f"Unsupported file type: {source_path.suffix}")
    return parse_csv_bytes(
        source_path.read_bytes(), encodings=encodings, delimiter=delimiter_for(source_path.name)
    )


def delimiter_for(filename: str) -> str:
    return "\t" if Path(filename).suffix.lower() == ".tsv" else ","


def parse_csv_bytes(
    data: bytes,
    *,
    encodings: Sequence[str] = DEFAULT_ENCODINGS,
    delimiter: str = ",",
) -> list[dict[str, Any]]:
    return parse_csv_text(decode_bytes(data, encodings), delimiter=delimiter)


def decode_bytes(data: bytes, encodings: Sequence[str] = DEFAULT_ENCODINGS) -> str:
    for encoding in encodings:
        try:
            return data.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            continue
    raise CsvParseError("Could not decode CSV file.")


def parse_csv_text(text: str, *, delimiter: str = ",") -> list[dict[str, Any]]:
    """Parse header-driven CSV text into records with numeric cells converted.

    Blank lines are skipped and empty cells become ``None``. A row whose cell
    count differs from the header raises ``CsvParseError``.
    """
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")), delimiter=delimiter)
    header: list[str] | None = None
    records: list[dict[str, Any]] = []
    try:
        for line_no, cells in enumerate(reader, start=1):
            if _is_blank(cells):
                continue
            if header is None:
                header = [cell.strip() for cell in cells]
                continue
            if len(cells) != len(header):
                raise CsvParseError(
                    f"Row {line_no}: expected {len(header)} fields, found {len(cells)}."
                )
            records.append({name: _coerce_cell(value) for name, value in zip(header, cells)})
    except csv.Error as exc:
        raise CsvParseError(f"Malformed CSV: {exc}") from exc
    return records


def _is_blank(cells: Iterable[str]) -> bool:
    return all(cell == "" for cell in cells)


def _coerce_cell(value: str) -> Any:
    if value == "":
        return None
    if _INT.match(value):
        return int(value)
    if _FLOAT.match(value):
        return float(value)
    return value
