"""Conversion of a CSV file with a header row to JSON or YAML."""

from __future__ import annotations

import csv
import json
import os
from enum import Enum
from pathlib import Path

import yaml


class OutputFormat(Enum):
    """The format the records are written in."""

    JSON = "json"
    YAML = "yaml"

    @classmethod
    def parse(cls, value: str) -> OutputFormat:
        """Return the format named by ``value``, ignoring case."""
        lowered = value.lower()
        try:
            return cls(lowered)
        except ValueError:
            raise ValueError(f"Unsupported format: {lowered}") from None

    def __str__(self) -> str:
        return self.value


def _read_records(input_path: str | os.PathLike, delimiter: str) -> list[dict[str, str]]:
    with open(input_path, newline="", encoding="utf-8") as handle:
        rows = [row for row in csv.reader(handle, delimiter=delimiter) if row]
    if not rows:
        return []
    headers, *body = rows
    records = []
    for number, row in enumerate(body, start=1):
        if len(row) != len(headers):
            raise ValueError(
                f"record {number} has {len(row)} fields, "
                f"but the header has {len(headers)}"
            )
        record = dict(zip(headers, row))
        records.append(dict(sorted(record.items())))
    return records


def convert_csv(
    input_path: str | os.PathLike,
    output: str | os.PathLike,
    delimiter: str = " ",
    fmt: OutputFormat = OutputFormat.JSON,
) -> list[dict[str, str]]:
    """Write the CSV records of ``input_path`` to ``output`` and return them.

    Each record becomes a mapping from header names to field text.
    """
    if len(delimiter) != 1:
        raise ValueError("delimiter must be a single character")
    records = _read_records(input_path, delimiter)
    if fmt is OutputFormat.JSON:
        content = json.dumps(records, indent=2, ensure_ascii=False, sort_keys=True)
    else:
        content = yaml.safe_dump(
            records, allow_unicode=True, sort_keys=True, default_flow_style=False
        )
    Path(output).write_text(content, encoding="utf-8")
    return records