"""
csv_parser.py – turns a two-column prediction / answer-key CSV into ordered records.

The header is dropped, each line is split on commas (no quoting support) and
only the first two fields (id, value) are kept.
Malformed lines never raise; the validator reports missing values.
"""


from typing import List

from scorer.models.submission_schema import Record


def decode_csv_bytes(raw: bytes) -> str:
    """UTF-8 decode that drops a leading BOM."""
    return raw.decode("utf-8-sig", errors="replace")


def parse_csv(text: str) -> List[Record]:
    lines = text.strip().splitlines()
    records: List[Record] = []
    for line in lines[1:]:
        if not line.strip():
            continue
        fields = [f.strip() for f in line.split(",")]
        records.append(Record(id=fields[0], value=fields[1] if len(fields) > 1 else None))
    return records


def parse_csv_bytes(raw: bytes) -> List[Record]:
    return parse_csv(decode_csv_bytes(raw))
