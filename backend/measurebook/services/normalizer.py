"""
Measurebook Backend - Record Normalizer
=========================================

What:  Turns an arbitrary value claimed to be a list of records into a
       well-formed, deterministically ordered record tree.
How:   For every record (and recursively every `subRecords` list):
       1. assign an id when the record has none
       2. coerce `sn` to a base-10 integer when the key is present
       3. normalize nested `subRecords`
       then sort each level by id using plain string comparison.
Who:   Called by the project stores on every load and by ProjectService on
       every write.

Guarantees:
    - Never raises. A non-list input yields [].
    - Same cardinality in and out; records are never dropped or added.
    - Idempotent: existing ids are kept, so a second pass only re-sorts an
      already sorted tree and re-coerces integers to themselves.
    - The input is not mutated; each record is shallow-copied.

Sequence number coercion mirrors classic `parseInt(value, 10)`: leading
whitespace, an optional sign and decimal digits are read, everything after
is ignored. Values that do not parse become None, which is also what the
collection looks like after a JSON round trip (NaN is written as null).
"""

import math
import re
from typing import Any, Dict, List, Optional

from measurebook.ids import IdFactory, new_id

ID_KEY = "id"
SN_KEY = "sn"
SUB_RECORDS_KEY = "subRecords"

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def coerce_sn(value: Any) -> Optional[int]:
    """
    Parse a sequence number as a base-10 integer.

    Returns None (the not-a-number sentinel) when nothing parses.

    Examples:
        coerce_sn("3")      → 3
        coerce_sn(" -12x")  → -12
        coerce_sn("4.9")    → 4
        coerce_sn(7.8)      → 7
        coerce_sn("abc")    → None
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return int(value)  # truncates toward zero, like parseInt on a plain decimal
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match is None:
            return None
        return int(match.group(1))
    return None


def _normalize_record(record: Any, id_factory: IdFactory) -> Dict[str, Any]:
    if not isinstance(record, dict):
        # Scalars and lists cannot carry an id; keep the slot as an empty record.
        return {ID_KEY: id_factory()}

    normalized = dict(record)
    if not normalized.get(ID_KEY):
        normalized[ID_KEY] = id_factory()

    if SN_KEY in normalized:
        normalized[SN_KEY] = coerce_sn(normalized[SN_KEY])

    sub_records = normalized.get(SUB_RECORDS_KEY)
    if isinstance(sub_records, list):
        normalized[SUB_RECORDS_KEY] = ensure_and_sort_records(sub_records, id_factory)

    return normalized


def _sort_key(record: Dict[str, Any]) -> str:
    return str(record[ID_KEY])


def ensure_and_sort_records(records: Any, id_factory: IdFactory = new_id) -> List[Dict[str, Any]]:
    """
    Assign missing ids, coerce `sn`, recurse into `subRecords` and sort by id.

    Args:
        records: Any value. Only lists are processed; anything else gives [].
        id_factory: Source of fresh identifiers (defaults to UUID4 strings).

    Returns:
        A new list of new record dicts, sorted by `str(id)`. Other fields of
        each record are passed through untouched.
    """
    if not isinstance(records, list):
        return []

    processed = [_normalize_record(record, id_factory) for record in records]
    # sorted() is stable, so records sharing an id keep their relative order
    return sorted(processed, key=_sort_key)
