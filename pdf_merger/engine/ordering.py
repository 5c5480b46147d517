"""Map a client-declared filename order onto the saved uploads."""

import json
import logging
from typing import Dict, List, Optional, Sequence

from pdf_merger.core.exceptions import InvalidOrderError
from pdf_merger.core.models import InputFile

logger = logging.getLogger(__name__)


def parse_order_hint(raw: Optional[str]) -> Optional[List[str]]:
    """Decode the `order` form field (a JSON array of filenames).

    Returns None when the field is missing or blank.
    """
    if raw is None or not raw.strip():
        return None
    try:
        parsed = json.loads(raw)
    except ValueError as e:
        raise InvalidOrderError("The file order must be a JSON list of filenames.", original_error=e) from e

    if not isinstance(parsed, list) or not all(isinstance(name, str) for name in parsed):
        raise InvalidOrderError("The file order must be a JSON list of filenames.")
    return parsed


def reconcile(saved_files: Sequence[InputFile], order_hint: Optional[Sequence[str]]) -> List[InputFile]:
    """Order saved files by the position of their name in `order_hint`.

    Names missing from the hint keep their upload order after every
    hinted file. Ties (duplicate names) keep upload order too.
    """
    if not order_hint:
        return list(saved_files)

    positions: Dict[str, int] = {}
    for index, name in enumerate(order_hint):
        positions.setdefault(name, index)

    unknown_rank = len(order_hint)
    unmatched = [f.filename for f in saved_files if f.filename not in positions]
    if unmatched:
        logger.info(f"[order] {len(unmatched)} file(s) not in order hint, appended last: {unmatched}")

    # sorted() is stable, so equal keys stay in upload order
    return sorted(saved_files, key=lambda f: positions.get(f.filename, unknown_rank))
