"""Shrink oversized pages so the merged document fits the print medium."""

import logging
import os
from pathlib import Path
from typing import List, Tuple

from PyPDF2 import PdfReader, PdfWriter

from pdf_merger.config import DEFAULT_PRINT_HEIGHT, DEFAULT_PRINT_WIDTH
from pdf_merger.core.exceptions import OptimizationError
from pdf_merger.engine.merge import page_size

logger = logging.getLogger(__name__)

# Pages count as oversized only past envelope + SIZE_TOLERANCE, not at the first
# fraction of a point over. Float noise from a previous scale (e.g. 842.0000001)
# must not trigger a second rescale, so normalizing twice changes nothing.
SIZE_TOLERANCE = 0.01

Envelope = Tuple[float, float]


def fit_scale(width: float, height: float, envelope: Envelope) -> float:
    """Uniform factor that fits a page inside `envelope`; 1.0 if it already fits."""
    ref_w, ref_h = envelope
    if width <= ref_w + SIZE_TOLERANCE and height <= ref_h + SIZE_TOLERANCE:
        return 1.0
    return min(ref_w / width, ref_h / height)


def normalize_for_print(
    artifact_path: Path,
    envelope: Envelope = (DEFAULT_PRINT_WIDTH, DEFAULT_PRINT_HEIGHT),
) -> List[Tuple[float, float]]:
    """Rescale every page larger than `envelope`, rewriting the file in place.

    The rewrite goes through a sibling temp file, so on failure the
    original merged document is left untouched.

    Returns:
        Per-page (width, height) after normalization.

    Raises:
        OptimizationError: The document could not be re-read or re-saved.
    """
    artifact_path = Path(artifact_path)
    tmp_path = artifact_path.with_name(f".{artifact_path.name}.tmp")
    try:
        reader = PdfReader(str(artifact_path), strict=False)
        writer = PdfWriter()
        sizes: List[Tuple[float, float]] = []
        resized = 0

        for index, page in enumerate(reader.pages):
            width, height = page_size(page)
            scale = fit_scale(width, height, envelope)
            if scale < 1.0:
                page.scale_by(scale)
                resized += 1
                logger.debug(
                    f"[normalize] Page {index + 1}: {width:.1f}x{height:.1f} scaled by {scale:.4f}"
                )
            writer.add_page(page)
            sizes.append(page_size(page))

        if resized:
            with open(tmp_path, "wb") as f:
                writer.write(f)
            os.replace(tmp_path, artifact_path)
    except Exception as e:
        tmp_path.unlink(missing_ok=True)
        logger.warning(f"[normalize] Could not optimize {artifact_path.name} for printing: {e}")
        raise OptimizationError("Could not resize the merged document for printing.", original_error=e) from e

    logger.info(f"[normalize] {artifact_path.name}: resized {resized}/{len(sizes)} page(s)")
    return sizes
