"""Concatenate the pages of ordered PDF inputs into one output document."""

import logging
import time
from pathlib import Path
from typing import List, Sequence, Tuple

from PyPDF2 import PdfReader, PdfWriter
from PyPDF2.errors import PdfReadError

from pdf_merger.core.exceptions import CorruptInputError, InsufficientInputError, StorageError
from pdf_merger.core.models import InputFile, MergedArtifact
from pdf_merger.core.utils import generate_artifact_name

logger = logging.getLogger(__name__)

MIN_INPUTS = 2


def open_pdf(input_file: InputFile) -> PdfReader:
    """Parse one input, mapping every parse failure to CorruptInputError."""
    name = input_file.filename
    try:
        reader = PdfReader(str(input_file.path), strict=False)
        if reader.is_encrypted:
            # Owner-password-only files open with an empty user password.
            try:
                decrypted = reader.decrypt("")
            except Exception as e:
                raise CorruptInputError.encrypted(name) from e
            if not decrypted:
                raise CorruptInputError.encrypted(name)
        page_count = len(reader.pages)
    except CorruptInputError:
        raise
    except PdfReadError as e:
        logger.warning(f"[merge] PDF read error for {name}: {e}")
        raise CorruptInputError.for_file(name, str(e)) from e
    except Exception as e:
        logger.warning(f"[merge] Could not parse {name}: {e}")
        raise CorruptInputError.for_file(name) from e

    if page_count == 0:
        raise CorruptInputError.for_file(name, "PDF has no pages")
    return reader


def page_size(page) -> Tuple[float, float]:
    box = page.mediabox
    return float(box.width), float(box.height)


def merge_documents(ordered_files: Sequence[InputFile], output_dir: Path) -> MergedArtifact:
    """Append every page of every input, in order, to a new file in `output_dir`.

    Pages are copied as-is, so content streams, fonts and images are
    not re-encoded. Either every input merges or nothing is written.

    Raises:
        InsufficientInputError: Fewer than two inputs.
        CorruptInputError: An input cannot be parsed.
        StorageError: The output cannot be written.
    """
    if len(ordered_files) < MIN_INPUTS:
        raise InsufficientInputError.for_count(len(ordered_files))

    readers: List[PdfReader] = [open_pdf(f) for f in ordered_files]

    writer = PdfWriter()
    sizes: List[Tuple[float, float]] = []
    for input_file, reader in zip(ordered_files, readers):
        for page in reader.pages:
            writer.add_page(page)
            sizes.append(page_size(page))
        logger.info(f"[merge] Added {len(reader.pages)} page(s) from {input_file.filename}")

    output_dir = Path(output_dir)
    output_path = output_dir / generate_artifact_name()
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        with open(output_path, "wb") as f:
            writer.write(f)
    except OSError as e:
        output_path.unlink(missing_ok=True)
        raise StorageError("Could not write the merged document.", original_error=e) from e
    except Exception as e:
        # Writer failures on malformed objects only show up at serialization time.
        output_path.unlink(missing_ok=True)
        raise CorruptInputError("One of the documents could not be merged.", original_error=e) from e

    logger.info(
        f"[merge] Merged {len(ordered_files)} files ({len(sizes)} pages) into {output_path.name}"
    )
    return MergedArtifact(
        filename=output_path.name,
        path=output_path.resolve(),
        page_count=len(sizes),
        page_sizes=tuple(sizes),
        created_at=time.time(),
    )
