"""End-to-end merge pipeline: intake, reorder, merge, normalize, schedule cleanup."""

import logging
import time
from dataclasses import replace
from typing import Optional, Sequence

from werkzeug.datastructures import FileStorage

from pdf_merger.config import RuntimeConfig
from pdf_merger.core.exceptions import InsufficientInputError, OptimizationError
from pdf_merger.core.models import MergedArtifact, MergeRequest
from pdf_merger.engine.intake import UploadBudget, accept_upload
from pdf_merger.engine.merge import MIN_INPUTS, merge_documents
from pdf_merger.engine.normalize import normalize_for_print
from pdf_merger.engine.ordering import parse_order_hint, reconcile
from pdf_merger.engine.session import SessionStore
from pdf_merger.workers.retention import RetentionQueue

logger = logging.getLogger(__name__)


def run_merge(
    uploads: Sequence[FileStorage],
    raw_order: Optional[str],
    config: RuntimeConfig,
    queue: RetentionQueue,
) -> MergedArtifact:
    """Run one merge request from raw multipart files to a scheduled artifact.

    Validation that needs no I/O (file count, order hint) happens before a
    session directory exists. Once a session exists it is always scheduled
    for removal, whether the merge succeeds or not.
    """
    uploads = [u for u in uploads if u and u.filename]
    if len(uploads) < MIN_INPUTS:
        raise InsufficientInputError.for_count(len(uploads))
    order_hint = parse_order_hint(raw_order)

    store = SessionStore(config.upload_folder)
    session = store.create_session()
    start_time = time.time()
    try:
        budget = UploadBudget(config.max_file_size, config.max_request_size)
        for upload in uploads:
            accept_upload(session, upload, budget)

        request = MergeRequest(files=reconcile(session.files, order_hint), order_hint=order_hint)
        logger.info(
            f"[{session.session_id}] Merge order: {[f.filename for f in request.files]}"
        )

        artifact = merge_documents(request.files, config.output_folder)
        try:
            sizes = normalize_for_print(artifact.path, config.print_envelope)
            artifact = replace(artifact, page_sizes=tuple(sizes), optimized=True)
        except OptimizationError as e:
            # The unoptimized merge is still a valid document; serve it.
            logger.warning(f"[{session.session_id}] Serving unoptimized artifact: {e.message}")

        queue.schedule(artifact.path, config.artifact_retention_seconds)
    finally:
        queue.schedule(session.root.resolve(), config.session_retention_seconds)

    logger.info(
        f"[{session.session_id}] Merged {len(session.files)} files into {artifact.filename} "
        f"({artifact.page_count} pages) in {time.time() - start_time:.2f}s"
    )
    return artifact
