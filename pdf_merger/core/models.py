"""Records passed between pipeline stages."""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple


@dataclass
class InputFile:
    """One uploaded document persisted in a session directory."""

    filename: str  # original client name, join key for ordering
    path: Path
    mime_type: str
    size_bytes: int


@dataclass
class UploadSession:
    """Filesystem-scoped lifetime of one merge request's raw inputs."""

    session_id: str
    root: Path
    files: List[InputFile] = field(default_factory=list)
    created_at: float = field(default_factory=time.time)


@dataclass
class MergeRequest:
    """Files in the order the client wants them merged."""

    files: List[InputFile]
    order_hint: Optional[List[str]] = None


@dataclass(frozen=True)
class MergedArtifact:
    """The single merged output document of a request."""

    filename: str
    path: Path
    page_count: int
    page_sizes: Tuple[Tuple[float, float], ...] = ()
    created_at: float = field(default_factory=time.time)
    optimized: bool = False
