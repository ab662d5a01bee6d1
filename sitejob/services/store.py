"""File-backed artifact store.

Each website job is one JSON document under ``DATA_DIR/artifacts``; the job
metadata is kept as a single blob on the artifact, never split per page.
Writers are expected to be serialised by the caller (one request mutates one
job at a time).
"""

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from sitejob import config
from sitejob.models.job import Artifact, JobMetadata

logger = logging.getLogger(__name__)


def _artifacts_dir() -> Path:
    return Path(config.DATA_DIR) / "artifacts"


def _artifact_path(artifact_id: str) -> Path:
    return _artifacts_dir() / f"{artifact_id}.json"


def _publish_log_path() -> Path:
    return Path(config.DATA_DIR) / config.PUBLISH_LOG_FILENAME


def _is_safe_id(artifact_id: str) -> bool:
    return bool(artifact_id) and artifact_id.replace("-", "").isalnum()


def save_artifact(artifact: Artifact) -> Artifact:
    artifact.updated_at = datetime.now(timezone.utc)
    path = _artifact_path(artifact.id)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(artifact.model_dump_json(indent=2), encoding="utf-8")
    return artifact


def create_artifact(
    run_id: str,
    title: str,
    content: str,
    metadata: JobMetadata,
) -> Artifact:
    artifact = Artifact(
        id=uuid.uuid4().hex,
        run_id=run_id,
        title=title,
        content=content,
        target={"site_key": metadata.site_key, "brand": metadata.brand},
        metadata=metadata,
    )
    return save_artifact(artifact)


def load_artifact(artifact_id: str) -> Optional[Artifact]:
    """Return the stored artifact, or *None* when it does not exist or is unreadable."""
    if not _is_safe_id(artifact_id):
        return None
    path = _artifact_path(artifact_id)
    if not path.exists():
        return None
    try:
        return Artifact.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as exc:
        logger.error("Failed to read artifact %s: %s", artifact_id, exc)
        return None


def append_publish_log(entry: Dict[str, Any]) -> None:
    """Append one JSON line to the publish log; failures are logged, not raised."""
    path = _publish_log_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(entry, ensure_ascii=False, default=str) + "\n")
    except OSError as exc:
        logger.error("Failed to write publish log %s: %s", path, exc)
