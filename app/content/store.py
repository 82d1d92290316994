import json
import logging
import os
from typing import Any, Dict, Optional

from app.content.utils import now_str
from app.core.config import settings
from app.core.errors import PersistenceError
from app.schemas import ContentDocument

logger = logging.getLogger(__name__)

CONTENT_FILE = settings.CONTENT_FILE


def _path(path: Optional[str]) -> str:
    return path or CONTENT_FILE


def empty_document() -> Dict[str, Any]:
    """Skeleton used when no content file exists yet"""
    return ContentDocument(last_updated=now_str()).model_dump(exclude={"menu"})


def load_document(path: Optional[str] = None) -> Dict[str, Any]:
    """Read the content document from disk. Always a fresh read."""
    path = _path(path)
    if not os.path.exists(path):
        return empty_document()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        logger.error("Failed to read content file %s: %s", path, e)
        raise PersistenceError("Failed to read content. Check file permissions.") from e
    except ValueError:
        logger.warning("Content file %s is not valid JSON, starting from an empty document", path)
        return {}
    if not isinstance(data, dict):
        logger.warning("Content file %s does not hold a JSON object, starting from an empty document", path)
        return {}
    return data


def encode_document(document: Dict[str, Any]) -> str:
    # NaN and Infinity are not JSON
    return json.dumps(document, indent=4, ensure_ascii=False, allow_nan=False)


def save_document(document: Dict[str, Any], path: Optional[str] = None) -> str:
    """
    Stamp `last_updated` and atomically replace the content file.

    The JSON is written to `<path>.tmp` and renamed over the target, so
    readers see either the old or the new document. On failure the temp
    file is removed and PersistenceError is raised. Returns the timestamp.
    """
    path = _path(path)
    document["last_updated"] = now_str()

    try:
        payload = encode_document(document).encode("utf-8")
    except (TypeError, ValueError) as e:
        logger.error("Could not encode content document: %s", e)
        raise PersistenceError("Failed to encode content to JSON") from e

    tmp_path = path + ".tmp"
    try:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(tmp_path, "wb") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except OSError as e:
        logger.error("Failed to write content file %s: %s", path, e)
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        except OSError as cleanup_error:
            logger.warning("Could not remove temp file %s: %s", tmp_path, cleanup_error)
        raise PersistenceError("Failed to save content. Check file permissions.") from e

    try:
        os.chmod(path, settings.CONTENT_FILE_MODE)
    except OSError as e:
        logger.warning("Could not restrict permissions on %s: %s", path, e)

    return document["last_updated"]
