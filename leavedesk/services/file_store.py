import logging
import time
from pathlib import Path

from leavedesk.core.exceptions import PersistenceError
from leavedesk.schemas.leave import Attachment

logger = logging.getLogger(__name__)

DOCUMENT_PREFIX = "leave-documents"


class LocalFileStore:
    """
    File Store writing supporting documents under `root`.
    Files are named <owner>-<epoch millis>.<ext> and served from `base_url`.
    """

    def __init__(self, root: str, base_url: str):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def upload(self, file: Attachment, owner_id: str) -> str:
        extension = Path(file.filename).suffix.lstrip(".").lower() or "bin"
        name = f"{owner_id}-{int(time.time() * 1000)}.{extension}"
        target = self.root / DOCUMENT_PREFIX / name
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(file.content)
        except OSError as e:
            logger.error(f"Upload failed for {owner_id}: {e}")
            raise PersistenceError("Failed to upload supporting document") from e
        logger.info(f"Stored supporting document {name} ({len(file.content)} bytes)")
        return f"{self.base_url}/{DOCUMENT_PREFIX}/{name}"

    def delete(self, url: str) -> None:
        """Removes a document previously returned by `upload`. Unknown URLs are ignored."""
        prefix = f"{self.base_url}/"
        if not url.startswith(prefix):
            logger.warning(f"Not a stored document URL: {url}")
            return
        target = self.root / url[len(prefix):]
        try:
            target.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove orphaned document {url}: {e}")
            return
        logger.info(f"Removed supporting document {target.name}")
