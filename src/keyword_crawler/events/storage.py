import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.config import settings
from ..core.logging import logger


class ResultStorage:
    """
    Durable sink for emitted crawl payloads.

    Payloads are stored as-is; nothing here depends on their schema.
    """

    def __init__(self, base_dir: Optional[str] = None):
        self.base_dir = Path(base_dir or settings.STORAGE_DIR)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def save(self, payload: Dict[str, Any]) -> str:
        """
        Write one payload to its own JSON file.

        Args:
            payload: Serialized crawl result.

        Returns:
            Path to the saved file.
        """
        record_id = uuid.uuid4()
        target_path = self.base_dir / f"{record_id}.json"
        record = {
            "id": str(record_id),
            "created_at": datetime.now(timezone.utc).isoformat(),
            "payload": payload,
        }

        # Write then rename so readers never see a partial file
        tmp_path = target_path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(record, f, ensure_ascii=False)
        tmp_path.replace(target_path)

        logger.info(f"Stored crawl result {record_id} at {target_path}")
        return str(target_path)
