import json
import logging
import os

from address_mapper import config
from address_mapper.models.address import StoreDocument

# Get logger
logger = logging.getLogger(__name__)


class JsonStore:
    def __init__(self, path: str):
        self.path = path

    def ensure_dir(self) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as e:
            logger.error(f"Error creating data dir {directory}: {e}")
            raise

    def save(self, document: StoreDocument) -> None:
        self.ensure_dir()
        with open(self.path, "w", encoding="utf-8") as fh:
            json.dump(document.to_record(), fh, ensure_ascii=False, indent=2)
        logger.info(f"Saved {len(document.items)} items to {self.path}")

    def load(self) -> StoreDocument:
        """Read the stored document; a missing file is an empty list."""
        if not os.path.exists(self.path):
            logger.info(f"No saved data at {self.path}, starting empty")
            return StoreDocument()
        with open(self.path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
        document = StoreDocument.model_validate(data)
        logger.info(f"Loaded {len(document.items)} items from {self.path}")
        return document


def get_store() -> JsonStore:
    return JsonStore(config.DATA_FILE)
