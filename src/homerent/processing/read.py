import json
from pathlib import Path
from typing import List, Optional

from ..config.settings import SEED_CATALOG_FILE
from ..utils.logging import get_logger
from .clean import clean_record

logger = get_logger(__name__)


def load_catalog(path: Optional[Path] = None) -> List[dict]:
    """Read a JSON catalog file: either a list of appliances or ``{"Appliance": [...]}``.

    A missing file is an empty catalog.
    """
    path = Path(path or SEED_CATALOG_FILE)
    if not path.exists():
        logger.warning("Catalog file not found: %s", path)
        return []
    with path.open(encoding="utf-8-sig") as fh:
        data = json.load(fh)
    if isinstance(data, dict):
        data = data.get("Appliance") or []
    records = [clean_record(item) for item in data if isinstance(item, dict)]
    logger.info("Loaded %d appliances from %s", len(records), path.name)
    return records
