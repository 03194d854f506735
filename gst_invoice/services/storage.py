# gst_invoice/services/storage.py
from pathlib import Path
import logging

logger = logging.getLogger(__name__)


def save_pdf(storage_dir: Path, filename: str, pdf_bytes: bytes) -> Path:
    storage_dir.mkdir(parents=True, exist_ok=True)
    filepath = storage_dir / filename
    with open(filepath, "wb") as f:
        f.write(pdf_bytes)
    logger.info(f"Facture sauvegardée : {filepath}")
    return filepath
