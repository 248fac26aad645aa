from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from PIL import Image as ImageModule

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg"}
OCR_DPI = 220


class UnsupportedDocumentError(ValueError):
    pass


def _ocr_image(image: ImageModule.Image) -> str:
    import pytesseract

    return pytesseract.image_to_string(image) or ""


def _read_pdf(path: Path) -> str:
    import fitz
    from PIL import Image

    pages: list[str] = []
    with fitz.open(path) as pdf_doc:
        for index, pdf_page in enumerate(pdf_doc, start=1):
            text = pdf_page.get_text().strip()
            if not text:
                logger.debug("Page %d of %s has no text layer, running OCR", index, path.name)
                pix = pdf_page.get_pixmap(dpi=OCR_DPI)
                text = _ocr_image(Image.open(io.BytesIO(pix.tobytes("png"))).convert("RGB"))
            pages.append(text)
    return "\n".join(p for p in pages if p)


def read_document_text(file_path: str) -> str:
    """Return the plain text of an uploaded intake document."""
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix in IMAGE_SUFFIXES:
        from PIL import Image

        with Image.open(path) as img:
            return _ocr_image(img.convert("RGB"))

    if suffix == ".pdf":
        return _read_pdf(path)

    if suffix == ".txt":
        return path.read_text(encoding="utf-8", errors="replace")

    raise UnsupportedDocumentError(f"Unsupported file extension for text extraction: {suffix}")
