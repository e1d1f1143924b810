"""Select which pages of a PDF are sent to the API."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable

import fitz  # PyMuPDF
from pydantic import BaseModel, Field, field_validator

from extractly.errors import ConfigurationError, ValidationError

logger = logging.getLogger(__name__)


class PageOperation(str, Enum):
    """What to do with the requested pages."""

    KEEP_ONLY = "KEEP_ONLY"
    REMOVE = "REMOVE"


def _coerce_operation(operation: Any) -> PageOperation:
    try:
        return PageOperation(operation)
    except ValueError:
        raise ConfigurationError(
            f"operation must be one of KEEP_ONLY or REMOVE, got {operation!r}"
        ) from None


class PageOptions(BaseModel):
    """
    Page selection applied to a PDF before it is uploaded.

    Example:
        ```python
        # First and last page of documents with at least 3 pages
        options = PageOptions(page_indexes=[0, -1], on_min_pages=3)
        ```
    """

    page_indexes: list[int] = Field(
        default_factory=lambda: [0],
        description="Zero-based page indexes; negative values count from the end",
    )
    operation: PageOperation = Field(
        default=PageOperation.KEEP_ONLY,
        description="KEEP_ONLY the listed pages, or REMOVE them",
    )
    on_min_pages: int = Field(
        default=0,
        description="Only apply the operation to documents with at least this many pages",
    )

    @field_validator("operation", mode="before")
    @classmethod
    def _check_operation(cls, value: Any) -> PageOperation:
        return _coerce_operation(value)


def normalize_index(index: int, total_pages: int) -> int | None:
    """
    Map a requested index to a zero-based page index.

    Negative indexes are mapped to `total_pages - (index + 2)`, so -1 is the
    last page and any lower value lands past the end. Indexes outside the
    document give None.
    """
    if index < 0:
        index = total_pages - (index + 2)
    if 0 <= index < total_pages:
        return index
    return None


def _normalized_pages(page_indexes: Iterable[int], total_pages: int) -> set[int]:
    pages = set()
    for index in page_indexes:
        page = normalize_index(index, total_pages)
        if page is not None:
            pages.add(page)
    return pages


def pages_to_remove(
    page_indexes: Iterable[int],
    operation: PageOperation | str,
    total_pages: int,
    on_min_pages: int = 0,
) -> set[int] | None:
    """
    Compute the zero-based indexes of the pages to delete.

    Args:
        page_indexes: Requested pages, in any order and of any sign.
        operation: KEEP_ONLY or REMOVE.
        total_pages: Number of pages in the document.
        on_min_pages: Documents with fewer pages are left alone.

    Returns:
        The pages to delete, or None when the document is too short for the
        operation to apply.

    Raises:
        ConfigurationError: If the operation is not KEEP_ONLY or REMOVE.
    """
    operation = _coerce_operation(operation)
    if total_pages < on_min_pages:
        return None

    all_pages = set(range(total_pages))
    selected = _normalized_pages(page_indexes, total_pages)
    if operation is PageOperation.KEEP_ONLY:
        return all_pages - selected
    return selected


def process_pdf(pdf_bytes: bytes, options: PageOptions) -> bytes | None:
    """
    Apply page options to a PDF.

    Returns:
        The re-serialized PDF, or None when the document was left unchanged
        (too few pages, nothing to delete, or every page selected for
        deletion).
    """
    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except fitz.FileDataError as exc:
        raise ValidationError("Could not read the PDF file.") from exc

    with doc:
        total_pages = doc.page_count
        to_remove = pages_to_remove(
            options.page_indexes,
            options.operation,
            total_pages,
            options.on_min_pages,
        )
        if to_remove is None:
            logger.debug(
                "PDF has %d pages, fewer than %d: no page operation",
                total_pages,
                options.on_min_pages,
            )
            return None
        if not to_remove:
            return None
        if len(to_remove) == total_pages:
            logger.warning("Page options would remove all %d pages, sending the document as-is", total_pages)
            return None

        logger.debug("Removing pages %s of %d", sorted(to_remove), total_pages)
        doc.delete_pages(sorted(to_remove))
        return doc.tobytes(garbage=3, deflate=True)
