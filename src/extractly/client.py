"""Extractly API client for invoice, receipt and check parsing."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, BinaryIO

import httpx

from extractly.errors import APIError, ValidationError
from extractly.pdf import PageOptions, process_pdf
from extractly.predictions import Prediction
from extractly.types import Document
from extractly.utils import MIME_TYPES, extension_for_mime_type, get_file_extension, guess_mime_type

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
BASE_URL = "https://api.extractly.io"
API_KEY_ENV_NAME = "EXTRACTLY_API_KEY"
BASE_URL_ENV_NAME = "EXTRACTLY_BASE_URL"


class Extractly:
    """
    Extractly API client.

    Sends documents to the prediction API and returns typed predictions.
    For financial documents, missing totals are reconstructed from the
    fields that were found.

    Args:
        api_key: Your Extractly API key. If not provided, reads from
                 EXTRACTLY_API_KEY environment variable.
        timeout: Request timeout in seconds (default: 60)
        base_url: API root URL. If not provided, reads from
                  EXTRACTLY_BASE_URL, then defaults to the public API.

    Example:
        ```python
        from extractly import Extractly, FinancialDocumentV1

        client = Extractly()
        document = client.parse(file="invoice.pdf", document_class=FinancialDocumentV1)

        total = document.prediction.total_amount
        print(total.value, total.confidence, total.reconstructed)
        ```
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        timeout: float = 60.0,
        base_url: str | None = None,
    ):
        self.api_key = api_key or os.environ.get(API_KEY_ENV_NAME)
        if not self.api_key:
            raise ValidationError(
                f"API key is required. Pass it directly or set {API_KEY_ENV_NAME} environment variable."
            )

        self.timeout = timeout
        self.base_url = (base_url or os.environ.get(BASE_URL_ENV_NAME) or BASE_URL).rstrip("/")

        self._client = httpx.Client(
            timeout=timeout,
            headers={"Authorization": f"Token {self.api_key}"},
        )
        self._async_client: httpx.AsyncClient | None = None

    def _get_async_client(self) -> httpx.AsyncClient:
        """Lazily create async client."""
        if self._async_client is None:
            self._async_client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"Authorization": f"Token {self.api_key}"},
            )
        return self._async_client

    def _endpoint_url(self, document_class: type[Prediction]) -> str:
        return (
            f"{self.base_url}/v1/products/{document_class.endpoint_owner}"
            f"/{document_class.endpoint_name}/v{document_class.endpoint_version}/predict"
        )

    def _prepare_file(
        self,
        file: str | Path | bytes | BinaryIO,
        filename: str | None = None,
        page_options: PageOptions | None = None,
    ) -> tuple[str, bytes, str]:
        """
        Prepare file for upload.

        Returns:
            Tuple of (filename, file_bytes, content_type)
        """
        if isinstance(file, (str, Path)):
            path = Path(file)
            if not path.exists():
                raise ValidationError(f"File not found: {path}")

            suffix = path.suffix.lower()
            if suffix not in MIME_TYPES:
                raise ValidationError(f"Unsupported file type: {suffix}.")

            content_type = MIME_TYPES[suffix]
            file_bytes = path.read_bytes()
            filename = filename or path.name

        else:
            if isinstance(file, bytes):
                file_bytes = file
            else:
                # File-like object
                file_bytes = file.read()
                filename = filename or getattr(file, "name", None)

            if filename:
                filename = Path(filename).name
            content_type = MIME_TYPES.get(get_file_extension(filename or "")) or guess_mime_type(file_bytes)

        if len(file_bytes) == 0:
            raise ValidationError("File is empty.")

        if content_type is None:
            raise ValidationError("Could not determine the file type. Pass a filename with a supported extension.")

        if len(file_bytes) > MAX_FILE_SIZE:
            raise ValidationError(
                f"File size ({len(file_bytes)} bytes) exceeds maximum allowed size ({MAX_FILE_SIZE} bytes)."
            )

        if not filename:
            filename = f"document{extension_for_mime_type(content_type)}"
        elif get_file_extension(filename) not in MIME_TYPES:
            filename = f"{Path(filename).stem}{extension_for_mime_type(content_type)}"

        if page_options is not None and content_type == "application/pdf":
            processed = process_pdf(file_bytes, page_options)
            if processed is not None:
                file_bytes = processed

        return filename, file_bytes, content_type

    def _request_kwargs(
        self,
        document_class: type[Prediction],
        prepared: tuple[str, bytes, str],
        include_words: bool,
        cropper: bool,
    ) -> dict[str, Any]:
        data = {}
        if include_words:
            data["include_mvision"] = "true"
        params = {"cropper": "true"} if cropper else None

        url = self._endpoint_url(document_class)
        logger.debug("Sending %s (%d bytes) to %s", prepared[0], len(prepared[1]), url)
        return {"url": url, "files": {"document": prepared}, "data": data, "params": params}

    def _parse_response(
        self,
        response: httpx.Response,
        document_class: type[Prediction],
    ) -> Document:
        """Parse API response into a Document."""
        if not 200 <= response.status_code < 300:
            try:
                error_detail = response.json()
            except ValueError:
                error_detail = response.text

            error: dict[str, Any] = {}
            if isinstance(error_detail, dict):
                error = (error_detail.get("api_request") or {}).get("error") or {}

            message = f"API request failed with status {response.status_code}"
            if error.get("message"):
                message = f"{message}: {error['message']}"

            logger.warning(message)
            raise APIError(
                message=message,
                status_code=response.status_code,
                response=error_detail,
                code=error.get("code"),
                details=error.get("details"),
            )

        data = response.json()
        return Document.from_response(document_class, data["document"])

    def parse(
        self,
        *,
        file: str | Path | bytes | BinaryIO,
        document_class: type[Prediction],
        filename: str | None = None,
        include_words: bool = False,
        cropper: bool = False,
        page_options: PageOptions | None = None,
    ) -> Document:
        """
        Parse a document (synchronous).

        Args:
            file: Document to parse. Can be:
                  - str or Path: Path to the file
                  - bytes: Raw file contents
                  - BinaryIO: File-like object
            document_class: Prediction class of the product to call,
                    e.g. FinancialDocumentV1.
            filename: Name sent with the upload. Its extension is used to
                    determine the file type of bytes and file objects.
            include_words: Also return every word found in the document.
            cropper: Detect and crop multiple documents in one image.
            page_options: Pages of a PDF to keep or remove before upload.

        Returns:
            Document with the document-level prediction and one prediction
            per page.

        Raises:
            ValidationError: If file is invalid (not found, wrong type, too large)
            ConfigurationError: If page options hold an unknown operation
            APIError: If the API returns an HTTP error (4xx/5xx)

        Example:
            ```python
            # Only send the first and last pages of long documents
            options = PageOptions(page_indexes=[0, -1], on_min_pages=3)
            document = client.parse(
                file="invoice.pdf",
                document_class=FinancialDocumentV1,
                page_options=options,
            )
            print(document)
            ```
        """
        prepared = self._prepare_file(file, filename, page_options)
        response = self._client.post(**self._request_kwargs(document_class, prepared, include_words, cropper))
        return self._parse_response(response, document_class)

    async def parse_async(
        self,
        *,
        file: str | Path | bytes | BinaryIO,
        document_class: type[Prediction],
        filename: str | None = None,
        include_words: bool = False,
        cropper: bool = False,
        page_options: PageOptions | None = None,
    ) -> Document:
        """
        Parse a document (asynchronous).

        Same as parse() but async. See parse() for full documentation.
        """
        prepared = self._prepare_file(file, filename, page_options)
        client = self._get_async_client()
        response = await client.post(**self._request_kwargs(document_class, prepared, include_words, cropper))
        return self._parse_response(response, document_class)

    def close(self) -> None:
        """
        Close the synchronous HTTP client.

        The async client used by parse_async() can only be closed with
        `await client.aclose()`.
        """
        self._client.close()

    async def aclose(self) -> None:
        """Close the HTTP client connections (async)."""
        self._client.close()
        if self._async_client:
            await self._async_client.aclose()

    def __enter__(self) -> "Extractly":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    async def __aenter__(self) -> "Extractly":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
