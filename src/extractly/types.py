"""Type definitions for the Extractly SDK."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from extractly.predictions import Prediction


class Page(BaseModel):
    """Prediction for a single page of the document."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: int = Field(description="Zero-based index of the page")
    orientation: int | None = Field(
        default=None,
        description="Rotation applied to the page, in degrees",
    )
    prediction: Prediction


class Document(BaseModel):
    """
    A parsed document.

    `prediction` covers the whole document and has its missing totals
    reconstructed. Each entry of `pages` holds the prediction for one page.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str | None = None
    filename: str | None = None
    n_pages: int = 0
    product_name: str | None = None
    product_version: str | None = None
    prediction: Prediction
    pages: list[Page] = Field(default_factory=list)

    @classmethod
    def from_response(cls, prediction_class: type[Prediction], document: dict[str, Any]) -> "Document":
        """Build a document from the `document` object of an API response."""
        inference = document.get("inference") or {}
        product = inference.get("product") or {}
        pages = [
            Page(
                id=page["id"],
                orientation=(page.get("orientation") or {}).get("value"),
                prediction=prediction_class(page.get("prediction") or {}, page["id"]),
            )
            for page in inference.get("pages") or []
        ]
        return cls(
            id=document.get("id"),
            filename=document.get("name"),
            n_pages=document.get("n_pages") or len(pages),
            product_name=product.get("name"),
            product_version=product.get("version"),
            prediction=prediction_class(inference.get("prediction") or {}, None),
            pages=pages,
        )

    def __str__(self) -> str:
        header = "\n".join(
            [
                "########",
                "Document",
                "########",
                f":ID: {self.id or ''}".rstrip(),
                f":Filename: {self.filename or ''}".rstrip(),
                f":Product: {self.product_name or ''} v{self.product_version or ''}",
                f":Pages: {self.n_pages}",
            ]
        )
        return f"{header}\n\nPrediction\n==========\n{self.prediction}\n"
