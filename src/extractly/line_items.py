"""Line items of invoices and financial documents."""

from __future__ import annotations

from typing import Any, Sequence

from pydantic import BaseModel

from extractly.fields import float_to_string
from extractly.geometry import Point, polygon_from_prediction

LINE_ITEM_SEPARATOR = " ".join("=" * width for width in (22, 8, 9, 10, 18, 36))
LINE_ITEM_HEADER = "Code                   QTY      Price     Amount     Tax (Rate)         Description"


class InvoiceLineItem(BaseModel):
    """One row of the line items table, copied as-is from the prediction."""

    product_code: str | None = None
    description: str | None = None
    quantity: float | None = None
    unit_price: float | None = None
    total_amount: float | None = None
    tax_rate: float | None = None
    tax_amount: float | None = None
    confidence: float | None = None
    polygon: list[Point] = []
    page_id: int | None = None

    @classmethod
    def from_prediction(cls, prediction: dict[str, Any], page_id: int | None = None) -> "InvoiceLineItem":
        return cls(
            product_code=prediction.get("product_code"),
            description=prediction.get("description"),
            quantity=prediction.get("quantity"),
            unit_price=prediction.get("unit_price"),
            total_amount=prediction.get("total_amount"),
            tax_rate=prediction.get("tax_rate"),
            tax_amount=prediction.get("tax_amount"),
            confidence=prediction.get("confidence"),
            polygon=polygon_from_prediction(prediction.get("polygon")),
            page_id=page_id if page_id is not None else prediction.get("page_id"),
        )

    def __str__(self) -> str:
        tax = float_to_string(self.tax_amount)
        if self.tax_rate is not None:
            tax += f" ({float_to_string(self.tax_rate)}%)"

        description = self.description or ""
        if len(description) > 35:
            description = description[:33] + "..."

        return " ".join(
            [
                f"{self.product_code or '':<22}",
                f"{float_to_string(self.quantity):<8}",
                f"{float_to_string(self.unit_price):<9}",
                f"{float_to_string(self.total_amount):<10}",
                f"{tax:<18}",
                description,
            ]
        ).rstrip()


def line_items_table(line_items: Sequence[InvoiceLineItem]) -> str:
    """Render line items as an rST simple table."""
    if not line_items:
        return ""
    rows = "\n".join(str(item) for item in line_items)
    return "\n".join(
        [LINE_ITEM_SEPARATOR, LINE_ITEM_HEADER, LINE_ITEM_SEPARATOR, rows, LINE_ITEM_SEPARATOR]
    )
