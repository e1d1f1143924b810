"""Typed fields built from the API's JSON prediction."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Iterable, TypeVar

from pydantic import BaseModel, ConfigDict

from extractly.geometry import (
    Point,
    Quadrilateral,
    get_bounding_box,
    polygon_from_prediction,
    quadrilateral_from_prediction,
)

F = TypeVar("F", bound="Field")


class Field(BaseModel):
    """
    A single extracted value with its confidence score and location.

    Fields are read-only once built. The only exception is `confidence`,
    which reconstruction may overwrite.
    """

    value: str | float | int | bool | None = None
    confidence: float | None = None
    polygon: list[Point] = []
    page_id: int | None = None
    reconstructed: bool = False

    @classmethod
    def from_prediction(
        cls: type[F],
        prediction: dict[str, Any],
        page_id: int | None = None,
        *,
        reconstructed: bool = False,
    ) -> F:
        """
        Build a field from one record of the API prediction.

        Args:
            prediction: The JSON record, with at least a `value` key.
            page_id: Page the field belongs to. When None, the record's own
                     `page_id` is used (document-level fields carry it).
            reconstructed: Whether the value was computed from other fields.
        """
        return cls(
            value=prediction.get("value"),
            confidence=prediction.get("confidence"),
            polygon=polygon_from_prediction(prediction.get("polygon")),
            page_id=page_id if page_id is not None else prediction.get("page_id"),
            reconstructed=reconstructed,
            **cls._extra_attributes(prediction),
        )

    @classmethod
    def _extra_attributes(cls, prediction: dict[str, Any]) -> dict[str, Any]:
        """Subclass hook for attributes beyond the common ones."""
        return {}

    @property
    def bounding_box(self) -> Quadrilateral | None:
        """Axis-aligned box around `polygon`, None when there is no polygon."""
        if not self.polygon:
            return None
        return get_bounding_box(self.polygon)

    def __setattr__(self, name: str, value: Any) -> None:
        if name != "confidence":
            raise AttributeError(f"{type(self).__name__}.{name} is read-only")
        super().__setattr__(name, value)

    def __str__(self) -> str:
        return "" if self.value is None else str(self.value)


def array_confidence(fields: Iterable[Field]) -> float:
    """
    Multiply the confidences of all fields.

    Returns 0.0 as soon as one field has no value (or no confidence): a
    partial product is meaningless. An empty input gives 1.0.
    """
    product = 1.0
    for field in fields:
        if field.value is None or field.confidence is None:
            return 0.0
        product *= field.confidence
    return float(product)


def array_sum(fields: Iterable[Field]) -> float:
    """
    Add the values of all fields.

    Returns 0.0 as soon as one field has no value. An empty input gives 0.0.
    """
    total = 0.0
    for field in fields:
        if field.value is None:
            return 0.0
        total += field.value
    return float(total)


def float_to_string(value: float | None, min_precision: int = 2) -> str:
    """
    Format a float without losing the decimals the API sent.

    Uses as many decimals as the value already has, and at least
    `min_precision`.
    """
    if value is None:
        return ""
    exponent = Decimal(repr(float(value))).as_tuple().exponent
    precision = max(-exponent, min_precision)
    return f"{value:.{precision}f}"


class TextField(Field):
    """A plain string value. Numbers sent by the API are kept as text."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    value: str | None = None


class AmountField(Field):
    """A monetary amount."""

    value: float | None = None

    def __str__(self) -> str:
        return float_to_string(self.value)


class DateField(Field):
    """An ISO formatted date (YYYY-MM-DD)."""

    value: str | None = None

    @property
    def date_object(self) -> date | None:
        if not self.value:
            return None
        try:
            return date.fromisoformat(self.value)
        except ValueError:
            return None


class TaxField(AmountField):
    """A tax line: amount, rate and tax code."""

    rate: float | None = None
    code: str | None = None
    basis: float | None = None

    @classmethod
    def _extra_attributes(cls, prediction: dict[str, Any]) -> dict[str, Any]:
        return {
            "rate": prediction.get("rate"),
            "code": prediction.get("code"),
            "basis": prediction.get("basis"),
        }

    def __str__(self) -> str:
        parts = [float_to_string(self.value)]
        if self.rate is not None:
            parts.append(f"{float_to_string(self.rate)}%")
        if self.code:
            parts.append(self.code)
        return " ".join(part for part in parts if part)


class CompanyRegistration(TextField):
    """Company registration number and its type (VAT, SIRET, EIN...)."""

    type: str | None = None

    @classmethod
    def _extra_attributes(cls, prediction: dict[str, Any]) -> dict[str, Any]:
        return {"type": prediction.get("type")}


class PaymentDetails(Field):
    """Bank account information."""

    account_number: str | None = None
    iban: str | None = None
    routing_number: str | None = None
    swift: str | None = None

    @classmethod
    def _extra_attributes(cls, prediction: dict[str, Any]) -> dict[str, Any]:
        return {
            "account_number": prediction.get("account_number"),
            "iban": prediction.get("iban"),
            "routing_number": prediction.get("routing_number"),
            "swift": prediction.get("swift"),
        }

    def __str__(self) -> str:
        parts = [self.account_number, self.iban, self.routing_number, self.swift]
        return "".join(f"{part}; " for part in parts if part).strip()


class PositionField(Field):
    """Location of an element on the page, without a value."""

    quadrangle: Quadrilateral | None = None
    rectangle: Quadrilateral | None = None

    @classmethod
    def _extra_attributes(cls, prediction: dict[str, Any]) -> dict[str, Any]:
        return {
            "quadrangle": quadrilateral_from_prediction(prediction.get("quadrangle")),
            "rectangle": quadrilateral_from_prediction(prediction.get("rectangle")),
        }

    def __str__(self) -> str:
        if not self.polygon:
            return ""
        return f"Polygon with {len(self.polygon)} points."


class Locale(TextField):
    """Language, country and currency of the document."""

    language: str | None = None
    country: str | None = None
    currency: str | None = None

    @classmethod
    def _extra_attributes(cls, prediction: dict[str, Any]) -> dict[str, Any]:
        return {
            "language": prediction.get("language"),
            "country": prediction.get("country"),
            "currency": prediction.get("currency"),
        }

    def __str__(self) -> str:
        parts = [self.value, self.language, self.country, self.currency]
        return "".join(f"{part}; " for part in parts if part).strip()
