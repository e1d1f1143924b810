"""Fill in missing document totals from the fields that were extracted."""

from __future__ import annotations

import logging
from typing import NamedTuple, Sequence

from extractly.fields import AmountField, Field, array_confidence, array_sum

logger = logging.getLogger(__name__)


class Totals(NamedTuple):
    """The three totals of a financial document."""

    total_amount: AmountField
    total_net: AmountField
    total_tax: AmountField


def reconstruct_totals(
    taxes: Sequence[Field],
    total_amount: AmountField,
    total_net: AmountField,
    total_tax: AmountField,
    page_id: int | None = None,
) -> Totals:
    """
    Compute whichever totals can be derived from the others.

    Steps run in a fixed order, each one seeing the result of the previous
    ones. A total that already has a value is never replaced, except
    `total_tax` when the tax lines add up to a positive amount. Only the
    tax-lines step runs for a single page (`page_id` set): page-level totals
    do not add up to anything meaningful.

    Args:
        taxes: Tax lines of the document.
        total_amount: Total including taxes.
        total_net: Total excluding taxes.
        total_tax: Sum of all taxes.
        page_id: None for the whole document, the page index otherwise.

    Returns:
        The three totals, each either the original field or a new one with
        `reconstructed=True`.
    """
    total_tax = _total_tax_from_taxes(taxes, total_tax, page_id)
    if page_id is None:
        total_net = _total_net_from_amount_and_taxes(taxes, total_amount, total_net)
        total_amount = _total_amount_from_net_and_taxes(taxes, total_amount, total_net)
        total_tax = _total_tax_from_totals(taxes, total_amount, total_net, total_tax)
    return Totals(total_amount=total_amount, total_net=total_net, total_tax=total_tax)


def _reconstructed(value: float, confidence: float, page_id: int | None = None) -> AmountField:
    return AmountField(
        value=value,
        confidence=confidence,
        page_id=page_id,
        reconstructed=True,
    )


def _has_missing_value(taxes: Sequence[Field]) -> bool:
    """A tax line without value makes any total built on the taxes unknown."""
    return any(tax.value is None for tax in taxes)


def _total_tax_from_taxes(
    taxes: Sequence[Field],
    total_tax: AmountField,
    page_id: int | None,
) -> AmountField:
    if not taxes:
        return total_tax
    value = array_sum(taxes)
    if value <= 0:
        return total_tax
    logger.debug("Reconstructed total_tax=%s from %d tax lines", value, len(taxes))
    return _reconstructed(value, array_confidence(taxes), page_id)


def _total_net_from_amount_and_taxes(
    taxes: Sequence[Field],
    total_amount: AmountField,
    total_net: AmountField,
) -> AmountField:
    if total_amount.value is None or not taxes or total_net.value is not None:
        return total_net
    if _has_missing_value(taxes):
        return total_net
    value = total_amount.value - array_sum(taxes)
    confidence = array_confidence(taxes) * (total_amount.confidence or 0.0)
    logger.debug("Reconstructed total_net=%s", value)
    return _reconstructed(value, confidence)


def _total_amount_from_net_and_taxes(
    taxes: Sequence[Field],
    total_amount: AmountField,
    total_net: AmountField,
) -> AmountField:
    if total_net.value is None or not taxes or total_amount.value is not None:
        return total_amount
    if _has_missing_value(taxes):
        return total_amount
    value = array_sum(taxes) + total_net.value
    confidence = array_confidence(taxes) * (total_net.confidence or 0.0)
    logger.debug("Reconstructed total_amount=%s", value)
    return _reconstructed(value, confidence)


def _total_tax_from_totals(
    taxes: Sequence[Field],
    total_amount: AmountField,
    total_net: AmountField,
    total_tax: AmountField,
) -> AmountField:
    if total_tax.value is not None or total_amount.value is None or total_net.value is None:
        return total_tax
    value = total_amount.value - total_net.value
    if value < 0:
        return total_tax
    # Confidence comes from the tax lines, not from the two totals.
    logger.debug("Reconstructed total_tax=%s from totals", value)
    return _reconstructed(value, array_confidence(taxes))
