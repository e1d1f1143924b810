"""Repairs for known inconsistencies in the API's JSON predictions."""

from __future__ import annotations

import copy
import logging
from typing import Any

logger = logging.getLogger(__name__)

# Keys the API sends in singular form even though they hold lists.
REGISTRATION_KEYS = {
    "customer_company_registrations": "customer_company_registration",
    "supplier_company_registrations": "supplier_company_registration",
}

# Scalar fields sometimes sent as {"value": [], "confidence": [], "polygon": []}.
EMPTY_ARRAY_SCALARS = ("tip", "time")


def empty_field() -> dict[str, Any]:
    """A field record that explicitly holds no value."""
    return {"value": None, "confidence": None, "polygon": []}


def fix_api_inconsistencies(prediction: dict[str, Any]) -> dict[str, Any]:
    """
    Return a corrected copy of a financial document prediction.

    The input is left untouched.
    """
    fixed = copy.deepcopy(prediction)

    for plural, singular in REGISTRATION_KEYS.items():
        registrations = fixed.pop(singular, None)
        if registrations is None:
            registrations = fixed.get(plural)
        fixed[plural] = registrations or []

    if fixed.get("supplier_payment_details") is None:
        fixed["supplier_payment_details"] = []

    for key in EMPTY_ARRAY_SCALARS:
        field = fixed.get(key)
        if isinstance(field, dict) and isinstance(field.get("value"), list):
            logger.debug("Replacing empty array placeholder in %r", key)
            fixed[key] = empty_field()

    return fixed
