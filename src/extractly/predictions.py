"""Typed predictions for each document type supported by the API."""

from __future__ import annotations

from typing import Any, Iterable

from extractly.fields import (
    AmountField,
    CompanyRegistration,
    DateField,
    Locale,
    PaymentDetails,
    PositionField,
    TaxField,
    TextField,
)
from extractly.line_items import InvoiceLineItem, line_items_table
from extractly.normalize import empty_field, fix_api_inconsistencies
from extractly.reconstruction import reconstruct_totals


def _field_list(
    field_class: type,
    items: Iterable[dict[str, Any]] | None,
    page_id: int | None,
) -> list:
    return [field_class.from_prediction(item, page_id) for item in items or []]


def _render(lines: Iterable[tuple[str, Any]]) -> str:
    return "\n".join(f":{label}: {value}".rstrip() for label, value in lines)


class Prediction:
    """
    Base class for document predictions.

    Subclasses set the endpoint they are served from, and build their fields
    from the JSON prediction. `page_id` is None for the prediction covering
    the whole document.
    """

    endpoint_owner = "extractly"
    endpoint_name: str
    endpoint_version: str

    def __init__(self, prediction: dict[str, Any], page_id: int | None = None):
        self.page_id = page_id


class FinancialDocumentV1(Prediction):
    """Invoice or receipt, with missing totals reconstructed."""

    endpoint_name = "financial_document"
    endpoint_version = "1"

    def __init__(self, prediction: dict[str, Any], page_id: int | None = None):
        super().__init__(prediction, page_id)
        prediction = fix_api_inconsistencies(prediction)

        self.locale = Locale.from_prediction(prediction.get("locale") or {}, page_id)
        self.document_type = TextField.from_prediction(prediction.get("document_type") or {}, page_id)
        self.category = TextField.from_prediction(prediction.get("category") or {}, page_id)
        self.subcategory = TextField.from_prediction(prediction.get("subcategory") or {}, page_id)
        self.date = DateField.from_prediction(prediction.get("date") or {}, page_id)
        self.due_date = DateField.from_prediction(prediction.get("due_date") or {}, page_id)
        self.time = TextField.from_prediction(prediction.get("time") or {}, page_id)
        self.invoice_number = TextField.from_prediction(prediction.get("invoice_number") or {}, page_id)
        self.reference_numbers = _field_list(TextField, prediction.get("reference_numbers"), page_id)

        self.supplier_name = TextField.from_prediction(prediction.get("supplier_name") or {}, page_id)
        self.supplier_address = TextField.from_prediction(prediction.get("supplier_address") or {}, page_id)
        self.supplier_company_registrations = _field_list(
            CompanyRegistration, prediction["supplier_company_registrations"], page_id
        )
        self.supplier_payment_details = _field_list(
            PaymentDetails, prediction["supplier_payment_details"], page_id
        )

        self.customer_name = TextField.from_prediction(prediction.get("customer_name") or {}, page_id)
        self.customer_address = TextField.from_prediction(prediction.get("customer_address") or {}, page_id)
        self.customer_company_registrations = _field_list(
            CompanyRegistration, prediction["customer_company_registrations"], page_id
        )

        self.tip = AmountField.from_prediction(prediction.get("tip") or empty_field(), page_id)
        self.taxes = _field_list(TaxField, prediction.get("taxes"), page_id)
        self.line_items = [
            InvoiceLineItem.from_prediction(item, page_id) for item in prediction.get("line_items") or []
        ]

        self.total_amount, self.total_net, self.total_tax = reconstruct_totals(
            self.taxes,
            AmountField.from_prediction(prediction.get("total_amount") or empty_field(), page_id),
            AmountField.from_prediction(prediction.get("total_net") or empty_field(), page_id),
            AmountField.from_prediction(prediction.get("total_tax") or empty_field(), page_id),
            page_id,
        )

    def __str__(self) -> str:
        taxes = "\n       ".join(str(tax) for tax in self.taxes)
        payment_details = "\n                 ".join(str(item) for item in self.supplier_payment_details)
        out = _render(
            [
                ("Document type", self.document_type),
                ("Category", self.category),
                ("Subcategory", self.subcategory),
                ("Locale", self.locale),
                ("Date", self.date),
                ("Due date", self.due_date),
                ("Time", self.time),
                ("Number", self.invoice_number),
                ("Reference numbers", ", ".join(str(ref) for ref in self.reference_numbers)),
                ("Supplier name", self.supplier_name),
                ("Supplier address", self.supplier_address),
                (
                    "Supplier company registrations",
                    "; ".join(str(reg) for reg in self.supplier_company_registrations),
                ),
                ("Supplier payment details", payment_details),
                ("Customer name", self.customer_name),
                ("Customer address", self.customer_address),
                (
                    "Customer company registrations",
                    "; ".join(str(reg) for reg in self.customer_company_registrations),
                ),
                ("Tip", self.tip),
                ("Taxes", taxes),
                ("Total taxes", self.total_tax),
                ("Total net", self.total_net),
                ("Total amount", self.total_amount),
            ]
        )
        out += "\n\n:Line Items:"
        table = line_items_table(self.line_items)
        if table:
            out += "\n" + table
        return out


class ReceiptV4(Prediction):
    """Expense receipt."""

    endpoint_name = "expense_receipts"
    endpoint_version = "4"

    def __init__(self, prediction: dict[str, Any], page_id: int | None = None):
        super().__init__(prediction, page_id)
        self.locale = Locale.from_prediction(prediction.get("locale") or {}, page_id)
        self.date = DateField.from_prediction(prediction.get("date") or {}, page_id)
        self.time = TextField.from_prediction(prediction.get("time") or {}, page_id)
        self.category = TextField.from_prediction(prediction.get("category") or {}, page_id)
        self.subcategory = TextField.from_prediction(prediction.get("subcategory") or {}, page_id)
        self.document_type = TextField.from_prediction(prediction.get("document_type") or {}, page_id)
        self.supplier = TextField.from_prediction(prediction.get("supplier") or {}, page_id)
        self.taxes = _field_list(TaxField, prediction.get("taxes"), page_id)
        self.total_amount = AmountField.from_prediction(prediction.get("total_amount") or {}, page_id)
        self.total_net = AmountField.from_prediction(prediction.get("total_net") or {}, page_id)
        self.total_tax = AmountField.from_prediction(prediction.get("total_tax") or {}, page_id)
        self.tip = AmountField.from_prediction(prediction.get("tip") or {}, page_id)

    def __str__(self) -> str:
        return _render(
            [
                ("Locale", self.locale),
                ("Date", self.date),
                ("Category", self.category),
                ("Subcategory", self.subcategory),
                ("Document type", self.document_type),
                ("Time", self.time),
                ("Supplier name", self.supplier),
                ("Taxes", "\n       ".join(str(tax) for tax in self.taxes)),
                ("Total net", self.total_net),
                ("Total taxes", self.total_tax),
                ("Tip", self.tip),
                ("Total amount", self.total_amount),
            ]
        )


class BankCheckV1(Prediction):
    """US bank check."""

    endpoint_name = "bank_check"
    endpoint_version = "1"

    def __init__(self, prediction: dict[str, Any], page_id: int | None = None):
        super().__init__(prediction, page_id)
        self.routing_number = TextField.from_prediction(prediction.get("routing_number") or {}, page_id)
        self.account_number = TextField.from_prediction(prediction.get("account_number") or {}, page_id)
        self.check_number = TextField.from_prediction(prediction.get("check_number") or {}, page_id)
        self.date = DateField.from_prediction(prediction.get("date") or {}, page_id)
        self.amount = AmountField.from_prediction(prediction.get("amount") or {}, page_id)
        self.payees = _field_list(TextField, prediction.get("payees"), page_id)
        self.check_position = PositionField.from_prediction(prediction.get("check_position") or {}, page_id)
        self.signatures_positions = _field_list(PositionField, prediction.get("signatures_positions"), page_id)

    def __str__(self) -> str:
        return _render(
            [
                ("Routing number", self.routing_number),
                ("Account number", self.account_number),
                ("Check number", self.check_number),
                ("Date", self.date),
                ("Amount", self.amount),
                ("Payees", ", ".join(str(payee) for payee in self.payees)),
            ]
        )
