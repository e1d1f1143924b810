"""
Extractly - Typed document parsing for invoices, receipts and checks.

Send a document to the Extractly prediction API and get back typed fields
with confidence scores and page locations. Totals missing from a financial
document are reconstructed from the fields that were found, and flagged as
such.

Example:
    ```python
    from extractly import Extractly, FinancialDocumentV1, PageOptions

    client = Extractly()

    document = client.parse(
        file="invoice.pdf",
        document_class=FinancialDocumentV1,
        page_options=PageOptions(page_indexes=[0, -1], on_min_pages=3),
    )

    total = document.prediction.total_amount
    print(f"{total} (confidence {total.confidence})")
    if total.reconstructed:
        print("Computed from the net total and the taxes")
    ```
"""

from extractly.client import Extractly
from extractly.errors import APIError, ConfigurationError, ExtractlyError, ValidationError
from extractly.fields import (
    AmountField,
    CompanyRegistration,
    DateField,
    Field,
    Locale,
    PaymentDetails,
    PositionField,
    TaxField,
    TextField,
    array_confidence,
    array_sum,
    float_to_string,
)
from extractly.line_items import InvoiceLineItem
from extractly.pdf import PageOperation, PageOptions, pages_to_remove, process_pdf
from extractly.predictions import BankCheckV1, FinancialDocumentV1, Prediction, ReceiptV4
from extractly.reconstruction import Totals, reconstruct_totals
from extractly.types import Document, Page

__version__ = "1.0.0"

__all__ = [
    "Extractly",
    "ExtractlyError",
    "APIError",
    "ConfigurationError",
    "ValidationError",
    "Document",
    "Page",
    "Prediction",
    "FinancialDocumentV1",
    "ReceiptV4",
    "BankCheckV1",
    "Field",
    "TextField",
    "AmountField",
    "DateField",
    "TaxField",
    "CompanyRegistration",
    "PaymentDetails",
    "PositionField",
    "Locale",
    "InvoiceLineItem",
    "array_confidence",
    "array_sum",
    "float_to_string",
    "Totals",
    "reconstruct_totals",
    "PageOperation",
    "PageOptions",
    "pages_to_remove",
    "process_pdf",
]
