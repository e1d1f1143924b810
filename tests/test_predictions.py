"""Tests for document predictions."""

import copy

import pytest

from extractly import BankCheckV1, Document, FinancialDocumentV1, ReceiptV4

POLYGON = [[0.1, 0.1], [0.3, 0.1], [0.3, 0.2], [0.1, 0.2]]


def field(value, confidence=0.99, polygon=None, page_id=None) -> dict:
    record = {"value": value, "confidence": confidence, "polygon": polygon or []}
    if page_id is not None:
        record["page_id"] = page_id
    return record


FINANCIAL_PREDICTION = {
    "locale": {"value": "en-US", "language": "en", "country": "US", "currency": "USD", "confidence": 0.95},
    "document_type": field("INVOICE"),
    "category": field("miscellaneous"),
    "subcategory": field(None, None),
    "date": field("2023-03-15", 0.98, POLYGON, page_id=0),
    "due_date": field("2023-04-15", 0.9, page_id=0),
    "time": {"value": [], "confidence": [], "polygon": []},
    "invoice_number": field("INV-0042", 0.97, page_id=0),
    "reference_numbers": [field("PO-7", 0.8, page_id=0)],
    "supplier_name": field("ACME CORP", page_id=0),
    "supplier_address": field("1 Main St, Springfield", page_id=0),
    "supplier_company_registration": [{"value": "12-3456789", "type": "EIN", "confidence": 0.9, "polygon": []}],
    "supplier_payment_details": None,
    "customer_name": field("JOHN DOE", page_id=0),
    "customer_address": field(None, None),
    "customer_company_registration": [],
    "tip": {"value": [], "confidence": [], "polygon": []},
    "taxes": [
        {"value": 10.0, "rate": 10.0, "code": "VAT", "confidence": 0.9, "polygon": [], "page_id": 0},
        {"value": 5.0, "rate": 5.0, "code": None, "confidence": 0.8, "polygon": [], "page_id": 1},
    ],
    "total_amount": field(None, None),
    "total_net": field(100.0, 0.7, page_id=1),
    "line_items": [
        {
            "product_code": "SKU-1",
            "description": "Consulting services for the first quarter of 2023",
            "quantity": 10,
            "unit_price": 10.0,
            "total_amount": 100.0,
            "tax_rate": 10.0,
            "tax_amount": 10.0,
            "confidence": 0.9,
            "polygon": POLYGON,
            "page_id": 0,
        }
    ],
}


class TestFinancialDocumentV1:
    """Tests for financial documents."""

    @pytest.fixture
    def document(self) -> FinancialDocumentV1:
        return FinancialDocumentV1(copy.deepcopy(FINANCIAL_PREDICTION), None)

    def test_fields(self, document: FinancialDocumentV1) -> None:
        """Test that plain fields are read."""
        assert document.invoice_number.value == "INV-0042"
        assert document.invoice_number.page_id == 0
        assert document.date.bounding_box is not None
        assert document.locale.currency == "USD"
        assert [ref.value for ref in document.reference_numbers] == ["PO-7"]
        assert document.taxes[1].page_id == 1

    def test_api_inconsistencies_repaired(self, document: FinancialDocumentV1) -> None:
        """Test that known quirks of the API are repaired."""
        assert document.supplier_company_registrations[0].type == "EIN"
        assert document.customer_company_registrations == []
        assert document.supplier_payment_details == []
        assert document.time.value is None
        assert document.tip.value is None

    def test_totals_reconstructed(self, document: FinancialDocumentV1) -> None:
        """Test that missing totals are computed."""
        assert document.total_tax.value == 15.0
        assert document.total_tax.confidence == pytest.approx(0.72)
        assert document.total_tax.reconstructed is True

        assert document.total_amount.value == 115.0
        assert document.total_amount.confidence == pytest.approx(0.72 * 0.7)
        assert document.total_amount.reconstructed is True

        assert document.total_net.value == 100.0
        assert document.total_net.reconstructed is False

    def test_page_prediction_not_reconstructed(self) -> None:
        """Test that page predictions only get total_tax."""
        document = FinancialDocumentV1(copy.deepcopy(FINANCIAL_PREDICTION), 0)

        assert document.total_tax.value == 15.0
        assert document.total_amount.value is None
        assert document.total_amount.reconstructed is False

    def test_line_items(self, document: FinancialDocumentV1) -> None:
        """Test that line items are copied as-is."""
        item = document.line_items[0]
        assert item.product_code == "SKU-1"
        assert item.quantity == 10.0
        assert item.page_id == 0

    def test_str(self, document: FinancialDocumentV1) -> None:
        """Test the text rendering."""
        out = str(document)

        assert ":Number: INV-0042" in out
        assert ":Supplier company registrations: 12-3456789" in out
        assert ":Taxes: 10.00 10.00% VAT\n       5.00 5.00%" in out
        assert ":Total amount: 115.00" in out
        assert ":Customer address:\n" in out
        assert "Consulting services for the first..." in out
        assert out.rstrip().endswith("=" * 36)

    def test_empty_prediction(self) -> None:
        """Test that a prediction without any field does not fail."""
        document = FinancialDocumentV1({}, None)

        assert document.total_amount.value is None
        assert document.taxes == []
        assert document.line_items == []
        assert str(document).endswith(":Line Items:")


class TestReceiptV4:
    """Tests for receipts."""

    def test_fields(self) -> None:
        """Test that receipt fields are read without reconstruction."""
        receipt = ReceiptV4(
            {
                "locale": {"value": "fr", "language": "fr", "country": "FR", "currency": "EUR"},
                "supplier": field("CAFE DE FLORE"),
                "taxes": [{"value": 1.0, "rate": 10.0, "confidence": 0.9, "polygon": []}],
                "total_amount": field(11.0, 0.9),
                "total_net": field(None, None),
                "total_tax": field(None, None),
            },
            None,
        )

        assert receipt.supplier.value == "CAFE DE FLORE"
        assert receipt.total_amount.value == 11.0
        assert receipt.total_net.value is None
        assert ":Supplier name: CAFE DE FLORE" in str(receipt)


class TestBankCheckV1:
    """Tests for bank checks."""

    def test_fields(self) -> None:
        """Test that check fields are read."""
        check = BankCheckV1(
            {
                "routing_number": field("012345678"),
                "account_number": field("1234567890"),
                "check_number": field("1001"),
                "date": field("2023-02-01"),
                "amount": field(125.5),
                "payees": [field("JOHN DOE"), field("JANE DOE")],
                "check_position": {"polygon": POLYGON, "confidence": 0.9},
                "signatures_positions": [{"polygon": POLYGON, "confidence": 0.8}],
            },
            None,
        )

        assert check.amount.value == 125.5
        assert check.check_position.bounding_box is not None
        assert len(check.signatures_positions) == 1
        assert ":Payees: JOHN DOE, JANE DOE" in str(check)
        assert ":Amount: 125.50" in str(check)


class TestDocument:
    """Tests for building documents from API responses."""

    def test_from_response(self) -> None:
        """Test that document and page predictions are built."""
        page_prediction = copy.deepcopy(FINANCIAL_PREDICTION)
        response = {
            "id": "abc-123",
            "name": "invoice.pdf",
            "n_pages": 1,
            "inference": {
                "product": {"name": "extractly/financial_document", "version": "1.0"},
                "prediction": copy.deepcopy(FINANCIAL_PREDICTION),
                "pages": [{"id": 0, "orientation": {"value": 0}, "prediction": page_prediction}],
            },
        }

        document = Document.from_response(FinancialDocumentV1, response)

        assert document.id == "abc-123"
        assert document.filename == "invoice.pdf"
        assert document.n_pages == 1
        assert document.product_version == "1.0"
        assert isinstance(document.prediction, FinancialDocumentV1)
        assert document.prediction.page_id is None
        assert document.prediction.total_amount.value == 115.0
        assert document.pages[0].id == 0
        assert document.pages[0].orientation == 0
        assert document.pages[0].prediction.page_id == 0
        assert document.pages[0].prediction.total_amount.value is None

    def test_str(self) -> None:
        """Test the document summary."""
        document = Document.from_response(
            ReceiptV4,
            {"id": "r-1", "name": "receipt.jpg", "inference": {"prediction": {}, "pages": []}},
        )

        out = str(document)
        assert ":Filename: receipt.jpg" in out
        assert "Prediction\n==========" in out
