"""
Unit tests for the quote aggregate
"""

import random
import re
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from budget import Quote, LineItem, Payment, generate_quote_id
from utils.exceptions import ValidationError


def make_quote(**kwargs) -> Quote:
    return Quote.new(kwargs.pop("customer_name", "Ana García"), **kwargs)


def eyewear_quote(treatment_price: str = "35.00") -> Quote:
    quote = make_quote(quote_date=datetime(2024, 1, 15, 11, 0))
    quote.add_line_item("Lente monofocal", Decimal("150.00"), "lente")
    quote.add_line_item("Montura Ray-Ban", Decimal("80.00"), "montura")
    quote.add_line_item("Antirreflejo", Decimal(treatment_price), "tratamiento", quantity=2)
    return quote


@pytest.mark.unit
class TestQuoteCreation:
    """Test cases for transient quote construction"""

    def test_new_assigns_id_and_date(self):
        before = datetime.now()
        quote = make_quote()
        assert re.fullmatch(r"Q\d{14}", quote.id)
        assert before <= quote.quote_date <= datetime.now()

    def test_generate_quote_id(self):
        assert generate_quote_id(datetime(2024, 1, 15, 9, 5, 7)) == "Q20240115090507"

    def test_new_keeps_given_values(self):
        quote = make_quote(id="Q1", quote_date="2024-02-01", notes="Urgente")
        assert quote.id == "Q1"
        assert quote.quote_date == datetime(2024, 2, 1)
        assert quote.notes == "Urgente"

    def test_customer_name_is_required(self):
        with pytest.raises(ValidationError) as exc_info:
            Quote.new("  ")
        assert exc_info.value.full_messages == ["Customer name can't be blank"]

    def test_quote_date_is_required_on_validate(self):
        quote = Quote(customer_name="Ana", quote_date=None)
        with pytest.raises(ValidationError) as exc_info:
            quote.validate()
        assert exc_info.value.errors == {"quote_date": ["can't be blank"]}

    def test_invalid_quote_date(self):
        with pytest.raises(ValidationError) as exc_info:
            Quote(customer_name="Ana", quote_date="mañana").validate()
        assert exc_info.value.errors == {"quote_date": ["is invalid"]}

    def test_create_defaults_do_not_overwrite_date(self):
        quote = Quote(customer_name="Ana", quote_date=datetime(2023, 6, 1))
        quote.apply_create_defaults()
        assert quote.quote_date == datetime(2023, 6, 1)


@pytest.mark.unit
class TestQuoteTotals:
    """Test cases for derived totals"""

    def test_empty_quote(self):
        quote = make_quote()
        assert quote.total() == 0
        assert quote.total_paid() == 0
        assert quote.remaining_balance() == 0
        assert quote.fully_paid() is True
        assert quote.category_breakdown() == {}
        assert quote.initial_payment() is None

    def test_total_and_breakdown(self):
        quote = eyewear_quote()
        assert quote.total() == Decimal("300.00")
        assert quote.category_breakdown() == {
            "lente": Decimal("150.00"),
            "montura": Decimal("80.00"),
            "tratamiento": Decimal("70.00"),
        }

    def test_partial_then_full_payment(self):
        quote = eyewear_quote(treatment_price="30.00")
        assert quote.total() == Decimal("290.00")
        quote.add_payment(Decimal("145.00"))
        assert quote.total_paid() == Decimal("145.00")
        assert quote.remaining_balance() == Decimal("145.00")
        assert quote.fully_paid() is False

        quote.add_payment(Decimal("145.00"))
        assert quote.remaining_balance() == Decimal("0.00")
        assert quote.fully_paid() is True

    def test_overpayment(self):
        quote = make_quote()
        quote.add_line_item("Lente", "100.00", "lente")
        quote.add_payment("150.00")
        assert quote.remaining_balance() == Decimal("-50.00")
        assert quote.fully_paid() is True

    def test_breakdown_accumulates_same_category(self):
        quote = make_quote()
        quote.add_line_item("Lente derecho", "120", "lente")
        quote.add_line_item("Lente izquierdo", "110", "lente")
        assert quote.category_breakdown() == {"lente": Decimal("230")}

    def test_totals_follow_children(self):
        rng = random.Random(7)
        for _ in range(50):
            quote = make_quote()
            for _ in range(rng.randint(0, 6)):
                quote.add_line_item("Item", Decimal(rng.randint(1, 100000)) / 100, quantity=rng.randint(1, 4))
            for _ in range(rng.randint(0, 4)):
                quote.add_payment(Decimal(rng.randint(1, 100000)) / 100)

            assert quote.total() == sum((item.subtotal() for item in quote.line_items), Decimal("0"))
            assert quote.remaining_balance() == quote.total() - quote.total_paid()
            assert quote.fully_paid() == (quote.remaining_balance() <= 0)

    def test_totals_record(self):
        quote = eyewear_quote()
        quote.add_payment("100")
        assert quote.totals() == {
            "total": Decimal("300.00"),
            "total_paid": Decimal("100"),
            "remaining_balance": Decimal("200.00"),
            "fully_paid": False,
        }

    def test_summary(self):
        quote = eyewear_quote()
        quote.add_payment("90")
        summary = quote.summary()
        assert summary["id"] == quote.id
        assert summary["line_items_count"] == 3
        assert summary["payments_count"] == 1
        assert summary["remaining_balance"] == Decimal("210.00")
        assert summary["category_breakdown"]["tratamiento"] == Decimal("70.00")
        assert set(summary) == {
            "id", "customer_name", "customer_contact", "quote_date", "line_items_count",
            "total", "total_paid", "remaining_balance", "fully_paid",
            "category_breakdown", "payments_count",
        }


@pytest.mark.unit
class TestQuoteMutations:
    """Test cases for adding and removing children"""

    def test_add_line_item_defaults(self):
        quote = make_quote()
        item = quote.add_line_item("Estuche", "12")
        assert item.category == "other"
        assert item.quantity == 1
        assert item.quote_id == quote.id
        assert quote.line_items == [item]

    def test_invalid_line_item_is_not_added(self):
        quote = make_quote()
        with pytest.raises(ValidationError):
            quote.add_line_item("Lente", "0")
        assert quote.line_items == []

    def test_add_payment_defaults(self):
        quote = make_quote()
        payment = quote.add_payment("50")
        assert payment.payment_method == "efectivo"
        assert isinstance(payment.payment_date, datetime)

    def test_remove_line_item(self):
        quote = eyewear_quote()
        removed = quote.remove_line_item(1)
        assert removed.description == "Montura Ray-Ban"
        assert quote.total() == Decimal("220.00")

    def test_remove_line_item_out_of_range(self):
        quote = make_quote()
        with pytest.raises(IndexError):
            quote.remove_line_item(0)

    def test_initial_payment_is_earliest(self):
        quote = make_quote()
        quote.add_payment("20", payment_date=datetime(2024, 3, 10))
        quote.add_payment("30", payment_date=datetime(2024, 3, 1))
        assert quote.initial_payment().amount == Decimal("30")
        assert [p.amount for p in quote.chronological_payments()] == [Decimal("30"), Decimal("20")]

    def test_derived_values_are_not_cached(self):
        quote = make_quote()
        quote.add_line_item("Lente", "100")
        assert quote.total() == Decimal("100")
        quote.line_items.append(LineItem(description="Servicio", price=Decimal("25"), category="servicio"))
        assert quote.total() == Decimal("125")
        quote.payments.append(Payment(amount=Decimal("125"), payment_date=datetime.now()))
        assert quote.fully_paid() is True


@pytest.mark.unit
class TestQuoteRender:
    """Test cases for the text report"""

    def test_render_pending_quote(self):
        quote = eyewear_quote()
        quote.customer_contact = "600 123 456"
        start = datetime(2024, 1, 20)
        quote.add_payment("45", payment_date=start + timedelta(days=5), payment_method="tarjeta")
        quote.add_payment("100", payment_date=start, notes="Seña")

        lines = quote.render().split("\n")
        assert lines[0] == "=" * 60
        assert lines[1] == f"PRESUPUESTO #{quote.id}"
        assert "Cliente: Ana García" in lines
        assert "Contacto: 600 123 456" in lines
        assert "Fecha: 15/01/2024" in lines
        assert not any(line.startswith("Notas:") for line in lines)
        assert "1. Lente - Lente monofocal: $150.00" in lines
        assert "3. Tratamiento - Antirreflejo (2 x $35.00) = $70.00" in lines
        assert "TOTAL: $300.00" in lines
        assert "PAGOS:" in lines
        assert "1. $100.00 - Efectivo (20/01/2024) - Seña" in lines
        assert "2. $45.00 - Tarjeta (25/01/2024)" in lines
        assert "Total Pagado: $145.00" in lines
        assert "SALDO PENDIENTE: $155.00" in lines
        assert "Estado: PENDIENTE" in lines
        assert lines[-1] == "=" * 60

    def test_render_paid_quote_without_payments_section(self):
        quote = make_quote(notes="Entrega en 7 días")
        text = str(quote)
        assert "Notas: Entrega en 7 días" in text
        assert "PAGOS:" not in text
        assert "SALDO PENDIENTE: $0.00" in text
        assert "Estado: PAGADO COMPLETO" in text

    def test_render_width(self):
        quote = make_quote()
        assert quote.render(width=40).split("\n")[0] == "=" * 40
