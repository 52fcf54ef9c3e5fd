"""
Storage interface for the budget system.

The service layer depends on this abstraction only. Implementations
return plain domain records (Quote, LineItem, Payment), never ORM rows,
and every write method runs as a single atomic operation.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from budget import Quote, LineItem, Payment


class QuoteStorage(ABC):
    """报价单存储接口"""

    # === Quote ===

    @abstractmethod
    def get_quote(self, quote_id: int) -> Optional[Quote]:
        """
        Load a quote with its line items and payments.

        Returns:
            Quote or None when it does not exist
        """
        pass

    @abstractmethod
    def list_quotes(self, customer: Optional[str] = None) -> List[Quote]:
        """
        List quotes with their children, most recently created first.

        Args:
            customer: case-insensitive partial match on the customer name
        """
        pass

    @abstractmethod
    def quote_exists(self, quote_id: int) -> bool:
        pass

    @abstractmethod
    def create_quote(self, quote: Quote) -> Quote:
        """Insert the quote header and return it with its assigned id."""
        pass

    @abstractmethod
    def update_quote(self, quote: Quote) -> Quote:
        """Persist the header fields of an existing quote."""
        pass

    @abstractmethod
    def delete_quote(self, quote_id: int) -> bool:
        """
        Delete the quote, its payments and its line items together.

        Returns:
            False when the quote does not exist
        """
        pass

    # === Line items ===

    @abstractmethod
    def list_line_items(self, quote_id: int) -> List[LineItem]:
        pass

    @abstractmethod
    def get_line_item(self, quote_id: int, item_id: int) -> Optional[LineItem]:
        """Returns None when the item does not exist or belongs to another quote."""
        pass

    @abstractmethod
    def create_line_item(self, quote_id: int, item: LineItem) -> LineItem:
        pass

    @abstractmethod
    def update_line_item(self, item: LineItem) -> LineItem:
        pass

    @abstractmethod
    def delete_line_item(self, quote_id: int, item_id: int) -> bool:
        pass

    # === Payments ===

    @abstractmethod
    def list_payments(self, quote_id: int, method: Optional[str] = None) -> List[Payment]:
        """Payments in chronological order, optionally filtered by method."""
        pass

    @abstractmethod
    def get_payment(self, quote_id: int, payment_id: int) -> Optional[Payment]:
        """Returns None when the payment does not exist or belongs to another quote."""
        pass

    @abstractmethod
    def create_payment(self, quote_id: int, payment: Payment) -> Payment:
        pass

    @abstractmethod
    def update_payment(self, payment: Payment) -> Payment:
        pass

    @abstractmethod
    def delete_payment(self, quote_id: int, payment_id: int) -> bool:
        pass
