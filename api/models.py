"""
API data models for the budget system.
Pydantic models for request bodies and response payloads.

Request fields are loosely typed; the domain layer produces the field
error messages. Money in responses is a string with two fractional digits.
"""

from datetime import datetime
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field

from budget import Quote, LineItem, Payment
from utils.money_utils import format_money


# ============================================================================
# 请求模型
# ============================================================================

class QuoteRequest(BaseModel):
    """报价单请求模型"""
    customer_name: Optional[str] = Field(None, description="客户名称")
    customer_contact: Optional[str] = Field(None, description="联系方式")
    notes: Optional[str] = Field(None, description="备注")
    quote_date: Optional[Any] = Field(None, description="报价日期，缺省为当前时间")


class LineItemRequest(BaseModel):
    """明细请求模型"""
    description: Optional[str] = Field(None, description="描述")
    price: Optional[Any] = Field(None, description="单价")
    quantity: Optional[Any] = Field(None, description="数量，缺省为 1")
    category: Optional[str] = Field(None, description="类别：lente, montura, tratamiento, accesorio, servicio, other")


class PaymentRequest(BaseModel):
    """付款请求模型"""
    amount: Optional[Any] = Field(None, description="金额")
    payment_date: Optional[Any] = Field(None, description="付款日期，缺省为当前时间")
    payment_method: Optional[str] = Field(None, description="付款方式：efectivo, tarjeta, transferencia, cheque, other")
    notes: Optional[str] = Field(None, description="备注")


def request_data(request: BaseModel) -> Dict[str, Any]:
    """只返回请求中实际提供的字段"""
    return request.model_dump(exclude_unset=True)


# ============================================================================
# 响应模型
# ============================================================================

class TotalsResponse(BaseModel):
    """金额汇总"""
    total: str
    total_paid: str
    remaining_balance: str
    fully_paid: bool

    @classmethod
    def from_domain(cls, quote: Quote) -> 'TotalsResponse':
        totals = quote.totals()
        return cls(
            total=format_money(totals['total']),
            total_paid=format_money(totals['total_paid']),
            remaining_balance=format_money(totals['remaining_balance']),
            fully_paid=totals['fully_paid'],
        )


class LineItemResponse(BaseModel):
    """明细响应模型"""
    id: int
    quote_id: int
    description: str
    price: str
    category: str
    quantity: int
    category_name: str
    subtotal: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, item: LineItem) -> 'LineItemResponse':
        data = item.to_dict()
        data['price'] = format_money(data['price'])
        data['subtotal'] = format_money(data['subtotal'])
        return cls(**data)


class PaymentResponse(BaseModel):
    """付款响应模型"""
    id: int
    quote_id: int
    amount: str
    payment_date: datetime
    payment_method: str
    notes: Optional[str] = None
    payment_method_name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, payment: Payment) -> 'PaymentResponse':
        data = payment.to_dict()
        data['amount'] = format_money(data['amount'])
        return cls(**data)


class QuoteListItemResponse(BaseModel):
    """报价单列表项"""
    id: int
    customer_name: str
    customer_contact: Optional[str] = None
    notes: Optional[str] = None
    quote_date: Optional[datetime] = None
    line_items_count: int
    payments_count: int
    totals: TotalsResponse
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, quote: Quote) -> 'QuoteListItemResponse':
        return cls(
            id=quote.id,
            customer_name=quote.customer_name,
            customer_contact=quote.customer_contact,
            notes=quote.notes,
            quote_date=quote.quote_date,
            line_items_count=len(quote.line_items),
            payments_count=len(quote.payments),
            totals=TotalsResponse.from_domain(quote),
            created_at=quote.created_at,
        )


class QuoteDetailResponse(BaseModel):
    """报价单详情"""
    id: int
    customer_name: str
    customer_contact: Optional[str] = None
    notes: Optional[str] = None
    quote_date: Optional[datetime] = None
    line_items: List[LineItemResponse]
    payments: List[PaymentResponse]
    totals: TotalsResponse
    category_breakdown: Dict[str, str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, quote: Quote) -> 'QuoteDetailResponse':
        return cls(
            id=quote.id,
            customer_name=quote.customer_name,
            customer_contact=quote.customer_contact,
            notes=quote.notes,
            quote_date=quote.quote_date,
            line_items=[LineItemResponse.from_domain(item) for item in quote.line_items],
            payments=[PaymentResponse.from_domain(payment) for payment in quote.chronological_payments()],
            totals=TotalsResponse.from_domain(quote),
            category_breakdown={
                code: format_money(amount) for code, amount in quote.category_breakdown().items()
            },
            created_at=quote.created_at,
            updated_at=quote.updated_at,
        )


class QuoteSummaryResponse(BaseModel):
    """报价单摘要"""
    id: int
    customer_name: str
    customer_contact: Optional[str] = None
    quote_date: Optional[datetime] = None
    line_items_count: int
    total: str
    total_paid: str
    remaining_balance: str
    fully_paid: bool
    category_breakdown: Dict[str, str]
    payments_count: int

    @classmethod
    def from_domain(cls, quote: Quote) -> 'QuoteSummaryResponse':
        summary = quote.summary()
        for key in ('total', 'total_paid', 'remaining_balance'):
            summary[key] = format_money(summary[key])
        summary['category_breakdown'] = {
            code: format_money(amount) for code, amount in summary['category_breakdown'].items()
        }
        return cls(**summary)


class ErrorResponse(BaseModel):
    """错误响应"""
    error: str


class ValidationErrorResponse(BaseModel):
    """校验错误响应"""
    errors: List[str]
