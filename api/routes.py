"""
API routes for the budget system.
Quotes, and the line items and payments nested under them.
"""

from typing import Dict, List, Optional
from fastapi import APIRouter, Query, Depends, Response
from fastapi.responses import PlainTextResponse

from budget import describe_choices
from budget_manager import BudgetManager, budget_manager
from .models import (
    QuoteRequest, LineItemRequest, PaymentRequest, request_data,
    QuoteListItemResponse, QuoteDetailResponse, QuoteSummaryResponse,
    LineItemResponse, PaymentResponse, ErrorResponse, ValidationErrorResponse
)

router = APIRouter(
    responses={
        404: {"model": ErrorResponse, "description": "Not found"},
        422: {"model": ValidationErrorResponse, "description": "Validation failed"},
    }
)


def get_budget_manager() -> BudgetManager:
    """依赖注入：获取预算管理器"""
    return budget_manager


# Quotes
@router.get("/quotes", response_model=List[QuoteListItemResponse], tags=["Quotes"])
def list_quotes(
    customer: Optional[str] = Query(None, description="按客户名称模糊搜索"),
    manager: BudgetManager = Depends(get_budget_manager)
):
    """获取报价单列表，最新创建的在前"""
    return [QuoteListItemResponse.from_domain(quote) for quote in manager.list_quotes(customer=customer)]


@router.get("/quotes/pending", response_model=List[QuoteListItemResponse], tags=["Quotes"])
def list_pending_quotes(manager: BudgetManager = Depends(get_budget_manager)):
    """获取未付清的报价单"""
    return [QuoteListItemResponse.from_domain(quote) for quote in manager.pending_quotes()]


@router.post("/quotes", response_model=QuoteDetailResponse, status_code=201, tags=["Quotes"])
def create_quote(request: QuoteRequest, manager: BudgetManager = Depends(get_budget_manager)):
    """创建报价单"""
    return QuoteDetailResponse.from_domain(manager.create_quote(request_data(request)))


@router.get("/quotes/{quote_id}", response_model=QuoteDetailResponse, tags=["Quotes"])
def get_quote(quote_id: str, manager: BudgetManager = Depends(get_budget_manager)):
    """获取报价单详情"""
    return QuoteDetailResponse.from_domain(manager.get_quote(quote_id))


@router.put("/quotes/{quote_id}", response_model=QuoteDetailResponse, tags=["Quotes"])
@router.patch("/quotes/{quote_id}", response_model=QuoteDetailResponse, tags=["Quotes"])
def update_quote(quote_id: str, request: QuoteRequest,
                 manager: BudgetManager = Depends(get_budget_manager)):
    """更新报价单"""
    return QuoteDetailResponse.from_domain(manager.update_quote(quote_id, request_data(request)))


@router.delete("/quotes/{quote_id}", status_code=204, tags=["Quotes"])
def delete_quote(quote_id: str, manager: BudgetManager = Depends(get_budget_manager)):
    """删除报价单及其明细和付款"""
    manager.delete_quote(quote_id)
    return Response(status_code=204)


@router.get("/quotes/{quote_id}/summary", response_model=QuoteSummaryResponse, tags=["Quotes"])
def get_quote_summary(quote_id: str, manager: BudgetManager = Depends(get_budget_manager)):
    """获取报价单摘要"""
    return QuoteSummaryResponse.from_domain(manager.get_quote(quote_id))


@router.get("/quotes/{quote_id}/report", response_class=PlainTextResponse, tags=["Quotes"])
def get_quote_report(quote_id: str, manager: BudgetManager = Depends(get_budget_manager)):
    """获取文本格式的报价单"""
    return PlainTextResponse(manager.render_quote(quote_id))


# Line Items
@router.get("/quotes/{quote_id}/line_items", response_model=List[LineItemResponse], tags=["Line Items"])
def list_line_items(quote_id: str, manager: BudgetManager = Depends(get_budget_manager)):
    """获取报价单明细"""
    return [LineItemResponse.from_domain(item) for item in manager.list_line_items(quote_id)]


@router.post("/quotes/{quote_id}/line_items", response_model=LineItemResponse, status_code=201,
             tags=["Line Items"])
def create_line_item(quote_id: str, request: LineItemRequest,
                     manager: BudgetManager = Depends(get_budget_manager)):
    """添加明细"""
    return LineItemResponse.from_domain(manager.create_line_item(quote_id, request_data(request)))


@router.get("/quotes/{quote_id}/line_items/{item_id}", response_model=LineItemResponse, tags=["Line Items"])
def get_line_item(quote_id: str, item_id: str, manager: BudgetManager = Depends(get_budget_manager)):
    """获取单条明细"""
    return LineItemResponse.from_domain(manager.get_line_item(quote_id, item_id))


@router.put("/quotes/{quote_id}/line_items/{item_id}", response_model=LineItemResponse, tags=["Line Items"])
@router.patch("/quotes/{quote_id}/line_items/{item_id}", response_model=LineItemResponse, tags=["Line Items"])
def update_line_item(quote_id: str, item_id: str, request: LineItemRequest,
                     manager: BudgetManager = Depends(get_budget_manager)):
    """更新明细"""
    return LineItemResponse.from_domain(manager.update_line_item(quote_id, item_id, request_data(request)))


@router.delete("/quotes/{quote_id}/line_items/{item_id}", status_code=204, tags=["Line Items"])
def delete_line_item(quote_id: str, item_id: str, manager: BudgetManager = Depends(get_budget_manager)):
    """删除明细"""
    manager.delete_line_item(quote_id, item_id)
    return Response(status_code=204)


# Payments
@router.get("/quotes/{quote_id}/payments", response_model=List[PaymentResponse], tags=["Payments"])
def list_payments(
    quote_id: str,
    method: Optional[str] = Query(None, description="按付款方式筛选"),
    manager: BudgetManager = Depends(get_budget_manager)
):
    """获取付款记录，按付款日期升序"""
    return [PaymentResponse.from_domain(payment) for payment in manager.list_payments(quote_id, method=method)]


@router.post("/quotes/{quote_id}/payments", response_model=PaymentResponse, status_code=201, tags=["Payments"])
def create_payment(quote_id: str, request: PaymentRequest,
                   manager: BudgetManager = Depends(get_budget_manager)):
    """登记付款"""
    return PaymentResponse.from_domain(manager.create_payment(quote_id, request_data(request)))


@router.get("/quotes/{quote_id}/payments/{payment_id}", response_model=PaymentResponse, tags=["Payments"])
def get_payment(quote_id: str, payment_id: str, manager: BudgetManager = Depends(get_budget_manager)):
    """获取单条付款记录"""
    return PaymentResponse.from_domain(manager.get_payment(quote_id, payment_id))


@router.put("/quotes/{quote_id}/payments/{payment_id}", response_model=PaymentResponse, tags=["Payments"])
@router.patch("/quotes/{quote_id}/payments/{payment_id}", response_model=PaymentResponse, tags=["Payments"])
def update_payment(quote_id: str, payment_id: str, request: PaymentRequest,
                   manager: BudgetManager = Depends(get_budget_manager)):
    """更新付款记录"""
    return PaymentResponse.from_domain(manager.update_payment(quote_id, payment_id, request_data(request)))


@router.delete("/quotes/{quote_id}/payments/{payment_id}", status_code=204, tags=["Payments"])
def delete_payment(quote_id: str, payment_id: str, manager: BudgetManager = Depends(get_budget_manager)):
    """删除付款记录"""
    manager.delete_payment(quote_id, payment_id)
    return Response(status_code=204)


# Reference data
@router.get("/choices", response_model=Dict[str, Dict[str, str]], tags=["Reference"])
def get_choices():
    """获取可选的明细类别和付款方式"""
    return describe_choices()
