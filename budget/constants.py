"""
Shared enumerations for the budget domain.
Category and payment method codes are defined once and referenced by the
normalization logic, the storage layer and the API documentation.
"""

from enum import Enum
from typing import Dict, Mapping, Optional
from types import MappingProxyType


class Category(str, Enum):
    """明细类别枚举"""
    LENTE = "lente"
    MONTURA = "montura"
    TRATAMIENTO = "tratamiento"
    ACCESORIO = "accesorio"
    SERVICIO = "servicio"
    OTHER = "other"


class PaymentMethod(str, Enum):
    """付款方式枚举"""
    EFECTIVO = "efectivo"
    TARJETA = "tarjeta"
    TRANSFERENCIA = "transferencia"
    CHEQUE = "cheque"
    OTHER = "other"


CATEGORIES = tuple(c.value for c in Category)
PAYMENT_METHODS = tuple(m.value for m in PaymentMethod)

DEFAULT_CATEGORY = Category.OTHER.value
DEFAULT_PAYMENT_METHOD = PaymentMethod.EFECTIVO.value
FALLBACK_PAYMENT_METHOD = PaymentMethod.OTHER.value

# 西班牙语显示名称
CATEGORY_NAMES: Mapping[str, str] = MappingProxyType({
    Category.LENTE.value: "Lente",
    Category.MONTURA.value: "Montura",
    Category.TRATAMIENTO.value: "Tratamiento",
    Category.ACCESORIO.value: "Accesorio",
    Category.SERVICIO.value: "Servicio",
    Category.OTHER.value: "Otro",
})

PAYMENT_METHOD_NAMES: Mapping[str, str] = MappingProxyType({
    PaymentMethod.EFECTIVO.value: "Efectivo",
    PaymentMethod.TARJETA.value: "Tarjeta",
    PaymentMethod.TRANSFERENCIA.value: "Transferencia",
    PaymentMethod.CHEQUE.value: "Cheque",
    PaymentMethod.OTHER.value: "Otro",
})


def label_for(code: Optional[str], table: Mapping[str, str]) -> str:
    """查找显示名称，未知代码返回首字母大写的原始值"""
    if code in table:
        return table[code]
    return str(code or "").capitalize()


def describe_choices() -> Dict[str, Dict[str, str]]:
    """返回可选值及其显示名称，供接口文档使用"""
    return {
        "categories": dict(CATEGORY_NAMES),
        "payment_methods": dict(PAYMENT_METHOD_NAMES),
    }
