# src/core/models.py
from decimal import Decimal
from typing import TypedDict, Union

# Formatos dos registros devolvidos por src/core/db.py.
# Em tempo de execução são dicionários comuns vindos do Supabase.

PAID = "paid"
PENDING = "pending"
INVOICE_STATUSES = (PAID, PENDING)


class Revenue(TypedDict):
    month: str
    revenue: Union[int, float]


class LatestInvoice(TypedDict):
    id: str
    name: str
    image_url: str
    email: str
    amount: str


class CardData(TypedDict):
    number_of_customers: int
    number_of_invoices: int
    total_paid_invoices: str
    total_pending_invoices: str


class InvoicesTableRow(TypedDict):
    id: str
    customer_id: str
    name: str
    email: str
    image_url: str
    date: str
    amount: str
    status: str


class InvoiceForm(TypedDict):
    id: str
    customer_id: str
    amount: Decimal  # dólares, não centavos
    status: str


class CustomerField(TypedDict):
    id: str
    name: str


class FormattedCustomersTable(TypedDict):
    id: str
    name: str
    email: str
    image_url: str
    total_invoices: int
    total_pending: str
    total_paid: str
