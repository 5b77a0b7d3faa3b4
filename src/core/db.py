# src/core/db.py
import asyncio
import logging
import math
from contextlib import asynccontextmanager
from typing import Any, List, Union

import pandas as pd
from supabase import acreate_client, AsyncClient

from src.config import (
    SUPABASE_URL, SUPABASE_KEY, ITEMS_PER_PAGE, LATEST_INVOICES_LIMIT, SEARCH_CUSTOMER_IDS_LIMIT,
)
from src.core.errors import MalformedInput, MultipleRows, NotFound, RemoteQueryError
from src.core.models import (
    PAID, PENDING, INVOICE_STATUSES,
    CardData, CustomerField, FormattedCustomersTable, InvoiceForm,
    InvoicesTableRow, LatestInvoice, Revenue,
)
from src.utils.currency import cents_to_dollars, format_currency
from src.utils.text_utils import ilike_pattern, parse_amount_cents, parse_date_range

logger = logging.getLogger(__name__)


async def get_supabase_client() -> AsyncClient:
    """Retorna uma instância do cliente assíncrono do Supabase."""
    if not SUPABASE_URL or not SUPABASE_KEY:
        raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be set")
    return await acreate_client(SUPABASE_URL, SUPABASE_KEY)


@asynccontextmanager
async def supabase_session():
    """Cliente para uma única requisição; a conexão HTTP do PostgREST é fechada ao sair."""
    supabase_client = await get_supabase_client()
    try:
        yield supabase_client
    finally:
        await supabase_client.postgrest.aclose()


async def _execute(query, message: str):
    """Executa a consulta; qualquer falha vira RemoteQueryError com a causa encadeada."""
    try:
        return await query.execute()
    except Exception as e:
        logger.error("Database Error: %s", e)
        raise RemoteQueryError(message) from e


def _inline_customer(row: dict) -> dict:
    """Move os campos do cliente (objeto aninhado 'customers') para a própria linha."""
    row_copy = row.copy()
    customer = row_copy.pop('customers', None) or {}
    for field in ('name', 'email', 'image_url'):
        row_copy[field] = customer.get(field)
    return row_copy


def _check_page(current_page: Any) -> int:
    if isinstance(current_page, bool) or not isinstance(current_page, int) or current_page < 1:
        raise MalformedInput(f"Page must be an integer >= 1, got {current_page!r}")
    return current_page


def _check_query(query: Any) -> str:
    if not isinstance(query, str):
        raise MalformedInput(f"Query must be a string, got {type(query).__name__}")
    return query.strip()


# --- Receita ---
async def fetch_revenue(supabase_client: AsyncClient) -> List[Revenue]:
    """Obtém todas as linhas da tabela de receita, sem alterações."""
    logger.debug("Fetching revenue data...")
    response = await _execute(
        supabase_client.table('revenue').select('*'),
        'Failed to fetch revenue data.',
    )
    return response.data


# --- Faturas ---
async def fetch_latest_invoices(supabase_client: AsyncClient) -> List[LatestInvoice]:
    """
    Obtém as 5 faturas mais recentes com nome, imagem e e-mail do cliente.
    Empates na data ficam na ordem que o backend devolver.
    """
    response = await _execute(
        supabase_client.table('invoices')
        .select('id,amount,customers(name,image_url,email)')
        .order('date', desc=True)
        .limit(LATEST_INVOICES_LIMIT),
        'Failed to fetch the latest invoices.',
    )
    latest_invoices = []
    for invoice in response.data:
        invoice_copy = _inline_customer(invoice)
        invoice_copy['amount'] = format_currency(invoice_copy['amount'])
        latest_invoices.append(invoice_copy)
    return latest_invoices


async def fetch_card_data(supabase_client: AsyncClient) -> CardData:
    """
    Totais do painel: número de faturas, número de clientes e somas de
    faturas pagas e pendentes. As três consultas rodam em paralelo e
    qualquer falha cancela a agregação inteira.
    """
    message = 'Failed to fetch card data.'
    invoice_count, customer_count, invoice_status = await asyncio.gather(
        _execute(supabase_client.table('invoices').select('id', count='exact', head=True), message),
        _execute(supabase_client.table('customers').select('id', count='exact', head=True), message),
        _execute(
            supabase_client.table('invoices').select('amount,status').in_('status', list(INVOICE_STATUSES)),
            message,
        ),
    )

    totals = {PAID: 0, PENDING: 0}
    for invoice in invoice_status.data or []:
        if invoice.get('status') in totals:
            totals[invoice['status']] += invoice.get('amount') or 0

    return {
        'number_of_customers': customer_count.count or 0,
        'number_of_invoices': invoice_count.count or 0,
        'total_paid_invoices': format_currency(totals[PAID]),
        'total_pending_invoices': format_currency(totals[PENDING]),
    }


async def _invoice_search_filter(supabase_client: AsyncClient, query: str, message: str) -> Union[str, None]:
    """
    Monta a expressão 'or' usada pela busca de faturas e pela contagem de páginas.
    Nome/e-mail do cliente são resolvidos antes para uma lista de customer_id,
    já que o PostgREST não combina colunas da tabela embutida num mesmo 'or'.
    Busca vazia não filtra nada (None).
    """
    if not query:
        return None

    pattern = ilike_pattern(query)
    # A lista de ids vai na URL: limitada a SEARCH_CUSTOMER_IDS_LIMIT clientes
    customers = await _execute(
        supabase_client.table('customers')
        .select('id')
        .or_(f'name.ilike.{pattern},email.ilike.{pattern}')
        .limit(SEARCH_CUSTOMER_IDS_LIMIT + 1),
        message,
    )

    clauses = [f'status.ilike.{pattern}']
    customer_ids = [str(customer['id']) for customer in customers.data]
    if len(customer_ids) > SEARCH_CUSTOMER_IDS_LIMIT:
        logger.warning(
            "Search %r matched more than %d customers; only the first %d are used",
            query, SEARCH_CUSTOMER_IDS_LIMIT, SEARCH_CUSTOMER_IDS_LIMIT,
        )
        customer_ids = customer_ids[:SEARCH_CUSTOMER_IDS_LIMIT]
    if customer_ids:
        clauses.append(f"customer_id.in.({','.join(customer_ids)})")

    cents = parse_amount_cents(query)
    if cents is not None:
        clauses.append(f'amount.eq.{cents}')

    date_range = parse_date_range(query)
    if date_range is not None:
        start, end = date_range
        clauses.append(f'and(date.gte.{start.isoformat()},date.lt.{end.isoformat()})')

    return ','.join(clauses)


async def fetch_filtered_invoices(
    supabase_client: AsyncClient, query: str, current_page: int
) -> List[InvoicesTableRow]:
    """Busca paginada (6 por página) de faturas, da mais recente para a mais antiga."""
    message = 'Failed to fetch filtered invoices.'
    query = _check_query(query)
    offset = (_check_page(current_page) - 1) * ITEMS_PER_PAGE

    search_filter = await _invoice_search_filter(supabase_client, query, message)
    request = supabase_client.table('invoices').select(
        'id,customer_id,amount,date,status,customers(name,email,image_url)'
    )
    if search_filter:
        request = request.or_(search_filter)
    response = await _execute(
        request.order('date', desc=True).range(offset, offset + ITEMS_PER_PAGE - 1),
        message,
    )

    invoices = []
    for invoice in response.data[:ITEMS_PER_PAGE]:
        invoice_copy = _inline_customer(invoice)
        invoice_copy['amount'] = format_currency(invoice_copy['amount'])
        invoices.append(invoice_copy)
    return invoices


async def fetch_invoices_pages(supabase_client: AsyncClient, query: str) -> int:
    """Total de páginas para a mesma busca de fetch_filtered_invoices."""
    message = 'Failed to fetch total number of invoices.'
    query = _check_query(query)

    search_filter = await _invoice_search_filter(supabase_client, query, message)
    request = supabase_client.table('invoices').select('id', count='exact', head=True)
    if search_filter:
        request = request.or_(search_filter)
    response = await _execute(request, message)

    return math.ceil((response.count or 0) / ITEMS_PER_PAGE)


async def fetch_invoice_by_id(supabase_client: AsyncClient, invoice_id: str) -> InvoiceForm:
    """Obtém uma fatura pelo id, com o valor convertido de centavos para dólares."""
    if not isinstance(invoice_id, str) or not invoice_id.strip():
        raise MalformedInput(f"Invalid invoice id: {invoice_id!r}")

    response = await _execute(
        supabase_client.table('invoices').select('id,customer_id,amount,status').eq('id', invoice_id.strip()),
        'Failed to fetch invoice.',
    )
    if not response.data:
        raise NotFound(f"Invoice {invoice_id} not found.")
    if len(response.data) > 1:
        raise MultipleRows(f"More than one invoice with id {invoice_id}.")

    invoice = response.data[0].copy()
    invoice['amount'] = cents_to_dollars(invoice['amount'])
    return invoice


# --- Clientes ---
async def fetch_customers(supabase_client: AsyncClient) -> List[CustomerField]:
    """Obtém id e nome de todos os clientes, em ordem alfabética."""
    response = await _execute(
        supabase_client.table('customers').select('id,name').order('name'),
        'Failed to fetch all customers.',
    )
    return response.data


async def fetch_filtered_customers(supabase_client: AsyncClient, query: str) -> List[FormattedCustomersTable]:
    """
    Clientes cujo nome ou e-mail contém a busca, com número de faturas e
    totais pendente/pago. Clientes sem faturas aparecem com zeros.
    """
    message = 'Failed to fetch customer table.'
    query = _check_query(query)

    request = supabase_client.table('customers').select('id,name,email,image_url,invoices(id,amount,status)')
    if query:
        pattern = ilike_pattern(query)
        request = request.or_(f'name.ilike.{pattern},email.ilike.{pattern}')
    response = await _execute(request.order('name'), message)

    if not response.data:
        return []

    customer_columns = ['id', 'name', 'email', 'image_url']
    df_customers = pd.DataFrame(
        [{column: customer.get(column) for column in customer_columns} for customer in response.data],
        columns=customer_columns,
    )
    df_invoices = pd.DataFrame(
        [
            {'customer_id': customer['id'], 'invoice_id': invoice.get('id'),
             'status': invoice.get('status'), 'amount': invoice.get('amount') or 0}
            for customer in response.data
            for invoice in customer.get('invoices') or []
        ],
        columns=['customer_id', 'invoice_id', 'status', 'amount'],
    )

    df_invoices['pending'] = df_invoices['amount'].where(df_invoices['status'] == PENDING, 0)
    df_invoices['paid'] = df_invoices['amount'].where(df_invoices['status'] == PAID, 0)
    totals = df_invoices.groupby('customer_id').agg(
        total_invoices=('invoice_id', 'count'),
        total_pending=('pending', 'sum'),
        total_paid=('paid', 'sum'),
    )

    df_all = df_customers.merge(totals, how='left', left_on='id', right_index=True)
    df_all[['total_invoices', 'total_pending', 'total_paid']] = (
        df_all[['total_invoices', 'total_pending', 'total_paid']].fillna(0)
    )

    customers = []
    for record in df_all.to_dict(orient='records'):
        customers.append({
            'id': record['id'],
            'name': record['name'],
            'email': record['email'],
            'image_url': record['image_url'],
            'total_invoices': int(record['total_invoices']),
            'total_pending': format_currency(int(record['total_pending'])),
            'total_paid': format_currency(int(record['total_paid'])),
        })
    return customers
