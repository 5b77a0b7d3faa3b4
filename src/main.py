# src/main.py
import asyncio
import logging

from flask import Flask, jsonify, request, send_file

from src.config import LOG_LEVEL
from src.core import charts, db
from src.core.errors import DataFetchError, MalformedInput, NotFound

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

flask_app = Flask(__name__)


# --- Tratamento de erros da camada de dados ---
@flask_app.errorhandler(MalformedInput)
def handle_malformed_input(e):
    return jsonify({"status": "error", "message": str(e)}), 400


@flask_app.errorhandler(NotFound)
def handle_not_found(e):
    return jsonify({"status": "error", "message": str(e)}), 404


@flask_app.errorhandler(DataFetchError)
def handle_data_fetch_error(e):
    logger.error("Request failed: %s (cause: %r)", e, e.__cause__)
    return jsonify({"status": "error", "message": str(e)}), 500


# --- Páginas ---
@flask_app.route("/dashboard", methods=["GET"])
async def dashboard():
    async with db.supabase_session() as supabase_client:
        revenue, latest_invoices, card_data = await asyncio.gather(
            db.fetch_revenue(supabase_client),
            db.fetch_latest_invoices(supabase_client),
            db.fetch_card_data(supabase_client),
        )
    return jsonify({
        "revenue": revenue,
        "latest_invoices": latest_invoices,
        "cards": card_data,
    })


@flask_app.route("/dashboard/revenue-chart.png", methods=["GET"])
async def revenue_chart():
    async with db.supabase_session() as supabase_client:
        revenue = await db.fetch_revenue(supabase_client)
    chart_buffer = charts.generate_revenue_chart(revenue)
    if chart_buffer is None:
        return jsonify({"status": "error", "message": "No revenue data available."}), 404
    return send_file(chart_buffer, mimetype="image/png", download_name="revenue_chart.png")


@flask_app.route("/invoices", methods=["GET"])
async def invoices():
    query = request.args.get("query", "")
    current_page = request.args.get("page", 1, type=int)
    async with db.supabase_session() as supabase_client:
        rows, total_pages = await asyncio.gather(
            db.fetch_filtered_invoices(supabase_client, query, current_page),
            db.fetch_invoices_pages(supabase_client, query),
        )
    return jsonify({
        "invoices": rows,
        "total_pages": total_pages,
        "current_page": current_page,
    })


@flask_app.route("/invoices/<invoice_id>", methods=["GET"])
async def invoice_detail(invoice_id):
    async with db.supabase_session() as supabase_client:
        invoice = await db.fetch_invoice_by_id(supabase_client, invoice_id)
    return jsonify(invoice)


@flask_app.route("/customers", methods=["GET"])
async def customers():
    async with db.supabase_session() as supabase_client:
        return jsonify(await db.fetch_customers(supabase_client))


@flask_app.route("/customers/table", methods=["GET"])
async def customers_table():
    query = request.args.get("query", "")
    async with db.supabase_session() as supabase_client:
        return jsonify(await db.fetch_filtered_customers(supabase_client, query))


# Servido pelo Gunicorn: gunicorn src.main:wsgi_app
wsgi_app = flask_app
