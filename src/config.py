# src/config.py
import os
from dotenv import load_dotenv

load_dotenv()

# Supabase
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Listagens
ITEMS_PER_PAGE = 6
LATEST_INVOICES_LIMIT = 5
# Máximo de clientes no filtro customer_id.in.(...) da busca de faturas (tamanho da URL)
SEARCH_CUSTOMER_IDS_LIMIT = 200
