# src/core/charts.py
import io
import math
from typing import List, Tuple, Union

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import pandas as pd

from src.core.models import Revenue

# Configurações globais para os gráficos (cores, fontes, etc.)
plt.style.use('seaborn-v0_8-darkgrid')
plt.rcParams['font.family'] = 'sans-serif'
plt.rcParams['font.size'] = 10
plt.rcParams['axes.labelsize'] = 12
plt.rcParams['axes.titlesize'] = 14

COLORS = {
    'Revenue': '#2563eb',
}

Y_AXIS_STEP = 1000


def generate_y_axis(revenue: List[Revenue]) -> Tuple[List[str], int]:
    """
    Rótulos do eixo Y em milhares, do topo até zero, e o valor do topo.
    O topo é a maior receita arredondada para cima no próximo múltiplo de 1000.
    Ex: maior receita 4800 -> (['$5K', '$4K', '$3K', '$2K', '$1K', '$0K'], 5000)
    """
    highest_record = max((month['revenue'] for month in revenue), default=0)
    top_label = math.ceil(highest_record / Y_AXIS_STEP) * Y_AXIS_STEP
    y_axis_labels = [f"${i // Y_AXIS_STEP}K" for i in range(top_label, -1, -Y_AXIS_STEP)]
    return y_axis_labels, top_label


def generate_revenue_chart(revenue: List[Revenue]) -> Union[io.BytesIO, None]:
    """Gera um gráfico de barras da receita por mês (na ordem de armazenamento)."""
    df_revenue = pd.DataFrame(revenue)
    if df_revenue.empty:
        return None

    y_axis_labels, top_label = generate_y_axis(revenue)

    fig, ax = plt.subplots(figsize=(12, 7))
    ax.bar(df_revenue['month'], df_revenue['revenue'], color=COLORS['Revenue'])

    ax.set_title('Recent Revenue', fontsize=16, fontweight='bold')
    ax.set_xlabel('Month')
    ax.set_ylim(0, max(top_label, Y_AXIS_STEP))
    ticks = list(range(top_label, -1, -Y_AXIS_STEP))
    ax.set_yticks(ticks)
    ax.set_yticklabels(y_axis_labels)
    ax.grid(axis='y', linestyle='--', alpha=0.7)

    fig.tight_layout()

    buf = io.BytesIO()
    fig.savefig(buf, format='png', dpi=150)
    buf.seek(0)
    plt.close(fig)
    return buf
