# charts.py
import numpy as np
import pandas as pd
import plotly.express as px
from matplotlib.figure import Figure

from insights import ECO_COLORS, GREEN_LIMIT, YELLOW_LIMIT

CATEGORY_COLORS = {
    "Travel": "#43e97b",
    "Diet": "#38f9d7",
    "Shopping": "#ffca28",
}


def breakdown_bar(result):
    df = pd.DataFrame({
        "Category": ["Travel", "Diet", "Shopping"],
        "CO₂ (kg)": [result.travel, result.diet, result.shopping],
    })
    fig = px.bar(
        df,
        x="Category",
        y="CO₂ (kg)",
        color="Category",
        color_discrete_map=CATEGORY_COLORS,
        title="<b>Emissions by Category</b>",
        template="plotly_white",
    )
    fig.update_layout(showlegend=False, plot_bgcolor="rgba(0,0,0,0)", yaxis=dict(showgrid=False))
    return fig


def breakdown_pie(result):
    # negative diet cannot be drawn as a slice
    df = pd.DataFrame({
        "Category": ["Travel", "Diet", "Shopping"],
        "CO₂ (kg)": [max(0.0, result.travel), max(0.0, result.diet), max(0.0, result.shopping)],
    })
    return px.pie(df, values="CO₂ (kg)", names="Category", hole=0.4,
                  color="Category", color_discrete_map=CATEGORY_COLORS,
                  title="Emission Contribution by Category")


def history_line(labels, values, title="CO₂ over time"):
    df = pd.DataFrame({"Period": labels, "CO₂ (kg)": values})
    fig = px.line(df, x="Period", y="CO₂ (kg)", markers=True, title=f"<b>{title}</b>",
                  template="plotly_white")
    fig.update_traces(line_color="#43e97b", fill="tozeroy")
    fig.update_xaxes(type="category")
    return fig


def eco_gauge(total):
    """Polar gauge of the monthly total against the Green/Yellow/Red bands."""
    fig = Figure(figsize=(4, 4))
    ax = fig.add_subplot(projection='polar')
    ax.set_theta_offset(np.pi/2)
    ax.set_theta_direction(-1)
    # 25% headroom above the red threshold
    max_limit = YELLOW_LIMIT * 1.25
    display_value = min(max(total, 0.0), max_limit)
    theta_max = 0.75 * np.pi  # 135 degrees
    theta_min = -theta_max
    total_range = theta_max - theta_min

    bands = [(0, GREEN_LIMIT, ECO_COLORS["Green"]),
             (GREEN_LIMIT, YELLOW_LIMIT, ECO_COLORS["Yellow"]),
             (YELLOW_LIMIT, max_limit, ECO_COLORS["Red"])]
    ax.barh(1, total_range, height=0.4, left=theta_min, color='#f0f0f0', alpha=0.3)
    for low, high, color in bands:
        ax.barh(1, (high - low) / max_limit * total_range, height=0.4,
                left=theta_min + low / max_limit * total_range, color=color, alpha=0.7)
    # Needle
    needle_angle = theta_min + (display_value / max_limit) * total_range
    ax.plot([needle_angle, needle_angle], [0, 1.2], color='#2c3e50', lw=2.5)
    label_values = [0, GREEN_LIMIT, YELLOW_LIMIT, max_limit]
    ax.set_xticks([theta_min + (v / max_limit) * total_range for v in label_values])
    ax.set_xticklabels([f'{v:.0f}' for v in label_values], color='#666', fontsize=10)
    ax.text(0, 0, f'{total:.1f}\nkg CO₂', ha='center', va='center',
            fontsize=14, color='#2c3e50', fontweight='bold')
    ax.set_yticks([])
    ax.spines[:].set_visible(False)
    ax.set_title("Eco Rating", pad=20, fontsize=14, color='#2c3e50', fontweight='bold')
    fig.tight_layout()
    return fig
