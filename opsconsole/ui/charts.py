# opsconsole/ui/charts.py

import pandas as pd
import plotly.express as px

from opsconsole.core.projections import LabeledSeries

DELIVERY_COLORS = {"OnTime": "#4CAF50", "Late": "#F44336"}
FUEL_COLORS = ["rgba(75, 192, 192, 0.6)", "rgba(255, 206, 86, 0.6)", "rgba(255, 99, 132, 0.6)"]


def delivery_pie(series: LabeledSeries):
    df = pd.DataFrame({"status": list(series.labels), "deliveries": list(series.values)})
    fig = px.pie(
        df,
        names="status",
        values="deliveries",
        color="status",
        color_discrete_map=DELIVERY_COLORS,
        title=series.title,
    )
    fig.update_layout(legend=dict(orientation="h"))
    return fig


def fuel_cost_bar(series: LabeledSeries):
    df = pd.DataFrame({"traffic": list(series.labels), "cost": list(series.values)})
    fig = px.bar(
        df,
        x="traffic",
        y="cost",
        color="traffic",
        color_discrete_sequence=FUEL_COLORS,
        title=series.title,
        labels={"traffic": "Traffic Level", "cost": "Fuel Cost (Rs)"},
    )
    fig.update_layout(showlegend=False)
    return fig


def order_outcomes_frame(rows) -> pd.DataFrame:
    return pd.DataFrame([
        {
            "Order ID": r.order_id,
            "Value (Rs)": r.value_rs,
            "Driver": r.assigned_driver or "-",
            "Status": "On Time" if r.on_time else "Late",
            "Profit (Rs)": r.profit,
        }
        for r in rows
    ])
