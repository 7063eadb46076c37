"""Plotly 차트 빌더 (매장 재고 금액, 주차별 계획 매출)."""

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go

from ..core.config import CONFIG


def store_value_figure(metrics: pd.DataFrame) -> go.Figure:
    """store_metrics 결과로 매장별 재고 금액 막대 차트를 만듭니다."""
    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=metrics["store"].tolist(),
            y=metrics["total_value"].tolist(),
            name="재고 금액",
            hovertemplate=f"%{{x}}<br>{CONFIG.ui.currency_symbol}%{{y:,.2f}}<extra></extra>",
        )
    )
    fig.update_layout(
        title="매장별 재고 금액",
        xaxis_title="매장",
        yaxis_title="재고 금액",
        margin=dict(l=20, r=20, t=50, b=20),
    )
    return fig


def weekly_sales_figure(long_rows: pd.DataFrame) -> go.Figure:
    """long 행으로 매장별 주차 계획 매출 누적 막대 차트를 만듭니다."""
    fig = go.Figure()
    if long_rows.empty:
        fig.update_layout(title="주차별 계획 매출 (데이터 없음)")
        return fig

    weekly = (
        long_rows.groupby(["store", "week_start"], sort=False)["sales_dollars"]
        .sum()
        .reset_index()
        .sort_values("week_start")
    )
    for store, grp in weekly.groupby("store", sort=False):
        fig.add_trace(
            go.Bar(x=grp["week_start"].tolist(), y=grp["sales_dollars"].tolist(), name=str(store))
        )
    fig.update_layout(
        barmode="stack",
        title="주차별 계획 매출",
        xaxis_title="주 시작일",
        yaxis_title="매출",
        margin=dict(l=20, r=20, t=50, b=20),
    )
    return fig
