"""
Retail Planning Grid 메인 엔트리 포인트

매장/SKU 로스터와 주차별 판매 계획을 Streamlit 화면에 연결합니다.
계산 로직은 모두 retail_planning 패키지에 있고, 이 파일은 위젯 바인딩만 담당합니다.

실행:
    streamlit run planning_app.py
"""

from __future__ import annotations

import json
import logging
from typing import List

import pandas as pd
import streamlit as st

# 로깅 설정
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

from retail_planning.analytics import planning_summary, sku_category_metrics, store_metrics
from retail_planning.core.config import CONFIG
from retail_planning.data_sources import (
    dump_records,
    load_records,
    sample_patches,
    sample_roster,
)
from retail_planning.domain import UnitPatch
from retail_planning.planning import (
    PlanningEngine,
    filter_rows,
    wide_column_groups,
)
from retail_planning.ui import format_currency, format_percent, style_difference
from retail_planning.ui.adapters import handle_domain_errors
from retail_planning.ui.charts import store_value_figure, weekly_sales_figure

ENGINE_KEY = "planning_engine"


def _get_engine() -> PlanningEngine:
    """세션별 엔진을 가져오거나 샘플 로스터로 새로 만듭니다."""
    engine = st.session_state.get(ENGINE_KEY)
    if engine is None:
        engine = PlanningEngine(sample_roster(), year=CONFIG.planning.default_year)
        engine.bulk_apply(sample_patches(engine.weeks(), roster=engine.roster))
        st.session_state[ENGINE_KEY] = engine
        logger.info("Planning engine initialised with sample roster")
    return engine


def _collect_patches(original: pd.DataFrame, edited: pd.DataFrame) -> List[UnitPatch]:
    """data_editor 편집 결과에서 units가 바뀐 행만 패치로 변환합니다."""
    changed = original["units"].ne(edited["units"])
    patches = []
    for idx in edited.index[changed]:
        row = edited.loc[idx]
        patches.append(
            UnitPatch(
                store_id=row["store_id"],
                sku_id=row["sku_id"],
                week_id=row["week_id"],
                units=row["units"],
            )
        )
    return patches


def render_sidebar(engine: PlanningEngine) -> dict:
    st.sidebar.header("필터")
    year = st.sidebar.number_input(
        "계획 연도", min_value=2000, max_value=2100, value=engine.year, step=1
    )
    engine.year = int(year)

    store_names = ["(전체)"] + [s.name for s in engine.roster.sorted_stores()]
    categories = ["(전체)"] + sorted({k.category for k in engine.roster.skus})
    store = st.sidebar.selectbox("매장", store_names)
    category = st.sidebar.selectbox("카테고리", categories)
    dense = st.sidebar.checkbox("모든 주차 표시", value=CONFIG.planning.dense_long_rows)

    # ========================================
    # 가격/원가 변경
    # ========================================
    st.sidebar.header("가격 변경")
    skus = engine.roster.sorted_skus()
    if skus:
        sku = st.sidebar.selectbox("SKU", skus, format_func=lambda k: k.name)
        price = st.sidebar.number_input("판매가", value=float(sku.price), step=0.5)
        cost = st.sidebar.number_input("원가", value=float(sku.cost), step=0.5)
        if st.sidebar.button("가격 적용"):
            with handle_domain_errors():
                touched = engine.on_price_or_cost_changed(sku.id, price, cost)
                st.sidebar.success(f"{touched}개 셀 재계산 완료")

    # ========================================
    # 계획 데이터 저장/불러오기
    # ========================================
    st.sidebar.header("계획 데이터")
    st.sidebar.download_button(
        "JSON 다운로드",
        data=json.dumps(dump_records(engine.store), ensure_ascii=False, indent=2),
        file_name="planning_records.json",
        mime="application/json",
    )
    uploaded = st.sidebar.file_uploader("JSON 불러오기", type=["json"])
    if uploaded is not None and st.sidebar.button("불러오기 적용"):
        with handle_domain_errors():
            result = load_records(json.load(uploaded), engine.roster.price_cost)
            engine.store = result.store
            if result.ok:
                st.sidebar.success(f"{result.loaded}건 불러오기 완료")
            else:
                st.sidebar.warning(
                    f"{result.loaded}건 반영, {len(result.dropped)}건 제외 "
                    f"(행 {', '.join(str(i + 1) for i in result.dropped_indices)})"
                )

    if st.sidebar.button("계획 초기화"):
        engine.on_roster_reset()

    return {
        "store": None if store == "(전체)" else store,
        "category": None if category == "(전체)" else category,
        "dense": dense,
    }


def render_grid(engine: PlanningEngine, filters: dict) -> None:
    st.subheader("주차별 판매 계획")
    long_rows = filter_rows(
        engine.long_rows(dense=filters["dense"]),
        store=filters["store"],
        category=filters["category"],
    )
    if long_rows.empty:
        st.info("표시할 계획이 없습니다. '모든 주차 표시'를 켜고 수량을 입력하세요.")
        return

    editable = long_rows[
        ["store_id", "sku_id", "store", "sku", "week_id", "units",
         "sales_dollars", "gm_dollars", "gm_percentage", "difference"]
    ]
    edited = st.data_editor(
        editable,
        hide_index=True,
        height=CONFIG.ui.grid_height,
        disabled=[c for c in editable.columns if c != "units"],
        column_config={
            "store_id": None,
            "sku_id": None,
            "units": st.column_config.NumberColumn("판매 수량", min_value=0, step=1),
            "sales_dollars": st.column_config.NumberColumn("매출", format="$%.2f"),
            "gm_dollars": st.column_config.NumberColumn("GM", format="$%.2f"),
            "gm_percentage": st.column_config.NumberColumn("GM %", format="%.2f%%"),
        },
        key="planning_editor",
    )
    patches = _collect_patches(editable, edited)
    if patches and st.button(f"변경 {len(patches)}건 저장"):
        applied = False
        with handle_domain_errors():
            engine.bulk_apply(patches)
            applied = True
        if applied:
            st.rerun()


def render_summary(engine: PlanningEngine, filters: dict) -> None:
    wide = filter_rows(engine.wide_rows(), store=filters["store"], category=filters["category"])
    summary = planning_summary(wide)

    st.subheader("매장별 계획 요약")
    display = summary.assign(
        total_sales=summary["total_sales"].map(format_currency),
        total_gm=summary["total_gm"].map(format_currency),
        gm_percentage=summary["gm_percentage"].map(format_percent),
    )
    st.dataframe(display, hide_index=True, use_container_width=True)

    st.subheader("SKU별 재고 차이")
    st.dataframe(
        style_difference(
            wide[["store", "sku", "current_stock", "required_stock", "difference"]]
        ),
        hide_index=True,
        use_container_width=True,
    )

    with st.expander("월별 컬럼 구성"):
        for group in wide_column_groups(engine.weeks()):
            st.markdown(
                f"**{group['label']}**: " + ", ".join(w["label"] for w in group["weeks"])
            )


def render_charts(engine: PlanningEngine) -> None:
    st.plotly_chart(store_value_figure(store_metrics(engine.roster)), use_container_width=True)
    st.plotly_chart(weekly_sales_figure(engine.long_rows()), use_container_width=True)
    st.dataframe(sku_category_metrics(engine.roster), hide_index=True)


def main() -> None:
    st.set_page_config(page_title="Planning Grid", layout="wide")
    st.title("Planning Grid")
    logger.info("Planning Grid 시작")

    engine = _get_engine()
    filters = render_sidebar(engine)

    grid_tab, summary_tab, chart_tab = st.tabs(["그리드", "요약", "차트"])
    with grid_tab:
        render_grid(engine, filters)
    with summary_tab:
        render_summary(engine, filters)
    with chart_tab:
        render_charts(engine)


if __name__ == "__main__":
    main()
