import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date

import pandas as pd
import plotly.express as px
import streamlit as st

from ledger import config
from ledger.backup import backup_filename
from ledger.domain import CATEGORIES, CATEGORY_ICONS, EXPENSE, INCOME
from ledger.events import BUDGET_ALERT
from ledger.formatting import format_currency, format_date
from ledger.services import DashboardService
from ledger.storage import JsonFileStorage
from ledger.store import LedgerStore

config.configure_logging()
st.set_page_config(page_title="Expense Tracker", layout="wide")

today = date.today()

if "store" not in st.session_state:
    config.ensure_data_directories()
    st.session_state.store = LedgerStore.open(JsonFileStorage(), today)
    st.session_state.alerts = []
    st.session_state.store.bus.subscribe(
        BUDGET_ALERT, lambda event, payload: st.session_state.alerts.append(payload["alert"]) or {}
    )

store: LedgerStore = st.session_state.store
service = DashboardService(store)


def money(amount: float) -> str:
    return format_currency(amount, store.ledger.currency)


def show_error(result) -> None:
    st.error(result.get_error()["message"])


# --- Sidebar: settings, budget, backup ---
st.sidebar.markdown("### ⚙️ Settings")
currencies = list(config.CURRENCIES)
if store.ledger.currency not in currencies:
    currencies.append(store.ledger.currency)
currency = st.sidebar.selectbox(
    "Currency", currencies, index=currencies.index(store.ledger.currency)
)
if currency != store.ledger.currency:
    store.set_currency(currency)
    st.rerun()

st.sidebar.markdown("### 💰 Monthly Budget")
budget_input = st.sidebar.number_input("Budget", min_value=0.0, step=100.0, format="%.2f")
if st.sidebar.button("Set Budget"):
    result = store.set_budget(budget_input)
    if result.is_left():
        st.sidebar.error(result.get_error()["message"])
    else:
        st.rerun()

st.sidebar.markdown("### 💾 Backup")
st.sidebar.download_button(
    "⬇ Download Backup",
    store.export_backup(),
    file_name=backup_filename(today),
    mime="application/json",
)
upload = st.sidebar.file_uploader("Import Backup", type=["json"])
if upload is not None:
    st.sidebar.warning("Importing will overwrite all current data.")
    if st.sidebar.button("Confirm Import"):
        result = store.import_backup(upload.getvalue())
        if result.is_left():
            st.sidebar.error(f"Error: {result.get_error()['message']}")
        else:
            st.sidebar.success("Backup imported")
            st.rerun()

# --- Filters ---
st.title("💸 Expense Tracker")
f1, f2 = st.columns([3, 1])
with f1:
    search = st.text_input("Search", placeholder="Search descriptions")
with f2:
    category_filter = st.selectbox("Category", [""] + list(CATEGORIES),
                                   format_func=lambda c: c or "All")

dashboard = service.report(today, search, category_filter)

for alert in st.session_state.alerts:
    st.warning(alert)
st.session_state.alerts = []

# --- Totals ---
k1, k2, k3 = st.columns(3)
with k1:
    st.metric("Balance", money(dashboard.totals.balance))
with k2:
    st.metric("Income", money(dashboard.totals.income))
with k3:
    st.metric("Expenses", money(abs(dashboard.totals.expenses)))

progress = dashboard.budget.get_or_else(None)
if progress is not None:
    st.progress(progress.fill_width / 100)
    st.caption(
        f"Spent: {money(progress.spent)} · Remaining: {money(progress.remaining)}"
        f" · {progress.severity}"
    )

# --- Add transaction ---
with st.expander("➕ Add Transaction"):
    with st.form("transaction_form", clear_on_submit=True):
        c1, c2 = st.columns(2)
        with c1:
            description = st.text_input("Description")
            amount = st.number_input("Amount", min_value=0.0, step=1.0, format="%.2f")
            kind = st.radio("Type", [EXPENSE, INCOME], horizontal=True)
        with c2:
            category = st.selectbox(
                "Category", CATEGORIES,
                format_func=lambda c: f"{CATEGORY_ICONS[c]} {c}",
            )
            when = st.date_input("Date", value=today)
            is_recurring = st.checkbox("Repeat monthly")
        if st.form_submit_button("Add"):
            result = store.submit(description, amount, category, when, is_recurring, kind)
            if result.is_left():
                show_error(result)
            else:
                st.rerun()

list_tab, chart_tab, monthly_tab, insights_tab = st.tabs(
    ["🧾 Transactions", "📊 Chart", "📅 Monthly", "💡 Insights"]
)

with list_tab:
    if not dashboard.transactions:
        st.info("No transactions found")
    confirm = st.checkbox("Confirm deletions")
    for t in dashboard.transactions:
        c1, c2, c3, c4, c5 = st.columns([4, 2, 2, 2, 1])
        c1.write(t.description)
        c2.write(f"{CATEGORY_ICONS.get(t.category, '')} {t.category}")
        c3.write(money(t.amount))
        c4.write(format_date(t.date))
        if c5.button("×", key=f"del_{t.id}", disabled=not confirm):
            store.remove(t.id)
            st.rerun()

with chart_tab:
    if dashboard.by_category:
        df_cat = pd.DataFrame(
            {"Category": list(dashboard.by_category), "Total": list(dashboard.by_category.values())}
        )
        fig = px.pie(df_cat, values="Total", names="Category", hole=0.5,
                     title="Expenses by Category")
        st.plotly_chart(fig, use_container_width=True)
    else:
        st.info("No expenses yet")

with monthly_tab:
    if dashboard.monthly:
        df_month = pd.DataFrame([
            {
                "Month": m.label,
                "Income": money(m.income),
                "Expenses": money(abs(m.expenses)),
                "Net": money(m.net),
            }
            for m in dashboard.monthly
        ])
        st.table(df_month)
    else:
        st.info("No monthly data")

with insights_tab:
    for insight in dashboard.insights:
        st.markdown(f"- {insight.message}")
