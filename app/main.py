"""
Streamlit Frontend for Expense Tracker

The UI is an adapter only:
1. Read form fields
2. Call the LedgerService
3. Render the OperationResult it returns

No ledger rule lives here. Deletions ask for confirmation before calling
the service; everything else is passed straight through.
"""

from datetime import date

import plotly.graph_objects as go
import streamlit as st

from expense_tracker.config import validate_all_settings
from expense_tracker.models.expense import Expense, ExpenseCategory, OperationResult
from expense_tracker.orchestrator import LedgerService, create_app_components
from expense_tracker.queries import filter_expenses


CATEGORY_COLORS = {
    ExpenseCategory.FOOD: "#8884d8",
    ExpenseCategory.TRAVEL: "#82ca9d",
    ExpenseCategory.SHOPPING: "#ffc658",
    ExpenseCategory.BILLS: "#8dd1e1",
    ExpenseCategory.ENTERTAINMENT: "#a4de6c",
    ExpenseCategory.OTHER: "#d0ed57",
}


st.set_page_config(
    page_title="Expense Tracker",
    page_icon="💰",
    layout="wide",
)


@st.cache_resource
def get_service() -> LedgerService:
    """Get or create the ledger service (cached for the server's lifetime)."""
    return create_app_components()


def show_result(result: OperationResult) -> None:
    """Render an operation outcome as a toast."""
    if result.success and result.changed:
        st.toast(f"✅ {result.message}")
    elif result.success:
        st.toast(f"ℹ️ {result.message}")
    elif result.error_kind is None:
        st.toast(result.message)
    else:
        st.toast(f"⚠️ {result.message}")

    for warning in result.warnings:
        st.toast(f"🔎 {warning}")


def main():
    """Main application entry point."""
    checks = validate_all_settings()
    if not all(checks.get(group) for group in ("ledger", "app")):
        st.error("Configuration error. Check your .env file.")
        for key, value in checks.items():
            if key.endswith("_error"):
                st.code(value)
        st.stop()

    service = get_service()

    st.title("💰 Expense Tracker")

    col_wallet, col_charts = st.columns([1, 2])

    with col_wallet:
        render_wallet(service)

    with col_charts:
        render_charts(service)
        st.markdown("---")
        render_history(service)


def render_wallet(service: LedgerService):
    """Wallet balance, quick summary and the add forms."""
    snapshot = service.snapshot()
    overview = service.overview()

    st.subheader("Wallet Balance")
    st.metric("Wallet Balance", service.format_amount(snapshot.balance))

    st.markdown("#### Quick Summary")
    st.write(f"Total Expenses: {overview.expense_count}")
    if overview.latest_expense:
        latest = overview.latest_expense
        st.write(f"Last expense: {latest.title} - {service.format_amount(latest.price)}")
    else:
        st.write("Last expense: none yet")

    with st.expander("➕ Add Income"):
        with st.form("add_income", clear_on_submit=True):
            amount = st.number_input("Income Amount", min_value=0.0, step=1.0, format="%.2f")
            if st.form_submit_button("Add Balance", type="primary"):
                show_result(service.add_income(amount))
                st.rerun()

    with st.expander("➕ Add Expense"):
        with st.form("add_expense", clear_on_submit=True):
            title = st.text_input("Title")
            price = st.number_input("Amount", min_value=0.0, step=1.0, format="%.2f")
            category = st.selectbox(
                "Category",
                options=[None] + list(ExpenseCategory),
                format_func=lambda c: "Select" if c is None else c.value,
            )
            expense_date = st.date_input("Date", value=date.today())
            if st.form_submit_button("Add Expense", type="primary"):
                show_result(service.add_expense(title, price, category, expense_date))
                st.rerun()


def render_charts(service: LedgerService):
    """Category pie chart and per-category bar chart."""
    totals = service.category_totals()
    trend = service.category_trend()

    col_pie, col_bar = st.columns(2)

    with col_pie:
        st.markdown("#### Expense Summary")
        if totals:
            categories = list(totals)
            fig = go.Figure(go.Pie(
                labels=[c.value for c in categories],
                values=[float(totals[c]) for c in categories],
                hole=0.4,
                marker={"colors": [CATEGORY_COLORS.get(c, "#cccccc") for c in categories]},
            ))
            fig.update_layout(height=260, margin={"t": 10, "b": 10, "l": 10, "r": 10})
            st.plotly_chart(fig, use_container_width=True)
        else:
            st.caption("No expenses yet")

    with col_bar:
        st.markdown("#### Expense Trends")
        if trend:
            fig = go.Figure(go.Bar(
                x=[point.category.value for point in trend],
                y=[float(point.amount) for point in trend],
                marker={"color": [CATEGORY_COLORS.get(p.category, "#8884d8") for p in trend]},
            ))
            fig.update_layout(height=260, margin={"t": 10, "b": 10, "l": 10, "r": 10})
            st.plotly_chart(fig, use_container_width=True)
        else:
            st.caption("No expenses yet")


def render_history(service: LedgerService):
    """Expense list with filters, edit and delete."""
    st.markdown("#### Expense History")

    category_filter = st.selectbox(
        "Filter by Category",
        options=[None] + list(ExpenseCategory),
        format_func=lambda c: "All Categories" if c is None else c.value,
    )

    expenses = filter_expenses(service.snapshot().expenses, category=category_filter)
    if not expenses:
        st.caption("No expenses recorded.")
        return

    for expense in expenses:
        render_expense_row(service, expense)


def render_expense_row(service: LedgerService, expense: Expense):
    col_info, col_price, col_actions = st.columns([4, 1, 2])

    with col_info:
        st.markdown(f"**{expense.title}**")
        st.caption(f"{expense.category.value} • {expense.date.isoformat()}")

    with col_price:
        st.markdown(f"**{service.format_amount(expense.price)}**")

    with col_actions:
        with st.popover("✏️ Edit"):
            render_edit_form(service, expense)
        with st.popover("🗑️ Delete"):
            st.write("Delete this expense?")
            confirmed = st.checkbox("Yes, delete it", key=f"confirm_{expense.id}")
            if st.button("Delete", key=f"delete_{expense.id}", disabled=not confirmed):
                show_result(service.delete_expense(expense.id, confirmed=confirmed))
                st.rerun()


def render_edit_form(service: LedgerService, expense: Expense):
    categories = list(ExpenseCategory)
    with st.form(f"edit_{expense.id}"):
        title = st.text_input("Title", value=expense.title)
        price = st.number_input(
            "Amount",
            min_value=0.0,
            value=float(expense.price),
            step=1.0,
            format="%.2f",
        )
        category = st.selectbox(
            "Category",
            options=categories,
            index=categories.index(expense.category),
            format_func=lambda c: c.value,
        )
        expense_date = st.date_input("Date", value=expense.date)
        if st.form_submit_button("Save", type="primary"):
            show_result(service.edit_expense(expense.id, title, price, category, expense_date))
            st.rerun()


if __name__ == "__main__":
    main()
