"""Streamlit front end for the finance tracker API.

Run with: streamlit run finance_tracker/client/streamlit_app.py
"""

from datetime import date
from typing import Optional

import pandas as pd
import plotly.express as px
import streamlit as st

from finance_tracker.client.api_client import ApiClientError, FinanceApiClient
from finance_tracker.config import get_settings

PAGE_SIZE = 20
ROLES = ["admin", "user", "read-only"]
TYPES = ["expense", "income"]


def get_client() -> FinanceApiClient:
    return FinanceApiClient(get_settings().API_BASE_URL, token=st.session_state.get("token"))


def show_error(error: ApiClientError) -> None:
    if error.status_code in (401, 403) and error.message in ("Unauthorized", "Forbidden"):
        logout()
        st.warning("Your session has expired, please sign in again.")
        return
    st.error(error.message)
    for item in error.errors:
        st.caption(f"{item.get('field')}: {item.get('message')}")


def logout() -> None:
    for key in ("token", "user", "page"):
        st.session_state.pop(key, None)


# ---------------- Auth views ----------------

def auth_view() -> None:
    st.title("💰 Personal Finance Tracker")
    login_tab, register_tab = st.tabs(["Login", "Register"])

    with login_tab:
        with st.form("login_form"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Login")
        if submitted:
            with get_client() as client:
                try:
                    data = client.login(email, password)
                except ApiClientError as e:
                    show_error(e)
                else:
                    st.session_state.token = data["token"]
                    st.session_state.user = data["user"]
                    st.rerun()

    with register_tab:
        with st.form("register_form"):
            email = st.text_input("Email", key="register_email")
            username = st.text_input("Username")
            password = st.text_input("Password", type="password", key="register_password")
            submitted = st.form_submit_button("Create account")
        if submitted:
            with get_client() as client:
                try:
                    data = client.register(email, username, password)
                except ApiClientError as e:
                    show_error(e)
                else:
                    st.session_state.token = data["token"]
                    st.session_state.user = data["user"]
                    st.rerun()


# ---------------- Dashboard ----------------

def dashboard_view(client: FinanceApiClient) -> None:
    st.header("Dashboard")
    year = st.number_input("Year", min_value=2000, max_value=2100, value=date.today().year, step=1)

    try:
        months = client.monthly_analytics(int(year))
        categories = client.category_breakdown()
        trends = client.trends()
    except ApiClientError as e:
        show_error(e)
        return

    monthly = pd.DataFrame(months, columns=["month", "income", "expense", "net"])
    col1, col2, col3 = st.columns(3)
    col1.metric("Income", f"{monthly['income'].sum():,.2f}")
    col2.metric("Expense", f"{monthly['expense'].sum():,.2f}")
    col3.metric("Net", f"{monthly['net'].sum():,.2f}")

    if monthly.empty:
        st.info("No transactions recorded for this year.")
    else:
        fig = px.bar(
            monthly,
            x="month",
            y=["income", "expense"],
            barmode="group",
            title="Monthly income and expense",
        )
        st.plotly_chart(fig, use_container_width=True)

    left, right = st.columns(2)
    with left:
        breakdown = pd.DataFrame(categories, columns=["category", "amount", "percentage", "count"])
        if breakdown.empty:
            st.info("No expenses to break down.")
        else:
            fig = px.pie(breakdown, names="category", values="amount", title="Expenses by category")
            st.plotly_chart(fig, use_container_width=True)
    with right:
        trend = pd.DataFrame(trends, columns=["period", "type", "value"])
        if trend.empty:
            st.info("No activity in the last 12 months.")
        else:
            fig = px.line(trend, x="period", y="value", color="type", markers=True, title="12-month trend")
            st.plotly_chart(fig, use_container_width=True)


# ---------------- Transactions ----------------

def transaction_form(
    client: FinanceApiClient, category_names, existing: Optional[dict] = None
) -> None:
    key = f"tx_form_{existing['id']}" if existing else "tx_form_new"
    with st.form(key):
        amount = st.number_input(
            "Amount",
            min_value=0.01,
            value=float(existing["amount"]) if existing else 1.0,
            step=0.01,
        )
        tx_type = st.selectbox(
            "Type", TYPES, index=TYPES.index(existing["type"]) if existing else 0
        )
        options = list(category_names) or ["Other"]
        if existing and existing["category"] not in options:
            options.append(existing["category"])
        category = st.selectbox(
            "Category",
            options,
            index=options.index(existing["category"]) if existing else 0,
        )
        day = st.date_input(
            "Date", value=date.fromisoformat(existing["date"]) if existing else date.today()
        )
        description = st.text_input(
            "Description", value=(existing.get("description") or "") if existing else ""
        )
        submitted = st.form_submit_button("Save" if existing else "Add transaction")

    if not submitted:
        return
    try:
        if existing:
            client.update_transaction(
                existing["id"],
                amount=amount,
                type=tx_type,
                category=category,
                date=day,
                description=description,
            )
            st.success("Transaction updated")
        else:
            client.create_transaction(amount, tx_type, category, day, description or None)
            st.success("Transaction added")
    except ApiClientError as e:
        show_error(e)


def transactions_view(client: FinanceApiClient, user: dict) -> None:
    st.header("Transactions")
    can_write = user["role"] != "read-only"

    try:
        category_names = [c["name"] for c in client.list_categories()]
    except ApiClientError as e:
        show_error(e)
        category_names = []

    with st.expander("Filters", expanded=False):
        category = st.selectbox("Category", [""] + category_names)
        description = st.text_input("Description contains")
        start = st.date_input("From", value=None)
        end = st.date_input("To", value=None)

    page = st.session_state.get("page", 1)
    try:
        result = client.list_transactions(
            category=category or None,
            description=description or None,
            start_date=start,
            end_date=end,
            page=page,
            limit=PAGE_SIZE,
        )
    except ApiClientError as e:
        show_error(e)
        return

    rows = result["transactions"]
    if rows:
        st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
    else:
        st.info("No transactions match the current filters.")

    prev_col, info_col, next_col = st.columns([1, 2, 1])
    if prev_col.button("◀ Previous", disabled=page <= 1):
        st.session_state.page = page - 1
        st.rerun()
    info_col.write(f"Page {result['page']} of {max(result['pages'], 1)} ({result['total']} total)")
    if next_col.button("Next ▶", disabled=page >= result["pages"]):
        st.session_state.page = page + 1
        st.rerun()

    if not can_write:
        st.caption("Read-only accounts cannot change transactions.")
        return

    st.subheader("Add transaction")
    transaction_form(client, category_names)

    if rows:
        st.subheader("Edit or delete")
        selected_id = st.selectbox(
            "Transaction",
            [row["id"] for row in rows],
            format_func=lambda tx_id: next(
                f"#{r['id']} {r['date']} {r['category']} {r['amount']:.2f}"
                for r in rows
                if r["id"] == tx_id
            ),
        )
        selected = next(row for row in rows if row["id"] == selected_id)
        transaction_form(client, category_names, existing=selected)
        if st.button("Delete transaction", type="primary"):
            try:
                st.success(client.delete_transaction(selected_id))
            except ApiClientError as e:
                show_error(e)


# ---------------- Users (admin) ----------------

def users_view(client: FinanceApiClient) -> None:
    st.header("Users")
    try:
        users = client.list_users()
    except ApiClientError as e:
        show_error(e)
        return

    st.dataframe(pd.DataFrame(users), use_container_width=True, hide_index=True)

    with st.form("role_form"):
        user_id = st.selectbox(
            "User",
            [u["id"] for u in users],
            format_func=lambda uid: next(u["email"] for u in users if u["id"] == uid),
        )
        role = st.selectbox("Role", ROLES)
        submitted = st.form_submit_button("Update role")
    if submitted:
        try:
            updated = client.update_user_role(user_id, role)
            st.success(f"{updated['email']} is now {updated['role']}")
        except ApiClientError as e:
            show_error(e)


def main() -> None:
    st.set_page_config(page_title="Finance Tracker", layout="wide", page_icon="💰")

    if not st.session_state.get("token"):
        auth_view()
        return

    user = st.session_state.user
    st.sidebar.write(f"Signed in as **{user['username']}** ({user['role']})")
    views = ["Dashboard", "Transactions"]
    if user["role"] == "admin":
        views.append("Users")
    view = st.sidebar.radio("Navigation", views)
    if st.sidebar.button("Logout"):
        logout()
        st.rerun()

    with get_client() as client:
        if view == "Dashboard":
            dashboard_view(client)
        elif view == "Transactions":
            transactions_view(client, user)
        else:
            users_view(client)


if __name__ == "__main__":
    main()
