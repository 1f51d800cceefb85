import time
from datetime import date
from typing import List

import pandas as pd
import streamlit as st

from homerent.app import accounts
from homerent.app.preferences import DisplayPreferences
from homerent.catalog.client import ApiError, CatalogClient
from homerent.catalog.poller import CatalogPoller
from homerent.catalog.search import search, suggest
from homerent.checkout.order import (
    RentalOrder,
    apply_delivery,
    apply_payment,
    start_booking,
    submit_booking,
)
from homerent.checkout.pipeline import confirm_delivery
from homerent.checkout.pricing import compute_totals
from homerent.config.rules import (
    BANK_TRANSFER_DETAILS,
    CARD_PAYMENT_METHODS,
    DELIVERY_TIME_SLOTS,
    GENDERS,
    PAYMENT_METHODS,
)
from homerent.config.settings import (
    API_BASE_URL,
    CATALOG_POLL_SECONDS,
    PAYMENT_PROCESSING_DELAY,
    RECOMMENDATION_DELAY,
)
from homerent.processing.normalize import format_amount, format_price
from homerent.processing.read import load_catalog
from homerent.processing.validate import BudgetValidationError, ValidationError
from homerent.recommend.engine import recommend

PAGES = ["Catalog", "Smart Recommendation", "Booking", "Payment", "Delivery", "Feedback", "Account", "Admin"]

st.set_page_config(page_title="HomeRent", page_icon="🏠", layout="wide")


@st.cache_resource(show_spinner=False)
def _poller(base_url: str) -> CatalogPoller:
    poller = CatalogPoller(CatalogClient(base_url), interval=CATALOG_POLL_SECONDS)
    poller.start()
    return poller


def _appliances(poller: CatalogPoller) -> List[dict]:
    items = poller.snapshot.appliances
    if items:
        return items
    return load_catalog()


def _goto(page: str, state=None) -> None:
    st.session_state["goto"] = page
    st.session_state["nav_state"] = state
    st.rerun()


def _money(value) -> str:
    return f"{format_amount(value)} {prefs.currency}"


def _show_errors(exc: ValidationError) -> None:
    for message in exc.errors.values():
        st.error(message)


# ── session state ────────────────────────────────────────────────────
for key, default in (
    ("page", PAGES[0]),
    ("nav_state", None),
    ("dark_mode", False),
    ("recommendations", None),
    ("user", None),
    ("reset_email", None),
):
    if key not in st.session_state:
        st.session_state[key] = default
if "goto" in st.session_state:
    st.session_state["page"] = st.session_state.pop("goto")

# ── sidebar ──────────────────────────────────────────────────────────
st.sidebar.header("🏠 HomeRent")
st.sidebar.radio("Go to", PAGES, key="page")
st.sidebar.divider()
st.sidebar.toggle("Dark mode", key="dark_mode")
prefs = DisplayPreferences(dark_mode=st.session_state["dark_mode"])
st.markdown(f"<style>{prefs.css()}</style>", unsafe_allow_html=True)

poller = _poller(API_BASE_URL)
st.sidebar.subheader("Catalog")
if st.sidebar.button("🔄 Refresh now"):
    poller.refresh()
if poller.snapshot.error:
    st.sidebar.warning(poller.snapshot.error)
    st.sidebar.caption("Showing the local sample catalog.")
else:
    st.sidebar.caption(f"Auto-refresh every {CATALOG_POLL_SECONDS:.0f}s")
if st.session_state["user"]:
    st.sidebar.caption(f"👤 Signed in as {st.session_state['user']['user']}")

page = st.session_state["page"]

# ── Catalog ──────────────────────────────────────────────────────────
if page == "Catalog":
    st.title("Appliances Catalog")
    appliances = _appliances(poller)
    term = st.text_input("Search appliances", key="search_term")
    if term.strip():
        try:
            names = CatalogClient(API_BASE_URL).fetch_suggestions(term)
        except ApiError:
            names = suggest(appliances, term)
        if names:
            st.caption("Suggestions: " + " · ".join(names))

    matches = search(appliances, term)
    if not matches:
        st.info("No appliances found.")
    cols = st.columns(3)
    for i, item in enumerate(matches):
        with cols[i % 3]:
            st.markdown(
                f"<div class='rent-card'><b>{item['name']}</b><br>{item.get('details', '')}<br>"
                f"{format_price(item.get('price'), prefs.currency)}</div>",
                unsafe_allow_html=True,
            )
            if item.get("imgUrl"):
                st.image(item["imgUrl"], use_container_width=True)
            if item.get("available"):
                if st.button("Rent", key=f"rent_{item.get('id') or i}"):
                    _goto("Booking", {"appliance": item, "price": item.get("price")})
            else:
                st.caption("Currently unavailable")

# ── Smart Recommendation ─────────────────────────────────────────────
elif page == "Smart Recommendation":
    st.title("Smart Recommendation")
    st.markdown("Enter your budget and we'll suggest the appliances that make the most of it.")
    budget = st.text_input("Budget per day (OMR)", key="budget")
    if st.button("Get Recommendations"):
        try:
            with st.spinner("Finding the best matches..."):
                time.sleep(RECOMMENDATION_DELAY)
                st.session_state["recommendations"] = recommend(budget, _appliances(poller))
        except BudgetValidationError as exc:
            st.session_state["recommendations"] = None
            st.error(exc.message)

    results = st.session_state.get("recommendations")
    if results is not None:
        if not results:
            st.info("No appliances match your budget. Try increasing it.")
        else:
            table = pd.DataFrame(results)[["name", "price", "details", "score"]]
            table["score"] = table["score"].round(2)
            st.dataframe(table, use_container_width=True, hide_index=True)
            for i, item in enumerate(results):
                if st.button(f"Rent {item['name']}", key=f"rec_rent_{i}"):
                    _goto("Booking", {"appliance": item, "price": item.get("price")})

# ── Booking ──────────────────────────────────────────────────────────
elif page == "Booking":
    st.title("Rental Booking")
    order = start_booking(st.session_state.get("nav_state"))
    if not order.appliance:
        st.warning("No appliance selected. Pick one from the catalog first.")
    else:
        st.subheader(order.appliance["name"])
        st.caption(order.appliance.get("details", ""))
        st.write(f"Price per day: {_money(order.price_per_day)}")
    days = st.number_input("Rental duration (days)", min_value=1, value=1, step=1)
    totals = compute_totals(order.price_per_day, days)
    st.write(f"Rental amount: **{_money(totals.rental_amount)}**")
    st.write(f"Insurance deposit: **{_money(totals.insurance_deposit)}**")
    st.write(f"Final amount: **{_money(totals.final_amount)}**")
    agreed = st.checkbox(
        f"I agree to pay a refundable insurance deposit of {_money(totals.insurance_deposit)}"
    )
    if st.button("Proceed to Payment", disabled=not order.appliance):
        try:
            booked = submit_booking(order, days, agreed)
        except ValidationError as exc:
            _show_errors(exc)
        else:
            _goto("Payment", booked.to_payment_state())

# ── Payment ──────────────────────────────────────────────────────────
elif page == "Payment":
    st.title("Payment")
    order = RentalOrder.from_navigation_state(st.session_state.get("nav_state"))
    if order.appliance:
        st.subheader(order.appliance["name"])
    st.write(f"Rental ({order.days} day(s)): {_money(order.total_amount)}")
    st.write(f"Total to pay: **{_money(order.final_amount)}**")

    method = st.radio(
        "Payment method",
        list(PAYMENT_METHODS),
        format_func=lambda k: PAYMENT_METHODS[k],
        horizontal=True,
    )
    start = st.date_input("Rental start date", value=date.today(), min_value=date.today())
    st.caption(f"Rental period: {order.with_start_date(start).period_label}")
    with st.form("payment"):
        email = st.text_input("Email")
        card = {}
        if method in CARD_PAYMENT_METHODS:
            card["cardNumber"] = st.text_input("Card number", max_chars=19)
            card["expiryDate"] = st.text_input("Expiry date (MM/YY)", max_chars=5)
            card["cvv"] = st.text_input("CVV", max_chars=4, type="password")
        else:
            st.info(
                f"Bank: {BANK_TRANSFER_DETAILS['bankName']}  \n"
                f"Account: {BANK_TRANSFER_DETAILS['accountNumber']}  \n"
                f"IBAN: {BANK_TRANSFER_DETAILS['iban']}"
            )
        submitted = st.form_submit_button("Pay now")
    if submitted:
        form = {"email": email, "startDate": start, "paymentMethod": method, **card}
        try:
            paid = apply_payment(order, form)
        except ValidationError as exc:
            _show_errors(exc)
        else:
            with st.spinner("Processing payment..."):
                time.sleep(PAYMENT_PROCESSING_DELAY)
            _goto("Delivery", paid.to_delivery_state())

# ── Delivery ─────────────────────────────────────────────────────────
elif page == "Delivery":
    st.title("Delivery Details")
    order = RentalOrder.from_navigation_state(st.session_state.get("nav_state"))
    if order.appliance:
        st.caption(f"{order.appliance['name']} · {_money(order.final_amount)}")
    if order.start_date:
        st.caption(f"Rental period: {order.period_label}")
    with st.form("delivery"):
        c1, c2 = st.columns(2)
        form = {
            "area": c1.text_input("Area"),
            "city": c2.text_input("City"),
            "street": c1.text_input("Street"),
            "number": c2.text_input("House / apartment number"),
            "zipCode": c1.text_input("Zip code"),
            "phone": c2.text_input("Phone"),
        }
        form["preferredTime"] = st.selectbox(
            "Preferred delivery time",
            list(DELIVERY_TIME_SLOTS),
            format_func=lambda k: DELIVERY_TIME_SLOTS[k],
        )
        form["message"] = st.text_area("Message (optional)")
        submitted = st.form_submit_button("Confirm Delivery")
    if submitted:
        try:
            order = apply_delivery(order, form)
        except ValidationError as exc:
            _show_errors(exc)
        else:
            with st.spinner("Processing your order..."):
                confirmation = confirm_delivery(order)
            st.success(confirmation.message)
            for step in confirmation.timeline:
                mark = "✅" if step["status"] == "completed" else "⏳"
                st.markdown(f"{mark} {step['icon']} **{step['title']}** – {step['description']} "
                            f"_({step['time']})_")

# ── Feedback ─────────────────────────────────────────────────────────
elif page == "Feedback":
    st.title("Feedback")
    with st.form("feedback"):
        user = st.text_input("Name (optional)")
        email = st.text_input("Email (optional)")
        rating = st.select_slider("Rating", options=[0, 1, 2, 3, 4, 5], value=0,
                                  format_func=lambda r: "★" * r if r else "–")
        message = st.text_area("Your feedback")
        submitted = st.form_submit_button("Submit Feedback")
    if submitted:
        try:
            CatalogClient(API_BASE_URL).submit_feedback(message, rating, user=user, email=email)
        except ValidationError as exc:
            _show_errors(exc)
        except ApiError as exc:
            st.error(exc.message)
        else:
            st.success("Thank you for your feedback!")

# ── Account ──────────────────────────────────────────────────────────
elif page == "Account":
    st.title("Account")
    client = CatalogClient(API_BASE_URL)
    user = st.session_state["user"]
    if user:
        st.subheader(f"Signed in as {user['user']}")
        if st.button("Sign out"):
            st.session_state["user"] = None
            st.rerun()
        with st.form("profile"):
            username = st.text_input("Username", value=user["user"])
            email = st.text_input("Email", value=user["email"])
            submitted = st.form_submit_button("Save profile")
        if submitted:
            try:
                st.session_state["user"] = accounts.update_profile(client, user, username, email)
            except ValidationError as exc:
                _show_errors(exc)
            except ApiError as exc:
                st.error(exc.message)
            else:
                st.success("Profile updated successfully!")
    else:
        sign_in_tab, register_tab, reset_tab = st.tabs(["Sign in", "Register", "Forgot password"])
        with sign_in_tab:
            with st.form("sign_in"):
                username = st.text_input("Username")
                password = st.text_input("Password", type="password")
                submitted = st.form_submit_button("Sign in")
            if submitted:
                try:
                    st.session_state["user"] = accounts.sign_in(client, username, password)
                except ValidationError as exc:
                    _show_errors(exc)
                except ApiError as exc:
                    st.error(exc.message)
                else:
                    st.rerun()
        with register_tab:
            with st.form("register"):
                username = st.text_input("Username")
                email = st.text_input("Email")
                password = st.text_input("Password", type="password")
                gender = st.selectbox("Gender", GENDERS, format_func=str.title)
                img_url = st.text_input("Photo URL (optional)")
                submitted = st.form_submit_button("Create account")
            if submitted:
                try:
                    accounts.register_account(client, username, email, password, gender, img_url=img_url)
                except ValidationError as exc:
                    _show_errors(exc)
                except ApiError as exc:
                    st.error(exc.message)
                else:
                    st.success("Account created. You can sign in now.")
        with reset_tab:
            reset_email = st.session_state["reset_email"]
            if not reset_email:
                with st.form("request_otp"):
                    email = st.text_input("Email")
                    submitted = st.form_submit_button("Send code")
                if submitted:
                    try:
                        st.session_state["reset_email"] = accounts.request_password_reset(client, email)
                    except ValidationError as exc:
                        _show_errors(exc)
                    except ApiError as exc:
                        st.error(exc.message)
                    else:
                        st.rerun()
            else:
                st.caption(f"We sent a 6-digit code to {reset_email}.")
                with st.form("reset_password"):
                    otp = st.text_input("Code", max_chars=6)
                    new_password = st.text_input("New password", type="password")
                    submitted = st.form_submit_button("Reset password")
                if submitted:
                    try:
                        accounts.complete_password_reset(client, reset_email, otp, new_password)
                    except ValidationError as exc:
                        _show_errors(exc)
                    except ApiError as exc:
                        st.error(exc.message)
                    else:
                        st.session_state["reset_email"] = None
                        st.success("Password reset successful. You can sign in now.")
                if st.button("Use another email"):
                    st.session_state["reset_email"] = None
                    st.rerun()

# ── Admin ────────────────────────────────────────────────────────────
elif page == "Admin":
    st.title("Admin")
    if not accounts.is_admin(st.session_state["user"]):
        st.warning("Sign in with an admin account to manage appliances and users.")
    else:
        client = CatalogClient(API_BASE_URL)
        appliances_tab, users_tab, feedback_tab = st.tabs(["Appliances", "Users", "Feedback"])

        with appliances_tab:
            try:
                items = client.fetch_appliances()
            except ApiError as exc:
                st.error(exc.message)
                items = []
            by_id = {a["id"]: a for a in items}
            selected = st.selectbox(
                "Appliance",
                [None] + list(by_id),
                format_func=lambda i: "➕ New appliance" if i is None else by_id[i]["name"],
            )
            current = by_id.get(selected, {})
            with st.form(f"appliance_{selected or 'new'}"):
                form = {
                    "name": st.text_input("Name", value=current.get("name", "")),
                    "price": st.text_input("Price per day", value=str(current.get("price", ""))),
                    "details": st.text_area("Details", value=current.get("details", "")),
                    "imgUrl": st.text_input("Image URL", value=current.get("imgUrl") or ""),
                    "available": st.checkbox("Available", value=current.get("available", True)),
                }
                saved = st.form_submit_button("Save appliance")
            if saved:
                try:
                    accounts.save_appliance(client, form, selected)
                except ValidationError as exc:
                    _show_errors(exc)
                except ApiError as exc:
                    st.error(exc.message)
                else:
                    poller.refresh()
                    st.success("Appliance saved successfully!")
            if selected and st.button("Delete appliance"):
                try:
                    client.delete_appliance(selected)
                except ApiError as exc:
                    st.error(exc.message)
                else:
                    poller.refresh()
                    st.rerun()

        with users_tab:
            try:
                users = client.list_users()
            except ApiError as exc:
                st.error(exc.message)
                users = []
            st.dataframe(accounts.records_frame(users, accounts.USER_COLUMNS),
                         use_container_width=True, hide_index=True)
            others = {u["_id"]: u for u in users if u["_id"] != st.session_state["user"]["_id"]}
            if others:
                target = st.selectbox("User", list(others), format_func=lambda i: others[i]["user"])
                if st.button("Delete user"):
                    try:
                        client.delete_user(target)
                    except ApiError as exc:
                        st.error(exc.message)
                    else:
                        st.rerun()

        with feedback_tab:
            try:
                rows = client.list_feedback()
            except ApiError as exc:
                st.error(exc.message)
                rows = []
            if not rows:
                st.info("No feedback yet.")
            else:
                st.dataframe(accounts.records_frame(rows, accounts.FEEDBACK_COLUMNS),
                             use_container_width=True, hide_index=True)
