"""Account and admin actions behind the web UI's Account and Admin pages.

Every helper validates the form locally first, then calls the backend through
a :class:`~homerent.catalog.client.CatalogClient`. ``ValidationError`` and
``ApiError`` propagate so the page can show the message.
"""

from typing import Any, List, Mapping, Optional

import pandas as pd

from ..catalog.client import CatalogClient
from ..processing.clean import clean_available, clean_price, clean_text
from ..processing.validate import (
    EMAIL_RE,
    ValidationError,
    raise_for_errors,
    validate_appliance_form,
    validate_password_reset,
    validate_profile,
    validate_registration,
)
from ..utils.logging import get_logger

logger = get_logger(__name__)

USER_COLUMNS = ['_id', 'user', 'email', 'gender', 'isAdmin']
FEEDBACK_COLUMNS = ['user', 'email', 'rating', 'message', 'createdAt']


def is_admin(user: Optional[Mapping[str, Any]]) -> bool:
    return bool(user and user.get('isAdmin'))


# ── sign-in and registration ─────────────────────────────────────────
def sign_in(client: CatalogClient, username: str, password: str) -> dict:
    """Return the signed-in user's record."""
    username = clean_text(username)
    if not username or not password:
        raise ValidationError({'form': 'Please enter your username and password.'})
    return client.login(username, password)['user']


def register_account(client: CatalogClient, username: str, email: str, password: str,
                     gender: str, img_url: str = '', is_admin: bool = False) -> dict:
    raise_for_errors(validate_registration(username, email, password, gender))
    logger.info("Registering %s%s", clean_text(username), " (admin)" if is_admin else "")
    return client.register(
        clean_text(username),
        password,
        clean_text(email),
        gender=clean_text(gender).lower(),
        img_url=clean_text(img_url),
        is_admin=is_admin,
    )


# ── profile ──────────────────────────────────────────────────────────
def profile_changes(current: Mapping[str, Any], username: str, email: str) -> dict:
    """Only the fields that differ from ``current`` go to the backend."""
    raise_for_errors(validate_profile(username, email))
    username, email = clean_text(username), clean_text(email)
    changes = {}
    if username.lower() != clean_text(current.get('user')).lower():
        changes['newUsername'] = username
    if email != clean_text(current.get('email')):
        changes['email'] = email
    return changes


def update_profile(client: CatalogClient, current: Mapping[str, Any], username: str, email: str) -> dict:
    """Apply the edit and return the user as the backend now stores it."""
    changes = profile_changes(current, username, email)
    if not changes:
        return dict(current)
    client.update_user(current['user'], changes)
    return client.verify_user_update(changes.get('newUsername', current['user']))['user']


# ── password reset ───────────────────────────────────────────────────
def request_password_reset(client: CatalogClient, email: str) -> str:
    email = clean_text(email)
    if not EMAIL_RE.match(email):
        raise ValidationError({'email': 'Please enter a valid email address'})
    client.request_otp(email)
    return email


def complete_password_reset(client: CatalogClient, email: str, otp: str, new_password: str) -> dict:
    raise_for_errors(validate_password_reset(otp, new_password))
    otp = clean_text(otp)
    client.verify_otp(email, otp)
    return client.reset_password(email, otp, new_password)


# ── admin ────────────────────────────────────────────────────────────
def appliance_payload(form: Mapping[str, Any]) -> dict:
    raise_for_errors(validate_appliance_form(form))
    return {
        'name': clean_text(form.get('name')),
        'imgUrl': clean_text(form.get('imgUrl')),
        'price': clean_price(form.get('price')),
        'details': clean_text(form.get('details')),
        'available': clean_available(form.get('available', True)),
    }


def save_appliance(client: CatalogClient, form: Mapping[str, Any], appliance_id: Optional[str] = None) -> dict:
    """Insert a new appliance, or update ``appliance_id`` when given."""
    payload = appliance_payload(form)
    if appliance_id:
        logger.info("Updating appliance %s", appliance_id)
        return client.update_appliance(appliance_id, payload)
    logger.info("Adding appliance %s", payload['name'])
    return client.insert_appliance(payload)


def records_frame(rows: Optional[List[Mapping[str, Any]]], columns: List[str]) -> pd.DataFrame:
    """Table of backend records limited to ``columns``; missing keys come out blank."""
    frame = pd.DataFrame(list(rows or []))
    return frame.reindex(columns=columns).fillna('')
