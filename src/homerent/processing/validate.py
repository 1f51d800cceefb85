"""Form validation for the budget box and the checkout, feedback, account and admin forms.

Validators return ``{field: message}`` dicts (empty when the form is valid);
``raise_for_errors`` turns such a dict into a :class:`ValidationError`.
"""

import math
import re
from datetime import date, timedelta
from typing import Any, Dict, Mapping, Optional

from ..config.rules import (
    CARD_PAYMENT_METHODS,
    DELIVERY_REQUIRED_FIELDS,
    DELIVERY_TIME_SLOTS,
    FEEDBACK_MAX_RATING,
    FEEDBACK_MIN_RATING,
    GENDERS,
    PAYMENT_METHODS,
)
from ..config.scoring_constants import MAX_START_DATE_DAYS_AHEAD
from .clean import clean_price
from .normalize import CARD_DIGITS, digits_only, parse_date

BUDGET_ERROR = "Please enter a valid budget greater than 0"

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
_LETTERS_RE = re.compile(r"^[a-zA-Z\s\-']+$")
_HOUSE_NUMBER_RE = re.compile(r'^[0-9a-zA-Z\-/]+$')
_ZIP_RE = re.compile(r'^[0-9a-zA-Z\-\s]+$')
_PHONE_RE = re.compile(r'^\+?[0-9\s\-()]{8,}$')
_EXPIRY_RE = re.compile(r'^(0[1-9]|1[0-2])/\d{2}$')
_CVV_RE = re.compile(r'^\d{3,4}$')
_OTP_RE = re.compile(r'^\d{6}$')


class ValidationError(ValueError):
    """One or more user-facing field errors."""

    def __init__(self, errors: Mapping[str, str]):
        self.errors = dict(errors)
        super().__init__(next(iter(self.errors.values()), "Invalid input"))

    @property
    def message(self) -> str:
        return str(self)


class BudgetValidationError(ValidationError):
    def __init__(self, message: str = BUDGET_ERROR):
        super().__init__({'budget': message})


def raise_for_errors(errors: Mapping[str, str]) -> None:
    if errors:
        raise ValidationError(errors)


def validate_budget(value: Any) -> float:
    """Return the budget as a positive float or raise :class:`BudgetValidationError`."""
    if value is None or isinstance(value, bool):
        raise BudgetValidationError()
    try:
        budget = float(str(value).strip())
    except ValueError:
        raise BudgetValidationError() from None
    if math.isnan(budget) or math.isinf(budget) or budget <= 0:
        raise BudgetValidationError()
    return budget


def _text(value: Any) -> str:
    return '' if value is None else str(value)


def validate_delivery_field(name: str, value: Any) -> str:
    """Return the error message for one delivery field, '' when it is valid."""
    value = _text(value)
    blank = not value.strip()
    if name == 'area':
        if blank:
            return 'Area is required'
        if not _LETTERS_RE.match(value):
            return 'Area should contain only letters and spaces'
    elif name == 'city':
        if blank:
            return 'City is required'
        if not _LETTERS_RE.match(value):
            return 'City should contain only letters and spaces'
    elif name == 'street':
        if blank:
            return 'Street address is required'
        if len(value) < 5:
            return 'Street address is too short'
    elif name == 'number':
        if blank:
            return 'House number is required'
        if not _HOUSE_NUMBER_RE.match(value):
            return 'Enter a valid house/apartment number'
    elif name == 'zipCode':
        if blank:
            return 'Zip code is required'
        if not _ZIP_RE.match(value):
            return 'Enter a valid zip code'
    elif name == 'phone':
        if blank:
            return 'Phone number is required'
        if not _PHONE_RE.match(value):
            return 'Enter a valid phone number'
    elif name == 'preferredTime':
        if value and value not in DELIVERY_TIME_SLOTS:
            return 'Select a delivery time'
    return ''


def validate_delivery_form(form: Mapping[str, Any]) -> Dict[str, str]:
    errors = {}
    for field in DELIVERY_REQUIRED_FIELDS + ('preferredTime',):
        error = validate_delivery_field(field, form.get(field))
        if error:
            errors[field] = error
    return errors


def validate_payment_form(form: Mapping[str, Any], today: Optional[date] = None) -> Dict[str, str]:
    today = today or date.today()
    errors = {}

    email = _text(form.get('email')).strip()
    if not email:
        errors['email'] = 'Email is required'
    elif not EMAIL_RE.match(email):
        errors['email'] = 'Please enter a valid email address'

    start = parse_date(form.get('startDate'))
    if start is None:
        errors['startDate'] = 'Rental start date is required'
    elif start < today:
        errors['startDate'] = 'Start date cannot be in the past'
    elif start > today + timedelta(days=MAX_START_DATE_DAYS_AHEAD):
        errors['startDate'] = 'Start date must be within one year'

    method = _text(form.get('paymentMethod'))
    if method not in PAYMENT_METHODS:
        errors['paymentMethod'] = 'Select a payment method'
    elif method in CARD_PAYMENT_METHODS:
        if len(digits_only(form.get('cardNumber'))) != CARD_DIGITS:
            errors['cardNumber'] = 'Enter a valid 16-digit card number'
        if not _EXPIRY_RE.match(_text(form.get('expiryDate'))):
            errors['expiryDate'] = 'Enter expiry date as MM/YY'
        if not _CVV_RE.match(_text(form.get('cvv'))):
            errors['cvv'] = 'Enter a valid CVV'

    return errors


def validate_feedback(message: Any, rating: Any) -> Dict[str, str]:
    if not _text(message).strip():
        return {'message': 'Please enter your feedback message.'}
    try:
        stars = int(rating)
    except (TypeError, ValueError):
        stars = 0
    if not FEEDBACK_MIN_RATING <= stars <= FEEDBACK_MAX_RATING:
        return {'rating': 'Please select a rating.'}
    return {}


def validate_profile(username: Any, email: Any) -> Dict[str, str]:
    errors = {}
    if len(_text(username).strip()) < 3:
        errors['username'] = 'Username must be at least 3 characters long'
    if not EMAIL_RE.match(_text(email).strip()):
        errors['email'] = 'Please enter a valid email address'
    return errors


def validate_registration(username: Any, email: Any, password: Any, gender: Any) -> Dict[str, str]:
    if not all(_text(v).strip() for v in (username, email, password, gender)):
        return {'form': 'Please fill in all required fields (Username, Email, Password, Gender).'}
    errors = validate_profile(username, email)
    if _text(gender).lower() not in GENDERS:
        errors['gender'] = 'Select a gender'
    return errors


def validate_password_reset(otp: Any, new_password: Any) -> Dict[str, str]:
    errors = {}
    if not _OTP_RE.match(_text(otp).strip()):
        errors['otp'] = 'Enter the 6-digit code from your email'
    if not _text(new_password):
        errors['newPassword'] = 'Please enter a new password'
    return errors


def validate_appliance_form(form: Mapping[str, Any]) -> Dict[str, str]:
    """Name, price and details are required; the price must be a positive number."""
    if not all(_text(form.get(k)).strip() for k in ('name', 'price', 'details')):
        return {'form': 'Please fill in all required fields.'}
    if clean_price(form.get('price')) <= 0:
        return {'price': 'Enter a valid price greater than 0'}
    return {}
