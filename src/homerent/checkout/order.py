"""The rental order record carried through Booking -> Payment -> Delivery.

A :class:`RentalOrder` is immutable. Every stage returns a new record with the
collected form fields merged in and every derived value (totals, end date)
recomputed, so a record never holds a stale amount or date.

Navigation states are the plain dicts handed from one screen to the next;
their keys are fixed so existing screens keep working.
"""

from dataclasses import asdict, dataclass, replace
from datetime import date, timedelta
from typing import Any, Mapping, Optional

from ..config.rules import (
    BANK_TRANSFER_DETAILS,
    CARD_PAYMENT_METHODS,
    DEFAULT_DELIVERY_TIME,
)
from ..config.scoring_constants import DAYS_TO_CALENDAR_DAYS, INSURANCE_DEPOSIT
from ..processing.normalize import (
    format_card_number,
    format_display_date,
    format_expiry_date,
    format_phone,
    format_zip_code,
    parse_date,
)
from ..processing.validate import (
    ValidationError,
    raise_for_errors,
    validate_delivery_form,
    validate_payment_form,
)
from ..utils.logging import get_logger
from .pricing import Number, clamp_days, clean_daily_price, compute_totals, insurance_deposit_for

logger = get_logger(__name__)

STAGE_BOOKING = 'booking'
STAGE_PAYMENT = 'payment'
STAGE_DELIVERY = 'delivery'
STAGE_CONFIRMED = 'confirmed'

TERMS_ERROR = 'Please agree to the insurance deposit terms'

_DATE_FIELDS = ('start_date', 'end_date')


def compute_end_date(start: Optional[date], days: int) -> Optional[date]:
    """Each rental day unit spans a calendar week: start + days * 7."""
    if start is None:
        return None
    return start + timedelta(days=clamp_days(days) * DAYS_TO_CALENDAR_DAYS)


def _iso(value: Optional[date]) -> str:
    return value.isoformat() if value else ''


def _appliance_summary(appliance: Any) -> Optional[dict]:
    if not appliance:
        return None
    return {
        'name': appliance.get('name', ''),
        'details': appliance.get('details', ''),
    }


@dataclass(frozen=True)
class RentalOrder:
    appliance: Optional[dict] = None
    price_per_day: Number = 0
    days: int = 1
    total_amount: Number = 0
    insurance_deposit: Number = INSURANCE_DEPOSIT
    final_amount: Number = 0
    stage: str = STAGE_BOOKING

    # Payment
    email: str = ''
    payment_method: str = ''
    card_number: str = ''
    expiry_date: str = ''
    cvv: str = ''
    bank_details: Optional[dict] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    # Delivery
    area: str = ''
    city: str = ''
    street: str = ''
    number: str = ''
    zip_code: str = ''
    phone: str = ''
    preferred_time: str = DEFAULT_DELIVERY_TIME
    message: str = ''

    # ── derived values ────────────────────────────────────────────────
    def with_days(self, days: Any) -> "RentalOrder":
        duration = clamp_days(days)
        if self.stage == STAGE_BOOKING:
            totals = compute_totals(self.price_per_day, duration)
            total, deposit, final = totals.rental_amount, totals.insurance_deposit, totals.final_amount
        else:
            # amounts are fixed once the booking is submitted
            total, deposit, final = self.total_amount, self.insurance_deposit, self.final_amount
        return replace(
            self,
            days=duration,
            total_amount=total,
            insurance_deposit=deposit,
            final_amount=final,
            end_date=compute_end_date(self.start_date, duration),
        )

    def with_price(self, price_per_day: Any) -> "RentalOrder":
        return replace(self, price_per_day=clean_daily_price(price_per_day)).with_days(self.days)

    def with_start_date(self, start: Any) -> "RentalOrder":
        parsed = parse_date(start)
        return replace(self, start_date=parsed, end_date=compute_end_date(parsed, self.days))

    @property
    def rental_period(self) -> dict:
        return {'start': _iso(self.start_date), 'end': _iso(self.end_date)}

    @property
    def period_label(self) -> str:
        """'Wednesday, January 1, 2025 to Wednesday, January 15, 2025'; blank before a start date is set."""
        if self.start_date is None:
            return ''
        return f"{format_display_date(self.start_date)} to {format_display_date(self.end_date)}"

    def is_consistent(self) -> bool:
        """True when final = total + deposit and the end date matches the duration."""
        if self.final_amount != self.total_amount + self.insurance_deposit:
            return False
        return self.end_date == compute_end_date(self.start_date, self.days)

    # ── navigation states ─────────────────────────────────────────────
    def to_payment_state(self) -> dict:
        return {
            'totalAmount': self.total_amount,
            'finalAmount': self.final_amount,
            'appliance': self.appliance,
            'days': self.days,
        }

    def to_delivery_state(self) -> dict:
        state = self.to_payment_state()
        state.update({
            'email': self.email,
            'paymentMethod': self.payment_method,
            'cardNumber': self.card_number,
            'expiryDate': self.expiry_date,
            'cvv': self.cvv,
            'rentalPeriod': self.rental_period,
        })
        return state

    @classmethod
    def from_navigation_state(cls, state: Optional[Mapping[str, Any]]) -> "RentalOrder":
        """Rebuild an order from a screen's incoming state.

        Missing state never fails: amounts fall back to 0 and the appliance
        to None so the screen can still render.
        """
        state = state or {}
        if not state:
            logger.warning("Checkout entered without upstream state; showing zero amounts")
        days = clamp_days(state.get('days'))
        total = clean_daily_price(state.get('totalAmount'))
        final = clean_daily_price(state.get('finalAmount'))
        deposit = insurance_deposit_for(total)
        if state.get('totalAmount') is not None and not final:
            final = total + deposit
        period = state.get('rentalPeriod') or {}
        start = parse_date(period.get('start') or state.get('startDate'))
        method = state.get('paymentMethod') or ''
        return cls(
            appliance=_appliance_summary(state.get('appliance')),
            price_per_day=total / days if total else 0,
            days=days,
            total_amount=total,
            insurance_deposit=deposit,
            final_amount=final,
            stage=STAGE_DELIVERY if 'rentalPeriod' in state else STAGE_PAYMENT,
            email=state.get('email') or '',
            payment_method=method,
            card_number=state.get('cardNumber') or '',
            expiry_date=state.get('expiryDate') or '',
            cvv=state.get('cvv') or '',
            bank_details=dict(BANK_TRANSFER_DETAILS) if method == 'bank' else None,
            start_date=start,
            end_date=compute_end_date(start, days),
        )

    # ── serialization ─────────────────────────────────────────────────
    def to_dict(self) -> dict:
        data = asdict(self)
        for key in _DATE_FIELDS:
            data[key] = _iso(data[key])
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RentalOrder":
        known = {f for f in cls.__dataclass_fields__}
        values = {k: v for k, v in data.items() if k in known}
        for key in _DATE_FIELDS:
            values[key] = parse_date(values.get(key))
        order = cls(**values)
        return order.with_start_date(order.start_date)


# ── stage transitions ────────────────────────────────────────────────
def start_booking(state: Optional[Mapping[str, Any]]) -> RentalOrder:
    """Stage 1 entry: the catalog hands over ``{appliance, price}``."""
    state = state or {}
    order = RentalOrder(appliance=_appliance_summary(state.get('appliance')))
    return order.with_price(state.get('price'))


def submit_booking(order: RentalOrder, days: Any, agreed_to_terms: bool) -> RentalOrder:
    """Stage 1 exit: fix the duration; the deposit terms must be accepted."""
    if not agreed_to_terms:
        raise ValidationError({'agreedToTerms': TERMS_ERROR})
    booked = replace(order.with_days(days), stage=STAGE_PAYMENT)
    logger.info(
        "Booking %s for %d day(s): total=%s final=%s",
        (booked.appliance or {}).get('name', '?'), booked.days,
        booked.total_amount, booked.final_amount,
    )
    return booked


def apply_payment(order: RentalOrder, form: Mapping[str, Any], today: Optional[date] = None) -> RentalOrder:
    """Stage 2: validate and merge payment details and the rental start date."""
    method = str(form.get('paymentMethod') or '')
    is_card = method in CARD_PAYMENT_METHODS
    cleaned = dict(form)
    if is_card:
        cleaned['cardNumber'] = format_card_number(form.get('cardNumber'))
        cleaned['expiryDate'] = format_expiry_date(form.get('expiryDate'))
    raise_for_errors(validate_payment_form(cleaned, today=today))

    paid = replace(
        order,
        email=str(form.get('email')).strip(),
        payment_method=method,
        card_number=cleaned['cardNumber'] if is_card else '',
        expiry_date=cleaned['expiryDate'] if is_card else '',
        cvv=str(form.get('cvv') or '') if is_card else '',
        bank_details=None if is_card else dict(BANK_TRANSFER_DETAILS),
        stage=STAGE_DELIVERY,
    )
    if paid.final_amount != paid.total_amount + paid.insurance_deposit:
        paid = replace(paid, final_amount=paid.total_amount + paid.insurance_deposit)
    return paid.with_start_date(form.get('startDate'))


def apply_delivery(order: RentalOrder, form: Mapping[str, Any]) -> RentalOrder:
    """Stage 3: validate and merge the delivery address and contact."""
    cleaned = dict(form)
    cleaned['zipCode'] = format_zip_code(form.get('zipCode'))
    cleaned['phone'] = format_phone(form.get('phone'))
    cleaned['preferredTime'] = form.get('preferredTime') or DEFAULT_DELIVERY_TIME
    raise_for_errors(validate_delivery_form(cleaned))

    return replace(
        order,
        area=str(cleaned['area']).strip(),
        city=str(cleaned['city']).strip(),
        street=str(cleaned['street']).strip(),
        number=str(cleaned['number']).strip(),
        zip_code=cleaned['zipCode'],
        phone=cleaned['phone'],
        preferred_time=cleaned['preferredTime'],
        message=str(form.get('message') or '').strip(),
    )
