"""Rental backend: appliance catalog, user accounts, feedback and OTP password reset.

Paths match the ones the existing web client calls, so both clients can share
one backend. Error bodies are always ``{"message": ...}``.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timedelta

import aiosmtplib
from anyio import from_thread
from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import func, select
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config.rules import ANONYMOUS_USER
from ..config.settings import SUGGESTION_LIMIT
from ..processing.clean import clean_price
from ..processing.validate import validate_feedback
from ..utils.logging import get_logger, setup_logging
from .config import get_settings
from .db import Base, engine, get_db
from .mailer import Mailer, get_mailer
from .models import Appliance, Feedback, User, utcnow
from .schemas import (
    ApplianceIn,
    ApplianceOut,
    ApplianceUpdate,
    EmailIn,
    FeedbackIn,
    FeedbackOut,
    LoginIn,
    OtpIn,
    PasswordResetIn,
    ProfileOut,
    UserCreate,
    UserOut,
    UserUpdate,
)
from .security import generate_otp, hash_password, verify_password

logger = get_logger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # DB init (dev convenience)
    Base.metadata.create_all(bind=engine)
    logger.info("Backend ready on %s", settings.database_url)
    yield


app = FastAPI(title="HomeRent API", version="1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error(request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_error(request, exc: RequestValidationError):
    fields = sorted({".".join(str(p) for p in e.get("loc", ())[1:]) for e in exc.errors()})
    message = "Invalid request: " + ", ".join(f for f in fields if f) if fields else "Invalid request."
    return JSONResponse(status_code=422, content={"message": message})


@app.exception_handler(Exception)
async def unhandled_error(request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error."})


def appliance_out(appliance: Appliance) -> dict:
    return ApplianceOut.model_validate(appliance).model_dump(by_alias=True, mode="json")


def user_out(user: User) -> dict:
    return UserOut.model_validate(user).model_dump(by_alias=True, mode="json")


def now_utc() -> datetime:
    return utcnow()


def _find_user(db: Session, username: str):
    return db.execute(select(User).where(User.user == username.lower())).scalars().first()


def _find_user_by_email(db: Session, email: str):
    return db.execute(select(User).where(User.email == email)).scalars().first()


def _check_otp(user, otp: str) -> None:
    if not user or not user.otp or not user.otp_expires:
        raise HTTPException(400, "OTP not requested.")
    if user.otp != otp:
        raise HTTPException(400, "Invalid OTP.")
    if user.otp_expires < now_utc():
        raise HTTPException(400, "OTP expired.")


@app.get("/health")
def health():
    return {"status": "ok"}


# ── appliances ───────────────────────────────────────────────────────
@app.get("/getSpecificAppliance")
def list_appliances(db: Session = Depends(get_db)):
    rows = db.execute(select(Appliance).order_by(Appliance.created_at, Appliance.id)).scalars().all()
    if not rows:
        raise HTTPException(404, "No appliances found.")
    return {"Appliance": [appliance_out(a) for a in rows]}


@app.get("/api/suggestions")
def suggestions(keyword: str = Query(default=""), db: Session = Depends(get_db)):
    keyword = keyword.strip()
    if not keyword:
        raise HTTPException(400, "Keyword is required")
    stmt = (
        select(Appliance.name)
        .where(func.lower(Appliance.name).startswith(keyword.lower(), autoescape=True))
        .order_by(Appliance.created_at, Appliance.id)
        .limit(SUGGESTION_LIMIT)
    )
    return list(db.execute(stmt).scalars().all())


@app.post("/inserAppliance", status_code=201)
def insert_appliance(body: ApplianceIn, db: Session = Depends(get_db)):
    appliance = Appliance(
        name=body.name,
        img_url=body.img_url or "",
        price=clean_price(body.price),
        details=body.details,
        available=body.available,
    )
    db.add(appliance)
    db.commit()
    db.refresh(appliance)
    logger.info("Appliance added: %s (%s)", appliance.name, appliance.id)
    return {"message": "Appliance added successfully.", "appliance": appliance_out(appliance)}


@app.put("/updateAppliance/{appliance_id}")
def update_appliance(appliance_id: str, body: ApplianceUpdate, db: Session = Depends(get_db)):
    appliance = db.get(Appliance, appliance_id)
    if not appliance:
        raise HTTPException(404, "Appliance not found.")
    if body.name:
        appliance.name = body.name
    if body.img_url is not None:
        appliance.img_url = body.img_url
    if body.price:
        appliance.price = clean_price(body.price)
    if body.details:
        appliance.details = body.details
    if body.available is not None:
        appliance.available = body.available
    db.commit()
    db.refresh(appliance)
    return {"message": "Appliance updated successfully", "appliance": appliance_out(appliance)}


@app.delete("/appliances/{appliance_id}")
def delete_appliance(appliance_id: str, db: Session = Depends(get_db)):
    appliance = db.get(Appliance, appliance_id)
    if not appliance:
        raise HTTPException(404, "Appliance not found")
    payload = appliance_out(appliance)
    db.delete(appliance)
    db.commit()
    return {"message": "Appliance deleted successfully", "appliance": payload}


# ── users ────────────────────────────────────────────────────────────
@app.post("/addUser", status_code=201)
def add_user(body: UserCreate, db: Session = Depends(get_db)):
    if _find_user(db, body.user):
        raise HTTPException(400, "User already exists.")
    if _find_user_by_email(db, body.email):
        raise HTTPException(400, "Email already exists.")
    user = User(
        user=body.user.lower(),
        password=hash_password(body.password),
        email=body.email,
        gender=body.gender,
        img_url=body.img_url or "",
        is_admin=body.is_admin,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User registered: %s", user.user)
    return {"UserServer": user_out(user), "message": "User added successfully."}


@app.post("/getUser")
def login(body: LoginIn, db: Session = Depends(get_db)):
    user = _find_user(db, body.user)
    if not user:
        raise HTTPException(404, "User not found.")
    if not verify_password(body.password, user.password):
        raise HTTPException(401, "Invalid password.")
    return {"user": user_out(user), "message": "Login successful."}


@app.put("/updateUser/{username}")
def update_user(username: str, body: UserUpdate, db: Session = Depends(get_db)):
    user = _find_user(db, username)
    if not user:
        raise HTTPException(404, "User not found.")

    new_username = body.new_username.lower() if body.new_username else None
    if new_username and new_username != user.user and _find_user(db, new_username):
        raise HTTPException(400, "Username already exists.")
    if body.email and body.email != user.email and _find_user_by_email(db, body.email):
        raise HTTPException(400, "Email already exists.")

    updated = []
    if body.password:
        user.password = hash_password(body.password)
        updated.append("password")
    if body.img_url:
        user.img_url = body.img_url
        updated.append("imgUrl")
    if body.gender:
        user.gender = body.gender
        updated.append("gender")
    if new_username and new_username != user.user:
        user.user = new_username
        updated.append("user")
    if body.email and body.email != user.email:
        user.email = body.email
        updated.append("email")
    user.updated_at = now_utc()
    db.commit()
    db.refresh(user)
    logger.info("User %s updated: %s", username, ", ".join(updated) or "nothing")
    return {"message": "User updated successfully.", "user": user_out(user)}


@app.get("/verifyUserUpdate/{username}")
def verify_user_update(username: str, db: Session = Depends(get_db)):
    user = _find_user(db, username)
    if not user:
        raise HTTPException(404, "User not found.")
    return {"message": "User verification successful", "user": user_out(user)}


@app.get("/getUsers")
def list_users(db: Session = Depends(get_db)):
    users = db.execute(select(User).order_by(User.created_at, User.id)).scalars().all()
    return [user_out(u) for u in users]


@app.delete("/deleteUser/{user_id}")
def delete_user(user_id: str, db: Session = Depends(get_db)):
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(404, "User not found")
    deleted = {"id": user.id, "username": user.user, "email": user.email}
    db.delete(user)
    db.commit()
    logger.info("User deleted: %s", deleted["username"])
    return {"message": "User deleted successfully", "deletedUser": deleted}


@app.get("/getUserProfile/{username}")
def user_profile(username: str, db: Session = Depends(get_db)):
    user = _find_user(db, username)
    if not user:
        raise HTTPException(404, "User not found.")
    return ProfileOut.model_validate(user).model_dump(by_alias=True, mode="json")


# ── password reset ───────────────────────────────────────────────────
@app.post("/request-otp")
def request_otp(body: EmailIn, db: Session = Depends(get_db), mailer: Mailer = Depends(get_mailer)):
    # sync route: runs in the worker threadpool, mail goes back through the event loop
    user = _find_user_by_email(db, body.email)
    if not user:
        raise HTTPException(404, "User not found.")
    user.otp = generate_otp()
    user.otp_expires = now_utc() + timedelta(minutes=settings.otp_ttl_minutes)
    db.commit()
    try:
        from_thread.run(mailer.send_otp, body.email, user.otp)
    except (aiosmtplib.SMTPException, OSError) as exc:
        logger.error("Error sending OTP to %s: %s", body.email, exc)
        raise HTTPException(500, "Failed to send OTP.") from exc
    return {"message": "OTP sent to email."}


@app.post("/verify-otp")
def verify_otp(body: OtpIn, db: Session = Depends(get_db)):
    _check_otp(_find_user_by_email(db, body.email), body.otp)
    return {"message": "OTP verified."}


@app.post("/reset-password")
def reset_password(body: PasswordResetIn, db: Session = Depends(get_db)):
    user = _find_user_by_email(db, body.email)
    _check_otp(user, body.otp)
    user.password = hash_password(body.new_password)
    user.otp = None
    user.otp_expires = None
    db.commit()
    logger.info("Password reset for %s", user.user)
    return {"message": "Password reset successful."}


# ── feedback ─────────────────────────────────────────────────────────
@app.post("/addFeedback", status_code=201)
def add_feedback(body: FeedbackIn, db: Session = Depends(get_db)):
    errors = validate_feedback(body.message, body.rating)
    if errors:
        raise HTTPException(400, next(iter(errors.values())))
    feedback = Feedback(
        user=body.user or ANONYMOUS_USER,
        email=body.email or "",
        message=body.message.strip(),
        rating=body.rating,
    )
    db.add(feedback)
    db.commit()
    db.refresh(feedback)
    return {
        "message": "Feedback submitted successfully.",
        "feedback": FeedbackOut.model_validate(feedback).model_dump(by_alias=True, mode="json"),
    }


@app.get("/getFeedback")
def list_feedback(db: Session = Depends(get_db)):
    rows = db.execute(select(Feedback).order_by(Feedback.created_at.desc())).scalars().all()
    return [FeedbackOut.model_validate(f).model_dump(by_alias=True, mode="json") for f in rows]
