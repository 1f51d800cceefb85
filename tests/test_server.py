"""API tests for homerent.server over an in-memory SQLite database."""

import asyncio
from datetime import datetime, timedelta, timezone

import aiosmtplib
import pytest

from homerent.server import app as app_module
from homerent.server import mailer as mailer_module
from homerent.server.config import Settings
from homerent.server.mailer import Mailer
from homerent.server.security import generate_otp, hash_password, verify_password


def add_appliance(api, name="Fridge", price=15, available=True):
    r = api.post("/inserAppliance", json={"name": name, "price": price, "details": "d", "available": available})
    assert r.status_code == 201
    return r.json()["appliance"]


def add_user(api, user="alice", email="alice@example.com", password="secret1"):
    r = api.post("/addUser", json={"user": user, "password": password, "email": email, "gender": "female"})
    return r


class TestAppliances:
    def test_health(self, api):
        assert api.get("/health").json() == {"status": "ok"}

    def test_empty_catalog_is_404(self, api):
        r = api.get("/getSpecificAppliance")
        assert r.status_code == 404
        assert r.json() == {"message": "No appliances found."}

    def test_insert_and_list(self, api):
        created = add_appliance(api, "Fridge X", "12.5 OMR")
        assert created["_id"]
        assert created["price"] == 12.5
        assert created["imgUrl"] == ""

        body = api.get("/getSpecificAppliance").json()
        assert [a["name"] for a in body["Appliance"]] == ["Fridge X"]

    def test_update(self, api):
        created = add_appliance(api)
        r = api.put(f"/updateAppliance/{created['_id']}", json={"price": 20, "available": False})
        assert r.status_code == 200
        updated = r.json()["appliance"]
        assert updated["price"] == 20.0
        assert updated["available"] is False
        assert updated["name"] == "Fridge"

    def test_update_missing(self, api):
        r = api.put("/updateAppliance/nope", json={"price": 1})
        assert r.status_code == 404
        assert r.json()["message"] == "Appliance not found."

    def test_delete(self, api):
        created = add_appliance(api)
        r = api.delete(f"/appliances/{created['_id']}")
        assert r.status_code == 200
        assert r.json()["appliance"]["_id"] == created["_id"]
        assert api.delete(f"/appliances/{created['_id']}").status_code == 404

    def test_missing_name_is_422(self, api):
        r = api.post("/inserAppliance", json={"price": 3})
        assert r.status_code == 422
        assert r.json()["message"] == "Invalid request: name"


class TestSuggestions:
    def test_prefix_case_insensitive(self, api):
        add_appliance(api, "Fridge X")
        add_appliance(api, "Freezer")
        add_appliance(api, "Air Fryer")
        names = api.get("/api/suggestions", params={"keyword": "FR"}).json()
        assert sorted(names) == ["Freezer", "Fridge X"]

    def test_limit(self, api):
        for i in range(7):
            add_appliance(api, f"Fan {i}")
        assert len(api.get("/api/suggestions", params={"keyword": "fan"}).json()) == 5

    def test_keyword_required(self, api):
        r = api.get("/api/suggestions")
        assert r.status_code == 400
        assert r.json()["message"] == "Keyword is required"

    def test_wildcards_are_literal(self, api):
        add_appliance(api, "Fan")
        assert api.get("/api/suggestions", params={"keyword": "%"}).json() == []


class TestUsers:
    def test_register_and_login(self, api):
        r = add_user(api, user="Alice")
        assert r.status_code == 201
        created = r.json()["UserServer"]
        assert created["user"] == "alice"
        assert "password" not in created

        r = api.post("/getUser", json={"user": "ALICE", "password": "secret1"})
        assert r.status_code == 200
        assert r.json()["message"] == "Login successful."

    def test_duplicate_user(self, api):
        add_user(api)
        r = add_user(api, email="other@example.com")
        assert r.status_code == 400
        assert r.json()["message"] == "User already exists."

    def test_duplicate_email(self, api):
        add_user(api)
        r = add_user(api, user="bob")
        assert r.status_code == 400
        assert r.json()["message"] == "Email already exists."

    def test_login_errors(self, api):
        add_user(api)
        assert api.post("/getUser", json={"user": "nobody", "password": "x"}).status_code == 404
        r = api.post("/getUser", json={"user": "alice", "password": "wrong"})
        assert r.status_code == 401
        assert r.json()["message"] == "Invalid password."

    def test_update_username_and_password(self, api):
        add_user(api)
        r = api.put("/updateUser/alice", json={"newUsername": "Alicia", "password": "newpass"})
        assert r.status_code == 200
        assert r.json()["user"]["user"] == "alicia"
        assert api.post("/getUser", json={"user": "alicia", "password": "newpass"}).status_code == 200
        assert api.get("/verifyUserUpdate/alice").status_code == 404

    def test_update_to_taken_username(self, api):
        add_user(api)
        add_user(api, user="bob", email="bob@example.com")
        r = api.put("/updateUser/alice", json={"newUsername": "bob"})
        assert r.status_code == 400
        assert r.json()["message"] == "Username already exists."

    def test_profile_and_listing(self, api):
        add_user(api)
        profile = api.get("/getUserProfile/alice").json()
        assert profile == {
            "user": "alice", "email": "alice@example.com", "gender": "female",
            "imgUrl": "", "isAdmin": False,
        }
        users = api.get("/getUsers").json()
        assert [u["user"] for u in users] == ["alice"]

    def test_delete_user(self, api):
        user_id = add_user(api).json()["UserServer"]["_id"]
        r = api.delete(f"/deleteUser/{user_id}")
        assert r.json()["deletedUser"] == {"id": user_id, "username": "alice", "email": "alice@example.com"}
        assert api.delete(f"/deleteUser/{user_id}").status_code == 404


class TestPasswordReset:
    def test_full_flow(self, api, mailer):
        add_user(api)
        r = api.post("/request-otp", json={"email": "alice@example.com"})
        assert r.json() == {"message": "OTP sent to email."}
        (email, otp), = mailer.sent
        assert email == "alice@example.com"
        assert len(otp) == 6

        assert api.post("/verify-otp", json={"email": email, "otp": otp}).json() == {"message": "OTP verified."}
        r = api.post("/reset-password", json={"email": email, "otp": otp, "newPassword": "fresh1"})
        assert r.json() == {"message": "Password reset successful."}
        assert api.post("/getUser", json={"user": "alice", "password": "fresh1"}).status_code == 200

        # the code is single use
        r = api.post("/verify-otp", json={"email": email, "otp": otp})
        assert r.json()["message"] == "OTP not requested."

    def test_unknown_email(self, api):
        assert api.post("/request-otp", json={"email": "x@example.com"}).status_code == 404

    def test_wrong_code(self, api, mailer):
        add_user(api)
        api.post("/request-otp", json={"email": "alice@example.com"})
        otp = mailer.sent[0][1]
        wrong = "000000" if otp != "000000" else "111111"
        r = api.post("/verify-otp", json={"email": "alice@example.com", "otp": wrong})
        assert r.status_code == 400
        assert r.json()["message"] == "Invalid OTP."

    def test_expired_code(self, api, mailer, monkeypatch):
        add_user(api)
        api.post("/request-otp", json={"email": "alice@example.com"})
        otp = mailer.sent[0][1]
        later = app_module.now_utc() + timedelta(minutes=11)
        monkeypatch.setattr(app_module, "now_utc", lambda: later)
        r = api.post("/verify-otp", json={"email": "alice@example.com", "otp": otp})
        assert r.json()["message"] == "OTP expired."

    def test_mail_failure(self, api, mailer):
        add_user(api)
        mailer.error = aiosmtplib.SMTPException("relay refused")
        r = api.post("/request-otp", json={"email": "alice@example.com"})
        assert r.status_code == 500
        assert r.json()["message"] == "Failed to send OTP."

    def test_database_work_runs_off_the_event_loop(self, api, mailer, monkeypatch):
        add_user(api)
        seen = []
        find = app_module._find_user_by_email

        def recording_find(db, email):
            try:
                asyncio.get_running_loop()
                seen.append("event loop")
            except RuntimeError:
                seen.append("worker thread")
            return find(db, email)

        monkeypatch.setattr(app_module, "_find_user_by_email", recording_find)
        assert api.post("/request-otp", json={"email": "alice@example.com"}).status_code == 200
        assert seen == ["worker thread"]
        assert len(mailer.sent) == 1

    def test_timestamps_are_naive_utc(self):
        now = app_module.now_utc()
        assert now.tzinfo is None
        reference = datetime.now(timezone.utc).replace(tzinfo=None)
        assert abs(reference - now) < timedelta(seconds=5)


class TestFeedback:
    def test_add_and_list(self, api):
        r = api.post("/addFeedback", json={"message": " Great ", "rating": 5})
        assert r.status_code == 201
        feedback = r.json()["feedback"]
        assert feedback["user"] == "Anonymous"
        assert feedback["message"] == "Great"
        assert "createdAt" in feedback

        api.post("/addFeedback", json={"user": "alice", "message": "Fine", "rating": 3})
        listed = api.get("/getFeedback").json()
        assert {f["message"] for f in listed} == {"Great", "Fine"}

    @pytest.mark.parametrize("payload,message", [
        ({"message": "  ", "rating": 4}, "Please enter your feedback message."),
        ({"message": "Ok", "rating": 0}, "Please select a rating."),
        ({"message": "Ok", "rating": 9}, "Please select a rating."),
    ])
    def test_rejected(self, api, payload, message):
        r = api.post("/addFeedback", json=payload)
        assert r.status_code == 400
        assert r.json()["message"] == message


class TestSecurity:
    def test_hash_roundtrip(self):
        hashed = hash_password("secret")
        assert hashed != "secret"
        assert verify_password("secret", hashed)
        assert not verify_password("other", hashed)

    def test_long_passwords_truncated(self):
        hashed = hash_password("x" * 100)
        assert verify_password("x" * 72, hashed)

    def test_plain_text_stored_value(self):
        assert not verify_password("secret", "secret")

    def test_otp_shape(self):
        for _ in range(50):
            otp = generate_otp()
            assert len(otp) == 6 and otp.isdigit() and otp[0] != "0"


class TestMailer:
    def test_unconfigured_skips(self):
        mailer = Mailer(Settings(SMTP_USER="", SMTP_PASSWORD=""))
        assert not mailer.is_configured
        assert asyncio.run(mailer.send_otp("a@example.com", "123456")) is False

    def test_configured_sends(self, monkeypatch):
        sent = {}

        async def fake_send(message, **kwargs):
            sent["message"] = message
            sent.update(kwargs)

        monkeypatch.setattr(mailer_module.aiosmtplib, "send", fake_send)
        settings = Settings(SMTP_USER="bot@example.com", SMTP_PASSWORD="pw", OTP_TTL_MINUTES=5)
        assert asyncio.run(Mailer(settings).send_otp("a@example.com", "654321")) is True
        assert sent["message"]["Subject"] == "Your OTP Code"
        assert sent["message"]["From"] == "bot@example.com"
        assert "654321" in sent["message"].get_payload()
        assert "5 minutes" in sent["message"].get_payload()
        assert sent["start_tls"] is True
