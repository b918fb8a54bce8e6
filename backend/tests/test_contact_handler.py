import pytest

from app.core.mailer import Sender, SendResult
from app.lib.contact import ContactHandler, ContactOutcome, ContactSubmission
from conftest import FakeDispatcher

SENDER = Sender(name="Acme Studio", address="hello@acme.test")


def make_handler(dispatcher):
    return ContactHandler(dispatcher, owner_email="owner@example.com", sender=SENDER)


def test_outcome_responses():
    assert ContactOutcome.OK.response() == (200, {"ok": True})
    assert ContactOutcome.REJECTED_MISSING_FIELD.response() == (400, {"error": "Required fields missing"})
    assert ContactOutcome.REJECTED_INVALID_EMAIL.response() == (400, {"error": "Invalid email"})
    assert ContactOutcome.SERVER_ERROR.response() == (500, {"error": "Server error"})


def test_submission_reports_missing_fields():
    sub = ContactSubmission(name="Jane", email="", service="Consulting")
    assert sub.missing_fields() == ["email", "message"]


def test_submission_coerces_numbers_and_ignores_extra():
    sub = ContactSubmission.model_validate(
        {"name": "Jane", "email": "jane@example.com", "phone": 5551234,
         "service": "Consulting", "message": "Hi", "extra": "ignored"}
    )
    assert sub.phone == "5551234"
    assert not hasattr(sub, "extra")


@pytest.mark.asyncio
async def test_handler_sends_owner_before_acknowledgment():
    fake = FakeDispatcher()
    sub = ContactSubmission(name="Jane", email="jane@example.com", service="Consulting", message="Hello")

    outcome = await make_handler(fake).handle(sub)

    assert outcome is ContactOutcome.OK
    assert [c["to"] for c in fake.calls] == ["owner@example.com", "jane@example.com"]
    assert all(c["sender"] == SENDER for c in fake.calls)


@pytest.mark.asyncio
async def test_handler_stops_after_owner_failure():
    fake = FakeDispatcher(results=[SendResult.failed("auth failed")])
    sub = ContactSubmission(name="Jane", email="jane@example.com", service="Consulting", message="Hello")

    outcome = await make_handler(fake).handle(sub)

    assert outcome is ContactOutcome.SERVER_ERROR
    assert len(fake.calls) == 1


@pytest.mark.asyncio
async def test_handler_missing_owner_address_fails_at_dispatch():
    fake = FakeDispatcher(results=[SendResult.failed("recipient address is missing")])
    handler = ContactHandler(fake, owner_email=None, sender=SENDER)
    sub = ContactSubmission(name="Jane", email="jane@example.com", service="Consulting", message="Hello")

    assert await handler.handle(sub) is ContactOutcome.SERVER_ERROR
    assert fake.calls[0]["to"] is None


@pytest.mark.asyncio
async def test_handler_rejects_before_dispatch():
    fake = FakeDispatcher()
    handler = make_handler(fake)

    assert await handler.handle(ContactSubmission()) is ContactOutcome.REJECTED_MISSING_FIELD
    bad = ContactSubmission(name="Jane", email="a@b", service="Consulting", message="Hello")
    assert await handler.handle(bad) is ContactOutcome.REJECTED_INVALID_EMAIL
    assert fake.calls == []


def test_submission_treats_falsy_scalars_as_missing():
    sub = ContactSubmission.model_validate(
        {"name": 0, "email": False, "phone": "", "service": True, "message": 1.5}
    )
    assert sub.name is None
    assert sub.email is None
    assert sub.phone is None
    assert sub.service == "true"
    assert sub.message == "1.5"
    assert sub.missing_fields() == ["name", "email"]
