import pytest

from app.core.mailer import SendResult
from app.core.settings import Settings


class FakeDispatcher:
    def __init__(self, results=None):
        self.calls = []
        self.results = list(results or [])
        self.verified = False

    async def send(self, sender, to, subject, html, reply_to=None):
        self.calls.append(
            {"sender": sender, "to": to, "subject": subject, "html": html, "reply_to": reply_to}
        )
        if self.results:
            return self.results.pop(0)
        return SendResult.sent()

    async def verify(self):
        self.verified = True
        return False


def make_settings(**overrides) -> Settings:
    values = {
        "OWNER_EMAIL": "owner@example.com",
        "FROM_NAME": "Acme Studio",
        "FROM_EMAIL": "hello@acme.test",
        "FRONTEND_ORIGIN": "http://localhost:5173",
        "SMTP_HOST": "smtp.acme.test",
        "SMTP_PORT": 587,
        "RATE_LIMIT_MAX": 20,
        "RATE_LIMIT_WINDOW_SECONDS": 900,
        "REDIS_URL": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def dispatcher():
    return FakeDispatcher()


@pytest.fixture
def valid_payload():
    return {
        "name": "Jane",
        "email": "jane@example.com",
        "phone": "555-1234",
        "service": "Consulting",
        "message": "Hello",
    }
