import pytest

from core.opinion import OPINION_SYSTEM_PROMPT
from ui.app import create_app

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "secret123"


class FakeAIClient:
    """Stands in for GeminiClient; returns canned JSON or raises."""

    def __init__(self, stock_payload=None, opinion_payload=None, error=None):
        self.stock_payload = stock_payload
        self.opinion_payload = opinion_payload
        self.error = error
        self.prompts = []

    def generate_json(self, system, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if system == OPINION_SYSTEM_PROMPT:
            return self.opinion_payload
        return self.stock_payload


def stock_payload(price=100.0, change=5.0, change_percent=5.0, last_price=120.0, name="Example Corp"):
    history = [90.0, 95.0, 100.0, 105.0, 110.0, last_price]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct"]
    chart = [
        {"date": months[idx], "price": value, "prediction": value + 3}
        for idx, value in enumerate(history)
    ]
    chart.extend({"date": months[6 + idx], "prediction": last_price + 10 * (idx + 1)} for idx in range(4))
    return {
        "stock": {
            "ticker": "WRONG",
            "name": name,
            "price": price,
            "change": change,
            "changePercent": change_percent,
        },
        "chartData": chart,
    }


@pytest.fixture
def fake_ai_factory():
    return FakeAIClient


@pytest.fixture
def app_factory(tmp_path):
    def _build(ai_client=None, **overrides):
        config = {
            "TESTING": True,
            "SECRET_KEY": "test-secret",
            "AI_ENABLED": False,
            "LOG_DIR": str(tmp_path),
            "DEMO_USER_EMAIL": DEMO_EMAIL,
            "DEMO_USER_PASSWORD": DEMO_PASSWORD,
            "DEMO_USER_NAME": "Demo User",
            "WRITE_PLOTLY_BUNDLE": False,
        }
        config.update(overrides)
        return create_app(config_overrides=config, ai_client=ai_client)

    return _build


@pytest.fixture
def app(app_factory):
    return app_factory()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def logged_in_client(client):
    response = client.post("/login", data={"email": DEMO_EMAIL, "password": DEMO_PASSWORD})
    assert response.status_code == 302
    return client
