"""Tests for the HTTP API."""

from datetime import datetime
from decimal import Decimal

import pytest
from conftest import MENU_ITEMS, RESTAURANT_ID, FakeLLM, make_restaurant, text_reply
from fastapi.testclient import TestClient

from hostdesk.config import Config
from hostdesk.models import StoredChatMessage, Tier
from hostdesk.server import create_app
from hostdesk.services import CheckoutProvider
from hostdesk.storage import InMemoryStore

# Far-future dates keep these tests independent of the real clock
FRIDAY = "2099-01-02"
SUNDAY = "2099-01-04"


class MockCheckout(CheckoutProvider):
    async def create_checkout_session(self, request):
        return f"https://pay.example/{request.order_id}"


@pytest.fixture
def api_store():
    store = InMemoryStore()
    store.restaurants[RESTAURANT_ID] = make_restaurant()
    store.restaurants["free-1"] = make_restaurant(restaurant_id="free-1", tier=Tier.FREE)
    for item in MENU_ITEMS:
        store.menu_items[item.id] = item
    return store


@pytest.fixture
def api_config():
    return Config(
        _env_file=None,
        openai_api_key=None,
        stripe_secret_key=None,
        twilio_account_sid=None,
        chat_max_tool_rounds=3,
    )


@pytest.fixture
def llm():
    return FakeLLM(text_reply("We have three vegetarian dishes."))


@pytest.fixture
def client(api_store, api_config, llm):
    app = create_app(
        store=api_store, llm_client=llm, checkout=MockCheckout(), config=api_config
    )
    with TestClient(app) as test_client:
        yield test_client


def reservation_body(**overrides) -> dict:
    body = {
        "restaurant_id": RESTAURANT_ID,
        "customer_name": "Ada Lovelace",
        "customer_phone": "+15550123",
        "party_size": 4,
        "date": FRIDAY,
        "time": "19:00",
        "source": "website",
    }
    body.update(overrides)
    return body


class TestHealth:
    """Tests for the health endpoint."""

    def test_health(self, client):
        """Health check reports the service name."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "hostdesk-api"}

    def test_services_unavailable_before_startup(self, api_store, api_config):
        """Without the lifespan having run, endpoints answer 503."""
        client = TestClient(create_app(store=api_store, config=api_config))

        response = client.get(
            f"/restaurants/{RESTAURANT_ID}/availability",
            params={"date": FRIDAY, "time": "19:00", "party_size": 2},
        )

        assert response.status_code == 503


class TestAvailabilityEndpoint:
    """Tests for GET /restaurants/{id}/availability."""

    def test_available(self, client):
        """An open slot is reported as available."""
        response = client.get(
            f"/restaurants/{RESTAURANT_ID}/availability",
            params={"date": FRIDAY, "time": "19:00", "party_size": 4},
        )

        assert response.status_code == 200
        assert response.json() == {
            "available": True,
            "reason": None,
            "suggested_times": None,
        }

    def test_closed_day(self, client):
        """Closed days come back with a reason."""
        response = client.get(
            f"/restaurants/{RESTAURANT_ID}/availability",
            params={"date": SUNDAY, "time": "19:00", "party_size": 4},
        )

        assert response.status_code == 200
        assert response.json()["available"] is False
        assert response.json()["reason"] == "The restaurant is closed on Sundays."

    def test_missing_query_parameter(self, client):
        """date, time and party_size are required."""
        response = client.get(
            f"/restaurants/{RESTAURANT_ID}/availability", params={"date": FRIDAY}
        )

        assert response.status_code == 422


class TestReservationsEndpoint:
    """Tests for POST /reservations."""

    def test_books_table(self, client, api_store):
        """A successful booking answers 201 with the reservation id."""
        response = client.post("/reservations", json=reservation_body())

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["reservation_id"] in api_store.reservations

    def test_refused_booking(self, client, api_store):
        """Refused bookings answer 400 with the reason."""
        response = client.post("/reservations", json=reservation_body(party_size=60))

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "reservation_id": None,
            "error": "Party size must be between 1 and 50 guests.",
        }
        assert api_store.reservations == {}


class TestChatEndpoints:
    """Tests for the chat session and message endpoints."""

    def test_open_session(self, client):
        """Opening a session returns its id and the greeting."""
        response = client.post("/chat/sessions", json={"restaurant_id": RESTAURANT_ID})

        assert response.status_code == 200
        data = response.json()
        assert data["session_id"]
        assert data["greeting"] == "Welcome to Trattoria Roma! How can I help you today?"

    def test_open_session_unknown_restaurant(self, client):
        """Unknown restaurants answer 404."""
        response = client.post("/chat/sessions", json={"restaurant_id": "nope"})

        assert response.status_code == 404

    def test_chat_message(self, client, llm):
        """The assistant's answer is returned with the history forwarded."""
        response = client.post(
            "/chat",
            json={
                "restaurant_id": RESTAURANT_ID,
                "session_id": "s1",
                "message": "Anything vegetarian?",
                "history": [{"role": "assistant", "content": "Welcome!"}],
            },
        )

        assert response.status_code == 200
        assert response.json() == {
            "response": "We have three vegetarian dishes.",
            "error": None,
        }
        [request] = llm.completions.requests
        assert request["messages"][1] == {"role": "assistant", "content": "Welcome!"}

    def test_invalid_message(self, client):
        """Rejected input answers 400 with a guest-facing message."""
        response = client.post(
            "/chat",
            json={"restaurant_id": RESTAURANT_ID, "session_id": "s1", "message": "   "},
        )

        assert response.status_code == 400
        assert response.json() == {
            "response": "Message cannot be empty.",
            "error": "INVALID_INPUT",
        }

    def test_usage_limit(self, client, api_store):
        """Exhausted quotas answer 429."""
        for index in range(100):
            api_store.chat_messages[f"m{index}"] = StoredChatMessage(
                id=f"m{index}",
                session_id="old",
                restaurant_id="free-1",
                role="user",
                content="hello",
                created_at=datetime.now(),
            )

        response = client.post(
            "/chat",
            json={"restaurant_id": "free-1", "session_id": "s1", "message": "Hi"},
        )

        assert response.status_code == 429
        assert response.json()["error"] == "USAGE_LIMIT"


class TestOrdersEndpoint:
    """Tests for POST /orders."""

    def test_create_order(self, client, api_store):
        """Orders are priced on the server and answer 201 with a payment link."""
        response = client.post(
            "/orders",
            json={
                "restaurant_id": RESTAURANT_ID,
                "items": [{"id": "item-carbonara", "quantity": 1, "price": 0.01}],
                "customer_name": "Ada Lovelace",
                "customer_phone": "+15550123",
                "order_type": "takeout",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["checkout_url"] == f"https://pay.example/{data['order_id']}"
        assert data["order_summary"].endswith("Total: $19.58")
        assert api_store.orders[data["order_id"]].total == Decimal("19.58")

    def test_rejected_order(self, client, api_store):
        """Invalid orders answer 400."""
        response = client.post(
            "/orders",
            json={
                "restaurant_id": RESTAURANT_ID,
                "items": [{"id": "item-ossobuco", "quantity": 1}],
                "customer_name": "Ada Lovelace",
                "customer_phone": "+15550123",
            },
        )

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert api_store.orders == {}
