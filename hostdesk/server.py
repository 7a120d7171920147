"""FastAPI server exposing availability, booking, chat and ordering."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from openai import AsyncOpenAI
from pydantic import BaseModel, Field

from hostdesk.agents import ChatEngine
from hostdesk.config import Config, get_config, setup_logging
from hostdesk.models import ChatMessage, CreateOrderInput, ReservationInput
from hostdesk.orders import OrderService
from hostdesk.reservations import AvailabilityService, BookingService
from hostdesk.services import (
    CheckoutProvider,
    NotificationService,
    StripeCheckoutProvider,
)
from hostdesk.storage import SQLiteStore, Store

logger = logging.getLogger(__name__)

# HTTP status for each chat error code
CHAT_ERROR_STATUS = {
    "Restaurant not found": 404,
    "USAGE_LIMIT": 429,
    "INVALID_INPUT": 400,
}


class ChatSessionRequest(BaseModel):
    restaurant_id: str


class ChatRequest(BaseModel):
    restaurant_id: str
    session_id: str
    message: str
    history: list[ChatMessage] = Field(
        default_factory=list, description="Earlier turns, oldest first"
    )


def _server_error(message: str) -> JSONResponse:
    return JSONResponse(status_code=500, content={"success": False, "error": message})


def create_app(
    store: Store | None = None,
    llm_client: AsyncOpenAI | None = None,
    checkout: CheckoutProvider | None = None,
    notifier: NotificationService | None = None,
    config: Config | None = None,
) -> FastAPI:
    """Build the API application.

    Collaborators not passed in are built from configuration at startup.

    Args:
        store: Persistence backend (SQLite at config.database_path if omitted)
        llm_client: OpenAI client (built when OPENAI_API_KEY is set)
        checkout: Checkout provider (Stripe when STRIPE_SECRET_KEY is set)
        notifier: SMS notifier (Twilio when configured)
        config: Configuration (uses global config if not provided)

    Returns:
        FastAPI application
    """

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        """Application lifespan manager."""
        cfg = config or get_config()
        logger.info(f"Starting hostdesk API on {cfg.server_host}:{cfg.server_port}")

        app_store = store
        if app_store is None:
            sqlite_store = SQLiteStore(cfg.database_path)
            sqlite_store.init_db()
            app_store = sqlite_store
            logger.info(f"✓ SQLite store at {cfg.database_path}")

        owned_client = None
        client = llm_client
        if client is None and cfg.openai_api_key:
            client = owned_client = AsyncOpenAI(api_key=cfg.openai_api_key)
            logger.info("✓ OpenAI client initialized")

        checkout_provider = checkout
        if checkout_provider is None and cfg.stripe_secret_key:
            checkout_provider = StripeCheckoutProvider(cfg)
            logger.info("✓ Stripe checkout initialized")

        sms = notifier
        if sms is None and cfg.has_twilio_config():
            sms = NotificationService(cfg)

        availability = AvailabilityService(app_store)
        booking = BookingService(availability, sms)

        # Store services in app state for dependency injection
        _app.state.store = app_store
        _app.state.availability = availability
        _app.state.booking = booking
        _app.state.chat_engine = ChatEngine(
            app_store, client, availability, booking, config=cfg
        )
        _app.state.order_service = OrderService(app_store, checkout_provider)

        yield

        if owned_client is not None:
            await owned_client.close()
        logger.info("Shutting down hostdesk API")

    app = FastAPI(
        title="hostdesk API",
        description="Reservations, chat assistant and ordering for restaurants",
        version="0.1.0",
        lifespan=lifespan,
    )

    # The chat widget is embedded on restaurant websites
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint for monitoring."""
        return {"status": "healthy", "service": "hostdesk-api"}

    @app.get("/restaurants/{restaurant_id}/availability")
    async def get_availability(
        restaurant_id: str,
        date: str = Query(..., description="Reservation date (YYYY-MM-DD)"),
        time: str = Query(..., description="Reservation time (HH:mm)"),
        party_size: int = Query(..., description="Number of guests"),
        availability: AvailabilityService = Depends(get_availability_service),
    ):
        """Check whether a party can be seated at a slot."""
        try:
            verdict = await availability.check_availability(
                restaurant_id, date, time, party_size
            )
            return verdict.model_dump(mode="json")
        except Exception as e:
            logger.exception("Error checking availability")
            return _server_error(str(e))

    @app.post("/reservations")
    async def create_reservation(
        body: ReservationInput,
        booking: BookingService = Depends(get_booking_service),
    ):
        """Book a table.

        Returns:
            201 with the reservation id, or 400 with the reason it was refused
        """
        try:
            result = await booking.book_reservation(body)
        except Exception as e:
            logger.exception("Error creating reservation")
            return _server_error(str(e))
        return JSONResponse(
            status_code=201 if result.success else 400,
            content=result.model_dump(mode="json"),
        )

    @app.post("/chat/sessions")
    async def create_chat_session(
        body: ChatSessionRequest,
        engine: ChatEngine = Depends(get_chat_engine),
    ):
        """Open a chat session and return its greeting."""
        try:
            result = await engine.create_chat_session(body.restaurant_id)
        except Exception as e:
            logger.exception("Error creating chat session")
            return _server_error(str(e))
        status = CHAT_ERROR_STATUS.get(result.error, 500) if result.error else 200
        return JSONResponse(status_code=status, content=result.model_dump(mode="json"))

    @app.post("/chat")
    async def chat(
        body: ChatRequest,
        engine: ChatEngine = Depends(get_chat_engine),
    ):
        """Send a guest message to the restaurant's assistant.

        Request body:
            {
                "restaurant_id": "...",
                "session_id": "...",
                "message": "Do you have vegan options?",
                "history": [{"role": "user", "content": "..."}, ...]
            }
        """
        logger.info(f"Chat message for {body.restaurant_id}: {body.message[:80]}")
        result = await engine.process_chat(
            body.restaurant_id, body.session_id, body.history, body.message
        )
        status = CHAT_ERROR_STATUS.get(result.error, 500) if result.error else 200
        return JSONResponse(status_code=status, content=result.model_dump(mode="json"))

    @app.post("/orders")
    async def create_order(
        body: CreateOrderInput,
        orders: OrderService = Depends(get_order_service),
    ):
        """Validate and price an order, then return a checkout link."""
        try:
            result = await orders.create_order(body)
        except Exception as e:
            logger.exception("Error creating order")
            return _server_error(str(e))
        return JSONResponse(
            status_code=201 if result.success else 400,
            content=result.model_dump(mode="json"),
        )

    return app


def _from_state(request: Request, name: str):
    service = getattr(request.app.state, name, None)
    if service is None:
        raise HTTPException(status_code=503, detail="Services not initialized yet")
    return service


def get_availability_service(request: Request) -> AvailabilityService:
    """Dependency returning the availability service from app state."""
    return _from_state(request, "availability")


def get_booking_service(request: Request) -> BookingService:
    """Dependency returning the booking service from app state."""
    return _from_state(request, "booking")


def get_chat_engine(request: Request) -> ChatEngine:
    """Dependency returning the chat engine from app state."""
    return _from_state(request, "chat_engine")


def get_order_service(request: Request) -> OrderService:
    """Dependency returning the order service from app state."""
    return _from_state(request, "order_service")


app = create_app()


def run_server():
    """Run the FastAPI server using uvicorn."""
    setup_logging()
    config = get_config()

    uvicorn.run(
        "hostdesk.server:app",
        host=config.server_host,
        port=config.server_port,
        log_level=config.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    run_server()
