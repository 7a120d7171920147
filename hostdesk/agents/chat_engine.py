"""Chat assistant: runs a guest message through the LLM and its tools."""

import asyncio
import json
import logging
import secrets
import uuid
from collections.abc import Callable
from datetime import date, datetime, timezone
from enum import Enum

from openai import AsyncOpenAI

from hostdesk.agents.prompts import load_prompt
from hostdesk.agents.tools import TOOLS, ChatContext, ToolExecutor
from hostdesk.config import Config, get_config
from hostdesk.guardrails import InputValidator, UsageLimiter
from hostdesk.models import (
    ChatMessage,
    ChatResult,
    ChatSession,
    Personality,
    SessionResult,
    StoredChatMessage,
)
from hostdesk.reservations.availability import AvailabilityService
from hostdesk.reservations.booking import BookingService
from hostdesk.reservations.timeutils import restaurant_zone
from hostdesk.storage import Store, StoreError

logger = logging.getLogger(__name__)

FALLBACK_RESPONSE = "I'm sorry, I couldn't process that request."
PROCESSING_ERROR = "Failed to process your message. Please try again."

PERSONALITY_PROMPTS = {
    Personality.FRIENDLY: (
        "warm, welcoming, and conversational. Use a friendly tone and make guests "
        "feel at home."
    ),
    Personality.FORMAL: (
        "professional, courteous, and precise. Maintain a polished, respectful tone."
    ),
    Personality.EFFICIENT: (
        "helpful, direct, and concise. Get guests the information they need quickly."
    ),
}


class LoopState(str, Enum):
    """States of one chat exchange."""

    AWAITING_MODEL = "awaiting_model_response"
    EXECUTING_TOOLS = "executing_tools"
    FINAL = "final_text_response"


def build_system_prompt(context: ChatContext, today: date) -> str:
    """Render the assistant's system prompt for a restaurant.

    Args:
        context: Restaurant, menu and settings
        today: Current date in the restaurant's timezone

    Returns:
        System prompt text
    """
    restaurant = context.restaurant
    ai = context.settings.ai

    info_lines = [f"- Name: {restaurant.name}"]
    if restaurant.phone:
        info_lines.append(f"- Phone: {restaurant.phone}")
    if restaurant.address:
        info_lines.append(f"- Address: {restaurant.address.one_line()}")
    if restaurant.website:
        info_lines.append(f"- Website: {restaurant.website}")

    capabilities = [
        "- Answer questions about the menu, prices, ingredients and allergens",
        "- Share opening hours and contact details",
    ]
    if ai.allow_reservations:
        capabilities.append("- Check table availability and book reservations")
    else:
        capabilities.append(
            "- You cannot book tables. Ask guests to call the restaurant for reservations"
        )
    if ai.allow_orders:
        capabilities.append("- Help guests choose items for an online order")

    menu_lines = []
    for category in context.categories:
        count = sum(1 for item in context.menu_items if item.category_id == category.id)
        if count:
            menu_lines.append(f"- {category.name}: {count} items")

    tags = sorted(
        {
            tag
            for item in context.menu_items
            if item.is_available
            for tag in item.dietary_tags
        }
    )

    custom = ""
    if ai.custom_instructions.strip():
        custom = f"\n## Custom Instructions\n{ai.custom_instructions.strip()}\n"

    return load_prompt(
        "chat_assistant",
        restaurant_name=restaurant.name,
        personality=PERSONALITY_PROMPTS[ai.personality],
        restaurant_info="\n".join(info_lines),
        capabilities="\n".join(capabilities),
        menu_overview="\n".join(menu_lines) or "No menu items are listed yet.",
        dietary_options=", ".join(tags) or "No dietary tags are listed.",
        custom_instructions=custom,
        today=today.isoformat(),
        phone_hint=f" at {restaurant.phone}" if restaurant.phone else "",
    )


class ChatEngine:
    """Answers guest chat messages for a restaurant.

    Each exchange is a bounded loop: the model either answers in text or asks
    for tools, the tools of one turn run concurrently, and their results go
    back to the model. At most `chat_max_tool_rounds` tool rounds run before
    the exchange ends.
    """

    def __init__(
        self,
        store: Store,
        client: AsyncOpenAI | None,
        availability: AvailabilityService,
        booking: BookingService,
        config: Config | None = None,
        usage_limiter: UsageLimiter | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            store: Persistence backend
            client: OpenAI client; None disables the assistant
            availability: Availability service used by the tools
            booking: Booking service used by the tools
            config: Configuration (uses global config if not provided)
            usage_limiter: Monthly quota check (built from store if not provided)
            now: Clock returning an aware datetime (defaults to UTC now)
        """
        self.store = store
        self.client = client
        self.availability = availability
        self.booking = booking
        self.config = config or get_config()
        self.usage_limiter = usage_limiter or UsageLimiter(store)
        self.now = now or (lambda: datetime.now(timezone.utc))

    async def create_chat_session(self, restaurant_id: str) -> SessionResult:
        """Open a chat session and return the restaurant's greeting."""
        restaurant = await self.store.get_restaurant(restaurant_id)
        if restaurant is None:
            return SessionResult(error="Restaurant not found")

        usage = await self.usage_limiter.check_usage_limit(
            restaurant_id, restaurant.settings.tier
        )
        if not usage.allowed:
            return SessionResult(greeting=usage.message or "", error="USAGE_LIMIT")

        session = ChatSession(
            id=str(uuid.uuid4()),
            restaurant_id=restaurant_id,
            session_token=secrets.token_urlsafe(24),
        )
        try:
            await self.store.insert_chat_session(session)
        except StoreError:
            logger.exception(f"Failed to create chat session for {restaurant_id}")
            return SessionResult(error="Failed to start chat. Please try again.")

        logger.info(f"Chat session {session.id} opened for {restaurant_id}")
        greeting = (
            restaurant.settings.ai.greeting
            or f"Welcome to {restaurant.name}! How can I help you today?"
        )
        return SessionResult(session_id=session.id, greeting=greeting)

    async def process_chat(
        self,
        restaurant_id: str,
        session_id: str,
        history: list[ChatMessage],
        new_message: str,
    ) -> ChatResult:
        """Answer one guest message.

        Args:
            restaurant_id: Restaurant the guest is talking to
            session_id: Chat session the message belongs to
            history: Earlier turns of the conversation, oldest first
            new_message: The guest's new message

        Returns:
            ChatResult with the assistant's reply, or an error code/message
        """
        try:
            return await self._process_chat(
                restaurant_id, session_id, history, new_message
            )
        except Exception:
            logger.exception(f"Chat processing failed for {restaurant_id}")
            return ChatResult(response="", error=PROCESSING_ERROR)

    async def _process_chat(
        self,
        restaurant_id: str,
        session_id: str,
        history: list[ChatMessage],
        new_message: str,
    ) -> ChatResult:
        restaurant = await self.store.get_restaurant(restaurant_id)
        if restaurant is None:
            return ChatResult(response="", error="Restaurant not found")

        usage = await self.usage_limiter.check_usage_limit(
            restaurant_id, restaurant.settings.tier
        )
        if not usage.allowed:
            return ChatResult(response=usage.message or "", error="USAGE_LIMIT")

        is_valid, message = InputValidator.validate_user_input(new_message)
        if not is_valid:
            return ChatResult(response=message or "", error="INVALID_INPUT")

        if self.client is None:
            logger.error("Chat requested but no OpenAI client is configured")
            return ChatResult(response="", error=PROCESSING_ERROR)

        categories, menu_items = await asyncio.gather(
            self.store.list_menu_categories(restaurant_id),
            self.store.list_menu_items(restaurant_id),
        )
        context = ChatContext(
            restaurant=restaurant, menu_items=menu_items, categories=categories
        )
        executor = ToolExecutor(context, self.availability, self.booking, now=self.now)

        today = self.now().astimezone(restaurant_zone(restaurant.timezone)).date()
        messages: list[dict] = [
            {"role": "system", "content": build_system_prompt(context, today)},
            *({"role": m.role, "content": m.content} for m in history),
            {"role": "user", "content": new_message},
        ]

        response = await self.run_tool_loop(messages, executor)
        await self._save_exchange(restaurant_id, session_id, new_message, response)
        return ChatResult(response=response)

    async def run_tool_loop(self, messages: list[dict], executor: ToolExecutor) -> str:
        """Call the model until it answers in text or the round limit is hit.

        Args:
            messages: Conversation so far, system prompt first; extended in place
            executor: Tool executor for this exchange

        Returns:
            Final assistant text
        """
        max_rounds = self.config.chat_max_tool_rounds
        rounds = 0
        state = LoopState.AWAITING_MODEL

        while True:
            logger.debug(f"Chat loop state: {state.value} (round {rounds})")
            completion = await self.client.chat.completions.create(
                model=self.config.chat_model,
                max_tokens=self.config.chat_max_tokens,
                temperature=self.config.chat_temperature,
                messages=messages,
                tools=TOOLS,
            )
            message = completion.choices[0].message
            tool_calls = message.tool_calls or []

            if not tool_calls:
                state = LoopState.FINAL
                logger.debug(f"Chat loop state: {state.value} after {rounds} tool rounds")
                return message.content or FALLBACK_RESPONSE

            if rounds >= max_rounds:
                logger.warning(
                    f"Tool round limit ({max_rounds}) reached; ending exchange"
                )
                return message.content or FALLBACK_RESPONSE

            state = LoopState.EXECUTING_TOOLS
            rounds += 1
            messages.append(
                {
                    "role": "assistant",
                    "content": message.content,
                    "tool_calls": [
                        {
                            "id": call.id,
                            "type": "function",
                            "function": {
                                "name": call.function.name,
                                "arguments": call.function.arguments,
                            },
                        }
                        for call in tool_calls
                    ],
                }
            )
            results = await asyncio.gather(
                *(self._run_tool_call(call, executor) for call in tool_calls)
            )
            messages.extend(results)
            state = LoopState.AWAITING_MODEL

    async def _run_tool_call(self, call, executor: ToolExecutor) -> dict:
        name = call.function.name
        try:
            arguments = json.loads(call.function.arguments or "{}")
        except json.JSONDecodeError:
            arguments = None

        if not isinstance(arguments, dict):
            logger.warning(f"Unparseable arguments for tool {name}")
            content = f"Invalid arguments for {name}. Send a JSON object."
        else:
            content = await executor.execute(name, arguments)

        return {"role": "tool", "tool_call_id": call.id, "content": content}

    async def _save_exchange(
        self, restaurant_id: str, session_id: str, user_text: str, reply: str
    ) -> None:
        user_message = StoredChatMessage(
            id=str(uuid.uuid4()),
            session_id=session_id,
            restaurant_id=restaurant_id,
            role="user",
            content=user_text,
        )
        assistant_message = StoredChatMessage(
            id=str(uuid.uuid4()),
            session_id=session_id,
            restaurant_id=restaurant_id,
            role="assistant",
            content=reply,
        )
        try:
            await self.store.insert_chat_message(user_message)
            await self.store.insert_chat_message(assistant_message)
        except StoreError:
            # The guest already has an answer; a lost history row is only logged
            logger.exception(f"Failed to save chat messages for session {session_id}")
