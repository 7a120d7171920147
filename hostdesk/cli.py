"""Command-line chat client for hostdesk - talks to the server API."""

import argparse
import logging
import sys

import httpx

from hostdesk.config import get_config, setup_logging
from hostdesk.models import ChatMessage

logger = logging.getLogger(__name__)


class HostdeskCLI:
    """Interactive chat with a restaurant's assistant over HTTP."""

    def __init__(self, restaurant_id: str) -> None:
        """Initialize the CLI.

        Args:
            restaurant_id: Restaurant whose assistant to talk to
        """
        self.config = get_config()
        setup_logging(self.config)

        self.restaurant_id = restaurant_id
        self.session_id: str | None = None
        self.history: list[ChatMessage] = []
        self.client = httpx.Client(base_url=self.config.server_url, timeout=120.0)

        logger.info(f"hostdesk CLI initialized against {self.config.server_url}")

    def run(self) -> None:
        """Run the chat loop until the user quits."""
        print("\n" + "=" * 60)
        print("HOSTDESK - Restaurant chat assistant")
        print(f"server: {self.config.server_url}")
        print(f"restaurant: {self.restaurant_id}")
        print("=" * 60 + "\n")

        try:
            if not self._start_session():
                return

            print("Type 'quit' or 'exit' to end the session.\n")

            while True:
                try:
                    user_input = input("\nYou: ").strip()

                    if not user_input:
                        continue

                    if user_input.lower() in ["quit", "exit", "q"]:
                        print("\nGoodbye!")
                        break

                    self._send_message(user_input)

                except KeyboardInterrupt:
                    print("\n\nGoodbye!")
                    break
        finally:
            self.client.close()

    def _start_session(self) -> bool:
        try:
            response = self.client.post(
                "/chat/sessions", json={"restaurant_id": self.restaurant_id}
            )
        except httpx.ConnectError:
            logger.exception("Cannot connect to server")
            self._print_connect_help()
            return False

        data = response.json()
        if response.status_code != 200:
            message = data.get("greeting") or data.get("error") or response.text
            print(f"⚠ Could not start chat: {message}")
            return False

        self.session_id = data["session_id"]
        logger.info(f"Chat session: {self.session_id}")
        print(f"Assistant: {data['greeting']}")
        return True

    def _send_message(self, user_input: str) -> None:
        """Send one message and print the assistant's reply.

        Args:
            user_input: Guest message
        """
        try:
            response = self.client.post(
                "/chat",
                json={
                    "restaurant_id": self.restaurant_id,
                    "session_id": self.session_id,
                    "message": user_input,
                    "history": [m.model_dump() for m in self.history],
                },
            )
        except httpx.TimeoutException:
            logger.exception("Request timed out")
            print("\n⚠ Request timed out. Please try again.")
            return
        except httpx.ConnectError:
            logger.exception("Cannot connect to server")
            self._print_connect_help()
            return

        data = (
            response.json()
            if response.headers.get("content-type", "").startswith("application/json")
            else {}
        )

        if response.status_code == 200:
            reply = data.get("response", "")
            print(f"\nAssistant: {reply}")
            self.history.append(ChatMessage(role="user", content=user_input))
            self.history.append(ChatMessage(role="assistant", content=reply))
            return

        # Usage limit and invalid input carry a guest-facing message
        message = data.get("response") or data.get("error") or response.text
        print(f"\n⚠ {message} (status {response.status_code})")

    def _print_connect_help(self) -> None:
        print(f"\n⚠ Cannot connect to server at {self.config.server_url}")
        print("Make sure the server is running:")
        print("  hostdesk-server")


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(description="Chat with a restaurant's assistant")
    parser.add_argument("restaurant_id", help="Restaurant id to chat with")
    args = parser.parse_args(argv)

    try:
        get_config()
    except Exception as e:
        print(f"Configuration error: {e}")
        print("\nCheck your environment variables or .env file.")
        sys.exit(1)

    HostdeskCLI(args.restaurant_id).run()


if __name__ == "__main__":
    main()
