#!/usr/bin/env python3
"""Interactive chat CLI talking to a provider built from the environment."""

import asyncio
import sys

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt

from unillm.errors import LLMError
from unillm.models.chat import ChatMessage
from unillm.providers.base import LLMProvider
from unillm.services.builder import LLMBuilder, parse_model_spec, schema_from_file
from unillm.utils.logging import setup_logging


class ChatCLI:
    """Interactive chat loop keeping the conversation history locally."""

    def __init__(self, provider: LLMProvider, title: str):
        """Initialize chat CLI."""
        self.provider = provider
        self.title = title
        self.history: list[ChatMessage] = []
        self.console = Console()

    async def start(self) -> None:
        """Start the interactive chat session."""
        self.console.print(
            Panel.fit(
                f"[bold blue]unillm chat - {self.title}[/bold blue]\n"
                "Type your messages to chat with the model.\n"
                "Commands: /help, /clear, /quit",
                border_style="blue",
            )
        )

        try:
            while True:
                user_input = Prompt.ask("\n[bold cyan]You[/bold cyan]")

                if user_input.lower() in ["/quit", "/exit", "quit", "exit"]:
                    break
                elif user_input.lower() == "/help":
                    self._show_help()
                    continue
                elif user_input.lower() == "/clear":
                    self.history.clear()
                    self.console.print("[yellow]History cleared[/yellow]")
                    continue
                elif user_input.strip() == "":
                    continue

                await self._send_message(user_input)

        except (KeyboardInterrupt, EOFError):
            pass
        finally:
            self.console.print("\n[yellow]Goodbye![/yellow]")

    async def _send_message(self, message: str) -> None:
        """Send the conversation so far plus the new message."""
        user_message = ChatMessage.user().content(message).build()
        try:
            with self.console.status("[dim]Thinking...[/dim]"):
                response = await self.provider.chat([*self.history, user_message])
        except LLMError as e:
            self.console.print(f"[red]Error: {type(e).__name__}: {e}[/red]")
            return

        text = response.text() or ""
        self.history.append(user_message)
        self.history.append(ChatMessage.assistant().content(text).build())
        self._display_response(text)

    def _display_response(self, text: str) -> None:
        self.console.print(
            Panel(
                Markdown(text or "_(empty response)_"),
                title=f"[bold green]{self.title}[/bold green]",
                border_style="green",
                padding=(1, 2),
            )
        )

    def _show_help(self) -> None:
        help_text = """
[bold]Available Commands:[/bold]
• /help - Show this help message
• /clear - Forget the conversation so far
• /quit or /exit - Exit the chat

[bold]Usage:[/bold]
chat_cli.py [backend:model] [schema.json]

The API key is read from the backend's environment variable (XAI_API_KEY).
        """

        self.console.print(Panel(help_text.strip(), title="[cyan]Help[/cyan]", border_style="cyan"))


async def run(provider: LLMProvider, title: str) -> None:
    try:
        await ChatCLI(provider, title).start()
    finally:
        await provider.aclose()


def main():
    """Main entry point for the chat CLI."""
    setup_logging()
    model_spec = sys.argv[1] if len(sys.argv) > 1 else "xai:grok-2-latest"
    backend, model = parse_model_spec(model_spec)

    builder = LLMBuilder().backend(backend)
    if model:
        builder.model(model)
    if len(sys.argv) > 2:
        builder.schema(schema_from_file(sys.argv[2]))
    provider = builder.build()

    asyncio.run(run(provider, model_spec))


if __name__ == "__main__":
    main()
