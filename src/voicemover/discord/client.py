"""Discord client service wrapping discord.py."""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol
import asyncio
import logging

import discord


class OnMessageHandler(Protocol):
    """Handler invoked on each incoming message."""

    async def handle(self, message: Any) -> Any:
        ...


class DiscordClientService:
    """Discord bot service that bridges discord.py events to the command dispatcher."""

    def __init__(
        self,
        *,
        bot_token: str,
        on_message_handler: OnMessageHandler,
        on_ready_callback: Optional[Callable[[int], None]] = None,
        client: Optional[discord.Client] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if not bot_token or not bot_token.strip():
            raise ValueError("bot_token cannot be empty.")

        self._bot_token = bot_token
        self._handler = on_message_handler
        self._on_ready_callback = on_ready_callback
        self._logger = logger or logging.getLogger("voicemover.discord.client")

        if client is None:
            intents = build_intents()
            self._logger.info(
                "Intents: message_content=%s, guild_messages=%s, guilds=%s, voice_states=%s",
                intents.message_content,
                intents.guild_messages,
                intents.guilds,
                intents.voice_states,
            )
            client = discord.Client(intents=intents)
        self._client = client

        self._ready_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

        @self._client.event
        async def on_ready():
            await self._on_ready()

        @self._client.event
        async def on_message(message):
            await self._on_message(message)

    @property
    def bot_user_id(self) -> Optional[int]:
        user = self._client.user
        return None if user is None else int(user.id)

    async def start(self) -> None:
        """Start the Discord client in the background."""
        self._task = asyncio.create_task(self._client.start(self._bot_token))
        ready_wait = asyncio.create_task(self._ready_event.wait())
        await asyncio.wait({ready_wait, self._task}, return_when=asyncio.FIRST_COMPLETED)
        if not self._ready_event.is_set():
            # Login failed or the gateway closed before becoming ready.
            ready_wait.cancel()
            await self._client.close()
            self._task.result()
            raise RuntimeError("Discord client stopped before becoming ready.")
        self._logger.info("Discord client ready: bot_user_id=%s", self.bot_user_id)

    async def stop(self) -> None:
        """Stop the Discord client gracefully."""
        await self._client.close()
        if self._task is not None:
            try:
                await self._task
            except asyncio.CancelledError:
                pass

    async def _on_ready(self) -> None:
        self._logger.info("Logged in as %s", self._client.user)

        if self._on_ready_callback is not None and self._client.user is not None:
            try:
                self._on_ready_callback(self._client.user.id)
            except Exception:
                self._logger.exception("on_ready_callback failed")

        self._ready_event.set()

    async def _on_message(self, message: discord.Message) -> None:
        try:
            await self._handler.handle(message)
        except Exception:
            self._logger.exception("Message handler failed")


def build_intents() -> discord.Intents:
    intents = discord.Intents.default()
    intents.guilds = True
    intents.guild_messages = True
    intents.message_content = True
    intents.voice_states = True
    return intents
