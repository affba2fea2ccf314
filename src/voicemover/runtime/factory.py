"""Factory for wiring up the voicemover runtime."""

from __future__ import annotations

from typing import Mapping, Optional
import logging

from voicemover.config.settings import AppSettings, resolve_env_secret
from voicemover.discord.client import DiscordClientService
from voicemover.discord.dispatcher import CommandDispatcher
from voicemover.discord.mover import BatchMover
from voicemover.discord.scheduler import MoveScheduler
from voicemover.runtime.app import RuntimeService


def create_services(
    settings: AppSettings,
    *,
    environ: Optional[Mapping[str, str]] = None,
    logger: Optional[logging.Logger] = None,
) -> list[RuntimeService]:
    """Create the Discord client service and the move scheduler it feeds.

    The scheduler is listed first so it is stopped last, after the client has
    stopped delivering new commands.
    """

    _logger = logger or logging.getLogger("voicemover.factory")

    # Missing token is fatal; SettingsError propagates to the CLI.
    bot_token = resolve_env_secret(settings.discord.bot_token_env, environ=environ)

    bot_user: dict[str, Optional[int]] = {"id": None}

    mover = BatchMover(
        audit_reason=settings.mover.audit_reason,
        pace_every=settings.mover.pace_every,
        pace_seconds=settings.mover.pace_seconds,
        logger=logging.getLogger("voicemover.discord.mover"),
    )
    scheduler = MoveScheduler(logger=logging.getLogger("voicemover.discord.scheduler"))
    dispatcher = CommandDispatcher(
        prefix=settings.discord.command_prefix,
        mover=mover,
        scheduler=scheduler,
        bot_user_id_provider=lambda: bot_user["id"],
        logger=logging.getLogger("voicemover.discord.dispatcher"),
    )

    def update_bot_user_id(bot_user_id: int) -> None:
        bot_user["id"] = int(bot_user_id)
        _logger.info("Updated dispatcher bot_user_id=%s", bot_user_id)

    discord_service = DiscordClientService(
        bot_token=bot_token,
        on_message_handler=dispatcher,
        on_ready_callback=update_bot_user_id,
        logger=logging.getLogger("voicemover.discord.client"),
    )

    return [scheduler, discord_service]
