"""Discord-facing utilities."""

from voicemover.discord.channels import is_voice_channel, resolve_afk_channel, resolve_voice_channel
from voicemover.discord.client import DiscordClientService, build_intents
from voicemover.discord.dispatcher import (
    CommandDispatcher,
    CommandValidationError,
    DispatchOutcome,
    afk_usage,
    move_usage,
)
from voicemover.discord.mover import BatchMover, MoveReport
from voicemover.discord.scheduler import MoveScheduler, ScheduledMove

__all__ = [
    "BatchMover",
    "CommandDispatcher",
    "CommandValidationError",
    "DiscordClientService",
    "DispatchOutcome",
    "MoveReport",
    "MoveScheduler",
    "ScheduledMove",
    "afk_usage",
    "build_intents",
    "is_voice_channel",
    "move_usage",
    "resolve_afk_channel",
    "resolve_voice_channel",
]
