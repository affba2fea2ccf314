"""Voice channel lookup within a guild."""

from __future__ import annotations

from typing import Any, Iterable, Optional, Protocol
import re

import discord


_VOICE_CHANNEL_TYPES = frozenset({discord.ChannelType.voice, discord.ChannelType.stage_voice})
_MENTION_DECORATION = str.maketrans("", "", "<#>")
_CHANNEL_ID = re.compile(r"[0-9]+")


class ChannelLike(Protocol):
    id: int
    name: str
    type: Any


class GuildLike(Protocol):
    channels: Iterable[ChannelLike]
    afk_channel: Optional[ChannelLike]

    def get_channel(self, channel_id: int, /) -> Optional[ChannelLike]:
        ...


def is_voice_channel(channel: Optional[ChannelLike]) -> bool:
    """True for standard voice rooms and stage channels."""
    if channel is None:
        return False
    return getattr(channel, "type", None) in _VOICE_CHANNEL_TYPES


def resolve_voice_channel(guild: Optional[GuildLike], token: Optional[str]) -> Optional[ChannelLike]:
    """Resolve a mention, ID, or exact name to a voice channel.

    IDs (bare or ``<#id>``) win over names. Name matching is exact apart from
    case, and duplicate names resolve to the first channel in guild order.
    """

    if guild is None or not token:
        return None

    raw_id = str(token).translate(_MENTION_DECORATION).strip()
    if _CHANNEL_ID.fullmatch(raw_id):
        channel = guild.get_channel(int(raw_id))
        if is_voice_channel(channel):
            return channel

    wanted = str(token).lower()
    for channel in guild.channels:
        if is_voice_channel(channel) and channel.name.lower() == wanted:
            return channel

    return None


def resolve_afk_channel(guild: GuildLike) -> Optional[ChannelLike]:
    channel = getattr(guild, "afk_channel", None)
    return channel if is_voice_channel(channel) else None
