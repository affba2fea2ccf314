"""Prefix command handling for ``move`` and ``afk``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Protocol, Sequence
import logging

from voicemover.commands.duration import format_ms, parse_delay_ms
from voicemover.commands.tokenizer import tokenize_args
from voicemover.discord.channels import is_voice_channel, resolve_afk_channel, resolve_voice_channel
from voicemover.discord.scheduler import ScheduledMove


MOVE_COMMAND = "move"
AFK_COMMAND = "afk"

IGNORED = "ignored"
PERMISSION_DENIED = "permission_denied"
REJECTED = "rejected"
SCHEDULED = "scheduled"
COMPLETED = "completed"
FAILED = "failed"

PERMISSION_DENIED_MESSAGE = 'I need the "Move Members" permission to do that.'
INVALID_DELAY_MESSAGE = "Please provide a valid delay (e.g., 30s, 5m, 1h, or seconds like 120)."
MAX_DELAY_MS = 7 * 24 * 3600 * 1000

BotUserIdProvider = Callable[[], Optional[int]]


class CommandValidationError(ValueError):
    """Raised when command arguments cannot be turned into a move."""


@dataclass(frozen=True)
class DispatchOutcome:
    state: str
    reply: Optional[str] = None
    move: Optional[ScheduledMove] = None


class MoverLike(Protocol):
    async def move_members(self, source: Any, destination: Any) -> Any:
        ...


class SchedulerLike(Protocol):
    def schedule(self, move: ScheduledMove, callback: Callable[[ScheduledMove], Awaitable[Any]]) -> Any:
        ...


def move_usage(prefix: str) -> str:
    return (
        "Usage:\n"
        f"- {prefix}move <to> <delay>  (uses your current voice channel as the source)\n"
        f"- {prefix}move <from> <to> <delay>\n"
        'Tips: Use mentions <#id>, IDs, or quotes for names with spaces, e.g. "Team Meeting"\n'
        f'Examples: {prefix}move <#123> 10m | {prefix}move "Lobby A" "Gaming B" 30s'
    )


def afk_usage(prefix: str) -> str:
    return (
        "Usage:\n"
        f"- {prefix}afk <delay>  (moves everyone from your current voice channel to the server AFK channel)\n"
        f"Examples: {prefix}afk 30s | {prefix}afk 5m"
    )


class CommandDispatcher:
    """Validates prefix commands and schedules the resulting batch moves.

    ``handle`` replies to the triggering message straight away; the move
    itself happens later through ``execute``, which the scheduler calls once
    the delay has elapsed.
    """

    def __init__(
        self,
        *,
        prefix: str,
        mover: MoverLike,
        scheduler: SchedulerLike,
        bot_user_id_provider: Optional[BotUserIdProvider] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if not prefix:
            raise ValueError("prefix cannot be empty.")
        self._prefix = prefix
        self._mover = mover
        self._scheduler = scheduler
        self._bot_user_id_provider = bot_user_id_provider or (lambda: None)
        self._logger = logger or logging.getLogger("voicemover.discord.dispatcher")

    @property
    def prefix(self) -> str:
        return self._prefix

    async def handle(self, message: Any) -> DispatchOutcome:
        guild = getattr(message, "guild", None)
        if guild is None:
            return DispatchOutcome(state=IGNORED)
        if message.author.bot:
            return DispatchOutcome(state=IGNORED)

        content = message.content or ""
        if not content.startswith(self._prefix):
            return DispatchOutcome(state=IGNORED)

        tokens = tokenize_args(content[len(self._prefix):].strip())
        if not tokens:
            return DispatchOutcome(state=IGNORED)
        command, args = tokens[0].lower(), tokens[1:]
        if command not in (MOVE_COMMAND, AFK_COMMAND):
            return DispatchOutcome(state=IGNORED)

        if not await self._can_move_members(guild):
            await message.reply(PERMISSION_DENIED_MESSAGE)
            return DispatchOutcome(state=PERMISSION_DENIED, reply=PERMISSION_DENIED_MESSAGE)

        try:
            if command == MOVE_COMMAND:
                move = self._validate_move(message, args)
            else:
                move = self._validate_afk(message, args)
        except CommandValidationError as exc:
            reply = str(exc)
            await message.reply(reply)
            return DispatchOutcome(state=REJECTED, reply=reply)

        confirmation = self._confirmation(move)
        await message.reply(confirmation)
        self._scheduler.schedule(move, self.execute)
        return DispatchOutcome(state=SCHEDULED, reply=confirmation, move=move)

    async def execute(self, move: ScheduledMove) -> str:
        source_name = move.source.name
        destination_name = move.destination.name
        try:
            await self._mover.move_members(move.source, move.destination)
        except Exception:
            self._logger.exception(
                "Scheduled %s failed: source=%s destination=%s",
                move.kind,
                move.source.id,
                move.destination.id,
            )
            if move.kind == AFK_COMMAND:
                notice = "AFK move failed. Check my permissions and try again."
            else:
                notice = "Move failed. Check my permissions and try again."
            await move.reply_channel.send(notice)
            return FAILED

        if move.kind == AFK_COMMAND:
            notice = f'Move to AFK complete: "{source_name}" → "{destination_name}".'
        else:
            notice = f'Move complete: "{source_name}" → "{destination_name}".'
        await move.reply_channel.send(notice)
        return COMPLETED

    async def _can_move_members(self, guild: Any) -> bool:
        me = getattr(guild, "me", None)
        if me is None:
            bot_user_id = self._bot_user_id_provider()
            if bot_user_id is None:
                self._logger.warning("Bot member unavailable for guild_id=%s", getattr(guild, "id", None))
                return False
            me = await guild.fetch_member(bot_user_id)
        return bool(me.guild_permissions.move_members)

    def _validate_move(self, message: Any, args: Sequence[str]) -> ScheduledMove:
        if len(args) == 3:
            from_arg, to_arg, delay_arg = args
        elif len(args) == 2:
            from_arg = None
            to_arg, delay_arg = args
        else:
            raise CommandValidationError(move_usage(self._prefix))

        delay_ms = self._parse_delay(delay_arg)

        destination = resolve_voice_channel(message.guild, to_arg)
        if destination is None:
            raise CommandValidationError(
                "Could not resolve the target voice channel. Mention it, use its ID, or exact name."
            )

        if from_arg is not None:
            source = resolve_voice_channel(message.guild, from_arg)
            if source is None:
                raise CommandValidationError(
                    "Could not resolve the source voice channel. Mention it, use its ID, or exact name."
                )
        else:
            source = _author_voice_channel(message)
            if source is None:
                raise CommandValidationError("Join a voice channel or specify the source channel explicitly.")

        if not is_voice_channel(source) or not is_voice_channel(destination):
            raise CommandValidationError("Both source and target must be voice channels.")
        if source.id == destination.id:
            raise CommandValidationError("Source and target channels are the same.")

        return ScheduledMove(
            kind=MOVE_COMMAND,
            source=source,
            destination=destination,
            delay_ms=delay_ms,
            reply_channel=message.channel,
        )

    def _validate_afk(self, message: Any, args: Sequence[str]) -> ScheduledMove:
        if len(args) != 1:
            raise CommandValidationError(afk_usage(self._prefix))

        delay_ms = self._parse_delay(args[0])

        destination = resolve_afk_channel(message.guild)
        if destination is None:
            raise CommandValidationError("This server has no AFK channel configured.")

        source = _author_voice_channel(message)
        if source is None or not is_voice_channel(source):
            raise CommandValidationError("Join a voice channel to use this command.")

        if source.id == destination.id:
            raise CommandValidationError("You are already in the AFK channel.")

        return ScheduledMove(
            kind=AFK_COMMAND,
            source=source,
            destination=destination,
            delay_ms=delay_ms,
            reply_channel=message.channel,
        )

    @staticmethod
    def _parse_delay(raw: str) -> int:
        delay_ms = parse_delay_ms(raw)
        if delay_ms is None:
            raise CommandValidationError(INVALID_DELAY_MESSAGE)
        if delay_ms > MAX_DELAY_MS:
            raise CommandValidationError(f"That delay is too long. The maximum is {format_ms(MAX_DELAY_MS)}.")
        return delay_ms

    @staticmethod
    def _confirmation(move: ScheduledMove) -> str:
        member_count = len(move.source.members)
        target = f'AFK "{move.destination.name}"' if move.kind == AFK_COMMAND else f'"{move.destination.name}"'
        return (
            f'Scheduled: moving {member_count} member(s) from "{move.source.name}" '
            f"to {target} in {format_ms(move.delay_ms)}."
        )


def _author_voice_channel(message: Any) -> Optional[Any]:
    voice = getattr(message.author, "voice", None)
    return getattr(voice, "channel", None)
