"""Telegram adapter.

Handles Bot API ``Message`` objects (from ``message`` or ``channel_post``
updates). Whole updates are unwrapped to the message they carry.
"""

from typing import Any

from launchgate.ingestion.base import (
    UNKNOWN_AUTHOR,
    Signal,
    SourceType,
    as_dict,
    as_list,
    as_number,
    as_str,
    coerce_payload,
    fallback_id,
    first_present,
    parse_timestamp,
)

_MEDIA_KEYS = ("photo", "video", "document", "animation", "audio", "voice")


class TelegramAdapter:
    """Converts Telegram messages into Signals."""

    @property
    def source(self) -> SourceType:
        return SourceType.TELEGRAM

    def to_signal(self, payload: Any) -> Signal:
        raw = coerce_payload(payload)
        message = raw
        for key in ("message", "channel_post", "edited_message", "edited_channel_post"):
            if isinstance(raw.get(key), dict):
                message = raw[key]
                break

        chat = as_dict(message.get("chat"))
        sender = as_dict(message.get("from"))
        sender_chat = as_dict(message.get("sender_chat"))

        chat_id = as_str(chat.get("id"))
        message_id = as_str(message.get("message_id"))
        if chat_id and message_id:
            source_id = f"{chat_id}_{message_id}"
        else:
            source_id = fallback_id(SourceType.TELEGRAM)

        author = as_str(
            first_present(sender, "username", "first_name")
            or first_present(sender_chat, "username", "title"),
            UNKNOWN_AUTHOR,
        )

        media_urls = tuple(
            as_str(u) for u in as_list(message.get("media_urls")) if as_str(u)
        )
        has_media = any(message.get(k) for k in _MEDIA_KEYS) or bool(media_urls)

        return Signal(
            source=SourceType.TELEGRAM,
            source_id=source_id,
            channel=as_str(first_present(chat, "title", "username"), chat_id or "unknown"),
            author=author,
            author_id=as_str(sender.get("id") or sender_chat.get("id")),
            content=as_str(message.get("text") or message.get("caption")),
            raw_payload=raw,
            has_media=has_media,
            media_urls=media_urls,
            engagement_score=as_number(message.get("views")),
            created_at=parse_timestamp(message.get("date")),
        )
