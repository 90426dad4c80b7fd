"""Discord adapter.

Messages arrive as Discord API message objects, optionally enriched by
the gateway client with ``guild_name`` and ``channel_name``.
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


class DiscordAdapter:
    """Converts Discord messages into Signals."""

    @property
    def source(self) -> SourceType:
        return SourceType.DISCORD

    def to_signal(self, payload: Any) -> Signal:
        raw = coerce_payload(payload)
        author = as_dict(raw.get("author"))

        attachments = []
        for item in as_list(raw.get("attachments")):
            url = as_str(item) if isinstance(item, str) else as_str(as_dict(item).get("url"))
            if url:
                attachments.append(url)
        embeds = as_list(raw.get("embeds"))

        reactions = sum(
            as_number(as_dict(r).get("count")) for r in as_list(raw.get("reactions"))
        )

        guild = as_str(first_present(raw, "guild_name", "guildName"), "DM")
        channel = as_str(
            first_present(raw, "channel_name", "channelName", "channel_id", "channelId"),
            "unknown",
        )

        return Signal(
            source=SourceType.DISCORD,
            source_id=as_str(raw.get("id")) or fallback_id(SourceType.DISCORD),
            channel=f"{guild}/#{channel}",
            author=as_str(
                first_present(author, "username", "global_name")
                or first_present(raw, "author_username", "authorUsername"),
                UNKNOWN_AUTHOR,
            ),
            author_id=as_str(author.get("id") or first_present(raw, "author_id", "authorId")),
            content=as_str(raw.get("content")),
            raw_payload=raw,
            has_media=bool(attachments) or bool(embeds),
            media_urls=tuple(attachments),
            engagement_score=reactions,
            created_at=parse_timestamp(first_present(raw, "timestamp", "created_at", "createdAt")),
        )
