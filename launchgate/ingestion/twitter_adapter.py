"""X/Twitter adapter.

Accepts either a filtered-stream result from the X API v2 (``data`` plus
``includes`` expansions) or a flat tweet dict as produced by polling
clients and test fixtures.
"""

from typing import Any
import logging

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

logger = logging.getLogger(__name__)


class TwitterAdapter:
    """Converts tweets into Signals."""

    @property
    def source(self) -> SourceType:
        return SourceType.TWITTER

    def to_signal(self, payload: Any) -> Signal:
        raw = coerce_payload(payload)
        if "data" in raw and isinstance(raw["data"], dict):
            return self._from_stream_result(raw)
        return self._from_flat(raw)

    def _from_stream_result(self, raw: dict) -> Signal:
        tweet = raw["data"]
        includes = as_dict(raw.get("includes"))

        author_id = as_str(tweet.get("author_id"))
        username = UNKNOWN_AUTHOR
        for user in as_list(includes.get("users")):
            user = as_dict(user)
            if as_str(user.get("id")) == author_id and user.get("username"):
                username = as_str(user["username"], UNKNOWN_AUTHOR)
                break

        media_keys = set(
            as_str(k) for k in as_list(as_dict(tweet.get("attachments")).get("media_keys"))
        )
        media_urls = []
        for media in as_list(includes.get("media")):
            media = as_dict(media)
            if as_str(media.get("media_key")) not in media_keys:
                continue
            url = as_str(first_present(media, "url", "preview_image_url"))
            if url:
                media_urls.append(url)

        metrics = as_dict(tweet.get("public_metrics"))
        engagement = sum(
            as_number(metrics.get(k))
            for k in ("like_count", "retweet_count", "reply_count", "quote_count")
        )

        return Signal(
            source=SourceType.TWITTER,
            source_id=as_str(tweet.get("id")) or fallback_id(SourceType.TWITTER),
            channel=f"@{username}",
            author=username,
            author_id=author_id,
            content=as_str(tweet.get("text")),
            raw_payload=raw,
            has_media=bool(media_keys) or bool(media_urls),
            media_urls=tuple(media_urls),
            engagement_score=engagement,
            created_at=parse_timestamp(tweet.get("created_at")),
        )

    def _from_flat(self, raw: dict) -> Signal:
        username = as_str(
            first_present(raw, "author_username", "authorUsername", "username"),
            UNKNOWN_AUTHOR,
        )
        media_urls = tuple(
            as_str(u) for u in as_list(first_present(raw, "media_urls", "mediaUrls"))
            if as_str(u)
        )
        return Signal(
            source=SourceType.TWITTER,
            source_id=as_str(raw.get("id")) or fallback_id(SourceType.TWITTER),
            channel=f"@{username}",
            author=username,
            author_id=as_str(first_present(raw, "author_id", "authorId")),
            content=as_str(raw.get("text")),
            raw_payload=raw,
            has_media=bool(media_urls),
            media_urls=media_urls,
            engagement_score=as_number(raw.get("engagement")),
            created_at=parse_timestamp(first_present(raw, "created_at", "createdAt")),
        )


def tweet_urls(signal: Signal) -> list[str]:
    """Expanded URLs attached to a tweet signal, if the payload carried any."""
    raw = signal.raw_payload
    if isinstance(raw.get("data"), dict):
        entities = as_dict(raw["data"].get("entities"))
        return [
            as_str(first_present(as_dict(u), "expanded_url", "url"))
            for u in as_list(entities.get("urls"))
            if first_present(as_dict(u), "expanded_url", "url")
        ]
    return [as_str(u) for u in as_list(raw.get("urls")) if as_str(u)]
