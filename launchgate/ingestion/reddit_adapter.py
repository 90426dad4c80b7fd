"""Reddit adapter.

Accepts listing children (``{"kind": "t3", "data": {...}}``) or the bare
post/comment objects. Comments get a ``comment_`` id prefix so that a
post and its comments never collide on identity.
"""

from typing import Any

from launchgate.ingestion.base import (
    UNKNOWN_AUTHOR,
    Signal,
    SourceType,
    as_dict,
    as_number,
    as_str,
    coerce_payload,
    fallback_id,
    parse_timestamp,
)


class RedditAdapter:
    """Converts Reddit posts and comments into Signals."""

    @property
    def source(self) -> SourceType:
        return SourceType.REDDIT

    def to_signal(self, payload: Any) -> Signal:
        raw = coerce_payload(payload)
        kind = as_str(raw.get("kind"))
        item = as_dict(raw.get("data")) if kind else raw

        is_comment = kind == "t1" or ("body" in item and "title" not in item)
        if is_comment:
            return self._comment(raw, item)
        return self._post(raw, item)

    def _post(self, raw: dict, post: dict) -> Signal:
        title = as_str(post.get("title"))
        selftext = as_str(post.get("selftext"))
        content = title + ("\n\n" + selftext if selftext else "")

        is_self = bool(post.get("is_self", True))
        is_video = bool(post.get("is_video", False))
        url = as_str(post.get("url"))
        post_id = as_str(post.get("id"))

        return Signal(
            source=SourceType.REDDIT,
            source_id=post_id or fallback_id(SourceType.REDDIT),
            channel=f"r/{as_str(post.get('subreddit'), 'unknown')}",
            author=as_str(post.get("author"), UNKNOWN_AUTHOR),
            author_id=as_str(post.get("author_fullname") or post.get("author")),
            content=content,
            raw_payload=raw,
            has_media=(not is_self) or is_video,
            media_urls=(url,) if (not is_self and url) else (),
            engagement_score=as_number(post.get("score")),
            created_at=parse_timestamp(post.get("created_utc")),
        )

    def _comment(self, raw: dict, comment: dict) -> Signal:
        comment_id = as_str(comment.get("id"))
        return Signal(
            source=SourceType.REDDIT,
            source_id=f"comment_{comment_id}" if comment_id else fallback_id(SourceType.REDDIT),
            channel=f"r/{as_str(comment.get('subreddit'), 'unknown')}",
            author=as_str(comment.get("author"), UNKNOWN_AUTHOR),
            author_id=as_str(comment.get("author_fullname") or comment.get("author")),
            content=as_str(comment.get("body")),
            raw_payload=raw,
            has_media=False,
            engagement_score=as_number(comment.get("score")),
            created_at=parse_timestamp(comment.get("created_utc")),
        )
