from __future__ import annotations

from typing import Any, Mapping

from .config_schema import SaveSettings
from .extractors import ExtractionContext, body_text, extract_body
from .filters import PostCriteria, PostFilter, ResourceGate
from .naming import create_file_id, split_url_name_ext
from .payload import BasePost, parse_post_payload
from .result import ExtractionResult, FileCandidate, LinkBundle
from .run_log import RunLogger
from .store import ResultSink


class PostNormalizer:
    """
    Turns one post-info payload into an ExtractionResult and hands it to the store.

    ``settings`` may be replaced between calls; each ``receive`` reads it once.
    """

    def __init__(
        self,
        post_filter: PostFilter,
        settings: SaveSettings,
        store: ResultSink,
        *,
        logger: RunLogger | None = None,
    ) -> None:
        self.settings = settings
        self._filter = post_filter
        self._gate = ResourceGate(post_filter)
        self._store = store
        self._logger = logger

    def receive(self, payload: Mapping[str, Any] | BasePost) -> ExtractionResult | None:
        """
        Normalize and store one post.

        Returns the stored result, or None when the post was filtered out or is
        fee-gated without a cover. Raises PayloadError for malformed payloads and
        UnknownProviderError for embeds that cannot be resolved.
        """
        post = parse_post_payload(payload)
        settings = self.settings

        criteria = PostCriteria(
            id=post.id,
            fee=post.fee_required,
            date=post.published_datetime,
            title=post.title,
        )
        if not self._filter.check(criteria):
            self._log("debug", "post_rejected", post.id, title=post.title)
            return None

        result = ExtractionResult(
            post_id=post.id,
            type=post.type,
            title=post.title,
            date=post.published_datetime,
            fee=post.fee_required,
            user=post.user.name,
            uid=post.user.user_id,
            create_id=post.creator_id,
            tags=",".join(post.tags),
            links=LinkBundle(name=f"links-{post.id}"),
        )

        cover = post.cover_image_url
        if settings.save_post_cover and cover:
            parts = split_url_name_ext(cover)
            result.files.append(
                FileCandidate(
                    file_id=create_file_id(),
                    name=parts.name,
                    ext=parts.ext,
                    size=None,
                    index=0,
                    url=cover,
                    retry_url=None,
                )
            )

        if post.body is None:
            self._store.skip_due_to_fee += 1
            self._log(
                "warning",
                "post_skipped_fee_required",
                post.id,
                title=post.title,
                fee=post.fee_required,
            )
            if not result.files:
                return None
            self._store.add_result(result)
            return result

        ctx = ExtractionContext(
            post_id=post.id,
            result=result,
            settings=settings,
            gate=self._gate,
        )

        if post.type != "article":
            text = body_text(post)
            if text:
                ctx.add_text_links(text)
                if settings.save_text:
                    result.links.append(text)

        if not extract_body(post, ctx):
            self._log("debug", "post_type_unhandled", post.id, type=post.type)

        self._store.add_result(result)
        self._log(
            "info",
            "post_stored",
            post.id,
            type=post.type,
            files=len(result.files),
            links=len(result.links.text),
        )
        return result

    def _log(self, level: str, event: str, post_id: str, **data: Any) -> None:
        if self._logger is None:
            return
        getattr(self._logger, level)(event, post_id=post_id, **data)
