from __future__ import annotations

import unittest
from typing import get_args

from fanbox_extract.embeds import (
    PROVIDER_PREFIXES,
    EmbedProvider,
    EmbedReference,
    resolve_embed_link,
    resolve_embed_links,
)
from fanbox_extract.errors import PayloadError, UnknownProviderError


class TestEmbedLinks(unittest.TestCase):
    def test_youtube(self) -> None:
        link = resolve_embed_link(EmbedReference(provider="youtube", content_id="abc123"))
        self.assertEqual(link, "https://www.youtube.com/watch?v=abc123")

    def test_google_forms_gets_viewform_suffix(self) -> None:
        link = resolve_embed_link(EmbedReference(provider="google_forms", content_id="xyz"))
        self.assertEqual(link, "https://docs.google.com/forms/d/e/xyz/viewform")

    def test_resolves_in_order(self) -> None:
        refs = [
            EmbedReference(provider="twitter", content_id="1"),
            EmbedReference(provider="gist", content_id="user/abc"),
        ]
        self.assertEqual(
            resolve_embed_links(refs, enabled=True),
            ["https://twitter.com/i/web/status/1", "https://gist.github.com/user/abc"],
        )

    def test_disabled_returns_empty(self) -> None:
        refs = [EmbedReference(provider="youtube", content_id="abc123")]
        self.assertEqual(resolve_embed_links(refs, enabled=False), [])

    def test_unknown_provider_raises(self) -> None:
        refs = [EmbedReference(provider="dailymotion", content_id="x1")]
        with self.assertRaises(UnknownProviderError) as ctx:
            resolve_embed_links(refs, enabled=True, post_id="42")
        self.assertEqual(ctx.exception.provider, "dailymotion")
        self.assertEqual(ctx.exception.post_id, "42")
        self.assertIsInstance(ctx.exception, PayloadError)

    def test_unknown_provider_ignored_when_disabled(self) -> None:
        refs = [EmbedReference(provider="dailymotion", content_id="x1")]
        self.assertEqual(resolve_embed_links(refs, enabled=False), [])

    def test_table_covers_every_provider(self) -> None:
        self.assertEqual(set(PROVIDER_PREFIXES), set(get_args(EmbedProvider)))


if __name__ == "__main__":
    unittest.main()
