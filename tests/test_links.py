from __future__ import annotations

import unittest

from fanbox_extract.links import (
    extract_text_links,
    restore_drive_url,
    strip_html_tags,
    url_embed_link,
)
from fanbox_extract.payload import UrlEmbed


class TestExtractTextLinks(unittest.TestCase):
    def test_finds_links_across_lines(self) -> None:
        text = "see http://a.com/x and also\nhttp://b.com/y"
        self.assertEqual(
            extract_text_links(text, enabled=True),
            ["http://a.com/x", "http://b.com/y"],
        )

    def test_disabled_returns_empty(self) -> None:
        text = "see http://a.com/x and also\nhttp://b.com/y"
        self.assertEqual(extract_text_links(text, enabled=False), [])

    def test_finds_every_link_on_one_line(self) -> None:
        text = "first https://a.com/1?x=2 then https://b.com/2#frag"
        self.assertEqual(
            extract_text_links(text, enabled=True),
            ["https://a.com/1?x=2", "https://b.com/2#frag"],
        )

    def test_repeated_calls_do_not_share_state(self) -> None:
        text = "only https://a.com/1"
        first = extract_text_links(text, enabled=True)
        second = extract_text_links(text, enabled=True)
        self.assertEqual(first, second)
        self.assertEqual(first, ["https://a.com/1"])

    def test_link_ends_at_non_ascii_text(self) -> None:
        self.assertEqual(
            extract_text_links("詳細はhttps://example.com/abcです", enabled=True),
            ["https://example.com/abc"],
        )

    def test_text_without_links(self) -> None:
        self.assertEqual(extract_text_links("no links here", enabled=True), [])
        self.assertEqual(extract_text_links("", enabled=True), [])


class TestStripHtmlTags(unittest.TestCase):
    def test_removes_tags_keeps_text(self) -> None:
        html = '<p>Hello <b>there</b> <a href="https://x.com/a">link</a></p>'
        self.assertEqual(strip_html_tags(html), "Hello there link")


class TestUrlEmbedLink(unittest.TestCase):
    def test_default_embed_uses_url(self) -> None:
        embed = UrlEmbed(type="default", url="https://example.com/page")
        self.assertEqual(url_embed_link(embed), "https://example.com/page")

    def test_drive_file_preview_is_restored(self) -> None:
        embed = UrlEmbed(
            type="html",
            html='<iframe src="https://drive.google.com/preview?usp=embed_googleplus"></iframe>',
        )
        link = url_embed_link(embed)
        self.assertIsNotNone(link)
        assert link is not None
        self.assertTrue(link.endswith("edit?usp=drive_link"))

    def test_drive_folder_is_restored(self) -> None:
        embed = UrlEmbed(
            type="html.card",
            html=(
                '<iframe src="https://drive.google.com/embeddedfolderview?id=XYZ#list" '
                'width="100%"></iframe>'
            ),
        )
        self.assertEqual(
            url_embed_link(embed),
            "https://drive.google.com/drive/folders/XYZ?usp=drive_link",
        )

    def test_html_without_iframe_falls_back_to_markup(self) -> None:
        markup = "<blockquote>quoted</blockquote>"
        embed = UrlEmbed(type="html", html=markup)
        self.assertEqual(url_embed_link(embed), markup)

    def test_other_kinds_contribute_nothing(self) -> None:
        embed = UrlEmbed(type="fanbox.post", url="https://www.fanbox.cc/@x/posts/1")
        self.assertIsNone(url_embed_link(embed))

    def test_restore_leaves_other_urls_alone(self) -> None:
        url = "https://example.com/embed?id=1"
        self.assertEqual(restore_drive_url(url), url)


if __name__ == "__main__":
    unittest.main()
