from __future__ import annotations

import re
import unittest

from fanbox_extract.naming import create_file_id, split_url_name_ext


class TestSplitUrlNameExt(unittest.TestCase):
    def test_splits_plain_file_name(self) -> None:
        parts = split_url_name_ext("https://cdn.example.com/abc.png")
        self.assertEqual(parts.name, "abc")
        self.assertEqual(parts.ext, "png")

    def test_ignores_query_and_uses_last_extension(self) -> None:
        parts = split_url_name_ext("https://cdn.example.com/a/b/abc.def.jpeg?w=1200#top")
        self.assertEqual(parts.name, "abc")
        self.assertEqual(parts.ext, "jpeg")

    def test_segment_without_dot_has_empty_extension(self) -> None:
        parts = split_url_name_ext("https://cdn.example.com/files/readme")
        self.assertEqual(parts.name, "readme")
        self.assertEqual(parts.ext, "")


class TestCreateFileId(unittest.TestCase):
    def test_millis_followed_by_hex(self) -> None:
        file_id = create_file_id()
        self.assertRegex(file_id, re.compile(r"^\d{13,}[0-9a-f]{12}$"))

    def test_successive_ids_differ(self) -> None:
        ids = {create_file_id() for _ in range(50)}
        self.assertEqual(len(ids), 50)


if __name__ == "__main__":
    unittest.main()
