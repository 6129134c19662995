from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from fanbox_extract.config import config_sha256, load_config
from fanbox_extract.errors import ConfigError


_VALID_YAML = """\
save:
  save_post_cover: false
  save_text: true
  save_link: true

filters:
  allowed_extensions: [".PNG", jpg, zip]
  blocked_extensions: []
  min_fee: 0
  max_fee: 1000
  date_from: "2024-01-01T00:00:00+09:00"
  date_to: "2024-12-31T23:59:59+09:00"
  title_include: []
  title_exclude: ["draft"]
  exclude_post_ids: [123, "456"]

output:
  results_file: results.jsonl
  state_file: state.sqlite
  log_file: run.log
"""


class TestConfig(unittest.TestCase):
    def _write(self, td: str, text: str) -> Path:
        path = Path(td) / "config.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    def test_load_config_ok(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            cfg = load_config(self._write(td, _VALID_YAML))

            self.assertFalse(cfg.save.save_post_cover)
            self.assertTrue(cfg.save.save_text)
            self.assertEqual(cfg.filters.allowed_extensions, ["png", "jpg", "zip"])
            self.assertEqual(cfg.filters.exclude_post_ids, ["123", "456"])
            self.assertEqual(cfg.filters.max_fee, 1000)

    def test_empty_file_gives_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            cfg = load_config(self._write(td, ""))

            self.assertTrue(cfg.save.save_post_cover)
            self.assertFalse(cfg.save.save_text)
            self.assertTrue(cfg.save.save_link)
            self.assertEqual(cfg.output.results_file, "results.jsonl")

    def test_rejects_unknown_keys(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = self._write(td, "save:\n  save_everything: true\n")
            with self.assertRaises(ConfigError) as ctx:
                load_config(path)
            self.assertIn("save.save_everything", str(ctx.exception))

    def test_rejects_inverted_date_window(self) -> None:
        bad_yaml = _VALID_YAML.replace('date_to: "2024-12-31T23:59:59+09:00"', 'date_to: "2023-01-01T00:00:00+09:00"')
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(ConfigError):
                load_config(self._write(td, bad_yaml))

    def test_rejects_naive_dates(self) -> None:
        bad_yaml = _VALID_YAML.replace('"2024-01-01T00:00:00+09:00"', '"2024-01-01T00:00:00"')
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(ConfigError):
                load_config(self._write(td, bad_yaml))

    def test_rejects_non_mapping_and_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(ConfigError):
                load_config(self._write(td, "- just\n- a list\n"))
            with self.assertRaises(ConfigError):
                load_config(Path(td) / "missing.yaml")

    def test_hash_is_stable(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = self._write(td, _VALID_YAML)
            self.assertEqual(config_sha256(load_config(path)), config_sha256(load_config(path)))
            self.assertNotEqual(
                config_sha256(load_config(path)),
                config_sha256(load_config(self._write(td, ""))),
            )


if __name__ == "__main__":
    unittest.main()
