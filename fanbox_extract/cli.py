from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from .batch import load_payload_items, run_extraction
from .config import config_sha256, load_config
from .errors import ConfigError, PayloadError, StorageError
from .run_log import RunLogger
from .store import SQLiteResultStore


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fanbox_extract")

    subparsers = parser.add_subparsers(dest="command", required=True)

    extract = subparsers.add_parser(
        "extract",
        help="Normalize saved post payloads into extraction results.",
    )
    extract.add_argument(
        "--config",
        required=True,
        help="Path to YAML config file.",
    )
    extract.add_argument(
        "--input",
        required=True,
        help="JSON or JSONL file with post-info payloads.",
    )
    extract.add_argument(
        "--out",
        required=True,
        help="Output directory for results, state and logs.",
    )
    extract.add_argument(
        "--verbose",
        action="store_true",
        help="Also log per-post debug events (rejections, unhandled types).",
    )
    extract.set_defaults(_handler=_cmd_extract)

    check = subparsers.add_parser(
        "check-config",
        help="Validate a config file and print its hash.",
    )
    check.add_argument(
        "--config",
        required=True,
        help="Path to YAML config file.",
    )
    check.set_defaults(_handler=_cmd_check_config)

    return parser


def _eprint(message: str) -> None:
    print(message, file=sys.stderr)


def _cmd_check_config(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    print(f"config_sha256={config_sha256(cfg)}")
    print(f"save_post_cover={cfg.save.save_post_cover}")
    print(f"save_text={cfg.save.save_text}")
    print(f"save_link={cfg.save.save_link}")
    return 0


def _cmd_extract(args: argparse.Namespace) -> int:
    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)

    cfg = load_config(args.config)
    log_path = out_dir / cfg.output.log_file
    min_level = "DEBUG" if bool(getattr(args, "verbose", False)) else "INFO"

    with RunLogger.open(log_path, overwrite=True, min_level=min_level) as log:
        log.info(
            "extract_command_started",
            config_path=str(args.config),
            config_sha256=config_sha256(cfg),
            input_path=str(args.input),
            out_dir=str(out_dir),
        )

        try:
            items = load_payload_items(args.input)
            log.info("payloads_loaded", count=len(items))

            db_path = out_dir / cfg.output.state_file
            results_path = out_dir / cfg.output.results_file

            with SQLiteResultStore.open(db_path) as store:
                summary = run_extraction(cfg, items, store=store, logger=log)
                written = store.export_jsonl(results_path)

            log.info(
                "extract_command_completed",
                total=summary.total,
                stored=summary.stored,
                rejected=summary.rejected,
                fee_skipped=summary.fee_skipped,
                failed=summary.failed,
                results_written=written,
            )

            print(f"total={summary.total}")
            print(f"stored={summary.stored}")
            print(f"rejected={summary.rejected}")
            print(f"fee_skipped={summary.fee_skipped}")
            print(f"failed={summary.failed}")
            print(f"results={results_path}")
            print(f"run_log={log_path}")

            return 0 if summary.failed == 0 else 4
        except Exception as e:
            log.exception("extract_command_failed", exc=e)
            raise


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        handler = getattr(args, "_handler")
        return int(handler(args))
    except ConfigError as e:
        _eprint(str(e))
        return 2
    except (PayloadError, StorageError) as e:
        _eprint(str(e))
        return 3
    except KeyboardInterrupt:
        _eprint("Interrupted")
        return 130
    except Exception as e:
        _eprint(f"Unexpected error: {e}")
        return 1
