import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from transcoder.config.app_config import ConfigManager
from transcoder.config.config_validator import ConfigValidator
from transcoder.model.derivative_kind import DerivativeKind
from transcoder.transcoder import Transcoder

log = logging.getLogger()

LOGS_FORMAT = '[%(asctime)s][%(levelname)s]: %(message)s'


def configure_logging(logs_dir: Path, level: int = logging.INFO) -> None:
    logs_dir.mkdir(parents=True, exist_ok=True)

    log.setLevel(level)

    if log.hasHandlers():
        log.handlers.clear()

    logs_formatter = logging.Formatter(LOGS_FORMAT)

    all_logs_handler = logging.FileHandler(logs_dir / "full.log", mode='a', encoding='utf-8')
    all_logs_handler.setLevel(level)
    all_logs_handler.setFormatter(logs_formatter)
    log.addHandler(all_logs_handler)

    error_logs_handler = logging.FileHandler(logs_dir / "errors.log", mode='a', encoding='utf-8')
    error_logs_handler.setLevel(logging.ERROR)
    error_logs_handler.setFormatter(logs_formatter)
    log.addHandler(error_logs_handler)

    # Console goes to stderr so command output on stdout stays parseable
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logs_formatter)
    log.addHandler(console_handler)


def parse_option_value(raw_value: str) -> Any:
    lowered = raw_value.lower()
    if lowered in ("true", "yes"):
        return True
    if lowered in ("false", "no"):
        return False
    for parser in (int, float):
        try:
            return parser(raw_value)
        except ValueError:
            pass
    return raw_value


def parse_options(pairs: list[str]) -> dict[str, Any]:
    options = {}
    for pair in pairs:
        key, separator, value = pair.partition("=")
        if not separator or not key:
            raise ValueError(f"Options must look like key=value, got: {pair}")
        options[key] = parse_option_value(value)
    return options


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="transcoder",
                                     description="Produce web-ready video derivatives and thumbnails.")
    parser.add_argument("--config", type=Path, help="Path to a transcoder_config.toml file")
    parser.add_argument("--logs-dir", type=Path, default=Path("logs"), help="Directory for log files")
    parser.add_argument("--verbose", action="store_true", help="Log debug messages")

    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
            ("video", "Return the transcoded video URL, starting a job if needed"),
            ("thumbnail", "Return the thumbnail URL, starting a job if needed"),
            ("filename", "Print the derivative file name of a video"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("source", type=Path)
        sub.add_argument("options", nargs="*", metavar="key=value")
        if name == "thumbnail":
            sub.add_argument("--wait", type=float, default=None, help="Seconds to wait for a new thumbnail")

    status = subparsers.add_parser("status", help="Show the state of a derivative without starting a job")
    status.add_argument("kind", choices=[kind.value for kind in DerivativeKind])
    status.add_argument("source", type=Path)
    status.add_argument("options", nargs="*", metavar="key=value")

    info = subparsers.add_parser("info", help="Print the probe result of a video as json")
    info.add_argument("source", type=Path)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.logs_dir, logging.DEBUG if args.verbose else logging.INFO)

    if args.config is not None:
        config = ConfigManager.load_config(args.config)
        ConfigValidator.validate(config)
    else:
        config = ConfigManager.get_config()
    transcoder = Transcoder(config)

    if args.command == "info":
        print(json.dumps(transcoder.get_file_info(args.source), indent=4))
        return 0

    try:
        options = parse_options(args.options)
    except ValueError as e:
        parser.error(str(e))

    if args.command == "video":
        print(transcoder.get_video_url(args.source, options))
    elif args.command == "thumbnail":
        print(transcoder.get_video_thumbnail_url(args.source, options, wait_seconds=args.wait))
    elif args.command == "filename":
        print(transcoder.get_video_filename(args.source, options))
    elif args.command == "status":
        kind = DerivativeKind(args.kind)
        if kind == DerivativeKind.VIDEO:
            result = transcoder.video_status(args.source, options)
        else:
            result = transcoder.thumbnail_status(args.source, options)
        print(result.model_dump_json(indent=4))

    return 0


if __name__ == "__main__":
    sys.exit(main())
