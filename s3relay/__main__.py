"""
s3relay CLI Entrypoint

Commands:
    s3relay probe                 Check bucket reachability (signed HEAD)
    s3relay upload FILE [--mime]  Upload a file and print its access URL
    s3relay version               Show version info

Configuration is read from S3RELAY_* environment variables, e.g.:

    S3RELAY_PROVIDER=r2 S3RELAY_ENDPOINT=https://<account>.r2.cloudflarestorage.com \\
    S3RELAY_BUCKET=media S3RELAY_ACCESS_KEY_ID=... S3RELAY_SECRET_ACCESS_KEY=... \\
    python -m s3relay upload photo.png
"""

from __future__ import annotations

import argparse
import asyncio
import mimetypes
import signal
import sys
from pathlib import Path
from typing import NoReturn, Optional

from s3relay.core import constants as C
from s3relay.core.config import StorageConfig
from s3relay.core.types import ProgressEvent
from s3relay.observability.logging import LogLevel, setup_logging
from s3relay.transfer.cancellation import CancelToken
from s3relay.transfer.probe import ConnectionProbe
from s3relay.transfer.upload import UploadTransport


def main(argv: Optional[list[str]] = None) -> NoReturn:
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        prog="s3relay",
        description="Signed uploads to S3-compatible object storage",
    )
    parser.add_argument(
        "--env-prefix",
        default=C.ENV_PREFIX,
        help=f"Environment variable prefix (default: {C.ENV_PREFIX})",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Log level (default: WARNING)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON log lines",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("probe", help="Check bucket reachability")

    upload_parser = subparsers.add_parser("upload", help="Upload a file")
    upload_parser.add_argument("file", type=Path, help="File to upload")
    upload_parser.add_argument(
        "--mime",
        default=None,
        help="Content type (guessed from the file name when omitted)",
    )

    subparsers.add_parser("version", help="Show version info")

    args = parser.parse_args(argv)

    if args.command == "version":
        print(f"s3relay {_get_version()}")
        sys.exit(0)
    if args.command not in ("probe", "upload"):
        parser.print_help()
        sys.exit(0)

    try:
        level = LogLevel.parse(args.log_level)
        config = StorageConfig.from_env(args.env_prefix)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)

    setup_logging(level, json_output=args.json_logs)

    if args.command == "probe":
        sys.exit(asyncio.run(_run_probe(config)))
    sys.exit(asyncio.run(_run_upload(config, args.file, args.mime)))


def _get_version() -> str:
    """Get package version."""
    from s3relay import __version__
    return __version__


async def _run_probe(config: StorageConfig) -> int:
    result = await ConnectionProbe().probe(config)
    if result.is_err():
        print(f"✗ {result.error.user_message}", file=sys.stderr)
        return 1
    reachable = result.unwrap()
    print(f"✓ Bucket '{config.bucket}' reachable ({reachable.latency_ms:.0f}ms)")
    return 0


async def _run_upload(config: StorageConfig, path: Path, mime: Optional[str]) -> int:
    try:
        data = path.read_bytes()
    except OSError as e:
        print(f"✗ Cannot read {path}: {e}", file=sys.stderr)
        return 1

    mime_type = mime or mimetypes.guess_type(path.name)[0]
    token = CancelToken()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, token.cancel)
    except (NotImplementedError, RuntimeError):
        # Signal handlers are unavailable on some platforms (Windows)
        pass

    last_percent = -1

    def on_progress(event: ProgressEvent) -> None:
        nonlocal last_percent
        if event.percent != last_percent:
            last_percent = event.percent
            print(f"\r  uploading... {event.percent:3d}%", end="", file=sys.stderr, flush=True)

    result = await UploadTransport().upload(
        config, data, path.name, mime_type, on_progress=on_progress, cancel_token=token,
    )
    if last_percent >= 0:
        print(file=sys.stderr)

    if result.success:
        print(result.access_url)
        return 0
    if result.cancelled:
        print(result.error.user_message, file=sys.stderr)
        return 130
    print(f"✗ {result.error.user_message}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    main()
