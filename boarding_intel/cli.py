# cli.py
from __future__ import annotations

import argparse
import asyncio
import mimetypes
import sys
from pathlib import Path
from typing import List, Optional

from .config import DEFAULT_BACKENDS, PIPELINE_MODE
from .logging_utils import configure_logging
from .pipeline import BoardingPassPipeline
from .recognizers import BACKENDS, build_backends

EXIT_OK = 0
EXIT_MANUAL_REVIEW = 2


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="boarding-intel",
        description="Parse a boarding pass image, PDF or text file into a flight record (JSON on stdout).",
    )
    p.add_argument("path", type=Path, help="boarding pass file")
    p.add_argument(
        "--backends",
        default=",".join(DEFAULT_BACKENDS),
        help=f"comma-separated OCR backends in priority order ({', '.join(BACKENDS)})",
    )
    p.add_argument("--mime-type", help="override the MIME type guessed from the file name")
    p.add_argument(
        "--lenient",
        action="store_true",
        default=PIPELINE_MODE == "lenient",
        help="best-effort resolution with warnings instead of strict failures",
    )
    p.add_argument("--log-level", default=None, help="root log level (default: LOG_LEVEL or INFO)")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = _parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, stream=sys.stderr)

    mime_type = args.mime_type or mimetypes.guess_type(str(args.path))[0] or "application/octet-stream"
    names = [n for n in args.backends.split(",") if n.strip()]
    if mime_type.startswith("text/") and "plain" not in names:
        names.insert(0, "plain")

    try:
        backends = build_backends(names)
    except ValueError as e:
        parser.error(str(e))

    pipeline = BoardingPassPipeline(backends, strict=not args.lenient)
    result = asyncio.run(pipeline.parse(args.path.read_bytes(), mime_type))
    print(result.model_dump_json(indent=2))
    return EXIT_OK if result.success else EXIT_MANUAL_REVIEW


if __name__ == "__main__":
    sys.exit(main())
