"""Upload a resume file to a running service and print the provider file id.

Usage:
    python scripts/upload_resume.py path/to/resume.pdf --base-url http://localhost:8000
"""

from __future__ import annotations

import argparse
import os
from pathlib import Path

import httpx

from app.client.upload import ResumeUploadError, upload_resume


def main() -> None:
    """Entry point."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("path", type=Path, help="Resume file to upload")
    parser.add_argument(
        "--base-url",
        default=os.getenv("RESUME_SCRUBBER_URL", "http://localhost:8000"),
        help="Service base URL (default: $RESUME_SCRUBBER_URL or http://localhost:8000)",
    )
    args = parser.parse_args()

    if not args.path.is_file():
        raise SystemExit(f"File not found: {args.path}")

    with args.path.open("rb") as fh:
        try:
            file_id = upload_resume(fh, base_url=args.base_url, filename=args.path.name)
        except (ResumeUploadError, OSError) as exc:
            raise SystemExit(str(exc)) from exc
        except httpx.HTTPError as exc:
            raise SystemExit(f"Upload failed: {exc}") from exc

    print(file_id)


if __name__ == "__main__":
    main()
