"""Main module for the media uploader CLI."""

import sys
import argparse
from pathlib import Path
from typing import List, Optional, Sequence

from .core import ConfigurationError, ImageAsset, UploadConfig, configure_cli_logging
from .upload_images import PROCESSORS, upload_property_images_with_outcomes

VERSION = "0.1.0"


def build_parser() -> argparse.ArgumentParser:
    """Build the `media-uploader` argument parser."""
    parser = argparse.ArgumentParser(
        prog="media-uploader",
        description="Media Uploader - upload property photos to S3 and print their public URLs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Upload two photos (bucket and region from AWS_BUCKET_NAME / AWS_REGION)
  media-uploader upload "Front Yard.jpg" kitchen.png

  # Upload concurrently with content-hashed keys, print outcomes as JSON
  media-uploader upload photos/*.jpg --bucket my-bucket --region eu-west-1 \\
                        --processor asyncio --key-strategy content_hash --json

  # Show version
  media-uploader version
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    upload_parser = subparsers.add_parser(
        "upload", help="Upload image files and print their public URLs"
    )
    upload_parser.add_argument("files", nargs="*", help="Image files to upload")
    upload_parser.add_argument("--bucket", default=None, help="Destination S3 bucket")
    upload_parser.add_argument("--region", default=None, help="Bucket region")
    upload_parser.add_argument(
        "--endpoint-url", default=None, help="Custom S3 endpoint (e.g. MinIO, LocalStack)"
    )
    upload_parser.add_argument(
        "--processor",
        type=str,
        default="serial",
        choices=sorted(PROCESSORS),
        help="Upload strategy to use (default: serial)",
    )
    upload_parser.add_argument(
        "--concurrency", type=int, default=None, help="Maximum uploads in flight"
    )
    upload_parser.add_argument(
        "--timeout", type=float, default=None, help="Per-asset timeout in seconds"
    )
    upload_parser.add_argument(
        "--key-strategy",
        choices=["name", "content_hash"],
        default=None,
        help="'name' keeps the file name, 'content_hash' appends a digest of the content",
    )
    upload_parser.add_argument(
        "--json", action="store_true", help="Print the full batch result as JSON"
    )
    upload_parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers.add_parser("version", help="Show version information")

    return parser


def assets_from_paths(paths: Sequence[str]) -> List[ImageAsset]:
    """Build assets from local paths; the declared name is the base name."""
    return [
        ImageAsset(uri=Path(path).absolute().as_uri(), file_name=Path(path).name)
        for path in paths
    ]


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    Entry point for the `media-uploader` command-line interface.

    Exit codes: 0 when at least one file was uploaded (or none were given),
    1 when every file was skipped, 2 on configuration errors.
    """
    parser = build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    if args.command == "upload":
        # stdout is reserved for URLs / JSON
        logger = configure_cli_logging(debug=args.debug)

        try:
            config = UploadConfig.from_env(
                bucket=args.bucket,
                region=args.region,
                endpoint_url=args.endpoint_url,
                key_strategy=args.key_strategy,
                concurrency=args.concurrency,
                item_timeout=args.timeout,
                debug=args.debug,
            )
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            sys.exit(2)
            return

        assets = assets_from_paths(args.files)
        result = upload_property_images_with_outcomes(
            assets, config=config, processor=args.processor
        )

        if args.json:
            print(result.model_dump_json(indent=2))
        else:
            for url in result.urls:
                print(url)

        sys.exit(0 if result.succeeded or not assets else 1)

    elif args.command == "version":
        print("Media Uploader CLI")
        print(f"Version {VERSION}")
        print("Batch upload of property photos to S3")
        sys.exit(0)

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
