"""Import a WooCommerce product export from the command line.

Usage:
    cabinetbox-import FILE [--publish | --no-publish] [--discount PERCENT]
                           [--batch-size N] [--endpoint URL] [--dry-run] [-v]

Exit status is 0 when every product was created, 1 on a partial import and
2 when the file or options were rejected.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from cabinetbox.config import settings
from cabinetbox.exceptions import ImportFileError, ImportPreconditionError
from cabinetbox.models.import_session import ImportSession
from cabinetbox.schemas.import_schemas import ImportDefaults
from cabinetbox.services.import_service import BatchProgress, load_file, run_import
from cabinetbox.services.product_client import ProductServiceClient

EXIT_OK = 0
EXIT_PARTIAL = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cabinetbox-import",
        description="Import cabinet products from a WooCommerce product export",
    )
    parser.add_argument("file", type=Path, help="CSV or XLSX product export")
    publish = parser.add_mutually_exclusive_group()
    publish.add_argument("--publish", dest="publish", action="store_true", default=None,
                         help="Publish every imported product")
    publish.add_argument("--no-publish", dest="publish", action="store_false",
                         help="Import every product unpublished")
    parser.add_argument("--discount", type=float, default=None,
                        help="Discount percentage (0-100) applied to every product")
    parser.add_argument("--batch-size", type=int, default=None,
                        help="Number of products created concurrently (default: from config)")
    parser.add_argument("--endpoint", default=None,
                        help="Product service GraphQL URL (default: from config)")
    parser.add_argument("--dry-run", action="store_true",
                        help="Parse and map only; do not create products")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _print_preview(session: ImportSession) -> None:
    print(session.success_message)
    if session.low_confidence_count:
        print(f"  {session.low_confidence_count} products used the default brand/style")
    for product in session.preview_rows:
        print(
            f"  {product.primary_sku:<16} {product.brand:<14} {product.door_style:<12} "
            f"{product.width:g}W x {product.height:g}H  ${product.retail_price:.2f}"
        )


async def run(args: argparse.Namespace) -> int:
    """Run one import from parsed command-line arguments."""
    import_config = settings.import_config
    session = ImportSession()

    try:
        content = args.file.read_bytes()
    except OSError as e:
        print(f"Error: cannot read {args.file}: {e}", file=sys.stderr)
        return EXIT_ERROR

    try:
        load_file(session, args.file.name, content, import_config, settings.mapping)
    except ImportFileError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    _print_preview(session)
    if args.dry_run:
        return EXIT_OK

    try:
        defaults = ImportDefaults(
            default_publish=import_config.default_publish if args.publish is None else args.publish,
            default_discount=import_config.default_discount if args.discount is None else args.discount,
        )
    except ValidationError as e:
        print(f"Error: invalid import options: {e.errors()[0]['msg']}", file=sys.stderr)
        return EXIT_ERROR

    batch_size = import_config.batch_size if args.batch_size is None else args.batch_size
    client = ProductServiceClient(
        endpoint_url=args.endpoint or settings.product_service_url,
        api_key=settings.product_service_api_key,
        timeout=settings.product_service_timeout,
    )

    def report(batch: BatchProgress) -> None:
        print(f"  {batch.progress:3d}%  {batch.imported_count}/{batch.total} imported")

    async with client:
        try:
            await run_import(session, client.create_cabinet_product, defaults, batch_size, on_batch=report)
        except ImportPreconditionError as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_ERROR

    print(session.message)
    for failure in session.failures:
        print(f"  failed {failure.sku}: {failure.error}", file=sys.stderr)
    return EXIT_OK if session.imported_count == session.total_count else EXIT_PARTIAL


def main(argv: list[str] | None = None) -> int:
    """Entry point for ``cabinetbox-import``."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose or settings.debug else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
