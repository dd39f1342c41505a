#!/usr/bin/env python3
"""
Local Product Import Script

Turns a folder of product photos into seed products: photos are grouped
by base file name, copied to <public>/products/<slug>-NN.<ext>, and an
INSERT statement for the products table is written to supabase/seed.sql.

Usage:
    python3 scripts/import_local_products.py --images ./photos
    python3 scripts/import_local_products.py --images ./photos --public public --output supabase/seed.sql
    python3 scripts/import_local_products.py --images ./photos --dry-run
"""

import argparse
import logging
import os
import sys
from pathlib import Path

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from boutique.catalog.local_import import build_local_products, build_seed_sql
from boutique.common.log_config import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Build seed products from local photos")
    parser.add_argument("--images", default=".", help="Folder containing product photos (default: .)")
    parser.add_argument("--public", default="public", help="Public assets folder (default: public)")
    parser.add_argument("--output", default="supabase/seed.sql", help="SQL output path")
    parser.add_argument("--dry-run", action="store_true", help="Print SQL, copy nothing")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Warnings only")
    args = parser.parse_args()

    setup_logging(verbose=args.verbose, quiet=args.quiet)

    image_dir = Path(args.images)
    if not image_dir.is_dir():
        logger.error("Image folder not found: %s", image_dir)
        sys.exit(1)

    public_dir = None if args.dry_run else Path(args.public)
    products = build_local_products(image_dir, public_dir=public_dir)
    if not products:
        logger.warning("No .jpg/.jpeg/.png photos found in %s", image_dir)
        return

    sql = build_seed_sql(products)

    if args.dry_run:
        print(sql)
    else:
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(sql, encoding="utf-8")
        logger.info("Wrote %s", output)

    print(f"Imported {len(products)} products.")


if __name__ == "__main__":
    main()
