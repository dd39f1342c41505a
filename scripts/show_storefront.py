#!/usr/bin/env python3
"""
Storefront Catalogue Viewer

Fetches products from Supabase, groups colour variants into storefront
tiles and prints them (table or JSON). Optionally lists the colour
variants of one product.

Usage:
    python3 scripts/show_storefront.py
    python3 scripts/show_storefront.py --category "Vêtements Femmes" --search robe
    python3 scripts/show_storefront.py --variants robe-soir-rouge
    python3 scripts/show_storefront.py --json > storefront.json

Environment (.env):
    SUPABASE_URL, SUPABASE_ANON_KEY
"""

import argparse
import json
import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dotenv import load_dotenv

from boutique.catalog import DEFAULT_SIZE, filter_by_category, product_to_row, search_entries
from boutique.common.config_loader import load_catalog_settings
from boutique.common.formatting import format_currency
from boutique.common.log_config import setup_logging
from boutique.services import PRODUCT_BUCKET, ProductRepository
from boutique.supabase import SupabaseClient, SupabaseError

load_dotenv()

logger = logging.getLogger(__name__)


def print_entries(entries) -> None:
    print("=" * 78)
    print(f"{'Product':<34} {'Category':<24} {'Stock':>6} {'Price':>12}")
    print("=" * 78)
    for entry in entries:
        stock = "épuisé" if entry.is_out_of_stock else str(entry.stock)
        category = f"{entry.main_category} / {entry.sub_category}"
        print(f"{entry.name[:34]:<34} {category[:24]:<24} {stock:>6} {format_currency(entry.price):>12}")
        if len(entry.variant_slugs) > 1:
            print(f"    variants: {', '.join(entry.variant_slugs)}")
        if entry.sizes:
            print(f"    sizes:    {', '.join(entry.sizes)}")
    print("-" * 78)
    print(f"{len(entries)} storefront entries")


def main() -> None:
    parser = argparse.ArgumentParser(description="Show the grouped storefront catalogue")
    parser.add_argument("--category", help="Main category filter (exact name)")
    parser.add_argument("--subcategory", help="Subcategory filter (exact name)")
    parser.add_argument("--search", help="Quick search term")
    parser.add_argument("--variants", metavar="SLUG", help="List colour variants of this product")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Warnings only")
    args = parser.parse_args()

    setup_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        client = SupabaseClient.from_env()
    except SupabaseError as e:
        logger.error("%s", e)
        sys.exit(1)

    settings = load_catalog_settings()
    repository = ProductRepository(
        client,
        default_size=settings.get("default_size", DEFAULT_SIZE),
        bucket=settings.get("product_bucket", PRODUCT_BUCKET),
    )
    try:
        if args.variants:
            product = repository.get_product_by_slug(args.variants)
            if product is None:
                logger.error("Product not found: %s", args.variants)
                sys.exit(1)
            results = repository.get_related_variants(product)
        else:
            results = repository.list_storefront()
    except SupabaseError as e:
        logger.error("Could not load products: %s", e)
        sys.exit(1)

    results = filter_by_category(results, args.category, args.subcategory)
    if args.search:
        results = search_entries(results, args.search)

    if args.json:
        rows = []
        for product in results:
            row = product_to_row(product)
            if hasattr(product, "variant_slugs"):
                row["variant_slugs"] = product.variant_slugs
            rows.append(row)
        print(json.dumps(rows, ensure_ascii=False, indent=2))
    elif args.variants:
        for product in results:
            marker = "*" if product.slug == args.variants else " "
            status = "out of stock" if product.is_out_of_stock else f"{product.stock} in stock"
            print(f"{marker} {product.name}  ({product.slug}, {status})")
    else:
        print_entries(results)


if __name__ == "__main__":
    main()
