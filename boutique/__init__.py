"""
Boutique Storefront Toolkit

Modules:
    models    - Data models (ProductRecord, StorefrontEntry, Order, CartItem, ...)
    common    - Shared utilities (config loader, logging, cache, formatting, slugs)
    catalog   - Variant grouping engine, row normalisation, storefront sections
    supabase  - REST client for the hosted Supabase backend
    services  - Product, category, store settings and order services
    cart      - Shopping cart with JSON persistence
    checkout  - Order creation and chat handoff message
"""
