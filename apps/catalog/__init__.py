"""Catalog app package.

Bookable inventory: package tours, activities and car rentals. The
booking flow only reads from the catalog, through lookup.py, to capture
a price snapshot.
"""
