"""Coupon Catalog API Application."""
