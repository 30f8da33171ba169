"""Pricing module."""

from rental_engine.modules.pricing.engine import QuoteResult, quote, rental_days, require_quote

__all__ = ["QuoteResult", "quote", "rental_days", "require_quote"]
