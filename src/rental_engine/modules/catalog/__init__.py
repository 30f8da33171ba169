"""Catalog module."""

from rental_engine.modules.catalog.provider import SEED_VEHICLES, CatalogProvider, InMemoryCatalog

__all__ = ["SEED_VEHICLES", "CatalogProvider", "InMemoryCatalog"]
