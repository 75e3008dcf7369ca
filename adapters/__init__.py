"""
Adapters package - External storage connections.
Local photo storage, the flat JSON document and MongoDB.
"""

from adapters import asset_storage, json_adapter, mongo_adapter

__all__ = [
    "asset_storage",
    "json_adapter",
    "mongo_adapter",
]
