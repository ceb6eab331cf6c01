"""Adapters connecting the collection core to discovery, storage and HTTP."""
