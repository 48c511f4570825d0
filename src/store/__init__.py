"""Snapshot storage and query layer.

This module records replayed snapshots with lineage links in memory.
It powers tip queries and checkout for the SDK and CLI.
"""
