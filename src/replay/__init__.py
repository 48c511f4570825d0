"""History replay engine.

This module orders commit history and flattens each commit's tree.
It feeds immutable snapshots into the store layer in ancestor order.
"""
