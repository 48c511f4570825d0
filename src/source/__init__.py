"""Commit source access layer.

This module reads refs, commits, trees, and blobs from a git repository.
It hides the object model behind a narrow capability interface.
"""
