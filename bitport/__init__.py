"""Synchronise Bitbucket Server projects and repositories into Port."""

from __future__ import annotations

__version__ = "0.1.0"
