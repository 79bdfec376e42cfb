"""Setuptools build hooks for coretensor."""

from __future__ import annotations

from setuptools import setup

# Pure Python package; metadata lives in pyproject.toml.
setup()
