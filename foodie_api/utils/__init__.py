# foodie_api/utils/__init__.py
"""Helpers shared across the project."""

from .datetime_utils import DateTimeUtils

__all__ = ['DateTimeUtils']
