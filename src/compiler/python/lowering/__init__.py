"""Lowering package: classified Onyx lines → C text."""

from .lowering import Lowering

__all__ = ["Lowering"]
