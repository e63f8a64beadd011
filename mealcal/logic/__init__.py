"""Business logic built on top of the meal plan store.

Subpackages:
- reporting: nutrition aggregation per week
"""
__all__ = ["reporting"]
