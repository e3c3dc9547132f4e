"""
Customer models module.

All models are exported from this module to maintain backward compatibility.
"""
from .customer import Customer

__all__ = [
    'Customer',
]
