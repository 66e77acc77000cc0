"""
API version 1
"""
from .billing import billing_bp

__all__ = ['billing_bp']
