"""
Models package - Address record and provider response extraction
"""

from src.models.address import Address, FIELD_ALIASES, extract_address

__all__ = ['Address', 'FIELD_ALIASES', 'extract_address']
