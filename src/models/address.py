"""
Address model and extraction of addresses from provider responses
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

# Candidate response keys per address field, tried in order
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    'state': ('uf', 'estado', 'state'),
    'city': ('localidade', 'city'),
    'street': ('logradouro', 'address'),
    'neighborhood': ('bairro', 'district', 'neighborhood'),
}

# Fields without an entry here stay None when no alias is present
FIELD_DEFAULTS: Dict[str, str] = {
    'street': '',
    'neighborhood': '',
}

NOT_FOUND_MARKER = 'erro'


@dataclass(frozen=True)
class Address:
    """
    Canonical address resolved from a CEP.

    zip_code is always the normalized CEP used for the lookup,
    never a value echoed back by the provider.
    """
    state: Optional[str]
    city: Optional[str]
    street: str
    neighborhood: str
    zip_code: str

    def to_dict(self) -> Dict[str, Optional[str]]:
        """
        Convert address to dictionary.

        Returns:
            Dictionary representation using the public field names
        """
        return {
            'state': self.state,
            'city': self.city,
            'street': self.street,
            'neighborhood': self.neighborhood,
            'zipCode': self.zip_code,
        }


def _lookup_field(payload: Mapping[str, Any], aliases: Tuple[str, ...], default: Optional[str]) -> Optional[str]:
    """
    Read a field from the first alias carrying a non-empty value.

    An alias that is present but empty is only used when no other alias has a value.
    """
    present = [alias for alias in aliases if payload.get(alias) is not None]
    for alias in present:
        if payload[alias] != '':
            return payload[alias]
    if present:
        return payload[present[0]]
    return default


def is_not_found(payload: Any, status_code: int) -> bool:
    """Check whether a provider response carries no usable address data."""
    if status_code != 200:
        return True
    if not isinstance(payload, Mapping):
        return True
    return bool(payload.get(NOT_FOUND_MARKER))


def extract_address(
    payload: Any,
    status_code: int,
    fallback_zip: str,
    aliases: Optional[Mapping[str, Tuple[str, ...]]] = None
) -> Optional[Address]:
    """
    Build an Address from a raw provider response.

    Args:
        payload: Decoded JSON body returned by the provider
        status_code: HTTP status code of the response
        fallback_zip: Normalized CEP used for the lookup
        aliases: Field alias table (defaults to FIELD_ALIASES)

    Returns:
        Address, or None if the response signals "not found"
    """
    if is_not_found(payload, status_code):
        return None

    aliases = aliases or FIELD_ALIASES
    fields = {
        field: _lookup_field(payload, field_aliases, FIELD_DEFAULTS.get(field))
        for field, field_aliases in aliases.items()
    }

    return Address(
        state=fields.get('state'),
        city=fields.get('city'),
        street=fields.get('street', ''),
        neighborhood=fields.get('neighborhood', ''),
        zip_code=fallback_zip,
    )
