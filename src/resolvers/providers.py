"""
CEP lookup providers, in resolution priority order
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Tuple

from src.models.address import FIELD_ALIASES

NON_DIGIT_PATTERN = re.compile(r'\D')


def normalize_cep(cep: str) -> str:
    """
    Strip every non-digit character from a CEP.

    No length check is made: '123' stays '123'.
    """
    return NON_DIGIT_PATTERN.sub('', cep)


def format_cep(digits: str) -> str:
    """Re-insert the hyphen (NNNNN-NNN) in an 8-digit CEP; other lengths are returned unchanged."""
    if len(digits) == 8:
        return f"{digits[:5]}-{digits[5:]}"
    return digits


def _digits(cep: str) -> str:
    return cep


@dataclass(frozen=True)
class Provider:
    """
    Description of a CEP lookup service.

    url_template receives the CEP (after cep_format) as the {cep} placeholder.
    """
    name: str
    url_template: str
    cep_format: Callable[[str], str] = _digits
    aliases: Dict[str, Tuple[str, ...]] = field(default_factory=lambda: FIELD_ALIASES)

    def build_url(self, normalized_cep: str) -> str:
        return self.url_template.format(cep=self.cep_format(normalized_cep))


VIA_CEP = Provider(name='ViaCEP', url_template='https://viacep.com.br/ws/{cep}/json')
API_CEP = Provider(
    name='ApiCEP',
    url_template='https://cdn.apicep.com/file/apicep/{cep}.json',
    cep_format=format_cep,
)
OPEN_CEP = Provider(name='OpenCEP', url_template='https://opencep.com/v1/{cep}')
BRASIL_API = Provider(name='BrasilAPI', url_template='https://brasilapi.com.br/api/cep/v2/{cep}')

PROVIDERS: Tuple[Provider, ...] = (VIA_CEP, API_CEP, OPEN_CEP, BRASIL_API)
