"""
Resolvers package - CEP providers, HTTP client and resolution service
"""

from src.resolvers.http_client import HttpClient
from src.resolvers.providers import PROVIDERS, Provider, normalize_cep, format_cep
from src.resolvers.cep_service import CepService, CepOptions

__all__ = ['HttpClient', 'PROVIDERS', 'Provider', 'normalize_cep', 'format_cep', 'CepService', 'CepOptions']
