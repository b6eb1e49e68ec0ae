"""
CEP resolution service querying several providers with fallback
"""

import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence

from src.models.address import Address, extract_address
from src.resolvers.http_client import HttpClient
from src.resolvers.providers import (
    PROVIDERS,
    VIA_CEP,
    API_CEP,
    OPEN_CEP,
    BRASIL_API,
    Provider,
    normalize_cep,
)
from src.utils.config_helper import get_config
from src.utils.error_handler import ErrorHandler, NotFoundError, NOT_FOUND_MESSAGE
from src.utils.logger import setup_logger

CEP_PATTERN = re.compile(r'[0-9]{5}-?[0-9]{3}')


@dataclass
class CepOptions:
    """Options for CepService. log enables diagnostic messages."""
    log: bool = False


class CepService:
    """
    Resolves CEPs to addresses.

    Every provider is queried concurrently, but results are taken in
    provider priority order: the first provider in PROVIDERS that returns
    an address wins, regardless of which one answered first.
    """

    def __init__(
        self,
        options: Optional[CepOptions] = None,
        http_client: Optional[HttpClient] = None,
        providers: Sequence[Provider] = PROVIDERS,
        max_workers: Optional[int] = None
    ):
        """
        Initialize the CEP service.

        Args:
            options: Service options (optional, log flag defaults to the CEP_LOG setting)
            http_client: HTTP collaborator (optional, a default HttpClient is created)
            providers: Providers in priority order
            max_workers: Worker threads for concurrent queries (optional, will use ConfigHelper if not provided)
        """
        config = get_config()
        self.options = options or CepOptions(log=config.get_log_enabled())
        self.http_client = http_client or HttpClient()
        self.providers = tuple(providers)
        self.max_workers = max_workers or config.get_max_workers()
        self.logger = setup_logger(name="cep_service", log_level=config.get_log_level())
        self.error_handler = ErrorHandler()

    def _log(self, message: str, warning: bool = False):
        if not self.options.log:
            return
        if warning:
            self.logger.warning(message)
        else:
            self.logger.info(message)

    @staticmethod
    def normalize(cep: str) -> str:
        """Strip non-digit characters from a CEP."""
        return normalize_cep(cep)

    def verify(self, cep: str) -> bool:
        """
        Check whether a CEP is well formed (NNNNN-NNN or NNNNNNNN).

        Args:
            cep: CEP to validate, as typed by the user

        Returns:
            True if valid, False otherwise
        """
        is_valid = isinstance(cep, str) and CEP_PATTERN.fullmatch(cep) is not None
        self._log(f"CEP validation for {cep}: {'Valid' if is_valid else 'Invalid'}")
        return is_valid

    def consult(self, provider: Provider, zip_code: str) -> Optional[Address]:
        """
        Query a single provider.

        Args:
            provider: Provider to query
            zip_code: CEP in any format

        Returns:
            Address, or None if the provider has no data or failed
        """
        self._log(f"Consulting {provider.name}...")
        normalized_cep = str(zip_code)

        try:
            normalized_cep = normalize_cep(zip_code)
            status_code, body = self.http_client.get(provider.build_url(normalized_cep))
            address = extract_address(body, status_code, normalized_cep, provider.aliases)
            if address is None:
                self.error_handler.record_api_error(
                    cep=normalized_cep,
                    provider=provider.name,
                    error_message=f"CEP {normalized_cep} not found in {provider.name}",
                    status_code=status_code
                )
            return address
        except Exception as e:
            # A failing provider must never abort the resolution
            self._log(f"Error: {e}", warning=True)
            self.error_handler.record_exception(normalized_cep, provider.name, e)
            return None

    def consult_via_cep(self, zip_code: str) -> Optional[Address]:
        return self.consult(VIA_CEP, zip_code)

    def consult_api_cep(self, zip_code: str) -> Optional[Address]:
        return self.consult(API_CEP, zip_code)

    def consult_open_cep(self, zip_code: str) -> Optional[Address]:
        return self.consult(OPEN_CEP, zip_code)

    def consult_brasil_api(self, zip_code: str) -> Optional[Address]:
        return self.consult(BRASIL_API, zip_code)

    def search_address_by_zip_code(self, zip_code: str) -> Address:
        """
        Resolve a CEP using every provider, in priority order.

        Args:
            zip_code: CEP in any format

        Returns:
            Address from the highest priority provider that found the CEP

        Raises:
            NotFoundError: If no provider found the CEP
        """
        executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="cep_provider")
        try:
            futures = [executor.submit(self.consult, provider, zip_code) for provider in self.providers]

            for future in futures:
                address = future.result()
                if address is not None:
                    return address
        finally:
            # Lower priority queries still running are left to finish and ignored
            executor.shutdown(wait=False, cancel_futures=True)

        self._log(f"Error: {NOT_FOUND_MESSAGE}", warning=True)
        raise NotFoundError(NOT_FOUND_MESSAGE)

    resolve = search_address_by_zip_code

    def search_many(self, zip_codes: Iterable[str]) -> Dict[str, Optional[Address]]:
        """
        Resolve several CEPs, one after the other.

        Args:
            zip_codes: CEPs to resolve

        Returns:
            Dictionary mapping each CEP as given -> Address (or None if not found)
        """
        results = {}
        for zip_code in zip_codes:
            try:
                results[zip_code] = self.search_address_by_zip_code(zip_code)
            except NotFoundError:
                results[zip_code] = None
        return results

    def close(self):
        """Close the HTTP client session."""
        self.http_client.close()
