"""
HTTP client used to query CEP providers
"""

from typing import Any, Optional, Tuple

import requests

from src.utils.logger import setup_logger
from src.utils.config_helper import get_config


class HttpClient:
    """
    Thin wrapper around requests.Session returning (status_code, body) pairs.
    Network failures propagate as requests.RequestException.
    """

    def __init__(self, timeout: Optional[float] = None, user_agent: Optional[str] = None):
        """
        Initialize the HTTP client.

        Args:
            timeout: Request timeout in seconds (optional, will use ConfigHelper if not provided)
            user_agent: User-Agent header (optional, will use ConfigHelper if not provided)
        """
        config = get_config()
        self.timeout = timeout or config.get_request_timeout()
        self.logger = setup_logger(name="http_client")
        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': user_agent or config.get_user_agent(),
            'Accept': 'application/json'
        })

    def get(self, url: str) -> Tuple[int, Any]:
        """
        Perform a GET request and decode the JSON body.

        Args:
            url: URL to request

        Returns:
            Tuple of (status_code, decoded body). Body is None when a
            non-200 response carries no JSON.

        Raises:
            requests.RequestException: On network failure
            ValueError: If a 200 response body is not valid JSON
        """
        self.logger.debug(f"GET {url}")
        response = self.session.get(url, timeout=self.timeout)

        try:
            body = response.json()
        except ValueError:
            if response.status_code == 200:
                raise
            body = None

        return response.status_code, body

    def close(self):
        """Close the underlying session."""
        self.session.close()

    def __enter__(self) -> 'HttpClient':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
