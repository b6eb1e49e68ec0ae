"""
JSON exporter for resolved addresses
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Any

from src.models.address import Address
from src.utils.logger import setup_logger


class JSONExporter:
    """
    Exporter for resolved addresses to JSON format.
    """

    def __init__(self):
        self.logger = setup_logger(name="json_exporter")

    def _build_export_data(
        self,
        addresses: Dict[str, Optional[Address]],
        include_metadata: bool
    ) -> Any:
        addresses_data = [
            {
                'cep': cep,
                'found': address is not None,
                'address': address.to_dict() if address else None
            }
            for cep, address in addresses.items()
        ]

        if not include_metadata:
            return addresses_data

        return {
            'metadata': {
                'export_date': datetime.now(timezone.utc).isoformat(),
                'total_addresses': len(addresses_data),
                'total_found': sum(1 for item in addresses_data if item['found'])
            },
            'addresses': addresses_data
        }

    def export_to_string(
        self,
        addresses: Dict[str, Optional[Address]],
        pretty: bool = True,
        include_metadata: bool = True
    ) -> str:
        """
        Export addresses to a JSON string.

        Args:
            addresses: Mapping of CEP as given -> Address (None if not found)
            pretty: If True, format JSON with indentation
            include_metadata: If True, include export metadata in JSON

        Returns:
            JSON string
        """
        export_data = self._build_export_data(addresses, include_metadata)
        return json.dumps(export_data, indent=2 if pretty else None, ensure_ascii=False)

    def export_to_file(
        self,
        addresses: Dict[str, Optional[Address]],
        output_path: Path,
        pretty: bool = True,
        include_metadata: bool = True
    ) -> bool:
        """
        Export addresses to a JSON file.

        Args:
            addresses: Mapping of CEP as given -> Address (None if not found)
            output_path: Path to output JSON file
            pretty: If True, format JSON with indentation
            include_metadata: If True, include export metadata in JSON

        Returns:
            True if export successful, False otherwise
        """
        if not addresses:
            self.logger.warning("No addresses to export")
            return False

        try:
            self.logger.info(f"Exporting addresses to JSON: {output_path}")

            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(self.export_to_string(addresses, pretty=pretty, include_metadata=include_metadata))

            self.logger.info(f"Successfully exported {len(addresses)} addresses to {output_path}")
            return True

        except OSError as e:
            self.logger.error(f"Error exporting to JSON: {e}")
            return False
