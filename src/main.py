"""
Command line entry point for CEP Resolver

For each CEP given:
1. Validates its format
2. Resolves it to an address using every provider, in priority order
3. Exports the resolved addresses to JSON (optional)
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

from src.exporters.json_exporter import JSONExporter
from src.models.address import Address
from src.resolvers.cep_service import CepService, CepOptions
from src.utils.config_helper import get_config
from src.utils.error_handler import NOT_FOUND_MESSAGE
from src.utils.logger import setup_logger


class CEPResolverCLI:
    """
    Runs validation and resolution for a list of CEPs.
    """

    def __init__(self, log: bool = False, service: Optional[CepService] = None):
        self.logger = setup_logger(name="cep_resolver")
        self.log = log
        self.service = service or CepService(options=CepOptions(log=log))

    def verify(self, ceps: List[str]) -> bool:
        """
        Validate every CEP.

        Returns:
            True if all CEPs are valid, False otherwise
        """
        all_valid = True
        for cep in ceps:
            is_valid = self.service.verify(cep)
            self.logger.info(f"{cep}: {'Valid zip code' if is_valid else 'Invalid zip code'}")
            all_valid = all_valid and is_valid
        return all_valid

    def consult(self, ceps: List[str]) -> Dict[str, Optional[Address]]:
        """
        Resolve every CEP, logging each result.

        Returns:
            Dictionary mapping CEP -> Address (or None if not found)
        """
        results = self.service.search_many(ceps)

        for cep, address in results.items():
            if address is None:
                self.logger.error(f"{cep}: Error: {NOT_FOUND_MESSAGE}")
            else:
                self.logger.info(f"{cep}: {json.dumps(address.to_dict(), ensure_ascii=False)}")

        if self.log:
            self.log_error_summary()

        return results

    def log_error_summary(self):
        """Log provider failures recorded so far, then forget them."""
        summary = self.service.error_handler.get_error_summary()
        if summary['total_errors']:
            self.logger.info(
                f"Provider failures: {summary['total_errors']} "
                f"(by provider: {summary['by_provider']}, by type: {summary['by_type']})"
            )
        self.service.error_handler.clear_errors()

    def run(self, ceps: List[str], verify_only: bool = False, output_path: Optional[Path] = None) -> bool:
        """
        Validate and resolve the given CEPs.

        Args:
            ceps: CEPs as typed by the user
            verify_only: Only validate, do not query providers
            output_path: Path for JSON export (None = skip)

        Returns:
            True if every CEP was valid (verify_only) or resolved and exported, False otherwise
        """
        all_valid = self.verify(ceps)
        if verify_only:
            return all_valid

        results = self.consult(ceps)
        success = all(address is not None for address in results.values())

        if output_path:
            if JSONExporter().export_to_file(results, output_path):
                self.logger.info(f"✓ Addresses exported to: {output_path}")
            else:
                self.logger.error(f"Failed to export addresses to: {output_path}")
                success = False

        return success

    def cleanup(self):
        """Release the HTTP session."""
        self.service.close()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="CEP Resolver - Resolve Brazilian postal codes to addresses"
    )

    parser.add_argument(
        'ceps',
        nargs='+',
        metavar='CEP',
        help='CEPs to resolve (NNNNN-NNN or NNNNNNNN)'
    )

    parser.add_argument(
        '--log',
        action='store_true',
        help='Emit diagnostic messages for each provider query'
    )

    parser.add_argument(
        '--verify-only',
        action='store_true',
        help='Only validate CEP format, do not query providers'
    )

    parser.add_argument(
        '--output',
        type=Path,
        help='Path to JSON file for resolved addresses (default: from OUTPUT_PATH env var)'
    )

    parser.add_argument(
        '--env',
        choices=['local', 'staging', 'production'],
        help='Configuration environment (default: from ENV env var or local)'
    )

    args = parser.parse_args()

    config = get_config(env=args.env)
    cli = CEPResolverCLI(log=args.log or config.get_log_enabled())

    try:
        success = cli.run(
            args.ceps,
            verify_only=args.verify_only,
            output_path=args.output or config.get_output_path()
        )
        sys.exit(0 if success else 1)

    except KeyboardInterrupt:
        cli.logger.info("Interrupted by user")
        sys.exit(130)
    finally:
        cli.cleanup()


if __name__ == "__main__":
    main()
