"""
Unit tests for command line entry point
"""

import json
import logging

import pytest
from unittest.mock import Mock, patch

from src.main import CEPResolverCLI, main
from src.models.address import Address
from src.resolvers.cep_service import CepService
from src.utils.error_handler import ErrorHandler, ErrorType

SE_ADDRESS = Address(state='SP', city='São Paulo', street='Praça da Sé', neighborhood='Sé', zip_code='01001000')


@pytest.fixture
def mock_service():
    """Fixture for a mock CepService resolving only 01001-000"""
    service = Mock(spec=CepService)
    service.verify.side_effect = lambda cep: cep in ('01001-000', '00000-000')
    service.search_many.side_effect = lambda ceps: {
        cep: SE_ADDRESS if cep == '01001-000' else None for cep in ceps
    }
    service.error_handler = ErrorHandler()
    return service


class TestCEPResolverCLI:
    """Test cases for CEPResolverCLI class"""

    def test_verify(self, mock_service):
        """Test validation of every CEP"""
        cli = CEPResolverCLI(service=mock_service)

        assert cli.verify(['01001-000']) is True
        assert cli.verify(['01001-000', 'invalid-cep']) is False

    def test_consult(self, mock_service):
        """Test resolution results"""
        cli = CEPResolverCLI(service=mock_service)

        results = cli.consult(['01001-000', '00000-000'])

        assert results == {'01001-000': SE_ADDRESS, '00000-000': None}

    def test_run_success(self, mock_service):
        """Test run when every CEP resolves"""
        cli = CEPResolverCLI(service=mock_service)
        assert cli.run(['01001-000']) is True

    def test_run_not_found(self, mock_service):
        """Test run when a CEP is not found"""
        cli = CEPResolverCLI(service=mock_service)
        assert cli.run(['01001-000', '00000-000']) is False

    def test_run_verify_only(self, mock_service):
        """Test that verify_only never queries providers"""
        cli = CEPResolverCLI(service=mock_service)

        assert cli.run(['00000-000'], verify_only=True) is True
        mock_service.search_many.assert_not_called()

    def test_run_with_output(self, mock_service, tmp_path):
        """Test JSON export of results"""
        cli = CEPResolverCLI(service=mock_service)
        output_path = tmp_path / "addresses.json"

        cli.run(['01001-000', '00000-000'], output_path=output_path)

        with open(output_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        assert data['metadata']['total_found'] == 1

    def test_consult_uses_search_many(self, mock_service):
        """Test that resolution goes through CepService.search_many"""
        cli = CEPResolverCLI(service=mock_service)

        cli.consult(['01001-000'])

        mock_service.search_many.assert_called_once_with(['01001-000'])

    def test_run_export_failure(self, mock_service, tmp_path):
        """Test that a failed export makes run fail"""
        cli = CEPResolverCLI(service=mock_service)

        # A directory cannot be opened for writing
        assert cli.run(['01001-000'], output_path=tmp_path) is False

    def test_consult_logs_and_clears_error_summary(self, mock_service, caplog):
        """Test provider failure summary with log enabled"""
        caplog.set_level(logging.INFO, logger='cep_resolver')
        mock_service.error_handler.record_error('00000000', 'ViaCEP', ErrorType.CEP_NOT_FOUND, 'not found')
        cli = CEPResolverCLI(log=True, service=mock_service)

        cli.consult(['00000-000'])

        assert any(message.startswith('Provider failures: 1') for message in caplog.messages)
        assert mock_service.error_handler.get_error_count() == 0

    def test_consult_keeps_errors_without_log(self, mock_service):
        """Test that the summary is only emitted with log enabled"""
        mock_service.error_handler.record_error('00000000', 'ViaCEP', ErrorType.CEP_NOT_FOUND, 'not found')
        cli = CEPResolverCLI(log=False, service=mock_service)

        cli.consult(['00000-000'])

        assert mock_service.error_handler.get_error_count() == 1

    def test_cleanup_closes_service(self, mock_service):
        """Test that cleanup releases the HTTP session"""
        cli = CEPResolverCLI(service=mock_service)
        cli.cleanup()
        mock_service.close.assert_called_once()


class TestMain:
    """Test cases for main function"""

    @patch('src.main.get_config')
    @patch('src.main.CEPResolverCLI')
    def test_main_exit_codes(self, mock_cli_class, mock_get_config):
        """Test exit code follows the run result"""
        mock_get_config.return_value.get_log_enabled.return_value = False
        mock_get_config.return_value.get_output_path.return_value = None

        for success, expected_code in ((True, 0), (False, 1)):
            mock_cli_class.return_value.run.return_value = success
            with patch('sys.argv', ['cep-resolver', '01001-000', '--log']):
                with pytest.raises(SystemExit) as exc_info:
                    main()
            assert exc_info.value.code == expected_code

        mock_cli_class.assert_called_with(log=True)
        mock_cli_class.return_value.run.assert_called_with(['01001-000'], verify_only=False, output_path=None)

    @patch('src.main.get_config')
    @patch('src.main.CEPResolverCLI')
    def test_main_interrupted(self, mock_cli_class, mock_get_config):
        """Test exit code on Ctrl+C"""
        mock_get_config.return_value.get_log_enabled.return_value = False
        mock_cli_class.return_value.run.side_effect = KeyboardInterrupt

        with patch('sys.argv', ['cep-resolver', '01001-000']):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 130
        mock_cli_class.return_value.cleanup.assert_called_once()
