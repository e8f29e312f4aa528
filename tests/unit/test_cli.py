"""Tests for the command line interface."""
import json
import pytest
from unittest.mock import AsyncMock, patch

from typer.testing import CliRunner

import adsbatch
from adsbatch.cli.main import app


runner = CliRunner()


class FakeUser:
    """AdsUser stand-in that never opens a connection."""
    
    def __init__(self, *args, **kwargs):
        self.config = adsbatch.AdsConfig()
        self.usage_registry = adsbatch.FeatureUsageRegistry()
    
    async def __aenter__(self):
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


@pytest.fixture
def operations_file(tmp_path):
    path = tmp_path / 'ops.json'
    path.write_text(json.dumps([
        {'xsi_type': 'CampaignOperation', 'operator': 'ADD', 'operand': {'name': 'a'}},
        {'xsi_type': 'CampaignOperation', 'operator': 'SET', 'operand': {'id': '1'}},
    ]))
    return path


class TestUploadCommand:
    """Test suite for 'adsbatch upload'."""
    
    def test_upload(self, operations_file):
        """Test operations from file are uploaded."""
        with patch.object(adsbatch, 'AdsUser', FakeUser), \
                patch.object(adsbatch.BatchJobUtilities, 'upload', new_callable=AsyncMock) as upload:
            result = runner.invoke(app, ['upload', 'https://session', str(operations_file)])
        
        assert result.exit_code == 0, result.output
        assert 'Uploaded 2 operations' in result.output
        url, operations = upload.await_args.args
        assert url == 'https://session'
        assert [op.operator for op in operations] == ['ADD', 'SET']
        assert upload.await_args.kwargs == {'resume_previous_upload': False}
    
    def test_resume_flag(self, operations_file):
        """Test --resume is forwarded."""
        with patch.object(adsbatch, 'AdsUser', FakeUser), \
                patch.object(adsbatch.BatchJobUtilities, 'upload', new_callable=AsyncMock) as upload:
            result = runner.invoke(app, ['upload', 'https://session', str(operations_file), '--resume'])
        
        assert result.exit_code == 0, result.output
        assert upload.await_args.kwargs == {'resume_previous_upload': True}
    
    def test_invalid_chunk_size(self, operations_file):
        """Test misaligned chunk size exits with error."""
        with patch.object(adsbatch, 'AdsUser', FakeUser):
            result = runner.invoke(
                app, ['upload', 'https://session', str(operations_file), '--chunk-size', '300000']
            )
        
        assert result.exit_code == 1
        assert 'Upload failed' in result.output
    
    def test_invalid_operations_file(self, tmp_path):
        """Test non-list JSON exits with error."""
        path = tmp_path / 'ops.json'
        path.write_text('{}')
        
        result = runner.invoke(app, ['upload', 'https://session', str(path)])
        
        assert result.exit_code == 1


class TestDownloadCommand:
    """Test suite for 'adsbatch download'."""
    
    def test_download_table(self, response_xml):
        """Test results are summarized."""
        with patch.object(adsbatch, 'AdsUser', FakeUser), \
                patch.object(adsbatch.BatchJobUtilities, 'download_text',
                             new_callable=AsyncMock, return_value=response_xml):
            result = runner.invoke(app, ['download', 'https://storage/results.xml'])
        
        assert result.exit_code == 0, result.output
        assert '1 succeeded, 1 failed' in result.output
    
    def test_download_output_file(self, response_xml, tmp_path):
        """Test --output saves the raw document."""
        output = tmp_path / 'results.xml'
        with patch.object(adsbatch, 'AdsUser', FakeUser), \
                patch.object(adsbatch.BatchJobUtilities, 'download_text',
                             new_callable=AsyncMock, return_value=response_xml):
            result = runner.invoke(app, ['download', 'https://storage/results.xml', '-o', str(output)])
        
        assert result.exit_code == 0, result.output
        assert output.read_text() == response_xml
    
    def test_download_failure(self):
        """Test transport errors exit with error."""
        error = adsbatch.BatchJobTransferError(404, 'NoSuchKey')
        with patch.object(adsbatch, 'AdsUser', FakeUser), \
                patch.object(adsbatch.BatchJobUtilities, 'download_text',
                             new_callable=AsyncMock, side_effect=error):
            result = runner.invoke(app, ['download', 'https://storage/results.xml'])
        
        assert result.exit_code == 1
        assert 'Download failed' in result.output
