import io
import json

import pytest

from easy8cli.logging import StructuredLogger, configure_logging, get_logger


def test_structured_logger_json_format():
    stream = io.StringIO()
    logger = StructuredLogger(name='test-json', json_logging=True, level='INFO', stream=stream)
    logger.log_operation('test_operation', param1='value1', param2=42)

    lines = [line for line in stream.getvalue().splitlines() if line]
    assert len(lines) == 1
    entry = json.loads(lines[0])
    assert entry['message'] == 'Operation: test_operation'
    assert entry['operation'] == 'test_operation'
    assert entry['param1'] == 'value1'
    assert entry['param2'] == 42
    assert entry['level'] == 'INFO'


def test_request_log_is_debug_only():
    stream = io.StringIO()
    logger = StructuredLogger(name='test-req', json_logging=True, level='INFO', stream=stream)
    logger.log_request('GET', '/issues.json', 200, 12.3456)
    assert stream.getvalue() == ''

    logger = StructuredLogger(name='test-req', json_logging=True, level='DEBUG', stream=stream)
    logger.log_request('GET', '/issues.json', 200, 12.3456)
    entry = json.loads(stream.getvalue().strip())
    assert entry['operation'] == 'http_request'
    assert entry['method'] == 'GET'
    assert entry['path'] == '/issues.json'
    assert entry['status'] == 200
    assert entry['duration_ms'] == 12.35


def test_plain_format_and_redaction():
    stream = io.StringIO()
    logger = StructuredLogger(name='test-plain', json_logging=False, level='DEBUG', stream=stream)
    logger.log_error('request failed', error='X-Redmine-API-Key: hunter2')
    out = stream.getvalue()
    assert 'ERROR request failed' in out

    stream = io.StringIO()
    logger = StructuredLogger(name='test-plain', json_logging=True, level='DEBUG', stream=stream)
    logger.log_error('request failed', error='X-Redmine-API-Key: hunter2')
    entry = json.loads(stream.getvalue().strip())
    assert 'hunter2' not in entry['error']


def test_timed_operation_reraises():
    stream = io.StringIO()
    logger = StructuredLogger(name='test-timed', json_logging=True, level='DEBUG', stream=stream)
    with pytest.raises(RuntimeError):
        with logger.timed_operation('lookup'):
            raise RuntimeError('boom')
    messages = [json.loads(line)['message'] for line in stream.getvalue().splitlines()]
    assert messages == ['lookup started', 'lookup failed']


def test_configure_logging_replaces_global():
    logger = configure_logging(json_logging=True, level='DEBUG', stream=io.StringIO())
    assert get_logger() is logger
    assert logger.level == 10
