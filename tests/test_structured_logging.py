import json

import pytest

from cardissue.logging import StructuredLogger, configure_logging, escape_data, get_logger


def test_structured_logger_json_format(capsys):
    """Structured logger produces JSON output when configured."""
    logger = StructuredLogger(name='test', log_format='json', level='INFO')
    logger.log_operation('test_operation', param1='value1', param2=42)

    captured = capsys.readouterr()
    log_lines = [line for line in captured.out.strip().split('\n') if line]

    assert len(log_lines) == 1
    log_data = json.loads(log_lines[0])

    assert log_data['level'] == 'INFO'
    assert log_data['operation'] == 'test_operation'
    assert log_data['param1'] == 'value1'
    assert log_data['param2'] == 42
    assert 'timestamp' in log_data
    assert 'lineno' not in log_data


def test_structured_logger_regular_format(capsys):
    logger = StructuredLogger(name='test', log_format='text', level='INFO')
    logger.log_operation('test_operation', param1='value1')

    captured = capsys.readouterr()
    assert 'Operation: test_operation' in captured.out
    assert 'INFO' in captured.out


def test_json_logger_dedupes_identical_records(capsys):
    logger = StructuredLogger(name='test-dedupe', log_format='json', level='INFO')
    logger.log_issue_action('updated', 'PC_1', 7)
    logger.log_issue_action('updated', 'PC_1', 7)

    lines = [line for line in capsys.readouterr().out.splitlines() if line]
    assert len(lines) == 1
    entry = json.loads(lines[0])
    assert entry['issue_number'] == 7
    assert entry['message'] == 'issue updated #7 from card PC_1'


def test_actions_format_emits_workflow_commands(capsys):
    logger = StructuredLogger(name='test-actions', log_format='actions', level='DEBUG')
    logger.debug('cached labels:\nbug: Bug')
    logger.info('Done!')
    logger.warning('failed to get labels from API: 100% broken')
    logger.error('title is required for issues')

    out = capsys.readouterr().out.splitlines()
    assert out == [
        '::debug::cached labels:%0Abug: Bug',
        'Done!',
        '::warning::failed to get labels from API: 100%25 broken',
        '::error::title is required for issues',
    ]


def test_escape_data():
    assert escape_data('a%b\r\nc') == 'a%25b%0D%0Ac'


def test_level_filters_debug(capsys):
    logger = StructuredLogger(name='test-level', log_format='text', level='INFO')
    logger.debug('hidden')
    assert 'hidden' not in capsys.readouterr().out


def test_unknown_format_rejected():
    with pytest.raises(ValueError):
        StructuredLogger(name='test-bad', log_format='xml')


def test_configure_logging_replaces_global():
    logger = configure_logging(log_format='json', level='DEBUG')
    assert get_logger() is logger
    assert logger.log_format == 'json'
