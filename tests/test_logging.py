import logging
from building_thermal.logging import ModuleLogger


def test_logger_is_created_once():
    first = ModuleLogger.get_logger('building_thermal.tests.once')
    second = ModuleLogger.get_logger('building_thermal.tests.once', log_level=ModuleLogger.ERROR)
    assert first is second
    assert len(first.handlers) == 1
    assert first.level == ModuleLogger.DEBUG


def test_records_are_appended_to_file(tmp_path):
    path = tmp_path / 'model.log'
    logger = ModuleLogger.get_logger('building_thermal.tests.file', file_path=path)
    assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)
    logger.warning('stable micro-step too short')
    for handler in logger.handlers:
        handler.flush()
    text = path.read_text(encoding='utf-8')
    assert '| building_thermal.tests.file | WARNING] stable micro-step too short' in text
    for handler in logger.handlers:
        handler.close()
