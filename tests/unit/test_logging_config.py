import logging

from objectstore_lib.logging_config import configure_logging


def test_level_from_config_file(tmp_path):
    cfg = tmp_path / "store.yml"
    cfg.write_text("data_directory: data\nlog_level: debug\n", encoding="utf-8")
    configure_logging(cfg)
    assert logging.getLogger().level == logging.DEBUG


def test_explicit_level_wins_and_bad_config_falls_back(tmp_path):
    cfg = tmp_path / "store.yml"
    cfg.write_text("log_level: [", encoding="utf-8")
    configure_logging(cfg)
    assert logging.getLogger().level == logging.WARNING
    configure_logging(cfg, level="ERROR")
    assert logging.getLogger().level == logging.ERROR
    assert len(logging.getLogger().handlers) == 1
