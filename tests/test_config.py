import importlib
import logging

import pytest

from spknn import config
from spknn.logging import get_logger


def test_defaults(monkeypatch, fresh_config):
    for name in ("SPKNN_MAX_CHILDREN", "SPKNN_MIN_CHILDREN",
                 "SPKNN_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    config.reset_runtime_config()
    runtime = config.runtime_config()
    assert runtime.max_children == 16
    assert runtime.min_children == 6
    assert runtime.log_level == logging.WARNING
    assert config.runtime_config() is runtime


def test_reads_environment(monkeypatch, fresh_config):
    monkeypatch.setenv("SPKNN_MAX_CHILDREN", "32")
    monkeypatch.setenv("SPKNN_MIN_CHILDREN", "10")
    monkeypatch.setenv("SPKNN_LOG_LEVEL", "debug")
    config.reset_runtime_config()
    runtime = config.runtime_config()
    assert (runtime.max_children, runtime.min_children) == (32, 10)
    assert runtime.log_level == logging.DEBUG


@pytest.mark.parametrize("name, value", [
    ("SPKNN_MAX_CHILDREN", "many"),
    ("SPKNN_MAX_CHILDREN", "2"),
    ("SPKNN_MIN_CHILDREN", "12"),
    ("SPKNN_LOG_LEVEL", "chatty"),
])
def test_invalid_environment(monkeypatch, fresh_config, name, value):
    monkeypatch.setenv(name, value)
    config.reset_runtime_config()
    with pytest.raises(ValueError):
        config.runtime_config()


def test_logger_respects_runtime_level(monkeypatch, fresh_config):
    monkeypatch.setenv("SPKNN_LOG_LEVEL", "DEBUG")
    config.reset_runtime_config()
    logger = get_logger("tests.logging")
    assert logger.getEffectiveLevel() == logging.DEBUG
    assert logger.name == "spknn.tests.logging"
    assert get_logger().name == "spknn"


def test_module_loggers_follow_reset_level(monkeypatch, fresh_config):
    knn_module = importlib.import_module("spknn.knn")
    tree_module = importlib.import_module("spknn.tree")

    monkeypatch.setenv("SPKNN_LOG_LEVEL", "ERROR")
    config.reset_runtime_config()
    get_logger()
    for logger in (knn_module.logger, tree_module.logger):
        assert logger.level == logging.NOTSET
        assert logger.getEffectiveLevel() == logging.ERROR

    monkeypatch.setenv("SPKNN_LOG_LEVEL", "DEBUG")
    config.reset_runtime_config()
    get_logger()
    for logger in (knn_module.logger, tree_module.logger):
        assert logger.getEffectiveLevel() == logging.DEBUG


def test_traversal_logs_statistics(caplog):
    from spknn import RTree
    from .utils import random_rects
    tree = RTree.load(random_rects(50), max_children=4)
    with caplog.at_level(logging.DEBUG, logger="spknn.knn"):
        tree.knn((0., 0.), limit=3)
    assert any("scored" in r.getMessage() for r in caplog.records)
