import logging

from app.core.logging import configure_logging


def test_configure_logging_sets_intercept_handler():
    configure_logging("INFO")
    assert logging.root.handlers, "expected root handlers to be configured"
    handler = logging.root.handlers[0]
    assert handler.__class__.__name__ == "_InterceptHandler"
    assert logging.root.level == logging.INFO


def test_configure_logging_routes_uvicorn_through_root():
    configure_logging("DEBUG", serialize=True)
    uvicorn_logger = logging.getLogger("uvicorn.access")
    assert uvicorn_logger.handlers == []
    assert uvicorn_logger.propagate is True
    assert logging.root.level == logging.DEBUG
    configure_logging("INFO")
