import logging
import os
import socket

import pytest

from hostwait.logging_config import JsonFormatter, TextFormatter

WAIT_ENV = ("WAIT", "WAIT_TIMEOUT", "WAIT_RETRY_INTERVAL", "WAIT_LOG_FORMAT")


@pytest.fixture(autouse=True)
def _clean_wait_env(monkeypatch):
    for key in WAIT_ENV:
        monkeypatch.delenv(key, raising=False)
    yield
    # load_dotenv writes straight into os.environ
    for key in WAIT_ENV:
        os.environ.pop(key, None)


@pytest.fixture(autouse=True)
def _restore_root_logging():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, (TextFormatter, JsonFormatter)):
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def listening_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server:
        server.bind(("127.0.0.1", 0))
        server.listen()
        yield server.getsockname()[1]


@pytest.fixture
def closed_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return port


@pytest.fixture
def closed_ports():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as first, socket.socket(
        socket.AF_INET, socket.SOCK_STREAM
    ) as second:
        first.bind(("127.0.0.1", 0))
        second.bind(("127.0.0.1", 0))
        ports = (first.getsockname()[1], second.getsockname()[1])
    return ports
