import logging

import pytest

from pluggable_http import FetchHttpClient, TransportOptions
from pluggable_http.config import DEFAULT_TIMEOUT_MS
from pluggable_http.logger import BoundLogger, create_logger


async def _unused_fetch(url, options):  # pragma: no cover - never awaited
    raise AssertionError("not called")


def test_defaults() -> None:
    options = TransportOptions()
    assert options.default_timeout_ms == DEFAULT_TIMEOUT_MS
    assert options.log_level == "info"


def test_from_env_reads_timeout_and_level() -> None:
    options = TransportOptions.from_env(
        {"PLUGGABLE_HTTP_TIMEOUT_MS": "2500", "PLUGGABLE_HTTP_LOG_LEVEL": "DEBUG"}
    )
    assert options.default_timeout_ms == 2500
    assert options.log_level == "debug"


def test_from_env_overrides_win() -> None:
    options = TransportOptions.from_env({"PLUGGABLE_HTTP_TIMEOUT_MS": "2500"}, default_timeout_ms=10)
    assert options.default_timeout_ms == 10


@pytest.mark.parametrize(
    "environ",
    [
        {"PLUGGABLE_HTTP_TIMEOUT_MS": "soon"},
        {"PLUGGABLE_HTTP_TIMEOUT_MS": "0"},
        {"PLUGGABLE_HTTP_LOG_LEVEL": "verbose"},
    ],
)
def test_from_env_rejects_invalid_values(environ) -> None:
    with pytest.raises(ValueError):
        TransportOptions.from_env(environ)


def test_client_logger_follows_options(caplog: pytest.LogCaptureFixture) -> None:
    base = logging.getLogger("pluggable_http.tests")
    client = FetchHttpClient(_unused_fetch, options=TransportOptions(log_level="debug", logger=base))
    with caplog.at_level(logging.DEBUG, logger="pluggable_http.tests"):
        client._logger.debug("hello %s", "fetch")
        client._logger.trace("hidden")
    assert [record.name for record in caplog.records] == ["pluggable_http.tests.fetch"]
    assert caplog.records[0].getMessage() == "hello fetch"


def test_duck_typed_logger_and_failures_are_contained() -> None:
    class Recorder:
        def __init__(self) -> None:
            self.messages: list[str] = []

        def warn(self, msg, *args):
            self.messages.append(msg % args)

        def error(self, msg, *args):
            raise RuntimeError("broken sink")

    recorder = Recorder()
    logger = create_logger(logger=recorder, level="warn")
    logger.info("dropped")
    logger.warn("kept %d", 1)
    logger.error("boom")
    assert recorder.messages == ["kept 1"]
    assert isinstance(logger.child("fetch"), BoundLogger)


def test_create_logger_rejects_unknown_level() -> None:
    with pytest.raises(ValueError):
        create_logger(level="loud")  # type: ignore[arg-type]
