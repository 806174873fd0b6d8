import logging
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from pydantic import ValidationError

from docbind import (
    DocumentParseError,
    JsonDeserializer,
    Response,
    XmlDeserializer,
    deserializer_for,
)
from docbind.core.config import Settings
from docbind.core.logging import LOGGER_NAMES, configure_logging
from docbind.utils.timing import log_timer
from tests.samples import Friend, Person, Priced, person_elements_xml


# -----------------------------------------------------------------------------
# Response and routing
# -----------------------------------------------------------------------------
@pytest.mark.parametrize(
    "status, completed, ok",
    [(200, True, True), (204, True, True), (404, True, False), (200, False, False), (0, True, False)],
)
def test_response_is_successful(status, completed, ok):
    assert Response(status_code=status, completed=completed).is_successful is ok


def test_response_header_lookup_is_case_insensitive():
    r = Response(headers={"Content-Type": "application/xml"})
    assert r.header("content-type") == "application/xml"
    assert r.header("x-missing") is None


@pytest.mark.parametrize(
    "content_type, cls",
    [
        ("application/xml", XmlDeserializer),
        ("text/xml; charset=utf-8", XmlDeserializer),
        ("application/atom+xml", XmlDeserializer),
        ("application/json", JsonDeserializer),
        ("application/problem+json", JsonDeserializer),
        ("text/javascript", JsonDeserializer),
    ],
)
def test_deserializer_for_content_type(content_type, cls):
    assert deserializer_for(content_type) is cls


def test_deserializer_for_unknown_content_type():
    with pytest.raises(ValueError):
        deserializer_for("text/html")


def test_response_content_type_routes_to_the_right_parser():
    response = Response(content='{"name": "a", "since": 3}', status_code=200, content_type="application/json")
    out = deserializer_for(response.content_type)().deserialize(response, Friend)
    assert out == Friend("a", 3)


def test_empty_response_body_is_a_parse_error(xml):
    with pytest.raises(DocumentParseError):
        xml.deserialize(Response(content=""), Person)


def test_bytes_body(xml):
    out = xml.deserialize(person_elements_xml().encode("utf-8"), Person)
    assert out.name == "John Sheehan"


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------
def test_settings_defaults():
    s = Settings()
    assert s.LOG_LEVEL == "WARNING"
    assert s.DEFAULT_CULTURE == "invariant"
    assert s.DEFAULT_ROOT_ELEMENT is None


def test_settings_reject_unknown_keys_and_cultures():
    with pytest.raises(ValidationError):
        Settings(DEFAULT_CULTRE="de-DE")
    with pytest.raises(ValidationError):
        Settings(DEFAULT_CULTURE="xx-XX")


def test_settings_from_env(monkeypatch, tmp_path):
    env = tmp_path / ".env"
    env.write_text("DOCBIND_DEFAULT_DATE_FORMAT=%d.%m.%Y\n")
    monkeypatch.setenv("DOCBIND_DEFAULT_CULTURE", "de-DE")
    monkeypatch.setenv("DOCBIND_MUTE_ALL_LOGS", "true")
    # registered so the value load_dotenv writes is removed afterwards
    monkeypatch.setenv("DOCBIND_DEFAULT_DATE_FORMAT", "")
    monkeypatch.delenv("DOCBIND_DEFAULT_DATE_FORMAT")

    s = Settings.from_env(env)

    assert s.DEFAULT_CULTURE == "de-DE"
    assert s.DEFAULT_DATE_FORMAT == "%d.%m.%Y"
    assert s.MUTE_ALL_LOGS is True


def test_deserializer_defaults_come_from_settings(monkeypatch):
    monkeypatch.setattr(
        "docbind.deserializers.settings",
        Settings(DEFAULT_CULTURE="en-GB", DEFAULT_ROOT_ELEMENT="Body"),
    )
    d = XmlDeserializer()
    assert d.culture.name == "en-GB"
    assert d.root_element == "Body"
    assert XmlDeserializer(root_element="Other").root_element == "Other"


# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
def test_configure_logging_sets_library_levels():
    configure_logging(Settings(LOG_LEVEL="DEBUG"))
    try:
        for name in LOGGER_NAMES:
            assert logging.getLogger(name).level == logging.DEBUG
        assert logging.getLogger("docbind.binding.sequences").getEffectiveLevel() == logging.DEBUG
    finally:
        for name in LOGGER_NAMES:
            logging.getLogger(name).setLevel(logging.NOTSET)


def test_configure_logging_mute():
    configure_logging(Settings(MUTE_ALL_LOGS=True))
    try:
        assert logging.getLogger("docbind.binding.engine").isEnabledFor(logging.CRITICAL) is False
    finally:
        logging.disable(logging.NOTSET)


def test_log_timer_logs_failure_and_reraises(caplog):
    log = logging.getLogger("docbind.utils.timing")
    caplog.set_level(logging.DEBUG, logger="docbind.utils.timing")

    with pytest.raises(KeyError):
        with log_timer("lookup", logger=log, level=logging.DEBUG, key="x"):
            raise KeyError("x")

    assert "lookup start" in caplog.text
    assert "lookup failed after" in caplog.text


def test_deserialize_is_timed_at_debug(xml, caplog):
    caplog.set_level(logging.DEBUG, logger="docbind")
    xml.deserialize("<Friend><Name>a</Name></Friend>", Friend)
    assert "deserialize ok in" in caplog.text


# -----------------------------------------------------------------------------
# Concurrency
# -----------------------------------------------------------------------------
def test_concurrent_calls_on_one_deserializer_are_independent():
    xml = XmlDeserializer()
    barrier = threading.Barrier(8)

    def run(i: int) -> Friend:
        barrier.wait()
        return xml.deserialize(f"<Friend><Name>f{i}</Name><Since>{i}</Since></Friend>", Friend)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(run, range(8)))

    assert results == [Friend(f"f{i}", i) for i in range(8)]


def test_concurrent_mixed_cultures():
    doc = "<Priced><Price>1.234,5</Price><Weight>2,5</Weight></Priced>"

    de = XmlDeserializer(culture="de-DE")
    inv = XmlDeserializer()

    def run(i: int):
        if i % 2:
            return de.deserialize(doc, Priced).weight
        return inv.deserialize("<Priced><Weight>2.5</Weight></Priced>", Priced).weight

    with ThreadPoolExecutor(max_workers=6) as pool:
        assert set(pool.map(run, range(24))) == {2.5}
