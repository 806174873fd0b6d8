import logging

import pytest

from docbind import DeserializationContext, JsonDeserializer, XmlDeserializer


@pytest.fixture
def xml() -> XmlDeserializer:
    return XmlDeserializer()


@pytest.fixture
def json_deserializer() -> JsonDeserializer:
    return JsonDeserializer()


@pytest.fixture
def ctx() -> DeserializationContext:
    return DeserializationContext()


@pytest.fixture
def engine_logs(caplog):
    """Capture everything the binding engine logs."""
    caplog.set_level(logging.DEBUG, logger="docbind")
    return caplog
