from typing import Any, Tuple, cast

import pytest
from fake_server import FakeMetadataServer
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from gce_metadata.core.client import MetadataClient
from gce_metadata.core.exceptions import InvalidResponse


def _traced_client(
    server: FakeMetadataServer,
) -> Tuple[MetadataClient, InMemorySpanExporter]:
    provider = TracerProvider()
    memory_exporter = InMemorySpanExporter()
    provider.add_span_processor(SimpleSpanProcessor(memory_exporter))
    client = MetadataClient(root=server.root, tracer=provider.get_tracer(__name__))
    return client, memory_exporter


def test_get_emits_one_span(metadata_server: FakeMetadataServer) -> None:
    metadata_server.set("instance/zone", "projects/1/zones/us-east1-b")
    client, memory_exporter = _traced_client(metadata_server)

    client.fetch("instance/zone")

    exported_spans = memory_exporter.get_finished_spans()
    assert len(exported_spans) == 1
    span = exported_spans[0]
    assert span.name == "gce_metadata.get"

    attributes = cast(Any, span.attributes)
    assert attributes["http.method"] == "GET"
    assert attributes["http.url"] == metadata_server.root + "instance/zone"
    assert attributes["http.status_code"] == 200
    assert span.status.status_code != StatusCode.ERROR


def test_failed_get_marks_span_as_error(metadata_server: FakeMetadataServer) -> None:
    client, memory_exporter = _traced_client(metadata_server)

    with pytest.raises(InvalidResponse):
        client.fetch("instance/zone")

    exported_spans = memory_exporter.get_finished_spans()
    assert len(exported_spans) == 1
    span = exported_spans[0]
    assert span.status.status_code == StatusCode.ERROR
    assert cast(Any, span.attributes)["http.status_code"] == 404
    assert any(event.name == "exception" for event in span.events)
