from typing import Optional

from opentelemetry.context import Context
from opentelemetry.sdk.trace import ReadableSpan, Span, SpanProcessor

METADATA_SPAN_PREFIX = "gce_metadata."


class MetadataSpanFilter(SpanProcessor):
    """
    SpanProcessor that forwards only metadata request spans to ``delegate``.
    Lets an exporter see the ``gce_metadata.get`` spans without the rest of
    the application's traces.
    """

    def __init__(self, delegate: SpanProcessor, prefix: str = METADATA_SPAN_PREFIX):
        self._delegate = delegate
        self._prefix = prefix

    def on_start(self, span: Span, parent_context: Optional[Context] = None) -> None:
        if span.name.startswith(self._prefix):
            self._delegate.on_start(span, parent_context=parent_context)

    def on_end(self, span: ReadableSpan) -> None:
        if span.name.startswith(self._prefix):
            self._delegate.on_end(span)

    def shutdown(self) -> None:
        self._delegate.shutdown()

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return self._delegate.force_flush(timeout_millis)
