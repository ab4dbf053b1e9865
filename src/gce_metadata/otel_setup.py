import logging
from typing import Any, Optional, cast

from opentelemetry import trace
from opentelemetry.exporter.richconsole import RichConsoleSpanExporter
from opentelemetry.sdk.trace import SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter

# Import GCP Trace exporter safely
try:
    from opentelemetry.exporter.cloud_trace import CloudTraceSpanExporter
except ImportError:
    CloudTraceSpanExporter = None  # type: ignore[assignment, misc]

from gce_metadata.core.metadata import detect_project_id
from gce_metadata.otel.processors import MetadataSpanFilter

logger = logging.getLogger(__name__)

# Attribute on the provider naming the exporters this module already attached
_ATTACHED = "_gce_metadata_exporters"


def _sdk_provider() -> Any:
    provider = trace.get_tracer_provider()
    if not hasattr(provider, "add_span_processor"):
        # NoOp or Proxy provider: nothing can be attached to it
        provider = TracerProvider()
        trace.set_tracer_provider(provider)
    if not hasattr(provider, _ATTACHED):
        setattr(provider, _ATTACHED, set())
    return provider


def _attach(
    provider: Any, name: str, processor: SpanProcessor, metadata_spans_only: bool
) -> None:
    if metadata_spans_only:
        processor = MetadataSpanFilter(processor)
    provider.add_span_processor(processor)
    getattr(provider, _ATTACHED).add(name)


def _cloud_trace_exporter(project_id: Optional[str]) -> SpanExporter:
    final_project_id = project_id or detect_project_id()
    logger.info(
        "Google Cloud Trace configured "
        f"(Project: {final_project_id or 'auto-detected'})."
    )
    if final_project_id:
        return cast(Any, CloudTraceSpanExporter)(project_id=final_project_id)
    return cast(Any, CloudTraceSpanExporter)()


def configure_tracing(
    enable_console_tracing: bool = True,
    enable_google_tracing: bool = False,
    project_id: Optional[str] = None,
    metadata_spans_only: bool = True,
) -> None:
    """
    Exports the ``gce_metadata.get`` request spans.
    Reuses the SDK TracerProvider when the application already set one, and
    never attaches the same exporter twice.

    Args:
        enable_console_tracing: If True, prints spans with RichConsoleSpanExporter.
        enable_google_tracing: If True, exports spans to Google Cloud Trace
            (requires the [google] extra).
        project_id: Optional Google Cloud Project ID. Detected from the
            metadata server when omitted.
        metadata_spans_only: If True, the exporters added here only receive
            metadata request spans, leaving the application's own spans to
            whatever exporters it configured.
    """
    provider = _sdk_provider()
    attached = getattr(provider, _ATTACHED)

    if enable_console_tracing and "console" not in attached:
        processor = BatchSpanProcessor(
            RichConsoleSpanExporter(),
            schedule_delay_millis=500,
            max_export_batch_size=10,
        )
        _attach(provider, "console", processor, metadata_spans_only)
        logger.debug("Console tracing (Rich) activated.")

    if enable_google_tracing and "google" not in attached:
        if CloudTraceSpanExporter is None:
            logger.warning(
                "enable_google_tracing=True but "
                "opentelemetry-exporter-gcp-trace is not installed. "
                "Please install it via `pip install gce-metadata[google]`."
            )
            return
        processor = BatchSpanProcessor(_cloud_trace_exporter(project_id))
        _attach(provider, "google", processor, metadata_spans_only)
