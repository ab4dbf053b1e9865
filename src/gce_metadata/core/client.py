import http.client
import time
import urllib.error
import urllib.request
from typing import Optional

from opentelemetry import trace

from gce_metadata.core.exceptions import (
    EmptyResponse,
    InvalidResponse,
    ReadFailure,
    TransportError,
)
from gce_metadata.core.logger import logger

METADATA_ROOT = "http://metadata.google.internal/computeMetadata/v1/"
METADATA_HEADERS = {"Metadata-Flavor": "Google"}
DEFAULT_TIMEOUT = 1.0
READ_CHUNK_SIZE = 8192


class MetadataClient:
    """
    Reads values from the GCE metadata server.

    The client holds no mutable state and can be shared between threads.

    Args:
        timeout: Deadline in seconds for a whole request (connect and read).
        root: Base URL that relative paths given to ``fetch`` are joined to.
        tracer: OpenTelemetry tracer for request spans. Defaults to the
            tracer of the globally configured provider.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        root: str = METADATA_ROOT,
        tracer: Optional[trace.Tracer] = None,
    ):
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout!r}")
        self.timeout = timeout
        self.root = root if root.endswith("/") else root + "/"
        self._tracer = tracer or trace.get_tracer(__name__)

    def fetch(self, path: str) -> str:
        """Fetches a path relative to the metadata root, e.g. ``instance/zone``."""
        return self.get(self.root + path.lstrip("/"))

    def get(self, url: str) -> str:
        """
        Issues a single GET against ``url`` and returns the body as text.

        Raises:
            TransportError: the server could not be reached in time.
            InvalidResponse: the status was not 200.
            ReadFailure: the body could not be read or decoded.
            EmptyResponse: the body was empty.
        """
        with self._tracer.start_as_current_span("gce_metadata.get") as span:
            span.set_attribute("http.method", "GET")
            span.set_attribute("http.url", url)
            logger.debug(f"GET {url}")

            deadline = time.monotonic() + self.timeout
            req = urllib.request.Request(url, headers=METADATA_HEADERS)
            # The metadata server is link-local, never route it through a proxy
            opener = urllib.request.build_opener(urllib.request.ProxyHandler({}))

            try:
                response = opener.open(req, timeout=self.timeout)
            except urllib.error.HTTPError as e:
                e.close()
                span.set_attribute("http.status_code", e.code)
                logger.debug(f"GET {url} failed: {e.code} {e.reason}")
                raise InvalidResponse(e.code, str(e.reason), url=url) from e
            except urllib.error.URLError as e:
                logger.debug(f"GET {url} failed: {e.reason}")
                raise TransportError(
                    f"Metadata server unreachable: {e.reason}", url=url
                ) from e
            except (OSError, http.client.HTTPException) as e:
                logger.debug(f"GET {url} failed: {e!r}")
                raise TransportError(
                    f"Metadata request failed: {e!r}", url=url
                ) from e

            with response:
                span.set_attribute("http.status_code", response.status)
                if response.status != 200:
                    logger.debug(f"GET {url} failed: {response.status} {response.reason}")
                    raise InvalidResponse(response.status, response.reason, url=url)

                self._check_deadline(deadline, url)
                body = self._read_body(response, deadline, url)

            if not body:
                logger.debug(f"GET {url} returned an empty body")
                raise EmptyResponse("No response received", url=url)

            try:
                return body.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ReadFailure(f"Response is not valid UTF-8: {e}", url=url) from e

    def _check_deadline(self, deadline: float, url: str) -> None:
        if time.monotonic() >= deadline:
            logger.debug(f"GET {url} exceeded {self.timeout}s")
            raise TransportError(f"Metadata request exceeded {self.timeout}s", url=url)

    def _read_body(
        self, response: http.client.HTTPResponse, deadline: float, url: str
    ) -> bytes:
        """
        Reads the body chunk by chunk so a server trickling bytes cannot stretch
        the request past its deadline. Each socket read is still bounded by
        ``timeout``.
        """
        expected = response.length
        chunks = []
        received = 0
        while True:
            try:
                chunk = response.read1(READ_CHUNK_SIZE)
            except TimeoutError as e:
                raise TransportError(
                    f"Metadata request exceeded {self.timeout}s", url=url
                ) from e
            except (OSError, http.client.HTTPException) as e:
                logger.debug(f"GET {url} failed reading body: {e!r}")
                raise ReadFailure(f"Failed to read response: {e!r}", url=url) from e
            if not chunk:
                break
            chunks.append(chunk)
            received += len(chunk)
            self._check_deadline(deadline, url)

        body = b"".join(chunks)
        if expected is not None and received < expected:
            # read1 reports a closed connection as end of data
            logger.debug(f"GET {url} body truncated at {received}/{expected} bytes")
            raise ReadFailure(
                f"Failed to read response: got {received} of {expected} bytes",
                url=url,
            ) from http.client.IncompleteRead(body, expected - received)
        return body
