"""
Request builder for fetch_request_builder.

Accumulates method, URL, query parameters, headers and one payload through
chained calls, then produces an httpx.Request ready to be sent by any httpx
client.

    request = (
        RequestBuilder("POST")
        .construct_http_url("https://api.example.com/api", ["v1/workspaces", "message"], [workspace_id])
        .add_header("Content-Type", "application/json")
        .add_query("version", "2024-01-01")
        .set_body_content_json({"text": "hello"})
        .build()
    )
"""
import io
import logging
import re
import uuid
from typing import Any, BinaryIO, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

import httpx

from ..compression import gzip_bytes, gzip_chunks, iter_chunks
from ..config import merge_config, validate_config
from ..constants import (
    CHUNKED_ENCODING,
    CONTENT_ENCODING,
    CONTENT_LENGTH,
    CONTENT_TYPE,
    FORM_URL_ENCODED_HEADER,
    GZIP_ENCODING,
    HOST,
    MULTIPART_FORM_DATA,
    TRANSFER_ENCODING,
)
from ..content import (
    JSONContent,
    StreamContent,
    as_payload_content,
    as_raw_content,
    to_body_stream,
    to_multipart_part,
)
from ..debug import mask_headers
from ..errors import BuildError, RequestBuilderError, UnsupportedContentTypeError, URLParseError
from ..streams import BodyStream, remaining_length
from ..types import BuilderConfig, FormData, HttpMethod

logger = logging.getLogger("fetch_request_builder.request_builder")

_PATH_PARAM_PATTERN = re.compile(r"\{([^{}]+)\}")

# Set by the builder for streamed bodies, replacing any caller value
_FRAMING_HEADERS = ("content-length", "transfer-encoding")

HeaderItems = List[Tuple[str, str]]
BodyPayload = Union[bytes, BinaryIO, Iterable[bytes]]


def escape_path_parameter(value: Any) -> str:
    """Percent-escape a path parameter, '/' included."""
    return quote(str(value), safe="")


def parse_endpoint(endpoint: str) -> Tuple[str, str, str, str, str]:
    """
    Split an endpoint into URL parts, rejecting anything that is not an
    absolute URL.

    Raises:
        URLParseError: if the endpoint has no scheme or host, or cannot be parsed
    """
    if not isinstance(endpoint, str) or not endpoint:
        raise URLParseError(f"Invalid endpoint URL: {endpoint!r}", endpoint=endpoint)

    try:
        parts = urlsplit(endpoint)
    except ValueError as e:
        raise URLParseError(f"Invalid endpoint URL: {endpoint!r}: {e}", endpoint=endpoint) from e

    if not parts.scheme or not parts.netloc:
        raise URLParseError(
            f"Invalid endpoint URL: {endpoint!r} (scheme and host are required)",
            endpoint=endpoint,
        )
    return parts.scheme, parts.netloc, parts.path, parts.query, parts.fragment


def join_path(
    base_path: str,
    path_segments: Optional[Sequence[str]] = None,
    path_parameters: Optional[Sequence[Any]] = None,
) -> str:
    """
    Append segments and escaped parameters to a base path.

    Order is segment[0], parameter[0], segment[1], parameter[1], ...; parameters
    left over after the last segment are appended. Segments are taken as
    already escaped. Empty entries are skipped.
    """
    segments = list(path_segments or [])
    parameters = [
        "" if parameter is None else escape_path_parameter(parameter)
        for parameter in (path_parameters or [])
    ]

    parts = [base_path.rstrip("/")]
    for index, segment in enumerate(segments):
        segment = (segment or "").strip("/")
        if segment:
            parts.append(segment)
        if index < len(parameters) and parameters[index]:
            parts.append(parameters[index])
    parts.extend(parameter for parameter in parameters[len(segments):] if parameter)

    return "/".join(parts)


def _to_url(scheme: str, netloc: str, path: str, query: str, fragment: str, endpoint: str) -> httpx.URL:
    try:
        return httpx.URL(urlunsplit((scheme, netloc, path, query, fragment)))
    except httpx.InvalidURL as e:
        raise URLParseError(f"Invalid endpoint URL: {endpoint!r}: {e}", endpoint=endpoint) from e


class RequestBuilder:
    """
    Fluent accumulator for a single outgoing request.

    A builder is single-use: create a new one for every request. Mutators
    return the builder so calls can be chained; invalid input raises
    immediately and leaves the builder as it was.
    """

    def __init__(self, method: Union[HttpMethod, str], config: Optional[BuilderConfig] = None):
        self.config = merge_config(config)
        validate_config(self.config)

        self.method = method
        self.url: Optional[httpx.URL] = None
        self.header: Dict[str, List[str]] = {}
        self.query: Dict[str, List[str]] = {}
        self.body: Optional[BinaryIO] = None
        self.form: List[FormData] = []
        self.enable_gzip = False
        # True when body is a buffer the builder encoded itself
        self._buffered_body = False

    def __repr__(self) -> str:
        return (
            f"RequestBuilder(method={self.method!r}, url={str(self.url) if self.url else None!r}, "
            f"headers={mask_headers(self.header)!r}, query={self.query!r}, "
            f"has_body={self.body is not None}, form_fields={len(self.form)})"
        )

    # ------------------------------------------------------------------
    # URL
    # ------------------------------------------------------------------

    def construct_http_url(
        self,
        endpoint: str,
        path_segments: Optional[Sequence[str]] = None,
        path_parameters: Optional[Sequence[Any]] = None,
    ) -> "RequestBuilder":
        """
        Set the request URL from an endpoint plus path segments and parameters.

        Segments and parameters interleave, so segments ["v1/workspaces", "message"]
        with parameters ["w 1"] give "<endpoint>/v1/workspaces/w%201/message".
        """
        scheme, netloc, path, query, fragment = parse_endpoint(endpoint)
        full_path = join_path(path, path_segments, path_parameters)
        self.url = _to_url(scheme, netloc, full_path, query, fragment, endpoint)

        logger.debug(f"construct_http_url: endpoint={endpoint}, url={self.url}")
        return self

    def resolve_request_url(
        self,
        service_url: str,
        path: str,
        path_params: Optional[Mapping[str, Any]] = None,
    ) -> "RequestBuilder":
        """
        Set the request URL from a service URL and a templated path.

        Each "{name}" placeholder in path is replaced by the escaped value
        of path_params[name].

        Raises:
            URLParseError: if the service URL is invalid or a placeholder has no value
        """
        scheme, netloc, base_path, query, fragment = parse_endpoint(service_url)
        params = path_params or {}

        def substitute(match: "re.Match[str]") -> str:
            name = match.group(1)
            value = params.get(name)
            if value is None or value == "":
                raise URLParseError(
                    f"Path parameter '{name}' is missing or empty", endpoint=service_url
                )
            return escape_path_parameter(value)

        resolved = _PATH_PARAM_PATTERN.sub(substitute, path or "")
        full_path = base_path.rstrip("/")
        if resolved.strip("/"):
            full_path = f"{full_path}/{resolved.lstrip('/')}"

        self.url = _to_url(scheme, netloc, full_path, query, fragment, service_url)

        logger.debug(f"resolve_request_url: path={path}, url={self.url}")
        return self

    # ------------------------------------------------------------------
    # Headers and query
    # ------------------------------------------------------------------

    def add_header(self, name: str, value: Any) -> "RequestBuilder":
        """Append a header value. Repeated names produce repeated header lines."""
        self.header.setdefault(name, []).append(str(value))
        return self

    def add_query(self, name: str, value: Any) -> "RequestBuilder":
        """Append a query parameter value. Repeated names produce repeated keys."""
        self.query.setdefault(name, []).append(str(value))
        return self

    def get_header(self, name: str) -> Optional[str]:
        """First value of a header, matched case-insensitively."""
        values = self._header_values(name)
        return values[0] if values else None

    def _header_values(self, name: str) -> List[str]:
        wanted = name.lower()
        values: List[str] = []
        for key, key_values in self.header.items():
            if key.lower() == wanted:
                values.extend(key_values)
        return values

    def _set_header(self, name: str, value: str) -> None:
        """Replace every value of a header, matched case-insensitively."""
        wanted = name.lower()
        for key in [key for key in self.header if key.lower() == wanted]:
            del self.header[key]
        self.header[name] = [value]

    def _header_items(self, exclude: Sequence[str] = ()) -> HeaderItems:
        excluded = {name.lower() for name in exclude}
        return [
            (key, value)
            for key, values in self.header.items()
            if key.lower() not in excluded
            for value in values
        ]

    # ------------------------------------------------------------------
    # Body
    # ------------------------------------------------------------------

    def set_body_content_json(self, value: Any) -> "RequestBuilder":
        """
        Set the body to the compact JSON encoding of value, newline terminated.

        Content-Type is not set.

        Raises:
            SerializationError: if value cannot be encoded
        """
        return self._set_body(to_body_stream(JSONContent(value), self.config), "json", buffered=True)

    def set_body_content_string(self, value: str) -> "RequestBuilder":
        """Set the body to the UTF-8 bytes of value."""
        return self._set_body(io.BytesIO(value.encode("utf-8")), "string", buffered=True)

    def set_body_content_stream(self, stream: BinaryIO) -> "RequestBuilder":
        """
        Set the body to a binary readable stream.

        The stream is read from its current position by the transport when the
        request is sent; closing it afterwards is the caller's responsibility.
        """
        content = as_raw_content(stream)
        if not isinstance(content, StreamContent):
            raise UnsupportedContentTypeError(type(stream).__name__)
        return self._set_body(content.stream, "stream")

    def set_body_content(
        self,
        content_type: str = "",
        json_content: Any = None,
        non_json_content: Any = None,
        file_content: Any = None,
    ) -> "RequestBuilder":
        """
        Set the body from the first provided slot.

        Precedence is json_content > non_json_content > file_content:

        - json_content is always encoded as JSON
        - non_json_content is sent verbatim when it is text, bytes or a
          binary stream, and encoded as JSON otherwise
        - file_content must be text, bytes or a binary stream

        A non-empty content_type replaces the Content-Type header. When every
        slot is None the builder is left unchanged.

        Raises:
            SerializationError: if a JSON value cannot be encoded
            UnsupportedContentTypeError: if file_content is of any other kind
        """
        if json_content is not None:
            content = JSONContent(json_content)
            source = "json"
        elif non_json_content is not None:
            content = as_payload_content(non_json_content)
            source = "non_json"
        elif file_content is not None:
            content = as_raw_content(file_content)
            source = "file"
        else:
            logger.debug("set_body_content: no body content provided")
            return self

        stream = to_body_stream(content, self.config)
        if content_type:
            self._set_header(CONTENT_TYPE, content_type)
        return self._set_body(stream, source, buffered=not isinstance(content, StreamContent))

    def _set_body(self, stream: BinaryIO, source: str, buffered: bool = False) -> "RequestBuilder":
        if self.form:
            logger.debug(f"_set_body: discarding {len(self.form)} form field(s)")
        self.body = stream
        self._buffered_body = buffered
        self.form = []
        logger.debug(f"_set_body: source={source}, type={type(stream).__name__}")
        return self

    def set_enable_gzip_compression(self, enable: bool) -> "RequestBuilder":
        """Compress the body with gzip at build time and send Content-Encoding: gzip."""
        self.enable_gzip = enable
        return self

    # ------------------------------------------------------------------
    # Form data
    # ------------------------------------------------------------------

    def add_form_data(
        self,
        field_name: str,
        file_name: Optional[str],
        content_type: Optional[str],
        value: Any,
    ) -> "RequestBuilder":
        """
        Append a form field.

        Without a file name the field is a simple field; with one it is a file
        part using content_type (or the configured default). Text, bytes and
        binary streams are sent as-is, other values as JSON. Values are only
        encoded by build().
        """
        if self.body is not None:
            logger.debug("add_form_data: discarding previously set body")
            self.body = None
            self._buffered_body = False

        self.form.append(
            FormData(
                field_name=field_name,
                file_name=file_name or "",
                content_type=content_type or "",
                content=value,
            )
        )
        return self

    def _is_url_encoded_form(self) -> bool:
        """Check if the form should be sent as application/x-www-form-urlencoded."""
        content_type = self.get_header(CONTENT_TYPE)
        if not content_type:
            return False
        media_type = content_type.split(";", 1)[0].strip().lower()
        if media_type != FORM_URL_ENCODED_HEADER:
            return False
        return all(not field.is_file and isinstance(field.content, str) for field in self.form)

    def _encode_url_form(self) -> bytes:
        pairs = sorted(
            ((field.field_name, field.content) for field in self.form),
            key=lambda pair: pair[0],
        )
        return urlencode(pairs).encode("ascii")

    def _multipart_files(self) -> List[Tuple[str, Tuple[Optional[str], Any, Optional[str]]]]:
        files = []
        for field in self.form:
            part = to_multipart_part(field, self.config)
            if getattr(part.content, "closed", False):
                raise BuildError(f"Stream for form field '{part.name}' is closed")
            files.append((part.name, (part.filename, part.content, part.content_type)))
        return files

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def build(self) -> httpx.Request:
        """
        Produce the final request.

        Query parameters are merged into the URL's query string with names
        sorted. The payload is, in order of preference: a URL-encoded form
        (when Content-Type says so and every field is simple text), a
        multipart form, or the body set by a set_body_content_* call.

        Streams are not read here; the transport reads them from their
        current position when sending, through a body stream usable by both
        httpx.Client and httpx.AsyncClient. A seekable stream is sent with a
        Content-Length of the bytes left to read, other streams and gzip
        bodies are sent chunked.

        The method is stored as given, but httpx.Request upper-cases it, so a
        builder created with "get" produces a GET request.

        Raises:
            BuildError: if no URL was constructed or the payload cannot be encoded
            SerializationError: if a structured form value cannot be encoded
            UnsupportedContentTypeError: if a form value is of an unsupported kind
        """
        if self.url is None:
            raise BuildError("Request URL has not been constructed")

        url = self._url_with_query(self.url)

        try:
            if self.form and self._is_url_encoded_form():
                request = self._build_content_request(url, self._header_items(), self._encode_url_form())
            elif self.form:
                request = self._build_multipart_request(url)
            else:
                request = self._build_content_request(url, self._header_items(), self._body_payload())
        except RequestBuilderError:
            raise
        except (TypeError, ValueError, OSError) as e:
            raise BuildError(f"Unable to encode request body: {e}") from e

        logger.debug(
            f"build: method={request.method}, url={request.url}, "
            f"headers={mask_headers(request.headers)}, form_fields={len(self.form)}, "
            f"gzip={self.enable_gzip}"
        )
        return request

    def _url_with_query(self, url: httpx.URL) -> httpx.URL:
        if not self.query:
            return url

        pairs = parse_qsl(url.query.decode("ascii"), keep_blank_values=True)
        for name, values in self.query.items():
            pairs.extend((name, value) for value in values)
        pairs.sort(key=lambda pair: pair[0])

        return url.copy_with(query=urlencode(pairs).encode("ascii"))

    def _body_payload(self) -> Optional[BodyPayload]:
        """In-memory bodies as bytes; streams handed over unread."""
        if self.body is None:
            return None
        if self._buffered_body:
            return self.body.getvalue()
        if getattr(self.body, "closed", False):
            raise BuildError("Body stream is closed")
        if isinstance(self.body, io.BytesIO):
            return self.body.read()
        return self.body

    def _build_content_request(
        self,
        url: httpx.URL,
        headers: HeaderItems,
        content: Optional[BodyPayload],
    ) -> httpx.Request:
        level = self.config.gzip_compression_level

        if content is None or isinstance(content, bytes):
            if self.enable_gzip and content is not None:
                headers = [*headers, (CONTENT_ENCODING, GZIP_ENCODING)]
                content = gzip_bytes(content, level)
            return httpx.Request(self.method, url, headers=headers, content=content)

        length = None
        chunks = self._iter_payload(content)
        if callable(getattr(content, "read", None)):
            length = remaining_length(content)

        if self.enable_gzip:
            headers = [*headers, (CONTENT_ENCODING, GZIP_ENCODING)]
            chunks = gzip_chunks(chunks, level)
            length = None

        return self._build_stream_request(url, headers, BodyStream(chunks), length)

    def _iter_payload(self, content: Union[BinaryIO, Iterable[bytes]]) -> Iterable[bytes]:
        if callable(getattr(content, "read", None)):
            return iter_chunks(content, self.config.stream_chunk_size)
        return content

    def _build_stream_request(
        self,
        url: httpx.URL,
        headers: HeaderItems,
        stream: BodyStream,
        length: Optional[int],
    ) -> httpx.Request:
        headers = [(key, value) for key, value in headers if key.lower() not in _FRAMING_HEADERS]
        # httpx only fills in Host itself when it encodes the body
        if not any(key.lower() == "host" for key, _ in headers):
            headers.insert(0, (HOST, url.netloc.decode("ascii")))
        if length is None:
            headers.append((TRANSFER_ENCODING, CHUNKED_ENCODING))
        else:
            headers.append((CONTENT_LENGTH, str(length)))
        return httpx.Request(self.method, url, headers=headers, stream=stream)

    def _build_multipart_request(self, url: httpx.URL) -> httpx.Request:
        boundary = uuid.uuid4().hex
        headers = self._header_items(exclude=[CONTENT_TYPE])
        headers.append((CONTENT_TYPE, f"{MULTIPART_FORM_DATA}; boundary={boundary}"))

        # httpx picks the boundary up from the Content-Type header
        request = httpx.Request(self.method, url, headers=headers, files=self._multipart_files())
        if not self.enable_gzip:
            return request

        return self._build_content_request(url, request.headers.multi_items(), request.stream)
