"""
Shared fixtures for fetch_request_builder tests.
"""
from typing import Dict, List, Tuple

import httpx
import pytest

from fetch_request_builder import RequestBuilder


TEST_FILE_CONTENT = b"hello world from text file"


@pytest.fixture
def builder():
    """Fresh GET builder."""
    return RequestBuilder("GET")


@pytest.fixture
def post_builder():
    """POST builder with a constructed URL."""
    return RequestBuilder("POST").construct_http_url("https://api.example.com/api", ["v1/items"])


@pytest.fixture
def test_file_path(tmp_path):
    """Path to a small text file read in binary mode by tests."""
    path = tmp_path / "test_file.txt"
    path.write_bytes(TEST_FILE_CONTENT)
    return path


@pytest.fixture
def parse_multipart():
    """Split a multipart/form-data body into (headers, data) parts."""

    def _parse(request: httpx.Request) -> List[Tuple[Dict[str, str], bytes]]:
        content_type = request.headers["content-type"]
        boundary = content_type.split("boundary=", 1)[1].encode("ascii")
        body = request.read()

        parts = []
        for chunk in body.split(b"--" + boundary)[1:]:
            if chunk.startswith(b"--"):
                break
            head, _, data = chunk[2:].partition(b"\r\n\r\n")
            headers = {}
            for line in head.decode("utf-8").split("\r\n"):
                name, _, value = line.partition(": ")
                headers[name.lower()] = value
            parts.append((headers, data[:-2]))
        return parts

    return _parse


@pytest.fixture
def captured_requests():
    """List filled by the mock transport handler."""
    return []


@pytest.fixture
def mock_transport(captured_requests):
    """httpx.MockTransport that records requests and echoes 200."""

    def handler(request: httpx.Request) -> httpx.Response:
        captured_requests.append(request)
        return httpx.Response(200, json={"success": True})

    return httpx.MockTransport(handler)
