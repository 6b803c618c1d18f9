"""
Header names and media types used when assembling requests.
"""

CONTENT_TYPE = "Content-Type"
CONTENT_ENCODING = "Content-Encoding"
CONTENT_LENGTH = "Content-Length"
HOST = "Host"
TRANSFER_ENCODING = "Transfer-Encoding"

JSON_CONTENT_TYPE = "application/json"
FORM_URL_ENCODED_HEADER = "application/x-www-form-urlencoded"
MULTIPART_FORM_DATA = "multipart/form-data"
DEFAULT_FILE_CONTENT_TYPE = "application/octet-stream"

GZIP_ENCODING = "gzip"
CHUNKED_ENCODING = "chunked"

# Header values never written to logs or debug output unmasked
SENSITIVE_HEADERS = frozenset(
    ["authorization", "proxy-authorization", "x-api-key", "cookie"]
)
