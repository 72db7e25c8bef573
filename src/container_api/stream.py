"""
Decoders for streamed response bodies

consume_build_stream() drains an image build's progress stream, and
decode_wait_response() reads the single document returned by a container
wait. Both read from any binary file-like object (a ResponseStream, an
http.client response, io.BytesIO).
"""

import codecs
import json
from enum import Enum
from typing import Any, Optional

from .exceptions import BuildError, MalformedResponse
from .models import JSONMessage, WaitResponse

# Extra bytes read to complete a plaintext error message in a wait response
WAIT_ERROR_MSG_LIMIT = 2 * 1024

_WAIT_READ_SIZE = 512

_LITERALS = ('true', 'false', 'null')


class BuildStreamState(Enum):
    READING = 'reading'
    ERROR_SEEN = 'error_seen'
    DONE = 'done'
    ABORTED = 'aborted'


class BuildStreamConsumer:
    """
    Drains a newline-delimited JSON build-progress stream

    Text carried by each message ('stream') is written to the sink as soon as
    it is decoded. An embedded error ('errorDetail') does not stop reading:
    the daemon keeps sending log lines after a failure and the build only
    finishes server-side once the stream closes, so the consumer drains to the
    end and reports the most recent error.

    A line that cannot be decoded ends consumption. Its raw bytes are written
    to the sink and the error recorded so far, if any, is returned; the parse
    failure itself is not reported.
    """

    def __init__(self, sink: Any):
        """
        Args:
            sink: Object with a write(str) method, or a callable taking a str
        """
        self._write = sink if not hasattr(sink, 'write') and callable(sink) else sink.write
        self.state = BuildStreamState.READING
        self.error: Optional[BuildError] = None

    @property
    def finished(self) -> bool:
        return self.state in (BuildStreamState.DONE, BuildStreamState.ABORTED)

    def consume(self, reader) -> Optional[BuildError]:
        """
        Read the stream to its end

        Args:
            reader: Binary file-like object with readline()

        Returns:
            The last build error reported by the daemon, or None
        """
        while not self.finished:
            line = reader.readline()
            if not line:
                self.state = BuildStreamState.DONE
                break
            self.feed(line)
        return self.error

    def feed(self, line: bytes):
        """Process one line of the stream"""
        if self.finished or not line.strip():
            return

        try:
            message = decode_message(line)
        except ValueError:
            # best effort: hand over what could not be parsed and stop
            self._write(line.decode('utf-8', errors='replace'))
            self.state = BuildStreamState.ABORTED
            return

        if message.stream:
            self._write(message.stream)
        if message.error is not None:
            self.error = BuildError(
                f"docker build error: {str(message.error).strip()}",
                detail=message.error
            )
            self.state = BuildStreamState.ERROR_SEEN


def decode_message(line: bytes) -> JSONMessage:
    """
    Decode one progress stream line

    Raises:
        ValueError: If the line is not a JSON object
    """
    data = json.loads(line)
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return JSONMessage.from_dict(data)


def consume_build_stream(reader, sink: Any) -> Optional[BuildError]:
    """
    Read a build-progress stream to its end, forwarding build output to sink

    The caller still owns reader and must close it afterwards.

    Returns:
        None on success, or the last BuildError reported in the stream
    """
    return BuildStreamConsumer(sink).consume(reader)


def decode_wait_response(reader) -> WaitResponse:
    """
    Decode the JSON document returned by a container wait

    A proxy in front of the daemon may answer with plaintext instead of JSON.
    The bytes read while decoding are kept, so that on a syntax error the
    text can be returned along with up to WAIT_ERROR_MSG_LIMIT further bytes.

    Args:
        reader: Binary file-like object with read()

    Returns:
        WaitResponse

    Raises:
        MalformedResponse: If the body is not valid JSON, not a JSON object,
            or an object whose StatusCode or Error has the wrong type
        json.JSONDecodeError: If the body is empty or ends mid-document
        OSError: Read errors, unchanged
    """
    consumed = bytearray()
    text_decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')
    json_decoder = json.JSONDecoder()
    text = ''

    while True:
        chunk = reader.read(_WAIT_READ_SIZE)
        eof = not chunk
        if eof:
            text += text_decoder.decode(b'', final=True)
        else:
            consumed += chunk
            text += text_decoder.decode(chunk)

        doc = text.lstrip()
        if not doc:
            if eof:
                raise json.JSONDecodeError('Expecting value', text, len(text))
            continue

        try:
            data, _ = json_decoder.raw_decode(doc)
        except json.JSONDecodeError as e:
            if not _needs_more_input(e, doc):
                raise _malformed(reader, consumed, eof) from e
            if eof:
                raise
            continue

        if not isinstance(data, dict):
            # e.g. "502 Bad Gateway" starts with a valid number
            raise _malformed(reader, consumed, eof)
        try:
            return WaitResponse.from_dict(data)
        except ValueError as e:
            raise _malformed(reader, consumed, eof) from e


def _malformed(reader, consumed: bytearray, eof: bool) -> MalformedResponse:
    extra = bytearray()
    while not eof and len(extra) < WAIT_ERROR_MSG_LIMIT:
        chunk = reader.read(WAIT_ERROR_MSG_LIMIT - len(extra))
        if not chunk:
            break
        extra += chunk
    body = (bytes(consumed) + bytes(extra)).decode('utf-8', errors='replace')
    return MalformedResponse(f"malformed response: {body}", body=body)


def _needs_more_input(error: json.JSONDecodeError, doc: str) -> bool:
    """True when the document failed only because it is cut short"""
    if error.pos >= len(doc) or error.msg.startswith('Unterminated string'):
        return True
    rest = doc[error.pos:]
    return rest == '-' or any(literal.startswith(rest) for literal in _LITERALS)
