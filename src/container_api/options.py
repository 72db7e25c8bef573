"""
Operation options and their query encoders

Each options type maps to one endpoint. encode() is a pure function of the
options value: it returns the request path and a list of (key, value) query
pairs, and never touches the network. Unset options never reach the query.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple
from urllib.parse import quote, urlencode

from .exceptions import InvalidIdentifier

Query = List[Tuple[str, str]]

TRUE = '1'


def validate_id(value: Optional[str], kind: str = 'container') -> str:
    """
    Trim an identifier and reject it when empty

    Args:
        value: Container, network or image ID/name
        kind: What the identifier names, used in the error message

    Returns:
        The trimmed identifier

    Raises:
        InvalidIdentifier: If nothing but whitespace is left
    """
    value = (value or '').strip()
    if not value:
        raise InvalidIdentifier(f"{kind} ID cannot be empty")
    return value


def quote_id(identifier: str) -> str:
    """Escape an identifier for use as a path segment (image references keep '/' and ':')"""
    return quote(identifier, safe='/:@')


def encode_query(query: Optional[Query]) -> str:
    """
    Render query pairs as a URL query string

    Pairs are ordered by key; pairs sharing a key keep the caller's order.
    """
    if not query:
        return ''
    return urlencode(sorted(query, key=lambda pair: pair[0]))


def build_url(path: str, query: Optional[Query] = None) -> str:
    """Path plus encoded query, as sent on the request line"""
    encoded = encode_query(query)
    return f"{path}?{encoded}" if encoded else path


def _flag(query: Query, key: str, enabled: bool):
    if enabled:
        query.append((key, TRUE))


def _text(query: Query, key: str, value: Optional[str]):
    if value:
        query.append((key, value))


@dataclass(frozen=True)
class RemoveOptions:
    """Parameters to remove a container"""
    remove_volumes: bool = False
    remove_links: bool = False
    force: bool = False

    def encode(self, container_id: str) -> Tuple[str, Query]:
        query: Query = []
        _flag(query, 'v', self.remove_volumes)
        _flag(query, 'link', self.remove_links)
        _flag(query, 'force', self.force)
        return f"/containers/{quote_id(container_id)}", query


@dataclass(frozen=True)
class StopOptions:
    """
    Parameters to stop a container

    Attributes:
        signal: Signal sent to stop the container gracefully (default on the
            daemon side: SIGTERM)
        timeout: Seconds to wait before the container is killed.
            None uses the container's StopTimeout or the daemon default,
            0 kills immediately, a negative value waits indefinitely.
    """
    signal: str = ''
    timeout: Optional[int] = None

    def encode(self, container_id: str) -> Tuple[str, Query]:
        query: Query = []
        if self.timeout is not None:
            query.append(('t', str(int(self.timeout))))
        _text(query, 'signal', self.signal)
        return f"/containers/{quote_id(container_id)}/stop", query


@dataclass(frozen=True)
class LogsOptions:
    """
    Parameters to select container logs

    tail is always sent, even when empty; the daemon treats an empty value
    like 'all'.
    """
    show_stdout: bool = False
    show_stderr: bool = False
    timestamps: bool = False
    follow: bool = False
    tail: str = ''
    details: bool = False

    def encode(self, container_id: str) -> Tuple[str, Query]:
        query: Query = []
        _flag(query, 'stdout', self.show_stdout)
        _flag(query, 'stderr', self.show_stderr)
        _flag(query, 'timestamps', self.timestamps)
        _flag(query, 'follow', self.follow)
        _flag(query, 'details', self.details)
        query.append(('tail', self.tail or ''))
        return f"/containers/{quote_id(container_id)}/logs", query


class WaitCondition(str, Enum):
    """
    Container state to wait for

    NOT_RUNNING (daemon default): any of created, exited, dead, removing, removed.
    NEXT_EXIT: the next transition to a non-running state; blocks on a created
        or exited container until it runs and exits, or is removed.
    REMOVED: the container is removed.
    """
    NOT_RUNNING = 'not-running'
    NEXT_EXIT = 'next-exit'
    REMOVED = 'removed'

    def url(self, container_id: str) -> Tuple[str, Query]:
        """Path and query for waiting on this condition"""
        return encode_wait(container_id, self)


def encode_wait(container_id: str, condition: Optional[WaitCondition] = None) -> Tuple[str, Query]:
    """Path and query for a wait request; no condition leaves the choice to the daemon"""
    query: Query = []
    if condition:
        _text(query, 'condition', WaitCondition(condition).value)
    return f"/containers/{quote_id(container_id)}/wait", query


def encode_create(name: Optional[str] = None) -> Tuple[str, Query]:
    query: Query = []
    _text(query, 'name', name)
    return '/containers/create', query


@dataclass(frozen=True)
class ImageRemoveOptions:
    """Parameters to remove an image"""
    force: bool = False
    prune_children: bool = False

    def encode(self, image_id: str) -> Tuple[str, Query]:
        query: Query = []
        _flag(query, 'force', self.force)
        _flag(query, 'prune_children', self.prune_children)
        return f"/images/{quote_id(image_id)}", query


@dataclass(frozen=True)
class ImageBuildOptions:
    """
    Parameters to build an image

    Attributes:
        tags: Names for the resulting image, each sent as its own 't' value
        dockerfile: Path of the Dockerfile inside the build context
    """
    tags: Sequence[str] = ()
    dockerfile: str = ''

    def encode(self) -> Tuple[str, Query]:
        query: Query = [('t', tag) for tag in self.tags]
        _text(query, 'dockerfile', self.dockerfile)
        return '/build', query


@dataclass(frozen=True)
class ImagePullOptions:
    """
    Parameters to pull an image

    Attributes:
        reference: Image reference, e.g. 'alpine:latest'; always sent
        platform: Platform in os[/arch[/variant]] form
    """
    reference: str
    platform: str = ''

    def encode(self) -> Tuple[str, Query]:
        query: Query = [('fromImage', self.reference)]
        _text(query, 'platform', self.platform)
        return '/images/create', query
