"""
Cancellation and deadlines for in-flight requests

A CancelToken is created by the caller and passed to any operation. Calling
cancel() from another thread shuts down the sockets of every request bound to
the token, which unblocks a pending read. A token created with a timeout also
caps the connect and read timeouts of those requests.
"""

import socket
import threading
import time
from typing import Optional, Set

from .exceptions import RequestCancelled


class CancelToken:
    """Caller-owned cancellation/deadline context"""
    
    def __init__(self, timeout: Optional[float] = None):
        """
        Args:
            timeout: Seconds from now after which the token counts as expired
        """
        self._lock = threading.Lock()
        self._cancelled = False
        self._sockets: Set = set()
        self.deadline = time.monotonic() + timeout if timeout is not None else None
    
    @property
    def cancelled(self) -> bool:
        """True once cancel() was called or the deadline passed"""
        return self._cancelled or self.expired
    
    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline
    
    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without one"""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())
    
    def cancel(self):
        """Cancel the token and abort every request bound to it"""
        with self._lock:
            self._cancelled = True
            sockets = list(self._sockets)
        for sock in sockets:
            _shutdown(sock)
    
    def raise_if_cancelled(self):
        if self._cancelled:
            raise RequestCancelled('request cancelled')
        if self.expired:
            raise RequestCancelled('request deadline exceeded')
    
    def bind(self, sock):
        """Track a connected socket; shuts it down at once if already cancelled"""
        with self._lock:
            if not self._cancelled:
                self._sockets.add(sock)
                return
        _shutdown(sock)
    
    def unbind(self, sock):
        with self._lock:
            self._sockets.discard(sock)
    
    def timeout_for(self, timeout: Optional[float]) -> Optional[float]:
        """Clamp a socket timeout to the time left before the deadline"""
        remaining = self.remaining()
        if remaining is None:
            return timeout
        # a zero timeout would switch the socket to non-blocking mode
        remaining = max(remaining, 0.001)
        if timeout is None:
            return remaining
        return min(timeout, remaining)


def _shutdown(sock):
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError:
        # already closed or never fully connected
        pass
