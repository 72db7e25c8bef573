"""
Container API Exceptions
"""


class DockerException(Exception):
    """Base Docker exception"""
    pass


class ConfigError(DockerException, ValueError):
    """Unsupported or malformed daemon host"""
    pass


class InvalidIdentifier(DockerException, ValueError):
    """Empty container, network or image identifier, rejected before any request"""
    pass


class APIError(DockerException):
    """Daemon answered with a status other than the one expected for the operation"""
    
    def __init__(self, message, response=None, status_code=None, reason=None):
        super().__init__(message)
        self.response = response
        self.status_code = status_code
        self.reason = reason


class RequestCancelled(DockerException):
    """Request or stream read aborted through its cancel token"""
    pass


class MalformedResponse(DockerException):
    """Response body is not the JSON document the operation expects"""
    
    def __init__(self, message, body: str = ''):
        super().__init__(message)
        self.body = body


class BuildError(DockerException):
    """Image build error reported inside the build-progress stream"""
    
    def __init__(self, message, detail=None):
        super().__init__(message)
        self.detail = detail
