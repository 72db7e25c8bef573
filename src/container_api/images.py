"""
Docker Images API
"""

from typing import Any, List, Optional

from .cancel import CancelToken
from .http_client import ResponseStream
from .models import ImageDeleteResponse
from .options import ImageBuildOptions, ImagePullOptions, ImageRemoveOptions, validate_id

TAR_CONTENT_TYPE = 'application/x-tar'


class ImageCollection:
    """Docker Images collection"""

    def __init__(self, client):
        self.client = client

    def pull(self, reference: str, platform: str = '',
             cancel: Optional[CancelToken] = None) -> ResponseStream:
        """
        Pull image from registry

        Returns the progress stream as soon as the daemon accepts the request.
        The pull is finished only once the stream has been read to its end;
        the caller owns the stream and must close it.

        Args:
            reference: Image reference, e.g. 'alpine:latest'
            platform: Platform (e.g., linux/amd64)
            cancel: Cancellation/deadline token

        Returns:
            ResponseStream of newline-delimited JSON progress messages
        """
        reference = validate_id(reference, 'image')
        path, query = ImagePullOptions(reference, platform).encode()
        return self.client.http.post(
            path, query=query, stream=True,
            expected_status=200, cancel=cancel, action='image pull'
        )

    def build(self, context: Any, options: Optional[ImageBuildOptions] = None,
              cancel: Optional[CancelToken] = None) -> ResponseStream:
        """
        Build image from a tar build context

        The returned progress stream is caller-owned: read it to completion,
        e.g. with consume_build_stream(), then close it. Build errors are
        reported inside the stream, not by this call.

        Args:
            context: Tar archive holding the Dockerfile and any files it
                needs, as bytes or a binary file object (see tar_utils)
            options: Tags and Dockerfile path
            cancel: Cancellation/deadline token

        Returns:
            ResponseStream of newline-delimited JSON progress messages
        """
        path, query = (options or ImageBuildOptions()).encode()
        return self.client.http.post(
            path, query=query, body=context,
            headers={'Content-Type': TAR_CONTENT_TYPE},
            stream=True, expected_status=200, cancel=cancel, action='image build'
        )

    def remove(self, image: str, options: Optional[ImageRemoveOptions] = None,
               cancel: Optional[CancelToken] = None) -> List[ImageDeleteResponse]:
        """
        Remove image

        Args:
            image: Image name or ID
            options: force / prune_children
            cancel: Cancellation/deadline token

        Returns:
            One entry per untagged reference and deleted image
        """
        image = validate_id(image, 'image')
        path, query = (options or ImageRemoveOptions()).encode(image)
        data = self.client.http.request_json(
            'DELETE', path, query=query,
            expected_status=200, cancel=cancel, action='image removal'
        )
        return [ImageDeleteResponse.from_dict(item) for item in data or []]

