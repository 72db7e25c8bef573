"""
TAR Archive utilities for image build contexts
"""

import io
import os
import tarfile
from typing import Dict, Optional, Union

FileContent = Union[str, bytes]


def create_build_context(files: Dict[str, FileContent], modes: Optional[Dict[str, int]] = None) -> bytes:
    """
    Create a build context archive from in-memory files
    
    Args:
        files: Archive member name -> content (str is UTF-8 encoded)
        modes: Optional permission bits per member (default: 0o644)
        
    Returns:
        Tar archive as bytes
    """
    modes = modes or {}
    tar_stream = io.BytesIO()
    
    with tarfile.open(fileobj=tar_stream, mode='w', format=tarfile.USTAR_FORMAT) as tar:
        for name, content in files.items():
            data = content.encode('utf-8') if isinstance(content, str) else content
            info = tarfile.TarInfo(name=name)
            info.size = len(data)
            info.mode = modes.get(name, 0o644)
            tar.addfile(info, io.BytesIO(data))
    
    return tar_stream.getvalue()


def create_tar_from_directory(dir_path: str) -> bytes:
    """
    Create a build context archive from a directory
    
    Members are stored relative to dir_path, so the Dockerfile at its root
    ends up at the root of the archive.
    
    Args:
        dir_path: Build context directory
        
    Returns:
        Tar archive as bytes
    """
    tar_stream = io.BytesIO()
    
    with tarfile.open(fileobj=tar_stream, mode='w') as tar:
        for root, dirs, files in os.walk(dir_path):
            dirs.sort()
            for file in sorted(files):
                file_path = os.path.join(root, file)
                arcname = os.path.relpath(file_path, dir_path)
                tar.add(file_path, arcname=arcname.replace(os.sep, '/'))
    
    return tar_stream.getvalue()
