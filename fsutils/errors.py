# fsutils/errors.py

import os

from typing import Optional, Union


class FileAccessError(OSError):
    """Raised when a file or directory cannot be read, written, copied or deleted."""

    def __init__(self, message: str, *, path: Optional[Union[str, os.PathLike]] = None):
        super().__init__(message)
        self.path = path

    def __str__(self):
        message = self.args[0] if self.args else ""
        if self.path is not None:
            return f"{message}: {self.path}"
        return message
