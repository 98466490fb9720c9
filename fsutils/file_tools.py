# fsutils/file_tools.py

import os

from pathlib import Path
from typing import List, Optional, Union

from fsutils.config import Config
from fsutils.errors import FileAccessError
from fsutils.logging import get_app_logger
from fsutils.tree_walker import CopyTreeVisitor, DeleteTreeVisitor, walk_file_tree

PathType = Union[str, os.PathLike]

class FileTools:
    """
    Common operations on files and directories: their content, their name,
    their extension, and whole directory trees.

    Every method is static and works only on its arguments; nothing is cached
    between calls.
    """

    @staticmethod
    def ensure_file_has_line(file_name: PathType, line_wanted: str, encoding: Optional[str] = None) -> bool:
        """
        Make sure a text file contains ``line_wanted``, appending it if missing.

        Lines are compared for equality once their line terminator is removed.
        The file must already exist; it is only written when the line is absent.

        :return: True if the line was appended, False if it was already there.
        :raises FileAccessError: if the file cannot be read or written.
        """
        app_logger = get_app_logger()
        if encoding is None:
            encoding = Config().text_encoding()

        found = False
        ends_with_newline = True
        try:
            with open(file_name, "r", encoding=encoding) as f:
                for line in f:
                    ends_with_newline = line.endswith("\n")
                    if line.rstrip("\n") == line_wanted:
                        found = True
                        break
        except OSError as e:
            app_logger.error(f"FileTools ensure_file_has_line() Cannot read {file_name}: {e}")
            raise FileAccessError(f"Cannot read file ({e.strerror or e})", path=file_name) from e
        except UnicodeDecodeError as e:
            app_logger.error(f"FileTools ensure_file_has_line() Cannot decode {file_name} as {encoding}: {e}")
            raise FileAccessError(f"Cannot decode file ({e.reason})", path=file_name) from e

        if found:
            app_logger.debug(f"FileTools ensure_file_has_line() Line already in {file_name}")
            return False

        try:
            with open(file_name, "a", encoding=encoding) as f:
                if not ends_with_newline:
                    f.write("\n")
                f.write(line_wanted + "\n")
        except OSError as e:
            app_logger.error(f"FileTools ensure_file_has_line() Cannot append to {file_name}: {e}")
            raise FileAccessError(f"Cannot write file ({e.strerror or e})", path=file_name) from e
        except UnicodeEncodeError as e:
            app_logger.error(f"FileTools ensure_file_has_line() Cannot encode line for {file_name} as {encoding}: {e}")
            raise FileAccessError(f"Cannot encode line ({e.reason})", path=file_name) from e

        app_logger.debug(f"FileTools ensure_file_has_line() Line appended to {file_name}")
        return True

    @staticmethod
    def get_files_with_extension(directory: PathType, extension: str) -> List[Path]:
        """
        Return the entries of ``directory`` whose name ends with ``.<extension>``.

        Subdirectories are not explored. The comparison is case-sensitive and the
        order is whatever the filesystem gives. A missing or unreadable directory
        yields an empty list.
        """
        suffix = "." + extension
        directory = Path(directory)
        try:
            with os.scandir(directory) as it:
                return [directory / entry.name for entry in it if entry.name.endswith(suffix)]
        except OSError as e:
            get_app_logger().debug(f"FileTools get_files_with_extension() Cannot list {directory}: {e}")
            return []

    @staticmethod
    def get_file_name_without_extension(file: PathType) -> str:
        """Name of a file without its path and without what follows its last dot."""
        name = Path(file).name
        dot_index = name.rfind(".")
        if dot_index != -1:
            name = name[:dot_index]
        return name

    @staticmethod
    def copy_directory(source: PathType, destination: PathType) -> None:
        """
        Copy a directory and all its content into another directory.

        The destination and any missing intermediate directories are created.
        Directories already present there are reused, but an existing file is
        never overwritten. Nothing is rolled back if the copy stops halfway.

        :raises FileAccessError: on the first entry that cannot be copied, or
            when the destination lies inside the source.
        """
        app_logger = get_app_logger()
        if Path(destination).resolve().is_relative_to(Path(source).resolve()):
            app_logger.error(f"FileTools copy_directory() Destination {destination} is inside {source}")
            raise FileAccessError(f"Cannot copy a directory into itself ({destination})", path=source)

        visitor = CopyTreeVisitor(source, destination)
        try:
            walk_file_tree(source, visitor)
        except FileAccessError as e:
            app_logger.error(f"FileTools copy_directory() Copy of {source} to {destination} failed: {e}")
            raise

        app_logger.debug(f"FileTools copy_directory() Copied {source} to {destination}: "
                         f"{visitor.directories_created} directories, {visitor.files_copied} files")

    @staticmethod
    def delete_directory(directory: PathType) -> None:
        """
        Delete a directory and all its content.

        Does nothing if the directory does not exist. Deletion is best effort:
        files that cannot be removed are skipped after one retry, and the error
        is raised once their directory has been processed, so part of the tree
        may be gone when FileAccessError reaches the caller.
        """
        app_logger = get_app_logger()
        if not os.path.exists(directory):
            app_logger.debug(f"FileTools delete_directory() Nothing to delete at {directory}")
            return

        visitor = DeleteTreeVisitor()
        try:
            walk_file_tree(directory, visitor)
            visitor.raise_unresolved()
        except FileAccessError as e:
            app_logger.error(f"FileTools delete_directory() Deletion of {directory} failed: {e}")
            raise

        app_logger.debug(f"FileTools delete_directory() Deleted {directory}: "
                         f"{visitor.directories_deleted} directories, {visitor.files_deleted} files")

    @staticmethod
    def rename_directory(old_name: PathType, new_name: PathType, strict: bool = False) -> bool:
        """
        Rename or move a directory.

        :param strict: raise FileAccessError instead of returning False on failure.
        :return: True if the directory was renamed.
        """
        try:
            os.rename(old_name, new_name)
        except OSError as e:
            get_app_logger().warning(f"FileTools rename_directory() Cannot rename {old_name} to {new_name}: {e}")
            if strict:
                raise FileAccessError(f"Cannot rename directory to {new_name} ({e.strerror or e})",
                                      path=old_name) from e
            return False
        return True
