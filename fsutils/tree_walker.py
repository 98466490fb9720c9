# fsutils/tree_walker.py

import os
import shutil

from pathlib import Path
from typing import List, Optional

from fsutils.errors import FileAccessError
from fsutils.logging import get_app_logger

class FileVisitor:
    """
    Hooks called by walk_file_tree().

    Subclasses override the hooks they care about. A FileAccessError raised
    from any hook stops the walk and reaches the caller of walk_file_tree().
    """

    def pre_visit_directory(self, directory: Path) -> None:
        pass

    def visit_file(self, file: Path) -> None:
        pass

    def visit_file_failed(self, file: Path, exc: OSError) -> None:
        raise FileAccessError(f"Cannot visit file ({exc.strerror or exc})", path=file) from exc

    def post_visit_directory(self, directory: Path, exc: Optional[OSError]) -> None:
        if exc is not None:
            raise FileAccessError(f"Cannot list directory ({exc.strerror or exc})", path=directory) from exc


class _DirectoryFrame:
    """A directory being walked, with the entries still to visit."""

    def __init__(self, directory: Path, entries: List[os.DirEntry]):
        self.directory = directory
        self.entries = entries
        self.position = 0

    def next_entry(self) -> Optional[os.DirEntry]:
        if self.position >= len(self.entries):
            return None
        entry = self.entries[self.position]
        self.position += 1
        return entry


def _read_entries(directory: Path) -> List[os.DirEntry]:
    with os.scandir(directory) as it:
        return list(it)


def walk_file_tree(start, visitor: FileVisitor) -> None:
    """
    Walk the tree rooted at ``start`` depth first, calling the visitor's hooks.

    Directories get pre_visit_directory() before any of their entries and
    post_visit_directory() after all of them. Everything that is not a
    directory (symbolic links included, which are never followed) goes to
    visit_file(). The walk keeps its own stack, so tree depth is not bounded
    by the recursion limit.
    """
    start = Path(start)
    stack: List[_DirectoryFrame] = []

    def enter(path: Path, is_dir: bool) -> None:
        if not is_dir:
            _visit_file(visitor, path)
            return

        visitor.pre_visit_directory(path)
        try:
            entries = _read_entries(path)
        except OSError as e:
            visitor.post_visit_directory(path, e)
            return
        stack.append(_DirectoryFrame(path, entries))

    try:
        start_is_dir = start.is_dir() and not start.is_symlink()
    except OSError as e:
        visitor.visit_file_failed(start, e)
        return
    enter(start, start_is_dir)

    while stack:
        frame = stack[-1]
        entry = frame.next_entry()
        if entry is None:
            stack.pop()
            visitor.post_visit_directory(frame.directory, None)
            continue

        path = frame.directory / entry.name
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as e:
            visitor.visit_file_failed(path, e)
            continue
        enter(path, is_dir)


def _visit_file(visitor: FileVisitor, path: Path) -> None:
    try:
        visitor.visit_file(path)
    except FileAccessError:
        raise
    except OSError as e:
        visitor.visit_file_failed(path, e)


class CopyTreeVisitor(FileVisitor):
    """Reproduces the walked tree under ``target``, directories before their content."""

    def __init__(self, source, target):
        self.source = Path(source)
        self.target = Path(target)
        self.directories_created = 0
        self.files_copied = 0

    def _destination(self, path: Path) -> Path:
        return self.target / path.relative_to(self.source)

    def pre_visit_directory(self, directory: Path) -> None:
        destination = self._destination(directory)
        try:
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileAccessError(f"Cannot create directory ({e.strerror or e})", path=destination) from e
        self.directories_created += 1

    def visit_file(self, file: Path) -> None:
        destination = self._destination(file)
        try:
            # "xb" refuses to overwrite a file already present at the destination.
            with open(file, "rb") as src, open(destination, "xb") as dst:
                shutil.copyfileobj(src, dst)
        except OSError as e:
            raise FileAccessError(f"Cannot copy {file} ({e.strerror or e})", path=destination) from e
        self.files_copied += 1


class DeleteTreeVisitor(FileVisitor):
    """
    Removes the walked tree, files as they come and directories once emptied.

    A file that cannot be deleted is retried once. If it still resists, the
    error is kept for its directory and the remaining siblings are still
    deleted; leaving that directory then raises FileAccessError.
    """

    def __init__(self):
        self.app_logger = get_app_logger()
        self.files_deleted = 0
        self.directories_deleted = 0
        self._pending_errors = {}

    def visit_file(self, file: Path) -> None:
        os.unlink(file)
        self.files_deleted += 1

    @staticmethod
    def _unlink(file: Path) -> None:
        try:
            os.unlink(file)
        except OSError as e:
            raise FileAccessError(f"Cannot delete file ({e.strerror or e})", path=file) from e

    def visit_file_failed(self, file: Path, exc: OSError) -> None:
        self.app_logger.warning(f"{self.__class__.__name__} visit_file_failed() Retrying deletion of {file}: {exc}")
        try:
            self._unlink(file)
        except FileAccessError as error:
            self.app_logger.error(f"{self.__class__.__name__} visit_file_failed() Could not delete {file}: {error.__cause__}")
            self._pending_errors[file.parent] = error
            return
        self.files_deleted += 1

    def post_visit_directory(self, directory: Path, exc: Optional[OSError]) -> None:
        pending = self._pending_errors.pop(directory, None)
        if exc is not None:
            raise FileAccessError(f"Cannot list directory ({exc.strerror or exc})", path=directory) from exc
        if pending is not None:
            raise pending

        try:
            os.rmdir(directory)
        except OSError as e:
            raise FileAccessError(f"Cannot delete directory ({e.strerror or e})", path=directory) from e
        self.directories_deleted += 1

    def raise_unresolved(self) -> None:
        """Raise a deletion error that no directory was left to report."""
        if self._pending_errors:
            raise next(iter(self._pending_errors.values()))
