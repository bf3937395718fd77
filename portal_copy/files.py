"""Copying the source file to its destination
"""
import logging
import os
import shutil

from .errors import CopyError

log = logging.getLogger(__name__)


def copy_file(src, dest):
    """Copy the bytes of *src* to *dest*, creating or overwriting it

    If *dest* is *src* itself (or a link to it), nothing is written.
    Raises CopyError if either file can't be opened, read or written.
    """
    try:
        if os.path.exists(dest) and os.path.samefile(src, dest):
            log.info("%s is already at %s, not copying", src, dest)
            return
        with open(src, 'rb') as fsrc, open(dest, 'wb') as fdest:
            shutil.copyfileobj(fsrc, fdest)
    except OSError as e:
        raise CopyError(src, dest, e) from e
    log.debug("Copied %s to %s", src, dest)
