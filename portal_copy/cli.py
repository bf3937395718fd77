"""Command line entry point: xdg-desktop-portal-copy-file
"""
from contextlib import contextmanager
import logging
import os
import signal

import click

from . import __version__
from .connection import connect
from .errors import PortalCopyError
from .files import copy_file
from .portal import DesktopPortal
from .results import parse_file_chooser_results

log = logging.getLogger(__name__)


def setup_logging(level=logging.WARNING):
    """Send portal_copy log messages to stderr"""
    root = logging.getLogger('portal_copy')
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter('%(levelname)s %(name)s: %(message)s'))
        root.addHandler(handler)
    root.setLevel(level)


def _raise_interrupt(signum, frame):
    raise KeyboardInterrupt


@contextmanager
def interruptible():
    """Let SIGTERM break out of a blocking wait, as Ctrl-C does"""
    previous = signal.signal(signal.SIGTERM, _raise_interrupt)
    try:
        yield
    finally:
        signal.signal(signal.SIGTERM, previous)


def save_via_portal(source, folder, name, timeout=None):
    """Ask the portal where to save *source*, and copy it there

    Returns the destination path, or None if the user cancelled the dialog.
    Raises a PortalCopyError subclass if any step fails; nothing is copied
    unless every step before the copy succeeded.
    """
    with connect() as conn:
        portal = DesktopPortal(conn)
        with portal.request_save_file(folder, name) as request:
            with interruptible():
                response = request.wait(timeout=timeout)

    if response.cancelled:
        log.info("Dialog closed without choosing a file (%s)",
                 response.describe())
        return None

    dest = parse_file_chooser_results(response.results)
    copy_file(source, dest)
    return dest


def _not_empty(ctx, param, value):
    if value is not None and not value:
        raise click.BadParameter("must not be empty")
    return value


@click.command()
@click.argument('source', type=click.Path(exists=True, dir_okay=False))
@click.argument('target_directory', default='~', callback=_not_empty)
@click.argument('target_name', required=False, callback=_not_empty)
@click.version_option(version=__version__)
def cli(source, target_directory, target_name):
    """Copy SOURCE to a location picked in the desktop's Save File dialog.

    The dialog starts in TARGET_DIRECTORY (default ~) and suggests
    TARGET_NAME (default: the name of SOURCE). Closing the dialog without
    choosing a location is not an error.
    """
    setup_logging()
    if target_name is None:
        target_name = os.path.basename(source)

    try:
        save_via_portal(source, target_directory, target_name)
    except PortalCopyError as e:
        log.debug("Failed", exc_info=True)
        raise click.ClickException(str(e)) from e


def main():
    cli(prog_name='xdg-desktop-portal-copy-file')
