"""Tagged D-Bus variant values

jeepney represents a variant as a ``(signature, value)`` pair, both when
sending and receiving. These helpers build such pairs for the option types
the portal accepts, and unwrap received ones, checking the signature rather
than coercing whatever arrives.
"""
from collections import namedtuple
import os

from .errors import DecodeError

Variant = namedtuple('Variant', ['signature', 'value'])


def string(value: str) -> Variant:
    return Variant('s', value)


def byte_string(value) -> Variant:
    """A byte array with exactly one trailing NUL byte

    Paths in portal options (e.g. ``current_folder``) are sent this way.
    *value* may be str (encoded with the filesystem encoding) or bytes.
    """
    b = os.fsencode(value).rstrip(b'\0')
    return Variant('ay', b + b'\0')


def unwrap(variant, signature, *, name='value'):
    """Get the value out of a received variant, checking its signature

    Raises DecodeError if *variant* is not a ``(signature, value)`` pair or
    if its signature is not *signature*.
    """
    try:
        sig, value = variant
    except (TypeError, ValueError):
        raise DecodeError(
            "{} is not a variant: {!r}".format(name, variant)) from None

    if sig != signature:
        raise DecodeError("{} has signature {!r}, expected {!r}".format(
            name, sig, signature))
    return value
