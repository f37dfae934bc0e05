##############################################################################
#
# Copyright (c) 2003 Zope Corporation and Contributors.
# All Rights Reserved.
#
# This software is subject to the provisions of the Zope Public License,
# Version 2.1 (ZPL).  A copy of the ZPL should accompany this distribution.
# THIS SOFTWARE IS PROVIDED "AS IS" AND ANY AND ALL EXPRESS OR IMPLIED
# WARRANTIES ARE DISCLAIMED, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED
# WARRANTIES OF TITLE, MERCHANTABILITY, AGAINST INFRINGEMENT, AND FITNESS
# FOR A PARTICULAR PURPOSE.
#
##############################################################################
from email.header import Header
from email.utils import formataddr

# Tried in order; the first one able to encode the text wins.
CHARSETS = ('ascii', 'latin_1', 'utf_8')

# Python codec name -> name used in MIME headers.
MIME_NAMES = {
    'ascii': 'us-ascii',
    'latin_1': 'iso-8859-1',
    'utf_8': 'utf-8',
}


def best_charset(text):
    """
    Find the most human-readable and/or conventional encoding for unicode
    text.  Prefers `ascii` or `iso-8859-1` and falls back to `utf-8`.

    Returns a ``(charset, encoded)`` pair.
    """
    for charset in CHARSETS[:-1]:
        try:
            return charset, text.encode(charset)
        except UnicodeError:
            pass
    charset = CHARSETS[-1]
    return charset, text.encode(charset)


def mime_charset(text):
    charset, _ = best_charset(text)
    return MIME_NAMES[charset]


def encode_header(value):
    charset = mime_charset(value)
    if charset == 'us-ascii':
        return value
    return Header(value, charset)


def encode_address(display_name, address):
    """Render a ``Name <address>`` header value.

    Non-ASCII display names are RFC 2047 encoded; an empty display name
    yields the bare address.
    """
    display_name = display_name or ''
    return formataddr((display_name, address), mime_charset(display_name))


def encode_message(message):
    return message.as_bytes()
