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
"""
Message envelope

Holds what one message says and who it goes between, and turns that into
a single-part plain-text message.
"""

from email.errors import MessageError
from email.mime.text import MIMEText
from email.utils import formatdate
from email.utils import make_msgid

from zope.interface import implementer
from relaymail.interfaces import CompositionFailure
from relaymail.interfaces import IMessageEnvelope
from relaymail import encoding


@implementer(IMessageEnvelope)
class MessageEnvelope(object):
    """`from_` and `to` are ``(display name, address)`` pairs.

    Addresses are used as given; checking their syntax is up to the
    caller.
    """

    def __init__(self, from_, to, subject='', body=''):
        self.from_name, self.from_addr = from_
        self.to_name, self.to_addr = to
        self.subject = subject
        self.body = body

    def __repr__(self):
        return '<%s from %s to %s>' % (
            self.__class__.__name__, self.from_addr, self.to_addr)

    def compose(self):
        try:
            message = MIMEText(self.body or '', 'plain',
                               encoding.mime_charset(self.body or ''))
            message['From'] = encoding.encode_address(self.from_name,
                                                      self.from_addr)
            message['To'] = encoding.encode_address(self.to_name,
                                                    self.to_addr)
            message['Subject'] = encoding.encode_header(self.subject or '')
            message['Date'] = formatdate()
            message['Message-Id'] = make_msgid('relaymail')
            return message, encoding.encode_message(message)
        except (ValueError, TypeError, MessageError) as e:
            raise CompositionFailure(str(e))
