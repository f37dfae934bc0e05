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
Dispatcher implementation

One call to `Dispatcher.dispatch` is one delivery attempt:

    ( compose the envelope )
              |
              V
    ( open the session: connect, greet, secure )
              |
              V
    ( log in, only if authentication was requested )
              |
              V
    ( send the message )
              |
              V
    ( release the session )

A failure at any step abandons the following ones and is reported in the
returned `DispatchResult`.  Once the session is open it is released on
every path out of `dispatch`.
"""

import logging

from zope.interface import implementer
from relaymail.interfaces import AuthenticationFailure
from relaymail.interfaces import DispatchError
from relaymail.interfaces import IDispatcher
from relaymail.interfaces import IDispatchResult
from relaymail.session import SMTPSessionFactory


@implementer(IDispatchResult)
class DispatchResult(object):

    def __init__(self, succeeded, error_message='', error=None):
        if succeeded == bool(error_message):
            raise ValueError(
                'A result carries an error message if and only if '
                'it is a failure')
        self.succeeded = succeeded
        self.error_message = error_message
        self.error = error

    @classmethod
    def success(cls):
        return cls(True)

    @classmethod
    def failure(cls, error):
        return cls(False, error.description, error)

    def __bool__(self):
        return self.succeeded

    def __repr__(self):
        if self.succeeded:
            return '<%s succeeded>' % self.__class__.__name__
        return '<%s failed: %s: %s>' % (
            self.__class__.__name__, self.error.__class__.__name__,
            self.error_message)


@implementer(IDispatcher)
class Dispatcher(object):
    """Makes delivery attempts through sessions from `session_factory`.

    Outcomes are logged at INFO on the ``relaymail.Dispatcher`` logger and
    the session steps at DEBUG.  No handler is installed here, so these
    records are only emitted when the application configures logging.
    """
    log = logging.getLogger('relaymail.Dispatcher')

    def __init__(self, session_factory=None):
        if session_factory is None:
            session_factory = SMTPSessionFactory()
        self.session_factory = session_factory

    def dispatch(self, envelope, transport):
        try:
            message, msgbytes = envelope.compose()
            if transport.use_authentication:
                self._check_credentials(transport)
            with self.session_factory.open(transport) as session:
                if transport.use_authentication:
                    session.login(transport.username, transport.password)
                session.send(envelope.from_addr, [envelope.to_addr], msgbytes)
        except DispatchError as e:
            self.log.info("Error while sending mail from %s to %s: %s",
                          envelope.from_addr, envelope.to_addr, e)
            return DispatchResult.failure(e)

        self.log.info("Mail %s from %s to %s sent.", message['Message-Id'],
                      envelope.from_addr, envelope.to_addr)
        return DispatchResult.success()

    def _check_credentials(self, transport):
        if not transport.username or not transport.password:
            raise AuthenticationFailure(
                'Authentication is requested but the username or '
                'the password is empty')


def dispatch(envelope, transport):
    """Make one delivery attempt with a default `Dispatcher`."""
    return Dispatcher().dispatch(envelope, transport)
