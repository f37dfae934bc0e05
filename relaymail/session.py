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
import logging
import ssl
from smtplib import SMTP
from smtplib import SMTP_SSL
from smtplib import SMTPException
from smtplib import SMTPRecipientsRefused
from smtplib import SMTPResponseException

from zope.interface import implementer
from relaymail.interfaces import AuthenticationFailure
from relaymail.interfaces import ConnectionFailure
from relaymail.interfaces import ISMTPSession
from relaymail.interfaces import ISMTPSessionFactory
from relaymail.interfaces import ITransportParameters
from relaymail.interfaces import TransmissionFailure

# Anything smtplib or the socket layer may raise while talking to a relay.
# ssl.SSLError and socket timeouts are OSErrors.
TRANSPORT_ERRORS = (SMTPException, OSError)

# Host names the idna codec rejects fail with UnicodeError, a ValueError.
CONNECT_ERRORS = TRANSPORT_ERRORS + (ValueError,)


def _text(value):
    if isinstance(value, bytes):
        return value.decode('utf-8', 'replace')
    return str(value)


def describe(exc):
    """Human-readable text for an error raised by the transport."""
    if isinstance(exc, SMTPResponseException):
        return '%s %s' % (exc.smtp_code, _text(exc.smtp_error))
    if isinstance(exc, SMTPRecipientsRefused):
        return '; '.join(
            '%s: %s %s' % (addr, code, _text(error))
            for addr, (code, error) in sorted(exc.recipients.items()))
    return str(exc) or exc.__class__.__name__


@implementer(ITransportParameters)
class TransportParameters(object):

    def __init__(self, host, port, use_encryption=False,
                 use_authentication=False, username=None, password=None):
        self.host = host
        self.port = port
        self.use_encryption = use_encryption
        self.use_authentication = use_authentication
        self.username = username
        self.password = password

    def __repr__(self):
        return '<%s %s:%s encryption=%s authentication=%s>' % (
            self.__class__.__name__, self.host, self.port,
            self.use_encryption, self.use_authentication)


@implementer(ISMTPSession)
class SMTPSession(object):
    log = logging.getLogger('relaymail.SMTPSession')

    def __init__(self, connection, secure=False):
        self.connection = connection
        self.secure = secure
        self.released = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.release()
        return False

    def login(self, username, password):
        connection = self.connection
        if not connection.does_esmtp:
            raise AuthenticationFailure(
                'Mailhost does not support ESMTP but authentication '
                'is requested')
        self.log.debug('Authenticating as %s.', username)
        try:
            connection.login(username, password)
        except TRANSPORT_ERRORS + (UnicodeError,) as e:
            raise AuthenticationFailure(describe(e))

    def send(self, fromaddr, toaddrs, msgbytes):
        self.log.debug('Sending mail from %s to %s.',
                       fromaddr, ', '.join(toaddrs))
        try:
            self.connection.sendmail(fromaddr, toaddrs, msgbytes)
        except TRANSPORT_ERRORS as e:
            raise TransmissionFailure(describe(e))

    def release(self):
        if self.released:
            return
        self.released = True
        try:
            self.connection.quit()
        except TRANSPORT_ERRORS:
            # the relay is gone or the TLS layer broke while saying goodbye
            self.log.debug('QUIT failed, closing the connection.',
                           exc_info=True)
            self.connection.close()


@implementer(ISMTPSessionFactory)
class SMTPSessionFactory(object):

    smtp = SMTP  # allow replacement for testing.
    smtp_ssl = SMTP_SSL  # allow replacement for testing.
    implicit_tls_ports = (465,)
    log = logging.getLogger('relaymail.SMTPSessionFactory')

    def __init__(self, timeout=None, debug_smtp=False, ssl_context=None):
        self.timeout = timeout
        self.debug_smtp = debug_smtp
        self.ssl_context = ssl_context

    def _ssl_context(self):
        if self.ssl_context is None:
            return ssl.create_default_context()
        return self.ssl_context

    def implicit_tls(self, transport):
        return (transport.use_encryption
                and transport.port in self.implicit_tls_ports)

    def connection_factory(self, transport):
        params = {}
        if self.timeout is not None:
            params['timeout'] = self.timeout
        if self.implicit_tls(transport):
            connection = self.smtp_ssl(transport.host, transport.port,
                                       context=self._ssl_context(), **params)
        else:
            connection = self.smtp(transport.host, transport.port, **params)
        connection.set_debuglevel(self.debug_smtp)
        return connection

    def open(self, transport):
        self.log.debug('Connecting to %s:%s.', transport.host, transport.port)
        try:
            connection = self.connection_factory(transport)
        except CONNECT_ERRORS as e:
            raise ConnectionFailure(describe(e))

        session = SMTPSession(connection, secure=self.implicit_tls(transport))
        try:
            self._handshake(session, transport)
        except ConnectionFailure:
            session.release()
            raise
        return session

    def _handshake(self, session, transport):
        connection = session.connection
        try:
            self._greet(connection)
            if transport.use_encryption and not session.secure:
                if not connection.has_extn('starttls'):
                    raise ConnectionFailure(
                        'TLS is not available but TLS is required')
                connection.starttls(context=self._ssl_context())
                session.secure = True
                self._greet(connection)
        except CONNECT_ERRORS as e:
            raise ConnectionFailure(describe(e))

    def _greet(self, connection):
        code, response = connection.ehlo()
        if code < 200 or code >= 300:
            code, response = connection.helo()
            if code < 200 or code >= 300:
                raise ConnectionFailure(
                        'Error sending HELO to the SMTP server '
                        '(code=%s, response=%s)' % (code, _text(response)))
