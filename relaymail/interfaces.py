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
"""`relaymail` interfaces

Sending a message works as follows:

- The application builds a message envelope (`IMessageEnvelope`) holding
  the sender, the recipient, the subject and a plain-text body.

- It describes the relay with transport parameters (`ITransportParameters`):
  host, port, whether the session must be encrypted and whether
  credentials are exchanged.

- A dispatcher (`IDispatcher`) performs exactly one delivery attempt:
  it composes the message, opens a session through a session factory
  (`ISMTPSessionFactory`), authenticates if asked to, sends the message
  and releases the session.

- The outcome comes back as a dispatch result (`IDispatchResult`).  No
  transport fault escapes `dispatch` as an exception; the failure kinds
  below are only raised between the collaborators of this package.
"""

from zope.interface import Attribute, Interface


class DispatchError(Exception):
    """A delivery attempt failed.

    `description` is the human-readable reason reported to the caller.
    It is never empty.
    """

    def __init__(self, description=None):
        if not description:
            description = self.__class__.__name__
        super(DispatchError, self).__init__(description)
        self.description = description

    def __str__(self):
        return self.description


class CompositionFailure(DispatchError):
    """The envelope could not be turned into a message."""


class ConnectionFailure(DispatchError):
    """The relay was unreachable, refused the connection or failed to
    negotiate transport security."""


class AuthenticationFailure(DispatchError):
    """The relay rejected the credentials or the mechanism."""


class TransmissionFailure(DispatchError):
    """The relay faulted while the message was being sent."""


class IMessageEnvelope(Interface):
    """Sender, recipient, subject and body of one message.
    """

    from_name = Attribute("Display name of the sender (may be empty).")
    from_addr = Attribute("Address of the sender.")
    to_name = Attribute("Display name of the recipient (may be empty).")
    to_addr = Attribute("Address of the recipient.")
    subject = Attribute("Subject text (may be empty).")
    body = Attribute("Plain-text body (may be empty).")

    def compose():
        """Build the message.

        Returns a ``(message, msgbytes)`` pair: an `email.message.Message`
        and its wire encoding.  Raises `CompositionFailure`.
        """


class ITransportParameters(Interface):
    """Where and how to reach the mail relay.
    """

    host = Attribute("Host name of the relay.")
    port = Attribute("TCP port of the relay.")
    use_encryption = Attribute(
        "Secure the session before credentials or message data are sent.")
    use_authentication = Attribute(
        "Exchange credentials after connecting.")
    username = Attribute("User name, only used with use_authentication.")
    password = Attribute("Password, only used with use_authentication.")


class IDispatchResult(Interface):
    """Outcome of one delivery attempt.
    """

    succeeded = Attribute("True if the relay accepted the message.")
    error_message = Attribute(
        "Reason of the failure; empty if and only if succeeded.")
    error = Attribute("The `DispatchError` of a failure, otherwise None.")


class ISMTPSession(Interface):
    """A live, possibly secured, connection to the relay.

    Sessions are context managers: leaving the ``with`` block releases
    the session whatever happened inside it.
    """

    secure = Attribute("True once transport security is established.")

    def login(username, password):
        """Exchange credentials.  Raises `AuthenticationFailure`."""

    def send(fromaddr, toaddrs, msgbytes):
        """Transmit the message.  Raises `TransmissionFailure`."""

    def release():
        """Tell the relay we are leaving and close the connection.

        Calling it more than once has no further effect.
        """


class ISMTPSessionFactory(Interface):
    """Opens sessions to a relay.
    """

    def open(transport):
        """Connect to the relay described by `transport`.

        The returned `ISMTPSession` is greeted and, when encryption was
        requested, secured.  Raises `ConnectionFailure`; no connection
        is left open when it does.
        """


class IDispatcher(Interface):
    """Performs single delivery attempts.
    """

    def dispatch(envelope, transport):
        """Send the message in `envelope` through the relay described by
        `transport`.

        Returns an `IDispatchResult`.  Each call is an independent
        attempt: calling it twice sends the message twice.
        """
