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
import unittest


class TestMessageEnvelope(unittest.TestCase):

    def _getTargetClass(self):
        from relaymail.envelope import MessageEnvelope
        return MessageEnvelope

    def _makeOne(self, from_=('A', 'a@x.com'), to=('B', 'b@y.com'),
                 subject='Hi', body='Test'):
        return self._getTargetClass()(from_, to, subject, body)

    def test_class_conforms_to_IMessageEnvelope(self):
        from zope.interface.verify import verifyClass
        from relaymail.interfaces import IMessageEnvelope
        verifyClass(IMessageEnvelope, self._getTargetClass())

    def test_instance_conforms_to_IMessageEnvelope(self):
        from zope.interface.verify import verifyObject
        from relaymail.interfaces import IMessageEnvelope
        verifyObject(IMessageEnvelope, self._makeOne())

    def test_ctor(self):
        envelope = self._makeOne()
        self.assertEqual(envelope.from_name, 'A')
        self.assertEqual(envelope.from_addr, 'a@x.com')
        self.assertEqual(envelope.to_name, 'B')
        self.assertEqual(envelope.to_addr, 'b@y.com')
        self.assertEqual(envelope.subject, 'Hi')
        self.assertEqual(envelope.body, 'Test')

    def test_ctor_defaults(self):
        envelope = self._getTargetClass()(('A', 'a@x.com'), ('B', 'b@y.com'))
        self.assertEqual(envelope.subject, '')
        self.assertEqual(envelope.body, '')

    def test_compose(self):
        message, msgbytes = self._makeOne().compose()
        self.assertEqual(message['From'], 'A <a@x.com>')
        self.assertEqual(message['To'], 'B <b@y.com>')
        self.assertEqual(message['Subject'], 'Hi')
        self.assertEqual(message.get_content_type(), 'text/plain')
        self.assertEqual(message.get_content_charset(), 'us-ascii')
        self.assertFalse(message.is_multipart())
        self.assertEqual(message.get_payload(decode=True), b'Test')
        self.assertTrue(message['Date'])
        self.assertTrue('relaymail' in message['Message-Id'])
        self.assertEqual(msgbytes, message.as_bytes())

    def test_compose_fresh_message_id(self):
        envelope = self._makeOne()
        first, _ = envelope.compose()
        second, _ = envelope.compose()
        self.assertNotEqual(first['Message-Id'], second['Message-Id'])

    def test_compose_empty_subject_and_body(self):
        message, msgbytes = self._makeOne(subject='', body='').compose()
        self.assertEqual(message['Subject'], '')
        self.assertEqual(message.get_payload(decode=True), b'')

    def test_compose_without_display_names(self):
        message, msgbytes = self._makeOne(from_=('', 'a@x.com'),
                                          to=('', 'b@y.com')).compose()
        self.assertEqual(message['From'], 'a@x.com')
        self.assertEqual(message['To'], 'b@y.com')

    def test_compose_latin_1(self):
        latin_1 = 'LaPe\xf1a'
        message, msgbytes = self._makeOne(
            from_=(latin_1 + ' Patterson', 'rpatterson@example.com'),
            subject='I know what you did last ' + latin_1,
            body='Hola ' + latin_1).compose()
        self.assertTrue(b'From: =?iso-8859-1?' in msgbytes)
        self.assertTrue(b'Subject: =?iso-8859-1?' in msgbytes)
        self.assertTrue(b'<rpatterson@example.com>' in msgbytes)
        self.assertEqual(message.get_content_charset(), 'iso-8859-1')
        self.assertEqual(message.get_payload(decode=True),
                         ('Hola ' + latin_1).encode('latin_1'))

    def test_compose_utf_8(self):
        utf_8 = 'mo €'
        message, msgbytes = self._makeOne(
            to=(utf_8 + ' McDonough', 'chrism@example.com'),
            subject='I know what you did last ' + utf_8,
            body=utf_8).compose()
        self.assertTrue(b'To: =?utf-8?' in msgbytes)
        self.assertTrue(b'Subject: =?utf-8?' in msgbytes)
        self.assertTrue(b'<chrism@example.com>' in msgbytes)
        self.assertEqual(message.get_content_charset(), 'utf-8')
        self.assertEqual(message.get_payload(decode=True),
                         utf_8.encode('utf_8'))

    def test_compose_non_ascii_address(self):
        from relaymail.interfaces import CompositionFailure
        envelope = self._makeOne(to=('B', 'b\xe4@y.com'))
        self.assertRaises(CompositionFailure, envelope.compose)

    def test_repr(self):
        self.assertEqual(repr(self._makeOne()),
                         '<MessageEnvelope from a@x.com to b@y.com>')
