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
import os
import sys
from configparser import ConfigParser

from relaymail.dispatcher import Dispatcher
from relaymail.envelope import MessageEnvelope
from relaymail.session import SMTPSessionFactory
from relaymail.session import TransportParameters


def _log_error(msg): #pragma NO COVER
    sys.stderr.write(msg)


def boolean(s):
    s = str(s).lower()
    return s.startswith("t") or s.startswith("y") or s.startswith("1")


def string_or_none(s):
    if s == 'None':
        return None
    return s


class ConsoleApp(object):
    """Sends one message, read from standard input, from the console.

    Options are read from an ini file first and from the command line
    second, so the command line wins.
    """
    _usage = """%(script_name)s [OPTIONS] < body.txt

    OPTIONS:
        --hostname          Name of smtp host to use for delivery.  Default is
                            localhost.

        --port              Which port on smtp server to deliver mail to.
                            Default is 25.

        --username          Username to use to log in to smtp server.  Default
                            is none; authentication is only attempted when a
                            username is given.

        --password          Password to use to log in to smtp server.  Must be
                            specified if username is specified.

        --tls               Secure the connection: implicit TLS on port 465,
                            STARTTLS on any other port.  Not enabled by
                            default.

        --from <address>    Sender address.  Required.

        --from-name <name>  Sender display name.

        --to <address>      Recipient address.  Required.

        --to-name <name>    Recipient display name.

        --subject <text>    Subject of the message.

        --config <inifile>  Get configuration from specificed ini file.  Will
                            look for etc/relaysend.ini, by default, where etc
                            is parallel to the bin directory where the python
                            executable is found.  If this option is not
                            specified and etc/relaysend.ini is not in
                            filesystem, no config file will be read and
                            default values will be used for all options.

        --debug-smtp        Enable SMTP debug output (STDERR)
    """
    _error = False
    hostname = "localhost"
    port = 25
    username = None
    password = None
    tls = False
    from_addr = None
    from_name = ""
    to_addr = None
    to_name = ""
    subject = ""
    debug_smtp = False

    _valued_options = {
        "--hostname": "hostname",
        "--username": "username",
        "--password": "password",
        "--from": "from_addr",
        "--from-name": "from_name",
        "--to": "to_addr",
        "--to-name": "to_name",
        "--subject": "subject",
    }

    def __init__(self, argv=None, stdin=None):
        if argv is None:
            argv = sys.argv
        if stdin is None:
            stdin = sys.stdin
        self.stdin = stdin
        self.script_name = argv[0]
        self._load_config()
        self._process_args(list(argv[1:]))
        self.dispatcher = Dispatcher(
            SMTPSessionFactory(debug_smtp=self.debug_smtp))

    def main(self):
        if self._error:
            return 2

        envelope = MessageEnvelope((self.from_name, self.from_addr),
                                   (self.to_name, self.to_addr),
                                   self.subject,
                                   self.stdin.read())
        transport = TransportParameters(self.hostname,
                                        self.port,
                                        use_encryption=self.tls,
                                        use_authentication=bool(self.username),
                                        username=self.username,
                                        password=self.password)
        result = self.dispatcher.dispatch(envelope, transport)
        if not result.succeeded:
            _log_error("%s\n" % result.error_message)
            return 1
        return 0

    def _process_args(self, args):
        log_usage = False
        # the ini file is read first so every other option overrides it
        if "--config" in args:
            index = args.index("--config")
            args.pop(index)
            if index < len(args):
                self._load_config(args.pop(index))
            else:
                log_usage = True

        while args:
            arg = args.pop(0)
            if arg in self._valued_options:
                if not args:
                    log_usage = True
                else:
                    setattr(self, self._valued_options[arg], args.pop(0))

            elif arg == "--port":
                try:
                    self.port = int(args.pop(0))
                except (IndexError, ValueError):
                    log_usage = True

            elif arg == "--tls":
                self.tls = True

            elif arg == "--debug-smtp":
                self.debug_smtp = True

            else:
                log_usage = True

        if not self.from_addr or not self.to_addr:
            log_usage = True

        if log_usage:
            self._error_usage()

        if ((self.username or self.password)
            and not (self.username and self.password)):
            _log_error("Must use username and password together.\n")
            self._error = True

    def _load_config(self, path=None):
        if path is None:
            # Look in etc directory relative to bin directory of current
            # Python executable for "relaysend.ini".
            exe = sys.executable
            root = os.path.dirname(os.path.dirname(exe))
            path = os.path.join(root, "etc", "relaysend.ini")
            if not os.path.exists(path):
                return

        section = "app:relaysend"
        names = [
            "hostname",
            "port",
            "username",
            "password",
            "tls",
            "from_addr",
            "from_name",
            "to_addr",
            "to_name",
            "subject",
            "debug_smtp",
        ]
        defaults = dict([(name, str(getattr(self, name))) for name in names])
        config = ConfigParser(defaults, interpolation=None)
        config.read(path)
        if not config.has_section(section):
            config.add_section(section)

        self.hostname = config.get(section, "hostname")
        self.port = int(config.get(section, "port"))
        self.username = string_or_none(config.get(section, "username"))
        self.password = string_or_none(config.get(section, "password"))
        self.tls = boolean(config.get(section, "tls"))
        self.from_addr = string_or_none(config.get(section, "from_addr"))
        self.from_name = config.get(section, "from_name")
        self.to_addr = string_or_none(config.get(section, "to_addr"))
        self.to_name = config.get(section, "to_name")
        self.subject = config.get(section, "subject")
        self.debug_smtp = boolean(config.get(section, "debug_smtp"))

    def _error_usage(self):
        _log_error(self._usage % {"script_name": self.script_name})
        self._error = True


def run_console(): #pragma NO COVERAGE
    logging.basicConfig()
    app = ConsoleApp()
    sys.exit(app.main())


if __name__ == "__main__": #pragma NO COVERAGE
    run_console()
