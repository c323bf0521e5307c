## _args.py
# Common argument parsing code.
import argparse
import functools
import logging
import ircsync


def build_parser(name, description, default_nick='Bot'):
    parser = argparse.ArgumentParser(name, description=description, add_help=False,
        epilog='This program is part of {package}.'.format(package=ircsync.__name__))

    meta = parser.add_argument_group('Meta')
    meta.add_argument('-h', '--help', action='help', help='What you are reading right now.')
    meta.add_argument('-v', '--version', action='version', version='{package}/%(prog)s {ver}'.format(package=ircsync.__name__, ver=ircsync.__version__), help='Dump version number.')
    meta.add_argument('-V', '--verbose', help='Be verbose in warnings and errors.', action='store_true', default=False)
    meta.add_argument('-d', '--debug', help='Show debug output.', action='store_true', default=False)

    conn = parser.add_argument_group('Connection')
    conn.add_argument('server', help='The server to connect to.', metavar='SERVER')
    conn.add_argument('-p', '--port', help='The port to use. (default: 6667)', type=int, default=ircsync.protocol.DEFAULT_PORT)
    conn.add_argument('-P', '--password', help='Server password.', metavar='PASS')
    conn.add_argument('-e', '--encoding', help='Connection encoding. (default: UTF-8)', default='utf-8', metavar='ENCODING')

    init = parser.add_argument_group('Initialization')
    init.add_argument('-n', '--nickname', help='Nickname. (default: {})'.format(default_nick), default=default_nick, metavar='NICK')
    init.add_argument('-u', '--username', help='Username. (default: derived from nickname)', metavar='USER')
    init.add_argument('-r', '--realname', help='Realname (GECOS). (default: derived from nickname)', metavar='REAL')
    init.add_argument('-c', '--channel', help='Channel to automatically join. Can be set multiple times for multiple channels.', action='append', dest='channels', default=[], metavar='CHANNEL')

    return parser


def log_level(args):
    if args.debug:
        return logging.DEBUG
    elif args.verbose:
        return logging.INFO
    return logging.ERROR


def client_from_args(name, description, default_nick='Bot', cls=ircsync.Client, argv=None):
    # Parse some arguments.
    args = build_parser(name, description, default_nick=default_nick).parse_args(argv)

    # Set log level.
    logging.basicConfig(level=log_level(args))

    # Setup client and connect.
    client = cls(nickname=args.nickname, username=args.username, realname=args.realname)

    connect = functools.partial(client.connect,
        hostname=args.server, port=args.port, password=args.password, encoding=args.encoding,
        channels=args.channels
    )

    return client, connect
