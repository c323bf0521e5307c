import logging
from pytest import raises
import ircsync
from ircsync.utils import _args


def test_parser_defaults():
    args = _args.build_parser('test', 'Test client.').parse_args(['irc.example.org'])
    assert args.server == 'irc.example.org'
    assert args.port == 6667
    assert args.nickname == 'Bot'
    assert args.channels == []
    assert args.encoding == 'utf-8'
    assert _args.log_level(args) == logging.ERROR


def test_parser_log_level():
    parser = _args.build_parser('test', 'Test client.')
    assert _args.log_level(parser.parse_args(['-V', 'irc.example.org'])) == logging.INFO
    assert _args.log_level(parser.parse_args(['-d', 'irc.example.org'])) == logging.DEBUG


def test_parser_requires_server():
    with raises(SystemExit):
        _args.build_parser('test', 'Test client.').parse_args([])


def test_client_from_args():
    client, connect = _args.client_from_args('test', 'Test client.', argv=[
        'irc.example.org', '-p', '6697', '-P', 'hunter2',
        '-n', 'WiZ', '-u', 'wizard', '-r', 'The Wizard',
        '-c', '#lobby', '-c', '#games',
    ])

    assert isinstance(client, ircsync.Client)
    assert client.nickname == 'WiZ'
    assert client.username == 'wizard'
    assert client.realname == 'The Wizard'
    assert connect.keywords['hostname'] == 'irc.example.org'
    assert connect.keywords['port'] == 6697
    assert connect.keywords['password'] == 'hunter2'
    assert connect.keywords['channels'] == ['#lobby', '#games']


def test_client_from_args_class():
    class Bot(ircsync.Client):
        pass

    client, connect = _args.client_from_args('test', 'Test client.', default_nick='Botty', cls=Bot,
                                             argv=['irc.example.org'])
    assert isinstance(client, Bot)
    assert client.nickname == 'Botty'
    assert client.username == 'botty'
