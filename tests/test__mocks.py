import pytest
from pytest import mark
import ircsync
from .fixtures import with_client
from .mocks import Mock, MockServer, MockConnection


## Client.


@pytest.mark.asyncio
@mark.meta
@with_client(connected=False)
async def test_mock_client_connect(server, client):
    assert not client.connected
    await client.connect('mock://local', 1337)

    assert client.connected
    assert isinstance(client.connection, MockConnection)
    assert server.connection is client.connection

    await client.disconnect()
    assert not client.connected


@pytest.mark.asyncio
@mark.meta
@with_client()
async def test_mock_client_send(server, client):
    await client.raw('benis')
    assert server.received('benis')
    await client.rawmsg('INSTALL', 'Gentoo')
    assert server.received('INSTALL Gentoo')


@pytest.mark.asyncio
@mark.meta
@with_client()
async def test_mock_client_receive(server, client):
    received = []

    async def on_raw(message):
        received.append(message)

    client.on_raw = on_raw
    await server.send('PING test')
    assert received

    message = received[0]
    assert isinstance(message, ircsync.parsing.Message)
    assert message.source is None
    assert message.command == 'PING'
    assert message.params == ['test']


@pytest.mark.asyncio
@mark.meta
@with_client()
async def test_mock_client_reader(server, client):
    await server.send(':mock.local NOTICE * :hello')
    server.clear()

    server.feed('PING :fed')
    await server.flush()
    assert server.received('PONG :fed')


## Connection.


@pytest.mark.asyncio
@mark.meta
async def test_mock_connection_connect():
    serv = Mock()
    conn = MockConnection('mock.local', port=1337, mock_server=serv)

    await conn.connect()
    assert conn.connected
    assert serv.connection is conn


@pytest.mark.asyncio
@mark.meta
async def test_mock_connection_disconnect():
    serv = Mock()
    conn = MockConnection('mock.local', port=1337, mock_server=serv)

    await conn.connect()
    await conn.disconnect()
    assert not conn.connected


@pytest.mark.asyncio
@mark.meta
async def test_mock_connection_send():
    serv = MockServer()
    conn = MockConnection('mock.local', port=1337, mock_server=serv)

    await conn.connect()
    await conn.send(b'NICK one\r\nNICK two\r\n')
    assert serv.lines == ['NICK one', 'NICK two']
