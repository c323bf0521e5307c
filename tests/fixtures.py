from .mocks import MockServer, MockClient


def with_client(connected=True, **options):
    def inner(f):
        async def run():
            server = MockServer()
            client = MockClient('TestcaseRunner', mock_server=server, **options)
            if connected:
                await client.connect('mock://local', 1337)

            try:
                return await f(client=client, server=server)
            finally:
                await client.disconnect()

        run.__name__ = f.__name__
        return run
    return inner


def capture(client, kind):
    """ Collect every event of the given kind that client posts. """
    seen = []
    client.register(kind, seen.append)
    return seen


async def join(client, server, channel, *names):
    """ Have the client join channel, with the given NAMES reply. """
    await server.send(':{nick}!user@host JOIN {chan}'.format(nick=client.nickname, chan=channel))
    if names:
        await server.send(':mock.local 353 {nick} = {chan} :{names}'.format(
            nick=client.nickname, chan=channel, names=' '.join(names)))
