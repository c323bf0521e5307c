import asyncio
import ircsync

from unittest.mock import Mock


class MockServer:
    """
    A mock server that will receive lines from the client,
    and can send its own lines, either straight into the client or through the connection.
    """

    def __init__(self):
        self.connection = None
        self.lines = []

    def receivedata(self, data):
        text = data.decode('utf-8')
        self.lines.extend(line for line in text.split('\r\n') if line)

    def received(self, line):
        return line in self.lines

    def clear(self):
        self.lines = []

    async def send(self, line):
        """ Have the client handle line right away. """
        await self.connection._mock_client.handle(line)

    def feed(self, line):
        """ Queue line on the connection, for the client's reader to pick up. """
        self.connection._mock_queue.put_nowait(line.encode('utf-8') + b'\r\n')

    def fail(self, exception):
        """ Make the client's next read fail with exception. """
        self.connection._mock_queue.put_nowait(exception)

    def close(self):
        """ Close the connection from the server side. """
        self.connection._mock_queue.put_nowait(None)

    async def flush(self):
        """ Wait until the client's reader has handled everything fed so far. """
        await self.connection._mock_queue.join()


class MockClient(ircsync.Client):
    """A client that subtitutes its own connection for a mock connection to MockServer."""

    def __init__(self, *args, mock_server=None, **kwargs):
        self._mock_server = mock_server
        self._mock_logger = Mock()
        super().__init__(*args, **kwargs)

    @property
    def logger(self):
        return self._mock_logger

    @logger.setter
    def logger(self, val):
        pass

    async def _connect(self, hostname, port, *args, **kwargs):
        self.connection = MockConnection(
            hostname,
            port,
            mock_client=self,
            mock_server=self._mock_server,
        )
        await self.connection.connect()


class MockConnection(ircsync.connection.Connection):
    """A mock connection between a client and a server."""

    def __init__(self, *args, mock_client=None, mock_server=None, **kwargs):
        super().__init__(*args, **kwargs)
        self._mock_connected = False
        self._mock_server = mock_server
        self._mock_client = mock_client
        self._mock_queue = asyncio.Queue()
        self._mock_handling = False

    @property
    def connected(self):
        return self._mock_connected

    async def connect(self, *args, **kwargs):
        self._mock_server.connection = self
        self._mock_connected = True

    async def disconnect(self, *args, **kwargs):
        self._mock_connected = False

    async def send(self, data):
        async with self._write_lock:
            self._mock_server.receivedata(data)

    async def recv(self):
        # Asking for the next line means the previous one has been handled.
        if self._mock_handling:
            self._mock_handling = False
            self._mock_queue.task_done()

        item = await self._mock_queue.get()
        self._mock_handling = True
        if isinstance(item, Exception):
            raise item
        return item or b''
