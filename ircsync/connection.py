## connection.py
# Line-oriented TCP transport.
import asyncio

__all__ = ['Connection']


class Connection:
    """ A TCP connection over the IRC protocol. """
    CONNECT_TIMEOUT = 10

    def __init__(self, hostname, port, source_address=None):
        self.hostname = hostname
        self.port = port
        self.source_address = source_address

        self.reader = None
        self.writer = None
        self._write_lock = asyncio.Lock()

    async def connect(self):
        """ Connect to target. """
        (self.reader, self.writer) = await asyncio.wait_for(
            asyncio.open_connection(
                host=self.hostname,
                port=self.port,
                local_addr=self.source_address
            ),
            timeout=self.CONNECT_TIMEOUT
        )

    async def disconnect(self):
        """ Disconnect from target. """
        if not self.connected:
            return

        writer = self.writer
        self.reader = None
        self.writer = None

        writer.close()
        try:
            await writer.wait_closed()
        except (ConnectionError, OSError):
            # Already torn down by the other side.
            pass

    @property
    def connected(self):
        """ Whether this connection is... connected to something. """
        return self.reader is not None and self.writer is not None

    async def send(self, data):
        """ Write data. Concurrent senders are serialized, in call order. """
        async with self._write_lock:
            self.writer.write(data)
            await self.writer.drain()

    async def recv(self):
        """ Read a single line. Returns an empty bytestring once the connection is closed. """
        return await self.reader.readline()
