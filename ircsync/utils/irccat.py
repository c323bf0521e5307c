#!/usr/bin/env python3
## irccat.py
# Simple irccat implementation, using ircsync.
import sys
import logging
import asyncio

from .. import Client, events, __version__
from . import _args
from ..ctcp import construct_ctcp


class IRCCat(Client):
    """ irccat. Takes raw messages on stdin, dumps raw messages to stdout. Life has never been easier. """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.async_stdin = None
        self.register(events.LineReceiveEvent, self.on_line)
        self.register(events.CTCPEvent, self.on_ctcp)

    async def process_stdin(self):
        """ Yes. """
        loop = asyncio.get_running_loop()

        self.async_stdin = asyncio.StreamReader()
        reader_protocol = asyncio.StreamReaderProtocol(self.async_stdin)
        await loop.connect_read_pipe(lambda: reader_protocol, sys.stdin)

        while self.connected:
            line = await self.async_stdin.readline()
            if not line:
                break
            await self.raw(line.decode(self.encoding).rstrip('\r\n'))

        if self.connected:
            await self.quit('EOF', force=True)

    def on_line(self, event):
        print(event.line)

    async def on_ctcp(self, event):
        if event.query == 'VERSION':
            await self.notice(event.user, construct_ctcp('VERSION', 'ircsync-irccat v{}'.format(__version__)))


async def _main():
    # Create client.
    irccat, connect = _args.client_from_args('irccat', default_nick='irccat',
                                             description='Process raw IRC messages from stdin, dump received IRC messages to stdout.',
                                             cls=IRCCat)
    await connect()
    if irccat.connected:
        await irccat.process_stdin()
    await irccat.wait_closed()


def main():
    # Setup logging.
    logging.basicConfig(format='!! %(levelname)s: %(message)s')
    asyncio.run(_main())


if __name__ == '__main__':
    main()
