## run.py
# Run client.
import asyncio
import logging

from .. import events
from . import _args

logger = logging.getLogger(__name__)


def log_messages(event):
    if isinstance(event, events.ActionEvent):
        logger.info('[%s] * %s %s', event.target, event.user, event.message)
    else:
        logger.info('[%s] <%s> %s', event.target, event.user, event.message)


async def _main(client, connect):
    await connect()
    await client.wait_closed()


def main(argv=None):
    client, connect = _args.client_from_args('ircsync', description='ircsync IRC client.', argv=argv)
    client.register(events.MessageEvent, log_messages)
    client.register(events.ActionEvent, log_messages)
    asyncio.run(_main(client, connect))


if __name__ == '__main__':
    main()
