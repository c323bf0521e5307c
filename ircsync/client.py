## client.py
# Basic IRC client implementation.
import asyncio
import logging

from . import connection, dispatch, events, parsing, protocol

__all__ = ['Error', 'NotConnected', 'AlreadyInChannel', 'NotInChannel', 'BasicClient',
           'DISCONNECTED', 'CONNECTING', 'CONNECTED', 'READY']
DEFAULT_NICKNAME = '<unregistered>'

# Connection states.
DISCONNECTED = 'disconnected'
CONNECTING = 'connecting'
CONNECTED = 'connected'
READY = 'ready'


class Error(Exception):
    """ Base class for all ircsync errors. """
    pass


class NotConnected(Error):
    def __init__(self):
        super().__init__('Not connected.')


class NotInChannel(Error):
    def __init__(self, channel):
        super().__init__('Not in channel: {}'.format(channel))
        self.channel = channel


class AlreadyInChannel(Error):
    def __init__(self, channel):
        super().__init__('Already in channel: {}'.format(channel))
        self.channel = channel


class BasicClient:
    """
    Base IRC client class.

    Owns one connection, an event bus and the connection lifecycle:
    disconnected -> connecting -> connected -> ready -> disconnected.
    Inbound lines go through handle(), which looks the command up in HANDLERS.
    This class has no handlers of its own: see rfc1459.RFC1459Client for those.
    """
    HANDLERS = {}

    def __init__(self, nickname, username=None, realname=None, **kwargs):
        """ Create a client. """
        self._nickname = nickname
        self.username = username or nickname.lower()
        self.realname = realname or nickname
        self.dispatcher = dispatch.EventDispatcher()

        self.logger = logging.getLogger(__name__)
        self._reset_connection_attributes()
        self._reset_attributes()

        if kwargs:
            self.logger.warning('Unused arguments: %s', ', '.join(kwargs.keys()))

    def _reset_attributes(self):
        """ Reset per-session attributes. """
        # Record-keeping.
        self.nickname = self._nickname
        self.motd = ''
        self.ready = False

        # Low-level data stuff.
        self._received_any = False

    def _reset_connection_attributes(self):
        """ Reset connection attributes. """
        self.connection = None
        self.encoding = protocol.DEFAULT_ENCODING
        self.password = None
        self.state = DISCONNECTED
        self._autojoin_channels = []
        self._reader_task = None
        self._quitting = False

    ## Events.

    def register(self, kind, handler):
        """ Register handler for events of the given type. """
        return self.dispatcher.register(kind, handler)

    def unregister(self, kind, handler):
        self.dispatcher.unregister(kind, handler)

    def on(self, kind):
        """ Decorator form of register(). """
        def inner(handler):
            self.register(kind, handler)
            return handler
        return inner

    async def post(self, event):
        """ Deliver event to all handlers registered for it. """
        await self.dispatcher.post(event)

    ## Connection.

    def run(self, *args, **kwargs):
        """ Connect and handle messages until disconnected. """
        asyncio.run(self._run(*args, **kwargs))

    async def _run(self, *args, **kwargs):
        await self.connect(*args, **kwargs)
        await self.wait_closed()

    async def wait_closed(self):
        """ Wait until the current connection has stopped handling messages. """
        task = self._reader_task
        if task:
            # Cancelling the waiter leaves the reader running.
            await asyncio.wait([task])
            if not task.cancelled():
                task.result()

    async def connect(self, hostname=None, port=None, password=None, channels=(),
                      encoding=protocol.DEFAULT_ENCODING, source_address=None):
        """ Connect to IRC server. Transport failures are posted as socket errors. """
        if not hostname:
            raise ValueError('Have to specify hostname to connect to.')
        port = port or protocol.DEFAULT_PORT

        # Disconnect from current connection.
        if self.connected:
            await self.disconnect(expected=True)

        # Reset attributes and connect.
        self._reset_connection_attributes()
        self._reset_attributes()
        self.password = password
        self.encoding = encoding
        self._autojoin_channels = list(channels)

        self.state = CONNECTING
        try:
            await self._connect(hostname=hostname, port=port, source_address=source_address)
        except (OSError, asyncio.TimeoutError) as e:
            self.state = DISCONNECTED
            self.logger.error('Could not connect to %s:%s: %s', hostname, port, e)
            await self.post(events.ErrorEvent(self, error=e, type=protocol.ERROR_SOCKET))
            return

        self.state = CONNECTED

        # Set logger name.
        if self.server_tag:
            self.logger = logging.getLogger(self.__class__.__name__ + ':' + self.server_tag)

        await self.on_connect()
        self._reader_task = asyncio.get_running_loop().create_task(self.handle_forever())

    async def _connect(self, hostname, port, source_address=None):
        """ Connect to IRC host. """
        self.connection = connection.Connection(hostname, port, source_address=source_address)
        await self.connection.connect()

    async def disconnect(self, expected=True):
        """ Disconnect from server. Stops the reader: no further inbound events are posted. """
        if self.state in (CONNECTED, READY):
            await self._disconnect(expected)

    async def _disconnect(self, expected):
        self.state = DISCONNECTED

        # Interrupt the wait for the next line, unless we are that wait.
        task, self._reader_task = self._reader_task, None
        if task and task is not asyncio.current_task():
            task.cancel()

        # Shutdown connection.
        await self.connection.disconnect()

        # Callback.
        await self.on_disconnect(expected)

    def _fire_ready(self):
        """ Move to the ready state. Returns whether this call did it. """
        if self.ready:
            return False
        self.ready = True
        self.state = READY
        return True

    ## IRC helpers.

    def is_same_nick(self, left, right):
        """ Check if given nicknames are equal. """
        return left == right

    def is_same_channel(self, left, right):
        """ Check if given channel names are equal. """
        return left == right

    ## IRC attributes.

    @property
    def connected(self):
        """ Whether or not we are connected. """
        return self.state in (CONNECTED, READY) and bool(self.connection and self.connection.connected)

    @property
    def server_tag(self):
        if self.connected and self.connection.hostname:
            tag = self.connection.hostname.lower()

            # Remove hostname prefix.
            if tag.startswith('irc.'):
                tag = tag[4:]

            # Check if host is either an FQDN or IPv4.
            if '.' in tag:
                # Attempt to cut off TLD.
                host, suffix = tag.rsplit('.', 1)

                # Make sure we aren't cutting off the last octet of an IPv4.
                try:
                    int(suffix)
                except ValueError:
                    tag = host

            return tag
        else:
            return None

    ## IRC API.

    async def raw(self, message):
        """ Send raw line. """
        await self.send(message)

    async def rawmsg(self, command, *args, message=None):
        """ Send message built from command, middle parameters and an optional trailing parameter. """
        await self.send(self._create_message(command, *args, message=message).construct())

    async def send(self, line):
        """
        Send a single line.
        Lines over the protocol limit are reported with a general error event, then sent anyway.
        """
        if len(line) > protocol.MESSAGE_LENGTH_LIMIT:
            await self.post(events.ErrorEvent(
                self, type=protocol.ERROR_GENERAL,
                message="The length of '{line}' is greater than {limit} characters".format(
                    line=line, limit=protocol.MESSAGE_LENGTH_LIMIT)))

        await self._send(line + protocol.LINE_SEPARATOR)
        await self.post(events.LineSentEvent(self, line))

    async def send_text(self, prefix, body):
        """ Send body on as many lines starting with prefix as it takes to stay within the line limit. """
        for chunk in parsing.fragment(prefix, body):
            await self.send(prefix + chunk)

    ## Overloadable callbacks.

    async def on_connect(self):
        """ Callback called when the transport connection has been established. """
        await self.post(events.ConnectEvent(self))

    async def on_disconnect(self, expected):
        """ Callback called when the connection was closed. """
        if not expected:
            self.logger.error('Unexpected disconnect.')
        await self.post(events.DisconnectEvent(self, expected))

    ## Message dispatch.

    def _create_message(self, command, *params, **kwargs):
        return parsing.Message(command, params, **kwargs)

    def _parse_message(self, line):
        return parsing.parse(line)

    def _decode(self, data):
        try:
            return data.decode(self.encoding)
        except UnicodeDecodeError:
            # Try our fallback encoding.
            return data.decode(protocol.FALLBACK_ENCODING)

    async def _send(self, input):
        if not self.connected:
            raise NotConnected()
        if isinstance(input, str):
            input = input.encode(self.encoding)

        self.logger.debug('>> %s', input.decode(self.encoding).rstrip(protocol.LINE_SEPARATOR))
        await self.connection.send(input)

    async def handle_forever(self):
        """ Handle data until the connection goes away. """
        while self.connected:
            try:
                data = await self.connection.recv()
            except (ConnectionError, OSError) as e:
                await self.on_data_error(e)
                break

            if not data:
                if self.connected:
                    await self.disconnect(expected=self._quitting)
                break

            line = self._decode(data).rstrip(protocol.LINE_SEPARATOR)
            if line:
                await self.handle(line)

    async def handle(self, line):
        """ Handle a single inbound line. Errors are logged, never raised. """
        # Register as soon as the server has said anything.
        if not self._received_any:
            self._received_any = True
            try:
                await self._register()
            except Exception:
                self.logger.exception('Failed to register with server.')

        try:
            await self.post(events.LineReceiveEvent(self, line))
        except Exception:
            self.logger.exception('Failed to execute line handlers.')

        try:
            message = self._parse_message(line)
        except protocol.ProtocolViolation:
            self.logger.warning('Ignoring unparseable line from server: %s', line)
            return

        await self.on_raw(message)

    async def _register(self):
        """ Perform IRC connection registration. """
        raise NotImplementedError()

    async def on_data_error(self, exception):
        """ Handle error. """
        self.logger.error('Encountered error on socket.',
                          exc_info=(type(exception), exception, None))
        await self.post(events.ErrorEvent(self, error=exception, type=protocol.ERROR_SOCKET))
        await self.disconnect(expected=False)

    async def on_raw(self, message):
        """ Handle a single message. """
        self.logger.debug('<< %s', message._raw)
        if not message._valid:
            self.logger.warning('Encountered strictly invalid IRC message from server: %s',
                                message._raw)

        handler = self.HANDLERS.get(message.command)
        if handler is None:
            await self.on_unknown(message)
            return

        try:
            await handler(self, message)
        except protocol.ProtocolViolation as e:
            self.logger.debug('Skipping malformed %s message: %s', message.command, e)
        except Exception:
            self.logger.exception('Failed to execute %s handler.', message.command)

    async def on_unknown(self, message):
        """ Unknown command. """
        self.logger.debug('Unknown command: [%s] %s %s', message.source, message.command,
                          message.arguments)
