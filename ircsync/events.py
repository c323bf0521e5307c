## events.py
# Domain events posted by the client.
from . import ctcp, protocol


class Event:
    """ Base class for all events. Every event knows the client it came from. """

    def __init__(self, client):
        self.client = client

    def __repr__(self):
        attrs = ', '.join('{}={!r}'.format(k, v) for k, v in vars(self).items() if k != 'client')
        return '{cls}({attrs})'.format(cls=self.__class__.__name__, attrs=attrs)


## Connection.

class ConnectEvent(Event):
    """ The transport connection was established. """


class DisconnectEvent(Event):
    """ The connection was closed. `expected` is False when the server or network closed it on us. """

    def __init__(self, client, expected=True):
        super().__init__(client)
        self.expected = expected


class ReadyEvent(Event):
    """ Registration is done and the MOTD has been received. Posted once per connection. """


class LineReceiveEvent(Event):
    def __init__(self, client, line):
        super().__init__(client)
        self.line = line


class LineSentEvent(Event):
    def __init__(self, client, line):
        super().__init__(client)
        self.line = line


class ErrorEvent(Event):
    """
    Something went wrong. `type` tells where:
    'server' for ERROR lines, 'socket' for transport failures, 'general' for everything else.
    """

    def __init__(self, client, message=None, error=None, type=protocol.ERROR_GENERAL):
        super().__init__(client)
        self.message = message if message is not None else (str(error) if error is not None else None)
        self.error = error
        self.type = type


## Server information.

class MOTDEvent(Event):
    def __init__(self, client, motd):
        super().__init__(client)
        self.motd = motd


class ServerSupportsEvent(Event):
    """ A RPL_ISUPPORT line, parameters joined with spaces. """

    def __init__(self, client, message):
        super().__init__(client)
        self.message = message


class PongEvent(Event):
    def __init__(self, client, message):
        super().__init__(client)
        self.message = message


class WhoisEvent(Event):
    def __init__(self, client, whois):
        super().__init__(client)
        self.whois = whois


## Messages.

class TextEvent(Event):
    """ Base class for events carrying text from a user to a target. """

    def __init__(self, client, user, target, message):
        super().__init__(client)
        self.user = user
        self.target = target
        self.message = message

    @property
    def private(self):
        """ Whether the message was sent to us rather than to a channel. """
        return self.client.is_same_nick(self.target, self.client.nickname)

    async def reply(self, message):
        """ Answer in private to private messages, and in the channel otherwise. """
        await self.client.message(self.user if self.private else self.target, message)


class MessageEvent(TextEvent):
    pass


class NoticeEvent(TextEvent):
    pass


class CTCPEvent(TextEvent):
    """ A CTCP request. `message` is the payload without the delimiters. """

    @property
    def query(self):
        return ctcp.split_ctcp(self.message)[0]

    @property
    def contents(self):
        return ctcp.split_ctcp(self.message)[1]


class ActionEvent(TextEvent):
    pass


## Channels.

class ChannelEvent(Event):
    """ An event about a channel. `channel` is None if the client is not tracking the channel. """

    def __init__(self, client, channel_name, channel=None):
        super().__init__(client)
        self.channel_name = channel_name
        self.channel = channel


class BotJoinEvent(ChannelEvent):
    pass


class BotPartEvent(ChannelEvent):
    pass


class JoinEvent(ChannelEvent):
    def __init__(self, client, user, channel_name, channel=None):
        super().__init__(client, channel_name, channel)
        self.user = user


class PartEvent(ChannelEvent):
    def __init__(self, client, user, channel_name, channel=None, reason=None):
        super().__init__(client, channel_name, channel)
        self.user = user
        self.reason = reason


class KickEvent(ChannelEvent):
    def __init__(self, client, channel_name, channel, user, by, reason=None):
        super().__init__(client, channel_name, channel)
        self.user = user
        self.by = by
        self.reason = reason


class TopicEvent(ChannelEvent):
    def __init__(self, client, channel_name, channel, topic, by=None):
        super().__init__(client, channel_name, channel)
        self.topic = topic
        self.by = by


class ModeEvent(ChannelEvent):
    def __init__(self, client, mode, user, channel_name, channel=None, by=None):
        super().__init__(client, channel_name, channel)
        self.mode = mode
        self.user = user
        self.by = by


## Users.

class QuitEvent(Event):
    def __init__(self, client, user, reason=None):
        super().__init__(client)
        self.user = user
        self.reason = reason


class NickChangeEvent(Event):
    def __init__(self, client, original, now):
        super().__init__(client)
        self.original = original
        self.now = now


class NickInUseEvent(Event):
    def __init__(self, client, original):
        super().__init__(client)
        self.original = original
