## rfc1459.py
# RFC1459 message handling and IRC commands.
from . import events, hostmask, models, parsing, protocol, tracking
from .ctcp import construct_ctcp, is_ctcp, parse_ctcp
from .whois import WhoisAggregator
from .client import BasicClient, NotInChannel, AlreadyInChannel


class RFC1459Client(BasicClient):
    """ Basic RFC1459 client. """
    DEFAULT_QUIT_MESSAGE = 'Quitting'

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # State tracking runs before anything registered later, so user handlers see up-to-date channels.
        self.tracker = tracking.ChannelTracker(self)
        self.tracker.register(self.dispatcher)

    ## Internals.

    def _reset_attributes(self):
        super()._reset_attributes()
        # Casemapping.
        self._case_mapping = protocol.DEFAULT_CASE_MAPPING

        # Info.
        self._whois = WhoisAggregator(normalize=self.normalize)

        # Misc.
        self.channels = parsing.NormalizingDict(case_mapping=self._case_mapping)

    def _create_channel(self, channel):
        self.channels[channel] = models.Channel(self, channel, case_mapping=self._case_mapping)
        return self.channels[channel]

    def _destroy_channel(self, channel):
        if channel in self.channels:
            del self.channels[channel]

    async def _register(self):
        """ Perform IRC connection registration. """
        # Password first.
        if self.password:
            await self.rawmsg('PASS', self.password)

        # Then nickname...
        await self.set_nickname(self.nickname)
        # And now for the rest of the user information.
        await self.rawmsg('USER', self.username, '8', '*', message=self.realname)

    async def _ready(self):
        """ MOTD is done or missing: the connection is ready. Only acts once per connection. """
        if not self._fire_ready():
            return

        await self.post(events.ReadyEvent(self))
        # Auto-join channels.
        for channel in self._autojoin_channels:
            if not self.in_channel(channel):
                await self.join(channel)

    ## IRC helpers.

    def normalize(self, input):
        return parsing.normalize(input, case_mapping=self._case_mapping)

    def is_same_nick(self, left, right):
        """ Check if given nicknames are equal in the server's case mapping. """
        if left is None or right is None:
            return False
        return self.normalize(left) == self.normalize(right)

    def is_same_channel(self, left, right):
        """ Check if given channel names are equal in the server's case mapping. """
        return self.normalize(left) == self.normalize(right)

    def is_self(self, nickname):
        """ Check if nickname is our current nickname. """
        return self.is_same_nick(nickname, self.nickname)

    def channel(self, name):
        """ Return the tracked Channel for name, or None. """
        return self.channels.get(name)

    def in_channel(self, channel):
        """ Check if we are currently in the given channel. """
        return channel in self.channels

    @property
    def pending_whois(self):
        return self._whois.pending

    ## IRC API.

    async def set_nickname(self, nickname):
        """
        Set nickname to given nickname.
        Users should only rely on the nickname actually being changed when receiving a NickChangeEvent.
        """
        await self.rawmsg('NICK', nickname)

    async def join(self, channel, password=None):
        """ Join channel, optionally with password. """
        if self.in_channel(channel):
            raise AlreadyInChannel(channel)

        if password:
            await self.rawmsg('JOIN', channel, password)
        else:
            await self.rawmsg('JOIN', channel)

    async def part(self, channel, message=None):
        """ Leave channel, optionally with message. """
        if not self.in_channel(channel):
            raise NotInChannel(channel)

        await self.rawmsg('PART', channel, message=message)

    async def kick(self, channel, target, reason=None):
        """ Kick user from channel. """
        if not self.in_channel(channel):
            raise NotInChannel(channel)

        await self.rawmsg('KICK', channel, target, message=reason)

    async def quit(self, message=None, force=False):
        """
        Quit network.
        The server closes the connection in response; with force, we close it ourselves right away.
        """
        if message is None:
            message = self.DEFAULT_QUIT_MESSAGE

        self._quitting = True
        await self.rawmsg('QUIT', message=message)
        if force:
            await self.disconnect(expected=True)

    async def message(self, target, message):
        """ Message channel or user. """
        for line in message.replace('\r', '').split('\n'):
            if not line:
                continue
            await self.send_text('PRIVMSG {target} :'.format(target=target), line)

    async def notice(self, target, message):
        """ Notice channel or user. """
        for line in message.replace('\r', '').split('\n'):
            if not line:
                continue
            await self.send_text('NOTICE {target} :'.format(target=target), line)

    async def ctcp(self, target, query, contents=None):
        """ Send a CTCP request to a target. """
        await self.message(target, construct_ctcp(query, contents))

    async def action(self, target, message):
        """ Send an action (/me) to a target. """
        await self.ctcp(target, protocol.CTCP_ACTION, message)

    async def identify(self, password, username=None, nickserv='NickServ'):
        """ Identify with services. """
        await self.message(nickserv, 'identify {user} {password}'.format(
            user=username or self.username, password=password))

    async def whois(self, nickname):
        """ Request information about user. The result arrives as a WhoisEvent. """
        if protocol.ARGUMENT_SEPARATOR.search(nickname) is not None:
            raise ValueError('Not a nickname: {}'.format(nickname))
        await self.rawmsg('WHOIS', nickname)

    ## Callback handlers.

    async def on_raw_ping(self, message):
        """ PING command. """
        # Respond with a pong.
        payload = message.arguments[-1] if message.arguments else ''
        await self.rawmsg('PONG', message=payload)

    async def on_raw_pong(self, message):
        """ PONG command. """
        payload = message.arguments[-1] if message.arguments else ''
        await self.post(events.PongEvent(self, payload))

    async def on_raw_error(self, message):
        """ Server encountered an error and will now close the connection. """
        text = message.message if message.message is not None else ' '.join(message.params)
        self.logger.error('Server error: %s', text)
        await self.post(events.ErrorEvent(self, message=text, type=protocol.ERROR_SERVER))

    async def on_raw_join(self, message):
        """ JOIN command. """
        nick = message.nickname
        channels = message.arguments[0].split(',')

        for channel in channels:
            if self.is_self(nick):
                # We joined a channel: start tracking it.
                if not self.in_channel(channel):
                    self._create_channel(channel)
                chan = self.channel(channel)
                await self.post(events.BotJoinEvent(self, channel, chan))
                await chan.reload_bans()
            else:
                await self.post(events.JoinEvent(self, nick, channel, self.channel(channel)))

    async def on_raw_part(self, message):
        """ PART command. """
        nick = message.nickname
        channels = message.arguments[0].split(',')
        reason = message.arguments[1] if len(message.arguments) > 1 else None

        for channel in channels:
            if self.is_self(nick):
                await self.post(events.BotPartEvent(self, channel, self.channel(channel)))
            else:
                await self.post(events.PartEvent(self, nick, channel, self.channel(channel), reason))

    async def on_raw_kick(self, message):
        """ KICK command. """
        kicker = message.nickname
        channel, target = message.arguments[:2]
        reason = message.arguments[2] if len(message.arguments) > 2 else None

        await self.post(events.KickEvent(self, channel, self.channel(channel), target, kicker, reason))

    async def on_raw_quit(self, message):
        """ QUIT command. """
        nick = message.nickname
        reason = message.arguments[0] if message.arguments else None

        if self.is_self(nick):
            # We quit.
            await self.disconnect(expected=True)
        else:
            await self.post(events.QuitEvent(self, nick, reason))

    async def on_raw_nick(self, message):
        """ NICK command. """
        await self.post(events.NickChangeEvent(self, message.nickname, message.arguments[0]))

    async def on_raw_mode(self, message):
        """ MODE command. Only single channel mode changes with a parameter are handled. """
        if len(message.arguments) < 3:
            return

        target, mode, who = message.arguments[:3]
        channel = self.channel(target)

        if mode in protocol.BAN_MODES:
            if channel:
                await channel.reload_bans()
        else:
            by = message.nickname if message.source else None
            await self.post(events.ModeEvent(self, mode, who, target, channel, by))

    async def on_raw_privmsg(self, message):
        """ PRIVMSG command. """
        nick = message.nickname
        target, text = message.arguments[:2]

        if is_ctcp(text):
            await self.post(events.CTCPEvent(self, nick, target, parse_ctcp(text)))
        else:
            await self.post(events.MessageEvent(self, nick, target, text))

    async def on_raw_notice(self, message):
        """ NOTICE command. """
        target, text = message.arguments[:2]
        # Server notices before registration are sent to '*'; report the full source for those.
        if target == protocol.WILDCARD_TARGET:
            by = message.source
        else:
            by = message.nickname

        await self.post(events.NoticeEvent(self, by, target, text))

    async def on_raw_topic(self, message):
        """ TOPIC command. """
        setter = message.nickname
        target, topic = message.arguments[:2]

        # Update topic in our own channel list.
        channel = self.channel(target)
        if channel:
            channel.topic = topic
            channel.topic_by = setter

        await self.post(events.TopicEvent(self, target, channel, topic, setter))

    ## Numeric responses.

    async def on_raw_005(self, message):
        """ Server capabilities. """
        await self.post(events.ServerSupportsEvent(self, ' '.join(message.params[1:])))

    async def on_raw_301(self, message):
        """ User is away. """
        target, nickname, away_message = message.arguments[:3]
        self._whois.update(nickname, away=True, away_message=away_message)

    async def on_raw_311(self, message):
        """ WHOIS user info: starts a WHOIS reply. """
        target, nickname, username, hostname, _, realname = message.arguments[:6]
        self._whois.begin(nickname, user=username, hostname=hostname, realname=realname)

    async def on_raw_312(self, message):
        """ WHOIS server info. """
        target, nickname, server, server_info = message.arguments[:4]
        self._whois.update(nickname, server=server, server_info=server_info)

    async def on_raw_313(self, message):
        """ WHOIS operator info. """
        target, nickname = message.arguments[:2]
        self._whois.update(nickname, oper=True)

    async def on_raw_317(self, message):
        """ WHOIS idle time. """
        target, nickname, idle_time = message.arguments[:3]
        self._whois.update(nickname, idle=True, idle_time=int(idle_time))

    async def on_raw_318(self, message):
        """ End of /WHOIS list. """
        target, nickname = message.arguments[:2]
        info = self._whois.finish(nickname)
        if info is not None:
            await self.post(events.WhoisEvent(self, info))

    async def on_raw_319(self, message):
        """ WHOIS active channels. """
        target, nickname, channels = message.arguments[:3]
        self._whois.add_channels(nickname, channels.strip().split(' '))

    async def on_raw_330(self, message):
        """ WHOIS account. """
        target, nickname, account = message.arguments[:3]
        self._whois.update(nickname, account=account)

    async def on_raw_332(self, message):
        """ Current topic on channel join. """
        target, name, topic = message.arguments[:3]
        channel = self.channel(name)
        if channel:
            channel.topic = topic

        await self.post(events.TopicEvent(self, name, channel, topic))

    async def on_raw_353(self, message):
        """ Response to /NAMES. """
        # The visibility sigil is missing on some servers, so count from the end.
        name, names = message.arguments[-2:]
        channel = self.channel(name)
        if not channel:
            return

        for entry in names.split(' '):
            if not entry:
                continue

            role = protocol.NICKNAME_PREFIXES.get(entry[0], protocol.ROLE_MEMBER)
            # Strip every status prefix: multi-prefix servers send more than one.
            nick = entry.lstrip(''.join(protocol.NICKNAME_PREFIXES.keys()))
            if nick:
                channel.set_role(nick, role)

    async def on_raw_367(self, message):
        """ Ban list entry. """
        target, name, mask = message.arguments[:3]
        channel = self.channel(name)
        if not channel:
            # We were banned.
            return

        channel.bans.add(hostmask.GlobHostmask(mask, case_mapping=self._case_mapping))

    async def on_raw_372(self, message):
        """ Append message of the day. """
        if self.ready:
            return
        self.motd += message.arguments[-1] + '\n'

    async def on_raw_376(self, message):
        """ End of message of the day. """
        await self.post(events.MOTDEvent(self, self.motd))
        await self._ready()

    async def on_raw_401(self, message):
        """ No such nick/channel. """
        nickname = message.arguments[1]
        self._whois.abort(nickname)

    async def on_raw_422(self, message):
        """ MOTD is missing. """
        await self._ready()

    async def on_raw_433(self, message):
        """ Nickname in use. """
        await self.post(events.NickInUseEvent(self, message.arguments[1]))

    HANDLERS = {
        'PING': on_raw_ping,
        'PONG': on_raw_pong,
        'ERROR': on_raw_error,
        'JOIN': on_raw_join,
        'PART': on_raw_part,
        'KICK': on_raw_kick,
        'QUIT': on_raw_quit,
        'NICK': on_raw_nick,
        'MODE': on_raw_mode,
        'PRIVMSG': on_raw_privmsg,
        'NOTICE': on_raw_notice,
        'TOPIC': on_raw_topic,
        '005': on_raw_005,  # Server capabilities.
        '301': on_raw_301,  # WHOIS away.
        '311': on_raw_311,  # WHOIS user.
        '312': on_raw_312,  # WHOIS server.
        '313': on_raw_313,  # WHOIS operator.
        '317': on_raw_317,  # WHOIS idle.
        '318': on_raw_318,  # End of WHOIS.
        '319': on_raw_319,  # WHOIS channels.
        '330': on_raw_330,  # WHOIS account.
        '332': on_raw_332,  # Topic.
        '353': on_raw_353,  # Names.
        '367': on_raw_367,  # Ban list entry.
        '372': on_raw_372,  # MOTD.
        '376': on_raw_376,  # End of MOTD.
        '401': on_raw_401,  # No such nick.
        '422': on_raw_422,  # MOTD missing.
        '433': on_raw_433,  # Nickname in use.
    }
