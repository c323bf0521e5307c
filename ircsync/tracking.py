## tracking.py
# Channel membership tracking.
import logging

from . import events, protocol

__all__ = [ 'ChannelTracker' ]

logger = logging.getLogger(__name__)

ACTION_PREFIX = protocol.CTCP_ACTION + ' '


class ChannelTracker:
    """
    Keeps the client's channels in sync with the events it posts.

    These rules only look at events, not at raw messages, so they also apply to events that did not come off the wire.
    """

    def __init__(self, client):
        self.client = client

    def register(self, dispatcher):
        dispatcher.register(events.QuitEvent, self.on_quit)
        dispatcher.register(events.CTCPEvent, self.on_ctcp)
        dispatcher.register(events.BotJoinEvent, self.on_bot_join)
        dispatcher.register(events.JoinEvent, self.on_join)
        dispatcher.register(events.PartEvent, self.on_part)
        dispatcher.register(events.KickEvent, self.on_kick)
        dispatcher.register(events.NickChangeEvent, self.on_nick_change)
        dispatcher.register(events.ModeEvent, self.on_mode)
        dispatcher.register(events.BotPartEvent, self.on_bot_part)

    def on_quit(self, event):
        for channel in self.client.channels.values():
            channel.remove_user(event.user)

    async def on_ctcp(self, event):
        if event.message.startswith(ACTION_PREFIX):
            await self.client.post(events.ActionEvent(
                self.client, event.user, event.target, event.message[len(ACTION_PREFIX):]))

    def on_bot_join(self, event):
        # We are an occupant too, until NAMES tells us our status.
        if event.channel and not event.channel.has_user(self.client.nickname):
            event.channel.set_role(self.client.nickname, protocol.ROLE_MEMBER)

    def on_join(self, event):
        # A user is a member until a mode change or NAMES reply says otherwise.
        if event.channel:
            event.channel.set_role(event.user, protocol.ROLE_MEMBER)
        else:
            logger.debug('Ignoring join of %s to untracked channel %s.', event.user, event.channel_name)

    def on_part(self, event):
        if event.channel:
            event.channel.remove_user(event.user)

    def on_kick(self, event):
        if not event.channel:
            return

        event.channel.remove_user(event.user)
        if self.client.is_self(event.user):
            self.client._destroy_channel(event.channel_name)

    def on_nick_change(self, event):
        if self.client.is_self(event.original):
            self.client.nickname = event.now

        for channel in self.client.channels.values():
            channel.rename_user(event.original, event.now)

    def on_mode(self, event):
        channel = event.channel
        if not channel:
            return

        role = channel.role_of(event.user)
        if event.mode == '+o':
            channel.set_role(event.user, protocol.ROLE_OPERATOR)
        elif event.mode == '-o':
            if role == protocol.ROLE_OPERATOR:
                channel.set_role(event.user, protocol.ROLE_MEMBER)
        elif event.mode == '+v':
            # Operators outrank voice: they keep their role.
            if role != protocol.ROLE_OPERATOR:
                channel.set_role(event.user, protocol.ROLE_VOICED)
        elif event.mode == '-v':
            if role == protocol.ROLE_VOICED:
                channel.set_role(event.user, protocol.ROLE_MEMBER)

    def on_bot_part(self, event):
        self.client._destroy_channel(event.channel_name)
