## whois.py
# WHOIS reply aggregation.
import collections
import logging

from .client import Error

__all__ = [ 'WhoisFinalized', 'WhoisInfo', 'WhoisBuilder', 'WhoisAggregator' ]

logger = logging.getLogger(__name__)


class WhoisFinalized(Error):
    def __init__(self, nickname):
        super().__init__('WHOIS record already finalized: {}'.format(nickname))
        self.nickname = nickname


WhoisInfo = collections.namedtuple('WhoisInfo', [
    'nickname', 'user', 'hostname', 'realname',
    'server', 'server_info', 'oper',
    'idle', 'idle_time', 'account',
    'channels', 'op_in', 'voice_in',
    'away', 'away_message'
])


class WhoisBuilder:
    """ A WHOIS record that is still being filled in by reply fragments. """
    FIELDS = ('user', 'hostname', 'realname', 'server', 'server_info', 'oper',
              'idle', 'idle_time', 'account', 'away', 'away_message')

    def __init__(self, nickname):
        self.nickname = nickname
        self.user = None
        self.hostname = None
        self.realname = None
        self.server = None
        self.server_info = None
        self.oper = False
        self.idle = False
        self.idle_time = 0
        self.account = None
        self.channels = set()
        self.op_in = set()
        self.voice_in = set()
        self.away = False
        self.away_message = None
        self.finalized = False

    def update(self, **info):
        if self.finalized:
            raise WhoisFinalized(self.nickname)

        for key, value in info.items():
            if key not in self.FIELDS:
                raise AttributeError('Unknown WHOIS field: {}'.format(key))
            setattr(self, key, value)

    def add_channels(self, entries):
        """ Add channels from a RPL_WHOISCHANNELS list, noting where the user has operator or voice status. """
        if self.finalized:
            raise WhoisFinalized(self.nickname)

        for entry in entries:
            if entry.startswith('@'):
                self.channels.add(entry[1:])
                self.op_in.add(entry[1:])
            elif entry.startswith('+'):
                self.channels.add(entry[1:])
                self.voice_in.add(entry[1:])
            elif entry:
                self.channels.add(entry)

    def build(self):
        """ Finalize the builder and return the completed record. """
        self.finalized = True
        return WhoisInfo(
            nickname=self.nickname,
            user=self.user,
            hostname=self.hostname,
            realname=self.realname,
            server=self.server,
            server_info=self.server_info,
            oper=self.oper,
            idle=self.idle,
            idle_time=self.idle_time,
            account=self.account,
            channels=frozenset(self.channels),
            op_in=frozenset(self.op_in),
            voice_in=frozenset(self.voice_in),
            away=self.away,
            away_message=self.away_message
        )


class WhoisAggregator:
    """
    Pending WHOIS builders, one per nickname.

    A nickname goes from absent to pending on begin(), collects fragments, and goes back to absent on finish() or abort().
    A second begin() for a pending nickname replaces the builder.
    Fragments for nicknames that are not pending are dropped: servers do not all order their replies the same way.
    """

    def __init__(self, normalize=None):
        self._normalize = normalize or (lambda nickname: nickname)
        self._pending = {}

    def __contains__(self, nickname):
        return self._normalize(nickname) in self._pending

    def __len__(self):
        return len(self._pending)

    @property
    def pending(self):
        """ Nicknames with an unfinished WHOIS. """
        return {builder.nickname for builder in self._pending.values()}

    def get(self, nickname):
        return self._pending.get(self._normalize(nickname))

    def begin(self, nickname, **info):
        key = self._normalize(nickname)
        if key in self._pending:
            logger.debug('Restarting pending WHOIS for %s.', nickname)

        builder = WhoisBuilder(nickname)
        builder.update(**info)
        self._pending[key] = builder
        return builder

    def update(self, nickname, **info):
        """ Apply a fragment. Returns False if there is no pending WHOIS for nickname. """
        builder = self.get(nickname)
        if builder is None:
            logger.debug('Dropping WHOIS fragment for %s: no pending WHOIS.', nickname)
            return False

        builder.update(**info)
        return True

    def add_channels(self, nickname, entries):
        builder = self.get(nickname)
        if builder is None:
            logger.debug('Dropping WHOIS channels for %s: no pending WHOIS.', nickname)
            return False

        builder.add_channels(entries)
        return True

    def finish(self, nickname):
        """ Finalize and forget the pending WHOIS for nickname. Returns the completed WhoisInfo, or None. """
        builder = self._pending.pop(self._normalize(nickname), None)
        if builder is None:
            logger.debug('Dropping end of WHOIS for %s: no pending WHOIS.', nickname)
            return None
        return builder.build()

    def abort(self, nickname):
        """ Forget the pending WHOIS for nickname without completing it. """
        return self._pending.pop(self._normalize(nickname), None) is not None

    def clear(self):
        self._pending.clear()
