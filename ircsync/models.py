## models.py
# Channel model class.
from . import parsing, protocol


class Channel:
    """
    A channel the client is in.
    Every known occupant is in exactly one of `members`, `voiced` and `operators`.
    Nicknames keep the casing the server last used for them, but are looked up under the case mapping.
    """

    def __init__(self, client, name, case_mapping=protocol.DEFAULT_CASE_MAPPING):
        self.client = client
        self.name = name
        self.case_mapping = case_mapping
        self.topic = None
        self.topic_by = None
        self.members = set()
        self.voiced = set()
        self.operators = set()
        self.bans = set()

    def __repr__(self):
        return '{mod}.{cls}({name!r})'.format(mod=__name__, cls=self.__class__.__name__, name=self.name)

    def _roles(self):
        return {
            protocol.ROLE_MEMBER: self.members,
            protocol.ROLE_VOICED: self.voiced,
            protocol.ROLE_OPERATOR: self.operators
        }

    def _find(self, nickname):
        """ Return the role and stored spelling of nickname, or (None, None). """
        key = parsing.normalize(nickname, case_mapping=self.case_mapping)
        for role, users in self._roles().items():
            for user in users:
                if parsing.normalize(user, case_mapping=self.case_mapping) == key:
                    return role, user
        return None, None

    @property
    def users(self):
        """ All known occupants. """
        return self.members | self.voiced | self.operators

    def has_user(self, nickname):
        return self.role_of(nickname) is not None

    def role_of(self, nickname):
        """ Return the role of nickname in this channel, or None if they are not known to be in it. """
        return self._find(nickname)[0]

    def set_role(self, nickname, role):
        """ Move nickname into the set for role, taking them out of every other set. """
        roles = self._roles()
        if role not in roles:
            raise ValueError('Unknown channel role: {}'.format(role))

        self.remove_user(nickname)
        roles[role].add(nickname)

    def remove_user(self, nickname):
        role, stored = self._find(nickname)
        if role is not None:
            self._roles()[role].discard(stored)

    def rename_user(self, old, new):
        """ Rename a user, keeping their role. Returns whether they were in this channel. """
        role = self.role_of(old)
        if role is None:
            return False

        self.remove_user(old)
        self.set_role(new, role)
        return True

    ## Bans.

    def is_banned(self, hostmask):
        """ Check whether hostmask matches any entry of the ban list we know of. """
        return any(ban.matches(hostmask) for ban in self.bans)

    async def reload_bans(self):
        """ Forget the known ban list and ask the server for a fresh one. """
        self.bans.clear()
        await self.client.rawmsg('MODE', self.name, '+b')
