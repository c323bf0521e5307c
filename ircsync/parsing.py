## parsing.py
# IRC message parsing and construction.
import collections.abc

from . import protocol
from .protocol import ProtocolViolation


class Hostmask:
    """ A nick!user@host identity. User and host are None when the source did not carry them. """

    def __init__(self, nickname, username=None, hostname=None):
        self.nickname = nickname
        self.username = username
        self.hostname = hostname

    @classmethod
    def parse(cls, raw):
        return cls(*parse_user(raw))

    def __str__(self):
        return '{n}!{u}@{h}'.format(n=self.nickname, u=self.username or '*', h=self.hostname or '*')

    def __repr__(self):
        return '{mod}.{cls}({n!r}, {u!r}, {h!r})'.format(
            mod=__name__, cls=self.__class__.__name__,
            n=self.nickname, u=self.username, h=self.hostname)

    def __eq__(self, other):
        if not isinstance(other, Hostmask):
            return NotImplemented
        return (self.nickname, self.username, self.hostname) == (other.nickname, other.username, other.hostname)

    def __hash__(self):
        return hash((self.nickname, self.username, self.hostname))


class Message:
    """
    A single IRC message.

    `params` holds the middle parameters only, `message` the trailing parameter (or None if the line had none).
    """

    def __init__(self, command, params=(), message=None, source=None, _raw=None, _valid=True):
        self.command = command
        self.params = list(params)
        self.message = message
        self.source = source
        self._raw = _raw
        self._valid = _valid

    @classmethod
    def parse(cls, line):
        """
        Parse given line into IRC message structure.
        Returns a Message.
        """
        valid = True
        message = line

        # Sanity check for message length.
        if len(message) > protocol.MESSAGE_LENGTH_LIMIT + len(protocol.LINE_SEPARATOR):
            valid = False

        # Strip message separator.
        if message.endswith(protocol.LINE_SEPARATOR):
            message = message[:-len(protocol.LINE_SEPARATOR)]
        elif message.endswith(protocol.MINIMAL_LINE_SEPARATOR):
            message = message[:-len(protocol.MINIMAL_LINE_SEPARATOR)]

        # Sanity check for forbidden characters.
        if any(ch in message for ch in protocol.FORBIDDEN_CHARACTERS):
            valid = False

        # Extract message sections.
        # Format: (:source)? command parameter*
        if message.startswith(':'):
            parts = protocol.ARGUMENT_SEPARATOR.split(message[1:], 2)
        else:
            parts = [ None ] + protocol.ARGUMENT_SEPARATOR.split(message.lstrip(' '), 1)

        if len(parts) == 3:
            source, command, raw_params = parts
        elif len(parts) == 2:
            source, command = parts
            raw_params = ''
        else:
            raise ProtocolViolation('Improper IRC message format: not enough elements.', message=message)

        if not command:
            raise ProtocolViolation('Improper IRC message format: no command.', message=message)

        # Sanity check for command.
        if not protocol.COMMAND_PATTERN.match(command):
            valid = False

        # Extract parameters properly.
        # Format: word* (:sentence)?
        trailing = None

        # Only parameter is a 'trailing' sentence.
        if raw_params.startswith(protocol.TRAILING_PREFIX):
            params = []
            trailing = raw_params[len(protocol.TRAILING_PREFIX):]
        # We have a sentence in our parameters.
        elif ' ' + protocol.TRAILING_PREFIX in raw_params:
            index = raw_params.find(' ' + protocol.TRAILING_PREFIX)

            # Get all single-word parameters.
            params = protocol.ARGUMENT_SEPARATOR.split(raw_params[:index].strip(' '))
            # Extract last parameter as sentence
            trailing = raw_params[index + len(protocol.TRAILING_PREFIX) + 1:]
        # We have some parameters, but no sentences.
        elif raw_params.strip(' '):
            params = protocol.ARGUMENT_SEPARATOR.split(raw_params.strip(' '))
        # No parameters.
        else:
            params = []

        # Numerics stay strings so '005' keeps its leading zeroes; words are uppercased.
        command = command.upper()

        return cls(command, params, message=trailing, source=source, _valid=valid, _raw=message)

    def construct(self, force=False):
        """ Convert message into raw IRC line, without line separator. If `force` is True, don't attempt to check message validity. """
        command = str(self.command)
        if not protocol.COMMAND_PATTERN.match(command) and not force:
            raise ProtocolViolation('The constructed command does not follow the command pattern ({pat})'.format(pat=protocol.COMMAND_PATTERN.pattern), message=command)
        line = command.upper()

        # Add middle parameters.
        for param in self.params:
            if (not param or ' ' in param or param.startswith(protocol.TRAILING_PREFIX)) and not force:
                raise ProtocolViolation('Only the final parameter of an IRC message can be trailing and thus contain spaces, or start with a colon.', message=param)
            line += ' ' + param

        # Add trailing parameter.
        if self.message is not None:
            line += ' ' + protocol.TRAILING_PREFIX + self.message

        # Prepend source.
        if self.source:
            line = ':' + self.source + ' ' + line

        # Sanity check for characters.
        if any(ch in line for ch in protocol.FORBIDDEN_CHARACTERS) and not force:
            raise ProtocolViolation('The constructed message contains forbidden characters ({chs}).'.format(chs=', '.join(repr(ch) for ch in protocol.FORBIDDEN_CHARACTERS)), message=line)

        return line

    @property
    def arguments(self):
        """ All parameters, trailing one included. """
        if self.message is None:
            return list(self.params)
        return self.params + [self.message]

    @property
    def hostmask(self):
        """ The parsed source of this message, or None if it has no source. """
        if not self.source:
            return None
        return Hostmask.parse(self.source)

    @property
    def nickname(self):
        """ Nickname of the source. Raises ProtocolViolation for messages without one. """
        if not self.source:
            raise ProtocolViolation('Message has no source.', message=self._raw)
        return parse_user(self.source)[0]

    def __str__(self):
        return self.construct()

    def __repr__(self):
        return '{mod}.{cls}({cmd!r}, {params!r}, message={msg!r}, source={src!r})'.format(
            mod=__name__, cls=self.__class__.__name__,
            cmd=self.command, params=self.params, msg=self.message, src=self.source)


def parse(line):
    """ Parse a single raw line into a Message. """
    return Message.parse(line)


def normalize(input, case_mapping=protocol.DEFAULT_CASE_MAPPING):
    """ Normalize input according to case mapping. """
    if case_mapping not in protocol.CASE_MAPPINGS:
        raise ProtocolViolation('Unknown case mapping ({})'.format(case_mapping))

    input = input.lower()

    if case_mapping in ('rfc1459', 'strict-rfc1459'):
        input = input.replace('{', '[').replace('}', ']').replace('|', '\\')
    if case_mapping == 'rfc1459':
        input = input.replace('~', '^')

    return input


class NormalizingDict(collections.abc.MutableMapping):
    """ A dict that normalizes entries according to the given case mapping. """
    def __init__(self, *args, case_mapping):
        self.storage = {}
        self.case_mapping = case_mapping
        self.update(dict(*args))

    def __getitem__(self, key):
        if not isinstance(key, str):
            raise KeyError(key)
        return self.storage[normalize(key, case_mapping=self.case_mapping)]

    def __setitem__(self, key, value):
        if not isinstance(key, str):
            raise KeyError(key)
        self.storage[normalize(key, case_mapping=self.case_mapping)] = value

    def __delitem__(self, key):
        if not isinstance(key, str):
            raise KeyError(key)
        del self.storage[normalize(key, case_mapping=self.case_mapping)]

    def __iter__(self):
        return iter(self.storage)

    def __len__(self):
        return len(self.storage)

    def __repr__(self):
        return '{mod}.{cls}({dict}, case_mapping={cm})'.format(
            mod=__name__, cls=self.__class__.__name__,
            dict=self.storage, cm=self.case_mapping)


def parse_user(raw):
    """ Parse nick(!user(@host)?)? structure. """
    nick = raw
    user = None
    host = None

    # Attempt to extract host.
    if protocol.HOST_SEPARATOR in raw:
        raw, host = raw.split(protocol.HOST_SEPARATOR, 1)
    # Attempt to extract user.
    if protocol.USER_SEPARATOR in raw:
        nick, user = raw.split(protocol.USER_SEPARATOR, 1)
    else:
        nick = raw

    return nick, user, host


## Fragmentation.

def fragment(prefix, body, limit=protocol.MESSAGE_LENGTH_LIMIT):
    """
    Split body into pieces that each fit on a line starting with prefix.
    A body that fits is returned whole; otherwise it is cut into chunks of limit - (len(prefix) + 1) characters.
    """
    if len(prefix) + len(body) <= limit:
        return [body]

    chunksize = limit - (len(prefix) + 1)
    if chunksize <= 0:
        raise ProtocolViolation('Line prefix leaves no room for text ({len} >= {maxlen}).'.format(len=len(prefix), maxlen=limit), message=prefix)
    return list(chunkify(body, chunksize))


def chunkify(message, chunksize):
    if not message:
        yield message
    else:
        while message:
            chunk = message[:chunksize]
            message = message[chunksize:]
            yield chunk
