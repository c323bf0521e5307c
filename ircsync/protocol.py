## protocol.py
# IRC protocol constants and helpers.
import collections
import re

DEFAULT_ENCODING = 'utf-8'
FALLBACK_ENCODING = 'iso-8859-1'

# While this *technically* is supposed to be 143, I've yet to see a server that actually uses those.
DEFAULT_PORT = 6667


## Errors.

class ProtocolViolation(Exception):
    """ An error that occurred while parsing or constructing an IRC message that violates the IRC protocol. """
    def __init__(self, msg, message=None):
        super().__init__(msg)
        self.irc_message = message


## Limits.

# 512 bytes including the line separator.
MESSAGE_LENGTH_LIMIT = 510


## Message parsing.

LINE_SEPARATOR = '\r\n'
MINIMAL_LINE_SEPARATOR = '\n'

FORBIDDEN_CHARACTERS = { '\r', '\n', '\0' }
USER_SEPARATOR = '!'
HOST_SEPARATOR = '@'

ARGUMENT_SEPARATOR = re.compile(' +', re.UNICODE)
COMMAND_PATTERN = re.compile('^([a-zA-Z]+|[0-9]+)$', re.UNICODE)
TRAILING_PREFIX = ':'
WILDCARD_TARGET = '*'


## Channels and users.

CASE_MAPPINGS = { 'ascii', 'rfc1459', 'strict-rfc1459' }
DEFAULT_CASE_MAPPING = 'rfc1459'

ROLE_MEMBER = 'member'
ROLE_VOICED = 'voiced'
ROLE_OPERATOR = 'operator'
ROLES = ( ROLE_MEMBER, ROLE_VOICED, ROLE_OPERATOR )

NICKNAME_PREFIXES = collections.OrderedDict([
    ('@', ROLE_OPERATOR),
    ('+', ROLE_VOICED)
])

BAN_MODES = { '+b', '-b' }


## CTCP.

CTCP_DELIMITER = '\x01'
CTCP_ESCAPE_CHAR = '\x16'
CTCP_ACTION = 'ACTION'


## Error event categories.

ERROR_GENERAL = 'general'
ERROR_SERVER = 'server'
ERROR_SOCKET = 'socket'

