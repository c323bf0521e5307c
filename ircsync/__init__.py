from . import connection, protocol, client, events, rfc1459

from .client import Error, NotConnected, NotInChannel, AlreadyInChannel, BasicClient, \
    DISCONNECTED, CONNECTING, CONNECTED, READY
from .protocol import ProtocolViolation
from .whois import WhoisFinalized, WhoisInfo
from .hostmask import Hostmask, GlobHostmask
from .models import Channel

__name__ = 'ircsync'
__version__ = '0.1.0'
__version_info__ = (0, 1, 0)
__license__ = 'BSD'


class Client(rfc1459.RFC1459Client):
    """ A fully featured IRC client. """
    pass
