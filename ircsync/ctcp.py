## ctcp.py
# Client-to-Client-Protocol (CTCP) quoting.
from .protocol import CTCP_DELIMITER, CTCP_ESCAPE_CHAR

__all__ = [ 'is_ctcp', 'construct_ctcp', 'parse_ctcp', 'split_ctcp' ]


def is_ctcp(message):
    """ Check if message is a CTCP message. Some clients leave off the closing delimiter, so only the opening one counts. """
    return message.startswith(CTCP_DELIMITER)

def construct_ctcp(*parts):
    """ Construct CTCP message. """
    message = ' '.join(part for part in parts if part is not None)
    message = message.replace(CTCP_ESCAPE_CHAR, CTCP_ESCAPE_CHAR + CTCP_ESCAPE_CHAR)
    message = message.replace('\0', CTCP_ESCAPE_CHAR + '0')
    message = message.replace('\n', CTCP_ESCAPE_CHAR + 'n')
    message = message.replace('\r', CTCP_ESCAPE_CHAR + 'r')
    return CTCP_DELIMITER + message + CTCP_DELIMITER

def parse_ctcp(query):
    """ Strip and de-quote CTCP messages. """
    query = query.strip(CTCP_DELIMITER)

    result = []
    chars = iter(query)
    for ch in chars:
        if ch != CTCP_ESCAPE_CHAR:
            result.append(ch)
            continue

        escaped = next(chars, '')
        result.append({ '0': '\0', 'n': '\n', 'r': '\r' }.get(escaped, escaped))
    return ''.join(result)

def split_ctcp(query):
    """ Split a de-quoted CTCP message into its type and contents. """
    if ' ' in query:
        type, contents = query.split(' ', 1)
        return type, contents
    return query, None
