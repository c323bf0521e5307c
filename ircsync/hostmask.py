## hostmask.py
# Hostmask glob matching, as used by channel ban lists.
import re

from . import parsing, protocol
from .parsing import Hostmask

__all__ = [ 'Hostmask', 'GlobHostmask' ]


class GlobHostmask:
    """
    A nick!user@host pattern where `*` matches any run of characters and `?` matches exactly one.
    Every other character, brackets included, matches itself. Matching follows the given case mapping.
    """

    def __init__(self, mask, case_mapping=protocol.DEFAULT_CASE_MAPPING):
        self.mask = mask
        self.case_mapping = case_mapping
        self._pattern = compile_glob(parsing.normalize(mask, case_mapping=case_mapping))

    def matches(self, hostmask):
        """ Check whether the given Hostmask or nick!user@host string matches this glob. """
        return bool(self._pattern.match(parsing.normalize(str(hostmask), case_mapping=self.case_mapping)))

    def __contains__(self, hostmask):
        return self.matches(hostmask)

    def __str__(self):
        return self.mask

    def __repr__(self):
        return '{mod}.{cls}({mask!r})'.format(mod=__name__, cls=self.__class__.__name__, mask=self.mask)

    def __eq__(self, other):
        if not isinstance(other, GlobHostmask):
            return NotImplemented
        return self._pattern.pattern == other._pattern.pattern

    def __hash__(self):
        return hash(self._pattern.pattern)


def compile_glob(glob):
    """ Turn an IRC glob into an anchored regular expression. """
    pattern = ''.join(
        '.*' if ch == '*' else '.' if ch == '?' else re.escape(ch)
        for ch in glob
    )
    return re.compile('^' + pattern + '$', re.DOTALL)
