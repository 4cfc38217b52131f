# coding=utf-8

import logging

logger = logging.getLogger('py_mysql_handshake')


class Packet(object):
    """
    Basic class for all mysql proto classes to inherit from

    Subclasses list their fields in __slots__; equality and repr are
    derived from them.
    """
    __slots__ = ()

    def getPayload(self):
        """
        Return the payload as bytes
        """
        raise NotImplementedError('getPayload')

    @classmethod
    def loadFromPayload(cls, payload):
        """
        Build a new instance from a packet payload (no transport header)
        """
        raise NotImplementedError('loadFromPayload')

    def _fields(self):
        return tuple((name, getattr(self, name)) for name in self.__slots__)

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self._fields() == other._fields()

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        return '%s(%s)' % (self.__class__.__name__,
                           ', '.join('%s=%r' % field for field in self._fields()))


def hex_ba(string):
    """
    Parse a hex dump such as '0a 35 2e' into bytes, any whitespace allowed

    >>> hex_ba('0a 35 2e')
    b'\\n5.'
    >>> hex_ba('''0a35
    ...           2e''')
    b'\\n5.'
    """
    return bytes.fromhex(''.join(string.split()))


def dump(packet):
    """
    Dumps a packet to the logger
    """
    offset = 0
    if not logger.isEnabledFor(logging.DEBUG):
        return

    dump = 'Packet Dump\n'

    while offset < len(packet):
        dump += hex(offset)[2:].zfill(8).upper()
        dump += '  '

        for x in range(16):
            if offset + x >= len(packet):
                dump += '   '
            else:
                dump += hex(packet[offset + x])[2:].upper().zfill(2)
                dump += ' '
                if x == 7:
                    dump += ' '

        dump += '  '

        for x in range(16):
            if offset + x >= len(packet):
                break
            if packet[offset + x] < 32 or packet[offset + x] >= 127:
                dump += '.'
            else:
                dump += chr(packet[offset + x])

            if x == 7:
                dump += ' '

        dump += '\n'
        offset += 16
    logger.debug(dump)


if __name__ == "__main__":
    import doctest
    doctest.testmod()
