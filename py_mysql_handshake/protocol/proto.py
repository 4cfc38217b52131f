# coding=utf-8
import struct

from py_mysql_handshake.protocol.errors import MissingTerminator, TextNotEncodable, TooShort

ENCODING = 'utf-8'
# bytes that are not valid utf-8 survive decode and encode unchanged
ERRORS = 'surrogateescape'

_FIXED_INT_FORMATS = {
    1: '<B',
    2: '<H',
    4: '<I',
}


class Proto(object):
    """
    Cursor over a single packet payload.

    Readers never look past the end of the payload: callers check the
    remaining length with require() at each checkpoint and the string
    readers raise MissingTerminator instead of running off the end.
    """
    __slots__ = ('packet', 'offset')

    def __init__(self, packet, offset=0):
        self.packet = packet
        self.offset = offset

    def remaining(self):
        """
        Number of unread bytes

        >>> Proto(b'abc', 1).remaining()
        2
        """
        return len(self.packet) - self.offset

    def require(self, size, checkpoint):
        """
        Fail with TooShort unless size bytes are left

        >>> Proto(b'abc').require(3, 'three bytes')
        >>> Proto(b'abc', 1).require(3, 'three bytes')
        Traceback (most recent call last):
        ...
        py_mysql_handshake.protocol.errors.TooShort: handshake packet too short for three bytes: need 3 bytes, have 2
        """
        available = self.remaining()
        if available < size:
            raise TooShort(checkpoint, size, available)

    @staticmethod
    def build_fixed_int(size, value):
        """
        Build a MySQL Fixed Int, little-endian, masked to size bytes

        >>> Proto.build_fixed_int(1, 255)
        b'\\xff'

        >>> Proto.build_fixed_int(2, 0x0102)
        b'\\x02\\x01'

        >>> Proto.build_fixed_int(4, 1)
        b'\\x01\\x00\\x00\\x00'

        >>> Proto.build_fixed_int(1, 0x1ff)
        b'\\xff'
        """
        return struct.pack(_FIXED_INT_FORMATS[size], value & ((1 << (size * 8)) - 1))

    @staticmethod
    def build_null_str(value):
        """
        Build a MySQL Null String

        >>> Proto.build_null_str('ab')
        b'ab\\x00'

        Empty string is just a null:
        >>> Proto.build_null_str('')
        b'\\x00'
        """
        if isinstance(value, str):
            try:
                value = value.encode(ENCODING, ERRORS)
            except UnicodeEncodeError:
                raise TextNotEncodable(value)
        return bytes(value) + b'\x00'

    @staticmethod
    def build_filler(size, fill=0x00):
        """
        Build a set of filler

        >>> Proto.build_filler(2)
        b'\\x00\\x00'

        >>> Proto.build_filler(1, 0x1c)
        b'\\x1c'
        """
        return bytes([fill]) * size

    def get_fixed_int(self, size):
        """
        Extract a fixed int from the current packet position

        >>> proto = Proto(b'\\x01\\x02\\x03')
        >>> proto.get_fixed_int(1)
        1
        >>> proto.get_fixed_int(2)
        770
        """
        value = struct.unpack_from(_FIXED_INT_FORMATS[size], self.packet, self.offset)[0]
        self.offset += size
        return value

    def get_fixed_bytes(self, size):
        """
        Copy size bytes from the current packet position

        >>> Proto(bytearray(b'abcd'), 1).get_fixed_bytes(2)
        b'bc'
        """
        value = bytes(self.packet[self.offset:self.offset + size])
        self.offset += size
        return value

    def get_filler(self, size):
        """
        Skip over packet filler

        >>> packet = Proto(bytearray(5))
        >>> packet.get_filler(2)
        >>> packet.offset
        2
        """
        self.offset += size

    def get_null_str(self, field):
        """
        Extract a null string from the current packet position, skipping the terminator

        >>> proto = Proto(b'abc\\x00de')
        >>> proto.get_null_str('name')
        'abc'
        >>> proto.offset
        4
        >>> proto.get_null_str('tail')
        Traceback (most recent call last):
        ...
        py_mysql_handshake.protocol.errors.MissingTerminator: malformed handshake packet: missing null terminator for tail
        """
        end = bytes(self.packet[self.offset:]).find(b'\x00')
        if end == -1:
            raise MissingTerminator(field)
        value = bytes(self.packet[self.offset:self.offset + end]).decode(ENCODING, ERRORS)
        self.offset += end + 1
        return value


if __name__ == "__main__":
    import doctest
    doctest.testmod()
