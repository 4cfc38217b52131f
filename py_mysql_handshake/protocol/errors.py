# coding=utf-8
"""Exceptions raised by the handshake codec."""


class HandshakeError(Exception):
    """Base exception for all handshake codec errors."""


class DecodeError(HandshakeError):
    """The payload is not a well-formed HandshakeV10 packet."""


class TooShort(DecodeError):
    """Not enough bytes left at a checkpoint."""

    def __init__(self, checkpoint, expected, available):
        self.checkpoint = checkpoint
        self.expected = expected
        self.available = available
        super(TooShort, self).__init__(
            "handshake packet too short for %s: need %d bytes, have %d" % (checkpoint, expected, available))


class MissingTerminator(DecodeError):
    """A null terminated field has no 0x00 before the end of the payload."""

    def __init__(self, field):
        self.field = field
        super(MissingTerminator, self).__init__(
            "malformed handshake packet: missing null terminator for %s" % field)


class EncodeError(HandshakeError):
    """The record cannot be written as a HandshakeV10 payload."""


class AuthDataTooShort(EncodeError):

    def __init__(self, length):
        self.length = length
        super(AuthDataTooShort, self).__init__(
            "auth plugin data too short: need at least 8 bytes, have %d" % length)


class TextNotEncodable(EncodeError):

    def __init__(self, value):
        self.value = value
        super(TextNotEncodable, self).__init__("cannot encode %r as utf-8" % value)
