# coding=utf-8

from py_mysql_handshake.protocol import Flags
from py_mysql_handshake.protocol.errors import AuthDataTooShort
from py_mysql_handshake.protocol.packet import Packet
from py_mysql_handshake.protocol.proto import Proto


class HandshakeV10(Packet):
    """
    Initial handshake packet sent by the server (Protocol::HandshakeV10)

    1              [0a] protocol version
    string[NUL]    server version
    4              connection id
    string[8]      auth-plugin-data-part-1
    1              [00] filler
    2              capability flags (lower 2 bytes)
    1              character set
    2              status flags
    2              capability flags (upper 2 bytes)
    1              length of auth-plugin-data, if CLIENT_PLUGIN_AUTH
    string[10]     reserved (all [00])
    string[$len]   auth-plugin-data-part-2, if CLIENT_PLUGIN_AUTH
    string[NUL]    auth-plugin name, if CLIENT_PLUGIN_AUTH
    """
    __slots__ = ('protocolVersion', 'serverVersion', 'connectionId',
                 'authPluginData', 'capabilityFlags', 'characterSet',
                 'statusFlags', 'authPluginName',
                 ) + Packet.__slots__

    def __init__(self, protocolVersion=Flags.PROTOCOL_VERSION_10, serverVersion='',
                 connectionId=0, authPluginData=b'', capabilityFlags=0,
                 characterSet=0, statusFlags=0, authPluginName=''):
        super(HandshakeV10, self).__init__()
        self.protocolVersion = protocolVersion
        self.serverVersion = serverVersion
        self.connectionId = connectionId
        self.authPluginData = authPluginData
        self.capabilityFlags = capabilityFlags
        self.characterSet = characterSet
        self.statusFlags = statusFlags
        self.authPluginName = authPluginName

    def setCapabilityFlag(self, flag):
        self.capabilityFlags |= flag

    def removeCapabilityFlag(self, flag):
        self.capabilityFlags &= ~flag

    def toggleCapabilityFlag(self, flag):
        self.capabilityFlags ^= flag

    def hasCapabilityFlag(self, flag):
        return ((self.capabilityFlags & flag) == flag)

    def setStatusFlag(self, flag):
        self.statusFlags |= flag

    def removeStatusFlag(self, flag):
        self.statusFlags &= ~flag

    def toggleStatusFlag(self, flag):
        self.statusFlags ^= flag

    def hasStatusFlag(self, flag):
        return ((self.statusFlags & flag) == flag)

    def hasPluginAuth(self):
        return self.hasCapabilityFlag(Flags.CLIENT_PLUGIN_AUTH)

    def getPayload(self):
        authPluginData = bytes(self.authPluginData)
        if len(authPluginData) < Flags.AUTH_PLUGIN_DATA_PART_1_LENGTH:
            raise AuthDataTooShort(len(authPluginData))

        # The length byte and part 2 need at least 21 bytes of auth data,
        # the plugin name only needs the flag.
        withPart2 = (self.hasPluginAuth() and
                     len(authPluginData) >= Flags.AUTH_PLUGIN_DATA_LENGTH_MIN_PART_2)

        payload = bytearray()

        payload.extend(Proto.build_fixed_int(1, self.protocolVersion))
        payload.extend(Proto.build_null_str(self.serverVersion))
        payload.extend(Proto.build_fixed_int(4, self.connectionId))
        payload.extend(authPluginData[:Flags.AUTH_PLUGIN_DATA_PART_1_LENGTH])
        payload.extend(Proto.build_filler(1))
        payload.extend(Proto.build_fixed_int(2, self.capabilityFlags & 0xffff))
        payload.extend(Proto.build_fixed_int(1, self.characterSet))
        payload.extend(Proto.build_fixed_int(2, self.statusFlags))
        payload.extend(Proto.build_fixed_int(2, self.capabilityFlags >> 16))

        if withPart2:
            payload.extend(Proto.build_fixed_int(1, len(authPluginData)))
        else:
            payload.extend(Proto.build_filler(1))

        payload.extend(Proto.build_filler(Flags.RESERVED_LENGTH))

        if withPart2:
            payload.extend(authPluginData[Flags.AUTH_PLUGIN_DATA_PART_1_LENGTH:])

        if self.hasPluginAuth():
            payload.extend(Proto.build_null_str(self.authPluginName))

        return bytes(payload)

    @classmethod
    def loadFromPayload(cls, payload):
        obj = cls()
        proto = Proto(payload)

        proto.require(4, 'handshake')
        obj.protocolVersion = proto.get_fixed_int(1)
        obj.serverVersion = proto.get_null_str('server version')

        proto.require(4, 'connection id')
        obj.connectionId = proto.get_fixed_int(4)

        proto.require(Flags.AUTH_PLUGIN_DATA_PART_1_LENGTH + 1, 'auth plugin data')
        authPluginData = proto.get_fixed_bytes(Flags.AUTH_PLUGIN_DATA_PART_1_LENGTH)
        proto.get_filler(1)

        proto.require(5, 'flags')
        capabilityFlagsLower = proto.get_fixed_int(2)
        obj.characterSet = proto.get_fixed_int(1)
        obj.statusFlags = proto.get_fixed_int(2)
        proto.require(2, 'upper capability flags')
        capabilityFlagsUpper = proto.get_fixed_int(2)
        obj.capabilityFlags = capabilityFlagsLower | (capabilityFlagsUpper << 16)

        if obj.hasPluginAuth():
            proto.require(1 + Flags.RESERVED_LENGTH, 'auth plugin data length')
            authPluginDataLength = proto.get_fixed_int(1)
            proto.get_filler(Flags.RESERVED_LENGTH)

            # Declared length may run past the payload; take what is there.
            if authPluginDataLength > Flags.AUTH_PLUGIN_DATA_PART_1_LENGTH:
                size = min(authPluginDataLength - Flags.AUTH_PLUGIN_DATA_PART_1_LENGTH,
                           proto.remaining())
                authPluginData += proto.get_fixed_bytes(size)
        else:
            proto.require(Flags.RESERVED_LENGTH, 'reserved')
            proto.get_filler(Flags.RESERVED_LENGTH)

        obj.authPluginData = authPluginData

        proto.require(1, 'auth plugin name')
        obj.authPluginName = proto.get_null_str('auth plugin name')

        return obj


def decode(payload):
    """
    Decode a HandshakeV10 payload into a new HandshakeV10

    Raises TooShort or MissingTerminator when the payload is malformed.
    """
    return HandshakeV10.loadFromPayload(payload)


def encode(packet):
    """
    Encode a HandshakeV10 into its payload bytes

    Raises AuthDataTooShort when packet.authPluginData has fewer than 8 bytes.
    """
    return packet.getPayload()
