# coding=utf-8
import argparse
import configparser
import logging
import os
import sys

from py_mysql_handshake.lib.log import init_logger
from py_mysql_handshake.packet.handshake import HandshakeV10, decode, encode
from py_mysql_handshake.protocol import Flags
from py_mysql_handshake.protocol.errors import HandshakeError
from py_mysql_handshake.protocol.packet import dump, hex_ba

logger = logging.getLogger('py_mysql_handshake')

DEFAULT_CONF = os.path.dirname(__file__) + "/example.conf"


def load_config(conf_file=None):
    conf_file = conf_file or DEFAULT_CONF
    config = configparser.ConfigParser()
    if not config.read(conf_file):
        raise IOError("Cannot read config file: %s" % conf_file)
    return config


def _getint(settings, key, default=0):
    # accepts 0x prefixed values for the flag fields
    return int(settings.get(key, fallback=str(default)), 0)


def create_handshake(settings, connection_id=None):
    """
    Build the greeting a mock server sends, from a [Handshake] config section
    """
    handshake = HandshakeV10()
    handshake.protocolVersion = _getint(settings, 'protocol_version', Flags.PROTOCOL_VERSION_10)
    handshake.serverVersion = settings.get('server_version', fallback='')
    if connection_id is None:
        connection_id = _getint(settings, 'connection_id')
    handshake.connectionId = connection_id
    handshake.authPluginData = hex_ba(settings.get('auth_plugin_data', fallback=''))
    handshake.capabilityFlags = _getint(settings, 'capability_flags')
    handshake.characterSet = _getint(settings, 'character_set')
    handshake.statusFlags = _getint(settings, 'status_flags')
    handshake.authPluginName = settings.get('auth_plugin_name', fallback='')
    return handshake


def describe(handshake):
    """
    One 'name: value' line per field
    """
    capabilityFlags = handshake.capabilityFlags
    statusFlags = handshake.statusFlags
    lines = [
        'protocol_version: %d' % handshake.protocolVersion,
        'server_version: %s' % handshake.serverVersion,
        'connection_id: %d' % handshake.connectionId,
        'auth_plugin_data: %s' % handshake.authPluginData.hex(),
        'capability_flags: 0x%08x %s' % (capabilityFlags, '|'.join(Flags.capability_names(capabilityFlags))),
        'character_set: %d %s' % (handshake.characterSet, Flags.charset_name(handshake.characterSet)),
        'status_flags: 0x%04x %s' % (statusFlags, '|'.join(Flags.status_names(statusFlags))),
        'auth_plugin_name: %s' % handshake.authPluginName,
    ]
    return [line.rstrip() for line in lines]


def run_decode(args):
    try:
        if args.file:
            with open(args.file, mode="rb") as fr:
                payload = fr.read()
        else:
            payload = hex_ba(args.hex)
    except (IOError, ValueError) as e:
        logger.error("Cannot read payload: %s" % e)
        return 1

    dump(payload)
    try:
        handshake = decode(payload)
    except HandshakeError as e:
        logger.error("Cannot decode handshake: %s" % e)
        return 1

    for line in describe(handshake):
        print(line)
    return 0


def run_encode(args, config):
    if not config.has_section("Handshake"):
        logger.error("Missing [Handshake] section in config")
        return 1

    try:
        handshake = create_handshake(config["Handshake"], args.connection_id)
        payload = encode(handshake)
    except ValueError as e:
        logger.error("Invalid [Handshake] settings: %s" % e)
        return 1
    except HandshakeError as e:
        logger.error("Cannot encode handshake: %s" % e)
        return 1

    logger.info("Handshake for connection %s: %d bytes" % (handshake.connectionId, len(payload)))
    dump(payload)
    print(payload.hex())
    return 0


def build_parser():
    parser = argparse.ArgumentParser(prog='mysql-handshake',
                                     description='Decode or build a MySQL HandshakeV10 payload.')
    parser.add_argument('-c', '--config', help='config file, defaults to the bundled example.conf')
    commands = parser.add_subparsers(dest='command')
    commands.required = True

    decode_parser = commands.add_parser('decode', help='decode a captured payload')
    decode_parser.add_argument('hex', nargs='?', help='payload as hex, whitespace allowed')
    decode_parser.add_argument('-f', '--file', help='file holding the raw payload')

    encode_parser = commands.add_parser('encode', help='build the greeting from the [Handshake] section')
    encode_parser.add_argument('--connection-id', type=int, help='overrides connection_id from the config')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == 'decode' and (args.hex is None) == (args.file is None):
        parser.error("decode needs exactly one of HEX or --file")

    try:
        config = load_config(args.config)
        level = config.getint("Logging", "level", fallback=logging.INFO)
    except (IOError, ValueError, configparser.Error) as e:
        init_logger()
        logger.error("%s" % e)
        return 1

    init_logger(level, config.get("Logging", "file", fallback=''))

    if args.command == 'decode':
        return run_decode(args)
    return run_encode(args, config)


if __name__ == "__main__":
    sys.exit(main())
