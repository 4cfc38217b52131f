#!/usr/bin/env python
# coding=utf-8

from pymysql.charset import charset_by_id
from pymysql.constants import CLIENT, SERVER_STATUS

PROTOCOL_VERSION_10                     = 0x0a

CLIENT_LONG_PASSWORD                    = CLIENT.LONG_PASSWORD
CLIENT_FOUND_ROWS                       = CLIENT.FOUND_ROWS
CLIENT_LONG_FLAG                        = CLIENT.LONG_FLAG
CLIENT_CONNECT_WITH_DB                  = CLIENT.CONNECT_WITH_DB
CLIENT_NO_SCHEMA                        = CLIENT.NO_SCHEMA
CLIENT_COMPRESS                         = CLIENT.COMPRESS
CLIENT_ODBC                             = CLIENT.ODBC
CLIENT_LOCAL_FILES                      = CLIENT.LOCAL_FILES
CLIENT_IGNORE_SPACE                     = CLIENT.IGNORE_SPACE
CLIENT_PROTOCOL_41                      = CLIENT.PROTOCOL_41
CLIENT_INTERACTIVE                      = CLIENT.INTERACTIVE
CLIENT_SSL                              = CLIENT.SSL
CLIENT_IGNORE_SIGPIPE                   = CLIENT.IGNORE_SIGPIPE
CLIENT_TRANSACTIONS                     = CLIENT.TRANSACTIONS
CLIENT_SECURE_CONNECTION                = CLIENT.SECURE_CONNECTION
CLIENT_MULTI_STATEMENTS                 = CLIENT.MULTI_STATEMENTS
CLIENT_MULTI_RESULTS                    = CLIENT.MULTI_RESULTS
CLIENT_PS_MULTI_RESULTS                 = CLIENT.PS_MULTI_RESULTS
CLIENT_CONNECT_ATTRS                    = CLIENT.CONNECT_ATTRS
CLIENT_PLUGIN_AUTH_LENENC_CLIENT_DATA   = CLIENT.PLUGIN_AUTH_LENENC_CLIENT_DATA

# Gates auth-plugin-data-part-2 and the plugin name in HandshakeV10.
# Note: pymysql's CLIENT.PLUGIN_AUTH is 1 << 19, this codec keys on 1 << 23.
CLIENT_PLUGIN_AUTH                      = 0x00800000

SERVER_STATUS_IN_TRANS                  = SERVER_STATUS.SERVER_STATUS_IN_TRANS
SERVER_STATUS_AUTOCOMMIT                = SERVER_STATUS.SERVER_STATUS_AUTOCOMMIT
SERVER_MORE_RESULTS_EXISTS              = SERVER_STATUS.SERVER_MORE_RESULTS_EXISTS
SERVER_STATUS_NO_BACKSLASH_ESCAPES      = SERVER_STATUS.SERVER_STATUS_NO_BACKSLASH_ESCAPES

# Wire sizes of the HandshakeV10 layout
AUTH_PLUGIN_DATA_PART_1_LENGTH          = 8
AUTH_PLUGIN_DATA_LENGTH_MIN_PART_2      = 21
RESERVED_LENGTH                         = 10

local_vars = locals()


def _names(prefixes, value):
    names = []
    for _var in sorted(local_vars):
        if not _var.startswith(prefixes):
            continue
        flag = local_vars[_var]
        if isinstance(flag, int) and flag and value & flag == flag:
            names.append(_var)
    return names


def capability_names(flags):
    """
    Names of the capability bits set in flags

    >>> capability_names(CLIENT_PROTOCOL_41 | CLIENT_PLUGIN_AUTH)
    ['CLIENT_PLUGIN_AUTH', 'CLIENT_PROTOCOL_41']
    """
    return _names(('CLIENT_',), flags)


def status_names(flags):
    """
    Names of the status bits set in flags

    >>> status_names(2)
    ['SERVER_STATUS_AUTOCOMMIT']
    """
    return _names(('SERVER_',), flags)


def charset_name(charset_id):
    """
    Collation name for a handshake character set id, '' when pymysql does not know it

    >>> charset_name(8)
    'latin1_swedish_ci'
    """
    try:
        return charset_by_id(charset_id).collation
    except KeyError:
        return ''
