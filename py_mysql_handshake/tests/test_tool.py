import io
import os
import shutil
import tempfile
import unittest
from contextlib import redirect_stdout

from py_mysql_handshake import tool
from py_mysql_handshake.packet.handshake import decode
from py_mysql_handshake.protocol import Flags

__all__ = ["TestTool"]

CONF = """
[Logging]
level = 30

[Handshake]
server_version = 8.0.36
connection_id = 9
auth_plugin_data = 30313233343536373839616263646566676869 6a6b
capability_flags = 0x81fff7ff
character_set = 8
status_flags = 0x0002
auth_plugin_name = caching_sha2_password
"""


class TestTool(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        self.conf_file = os.path.join(self.tmp_dir, 'handshake.conf')
        with open(self.conf_file, 'w') as fw:
            fw.write(CONF)

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def run_tool(self, *argv):
        out = io.StringIO()
        with redirect_stdout(out):
            status = tool.main(['-c', self.conf_file] + list(argv))
        return status, out.getvalue()

    def test_encode_from_config(self):
        status, out = self.run_tool('encode')

        self.assertEqual(status, 0)
        handshake = decode(bytes.fromhex(out.strip()))
        self.assertEqual(handshake.serverVersion, '8.0.36')
        self.assertEqual(handshake.connectionId, 9)
        self.assertEqual(handshake.authPluginData, b'0123456789abcdefghijk')
        self.assertEqual(handshake.capabilityFlags, 0x81fff7ff)
        self.assertEqual(handshake.authPluginName, 'caching_sha2_password')

    def test_encode_connection_id_override(self):
        status, out = self.run_tool('encode', '--connection-id', '300')

        self.assertEqual(status, 0)
        self.assertEqual(decode(bytes.fromhex(out.strip())).connectionId, 300)

    def test_encode_short_auth_data(self):
        with open(self.conf_file, 'w') as fw:
            fw.write(CONF.replace('30313233343536373839616263646566676869 6a6b', '3132'))

        with self.assertLogs('py_mysql_handshake', level='ERROR'):
            status, out = self.run_tool('encode')
        self.assertEqual(status, 1)
        self.assertEqual(out, '')

    def test_decode_hex(self):
        _, payload = self.run_tool('encode')
        status, out = self.run_tool('decode', payload.strip())
        lines = out.splitlines()

        self.assertEqual(status, 0)
        self.assertIn('server_version: 8.0.36', lines)
        self.assertIn('connection_id: 9', lines)
        self.assertIn('auth_plugin_data: %s' % b'0123456789abcdefghijk'.hex(), lines)
        self.assertIn('character_set: 8 latin1_swedish_ci', lines)
        self.assertIn('status_flags: 0x0002 SERVER_STATUS_AUTOCOMMIT', lines)
        self.assertIn('auth_plugin_name: caching_sha2_password', lines)
        capability_line = [line for line in lines if line.startswith('capability_flags: 0x81fff7ff ')]
        self.assertEqual(len(capability_line), 1)
        self.assertIn('CLIENT_PLUGIN_AUTH', capability_line[0].split(' ')[2].split('|'))

    def test_decode_file(self):
        payload_file = os.path.join(self.tmp_dir, 'greeting.bin')
        with open(payload_file, 'wb') as fw:
            fw.write(b'\x0aMySQL\x00\x01\x00\x00\x0012345678\x00\xff\x00\x21\x02\x00\x00\x00' +
                     10 * b'\x00' + b'mysql_native_password\x00')

        status, out = self.run_tool('decode', '--file', payload_file)

        self.assertEqual(status, 0)
        self.assertIn('server_version: MySQL', out.splitlines())
        self.assertIn('auth_plugin_name: mysql_native_password', out.splitlines())

    def test_decode_truncated(self):
        with self.assertLogs('py_mysql_handshake', level='ERROR') as logs:
            status, out = self.run_tool('decode', '0a 35 00')

        self.assertEqual(status, 1)
        self.assertEqual(out, '')
        self.assertIn('too short', logs.output[0])

    def test_decode_bad_hex(self):
        with self.assertLogs('py_mysql_handshake', level='ERROR'):
            status, _ = self.run_tool('decode', 'zz')
        self.assertEqual(status, 1)

    def test_decode_needs_one_input(self):
        with self.assertRaises(SystemExit):
            self.run_tool('decode')

    def test_missing_config(self):
        with self.assertLogs('py_mysql_handshake', level='ERROR'):
            status = tool.main(['-c', os.path.join(self.tmp_dir, 'missing.conf'), 'encode'])
        self.assertEqual(status, 1)

    def test_bundled_config(self):
        config = tool.load_config()
        handshake = tool.create_handshake(config['Handshake'], 5)

        self.assertEqual(handshake.connectionId, 5)
        self.assertEqual(handshake.protocolVersion, Flags.PROTOCOL_VERSION_10)
        self.assertTrue(handshake.hasPluginAuth())
        self.assertEqual(len(handshake.authPluginData), 21)
        self.assertEqual(decode(handshake.getPayload()), handshake)

    def test_log_file(self):
        log_file = os.path.join(self.tmp_dir, 'log', 'handshake.log')
        with open(self.conf_file, 'w') as fw:
            fw.write(CONF.replace('level = 30', 'level = 20\nfile = %s' % log_file))

        status, _ = self.run_tool('encode')
        tool.init_logger()

        self.assertEqual(status, 0)
        with open(log_file) as fr:
            self.assertIn('Handshake for connection 9', fr.read())

    def test_invalid_log_level(self):
        with open(self.conf_file, 'w') as fw:
            fw.write(CONF.replace('level = 30', 'level = verbose'))

        with self.assertLogs('py_mysql_handshake', level='ERROR') as logs:
            status, out = self.run_tool('encode')
        self.assertEqual(status, 1)
        self.assertEqual(out, '')
        self.assertIn('verbose', logs.output[0])
