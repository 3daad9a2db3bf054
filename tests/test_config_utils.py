import json
import os
import tempfile
import unittest

from ziphandle import config_utils


class ConfigUtilsTests(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        self.path = os.path.join(self.temp_dir.name, 'settings.json')

    def test_missing_file_returns_default(self):
        self.assertIsNone(config_utils.load_setting('log_level', path=self.path))
        self.assertEqual(config_utils.load_setting('log_level', 'INFO', path=self.path), 'INFO')

    def test_save_then_load(self):
        config_utils.save_setting('log_level', 'DEBUG', path=self.path)
        config_utils.save_setting('log_file', 'run.log', path=self.path)

        self.assertEqual(config_utils.load_setting('log_level', path=self.path), 'DEBUG')
        with open(self.path) as f:
            self.assertEqual(json.load(f), {'log_level': 'DEBUG', 'log_file': 'run.log'})

    def test_malformed_file_is_ignored(self):
        with open(self.path, 'w') as f:
            f.write('{not json')

        with self.assertLogs('ziphandle.config_utils', level='WARNING'):
            self.assertEqual(config_utils.load_setting('log_level', 'WARNING', path=self.path), 'WARNING')

        config_utils.save_setting('log_level', 'ERROR', path=self.path)
        self.assertEqual(config_utils.load_setting('log_level', path=self.path), 'ERROR')


if __name__ == '__main__':
    unittest.main()
