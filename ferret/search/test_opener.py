import subprocess
import unittest
from unittest.mock import patch

from ferret.search.opener import CommandOpener
from ferret.shared.settings import default_open_command


class TestCommandOpener(unittest.TestCase):

    @patch("ferret.search.opener.subprocess.run")
    def test_runs_command_with_link(self, mock_run):
        CommandOpener("firefox")("http://a")

        mock_run.assert_called_once_with(
            ["firefox", "http://a"],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=True,
        )

    @patch("ferret.search.opener.subprocess.run")
    def test_failures_propagate(self, mock_run):
        mock_run.side_effect = subprocess.CalledProcessError(3, ["firefox", "http://a"])

        with self.assertRaises(subprocess.CalledProcessError):
            CommandOpener("firefox")("http://a")

    def test_missing_command_raises_os_error(self):
        with self.assertRaises(OSError):
            CommandOpener("ferret-no-such-command-xyz")("http://a")

    def test_defaults_to_platform_opener(self):
        self.assertEqual(CommandOpener().command, default_open_command())
        self.assertEqual(CommandOpener("").command, default_open_command())


if __name__ == '__main__':
    unittest.main()
