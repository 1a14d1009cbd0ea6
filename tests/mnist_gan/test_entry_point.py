"""Tests for run_experiment.py."""

import pytest

from ganloop.console import ConsoleConfig, ConsoleMode, GLConsole
from run_experiment import main


@pytest.fixture(autouse=True)
def restore_null():
    yield
    GLConsole(ConsoleConfig(mode=ConsoleMode.NULL))


class TestMain:

    def test_unknown_experiment_exits_1(self):
        with pytest.raises(SystemExit) as exc:
            main(['no_such_experiment'])
        assert exc.value.code == 1

    def test_no_args_exits_1(self):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 1

    def test_help_exits_0(self):
        with pytest.raises(SystemExit) as exc:
            main(['--help'])
        assert exc.value.code == 0

    def test_list_returns(self):
        assert main(['--list']) is None

    def test_bad_config_exits_1(self):
        with pytest.raises(SystemExit) as exc:
            main(['mnist_gan', '--epochs', '0', '--no-console-output'])
        assert exc.value.code == 1
