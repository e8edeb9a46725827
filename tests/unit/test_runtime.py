"""Tests for the default collaborators."""

import json

from json_secure_logger.core import generate_invocation_id, stdout_sink


class TestStdoutSink:
    """Test the default sink."""

    def test_writes_one_line(self, capsys) -> None:
        stdout_sink('{"a":1}')
        assert capsys.readouterr().out == '{"a":1}\n'

    def test_keeps_non_ascii(self, capsys) -> None:
        stdout_sink('"h\u00e9llo \U0001F600"')
        assert capsys.readouterr().out == '"h\u00e9llo \U0001F600"\n'

    def test_escapes_lone_surrogate(self, capsys) -> None:
        stdout_sink('"\ud800"')

        out = capsys.readouterr().out
        assert out == '"\\ud800"\n'
        assert json.loads(out) == "\ud800"


class TestInvocationIds:
    def test_ids_are_unique(self) -> None:
        assert len({generate_invocation_id() for _ in range(100)}) == 100
