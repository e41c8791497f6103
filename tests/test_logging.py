"""
Logging Tests

Module loggers, level configuration, and structured record sinks.

Run with: pytest tests/test_logging.py -v
"""

import json

import pytest

import retro_arcade.logging as arcade_logging
from retro_arcade.logging import (
    JsonlRecordSink,
    LogLevel,
    RecordSink,
    configure_logging,
    disable_logging,
    emit_record,
    get_logger,
    record_sinks,
    records_enabled,
    register_sink,
    unregister_sink,
)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Give each test its own logging configuration and sink registry."""
    monkeypatch.setattr(arcade_logging, '_config', {
        'default_level': LogLevel.INFO,
        'module_levels': {},
        'log_dir': str(tmp_path),
        'records': {},
    })
    monkeypatch.setattr(arcade_logging, '_sinks', {})


class TestLogger:
    """Test ArcadeLogger output and levels."""

    def test_get_logger_is_cached(self):
        """The same name returns the same logger."""
        assert get_logger('clock') is get_logger('clock')

    def test_format(self, capsys):
        """Messages print as [module] LEVEL: message with interpolation."""
        get_logger('session').info("Started %s with %d lives", 'snake', 3)
        assert capsys.readouterr().out == "[session] INFO: Started snake with 3 lives\n"

    def test_below_level_is_silent(self, capsys):
        """DEBUG is hidden at the default INFO level."""
        get_logger('session').debug("hidden")
        assert capsys.readouterr().out == ""

    def test_module_level_override(self, capsys):
        """Per-module levels beat the default."""
        configure_logging(level='WARNING', modules={'clock': 'DEBUG'})
        get_logger('clock').debug("clamped")
        get_logger('session').info("hidden")
        assert capsys.readouterr().out == "[clock] DEBUG: clamped\n"

    def test_trace_below_debug(self, capsys):
        """TRACE needs its own level."""
        configure_logging(level='DEBUG')
        get_logger('input').trace("hidden")
        configure_logging(level='TRACE')
        get_logger('input').trace("Ignoring unmapped key %d", 999)
        assert capsys.readouterr().out == "[input] TRACE: Ignoring unmapped key 999\n"

    def test_disable_logging(self, capsys):
        """disable_logging silences even errors."""
        disable_logging()
        get_logger('session').error("nope")
        assert capsys.readouterr().out == ""

    def test_bad_format_args_do_not_raise(self, capsys):
        """Mismatched arguments are appended instead of raising."""
        get_logger('session').info("no placeholders", 1)
        assert "no placeholders" in capsys.readouterr().out

    def test_exception_includes_traceback(self, capsys):
        """exception() logs the traceback being handled."""
        try:
            raise ValueError("boom")
        except ValueError:
            get_logger('launcher').exception("Fault in %s", 'pong')
        out = capsys.readouterr().out
        assert "[launcher] ERROR: Fault in pong" in out
        assert "[launcher] TRACE: ValueError: boom" in out

    def test_exception_outside_handler(self, capsys):
        """With no exception being handled, only the message is logged."""
        get_logger('launcher').exception("No fault")
        assert capsys.readouterr().out == "[launcher] ERROR: No fault\n"


class ListSink(RecordSink):
    def __init__(self):
        self.records = []
        self.closed = False

    def emit(self, module, record):
        self.records.append((module, record))

    def close(self):
        self.closed = True


class TestRecordRouting:
    """Test register_sink, unregister_sink and emit_record."""

    def test_no_sink(self):
        """Without a sink, records are dropped and False is returned."""
        assert emit_record('session', {'event': 'start'}) is False

    def test_registered_sink(self):
        """Records go to the sink registered for their module."""
        sink = ListSink()
        register_sink('session', sink)
        assert emit_record('session', {'event': 'start'}) is True
        assert emit_record('clock', {'event': 'stall'}) is False
        assert sink.records == [('session', {'event': 'start'})]

    def test_unregister_closes(self):
        """unregister_sink closes the sink and stops routing."""
        sink = ListSink()
        register_sink('session', sink)
        unregister_sink('session')
        assert sink.closed
        assert emit_record('session', {'event': 'stop'}) is False

    def test_unregister_unknown_module(self):
        """Unregistering a module without a sink is a no-op."""
        unregister_sink('nothing')


class TestJsonlRecordSink:
    """Test the JSON Lines file sink."""

    def read(self, path):
        return [json.loads(line) for line in path.read_text().splitlines()]

    def test_header_records_footer(self, tmp_path):
        """The file holds a header, stamped records and a counting footer."""
        path = tmp_path / 'runs' / 'snake_session.jsonl'
        sink = JsonlRecordSink(path, metadata={'game_id': 'snake'})
        sink.emit('session', {'event': 'start'})
        sink.emit('session', {'event': 'game_over', 'score': 40})
        sink.close()

        lines = self.read(path)
        assert lines[0]['type'] == 'header'
        assert lines[0]['game_id'] == 'snake'
        assert [line.get('event') for line in lines[1:3]] == ['start', 'game_over']
        assert lines[1]['module'] == 'session'
        assert 0 <= lines[1]['t'] <= lines[2]['t']
        assert lines[-1]['type'] == 'footer'
        assert lines[-1]['records'] == 2

    def test_close_twice(self, tmp_path):
        """A second close writes nothing more."""
        path = tmp_path / 'x.jsonl'
        sink = JsonlRecordSink(path)
        sink.close()
        sink.close()
        assert len(self.read(path)) == 2


class TestRecordSinks:
    """Test the record_sinks() run scope."""

    def test_disabled_modules_open_nothing(self, tmp_path):
        """Without ENABLED, no file is written and records are dropped."""
        with record_sinks('session', run_name='snake') as opened:
            assert opened == {}
            assert emit_record('session', {'event': 'start'}) is False
        assert list(tmp_path.iterdir()) == []

    def test_enabled_module_writes_file(self, tmp_path):
        """An enabled module gets <run>_<module>.jsonl for the block."""
        configure_logging(records={'session': True})
        with record_sinks('session', run_name='pong', game_id='pong', version='1.0.0'):
            emit_record('session', {'event': 'start'})

        path = tmp_path / 'pong_session.jsonl'
        lines = [json.loads(line) for line in path.read_text().splitlines()]
        assert lines[0]['game_id'] == 'pong'
        assert lines[0]['module'] == 'session'
        assert lines[1]['event'] == 'start'
        assert lines[-1]['type'] == 'footer'
        assert emit_record('session', {'event': 'late'}) is False

    def test_sinks_close_when_block_raises(self, tmp_path):
        """Files are finished even if the run fails."""
        configure_logging(records={'session': True})
        with pytest.raises(RuntimeError):
            with record_sinks('session', run_name='crash'):
                raise RuntimeError("fault")

        lines = (tmp_path / 'crash_session.jsonl').read_text().splitlines()
        assert json.loads(lines[-1])['type'] == 'footer'
        assert emit_record('session', {'event': 'late'}) is False


class TestEnvironment:
    """Test ARCADE_LOG_* and ARCADE_LOGGING_* parsing."""

    def test_levels_and_records(self):
        """Levels, log directory and record switches come from the environment."""
        arcade_logging._load_env_config({
            'ARCADE_LOG_LEVEL': 'warning',
            'ARCADE_LOG_CLOCK': 'TRACE',
            'ARCADE_LOG_DIR': '/tmp/arcade-logs',
            'ARCADE_LOGGING_SESSION_ENABLED': 'true',
            'ARCADE_LOGGING_CLOCK_ENABLED': 'no',
        })
        assert get_logger('session').level is LogLevel.WARNING
        assert get_logger('clock').level is LogLevel.TRACE
        assert str(arcade_logging.get_log_dir()) == '/tmp/arcade-logs'
        assert records_enabled('session')
        assert not records_enabled('clock')
        assert not records_enabled('scores')
