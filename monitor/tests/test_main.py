"""Tests for the CLI: config layering, exit codes, output destinations."""

from unittest.mock import patch

import pytest
from confluent_kafka import KafkaException

from monitor.main import build_parser, main, resolve_config
from helpers import HEADER, csv_input


def _input(tmp_path, text, name="access.csv"):
    path = tmp_path / name
    path.write_text(text)
    return str(path)


def _tracking_open(opened):
    """An ``open`` that remembers every file it returns."""
    def tracking_open(*args, **kwargs):
        f = open(*args, **kwargs)
        opened.append(f)
        return f
    return tracking_open


class TestResolveConfig:
    def test_defaults(self):
        c = resolve_config(build_parser().parse_args([]))
        assert c.stats_window == 10
        assert c.alert_rate == 10

    def test_flags_override_file(self, tmp_path):
        cfg = tmp_path / "monitor.yml"
        cfg.write_text("stats_window: 30\nalert_rate: 4\n")
        args = build_parser().parse_args(["--config", str(cfg), "--alert-rate", "2.5"])
        c = resolve_config(args)
        assert c.stats_window == 30
        assert c.alert_rate == 2.5

    def test_non_positive_flag_is_rejected(self):
        with pytest.raises(ValueError, match="stats_window"):
            resolve_config(build_parser().parse_args(["--stats-window", "0"]))


class TestMain:
    def test_writes_output_file(self, tmp_path):
        out = tmp_path / "out.txt"
        rc = main([_input(tmp_path, csv_input([1000, 1001])), "--output", str(out)])
        assert rc == 0
        assert out.read_text() == (
            "Stats [1000, 1010): 2 requests, 200 bytes, 0 errors, top section /api (2 hits)\n"
        )

    def test_writes_stdout_by_default(self, tmp_path, capsys):
        assert main([_input(tmp_path, csv_input([1000]))]) == 0
        assert capsys.readouterr().out.startswith("Stats [1000, 1010)")

    def test_header_only(self, tmp_path, capsys):
        assert main([_input(tmp_path, HEADER)]) == 0
        assert capsys.readouterr().out == ""

    def test_bad_header_exits_1(self, tmp_path, capsys):
        assert main([_input(tmp_path, "241\n123\n456\n")]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "expected headers" in captured.err

    def test_missing_input_exits_1(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.csv")]) == 1
        assert "Error" in capsys.readouterr().err

    def test_bad_config_exits_1(self, tmp_path, capsys):
        cfg = tmp_path / "monitor.yml"
        cfg.write_text("alert_window: -3\n")
        assert main([_input(tmp_path, HEADER), "--config", str(cfg)]) == 1
        assert "alert_window" in capsys.readouterr().err

    def test_kafka_topic_publishes_lines(self, tmp_path, capsys):
        with patch("monitor.sinks.Producer") as producer_cls:
            producer_cls.return_value.flush.return_value = 0
            rc = main([_input(tmp_path, csv_input([1000])), "--kafka-topic", "out"])
        assert rc == 0
        producer = producer_cls.return_value
        producer.produce.assert_called_once()
        assert producer.produce.call_args.kwargs["topic"] == "out"
        assert capsys.readouterr().out.startswith("Stats [1000, 1010)")

    def test_invalid_utf8_row_exits_1(self, tmp_path, capsys):
        path = tmp_path / "access.csv"
        path.write_bytes(HEADER.encode()
                         + b'"10.0.0.1","-","ap\xff\xfe",1000,"GET /api/user HTTP/1.0",200,100\n')
        assert main([str(path)]) == 1
        err = capsys.readouterr().err
        assert "Error: line 2" in err
        assert "not valid UTF-8" in err

    def test_byte_order_mark_is_tolerated(self, tmp_path, capsys):
        path = tmp_path / "access.csv"
        path.write_text("\ufeff" + csv_input([1000]), encoding="utf-8")
        assert main([str(path)]) == 0
        assert capsys.readouterr().out.startswith("Stats [1000, 1010)")

    def test_unwritable_output_closes_input(self, tmp_path, capsys):
        opened = []
        out = tmp_path / "missing" / "out.txt"
        with patch("monitor.main.open", side_effect=_tracking_open(opened), create=True):
            rc = main([_input(tmp_path, csv_input([1000])), "--output", str(out)])
        assert rc == 1
        assert "Error" in capsys.readouterr().err
        assert len(opened) == 1
        assert opened[0].closed

    def test_kafka_setup_failure_exits_1(self, tmp_path, capsys):
        opened = []
        out = tmp_path / "out.txt"
        with patch("monitor.main.KafkaSink", side_effect=KafkaException("bad config")), \
                patch("monitor.main.open", side_effect=_tracking_open(opened), create=True):
            rc = main([_input(tmp_path, csv_input([1000])), "--output", str(out),
                       "--kafka-topic", "out"])
        assert rc == 1
        assert "Error" in capsys.readouterr().err
        assert [f.closed for f in opened] == [True, True]
