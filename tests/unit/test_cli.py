"""
Unit tests for the command-line parser and argument handling.
"""

import pytest

from txn_cleaning.cli import batch_cli
from txn_cleaning.cli.batch_cli import DEFAULT_POLICY_PATH, build_parser, main


@pytest.mark.unit
class TestParser:
    """Tests for build_parser()"""

    def test_process_defaults(self):
        args = build_parser().parse_args(["process", "--input", "raw.csv", "--output", "out"])
        assert args.command == "process"
        assert args.format == "csv"
        assert args.policy == DEFAULT_POLICY_PATH
        assert args.drop_price_problems is False
        assert args.report is False
        assert args.metrics_file is None

    def test_global_options(self):
        args = build_parser().parse_args([
            "--log-level", "DEBUG", "--log-format", "text", "--master", "local[1]",
            "process", "--input", "raw.json", "--output", "out", "--format", "json",
            "--drop-price-problems", "--report",
        ])
        assert args.log_level == "DEBUG"
        assert args.log_format == "text"
        assert args.master == "local[1]"
        assert args.format == "json"
        assert args.drop_price_problems is True
        assert args.report is True

    def test_report_command(self):
        args = build_parser().parse_args(["report", "--input", "out"])
        assert args.command == "report"

    def test_rejects_unknown_format(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["process", "--input", "a", "--output", "b", "--format", "xml"])


@pytest.mark.unit
class TestMain:
    """Tests for main() exit codes that need no Spark session"""

    def test_no_command(self):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1

    def test_missing_input(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["--log-format", "text", "process", "--input", str(tmp_path / "missing.csv"), "--output", str(tmp_path / "out")])
        assert exc_info.value.code == 1

    def test_report_missing_output(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["report", "--input", str(tmp_path / "missing")])
        assert exc_info.value.code == 1

    def test_unexpected_error_exits_nonzero(self, tmp_path, monkeypatch):
        input_path = tmp_path / "raw.csv"
        input_path.write_text("transaction_id\n")
        stopped = []

        class FakeSession:
            def stop(self):
                stopped.append(True)

        class BrokenPipeline:
            def run(self, **kwargs):
                raise RuntimeError("executor lost")

        monkeypatch.setattr(batch_cli, "create_spark_session", lambda **kwargs: FakeSession())
        monkeypatch.setattr(batch_cli.CleaningPipeline, "from_config", lambda spark, path: BrokenPipeline())

        with pytest.raises(SystemExit) as exc_info:
            main(["--log-format", "text", "process", "--input", str(input_path), "--output", str(tmp_path / "out")])

        assert exc_info.value.code == 1
        assert stopped == [True]
