import sys
import os
import io
import logging

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from exceptions import InputError
from main import main, run


def write_csv(tmp_path, rows):
    csv_file = tmp_path / "input.csv"
    csv_file.write_text('\n'.join(rows))
    return str(csv_file)


class TestRun:
    def test_basic_output(self, tmp_path):
        path = write_csv(tmp_path, [
            "type, client, tx, amount",
            "deposit, 2, 1, 20.0",
            "deposit, 1, 2, 10.0",
            "withdrawal, 1, 3, 5.0",
            "deposit, 1, 4, 3.5",
        ])
        output = io.StringIO()
        run(path, output)

        assert output.getvalue() == (
            "client,available,held,total,locked\n"
            "1,8.5,0,8.5,false\n"
            "2,20,0,20,false\n"
        )

    def test_dispute_chargeback_output(self, tmp_path):
        path = write_csv(tmp_path, [
            "type,client,tx,amount",
            "deposit,1,1,100",
            "deposit,1,2,50",
            "dispute,1,1,",
            "chargeback,1,1,",
        ])
        output = io.StringIO()
        run(path, output)

        assert output.getvalue().splitlines()[1] == "1,50,0,50,true"

    def test_whitespace_handling(self, tmp_path):
        path = write_csv(tmp_path, [
            "type,   client,  tx,   amount",
            "  deposit  ,  1  ,  1  ,  10.0  ",
            "DEPOSIT, 2, 2, 20.0",
            "Withdrawal ,1,3,5.0",
        ])
        output = io.StringIO()
        run(path, output)

        assert output.getvalue() == (
            "client,available,held,total,locked\n"
            "1,5,0,5,false\n"
            "2,20,0,20,false\n"
        )

    def test_empty_file(self, tmp_path):
        path = write_csv(tmp_path, [])
        output = io.StringIO()
        run(path, output)

        assert output.getvalue() == "client,available,held,total,locked\n"

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputError):
            run(str(tmp_path / "missing.csv"), io.StringIO())


class TestMain:
    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_usage(self, capsys):
        assert main(["main.py"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Usage" in captured.err

    def test_success_writes_only_csv_to_stdout(self, tmp_path, capsys, monkeypatch):
        monkeypatch.setenv("PAYMENTS_LOG_LEVEL", "INFO")
        path = write_csv(tmp_path, [
            "type,client,tx,amount",
            "deposit,1,1,1.0",
            "withdrawal,1,2,9.0",
            "oops,1,3,1.0",
        ])

        assert main(["main.py", path]) == 0
        captured = capsys.readouterr()
        assert captured.out == "client,available,held,total,locked\n1,1,0,1,false\n"
        assert "insufficient_funds" in captured.err
        assert "Failed to parse row" in captured.err

    def test_fatal_error_exit_code(self, tmp_path, capsys):
        assert main(["main.py", str(tmp_path / "missing.csv")]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.startswith("Error: ")

    def test_invalid_config_exit_code(self, tmp_path, capsys, monkeypatch):
        monkeypatch.setenv("PAYMENTS_QUEUE_CAPACITY", "zero")
        path = write_csv(tmp_path, ["type,client,tx,amount"])

        assert main(["main.py", path]) == 1
        assert "PAYMENTS_QUEUE_CAPACITY" in capsys.readouterr().err
