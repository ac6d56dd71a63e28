import sys
from typing import Optional, TextIO

from config import EngineConfig
from csv_io import write_accounts_csv
from exceptions import PaymentsError
from logging_setup import setup_logging
from payments_engine import PaymentsEngine


def run(filepath: str, writer: TextIO, config: Optional[EngineConfig] = None) -> None:
    """Process a transactions CSV and write the account snapshot to writer."""
    engine = PaymentsEngine(config)
    accounts = engine.process_file(filepath)
    write_accounts_csv(accounts, writer)


def main(argv=None) -> int:
    argv = sys.argv if argv is None else argv
    if len(argv) != 2:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        return 1

    try:
        config = EngineConfig.from_env()
        setup_logging(config.log_level)
        run(argv[1], sys.stdout, config)
    except PaymentsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
