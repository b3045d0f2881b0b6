from __future__ import annotations

import logging
import sys

from apps.cli.commands.list_strategies import ListStrategiesCli
from apps.cli.commands.run_backtest import RunBacktestCli

_USAGE = (
    "Usage:\n"
    "  strategies [args...]\n"
    "  run [args...]\n"
)


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    _configure_logging()
    args = argv if argv is not None else sys.argv[1:]

    if not args:
        print(_USAGE)
        return 2

    cmd = args[0]
    rest = args[1:]

    if cmd == "strategies":
        return ListStrategiesCli().run(rest)
    if cmd == "run":
        return RunBacktestCli().run(rest)

    print(f"unknown command: {cmd}\n\n{_USAGE}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
