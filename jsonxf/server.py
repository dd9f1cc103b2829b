"""JSON formatting HTTP server.

Run:
  python -m jsonxf.server
Then:
  curl -s --data-binary @foo.json 'http://127.0.0.1:18081/api/v1/format/stream?mode=minimize'
"""

from __future__ import annotations

import argparse
import sys

import uvicorn


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="jsonxf.server", add_help=True)
    parser.add_argument("--host", default="127.0.0.1", help="Bind host (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=18081, help="Bind port (default: 18081)")
    parser.add_argument("--log-level", default="info", help="uvicorn log level (default: info)")
    parser.add_argument("--reload", action="store_true", help="Reload on source changes (development)")

    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    uvicorn.run("jsonxf.api:app", host=args.host, port=args.port, log_level=args.log_level, reload=args.reload)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
