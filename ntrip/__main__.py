"""Command-line NTRIP client.

Streams a mountpoint and prints the size of every chunk received, or lists
a caster's source table::

    python -m ntrip -s rtk2go.com -m ACACU -u me@example.com \\
        --xyz -1983430.2365 -4937492.4088 3505683.7925 -i 2
    python -m ntrip -s rtk2go.com --sourcetable
"""

import argparse
import asyncio
import contextlib
import logging

from ntrip.client import ClientConfig, ClientEvent, NtripClient
from ntrip.client.config import DEFAULT_PORT
from ntrip.sourcetable import fetch_source_table


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="ntrip", description=__doc__.splitlines()[0])
    parser.add_argument("-s", "--server", metavar="HOST", required=True, help="caster host name")
    parser.add_argument("-p", "--port", type=int, metavar="NUM", default=DEFAULT_PORT, help="caster port")
    parser.add_argument("-m", "--mount", metavar="STR", default="", help="mountpoint (stream name)")
    parser.add_argument("-u", "--user", metavar="STR", default="", help="user name")
    parser.add_argument("-w", "--password", metavar="STR", default="", help="password")
    parser.add_argument("--xyz", type=float, nargs=3, metavar=("X", "Y", "Z"),
                        default=(0.0, 0.0, 0.0), help="receiver ECEF position (metres)")
    parser.add_argument("-i", "--interval", type=float, metavar="SEC", default=0.0,
                        help="GGA report interval, 0 to disable")
    parser.add_argument("--sourcetable", action="store_true", help="print the source table and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="verbose logging")
    return parser.parse_args(argv)


def _print_chunk(chunk: bytes) -> None:
    print(f"received {len(chunk)} bytes")


async def _print_source_table(config: ClientConfig) -> None:
    for entry in await fetch_source_table(config):
        print(";".join(entry.values()))


async def _stream(config: ClientConfig) -> None:
    client = NtripClient(config)
    client.subscribe(ClientEvent.DATA, _print_chunk)
    client.run()
    try:
        await asyncio.Event().wait()
    finally:
        client.close()


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = ClientConfig(
        host=args.server,
        port=args.port,
        mountpoint=args.mount,
        username=args.user,
        password=args.password,
        report_interval=args.interval,
        position=tuple(args.xyz),
    )
    with contextlib.suppress(KeyboardInterrupt):
        if args.sourcetable:
            asyncio.run(_print_source_table(config))
        else:
            asyncio.run(_stream(config))


if __name__ == "__main__":
    main()
