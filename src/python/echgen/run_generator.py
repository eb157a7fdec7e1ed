#!/usr/bin/env python3

"""Generates an ECH private key and ECHConfigList for a TLS server.

    echgen -s example.com [-i ID] [-o OUTPUT]

writes example.com.pem.ech, holding the PKCS#8 private key and
the base64 ECHConfigList in an ECHCONFIG block.
"""

import argparse
import logging
import os
import sys

from echgen.config import DEBUG, OUTPUT_SUFFIX, OUTPUT_MODE
from echgen.ech_common import *
from echgen.ech_crypto import gen_ech_pem


def write_output(path: str, output: bytes) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, OUTPUT_MODE)
    with open(fd, 'wb') as f:
        f.write(output)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generates an ECH key and config")

    parser.add_argument("-s", "--server-name", default="", help="public server name")
    parser.add_argument("-i", "--id", type=int, default=None, help="ECH config id (uint8); random if omitted")
    parser.add_argument("-o", "--output", default=None, help=f"output file (default <server-name>{OUTPUT_SUFFIX})")
    parser.add_argument("-v", "--verbose", action="store_true", help="log the generated ECHConfig")

    return parser

def main(argv: list[str]|None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser()
    if not argv:
        parser.print_help(sys.stderr)
        return 0
    args = parser.parse_args(argv)

    logging.basicConfig(format='%(message)s')
    logger.setLevel(logging.DEBUG if args.verbose or DEBUG else logging.INFO)

    if not args.server_name:
        parser.print_usage(sys.stderr)
        logger.error("Server name is required")
        return 1

    output_file = args.output
    if output_file is None:
        output_file = args.server_name + OUTPUT_SUFFIX

    try:
        output = gen_ech_pem(args.id, args.server_name)
        write_output(output_file, output)
    except EchError as e:
        logger.error(str(e))
        return 1
    except OSError as e:
        logger.error(f"Failed to write to file {output_file}: {e}")
        return 1

    print(f"ECH key and config written to {output_file}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
