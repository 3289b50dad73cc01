"""Entry point: python -m omegahoa FILE [OUT]

Parses a HOA file and prints (or writes) its canonical rendering.
"""
import logging
import sys
from omegahoa.hoa_parser import parse_hoa_file, HoaError
from omegahoa.hoa_writer import to_hoa, write_hoa_file


def main():
    if len(sys.argv) < 2:
        print("Usage: python -m omegahoa FILE [OUT]", file=sys.stderr)
        return 2
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        document = parse_hoa_file(sys.argv[1])
    except HoaError as e:
        print(f"{sys.argv[1]}: {e}", file=sys.stderr)
        return 1

    if len(sys.argv) > 2:
        write_hoa_file(document, sys.argv[2])
    else:
        sys.stdout.write(to_hoa(document))
    return 0


if __name__ == "__main__":
    sys.exit(main())
