#!/usr/bin/env python3

import sys

from quizdeck.cli import main

if __name__ == "__main__":
    args = sys.argv[1:] or ["./data/sample_bank.txt"]
    sys.exit(main(args))
