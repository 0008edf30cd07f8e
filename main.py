#!/usr/bin/env python3

import sys

from taskorder.main import cli

if __name__ == "__main__":
    sys.exit(cli())
