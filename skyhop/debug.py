"""skyhop/debug.py — Debug flag from environment variable."""

import os

DEBUG = os.environ.get("SKYHOP_DEBUG", "") == "1"
