"""Coloured status output for the build steps."""

import os
import sys


class Colors:
    GREEN = '\033[92m'
    RED = '\033[91m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    YELLOW = '\033[93m'
    END = '\033[0m'
    BOLD = '\033[1m'

    @classmethod
    def disable(cls):
        """Plain output for CI logs and redirected files"""
        for name in ("GREEN", "RED", "BLUE", "CYAN", "YELLOW", "END", "BOLD"):
            setattr(cls, name, "")


def supports_color(stream=None):
    stream = stream or sys.stdout
    if os.environ.get("NO_COLOR"):
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def _line(color, icon, msg):
    print(f"{color}{icon} {msg}{Colors.END}")


def print_header(msg):
    rule = '=' * 60
    print()
    for text in (rule, msg, rule):
        print(f"{Colors.BOLD}{Colors.CYAN}{text}{Colors.END}")
    print()


def print_success(msg):
    _line(Colors.GREEN, "✅", msg)


def print_error(msg):
    _line(Colors.RED, "❌", msg)


def print_info(msg):
    _line(Colors.BLUE, "ℹ️ ", msg)


def print_warning(msg):
    _line(Colors.YELLOW, "⚠️ ", msg)


def fail(msg, hint=None):
    """Print an error and stop the whole run"""
    print_error(msg)
    if hint:
        print_info(hint)
    sys.exit(1)
