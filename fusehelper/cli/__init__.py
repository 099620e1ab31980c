"""Interactive console front end."""

from .shell import ShellFlags, handle_line, parse_flags, run_shell

__all__ = ["ShellFlags", "handle_line", "parse_flags", "run_shell"]
