"""
Per-component parsers for Claude Code plugins.

Each parser tolerates the absence of its file or directory and returns an
empty result; only a malformed file that is present is an error.
"""
