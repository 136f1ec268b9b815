"""CLI subcommands for peerbump."""
