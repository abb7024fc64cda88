"""Command-line interface for inspecting saved outcome reports."""
