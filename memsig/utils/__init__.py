"""Filesystem and logging helpers."""
