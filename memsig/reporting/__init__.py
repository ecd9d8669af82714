"""Report files and terminal output."""

from .console import comparison_table, group_table, print_groups, print_signatures, signature_table
from .tables import (
    render_comparison_tables,
    render_details,
    render_groupconfig,
    render_groupstats,
    render_info,
    render_sigstats,
    signature_filename,
    write_comparison_tables,
    write_group_signatures,
    write_version_signatures,
)

__all__ = [
    "comparison_table",
    "group_table",
    "print_groups",
    "print_signatures",
    "render_comparison_tables",
    "render_details",
    "render_groupconfig",
    "render_groupstats",
    "render_info",
    "render_sigstats",
    "signature_filename",
    "signature_table",
    "write_comparison_tables",
    "write_group_signatures",
    "write_version_signatures",
]
