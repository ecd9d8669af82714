"""
Report files for signatures, version comparisons and group configurations.

All tables use ``;`` as field separator and are written atomically: a
report only appears under its final name after it has been written in full.
"""

import logging
from pathlib import Path
from typing import Dict, List, Sequence, Union

from ..core.comparison import ComparisonMatrix
from ..core.errors import EmptyInputError
from ..core.product import Product
from ..core.signature import Signature
from ..grouping.base import GroupAssignment
from ..utils.files import atomic_write_text

logger = logging.getLogger(__name__)

SEP = ";"
DETAILS_SEPARATOR = "---------------"

SIGSTATS_COLUMNS = ["version", "binSize", "sigSize", "all01", "intDup", "dupsOtherVersions"]
GROUPCONFIG_COLUMNS = ["group", "avgSigSize", "versions"]
GROUPSTATS_COLUMNS = [
    "group", "binSize", "sigSize", "all01", "intDup", "dupsOtherVersions",
    "notMatchingInGroup", "avgDist", "lowHighDist", "skippedVer",
]

PathLike = Union[str, Path]


def _row(fields: Sequence[object]) -> str:
    return SEP.join(str(f) for f in fields) + "\n"


def signature_filename(product_name: str, signature: Signature) -> str:
    """``<name>-<v1>+<v2>....sig``"""
    return f"{product_name}-{signature.label('+')}.sig"


# ----------------------------------------------------------------------
# Version signatures
# ----------------------------------------------------------------------

def render_info(product: Product, page_size: int) -> str:
    return f"Software: {product.name}\nPage size: {page_size}\n"


def render_details(signatures: Sequence[Signature]) -> str:
    lines: List[str] = []
    for sig in signatures:
        lines.append(f"Version: {sig.label()}\nPages:\n")
        for part_name, page_number in sig.page_details():
            lines.append(f"Section: {part_name}; page: {page_number}\n")
        lines.append(DETAILS_SEPARATOR + "\n")
    return "".join(lines)


def render_sigstats(signatures: Sequence[Signature]) -> str:
    lines = [_row(SIGSTATS_COLUMNS)]
    for sig in signatures:
        version = sig.primary_version
        lines.append(_row([
            sig.label(),
            version.number_of_pages(sig.page_size),
            sig.number_of_pages(),
            sig.all01_count,
            sig.internal_duplicate_count,
            sig.other_version_duplicate_count,
        ]))
    return "".join(lines)


def write_version_signatures(
    product: Product,
    signatures: Sequence[Signature],
    outdir: PathLike,
    page_size: int,
) -> List[Path]:
    """
    Write per-version signature files and their reports.

    Produces one ``.sig`` file per signature plus ``info.txt``,
    ``details.txt`` and ``sigstats.csv``.

    Returns:
        Paths of the written signature files

    Raises:
        EmptyInputError: if ``signatures`` is empty
    """
    if not signatures:
        raise EmptyInputError(
            f"No signatures generated for {product.name}; check the software path"
        )
    outdir = Path(outdir)

    written = [sig.write_to_file(outdir / signature_filename(product.name, sig))
               for sig in signatures]
    atomic_write_text(outdir / "info.txt", render_info(product, page_size))
    atomic_write_text(outdir / "details.txt", render_details(signatures))
    atomic_write_text(outdir / "sigstats.csv", render_sigstats(signatures))

    logger.info("Wrote %d version signatures to %s", len(written), outdir)
    return written


# ----------------------------------------------------------------------
# Pairwise comparison
# ----------------------------------------------------------------------

def render_comparison_tables(
    product: Product,
    matrix: ComparisonMatrix,
    page_size: int,
) -> Dict[str, str]:
    """
    Render ``comp.csv``, ``dupl.csv`` and ``dupl-rel.csv``.

    Rows and columns follow canonical version order. Self comparisons are
    left empty in ``comp.csv``; in the match tables they count every page
    as matching. ``dupl-rel.csv`` has no header row.
    """
    versions = product.versions
    names = [str(v) for v in versions]

    comp_header = ["", "#pages"]
    for name in names:
        comp_header.extend([f"{name}-uniq", f"{name}-dupl", f"{name}-intdup"])
    dupl_header = ["", "#pages"] + names

    comp = [_row(comp_header)]
    dupl = [_row(dupl_header)]
    dupl_rel: List[str] = []

    for v in versions:
        num_pages = v.number_of_pages(page_size)
        comp_fields: List[object] = [v, num_pages]
        dupl_fields: List[object] = [v, num_pages]
        rel_fields: List[object] = [v, num_pages]

        for u in versions:
            result = matrix[v][u]
            if result is None:
                comp_fields.extend(["", "", ""])
                dupl_fields.append(u.number_of_pages(page_size))
                rel_fields.append(100)
            else:
                comp_fields.extend([result.uniques, result.matches, result.internal_duplicates])
                dupl_fields.append(result.matches)
                rel = result.matches / num_pages * 100 if num_pages else 0.0
                rel_fields.append(float(rel))

        comp.append(_row(comp_fields))
        dupl.append(_row(dupl_fields))
        dupl_rel.append(_row(rel_fields))

    return {
        "comp.csv": "".join(comp),
        "dupl.csv": "".join(dupl),
        "dupl-rel.csv": "".join(dupl_rel),
    }


def write_comparison_tables(
    product: Product,
    matrix: ComparisonMatrix,
    outdir: PathLike,
    page_size: int,
) -> List[Path]:
    outdir = Path(outdir)
    written = []
    for filename, content in render_comparison_tables(product, matrix, page_size).items():
        path = outdir / filename
        atomic_write_text(path, content)
        written.append(path)
    logger.info("Wrote comparison tables to %s", outdir)
    return written


# ----------------------------------------------------------------------
# Group configurations
# ----------------------------------------------------------------------

def render_groupconfig(assignments: Sequence[GroupAssignment]) -> str:
    avg = sum(a.signature_size for a in assignments) / len(assignments) if assignments else 0.0
    lines = [_row(GROUPCONFIG_COLUMNS)]
    for number, assignment in enumerate(assignments, start=1):
        lines.append(_row([number, avg, ",".join(assignment.group.version_strings())]))
    return "".join(lines)


def render_groupstats(assignments: Sequence[GroupAssignment]) -> str:
    lines = [_row(GROUPSTATS_COLUMNS)]
    for assignment in assignments:
        group, sig = assignment.group, assignment.signature
        lines.append(_row([
            ",".join(group.version_strings()),
            sig.primary_version.number_of_pages(sig.page_size),
            sig.number_of_pages(),
            sig.all01_count,
            sig.internal_duplicate_count,
            sig.other_version_duplicate_count,
            sig.not_matching_in_group_count,
            group.avg_version_distance(),
            group.max_version_distance(),
            group.skipped_version_count(),
        ]))
    return "".join(lines)


def write_group_signatures(
    product: Product,
    assignments: Sequence[GroupAssignment],
    outdir: PathLike,
) -> List[Path]:
    """
    Write one signature file per group plus ``groupconfig.csv`` and
    ``groupstats.csv``.

    Raises:
        EmptyInputError: if there are no groups
    """
    if not assignments:
        raise EmptyInputError(f"No groups found for {product.name}")
    outdir = Path(outdir)

    written = [
        a.signature.write_to_file(outdir / signature_filename(product.name, a.signature))
        for a in assignments
    ]
    atomic_write_text(outdir / "groupconfig.csv", render_groupconfig(assignments))
    atomic_write_text(outdir / "groupstats.csv", render_groupstats(assignments))

    logger.info("Wrote %d group signatures to %s", len(written), outdir)
    return written
