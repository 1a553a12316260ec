"""CSV export of saved papers."""

import csv
import io
from collections.abc import Iterable

from ..models_db import Paper

CSV_FILENAME = "papers_export.csv"

CSV_HEADERS = [
    "DOI",
    "Title",
    "Author",
    "Publication Title",
    "PublicationDate",
    "URL",
    "Keywords",
    "Abstract",
    "Publisher",
    "Field of Study",
    "IsDataFusionPaper",
    "DataFusionClassificationReason",
]


def _paper_row(paper: Paper) -> list[str]:
    return [
        paper.doi or "",
        paper.title or "",
        paper.author or "",
        paper.publication_title or "",
        paper.publication_date or "",
        paper.url or "",
        paper.keywords or "",
        paper.abstract or "",
        paper.publisher or "",
        paper.field_of_study or "",
        "TRUE" if paper.is_data_fusion_paper else "FALSE",
        paper.data_fusion_classification_reason or "",
    ]


def export_papers_csv(papers: Iterable[Paper]) -> str:
    """
    Render papers as CSV text.

    The header line is unquoted; every data cell is double-quoted with
    embedded quotes doubled. Lines are joined with "\\n" and there is no
    trailing newline.
    """
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\n").writerow(CSV_HEADERS)

    rows = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for paper in papers:
        rows.writerow(_paper_row(paper))

    # Quoted cells end with '"', so only the final line terminator is removed
    return buffer.getvalue().rstrip("\n")
