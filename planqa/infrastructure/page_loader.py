# planqa/infrastructure/page_loader.py

import re
from typing import Dict, List, Sequence
from pathlib import Path

from planqa.domain.models import Page


SUPPORTED_EXTENSIONS = {".txt", ".md"}

# Text exported from PDFs marks page breaks with a form feed
PAGE_BREAK = "\f"


class PageLoader:
    """
    Reads already-extracted document text and splits it into pages.

    PDF-to-text extraction happens upstream; this loader only understands
    plain text where pages are separated by form feeds. A file without any
    form feed is treated as a single page.
    """

    def load_directory(
        self,
        directory_path: str,
        exclude: Sequence[str] = (),
    ) -> Dict[str, List[Page]]:
        """
        Return { relative path: pages } for every supported file, sorted by path.

        Documents are keyed by their POSIX path relative to directory_path, so
        same-named files in different subdirectories stay distinct. Anything
        under one of the `exclude` directories (e.g. the vector store's
        persist directory) is skipped.
        """
        data_dir = Path(directory_path)
        if not data_dir.exists():
            raise FileNotFoundError(f"Data directory not found: {directory_path}")

        excluded = [Path(path).resolve() for path in exclude]

        documents: Dict[str, List[Page]] = {}
        for file_path in sorted(data_dir.rglob("*")):
            if _is_under_any(file_path.resolve(), excluded):
                continue
            pages = self.load_file(file_path)
            if pages:
                document_id = file_path.relative_to(data_dir).as_posix()
                documents[document_id] = pages
                print(f"[PageLoader] Loaded {len(pages)} pages from {document_id}")

        print(f"[PageLoader] Total documents loaded: {len(documents)}")
        return documents

    def load_file(self, file_path: Path) -> List[Page]:
        """
        Load a single .txt/.md file.
        Returns an empty list if the file type is unsupported.
        """
        if not file_path.is_file() or file_path.suffix.lower() not in SUPPORTED_EXTENSIONS:
            return []
        text = file_path.read_text(encoding="utf-8", errors="ignore")
        return self.split_pages(text)

    def split_pages(self, text: str) -> List[Page]:
        pages: List[Page] = []
        for page_number, raw_page in enumerate(text.split(PAGE_BREAK), start=1):
            cleaned = self._clean_text(raw_page)
            if cleaned:
                pages.append(Page(page_number=page_number, text=cleaned))
        return pages

    @staticmethod
    def _clean_text(text: str) -> str:
        """Normalize whitespace; newlines are kept as sentence boundaries."""
        text = text.replace("\r\n", "\n")
        text = re.sub(r"[ \t]{2,}", " ", text)
        text = re.sub(r"\n{3,}", "\n\n", text)
        return text.strip()


def _is_under_any(path: Path, directories: List[Path]) -> bool:
    return any(path == directory or directory in path.parents for directory in directories)
