# tests/test_page_loader.py

import pytest

from planqa.domain.models import Page
from planqa.infrastructure.page_loader import PageLoader


def test_form_feeds_separate_pages():
    pages = PageLoader().split_pages("First page.\fSecond page.\fThird page.")

    assert pages == [
        Page(page_number=1, text="First page."),
        Page(page_number=2, text="Second page."),
        Page(page_number=3, text="Third page."),
    ]


def test_blank_pages_are_skipped_but_numbering_is_kept():
    pages = PageLoader().split_pages("Cover.\f   \fBenefits.")
    assert [p.page_number for p in pages] == [1, 3]


def test_text_without_form_feed_is_one_page():
    pages = PageLoader().split_pages("Just   one\n\n\n\npage.")
    assert pages == [Page(page_number=1, text="Just one\n\npage.")]


def test_load_file_ignores_unsupported_types(tmp_path):
    pdf = tmp_path / "plan.pdf"
    pdf.write_bytes(b"%PDF-1.4")
    assert PageLoader().load_file(pdf) == []


def test_load_directory_maps_filenames_to_pages(tmp_path):
    (tmp_path / "plan.txt").write_text("Deductible info.\fCopay info.", encoding="utf-8")
    (tmp_path / "notes.md").write_text("# Notes", encoding="utf-8")
    (tmp_path / "image.png").write_bytes(b"\x89PNG")

    documents = PageLoader().load_directory(str(tmp_path))

    assert sorted(documents) == ["notes.md", "plan.txt"]
    assert len(documents["plan.txt"]) == 2


def test_missing_directory_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        PageLoader().load_directory(str(tmp_path / "missing"))


def test_same_named_files_in_subdirectories_stay_distinct(tmp_path):
    (tmp_path / "2024").mkdir()
    (tmp_path / "2025").mkdir()
    (tmp_path / "2024" / "plan.txt").write_text("Old copay is $30.", encoding="utf-8")
    (tmp_path / "2025" / "plan.txt").write_text("New copay is $40.", encoding="utf-8")

    documents = PageLoader().load_directory(str(tmp_path))

    assert sorted(documents) == ["2024/plan.txt", "2025/plan.txt"]
    assert documents["2025/plan.txt"][0].text == "New copay is $40."


def test_excluded_directory_is_not_walked(tmp_path):
    (tmp_path / "plan.txt").write_text("Deductible info.", encoding="utf-8")
    store_dir = tmp_path / "chroma_db"
    store_dir.mkdir()
    (store_dir / "notes.txt").write_text("store internals", encoding="utf-8")

    documents = PageLoader().load_directory(str(tmp_path), exclude=[str(store_dir)])

    assert sorted(documents) == ["plan.txt"]
