import threading

import pytest

from zone_clean.filters import ExtensionFilter, normalize_extension


@pytest.mark.parametrize(
    "raw, expected",
    [
        (".pdf", ".pdf"),
        ("PDF", ".pdf"),
        ("  .Docx ", ".docx"),
        ("", ""),
        ("   ", ""),
    ],
)
def test_normalize_extension(raw, expected):
    assert normalize_extension(raw) == expected


def test_empty_filter_allows_everything():
    flt = ExtensionFilter()
    flt.set_allowed([])
    assert flt.is_allowed("report.pdf")
    assert flt.is_allowed("archive.tar.gz")
    assert flt.is_allowed("README")
    assert not flt.active


def test_filter_is_case_insensitive():
    flt = ExtensionFilter([".pdf"])
    assert flt.is_allowed("a.PDF")
    assert flt.is_allowed(r"C:\Users\me\Downloads\a.pdf")
    assert not flt.is_allowed("a.txt")


def test_extensionless_file_excluded_when_filter_active():
    flt = ExtensionFilter([".pdf"])
    assert not flt.is_allowed("Makefile")


def test_explicit_empty_entry_admits_extensionless_files():
    flt = ExtensionFilter([".pdf", ""])
    assert flt.is_allowed("Makefile")
    assert not flt.is_allowed("a.txt")


def test_values_without_dot_are_normalised():
    flt = ExtensionFilter(["pdf", "DOCX"])
    assert flt.allowed == [".docx", ".pdf"]
    assert flt.is_allowed("letter.docx")


def test_set_allowed_replaces_previous_list():
    flt = ExtensionFilter([".pdf"])
    flt.set_allowed([".zip"])
    assert not flt.is_allowed("a.pdf")
    assert flt.is_allowed("a.zip")
    flt.set_allowed(None)
    assert flt.is_allowed("a.pdf")


def test_readers_see_whole_snapshots():
    flt = ExtensionFilter([".a", ".b"])
    stop = threading.Event()
    torn = []

    def writer():
        while not stop.is_set():
            flt.set_allowed([".a", ".b"])
            flt.set_allowed([".c", ".d"])

    def reader():
        for _ in range(2000):
            snapshot = set(flt.allowed)
            if snapshot not in ({".a", ".b"}, {".c", ".d"}):
                torn.append(snapshot)

    w = threading.Thread(target=writer)
    w.start()
    try:
        reader()
    finally:
        stop.set()
        w.join()
    assert torn == []


def test_whitespace_entries_do_not_activate_the_filter():
    flt = ExtensionFilter([" ", "\t"])
    assert not flt.active
    assert flt.is_allowed("report.pdf")


def test_whitespace_entry_is_dropped_from_a_real_list():
    flt = ExtensionFilter([".pdf", "   "])
    assert flt.allowed == [".pdf"]
    assert not flt.is_allowed("Makefile")
