"""Tests for duplicate / new-folder naming and name validation."""

import pytest

from tierfinder.utils.naming import (
    InvalidNameError,
    duplicate_name,
    split_extension,
    untitled_folder_name,
    validate_name,
)


class TestDuplicateName:
    def test_first_copy(self):
        assert duplicate_name("report.txt", ["report.txt"]) == "report copy.txt"

    def test_second_copy(self):
        existing = ["report.txt", "report copy.txt"]
        assert duplicate_name("report.txt", existing) == "report copy 2.txt"

    def test_counts_numbered_copies(self):
        existing = ["report.txt", "report copy.txt", "report copy 2.txt"]
        assert duplicate_name("report.txt", existing) == "report copy 3.txt"

    def test_skips_taken_number(self):
        existing = ["report.txt", "report copy 2.txt"]
        assert duplicate_name("report.txt", existing) == "report copy 3.txt"

    def test_other_files_not_counted(self):
        existing = ["report.txt", "report copy.md", "notes copy.txt"]
        assert duplicate_name("report.txt", existing) == "report copy.txt"

    def test_no_extension(self):
        assert duplicate_name("Makefile", []) == "Makefile copy"

    def test_split_at_last_dot(self):
        assert duplicate_name("archive.tar.gz", []) == "archive.tar copy.gz"


def test_split_extension_leading_dot():
    assert split_extension(".bashrc") == (".bashrc", "")
    assert split_extension("photo.jpg") == ("photo", ".jpg")


class TestUntitledFolder:
    def test_first(self):
        assert untitled_folder_name([]) == "untitled folder"

    def test_case_insensitive(self):
        assert untitled_folder_name(["Untitled Folder"]) == "untitled folder 2"

    def test_counts_up(self):
        assert untitled_folder_name(["untitled folder", "untitled folder 2"]) == "untitled folder 3"


class TestValidateName:
    def test_trims(self):
        assert validate_name("  ok.txt ") == "ok.txt"

    @pytest.mark.parametrize("name", ["", "   ", "a/b", "a\\b", ".", ".."])
    def test_rejects(self, name):
        with pytest.raises(InvalidNameError):
            validate_name(name)
