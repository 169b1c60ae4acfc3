"""Unit tests for the file name heuristic used by the OneDrive import."""

import pytest

from services.filename_parser import ParsedFileName, get_file_type, parse_file_name


@pytest.mark.parametrize(
    "file_name, client_name, project_name",
    [
        ("Invoice_Acme_Roof_2024.pdf", "Acme", "Roof"),
        ("Acme - Roof Replacement.pdf", "Acme", "Roof Replacement"),
        ("Acme Roof", "Acme Roof", "Roof"),
        ("report.pdf", None, None),
    ],
)
def test_parse_documented_examples(file_name, client_name, project_name):
    """Test: The documented examples parse to the expected names."""
    assert parse_file_name(file_name) == ParsedFileName(client_name, project_name)


def test_prefix_match_is_case_insensitive():
    result = parse_file_name("PROPOSAL-Globex-Warehouse.docx")
    assert result.client_name == "Globex"
    assert result.project_name == "Warehouse"


def test_prefixed_name_with_too_few_tokens_is_absent():
    """Test: "invoice_acme" has only two tokens, so nothing is parsed."""
    result = parse_file_name("invoice_acme.pdf")
    assert result == ParsedFileName(None, None)
    assert not result.is_complete


def test_dash_is_preferred_over_underscore():
    """Test: With both separators present, the name is split on '-' only."""
    result = parse_file_name("Acme_Corp-Kitchen_Remodel.pdf")
    assert result.client_name == "Acme_Corp"
    assert result.project_name == "Kitchen_Remodel"


def test_underscore_remaining_tokens_are_joined_with_spaces():
    result = parse_file_name("Acme_Kitchen_Remodel.xlsx")
    assert result.client_name == "Acme"
    assert result.project_name == "Kitchen Remodel"


def test_whitespace_split_uses_remaining_words_as_project():
    result = parse_file_name("Acme Corp Kitchen Remodel.pdf")
    assert result.client_name == "Acme Corp"
    assert result.project_name == "Kitchen Remodel"


def test_empty_side_is_normalized_to_absent():
    """Test: A trailing separator leaves the project name absent, not empty."""
    result = parse_file_name("Acme-.pdf")
    assert result.client_name == "Acme"
    assert result.project_name is None
    assert not result.is_complete


def test_only_last_extension_is_stripped():
    result = parse_file_name("Acme - Roof.v2.pdf")
    assert result.client_name == "Acme"
    assert result.project_name == "Roof.v2"


def test_parsing_is_deterministic():
    assert parse_file_name("Acme - Roof.pdf") == parse_file_name("Acme - Roof.pdf")


@pytest.mark.parametrize(
    "file_name, expected",
    [
        ("plan.PDF", "PDF Document"),
        ("notes.docx", "Word Document"),
        ("budget.xlsx", "Excel Spreadsheet"),
        ("site.jpeg", "Image"),
        ("bundle.zip", "Archive"),
        ("model.dwg", "Unknown"),
    ],
)
def test_get_file_type(file_name, expected):
    assert get_file_type(file_name) == expected
