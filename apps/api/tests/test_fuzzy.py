import pytest

from notelens_api.fuzzy import matches


@pytest.mark.parametrize(
    ("query", "candidate", "expected"),
    [
        ("test", "folder/Test-File.md", True),
        ("TEST", "test-note.md", True),
        ("folder/t", "folder/test.md", True),
        ("nope", "folder/test.md", False),
        ("", "anything.md", False),
        ("", "", False),
    ],
)
def test_matches(query: str, candidate: str, expected: bool) -> None:
    assert matches(query, candidate) is expected
