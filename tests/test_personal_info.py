"""Tests for name, title, contact and location extraction."""

import pytest

from cvparse.core.personal_info import (
    extract_location_from_line,
    extract_personal_info,
    find_email,
    find_github,
    find_linkedin,
    find_phone,
    is_all_caps_short,
    is_contact_only_line,
    looks_like_name,
    resolve_name,
)
from cvparse.core.section_segmenter import empty_section_map


class TestNameHeuristics:

    @pytest.mark.parametrize("line", ["Alex Chen", "Mary-Jane O'Neil", "Jean Paul de Vries"])
    def test_names(self, line):
        assert looks_like_name(line)

    @pytest.mark.parametrize("line", [
        "alex.chen@example.com",
        "Alex",
        "Curriculum Vitae",
        "Resume Alex Chen",
        "John Smith 2020",
        "Work Experience",
        "One Two Three Four Five",
    ])
    def test_not_names(self, line):
        assert not looks_like_name(line)

    def test_all_caps_short(self):
        assert is_all_caps_short("JOHN A. DOE")
        assert not is_all_caps_short("John Doe")
        assert not is_all_caps_short("ONE TWO THREE FOUR FIVE")

    def test_email_line_is_skipped_for_name(self):
        assert resolve_name(["alex.chen@example.com", "Alex Chen"]) == 1

    def test_all_caps_fallback(self):
        assert resolve_name(["JOHN A. DOE", "jdoe@example.com"]) == 0

    def test_first_non_contact_line_fallback(self):
        assert resolve_name(["jdoe@example.com", "Dr. J. Doe, PhD"]) == 1

    def test_no_candidate(self):
        assert resolve_name(["jdoe@example.com", "+1 555 123 4567"]) is None
        assert resolve_name([]) is None

    def test_name_sharing_a_line_with_contact_details(self):
        assert resolve_name(["Jane Doe | jane@x.com", "Backend Engineer, Payments"]) == 0
        assert resolve_name(["Email: jdoe@example.com", "Jane Doe, PhD (Physics)"]) == 1

    def test_contact_only_lines(self):
        assert is_contact_only_line("jdoe@example.com | +1 555 123 4567")
        assert is_contact_only_line("Tel: (555) 123-4567")
        assert not is_contact_only_line("Jane Doe | jane@x.com")
        assert not is_contact_only_line("Jane Doe")


class TestContactMatchers:

    def test_email(self):
        assert find_email("Contact: jane.doe+cv@mail.example.org today") == "jane.doe+cv@mail.example.org"
        assert find_email("no email here") == ""

    @pytest.mark.parametrize("text,expected", [
        ("Call (555) 123-4567 now", "(555) 123-4567"),
        ("+1 555 123 4567", "+1 555 123 4567"),
        ("Tel: 555-123-4567", "555-123-4567"),
        ("555.123.4567", "555.123.4567"),
    ])
    def test_phone(self, text, expected):
        assert find_phone(text) == expected

    def test_years_are_not_phones(self):
        assert find_phone("Jan 2020 - Present 2018 - 2019") == ""

    def test_profile_urls_are_normalised(self):
        assert find_linkedin("in: www.linkedin.com/in/jdoe/") == "https://www.linkedin.com/in/jdoe"
        assert find_github("see https://github.com/jdoe, thanks") == "https://github.com/jdoe"
        assert find_github("nothing") == ""


class TestLocation:

    @pytest.mark.parametrize("line,expected", [
        ("Austin, TX", "Austin, TX"),
        ("Paris, France | +33 6 12 34 56 78", "Paris, France"),
        ("jane@example.com  |  Raleigh, North Carolina", "Raleigh, North Carolina"),
    ])
    def test_location(self, line, expected):
        assert extract_location_from_line(line) == expected

    def test_not_a_location(self):
        assert extract_location_from_line("jane@example.com") is None
        assert extract_location_from_line("Python, Go") is None


def test_extract_personal_info_full_header():
    sections = empty_section_map()
    sections["header"] = [
        "Jane Doe",
        "Austin, TX",
        "Senior Backend Engineer",
        "jane.doe@example.com | +1 555 123 4567",
    ]
    sections["summary"] = ["Backend engineer.", "Payments and billing."]
    full_text = " ".join(sections["header"] + sections["summary"]) + " github.com/janedoe"

    info = extract_personal_info(sections, full_text)

    assert info.name == "Jane Doe"
    assert info.location == "Austin, TX"
    assert info.title == "Senior Backend Engineer", "Location-only line must not become the title"
    assert info.email == "jane.doe@example.com"
    assert info.phone == "+1 555 123 4567"
    assert info.github == "https://github.com/janedoe"
    assert info.linkedin == ""
    assert info.summary == "Backend engineer. Payments and billing."


def test_extract_personal_info_fallbacks():
    sections = empty_section_map()
    sections["header"] = ["jdoe@example.com"]
    sections["other"] = ["First other line", "Second", "Third", "Fourth"]

    info = extract_personal_info(sections, "jdoe@example.com")

    assert info.name == "Your Name"
    assert info.title == "Your Title"
    assert info.phone == ""
    assert info.location == ""
    assert info.summary == "First other line Second Third"
