"""Tests for section header detection and line bucketing."""

import pytest

from cvparse.core.section_segmenter import (
    detect_section,
    looks_like_header,
    segment_sections,
    split_inline_header,
)


class TestDetectSection:

    @pytest.mark.parametrize("line,expected", [
        ("EXPERIENCE", "experience"),
        ("Work Experience", "experience"),
        ("Employment History", "experience"),
        ("Education", "education"),
        ("ACADEMIC BACKGROUND", "education"),
        ("Technical Skills", "skills"),
        ("Programming Languages", "skills"),
        ("Languages", "languages"),
        ("Professional Summary", "summary"),
        ("Profile", "summary"),
        ("Certifications", "other"),
        ("Projects", "other"),
    ])
    def test_headers(self, line, expected):
        assert detect_section(line) == expected

    def test_long_sentence_is_not_a_header(self):
        assert detect_section("Built systems with ten years of experience in fintech") is None

    def test_long_all_caps_line_is_a_header(self):
        assert detect_section("PROFESSIONAL EXPERIENCE AND SELECTED ENGAGEMENTS ABROAD") == "experience"

    def test_short_line_without_keyword(self):
        assert detect_section("Jane Doe") is None

    def test_contact_line_is_never_a_header(self):
        assert not looks_like_header("linkedin.com/in/profile")
        assert detect_section("jane@profile.io") is None


class TestInlineHeader:

    def test_inline_content_is_kept(self):
        assert split_inline_header("Skills: Python, Go, SQL") == ("skills", "Python, Go, SQL")

    def test_inline_header_without_content(self):
        assert split_inline_header("Languages:") == ("languages", "")

    def test_contact_value_is_not_inline_header(self):
        assert split_inline_header("Profile: linkedin.com/in/jdoe") is None

    def test_non_section_label(self):
        assert split_inline_header("Phone: 555 123 4567") is None

    def test_label_containing_a_keyword_is_content(self):
        assert split_inline_header("Tools used in this role: Python") is None
        assert split_inline_header("Technologies: Python, AWS") is None


def test_per_job_technologies_line_stays_in_experience():
    lines = [
        "EXPERIENCE",
        "Engineer | Acme | 2020 - Present",
        "- Built APIs",
        "Technologies: Python, AWS",
        "Developer | Globex | 2017 - 2019",
        "- Wrote code",
    ]
    sections = segment_sections(lines)

    assert sections["skills"] == []
    assert sections["experience"] == lines[1:]


def test_header_lines_are_excluded_from_buckets():
    sections = segment_sections(["Jane Doe", "EXPERIENCE", "Built systems at Acme"])

    assert sections["header"] == ["Jane Doe"]
    assert sections["experience"] == ["Built systems at Acme"]
    for name, lines in sections.items():
        assert "EXPERIENCE" not in lines, f"Header line leaked into bucket {name}"


def test_all_buckets_present_and_order_kept():
    lines = [
        "Jane Doe",
        "Data Engineer",
        "SUMMARY",
        "Pipelines at scale.",
        "Skills: Python, Spark",
        "Airflow",
        "Languages",
        "English, German",
        "Interests",
        "Climbing",
    ]
    sections = segment_sections(lines)

    assert set(sections) == {"header", "summary", "experience", "education", "skills", "languages", "other"}
    assert sections["header"] == ["Jane Doe", "Data Engineer"]
    assert sections["summary"] == ["Pipelines at scale."]
    assert sections["skills"] == ["Python, Spark", "Airflow"]
    assert sections["languages"] == ["English, German"]
    assert sections["other"] == ["Climbing"]
    assert sections["experience"] == []
    assert sections["education"] == []


def test_blank_lines_are_skipped():
    sections = segment_sections(["", "   ", "Jane Doe"])
    assert sections["header"] == ["Jane Doe"]
