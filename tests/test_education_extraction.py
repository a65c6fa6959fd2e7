"""Tests for education extraction."""

from cvparse.core.education_parser import find_gpa, has_degree_keyword, parse_education


def test_degree_line_with_year_range():
    lines = [
        "Bachelor of Science 2015 - 2019",
        "Massachusetts Institute of Technology",
        "Computer Science",
        "GPA: 3.8/4.0",
    ]
    entries = parse_education(lines)

    assert len(entries) == 1
    edu = entries[0]
    assert edu.degree == "Bachelor of Science"
    assert edu.institution == "Massachusetts Institute of Technology"
    assert edu.field == "Computer Science"
    assert edu.start_date == "2015"
    assert edu.end_date == "2019"
    assert edu.gpa == "3.8/4.0"


def test_institution_line_without_degree_keyword():
    entries = parse_education(["Lycée Henri IV  2010", "Baccalauréat S"])

    assert len(entries) == 1
    assert entries[0].institution == "Lycée Henri IV"
    assert entries[0].degree == ""
    assert entries[0].field == "Baccalauréat S"


def test_single_year_is_graduation_year():
    entries = parse_education(["MSc Data Science, 2021"])
    assert entries[0].start_date == ""
    assert entries[0].end_date == "2021"
    assert entries[0].degree == "MSc Data Science"


def test_ongoing_studies():
    entries = parse_education(["PhD Candidate | 2021 – Present", "ETH Zurich"])
    assert entries[0].start_date == "2021"
    assert entries[0].end_date == "Present"
    assert entries[0].institution == "ETH Zurich"


def test_month_year_range():
    entries = parse_education(["Diploma in Design  Sep 2012 - Jun 2014"])
    assert entries[0].start_date == "Sep 2012"
    assert entries[0].end_date == "Jun 2014"
    assert entries[0].degree == "Diploma in Design"


def test_multiple_entries():
    lines = [
        "MBA 2018 - 2020",
        "Wharton School",
        "BSc Economics 2012 - 2015",
        "London School of Economics",
        "Econometrics",
        "Extra line beyond institution and field",
    ]
    entries = parse_education(lines)

    assert len(entries) == 2
    assert entries[0].institution == "Wharton School"
    assert entries[1].institution == "London School of Economics"
    assert entries[1].field == "Econometrics"


def test_lines_before_first_year_are_discarded():
    entries = parse_education(["Dean's list", "MSc Physics 2020"])
    assert len(entries) == 1
    assert entries[0].institution == ""


def test_no_year_falls_back_to_first_lines():
    entries = parse_education(["Stanford University", "Computer Science", "Honours thesis"])

    assert len(entries) == 1
    assert entries[0].institution == "Stanford University"
    assert entries[0].field == "Computer Science"
    assert (entries[0].start_date, entries[0].end_date) == ("", "")


def test_empty_education_gives_empty_list():
    assert parse_education([]) == []
    assert parse_education(["", "   "]) == []


def test_gpa_on_anchor_line_opens_entry():
    entries = parse_education(["BSc Computer Science, GPA 3.8, 2019", "MIT"])

    assert len(entries) == 1
    edu = entries[0]
    assert edu.degree == "BSc Computer Science"
    assert edu.gpa == "3.8"
    assert edu.end_date == "2019"
    assert edu.institution == "MIT"


def test_gpa_on_later_anchor_stays_with_its_entry():
    lines = [
        "MSc Physics 2020 - 2022",
        "ETH",
        "BSc Physics 2016 - 2019 GPA 3.9",
        "EPFL",
    ]
    entries = parse_education(lines)

    assert len(entries) == 2
    msc, bsc = entries
    assert (msc.degree, msc.institution, msc.field, msc.gpa) == ("MSc Physics", "ETH", "", "")
    assert (bsc.degree, bsc.institution, bsc.gpa) == ("BSc Physics", "EPFL", "3.9")
    assert (bsc.start_date, bsc.end_date) == ("2016", "2019")


def test_degree_keywords():
    assert has_degree_keyword("BSc Computer Science")
    assert has_degree_keyword("Stanford University")
    assert has_degree_keyword("Ph.D. in Biology")
    assert not has_degree_keyword("Lycée Henri IV")
    assert not has_degree_keyword("Absc Corp")


def test_find_gpa():
    assert find_gpa("GPA: 3.8/4.0") == "3.8/4.0"
    assert find_gpa("Cumulative GPA 3,5") == "3,5"
    assert find_gpa("Graduated with honours") is None
