import xml.etree.ElementTree as ET
import pytest
from csv_lookup.core.errors import ValidationError
from csv_lookup.core.query.models import QueryCondition
from csv_lookup.core.source import SourceFile
from csv_lookup.reports.html import HtmlReport
from csv_lookup.reports.registry import ReportRegistry
from csv_lookup.reports.text import TextReport
from csv_lookup.reports.xml import NAMESPACE, XmlReport

CARS_CSV = "name,stock,sold\nVolvo,22,22\nBMW,15,13\nFord,17,22\nLand Rover,17,15\n"
NS = {"r": NAMESPACE}


@pytest.fixture
def search(tmp_path):
    """(search path, conditions, results) for a search over two files, one without matches."""
    data = tmp_path / "data"
    data.mkdir()
    (data / "cars.csv").write_text(CARS_CSV, encoding="utf-8")
    (data / "empty.csv").write_text("name,stock\nSaab,1\n", encoding="utf-8")

    conditions = [
        QueryCondition("stock", "greater", 15),
        QueryCondition("stock", "between_inclusive", ("0", "100")),
    ]
    results = []
    for name in ("cars.csv", "empty.csv"):
        with SourceFile(data / name) as source:
            results.append(source.find_by(conditions))
    return str(data), conditions, results


def test_registry_formats():
    registry = ReportRegistry()
    assert registry.formats() == ["text", "xml", "html"]
    assert registry.get("XML") is XmlReport
    assert registry.get("pdf") is None


def test_text_report_to_string(search):
    text = TextReport(*search).render("")

    assert "Search result report" in text
    assert f"Search path: {search[0]}" in text
    assert 'Column: "stock", Type: "greater",           Value: "15"' in text
    assert 'Lower value: "0"' in text
    assert 'Upper value: "100"' in text
    assert "Total matches: 3" in text
    assert 'Line number: 2, "Volvo","22","22"' in text
    assert 'Line number: 5, "Land Rover","17","15"' in text
    assert "Headers: name, stock, sold" in text
    assert "empty.csv" not in text


def test_text_report_no_results(tmp_path):
    path = tmp_path / "a.csv"
    path.write_text("x,y\n1,2\n", encoding="utf-8")
    conditions = [QueryCondition(None, "matches", "3")]
    with SourceFile(path, has_headers=False) as source:
        results = [source.find_by(conditions)]

    assert "No results found!" in TextReport(str(path), conditions, results).render("")


def test_text_report_to_file(search, tmp_path):
    target = tmp_path / "out" / "nested" / "report.txt"
    assert TextReport(*search).render(str(target)) is None
    assert "Land Rover" in target.read_text(encoding="utf-8")


def test_xml_report(search, tmp_path):
    target = tmp_path / "out" / "report.xml"
    assert XmlReport(*search).render(str(target)) is None

    root = ET.parse(target).getroot()
    assert root.tag == f"{{{NAMESPACE}}}csv-lookup"
    assert root.find("r:search/r:path", NS).text == search[0]

    queries = root.findall("r:search/r:queries/r:query", NS)
    assert queries[0].attrib == {"column": "stock", "type": "greater", "value": "15"}
    assert queries[1].get("value-lower") == "0"
    assert queries[1].get("value-upper") == "100"
    assert queries[1].get("value") is None

    files = root.findall("r:results/r:file", NS)
    assert len(files) == 1
    assert files[0].get("path").endswith("cars.csv")
    assert files[0].get("delimiter") == ","
    assert files[0].get("enclosure") == '"'
    assert files[0].get("escape") == "\\"
    assert files[0].find("r:headers", NS).text == "name, stock, sold"

    lines = files[0].findall("r:found-lines/r:line", NS)
    assert [line.get("number") for line in lines] == ["2", "4", "5"]
    assert lines[0].text == '"Volvo","22","22"'


def test_xml_report_to_string(search):
    text = XmlReport(*search).render("")
    assert text.startswith("<?xml version='1.0' encoding='UTF-8'?>")
    assert 'xmlns="https://github.com/thor-juhasz/csv-lookup"' in text
    assert "\n  <search>" in text


def test_html_report(search, tmp_path):
    target = tmp_path / "site"
    assert HtmlReport(*search).render(str(target)) is None

    dashboard = (target / "dashboard.html").read_text(encoding="utf-8")
    assert 'href="files/cars.csv.html"' in dashboard
    assert 'href="_css/report.css"' in dashboard
    assert "<td>3</td>" in dashboard
    assert "0 &hellip; 100" in dashboard

    page = (target / "files" / "cars.csv.html").read_text(encoding="utf-8")
    assert "<td>Land Rover</td>" in page
    assert "<th>stock</th>" in page
    assert 'href="../dashboard.html"' in page
    assert 'href="../_css/report.css"' in page

    empty_page = (target / "files" / "empty.csv.html").read_text(encoding="utf-8")
    assert "No results found!" in empty_page
    assert (target / "_css" / "report.css").exists()


def test_html_report_escapes_cell_values(tmp_path):
    path = tmp_path / "xss.csv"
    path.write_text("name,note\na,<b>bold</b>\n", encoding="utf-8")
    conditions = [QueryCondition("note", "contains", "<b>")]
    with SourceFile(path, has_headers=True) as source:
        results = [source.find_by(conditions)]

    HtmlReport(str(path), conditions, results).render(str(tmp_path / "site"))
    page = (tmp_path / "site" / "files" / "xss.csv.html").read_text(encoding="utf-8")
    assert "&lt;b&gt;bold&lt;/b&gt;" in page
    assert "<b>bold</b>" not in page


def test_html_report_needs_output(search):
    with pytest.raises(ValidationError):
        HtmlReport(*search).render("")


def test_html_breadcrumbs(search):
    crumbs = HtmlReport.breadcrumbs(search[2][0])
    assert [c.name for c in crumbs] == ["Dashboard", "cars.csv"]
    assert crumbs[-1].active
    assert HtmlReport.breadcrumbs()[0].link == "dashboard.html"
