import os
import pytest
from csv_lookup.core.errors import AccessError, DetectionError
from csv_lookup.core.lookup_service import LookupService
from csv_lookup.core.options import SearchOptions
from csv_lookup.core.query.models import QueryCondition
from csv_lookup.models.lines import SkipReason

CARS_CSV = "name,stock,sold\nVolvo,22,22\nBMW,15,13\nFord,17,22\nLand Rover,17,15\n"
BIKES_CSV = "name;stock;sold\nVespa;3;1\nDucati;19;4\n"


@pytest.fixture
def data_dir(tmp_path):
    (tmp_path / "b_cars.csv").write_text(CARS_CSV, encoding="utf-8")
    (tmp_path / "a_bikes.CSV").write_text(BIKES_CSV, encoding="utf-8")
    (tmp_path / "notes.txt").write_text("stock,22\n", encoding="utf-8")
    (tmp_path / "archive").mkdir()
    (tmp_path / "archive" / "old.csv").write_text(CARS_CSV, encoding="utf-8")
    return tmp_path


def test_directory_search_in_name_order(data_dir):
    service = LookupService()
    results = service.search([QueryCondition("stock", "greater", 16)], data_dir)

    assert [os.path.basename(r.filename) for r in results] == ["a_bikes.CSV", "b_cars.csv"]
    assert [line.get_column(0) for line in results[0].matches] == ["Ducati"]
    assert results[0].delimiter == ";"
    assert results[1].match_count == 3
    assert service.results is results


def test_skip_reasons(data_dir):
    service = LookupService()
    service.search([QueryCondition(None, "not_empty")], data_dir)

    skipped = {os.path.basename(s.path): s.reason for s in service.skipped_files}
    assert skipped == {"archive": SkipReason.NOT_A_FILE, "notes.txt": SkipReason.NOT_CSV}
    assert SkipReason.NOT_CSV.value == "not_csv_file"


def test_repeated_search_starts_fresh(data_dir):
    service = LookupService()
    condition = QueryCondition("stock", "greater", 16)
    service.search([condition], data_dir)
    results = service.search([condition], data_dir)

    assert len(results) == 2
    assert len(service.results) == 2
    assert len(service.skipped_files) == 2

    service.search([condition], data_dir / "b_cars.csv")
    assert [os.path.basename(r.filename) for r in service.results] == ["b_cars.csv"]
    assert service.skipped_files == []


def test_search_is_not_recursive(data_dir):
    service = LookupService()
    results = service.search([QueryCondition(None, "not_empty")], data_dir)
    assert not any("old.csv" in r.filename for r in results)


def test_custom_extensions(data_dir):
    service = LookupService(extensions=["txt"])
    results = service.search([QueryCondition(None, "contains", "22")], data_dir)
    assert [os.path.basename(r.filename) for r in results] == ["notes.txt"]


@pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="needs POSIX permissions as non-root")
def test_unreadable_file_is_skipped(data_dir):
    locked = data_dir / "c_locked.csv"
    locked.write_text(CARS_CSV, encoding="utf-8")
    locked.chmod(0o000)
    try:
        service = LookupService()
        service.search([QueryCondition(None, "not_empty")], data_dir)
    finally:
        locked.chmod(0o644)
    assert any(s.reason is SkipReason.NOT_READABLE for s in service.skipped_files)


def test_single_file_search(data_dir):
    service = LookupService()
    results = service.search([QueryCondition("name", "contains_loose", "rover")], data_dir / "b_cars.csv")
    assert len(results) == 1
    assert results[0].matches[0].get_column(0) == "Land Rover"
    assert service.skipped_files == []


def test_missing_path(tmp_path):
    with pytest.raises(AccessError):
        LookupService().search([QueryCondition(None, "not_empty")], tmp_path / "nope")


def test_first_failing_file_aborts_batch(data_dir):
    (data_dir / "a_a_broken.csv").write_text("single\ncolumn\n", encoding="utf-8")
    service = LookupService()
    with pytest.raises(DetectionError):
        service.search([QueryCondition(None, "not_empty")], data_dir)
    # a_a_broken.csv sorts first, nothing after it is searched
    assert service.results == []


def test_options_are_passed_to_every_file(data_dir):
    service = LookupService(SearchOptions(delimiter=",", has_headers=False))
    results = service.search([QueryCondition(0, "matches", "name")], data_dir / "b_cars.csv")
    assert results[0].headers is None
    assert results[0].match_count == 1


def test_candidates_lists_reasons(data_dir):
    candidates = LookupService().candidates(data_dir)
    assert [c["name"] for c in candidates] == ["a_bikes.CSV", "archive", "b_cars.csv", "notes.txt"]
    assert [c["reason"] for c in candidates] == [None, SkipReason.NOT_A_FILE, None, SkipReason.NOT_CSV]


def test_from_config():
    service = LookupService.from_config({"search": {"delimiter": ";", "has_headers": "false", "extensions": [".tsv"]}})
    assert service.options.delimiter == ";"
    assert service.options.has_headers is False
    assert service.extensions == (".tsv",)
