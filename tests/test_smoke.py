from pathlib import Path

def test_repo_layout_has_package_and_config():
    repo_root = Path(__file__).resolve().parents[1]
    assert (repo_root / "csv_lookup" / "cli.py").exists()
    assert (repo_root / "csv_lookup" / "__main__.py").exists()
    assert (repo_root / "config" / "general.yaml").exists()
    assert (repo_root / "csv_lookup" / "reports" / "templates" / "_css" / "report.css").exists()
