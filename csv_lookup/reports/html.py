import logging
import shutil
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from csv_lookup import __version__
from csv_lookup.core.errors import ValidationError
from csv_lookup.models.lines import ResultSet
from .base import BaseReport

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
ASSET_DIRS = ("_css",)


@dataclass(frozen=True)
class Breadcrumb:
    active: bool
    name: str
    link: str


class HtmlReport(BaseReport):
    """
    A small static site: dashboard.html plus files/<name>.html per searched file.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=select_autoescape(["html", "j2"]),
            undefined=StrictUndefined,
        )

    def render(self, output: str) -> Optional[str]:
        if not output:
            raise ValidationError("HTML reports need an output directory")

        target = Path(output)
        self.create_dir(target / "files")
        timestamp = datetime.now(timezone.utc).strftime("%a, %d %b %Y %H:%M:%S %z")

        for result in self.results:
            page = self.render_file(result, timestamp)
            (target / "files" / f"{Path(result.filename).name}.html").write_text(page, encoding="utf-8")

        (target / "dashboard.html").write_text(self.render_dashboard(timestamp), encoding="utf-8")
        self.copy_assets(target)
        logger.info(f"HTML report written to {target}")
        return None

    @staticmethod
    def breadcrumbs(result: Optional[ResultSet] = None) -> List[Breadcrumb]:
        if result is None:
            return [Breadcrumb(True, "Dashboard", "dashboard.html")]
        name = Path(result.filename).name
        return [
            Breadcrumb(False, "Dashboard", "../dashboard.html"),
            Breadcrumb(True, name, f"{name}.html"),
        ]

    def _common_context(self, timestamp: str) -> Dict[str, Any]:
        return {
            "conditions": self.conditions,
            "search_path": self.search_path,
            "version": __version__,
            "timestamp": timestamp,
        }

    def render_dashboard(self, timestamp: str) -> str:
        files = [
            {
                "filename": Path(r.filename).name,
                "columns": r.column_count(),
                "matches": r.match_count,
                "total_lines": r.total_lines,
            }
            for r in self.results
        ]
        return self.env.get_template("dashboard.html.j2").render(
            breadcrumbs=self.breadcrumbs(),
            dashboard=True,
            asset_prefix="",
            files=files,
            total_matches=sum(r.match_count for r in self.results),
            total_lines=sum(r.total_lines for r in self.results),
            **self._common_context(timestamp),
        )

    def render_file(self, result: ResultSet, timestamp: str) -> str:
        if result.headers is not None:
            headers = list(result.headers.fields)
        elif result.matches:
            headers = [str(i) for i in range(result.matches[0].column_count())]
        else:
            headers = []

        return self.env.get_template("file.html.j2").render(
            breadcrumbs=self.breadcrumbs(result),
            dashboard=False,
            asset_prefix="../",
            filename=result.filename,
            delimiter=result.delimiter,
            enclosure_character=result.enclosure_character,
            escape_character=result.escape_character,
            headers=headers,
            matches=result.matches,
            total_matches=result.match_count,
            total_lines=result.total_lines,
            **self._common_context(timestamp),
        )

    @staticmethod
    def copy_assets(target: Path):
        for name in ASSET_DIRS:
            shutil.copytree(TEMPLATE_DIR / name, target / name, dirs_exist_ok=True)
