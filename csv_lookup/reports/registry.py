from typing import Dict, List, Optional, Type
from .base import BaseReport
from .text import TextReport
from .xml import XmlReport
from .html import HtmlReport


class ReportRegistry:
    def __init__(self):
        self._reports: Dict[str, Type[BaseReport]] = {}
        self.register_defaults()

    def register(self, fmt: str, report_cls: Type[BaseReport]):
        self._reports[fmt.lower()] = report_cls

    def get(self, fmt: str) -> Optional[Type[BaseReport]]:
        return self._reports.get(fmt.lower())

    def formats(self) -> List[str]:
        return list(self._reports)

    def register_defaults(self):
        self.register("text", TextReport)
        self.register("xml", XmlReport)
        self.register("html", HtmlReport)
