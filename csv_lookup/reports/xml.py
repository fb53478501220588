import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from .base import BaseReport

logger = logging.getLogger(__name__)

NAMESPACE = "https://github.com/thor-juhasz/csv-lookup"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
SCHEMA_LOCATION = (
    f"{NAMESPACE} "
    "https://raw.githubusercontent.com/thor-juhasz/csv-lookup/resources/Resources/report-schema.xsd"
)


class XmlReport(BaseReport):
    """
    <csv-lookup>
      <search><path/><queries><query/>...</queries></search>
      <results><file><headers/><found-lines><line number=".."/>...</found-lines></file>...</results>
    </csv-lookup>
    """

    def build(self) -> ET.Element:
        root = ET.Element("csv-lookup", {
            "xmlns": NAMESPACE,
            "xmlns:xsi": XSI_NAMESPACE,
            "xsi:schemaLocation": SCHEMA_LOCATION,
        })

        search = ET.SubElement(root, "search")
        ET.SubElement(search, "path").text = self.search_path
        queries = ET.SubElement(search, "queries")
        for condition in self.conditions:
            query = ET.SubElement(queries, "query", {
                "column": "" if condition.column is None else str(condition.column),
                "type": condition.query_type,
            })
            value = condition.display_value()
            if isinstance(value, tuple):
                query.set("value-lower", value[0])
                query.set("value-upper", value[1])
            else:
                query.set("value", value)

        results = ET.SubElement(root, "results")
        for result in self.non_empty_results():
            file_el = ET.SubElement(results, "file", {
                "path": result.filename,
                "delimiter": result.delimiter,
                "enclosure": result.enclosure_character,
                "escape": result.escape_character,
            })
            if result.headers is not None:
                ET.SubElement(file_el, "headers").text = ", ".join(result.headers.fields)

            found = ET.SubElement(file_el, "found-lines")
            for line in result.matches:
                line_el = ET.SubElement(found, "line", {"number": str(line.line_number)})
                line_el.text = line.joined(result.delimiter, result.enclosure_character)

        return root

    def to_string(self) -> str:
        root = self.build()
        ET.indent(root)
        return ET.tostring(root, encoding="UTF-8", xml_declaration=True).decode("utf-8")

    def render(self, output: str) -> Optional[str]:
        if not output:
            return self.to_string()

        target = Path(output)
        self.create_dir(target.parent)
        tree = ET.ElementTree(self.build())
        ET.indent(tree)
        tree.write(target, encoding="UTF-8", xml_declaration=True)
        logger.info(f"XML report written to {target}")
        return None
