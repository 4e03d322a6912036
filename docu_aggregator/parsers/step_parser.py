"""
Parser for step files.

Steps are stored one file per step below ``steps/`` of their scenario,
named by their zero-padded index (``000.xml``, ``001.xml``, ...).
"""

import os
import xml.etree.ElementTree as ET
from typing import Optional

from docu_aggregator.domain.errors import MarshalError
from docu_aggregator.domain.models import Step
from docu_aggregator.parsers.base_parser import BaseParser


class StepParser(BaseParser):
    """
    Parser for a single step XML file.

    Extracts the step description, the (raw, unsanitized) page name and
    the object references declared on the step and on its page.
    """

    root_tag = 'step'

    def parse(self, xml_path: str) -> Step:
        """
        Parse a step XML file.

        Args:
            xml_path: Path to the step XML file

        Returns:
            Step with index, title, status, page name, screenshot file name
            and object references. The index falls back to the number in
            the file name when the description carries none.
        """
        root = self._load_root(xml_path)
        description = root.find('stepDescription')
        page_elem = root.find('page')

        return Step(
            index=self._get_index(description, xml_path),
            title=self._get_text(description, 'title', ''),
            status=self._get_text(description, 'status'),
            page_name=self._get_page_name(page_elem),
            screenshot_file_name=self._get_text(description, 'screenshotFileName'),
            object_references=self._get_object_references(root),
            page_object_references=self._get_object_references(page_elem),
        )

    @staticmethod
    def _get_page_name(page_elem: Optional[ET.Element]) -> Optional[str]:
        # Raw page names are kept verbatim; sanitizing happens before grouping
        if page_elem is None:
            return None
        name_elem = page_elem.find('name')
        if name_elem is None or name_elem.text is None:
            return None
        return name_elem.text

    def _get_index(self, description: Optional[ET.Element], xml_path: str) -> int:
        raw_index = self._get_text(description, 'index')
        if raw_index is None:
            raw_index = os.path.splitext(os.path.basename(xml_path))[0]
        try:
            return int(raw_index)
        except ValueError as e:
            raise MarshalError(f"Invalid step index '{raw_index}' in {xml_path}") from e
