"""
Base class for the documentation entity parsers.

Each parser reads one raw XML file and returns the corresponding domain
entity. Missing files surface as ResourceNotFoundError, unreadable or
malformed files as MarshalError.
"""

import os
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from docu_aggregator.domain.errors import MarshalError, ResourceNotFoundError
from docu_aggregator.domain.models import ObjectReference


class BaseParser(ABC):
    """Common XML helpers for all entity parsers."""

    root_tag: str = ''

    @abstractmethod
    def parse(self, xml_path: str) -> Any:
        """Parse the XML file at ``xml_path`` into a domain entity."""

    def _load_root(self, xml_path: str) -> ET.Element:
        """
        Load the root element and check its tag.

        Args:
            xml_path: Path to the XML file

        Returns:
            The root element

        Raises:
            ResourceNotFoundError: If the file does not exist
            MarshalError: If the file is not well-formed or has the wrong root
        """
        if not os.path.isfile(xml_path):
            raise ResourceNotFoundError(xml_path)
        try:
            root = ET.parse(xml_path).getroot()
        except (ET.ParseError, OSError) as e:
            raise MarshalError(f"Could not unmarshal {xml_path}: {e}") from e

        if self.root_tag and root.tag != self.root_tag:
            raise MarshalError(
                f"Could not unmarshal {xml_path}: expected <{self.root_tag}> but found <{root.tag}>"
            )
        return root

    def _require_name(self, root: ET.Element, xml_path: str) -> str:
        """Get the mandatory ``name`` child of an entity."""
        name = self._get_text(root, 'name')
        if not name:
            raise MarshalError(f"Missing name in {xml_path}")
        return name

    @staticmethod
    def _get_text(elem: Optional[ET.Element], path: str, default: Optional[str] = None) -> Optional[str]:
        """Get stripped text of a child element, or ``default`` when absent or empty."""
        if elem is None:
            return default
        child = elem.find(path)
        if child is None or child.text is None:
            return default
        text = child.text.strip()
        return text if text else default

    @staticmethod
    def _get_object_references(elem: Optional[ET.Element]) -> List[ObjectReference]:
        """Read ``<objectReferences><objectReference type=.. name=../>`` children."""
        if elem is None:
            return []
        container = elem.find('objectReferences')
        if container is None:
            return []

        references = []
        for ref_elem in container.findall('objectReference'):
            ref_type = (ref_elem.get('type') or '').strip()
            name = (ref_elem.get('name') or '').strip()
            if ref_type and name:
                references.append(ObjectReference(type=ref_type, name=name))
        return references
