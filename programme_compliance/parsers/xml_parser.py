#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
MS Project XML (MSPDI) parser

Reads the Project/Tasks/Task tree into RawTask records. Elements are
matched by local name, so namespaced and plain documents both work.
"""

import re
import time
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional, Union

from .base_parser import BaseParser, ScheduleParseResult
from ..exceptions import FormatError
from ..models.milestone import RawTask

XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")

# RawTask attribute -> <Task> child element
TASK_FIELDS = {
    "id": "ID",
    "name": "Name",
    "start_text": "Start",
    "finish_text": "Finish",
    "duration_text": "Duration",
    "percent_complete": "PercentComplete",
    "priority": "Priority",
    "constraint_type": "ConstraintType",
    "is_critical": "IsCritical",
    "milestone_flag": "Milestone",
    "notes": "Notes",
}

PROJECT_FIELDS = {
    "project_name": "Name",
    "project_title": "Title",
    "start_date": "StartDate",
    "finish_date": "FinishDate",
    "status_date": "StatusDate",
    "save_version": "SaveVersion",
}


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element, name: str) -> Optional[ET.Element]:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _children(element: ET.Element, name: str) -> List[ET.Element]:
    return [child for child in element if _local_name(child.tag) == name]


def _text(element: ET.Element, name: str) -> Optional[str]:
    child = _child(element, name)
    if child is None or child.text is None:
        return None
    text = child.text.strip()
    return text or None


class ProjectXMLParser(BaseParser):
    """
    Parser for MS Project XML exports

    Supports:
    - Single and multiple <Task> records
    - Default namespace http://schemas.microsoft.com/project
    - ExtendedAttribute lists (FieldName or FieldID -> Value)
    """

    SUPPORTED_EXTENSIONS = [".xml"]

    def parse_text(self, document_text: Union[str, bytes]) -> List[RawTask]:
        """
        Parse document text into task records

        Args:
            document_text: MSPDI document

        Returns:
            Tasks in source order

        Raises:
            FormatError: If Project/Tasks/Task is absent or the XML is malformed
        """
        return self.parse_document(document_text).tasks

    def parse_document(self, document: Union[str, bytes]) -> ScheduleParseResult:
        start_time = time.time()
        root = self._load_root(document)

        if _local_name(root.tag) != "Project":
            self._fail(f"Root element is <{_local_name(root.tag)}>, expected <Project>")

        tasks_element = _child(root, "Tasks")
        if tasks_element is None:
            self._fail("Document has no Project/Tasks element")

        task_elements = _children(tasks_element, "Task")
        if not task_elements:
            self._fail("Document has no Project/Tasks/Task records")

        result = ScheduleParseResult()
        result.metadata = {
            key: _text(root, tag) for key, tag in PROJECT_FIELDS.items()
        }
        result.tasks = [self._read_task(element) for element in task_elements]

        unnamed = sum(1 for task in result.tasks if not task.name)
        if unnamed:
            result.warnings.append(f"{unnamed} task(s) without a name")

        result.parse_time = time.time() - start_time
        self.logger.info(f"Parsed {len(result.tasks)} task(s) from schedule document")
        return result

    def _load_root(self, document: Union[str, bytes]) -> ET.Element:
        if isinstance(document, str):
            # Declared encoding is meaningless once the text is decoded
            document = XML_DECLARATION.sub("", document.lstrip("\ufeff"), count=1)

        if not document or not document.strip():
            self._fail("Document is empty")

        try:
            return ET.fromstring(document)
        except (ET.ParseError, LookupError, ValueError) as e:
            self._fail(f"Malformed XML: {e}")

    def _read_task(self, element: ET.Element) -> RawTask:
        values = {attr: _text(element, tag) for attr, tag in TASK_FIELDS.items()}
        return RawTask(extended_attributes=self._read_extended_attributes(element), **values)

    def _read_extended_attributes(self, element: ET.Element) -> Dict[str, str]:
        attributes: Dict[str, str] = {}
        for attr in _children(element, "ExtendedAttribute"):
            name = _text(attr, "FieldName") or _text(attr, "FieldID")
            if not name:
                self.logger.debug("Skipping ExtendedAttribute without FieldName/FieldID")
                continue
            attributes[name] = _text(attr, "Value") or ""
        return attributes

    def _fail(self, message: str) -> None:
        self.logger.error(f"Not a recognized schedule document: {message}")
        raise FormatError(message)
