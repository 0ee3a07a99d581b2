"""
XML codec — element trees to and from pydantic-shaped data.

Reading is driven by the target model's fields: a ``list[...]`` field is
every child element with that tag, a nested model is one child element,
anything else is the element text (or an attribute of the same name).
Fields with no matching element stay absent. An empty list is written
as one empty element (``<versions />``) and read back as ``[]``.
"""

from __future__ import annotations

import types
import typing
import xml.etree.ElementTree as ET
from typing import Any

from pydantic import BaseModel


def _unwrap(annotation: Any) -> tuple[bool, Any]:
    """Return ``(is_list, inner)`` with ``None`` stripped from unions."""
    origin = typing.get_origin(annotation)
    if origin in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) != 1:
            return False, str
        return _unwrap(args[0])
    if origin is list:
        (item,) = typing.get_args(annotation) or (str,)
        return True, item
    return False, annotation


def _is_model(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, BaseModel)


def _is_empty(elem: ET.Element) -> bool:
    return len(elem) == 0 and not elem.attrib and not (elem.text or "").strip()


def element_to_data(elem: ET.Element, model: type[BaseModel]) -> dict[str, Any]:
    """Collect the children of ``elem`` that ``model`` declares."""
    data: dict[str, Any] = {}
    for name, info in model.model_fields.items():
        tag = info.alias or name
        children = [c for c in elem if c.tag == tag]
        is_list, inner = _unwrap(info.annotation)

        if is_list:
            if not children:
                continue
            if len(children) == 1 and _is_empty(children[0]):
                data[tag] = []
                continue
            if _is_model(inner):
                data[tag] = [element_to_data(c, inner) for c in children]
            else:
                data[tag] = [(c.text or "").strip() for c in children]
        elif _is_model(inner):
            if children:
                data[tag] = element_to_data(children[0], inner)
        elif children:
            data[tag] = (children[0].text or "").strip()
        elif tag in elem.attrib:
            data[tag] = elem.attrib[tag]
    return data


def parse_xml(text: str, model: type[BaseModel]) -> BaseModel:
    """Parse XML text into ``model``.

    Raises:
        xml.etree.ElementTree.ParseError: malformed XML.
        pydantic.ValidationError: text does not fit the model.
    """
    root = ET.fromstring(text)
    return model.model_validate(element_to_data(root, model))


def _fill(elem: ET.Element, value: Any) -> None:
    if isinstance(value, dict):
        for key, item in value.items():
            if item is None:
                continue
            if item == []:
                ET.SubElement(elem, key)
                continue
            items = item if isinstance(item, list) else [item]
            for entry in items:
                _fill(ET.SubElement(elem, key), entry)
    elif isinstance(value, bool):
        elem.text = "true" if value else "false"
    else:
        elem.text = str(value)


def dump_xml(data: dict[str, Any], root_tag: str) -> str:
    """Serialize a canonical mapping under ``root_tag``."""
    root = ET.Element(root_tag)
    _fill(root, data)
    ET.indent(root)
    return ET.tostring(root, encoding="unicode") + "\n"
