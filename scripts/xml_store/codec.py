"""XML codec for store models.

Documents follow the shape .NET's XmlSerializer writes, so files stay
readable by tools that already understand it::

    <?xml version='1.0' encoding='utf-8'?>
    <SampleDatabase xmlns:xsi="..." xmlns:xsd="..." GUID="...">
      <items>
        <Sample EID="0" GUID="...">
          <some_data>Data0</some_data>
        </Sample>
      </items>
    </SampleDatabase>

Fields listed in a model's ``xml_attributes`` become attributes, every
other non-None field becomes a child element named after the field.
"""

from __future__ import annotations

import base64
import re
import xml.etree.ElementTree as ET
from datetime import date, datetime, time
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import FormatError, NotFoundError
from .type_info import unwrap_optional, collection_shape

M = TypeVar("M", bound=BaseModel)

XMLSCHEMA_INSTANCE_NS = "http://www.w3.org/2001/XMLSchema-instance"
XMLSCHEMA_NS = "http://www.w3.org/2001/XMLSchema"

# Element names for scalars inside collections
_SCALAR_TAGS: list[tuple[type, str]] = [
    (bool, "boolean"),
    (int, "int"),
    (float, "double"),
    (datetime, "dateTime"),
    (date, "date"),
    (time, "time"),
    (bytes, "base64Binary"),
]

# Anything outside the XML 1.0 Char production
_INVALID_XML_CHARS = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")

_XML_DECLARATION = "<?xml version='1.0' encoding='utf-8'?>\n"


def _xml_attributes(model_type: type) -> dict[str, str]:
    return getattr(model_type, "xml_attributes", {})


def _is_model_type(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


def _scalar_text(value: Any) -> str:
    text = _text_form(value)
    bad = _INVALID_XML_CHARS.search(text)
    if bad:
        raise FormatError(
            f"Character {bad.group()!r} at position {bad.start()} cannot be stored in XML",
            value=text,
        )
    return text


def _text_form(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return _text_form(value.value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, (dict, set, frozenset)):
        raise FormatError(f"Cannot serialize {type(value).__name__} values to XML")
    return str(value)


def _item_tag(item: Any) -> str:
    if isinstance(item, BaseModel):
        return type(item).__name__
    for scalar_type, tag in _SCALAR_TAGS:
        if isinstance(item, scalar_type):
            return tag
    return "string"


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def _model_to_element(model: BaseModel, tag: str) -> ET.Element:
    element = ET.Element(tag)
    attributes = _xml_attributes(type(model))
    for name, field_info in type(model).model_fields.items():
        value = getattr(model, name)
        if value is None:
            continue
        if name in attributes:
            element.set(attributes[name], _scalar_text(value))
            continue
        element.append(_value_to_element(value, name, field_info.annotation))
    return element


def _value_to_element(value: Any, tag: str, annotation: Any = None) -> ET.Element:
    if isinstance(value, BaseModel):
        return _model_to_element(value, tag)
    if isinstance(value, (list, tuple)):
        wrapper = ET.Element(tag)
        shape = collection_shape(annotation) if annotation is not None else None
        item_annotation = shape[1] if shape else None
        for item in value:
            if item is None:
                continue
            wrapper.append(_value_to_element(item, _item_tag(item), item_annotation))
        return wrapper
    element = ET.Element(tag)
    element.text = _scalar_text(value)
    return element


def serialize(obj: BaseModel, use_default_namespace: bool = True) -> ET.ElementTree:
    """Convert a model into an XML document rooted at an element named after its class."""
    if not isinstance(obj, BaseModel):
        raise FormatError(f"Cannot serialize object of type {type(obj).__name__}")
    root = _model_to_element(obj, type(obj).__name__)
    if use_default_namespace:
        # Schema declarations go first, the way XmlSerializer writes them.
        declared = {"xmlns:xsi": XMLSCHEMA_INSTANCE_NS, "xmlns:xsd": XMLSCHEMA_NS}
        declared.update(root.attrib)
        root.attrib.clear()
        root.attrib.update(declared)
    return ET.ElementTree(root)


# ---------------------------------------------------------------------------
# Deserialization
# ---------------------------------------------------------------------------

def _element_to_data(element: ET.Element, model_type: type[BaseModel]) -> dict[str, Any]:
    attributes = _xml_attributes(model_type)
    children: dict[str, ET.Element] = {}
    for child in element:
        children.setdefault(child.tag, child)

    data: dict[str, Any] = {}
    for name, field_info in model_type.model_fields.items():
        if name in attributes:
            if attributes[name] in element.attrib:
                data[name] = element.attrib[attributes[name]]
            continue
        child = children.get(name)
        if child is not None:
            data[name] = _element_to_value(child, field_info.annotation)
    return data


def _element_to_value(element: ET.Element, annotation: Any) -> Any:
    annotation = unwrap_optional(annotation)
    shape = collection_shape(annotation)
    if shape is not None:
        return [_element_to_value(item, shape[1]) for item in element]
    if _is_model_type(annotation):
        return _element_to_data(element, annotation)
    if annotation is bytes:
        return base64.b64decode(element.text or "")
    return element.text or ""


def deserialize(document: ET.ElementTree | ET.Element, model_type: type[M]) -> M:
    """Rebuild a *model_type* instance from an XML document."""
    root = document.getroot() if isinstance(document, ET.ElementTree) else document
    if root is None or root.tag != model_type.__name__:
        found = None if root is None else root.tag
        raise FormatError(
            f"Expected <{model_type.__name__}> root element, got <{found}>",
            model_type=model_type.__name__,
        )
    try:
        return model_type.model_validate(_element_to_data(root, model_type))
    except ValidationError as exc:
        raise FormatError(
            f"Document does not match {model_type.__name__}: {exc}",
            model_type=model_type.__name__,
        ) from exc


# ---------------------------------------------------------------------------
# Strings and files
# ---------------------------------------------------------------------------

def to_string(obj: BaseModel, use_default_namespace: bool = True) -> str:
    tree = serialize(obj, use_default_namespace)
    ET.indent(tree, space="  ")
    # ElementTree writes CR raw in text and parsers fold CRLF into LF.
    # Attribute CRs are already escaped, so every raw CR left is element text.
    return ET.tostring(tree.getroot(), encoding="unicode").replace("\r", "&#13;")


def from_string(text: str, model_type: type[M]) -> M:
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise FormatError(f"Malformed XML: {exc}") from exc
    return deserialize(root, model_type)


def save(obj: BaseModel, path: str | Path, use_default_namespace: bool = True) -> Path:
    """Write *obj* to *path* as an indented UTF-8 document, replacing any existing file."""
    p = Path(path)
    # Serialized in full first so a rejected value leaves the old file untouched.
    document = _XML_DECLARATION + to_string(obj, use_default_namespace)
    p.write_bytes(document.encode("utf-8"))
    return p


def load(path: str | Path, model_type: type[M]) -> M:
    """Read a *model_type* instance from the document at *path*."""
    p = Path(path)
    if not p.is_file():
        raise NotFoundError(f"No document at {p}", path=p)
    try:
        tree = ET.parse(p)
    except ET.ParseError as exc:
        raise FormatError(f"Malformed XML in {p}: {exc}", path=p) from exc
    return deserialize(tree, model_type)
