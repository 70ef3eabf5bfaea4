"""
Response Normalizer
Parses Namecheap XML responses into a uniform result envelope
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from namecheap_cli.api.exceptions import ApiMessage, ProtocolError
from namecheap_cli.api.transport import RawResponse


STATUS_OK = "OK"
STATUS_ERROR = "ERROR"


@dataclass
class ResultEnvelope:
    """
    Uniform outcome of one API call.

    ``success`` is False exactly when ``errors`` is non-empty, and ``data``
    is only set on success. Payload values stay as strings here; typing
    happens at projection time.
    """

    success: bool
    data: Optional[Dict[str, Any]] = None
    errors: List[ApiMessage] = field(default_factory=list)
    warnings: List[ApiMessage] = field(default_factory=list)
    command: Optional[str] = None
    execution_time: Optional[str] = None


def _local(tag: str) -> str:
    """Strip the '{namespace}' prefix ElementTree puts on tags"""
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element, name: str) -> Optional[ET.Element]:
    for child in element:
        if _local(child.tag) == name:
            return child
    return None


def _children(element: Optional[ET.Element], name: str) -> List[ET.Element]:
    if element is None:
        return []
    return [child for child in element if _local(child.tag) == name]


def _text(element: Optional[ET.Element]) -> Optional[str]:
    if element is None or element.text is None:
        return None
    return element.text.strip()


def element_to_dict(element: ET.Element) -> Any:
    """
    Convert an element into nested dicts, lists and strings.

    Attributes become keys, child elements become nested values, repeated
    tags become lists, and elements with only text become plain strings.
    """
    result: Dict[str, Any] = {key: value for key, value in element.attrib.items()}

    for child in element:
        name = _local(child.tag)
        value = element_to_dict(child)
        if name in result and name not in element.attrib:
            existing = result[name]
            if isinstance(existing, list):
                existing.append(value)
            else:
                result[name] = [existing, value]
        elif name not in result:
            result[name] = value

    text = (element.text or "").strip()
    if not result:
        return text
    if text:
        result["#text"] = text
    return result


def as_list(value: Any) -> List[Any]:
    """Normalize a single-or-repeated payload value to a list"""
    if value is None or value == "":
        return []
    if isinstance(value, list):
        return value
    return [value]


def _messages(container: Optional[ET.Element], tag: str) -> List[ApiMessage]:
    messages = []
    for entry in _children(container, tag):
        code = entry.attrib.get("Number", "")
        messages.append(ApiMessage(code=code, message=_text(entry) or ""))
    return messages


def normalize(raw: RawResponse) -> ResultEnvelope:
    """
    Parse a raw response into a ResultEnvelope.

    Args:
        raw: Response received by the transport

    Returns:
        ResultEnvelope carrying the payload or the server's errors

    Raises:
        ProtocolError: If the body is not a recognizable ApiResponse
    """
    try:
        root = ET.fromstring(raw.content)
    except ET.ParseError as e:
        raise ProtocolError(f"Malformed XML response for {raw.operation}: {e}", raw.status_code)

    if _local(root.tag) != "ApiResponse":
        raise ProtocolError(
            f"Unexpected response root <{_local(root.tag)}> for {raw.operation}",
            raw.status_code,
        )

    status = (root.attrib.get("Status") or "").upper()
    if status not in (STATUS_OK, STATUS_ERROR):
        raise ProtocolError(f"Response for {raw.operation} has no valid Status", raw.status_code)

    errors = _messages(_child(root, "Errors"), "Error")
    warnings = _messages(_child(root, "Warnings"), "Warning")
    command = _text(_child(root, "RequestedCommand"))
    execution_time = _text(_child(root, "ExecutionTime"))

    if status == STATUS_ERROR:
        if not errors:
            raise ProtocolError(f"Response for {raw.operation} failed without errors", raw.status_code)
        return ResultEnvelope(
            success=False,
            errors=errors,
            warnings=warnings,
            command=command,
            execution_time=execution_time,
        )

    if errors:
        raise ProtocolError(f"Response for {raw.operation} is OK but carries errors", raw.status_code)

    command_response = _child(root, "CommandResponse")
    if command_response is None:
        raise ProtocolError(f"Response for {raw.operation} has no CommandResponse", raw.status_code)

    data = element_to_dict(command_response)
    if not isinstance(data, dict):
        data = {}

    return ResultEnvelope(
        success=True,
        data=data,
        warnings=warnings,
        command=command,
        execution_time=execution_time,
    )
