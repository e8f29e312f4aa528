"""
XML serialization of batch job requests and results.

Request bodies look like::

    <?xml version="1.0" encoding="UTF-8"?>
    <mutate xmlns="https://adwords.google.com/api/adwords/cm/v201509"
            xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">
      <operations xsi:type="CampaignOperation">
        <operator>ADD</operator>
        <operand>...</operand>
      </operations>
    </mutate>

Result documents downloaded from cloud storage have a ``mutateResponse``
root holding one ``rval`` element per operation.
"""
import re
from collections.abc import Mapping
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional

from ..api.config import DEFAULT_API_VERSION
from ..exceptions import BatchJobSerializationError
from ..logging import get_logger
from .models import (
    Operation,
    BatchJobMutateRequest,
    ApiError,
    MutateResult,
    BatchJobMutateResponse,
    BatchJobMutateResponseEnvelope,
    TYPE_KEY
)

XSI_NAMESPACE = 'http://www.w3.org/2001/XMLSchema-instance'
XSI_TYPE = f'{{{XSI_NAMESPACE}}}type'
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

_VERSION_PATTERN = re.compile(r'/cm/(v\d+)$')

ET.register_namespace('xsi', XSI_NAMESPACE)

logger = get_logger('adsbatch.batch.serialization')


def _local_name(tag: str) -> str:
    """Strip the '{namespace}' prefix from an element tag."""
    return tag.rsplit('}', 1)[-1]


def _namespace_of(tag: str) -> Optional[str]:
    if tag.startswith('{'):
        return tag[1:].split('}', 1)[0]
    return None


def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


class BatchJobXmlSerializer:
    """
    Serializes operations to the batch job upload format and parses results.

    Element values map to Python as follows:
    - leaf element -> str
    - element with children -> dict (xsi:type kept under 'xsi_type')
    - repeated sibling elements -> list

    A repeated element that occurs only once reads back as a single value.
    Operation normalizes its operand to the same shape, so request bodies
    parse back to equal operations.
    """

    def __init__(self, api_version: str = DEFAULT_API_VERSION):
        self._api_version = api_version

    @property
    def api_version(self) -> str:
        return self._api_version

    @property
    def namespace(self) -> str:
        return f"https://adwords.google.com/api/adwords/cm/{self._api_version}"

    def _qname(self, name: str) -> str:
        return f'{{{self.namespace}}}{name}'

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def serialize_request(self, request: BatchJobMutateRequest) -> str:
        """
        Serialize a mutate request as XML text.

        Args:
            request: Request holding the ordered operations

        Returns:
            XML document, declaration included
        """
        root = ET.Element(self._qname('mutate'))
        for operation in request.operations:
            element = ET.SubElement(root, self._qname('operations'))
            if operation.xsi_type:
                self._set_type(element, operation.xsi_type)
            ET.SubElement(element, self._qname('operator')).text = operation.operator
            operand = ET.SubElement(element, self._qname('operand'))
            self._fill_element(operand, operation.operand)

        body = ET.tostring(root, encoding='unicode', default_namespace=self.namespace)
        logger.debug(f"Serialized {len(request)} operations ({len(body)} chars)")
        return f"{XML_DECLARATION}\n{body}"

    def parse_request(self, text: str) -> BatchJobMutateRequest:
        """
        Parse a request body back into operations.

        Args:
            text: XML produced by serialize_request

        Returns:
            BatchJobMutateRequest with operations in document order

        Raises:
            BatchJobSerializationError: If the document is malformed
        """
        root = self._parse_root(text, 'mutate')
        operations = []
        for element in root:
            if _local_name(element.tag) != 'operations':
                continue
            operator = None
            operand: Dict[str, Any] = {}
            for child in element:
                name = _local_name(child.tag)
                if name == 'operator':
                    operator = (child.text or '').strip()
                elif name == 'operand':
                    value = self._element_value(child)
                    operand = value if isinstance(value, dict) else {}
            if operator is None:
                raise BatchJobSerializationError(
                    "Operation without operator element", document=text
                )
            try:
                operations.append(Operation(
                    operator=operator,
                    operand=operand,
                    xsi_type=element.get(XSI_TYPE)
                ))
            except ValueError as e:
                raise BatchJobSerializationError(str(e), document=text) from e
        return BatchJobMutateRequest(operations)

    # ------------------------------------------------------------------
    # Responses
    # ------------------------------------------------------------------

    def parse_envelope(self, text: str) -> BatchJobMutateResponseEnvelope:
        """
        Parse a downloaded result document.

        Args:
            text: Raw document downloaded from the result URL

        Returns:
            Envelope wrapping the mutate response

        Raises:
            BatchJobSerializationError: If the document is malformed
        """
        root = self._parse_root(text, 'mutateResponse')
        namespace = _namespace_of(root.tag)
        api_version = None
        if namespace:
            match = _VERSION_PATTERN.search(namespace)
            if match:
                api_version = match.group(1)

        results = []
        for position, element in enumerate(
            e for e in root if _local_name(e.tag) == 'rval'
        ):
            results.append(self._parse_result(element, position, text))

        logger.debug(f"Parsed {len(results)} results (namespace={namespace})")
        return BatchJobMutateResponseEnvelope(
            mutate_response=BatchJobMutateResponse(tuple(results)),
            namespace=namespace,
            api_version=api_version
        )

    def _parse_result(self, element: ET.Element, position: int, text: str) -> MutateResult:
        index = position
        result = None
        errors: List[ApiError] = []
        for child in element:
            name = _local_name(child.tag)
            if name == 'index':
                try:
                    index = int((child.text or '').strip())
                except ValueError as e:
                    raise BatchJobSerializationError(
                        f"Invalid result index {child.text!r}", document=text
                    ) from e
            elif name == 'result':
                value = self._element_value(child)
                result = value if isinstance(value, dict) else {}
            elif name == 'errorList':
                errors.extend(
                    self._parse_error(error) for error in child
                    if _local_name(error.tag) == 'errors'
                )
        return MutateResult(index=index, result=result, errors=tuple(errors))

    def _parse_error(self, element: ET.Element) -> ApiError:
        fields = {_local_name(child.tag): (child.text or '') for child in element}
        return ApiError(
            xsi_type=element.get(XSI_TYPE),
            field_path=fields.get('fieldPath'),
            trigger=fields.get('trigger'),
            error_string=fields.get('errorString'),
            reason=fields.get('reason')
        )

    # ------------------------------------------------------------------
    # Element helpers
    # ------------------------------------------------------------------

    def _parse_root(self, text: str, expected: str) -> ET.Element:
        try:
            root = ET.fromstring(text.lstrip('\ufeff'))
        except ET.ParseError as e:
            raise BatchJobSerializationError(f"Malformed XML: {e}", document=text) from e
        if _local_name(root.tag) != expected:
            raise BatchJobSerializationError(
                f"Unexpected root element {_local_name(root.tag)!r}, expected {expected!r}",
                document=text
            )
        return root

    def _set_type(self, element: ET.Element, xsi_type: Any) -> None:
        if not isinstance(xsi_type, str):
            raise BatchJobSerializationError(
                f"xsi_type of element {_local_name(element.tag)!r} must be a string, "
                f"got {type(xsi_type).__name__}"
            )
        element.set(XSI_TYPE, xsi_type)

    def _fill_element(self, element: ET.Element, value: Any) -> None:
        """Write a Python value into an (already created) element."""
        if isinstance(value, Mapping):
            for key, item in value.items():
                if key == TYPE_KEY:
                    self._set_type(element, item)
                else:
                    self._append_value(element, key, item)
        elif value is not None:
            element.text = _to_text(value)

    def _append_value(self, parent: ET.Element, name: str, value: Any) -> None:
        if value is None:
            return
        if isinstance(value, (list, tuple)):
            for item in value:
                self._append_value(parent, name, item)
            return
        child = ET.SubElement(parent, self._qname(name))
        self._fill_element(child, value)

    def _element_value(self, element: ET.Element) -> Any:
        """Read an element back into str / dict / list values."""
        children = list(element)
        xsi_type = element.get(XSI_TYPE)
        if not children:
            if xsi_type:
                return {TYPE_KEY: xsi_type}
            return element.text or ''

        value: Dict[str, Any] = {}
        if xsi_type:
            value[TYPE_KEY] = xsi_type
        for child in children:
            name = _local_name(child.tag)
            item = self._element_value(child)
            if name in value:
                existing = value[name]
                if isinstance(existing, list):
                    existing.append(item)
                else:
                    value[name] = [existing, item]
            else:
                value[name] = item
        return value
