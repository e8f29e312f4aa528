"""
Data models for batch job uploads and results.

Uses dataclasses for immutable, type-safe data structures.
"""
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Any, Optional, List, Tuple

OPERATORS = ('ADD', 'SET', 'REMOVE')

# Operand key carrying an element's xsi:type attribute
TYPE_KEY = 'xsi_type'


def _freeze_value(value: Any) -> Any:
    """
    Normalize an operand value to the shape the XML body reads back as.

    - bools become 'true'/'false', other leaves become str
    - mappings become read-only mappings
    - lists become tuples; an empty list vanishes, a single item is unwrapped

    Raises:
        ValueError: For nested lists and empty nested mappings
    """
    if isinstance(value, Mapping):
        frozen = _freeze_mapping(value)
        if not frozen:
            raise ValueError("Empty mappings are only allowed as the operand itself")
        return frozen
    if isinstance(value, (list, tuple)):
        if any(isinstance(item, (list, tuple)) for item in value):
            raise ValueError("Nested lists are not representable")
        items = tuple(_freeze_value(item) for item in value if item is not None)
        if len(items) == 1:
            return items[0]
        return items or None
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def _freeze_mapping(value: Mapping) -> Mapping:
    frozen = {}
    for key, item in value.items():
        if item is None:
            continue
        if key != TYPE_KEY:
            item = _freeze_value(item)
        if item is not None:
            frozen[key] = item
    return MappingProxyType(frozen)


def _thaw_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw_value(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw_value(item) for item in value]
    return value


def _hash_key(value: Any) -> Any:
    if isinstance(value, Mapping):
        return tuple(sorted((key, _hash_key(item)) for key, item in value.items()))
    if isinstance(value, tuple):
        return tuple(_hash_key(item) for item in value)
    return value


@dataclass(frozen=True)
class Operation:
    """
    A single mutate operation inside a batch job.

    The operand is a read-only nested mapping of element names to text,
    nested mappings, or tuples of those; the library never interprets it.
    Input values are normalized the way the XML body reads back: numbers
    and bools become text, None entries are dropped and a one-item list
    is stored as its item.

    Attributes:
        operator: ADD, SET or REMOVE
        operand: Operand element tree
        xsi_type: Concrete operation type (e.g. 'CampaignOperation')

    Example:
        >>> op = Operation(
        ...     operator='ADD',
        ...     operand={'name': 'Summer sale', 'status': 'PAUSED'},
        ...     xsi_type='CampaignOperation'
        ... )
    """
    operator: str
    operand: Mapping = field(default_factory=dict)
    xsi_type: Optional[str] = None

    def __post_init__(self):
        if self.operator not in OPERATORS:
            raise ValueError(
                f"Unknown operator {self.operator!r}, expected one of {OPERATORS}"
            )
        if not isinstance(self.operand, Mapping):
            raise ValueError(f"Operand must be a mapping, got {type(self.operand).__name__}")
        object.__setattr__(self, 'operand', _freeze_mapping(self.operand))

    def __hash__(self) -> int:
        return hash((self.operator, self.xsi_type, _hash_key(self.operand)))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON form used by the CLI."""
        result = {'operator': self.operator, 'operand': _thaw_value(self.operand)}
        if self.xsi_type:
            result['xsi_type'] = self.xsi_type
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Operation':
        """Create from dictionary."""
        return cls(
            operator=data['operator'],
            operand=data.get('operand', {}),
            xsi_type=data.get('xsi_type', data.get('xsiType'))
        )


@dataclass(frozen=True)
class BatchJobMutateRequest:
    """Ordered operations serialized as one upload body."""
    operations: Tuple[Operation, ...] = ()

    def __post_init__(self):
        # Freeze any iterable input
        object.__setattr__(self, 'operations', tuple(self.operations))

    def __len__(self) -> int:
        return len(self.operations)


@dataclass(frozen=True)
class ApiError:
    """
    An error reported for one operation of a batch job.

    Attributes:
        xsi_type: Error class (e.g. 'EntityNotFound')
        field_path: OGNL path of the offending field
        trigger: Value that triggered the error
        error_string: Combined error string
        reason: Machine-readable reason
    """
    xsi_type: Optional[str] = None
    field_path: Optional[str] = None
    trigger: Optional[str] = None
    error_string: Optional[str] = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class MutateResult:
    """
    Outcome of a single operation.

    Attributes:
        index: Position of the operation in the uploaded request
        result: Returned entity tree, or None when the operation failed
        errors: Errors reported for the operation
    """
    index: int
    result: Optional[Dict[str, Any]] = None
    errors: Tuple[ApiError, ...] = ()

    @property
    def is_success(self) -> bool:
        """Returns True if the operation produced a result without errors."""
        return not self.errors and self.result is not None


@dataclass(frozen=True)
class BatchJobMutateResponse:
    """Results of a batch job, in the order the server reported them."""
    rval: Tuple[MutateResult, ...] = ()

    @property
    def succeeded(self) -> List[MutateResult]:
        return [r for r in self.rval if r.is_success]

    @property
    def failed(self) -> List[MutateResult]:
        return [r for r in self.rval if not r.is_success]

    @property
    def errors(self) -> List[Tuple[int, ApiError]]:
        """All errors flattened as (operation index, error) pairs."""
        return [(r.index, e) for r in self.rval for e in r.errors]

    def __len__(self) -> int:
        return len(self.rval)

    def __iter__(self):
        return iter(self.rval)


@dataclass(frozen=True)
class BatchJobMutateResponseEnvelope:
    """
    Outer wrapper of a downloaded result document.

    Attributes:
        mutate_response: The nested results
        namespace: XML namespace of the document root
        api_version: API version parsed from the namespace
    """
    mutate_response: BatchJobMutateResponse
    namespace: Optional[str] = None
    api_version: Optional[str] = None
