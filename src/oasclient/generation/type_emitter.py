"""Type emission utilities for code generation.

This module provides the TypeEmitter class which converts type descriptors
into Python type annotation strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..schema import descriptors as d
from ..schema.descriptors import TypeDescriptor
from .profile import GenerationProfile

JSON_VALUE = "JsonValue"
JSON_OBJECT = f"dict[str, {JSON_VALUE}]"


@dataclass
class TypeEmitter:
    """Converts type descriptors to Python type annotation strings.

    Attributes:
        profile: Generation profile controlling Python version features
        imports: Names imported from ``typing`` by emitted annotations
        modules: Modules imported by emitted annotations (``datetime``, ``uuid``)
        model_refs: Names of generated models referenced by emitted annotations
        uses_json_value: Whether an emitted annotation uses ``JsonValue``

    Note:
        emit() accumulates imports and references across calls, so one
        emitter serves one generated module.

    Example:
        >>> emitter = TypeEmitter(GenerationProfile.from_version("3.12"))
        >>> emitter.emit(d.Array(element=d.Integer64()))
        'list[int]'
        >>> emitter.emit(d.Enum(values=("asc", "desc")))
        "Literal['asc', 'desc']"
    """

    profile: GenerationProfile
    imports: set[str] = field(default_factory=set)
    modules: set[str] = field(default_factory=set)
    model_refs: set[str] = field(default_factory=set)
    uses_json_value: bool = False

    def emit(self, descriptor: TypeDescriptor) -> str:
        annotation, _ = self.emit_with_refs(descriptor)
        return annotation

    def emit_with_refs(self, descriptor: TypeDescriptor) -> tuple[str, frozenset[str]]:
        """Like emit, also returning the model names this annotation references."""
        refs: set[str] = set()
        annotation = self._emit(descriptor, refs)
        self.model_refs.update(refs)
        return annotation, frozenset(refs)

    def optional(self, base: str) -> str:
        if self.profile.use_pep604:
            return f"{base} | None"
        self.imports.add("Optional")
        return f"Optional[{base}]"

    def union(self, members: list[str]) -> str:
        unique = list(dict.fromkeys(members))
        if not unique:
            return self._json_value()
        if len(unique) == 1:
            return unique[0]
        if self.profile.use_pep604:
            return " | ".join(unique)
        self.imports.add("Union")
        return f"Union[{', '.join(unique)}]"

    def _emit(self, descriptor: TypeDescriptor, refs: set[str]) -> str:
        if isinstance(descriptor, d.Boolean):
            return "bool"
        if isinstance(descriptor, d.Text):
            return "str"
        if isinstance(descriptor, d.Date):
            self.modules.add("datetime")
            return "datetime.date"
        if isinstance(descriptor, d.DateTime):
            self.modules.add("datetime")
            return "datetime.datetime"
        if isinstance(descriptor, d.Uuid):
            self.modules.add("uuid")
            return "uuid.UUID"
        if isinstance(descriptor, d.Enum):
            if descriptor.name:
                return self._ref(descriptor.name, refs)
            if not descriptor.values:
                return "str"
            self.imports.add("Literal")
            return f"Literal[{', '.join(repr(value) for value in descriptor.values)}]"
        if isinstance(descriptor, (d.Integer32, d.Integer64, d.IntegerArbitrary)):
            return "int"
        if isinstance(descriptor, (d.Float, d.Double, d.NumberArbitrary)):
            return "float"
        if isinstance(descriptor, d.Object):
            if descriptor.name:
                return self._ref(descriptor.name, refs)
            if descriptor.composite:
                return self._json_value()
            return self._json_object()
        if isinstance(descriptor, d.Array):
            return f"list[{self._emit(descriptor.element, refs)}]"
        if isinstance(descriptor, d.UntypedObject):
            return self._json_value()
        if isinstance(descriptor, d.Map):
            if descriptor.name:
                return self._ref(descriptor.name, refs)
            return f"dict[str, {self._emit(descriptor.value, refs)}]"
        if isinstance(descriptor, d.TypedMapAdditionalProperties):
            return f"dict[str, {self._emit(descriptor.value, refs)}]"
        if isinstance(
            descriptor,
            (d.TypedObjectAdditionalProperties, d.UntypedObjectAdditionalProperties, d.UnknownAdditionalProperties),
        ):
            if descriptor.name:
                return self._ref(descriptor.name, refs)
            return self._json_object()
        raise TypeError(f"Unsupported type descriptor: {descriptor!r}")

    def _ref(self, name: str, refs: set[str]) -> str:
        refs.add(name)
        return name

    def _json_value(self) -> str:
        self.uses_json_value = True
        return JSON_VALUE

    def _json_object(self) -> str:
        self.uses_json_value = True
        return JSON_OBJECT
