"""Base-class method resolution for deferred service mocks."""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, List, Sequence, Tuple

from .diagnostics import Diagnostics
from .errors import CyclicInheritance
from .models import MockCollection, MockDescriptor, MockKind

Completer = Callable[[MockDescriptor, Sequence[MockDescriptor]], MockDescriptor]


class InheritanceResolver:
    """Finalizes service mocks whose classes extend another mocked service.

    Resolution reads the declared methods of the phase-one collection only,
    so the order in which deferred entries are finalized does not matter.
    """

    def __init__(self, diagnostics: Diagnostics) -> None:
        self.diagnostics = diagnostics

    def resolve_methods(
        self, descriptor: MockDescriptor, services: Sequence[MockDescriptor]
    ) -> Tuple[str, ...]:
        """Own methods first, then each ancestor's, de-duplicated in order."""
        by_name = {}
        for service in services:
            by_name.setdefault(service.mock_class_name, service)

        methods: List[str] = list(descriptor.methods)
        chain = [descriptor.mock_class_name]
        current = descriptor
        while current.base_mock_ref:
            parent = by_name.get(current.base_mock_ref)
            if parent is None:
                self.diagnostics.warning(
                    "missing-parent-mock",
                    f"Cannot find parent class {current.base_mock_ref} of "
                    f"{descriptor.mock_class_name}. Inherited methods are omitted.",
                    path=descriptor.source_path,
                )
                break
            if parent.mock_class_name in chain:
                raise CyclicInheritance(chain + [parent.mock_class_name])
            chain.append(parent.mock_class_name)
            methods.extend(parent.methods)
            current = parent

        return tuple(dict.fromkeys(methods))

    def resolve(self, collection: MockCollection, complete: Completer) -> MockCollection:
        """Return a new collection with every deferred service finalized and written."""
        services = collection.of_kind(MockKind.SERVICE)
        result = collection
        for descriptor in collection.deferred():
            try:
                methods = self.resolve_methods(descriptor, services)
            except CyclicInheritance as exc:
                self.diagnostics.error(
                    "cyclic-inheritance", str(exc), path=descriptor.source_path
                )
                final = replace(descriptor, deferred=False, skipped=True)
            else:
                candidate = replace(descriptor, methods=methods, deferred=False)
                final = complete(candidate, result.sharing_target(candidate))
            result = result.replace(descriptor, final)
        return result


__all__ = ["InheritanceResolver"]
