"""
Dependency resolution for containers to determine startup and shutdown order.
"""
from typing import List, Dict
from ..MODELS.container_spec import ContainerSpec

class DependencyResolver:
    """
    Resolves the startup and shutdown order of containers based on their dependencies.
    """
    def resolve_order(self, specs: List[ContainerSpec]) -> List[ContainerSpec]:
        """
        Determines the correct order to start containers using topological sort.

        :param specs: The container specs, keyed by name through ``spec.name``.
        :return: Specs in the order they should be started.
        :raises ValueError: If a circular dependency is detected.
        """
        by_name: Dict[str, ContainerSpec] = {spec.name: spec for spec in specs}

        ordered = []
        visited = set()
        processing = set()

        def visit(name):
            """
            Recursive function for topological sort.
            """
            if name in processing:
                raise ValueError(f"Circular dependency detected involving {name}")
            if name not in visited:
                processing.add(name)
                for dep in by_name[name].depends_on:
                    if dep in by_name:
                        visit(dep)
                processing.remove(name)
                visited.add(name)
                ordered.append(by_name[name])

        for spec in specs:
            visit(spec.name)

        return ordered
