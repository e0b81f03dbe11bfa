"""
Unit tests for container start ordering.
"""
import pytest
from bmideploy.MODELS.container_spec import ContainerSpec, Tier
from bmideploy.RUNNERS.dependency_resolver import DependencyResolver


def spec(name, tier, depends_on=()):
    return ContainerSpec(tier=tier, name=name, image=f"{name}:latest", internal_port=1,
                         network="net", depends_on=list(depends_on))


def test_dependencies_start_first():
    specs = [
        spec("web", Tier.FRONTEND, ["api"]),
        spec("api", Tier.BACKEND, ["db"]),
        spec("db", Tier.DATABASE),
    ]
    order = [s.name for s in DependencyResolver().resolve_order(specs)]
    assert order == ["db", "api", "web"]

def test_unknown_dependency_is_ignored():
    order = DependencyResolver().resolve_order([spec("api", Tier.BACKEND, ["cache"])])
    assert [s.name for s in order] == ["api"]

def test_circular_dependency():
    specs = [spec("a", Tier.BACKEND, ["b"]), spec("b", Tier.DATABASE, ["a"])]
    with pytest.raises(ValueError, match="Circular dependency"):
        DependencyResolver().resolve_order(specs)
