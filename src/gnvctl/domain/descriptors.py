"""Dependency descriptor codec.

A descriptor is the compact string form users type on the command line::

    name
    name@version
    @scope/name
    @scope/name@version

A missing version means ``latest``. The manifest stores descriptors split
into a *package key* (``@scope/name`` or ``name``) and a version string.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, ValidationError

from gnvctl.domain.errors import MalformedDescriptor

DEFAULT_VERSION = "latest"


class DependencyDescriptor(BaseModel):
    """A parsed ``[@scope/]name[@version]`` descriptor.

    Field constraints keep ``decode(encode(d)) == d`` for every valid
    instance: no ``@`` or whitespace in the name, no ``/`` in the scope,
    and a non-empty version with no surrounding whitespace.
    """

    model_config = {"frozen": True}

    name: str = Field(pattern=r"^[^@\s]+$")
    scope: str = Field(default="", pattern=r"^[^/\s]*$")
    version: str = Field(default=DEFAULT_VERSION, pattern=r"^\S(.*\S)?$")

    @property
    def key(self) -> str:
        """The version-less package key used in the manifest."""
        return package_key(self)

    def __str__(self) -> str:
        return encode(self)


def decode(descriptor: str) -> DependencyDescriptor:
    """Parse a descriptor string.

    Raises :class:`MalformedDescriptor` when no package name remains after
    parsing, or when a part contains whitespace.

    Examples:
        >>> decode("foo")
        DependencyDescriptor(name='foo', scope='', version='latest')
        >>> decode("@org/foo@1.2.3")
        DependencyDescriptor(name='foo', scope='org', version='1.2.3')
    """
    text = descriptor.strip()
    scope = ""
    rest = text
    if text.startswith("@"):
        head, sep, rest = text.partition("/")
        if not sep:
            raise MalformedDescriptor(descriptor)
        scope = head[1:]

    name, _, version = rest.partition("@")
    if not name:
        raise MalformedDescriptor(descriptor)

    try:
        return DependencyDescriptor(name=name, scope=scope, version=version or DEFAULT_VERSION)
    except ValidationError as exc:
        raise MalformedDescriptor(descriptor) from exc


def encode(descriptor: DependencyDescriptor) -> str:
    """Serialize back to ``@scope/name@version`` or ``name@version``."""
    return f"{package_key(descriptor)}@{descriptor.version}"


def package_key(descriptor: DependencyDescriptor) -> str:
    if descriptor.scope:
        return f"@{descriptor.scope}/{descriptor.name}"
    return descriptor.name


def package_strings(collection: dict[str, str]) -> list[str]:
    """Encode a manifest collection as ``key@version`` strings, in order."""
    return [f"{key}@{version}" for key, version in collection.items()]
