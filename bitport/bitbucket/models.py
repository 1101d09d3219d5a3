"""Typed views over Bitbucket Server REST payloads.

Bitbucket returns loosely shaped JSON; these structs pin down the fields the
sync reads and the value each one takes when the server omits it.
"""

from __future__ import annotations

import typing as typ

import msgspec


class Link(msgspec.Struct, kw_only=True):
    """A single hyperlink entry."""

    href: str | None = None


class Links(msgspec.Struct, kw_only=True):
    """The ``links`` block of a project or repository.

    Attributes
    ----------
    self_ : list[Link]
        Browser links for the resource; serialised as ``self``.

    """

    self_: list[Link] = msgspec.field(default_factory=list, name="self")

    @property
    def first_href(self) -> str | None:
        """Return the first self link, if any."""
        if not self.self_:
            return None
        return self.self_[0].href


class ProjectRecord(msgspec.Struct, kw_only=True):
    """Bitbucket project as returned by ``GET /projects``.

    Attributes
    ----------
    key : str
        Server-unique project key.
    name : str, optional
        Display name.
    description : str, optional
        Free-text description.
    type : str, optional
        ``NORMAL`` or ``PERSONAL``.
    public : bool, optional
        Whether anonymous users can read the project.
    links : Links
        Self links; the first one is used as the project URL.

    """

    key: str
    name: str | None = None
    description: str | None = None
    type: str | None = None
    public: bool | None = None
    links: Links = msgspec.field(default_factory=Links)

    @property
    def link(self) -> str | None:
        """Return the project's browser URL."""
        return self.links.first_href


class ProjectRef(msgspec.Struct, kw_only=True):
    """Project reference embedded in a repository payload."""

    key: str | None = None


class RepositoryRecord(msgspec.Struct, kw_only=True):
    """Bitbucket repository as returned by ``GET /projects/{key}/repos``."""

    slug: str
    name: str | None = None
    description: str | None = None
    state: str | None = None
    forkable: bool | None = None
    public: bool | None = None
    links: Links = msgspec.field(default_factory=Links)
    project: ProjectRef | None = None

    @property
    def link(self) -> str | None:
        """Return the repository's browser URL."""
        return self.links.first_href

    @property
    def project_key(self) -> str | None:
        """Return the key of the owning project when embedded."""
        if self.project is None:
            return None
        return self.project.key


class ReadmeLine(msgspec.Struct, kw_only=True):
    """One line of file content from the ``browse`` endpoint."""

    text: str | None = None


def project_from_raw(raw: typ.Any) -> ProjectRecord:  # noqa: ANN401 - raw JSON
    """Convert a raw project mapping into a :class:`ProjectRecord`.

    Raises
    ------
    msgspec.ValidationError
        If required fields are missing or have the wrong type.

    """
    return msgspec.convert(raw, ProjectRecord)


def repository_from_raw(raw: typ.Any) -> RepositoryRecord:  # noqa: ANN401 - raw JSON
    """Convert a raw repository mapping into a :class:`RepositoryRecord`."""
    return msgspec.convert(raw, RepositoryRecord)


def readme_lines_from_raw(raw: typ.Sequence[typ.Any]) -> list[ReadmeLine]:
    """Convert raw ``{"text": ...}`` mappings into :class:`ReadmeLine` values."""
    return msgspec.convert(list(raw), list[ReadmeLine])
