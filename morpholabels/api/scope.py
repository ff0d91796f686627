"""
Resolution of the resource paths an annotation set lives under.

A published project is served from the public namespace, an unpublished one
from the private namespace. Visibility is part of the immutable
:class:`AnnotationScope` passed to each call, so one client can serve projects
of differing visibility at the same time.
"""
from dataclasses import dataclass, replace

PRIVATE_PREFIX = '/services/projects'
PUBLIC_PREFIX = '/services/public/projects'


def project_prefix(published: bool) -> str:
    """Namespace prefix for a project with the given visibility."""
    return PUBLIC_PREFIX if published else PRIVATE_PREFIX


@dataclass(frozen=True)
class AnnotationScope:
    """Key of a set of annotations.

    Attributes:
        project_id: Project the media belongs to.
        media_id: Media item the annotations are drawn on.
        annotation_type: Kind of annotation set (e.g. ``'M'`` for media views, ``'X'`` for matrix cells).
        link_id: Parent entity instance the annotations belong to. Required to save.
        published: Whether the project is published (public namespace).
    """
    project_id: int | str
    media_id: int | str
    annotation_type: str = 'M'
    link_id: int | str | None = None
    published: bool = False

    @property
    def base_path(self) -> str:
        return f'{project_prefix(self.published)}/{self.project_id}/media/{self.media_id}'

    def labels_endpoint(self, action: str = '') -> str:
        """Path of the labels endpoint, optionally followed by an action (``edit``, ``delete``, ``export``)."""
        endpoint = f'{self.base_path}/labels'
        action = action.strip('/')
        if action:
            endpoint = f'{endpoint}/{action}'
        return endpoint

    def with_published(self, published: bool) -> 'AnnotationScope':
        return replace(self, published=published)

    def with_link(self, link_id: int | str | None) -> 'AnnotationScope':
        return replace(self, link_id=link_id)
