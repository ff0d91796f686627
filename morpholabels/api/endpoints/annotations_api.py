from collections.abc import Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import replace
from typing import Any
import json
import logging
import aiohttp
import httpx
from ..base_api import BaseApi, ApiConfig
from ..scope import AnnotationScope
from ..dto.annotation_dto import domain_to_wire, wire_to_domain
from morpholabels.entities.annotation import Annotation
from morpholabels.entities.annotation_stats import AnnotationStats
from morpholabels.exceptions import (AnnotationFetchError, AnnotationOperationError, MalformedResponse,
                                     MorpholabelsException, ServerResponseError, TransportFailure)

_LOGGER = logging.getLogger(__name__)
_USER_LOGGER = logging.getLogger('user_logger')

AnnotationId = int | str


def _remove_none(d: dict) -> dict:
    return {k: v for k, v in d.items() if v is not None}


def _normalize_ids(annotation_ids: AnnotationId | Sequence[AnnotationId]) -> list[AnnotationId]:
    if isinstance(annotation_ids, (str, bytes)) or not isinstance(annotation_ids, Iterable):
        return [annotation_ids]
    return list(annotation_ids)


def _check_result_error(respdata: Any) -> Any:
    # Some rejections come back with a 2xx status and an ``error`` field.
    if isinstance(respdata, dict) and respdata.get('error'):
        raise ServerResponseError(200, str(respdata['error']), response_text=json.dumps(respdata))
    return respdata


class AnnotationsApi(BaseApi):
    """API handler for the labels (annotations) endpoints of media items.

    Every operation takes the :class:`~morpholabels.api.scope.AnnotationScope` it works on,
    including the project visibility, and issues a single request.
    Each operation has an ``*_async`` twin with the same semantics.
    """

    def __init__(self, config: ApiConfig, client: httpx.Client | None = None) -> None:
        """Initialize the annotations API handler.

        Args:
            config: API configuration containing base URL and timeout.
            client: Optional HTTP client instance. If None, a new one will be created.
        """
        super().__init__(config, client)

    @contextmanager
    def _fetch_failure(self, scope: AnnotationScope) -> Iterator[None]:
        """Rewrite failures while loading annotations into :class:`AnnotationFetchError`."""
        try:
            yield
        except TransportFailure as e:
            _LOGGER.error(f"Error loading annotations of {scope}: {e}")
            raise AnnotationFetchError(str(e)) from e
        except MalformedResponse as e:
            _LOGGER.error(f"Error loading annotations of {scope}: {e}")
            raise AnnotationFetchError(f'{e}. Check that the labels endpoint exists and is working.') from e
        except ServerResponseError as e:
            _LOGGER.error(f"Error loading annotations of {scope}: {e}")
            raise AnnotationFetchError(f'Failed to load annotations: {e.status_code} {e.message}',
                                       status_code=e.status_code,
                                       response_text=e.response_text) from e

    @contextmanager
    def _operation_failure(self, action: str) -> Iterator[None]:
        """Wrap failures of save/delete/export into :class:`AnnotationOperationError`."""
        try:
            yield
        except MorpholabelsException as e:
            _LOGGER.error(f"Error trying to {action} annotations: {e}")
            raise AnnotationOperationError(f'Failed to {action} annotations. Please try again.',
                                           detail=str(e)) from e

    ### fetch ###

    def _get_list_request(self,
                          scope: AnnotationScope,
                          context_type: str | None,
                          context_id: int | str | None) -> dict[str, Any]:
        params = _remove_none({
            'type': scope.annotation_type,
            'link_id': scope.link_id,
            'context_type': context_type,
            'context_id': context_id
        })
        return {'method': 'GET', 'endpoint': scope.labels_endpoint(), 'params': params}

    def get_list(self,
                 scope: AnnotationScope,
                 context_type: str | None = None,
                 context_id: int | str | None = None
                 ) -> list[Annotation]:
        """Get the annotations of a media item.

        Args:
            scope: The annotation set to load. ``scope.link_id``, when set, narrows the set to one parent entity.
            context_type: Optional context filter.
            context_id: Optional context filter.

        Returns:
            The annotations. An empty list when there are none.

        Raises:
            AnnotationFetchError: If the annotations could not be loaded.
        """
        request = self._get_list_request(scope, context_type, context_id)
        with self._fetch_failure(scope):
            records = self._request_json(**request)
        return wire_to_domain(records)

    async def get_list_async(self,
                             scope: AnnotationScope,
                             context_type: str | None = None,
                             context_id: int | str | None = None,
                             session: aiohttp.ClientSession | None = None
                             ) -> list[Annotation]:
        """Asynchronous version of :meth:`get_list`."""
        request = self._get_list_request(scope, context_type, context_id)
        with self._fetch_failure(scope):
            records = await self._make_request_async(session=session, data_to_get='json', **request)
        return wire_to_domain(records)

    ### save ###

    def _save_request(self,
                      scope: AnnotationScope,
                      annotations: Sequence[Annotation | Mapping[str, Any]]) -> dict[str, Any]:
        if scope.link_id is None:
            raise ValueError("A link_id is required to save annotations.")
        payload = {
            'linkId': scope.link_id,
            'save': domain_to_wire(annotations)
        }
        return {'method': 'POST',
                'endpoint': scope.labels_endpoint('edit'),
                'params': {'type': scope.annotation_type},
                'json': payload}

    def _log_saved(self, scope: AnnotationScope, request: dict[str, Any]) -> None:
        records = request['json']['save']
        ncreated = sum(1 for r in records if r['annotation_id'] is None)
        _USER_LOGGER.info(f"Saved {len(records)} annotation(s) on media {scope.media_id} "
                          f"({ncreated} new, {len(records) - ncreated} updated)")

    def save(self,
             scope: AnnotationScope,
             annotations: Sequence[Annotation | Mapping[str, Any]]) -> Any:
        """Create and update annotations in one batch.

        Annotations without ``annotation_id`` are created, the others are updated (last write wins).

        Args:
            scope: The annotation set. ``scope.link_id`` is required.
            annotations: Annotations, or mappings readable as annotations.

        Returns:
            The server result.

        Raises:
            ValueError: If ``scope.link_id`` is not set.
            AnnotationOperationError: If saving fails.
        """
        with self._operation_failure('save'):
            request = self._save_request(scope, annotations)
            respdata = _check_result_error(self._request_json(**request))
        self._log_saved(scope, request)
        return respdata

    async def save_async(self,
                         scope: AnnotationScope,
                         annotations: Sequence[Annotation | Mapping[str, Any]],
                         session: aiohttp.ClientSession | None = None) -> Any:
        """Asynchronous version of :meth:`save`."""
        with self._operation_failure('save'):
            request = self._save_request(scope, annotations)
            respdata = _check_result_error(
                await self._make_request_async(session=session, data_to_get='json', **request)
            )
        self._log_saved(scope, request)
        return respdata

    def update(self,
               scope: AnnotationScope,
               annotation: Annotation | Mapping[str, Any]) -> Any:
        """Save a single annotation. Same as ``save(scope, [annotation])``."""
        return self.save(scope, [annotation])

    async def update_async(self,
                           scope: AnnotationScope,
                           annotation: Annotation | Mapping[str, Any],
                           session: aiohttp.ClientSession | None = None) -> Any:
        """Asynchronous version of :meth:`update`."""
        return await self.save_async(scope, [annotation], session=session)

    ### delete ###

    def _delete_request(self,
                        scope: AnnotationScope,
                        annotation_ids: AnnotationId | Sequence[AnnotationId]) -> dict[str, Any]:
        # The backend expects a body, hence POST instead of DELETE.
        return {'method': 'POST',
                'endpoint': scope.labels_endpoint('delete'),
                'json': {'annotationIds': _normalize_ids(annotation_ids)}}

    def delete(self,
               scope: AnnotationScope,
               annotation_ids: AnnotationId | Sequence[AnnotationId]) -> Any:
        """Delete annotations by id.

        Args:
            scope: The annotation set. Only the project, its visibility and the media are used.
            annotation_ids: A single id or a sequence of ids.

        Returns:
            The server result.

        Raises:
            AnnotationOperationError: If deleting fails.
        """
        request = self._delete_request(scope, annotation_ids)
        with self._operation_failure('delete'):
            respdata = _check_result_error(self._request_json(**request))
        _USER_LOGGER.info(f"Deleted {len(request['json']['annotationIds'])} annotation(s) on media {scope.media_id}")
        return respdata

    async def delete_async(self,
                           scope: AnnotationScope,
                           annotation_ids: AnnotationId | Sequence[AnnotationId],
                           session: aiohttp.ClientSession | None = None) -> Any:
        """Asynchronous version of :meth:`delete`."""
        request = self._delete_request(scope, annotation_ids)
        with self._operation_failure('delete'):
            respdata = _check_result_error(
                await self._make_request_async(session=session, data_to_get='json', **request)
            )
        _USER_LOGGER.info(f"Deleted {len(request['json']['annotationIds'])} annotation(s) on media {scope.media_id}")
        return respdata

    ### export ###

    def _export_request(self,
                        scope: AnnotationScope,
                        format: str,
                        context_type: str | None,
                        context_id: int | str | None) -> dict[str, Any]:
        params = _remove_none({
            'format': format,
            'type': scope.annotation_type,
            'context_type': context_type,
            'context_id': context_id
        })
        return {'method': 'GET', 'endpoint': scope.labels_endpoint('export'), 'params': params}

    @staticmethod
    def _format_export(format: str, text: str) -> str:
        if format == 'json':
            data = BaseApi._parse_json(text)
            return json.dumps(data, indent=2, ensure_ascii=False)
        return text

    def export(self,
               scope: AnnotationScope,
               format: str = 'json',
               context_type: str | None = None,
               context_id: int | str | None = None) -> str:
        """Export the annotations of a media item.

        Args:
            scope: The annotation set.
            format: Export format, e.g. ``'json'`` or ``'csv'``.
            context_type: Optional context filter.
            context_id: Optional context filter.

        Returns:
            For ``'json'``, the exported data pretty-printed with an indentation of 2.
            For other formats, the response text as is.

        Raises:
            AnnotationOperationError: If exporting fails.
        """
        request = self._export_request(scope, format, context_type, context_id)
        with self._operation_failure('export'):
            response = self._make_request(**request)
            return AnnotationsApi._format_export(format, response.text)

    async def export_async(self,
                           scope: AnnotationScope,
                           format: str = 'json',
                           context_type: str | None = None,
                           context_id: int | str | None = None,
                           session: aiohttp.ClientSession | None = None) -> str:
        """Asynchronous version of :meth:`export`."""
        request = self._export_request(scope, format, context_type, context_id)
        with self._operation_failure('export'):
            text = await self._make_request_async(session=session, data_to_get='text', **request)
            return AnnotationsApi._format_export(format, text)

    ### stats ###

    @staticmethod
    def _stats_scope(scope: AnnotationScope) -> AnnotationScope:
        # Statistics cover the whole media item, whatever the link.
        return replace(scope, link_id=None)

    def get_stats(self, scope: AnnotationScope) -> AnnotationStats:
        """Count the annotations of a media item by shape type and author.

        Statistics are best-effort: if the annotations cannot be loaded, the failure
        is logged and zeroed statistics with ``ok=False`` are returned.

        Args:
            scope: The annotation set. ``scope.link_id`` is ignored.

        Returns:
            The statistics.
        """
        try:
            annotations = self.get_list(AnnotationsApi._stats_scope(scope))
        except MorpholabelsException as e:
            _LOGGER.warning(f"Error getting annotation stats: {e}")
            return AnnotationStats.failed(str(e))
        return AnnotationStats.from_annotations(annotations)

    async def get_stats_async(self,
                              scope: AnnotationScope,
                              session: aiohttp.ClientSession | None = None) -> AnnotationStats:
        """Asynchronous version of :meth:`get_stats`."""
        try:
            annotations = await self.get_list_async(AnnotationsApi._stats_scope(scope), session=session)
        except MorpholabelsException as e:
            _LOGGER.warning(f"Error getting annotation stats: {e}")
            return AnnotationStats.failed(str(e))
        return AnnotationStats.from_annotations(annotations)
