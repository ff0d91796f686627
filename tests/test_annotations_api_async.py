import asyncio
import json
import re
import aiohttp
import pytest
from aioresponses import aioresponses
from morpholabels.api.client import Api
from morpholabels.api.scope import AnnotationScope
from morpholabels.exceptions import AnnotationFetchError, AnnotationOperationError
from morpholabels.factory import make_default_annotation

_TEST_URL = 'https://test_url.com'
_LABELS_PATTERN = re.compile(r'https://test_url\.com/services/projects/1/media/2/labels(\?.*)?$')
_PUBLIC_LABELS_PATTERN = re.compile(r'https://test_url\.com/services/public/projects/1/media/2/labels(\?.*)?$')


def _single_call(m: aioresponses, method: str):
    calls = [call for (call_method, _), call_list in m.requests.items()
             if call_method == method for call in call_list]
    assert len(calls) == 1
    return calls[0]


class TestAnnotationsApiAsync:
    @pytest.fixture
    def api(self) -> Api:
        return Api(_TEST_URL, timeout=5)

    @pytest.fixture
    def scope(self) -> AnnotationScope:
        return AnnotationScope(project_id=1, media_id=2, link_id=3)

    def test_get_list_async(self, api: Api, scope: AnnotationScope):
        records = [{'annotation_id': 7, 'label': 'femur', 'type': 'point', 'x': 5, 'y': 5, 'user_name': 'A'}]
        with aioresponses() as m:
            m.get(_LABELS_PATTERN, payload=records)
            annotations = asyncio.run(api.annotations.get_list_async(scope))

            call = _single_call(m, 'GET')
            assert call.kwargs['params'] == {'type': 'M', 'link_id': 3}

        assert len(annotations) == 1
        assert annotations[0].annotation_id == 7
        assert (annotations[0].tx, annotations[0].ty) == (15, -5)

    def test_get_list_async_public_project(self, api: Api, scope: AnnotationScope):
        with aioresponses() as m:
            m.get(_PUBLIC_LABELS_PATTERN, payload=[])
            annotations = asyncio.run(api.annotations.get_list_async(scope.with_published(True)))
        assert annotations == []

    def test_get_list_async_network_error(self, api: Api, scope: AnnotationScope):
        with aioresponses() as m:
            m.get(_LABELS_PATTERN, exception=aiohttp.ClientConnectionError())
            with pytest.raises(AnnotationFetchError, match='Network error, check server'):
                asyncio.run(api.annotations.get_list_async(scope))

    def test_get_list_async_server_error(self, api: Api, scope: AnnotationScope):
        with aioresponses() as m:
            m.get(_LABELS_PATTERN, status=500, payload={'message': 'Database unavailable'})
            with pytest.raises(AnnotationFetchError) as excinfo:
                asyncio.run(api.annotations.get_list_async(scope))

        assert excinfo.value.status_code == 500
        assert str(excinfo.value) == 'Failed to load annotations: 500 Database unavailable'

    def test_get_list_async_non_json(self, api: Api, scope: AnnotationScope):
        with aioresponses() as m:
            m.get(_LABELS_PATTERN, body='<html>Not found</html>')
            with pytest.raises(AnnotationFetchError, match='labels endpoint'):
                asyncio.run(api.annotations.get_list_async(scope))

    def test_save_async(self, api: Api, scope: AnnotationScope):
        edit_pattern = re.compile(r'https://test_url\.com/services/projects/1/media/2/labels/edit(\?.*)?$')
        ann = make_default_annotation('poly', (0, 0))
        ann.label = 'outline'
        with aioresponses() as m:
            m.post(edit_pattern, payload={'success': True})
            result = asyncio.run(api.annotations.save_async(scope, [ann]))

            call = _single_call(m, 'POST')
            assert call.kwargs['params'] == {'type': 'M'}
            body = call.kwargs['json']

        assert result == {'success': True}
        assert body['linkId'] == 3
        assert body['save'][0]['points'] == [0, 0, 50, 0, 25, 50]
        assert body['save'][0]['label'] == 'outline'

    def test_save_async_failure(self, api: Api, scope: AnnotationScope):
        edit_pattern = re.compile(r'https://test_url\.com/services/projects/1/media/2/labels/edit(\?.*)?$')
        with aioresponses() as m:
            m.post(edit_pattern, exception=aiohttp.ClientConnectionError())
            with pytest.raises(AnnotationOperationError) as excinfo:
                asyncio.run(api.annotations.update_async(scope, make_default_annotation('rect')))

        assert str(excinfo.value) == 'Failed to save annotations. Please try again.'
        assert excinfo.value.detail == 'Network error, check server'

    def test_delete_async(self, api: Api, scope: AnnotationScope):
        delete_pattern = re.compile(r'https://test_url\.com/services/projects/1/media/2/labels/delete$')
        with aioresponses() as m:
            m.post(delete_pattern, payload={'success': True})
            asyncio.run(api.annotations.delete_async(scope, [4, 5]))

            call = _single_call(m, 'POST')
            assert call.kwargs['json'] == {'annotationIds': [4, 5]}

    def test_export_async(self, api: Api, scope: AnnotationScope):
        export_pattern = re.compile(r'https://test_url\.com/services/projects/1/media/2/labels/export(\?.*)?$')
        data = {'labels': [{'annotation_id': 1}]}
        with aioresponses() as m:
            m.get(export_pattern, body=json.dumps(data))
            exported = asyncio.run(api.annotations.export_async(scope, 'json'))

        assert exported == json.dumps(data, indent=2, ensure_ascii=False)

    def test_get_stats_async(self, api: Api, scope: AnnotationScope):
        records = [{'annotation_id': 1, 'type': 'rect', 'user_name': 'A'},
                   {'annotation_id': 2, 'type': 'rect', 'user_name': 'A'},
                   {'annotation_id': None, 'type': 'point', 'user_name': 'B'}]
        with aioresponses() as m:
            m.get(_LABELS_PATTERN, payload=records)
            stats = asyncio.run(api.annotations.get_stats_async(scope))

            call = _single_call(m, 'GET')
            assert 'link_id' not in call.kwargs['params']

        assert stats.ok
        assert stats.total == 3
        assert stats.by_type == {'rect': 2, 'point': 1}
        assert stats.by_user == {'A': 2, 'B': 1}
        assert stats.has_unsaved == 1

    def test_get_stats_async_failure(self, api: Api, scope: AnnotationScope):
        with aioresponses() as m:
            m.get(_LABELS_PATTERN, exception=aiohttp.ClientConnectionError())
            stats = asyncio.run(api.annotations.get_stats_async(scope))

        assert not stats.ok
        assert stats.total == 0
        assert stats.error == 'Network error, check server'
