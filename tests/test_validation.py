import pytest
from morpholabels.entities.annotation import Annotation
from morpholabels.entities.annotations.geometry import (GEOMETRY_TYPES, PointGeometry, PolygonGeometry,
                                                        RectGeometry, ShapeType)
from morpholabels.factory import make_default_annotation
from morpholabels.validation import validate_annotation


class TestValidateAnnotation:
    @pytest.mark.parametrize('x, y, w, h', [(0, 0, 1, 1), (10, 20, 100, 50), (0.5, 3, 0.1, 2000)])
    def test_valid_rect(self, x, y, w, h):
        ann = Annotation(label='skull', shape_type='rect', x=x, y=y, w=w, h=h)
        result = validate_annotation(ann)
        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    def test_rect_violations(self):
        result = validate_annotation({'label': 'skull', 'type': 'rect', 'x': -1, 'y': 2, 'w': 0, 'h': -3})
        assert not result.is_valid
        assert result.errors == ['Invalid X coordinate for rectangle',
                                 'Invalid width for rectangle',
                                 'Invalid height for rectangle']

    def test_rect_missing_geometry(self):
        result = validate_annotation({'label': 'skull', 'type': 'rect'})
        assert len(result.errors) == 4

    def test_point(self):
        assert validate_annotation({'label': 'tip', 'type': 'point', 'x': 0, 'y': 0}).is_valid
        result = validate_annotation({'label': 'tip', 'type': 'point', 'x': 4, 'y': -0.5})
        assert result.errors == ['Invalid Y coordinate for point']

    def test_poly_too_few_points(self):
        result = validate_annotation({'type': 'poly', 'points': [0, 0, 1, 1]})
        assert not result.is_valid
        assert any('at least 3 points' in e for e in result.errors)

    def test_poly_odd_coordinates(self):
        result = validate_annotation({'type': 'poly', 'points': [0, 0, 1, 1, 2, 2, 3]})
        assert not result.is_valid
        assert any('x,y pairs' in e for e in result.errors)

    def test_poly_short_and_odd_reports_both(self):
        result = validate_annotation({'type': 'poly', 'points': [0, 0, 1, 1, 2]})
        assert not result.is_valid
        assert any('at least 3 points' in e for e in result.errors)
        assert any('x,y pairs' in e for e in result.errors)

    def test_poly_without_points(self):
        result = validate_annotation({'label': 'outline', 'type': 'poly'})
        assert result.errors == ['Polygon must have points array']

    def test_valid_poly(self):
        result = validate_annotation({'label': 'outline', 'type': 'poly', 'points': [0, 0, 10, 0, 5, 8]})
        assert result.is_valid

    @pytest.mark.parametrize('label', ['', '   ', None])
    def test_label_required(self, label):
        ann = {'type': 'point', 'x': 1, 'y': 1}
        if label is not None:
            ann['label'] = label
        result = validate_annotation(ann)
        assert result.errors == ['Label is required']

    def test_type_required(self):
        result = validate_annotation({'label': 'tip', 'x': 1, 'y': 1})
        assert 'Annotation type is required' in result.errors
        assert 'Unknown annotation type' in result.warnings

    def test_unknown_type_is_a_warning(self):
        result = validate_annotation({'label': 'ring', 'type': 'ellipse'})
        assert result.is_valid
        assert result.warnings == ['Unknown annotation type']

    def test_long_label_is_a_warning(self):
        result = validate_annotation({'label': 'x' * 256, 'type': 'point', 'x': 1, 'y': 1})
        assert result.is_valid
        assert result.warnings == ['Label is very long and may be truncated']
        assert validate_annotation({'label': 'x' * 255, 'type': 'point', 'x': 1, 'y': 1}).warnings == []

    def test_unreadable_numbers_count_as_missing(self):
        result = validate_annotation({'label': 'tip', 'type': 'point', 'x': 'left', 'y': '4'})
        assert not result.is_valid
        assert result.errors == ['Invalid X coordinate for point']

    def test_numeric_label_is_read_as_text(self):
        result = validate_annotation({'label': 7, 'type': 'point', 'x': 1, 'y': 1})
        assert result.is_valid

    @pytest.mark.parametrize('annotation', [None, 'rect', [1, 2]])
    def test_not_an_object(self, annotation):
        result = validate_annotation(annotation)
        assert result.errors == ['Annotation must be an object']

    def test_default_annotations_only_miss_a_label(self):
        for shape in ShapeType:
            result = validate_annotation(make_default_annotation(shape, (5, 5)))
            assert result.errors == ['Label is required']

    def test_unknown_default_annotation_is_incomplete(self):
        result = validate_annotation(make_default_annotation('ellipse', (5, 5)))
        assert result.warnings == ['Unknown annotation type']


class TestGeometry:
    def test_registry_covers_every_shape_type(self):
        assert set(GEOMETRY_TYPES) == set(ShapeType)
        for shape, geometry_type in GEOMETRY_TYPES.items():
            assert geometry_type.shape_type == shape

    def test_geometry_variant_matches_shape(self):
        rect = Annotation(shape_type='rect', x=1, y=2, w=3, h=4)
        assert rect.geometry == RectGeometry(x=1, y=2, w=3, h=4)
        assert Annotation(shape_type='point', x=1, y=2).geometry == PointGeometry(x=1, y=2)
        assert Annotation(shape_type='poly', points=[1, 2]).geometry == PolygonGeometry(points=[1, 2])
        assert Annotation(shape_type='ellipse').geometry is None
        assert Annotation().geometry is None
