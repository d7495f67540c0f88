import os
from unittest.mock import patch

import pytest

from graphsv.call.constants import DEFAULTS
from graphsv.constants import (
    COLUMNS,
    EVENT_TYPE,
    GraphsvNamespace,
    SearchOutcome,
    WeakGraphsvNamespace,
    float_fraction,
    sort_columns,
)


class TestGraphsvNamespace:
    def test_enforce(self):
        assert EVENT_TYPE.enforce('DEL') == 'DEL'
        with pytest.raises(KeyError):
            EVENT_TYPE.enforce('FOO')

    def test_call_raises_type_error(self):
        assert EVENT_TYPE('DUP_INV') == EVENT_TYPE.DUP_INV
        with pytest.raises(TypeError):
            EVENT_TYPE('FOO')

    def test_respecify_error(self):
        with pytest.raises(AttributeError):
            GraphsvNamespace('a', a=1)

    def test_env_name(self):
        assert GraphsvNamespace(a=1).get_env_name('min_event_prob') == 'GRAPHSV_MIN_EVENT_PROB'


class TestWeakNamespace:
    def test_env_override(self):
        nspace = WeakGraphsvNamespace()
        nspace.add('thing', 10, defn='a thing')
        with patch.dict(os.environ, {'GRAPHSV_THING': '15'}):
            assert nspace.thing == 15
        assert nspace.thing == 10

    def test_nullable_env_override(self):
        nspace = WeakGraphsvNamespace()
        nspace.add('limit', None, cast_type=int, nullable=True)
        with patch.dict(os.environ, {'GRAPHSV_LIMIT': 'None'}):
            assert nspace.limit is None
        with patch.dict(os.environ, {'GRAPHSV_LIMIT': '4'}):
            assert nspace.limit == 4

    def test_call_defaults_env_override(self):
        with patch.dict(os.environ, {'GRAPHSV_MIN_EVENT_PROB': '0.25'}):
            assert DEFAULTS.min_event_prob == 0.25
        assert DEFAULTS.min_event_prob == 0.5

    def test_call_defaults(self):
        assert DEFAULTS.default_copy_number == 2
        assert DEFAULTS.max_non_ref_copies == 4
        assert DEFAULTS.max_genotype_combinations == 4000000000
        assert DEFAULTS.repartition_reciprocal_overlap == 0.1
        assert DEFAULTS.max_breakpoints_per_haplotype is None
        for name in DEFAULTS.keys():
            assert DEFAULTS.define(name)


class TestFloatFraction:
    def test_valid(self):
        assert float_fraction('0.5') == 0.5

    def test_out_of_range(self):
        with pytest.raises(Exception):
            float_fraction('1.5')


class TestSearchOutcome:
    def test_success(self):
        result = SearchOutcome.success([1])
        assert result.is_success()
        assert not result.is_too_large()
        assert result.value == [1]

    def test_too_large(self):
        result = SearchOutcome.too_large(100)
        assert result.is_too_large()
        assert result.size == 100
        assert result.value is None

    def test_invalid_status(self):
        with pytest.raises(KeyError):
            SearchOutcome('bad')


class TestSortColumns:
    def test_known_before_unknown(self):
        assert sort_columns(['zzz', COLUMNS.probability, COLUMNS.event_type, 'aaa']) == [
            COLUMNS.event_type,
            COLUMNS.probability,
            'aaa',
            'zzz',
        ]
