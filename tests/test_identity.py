"""Tests for row id computation."""

import json

from logframes.identity import compute_id, digest, labels_string


class TestLabelsString:
    def test_single_label(self):
        assert labels_string({"foo": "bar"}) == 'foo="bar"'

    def test_sorted_and_concatenated(self):
        labels = {"job": "grafana", "filename": "/var/log/grafana/grafana.log"}
        assert labels_string(labels) == 'filename="/var/log/grafana/grafana.log"job="grafana"'

    def test_empty(self):
        assert labels_string({}) == ""


class TestComputeId:
    def test_known_value(self):
        line = "foo: \x1b[32m'bar'\x1b[39m"
        assert compute_id({"foo": "bar"}, "1579857562021616000", line) == "2b431b8a98b80b3b2c2f4cd2444ae6cb"

    def test_second_known_value(self):
        assert compute_id({"bar": "foo"}, "1579857562031616000", "bar: 'foo'") == "75d73d66cff40f9d1a1f2d5a0bf295d0"

    def test_deterministic(self):
        args = ({"a": "1"}, "1579857562021616000", "hello")
        assert compute_id(*args) == compute_id(*args)

    def test_label_order_does_not_matter(self):
        first = compute_id({"a": "1", "b": "2", "c": "3"}, "100", "line")
        second = compute_id({"c": "3", "a": "1", "b": "2"}, "100", "line")
        assert first == second

    def test_different_inputs_differ(self):
        base = compute_id({"a": "1"}, "100", "line")
        assert compute_id({"a": "2"}, "100", "line") != base
        assert compute_id({"a": "1"}, "101", "line") != base
        assert compute_id({"a": "1"}, "100", "line!") != base

    def test_is_128_bit_hex(self):
        row_id = compute_id({}, "1", "x")
        assert len(row_id) == 32
        int(row_id, 16)

    def test_matches_digest_of_serialized_labels(self):
        labels = {"job": "api"}
        assert compute_id(labels, "5", "x") == digest("5", labels_string(labels), "x")

    def test_lone_surrogate_in_line(self):
        line = json.loads('"bad \\ud800 char"')
        row_id = compute_id({"job": "api"}, "1", line)
        assert len(row_id) == 32
        assert row_id == compute_id({"job": "api"}, "1", line)
        assert row_id != compute_id({"job": "api"}, "1", "bad  char")

    def test_lone_surrogate_in_labels(self):
        labels = {"job": json.loads('"\\udfff"')}
        assert len(compute_id(labels, "1", "x")) == 32
