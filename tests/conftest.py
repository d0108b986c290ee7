import pytest

from logframes.config import Config
from logframes.models import LogStream


@pytest.fixture
def foo_stream():
    return LogStream.from_dict({
        "stream": {"foo": "bar"},
        "values": [["1579857562021616000", "foo: \x1b[32m'bar'\x1b[39m"]],
    })


@pytest.fixture
def bar_stream():
    return LogStream.from_dict({
        "stream": {"bar": "foo"},
        "values": [["1579857562031616000", "bar: 'foo'"]],
    })


@pytest.fixture
def stream_result(foo_stream, bar_stream):
    return [foo_stream, bar_stream]


@pytest.fixture
def grafana_tail_response():
    return {
        "streams": [
            {
                "stream": {
                    "filename": "/var/log/grafana/grafana.log",
                    "job": "grafana",
                },
                "values": [
                    [
                        "1581519914265798400",
                        't=2020-02-12T15:04:51+0000 lvl=info msg="Starting Grafana" logger=server '
                        "version=6.7.0-pre commit=6f09bc9fb4 branch=issue-21929 "
                        "compiled=2020-02-11T20:43:28+0000",
                    ],
                ],
            },
        ],
    }


@pytest.fixture
def trace_field():
    return {"matcherRegex": r"trace=(\w+)", "name": "traceID", "url": "http://tempo/trace/${__value.raw}"}


@pytest.fixture
def config():
    return Config()
