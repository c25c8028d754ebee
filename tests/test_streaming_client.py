import pytest

import streaming_client


class FakeResponse:
    def __init__(self, payload=None, lines=()):
        self.payload = payload
        self.lines = list(lines)
        self.closed = False

    def json(self):
        return self.payload

    def raise_for_status(self):
        pass

    def iter_lines(self, decode_unicode=False):
        return iter(self.lines)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True


@pytest.fixture
def posts(monkeypatch):
    calls = []

    def fake_post(url, json=None, stream=False):
        calls.append((url, json, stream))
        if url.endswith('/factorize'):
            return FakeResponse(payload={'number': json['number'], 'factorization_str': '2^3 3^2 5^1'})
        return FakeResponse(lines=['# First 3 prime numbers', '2 3 5 ', '', '# OK'])

    monkeypatch.setattr(streaming_client.requests, 'post', fake_post)
    return calls


def test_request_factorization(posts):
    result = streaming_client.request_factorization('http://localhost:4001', 360)
    assert result['factorization_str'] == '2^3 3^2 5^1'
    assert posts == [('http://localhost:4001/factorize', {'number': 360}, False)]


def test_stream_primes_skips_blank_lines(posts):
    lines = list(streaming_client.stream_primes('http://localhost:4001', 3))
    assert lines == ['# First 3 prime numbers', '2 3 5 ', '# OK']
    assert posts == [('http://localhost:4001/primes', {'count': 3}, True)]


def test_main(posts, monkeypatch, capsys):
    monkeypatch.setattr('sys.argv', ['prime-client', 'http://localhost:4001/',
                                     '--factorize', '360', '--primes', '3'])
    streaming_client.main()
    out = capsys.readouterr().out
    assert '360 = 2^3 3^2 5^1' in out
    assert '# OK' in out
