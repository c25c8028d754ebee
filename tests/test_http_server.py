import pytest

from http_server import InvalidNumber, create_app, parse_number


@pytest.fixture
def client():
    app = create_app(group_width=5)
    app.config['TESTING'] = True
    return app.test_client()


def test_parse_number():
    assert parse_number(' 42 ') == 42
    assert parse_number(7) == 7
    assert parse_number('+7') == 7
    assert parse_number('-3') == -3
    for bad in ('abc', '', None, '3.5', True, 2 ** 64, '1_000', '0x10', '1e3'):
        with pytest.raises(InvalidNumber):
            parse_number(bad)


def test_index(client):
    response = client.get('/')
    assert response.status_code == 200
    assert b'action="/primefactors"' in response.data
    assert b'action="/primenumbers"' in response.data


def test_stylesheet(client):
    assert client.get('/static/stylesheets/style.css').status_code == 200


def test_prime_factors_page(client):
    response = client.post('/primefactors', data={'number': '360'})
    assert response.status_code == 200
    page = response.get_data(as_text=True)
    assert '<h1>Success</h1>' in page
    assert 'Prime Factors of 360 = 2^3 * 3^2 * 5^1' in page


@pytest.mark.parametrize('number, message, details', [
    ('abc', 'Invalid number', 'invalid syntax'),
    ('0', 'Cannot calculate prime factors of 0', 'It must be greater than zero.'),
    ('1', 'Cannot calculate prime factors of 1', 'Invalid argument number 1'),
])
def test_prime_factors_errors(client, number, message, details):
    page = client.post('/primefactors', data={'number': number}).get_data(as_text=True)
    assert '<h1>Error</h1>' in page
    assert message in page
    assert details in page


def test_prime_factors_method_not_allowed(client):
    assert client.get('/primefactors').status_code == 405
    assert client.get('/primenumbers').status_code == 405


def test_prime_numbers_stream(client):
    response = client.post('/primenumbers', data={'limit': '12'})
    assert response.status_code == 200
    assert response.mimetype == 'text/html'
    page = response.get_data(as_text=True)
    assert 'First 12 prime numbers:' in page
    assert '2  3  5  7  11  <br>\n13  17  19  23  29  <br>\n31  37  ' in page
    assert page.rstrip().endswith('</html>')
    assert 'Back home' in page


def test_prime_numbers_below_seed_reports_failure(client):
    page = client.post('/primenumbers', data={'limit': '2'}).get_data(as_text=True)
    assert '<h1>Error</h1>' in page
    assert 'Cannot calculate first 2 prime numbers' in page
    assert 'Invalid argument number 2' in page
    assert 'First 2 prime numbers:' not in page


@pytest.mark.parametrize('limit, details', [
    ('-1', 'Limit must be greater than zero.'),
    ('x', 'invalid syntax'),
])
def test_prime_numbers_bad_limit(client, limit, details):
    page = client.post('/primenumbers', data={'limit': limit}).get_data(as_text=True)
    assert '<h1>Error</h1>' in page
    assert details in page


def test_factorize_json(client):
    response = client.post('/factorize', json={'number': 360})
    assert response.status_code == 200
    assert response.get_json() == {
        'number': 360,
        'factorization': [[2, 3], [3, 2], [5, 1]],
        'factorization_str': '2^3 3^2 5^1',
        'message': 'Prime Factors of 360 = 2^3 * 3^2 * 5^1',
    }


def test_factorize_json_errors(client):
    response = client.post('/factorize', json={'number': 1})
    assert response.status_code == 400
    assert response.get_json()['details'] == 'Invalid argument number 1'

    response = client.post('/factorize', json={})
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Invalid number'


def test_primes_text_stream(client):
    response = client.post('/primes', json={'count': 10})
    assert response.status_code == 200
    assert response.mimetype == 'text/plain'
    assert response.get_data(as_text=True) == (
        '# First 10 prime numbers\n'
        '2 3 5 7 11 \n'
        '13 17 19 23 29 \n'
        '\n# OK\n'
    )


def test_primes_text_stream_failure(client):
    text = client.post('/primes', json={'count': 1}).get_data(as_text=True)
    assert text == '# Error: Cannot calculate first 1 prime numbers: Invalid argument number 1\n'


def test_primes_text_bad_count(client):
    response = client.post('/primes', json={'count': 'many'})
    assert response.status_code == 400
