"""
Tests for the web API.
"""

import pytest

from site_antidote.utils.errors import LoadError
from site_antidote.web import app as web_app


@pytest.fixture
def app():
    return web_app.create_app(run_jobs_in_background=False)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def cure_succeeds(monkeypatch):
    calls = []

    async def fake_cure(self):
        calls.append(self.ingredients)
        return '<html><body>cured</body></html>'

    monkeypatch.setattr(web_app.Antidote, 'cure', fake_cure)
    return calls


@pytest.fixture
def cure_fails(monkeypatch):
    async def fake_cure(self):
        raise LoadError('Could not load page')

    monkeypatch.setattr(web_app.Antidote, 'cure', fake_cure)


def test_cure_job_completes(client, cure_succeeds):
    response = client.post('/api/cure', json={'url': 'example.com', 'concurrency': 4})

    assert response.status_code == 202
    job_id = response.get_json()['jobId']

    assert cure_succeeds[0].url == 'https://example.com'
    assert cure_succeeds[0].concurrency == 4

    status = client.get(f'/api/status/{job_id}').get_json()
    assert status['status'] == 'completed'
    assert status['url'] == 'https://example.com'
    assert status['completed_at'] is not None
    assert 'html' not in status

    result = client.get(f'/api/result/{job_id}')
    assert result.status_code == 200
    assert result.mimetype == 'text/html'
    assert result.get_data(as_text=True) == '<html><body>cured</body></html>'


def test_cure_job_fails(client, cure_fails):
    job_id = client.post('/api/cure', json={'url': 'https://example.com'}).get_json()['jobId']

    status = client.get(f'/api/status/{job_id}').get_json()
    assert status['status'] == 'failed'
    assert status['errors'][0]['type'] == 'LoadError'

    assert client.get(f'/api/result/{job_id}').status_code == 409


def test_list_jobs(client, cure_succeeds):
    client.post('/api/cure', json={'url': 'https://a.com'})
    client.post('/api/cure', json={'url': 'https://b.com'})

    jobs = client.get('/api/jobs').get_json()['jobs']

    assert {job['url'] for job in jobs} == {'https://a.com', 'https://b.com'}


def test_unexpected_error_fails_job(client, monkeypatch):
    async def fake_cure(self):
        raise RuntimeError('event loop exploded')

    monkeypatch.setattr(web_app.Antidote, 'cure', fake_cure)

    job_id = client.post('/api/cure', json={'url': 'https://example.com'}).get_json()['jobId']

    status = client.get(f'/api/status/{job_id}').get_json()
    assert status['status'] == 'failed'
    assert status['completed_at'] is not None
    assert status['errors'] == [{'error': 'event loop exploded', 'type': 'RuntimeError'}]


@pytest.mark.parametrize('payload, message', [
    (None, 'No JSON data provided'),
    (['https://a.com'], 'Request body must be a JSON object'),
    ('https://a.com', 'Request body must be a JSON object'),
    (42, 'Request body must be a JSON object'),
    ({'url': ['https://a.com']}, 'URL must be a string'),
    ({'url': 'http://[::1'}, 'Invalid URL format'),
    ({'url': 'https://a.com', 'concurrency': [1]}, 'Invalid parameter value'),
    ({'url': 'https://a.com', 'timeout': {'s': 1}}, 'Invalid parameter value'),
    ({'url': ''}, 'URL is required'),
    ({'url': 'https://'}, 'Invalid URL format'),
    ({'url': 'https://a.com', 'timeout': 'soon'}, 'Invalid parameter value'),
    ({'url': 'https://a.com', 'concurrency': 0}, 'Concurrency must be between 1 and 1000'),
    ({'url': 'https://a.com', 'timeout': -1}, 'Timeout must be between 0 and 600 seconds'),
])
def test_invalid_requests(client, payload, message):
    response = client.post('/api/cure', json=payload)

    assert response.status_code == 400
    assert response.get_json()['error'].startswith(message)


def test_unknown_job(client):
    assert client.get('/api/status/nope').status_code == 404
    assert client.get('/api/result/nope').status_code == 404
