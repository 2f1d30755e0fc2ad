"""
Tests for the asset fetcher.
"""

import pytest

from site_antidote.curing.fetcher import AssetFetcher
from site_antidote.utils.errors import FetchError

from .conftest import PNG_BYTES


async def test_fetch_text(site):
    url = site.add('/site.css', 'body { color: red; }', content_type='text/css')

    async with AssetFetcher() as fetcher:
        assert await fetcher.fetch_text(url) == 'body { color: red; }'


async def test_fetch_bytes_returns_exact_body(site):
    url = site.add('/logo.png', PNG_BYTES, content_type='image/png')

    async with AssetFetcher() as fetcher:
        assert await fetcher.fetch_bytes(url) == PNG_BYTES


async def test_fetch_text_uses_declared_charset(site):
    url = site.add('/latin.css', 'a::after { content: "é"; }'.encode('latin-1'),
                   content_type='text/css; charset=latin-1')

    async with AssetFetcher() as fetcher:
        text = await fetcher.fetch_text(url)

    assert text == 'a::after { content: "é"; }'


async def test_non_success_status_raises(site):
    async with AssetFetcher() as fetcher:
        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch_text(site.url('/missing.css'))

    assert exc_info.value.status == 404
    assert exc_info.value.url.endswith('/missing.css')


async def test_server_error_raises(site):
    url = site.add('/broken.js', 'oops', status=500)

    async with AssetFetcher() as fetcher:
        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch_text(url)

    assert exc_info.value.status == 500


async def test_connection_error_raises():
    async with AssetFetcher() as fetcher:
        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch_text('http://127.0.0.1:1/nothing.css')

    assert exc_info.value.status is None


async def test_opt_in_timeout(site):
    url = site.add('/slow.js', 'slow()', content_type='application/javascript', delay=1.0)

    async with AssetFetcher(timeout=0.1) as fetcher:
        with pytest.raises(FetchError):
            await fetcher.fetch_text(url)


async def test_stats(site):
    url = site.add('/a.css', 'a{}', content_type='text/css')

    async with AssetFetcher(concurrency=2) as fetcher:
        await fetcher.fetch_text(url)
        with pytest.raises(FetchError):
            await fetcher.fetch_text(site.url('/missing.css'))

    stats = fetcher.get_stats()
    assert stats['total_requests'] == 2
    assert stats['successful_requests'] == 1
    assert stats['failed_requests'] == 1
    assert stats['total_bytes_downloaded'] == 3


def test_invalid_concurrency():
    with pytest.raises(ValueError):
        AssetFetcher(concurrency=0)
