import errno
import os

import pytest

from handlers.request_handler import Outcome, dispatch, handle_request
from handlers.responders import render_listing
from utils.config import Settings
from services.server_context import ServerContext


async def test_unsupported_extension_is_not_found(ctx, make_request):
    decision = await dispatch(make_request('/script.py'), ctx)
    assert decision.outcome == Outcome.RESPOND_NOT_FOUND

    response = await handle_request(make_request('/script.py'), ctx)
    assert response.status == 404
    assert response.body == b'Not found'


async def test_directory_without_index_is_listed(ctx, make_request):
    decision = await dispatch(make_request('/assets/'), ctx)
    assert decision.outcome == Outcome.SERVE_DIRECTORY


@pytest.mark.parametrize("url, location", [
    ('/docs', '/docs/index.html'),
    ('/docs/', '/docs/index.html'),
])
async def test_directory_with_index_redirects(ctx, make_request, url, location):
    decision = await dispatch(make_request(url), ctx)
    assert decision.outcome == Outcome.REDIRECT_TO

    response = await handle_request(make_request(url), ctx)
    assert response.status == 302
    assert response.headers['Location'] == location
    assert response.body == b''


async def test_serve_file(ctx, site, make_request):
    response = await handle_request(make_request('/app.js'), ctx)

    assert response.status == 200
    assert response.headers['Content-Type'] == 'text/javascript'
    assert response.body == (site / 'app.js').read_bytes()
    assert ctx.watch_service.is_watched(str(site / 'app.js'))


async def test_serve_file_with_query_string(ctx, site, make_request):
    response = await handle_request(make_request('/style.css?v=12'), ctx)
    assert response.status == 200
    assert response.headers['Content-Type'] == 'text/css'


async def test_missing_file_is_not_found_and_not_watched(ctx, site, make_request):
    response = await handle_request(make_request('/missing.js'), ctx)
    assert response.status == 404
    assert response.body == b'Not found'
    assert not ctx.watch_service.watched_paths


async def test_directory_without_trailing_slash_redirects(ctx, make_request):
    response = await handle_request(make_request('/assets'), ctx)
    assert response.status == 302
    assert response.headers['Location'] == '/assets/'


async def test_directory_listing(ctx, site, make_request):
    response = await handle_request(make_request('/assets/'), ctx)

    assert response.status == 200
    assert response.headers['Content-Type'] == 'text/html; charset=utf-8'
    assert b'<a href="/assets/logo.png">logo.png</a>' in response.body
    assert response.served_path == os.path.join(str(site), 'assets/')


async def test_root_listing(ctx, make_request):
    response = await handle_request(make_request('/'), ctx)
    assert response.status == 200
    for name in (b'app.js', b'assets', b'docs', b'script.py'):
        assert b'<a href="/' + name + b'">' + name + b'</a>' in response.body


async def test_missing_directory_is_not_found(ctx, make_request):
    response = await handle_request(make_request('/nowhere/'), ctx)
    assert response.status == 404


async def test_listing_escapes_entry_names():
    page = render_listing('/d/', ['<b>"x".png', 'a b.js'])
    assert '<b>' not in page.split('</style>')[1]
    assert '&lt;b&gt;&quot;x&quot;.png' in page
    assert 'href="/d/%3Cb%3E%22x%22.png"' in page
    assert 'href="/d/a%20b.js"' in page


async def test_internal_asset_is_served(ctx, make_request):
    response = await handle_request(make_request('/_hotserve/livereload.js'), ctx)
    assert response.status == 200
    assert response.headers['Content-Type'] == 'text/javascript'
    assert b'WebSocket' in response.body


async def test_traversal_is_refused_when_confined(site, observer, make_request):
    ctx = ServerContext.create(Settings(root=str(site / 'assets')), observer=observer)

    decision = await dispatch(make_request('/../app.js'), ctx)
    assert decision.outcome == Outcome.RESPOND_NOT_FOUND
    assert (await handle_request(make_request('/../app.js'), ctx)).status == 404
    assert (await handle_request(make_request('/../'), ctx)).status == 404


async def test_traversal_allowed_when_not_confined(site, observer, make_request):
    ctx = ServerContext.create(Settings(root=str(site / 'assets'), confine_to_root=False), observer=observer)

    response = await handle_request(make_request('/../app.js'), ctx)
    assert response.status == 200
    assert response.body == (site / 'app.js').read_bytes()


async def test_unexpected_error_is_server_error(ctx, make_request, monkeypatch):
    async def boom(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr('handlers.request_handler.file_content', boom)
    response = await handle_request(make_request('/app.js'), ctx)
    assert response.status == 500
    assert response.body == b'Server error'


@pytest.mark.parametrize("error", [
    PermissionError(errno.EACCES, 'denied'),
    OSError(errno.EIO, 'i/o error'),
])
async def test_unreadable_file_is_not_found_and_not_watched(ctx, site, make_request, monkeypatch, error):
    def fail(path):
        raise error

    monkeypatch.setattr('services.file_service._read_bytes', fail)
    response = await handle_request(make_request('/app.js'), ctx)

    assert response.status == 404
    assert response.body == b'Not found'
    assert not ctx.watch_service.is_watched(str(site / 'app.js'))


async def test_unreadable_directory_is_not_found(ctx, make_request, monkeypatch):
    def fail(path):
        raise PermissionError(errno.EACCES, 'denied')

    monkeypatch.setattr('services.file_service.os.listdir', fail)
    response = await handle_request(make_request('/assets/'), ctx)

    assert response.status == 404
    assert response.body == b'Not found'
