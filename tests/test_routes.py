import pytest

from services.errors import LocalStorageError
from utils.auth import generate_token
from conftest import JWT_SECRET


def _open(client, headers, book_id='01_kejadian', chapter=1):
    response = client.post('/api/reader', json={'book_id': book_id, 'chapter': chapter}, headers=headers)
    assert response.status_code == 201
    return response.get_json()


def test_health(client):
    response = client.get('/health')

    assert response.status_code == 200
    assert response.get_json()['status'] == 'healthy'


def test_catalogue_is_public(client):
    collections = client.get('/api/bible/collections').get_json()
    books = client.get('/api/bible/collections/tb_malay/books').get_json()
    chapter = client.get('/api/bible/books/01_kejadian/chapters/2').get_json()

    assert [c['id'] for c in collections] == ['tb_malay']
    assert [b['id'] for b in books] == ['01_kejadian', '02_keluaran']
    assert chapter['reference'] == 'Kejadian 2'
    assert chapter['total_verses'] == 10


def test_unknown_collection_and_chapter(client):
    assert client.get('/api/bible/collections/nope/books').status_code == 404
    response = client.get('/api/bible/books/01_kejadian/chapters/9')
    assert response.status_code == 404
    assert response.get_json()['kind'] == 'not_found'


@pytest.mark.parametrize('headers', [{}, {'Authorization': 'Token abc'}, {'Authorization': 'Bearer not-a-jwt'}])
def test_protected_routes_reject_bad_tokens(client, headers):
    assert client.get('/api/preferences', headers=headers).status_code == 401


def test_expired_token(client):
    token = generate_token('user-1', JWT_SECRET, expiration_hours=-1)
    response = client.get('/api/preferences', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 401
    assert response.get_json()['error'] == 'Token has expired'


def test_preferences_clamp_font_size(client, auth_headers):
    assert client.get('/api/preferences', headers=auth_headers()).get_json()['font_size'] == 1.0

    response = client.put('/api/preferences', json={'font_size': 10, 'night_mode': True}, headers=auth_headers())

    assert response.status_code == 200
    assert response.get_json()['font_size'] == 2.5
    assert response.get_json()['night_mode'] is True


def test_preferences_reject_bad_types(client, auth_headers):
    response = client.put('/api/preferences', json={'font_size': 'huge'}, headers=auth_headers())
    assert response.status_code == 400


def test_open_reader_and_navigate(client, auth_headers):
    opened = _open(client, auth_headers(), chapter=1)
    session_id = opened['session_id']
    assert opened['screen']['reference'] == 'Kejadian 1'

    boundary = client.post(f'/api/reader/{session_id}/previous', headers=auth_headers()).get_json()
    assert boundary['moved'] is False
    assert boundary['notifications'] == [{'message': 'Already at the first chapter', 'level': 'info'}]
    assert boundary['screen']['chapter'] == 1

    moved = client.post(f'/api/reader/{session_id}/next', headers=auth_headers()).get_json()
    assert moved['moved'] is True
    assert moved['screen']['chapter'] == 2
    assert moved['routes'] == ['reader']

    picked = client.post(f'/api/reader/{session_id}/chapters/4', headers=auth_headers()).get_json()
    assert picked['screen']['chapter'] == 4


def test_selection_over_http(client, auth_headers):
    session_id = _open(client, auth_headers())['session_id']
    base = f'/api/reader/{session_id}'

    client.post(f'{base}/verses/5/long-press', headers=auth_headers())
    client.post(f'{base}/verses/2/tap', headers=auth_headers())
    body = client.post(f'{base}/verses/8/tap', headers=auth_headers()).get_json()
    assert body['screen']['selected_count'] == 3

    copied = client.post(f'{base}/selection/copy', headers=auth_headers()).get_json()
    assert copied['text'].split('\n\n')[1:] == [
        '2. Kejadian 1 ayat 2', '5. Kejadian 1 ayat 5', '8. Kejadian 1 ayat 8',
    ]
    assert copied['screen']['selection_mode'] is False


def test_tap_returns_verse_actions(client, auth_headers):
    session_id = _open(client, auth_headers())['session_id']

    body = client.post(f'/api/reader/{session_id}/verses/3/tap', headers=auth_headers()).get_json()

    assert body['verse_actions'] == ['copy', 'share', 'bookmark', 'highlight', 'note', 'ask_ai']


def test_unknown_verse_is_404(client, auth_headers):
    session_id = _open(client, auth_headers())['session_id']

    response = client.post(f'/api/reader/{session_id}/verses/40/copy', headers=auth_headers())
    assert response.status_code == 404


def test_bookmark_then_list_and_delete(client, auth_headers):
    session_id = _open(client, auth_headers())['session_id']

    created = client.post(f'/api/reader/{session_id}/verses/3/bookmark',
                          json={'note': 'test', 'tags': ['pagi']}, headers=auth_headers())
    assert created.status_code == 201
    bookmark_id = created.get_json()['bookmark']['id']
    assert created.get_json()['screen']['verses'][2]['bookmarked'] is True

    listed = client.get('/api/bookmarks/', headers=auth_headers()).get_json()
    assert listed['count'] == 1
    assert listed['bookmarks'][0]['reference'] == 'Kejadian 1:3'

    unconfirmed = client.delete(f'/api/bookmarks/{bookmark_id}', headers=auth_headers())
    assert unconfirmed.status_code == 400

    deleted = client.delete(f'/api/bookmarks/{bookmark_id}?confirm=true', headers=auth_headers())
    assert deleted.status_code == 200
    assert deleted.get_json()['empty'] is True

    missing = client.delete(f'/api/bookmarks/{bookmark_id}?confirm=true', headers=auth_headers())
    assert missing.status_code == 404


def test_edit_bookmark(client, auth_headers, store):
    session_id = _open(client, auth_headers())['session_id']
    created = client.post(f'/api/reader/{session_id}/verses/1/bookmark', json={}, headers=auth_headers())
    bookmark_id = created.get_json()['bookmark']['id']

    response = client.put(f'/api/bookmarks/{bookmark_id}', json={'note': 'baru'}, headers=auth_headers())

    assert response.status_code == 200
    assert response.get_json()['bookmark']['note'] == 'baru'
    assert client.put('/api/bookmarks/999', json={'note': 'x'}, headers=auth_headers()).status_code == 404
    assert client.put(f'/api/bookmarks/{bookmark_id}', json={'tags': 'x'}, headers=auth_headers()).status_code == 400


def test_bookmark_without_premium_shows_upsell(client, auth_headers, premium, store):
    premium.premium = False
    session_id = _open(client, auth_headers())['session_id']

    response = client.post(f'/api/reader/{session_id}/verses/2/bookmark', json={'note': 'test'},
                           headers=auth_headers())

    body = response.get_json()
    assert response.status_code == 200
    assert body['bookmark'] is None
    assert body['screen']['route'] == 'premium_upsell'
    assert body['routes'] == ['reader', 'premium_upsell']
    assert store.get_bookmarks() == []

    # Reader actions are refused until the upsell is dismissed
    assert client.post(f'/api/reader/{session_id}/next', headers=auth_headers()).status_code == 409
    back = client.post(f'/api/reader/{session_id}/back', headers=auth_headers()).get_json()
    assert back['screen']['route'] == 'reader'
    assert client.post(f'/api/reader/{session_id}/back', headers=auth_headers()).status_code == 409


def test_highlight_validation(client, auth_headers):
    session_id = _open(client, auth_headers())['session_id']

    rejected = client.post(f'/api/reader/{session_id}/verses/2/highlight', json={'color': 'teal'},
                           headers=auth_headers())
    assert rejected.status_code == 400
    assert 'yellow' in rejected.get_json()['palette']

    accepted = client.post(f'/api/reader/{session_id}/verses/2/highlight', json={'color': 'blue'},
                           headers=auth_headers())
    assert accepted.status_code == 201
    assert accepted.get_json()['screen']['verses'][1]['highlight'] == 'blue'


def test_note_requires_content(client, auth_headers):
    session_id = _open(client, auth_headers())['session_id']

    assert client.post(f'/api/reader/{session_id}/verses/2/note', json={'content': ' '},
                       headers=auth_headers()).status_code == 400
    created = client.post(f'/api/reader/{session_id}/verses/2/note', json={'content': 'Renungan'},
                          headers=auth_headers())
    assert created.status_code == 201
    assert created.get_json()['note']['content'] == 'Renungan'


def test_chat_context(client, auth_headers):
    session_id = _open(client, auth_headers(), chapter=3)['session_id']

    body = client.post(f'/api/reader/{session_id}/chat', headers=auth_headers()).get_json()

    assert body['chat_context']['description'] == 'Kejadian 3'


def test_sessions_are_private(client, auth_headers):
    session_id = _open(client, auth_headers('user-1'))['session_id']

    assert client.get(f'/api/reader/{session_id}', headers=auth_headers('user-2')).status_code == 403
    assert client.get('/api/reader/unknown', headers=auth_headers()).status_code == 404


def test_close_session(client, auth_headers, services):
    session_id = _open(client, auth_headers())['session_id']

    assert client.delete(f'/api/reader/{session_id}', headers=auth_headers()).status_code == 200
    assert len(services.sessions) == 0
    assert client.get(f'/api/reader/{session_id}', headers=auth_headers()).status_code == 404


def test_bookmark_lookup_failure_returns_json_error(client, auth_headers, store, monkeypatch):
    def broken_get(bookmark_id):
        raise LocalStorageError("database is locked")

    monkeypatch.setattr(store, 'get_bookmark', broken_get)

    deleted = client.delete('/api/bookmarks/1?confirm=true', headers=auth_headers())
    edited = client.put('/api/bookmarks/1', json={'note': 'x'}, headers=auth_headers())

    for response in (deleted, edited):
        assert response.status_code == 500
        assert response.is_json
        assert response.get_json()['kind'] == 'unknown'
