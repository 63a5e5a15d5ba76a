"""
Discogs API Client - OAuth 1.0a (PLAINTEXT) handshake, search and release lookup.

Stateless: every call that needs credentials takes the Session explicitly.
No retries; a failed call raises and the caller decides what to do.
"""
import re
import time
import uuid
import logging
from typing import Optional, Tuple
from urllib.parse import parse_qs

import requests

from ..config import (
    DISCOGS_API_URL, DISCOGS_AUTHORIZE_URL,
    DISCOGS_CONSUMER_KEY, DISCOGS_CONSUMER_SECRET,
    USER_AGENT, REQUEST_TIMEOUT,
)
from ..models import Session, MatchResult, ReleaseDetails, Track
from ..errors import ApiError, AuthError, NotAuthenticated

logger = logging.getLogger(__name__)

# Discogs appends " (2)" etc. to disambiguate artists with the same name
_DISAMBIGUATION = re.compile(r'\s*\(\d+\)$')


def clean_artist_name(name: str) -> str:
    """Strip the Discogs disambiguation suffix from an artist name."""
    return _DISAMBIGUATION.sub('', name or '').strip()


def format_description(formats) -> Optional[str]:
    """First format as 'Name: desc, desc' (e.g. 'Vinyl: LP, Album')."""
    formats = _as_list(formats)
    if not formats or not isinstance(formats[0], dict):
        return None
    first = formats[0]
    name = str(first.get('name') or '')
    descriptions = [str(d) for d in _as_list(first.get('descriptions')) if d]
    if descriptions:
        return f'{name}: {", ".join(descriptions)}'
    return name or None


class DiscogsClient:
    """Request/response wrapper around the Discogs REST API."""

    def __init__(self, base_url: str = DISCOGS_API_URL,
                 consumer_key: str = DISCOGS_CONSUMER_KEY,
                 consumer_secret: str = DISCOGS_CONSUMER_SECRET,
                 http: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.http = http or requests.Session()
        self.http.headers['User-Agent'] = USER_AGENT
        self.http.headers['Content-Type'] = 'application/x-www-form-urlencoded'

    # ============================================
    # OAUTH
    # ============================================

    def _auth_header(self, token: Optional[str] = None, token_secret: str = '',
                     verifier: Optional[str] = None) -> str:
        """Build the OAuth Authorization header value."""
        parts = [
            ('oauth_consumer_key', self.consumer_key),
            ('oauth_nonce', uuid.uuid4().hex),
            ('oauth_signature_method', 'PLAINTEXT'),
            ('oauth_timestamp', str(int(time.time()))),
        ]
        if token:
            parts.append(('oauth_token', token))
        parts.append(('oauth_signature', f'{self.consumer_secret}&{token_secret}'))
        if verifier:
            parts.append(('oauth_verifier', verifier))
        return 'OAuth ' + ', '.join(f'{key}="{value}"' for key, value in parts)

    @staticmethod
    def _parse_token_pair(text: str) -> Tuple[str, str]:
        """Parse 'oauth_token=...&oauth_token_secret=...'."""
        fields = parse_qs(text or '')
        token = (fields.get('oauth_token') or [''])[0]
        secret = (fields.get('oauth_token_secret') or [''])[0]
        if not token or not secret:
            raise AuthError('Discogs returned no token')
        return token, secret

    def request_token(self) -> Tuple[str, str]:
        """Get a temporary request token pair. Raises AuthError."""
        if not self.consumer_key or not self.consumer_secret:
            raise AuthError('Discogs consumer key/secret not configured')
        try:
            resp = self.http.get(
                f'{self.base_url}/oauth/request_token',
                headers={'Authorization': self._auth_header()},
                timeout=REQUEST_TIMEOUT,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.error(f'Request token failed: {e}', exc_info=True)
            raise AuthError(f'Could not start login: {e}') from e
        logger.info('Got request token')
        return self._parse_token_pair(resp.text)

    def authorize_url(self, request_token: str) -> str:
        """URL the user visits to approve access."""
        return f'{DISCOGS_AUTHORIZE_URL}?oauth_token={request_token}'

    def access_token(self, request_token: str, request_secret: str, verifier: str) -> Session:
        """Exchange an approved request token and verifier for a Session. Raises AuthError."""
        verifier = (verifier or '').strip()
        if not verifier:
            raise AuthError('No verification code entered')
        try:
            resp = self.http.post(
                f'{self.base_url}/oauth/access_token',
                headers={'Authorization': self._auth_header(request_token, request_secret, verifier)},
                timeout=REQUEST_TIMEOUT,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.error(f'Access token failed: {e}', exc_info=True)
            raise AuthError(f'Login failed: {e}') from e
        token, secret = self._parse_token_pair(resp.text)
        logger.info('Got access token')
        return Session(oauth_token=token, oauth_token_secret=secret)

    # ============================================
    # AUTHORIZED REQUESTS
    # ============================================

    def _get_json(self, path: str, session: Session, params: Optional[dict] = None) -> dict:
        """GET an API path with the session's credentials. Raises ApiError."""
        url = path if path.startswith('http') else f'{self.base_url}{path}'
        try:
            resp = self.http.get(
                url,
                params=params,
                headers={'Authorization': self._auth_header(session.oauth_token, session.oauth_token_secret)},
                timeout=REQUEST_TIMEOUT,
            )
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as e:
            logger.error(f'GET {path} failed: {e}', exc_info=True)
            raise ApiError(f'Discogs request failed: {e}') from e
        except ValueError as e:
            logger.error(f'GET {path} returned invalid JSON: {e}')
            raise ApiError('Discogs returned an invalid response') from e
        if not isinstance(data, dict):
            raise ApiError('Discogs returned an unexpected response')
        return data

    def search(self, title: str, artist: str, session: Optional[Session]) -> Optional[MatchResult]:
        """
        Search masters by artist and title.

        Returns the first hit resolved to its main release, or None when
        nothing matched. Raises NotAuthenticated before any request when
        the session has no credentials, ApiError on network/protocol failure.
        """
        if session is None or not session.authenticated:
            raise NotAuthenticated()

        query = f'{artist} - {title}'
        logger.info(f'Searching Discogs for "{query}"')
        data = self._get_json('/database/search', session, params={'q': query, 'type': 'master'})

        results = data.get('results')
        if not isinstance(results, list) or not results:
            logger.info(f'No results for "{query}"')
            return None
        hit = results[0]
        if not isinstance(hit, dict):
            raise ApiError('Discogs returned an unexpected search result')

        art_url = hit.get('cover_image') or None
        master_id = hit.get('master_id') or (hit.get('id') if hit.get('type') == 'master' else None)
        try:
            if master_id:
                master = self._get_json(f'/masters/{master_id}', session)
                release_id = int(master['main_release'])
                art_url = art_url or _first_image(master)
            else:
                release_id = int(hit['id'])
        except (KeyError, TypeError, ValueError) as e:
            raise ApiError('Discogs search result has no release id') from e

        logger.info(f'Matched "{query}" to release {release_id}')
        return MatchResult(release_id=release_id, art_url=art_url, master_id=master_id, title=hit.get('title'))

    def release(self, release_id: int, session: Optional[Session]) -> ReleaseDetails:
        """Fetch release details. Raises NotAuthenticated or ApiError."""
        if session is None or not session.authenticated:
            raise NotAuthenticated()

        data = self._get_json(f'/releases/{release_id}', session)
        try:
            artists = _as_list(data.get('artists'))
            first_artist = artists[0] if artists and isinstance(artists[0], dict) else {}
            year = data.get('year')
            return ReleaseDetails(
                release_id=int(data.get('id', release_id)),
                title=str(data.get('title') or ''),
                artist=clean_artist_name(str(first_artist.get('name') or '')),
                year=int(year) if year else None,
                genres=[str(g) for g in _as_list(data.get('genres'))],
                styles=[str(s) for s in _as_list(data.get('styles'))],
                country=str(data.get('country') or '') or None,
                format=format_description(data.get('formats')),
                art_url=_first_image(data),
                tracklist=[Track.from_dict(t) for t in _as_list(data.get('tracklist')) if isinstance(t, dict)],
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error(f'Malformed release {release_id}: {e}', exc_info=True)
            raise ApiError(f'Discogs returned a malformed release {release_id}') from e

    def fetch_art(self, art_url: str, session: Optional[Session] = None) -> bytes:
        """Download cover image bytes. Raises ApiError."""
        if not art_url:
            raise ApiError('Release has no cover image')
        headers = {}
        if session is not None and session.authenticated:
            headers['Authorization'] = self._auth_header(session.oauth_token, session.oauth_token_secret)
        try:
            resp = self.http.get(art_url, headers=headers, timeout=REQUEST_TIMEOUT)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f'Cover download failed for {art_url}: {e}')
            raise ApiError(f'Cover download failed: {e}') from e
        return resp.content


def _as_list(value) -> list:
    """value if it is a list, else an empty list."""
    return value if isinstance(value, list) else []


def _first_image(data: dict) -> Optional[str]:
    images = _as_list(data.get('images'))
    if images and isinstance(images[0], dict):
        return images[0].get('resource_url') or images[0].get('uri') or None
    return None
