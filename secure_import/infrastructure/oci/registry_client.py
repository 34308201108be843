"""Registry HTTP API client for manifest lookups (existence and digest)."""

import base64
import hashlib
import re

import httpx
import logfire

from secure_import.config import RegistryConfig
from secure_import.domain.discovery.model.reference import ImageReference
from secure_import.domain.shared.error import RegistryError

DOCKER_HUB = "docker.io"
DOCKER_HUB_API = "registry-1.docker.io"

MANIFEST_MEDIA_TYPES = ", ".join(
    [
        "application/vnd.oci.image.index.v1+json",
        "application/vnd.oci.image.manifest.v1+json",
        "application/vnd.docker.distribution.manifest.list.v2+json",
        "application/vnd.docker.distribution.manifest.v2+json",
    ]
)

_CHALLENGE_PARAM = re.compile(r'(\w+)="([^"]*)"')


class HttpRegistryClient:
    """Looks up manifests over the registry HTTP API.

    Handles anonymous and credentialed bearer-token challenges as well as
    plain basic auth.
    """

    def __init__(self, client: httpx.AsyncClient, config: RegistryConfig) -> None:
        self._client = client
        self._config = config

    async def exists(self, reference: str) -> bool:
        response = await self._head_manifest(reference)
        if response.status_code == 200:
            return True
        if response.status_code == 404:
            return False
        raise RegistryError(
            f"Error checking image existence for {reference}: HTTP {response.status_code}",
            reference=reference,
            status=response.status_code,
        )

    async def digest(self, reference: str) -> str:
        response = await self._head_manifest(reference)
        if response.status_code != 200:
            raise RegistryError(
                f"Getting digest for {reference}: HTTP {response.status_code}",
                reference=reference,
                status=response.status_code,
            )
        digest = response.headers.get("Docker-Content-Digest")
        if digest:
            return digest

        # Some registries omit the header on HEAD; hash the manifest body instead
        response = await self._request("GET", reference)
        if response.status_code != 200:
            raise RegistryError(
                f"Getting manifest for {reference}: HTTP {response.status_code}",
                reference=reference,
                status=response.status_code,
            )
        return response.headers.get("Docker-Content-Digest") or (
            "sha256:" + hashlib.sha256(response.content).hexdigest()
        )

    def manifest_url(self, reference: str) -> str:
        ref = ImageReference.parse(reference)
        host = ref.registry or DOCKER_HUB
        repository = ref.repository
        if host == DOCKER_HUB:
            host = DOCKER_HUB_API
            if "/" not in repository:
                repository = f"library/{repository}"
        version = ref.digest or ref.tag
        return f"{self._config.scheme_for(host)}://{host}/v2/{repository}/manifests/{version}"

    async def _head_manifest(self, reference: str) -> httpx.Response:
        return await self._request("HEAD", reference)

    async def _request(self, method: str, reference: str) -> httpx.Response:
        url = self.manifest_url(reference)
        headers = {"Accept": MANIFEST_MEDIA_TYPES}
        try:
            response = await self._client.request(method, url, headers=headers)
            if response.status_code == 401:
                auth_header = await self._authorize(response)
                if auth_header is not None:
                    headers["Authorization"] = auth_header
                    response = await self._client.request(method, url, headers=headers)
        except httpx.HTTPError as e:
            logfire.error("Registry request failed", url=url, error=str(e))
            raise RegistryError(f"Registry request to {url} failed: {e}", reference=reference) from e
        return response

    async def _authorize(self, challenge: httpx.Response) -> str | None:
        """Answer a 401 challenge. Returns an Authorization header value or None."""
        header = challenge.headers.get("WWW-Authenticate", "")
        scheme, _, params_str = header.partition(" ")
        scheme = scheme.lower()

        if scheme == "basic":
            if not self._config.username:
                return None
            credentials = f"{self._config.username}:{self._config.password or ''}"
            return "Basic " + base64.b64encode(credentials.encode()).decode()

        if scheme != "bearer":
            return None

        params = dict(_CHALLENGE_PARAM.findall(params_str))
        realm = params.pop("realm", None)
        if not realm:
            return None

        auth = None
        if self._config.username:
            auth = httpx.BasicAuth(self._config.username, self._config.password or "")
        token_response = await self._client.get(realm, params=params, auth=auth)
        if token_response.status_code != 200:
            logfire.warning(
                "Registry token request failed",
                realm=realm,
                status=token_response.status_code,
            )
            return None
        body = token_response.json()
        token = body.get("token") or body.get("access_token")
        return f"Bearer {token}" if token else None
