"""
Pinata IPFS content store.

Uploads checkpoint bodies through the Pinata pinning API with the tag set
attached as pin metadata, queries pins by metadata key/values and fetches
bodies through the IPFS gateway.
"""

import asyncio
import json
import re
from typing import Any, Dict, List, Optional

import aiohttp

from .base import ContentStore, StoredEntry
from ..utils.config import BaesConfig
from ..utils.logging import get_logger
from ..utils.errors import (
    ConfigurationError,
    StoreError,
    StoreUploadError,
    StoreQueryError,
    StoreFetchError,
)

logger = get_logger("baes-sdk.store.pinata")

# CIDv0 (base58btc, "Qm" + 44 chars) or any base32 CIDv1 ("b" multibase prefix)
CID_PATTERN = re.compile(r'^Qm[1-9A-HJ-NP-Za-km-z]{44}$|^b[a-z2-7]{58,}$')


def is_valid_cid(value: str) -> bool:
    """Basic IPFS content identifier check"""
    return bool(CID_PATTERN.fullmatch(value or ""))


class PinataStore(ContentStore):
    """ContentStore backed by the Pinata pinning service"""

    def __init__(self, config: BaesConfig, session: Optional[aiohttp.ClientSession] = None):
        """Initialize the store

        Args:
            config: SDK configuration; api_key is required
            session: Optional externally managed HTTP session
        """
        if not config.api_key:
            raise ConfigurationError(
                "Pinata API key is required. Please provide api_key in the SDK configuration."
            )

        self.config = config
        self._session = session
        self._owns_session = session is None

    @property
    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.config.api_key}"}

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.request_timeout)
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this store created it"""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def upload(self, content: Dict[str, Any], tags: Dict[str, str]) -> str:
        url = f"{self.config.api_url}/pinning/pinFileToIPFS"

        try:
            body = json.dumps(content)
        except (TypeError, ValueError) as e:
            raise StoreUploadError(f"Content is not JSON-serializable: {e}", cause=e) from e

        metadata = {
            "name": pin_name(tags),
            "keyvalues": tags
        }

        form = aiohttp.FormData()
        form.add_field("file", body, filename="checkpoint.json", content_type="application/json")
        form.add_field("pinataMetadata", json.dumps(metadata))

        logger.debug("pinata_upload_started", name=metadata["name"], size=len(body))

        result = await self._request_json(
            "POST", url, StoreUploadError, "Pinata upload failed", data=form
        )

        content_id = result.get("IpfsHash") if isinstance(result, dict) else None
        if not content_id:
            raise StoreUploadError("Pinata upload response did not include an IpfsHash")

        logger.debug("pinata_upload_completed", content_id=content_id)
        return content_id

    async def query(self, tag_filter: Dict[str, str]) -> List[StoredEntry]:
        url = f"{self.config.api_url}/data/pinList"
        params = {
            "metadata": json.dumps({
                "keyvalues": {
                    key: {"value": value, "op": "eq"}
                    for key, value in tag_filter.items()
                }
            }),
            "status": "pinned",
            "limit": str(self.config.query_limit)
        }

        result = await self._request_json(
            "GET", url, StoreQueryError, "Pinata query failed", params=params
        )

        entries = parse_pin_list(result)
        logger.debug("pinata_query_completed", matches=len(entries))
        return entries

    async def fetch(self, content_id: str) -> Dict[str, Any]:
        if not is_valid_cid(content_id):
            raise StoreFetchError(f"Invalid IPFS content identifier: {content_id!r}")

        url = f"{self.config.gateway_url}/{content_id}"
        result = await self._request_json(
            "GET", url, StoreFetchError, "Pinata download failed", authorize=False
        )

        if not isinstance(result, dict):
            raise StoreFetchError(f"Object {content_id} is not a JSON object")
        return result

    async def _request_json(
        self,
        method: str,
        url: str,
        error_class: type,
        failure_message: str,
        authorize: bool = True,
        **kwargs
    ) -> Any:
        """Perform a request and decode its JSON body

        Non-2xx responses and transport failures raise error_class.
        """
        session = self._get_session()
        headers = self._headers if authorize else {}

        try:
            async with session.request(method, url, headers=headers, **kwargs) as response:
                body = await response.read()

                if response.status >= 300:
                    logger.warning(
                        "pinata_request_failed",
                        method=method,
                        url=url,
                        status=response.status
                    )
                    raise error_class(
                        f"{failure_message}: {response.status} - {body.decode('utf-8', errors='replace')}",
                        status=response.status
                    )

                # UnicodeDecodeError is a ValueError
                try:
                    return json.loads(body)
                except ValueError as e:
                    raise error_class(
                        f"{failure_message}: response is not valid JSON",
                        status=response.status,
                        cause=e
                    ) from e

        except StoreError:
            raise
        except asyncio.TimeoutError as e:
            raise error_class(f"{failure_message}: request timed out", cause=e) from e
        except aiohttp.ClientError as e:
            raise error_class(f"{failure_message}: {e}", cause=e) from e


def pin_name(tags: Dict[str, str]) -> str:
    """Human-readable pin name shown in the Pinata dashboard"""
    return "checkpoint_{}_{}_{}".format(
        tags.get("owner", ""),
        tags.get("application", ""),
        tags.get("createdAt", "")
    )


def parse_pin_list(result: Any) -> List[StoredEntry]:
    """Extract entries from either pin list response shape

    Accepts the pinList shape (``rows`` with ``ipfs_pin_hash`` and
    ``metadata.keyvalues``) and the files shape (``files`` with ``cid`` and
    ``keyvalues``).
    """
    if not isinstance(result, dict):
        raise StoreQueryError("Pinata query response is not a JSON object")

    entries = []

    for row in result.get("rows") or []:
        content_id = row.get("ipfs_pin_hash")
        keyvalues = (row.get("metadata") or {}).get("keyvalues") or {}
        if content_id:
            entries.append(StoredEntry(content_id=content_id, tags=_stringify(keyvalues)))

    for item in result.get("files") or []:
        content_id = item.get("cid")
        keyvalues = item.get("keyvalues") or {}
        if content_id:
            entries.append(StoredEntry(content_id=content_id, tags=_stringify(keyvalues)))

    return entries


def _stringify(keyvalues: Dict[str, Any]) -> Dict[str, str]:
    return {str(k): str(v) for k, v in keyvalues.items()}
