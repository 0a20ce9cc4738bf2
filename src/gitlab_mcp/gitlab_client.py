"""HTTP client for the GitLab REST API.

Each public method issues exactly one HTTP request and returns the parsed
response body unmodified. Reshaping (such as decoding base64 file content)
happens in the tool handlers.
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from .config import GitLabConfig

logger = logging.getLogger(__name__)


class GitLabClientError(Exception):
    """Base exception for GitLab client errors."""

    pass


class GitLabApiError(GitLabClientError):
    """GitLab returned a non-2xx response.

    Args:
        status_code: HTTP status code
        body: Raw response body text
        method: HTTP method of the failed request
        path: Request path of the failed request
    """

    def __init__(self, status_code: int, body: str, method: str = "", path: str = ""):
        self.status_code = status_code
        self.body = body
        self.method = method
        self.path = path
        super().__init__(f"GitLab API error {status_code}: {body}")


class GitLabTransportError(GitLabClientError):
    """Network-level failure talking to GitLab."""

    pass


class GitLabTimeoutError(GitLabTransportError):
    """Request timeout error."""

    pass


def encode_path_segment(value: Any) -> str:
    """Percent-encode a value for use as a single URL path segment.

    Project paths such as ``group/sub-group/project`` and file paths such as
    ``src/app.py`` become one segment (``/`` is encoded as ``%2F``).
    """
    return quote(str(value), safe="")


def encode_content(content: str) -> str:
    """Base64-encode text file content for transmission."""
    return base64.b64encode(content.encode("utf-8")).decode("ascii")


class GitLabClient:
    """Asynchronous GitLab REST API client.

    The configuration is fixed at construction; the client is safe to share
    between concurrently running tool calls.

    Args:
        config: Server configuration providing base URL, token and timeout
        transport: Optional httpx transport (used to inject mock transports)
    """

    def __init__(
        self,
        config: GitLabConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def base_url(self) -> str:
        return self.config.base_url

    def get_request_headers(self) -> Dict[str, str]:
        """Get all request headers including auth and content type."""
        return {
            "Authorization": f"Bearer {self.config.token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    @property
    def session(self) -> httpx.AsyncClient:
        """Get or create the underlying httpx client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                headers=self.get_request_headers(),
                timeout=self.config.timeout,
                transport=self._transport,
            )
        return self._client

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        """Issue a single request and return the decoded response body.

        Raises:
            GitLabApiError: For non-2xx responses
            GitLabTimeoutError: For request timeouts
            GitLabTransportError: For connection and other transport failures
        """
        logger.debug(f"{method} {path}")

        try:
            response = await self.session.request(
                method, path, params=params, json=json
            )

        except httpx.TimeoutException as e:
            raise GitLabTimeoutError(
                f"Request timed out after {self.config.timeout} seconds: {str(e)}"
            ) from e

        except httpx.ConnectError as e:
            raise GitLabTransportError(
                f"Connection failed to {self.config.base_url}: {str(e)}"
            ) from e

        except httpx.HTTPError as e:
            raise GitLabTransportError(f"HTTP error: {str(e)}") from e

        if not response.is_success:
            logger.warning(f"{method} {path} failed with {response.status_code}")
            raise GitLabApiError(
                status_code=response.status_code,
                body=response.text,
                method=method,
                path=path,
            )

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def _project_path(project_id: Any) -> str:
        return f"/projects/{encode_path_segment(project_id)}"

    # Repository operations

    async def get_project(self, project_id: str) -> Any:
        return await self._request("GET", self._project_path(project_id))

    async def list_projects(self) -> Any:
        return await self._request(
            "GET", "/projects", params={"membership": "true", "simple": "true"}
        )

    async def get_version(self) -> Any:
        """Get the GitLab instance version (used for connectivity checks)."""
        return await self._request("GET", "/version")

    # Branch operations

    async def list_branches(self, project_id: str) -> Any:
        return await self._request(
            "GET", f"{self._project_path(project_id)}/repository/branches"
        )

    async def create_branch(
        self, project_id: str, branch_name: str, ref: str = "main"
    ) -> Any:
        return await self._request(
            "POST",
            f"{self._project_path(project_id)}/repository/branches",
            json={"branch": branch_name, "ref": ref},
        )

    async def delete_branch(self, project_id: str, branch_name: str) -> Any:
        return await self._request(
            "DELETE",
            f"{self._project_path(project_id)}/repository/branches/"
            f"{encode_path_segment(branch_name)}",
        )

    # File operations

    def _file_path(self, project_id: str, file_path: str) -> str:
        return (
            f"{self._project_path(project_id)}/repository/files/"
            f"{encode_path_segment(file_path)}"
        )

    async def get_file(self, project_id: str, file_path: str, ref: str = "main") -> Any:
        """Get a file; ``content`` in the result is still base64-encoded."""
        return await self._request(
            "GET", self._file_path(project_id, file_path), params={"ref": ref}
        )

    async def create_file(
        self,
        project_id: str,
        file_path: str,
        content: str,
        commit_message: str,
        branch: str = "main",
    ) -> Any:
        return await self._request(
            "POST",
            self._file_path(project_id, file_path),
            json={
                "branch": branch,
                "content": encode_content(content),
                "encoding": "base64",
                "commit_message": commit_message,
            },
        )

    async def update_file(
        self,
        project_id: str,
        file_path: str,
        content: str,
        commit_message: str,
        branch: str = "main",
    ) -> Any:
        return await self._request(
            "PUT",
            self._file_path(project_id, file_path),
            json={
                "branch": branch,
                "content": encode_content(content),
                "encoding": "base64",
                "commit_message": commit_message,
            },
        )

    async def delete_file(
        self,
        project_id: str,
        file_path: str,
        commit_message: str,
        branch: str = "main",
    ) -> Any:
        return await self._request(
            "DELETE",
            self._file_path(project_id, file_path),
            json={"branch": branch, "commit_message": commit_message},
        )

    # Commit operations

    async def get_commits(self, project_id: str, branch: Optional[str] = None) -> Any:
        params = {"ref_name": branch} if branch else None
        return await self._request(
            "GET",
            f"{self._project_path(project_id)}/repository/commits",
            params=params,
        )

    async def create_commit(
        self,
        project_id: str,
        branch: str,
        commit_message: str,
        actions: List[Dict[str, Any]],
    ) -> Any:
        return await self._request(
            "POST",
            f"{self._project_path(project_id)}/repository/commits",
            json={
                "branch": branch,
                "commit_message": commit_message,
                "actions": actions,
            },
        )

    # Merge request operations

    def _merge_request_path(self, project_id: str, merge_request_iid: int) -> str:
        return f"{self._project_path(project_id)}/merge_requests/{merge_request_iid}"

    async def list_merge_requests(self, project_id: str, state: str = "opened") -> Any:
        return await self._request(
            "GET",
            f"{self._project_path(project_id)}/merge_requests",
            params={"state": state},
        )

    async def create_merge_request(
        self,
        project_id: str,
        source_branch: str,
        target_branch: str,
        title: str,
        description: Optional[str] = None,
    ) -> Any:
        return await self._request(
            "POST",
            f"{self._project_path(project_id)}/merge_requests",
            json={
                "source_branch": source_branch,
                "target_branch": target_branch,
                "title": title,
                "description": description or "",
            },
        )

    async def get_merge_request(self, project_id: str, merge_request_iid: int) -> Any:
        return await self._request(
            "GET", self._merge_request_path(project_id, merge_request_iid)
        )

    async def update_merge_request(
        self, project_id: str, merge_request_iid: int, updates: Dict[str, Any]
    ) -> Any:
        return await self._request(
            "PUT", self._merge_request_path(project_id, merge_request_iid), json=updates
        )

    async def merge_merge_request(
        self,
        project_id: str,
        merge_request_iid: int,
        merge_commit_message: Optional[str] = None,
    ) -> Any:
        payload = {}
        if merge_commit_message is not None:
            payload["merge_commit_message"] = merge_commit_message
        return await self._request(
            "PUT",
            f"{self._merge_request_path(project_id, merge_request_iid)}/merge",
            json=payload,
        )

    # Issue operations

    async def list_issues(self, project_id: str, state: str = "opened") -> Any:
        return await self._request(
            "GET",
            f"{self._project_path(project_id)}/issues",
            params={"state": state},
        )

    async def create_issue(
        self,
        project_id: str,
        title: str,
        description: Optional[str] = None,
        labels: Optional[List[str]] = None,
    ) -> Any:
        return await self._request(
            "POST",
            f"{self._project_path(project_id)}/issues",
            json={
                "title": title,
                "description": description or "",
                "labels": labels or [],
            },
        )

    # Discussion operations

    def _discussion_path(
        self, project_id: str, merge_request_iid: int, discussion_id: str
    ) -> str:
        return (
            f"{self._merge_request_path(project_id, merge_request_iid)}/discussions/"
            f"{encode_path_segment(discussion_id)}"
        )

    async def list_discussions(self, project_id: str, merge_request_iid: int) -> Any:
        return await self._request(
            "GET",
            f"{self._merge_request_path(project_id, merge_request_iid)}/discussions",
        )

    async def get_discussion(
        self, project_id: str, merge_request_iid: int, discussion_id: str
    ) -> Any:
        return await self._request(
            "GET", self._discussion_path(project_id, merge_request_iid, discussion_id)
        )

    async def create_discussion(
        self,
        project_id: str,
        merge_request_iid: int,
        body: str,
        position: Optional[Dict[str, Any]] = None,
    ) -> Any:
        payload: Dict[str, Any] = {"body": body}
        if position is not None:
            payload["position"] = position
        return await self._request(
            "POST",
            f"{self._merge_request_path(project_id, merge_request_iid)}/discussions",
            json=payload,
        )

    async def add_note_to_discussion(
        self, project_id: str, merge_request_iid: int, discussion_id: str, body: str
    ) -> Any:
        return await self._request(
            "POST",
            f"{self._discussion_path(project_id, merge_request_iid, discussion_id)}/notes",
            json={"body": body},
        )

    async def update_discussion_note(
        self,
        project_id: str,
        merge_request_iid: int,
        discussion_id: str,
        note_id: int,
        body: str,
    ) -> Any:
        return await self._request(
            "PUT",
            f"{self._discussion_path(project_id, merge_request_iid, discussion_id)}"
            f"/notes/{note_id}",
            json={"body": body},
        )

    async def delete_discussion_note(
        self,
        project_id: str,
        merge_request_iid: int,
        discussion_id: str,
        note_id: int,
    ) -> Any:
        return await self._request(
            "DELETE",
            f"{self._discussion_path(project_id, merge_request_iid, discussion_id)}"
            f"/notes/{note_id}",
        )

    async def resolve_discussion(
        self,
        project_id: str,
        merge_request_iid: int,
        discussion_id: str,
        resolved: bool = True,
    ) -> Any:
        return await self._request(
            "PUT",
            self._discussion_path(project_id, merge_request_iid, discussion_id),
            json={"resolved": resolved},
        )

    async def close(self):
        """Close HTTP client and cleanup resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context manager."""
        await self.close()
