"""AuthzForce REST client for domain, policy and evaluation calls.

Endpoints (relative to the base URL, e.g. http://127.0.0.1:8080/authzforce-ce):

    POST   /domains                                  create domain
    GET    /domains                                  list domains (links)
    GET    /domains/{id}                             domain properties
    DELETE /domains/{id}                             delete domain
    POST   /domains/{id}/pap/policies                upload policy (link -> version)
    GET    /domains/{id}/pap/policies                list policies (links)
    GET    /domains/{id}/pap/policies/{pid}/{ver}    fetch policy
    GET    /domains/{id}/pap/pdp.properties          root policy settings
    PUT    /domains/{id}/pap/pdp.properties          set root policy
    POST   /domains/{id}/pdp                         evaluate XACML Request

Every call is a single request with application/xml in both directions.
Nothing is retried; failures surface as TransportError, ParseError or
ProtocolViolation. The only exception is health_check(), which reports
failure as False.

Usage:
    async with PdpClient(base_url) as client:
        domain_id = await client.create_domain("rbac-test")
        document = await client.deploy_policy(domain_id, policy_xml)
        result = await client.evaluate_request(domain_id, query)
        await client.delete_domain(domain_id)
"""

from __future__ import annotations

__all__ = [
    "PdpClient",
    "PolicyDomain",
]

import logging
from dataclasses import dataclass
from types import TracebackType
from typing import TYPE_CHECKING
from urllib.parse import quote

import httpx

from authzforce_client.constants import (
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_PDP_URL,
    XML_CONTENT_TYPE,
)
from authzforce_client.exceptions import ProtocolViolation, TransportError
from authzforce_client.logging_setup import null_logger
from authzforce_client.pdp.documents import (
    DEFAULT_DOMAIN_DESCRIPTION,
    domain_properties_xml,
    link_hrefs,
    pdp_properties_update_xml,
    trailing_segment,
)
from authzforce_client.xacml.codec import AccessQueryCodec
from authzforce_client.xacml.decision import DecisionResult
from authzforce_client.xacml.model import AccessQuery
from authzforce_client.xacml.policy import PolicyDocument, require_policy_id
from authzforce_client.xmltools.formatter import format_xml
from authzforce_client.xmltools.reader import XmlDocument

if TYPE_CHECKING:
    from authzforce_client.config import ClientConfig


@dataclass(frozen=True, slots=True)
class PolicyDomain:
    """An AuthzForce domain.

    Attributes:
        id: Server-assigned domain id.
        external_id: Caller-chosen id given at creation, if any.
    """

    id: str
    external_id: str | None = None


def _segment(value: str) -> str:
    """Escape an id for use as a single URL path segment."""
    return quote(value, safe="")


class PdpClient:
    """Async client for the AuthzForce CE REST API.

    Holds only immutable configuration and a pooled httpx.AsyncClient, so
    one instance can serve concurrent calls. Close it with aclose() or use
    it as an async context manager.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_PDP_URL,
        *,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        logger: logging.Logger | None = None,
        codec: AccessQueryCodec | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize client.

        Args:
            base_url: AuthzForce REST API root.
            timeout: Per-request timeout in seconds.
            logger: Destination for debug/error output. Defaults to a
                logger that discards everything.
            codec: Request/response codec (default: AccessQueryCodec()).
            transport: httpx transport override (tests use MockTransport).
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._logger = logger or null_logger()
        self._codec = codec or AccessQueryCodec()
        self._http = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            headers={"Content-Type": XML_CONTENT_TYPE, "Accept": XML_CONTENT_TYPE},
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: "ClientConfig",
        logger: logging.Logger | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> PdpClient:
        """Create a client from a ClientConfig."""
        return cls(config.pdp_url, timeout=config.timeout_seconds, logger=logger, transport=transport)

    @property
    def base_url(self) -> str:
        """AuthzForce REST API root this client talks to."""
        return self._base_url

    @property
    def codec(self) -> AccessQueryCodec:
        """Codec used by evaluate_request()."""
        return self._codec

    async def aclose(self) -> None:
        """Close pooled connections."""
        await self._http.aclose()

    async def __aenter__(self) -> PdpClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    # =========================================================================
    # Transport
    # =========================================================================

    def _pretty(self, xml: str) -> str:
        """Format XML for debug output, falling back to the raw text."""
        try:
            return format_xml(xml)
        except ValueError:
            return xml

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        content: str | None = None,
    ) -> httpx.Response:
        """Send one request and fail on transport errors and non-2xx status.

        Args:
            method: HTTP method.
            path: Path relative to base URL.
            operation: Short description for error messages ("create domain").
            content: XML body, if any.

        Raises:
            TransportError: Network failure or non-2xx response.
        """
        body = content.encode("utf-8") if content is not None else None
        try:
            response = await self._http.request(method, path, content=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            response_body = e.response.text
            self._logger.error(
                f"Failed to {operation}: {method} {e.request.url} -> {e.response.status_code}"
            )
            if response_body:
                self._logger.debug(f"Response data:\n{self._pretty(response_body)}")
            raise TransportError(
                f"Failed to {operation}",
                status_code=e.response.status_code,
                response_body=response_body,
            ) from e
        except httpx.HTTPError as e:
            self._logger.error(f"Failed to {operation}: {method} {path}: {e}")
            raise TransportError(f"Failed to {operation}: {e}") from e
        return response

    # =========================================================================
    # Domains
    # =========================================================================

    async def create_domain(
        self,
        external_id: str | None = None,
        description: str = DEFAULT_DOMAIN_DESCRIPTION,
    ) -> str:
        """Create a policy domain.

        Args:
            external_id: Optional caller-chosen id stored with the domain.
            description: Domain description.

        Returns:
            Server-assigned domain id (trailing segment of the response link).

        Raises:
            TransportError: Request failed.
            ParseError: Response is not XML.
            ProtocolViolation: Response has no link element.
        """
        body = domain_properties_xml(external_id, description)
        response = await self._request("POST", "/domains", "create domain", content=body)
        self._logger.debug(f"Created domain with response: {response.text}")

        href = XmlDocument.parse(response.content).select_attribute("link", "href")
        if href is None:
            raise ProtocolViolation(
                "No link element found in create domain response. "
                "Link element is required to extract domain ID."
            )
        return trailing_segment(href, "domain ID")

    async def delete_domain(self, domain_id: str) -> None:
        """Delete a domain and every policy in it.

        Raises:
            TransportError: Request failed, including for unknown domains.
        """
        await self._request("DELETE", f"/domains/{_segment(domain_id)}", f"delete domain {domain_id}")
        self._logger.debug(f"Deleted domain {domain_id}")

    async def list_domains(self) -> list[str]:
        """List the ids of all domains on the server."""
        response = await self._request("GET", "/domains", "list domains")
        doc = XmlDocument.parse(response.content)
        return [trailing_segment(href, "domain ID") for href in link_hrefs(doc)]

    async def get_domain(self, domain_id: str) -> PolicyDomain:
        """Fetch a domain with its externalId."""
        response = await self._request("GET", f"/domains/{_segment(domain_id)}", f"get domain {domain_id}")
        doc = XmlDocument.parse(response.content)
        return PolicyDomain(id=domain_id, external_id=doc.select_attribute("properties", "externalId"))

    # =========================================================================
    # Policies
    # =========================================================================

    async def add_policy(self, domain_id: str, policy_xml: str, policy_id: str | None = None) -> str:
        """Upload a policy or policy set to a domain.

        The policy id is taken from the XML before anything is sent. If
        policy_id is given it must match.

        Args:
            domain_id: Target domain.
            policy_xml: XACML Policy or PolicySet document.
            policy_id: Expected id, for callers that already know it.

        Returns:
            Version assigned by the PDP (trailing segment of the response link).

        Raises:
            PolicyExtractionError: No id in the XML, or it differs from policy_id.
            TransportError: Request failed (e.g. invalid policy, duplicate version).
            ParseError: Response is not XML.
            ProtocolViolation: Response has no link or no version.
        """
        policy_id = require_policy_id(policy_xml, policy_id)
        response = await self._request(
            "POST",
            f"/domains/{_segment(domain_id)}/pap/policies",
            f"add policy {policy_id}",
            content=policy_xml,
        )
        self._logger.debug(f"Added policy with response: {self._pretty(response.text)}")

        href = XmlDocument.parse(response.content).select_attribute("link", "href")
        if href is None:
            raise ProtocolViolation(
                "No link element found in add policy response. "
                "Link element is required to extract policy version."
            )
        return trailing_segment(href, "policy version")

    async def set_active_policy(self, domain_id: str, policy_id: str) -> None:
        """Make policy_id the root policy of a domain.

        No version is sent; the PDP resolves the reference to the latest
        version it holds. Replaces any previous root policy.

        Raises:
            TransportError: Request failed (e.g. unknown policy id).
        """
        body = pdp_properties_update_xml(policy_id)
        self._logger.debug(f"Setting root policy for domain {domain_id} with policyId {policy_id}")
        await self._request(
            "PUT",
            f"/domains/{_segment(domain_id)}/pap/pdp.properties",
            "set active policy",
            content=body,
        )

    async def deploy_policy(self, domain_id: str, policy_xml: str) -> PolicyDocument:
        """Upload a policy and make it the domain's root policy.

        Returns:
            PolicyDocument with the extracted id and assigned version.
        """
        policy_id = require_policy_id(policy_xml)
        version = await self.add_policy(domain_id, policy_xml, policy_id)
        await self.set_active_policy(domain_id, policy_id)
        return PolicyDocument(policy_id=policy_id, version=version, xml_content=policy_xml)

    async def list_policies(self, domain_id: str) -> list[str]:
        """List the ids of policies stored in a domain."""
        response = await self._request(
            "GET", f"/domains/{_segment(domain_id)}/pap/policies", f"list policies for domain {domain_id}"
        )
        return link_hrefs(XmlDocument.parse(response.content))

    async def get_policy(self, domain_id: str, policy_id: str, version: str = "latest") -> str:
        """Fetch a stored policy document.

        Args:
            domain_id: Domain holding the policy.
            policy_id: Policy or policy set id.
            version: Exact version, or "latest".

        Returns:
            Policy XML as returned by the server.
        """
        response = await self._request(
            "GET",
            f"/domains/{_segment(domain_id)}/pap/policies/{_segment(policy_id)}/{_segment(version)}",
            f"get policy {policy_id}",
        )
        return response.text

    async def get_pdp_properties(self, domain_id: str) -> str:
        """Fetch a domain's PDP properties document (root policy, features)."""
        response = await self._request(
            "GET", f"/domains/{_segment(domain_id)}/pap/pdp.properties", f"get PDP properties for {domain_id}"
        )
        return response.text

    # =========================================================================
    # Evaluation
    # =========================================================================

    async def evaluate_request(self, domain_id: str, query: AccessQuery) -> DecisionResult:
        """Evaluate an access query against the domain's root policy.

        Args:
            domain_id: Domain to evaluate in.
            query: Subject/resource/action attributes.

        Returns:
            DecisionResult holding one of the four XACML decisions.

        Raises:
            TransportError: Request failed.
            ParseError: Response is not XML.
            DecodeError: Response has no (valid) Decision.
        """
        request_xml = self._codec.encode(query)
        if self._logger.isEnabledFor(logging.DEBUG):
            self._logger.debug(f"Evaluating request XML:\n{self._pretty(request_xml)}")

        response = await self._request(
            "POST", f"/domains/{_segment(domain_id)}/pdp", "evaluate request", content=request_xml
        )
        if self._logger.isEnabledFor(logging.DEBUG):
            self._logger.debug(f"Evaluation response: {self._pretty(response.text)}")

        return self._codec.decode(response.content)

    # =========================================================================
    # Health
    # =========================================================================

    async def health_check(self) -> bool:
        """Check that the server answers the domains listing with HTTP 200.

        Never raises: any failure (connection refused, timeout, error
        status, closed client) is logged and reported as False.
        """
        try:
            response = await self._http.get("/domains")
        except Exception as e:
            self._logger.error(f"Health check failed: {e}")
            return False

        self._logger.debug(f"Health check response status: {response.status_code}")
        return response.status_code == 200
