"""Unit tests for the AuthzForce REST client.

HTTP is served by httpx.MockTransport handlers; no server is needed.
Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

from __future__ import annotations

import logging

import httpx
import pytest
from lxml import etree

from authzforce_client.config import ClientConfig
from authzforce_client.constants import AUTHZ_NS, XACML_CORE_NS
from authzforce_client.exceptions import (
    DecodeError,
    ParseError,
    PolicyExtractionError,
    ProtocolViolation,
    TransportError,
)
from authzforce_client.pdp.client import PdpClient, PolicyDomain
from authzforce_client.xacml.decision import Decision
from authzforce_client.xacml.model import AccessQuery

from tests.conftest import BASE_URL, PERMIT_RESPONSE, link_response, links_response


class Recorder:
    """Handler that records requests and replies with a fixed response."""

    def __init__(self, status_code: int = 200, text: str = "") -> None:
        self.status_code = status_code
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.text)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


# ============================================================================
# Tests: Construction
# ============================================================================


class TestConstruction:
    """Tests for client setup."""

    def test_base_url_trailing_slash_stripped(self):
        # Act
        client = PdpClient("http://pdp.test/authzforce-ce/")

        # Assert
        assert client.base_url == "http://pdp.test/authzforce-ce"

    def test_from_config(self):
        # Arrange
        config = ClientConfig(pdp_url="http://pdp.test:9090/authzforce-ce", timeout_seconds=5)

        # Act
        client = PdpClient.from_config(config)

        # Assert
        assert client.base_url == "http://pdp.test:9090/authzforce-ce"

    @pytest.mark.asyncio
    async def test_sends_xml_headers(self, make_client):
        # Arrange
        recorder = Recorder(text=links_response())
        client = make_client(recorder)

        # Act
        async with client:
            await client.list_domains()

        # Assert
        assert recorder.last.headers["Content-Type"] == "application/xml"
        assert recorder.last.headers["Accept"] == "application/xml"


# ============================================================================
# Tests: Domains
# ============================================================================


class TestCreateDomain:
    """Tests for create_domain()."""

    @pytest.mark.asyncio
    async def test_returns_trailing_segment_of_link(self, make_client):
        # Arrange
        recorder = Recorder(text=link_response("A0bdIbmGEeWhFwcKrC9gSQ"))

        # Act
        async with make_client(recorder) as client:
            domain_id = await client.create_domain("my-tests")

        # Assert
        assert domain_id == "A0bdIbmGEeWhFwcKrC9gSQ"
        assert recorder.last.method == "POST"
        assert recorder.last.url == f"{BASE_URL}/domains"

    @pytest.mark.asyncio
    async def test_body_is_domain_properties_with_external_id(self, make_client):
        # Arrange
        recorder = Recorder(text=link_response("d1"))

        # Act
        async with make_client(recorder) as client:
            await client.create_domain('ext "1" & <2>')

        # Assert
        root = etree.fromstring(recorder.last.content)
        assert root.tag == f"{{{AUTHZ_NS}}}domainProperties"
        assert root.get("externalId") == 'ext "1" & <2>'
        assert root.find(f"{{{AUTHZ_NS}}}description").text

    @pytest.mark.asyncio
    async def test_without_external_id_omits_attribute(self, make_client):
        # Arrange
        recorder = Recorder(text=link_response("d1"))

        # Act
        async with make_client(recorder) as client:
            await client.create_domain()

        # Assert
        root = etree.fromstring(recorder.last.content)
        assert root.get("externalId") is None

    @pytest.mark.asyncio
    async def test_missing_link_is_protocol_violation(self, make_client):
        # Arrange
        recorder = Recorder(text="<ns2:resources xmlns:ns2='urn:x'/>")

        # Act & Assert
        async with make_client(recorder) as client:
            with pytest.raises(ProtocolViolation, match="No link element"):
                await client.create_domain()

    @pytest.mark.asyncio
    async def test_non_xml_response_is_parse_error(self, make_client):
        # Arrange
        recorder = Recorder(text="OK")

        # Act & Assert
        async with make_client(recorder) as client:
            with pytest.raises(ParseError):
                await client.create_domain()

    @pytest.mark.asyncio
    async def test_conflict_raises_transport_error_with_status(self, make_client):
        # Arrange
        recorder = Recorder(status_code=409, text="<error>Conflict</error>")

        # Act & Assert
        async with make_client(recorder) as client:
            with pytest.raises(TransportError) as exc_info:
                await client.create_domain("dup")

        assert exc_info.value.status_code == 409
        assert exc_info.value.response_body == "<error>Conflict</error>"
        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)
        assert "HTTP 409" in str(exc_info.value)


class TestDomainQueries:
    """Tests for delete_domain(), list_domains() and get_domain()."""

    @pytest.mark.asyncio
    async def test_delete_domain(self, make_client):
        # Arrange
        recorder = Recorder(text="")

        # Act
        async with make_client(recorder) as client:
            await client.delete_domain("d1")

        # Assert
        assert recorder.last.method == "DELETE"
        assert recorder.last.url == f"{BASE_URL}/domains/d1"

    @pytest.mark.asyncio
    async def test_delete_unknown_domain_raises(self, make_client):
        # Arrange
        recorder = Recorder(status_code=404)

        # Act & Assert
        async with make_client(recorder) as client:
            with pytest.raises(TransportError) as exc_info:
                await client.delete_domain("gone")

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_domain_id_is_path_escaped(self, make_client):
        # Arrange
        recorder = Recorder(text="")

        # Act
        async with make_client(recorder) as client:
            await client.delete_domain("a/b")

        # Assert
        assert recorder.last.url.raw_path == b"/authzforce-ce/domains/a%2Fb"

    @pytest.mark.asyncio
    async def test_list_domains(self, make_client):
        # Arrange
        recorder = Recorder(text=links_response("d1", "d2", "d3"))

        # Act
        async with make_client(recorder) as client:
            domains = await client.list_domains()

        # Assert
        assert domains == ["d1", "d2", "d3"]
        assert recorder.last.method == "GET"

    @pytest.mark.asyncio
    async def test_list_domains_empty(self, make_client):
        # Arrange
        recorder = Recorder(text=links_response())

        # Act
        async with make_client(recorder) as client:
            domains = await client.list_domains()

        # Assert
        assert domains == []

    @pytest.mark.asyncio
    async def test_get_domain_reads_external_id(self, make_client):
        # Arrange
        recorder = Recorder(
            text=(
                f'<ns2:domain xmlns:ns2="{AUTHZ_NS}">'
                '<ns2:properties externalId="my-tests"><description>x</description></ns2:properties>'
                "</ns2:domain>"
            )
        )

        # Act
        async with make_client(recorder) as client:
            domain = await client.get_domain("d1")

        # Assert
        assert domain == PolicyDomain(id="d1", external_id="my-tests")


# ============================================================================
# Tests: Policies
# ============================================================================


class TestAddPolicy:
    """Tests for add_policy()."""

    @pytest.mark.asyncio
    async def test_returns_version_from_link(self, make_client, policy_set_xml: str):
        # Arrange
        recorder = Recorder(text=link_response("MinimalTestPolicySet/1.0"))

        # Act
        async with make_client(recorder) as client:
            version = await client.add_policy("d1", policy_set_xml)

        # Assert
        assert version == "1.0"
        assert recorder.last.url == f"{BASE_URL}/domains/d1/pap/policies"
        assert recorder.last.content.decode("utf-8") == policy_set_xml

    @pytest.mark.asyncio
    async def test_missing_policy_id_fails_before_request(self, make_client):
        # Arrange
        recorder = Recorder(text=link_response("x/1.0"))

        # Act & Assert
        async with make_client(recorder) as client:
            with pytest.raises(PolicyExtractionError):
                await client.add_policy("d1", "<PolicySet/>")

        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_mismatched_policy_id_fails_before_request(self, make_client, policy_set_xml: str):
        # Arrange
        recorder = Recorder(text=link_response("x/1.0"))

        # Act & Assert
        async with make_client(recorder) as client:
            with pytest.raises(PolicyExtractionError):
                await client.add_policy("d1", policy_set_xml, policy_id="inner-policy")

        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_missing_link_is_protocol_violation(self, make_client, policy_set_xml: str):
        # Arrange
        recorder = Recorder(text="<resources/>")

        # Act & Assert
        async with make_client(recorder) as client:
            with pytest.raises(ProtocolViolation):
                await client.add_policy("d1", policy_set_xml)

    @pytest.mark.asyncio
    async def test_link_without_version_is_protocol_violation(self, make_client, policy_set_xml: str):
        # Arrange
        recorder = Recorder(text=link_response("MinimalTestPolicySet/"))

        # Act & Assert
        async with make_client(recorder) as client:
            with pytest.raises(ProtocolViolation, match="policy version"):
                await client.add_policy("d1", policy_set_xml)

    @pytest.mark.asyncio
    async def test_rejected_policy_raises_transport_error(self, make_client, policy_set_xml: str):
        # Arrange
        recorder = Recorder(status_code=400, text="<error>Invalid policy</error>")

        # Act & Assert
        async with make_client(recorder) as client:
            with pytest.raises(TransportError) as exc_info:
                await client.add_policy("d1", policy_set_xml)

        assert exc_info.value.status_code == 400


class TestSetActivePolicy:
    """Tests for set_active_policy() and deploy_policy()."""

    @pytest.mark.asyncio
    async def test_puts_pdp_properties_update(self, make_client):
        # Arrange
        recorder = Recorder(text="<pdpProperties/>")

        # Act
        async with make_client(recorder) as client:
            await client.set_active_policy("d1", "root & <policy>")

        # Assert
        assert recorder.last.method == "PUT"
        assert recorder.last.url == f"{BASE_URL}/domains/d1/pap/pdp.properties"
        root = etree.fromstring(recorder.last.content)
        assert root.tag == f"{{{AUTHZ_NS}}}pdpPropertiesUpdate"
        assert root.find(f"{{{AUTHZ_NS}}}rootPolicyRefExpression").text == "root & <policy>"

    @pytest.mark.asyncio
    async def test_deploy_policy_uploads_then_activates(self, make_client, policy_set_xml: str):
        # Arrange
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                return httpx.Response(200, text=link_response("MinimalTestPolicySet/2.1"))
            return httpx.Response(200, text="<pdpProperties/>")

        calls: list[str] = []

        def recording(request: httpx.Request) -> httpx.Response:
            calls.append(f"{request.method} {request.url.path}")
            return handler(request)

        # Act
        async with make_client(recording) as client:
            document = await client.deploy_policy("d1", policy_set_xml)

        # Assert
        assert document.policy_id == "MinimalTestPolicySet"
        assert document.version == "2.1"
        assert document.xml_content == policy_set_xml
        assert calls == [
            "POST /authzforce-ce/domains/d1/pap/policies",
            "PUT /authzforce-ce/domains/d1/pap/pdp.properties",
        ]


class TestPolicyQueries:
    """Tests for list_policies(), get_policy() and get_pdp_properties()."""

    @pytest.mark.asyncio
    async def test_list_policies(self, make_client):
        # Arrange
        recorder = Recorder(text=links_response("root", "MinimalTestPolicySet"))

        # Act
        async with make_client(recorder) as client:
            policies = await client.list_policies("d1")

        # Assert
        assert policies == ["root", "MinimalTestPolicySet"]
        assert recorder.last.url == f"{BASE_URL}/domains/d1/pap/policies"

    @pytest.mark.asyncio
    async def test_get_policy_defaults_to_latest(self, make_client, policy_set_xml: str):
        # Arrange
        recorder = Recorder(text=policy_set_xml)

        # Act
        async with make_client(recorder) as client:
            text = await client.get_policy("d1", "MinimalTestPolicySet")

        # Assert
        assert text == policy_set_xml
        assert recorder.last.url == f"{BASE_URL}/domains/d1/pap/policies/MinimalTestPolicySet/latest"

    @pytest.mark.asyncio
    async def test_get_policy_explicit_version(self, make_client):
        # Arrange
        recorder = Recorder(text="<PolicySet/>")

        # Act
        async with make_client(recorder) as client:
            await client.get_policy("d1", "ps", version="1.0")

        # Assert
        assert recorder.last.url.path.endswith("/pap/policies/ps/1.0")

    @pytest.mark.asyncio
    async def test_get_pdp_properties(self, make_client):
        # Arrange
        recorder = Recorder(text="<pdpProperties/>")

        # Act
        async with make_client(recorder) as client:
            text = await client.get_pdp_properties("d1")

        # Assert
        assert text == "<pdpProperties/>"
        assert recorder.last.method == "GET"


# ============================================================================
# Tests: Evaluation
# ============================================================================


class TestEvaluateRequest:
    """Tests for evaluate_request()."""

    @pytest.mark.asyncio
    async def test_encodes_posts_and_decodes(self, make_client):
        # Arrange
        recorder = Recorder(text=PERMIT_RESPONSE)
        query = AccessQuery(subject={"subject-id": "alice"}, action={"action-id": "read"})

        # Act
        async with make_client(recorder) as client:
            result = await client.evaluate_request("d1", query)

        # Assert
        assert result.decision is Decision.PERMIT
        assert recorder.last.url == f"{BASE_URL}/domains/d1/pdp"
        sent = etree.fromstring(recorder.last.content)
        assert sent.tag == f"{{{XACML_CORE_NS}}}Request"

    @pytest.mark.asyncio
    async def test_missing_decision_raises(self, make_client):
        # Arrange
        recorder = Recorder(text="<Response><Result/></Response>")

        # Act & Assert
        async with make_client(recorder) as client:
            with pytest.raises(DecodeError):
                await client.evaluate_request("d1", AccessQuery(subject={"subject-id": "a"}))

    @pytest.mark.asyncio
    async def test_server_error_raises(self, make_client):
        # Arrange
        recorder = Recorder(status_code=500, text="boom")

        # Act & Assert
        async with make_client(recorder) as client:
            with pytest.raises(TransportError) as exc_info:
                await client.evaluate_request("d1", AccessQuery())

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_network_error_raises_with_cause(self, make_client):
        # Arrange
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        # Act & Assert
        async with make_client(handler) as client:
            with pytest.raises(TransportError) as exc_info:
                await client.evaluate_request("d1", AccessQuery())

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_debug_logging_includes_formatted_request(self, make_client, caplog):
        # Arrange
        logger = logging.getLogger("tests.client-debug")
        logger.setLevel(logging.DEBUG)
        recorder = Recorder(text=PERMIT_RESPONSE)

        # Act
        with caplog.at_level(logging.DEBUG, logger="tests.client-debug"):
            async with make_client(recorder, logger=logger) as client:
                await client.evaluate_request("d1", AccessQuery(subject={"subject-id": "alice"}))

        # Assert
        assert "Evaluating request XML:" in caplog.text
        assert "\n  <Attributes" in caplog.text


# ============================================================================
# Tests: Health
# ============================================================================


class TestHealthCheck:
    """health_check() reports failures as False and never raises."""

    @pytest.mark.asyncio
    async def test_ok(self, make_client):
        # Arrange
        recorder = Recorder(text=links_response())

        # Act
        async with make_client(recorder) as client:
            healthy = await client.health_check()

        # Assert
        assert healthy is True
        assert recorder.last.url == f"{BASE_URL}/domains"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [204, 404, 503])
    async def test_non_200_is_unhealthy(self, make_client, status_code: int):
        # Arrange
        recorder = Recorder(status_code=status_code)

        # Act
        async with make_client(recorder) as client:
            healthy = await client.health_check()

        # Assert
        assert healthy is False

    @pytest.mark.asyncio
    async def test_connection_error_is_unhealthy(self, make_client):
        # Arrange
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        # Act
        async with make_client(handler) as client:
            healthy = await client.health_check()

        # Assert
        assert healthy is False

    @pytest.mark.asyncio
    async def test_closed_client_is_unhealthy(self, make_client):
        # Arrange
        client = make_client(Recorder())
        await client.aclose()

        # Act
        healthy = await client.health_check()

        # Assert
        assert healthy is False
