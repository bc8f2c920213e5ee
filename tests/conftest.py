"""Shared fixtures for authzforce-client tests.

Response documents mirror what AuthzForce CE 12.x returns; prefixes are
varied on purpose since the server does not keep them stable.
"""

from __future__ import annotations

from typing import Callable

import httpx
import pytest

from authzforce_client.pdp.client import PdpClient

BASE_URL = "http://pdp.test/authzforce-ce"

Handler = Callable[[httpx.Request], httpx.Response]


# ============================================================================
# Documents
# ============================================================================

PERMIT_RESPONSE = """<?xml version="1.0" encoding="UTF-8"?>
<Response xmlns="urn:oasis:names:tc:xacml:3.0:core:schema:wd-17">
  <Result>
    <Decision>Permit</Decision>
    <Status><StatusCode Value="urn:oasis:names:tc:xacml:1.0:status:ok"/></Status>
  </Result>
</Response>"""

PREFIXED_PERMIT_RESPONSE = """<?xml version="1.0" encoding="UTF-8"?>
<ns3:Response xmlns:ns3="urn:oasis:names:tc:xacml:3.0:core:schema:wd-17">
  <ns3:Result>
    <ns3:Decision>Permit</ns3:Decision>
    <ns3:Status><ns3:StatusCode Value="urn:oasis:names:tc:xacml:1.0:status:ok"/></ns3:Status>
  </ns3:Result>
</ns3:Response>"""

POLICY_SET_XML = """<?xml version="1.0" encoding="UTF-8"?>
<PolicySet xmlns="urn:oasis:names:tc:xacml:3.0:core:schema:wd-17"
    PolicySetId="MinimalTestPolicySet" Version="1.0"
    PolicyCombiningAlgId="urn:oasis:names:tc:xacml:3.0:policy-combining-algorithm:deny-unless-permit">
  <Target/>
  <Policy PolicyId="inner-policy" Version="1.0"
      RuleCombiningAlgId="urn:oasis:names:tc:xacml:3.0:rule-combining-algorithm:deny-unless-permit">
    <Target/>
    <Rule RuleId="permit-all" Effect="Permit"/>
  </Policy>
</PolicySet>"""


def link_response(href: str) -> str:
    """AuthzForce resource link, as returned after a create/upload."""
    return f'<ns2:link xmlns:ns2="http://www.w3.org/2005/Atom" rel="item" href="{href}" title="{href}"/>'


def links_response(*hrefs: str) -> str:
    """AuthzForce resource collection listing."""
    links = "".join(f'<ns3:link rel="item" href="{href}" title="{href}"/>' for href in hrefs)
    return (
        '<ns2:resources xmlns:ns2="http://authzforce.github.io/rest-api-model/xmlns/authz/5" '
        f'xmlns:ns3="http://www.w3.org/2005/Atom">{links}</ns2:resources>'
    )


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def policy_set_xml() -> str:
    return POLICY_SET_XML


@pytest.fixture
def make_client() -> Callable[[Handler], PdpClient]:
    """Build a PdpClient whose HTTP traffic goes to a handler function."""

    def _make(handler: Handler, **kwargs: object) -> PdpClient:
        return PdpClient(BASE_URL, transport=httpx.MockTransport(handler), **kwargs)  # type: ignore[arg-type]

    return _make
