"""
Tests for response normalization into ResultEnvelope.

Run:
    python -m pytest tests/test_normalizer.py -v
"""

import xml.etree.ElementTree as ET

import pytest

from conftest import api_response
from namecheap_cli.api.exceptions import ApiMessage, ProtocolError
from namecheap_cli.api.normalizer import as_list, element_to_dict, normalize
from namecheap_cli.api.transport import RawResponse


def _raw(text, operation="namecheap.test"):
    return RawResponse(status_code=200, content=text.encode("utf-8"), operation=operation)


# ===========================================================================
# 1. Envelope shapes
# ===========================================================================

class TestEnvelope:

    def test_success_carries_command_response(self):
        body = '<DomainCheckResult Domain="example.com" Available="true" />'
        envelope = normalize(_raw(api_response(body, command="namecheap.domains.check")))

        assert envelope.success is True
        assert envelope.errors == []
        assert envelope.command == "namecheap.domains.check"
        assert envelope.execution_time == "0.011"
        assert envelope.data["Type"] == "namecheap.domains.check"
        assert envelope.data["DomainCheckResult"] == {"Domain": "example.com", "Available": "true"}

    def test_error_carries_codes_verbatim(self):
        text = api_response(status="ERROR", errors=[("2019166", "Domain not found")])
        envelope = normalize(_raw(text))

        assert envelope.success is False
        assert envelope.data is None
        assert envelope.errors == [ApiMessage("2019166", "Domain not found")]

    def test_warnings_do_not_fail_the_call(self):
        text = api_response("<UserGetBalancesResult />", warnings=[("123", "Deprecated")])
        envelope = normalize(_raw(text))

        assert envelope.success is True
        assert envelope.warnings == [ApiMessage("123", "Deprecated")]

    def test_multiple_errors_preserved_in_order(self):
        text = api_response(status="ERROR", errors=[("1", "first"), ("2", "second")])
        envelope = normalize(_raw(text))

        assert [e.code for e in envelope.errors] == ["1", "2"]

    def test_xml_declaration_decides_the_encoding(self):
        text = api_response('<UserAddressGetInfoResult City="Zürich" />')
        envelope = normalize(_raw(text))

        assert envelope.data["UserAddressGetInfoResult"]["City"] == "Zürich"


# ===========================================================================
# 2. Unrecognizable responses
# ===========================================================================

class TestProtocolErrors:

    def test_malformed_xml(self):
        with pytest.raises(ProtocolError, match="Malformed XML"):
            normalize(_raw("<ApiResponse Status="))

    def test_html_error_page(self):
        with pytest.raises(ProtocolError, match="Unexpected response root"):
            normalize(_raw("<html><body>Service Unavailable</body></html>"))

    def test_missing_status(self):
        with pytest.raises(ProtocolError, match="no valid Status"):
            normalize(_raw("<ApiResponse><Errors/></ApiResponse>"))

    def test_error_status_without_errors(self):
        with pytest.raises(ProtocolError, match="without errors"):
            normalize(_raw(api_response(status="ERROR")))

    def test_ok_status_with_errors(self):
        text = api_response("<X />", errors=[("1", "odd")])
        with pytest.raises(ProtocolError, match="carries errors"):
            normalize(_raw(text))

    def test_ok_without_command_response(self):
        text = '<ApiResponse Status="OK"><Errors/></ApiResponse>'
        with pytest.raises(ProtocolError, match="no CommandResponse"):
            normalize(_raw(text))


# ===========================================================================
# 3. Element conversion
# ===========================================================================

class TestElementToDict:

    def test_repeated_tags_become_lists(self):
        element = ET.fromstring('<R><host Name="@"/><host Name="www"/></R>')
        assert element_to_dict(element) == {"host": [{"Name": "@"}, {"Name": "www"}]}

    def test_text_only_element_becomes_string(self):
        element = ET.fromstring("<Paging><TotalItems>45</TotalItems><CurrentPage>1</CurrentPage></Paging>")
        assert element_to_dict(element) == {"TotalItems": "45", "CurrentPage": "1"}

    def test_mixed_content_keeps_text(self):
        element = ET.fromstring('<Forward mailbox="info">me@example.org</Forward>')
        assert element_to_dict(element) == {"mailbox": "info", "#text": "me@example.org"}

    def test_namespace_is_stripped(self):
        element = ET.fromstring('<a xmlns="urn:x"><b>1</b></a>')
        assert element_to_dict(element) == {"b": "1"}

    @pytest.mark.parametrize("value, expected", [
        (None, []),
        ("", []),
        ({"a": 1}, [{"a": 1}]),
        ([1, 2], [1, 2]),
    ])
    def test_as_list(self, value, expected):
        assert as_list(value) == expected
