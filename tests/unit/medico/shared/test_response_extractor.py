# ============================================================================
# Tests for ResponseExtractor utility
# ============================================================================
"""Unit tests for ResponseExtractor and ExternalResponse helpers."""

from medico_client.domains.shared.application import ExternalResponse, ResponseExtractor


class TestExtractItems:
    """Tests for ResponseExtractor.extract_items()."""

    def test_bare_list(self) -> None:
        """Should return dict items of a bare list."""
        data = [{"id": "a1"}, "junk", {"id": "a2"}]
        assert ResponseExtractor.extract_items(data, "appointments") == [{"id": "a1"}, {"id": "a2"}]

    def test_wrapped_list(self) -> None:
        """Should unwrap the first matching key."""
        data = {"appointments": [{"id": "a1"}], "total": 1}
        assert ResponseExtractor.extract_items(data, "appointments", "items") == [{"id": "a1"}]

    def test_fallback_key(self) -> None:
        """Should try keys in order."""
        data = {"items": [{"id": "a1"}]}
        assert ResponseExtractor.extract_items(data, "appointments", "items") == [{"id": "a1"}]

    def test_empty_wrapper(self) -> None:
        """Should return an empty list for an empty envelope."""
        assert ResponseExtractor.extract_items({"appointments": []}, "appointments") == []
        assert ResponseExtractor.extract_items({}, "appointments") == []

    def test_single_object(self) -> None:
        """Should wrap a single object without a matching key."""
        assert ResponseExtractor.extract_items({"id": "a1"}, "appointments") == [{"id": "a1"}]

    def test_none(self) -> None:
        """Should return empty list for None."""
        assert ResponseExtractor.extract_items(None, "appointments") == []


class TestExternalResponse:
    """Tests for ExternalResponse factories."""

    def test_transport_error_has_no_status(self) -> None:
        """Should mark transport failures as no_response."""
        response = ExternalResponse.transport_error("timeout")
        assert response.success is False
        assert response.no_response is True

    def test_http_error_is_a_response(self) -> None:
        """Should not mark HTTP errors as no_response."""
        response = ExternalResponse.http_error(404)
        assert response.no_response is False
        assert response.error_message == "HTTP 404"

    def test_get_dict_from_list(self) -> None:
        """Should return the first dict of a list payload."""
        assert ExternalResponse.ok([{"id": "1"}, {"id": "2"}]).get_dict() == {"id": "1"}

