"""
Unit tests for czsnoop.rzp.client module.
"""

from datetime import date
from unittest.mock import MagicMock, patch

import pytest
import requests

from conftest import directory_xml, statement_xml
from czsnoop.config import Settings
from czsnoop.constants import RZP_ADDRESSES_PATH, RZP_PERSONS_PATH, RZP_SUBJECTS_PATH
from czsnoop.domain.models import Partition, PersonQuery, SubjectQuery
from czsnoop.errors import DataIntegrityError, RemoteFailureError
from czsnoop.rzp.client import RzpClient, create_client, start_session

BASE_URL = "https://rzp.test"


def _response(status_code=200, json_data=None, content=b""):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json_data
    response.content = content
    response.text = content.decode(errors="replace") if content else ""
    return response


def _client(session):
    return RzpClient(session=session, session_id="abc123", base_url=BASE_URL, timeout=5.0)


class TestSearchSubject:
    """Tests for RzpClient.search_subject."""

    def test_name_search(self):
        session = MagicMock()
        session.get.return_value = _response(
            json_data={
                "seznamNeniKompletni": False,
                "subjekty": [
                    {
                        "nazev": "Jan Novák",
                        "ico": "01895541",
                        "sidlo": "Milovická 197/9, 198 00, Praha 9 - Hloubětín",
                        "ssarzp": "ref-1",
                        "typSubjektu": "F",
                    }
                ],
            }
        )

        result = _client(session).search_subject(
            SubjectQuery(name="novak", partition=Partition.ENTREPRENEUR)
        )

        assert not result.truncated
        assert len(result.subjects) == 1
        subject = result.subjects[0]
        assert subject.ico == "01895541"
        assert subject.detail_ref == "ref-1"
        assert subject.is_natural_person

        args, kwargs = session.get.call_args
        assert args[0] == f"{BASE_URL}{RZP_SUBJECTS_PATH}"
        assert kwargs["params"]["s-obchjm"] == "novak"
        assert kwargs["params"]["s-role"] == "P"
        assert kwargs["params"]["s-presvyber"] == "true"
        assert kwargs["headers"]["Sesid"] == "abc123"
        assert kwargs["timeout"] == 5.0

    def test_ico_search_statutory_body(self):
        session = MagicMock()
        session.get.return_value = _response(json_data={"subjekty": []})

        _client(session).search_subject(
            SubjectQuery(ico="01895541", partition=Partition.STATUTORY_BODY)
        )

        params = session.get.call_args.kwargs["params"]
        assert params["s-ico"] == "01895541"
        assert params["s-role"] == "S"

    def test_person_and_address_searches_have_no_role(self):
        session = MagicMock()
        session.get.return_value = _response(json_data={"subjekty": []})
        client = _client(session)

        client.search_subject(SubjectQuery(person_id="p1"))
        assert session.get.call_args.kwargs["params"]["s-osoba"] == "p1"
        assert "s-role" not in session.get.call_args.kwargs["params"]

        client.search_subject(SubjectQuery(address_code=22421611))
        assert session.get.call_args.kwargs["params"]["s-adresa"] == "22421611"
        assert "s-role" not in session.get.call_args.kwargs["params"]

    def test_name_search_needs_partition(self):
        with pytest.raises(ValueError, match="partition"):
            _client(MagicMock()).search_subject(SubjectQuery(name="novak"))

    def test_truncated(self):
        session = MagicMock()
        session.get.return_value = _response(
            json_data={"seznamNeniKompletni": True, "subjekty": []}
        )

        result = _client(session).search_subject(SubjectQuery(person_id="p1"))

        assert result.truncated

    def test_http_error(self):
        session = MagicMock()
        session.get.return_value = _response(status_code=500, content=b"Internal error")

        with pytest.raises(RemoteFailureError, match="500"):
            _client(session).search_subject(SubjectQuery(person_id="p1"))

    def test_connection_error(self):
        session = MagicMock()
        session.get.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(RemoteFailureError, match="refused"):
            _client(session).search_subject(SubjectQuery(person_id="p1"))

    def test_timeout(self):
        session = MagicMock()
        session.get.side_effect = requests.exceptions.Timeout("read timed out")

        with pytest.raises(RemoteFailureError):
            _client(session).search_subject(SubjectQuery(person_id="p1"))

    def test_invalid_json(self):
        session = MagicMock()
        response = _response()
        response.json.side_effect = ValueError("Expecting value")
        session.get.return_value = response

        with pytest.raises(RemoteFailureError, match="unmarshal"):
            _client(session).search_subject(SubjectQuery(person_id="p1"))


class TestSearchPerson:
    """Tests for RzpClient.search_person."""

    def test_search(self):
        session = MagicMock()
        session.get.return_value = _response(
            json_data={
                "seznamNeniKompletni": False,
                "osoby": [
                    {
                        "jmeno": "Jan",
                        "prijmeni": "Novák",
                        "zobrazeneJmeno": "Ing. Jan Novák",
                        "titulPred": "Ing.",
                        "datum": "1980-05-17",
                        "idOsoby": "p1",
                        "roleOsoby": "podnikatel",
                    },
                    {"jmeno": "Jana", "prijmeni": "Nováková", "idOsoby": "p2"},
                ],
            }
        )

        result = _client(session).search_person(PersonQuery(first_name="Jan", surname="Novák"))

        assert [p.person_id for p in result.people] == ["p1", "p2"]
        assert result.people[0].date_of_birth == date(1980, 5, 17)
        assert result.people[0].title_before_name == "Ing."
        assert result.people[1].date_of_birth is None

        args, kwargs = session.get.call_args
        assert args[0] == f"{BASE_URL}{RZP_PERSONS_PATH}"
        assert kwargs["params"]["o-jmeno"] == "Jan"
        assert kwargs["params"]["o-prijmeni"] == "Novák"
        assert "o-datum" not in kwargs["params"]

    def test_bad_birth_date(self):
        session = MagicMock()
        session.get.return_value = _response(
            json_data={"osoby": [{"idOsoby": "p1", "datum": "17.05.1980"}]}
        )

        with pytest.raises(DataIntegrityError):
            _client(session).search_person(PersonQuery(surname="Novák"))


class TestSearchAddress:
    """Tests for RzpClient.search_address."""

    def test_search(self):
        session = MagicMock()
        session.get.return_value = _response(
            json_data={"adresy": [{"adresa": "Milovická 197/9, Praha 9", "kod": "22421611"}]}
        )

        matches = _client(session).search_address("milovicka 9")

        assert len(matches) == 1
        assert matches[0].code == 22421611
        args, kwargs = session.get.call_args
        assert args[0] == f"{BASE_URL}{RZP_ADDRESSES_PATH}"
        assert kwargs["params"] == {"a-text": "milovicka 9"}

    def test_missing_code(self):
        session = MagicMock()
        session.get.return_value = _response(json_data={"adresy": [{"adresa": "Milovická"}]})

        with pytest.raises(RemoteFailureError):
            _client(session).search_address("milovicka 9")


class TestGetDetail:
    """Tests for the chained detail fetch."""

    def test_two_requests(self):
        session = MagicMock()
        session.get.side_effect = [
            _response(content=directory_xml()),
            _response(content=statement_xml()),
        ]
        hook = MagicMock()

        detail = _client(session).get_detail("ref-1", before_request=hook)

        assert detail.ico == "01895541"
        assert detail.birth_date == date(1980, 5, 17)
        assert hook.call_count == 2
        urls = [call.args[0] for call in session.get.call_args_list]
        assert urls[0].endswith("/ref-1.xml")
        assert urls[1] == f"{BASE_URL}/rzp/api3-c/srv/vw/v1/listiny/01895541.xml"

    def test_hook_aborts_second_request(self):
        session = MagicMock()
        session.get.return_value = _response(content=directory_xml())
        hook = MagicMock(side_effect=[None, RuntimeError("cancelled")])

        with pytest.raises(RuntimeError):
            _client(session).get_detail("ref-1", before_request=hook)

        assert session.get.call_count == 1

    def test_statement_ico_mismatch(self):
        """A statement for another ICO than its directory record is rejected."""
        session = MagicMock()
        session.get.side_effect = [
            _response(content=directory_xml(ico="01895541")),
            _response(content=statement_xml(ico="99999999")),
        ]

        with pytest.raises(DataIntegrityError, match="99999999"):
            _client(session).get_detail("ref-1")

    def test_statement_fetch_fails(self):
        session = MagicMock()
        session.get.side_effect = [
            _response(content=directory_xml()),
            _response(status_code=404, content=b"Not found"),
        ]

        with pytest.raises(RemoteFailureError, match="404"):
            _client(session).get_detail("ref-1")


class TestCreateClient:
    """Tests for session start and client creation."""

    def test_start_session(self):
        session = MagicMock()
        session.get.return_value = _response(json_data={"sesid": "xyz"})

        assert start_session(session, BASE_URL, 5.0) == "xyz"

    def test_start_session_bad_response(self):
        session = MagicMock()
        session.get.return_value = _response(json_data={})

        with pytest.raises(RemoteFailureError, match="session"):
            start_session(session, BASE_URL, 5.0)

    def test_start_session_http_error(self):
        session = MagicMock()
        session.get.return_value = _response(status_code=503)

        with pytest.raises(RemoteFailureError, match="503"):
            start_session(session, BASE_URL, 5.0)

    @patch("czsnoop.rzp.client.requests.Session")
    def test_create_client(self, mock_session_cls):
        session = mock_session_cls.return_value
        session.get.return_value = _response(json_data={"sesid": "xyz"})
        settings = Settings(base_url=BASE_URL, request_timeout=7.0, user_agent="czsnoop-test")

        client = create_client(settings)

        assert client.session_id == "xyz"
        assert client.base_url == BASE_URL
        assert client.timeout == 7.0
        assert client._headers()["User-Agent"] == "czsnoop-test"
