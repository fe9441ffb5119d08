# Overview: Pytest coverage for the closed value sets and their lookup.

import pytest
from goodies.choices import (
    ENUM_OPTIONS,
    EVENT_CREATOR_ROLE,
    ORGANIZER_ROLES,
    Role,
    Status,
    get_options,
)
from goodies.validation import ValidationError


class TestOptionTable:

    def test_named_sets(self):
        assert set(ENUM_OPTIONS) == {"roles", "conditions", "status", "productTypes"}

    def test_get_options_returns_copy(self):
        roles = get_options("roles")
        roles.append("Intruder")
        assert "Intruder" not in get_options("roles")

    def test_unknown_set(self):
        with pytest.raises(ValidationError):
            get_options("colours")

    def test_organizer_roles(self):
        assert ORGANIZER_ROLES == {Role.ADMINISTRATOR, Role.BOARD_OF_DIRECTORS}
        assert EVENT_CREATOR_ROLE in ORGANIZER_ROLES

    def test_sale_statuses_are_statuses(self):
        for status in (Status.ON_SALE, Status.RESERVED, Status.SOLD):
            assert status in get_options("status")


class TestOptionRoutes:

    def test_all_sets(self, client):
        resp = client.get("/api/options")
        assert resp.status_code == 200
        assert resp.json["roles"][0] == Role.ADMINISTRATOR

    def test_single_set(self, client):
        resp = client.get("/api/options/productTypes")
        assert resp.status_code == 200
        assert "Hanged up / On Wall" in resp.json["options"]

    def test_unknown_set(self, client):
        assert client.get("/api/options/colours").status_code == 404


class TestOptionCommands:

    def test_list_one_set(self, app):
        result = app.test_cli_runner().invoke(args=["options", "list", "conditions"])
        assert result.exit_code == 0
        assert "Limited Edition" in result.output

    def test_list_unknown_set(self, app):
        result = app.test_cli_runner().invoke(args=["options", "list", "colours"])
        assert result.exit_code != 0
