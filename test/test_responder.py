"""End-to-end tests for the table responder pipeline."""

import json
from unittest.mock import MagicMock

import pytest
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import selectinload

from dynatable.core.config import DynatableConfig
from dynatable.core.errors import InvalidConfiguration, InvalidSortDirection
from dynatable.query.queryable import TableQuery
from dynatable.query.sorting import SortDirection
from dynatable.query.source import DataSource
from dynatable.responder import ResponderConfig, TableResponder
from table_models import Account, Base, Post, Unmapped, User


def order_by_full_name(query: TableQuery, direction: SortDirection) -> None:
    query.order_by(direction.apply(Account.last_name), direction.apply(Account.first_name))


class TestConstruction:
    def test_model_source(self, session):
        responder = TableResponder(User, {}, session)
        assert responder.source == DataSource(kind="model", model=User)

    def test_model_name_with_registry(self, session):
        responder = TableResponder("Account", {}, session, registry=Base)
        assert responder.source.model is Account

    def test_statement_source(self, session):
        statement = select(User.id)
        responder = TableResponder(statement, {}, session)
        assert responder.source.kind == "statement"
        assert responder.source.model is None

    @pytest.mark.parametrize("source", ["Missing", "table_models.Missing", Unmapped, 12])
    def test_invalid_source_fails_immediately(self, session, source):
        with pytest.raises(InvalidConfiguration):
            TableResponder(source, {}, session)

    def test_request_object_with_query_params(self, session):
        request = MagicMock(query_params={"page": "2"})
        responder = TableResponder(User, request, session)
        assert responder.params == {"page": "2"}

    def test_request_must_be_a_mapping(self, session):
        with pytest.raises(InvalidConfiguration):
            TableResponder(User, ["orderByField"], session)


class TestBuild:
    def test_defaults(self, session):
        settings = TableResponder(User, {}, session).build()
        assert isinstance(settings, ResponderConfig)
        assert settings.per_page == 15
        assert settings.query_hook is None
        assert dict(settings.order_overrides) == {}
        assert dict(settings.meta) == {}

    def test_default_per_page_comes_from_config(self, session):
        config = DynatableConfig(default_per_page=50)
        assert TableResponder(User, {}, session, config=config).build().per_page == 50

    def test_snapshot_is_read_only(self, session):
        responder = TableResponder(User, {}, session).meta({"label": "Users"})
        settings = responder.build()
        with pytest.raises(TypeError):
            settings.meta["label"] = "Other"
        responder.meta({"label": "Changed"})
        assert settings.meta["label"] == "Users"

    @pytest.mark.parametrize("per_page", [0, -1, "15", None])
    def test_invalid_per_page(self, session, per_page):
        responder = TableResponder(User, {}, session).per_page(per_page)
        with pytest.raises(InvalidConfiguration):
            responder.build()

    def test_non_callable_override(self, session):
        responder = TableResponder(User, {}, session).override_order_by({"full_name": "last_name"})
        with pytest.raises(InvalidConfiguration, match="full_name"):
            responder.build()

    def test_non_callable_hooks(self, session):
        with pytest.raises(InvalidConfiguration):
            TableResponder(User, {}, session).query("where active").build()
        with pytest.raises(InvalidConfiguration):
            TableResponder(User, {}, session).collection_manipulator([]).build()

    def test_schema_must_be_pydantic(self, session):
        with pytest.raises(InvalidConfiguration):
            TableResponder(User, {}, session).schema(dict).build()


class TestResponse:
    def test_generic_sort_example(self, session):
        params = {"orderByField": "last_name", "orderByDirection": "desc"}
        body = (
            TableResponder(Account, params, session)
            .per_page(2)
            .meta({"label": "Users"})
            .build_response()
            .body()
        )

        assert [row["last_name"] for row in body["data"]] == ["Turing", "Lovelace"]
        assert body["meta"] == {
            "label": "Users",
            "disallow_ordering_by": ["full_name", "is_active"],
        }
        assert (body["page"], body["per_page"], body["total"]) == (1, 2, 5)

    def test_computed_field_takes_generic_path(self, session):
        params = {"orderByField": "fullName", "orderByDirection": "desc"}
        responder = TableResponder(Account, params, session).per_page(2).meta({"label": "Users"})

        try:
            body = responder.build_response().body()
        except OperationalError:
            pytest.skip("SQLite build rejects double-quoted unknown identifiers")

        # SQLite reads the quoted unknown name as a string literal, so row order is unspecified
        assert len(body["data"]) == 2
        assert body["total"] == 5
        assert body["meta"] == {
            "label": "Users",
            "disallow_ordering_by": ["full_name", "is_active"],
        }

    def test_override_sort_example(self, session):
        handler = MagicMock(side_effect=order_by_full_name)
        params = {"orderByField": "full_name", "orderByDirection": "asc"}

        body = (
            TableResponder(Account, params, session)
            .override_order_by({"full_name": handler})
            .meta({"label": "Users"})
            .build_response()
            .body()
        )

        handler.assert_called_once()
        assert handler.call_args.args[1] == "asc"
        assert [row["last_name"] for row in body["data"]] == [
            "Dijkstra",
            "Hopper",
            "Liskov",
            "Lovelace",
            "Turing",
        ]
        assert body["meta"]["disallow_ordering_by"] == ["is_active"]

    def test_no_sort_parameters(self, session):
        body = TableResponder(User, {}, session).build_response().body()
        assert body["total"] == 5
        assert len(body["data"]) == 5
        assert body["data"][0]["full_name"] == "Ada Lovelace"

    def test_query_hook_filters(self, session):
        body = (
            TableResponder(User, {}, session)
            .query(lambda query: query.where(User.active.is_(True)))
            .build_response()
            .body()
        )
        assert body["total"] == 3
        assert all(row["active"] for row in body["data"])

    def test_query_hook_eager_loads(self, session):
        seen = []

        def collect_titles(items):
            seen.extend(post.title for user in items for post in user.posts)

        (
            TableResponder(User, {}, session)
            .query(lambda query: query.options(selectinload(User.posts)))
            .collection_manipulator(collect_titles)
            .build_response()
        )
        assert len(seen) == 3

    def test_page_parameter(self, session):
        params = {"page": "3", "orderByField": "id", "orderByDirection": "asc"}
        body = TableResponder(User, params, session).per_page(2).build_response().body()

        assert [row["id"] for row in body["data"]] == [5]
        assert (body["page"], body["last_page"], body["from"], body["to"]) == (3, 3, 5, 5)

    def test_custom_page_parameter(self, session):
        config = DynatableConfig(page_param="p")
        params = {"p": "2", "orderByField": "id", "orderByDirection": "asc"}
        body = TableResponder(User, params, session, config=config).per_page(2).build_response().body()
        assert [row["id"] for row in body["data"]] == [3, 4]

    def test_out_of_range_page_falls_back_to_first(self, session):
        params = {"page": "99999999999999999999", "orderByField": "id", "orderByDirection": "asc"}
        body = TableResponder(User, params, session).per_page(2).build_response().body()

        assert body["page"] == 1
        assert [row["id"] for row in body["data"]] == [1, 2]

    def test_collection_hook_without_replacement_keeps_items(self, session):
        hook = MagicMock(return_value=None)
        params = {"orderByField": "id", "orderByDirection": "asc"}

        body = TableResponder(User, params, session).collection_manipulator(hook).build_response().body()

        hook.assert_called_once()
        assert [row["id"] for row in body["data"]] == [1, 2, 3, 4, 5]

    def test_collection_hook_mutating_in_place(self, session):
        def drop_inactive(items):
            items[:] = [user for user in items if user.active]

        body = TableResponder(User, {}, session).collection_manipulator(drop_inactive).build_response().body()

        assert len(body["data"]) == 3
        assert body["total"] == 5

    def test_collection_hook_replacement(self, session):
        params = {"page": "2", "orderByField": "id", "orderByDirection": "asc"}

        body = (
            TableResponder(User, params, session)
            .per_page(2)
            .collection_manipulator(lambda items: [{"name": user.full_name} for user in items])
            .build_response()
            .body()
        )

        assert body["data"] == [{"name": "Grace Hopper"}, {"name": "Edsger Dijkstra"}]
        assert (body["page"], body["per_page"], body["total"]) == (2, 2, 5)

    def test_meta_callables_see_final_query_and_collection(self, session):
        seen = {}

        def capture(query, items):
            seen["query"] = query
            seen["items"] = items
            return query.count()

        body = (
            TableResponder(User, {}, session)
            .query(lambda query: query.where(User.active.is_(False)))
            .collection_manipulator(lambda items: ["replaced"])
            .meta({"inactive": capture})
            .build_response()
            .body()
        )

        assert body["meta"]["inactive"] == 2
        assert isinstance(seen["query"], TableQuery)
        assert seen["items"] == ["replaced"]

    def test_reserved_meta_key_is_overwritten(self, session):
        body = (
            TableResponder(User, {}, session)
            .override_order_by({"is_active": lambda query, direction: None})
            .meta({"disallow_ordering_by": ["id"]})
            .build_response()
            .body()
        )
        assert body["meta"] == {"disallow_ordering_by": ["full_name"]}

    def test_statement_source(self, session):
        statement = select(User.id, User.last_name).where(User.active.is_(True))
        params = {"orderByField": "last_name", "orderByDirection": "asc"}

        body = TableResponder(statement, params, session).build_response().body()

        assert body["data"] == [
            {"id": 4, "last_name": "Dijkstra"},
            {"id": 1, "last_name": "Lovelace"},
            {"id": 2, "last_name": "Turing"},
        ]
        assert body["meta"] == {"disallow_ordering_by": []}

    def test_multi_entity_statement_source(self, session):
        statement = select(User, Post).join(Post, Post.user_id == User.id)
        params = {"orderByField": "title", "orderByDirection": "asc"}

        body = TableResponder(statement, params, session).build_response().body()

        assert body["total"] == 3
        first = body["data"][0]
        assert first["User"]["full_name"] == "Alan Turing"
        assert first["Post"] == {
            "id": 2,
            "user_id": 2,
            "title": "Computing Machinery and Intelligence",
        }
        assert [row["Post"]["id"] for row in body["data"]] == [2, 1, 3]
        assert body["meta"] == {"disallow_ordering_by": []}

    def test_schema_serialization(self, session):
        class UserRow(BaseModel):
            id: int
            full_name: str

        params = {"orderByField": "id", "orderByDirection": "desc"}
        body = TableResponder(User, params, session).per_page(1).schema(UserRow).build_response().body()
        assert body["data"] == [{"id": 5, "full_name": "Barbara Liskov"}]

    def test_respond_returns_json_response(self, session):
        response = TableResponder(User, {}, session).per_page(1).respond()
        assert response.status_code == 200
        assert json.loads(response.body)["meta"] == {
            "disallow_ordering_by": ["full_name", "is_active"]
        }


class TestFailures:
    def test_invalid_direction_does_no_work(self, session, monkeypatch):
        paginate = MagicMock()
        monkeypatch.setattr(TableQuery, "paginate", paginate)
        provider = MagicMock()
        params = {"orderByField": "last_name", "orderByDirection": "upward"}

        responder = TableResponder(User, params, session).meta({"count": provider})

        with pytest.raises(InvalidSortDirection):
            responder.build_response()
        paginate.assert_not_called()
        provider.assert_not_called()

    def test_unknown_sort_field_is_rejected_by_the_database(self, session):
        params = {"orderByField": "nickname", "orderByDirection": "asc"}
        with pytest.raises(OperationalError):
            TableResponder(User, params, session).build_response()

    def test_hook_errors_propagate(self, session):
        def broken(items):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            TableResponder(User, {}, session).collection_manipulator(broken).respond()

    def test_meta_errors_propagate(self, session):
        def broken(query, items):
            raise KeyError("missing")

        with pytest.raises(KeyError):
            TableResponder(User, {}, session).meta({"x": broken}).respond()
