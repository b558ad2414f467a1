"""Tests for the model directory."""
import httpx
import pytest

from ollachat.catalog import ModelDirectory, format_model_size
from ollachat.catalog.directory import CONNECTION_ERROR_DESCRIPTION


def test_format_model_size():
    assert format_model_size(4_109_853_696) == "3.8GB"
    assert format_model_size(0) == "0.0GB"
    assert format_model_size(1024 ** 3) == "1.0GB"


class TestRefresh:
    """Tests for ModelDirectory.refresh."""

    @pytest.fixture
    def directory_for(self, make_client, notices):
        def _make(handler):
            return ModelDirectory(make_client(handler), notifier=notices.append)
        return _make

    @pytest.mark.asyncio
    async def test_auto_selects_first_model(self, directory_for, sample_tags):
        directory = directory_for(lambda request: httpx.Response(200, json=sample_tags))

        selected = await directory.refresh(None)

        assert selected == "llama3.2:latest"
        assert directory.names() == ["llama3.2:latest", "qwen3:8b"]
        assert directory.is_loading is False

    @pytest.mark.asyncio
    async def test_keeps_existing_selection(self, directory_for, sample_tags):
        directory = directory_for(lambda request: httpx.Response(200, json=sample_tags))

        selected = await directory.refresh("qwen3:8b")

        assert selected == "qwen3:8b"

    @pytest.mark.asyncio
    async def test_empty_server_selects_nothing(self, directory_for):
        directory = directory_for(lambda request: httpx.Response(200, json={"models": []}))

        assert await directory.refresh(None) is None
        assert directory.models == []

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_list(self, directory_for, sample_tags, notices):
        responses = iter([
            httpx.Response(200, json=sample_tags),
            httpx.Response(500),
        ])
        directory = directory_for(lambda request: next(responses))
        await directory.refresh(None)

        selected = await directory.refresh("llama3.2:latest")

        assert selected == "llama3.2:latest"
        assert len(directory.models) == 2
        assert directory.is_loading is False
        assert notices[-1].title == "Connection Error"
        assert notices[-1].description == CONNECTION_ERROR_DESCRIPTION

    @pytest.mark.asyncio
    async def test_unreachable_server(self, directory_for, notices):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        directory = directory_for(handler)

        assert await directory.refresh(None) is None
        assert directory.models == []
        assert len(notices) == 1

    @pytest.mark.parametrize("body", [b"<html>", b"[]", b'\x80{"models": []}'])
    @pytest.mark.asyncio
    async def test_undecodable_body_reported(self, directory_for, sample_tags, notices, body):
        responses = iter([
            httpx.Response(200, json=sample_tags),
            httpx.Response(200, content=body),
        ])
        directory = directory_for(lambda request: next(responses))
        await directory.refresh(None)

        assert await directory.refresh("qwen3:8b") == "qwen3:8b"
        assert len(directory.models) == 2
        assert notices[-1].title == "Connection Error"

    @pytest.mark.asyncio
    async def test_get_by_name(self, directory_for, sample_tags):
        directory = directory_for(lambda request: httpx.Response(200, json=sample_tags))
        await directory.refresh()

        model = directory.get("llama3.2:latest")

        assert model is not None
        assert model.details.parameter_size == "3.2B"
        assert directory.get("missing") is None
