"""
Unit tests for upload/download helpers.
"""
import json
import logging
from pathlib import Path

import pytest

from tests.conftest import TODO
from ucuptest import TransportError


class TestUpload:

    @pytest.mark.asyncio
    async def test_upload_sends_raw_bytes(self, client, server, tmp_path):
        payload = b"\x00\x01binary\xff"
        source = tmp_path / "blob.bin"
        source.write_bytes(payload)

        result = await client.upload_file("/upload", source, "upload blob")

        assert result.status == 201
        assert result.data == {"received": len(payload), "type": "application/octet-stream"}
        assert server.last.method == "POST"
        assert server.last.content == payload
        assert server.last.headers["content-length"] == str(len(payload))
        assert client.results[0].description == "upload blob"

    @pytest.mark.asyncio
    async def test_upload_missing_file_logs_and_raises(self, client, server, tmp_path, caplog):
        with caplog.at_level(logging.ERROR, logger="ucuptest"):
            with pytest.raises(FileNotFoundError):
                await client.upload_file("/upload", tmp_path / "missing.bin")

        assert "Error uploading file" in caplog.text
        assert server.requests == []
        assert client.results == []


class TestDownload:

    @pytest.mark.asyncio
    async def test_download_saves_json_text(self, client, tmp_path):
        filename = await client.download_file("/todos/1", "download todo")

        path = Path(filename)
        assert path.parent == tmp_path
        assert path.name.startswith("downloaded_")
        assert path.suffix == ".txt"
        assert json.loads(path.read_text(encoding="utf-8")) == TODO
        assert client.passed_count == 1

    @pytest.mark.asyncio
    async def test_download_round_trips_text_through_json(self, client):
        filename = await client.download_file("/text")

        assert Path(filename).read_text(encoding="utf-8") == '"plain body"'

    @pytest.mark.asyncio
    async def test_download_failure_logs_and_raises(self, client, caplog):
        with caplog.at_level(logging.ERROR, logger="ucuptest"):
            with pytest.raises(TransportError):
                await client.download_file("/down")

        assert "Error downloading file" in caplog.text

    @pytest.mark.asyncio
    async def test_back_to_back_downloads_get_distinct_files(self, client, tmp_path):
        first = await client.download_file("/todos/1")
        second = await client.download_file("/text")

        assert first != second
        assert sorted(p.name for p in tmp_path.iterdir()) == sorted([Path(first).name, Path(second).name])
        assert json.loads(Path(first).read_text(encoding="utf-8")) == TODO
