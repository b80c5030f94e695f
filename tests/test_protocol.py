"""
Tests for the Protocol wire operations.
"""

from __future__ import annotations

import logging

import pytest

from mongo_legacy import DuplicateKeyError, Protocol, WriteError


@pytest.fixture
def protocol(mock_rpc) -> Protocol:
    return Protocol(mock_rpc)


class TestProtocol:
    """Tests for Protocol class."""

    async def test_op_insert_logs(self, protocol, caplog):
        """Test writes are logged at debug level."""
        with caplog.at_level(logging.DEBUG, logger="mongo_legacy.protocol"):
            await protocol.op_insert("shop.users", [{"_id": 1}, {"_id": 2}])

        assert "opInsert shop.users (2 documents)" in caplog.text

    async def test_op_insert_continue_on_error_flag(self, protocol, mock_rpc):
        """Test the continue-on-error flag is forwarded."""
        await protocol.op_insert("shop.users", [{"_id": 1}], continue_on_error=True)
        assert mock_rpc.mongo.calls_to("opInsert")[0][2] == {"continueOnError": True}

    async def test_duplicate_key(self, protocol):
        """Test E11000 results raise DuplicateKeyError with the code."""
        await protocol.op_insert("shop.users", [{"_id": 1}])

        with pytest.raises(DuplicateKeyError) as exc_info:
            await protocol.op_insert("shop.users", [{"_id": 1}])

        assert exc_info.value.code == 11000

    async def test_write_error(self, protocol, mock_rpc, monkeypatch):
        """Test error results raise WriteError."""

        async def rejected(*args):
            return {"error": True, "message": "not master"}

        monkeypatch.setattr(mock_rpc.mongo, "opDelete", rejected)

        with pytest.raises(WriteError, match="not master") as exc_info:
            await protocol.op_delete("shop.users", {})

        assert not isinstance(exc_info.value, DuplicateKeyError)

    async def test_op_command_non_document(self, protocol, mock_rpc, monkeypatch):
        """Test a non-document command result becomes an empty dict."""

        async def odd(database, command):
            return None

        monkeypatch.setattr(mock_rpc.mongo, "command", odd)

        assert await protocol.op_command("shop", {"ping": 1}) == {}

    async def test_op_query_non_list(self, protocol, mock_rpc, monkeypatch):
        """Test a non-list query result yields no documents."""

        async def odd(*args):
            return None

        monkeypatch.setattr(mock_rpc.mongo, "opQuery", odd)

        assert await protocol.op_query("shop.users", {}) == []
