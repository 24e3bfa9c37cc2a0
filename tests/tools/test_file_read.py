"""Tests for the file_read tool."""

from __future__ import annotations

from pathlib import Path

import pytest

from mcpbridge.protocols.errors import ApplicationError
from mcpbridge.tools import (
    ArgumentsAccepted,
    ArgumentsRejected,
    FileReadRequest,
    FileReadTool,
    guess_mime_type,
    read_file,
)


class TestReadFile:
    def test_reads_content_and_size(self, sandbox: Path, sandbox_root: str) -> None:
        response = read_file(FileReadRequest(path=f"{sandbox_root}a.txt"), sandbox_root)
        assert response.content == "hello"
        assert response.size == 5
        assert response.mime_type == "text/plain"

    def test_size_counts_bytes(self, sandbox: Path, sandbox_root: str) -> None:
        (sandbox / "u.md").write_text("héllo", encoding="utf-8")
        response = read_file(FileReadRequest(path=f"{sandbox_root}u.md"), sandbox_root)
        assert response.content == "héllo"
        assert response.size == 6
        assert response.mime_type == "text/markdown"

    def test_outside_sandbox_denied(self, sandbox_root: str) -> None:
        with pytest.raises(ApplicationError, match="Access denied"):
            read_file(FileReadRequest(path="/etc/passwd"), sandbox_root)

    def test_prefix_check_is_plain_string(self, tmp_path: Path) -> None:
        root = f"{tmp_path}/allowed/"
        (tmp_path / "allowed-not").mkdir()
        (tmp_path / "allowed-not" / "x.txt").write_text("secret", encoding="utf-8")
        with pytest.raises(ApplicationError, match="Access denied"):
            read_file(FileReadRequest(path=f"{tmp_path}/allowed-not/x.txt"), root)

    def test_missing_file(self, sandbox_root: str) -> None:
        with pytest.raises(ApplicationError, match="File not found"):
            read_file(FileReadRequest(path=f"{sandbox_root}nope.txt"), sandbox_root)

    def test_directory_is_not_a_file(self, sandbox: Path, sandbox_root: str) -> None:
        (sandbox / "sub").mkdir()
        with pytest.raises(ApplicationError, match="not a file"):
            read_file(FileReadRequest(path=f"{sandbox_root}sub"), sandbox_root)

    def test_binary_file_fails(self, sandbox: Path, sandbox_root: str) -> None:
        (sandbox / "blob.bin").write_bytes(b"\xff\xfe\x00")
        with pytest.raises(ApplicationError, match="Failed to read file"):
            read_file(FileReadRequest(path=f"{sandbox_root}blob.bin"), sandbox_root)


class TestMimeTypes:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("a.json", "application/json"),
            ("a.yml", "application/x-yaml"),
            ("a.yaml", "application/x-yaml"),
            ("a.toml", "application/toml"),
            ("a.rs", "text/x-rust"),
            ("a.unknown", None),
            ("Makefile", None),
        ],
    )
    def test_guess(self, path: str, expected: str | None) -> None:
        assert guess_mime_type(path) == expected


class TestFileReadTool:
    def test_definition(self) -> None:
        definition = FileReadTool("/srv/files/").definition()
        assert definition.name == "file_read"
        assert "/srv/files/" in (definition.description or "")
        assert definition.input_schema is not None
        assert definition.input_schema["required"] == ["path"]

    def test_parse_accepts(self) -> None:
        parsed = FileReadTool().parse({"path": "/tmp/allowed_files/a.txt"})
        assert isinstance(parsed, ArgumentsAccepted)
        assert parsed.request.path == "/tmp/allowed_files/a.txt"

    def test_parse_rejects_missing(self) -> None:
        parsed = FileReadTool().parse(None)
        assert isinstance(parsed, ArgumentsRejected)
        assert parsed.reason == "file_read tool requires arguments"

    def test_parse_rejects_wrong_type(self) -> None:
        parsed = FileReadTool().parse({"path": 12})
        assert isinstance(parsed, ArgumentsRejected)
        assert "path" in parsed.reason

    async def test_run_renders_response(self, sandbox_root: str) -> None:
        text = await FileReadTool(sandbox_root).run(FileReadRequest(path=f"{sandbox_root}a.txt"))
        assert text.startswith(f"File: {sandbox_root}a.txt\nSize: 5 bytes\n")
        assert text.endswith("Content:\nhello")

    def test_describe_failure(self) -> None:
        error = ApplicationError("file_read", "Access denied")
        assert FileReadTool().describe_failure(error) == "Error reading file: Access denied"
