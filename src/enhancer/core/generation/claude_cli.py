"""
Claude CLI generation backend.

Runs ``claude --print`` in a subprocess and parses the JSON object it prints.
The caller bounds the call with ``asyncio.wait_for``; on cancellation the
subprocess is killed.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
import shutil
from typing import Any

from pydantic import BaseModel, ValidationError

from enhancer.core.errors import (
    GenerationError,
    GenerationUnavailableError,
    MalformedGenerationError,
)

from .backend import register_backend

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


def extract_json_object(output: str) -> dict[str, Any]:
    """
    Pull the first JSON object out of model output.

    Accepts bare JSON, JSON inside a Markdown code fence, or JSON surrounded
    by prose.

    Raises:
        MalformedGenerationError: If no JSON object can be decoded
    """
    candidates = [m.group(1) for m in _FENCE.finditer(output)] + [output]
    for candidate in candidates:
        start = candidate.find("{")
        end = candidate.rfind("}")
        if start == -1 or end <= start:
            continue
        try:
            data = json.loads(candidate[start : end + 1])
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data
    raise MalformedGenerationError("No JSON object found in backend output", backend="claude")


@register_backend("claude")
class ClaudeCliBackend:
    """Generate enhancements with the locally installed ``claude`` CLI."""

    def __init__(self, model: str | None = "haiku", command: str = "claude") -> None:
        self.model = model
        self.command = command

    @property
    def name(self) -> str:
        return "claude"

    def is_available(self) -> bool:
        return shutil.which(self.command) is not None

    def build_command(self, prompt: str) -> list[str]:
        cmd = [self.command]
        if self.model:
            cmd.extend(["--model", self.model])
        cmd.extend(["--print", "-p", prompt])
        return cmd

    async def generate(
        self, prompt: str, schema: type[BaseModel]
    ) -> BaseModel | dict[str, Any]:
        cmd = self.build_command(prompt)
        logger.debug(f"Running {self.command} (model={self.model})")

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise GenerationUnavailableError(
                f"Command not found: {self.command}", backend=self.name
            ) from e
        except OSError as e:
            raise GenerationUnavailableError(
                f"Cannot start {self.command}: {e}", backend=self.name
            ) from e

        try:
            stdout_bytes, stderr_bytes = await process.communicate()
        except asyncio.CancelledError:
            if process.returncode is None:
                process.kill()
                await process.wait()
            raise

        stdout = stdout_bytes.decode("utf-8", errors="replace") if stdout_bytes else ""
        if process.returncode != 0:
            stderr = stderr_bytes.decode("utf-8", errors="replace") if stderr_bytes else ""
            raise GenerationError(
                f"{self.command} exited with code {process.returncode}: {stderr.strip()[:200]}",
                backend=self.name,
            )

        data = extract_json_object(stdout)
        try:
            return schema.model_validate(data)
        except ValidationError as e:
            raise MalformedGenerationError(
                f"Backend output does not match {schema.__name__}: {e.error_count()} errors",
                backend=self.name,
            ) from e
