"""Async execution of external command-line tools."""

import asyncio
import shutil
from dataclasses import dataclass
from pathlib import Path

import logfire

from secure_import.domain.shared.error import ToolError

# Conventional shell exit code for "command not found"
NOT_FOUND = 127


@dataclass(frozen=True)
class ProcessResult:
    returncode: int
    stdout: str
    stderr: str


class ToolRunner:
    """Runs tools found on PATH and captures their output."""

    def available(self, tool: str) -> bool:
        return shutil.which(tool) is not None

    async def run(self, tool: str, *args: str, cwd: Path | None = None) -> ProcessResult:
        """Run ``tool`` with ``args`` and wait for it to exit.

        Raises:
            ToolError: If the tool is missing or exits with a non-zero status.
        """
        logfire.debug("Running {tool}", tool=tool, args=list(args))
        try:
            process = await asyncio.create_subprocess_exec(
                tool,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
            )
        except FileNotFoundError as e:
            raise ToolError(tool, NOT_FOUND, f"'{tool}' not found on PATH") from e

        stdout, stderr = await process.communicate()
        result = ProcessResult(
            returncode=process.returncode if process.returncode is not None else -1,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
        )
        if result.returncode != 0:
            logfire.warning(
                "Tool exited with non-zero code",
                tool=tool,
                exit_code=result.returncode,
                stderr=result.stderr[:1000],
            )
            raise ToolError(tool, result.returncode, result.stderr.strip())
        return result
