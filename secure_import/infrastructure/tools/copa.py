"""Copacetic adapter for the Patcher port."""

from pathlib import Path

from secure_import.infrastructure.tools.process import ToolRunner


class CopaPatcher:
    def __init__(self, runner: ToolRunner, copa: str = "copa") -> None:
        self._runner = runner
        self._copa = copa

    def available(self) -> bool:
        return self._runner.available(self._copa)

    async def patch(self, report_file: Path, image: str, tag: str) -> None:
        await self._runner.run(self._copa, "patch", "-r", str(report_file), "-i", image, "-t", tag)
